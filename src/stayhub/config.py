"""
Configuration management for the Stayhub gateway
"""

from typing import Literal

from pydantic import SecretStr, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import ConfigurationError


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="STAYHUB_",
        case_sensitive=False,
        extra="ignore",
    )

    # Remote backend (required)
    backend_service_id: str
    backend_token: SecretStr
    backend_endpoint: str = "https://api.graph.cool/simple/v1/{service_id}"
    backend_timeout: float | None = 30.0  # seconds; None leaves remote calls unbounded

    # API Settings
    api_host: str = "0.0.0.0"
    api_port: int = 4000
    api_reload: bool = False
    cors_origins: list[str] = ["http://localhost:3000"]

    # Schema composition
    schema_output_path: str | None = "typeDefs.graphql"
    schema_conflict_policy: Literal["reject", "namespace"] = "namespace"
    schema_namespace_prefix: str = "Remote"

    # Environment
    environment: str = "development"  # 'development', 'staging', 'production'
    debug: bool = False
    log_level: str = "INFO"

    @field_validator("backend_service_id")
    @classmethod
    def _require_service_id(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value.strip()

    @field_validator("backend_token")
    @classmethod
    def _require_token(cls, value: SecretStr) -> SecretStr:
        if not value.get_secret_value().strip():
            raise ValueError("must not be blank")
        return value

    @property
    def backend_url(self) -> str:
        """Remote GraphQL endpoint for the configured service."""
        return self.backend_endpoint.format(service_id=self.backend_service_id)


def get_settings(**overrides) -> Settings:
    """Load settings from the environment.

    Raises:
        ConfigurationError: If a required value is missing or invalid
    """
    try:
        return Settings(**overrides)  # pyright: ignore [reportCallIssue]
    except ValidationError as e:
        fields = sorted({str(err["loc"][0]) for err in e.errors() if err["loc"]})
        names = ", ".join(f"STAYHUB_{name.upper()}" for name in fields)
        raise ConfigurationError(f"Invalid gateway configuration: {names}") from e
