"""
Tests for gateway settings
"""

import pytest

from stayhub.config import Settings, get_settings
from stayhub.errors import ConfigurationError


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """Run without a .env file or inherited STAYHUB_ variables."""
    monkeypatch.chdir(tmp_path)
    for name in ("STAYHUB_BACKEND_SERVICE_ID", "STAYHUB_BACKEND_TOKEN", "STAYHUB_API_PORT"):
        monkeypatch.delenv(name, raising=False)


def test_loads_from_environment(monkeypatch):
    monkeypatch.setenv("STAYHUB_BACKEND_SERVICE_ID", "cj8z3xz0")
    monkeypatch.setenv("STAYHUB_BACKEND_TOKEN", "secret-token")
    monkeypatch.setenv("STAYHUB_API_PORT", "8080")

    settings = get_settings()

    assert settings.backend_service_id == "cj8z3xz0"
    assert settings.backend_token.get_secret_value() == "secret-token"
    assert settings.api_port == 8080
    assert settings.backend_url == "https://api.graph.cool/simple/v1/cj8z3xz0"


def test_defaults():
    settings = get_settings(backend_service_id="svc", backend_token="tok")

    assert settings.api_port == 4000
    assert settings.schema_output_path == "typeDefs.graphql"
    assert settings.schema_conflict_policy == "namespace"
    assert settings.backend_timeout == 30.0


def test_token_is_not_shown_in_repr():
    settings = get_settings(backend_service_id="svc", backend_token="very-secret")

    assert "very-secret" not in repr(settings)


def test_reads_dotenv_file(tmp_path):
    (tmp_path / ".env").write_text("STAYHUB_BACKEND_SERVICE_ID=from-file\nSTAYHUB_BACKEND_TOKEN=tok\n")

    assert get_settings().backend_service_id == "from-file"


def test_missing_values_name_the_variables():
    with pytest.raises(ConfigurationError) as exc_info:
        get_settings()

    message = str(exc_info.value)
    assert "STAYHUB_BACKEND_SERVICE_ID" in message
    assert "STAYHUB_BACKEND_TOKEN" in message


@pytest.mark.parametrize("overrides", [
    {"backend_service_id": "  ", "backend_token": "tok"},
    {"backend_service_id": "svc", "backend_token": ""},
])
def test_blank_values_are_rejected(overrides):
    with pytest.raises(ConfigurationError):
        get_settings(**overrides)


def test_unknown_conflict_policy():
    with pytest.raises(ConfigurationError, match="STAYHUB_SCHEMA_CONFLICT_POLICY"):
        get_settings(backend_service_id="svc", backend_token="tok", schema_conflict_policy="merge")


def test_custom_endpoint_template():
    settings = Settings(
        backend_service_id="svc",
        backend_token="tok",
        backend_endpoint="http://localhost:60000/{service_id}/graphql",
        _env_file=None,  # pyright: ignore [reportCallIssue]
    )

    assert settings.backend_url == "http://localhost:60000/svc/graphql"
