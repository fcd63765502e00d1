"""
Error types raised by the gateway.

Startup errors (configuration, remote schema fetch, composition, resolver
binding) abort the process. Request errors are raised from resolvers and are
reported to the caller as GraphQL ``errors`` entries; graphql-core copies the
``extensions`` attribute of the original exception into the formatted error.
"""

from __future__ import annotations

from typing import Any


class StayhubError(Exception):
    """Base class for gateway errors."""

    extensions: dict[str, Any] | None = None


class ConfigurationError(StayhubError):
    """Raised when required process configuration is missing or invalid."""

    pass


class RemoteSchemaError(StayhubError):
    """Raised when the remote backend schema cannot be fetched."""

    pass


class SchemaCompositionError(StayhubError):
    """Raised when the local and remote type definitions cannot be combined."""

    def __init__(self, message: str, conflicts: list[str] | None = None):
        super().__init__(message)
        self.conflicts = conflicts or []


class ResolverBindingError(StayhubError):
    """Raised when the resolver map does not match the composed schema."""

    pass


class RemoteExecutionError(StayhubError):
    """Raised when the remote backend rejects or fails an operation."""

    def __init__(self, message: str, errors: list[dict[str, Any]] | None = None):
        super().__init__(message)
        self.errors = errors or []
        self.extensions = {"code": "REMOTE_ERROR"}
        if self.errors:
            self.extensions["remoteErrors"] = self.errors

    @classmethod
    def from_errors(cls, errors: list[dict[str, Any]]) -> RemoteExecutionError:
        """Build an error whose message is the backend's own message(s)."""
        messages = [
            str(error.get("message", "Unknown remote error")) if isinstance(error, dict) else str(error)
            for error in errors
        ]
        return cls("; ".join(messages) or "Unknown remote error", errors)


class AuthenticationError(StayhubError):
    """Raised when a field requires an identified caller."""

    def __init__(self, message: str = "Not authenticated"):
        super().__init__(message)
        self.extensions = {"code": "UNAUTHENTICATED"}


class BookingError(StayhubError):
    """Raised when a booking request cannot be forwarded."""

    def __init__(self, message: str):
        super().__init__(message)
        self.extensions = {"code": "BOOKING_FAILED"}
