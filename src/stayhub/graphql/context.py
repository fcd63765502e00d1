"""Per-request execution context for GraphQL resolvers."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING

from fastapi import Request

if TYPE_CHECKING:
    from ..remote import RemoteSchemaClient

RemoteClientFactory = Callable[[str | None], "RemoteSchemaClient"]


@dataclass
class RequestContext:
    """Everything a resolver may use while serving one request."""

    request: Request | None
    remote: RemoteSchemaClient
    auth_token: str | None = None

    @property
    def headers(self) -> Mapping[str, str]:
        return self.request.headers if self.request is not None else {}

    @property
    def cookies(self) -> Mapping[str, str]:
        return self.request.cookies if self.request is not None else {}

    @property
    def is_authenticated(self) -> bool:
        """True when the caller presented a bearer token."""
        return self.auth_token is not None


def extract_bearer_token(request: Request) -> str | None:
    """Return the bearer token from the Authorization header, if any."""
    auth_header = request.headers.get("authorization")
    if not auth_header:
        return None
    scheme, _, token = auth_header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def build_context(request: Request, client_factory: RemoteClientFactory) -> RequestContext:
    """Create the context for one request with its own remote client."""
    token = extract_bearer_token(request)
    return RequestContext(request=request, remote=client_factory(token), auth_token=token)
