"""Client for the hosted GraphQL backend."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from typing import TYPE_CHECKING, Any

import httpx
from graphql import (
    GraphQLError,
    GraphQLResolveInfo,
    build_client_schema,
    get_introspection_query,
    print_ast,
    print_schema,
)

from ..errors import RemoteExecutionError, RemoteSchemaError
from ..logging import get_logger
from .delegation import build_operation, forward_selection, parse_selection

if TYPE_CHECKING:
    from ..config import Settings

logger = get_logger(__name__)


class RemoteSchemaClient:
    """GraphQL-over-HTTP connection to the backend service.

    One client is built at startup to fetch the backend schema and one per
    incoming request, so a caller's token never serves another request.
    """

    def __init__(
        self,
        endpoint: str,
        token: str,
        *,
        timeout: float | None = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize the client.

        Args:
            endpoint: Remote GraphQL endpoint URL
            token: Bearer token sent with every request
            timeout: Transport timeout in seconds (None disables it)
            transport: Optional httpx transport, used to stub the backend in tests
        """
        self.endpoint = endpoint
        self._http_client = httpx.AsyncClient(
            timeout=timeout,
            transport=transport,
            headers={
                "Authorization": f"Bearer {token}",
                "Content-Type": "application/json",
            },
        )

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        token: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> RemoteSchemaClient:
        """Build a client for the configured backend.

        Args:
            settings: Gateway settings
            token: Caller token; falls back to the service token when None
            transport: Optional httpx transport
        """
        return cls(
            settings.backend_url,
            token or settings.backend_token.get_secret_value(),
            timeout=settings.backend_timeout,
            transport=transport,
        )

    async def __aenter__(self) -> RemoteSchemaClient:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http_client.aclose()

    async def execute(
        self,
        query: str,
        variables: Mapping[str, Any] | None = None,
        operation_name: str | None = None,
    ) -> dict[str, Any]:
        """Run an operation against the backend and return its ``data``.

        Raises:
            RemoteExecutionError: If the backend reports errors, answers with
                something other than a GraphQL response, or cannot be reached
        """
        payload: dict[str, Any] = {"query": query}
        if variables:
            payload["variables"] = dict(variables)
        if operation_name:
            payload["operationName"] = operation_name

        logger.debug("Executing remote operation", endpoint=self.endpoint, query=query)

        try:
            response = await self._http_client.post(self.endpoint, json=payload)
        except httpx.HTTPError as e:
            logger.error("Remote backend request failed", endpoint=self.endpoint, error=str(e))
            raise RemoteExecutionError(f"Remote backend unavailable: {e}") from e

        try:
            body = response.json()
        except ValueError as e:
            raise RemoteExecutionError(
                f"Remote backend returned {response.status_code}: {response.text[:200]}"
            ) from e

        if not isinstance(body, dict):
            raise RemoteExecutionError("Remote backend returned a malformed response")

        errors = body.get("errors")
        if errors:
            logger.warning("Remote backend reported errors", errors=errors)
            raise RemoteExecutionError.from_errors(errors)

        if response.is_error:
            raise RemoteExecutionError(f"Remote backend returned {response.status_code}")

        data = body.get("data")
        if not isinstance(data, dict):
            raise RemoteExecutionError("Remote backend returned no data")
        return data

    async def fetch_type_defs(self) -> str:
        """Fetch the backend schema and return it as SDL.

        Raises:
            RemoteSchemaError: If the schema cannot be fetched or understood
        """
        try:
            data = await self.execute(get_introspection_query(descriptions=True))
        except RemoteExecutionError as e:
            raise RemoteSchemaError(f"Failed to fetch remote schema from {self.endpoint}: {e}") from e

        try:
            schema = build_client_schema(data)  # type: ignore[arg-type]
        except (TypeError, GraphQLError) as e:
            raise RemoteSchemaError(f"Remote schema introspection is invalid: {e}") from e

        type_defs = print_schema(schema)
        logger.info("Fetched remote schema", endpoint=self.endpoint, types=len(schema.type_map))
        return type_defs

    async def call(
        self,
        operation: str,
        field_name: str,
        args: Mapping[str, Any] | None = None,
        selection: str | None = None,
    ) -> Any:
        """Run a fixed single-field operation and return the field's value.

        Args:
            operation: "query" or "mutation"
            field_name: Remote root field
            args: Argument values, rendered as literals
            selection: Selection set text such as ``"{ id token }"``
        """
        selection_set = parse_selection(selection) if selection else None
        document = build_operation(operation, field_name, args, selection_set)
        data = await self.execute(print_ast(document))
        return data.get(field_name)

    async def delegate(
        self,
        operation: str,
        field_name: str,
        args: Mapping[str, Any] | None,
        info: GraphQLResolveInfo,
        *,
        exclude: Iterable[str] = (),
        nested: Sequence[str] = (),
    ) -> Any:
        """Forward the caller's selection on the current field to a remote root field.

        Args:
            operation: "query" or "mutation"
            field_name: Remote root field
            args: Argument values for the remote field
            info: Resolve info of the local field
            exclude: Local-only fields to leave out of the forwarded selection
            nested: Remote fields to wrap the selection in
        """
        forwarded = forward_selection(info, exclude=exclude, nested=nested)
        document = build_operation(
            operation,
            field_name,
            args,
            forwarded.selection_set,
            variable_definitions=forwarded.variable_definitions,
            fragments=forwarded.fragments,
        )
        data = await self.execute(print_ast(document), forwarded.variables)
        return data.get(field_name)
