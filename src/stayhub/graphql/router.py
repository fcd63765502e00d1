"""
GraphQL-over-HTTP endpoint for the composed schema
"""

from __future__ import annotations

from typing import Any

from ariadne import format_error
from ariadne.asgi import GraphQL
from fastapi import APIRouter, Request
from fastapi.responses import Response
from graphql import GraphQLError, GraphQLSchema

from ..logging import get_logger
from .context import RemoteClientFactory, RequestContext, build_context

logger = get_logger(__name__)


def log_and_format_error(error: GraphQLError, debug: bool = False) -> dict[str, Any]:
    original = error.original_error
    logger.warning(
        "GraphQL error",
        message=error.message,
        path=error.path,
        error_type=type(original).__name__ if original else "GraphQLError",
    )
    return format_error(error, debug)


def create_graphql_app(
    schema: GraphQLSchema, client_factory: RemoteClientFactory, debug: bool = False
) -> GraphQL:
    """Wrap the schema in an ariadne ASGI app.

    Each request gets a context with its own remote client, kept on
    ``request.state`` so the endpoint can close it once the response is ready.
    """

    def context_value(request: Request, _data: Any) -> RequestContext:
        context = build_context(request, client_factory)
        request.state.remote = context.remote
        return context

    return GraphQL(
        schema,
        context_value=context_value,
        execute_get_queries=True,
        debug=debug,
        error_formatter=log_and_format_error,
    )


def create_graphql_router() -> APIRouter:
    """Create the router serving ``/graphql`` with the app built at startup."""
    router = APIRouter()

    @router.api_route("/graphql", methods=["GET", "POST"])
    async def graphql_endpoint(request: Request) -> Response:  # pyright: ignore [reportUnusedFunction]
        graphql_app: GraphQL = request.app.state.graphql_app
        try:
            return await graphql_app.handle_request(request)
        finally:
            remote = getattr(request.state, "remote", None)
            if remote is not None:
                await remote.aclose()

    return router
