"""
Main FastAPI application for the Stayhub gateway
"""

from __future__ import annotations

from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .. import __version__
from ..config import Settings, get_settings
from ..logging import configure_logging, get_logger
from ..middleware import LoggingContextMiddleware
from ..remote import RemoteSchemaClient

logger = get_logger(__name__)


async def load_gateway_schema(settings: Settings, transport: httpx.AsyncBaseTransport | None = None):
    """Fetch the remote schema once and build the gateway schema from it.

    Any failure here is fatal: the gateway has no offline mode.
    """
    from ..graphql.schema import build_gateway_schema

    async with RemoteSchemaClient.from_settings(settings, transport=transport) as client:
        remote_type_defs = await client.fetch_type_defs()

    return build_gateway_schema(
        remote_type_defs,
        conflict_policy=settings.schema_conflict_policy,
        namespace_prefix=settings.schema_namespace_prefix,
        output_path=settings.schema_output_path or None,
    )


def create_app(
    settings: Settings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Gateway settings; loaded from the environment when omitted
        transport: Optional httpx transport for every remote client

    Raises:
        ConfigurationError: If required settings are missing
    """
    settings = settings or get_settings()
    configure_logging(debug=settings.debug)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan manager."""
        logger.info("Starting Stayhub gateway...", backend=settings.backend_url)
        try:
            gateway = await load_gateway_schema(settings, transport)
        except Exception as e:
            logger.error("Failed to build gateway schema", error=str(e))
            raise

        from ..graphql.router import create_graphql_app

        app.state.schema = gateway.schema
        app.state.type_defs = gateway.type_defs
        app.state.graphql_app = create_graphql_app(
            gateway.schema, app.state.remote_client_factory, debug=settings.debug
        )
        logger.info(
            "Gateway ready",
            endpoint="/graphql",
            host=settings.api_host,
            port=settings.api_port,
        )

        yield

        logger.info("Shutting down Stayhub gateway...")

    app = FastAPI(
        title="Stayhub Gateway",
        description="GraphQL gateway for bookings, payments and experiences",
        version=__version__,
        lifespan=lifespan,
        debug=settings.debug,
    )
    app.state.settings = settings
    app.state.remote_client_factory = lambda token: RemoteSchemaClient.from_settings(
        settings, token=token, transport=transport
    )

    app.add_middleware(LoggingContextMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    async def health_check():  # pyright: ignore [reportUnusedFunction]
        """Health check endpoint."""
        return {"status": "healthy", "version": __version__}

    from ..graphql.router import create_graphql_router

    app.include_router(create_graphql_router(), prefix="")
    logger.debug("GraphQL endpoint mounted", endpoint="/graphql")

    return app
