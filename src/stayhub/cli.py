#!/usr/bin/env python3
"""
Main CLI entry point for the Stayhub gateway.
"""

import asyncio
import sys

import click
import uvicorn

from stayhub import __version__
from stayhub.config import get_settings
from stayhub.errors import StayhubError
from stayhub.logging import configure_logging, get_logger

logger = get_logger(__name__)


@click.group()
@click.version_option(version=__version__, prog_name="stayhub")
def cli() -> None:
    """Stayhub CLI - run the gateway and inspect its schema."""
    pass


@cli.command()
@click.option(
    "--host",
    default=None,
    help="Host to bind to (default: STAYHUB_API_HOST or 0.0.0.0)",
)
@click.option(
    "--port",
    default=None,
    type=int,
    help="Port to bind to (default: STAYHUB_API_PORT or 4000)",
)
@click.option(
    "--reload",
    is_flag=True,
    default=False,
    help="Enable auto-reload for development",
)
@click.option(
    "--workers",
    default=1,
    type=int,
    help="Number of worker processes (default: 1)",
)
@click.option(
    "--log-level",
    default="info",
    type=click.Choice(["debug", "info", "warning", "error"]),
    help="Log level (default: info)",
)
def serve(
    host: str | None,
    port: int | None,
    reload: bool,
    workers: int,
    log_level: str,
) -> None:
    """Start the gateway server."""

    configure_logging(debug=(log_level == "debug"))

    # Configuration problems must stop us before anything listens or calls out
    try:
        settings = get_settings(**({"debug": True} if log_level == "debug" else {}))
    except StayhubError as e:
        logger.error("Gateway configuration invalid", error=str(e))
        click.echo(f"✗ {e}", err=True)
        sys.exit(1)

    host = host or settings.api_host
    port = port or settings.api_port

    logger.info(
        "Starting Stayhub gateway",
        host=host,
        port=port,
        reload=reload,
        workers=workers,
        log_level=log_level,
    )

    try:
        if reload or workers > 1:
            # Each worker process builds its own app from the environment
            uvicorn.run(
                "stayhub.api.app:create_app",
                factory=True,
                host=host,
                port=port,
                reload=reload,
                workers=(workers if not reload else 1),
                log_level=log_level,
                access_log=True,
                lifespan="on",
            )
        else:
            from stayhub.api.app import create_app

            uvicorn.run(
                create_app(settings),
                host=host,
                port=port,
                log_level=log_level,
                access_log=True,
                lifespan="on",
            )
    except KeyboardInterrupt:
        logger.info("Server shutdown requested by user")
    except Exception as e:
        logger.error("Server startup failed", error=str(e))
        sys.exit(1)


@cli.command("compose-schema")
@click.option(
    "--output",
    default=None,
    type=click.Path(dir_okay=False),
    help="Where to write the composed schema (default: STAYHUB_SCHEMA_OUTPUT_PATH)",
)
def compose_schema(output: str | None) -> None:
    """Fetch the remote schema, compose it and write the result."""
    from stayhub.api.app import load_gateway_schema

    configure_logging()

    try:
        settings = get_settings()
        if output:
            settings = settings.model_copy(update={"schema_output_path": output})
        if not settings.schema_output_path:
            raise click.UsageError("No output path: pass --output or set STAYHUB_SCHEMA_OUTPUT_PATH")
        gateway = asyncio.run(load_gateway_schema(settings))
    except StayhubError as e:
        logger.error("Failed to compose schema", error=str(e))
        click.echo(f"✗ Error composing schema: {e}", err=True)
        sys.exit(1)

    click.echo(f"✓ Schema written to {settings.schema_output_path}")
    click.echo(f"  Types: {len(gateway.schema.type_map)}")


def main():
    """Entry point for the CLI."""
    cli()


if __name__ == "__main__":
    cli()
