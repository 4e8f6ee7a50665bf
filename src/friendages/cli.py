#!/usr/bin/env python3
"""
Main CLI entry point for the friendages service.
"""

import asyncio
import os
import sys

import click
import uvicorn

from friendages import __version__
from friendages.config import settings
from friendages.friends import get_age, set_age
from friendages.graphql.context import build_friend_context
from friendages.logging import configure_logging, get_logger
from friendages.store.factory import create_collection

logger = get_logger(__name__)


@click.group()
@click.version_option(version=__version__, prog_name="friendages")
def cli() -> None:
    """friendages CLI - serve the API or read and write ages directly."""
    # Keep log lines out of stdout, which carries command results
    configure_logging(debug=settings.debug, level=settings.log_level, stream=sys.stderr)


@cli.command()
@click.option("--host", default=settings.api_host, help="Host to bind to")
@click.option("--port", default=settings.api_port, type=int, help="Port to bind to")
@click.option("--reload", is_flag=True, default=False, help="Enable auto-reload for development")
@click.option(
    "--log-level",
    default="info",
    type=click.Choice(["debug", "info", "warning", "error"]),
    help="Log level (default: info)",
)
def serve(host: str, port: int, reload: bool, log_level: str) -> None:
    """Start the friendages API server."""
    configure_logging(debug=(log_level == "debug"))

    logger.info("Starting friendages API server", host=host, port=port, reload=reload)

    # Settings are re-read by the app import under reload
    if log_level == "debug":
        os.environ["FRIENDAGES_DEBUG"] = "true"
        os.environ["FRIENDAGES_LOG_LEVEL"] = "debug"
    else:
        os.environ.setdefault("FRIENDAGES_DEBUG", "false")
        os.environ.setdefault("FRIENDAGES_LOG_LEVEL", log_level)

    try:
        uvicorn.run(
            "friendages.api.app:create_app",
            factory=True,
            host=host,
            port=port,
            reload=reload,
            log_level=log_level,
            access_log=True,
        )
    except KeyboardInterrupt:
        logger.info("Server shutdown requested by user")
    except Exception as e:
        logger.error("Server startup failed", error=str(e))
        sys.exit(1)


def _run_with_collection(operation, *args):
    collection = create_collection(settings)
    try:
        return asyncio.run(operation(*args, build_friend_context(collection)))
    finally:
        collection.close()


@cli.command("get-age")
@click.argument("name")
def get_age_command(name: str) -> None:
    """Print the sentence describing NAME's age."""
    try:
        message = _run_with_collection(get_age, name)
    except Exception as e:
        raise click.ClickException(str(e)) from e
    click.echo(message)


@cli.command("set-age")
@click.argument("name")
@click.argument("age", type=int)
def set_age_command(name: str, age: int) -> None:
    """Store AGE as NAME's age."""
    try:
        saved_age = _run_with_collection(set_age, name, age)
    except Exception as e:
        raise click.ClickException(str(e)) from e
    click.echo(f"Saved age {saved_age} for {name}")


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
