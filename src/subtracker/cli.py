#!/usr/bin/env python
"""
CLI management commands for the subscription tracker.
"""

import asyncio
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

import click

from subtracker.db import Database
from subtracker.logging import setup_logging
from subtracker.settings import Settings, get_settings


@dataclass
class CLIDependencies:
    """Bundle of injectable dependencies used by CLI commands."""

    settings_factory: Callable[[], Settings]
    database_factory: Callable[[Settings], Database]
    uvicorn_run: Callable[..., Any]


def _get_cli_dependencies() -> CLIDependencies:
    """Return the default dependency bundle for CLI commands."""
    import uvicorn

    return CLIDependencies(
        settings_factory=get_settings,
        database_factory=Database.from_settings,
        uvicorn_run=uvicorn.run,
    )


@click.group()
def cli() -> None:
    """Subscription Tracker CLI."""
    pass


@cli.command()
@click.option("--host", default=None, help="Bind address (defaults to settings)")
@click.option("--port", default=None, type=int, help="Listening port (defaults to settings)")
@click.option("--reload/--no-reload", default=None, help="Auto-reload on code changes")
def serve(host: str | None, port: int | None, reload: bool | None) -> None:
    """Run the HTTP API server."""
    deps = _get_cli_dependencies()
    settings = deps.settings_factory()

    deps.uvicorn_run(
        "subtracker.main:create_app",
        factory=True,
        host=host or settings.host,
        port=port or settings.port,
        reload=settings.is_development if reload is None else reload,
        log_level=settings.observability.log_level.value.lower(),
    )


@cli.command()
def init_database() -> None:
    """Create the subscriptions table if it does not exist."""
    deps = _get_cli_dependencies()
    settings = deps.settings_factory()
    setup_logging(settings)

    async def _init() -> None:
        database = deps.database_factory(settings)
        try:
            await database.create_all()
        finally:
            await database.dispose()

    click.echo("Initializing database...")
    asyncio.run(_init())
    click.echo("Database initialized successfully!")


@cli.command()
def show_config() -> None:
    """Print the effective configuration (password masked)."""
    deps = _get_cli_dependencies()
    settings = deps.settings_factory()

    data = settings.model_dump(mode="json")
    if data["database"].get("password"):
        data["database"]["password"] = "********"
    if data["database"].get("url"):
        data["database"]["url"] = "********"

    for section, value in data.items():
        if isinstance(value, dict):
            click.echo(f"[{section}]")
            for key, item in value.items():
                click.echo(f"  {key} = {item}")
        else:
            click.echo(f"{section} = {value}")


if __name__ == "__main__":
    cli()
