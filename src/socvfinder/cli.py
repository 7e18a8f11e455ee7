# src/socvfinder/cli.py
"""SOCV Finder Command Line Interface.

Entry point for the socvfinder CLI tool.
"""

import json
from pathlib import Path

import typer
from pydantic import ValidationError

from socvfinder import __version__
from socvfinder.contracts.errors import SOCVFinderError
from socvfinder.core.config import FinderSettings, load_settings
from socvfinder.core.logging import configure_logging
from socvfinder.service import ServiceHolder

app = typer.Typer(
    name="socvfinder",
    help="SOCV Finder: throttled Stack Exchange question queries.",
    no_args_is_help=True,
)

IN_MEMORY_STORE = {"url": "sqlite://", "create_tables": True}

SettingsOption = typer.Option(
    None,
    "--settings",
    "-s",
    help="Path to settings YAML file (defaults and an in-memory store when omitted).",
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"socvfinder version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Log debug output to stderr.",
    ),
) -> None:
    """SOCV Finder: throttled Stack Exchange question queries."""
    configure_logging(level="DEBUG" if verbose else "WARNING")


def _load(settings: str | None) -> FinderSettings:
    """Load settings or exit with a readable error.

    Without a settings file the user store is an empty in-memory database,
    so nothing is written to the working directory.
    """
    if settings is None:
        return FinderSettings(store=IN_MEMORY_STORE)
    try:
        return load_settings(Path(settings))
    except FileNotFoundError:
        typer.echo(f"Error: Settings file not found: {settings}", err=True)
        raise typer.Exit(1) from None
    except ValidationError as e:
        typer.echo("Configuration errors:", err=True)
        for error in e.errors():
            loc = ".".join(str(x) for x in error["loc"])
            typer.echo(f"  - {loc}: {error['msg']}", err=True)
        raise typer.Exit(1) from None


@app.command()
def url(
    ids: str | None = typer.Option(
        None, "--ids", help="Semicolon-joined question ids."
    ),
    page: int = typer.Option(1, "--page", "-p", min=1, help="Page to view."),
    from_date: int = typer.Option(
        0, "--from-date", min=0, help="Unix timestamp lower bound (0 = none)."
    ),
    to_date: int = typer.Option(
        0, "--to-date", min=0, help="Unix timestamp upper bound (0 = none)."
    ),
    tag: str | None = typer.Option(None, "--tag", "-t", help="Tag filter."),
    settings: str | None = SettingsOption,
) -> None:
    """Print the questions URL for the given filters."""
    from socvfinder.api.urls import build_questions_url

    config = _load(settings)
    try:
        typer.echo(
            build_questions_url(
                ids, page, from_date, to_date, tag, api_key=config.api.api_key
            )
        )
    except SOCVFinderError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from None


@app.command()
def fetch(
    ids: str | None = typer.Option(
        None, "--ids", help="Semicolon-joined question ids."
    ),
    pages: int = typer.Option(
        1, "--pages", "-n", min=1, help="Number of pages to fetch."
    ),
    tag: str | None = typer.Option(None, "--tag", "-t", help="Tag filter."),
    settings: str | None = SettingsOption,
) -> None:
    """Fetch question pages and print them as JSON lines."""
    holder = ServiceHolder()
    service = holder.initialize(_load(settings))
    try:
        for page in range(1, min(pages, service.call_pages) + 1):
            doc = service.fetch(
                service.questions_url(ids, page, tag=tag), _EchoNotifier()
            )
            service.api_quota = int(doc.get("quota_remaining", service.api_quota))
            typer.echo(json.dumps(doc))
            if not doc.get("has_more", False):
                break
    except SOCVFinderError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from None
    finally:
        holder.shutdown()
    typer.echo(f"Quota remaining: {service.api_quota}", err=True)


@app.command()
def users(
    settings: str | None = SettingsOption,
) -> None:
    """List the users known to the local store."""
    if settings is None:
        typer.echo("Error: --settings is required to list users", err=True)
        raise typer.Exit(1)
    holder = ServiceHolder()
    service = holder.initialize(_load(settings))
    try:
        if service.load_error is not None:
            typer.echo(f"Error: {service.load_error}", err=True)
            raise typer.Exit(1)
        for user in service.users.values():
            typer.echo(f"{user.user_id}\t{user.user_name or ''}\t{user.access_level}")
    finally:
        holder.shutdown()


class _EchoNotifier:
    """Notifier printing throttle messages to stderr."""

    def message(self, text: str) -> None:
        typer.echo(text, err=True)


if __name__ == "__main__":
    app()
