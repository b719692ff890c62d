"""Click CLI group: serve, hook and journal commands."""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from agentviz.config import get_settings


@click.group()
def cli() -> None:
    """agentviz activity monitor CLI."""


@cli.command()
@click.option("--host", type=str, default=None, help="Bind host (default: BIND_HOST).")
@click.option("--port", type=int, default=None, help="Listen port (default: PORT).")
@click.option(
    "--public-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Static asset root (default: PUBLIC_DIR).",
)
def serve(host: str | None, port: int | None, public_dir: Path | None) -> None:
    """Run the event ingestion and broadcast server."""
    import uvicorn

    from agentviz.main import create_app

    settings = get_settings()
    overrides: dict[str, object] = {}
    if host is not None:
        overrides["bind_host"] = host
    if port is not None:
        overrides["port"] = port
    if overrides:
        settings = settings.model_copy(update=overrides)
    try:
        app = create_app(settings, public_dir=public_dir)
    except ValueError as exc:
        raise click.ClickException(str(exc)) from exc
    uvicorn.run(
        app,
        host=settings.bind_host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        log_config=None,
    )


@cli.command()
def hook() -> None:
    """Read one hook notification from stdin and forward it. Always exits 0."""
    from agentviz.hook import run_hook
    from agentviz.logging import configure_logging

    try:
        settings = get_settings()
        configure_logging("WARNING", json_output=False)
        run_hook(sys.stdin.read(), settings)
    except Exception as exc:
        # the observed agent must never see a failure from here
        click.echo(f"agentviz hook: {exc}", err=True)


@cli.command()
@click.option("--limit", "-n", type=int, default=20, show_default=True)
@click.option("--json", "json_output", is_flag=True, help="Print raw JSON lines.")
def journal(limit: int, json_output: bool) -> None:
    """Show the most recent events from the local journal."""
    from agentviz.events.journal import read_events

    settings = get_settings()
    rows = read_events(settings.events_file, limit=limit)
    if not rows:
        click.echo(f"no events in {settings.events_file}")
        return
    for row in rows:
        if json_output:
            click.echo(json.dumps(row, separators=(",", ":")))
            continue
        detail = row.get("tool") or row.get("hookType") or ""
        click.echo(f"{row.get('timestamp', '')}  {row.get('type', '?'):<12}  {detail}")


if __name__ == "__main__":
    cli()
