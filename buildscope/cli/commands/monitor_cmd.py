"""``buildscope monitor FILE`` — show the task timeline for a build.

Displays every task's result class, a timeline bar scaled to the
longest task, and the build's makespan and total processing time.
Supports continuous live mode, re-reading the file on every refresh.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape

from buildscope.config import config
from buildscope.core.status_catalog import StatusCatalogError
from buildscope.models.tasks import BuildSnapshot
from buildscope.monitor.projection import LiveBoard, projection_from_config
from buildscope.monitor.renderer import BuildRenderer
from buildscope.monitor.source import SnapshotLoadError, load_snapshot

console = Console()
logger = logging.getLogger(__name__)


def monitor_cmd(
    snapshot_file: Path = typer.Argument(
        ...,
        help="Path to the build record (JSON).",
    ),
    live: bool = typer.Option(
        False,
        "--live",
        "-L",
        help="Enable continuous live monitoring mode (Ctrl+C to exit).",
    ),
    refresh_hz: float = typer.Option(
        config.refresh_hz,
        "--refresh",
        "-r",
        help="Refresh rate in Hz for live mode.",
    ),
    local_clock: bool = typer.Option(
        False,
        "--local-clock",
        "-c",
        help="Measure running tasks against this machine's clock.",
    ),
) -> None:
    """Show the task timeline for a build.

    Each display is recomputed from scratch from the build record; in
    live mode the record is re-read on every refresh.
    """
    if not snapshot_file.exists():
        console.print(
            f"[bold red]Build record not found:[/bold red] {escape(str(snapshot_file))}"
        )
        raise typer.Exit(code=1)

    try:
        projection = projection_from_config(config)
    except StatusCatalogError as exc:
        console.print(
            f"[bold red]Status catalog error:[/bold red] {escape(str(exc))}"
        )
        raise typer.Exit(code=1)

    def _load() -> BuildSnapshot:
        now = datetime.now(timezone.utc) if local_clock else None
        return load_snapshot(snapshot_file, current_time=now)

    try:
        snapshot = _load()
    except SnapshotLoadError as exc:
        console.print(
            f"[bold red]Cannot load build:[/bold red] {escape(str(exc))}"
        )
        raise typer.Exit(code=1)

    renderer = BuildRenderer(console=console)

    if not live:
        renderer.print_view(projection.project(snapshot))
        return

    latest = [snapshot]

    def _fetch() -> BuildSnapshot:
        # A half-written file keeps the previous snapshot on screen
        try:
            latest[0] = _load()
        except SnapshotLoadError as exc:
            logger.warning("Keeping previous snapshot: %s", exc)
        return latest[0]

    console.print(
        f"[dim]Live monitoring {escape(str(snapshot_file))} at {refresh_hz} Hz. "
        "Press Ctrl+C to exit.[/dim]"
    )
    console.print()
    renderer.render_live(_fetch, LiveBoard(projection), refresh_hz=refresh_hz)
