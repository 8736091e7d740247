"""``buildscope summary FILE`` — print the build summary as JSON.

Machine-readable output for scripting: max task duration, makespan, total
processing time (all nanoseconds) and result counts.
"""

from __future__ import annotations

import json
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape

from buildscope.monitor.projection import BuildProjection
from buildscope.monitor.source import SnapshotLoadError, load_snapshot

console = Console(stderr=True)


def summary_cmd(
    snapshot_file: Path = typer.Argument(
        ...,
        help="Path to the build record (JSON).",
    ),
) -> None:
    """Print the summary of one build snapshot as JSON on stdout."""
    try:
        snapshot = load_snapshot(snapshot_file)
    except SnapshotLoadError as exc:
        console.print(
            f"[bold red]Cannot load build:[/bold red] {escape(str(exc))}"
        )
        raise typer.Exit(code=1)

    view = BuildProjection().project(snapshot)
    payload = {
        "build_id": view.build_id,
        **view.summary.model_dump(),
        "build_time_taken_nanos": view.build_time_taken_nanos,
        "counts": view.counts.model_dump(by_alias=True),
        "last_update": view.last_update.isoformat(),
    }
    typer.echo(json.dumps(payload, indent=2))
