"""``buildscope history FILE`` — task result strips for recent builds."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape

from buildscope.config import config
from buildscope.core.status_catalog import StatusCatalogError
from buildscope.monitor.projection import projection_from_config
from buildscope.monitor.renderer import BuildRenderer
from buildscope.monitor.source import SnapshotLoadError, load_history

console = Console()


def history_cmd(
    history_file: Path = typer.Argument(
        ...,
        help="Path to the build history record (JSON).",
    ),
) -> None:
    """Show one strip of task results per build, plus the last success."""
    try:
        projection = projection_from_config(config)
        history = load_history(history_file)
    except (SnapshotLoadError, StatusCatalogError) as exc:
        console.print(
            f"[bold red]Cannot load history:[/bold red] {escape(str(exc))}"
        )
        raise typer.Exit(code=1)

    BuildRenderer(console=console).print_history(projection.project_history(history))
