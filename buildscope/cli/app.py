"""Main Typer application — imports and registers all CLI commands.

Entry point: ``buildscope`` (configured via pyproject.toml scripts).

Commands: monitor, summary, history, ui.
"""

from __future__ import annotations

from pathlib import Path

import typer

from buildscope.cli.commands.history_cmd import history_cmd
from buildscope.cli.commands.monitor_cmd import monitor_cmd
from buildscope.cli.commands.summary_cmd import summary_cmd
from buildscope.config import config, configure_logging

app = typer.Typer(
    name="buildscope",
    help="buildscope: build task timelines, makespan and processing time.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)

# Register subcommands
app.command(name="monitor", help="Show the task timeline for a build.")(monitor_cmd)
app.command(name="summary", help="Print a build's summary as JSON.")(summary_cmd)
app.command(name="history", help="Show task results for recent builds.")(history_cmd)


@app.command(name="ui", help="Launch the Streamlit build dashboard.")
def ui_cmd(
    snapshot: Path = typer.Option(
        config.snapshot_path, help="Path to the build record (JSON)."
    ),
    history: Path = typer.Option(
        config.history_path, help="Path to the build history record (JSON)."
    ),
) -> None:
    """Launch the buildscope dashboard (Streamlit)."""
    from buildscope.dashboard import create_dashboard

    create_dashboard(snapshot_path=snapshot, history_path=history)


def main() -> None:
    """CLI entry point."""
    configure_logging(config)
    app()


if __name__ == "__main__":
    main()
