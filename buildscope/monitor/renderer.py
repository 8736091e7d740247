"""Rich terminal renderer for build views.

Turns ``BuildView`` and ``HistoryView`` into Rich renderables, with
color-coded task classes, a timeline bar per task scaled to the longest
task, and an optional continuous ``Rich.Live`` mode.

Color scheme
------------
- green     : success
- red       : failed, timed-out, setup-failed
- magenta   : system-failed
- yellow    : started, dispatched
- dim       : undispatched, unscheduled, unknown
"""

from __future__ import annotations

import time
from collections.abc import Callable
from typing import TYPE_CHECKING

from rich.console import Console, Group
from rich.live import Live
from rich.markup import escape
from rich.panel import Panel
from rich.progress_bar import ProgressBar
from rich.table import Table
from rich.text import Text

from buildscope.models.display import DisplayCategory

if TYPE_CHECKING:
    from buildscope.models.display import BuildView, HistoryView
    from buildscope.models.tasks import BuildSnapshot
    from buildscope.monitor.projection import LiveBoard


# ---------------------------------------------------------------------------
# Category -> Rich style mapping
# ---------------------------------------------------------------------------

_CATEGORY_STYLES: dict[DisplayCategory, str] = {
    DisplayCategory.SUCCESS: "bold green",
    DisplayCategory.FAILED: "bold red",
    DisplayCategory.SYSTEM_FAILED: "bold magenta",
    DisplayCategory.TIMED_OUT: "red",
    DisplayCategory.SETUP_FAILED: "red",
    DisplayCategory.STARTED: "bold yellow",
    DisplayCategory.DISPATCHED: "yellow",
    DisplayCategory.UNDISPATCHED: "dim",
    DisplayCategory.UNSCHEDULED: "dim",
    DisplayCategory.UNKNOWN: "dim italic",
}

_CATEGORY_GLYPHS: dict[DisplayCategory, str] = {
    DisplayCategory.SUCCESS: "[green]■[/green]",
    DisplayCategory.FAILED: "[bold red]■[/bold red]",
    DisplayCategory.SYSTEM_FAILED: "[magenta]■[/magenta]",
    DisplayCategory.TIMED_OUT: "[red]■[/red]",
    DisplayCategory.SETUP_FAILED: "[red]■[/red]",
    DisplayCategory.STARTED: "[yellow]■[/yellow]",
    DisplayCategory.DISPATCHED: "[yellow]□[/yellow]",
    DisplayCategory.UNDISPATCHED: "[dim]□[/dim]",
    DisplayCategory.UNSCHEDULED: "[dim]·[/dim]",
    DisplayCategory.UNKNOWN: "[dim]?[/dim]",
}


def format_duration(nanos: int) -> str:
    """Human-readable duration, ``-`` for nothing measurable."""
    if nanos <= 0:
        return "-"
    seconds = nanos / 1_000_000_000
    if seconds < 60:
        return f"{seconds:.1f}s"
    minutes, secs = divmod(int(seconds), 60)
    if minutes < 60:
        return f"{minutes}m {secs}s"
    hours, minutes = divmod(minutes, 60)
    return f"{hours}h {minutes}m"


class BuildRenderer:
    """Renders build views as Rich terminal output.

    Parameters
    ----------
    console:
        Rich Console instance.  A new one is created if not provided.
    bar_width:
        Width in cells of the longest task's timeline bar.
    """

    def __init__(self, console: Console | None = None, bar_width: int = 30) -> None:
        self.console = console or Console()
        self.bar_width = bar_width

    # ------------------------------------------------------------------
    # Single view render
    # ------------------------------------------------------------------

    def render_view(self, view: BuildView) -> Panel:
        """Render a BuildView as a Rich Panel containing the task timeline."""
        table = self._build_task_table(view)

        summary = view.summary
        counts = view.counts
        summary_parts: list[str] = [
            f"[bold]Build:[/bold] {escape(view.build_id)}",
            f"[bold]Time taken:[/bold] {format_duration(view.build_time_taken_nanos)}",
            f"[bold]Makespan:[/bold] {format_duration(summary.makespan_nanos)}",
            f"[bold]Total processing:[/bold] "
            f"{format_duration(summary.total_processing_nanos)}",
            f"[bold]Tasks:[/bold] {counts.succeeded}/{counts.total} succeeded",
        ]

        failures = (
            counts.failed
            + counts.system_failed
            + counts.system_unresponsive
            + counts.system_timed_out
            + counts.test_timed_out
        )
        if failures:
            summary_parts.append(f"[bold red]Failed:[/bold red] {failures}")
        if counts.started or counts.dispatched:
            summary_parts.append(
                f"[yellow][bold]Running:[/bold] "
                f"{counts.started + counts.dispatched}[/yellow]"
            )

        panel_content = Group(
            table, Text(""), Text.from_markup("  |  ".join(summary_parts))
        )

        title = view.display_name or view.build_id
        return Panel(
            panel_content,
            title=f"[bold]{escape(title)}[/bold]",
            subtitle=f"Last updated: {view.last_update.strftime('%Y-%m-%d %H:%M:%S UTC')}",
            border_style="blue",
            padding=(1, 2),
        )

    def _build_task_table(self, view: BuildView) -> Table:
        """Build a Rich Table of task results with timeline bars."""
        table = Table(
            show_header=True,
            header_style="bold cyan",
            expand=True,
            show_lines=False,
            pad_edge=True,
        )

        table.add_column("Task", min_width=20)
        table.add_column("Status", min_width=14)
        table.add_column("Timeline", width=self.bar_width + 2)
        table.add_column("Duration", justify="right", width=10)
        table.add_column("Link", style="dim")

        total = view.summary.max_task_duration_nanos
        for task in view.tasks:
            style = _CATEGORY_STYLES.get(task.classification, "")
            bar = ProgressBar(
                total=total,
                completed=min(task.estimated_duration_nanos, total),
                width=self.bar_width,
            )
            table.add_row(
                Text(task.display_name or task.task_id, style=style),
                Text(task.label, style=style),
                bar,
                format_duration(task.estimated_duration_nanos),
                Text(task.link),
            )

        return table

    def render_history(self, history: HistoryView) -> Panel:
        """Render a HistoryView as one strip of task glyphs per build."""
        table = Table(show_header=True, header_style="bold cyan", expand=True)
        table.add_column("Build", min_width=20)
        table.add_column("Tasks")

        rows = list(history.build_ids)
        if history.show_last_success and history.last_success_id:
            rows.insert(0, history.last_success_id)

        for build_id in rows:
            strip = "".join(
                _CATEGORY_GLYPHS.get(t.classification, "?")
                for t in history.results.get(build_id, [])
            )
            name = Text(build_id)
            if build_id == history.last_success_id:
                name.append(" (last success)", style="green")
            table.add_row(name, Text.from_markup(strip or "[dim]-[/dim]"))

        return Panel(
            table,
            title="[bold]Build History[/bold]",
            subtitle=f"Last updated: {history.last_update.strftime('%Y-%m-%d %H:%M:%S UTC')}",
            border_style="blue",
        )

    # ------------------------------------------------------------------
    # Continuous live rendering
    # ------------------------------------------------------------------

    def render_live(
        self,
        fetch: Callable[[], BuildSnapshot],
        board: LiveBoard,
        *,
        refresh_hz: float = 2.0,
    ) -> None:
        """Continuously render a build in Rich Live mode.

        Every refresh cycle fetches a fresh snapshot and hands it to
        *board*, which recomputes the view from scratch.  Press Ctrl+C to
        stop.

        Parameters
        ----------
        fetch:
            Returns the latest snapshot (e.g. re-reads a file).
        board:
            Holds the current view.
        refresh_hz:
            Refresh rate in Hz (updates per second).  Default is 2.0.
        """
        rate = max(refresh_hz, 0.1)
        interval = 1.0 / rate

        with Live(
            console=self.console,
            refresh_per_second=rate,
            transient=False,
        ) as live:
            try:
                while True:
                    view = board.on_build_updated(fetch())
                    live.update(self.render_view(view))
                    time.sleep(interval)
            except KeyboardInterrupt:
                # Final view on exit
                view = board.on_build_updated(fetch())
                live.update(self.render_view(view))

    # ------------------------------------------------------------------
    # Standalone print
    # ------------------------------------------------------------------

    def print_view(self, view: BuildView) -> None:
        """Print a single build view to the console."""
        self.console.print(self.render_view(view))

    def print_history(self, history: HistoryView) -> None:
        """Print a build history to the console."""
        self.console.print(self.render_history(history))
