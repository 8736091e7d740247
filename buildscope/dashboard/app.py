"""buildscope Dashboard -- Streamlit-based build page.

A pure projection over build records: it re-reads the record files on
every rerun and never computes anything the terminal monitor doesn't.

Usage:
    streamlit run buildscope/dashboard/app.py
    # or via CLI:
    buildscope ui
"""

from __future__ import annotations

import os
import subprocess
import sys
import time
from pathlib import Path
from typing import TYPE_CHECKING, Any

from buildscope.models.display import BuildView, HistoryView
from buildscope.monitor.renderer import format_duration

if TYPE_CHECKING:
    from buildscope.config import DashboardConfig

try:
    import streamlit as st
    from streamlit import runtime as st_runtime

    HAS_STREAMLIT = True
except ImportError:
    HAS_STREAMLIT = False

AUTO_REFRESH_SECONDS = 5


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------


def create_dashboard(
    snapshot_path: Path | None = None,
    history_path: Path | None = None,
) -> None:
    """Launch the buildscope dashboard.

    Inside a Streamlit script run this renders the page directly.
    Otherwise it starts ``streamlit run`` on this module, bound to the
    configured host and port, and blocks until the server exits.

    Parameters
    ----------
    snapshot_path:
        Build record JSON.  Defaults to the configured snapshot path.
    history_path:
        Build history JSON.  Defaults to the configured history path.
    """
    if not HAS_STREAMLIT:
        print("Streamlit is required for the dashboard.")
        print("Install with: pip install buildscope[dashboard]")
        return

    if st_runtime.exists():
        _run_dashboard(snapshot_path, history_path)
        return

    from buildscope.config import config as _cfg

    command, env = streamlit_command(_cfg, snapshot_path, history_path)
    subprocess.run(command, env=env, check=False)


def streamlit_command(
    cfg: DashboardConfig,
    snapshot_path: Path | None = None,
    history_path: Path | None = None,
) -> tuple[list[str], dict[str, str]]:
    """Command line and environment for serving this dashboard.

    Record paths reach the server process through the ``BUILDSCOPE_``
    settings it reads on startup.
    """
    command = [
        sys.executable,
        "-m",
        "streamlit",
        "run",
        str(Path(__file__).resolve()),
        "--server.address",
        cfg.host,
        "--server.port",
        str(cfg.port),
    ]
    env = dict(os.environ)
    if snapshot_path is not None:
        env["BUILDSCOPE_SNAPSHOT_PATH"] = str(snapshot_path)
    if history_path is not None:
        env["BUILDSCOPE_HISTORY_PATH"] = str(history_path)
    return command, env


# ---------------------------------------------------------------------------
# Row builders -- plain data, no Streamlit
# ---------------------------------------------------------------------------

_CATEGORY_ICONS: dict[str, str] = {
    "success": "✅",
    "failed": "❌",
    "system-failed": "\U0001f7e3",
    "timed-out": "⏰",
    "setup-failed": "\U0001f527",
    "started": "\U0001f504",
    "dispatched": "\U0001f4e8",
    "undispatched": "⬜",
    "unscheduled": "➖",
    "unknown": "❔",
}


def task_rows(view: BuildView) -> list[dict[str, Any]]:
    """One table row per task, with its share of the longest task."""
    rows: list[dict[str, Any]] = []
    for task in view.tasks:
        icon = _CATEGORY_ICONS.get(task.classification.value, "")
        rows.append(
            {
                "Task": task.display_name or task.task_id,
                "Status": f"{icon} {task.label}",
                "Duration": format_duration(task.estimated_duration_nanos),
                "Timeline": view.timeline_fraction(task),
                "Link": task.link,
            }
        )
    return rows


def history_rows(history: HistoryView) -> list[dict[str, Any]]:
    """One row per build with a strip of task status icons."""
    build_ids = list(history.build_ids)
    if history.show_last_success and history.last_success_id:
        build_ids.insert(0, history.last_success_id)

    return [
        {
            "Build": build_id,
            "Last success": build_id == history.last_success_id,
            "Tasks": "".join(
                _CATEGORY_ICONS.get(t.classification.value, "")
                for t in history.results.get(build_id, [])
            ),
        }
        for build_id in build_ids
    ]


# ---------------------------------------------------------------------------
# Internal dashboard runner
# ---------------------------------------------------------------------------


def _run_dashboard(
    snapshot_path: Path | None = None,
    history_path: Path | None = None,
) -> None:
    """Internal dashboard runner -- requires Streamlit."""
    from buildscope.config import config as _cfg

    st.set_page_config(
        page_title="buildscope",
        page_icon="\U0001f4ca",
        layout="wide",
    )

    st.sidebar.title("\U0001f4ca buildscope")
    snapshot_file = Path(
        st.sidebar.text_input(
            "Build record", value=str(snapshot_path or _cfg.snapshot_path)
        )
    )
    history_file = Path(
        st.sidebar.text_input(
            "History record", value=str(history_path or _cfg.history_path)
        )
    )
    auto_refresh = st.sidebar.checkbox(
        f"Auto-refresh ({AUTO_REFRESH_SECONDS}s)", value=False
    )

    tab1, tab2 = st.tabs(["\U0001f4ca Build", "\U0001f4dc History"])

    with tab1:
        _render_build(snapshot_file)

    with tab2:
        _render_history(history_file)

    if auto_refresh:
        time.sleep(AUTO_REFRESH_SECONDS)
        st.rerun()


def _render_build(snapshot_file: Path) -> None:
    """Tab 1: summary metrics and the task timeline."""
    from buildscope.config import config as _cfg
    from buildscope.core.status_catalog import StatusCatalogError
    from buildscope.monitor.projection import projection_from_config
    from buildscope.monitor.source import SnapshotLoadError, load_snapshot

    st.header("Build")
    if not snapshot_file.exists():
        st.info(f"No build record at {snapshot_file}")
        return

    try:
        view = projection_from_config(_cfg).project(load_snapshot(snapshot_file))
    except (SnapshotLoadError, StatusCatalogError) as exc:
        st.error(f"Could not load build: {exc}")
        return

    col1, col2, col3, col4 = st.columns(4)
    col1.metric("Time Taken", format_duration(view.build_time_taken_nanos))
    col2.metric("Makespan", format_duration(view.summary.makespan_nanos))
    col3.metric(
        "Total Processing", format_duration(view.summary.total_processing_nanos)
    )
    col4.metric("Succeeded", f"{view.counts.succeeded}/{view.counts.total}")

    st.subheader(view.display_name or view.build_id)
    st.dataframe(
        task_rows(view),
        use_container_width=True,
        column_config={
            "Timeline": st.column_config.ProgressColumn(
                "Timeline", min_value=0.0, max_value=1.0, format=" "
            ),
            "Link": st.column_config.LinkColumn("Link"),
        },
    )
    st.caption(f"Last updated: {view.last_update.strftime('%Y-%m-%d %H:%M:%S UTC')}")


def _render_history(history_file: Path) -> None:
    """Tab 2: task result strips for recent builds."""
    from buildscope.config import config as _cfg
    from buildscope.core.status_catalog import StatusCatalogError
    from buildscope.monitor.projection import projection_from_config
    from buildscope.monitor.source import SnapshotLoadError, load_history

    st.header("History")
    if not history_file.exists():
        st.info(f"No history record at {history_file}")
        return

    try:
        history = projection_from_config(_cfg).project_history(
            load_history(history_file)
        )
    except (SnapshotLoadError, StatusCatalogError) as exc:
        st.error(f"Could not load history: {exc}")
        return

    st.dataframe(history_rows(history), use_container_width=True)


# ---------------------------------------------------------------------------
# Entry point for `streamlit run buildscope/dashboard/app.py`
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    _run_dashboard()
