"""Integration test: REST build record -> loader -> projection -> renderer.

Exercises the whole build page path the way the monitor command drives it:
a record as served by the build page API is loaded from disk, projected
into a view, and rendered to a terminal panel.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from rich.console import Console

from buildscope.models.display import DisplayCategory
from buildscope.monitor.projection import BuildProjection, LiveBoard
from buildscope.monitor.renderer import BuildRenderer
from buildscope.monitor.source import load_history, load_snapshot

SECOND = 1_000_000_000

# 2026-03-02T09:00:00Z
BUILD_START_MS = 1_772_442_000_000
# 2026-03-02T09:00:08Z
CURRENT_NANOS = 1_772_442_008_000_000_000

REST_TASKS = [
    {
        "Task": {
            "_id": "compile",
            "display_name": "compile",
            "status": "succeeded",
            "activated": True,
            "start_time": "2026-03-02T09:00:00Z",
            "finish_time": "2026-03-02T09:00:04Z",
        }
    },
    {
        "Task": {
            "_id": "unit",
            "display_name": "unit",
            "status": "started",
            "activated": True,
            "start_time": "2026-03-02T09:00:02Z",
            "time_taken": 0,
        }
    },
    {
        "Task": {
            "_id": "integration",
            "display_name": "integration",
            "status": "failed",
            "activated": True,
            "start_time": "2026-03-02T09:00:01Z",
            "finish_time": "2026-03-02T09:00:03Z",
            "task_end_details": {
                "type": "system",
                "timed_out": True,
                "desc": "heartbeat",
            },
        }
    },
    {
        "Task": {
            "_id": "docs",
            "display_name": "docs",
            "status": "undispatched",
            "activated": False,
        }
    },
]


@pytest.fixture
def rest_record_file(tmp_path: Path) -> Path:
    record = {
        "Build": {
            "_id": "rest-build-42",
            "display_name": "nightly",
            "start_time": BUILD_START_MS,
        },
        "Tasks": REST_TASKS,
        "CurrentTime": CURRENT_NANOS,
    }
    path = tmp_path / "build.json"
    path.write_text(json.dumps(record), encoding="utf-8")
    return path


class TestBuildPage:
    """Full pipeline from a REST record on disk to rendered output."""

    def test_view_from_rest_record(self, rest_record_file: Path, fixed_now):
        snapshot = load_snapshot(rest_record_file)
        view = BuildProjection(clock=lambda: fixed_now).project(snapshot)

        assert view.build_id == "rest-build-42"
        assert view.display_name == "nightly"

        by_id = view.tasks_by_id
        assert by_id["compile"].classification == DisplayCategory.SUCCESS
        assert by_id["unit"].estimated_duration_nanos == 6 * SECOND
        assert by_id["integration"].classification == DisplayCategory.SYSTEM_FAILED
        assert by_id["integration"].label == "System Unresponsive"
        assert by_id["docs"].classification == DisplayCategory.UNSCHEDULED
        assert by_id["docs"].hidden is True

        assert view.summary.max_task_duration_nanos == 6 * SECOND
        assert view.summary.makespan_nanos == 4 * SECOND
        assert view.summary.total_processing_nanos == 6 * SECOND
        assert view.build_time_taken_nanos == 8 * SECOND

        assert view.counts.total == 4
        assert view.counts.succeeded == 1
        assert view.counts.started == 1
        assert view.counts.system_unresponsive == 1
        assert view.counts.inactive == 1

    def test_rendered_panel(self, rest_record_file: Path):
        view = BuildProjection().project(load_snapshot(rest_record_file))
        console = Console(width=160, color_system=None)
        renderer = BuildRenderer(console=console)

        with console.capture() as capture:
            renderer.print_view(view)
        output = capture.get()

        assert "nightly" in output
        assert "integration" in output
        assert "System Unresponsive" in output
        assert "/task/unit" in output
        assert "1/4 succeeded" in output

    def test_live_board_follows_local_clock(self, rest_record_file: Path, t0):
        board = LiveBoard()
        first = board.on_build_updated(
            load_snapshot(rest_record_file, current_time=t0.replace(second=12))
        )
        second = board.on_build_updated(
            load_snapshot(rest_record_file, current_time=t0.replace(second=20))
        )
        assert board.view is second
        assert first.tasks_by_id["unit"].estimated_duration_nanos == 10 * SECOND
        assert second.tasks_by_id["unit"].estimated_duration_nanos == 18 * SECOND


class TestHistoryPage:
    def test_history_from_rest_records(self, tmp_path: Path, fixed_now):
        def rest_build(build_id: str, status: str) -> dict:
            return {
                "Build": {
                    "_id": build_id,
                    "start_time": BUILD_START_MS,
                    "tasks": [{"_id": "t", "display_name": "t", "status": status}],
                }
            }

        path = tmp_path / "history.json"
        path.write_text(
            json.dumps(
                {
                    "builds": [rest_build("b3", "failed"), rest_build("b2", "started")],
                    "lastSuccess": rest_build("b1", "succeeded"),
                }
            ),
            encoding="utf-8",
        )

        history = BuildProjection(clock=lambda: fixed_now).project_history(
            load_history(path)
        )
        assert history.build_ids == ["b3", "b2"]
        assert history.show_last_success is True
        assert history.results["b1"][0].classification == DisplayCategory.SUCCESS
        assert history.results["b3"][0].classification == DisplayCategory.FAILED

        console = Console(width=160, color_system=None)
        with console.capture() as capture:
            console.print(BuildRenderer(console=console).render_history(history))
        output = capture.get()
        assert "b1" in output
        assert "last success" in output
