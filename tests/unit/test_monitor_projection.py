"""Tests for BuildProjection and LiveBoard.

Verifies that:
1. BuildProjection derives every view field from the snapshot alone.
2. History views hide the last success when it is already listed.
3. LiveBoard replaces its view wholesale on every update.
"""

from __future__ import annotations

from pathlib import Path

from buildscope.config import DashboardConfig
from buildscope.core.status_catalog import DEFAULT_STATUS_CATALOG
from buildscope.models.display import DisplayCategory
from buildscope.models.tasks import BuildHistory
from buildscope.monitor.projection import (
    BuildProjection,
    LiveBoard,
    projection_from_config,
)

NANOS_PER_MS = 1_000_000


# ---------------------------------------------------------------------------
# Test: Build view
# ---------------------------------------------------------------------------


class TestBuildView:
    """BuildProjection.project produces a complete view."""

    def test_empty_build(self, projection: BuildProjection, make_snapshot, fixed_now):
        """A build with no tasks still produces a valid view."""
        view = projection.project(make_snapshot([]))
        assert view.tasks == []
        assert view.summary.max_task_duration_nanos == 1
        assert view.summary.makespan_nanos == 0
        assert view.counts.total == 0
        assert view.last_update == fixed_now

    def test_view_reflects_snapshot(
        self, projection: BuildProjection, make_task, make_snapshot, t0, ms
    ):
        tasks = [
            make_task(id="a", status="succeeded", start_time=t0, finish_time=t0 + ms(4000)),
            make_task(id="b", status="started", start_time=t0 + ms(1000)),
            make_task(id="c", status="undispatched", activated=False),
        ]
        snapshot = make_snapshot(
            tasks, current_time=t0 + ms(3000), start_time=t0
        )
        view = projection.project(snapshot)

        by_id = view.tasks_by_id
        assert by_id["a"].classification == DisplayCategory.SUCCESS
        assert by_id["b"].estimated_duration_nanos == 2000 * NANOS_PER_MS
        assert by_id["c"].classification == DisplayCategory.UNSCHEDULED
        assert view.summary.max_task_duration_nanos == 4000 * NANOS_PER_MS
        assert view.summary.total_processing_nanos == 4000 * NANOS_PER_MS
        assert view.build_time_taken_nanos == 3000 * NANOS_PER_MS
        assert view.counts.inactive == 1

    def test_task_order_preserved(self, projection, make_task, make_snapshot):
        tasks = [make_task(id=i) for i in ("z", "a", "m")]
        view = projection.project(make_snapshot(tasks))
        assert [t.task_id for t in view.tasks] == ["z", "a", "m"]

    def test_unknowable_duration_shown_as_zero(
        self, projection, make_task, make_snapshot, t0
    ):
        task = make_task(status="succeeded", start_time=None, finish_time=t0)
        view = projection.project(make_snapshot([task]))
        assert view.tasks[0].estimated_duration_nanos == 0

    def test_snapshot_not_mutated(self, projection, make_task, make_snapshot):
        task = make_task(status="failed", activated=False)
        snapshot = make_snapshot([task])
        projection.project(snapshot)
        assert snapshot.tasks[0].status == "failed"

    def test_link_prefix(self, make_task, make_snapshot):
        proj = BuildProjection(link_prefix="https://ci.example/task/")
        view = proj.project(make_snapshot([make_task(id="t1")]))
        assert view.tasks[0].link == "https://ci.example/task/t1"


# ---------------------------------------------------------------------------
# Test: History view
# ---------------------------------------------------------------------------


class TestHistoryView:
    """project_history builds result strips and the last-success flag."""

    def test_last_success_shown_when_not_listed(
        self, projection, make_task, make_snapshot
    ):
        listed = make_snapshot([make_task(status="failed")], build_id="b2")
        last_ok = make_snapshot([make_task(status="succeeded")], build_id="b1")
        view = projection.project_history(
            BuildHistory(builds=[listed], last_success=last_ok)
        )
        assert view.show_last_success is True
        assert view.last_success_id == "b1"
        assert set(view.results) == {"b1", "b2"}
        assert view.build_ids == ["b2"]

    def test_last_success_hidden_when_listed(
        self, projection, make_task, make_snapshot
    ):
        last_ok = make_snapshot([make_task(status="succeeded")], build_id="b1")
        view = projection.project_history(
            BuildHistory(builds=[last_ok], last_success=last_ok)
        )
        assert view.show_last_success is False

    def test_no_last_success(self, projection, make_task, make_snapshot):
        view = projection.project_history(
            BuildHistory(builds=[make_snapshot([make_task()])])
        )
        assert view.show_last_success is False
        assert view.last_success_id is None

    def test_inactive_tasks_unscheduled(self, projection, make_task, make_snapshot):
        build = make_snapshot([make_task(status="succeeded", activated=False)])
        view = projection.project_history(BuildHistory(builds=[build]))
        assert view.results["build-001"][0].classification == DisplayCategory.UNSCHEDULED


# ---------------------------------------------------------------------------
# Test: LiveBoard
# ---------------------------------------------------------------------------


class TestLiveBoard:
    """The board keeps only the latest view."""

    def test_starts_empty(self):
        assert LiveBoard().view is None

    def test_last_write_wins(self, projection, make_task, make_snapshot, t0, ms):
        board = LiveBoard(projection)
        first = board.on_build_updated(
            make_snapshot([make_task(status="started", start_time=t0)], current_time=t0 + ms(10))
        )
        second = board.on_build_updated(
            make_snapshot([make_task(status="succeeded")], build_id="build-002")
        )
        assert board.view is second
        assert board.view is not first
        assert second.build_id == "build-002"
        assert len(second.tasks) == 1

    def test_running_task_grows_between_updates(
        self, projection, make_task, make_snapshot, t0, ms
    ):
        board = LiveBoard(projection)
        task = make_task(status="started", start_time=t0)
        early = board.on_build_updated(make_snapshot([task], current_time=t0 + ms(1000)))
        late = board.on_build_updated(make_snapshot([task], current_time=t0 + ms(5000)))
        assert late.tasks[0].estimated_duration_nanos > early.tasks[0].estimated_duration_nanos


class TestProjectionFromConfig:
    def test_defaults(self):
        proj = projection_from_config(DashboardConfig())
        assert proj._catalog is DEFAULT_STATUS_CATALOG

    def test_catalog_file_and_prefix(self, tmp_path: Path, make_task, make_snapshot):
        path = tmp_path / "statuses.json"
        path.write_text('{"succeeded": {"category": "success", "label": "Done"}}')
        cfg = DashboardConfig(status_catalog_path=path, task_link_prefix="/t/")
        view = projection_from_config(cfg).project(
            make_snapshot([make_task(id="x", status="succeeded")])
        )
        assert view.tasks[0].label == "Done"
        assert view.tasks[0].link == "/t/x"
