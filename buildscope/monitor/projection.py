"""BuildProjection — pure view over a build snapshot.

The projection does not compute truth — it derives display data from the
snapshot it is handed.  Every call recomputes the whole view from scratch;
nothing is cached between calls.  ``LiveBoard`` is the one place that holds
a view across passes, and it only ever replaces it wholesale.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timezone
from typing import TYPE_CHECKING

from buildscope.core.classifier import DEFAULT_LINK_PREFIX, classify
from buildscope.core.durations import (
    build_time_taken,
    display_duration,
    estimate_duration,
)
from buildscope.core.status_catalog import DEFAULT_STATUS_CATALOG, StatusCatalog
from buildscope.core.summarizer import count_results, summarize
from buildscope.models.display import BuildView, HistoryView, TaskDisplay
from buildscope.models.tasks import BuildHistory, BuildSnapshot

if TYPE_CHECKING:
    from buildscope.config import DashboardConfig

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class BuildProjection:
    """Derives ``BuildView`` and ``HistoryView`` records from snapshots.

    Parameters
    ----------
    catalog:
        Status -> (category, label) table.  Defaults to
        ``DEFAULT_STATUS_CATALOG``.
    link_prefix:
        Prefix for task links.
    clock:
        Returns the time stamped on each view as ``last_update``.
    """

    def __init__(
        self,
        catalog: StatusCatalog | None = None,
        *,
        link_prefix: str = DEFAULT_LINK_PREFIX,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._catalog = catalog or DEFAULT_STATUS_CATALOG
        self._link_prefix = link_prefix
        self._clock = clock

    def project(self, snapshot: BuildSnapshot) -> BuildView:
        """Produce the full build view for one snapshot."""
        estimates = [
            estimate_duration(task, snapshot.current_time) for task in snapshot.tasks
        ]

        displays = [
            classify(
                task,
                self._catalog,
                link_prefix=self._link_prefix,
                estimated_duration_nanos=display_duration(task, estimate),
            )
            for task, estimate in zip(snapshot.tasks, estimates)
        ]

        summary = summarize(snapshot.tasks, estimates)
        counts = count_results(snapshot.tasks)
        if counts.loggable:
            logger.debug("Build %s results: %s", snapshot.build_id, counts)

        return BuildView(
            build_id=snapshot.build_id,
            display_name=snapshot.display_name,
            tasks=displays,
            summary=summary,
            counts=counts,
            build_time_taken_nanos=build_time_taken(
                snapshot.start_time, snapshot.finish_time, snapshot.current_time
            ),
            last_update=self._clock(),
        )

    def task_results(self, snapshot: BuildSnapshot) -> list[TaskDisplay]:
        """Classify every task of a build, without timing."""
        return [
            classify(task, self._catalog, link_prefix=self._link_prefix)
            for task in snapshot.tasks
        ]

    def project_history(self, history: BuildHistory) -> HistoryView:
        """Produce result strips for a variant's recent builds.

        The last successful build is only shown when it is not already one
        of the listed builds.
        """
        results: dict[str, list[TaskDisplay]] = {}
        last_success = history.last_success
        show_last_success = last_success is not None

        if last_success is not None:
            results[last_success.build_id] = self.task_results(last_success)

        for build in history.builds:
            if show_last_success and build.build_id == last_success.build_id:
                show_last_success = False
            results[build.build_id] = self.task_results(build)

        logger.debug(
            "Projected history of %d builds (last success shown: %s)",
            len(history.builds),
            show_last_success,
        )

        return HistoryView(
            build_ids=[b.build_id for b in history.builds],
            results=results,
            last_success_id=last_success.build_id if last_success else None,
            show_last_success=show_last_success,
            last_update=self._clock(),
        )


def projection_from_config(cfg: DashboardConfig) -> BuildProjection:
    """Build a projection using the configured status catalog and links.

    Raises ``StatusCatalogError`` if the configured catalog file is bad.
    """
    catalog = DEFAULT_STATUS_CATALOG
    if cfg.status_catalog_path is not None:
        catalog = StatusCatalog.from_file(cfg.status_catalog_path)
    return BuildProjection(catalog, link_prefix=cfg.task_link_prefix)


class LiveBoard:
    """Holds the last rendered build view.

    Each ``on_build_updated`` call runs a full projection over the new
    snapshot and replaces the held view unconditionally (last write wins).
    """

    def __init__(self, projection: BuildProjection | None = None) -> None:
        self._projection = projection or BuildProjection()
        self._view: BuildView | None = None

    @property
    def view(self) -> BuildView | None:
        """The most recently computed view, if any."""
        return self._view

    def on_build_updated(self, snapshot: BuildSnapshot) -> BuildView:
        """Recompute the view from *snapshot* and make it current."""
        view = self._projection.project(snapshot)
        if self._view is not None and self._view.build_id != view.build_id:
            logger.debug(
                "Board switched from build %s to %s",
                self._view.build_id,
                view.build_id,
            )
        self._view = view
        return view
