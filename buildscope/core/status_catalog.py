"""Status vocabulary — injected status -> (category, label) table.

The table is a total mapping: any status it does not know resolves to
the catalog's ``default`` entry (``unknown``), so classification never
fails.  Deployments may override entries from a JSON file; see
``StatusCatalog.from_file``.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import BaseModel, ConfigDict, ValidationError

from buildscope.models.display import DisplayCategory, StatusEntry
from buildscope.models.tasks import Task, TaskStatus

logger = logging.getLogger(__name__)


class StatusCatalogError(ValueError):
    """Raised when a status catalog override file cannot be used."""


class StatusCatalog(BaseModel):
    """Total mapping from task status to display category and label."""

    model_config = ConfigDict(frozen=True)

    entries: dict[str, StatusEntry] = {}
    default: StatusEntry = StatusEntry(
        category=DisplayCategory.UNKNOWN, label="Unknown"
    )

    def lookup(self, status: str) -> StatusEntry:
        """Return the entry for *status*, or the default entry."""
        return self.entries.get(status, self.default)

    def merged(self, overrides: dict[str, StatusEntry]) -> StatusCatalog:
        """Return a new catalog with *overrides* layered on top."""
        return StatusCatalog(
            entries={**self.entries, **overrides},
            default=self.default,
        )

    @classmethod
    def from_file(
        cls, path: Path, base: StatusCatalog | None = None
    ) -> StatusCatalog:
        """Load ``{status: {"category": ..., "label": ...}}`` overrides.

        Entries are merged over *base* (the default catalog when omitted).

        Raises
        ------
        StatusCatalogError
            If the file is unreadable, not JSON, or an entry is invalid.
        """
        base = base or DEFAULT_STATUS_CATALOG
        try:
            raw = json.loads(Path(path).read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise StatusCatalogError(
                f"Cannot read status catalog '{path}': {exc}"
            ) from exc

        if not isinstance(raw, dict):
            raise StatusCatalogError(
                f"Status catalog '{path}' must be a JSON object"
            )

        try:
            overrides = {
                status: StatusEntry.model_validate(entry)
                for status, entry in raw.items()
            }
        except ValidationError as exc:
            raise StatusCatalogError(
                f"Invalid entry in status catalog '{path}': {exc}"
            ) from exc

        logger.info("Loaded %d status overrides from %s", len(overrides), path)
        return base.merged(overrides)


def _entry(category: DisplayCategory, label: str) -> StatusEntry:
    return StatusEntry(category=category, label=label)


DEFAULT_STATUS_CATALOG = StatusCatalog(
    entries={
        TaskStatus.SUCCEEDED.value: _entry(DisplayCategory.SUCCESS, "Succeeded"),
        "success": _entry(DisplayCategory.SUCCESS, "Succeeded"),
        TaskStatus.FAILED.value: _entry(DisplayCategory.FAILED, "Failed"),
        TaskStatus.SYSTEM_FAILED.value: _entry(
            DisplayCategory.SYSTEM_FAILED, "System Failed"
        ),
        TaskStatus.SYSTEM_UNRESPONSIVE.value: _entry(
            DisplayCategory.SYSTEM_FAILED, "System Unresponsive"
        ),
        TaskStatus.SYSTEM_TIMED_OUT.value: _entry(
            DisplayCategory.SYSTEM_FAILED, "System Timed Out"
        ),
        TaskStatus.TEST_TIMED_OUT.value: _entry(
            DisplayCategory.TIMED_OUT, "Test Timed Out"
        ),
        TaskStatus.SETUP_FAILED.value: _entry(
            DisplayCategory.SETUP_FAILED, "Setup Failed"
        ),
        TaskStatus.STARTED.value: _entry(DisplayCategory.STARTED, "Started"),
        TaskStatus.DISPATCHED.value: _entry(DisplayCategory.DISPATCHED, "Dispatched"),
        TaskStatus.UNDISPATCHED.value: _entry(
            DisplayCategory.UNDISPATCHED, "Scheduled"
        ),
        TaskStatus.UNSTARTED.value: _entry(DisplayCategory.UNDISPATCHED, "Not Started"),
        TaskStatus.UNSCHEDULED.value: _entry(
            DisplayCategory.UNSCHEDULED, "Unscheduled"
        ),
        TaskStatus.INACTIVE.value: _entry(DisplayCategory.UNSCHEDULED, "Inactive"),
    }
)


def _refine_failure(task: Task) -> str:
    details = task.details
    if details is None:
        return TaskStatus.FAILED.value

    if details.type == "system":
        if not details.timed_out:
            return TaskStatus.SYSTEM_FAILED.value
        if details.description == "heartbeat":
            return TaskStatus.SYSTEM_UNRESPONSIVE.value
        if task.has_failed_tests:
            return TaskStatus.FAILED.value
        return TaskStatus.SYSTEM_TIMED_OUT.value

    if details.timed_out:
        return TaskStatus.TEST_TIMED_OUT.value
    return TaskStatus.FAILED.value


def result_status(task: Task) -> str:
    """Return the status to display for *task*.

    Inactive tasks are always ``unscheduled``.  Failures are refined by
    the task's end details: system failures, heartbeat loss, and timeouts
    each get their own status.  Everything else is the raw status.
    """
    if not task.activated:
        return TaskStatus.UNSCHEDULED.value
    if task.status == TaskStatus.FAILED.value:
        return _refine_failure(task)
    return task.status


def outcome_status(task: Task) -> str:
    """Return the status *task* is counted under.

    Unlike ``result_status`` a deactivated task keeps its real outcome;
    only a task that was never dispatched is split into ``inactive`` or
    ``unstarted`` by its activation.
    """
    if task.status == TaskStatus.UNDISPATCHED.value:
        if not task.activated:
            return TaskStatus.INACTIVE.value
        return TaskStatus.UNSTARTED.value
    if task.status == TaskStatus.FAILED.value:
        return _refine_failure(task)
    return task.status
