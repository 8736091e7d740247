"""Task Classifier — maps a task to its display class, tooltip and link."""

from __future__ import annotations

from buildscope.core.status_catalog import (
    DEFAULT_STATUS_CATALOG,
    StatusCatalog,
    result_status,
)
from buildscope.models.display import TaskDisplay
from buildscope.models.tasks import Task

DEFAULT_LINK_PREFIX = "/task/"


def task_link(task_id: str, prefix: str = DEFAULT_LINK_PREFIX) -> str:
    """Stable link to a task page.  No existence check is made."""
    return prefix + task_id


def classify(
    task: Task,
    catalog: StatusCatalog = DEFAULT_STATUS_CATALOG,
    *,
    link_prefix: str = DEFAULT_LINK_PREFIX,
    estimated_duration_nanos: int = 0,
) -> TaskDisplay:
    """Classify a single task for display.

    Total over any ``Task``: unknown statuses fall back to the catalog's
    default entry, and an inactive task is ``unscheduled`` whatever its
    raw status says.

    Parameters
    ----------
    task:
        The task to classify.
    catalog:
        Status -> (category, label) table.
    link_prefix:
        Prefix joined with the task id to build ``TaskDisplay.link``.
    estimated_duration_nanos:
        Duration to surface on the display; negative values become 0.
    """
    status = result_status(task)
    entry = catalog.lookup(status)

    return TaskDisplay(
        task_id=task.id,
        display_name=task.display_name,
        status=status,
        classification=entry.category,
        label=entry.label,
        tooltip=f"{task.display_name} - {entry.label}",
        link=task_link(task.id, link_prefix),
        hidden=not task.activated,
        estimated_duration_nanos=max(estimated_duration_nanos, 0),
    )
