"""buildscope data models — all Pydantic v2, all frozen (immutable)."""

from buildscope.models.display import (
    BuildSummary,
    BuildView,
    DisplayCategory,
    HistoryView,
    ResultCounts,
    StatusEntry,
    TaskDisplay,
)
from buildscope.models.tasks import (
    EPOCH,
    IN_FLIGHT_STATUSES,
    BuildHistory,
    BuildSnapshot,
    Task,
    TaskEndDetails,
    TaskStatus,
)

__all__ = [
    # inputs
    "EPOCH",
    "IN_FLIGHT_STATUSES",
    "TaskStatus",
    "TaskEndDetails",
    "Task",
    "BuildSnapshot",
    "BuildHistory",
    # derived
    "DisplayCategory",
    "StatusEntry",
    "TaskDisplay",
    "BuildSummary",
    "ResultCounts",
    "BuildView",
    "HistoryView",
]
