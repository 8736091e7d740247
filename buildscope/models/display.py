"""Derived display records — produced fresh on every aggregation pass."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class DisplayCategory(str, Enum):
    """Display class shared by every task widget on the dashboard."""

    SUCCESS = "success"
    FAILED = "failed"
    SYSTEM_FAILED = "system-failed"
    TIMED_OUT = "timed-out"
    SETUP_FAILED = "setup-failed"
    STARTED = "started"
    DISPATCHED = "dispatched"
    UNDISPATCHED = "undispatched"
    UNSCHEDULED = "unscheduled"
    UNKNOWN = "unknown"


class StatusEntry(BaseModel):
    """Category and human label for one status value."""

    model_config = ConfigDict(frozen=True)

    category: DisplayCategory
    label: str


class TaskDisplay(BaseModel):
    """Per-task rendering data."""

    model_config = ConfigDict(frozen=True)

    task_id: str
    display_name: str
    status: str
    classification: DisplayCategory
    label: str
    tooltip: str
    link: str
    hidden: bool = False
    estimated_duration_nanos: int = Field(default=0, ge=0)


class BuildSummary(BaseModel):
    """Whole-build timing reduction.

    ``max_task_duration_nanos`` is floored at 1 so consumers can always
    divide by it.
    """

    model_config = ConfigDict(frozen=True)

    max_task_duration_nanos: int = Field(default=1, ge=1)
    makespan_nanos: int = Field(default=0, ge=0)
    total_processing_nanos: int = Field(default=0, ge=0)


class ResultCounts(BaseModel):
    """Task outcome counters for a build, bucketed by display status."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    total: int = 0
    inactive: int = 0
    unstarted: int = 0
    dispatched: int = 0
    started: int = 0
    succeeded: int = 0
    failed: int = 0
    system_failed: int = Field(default=0, alias="system-failed")
    system_unresponsive: int = Field(default=0, alias="system-unresponsive")
    system_timed_out: int = Field(default=0, alias="system-timed-out")
    test_timed_out: int = Field(default=0, alias="test-timed-out")

    @property
    def loggable(self) -> bool:
        """Whether there is anything worth logging."""
        return self.total > 0

    def __str__(self) -> str:
        if not self.loggable:
            return ""
        return self.model_dump_json(by_alias=True)


class BuildView(BaseModel):
    """Everything the rendering layer needs for one build page.

    Computed wholesale from a single ``BuildSnapshot``; never patched.
    """

    model_config = ConfigDict(frozen=True)

    build_id: str
    display_name: str = ""
    tasks: list[TaskDisplay] = []
    summary: BuildSummary = BuildSummary()
    counts: ResultCounts = ResultCounts()
    build_time_taken_nanos: int = Field(default=0, ge=0)
    last_update: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )

    @property
    def tasks_by_id(self) -> dict[str, TaskDisplay]:
        """Task displays keyed by task identifier."""
        return {t.task_id: t for t in self.tasks}

    def timeline_fraction(self, task: TaskDisplay) -> float:
        """Share of the longest task's duration, clamped to [0, 1]."""
        fraction = task.estimated_duration_nanos / self.summary.max_task_duration_nanos
        return min(max(fraction, 0.0), 1.0)


class HistoryView(BaseModel):
    """Task result strips for a variant's recent builds."""

    model_config = ConfigDict(frozen=True)

    build_ids: list[str] = []
    results: dict[str, list[TaskDisplay]] = {}
    last_success_id: str | None = None
    show_last_success: bool = False
    last_update: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )
