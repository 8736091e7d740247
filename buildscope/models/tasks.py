"""Build and task input records — read-only snapshots of build state.

A ``BuildSnapshot`` is the unit of aggregation.  It is parsed once from an
external record and never mutated; every derived value is computed from it
by the engine in ``buildscope.core``.

Timestamps are timezone-aware UTC datetimes.  An unset timestamp is the
epoch instant (``EPOCH``), never ``None``, so that every timestamp can be
compared and subtracted without special cases.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


class TaskStatus(str, Enum):
    """Known task status vocabulary.

    ``Task.status`` is a plain string so that statuses outside this
    vocabulary still parse; they classify as ``unknown``.
    """

    UNDISPATCHED = "undispatched"
    UNSTARTED = "unstarted"
    DISPATCHED = "dispatched"
    STARTED = "started"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    SYSTEM_FAILED = "system-failed"
    SYSTEM_UNRESPONSIVE = "system-unresponsive"
    SYSTEM_TIMED_OUT = "system-timed-out"
    TEST_TIMED_OUT = "test-timed-out"
    SETUP_FAILED = "setup-failed"
    UNSCHEDULED = "unscheduled"
    INACTIVE = "inactive"


# Statuses whose duration is measured against the live clock.
IN_FLIGHT_STATUSES: frozenset[str] = frozenset(
    {TaskStatus.STARTED.value, TaskStatus.DISPATCHED.value}
)


def _normalise_timestamp(value: Any) -> Any:
    if value is None or value == "":
        return EPOCH
    return value


def _ensure_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class _Record(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class TaskEndDetails(_Record):
    """How a task ended, as reported by the agent that ran it."""

    type: str = ""  # "system", "setup", "test" or empty
    timed_out: bool = False
    description: str = ""


class Task(_Record):
    """A single task within a build."""

    id: str
    display_name: str = ""
    status: str = TaskStatus.UNDISPATCHED.value
    activated: bool = True
    start_time: datetime = EPOCH
    finish_time: datetime = EPOCH
    time_taken_nanos: int = Field(default=0, alias="timeTaken")
    details: TaskEndDetails | None = None
    has_failed_tests: bool = False

    @field_validator("start_time", "finish_time", mode="before")
    @classmethod
    def normalise_unset(cls, value: Any) -> Any:
        return _normalise_timestamp(value)

    @field_validator("start_time", "finish_time", mode="after")
    @classmethod
    def ensure_utc(cls, value: datetime) -> datetime:
        return _ensure_utc(value)


class BuildSnapshot(_Record):
    """One immutable copy of build and task state at a point in time.

    ``current_time`` is the reference clock for in-flight task estimates.
    It is ``EPOCH`` when the source did not provide one, in which case
    running tasks fall back to their reported duration.
    """

    build_id: str
    display_name: str = ""
    tasks: list[Task] = []
    current_time: datetime = EPOCH
    start_time: datetime = EPOCH
    finish_time: datetime = EPOCH

    @field_validator("current_time", "start_time", "finish_time", mode="before")
    @classmethod
    def normalise_unset(cls, value: Any) -> Any:
        return _normalise_timestamp(value)

    @field_validator("current_time", "start_time", "finish_time", mode="after")
    @classmethod
    def ensure_utc(cls, value: datetime) -> datetime:
        return _ensure_utc(value)


class BuildHistory(_Record):
    """Recent builds of one variant plus its last successful build."""

    builds: list[BuildSnapshot] = []
    last_success: BuildSnapshot | None = None
