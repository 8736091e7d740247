"""Duration Estimator — elapsed time per task, in nanoseconds.

In-flight tasks are measured against the snapshot's current time so a
running task's bar grows between refreshes.  Every other task uses its
wall-clock start/finish delta, which includes scheduling time for display
tasks.  The wall-clock delta is computed even when a bound is unset; the
summarizer is responsible for filtering such values.
"""

from __future__ import annotations

from datetime import datetime, timedelta

from buildscope.models.tasks import EPOCH, IN_FLIGHT_STATUSES, Task

_ONE_MICROSECOND = timedelta(microseconds=1)


def is_set(timestamp: datetime) -> bool:
    """Whether *timestamp* has been reached (is not the epoch instant)."""
    return timestamp != EPOCH


def to_nanos(delta: timedelta) -> int:
    """Convert a timedelta to integer nanoseconds."""
    return (delta // _ONE_MICROSECOND) * 1000


def estimate_duration(task: Task, current_time: datetime) -> int:
    """Estimate how long *task* has taken so far.

    Returns
    -------
    int
        Nanoseconds.  For an in-flight task without a usable clock or
        start time this is the task's reported ``time_taken_nanos``.  For
        other tasks it is ``finish - start`` and may be negative or
        anomalously large when a bound is unset.
    """
    if task.status in IN_FLIGHT_STATUSES:
        if is_set(current_time) and is_set(task.start_time):
            return to_nanos(current_time - task.start_time)
        return task.time_taken_nanos

    return to_nanos(task.finish_time - task.start_time)


def display_duration(task: Task, estimate: int) -> int:
    """The duration to show on a task's display, 0 when unknowable."""
    if task.status in IN_FLIGHT_STATUSES:
        return max(estimate, 0)
    if not (is_set(task.start_time) and is_set(task.finish_time)):
        return 0
    return max(estimate, 0)


def build_time_taken(
    start_time: datetime, finish_time: datetime, current_time: datetime
) -> int:
    """Build-level elapsed time: finished span, or running time so far."""
    if not is_set(start_time):
        return 0
    if is_set(finish_time):
        end = finish_time
    elif is_set(current_time):
        end = current_time
    else:
        return 0
    return max(to_nanos(end - start_time), 0)
