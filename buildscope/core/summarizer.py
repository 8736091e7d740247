"""Build Summarizer — whole-build timing and outcome reductions."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from buildscope.core.durations import is_set, to_nanos
from buildscope.core.status_catalog import outcome_status
from buildscope.models.display import BuildSummary, ResultCounts
from buildscope.models.tasks import EPOCH, Task, TaskStatus


def summarize(
    tasks: Sequence[Task], estimated_durations: Iterable[int]
) -> BuildSummary:
    """Reduce a build's tasks to max duration, makespan and processing time.

    Parameters
    ----------
    tasks:
        Every task of the build, in any order.
    estimated_durations:
        Per-task estimates from ``estimate_duration``.  Only their maximum
        is used.

    Returns
    -------
    BuildSummary
        ``max_task_duration_nanos`` is at least 1.  ``makespan_nanos``
        runs from the earliest start to the latest finish, ignoring unset
        timestamps.  ``total_processing_nanos`` sums the spans of tasks
        that have both started and finished.
    """
    # Initialize to 1 so consumers never divide by zero
    max_task = 1
    for duration in estimated_durations:
        if duration > max_task:
            max_task = duration

    starts = [t for t in sorted(task.start_time for task in tasks) if is_set(t)]
    finishes = [t for t in sorted(task.finish_time for task in tasks) if is_set(t)]
    if not starts or not finishes:
        makespan = 0
    else:
        makespan = max(to_nanos(finishes[-1] - starts[0]), 0)

    total = 0
    for task in tasks:
        if task.start_time > EPOCH and task.finish_time > EPOCH:
            total += max(to_nanos(task.finish_time - task.start_time), 0)

    return BuildSummary(
        max_task_duration_nanos=max_task,
        makespan_nanos=makespan,
        total_processing_nanos=total,
    )


_COUNT_FIELDS: dict[str, str] = {
    TaskStatus.UNSCHEDULED.value: "inactive",
    TaskStatus.INACTIVE.value: "inactive",
    TaskStatus.UNSTARTED.value: "unstarted",
    TaskStatus.UNDISPATCHED.value: "unstarted",
    TaskStatus.DISPATCHED.value: "dispatched",
    TaskStatus.STARTED.value: "started",
    TaskStatus.SUCCEEDED.value: "succeeded",
    "success": "succeeded",
    TaskStatus.FAILED.value: "failed",
    TaskStatus.SYSTEM_FAILED.value: "system_failed",
    TaskStatus.SYSTEM_UNRESPONSIVE.value: "system_unresponsive",
    TaskStatus.SYSTEM_TIMED_OUT.value: "system_timed_out",
    TaskStatus.TEST_TIMED_OUT.value: "test_timed_out",
}


def count_results(tasks: Iterable[Task]) -> ResultCounts:
    """Count task outcomes by ``outcome_status``.

    A deactivated task that already ran is counted under its outcome, not
    as inactive.  Statuses without a counter still count toward ``total``.
    """
    counts: dict[str, int] = {"total": 0}
    for task in tasks:
        counts["total"] += 1
        field = _COUNT_FIELDS.get(outcome_status(task))
        if field is not None:
            counts[field] = counts.get(field, 0) + 1
    return ResultCounts(**counts)
