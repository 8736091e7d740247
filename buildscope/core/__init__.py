"""Build timeline aggregation engine — pure functions over snapshots.

classifier
    ``classify`` maps a task to its display class, tooltip and link.
durations
    ``estimate_duration`` measures each task, live for in-flight tasks.
summarizer
    ``summarize`` reduces a build to max duration, makespan and total
    processing time; ``count_results`` tallies outcomes.
status_catalog
    The injected status -> (category, label) table.
"""

from buildscope.core.classifier import classify, task_link
from buildscope.core.durations import build_time_taken, estimate_duration
from buildscope.core.status_catalog import (
    DEFAULT_STATUS_CATALOG,
    StatusCatalog,
    StatusCatalogError,
    outcome_status,
    result_status,
)
from buildscope.core.summarizer import count_results, summarize

__all__ = [
    "classify",
    "task_link",
    "estimate_duration",
    "build_time_taken",
    "summarize",
    "count_results",
    "result_status",
    "outcome_status",
    "StatusCatalog",
    "StatusCatalogError",
    "DEFAULT_STATUS_CATALOG",
]
