"""Snapshot sources — turn external build records into ``BuildSnapshot``.

Two record shapes are accepted:

Native shape
    ``{"buildId", "currentTime", "tasks": [{"id", "displayName", ...}]}``
    (snake_case keys work too).
REST shape
    ``{"Build": {"_id", "start_time", "finish_time"}, "Tasks": [{"Task":
    {...}}], "CurrentTime": <epoch nanos>}`` as served by the build page.
    Build-level times are epoch milliseconds.  A history entry may carry
    its tasks inline under ``Build.tasks`` instead.

Loading is the only place in the package that can fail on bad input;
every failure surfaces as ``SnapshotLoadError``.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from buildscope.models.tasks import EPOCH, BuildHistory, BuildSnapshot

logger = logging.getLogger(__name__)


class SnapshotLoadError(ValueError):
    """Raised when a build record cannot be read or validated."""


# ---------------------------------------------------------------------------
# REST shape helpers
# ---------------------------------------------------------------------------


def _from_millis(value: Any) -> Any:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return EPOCH + timedelta(milliseconds=value)
    return value


def _from_nanos(value: Any) -> Any:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return EPOCH + timedelta(microseconds=int(value) // 1000)
    return value


def _rest_task(raw: dict[str, Any]) -> dict[str, Any]:
    task = raw.get("Task", raw)
    if not isinstance(task, dict):
        raise SnapshotLoadError(f"Task entry must be a JSON object, got {task!r}")
    task = dict(task)
    if "id" not in task and "_id" in task:
        task["id"] = task.pop("_id")
    if "time_taken" in task:
        task["time_taken_nanos"] = task.pop("time_taken")
    details = task.pop("task_end_details", None) or task.get("details")
    if details:
        if not isinstance(details, dict):
            raise SnapshotLoadError(
                f"Task {task.get('id', '')!r} end details must be a JSON object"
            )
        details = dict(details)
        if "desc" in details:
            details["description"] = details.pop("desc")
        task["details"] = details
    else:
        task.pop("details", None)
    return task


def _rest_build(record: dict[str, Any]) -> dict[str, Any]:
    build = record["Build"]
    raw_tasks = record.get("Tasks") or build.get("tasks") or []
    return {
        "build_id": build.get("_id", build.get("id", "")),
        "display_name": build.get("display_name", ""),
        "start_time": _from_millis(build.get("start_time")),
        "finish_time": _from_millis(build.get("finish_time")),
        "current_time": _from_nanos(record.get("CurrentTime")),
        "tasks": [_rest_task(t) for t in raw_tasks],
    }


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


def parse_snapshot(
    record: dict[str, Any], *, current_time: datetime | None = None
) -> BuildSnapshot:
    """Validate a build record of either shape.

    Parameters
    ----------
    record:
        Decoded JSON object.
    current_time:
        When given, replaces the record's own current time (e.g. to drive
        in-flight estimates from the local clock).
    """
    if not isinstance(record, dict):
        raise SnapshotLoadError("Build record must be a JSON object")

    try:
        data = _rest_build(record) if "Build" in record else dict(record)
    except SnapshotLoadError:
        raise
    except (AttributeError, KeyError, TypeError, ValueError, OverflowError) as exc:
        raise SnapshotLoadError(f"Malformed build record: {exc}") from exc

    if current_time is not None:
        data.pop("currentTime", None)
        data["current_time"] = current_time

    try:
        return BuildSnapshot.model_validate(data)
    except ValidationError as exc:
        raise SnapshotLoadError(f"Invalid build record: {exc}") from exc


def parse_history(record: dict[str, Any]) -> BuildHistory:
    """Validate a build history record: ``{"builds": [...], "lastSuccess"}``."""
    if not isinstance(record, dict):
        raise SnapshotLoadError("History record must be a JSON object")

    raw_builds = record.get("builds") or []
    if not isinstance(raw_builds, list):
        raise SnapshotLoadError("History 'builds' must be a JSON array")

    builds = [parse_snapshot(b) for b in raw_builds]
    raw_last = record.get("lastSuccess", record.get("last_success"))
    last_success = parse_snapshot(raw_last) if raw_last else None
    return BuildHistory(builds=builds, last_success=last_success)


# ---------------------------------------------------------------------------
# File loading
# ---------------------------------------------------------------------------


def _read_json(path: Path) -> Any:
    try:
        return json.loads(Path(path).read_text(encoding="utf-8"))
    except OSError as exc:
        raise SnapshotLoadError(f"Cannot read '{path}': {exc}") from exc
    except json.JSONDecodeError as exc:
        raise SnapshotLoadError(f"'{path}' is not valid JSON: {exc}") from exc


def load_snapshot(
    path: Path, *, current_time: datetime | None = None
) -> BuildSnapshot:
    """Read and validate a build record from a JSON file."""
    logger.debug("Loading build snapshot from %s", path)
    return parse_snapshot(_read_json(path), current_time=current_time)


def load_history(path: Path) -> BuildHistory:
    """Read and validate a build history record from a JSON file."""
    logger.debug("Loading build history from %s", path)
    return parse_history(_read_json(path))
