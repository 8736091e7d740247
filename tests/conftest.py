"""Shared test fixtures for buildscope."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from typing import Any

import pytest

from buildscope.models.tasks import BuildSnapshot, Task
from buildscope.monitor.projection import BuildProjection

T0 = datetime(2026, 3, 2, 9, 0, 0, tzinfo=timezone.utc)
FIXED_NOW = datetime(2026, 3, 2, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def ms() -> Callable[[int], timedelta]:
    """Shorthand for a millisecond offset."""
    return lambda n: timedelta(milliseconds=n)


@pytest.fixture
def t0() -> datetime:
    """A fixed reference instant for task timestamps."""
    return T0


@pytest.fixture
def fixed_now() -> datetime:
    """The time stamped on views built by the ``projection`` fixture."""
    return FIXED_NOW


@pytest.fixture
def projection() -> BuildProjection:
    """A projection whose views are stamped with a fixed time."""
    return BuildProjection(clock=lambda: FIXED_NOW)


# ---------------------------------------------------------------------------
# Record factories shared across test modules
# ---------------------------------------------------------------------------


@pytest.fixture
def make_task() -> Callable[..., Task]:
    """Factory fixture: build a Task with sensible defaults."""
    counter = iter(range(1, 10_000))

    def _factory(
        status: str = "succeeded",
        start_time: datetime | None = None,
        finish_time: datetime | None = None,
        **overrides: Any,
    ) -> Task:
        n = next(counter)
        defaults: dict[str, Any] = {
            "id": f"task-{n}",
            "display_name": f"compile-{n}",
            "status": status,
            "start_time": start_time,
            "finish_time": finish_time,
        }
        defaults.update(overrides)
        return Task(**defaults)

    return _factory


@pytest.fixture
def make_snapshot() -> Callable[..., BuildSnapshot]:
    """Factory fixture: build a BuildSnapshot with sensible defaults."""

    def _factory(
        tasks: list[Task] | None = None,
        current_time: datetime | None = None,
        **overrides: Any,
    ) -> BuildSnapshot:
        defaults: dict[str, Any] = {
            "build_id": "build-001",
            "tasks": tasks or [],
            "current_time": current_time,
        }
        defaults.update(overrides)
        return BuildSnapshot(**defaults)

    return _factory
