"""
Shared test fixtures.

Rides are built as plain backend-style rows (dicts) so every test also
exercises the alias handling in ``ride_from_row``.
"""

from typing import Any

import pytest

from ridemeter.config import Settings


def make_row(**overrides: Any) -> dict[str, Any]:
    """A pending single taxi ride; keyword arguments override fields."""
    row: dict[str, Any] = {
        "id": "ride-1",
        "service_type": "taxi",
        "ride_status": "pending",
        "estimated_cost": 20.0,
        "number_of_trips": 1,
        "completed_rides_count": 0,
        "is_round_trip": False,
    }
    row.update(overrides)
    return row


def make_tasks(count: int, completed: int = 0, cost: Any = None) -> list[dict[str, Any]]:
    tasks = []
    for i in range(count):
        task: dict[str, Any] = {
            "id": f"t{i + 1}",
            "order": i,
            "title": f"Stop {i + 1}",
            "state": "completed" if i < completed else "pending",
        }
        if cost is not None:
            task["cost"] = cost
        tasks.append(task)
    return tasks


# ── Fixtures ──────────────────────────────────────────────────────────


@pytest.fixture
def config() -> Settings:
    """Defaults only, independent of any .env or RIDEMETER_* variables."""
    return Settings(_env_file=None)


@pytest.fixture
def row():
    return make_row


@pytest.fixture
def tasks():
    return make_tasks
