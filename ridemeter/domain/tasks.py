"""
Errand task decoding and task state helpers.

Task lists reach the engine either as a native sequence or as the JSON
string the booking flow persisted.  ``parse_errand_tasks`` is the only
place that decodes them; everything downstream works with ``ErrandTask``.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Optional

from .coercion import to_optional_float, to_optional_int, to_optional_str
from .entities import ErrandTask
from .enums import TASK_STATE_SEQUENCE, TaskState

logger = logging.getLogger(__name__)

_STATE_ALIASES: dict[str, TaskState] = {
    "complete_task": TaskState.COMPLETED,
    "completed_task": TaskState.COMPLETED,
    "in_progress": TaskState.STARTED,
    "task_started": TaskState.STARTED,
    "task_activated": TaskState.ACTIVATED,
    "driver_en_route": TaskState.DRIVER_ON_WAY,
}

_STATE_DESCRIPTIONS: dict[TaskState, str] = {
    TaskState.PENDING: "Awaiting activation",
    TaskState.ACTIVATED: "Task activated",
    TaskState.DRIVER_ON_WAY: "Driver en route to task",
    TaskState.DRIVER_ARRIVED: "Driver arrived",
    TaskState.STARTED: "Task in progress",
    TaskState.COMPLETED: "Task completed",
}

_TITLE_KEYS = ("title", "label", "description", "name")


@dataclass(frozen=True)
class TaskSummary:
    tasks: tuple[ErrandTask, ...]
    total: int
    completed: int
    remaining: int
    active_task_index: Optional[int]
    active_task: Optional[ErrandTask]


def normalize_task_state(state: Any) -> TaskState:
    if isinstance(state, TaskState):
        return state
    if not state:
        return TaskState.PENDING
    key = str(state).strip().lower()
    try:
        return TaskState(key)
    except ValueError:
        return _STATE_ALIASES.get(key, TaskState.PENDING)


def _coerce_task_list(raw: Any) -> list[Any]:
    if raw is None or raw == "":
        return []
    if isinstance(raw, (str, bytes)):
        try:
            raw = json.loads(raw)
        except (ValueError, RecursionError) as exc:
            logger.warning("Unable to parse errand tasks JSON: %s", exc)
            return []
    if isinstance(raw, Mapping):
        inner = raw.get("tasks")
        if isinstance(inner, Sequence) and not isinstance(inner, (str, bytes)):
            return list(inner)
        return [value for value in raw.values() if isinstance(value, Mapping)]
    if isinstance(raw, Sequence) and not isinstance(raw, (str, bytes)):
        return list(raw)
    return []


def normalize_task(task: Any, index: int) -> ErrandTask:
    if isinstance(task, ErrandTask):
        return task
    data: Mapping[str, Any] = task if isinstance(task, Mapping) else {}

    title = next(
        (str(data[k]) for k in _TITLE_KEYS if data.get(k)),
        f"Task {index + 1}",
    )
    order = to_optional_int(data.get("order", data.get("order_index", data.get("orderIndex"))))
    return ErrandTask(
        id=to_optional_str(data.get("id")) or f"{index + 1}",
        order=order if order is not None and order >= 0 else index,
        title=title,
        description=str(data.get("description") or ""),
        cost=to_optional_float(data.get("cost")),
        state=normalize_task_state(data.get("state")),
    )


def parse_errand_tasks(raw: Any) -> list[ErrandTask]:
    """
    Decode *raw* into an ordered list of tasks.

    Accepts a list, a JSON string, or an object wrapping ``{"tasks": [...]}``.
    Malformed input yields an empty list; this function never raises.
    """
    items = _coerce_task_list(raw)
    tasks = [normalize_task(item, i) for i, item in enumerate(items)]
    return sorted(tasks, key=lambda t: t.order)


def next_task_state(state: Any) -> TaskState:
    """Advance one step along the task state sequence, saturating at COMPLETED."""
    idx = TASK_STATE_SEQUENCE.index(normalize_task_state(state))
    return TASK_STATE_SEQUENCE[min(idx + 1, len(TASK_STATE_SEQUENCE) - 1)]


def describe_task_state(state: Any) -> str:
    return _STATE_DESCRIPTIONS[normalize_task_state(state)]


def summarize_errand_tasks(raw: Any) -> TaskSummary:
    tasks = tuple(parse_errand_tasks(raw))
    completed = sum(1 for t in tasks if t.is_completed)
    active_idx = next((i for i, t in enumerate(tasks) if not t.is_completed), None)
    return TaskSummary(
        tasks=tasks,
        total=len(tasks),
        completed=completed,
        remaining=max(len(tasks) - completed, 0),
        active_task_index=active_idx,
        active_task=tasks[active_idx] if active_idx is not None else None,
    )
