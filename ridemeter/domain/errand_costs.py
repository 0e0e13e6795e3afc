"""Distribution, totalling and validation of per-task errand costs."""

from __future__ import annotations

import dataclasses
from collections.abc import Sequence
from typing import Any, Optional

from ridemeter.config import settings
from ridemeter.schemas import CostValidation

from .adapters import ride_from_row
from .coercion import to_float
from .entities import ErrandTask
from .money import round_cents
from .service_types import get_behavior
from .tasks import parse_errand_tasks


def distribute_errand_costs(total_cost: Any, task_count: int) -> list[float]:
    """
    Split *total_cost* evenly across *task_count* tasks, in cents.

    The rounding remainder lands on the last task so the parts always sum
    to the (cent-rounded) total.
    """
    if not task_count or task_count <= 0:
        return []

    total = to_float(total_cost)
    share = round_cents(total / task_count)
    costs = [share] * task_count

    difference = round_cents(total - sum(costs))
    if difference:
        costs[-1] = round_cents(costs[-1] + difference)
    return costs


def add_costs_to_tasks(tasks: Sequence[ErrandTask], total_cost: Any) -> list[ErrandTask]:
    if not tasks:
        return []
    costs = distribute_errand_costs(total_cost, len(tasks))
    return [dataclasses.replace(task, cost=cost) for task, cost in zip(tasks, costs)]


def calculate_errand_total_cost(tasks: Sequence[ErrandTask]) -> float:
    return round_cents(sum(task.cost or 0.0 for task in tasks))


def calculate_cost_per_task(cost_per_occurrence: Any, task_count: int) -> float:
    if not task_count or task_count <= 0:
        return 0.0
    return round_cents(to_float(cost_per_occurrence) / task_count)


def validate_errand_costs(
    tasks: Any,
    expected_total: Any,
    tolerance: Optional[float] = None,
) -> CostValidation:
    """
    Check that explicit task costs reconcile with *expected_total*.

    Discrepancies are reported, never corrected.
    """
    if tolerance is None:
        tolerance = settings.cost_tolerance
    task_list = parse_errand_tasks(tasks)
    expected = to_float(expected_total)

    if not task_list:
        ok = expected == 0
        return CostValidation(
            is_valid=ok,
            actual_total=0.0,
            difference=abs(expected),
            errors=[] if ok else ["No tasks provided but expected cost is non-zero"],
        )

    errors: list[str] = []

    missing = sum(1 for task in task_list if task.cost is None)
    if missing:
        errors.append(f"{missing} task(s) missing cost property")

    actual = calculate_errand_total_cost(task_list)
    difference = round_cents(abs(actual - expected))
    if difference > tolerance:
        errors.append(
            f"Total cost mismatch: expected {expected:.2f}, got {actual:.2f} "
            f"(difference: {difference:.2f})"
        )

    negative = sum(1 for task in task_list if task.cost is not None and task.cost < 0)
    if negative:
        errors.append(f"{negative} task(s) have negative costs")

    return CostValidation(
        is_valid=not errors,
        actual_total=actual,
        difference=difference,
        errors=errors,
    )


def calculate_remaining_errand_cost(ride: Any) -> float:
    """Per-task share of the total multiplied by the tasks still open."""
    record = ride_from_row(ride)
    if not get_behavior(record.service_type).errand_semantics:
        return 0.0

    task_count = len(record.tasks)
    if task_count == 0:
        return 0.0

    done = record.tasks_done
    if done is None:
        done = sum(1 for task in record.tasks if task.is_completed)
    remaining_tasks = max(task_count - done, 0)
    return round_cents(record.estimated_cost / task_count * remaining_tasks)
