"""
Ride Cost Engine  (Strategy Pattern)
====================================

One strategy per ``RideShape``; ``CostEngine`` classifies the record and
dispatches.

Formulas
--------
* simple                 total = estimated_cost
* round_trip             outbound = outbound_cost ?? total/2, return likewise
* recurring              per_unit = cost_per_trip ?? total/number_of_trips
                         remaining_cost = remaining_cost ?? per_unit x remaining
* recurring_round_trip   units are legs; occurrences = ceil(legs/2),
                         per_occurrence = 2 x per_leg, a half-done
                         occurrence counts as neither done nor remaining
* errand                 task cost = task.cost ?? total/task_count
* recurring_errand       as recurring, tasks priced off per_occurrence

Every entry point is total: missing fields default, nothing raises.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Any, Optional

from ridemeter.config import Settings, settings
from ridemeter.schemas import (
    CostBreakdown,
    ErrandCost,
    RecurringCost,
    RecurringErrandCost,
    RecurringRoundTripCost,
    RoundTripCost,
    SimpleCost,
    TaskCost,
)

from .adapters import ride_from_row
from .entities import ErrandTask, RideRecord
from .enums import RideShape
from .money import format_price, round_cents
from .round_trip import completed_occurrences, leg_in_progress, total_occurrences
from .shapes import classify

logger = logging.getLogger(__name__)


def calculate_per_trip_cost(ride: RideRecord) -> float:
    """Explicit ``cost_per_trip`` wins; else the total split across trips."""
    if ride.cost_per_trip is not None:
        return ride.cost_per_trip
    if ride.number_of_trips > 0:
        return ride.estimated_cost / ride.number_of_trips
    return ride.estimated_cost


def _price_tasks(
    tasks: Sequence[ErrandTask], base: float, currency: str
) -> tuple[list[TaskCost], float]:
    """Resolve each task's cost against an even split of *base*."""
    fallback = base / len(tasks) if tasks else 0.0
    priced = []
    for task in tasks:
        cost = task.cost if task.cost is not None else fallback
        priced.append(
            TaskCost(
                id=task.id,
                order=task.order,
                title=task.title,
                state=task.state,
                cost=cost,
                cost_display=format_price(cost, currency),
            )
        )
    return priced, sum(t.cost for t in priced)


# ── Strategy hierarchy ────────────────────────────────────────────────


class CostStrategy(ABC):
    @abstractmethod
    def calculate(self, ride: RideRecord, config: Settings) -> CostBreakdown: ...


class SimpleCostStrategy(CostStrategy):
    def calculate(self, ride: RideRecord, config: Settings) -> SimpleCost:
        total = ride.estimated_cost
        return SimpleCost(total=total, display=format_price(total, config.currency))


class RoundTripCostStrategy(CostStrategy):
    def calculate(self, ride: RideRecord, config: Settings) -> RoundTripCost:
        total = ride.estimated_cost
        outbound = ride.outbound_cost if ride.outbound_cost is not None else total / 2
        ret = ride.return_cost if ride.return_cost is not None else total / 2
        return RoundTripCost(
            total=total,
            display=format_price(total, config.currency),
            outbound_cost=outbound,
            return_cost=ret,
            outbound_display=format_price(outbound, config.currency),
            return_display=format_price(ret, config.currency),
        )


class RecurringCostStrategy(CostStrategy):
    def calculate(self, ride: RideRecord, config: Settings) -> RecurringCost:
        total = ride.estimated_cost
        per_trip = calculate_per_trip_cost(ride)
        remaining = max(ride.number_of_trips - ride.completed_count, 0)
        remaining_cost = (
            ride.remaining_cost if ride.remaining_cost is not None else per_trip * remaining
        )
        return RecurringCost(
            total=total,
            display=format_price(total, config.currency),
            per_unit=per_trip,
            total_units=ride.number_of_trips,
            completed=ride.completed_count,
            remaining=remaining,
            remaining_cost=remaining_cost,
            per_unit_display=format_price(per_trip, config.currency),
            remaining_cost_display=format_price(remaining_cost, config.currency),
        )


class RecurringRoundTripCostStrategy(CostStrategy):
    def calculate(self, ride: RideRecord, config: Settings) -> RecurringRoundTripCost:
        total = ride.estimated_cost
        total_legs = ride.number_of_trips
        completed_legs = ride.completed_count
        occurrences = total_occurrences(total_legs)
        if completed_legs >= total_legs:
            done, half_done = occurrences, 0
        else:
            done = completed_occurrences(completed_legs)
            half_done = 1 if leg_in_progress(completed_legs) else 0

        per_leg = calculate_per_trip_cost(ride)
        per_occurrence = per_leg * 2
        remaining = max(occurrences - done - half_done, 0)
        remaining_cost = (
            ride.remaining_cost
            if ride.remaining_cost is not None
            else per_occurrence * remaining
        )
        return RecurringRoundTripCost(
            total=total,
            display=format_price(total, config.currency),
            per_unit=per_occurrence,
            total_units=occurrences,
            completed=done,
            remaining=remaining,
            remaining_cost=remaining_cost,
            per_unit_display=format_price(per_occurrence, config.currency),
            remaining_cost_display=format_price(remaining_cost, config.currency),
            per_leg=per_leg,
            per_occurrence=per_occurrence,
            total_legs=total_legs,
            completed_legs=completed_legs,
            outbound_cost=per_leg,
            return_cost=per_leg,
            per_leg_display=format_price(per_leg, config.currency),
            per_occurrence_display=format_price(per_occurrence, config.currency),
        )


class ErrandCostStrategy(CostStrategy):
    def calculate(self, ride: RideRecord, config: Settings) -> ErrandCost:
        total = ride.estimated_cost
        tasks, task_sum = _price_tasks(ride.tasks, total, config.currency)
        discrepancy = round_cents(task_sum - total)
        balanced = abs(discrepancy) <= config.cost_tolerance
        if not balanced:
            logger.debug(
                "Errand %s task costs sum to %.2f, total is %.2f", ride.id, task_sum, total
            )
        return ErrandCost(
            total=total,
            display=format_price(total, config.currency),
            task_count=len(tasks),
            tasks=tasks,
            task_costs_total=task_sum,
            discrepancy=discrepancy,
            balanced=balanced,
        )


class RecurringErrandCostStrategy(CostStrategy):
    def calculate(self, ride: RideRecord, config: Settings) -> RecurringErrandCost:
        total = ride.estimated_cost
        per_occurrence = calculate_per_trip_cost(ride)
        remaining = max(ride.number_of_trips - ride.completed_count, 0)
        remaining_cost = (
            ride.remaining_cost
            if ride.remaining_cost is not None
            else per_occurrence * remaining
        )
        task_count = len(ride.tasks)
        cost_per_task = per_occurrence / task_count if task_count else 0.0
        tasks, task_sum = _price_tasks(ride.tasks, per_occurrence, config.currency)
        discrepancy = round_cents(task_sum - per_occurrence) if task_count else 0.0
        balanced = abs(discrepancy) <= config.cost_tolerance
        if not balanced:
            logger.debug(
                "Recurring errand %s task costs sum to %.2f, occurrence is %.2f",
                ride.id,
                task_sum,
                per_occurrence,
            )
        return RecurringErrandCost(
            total=total,
            display=format_price(total, config.currency),
            per_unit=per_occurrence,
            total_units=ride.number_of_trips,
            completed=ride.completed_count,
            remaining=remaining,
            remaining_cost=remaining_cost,
            per_unit_display=format_price(per_occurrence, config.currency),
            remaining_cost_display=format_price(remaining_cost, config.currency),
            per_occurrence=per_occurrence,
            cost_per_task=cost_per_task,
            task_count=task_count,
            tasks=tasks,
            task_costs_total=task_sum,
            discrepancy=discrepancy,
            balanced=balanced,
            per_occurrence_display=format_price(per_occurrence, config.currency),
            cost_per_task_display=format_price(cost_per_task, config.currency),
        )


COST_STRATEGIES: dict[RideShape, CostStrategy] = {
    RideShape.SIMPLE: SimpleCostStrategy(),
    RideShape.ROUND_TRIP: RoundTripCostStrategy(),
    RideShape.RECURRING: RecurringCostStrategy(),
    RideShape.RECURRING_ROUND_TRIP: RecurringRoundTripCostStrategy(),
    RideShape.ERRAND: ErrandCostStrategy(),
    RideShape.RECURRING_ERRAND: RecurringErrandCostStrategy(),
}


# ── Engine facade ─────────────────────────────────────────────────────


class CostEngine:
    """High-level API used by dashboard cards and booking summaries."""

    def __init__(self, config: Optional[Settings] = None):
        self.config = config or settings

    def breakdown(self, ride: Any) -> CostBreakdown:
        record = ride_from_row(ride)
        shape = classify(record, self.config)
        return COST_STRATEGIES[shape].calculate(record, self.config)

    def formatted(self, ride: Any) -> str:
        return self.breakdown(ride).display

    def breakdown_text(self, ride: Any) -> str:
        cost = self.breakdown(ride)
        if isinstance(cost, RoundTripCost):
            return f"Outbound: {cost.outbound_display} • Return: {cost.return_display}"
        if isinstance(cost, RecurringRoundTripCost):
            return (
                f"{cost.per_occurrence_display}/round trip × "
                f"{cost.total_units} occurrences"
            )
        if isinstance(cost, RecurringErrandCost):
            return (
                f"{cost.per_occurrence_display}/occurrence × "
                f"{cost.total_units} occurrences"
            )
        if isinstance(cost, RecurringCost):
            return f"{cost.per_unit_display}/trip × {cost.total_units} trips"
        if isinstance(cost, ErrandCost):
            return f"{cost.task_count} task{'s' if cost.task_count != 1 else ''}"
        return cost.display


def get_cost_breakdown(ride: Any, config: Optional[Settings] = None) -> CostBreakdown:
    return CostEngine(config).breakdown(ride)


def get_formatted_cost(ride: Any, config: Optional[Settings] = None) -> str:
    return CostEngine(config).formatted(ride)


def get_cost_breakdown_text(ride: Any, config: Optional[Settings] = None) -> str:
    return CostEngine(config).breakdown_text(ride)
