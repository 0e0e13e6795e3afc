"""
Ride Progress Engine  (Strategy Pattern)
========================================

Mirrors the cost engine: classify once, then dispatch to the strategy for
the ride's shape.  Every strategy reports ``completed / total / remaining``
and an integer ``percentage`` in ``[0, 100]`` that only reaches 100 when
nothing remains and no leg is in flight.

Recurring round trips
---------------------
``completed_count`` counts legs.  Parity decides the active leg:

    completed_occurrences = completed_legs // 2
    in_progress           = completed_legs is odd
    current_occurrence    = completed_occurrences + in_progress
    current_leg           = return | outbound | completed

When every leg is done the series is terminal: ``current_occurrence`` is
``None`` and ``current_leg`` is ``completed``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Optional

from ridemeter.config import Settings, settings
from ridemeter.schemas import (
    ErrandProgress,
    ProgressState,
    RecurringErrandProgress,
    RecurringProgress,
    RecurringRoundTripProgress,
    RoundTripProgress,
    SimpleProgress,
    TaskProgress,
    TaskStatus,
)

from .adapters import ride_from_row
from .coercion import percentage
from .entities import RideRecord
from .enums import RideShape, RideStatus, TripLeg
from .round_trip import (
    completed_occurrences,
    get_active_leg,
    leg_in_progress,
    occurrence_states,
    round_trip_percentage,
    total_occurrences,
)
from .shapes import classify

_LEGS_DONE: dict[TripLeg, int] = {
    TripLeg.OUTBOUND: 0,
    TripLeg.RETURN: 1,
    TripLeg.COMPLETED: 2,
}


def _recurring_counts(ride: RideRecord) -> tuple[int, int, int, int]:
    total = ride.number_of_trips
    completed = min(ride.completed_count, total)
    remaining = max(total - completed, 0)
    return completed, total, remaining, percentage(completed, total)


def task_progress(ride: RideRecord) -> TaskProgress:
    """Task-level progress for the ride's current task set."""
    tasks = ride.tasks
    completed_by_state = sum(1 for t in tasks if t.is_completed)

    total = ride.tasks_total if ride.tasks_total is not None else len(tasks)
    if ride.tasks_done is not None:
        completed = ride.tasks_done
    elif ride.tasks_left is not None:
        completed = total - ride.tasks_left
    else:
        completed = completed_by_state
    completed = max(min(completed, total), 0)
    remaining = total - completed

    if ride.active_task_index is not None:
        active = ride.active_task_index
    else:
        active = next((i for i, t in enumerate(tasks) if not t.is_completed), len(tasks))

    statuses = [
        TaskStatus(
            id=task.id,
            order=task.order,
            title=task.title,
            state=task.state,
            is_completed=index < completed,
            is_active=index == active,
            is_pending=index > active,
        )
        for index, task in enumerate(tasks)
    ]
    return TaskProgress(
        completed=completed,
        total=total,
        remaining=remaining,
        percentage=percentage(completed, total),
        active_task_index=active,
        tasks=statuses,
    )


# ── Strategy hierarchy ────────────────────────────────────────────────


class ProgressStrategy(ABC):
    @abstractmethod
    def calculate(self, ride: RideRecord) -> ProgressState: ...


class SimpleProgressStrategy(ProgressStrategy):
    def calculate(self, ride: RideRecord) -> SimpleProgress:
        done = 1 if ride.status == RideStatus.TRIP_COMPLETED else 0
        return SimpleProgress(
            completed=done,
            total=1,
            remaining=1 - done,
            percentage=done * 100,
            status=ride.status,
        )


class RoundTripProgressStrategy(ProgressStrategy):
    def calculate(self, ride: RideRecord) -> RoundTripProgress:
        leg = get_active_leg(ride) or TripLeg.OUTBOUND
        done = _LEGS_DONE[leg]
        return RoundTripProgress(
            completed=done,
            total=2,
            remaining=2 - done,
            percentage=round_trip_percentage(ride),
            in_progress=leg == TripLeg.RETURN,
            status=ride.status,
            current_leg=leg,
        )


class RecurringProgressStrategy(ProgressStrategy):
    def calculate(self, ride: RideRecord) -> RecurringProgress:
        completed, total, remaining, pct = _recurring_counts(ride)
        return RecurringProgress(
            completed=completed, total=total, remaining=remaining, percentage=pct
        )


class RecurringRoundTripProgressStrategy(ProgressStrategy):
    def calculate(self, ride: RideRecord) -> RecurringRoundTripProgress:
        total_legs = ride.number_of_trips
        completed_legs = ride.completed_count
        occurrences = total_occurrences(total_legs)

        if completed_legs >= total_legs:
            return RecurringRoundTripProgress(
                completed=occurrences,
                total=occurrences,
                remaining=0,
                percentage=100,
                in_progress=False,
                current_occurrence=None,
                current_leg=TripLeg.COMPLETED,
                total_legs=total_legs,
                completed_legs=completed_legs,
                occurrence_states=occurrence_states(ride),
            )

        done = completed_occurrences(completed_legs)
        in_progress = leg_in_progress(completed_legs)
        remaining = max(occurrences - done - (1 if in_progress else 0), 0)
        current = done + (1 if in_progress else 0)

        if in_progress:
            leg = TripLeg.RETURN
        elif current < occurrences:
            leg = TripLeg.OUTBOUND
        else:
            leg = TripLeg.COMPLETED

        return RecurringRoundTripProgress(
            completed=done,
            total=occurrences,
            remaining=remaining,
            percentage=percentage(done, occurrences),
            in_progress=in_progress,
            current_occurrence=current if current <= occurrences else None,
            current_leg=leg,
            total_legs=total_legs,
            completed_legs=completed_legs,
            occurrence_states=occurrence_states(ride),
        )


class ErrandProgressStrategy(ProgressStrategy):
    def calculate(self, ride: RideRecord) -> ErrandProgress:
        tasks = task_progress(ride)
        return ErrandProgress(
            completed=tasks.completed,
            total=tasks.total,
            remaining=tasks.remaining,
            percentage=tasks.percentage,
            active_task_index=tasks.active_task_index,
            tasks=tasks.tasks,
        )


class RecurringErrandProgressStrategy(ProgressStrategy):
    def calculate(self, ride: RideRecord) -> RecurringErrandProgress:
        completed, total, remaining, pct = _recurring_counts(ride)
        return RecurringErrandProgress(
            completed=completed,
            total=total,
            remaining=remaining,
            percentage=pct,
            task_progress=task_progress(ride),
        )


PROGRESS_STRATEGIES: dict[RideShape, ProgressStrategy] = {
    RideShape.SIMPLE: SimpleProgressStrategy(),
    RideShape.ROUND_TRIP: RoundTripProgressStrategy(),
    RideShape.RECURRING: RecurringProgressStrategy(),
    RideShape.RECURRING_ROUND_TRIP: RecurringRoundTripProgressStrategy(),
    RideShape.ERRAND: ErrandProgressStrategy(),
    RideShape.RECURRING_ERRAND: RecurringErrandProgressStrategy(),
}


# ── Engine facade ─────────────────────────────────────────────────────


class ProgressEngine:
    """High-level API used by rider and driver dashboards."""

    def __init__(self, config: Optional[Settings] = None):
        self.config = config or settings

    def progress(self, ride: Any) -> ProgressState:
        record = ride_from_row(ride)
        shape = classify(record, self.config)
        return PROGRESS_STRATEGIES[shape].calculate(record)

    def percentage(self, ride: Any) -> int:
        return self.progress(ride).percentage

    def is_completed(self, ride: Any) -> bool:
        state = self.progress(ride)
        return state.remaining == 0 and not state.in_progress

    def display_text(self, ride: Any) -> str:
        state = self.progress(ride)
        summary = f"{state.completed} of {state.total} {state.label} completed"

        if isinstance(state, SimpleProgress):
            return "Completed" if state.completed else "In Progress"
        if isinstance(state, RoundTripProgress):
            if state.current_leg == TripLeg.COMPLETED:
                return "Completed"
            return f"Round Trip - {state.current_leg.value.capitalize()}"
        if isinstance(state, RecurringRoundTripProgress) and state.in_progress:
            return (
                f"Round Trip {state.current_occurrence} of {state.total} - "
                f"{'Return' if state.current_leg == TripLeg.RETURN else 'Outbound'}"
            )
        if isinstance(state, RecurringErrandProgress):
            tasks = state.task_progress
            return f"{summary} • {tasks.completed} of {tasks.total} tasks done"
        return summary

    def next_action_text(self, ride: Any) -> str:
        state = self.progress(ride)
        if state.remaining == 0 and not state.in_progress:
            return "All completed"

        if isinstance(state, SimpleProgress):
            return "Complete trip"
        if isinstance(state, (RoundTripProgress, RecurringRoundTripProgress)) and state.in_progress:
            return f"Complete {state.current_leg.value} leg"
        if isinstance(state, RoundTripProgress):
            return "Complete outbound leg"
        if isinstance(state, RecurringRoundTripProgress):
            return f"{state.remaining} round trips remaining"
        if isinstance(state, ErrandProgress):
            if state.active_task_index < len(state.tasks):
                return f"Next: {state.tasks[state.active_task_index].title}"
            return "Complete remaining tasks"
        if isinstance(state, RecurringErrandProgress):
            tasks = state.task_progress
            if tasks.remaining > 0 and tasks.active_task_index < len(tasks.tasks):
                return f"Next: {tasks.tasks[tasks.active_task_index].title}"
            return f"{state.remaining} errands remaining"
        return f"{state.remaining} trips remaining"


def get_progress(ride: Any, config: Optional[Settings] = None) -> ProgressState:
    return ProgressEngine(config).progress(ride)


def get_progress_percentage(ride: Any, config: Optional[Settings] = None) -> int:
    return ProgressEngine(config).percentage(ride)


def is_ride_completed(ride: Any, config: Optional[Settings] = None) -> bool:
    return ProgressEngine(config).is_completed(ride)


def get_progress_display_text(ride: Any, config: Optional[Settings] = None) -> str:
    return ProgressEngine(config).display_text(ride)


def get_next_action_text(ride: Any, config: Optional[Settings] = None) -> str:
    return ProgressEngine(config).next_action_text(ride)
