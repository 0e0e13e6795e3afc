"""
Domain entities.

Both records are frozen: the cost and progress engines are read-only views
over them and never write back.  Backend rows are turned into these types
by :func:`ridemeter.domain.adapters.ride_from_row`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from .enums import RideStatus, ServiceType, TaskState, TripLeg


class InvalidStateTransition(Exception):
    """Raised when a round-trip leg state change violates the state machine."""


# ── Value Objects ─────────────────────────────────────────────────────


@dataclass(frozen=True)
class ErrandTask:
    id: str
    order: int = 0
    title: str = ""
    description: str = ""
    cost: Optional[float] = None
    state: TaskState = TaskState.PENDING

    @property
    def is_completed(self) -> bool:
        return self.state == TaskState.COMPLETED


# ── Entities ──────────────────────────────────────────────────────────


@dataclass(frozen=True)
class RideRecord:
    id: Optional[str] = None
    estimated_cost: float = 0.0
    cost_per_trip: Optional[float] = None
    number_of_trips: int = 1
    completed_count: int = 0
    is_round_trip: bool = False
    series_id: Optional[str] = None
    service_type: Optional[ServiceType] = None
    status: RideStatus = RideStatus.PENDING
    tasks: tuple[ErrandTask, ...] = field(default_factory=tuple)

    # Round trips
    outbound_cost: Optional[float] = None
    return_cost: Optional[float] = None
    active_leg: Optional[TripLeg] = None
    trip_leg_type: Optional[TripLeg] = None
    round_trip_occurrence_number: Optional[int] = None
    round_trip_leg_number: Optional[int] = None
    outbound_completed_at: Optional[str] = None
    return_completed_at: Optional[str] = None

    # Series
    remaining_cost: Optional[float] = None

    # Errand counters maintained by the backend
    tasks_done: Optional[int] = None
    tasks_total: Optional[int] = None
    tasks_left: Optional[int] = None
    active_task_index: Optional[int] = None

    # Service details
    number_of_passengers: Optional[int] = None
    package_size: Optional[str] = None
    recipient_name: Optional[str] = None
    passenger_name: Optional[str] = None

    @property
    def has_series(self) -> bool:
        return self.number_of_trips > 1 or bool(self.series_id)
