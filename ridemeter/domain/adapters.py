"""
Boundary adapter: backend rows -> ``RideRecord``.

Rows arrive with inconsistent field names (``estimated_cost`` vs ``fare``,
``errand_tasks`` vs ``tasks``, snake_case vs camelCase).  All aliasing is
resolved here so the engines only ever see the canonical record.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Optional

from .coercion import (
    to_bool,
    to_float,
    to_int,
    to_optional_float,
    to_optional_int,
    to_optional_str,
)
from .entities import RideRecord
from .enums import RideStatus, TripLeg
from .service_types import normalize_service_type
from .tasks import parse_errand_tasks

# canonical field -> accepted source keys, first present wins
FIELD_ALIASES: dict[str, tuple[str, ...]] = {
    "id": ("id",),
    "estimated_cost": ("estimated_cost", "estimatedCost", "fare"),
    "cost_per_trip": ("cost_per_trip", "costPerTrip"),
    "number_of_trips": ("number_of_trips", "numberOfTrips"),
    "completed_count": ("completed_rides_count", "completedCount", "completed_count"),
    "is_round_trip": ("is_round_trip", "isRoundTrip"),
    "series_id": ("series_id", "seriesId"),
    "service_type": ("service_type", "serviceType"),
    "status": ("ride_status", "status"),
    "tasks": ("errand_tasks", "tasks"),
    "outbound_cost": ("outbound_cost", "outboundCost"),
    "return_cost": ("return_cost", "returnCost"),
    "remaining_cost": ("remaining_cost", "remainingCost"),
    "active_leg": ("active_leg", "activeLeg"),
    "trip_leg_type": ("trip_leg_type", "tripLegType"),
    "round_trip_occurrence_number": ("round_trip_occurrence_number",),
    "round_trip_leg_number": ("round_trip_leg_number",),
    "outbound_completed_at": ("outbound_completed_at",),
    "return_completed_at": ("return_completed_at",),
    "tasks_done": ("tasks_done", "tasksDone"),
    "tasks_total": ("tasks_total", "tasksTotal"),
    "tasks_left": ("tasks_left", "tasksLeft"),
    "active_task_index": ("active_errand_task_index", "activeTaskIndex"),
    "number_of_passengers": ("number_of_passengers",),
    "package_size": ("package_size",),
    "recipient_name": ("recipient_name",),
    "passenger_name": ("passenger_name",),
}


def _pick(row: Mapping[str, Any], field: str) -> Any:
    for key in FIELD_ALIASES[field]:
        value = row.get(key)
        if value is not None:
            return value
    return None


def _status(value: Any) -> RideStatus:
    if isinstance(value, RideStatus):
        return value
    try:
        return RideStatus(str(value).strip().lower())
    except ValueError:
        return RideStatus.PENDING


def _leg(value: Any) -> Optional[TripLeg]:
    if isinstance(value, TripLeg):
        return value
    if not value:
        return None
    try:
        return TripLeg(str(value).strip().lower())
    except ValueError:
        return None


def _non_negative(value: Optional[int]) -> Optional[int]:
    if value is None:
        return None
    return max(value, 0)


def ride_from_row(row: Any) -> RideRecord:
    """
    Build a canonical ``RideRecord`` from a backend row.

    ``None`` (or anything that is not a mapping) yields a default record.
    Unknown keys are ignored and nothing here raises.
    """
    if isinstance(row, RideRecord):
        return row
    if not isinstance(row, Mapping):
        return RideRecord()

    number_of_trips = max(to_int(_pick(row, "number_of_trips"), 1), 1)
    trip_leg_type = _leg(_pick(row, "trip_leg_type"))
    is_round_trip = to_bool(_pick(row, "is_round_trip")) or trip_leg_type in (
        TripLeg.OUTBOUND,
        TripLeg.RETURN,
    )
    series_id = to_optional_str(_pick(row, "series_id"))
    # a single round-trip booking still has two legs to count
    single_round_trip = is_round_trip and number_of_trips == 1 and series_id is None
    limit = 2 if single_round_trip else number_of_trips
    completed = min(max(to_int(_pick(row, "completed_count")), 0), limit)

    return RideRecord(
        id=to_optional_str(_pick(row, "id")),
        estimated_cost=to_float(_pick(row, "estimated_cost")),
        cost_per_trip=to_optional_float(_pick(row, "cost_per_trip")),
        number_of_trips=number_of_trips,
        completed_count=completed,
        is_round_trip=is_round_trip,
        series_id=series_id,
        service_type=normalize_service_type(_pick(row, "service_type")),
        status=_status(_pick(row, "status")),
        tasks=tuple(parse_errand_tasks(_pick(row, "tasks"))),
        outbound_cost=to_optional_float(_pick(row, "outbound_cost")),
        return_cost=to_optional_float(_pick(row, "return_cost")),
        active_leg=_leg(_pick(row, "active_leg")),
        trip_leg_type=trip_leg_type,
        round_trip_occurrence_number=to_optional_int(_pick(row, "round_trip_occurrence_number")),
        round_trip_leg_number=to_optional_int(_pick(row, "round_trip_leg_number")),
        outbound_completed_at=to_optional_str(_pick(row, "outbound_completed_at")),
        return_completed_at=to_optional_str(_pick(row, "return_completed_at")),
        remaining_cost=to_optional_float(_pick(row, "remaining_cost")),
        tasks_done=_non_negative(to_optional_int(_pick(row, "tasks_done"))),
        tasks_total=_non_negative(to_optional_int(_pick(row, "tasks_total"))),
        tasks_left=_non_negative(to_optional_int(_pick(row, "tasks_left"))),
        active_task_index=_non_negative(to_optional_int(_pick(row, "active_task_index"))),
        number_of_passengers=to_optional_int(_pick(row, "number_of_passengers")),
        package_size=to_optional_str(_pick(row, "package_size")),
        recipient_name=to_optional_str(_pick(row, "recipient_name")),
        passenger_name=to_optional_str(_pick(row, "passenger_name")),
    )
