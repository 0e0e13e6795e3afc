"""
Round-trip leg helpers and the recurring round-trip state machine.

A recurring round trip stores *legs* as its unit: ``number_of_trips`` counts
legs and ``completed_count`` counts completed legs.  Leg parity
(``completed_count % 2``) is the single source of truth for which leg of
the current occurrence is active:

    even -> outbound pending (or active once the driver arrives / starts)
    odd  -> return active

Completing the return leg of the last occurrence is the terminal state.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Optional, Union

from ridemeter.config import Settings, settings
from ridemeter.schemas import ValidationResult

from .adapters import ride_from_row
from .entities import InvalidStateTransition, RideRecord
from .enums import LEG_TRANSITIONS, OUTBOUND_ACTIVE_STATUSES, LegState, TripLeg


@dataclass(frozen=True)
class RoundTripDisplay:
    leg_type: TripLeg
    leg_number: int
    occurrence_number: int
    total_occurrences: int
    indicator: str
    leg_label: str
    is_recurring: bool
    display_text: str
    short_text: str


# ── Occurrence arithmetic ─────────────────────────────────────────────


def total_occurrences(total_legs: int) -> int:
    return math.ceil(max(total_legs, 0) / 2)


def completed_occurrences(completed_legs: int) -> int:
    return max(completed_legs, 0) // 2


def leg_in_progress(completed_legs: int) -> bool:
    return completed_legs % 2 == 1


# ── Leg helpers ───────────────────────────────────────────────────────


def opposite_leg(leg: Any) -> Optional[TripLeg]:
    if leg in (TripLeg.OUTBOUND, "outbound"):
        return TripLeg.RETURN
    if leg in (TripLeg.RETURN, "return"):
        return TripLeg.OUTBOUND
    return None


def is_leg_completed(ride: Any, leg: Any) -> bool:
    record = ride_from_row(ride)
    if leg in (TripLeg.OUTBOUND, "outbound"):
        return bool(record.outbound_completed_at)
    if leg in (TripLeg.RETURN, "return"):
        return bool(record.return_completed_at)
    return False


def get_active_leg(ride: Any) -> Optional[TripLeg]:
    """
    Active leg of a single round trip.

    An explicit ``active_leg`` wins, then completion timestamps, then the
    completed-leg count.  ``None`` for rides that are not round trips.
    """
    record = ride_from_row(ride)
    if not record.is_round_trip:
        return None
    if record.active_leg is not None:
        return record.active_leg
    if record.return_completed_at:
        return TripLeg.COMPLETED
    if record.outbound_completed_at:
        return TripLeg.RETURN
    if record.completed_count >= 2:
        return TripLeg.COMPLETED
    if record.completed_count == 1:
        return TripLeg.RETURN
    return TripLeg.OUTBOUND


def round_trip_percentage(ride: Any) -> int:
    record = ride_from_row(ride)
    leg = get_active_leg(record)
    if leg is None:
        return 0
    if leg == TripLeg.COMPLETED:
        return 100
    if leg == TripLeg.RETURN:
        return 50
    if record.status in OUTBOUND_ACTIVE_STATUSES:
        return 25
    return 0


def get_round_trip_display(ride: Any) -> Optional[RoundTripDisplay]:
    record = ride_from_row(ride)
    if not record.is_round_trip:
        return None

    leg_type = record.trip_leg_type or TripLeg.OUTBOUND
    outbound = leg_type == TripLeg.OUTBOUND
    indicator = "→" if outbound else "←"
    leg_label = "Outbound" if outbound else "Return"
    short_leg = "Out" if outbound else "Ret"
    occurrence = record.round_trip_occurrence_number or 1
    recurring = record.has_series
    total = total_occurrences(record.number_of_trips) if recurring else 1

    if recurring:
        display_text = f"Round Trip {occurrence} of {total} - {leg_label} {indicator}"
        short_text = f"RT {occurrence}/{total} - {short_leg} {indicator}"
    else:
        display_text = f"Round Trip - {leg_label} {indicator}"
        short_text = f"RT - {short_leg} {indicator}"

    return RoundTripDisplay(
        leg_type=leg_type,
        leg_number=record.round_trip_leg_number or 1,
        occurrence_number=occurrence,
        total_occurrences=total,
        indicator=indicator,
        leg_label=leg_label,
        is_recurring=recurring,
        display_text=display_text,
        short_text=short_text,
    )


def calculate_return_time(
    outbound_time: Union[datetime, str, None],
    estimated_duration: Optional[int] = None,
    wait_time: Optional[int] = None,
    config: Optional[Settings] = None,
) -> Optional[datetime]:
    """Outbound departure + trip duration + wait at destination."""
    config = config or settings
    if isinstance(outbound_time, str):
        try:
            outbound_time = datetime.fromisoformat(outbound_time)
        except ValueError:
            return None
    if not isinstance(outbound_time, datetime):
        return None

    duration = estimated_duration or config.default_leg_duration_minutes
    wait = wait_time or config.return_wait_minutes
    return outbound_time + timedelta(minutes=duration + wait)


def validate_round_trip_leg(ride: Any) -> ValidationResult:
    if ride is None:
        return ValidationResult(is_valid=False, errors=["Ride object is required"])
    record = ride_from_row(ride)
    if not record.is_round_trip:
        return ValidationResult(is_valid=False, errors=["Not a round trip ride"])

    errors: list[str] = []
    leg_number = record.round_trip_leg_number
    if leg_number is not None and leg_number not in (1, 2):
        errors.append(f"Invalid round_trip_leg_number: {leg_number}")

    if record.trip_leg_type is not None and leg_number is not None:
        expected = 1 if record.trip_leg_type == TripLeg.OUTBOUND else 2
        if leg_number != expected:
            errors.append(
                f"Inconsistent leg data: {record.trip_leg_type.value} should have "
                f"leg_number {expected}, got {leg_number}"
            )

    occurrence = record.round_trip_occurrence_number
    if record.series_id and occurrence is not None:
        total = total_occurrences(record.number_of_trips)
        if occurrence < 1 or occurrence > total:
            errors.append(f"Invalid occurrence number: {occurrence} (should be 1-{total})")

    return ValidationResult(is_valid=not errors, errors=errors)


# ── State machine ─────────────────────────────────────────────────────


def check_leg_transition(current: LegState, new: LegState) -> None:
    """Raise ``InvalidStateTransition`` unless *current* -> *new* is legal."""
    if new not in LEG_TRANSITIONS.get(current, set()):
        raise InvalidStateTransition(f"Cannot transition from {current.value} to {new.value}")


def current_leg_state(ride: RideRecord) -> LegState:
    """State of the occurrence currently being driven."""
    if ride.completed_count >= ride.number_of_trips:
        return LegState.OCCURRENCE_COMPLETE
    if leg_in_progress(ride.completed_count):
        return LegState.RETURN_ACTIVE
    if ride.status in OUTBOUND_ACTIVE_STATUSES:
        return LegState.OUTBOUND_ACTIVE
    return LegState.OUTBOUND_PENDING


def occurrence_states(ride: Any) -> list[LegState]:
    """One ``LegState`` per occurrence, threaded across the whole series."""
    record = ride_from_row(ride)
    total = total_occurrences(record.number_of_trips)
    done = completed_occurrences(record.completed_count)
    current = current_leg_state(record)

    states: list[LegState] = []
    for occurrence in range(1, total + 1):
        if occurrence <= done or current == LegState.OCCURRENCE_COMPLETE:
            states.append(LegState.OCCURRENCE_COMPLETE)
        elif occurrence == done + 1:
            states.append(current)
        else:
            states.append(LegState.OUTBOUND_PENDING)
    return states
