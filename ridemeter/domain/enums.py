"""Domain enumerations and the round-trip leg state machine."""

import enum


class RideStatus(str, enum.Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    DRIVER_ON_WAY = "driver_on_way"
    DRIVER_ARRIVED = "driver_arrived"
    TRIP_STARTED = "trip_started"
    TRIP_COMPLETED = "trip_completed"
    CANCELLED = "cancelled"


class ServiceType(str, enum.Enum):
    TAXI = "taxi"
    COURIER = "courier"
    ERRAND = "errand"
    SCHOOL_RUN = "school_run"
    BULK = "bulk"


class RideShape(str, enum.Enum):
    SIMPLE = "simple"
    ROUND_TRIP = "round_trip"
    RECURRING = "recurring"
    RECURRING_ROUND_TRIP = "recurring_round_trip"
    ERRAND = "errand"
    RECURRING_ERRAND = "recurring_errand"


class TripLeg(str, enum.Enum):
    OUTBOUND = "outbound"
    RETURN = "return"
    COMPLETED = "completed"


class TaskState(str, enum.Enum):
    PENDING = "pending"
    ACTIVATED = "activated"
    DRIVER_ON_WAY = "driver_on_way"
    DRIVER_ARRIVED = "driver_arrived"
    STARTED = "started"
    COMPLETED = "completed"


TASK_STATE_SEQUENCE: list[TaskState] = list(TaskState)


class LegState(str, enum.Enum):
    """State of a single round-trip occurrence."""

    OUTBOUND_PENDING = "outbound_pending"
    OUTBOUND_ACTIVE = "outbound_active"
    RETURN_ACTIVE = "return_active"
    OCCURRENCE_COMPLETE = "occurrence_complete"


# State machine: maps current leg state -> set of valid next states.
# Completing the outbound leg flips completed-leg parity even -> odd, so a
# pending outbound may jump straight to RETURN_ACTIVE.
LEG_TRANSITIONS: dict[LegState, set[LegState]] = {
    LegState.OUTBOUND_PENDING: {LegState.OUTBOUND_ACTIVE, LegState.RETURN_ACTIVE},
    LegState.OUTBOUND_ACTIVE: {LegState.RETURN_ACTIVE},
    LegState.RETURN_ACTIVE: {LegState.OCCURRENCE_COMPLETE},
    LegState.OCCURRENCE_COMPLETE: set(),
}

# Ride statuses during which the outbound leg counts as under way.
OUTBOUND_ACTIVE_STATUSES: frozenset[RideStatus] = frozenset(
    {RideStatus.DRIVER_ARRIVED, RideStatus.TRIP_STARTED}
)
