"""
Service-Type Behaviours  (Strategy Pattern)
===========================================

Each ``ServiceType`` maps to one ``RideTypeBehavior``.  The base class is
the default implementation; subclasses override only what differs for
their service.  Unrecognised service types resolve to ``DEFAULT_BEHAVIOR``.

The engines consult ``errand_semantics`` to decide whether task-based
cost and progress apply, independently of leg / occurrence counts.
"""

from __future__ import annotations

from typing import Any, Optional

from ridemeter.schemas import (
    CompletionCheck,
    ServiceTypeInfo,
    StageInfo,
    StatusDisplay,
    ValidationResult,
)

from .entities import RideRecord
from .enums import RideStatus, ServiceType
from .tasks import summarize_errand_tasks

_SERVICE_ALIASES: dict[str, ServiceType] = {"errands": ServiceType.ERRAND}


def normalize_service_type(value: Any) -> Optional[ServiceType]:
    """Case-insensitive lookup; ``"errands"`` is the only alias."""
    if isinstance(value, ServiceType):
        return value
    if not value:
        return None
    key = str(value).strip().lower()
    if key in _SERVICE_ALIASES:
        return _SERVICE_ALIASES[key]
    try:
        return ServiceType(key)
    except ValueError:
        return None


_STATUS_DISPLAY: dict[RideStatus, StatusDisplay] = {
    RideStatus.PENDING: StatusDisplay(icon="⏳", text="Pending"),
    RideStatus.ACCEPTED: StatusDisplay(icon="✅", text="Accepted"),
    RideStatus.DRIVER_ON_WAY: StatusDisplay(icon="🚗", text="Driver on the way"),
    RideStatus.DRIVER_ARRIVED: StatusDisplay(icon="📍", text="Driver arrived"),
    RideStatus.TRIP_STARTED: StatusDisplay(icon="🎯", text="Trip in progress"),
    RideStatus.TRIP_COMPLETED: StatusDisplay(icon="✅", text="Trip completed"),
    RideStatus.CANCELLED: StatusDisplay(icon="❌", text="Cancelled"),
}

_STATUS_STAGES: dict[RideStatus, StageInfo] = {
    RideStatus.PENDING: StageInfo(
        percentage=0, label="Awaiting driver", description="Waiting for driver offers"
    ),
    RideStatus.ACCEPTED: StageInfo(
        percentage=20, label="Driver assigned", description="Driver has been assigned"
    ),
    RideStatus.DRIVER_ON_WAY: StageInfo(
        percentage=40, label="Driver en route", description="Driver heading to pickup"
    ),
    RideStatus.DRIVER_ARRIVED: StageInfo(
        percentage=60, label="Driver arrived", description="Driver at pickup location"
    ),
    RideStatus.TRIP_STARTED: StageInfo(
        percentage=80, label="Trip started", description="Journey in progress"
    ),
    RideStatus.TRIP_COMPLETED: StageInfo(
        percentage=100, label="Trip completed", description="Trip finished successfully"
    ),
}

_COMPLETABLE_STATUSES = {RideStatus.TRIP_STARTED}


# ── Behaviour hierarchy ───────────────────────────────────────────────


class RideTypeBehavior:
    """Default behaviour, shared by every service type."""

    service_type: Optional[ServiceType] = None
    info = ServiceTypeInfo(icon="🚕", label="Taxi", display_name="Taxi Ride", color="blue")
    errand_semantics: bool = False

    def validate(self, ride: RideRecord) -> ValidationResult:
        return ValidationResult(is_valid=True)

    def can_complete(self, ride: RideRecord) -> CompletionCheck:
        if ride.status not in _COMPLETABLE_STATUSES:
            return CompletionCheck(
                can_complete=False, reason="Ride must be started before completion"
            )
        return CompletionCheck(can_complete=True)

    def status_display(self, ride: RideRecord) -> StatusDisplay:
        return _STATUS_DISPLAY[ride.status]

    def status_stage(self, ride: RideRecord) -> StageInfo:
        return _STATUS_STAGES.get(ride.status, _STATUS_STAGES[RideStatus.PENDING])

    def card_summary(self, ride: RideRecord) -> Optional[str]:
        return None


class TaxiBehavior(RideTypeBehavior):
    service_type = ServiceType.TAXI

    def card_summary(self, ride: RideRecord) -> Optional[str]:
        if ride.number_of_passengers and ride.number_of_passengers > 1:
            return f"{ride.number_of_passengers} passengers"
        return None


class CourierBehavior(RideTypeBehavior):
    service_type = ServiceType.COURIER
    info = ServiceTypeInfo(
        icon="📦", label="Courier", display_name="Courier Delivery", color="green"
    )

    def card_summary(self, ride: RideRecord) -> Optional[str]:
        if ride.package_size:
            return f"Package ({ride.package_size})"
        if ride.recipient_name:
            return f"To: {ride.recipient_name}"
        return "Package delivery"


class ErrandBehavior(RideTypeBehavior):
    service_type = ServiceType.ERRAND
    info = ServiceTypeInfo(icon="🛒", label="Errands", display_name="Errands", color="purple")
    errand_semantics = True

    def validate(self, ride: RideRecord) -> ValidationResult:
        if not ride.tasks:
            return ValidationResult(
                is_valid=False, errors=["Errand rides must have at least one task"]
            )
        return ValidationResult(is_valid=True)

    def can_complete(self, ride: RideRecord) -> CompletionCheck:
        summary = summarize_errand_tasks(ride.tasks)
        if summary.total == 0:
            return CompletionCheck(can_complete=False, reason="No tasks found in errand ride")
        if summary.completed < summary.total:
            return CompletionCheck(
                can_complete=False,
                reason=(
                    f"All tasks must be completed "
                    f"({summary.completed}/{summary.total} completed)"
                ),
            )
        return super().can_complete(ride)

    def status_display(self, ride: RideRecord) -> StatusDisplay:
        base = super().status_display(ride)
        if ride.status in (RideStatus.TRIP_COMPLETED, RideStatus.CANCELLED):
            return base
        summary = summarize_errand_tasks(ride.tasks)
        if summary.active_task is None:
            return base
        return StatusDisplay(
            icon=base.icon,
            text=f"{base.text} • Task {summary.active_task_index + 1} of {summary.total}",
            description=summary.active_task.title or "Current errand task",
        )

    def card_summary(self, ride: RideRecord) -> Optional[str]:
        count = len(ride.tasks)
        if count:
            return f"{count} task{'s' if count != 1 else ''}"
        return None


class SchoolRunBehavior(RideTypeBehavior):
    service_type = ServiceType.SCHOOL_RUN
    info = ServiceTypeInfo(
        icon="🎒", label="School Run", display_name="School Run", color="orange"
    )

    def card_summary(self, ride: RideRecord) -> Optional[str]:
        if ride.passenger_name:
            return f"Student: {ride.passenger_name}"
        return "School run"


class BulkBehavior(RideTypeBehavior):
    service_type = ServiceType.BULK
    info = ServiceTypeInfo(
        icon="🚌", label="Bulk Booking", display_name="Bulk Booking", color="indigo"
    )

    def card_summary(self, ride: RideRecord) -> Optional[str]:
        if ride.number_of_trips > 1:
            return f"{ride.number_of_trips} trips"
        return None


# ── Registry ──────────────────────────────────────────────────────────

DEFAULT_BEHAVIOR = RideTypeBehavior()

BEHAVIORS: dict[ServiceType, RideTypeBehavior] = {
    ServiceType.TAXI: TaxiBehavior(),
    ServiceType.COURIER: CourierBehavior(),
    ServiceType.ERRAND: ErrandBehavior(),
    ServiceType.SCHOOL_RUN: SchoolRunBehavior(),
    ServiceType.BULK: BulkBehavior(),
}


def get_behavior(service_type: Any) -> RideTypeBehavior:
    normalized = normalize_service_type(service_type)
    if normalized is None:
        return DEFAULT_BEHAVIOR
    return BEHAVIORS.get(normalized, DEFAULT_BEHAVIOR)
