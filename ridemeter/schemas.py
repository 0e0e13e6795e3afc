"""Pydantic output schemas for cost and progress views."""

from __future__ import annotations

from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field

from ridemeter.domain.enums import LegState, RideStatus, TaskState, TripLeg


# ── Cost breakdowns ───────────────────────────────────────────────────


class TaskCost(BaseModel):
    id: str
    order: int
    title: str
    state: TaskState
    cost: float
    cost_display: str


class _CostBase(BaseModel):
    total: float
    display: str
    label: str


class SimpleCost(_CostBase):
    type: Literal["simple"] = "simple"
    label: str = "Total Cost"


class RoundTripCost(_CostBase):
    type: Literal["round_trip"] = "round_trip"
    label: str = "Round Trip Total"
    outbound_cost: float
    return_cost: float
    outbound_display: str
    return_display: str


class _SeriesCost(_CostBase):
    label: str = "Series Total"
    per_unit: float
    total_units: int
    completed: int
    remaining: int
    remaining_cost: float
    per_unit_display: str
    remaining_cost_display: str


class RecurringCost(_SeriesCost):
    type: Literal["recurring"] = "recurring"


class RecurringRoundTripCost(_SeriesCost):
    """Series units are occurrences; legs are reported alongside."""

    type: Literal["recurring_round_trip"] = "recurring_round_trip"
    per_leg: float
    per_occurrence: float
    total_legs: int
    completed_legs: int
    outbound_cost: float
    return_cost: float
    per_leg_display: str
    per_occurrence_display: str


class ErrandCost(_CostBase):
    type: Literal["errand"] = "errand"
    label: str = "Total Cost"
    task_count: int
    tasks: list[TaskCost]
    task_costs_total: float
    discrepancy: float = Field(
        ..., description="Sum of resolved task costs minus the ride total."
    )
    balanced: bool


class RecurringErrandCost(_SeriesCost):
    type: Literal["recurring_errand"] = "recurring_errand"
    per_occurrence: float
    cost_per_task: float
    task_count: int
    tasks: list[TaskCost]
    task_costs_total: float
    discrepancy: float
    balanced: bool
    per_occurrence_display: str
    cost_per_task_display: str


CostBreakdown = Annotated[
    Union[
        SimpleCost,
        RoundTripCost,
        RecurringCost,
        RecurringRoundTripCost,
        ErrandCost,
        RecurringErrandCost,
    ],
    Field(discriminator="type"),
]


# ── Progress states ───────────────────────────────────────────────────


class TaskStatus(BaseModel):
    id: str
    order: int
    title: str
    state: TaskState
    is_completed: bool
    is_active: bool
    is_pending: bool


class _ProgressBase(BaseModel):
    completed: int
    total: int
    remaining: int
    percentage: int = Field(..., ge=0, le=100)
    in_progress: bool = False
    label: str


class SimpleProgress(_ProgressBase):
    type: Literal["simple"] = "simple"
    label: str = "trip"
    status: RideStatus = RideStatus.PENDING


class RoundTripProgress(_ProgressBase):
    type: Literal["round_trip"] = "round_trip"
    label: str = "legs"
    status: RideStatus = RideStatus.PENDING
    current_leg: TripLeg


class RecurringProgress(_ProgressBase):
    type: Literal["recurring"] = "recurring"
    label: str = "trips"


class RecurringRoundTripProgress(_ProgressBase):
    """``completed`` / ``total`` count occurrences, not legs."""

    type: Literal["recurring_round_trip"] = "recurring_round_trip"
    label: str = "round trips"
    current_occurrence: Optional[int] = None
    current_leg: TripLeg
    total_legs: int
    completed_legs: int
    occurrence_states: list[LegState] = []


class TaskProgress(BaseModel):
    completed: int
    total: int
    remaining: int
    percentage: int = Field(..., ge=0, le=100)
    active_task_index: int
    tasks: list[TaskStatus]


class ErrandProgress(_ProgressBase):
    type: Literal["errand"] = "errand"
    label: str = "tasks"
    active_task_index: int
    tasks: list[TaskStatus]


class RecurringErrandProgress(_ProgressBase):
    type: Literal["recurring_errand"] = "recurring_errand"
    label: str = "errands"
    task_progress: TaskProgress


ProgressState = Annotated[
    Union[
        SimpleProgress,
        RoundTripProgress,
        RecurringProgress,
        RecurringRoundTripProgress,
        ErrandProgress,
        RecurringErrandProgress,
    ],
    Field(discriminator="type"),
]


# ── Validation / behaviour results ────────────────────────────────────


class ValidationResult(BaseModel):
    is_valid: bool
    errors: list[str] = []


class CostValidation(ValidationResult):
    actual_total: float
    difference: float


class CompletionCheck(BaseModel):
    can_complete: bool
    reason: Optional[str] = None


class ServiceTypeInfo(BaseModel):
    icon: str
    label: str
    display_name: str
    color: str


class StatusDisplay(BaseModel):
    icon: str
    text: str
    description: Optional[str] = None


class StageInfo(BaseModel):
    percentage: int
    label: str
    description: str
