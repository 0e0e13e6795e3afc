"""Unit tests for service-type behaviours."""

import pytest

from ridemeter.domain.adapters import ride_from_row
from ridemeter.domain.enums import RideStatus, ServiceType
from ridemeter.domain.service_types import (
    BEHAVIORS,
    DEFAULT_BEHAVIOR,
    CourierBehavior,
    ErrandBehavior,
    get_behavior,
    normalize_service_type,
)


class TestRegistry:
    def test_every_service_type_has_a_behavior(self):
        assert set(BEHAVIORS) == set(ServiceType)
        for service_type, behavior in BEHAVIORS.items():
            assert behavior.service_type == service_type

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("taxi", ServiceType.TAXI),
            ("COURIER", ServiceType.COURIER),
            ("errands", ServiceType.ERRAND),
            (" school_run ", ServiceType.SCHOOL_RUN),
            ("limo", None),
            (None, None),
        ],
    )
    def test_normalize(self, raw, expected):
        assert normalize_service_type(raw) == expected

    def test_unknown_falls_back_to_default(self):
        assert get_behavior("limo") is DEFAULT_BEHAVIOR
        assert not DEFAULT_BEHAVIOR.errand_semantics

    def test_only_errands_have_task_semantics(self):
        flagged = {t for t, b in BEHAVIORS.items() if b.errand_semantics}
        assert flagged == {ServiceType.ERRAND}


class TestErrandBehavior:
    def setup_method(self):
        self.behavior = ErrandBehavior()

    def test_requires_tasks(self, row):
        result = self.behavior.validate(ride_from_row(row(service_type="errand")))
        assert not result.is_valid

    def test_cannot_complete_with_open_tasks(self, row, tasks):
        ride = ride_from_row(row(service_type="errand", ride_status="trip_started",
                                 errand_tasks=tasks(3, completed=2)))
        check = self.behavior.can_complete(ride)
        assert not check.can_complete
        assert check.reason == "All tasks must be completed (2/3 completed)"

    def test_can_complete_when_all_done_and_started(self, row, tasks):
        ride = ride_from_row(row(service_type="errand", ride_status="trip_started",
                                 errand_tasks=tasks(2, completed=2)))
        assert self.behavior.can_complete(ride).can_complete

    def test_status_text_shows_active_task(self, row, tasks):
        ride = ride_from_row(row(service_type="errand", ride_status="driver_on_way",
                                 errand_tasks=tasks(3, completed=1)))
        display = self.behavior.status_display(ride)
        assert display.text == "Driver on the way • Task 2 of 3"
        assert display.description == "Stop 2"

    def test_card_summary(self, row, tasks):
        ride = ride_from_row(row(service_type="errand", errand_tasks=tasks(1)))
        assert self.behavior.card_summary(ride) == "1 task"


class TestOtherBehaviors:
    def test_default_completion_requires_started(self, row):
        ride = ride_from_row(row(ride_status="accepted"))
        assert not get_behavior("taxi").can_complete(ride).can_complete

    def test_status_stage(self, row):
        ride = ride_from_row(row(ride_status="driver_arrived"))
        assert get_behavior("taxi").status_stage(ride).percentage == 60

    def test_cancelled_stage_falls_back(self, row):
        ride = ride_from_row(row(ride_status="cancelled"))
        assert get_behavior("bulk").status_stage(ride).percentage == 0

    def test_courier_summary(self, row):
        ride = ride_from_row(row(service_type="courier", recipient_name="Tendai"))
        assert CourierBehavior().card_summary(ride) == "To: Tendai"

    def test_taxi_summary(self, row):
        ride = ride_from_row(row(number_of_passengers=3))
        assert get_behavior(ServiceType.TAXI).card_summary(ride) == "3 passengers"

    def test_school_run_summary(self, row):
        ride = ride_from_row(row(service_type="school_run", passenger_name="Ana"))
        assert get_behavior("school_run").card_summary(ride) == "Student: Ana"

    def test_bulk_summary(self, row):
        ride = ride_from_row(row(service_type="bulk", number_of_trips=12))
        assert get_behavior("bulk").card_summary(ride) == "12 trips"

    def test_info(self):
        assert get_behavior("courier").info.display_name == "Courier Delivery"
        assert get_behavior(None).info.icon == "🚕"

    def test_status_display_for_every_status(self, row):
        for status in RideStatus:
            ride = ride_from_row(row(ride_status=status.value))
            assert get_behavior("taxi").status_display(ride).text
