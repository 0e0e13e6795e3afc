"""Unit tests for the backend-row adapter."""

from ridemeter.domain.adapters import ride_from_row
from ridemeter.domain.entities import RideRecord
from ridemeter.domain.enums import RideStatus, ServiceType, TripLeg


class TestRideFromRow:
    def test_none_gives_defaults(self):
        assert ride_from_row(None) == RideRecord()

    def test_record_passes_through(self):
        record = RideRecord(id="r1")
        assert ride_from_row(record) is record

    def test_snake_case(self, row):
        record = ride_from_row(row(number_of_trips=4, completed_rides_count=2))
        assert record.number_of_trips == 4
        assert record.completed_count == 2
        assert record.service_type == ServiceType.TAXI

    def test_camel_case(self):
        record = ride_from_row({
            "estimatedCost": "45.5",
            "numberOfTrips": 3,
            "completedCount": 1,
            "isRoundTrip": "true",
            "serviceType": "courier",
            "status": "trip_started",
        })
        assert record.estimated_cost == 45.5
        assert record.is_round_trip
        assert record.service_type == ServiceType.COURIER
        assert record.status == RideStatus.TRIP_STARTED

    def test_fare_alias(self):
        assert ride_from_row({"fare": 12}).estimated_cost == 12.0

    def test_first_alias_wins(self):
        record = ride_from_row({"ride_status": "accepted", "status": "pending"})
        assert record.status == RideStatus.ACCEPTED

    def test_trip_count_floor(self):
        assert ride_from_row({"number_of_trips": 0}).number_of_trips == 1
        assert ride_from_row({"number_of_trips": -4}).number_of_trips == 1

    def test_completed_count_clamped(self):
        assert ride_from_row({"number_of_trips": 3, "completed_rides_count": 9}).completed_count == 3
        assert ride_from_row({"completed_rides_count": -2}).completed_count == 0

    def test_single_round_trip_counts_two_legs(self):
        record = ride_from_row({"is_round_trip": True, "completed_rides_count": 2})
        assert record.completed_count == 2

    def test_series_round_trip_keeps_trip_count_limit(self):
        record = ride_from_row(
            {"is_round_trip": True, "series_id": "s-1", "completed_rides_count": 2}
        )
        assert record.number_of_trips == 1
        assert record.completed_count == 1

    def test_unknown_status(self):
        assert ride_from_row({"ride_status": "teleporting"}).status == RideStatus.PENDING

    def test_leg_type_marks_round_trip(self):
        record = ride_from_row({"trip_leg_type": "outbound"})
        assert record.is_round_trip
        assert record.trip_leg_type == TripLeg.OUTBOUND

    def test_errand_tasks_json(self):
        record = ride_from_row({"errand_tasks": '[{"title": "a"}, {"title": "b"}]'})
        assert len(record.tasks) == 2
        assert isinstance(record.tasks, tuple)

    def test_non_mapping(self):
        assert ride_from_row(["not", "a", "row"]) == RideRecord()

    def test_input_row_not_mutated(self, row):
        original = row(errand_tasks=[{"title": "x"}])
        snapshot = {k: v for k, v in original.items()}
        ride_from_row(original)
        assert original == snapshot
