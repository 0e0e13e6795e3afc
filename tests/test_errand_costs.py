"""Unit tests for errand cost distribution and validation."""

import pytest

from ridemeter.domain.entities import ErrandTask
from ridemeter.domain.errand_costs import (
    add_costs_to_tasks,
    calculate_cost_per_task,
    calculate_errand_total_cost,
    calculate_remaining_errand_cost,
    distribute_errand_costs,
    validate_errand_costs,
)


class TestDistribute:
    def test_even_split(self):
        assert distribute_errand_costs(30, 3) == [10.0, 10.0, 10.0]

    def test_remainder_on_last_task(self):
        assert distribute_errand_costs(10, 3) == [3.33, 3.33, 3.34]

    @pytest.mark.parametrize("total,count", [(10, 3), (99.99, 7), (0.05, 4), (1234.56, 9)])
    def test_parts_sum_to_total(self, total, count):
        assert round(sum(distribute_errand_costs(total, count)), 2) == round(total, 2)

    @pytest.mark.parametrize("count", [0, -1])
    def test_no_tasks(self, count):
        assert distribute_errand_costs(10, count) == []

    def test_add_costs_does_not_mutate(self):
        original = [ErrandTask(id="a"), ErrandTask(id="b")]
        priced = add_costs_to_tasks(original, 5)
        assert [t.cost for t in priced] == [2.5, 2.5]
        assert all(t.cost is None for t in original)


class TestTotals:
    def test_total_ignores_missing(self):
        tasks = [ErrandTask(id="a", cost=1.005), ErrandTask(id="b")]
        assert calculate_errand_total_cost(tasks) == 1.01

    def test_cost_per_task(self):
        assert calculate_cost_per_task(10, 3) == 3.33
        assert calculate_cost_per_task(10, 0) == 0.0


class TestValidate:
    def test_balanced(self):
        result = validate_errand_costs([{"cost": 5}, {"cost": 5}], 10)
        assert result.is_valid
        assert result.actual_total == 10.0

    def test_mismatch(self):
        result = validate_errand_costs([{"cost": 5}, {"cost": 6}], 10)
        assert not result.is_valid
        assert result.difference == 1.0
        assert result.errors[0].startswith("Total cost mismatch")

    def test_within_tolerance(self):
        assert validate_errand_costs([{"cost": 3.33}, {"cost": 3.33}, {"cost": 3.33}], 10, tolerance=0.01).is_valid

    def test_missing_cost(self):
        result = validate_errand_costs([{"cost": 10}, {}], 10)
        assert "1 task(s) missing cost property" in result.errors

    def test_negative_cost(self):
        result = validate_errand_costs([{"cost": 15}, {"cost": -5}], 10)
        assert result.errors == ["1 task(s) have negative costs"]

    def test_empty(self):
        assert validate_errand_costs([], 0).is_valid
        assert not validate_errand_costs([], 5).is_valid


class TestRemainingErrandCost:
    def test_remaining(self, row, tasks):
        ride = row(service_type="errand", estimated_cost=30, errand_tasks=tasks(3, completed=1))
        assert calculate_remaining_errand_cost(ride) == 20.0

    def test_not_an_errand(self, row):
        assert calculate_remaining_errand_cost(row()) == 0.0
