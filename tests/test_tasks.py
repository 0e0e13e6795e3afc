"""Unit tests for errand task decoding and task state helpers."""

import logging

import pytest

from ridemeter.domain.entities import ErrandTask
from ridemeter.domain.enums import TaskState
from ridemeter.domain.tasks import (
    describe_task_state,
    next_task_state,
    normalize_task_state,
    parse_errand_tasks,
    summarize_errand_tasks,
)


class TestParseErrandTasks:
    def test_list_of_dicts(self):
        tasks = parse_errand_tasks([{"title": "Pharmacy", "cost": "4.5"}])
        assert tasks == [ErrandTask(id="1", order=0, title="Pharmacy", cost=4.5)]

    def test_json_string(self):
        tasks = parse_errand_tasks('[{"label": "Bank"}, {"name": "Post office"}]')
        assert [t.title for t in tasks] == ["Bank", "Post office"]

    def test_wrapped_object(self):
        tasks = parse_errand_tasks('{"tasks": [{"title": "Groceries"}]}')
        assert len(tasks) == 1

    def test_malformed_json_logs_warning(self, caplog):
        with caplog.at_level(logging.WARNING, logger="ridemeter.domain.tasks"):
            assert parse_errand_tasks("[{not json") == []
        assert "Unable to parse errand tasks JSON" in caplog.text

    def test_deeply_nested_json_is_malformed(self, caplog):
        nested = "[" * 100000 + "]" * 100000
        with caplog.at_level(logging.WARNING, logger="ridemeter.domain.tasks"):
            assert parse_errand_tasks(nested) == []
        assert "Unable to parse errand tasks JSON" in caplog.text

    @pytest.mark.parametrize("raw", [None, "", 42, "null"])
    def test_empty_inputs(self, raw):
        assert parse_errand_tasks(raw) == []

    def test_title_fallback(self):
        tasks = parse_errand_tasks([{}, {"description": "Drop keys"}])
        assert [t.title for t in tasks] == ["Task 1", "Drop keys"]

    def test_sorted_by_order(self):
        tasks = parse_errand_tasks([
            {"title": "second", "order_index": 1},
            {"title": "first", "order_index": 0},
        ])
        assert [t.title for t in tasks] == ["first", "second"]

    def test_existing_tasks_pass_through(self):
        task = ErrandTask(id="x", title="Kept")
        assert parse_errand_tasks([task]) == [task]


class TestTaskStates:
    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("completed", TaskState.COMPLETED),
            ("complete_task", TaskState.COMPLETED),
            ("in_progress", TaskState.STARTED),
            ("task_activated", TaskState.ACTIVATED),
            ("driver_en_route", TaskState.DRIVER_ON_WAY),
            ("DRIVER_ARRIVED", TaskState.DRIVER_ARRIVED),
            ("bogus", TaskState.PENDING),
            (None, TaskState.PENDING),
        ],
    )
    def test_normalize(self, raw, expected):
        assert normalize_task_state(raw) == expected

    def test_next_state_walks_the_sequence(self):
        state = TaskState.PENDING
        seen = [state]
        while state != TaskState.COMPLETED:
            state = next_task_state(state)
            seen.append(state)
        assert seen == list(TaskState)

    def test_next_state_saturates(self):
        assert next_task_state("completed") == TaskState.COMPLETED

    def test_describe(self):
        assert describe_task_state("started") == "Task in progress"


class TestSummarize:
    def test_summary(self, tasks):
        summary = summarize_errand_tasks(tasks(3, completed=1))
        assert (summary.total, summary.completed, summary.remaining) == (3, 1, 2)
        assert summary.active_task_index == 1
        assert summary.active_task.title == "Stop 2"

    def test_all_done(self, tasks):
        summary = summarize_errand_tasks(tasks(2, completed=2))
        assert summary.active_task_index is None
        assert summary.active_task is None
