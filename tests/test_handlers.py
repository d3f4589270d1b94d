"""Tests for intent handlers."""

from __future__ import annotations

import datetime
from collections.abc import Iterator
from unittest.mock import patch

import pytest

from voice_planner.dialogs.handlers import (
    handle_complete_task,
    handle_create_task,
    handle_delete_task,
    handle_query_tasks,
    handle_update_task,
    handle_update_task_status,
)
from voice_planner.dialogs.intents import (
    StatusSlot,
    TaskReferenceSlots,
    TextSlot,
    UpdateTaskStatusSlots,
    UserRequestSlots,
)
from voice_planner.dialogs.nlp import MatchTier, StatusEvidence
from voice_planner.store.models import (
    CandidateTask,
    Priority,
    QueryFilter,
    QueryKind,
    Status,
    TimeWindow,
)

NOW = datetime.datetime(2026, 3, 1, 10, 0, tzinfo=datetime.UTC)


def _candidates() -> list[CandidateTask]:
    return [
        CandidateTask(id="1", name="Quarterly Report"),
        CandidateTask(id="2", name="Buy groceries", status=Status.DONE),
        CandidateTask(id="3", name="Call mom", priority=Priority.HIGH),
    ]


@pytest.fixture(autouse=True)
def _no_dateparser() -> Iterator[None]:
    with patch("voice_planner.dialogs.nlp.date_parser.search_dates", return_value=None):
        yield


class TestCreateTask:
    def test_parses_request(self) -> None:
        slots = UserRequestSlots(TextSlot("add finish quarterly report tomorrow high priority"))
        result = handle_create_task(slots, now=NOW)
        assert result is not None
        assert result.cleaned_name == "finish quarterly report"
        assert result.due == datetime.date(2026, 3, 2)
        assert result.priority == Priority.HIGH

    def test_no_request(self) -> None:
        assert handle_create_task(UserRequestSlots(), now=NOW) is None


class TestQueryTasks:
    def test_overdue(self) -> None:
        result = handle_query_tasks(UserRequestSlots(TextSlot("what's overdue")), now=NOW)
        assert result.kind == QueryKind.TIME
        assert result.time_window == TimeWindow(start=None, end=NOW)
        assert result.excluded_status == Status.DONE

    def test_no_request_lists_everything(self) -> None:
        assert handle_query_tasks(UserRequestSlots(), now=NOW) == QueryFilter()


class TestCompleteTask:
    def test_matches_and_targets_done(self) -> None:
        slots = TaskReferenceSlots(TextSlot("the quarterly report"))
        result = handle_complete_task(slots, _candidates())
        assert result is not None
        assert result.task.id == "1"
        assert result.tier == MatchTier.EXACT
        assert result.target_status == Status.DONE

    def test_no_match(self) -> None:
        slots = TaskReferenceSlots(TextSlot("water the plants"))
        assert handle_complete_task(slots, _candidates()) is None

    def test_no_slot(self) -> None:
        assert handle_complete_task(TaskReferenceSlots(), _candidates()) is None

    def test_no_candidates(self) -> None:
        assert handle_complete_task(TaskReferenceSlots(TextSlot("call mom")), []) is None


class TestDeleteTask:
    def test_matches_without_status(self) -> None:
        result = handle_delete_task(TaskReferenceSlots(TextSlot("call mom")), _candidates())
        assert result is not None
        assert result.task.id == "3"
        assert result.target_status is None


class TestUpdateTaskStatus:
    def test_to_phrase_in_task_name(self) -> None:
        slots = UpdateTaskStatusSlots(TextSlot("quarterly report to in progress"))
        result = handle_update_task_status(slots, _candidates())
        assert result is not None
        assert result.task.id == "1"
        assert result.target_status == Status.IN_PROCESS
        assert result.evidence == StatusEvidence.TO_PHRASE

    def test_status_slot(self) -> None:
        slots = UpdateTaskStatusSlots(
            TextSlot("quarterly report"), StatusSlot(value="done", status=Status.DONE)
        )
        result = handle_update_task_status(slots, _candidates())
        assert result is not None
        assert result.target_status == Status.DONE
        assert result.evidence == StatusEvidence.SLOT

    def test_full_utterance(self) -> None:
        slots = UpdateTaskStatusSlots(TextSlot("quarterly report"))
        result = handle_update_task_status(
            slots, _candidates(), utterance="mark quarterly report as done"
        )
        assert result is not None
        assert result.target_status == Status.DONE
        assert result.evidence == StatusEvidence.COMMAND_PHRASE

    def test_cycles_from_current(self) -> None:
        slots = UpdateTaskStatusSlots(TextSlot("buy groceries"))
        result = handle_update_task_status(slots, _candidates())
        assert result is not None
        assert result.task.id == "2"
        assert result.target_status == Status.TO_DO
        assert result.evidence == StatusEvidence.CYCLE

    def test_no_match(self) -> None:
        slots = UpdateTaskStatusSlots(TextSlot("water the plants"))
        assert handle_update_task_status(slots, _candidates()) is None


class TestUpdateTask:
    def test_reschedule(self) -> None:
        slots = UserRequestSlots(TextSlot("move quarterly report to friday"))
        result = handle_update_task(slots, _candidates(), now=NOW)
        assert result is not None
        assert result.task.id == "1"
        assert result.due == datetime.date(2026, 3, 6)
        assert result.status is None
        assert result.priority is None
        assert result.has_changes

    def test_priority(self) -> None:
        slots = UserRequestSlots(TextSlot("set quarterly report priority to high"))
        result = handle_update_task(slots, _candidates(), now=NOW)
        assert result is not None
        assert result.task.id == "1"
        assert result.priority == Priority.HIGH
        assert result.due is None

    def test_unchanged_priority_not_reported(self) -> None:
        slots = UserRequestSlots(TextSlot("set call mom priority to high"))
        result = handle_update_task(slots, _candidates(), now=NOW)
        assert result is not None
        assert result.task.id == "3"
        assert result.priority is None
        assert not result.has_changes

    def test_no_changes(self) -> None:
        slots = UserRequestSlots(TextSlot("update quarterly report"))
        result = handle_update_task(slots, _candidates(), now=NOW)
        assert result is not None
        assert not result.has_changes

    def test_no_request(self) -> None:
        assert handle_update_task(UserRequestSlots(), _candidates(), now=NOW) is None
