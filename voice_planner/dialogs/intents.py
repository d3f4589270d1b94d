"""Intent IDs and slot extraction for voice-platform intent payloads."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from voice_planner.store.models import Status, parse_status

# Intent IDs configured in the voice-platform console
CREATE_TASK = "create_task"
COMPLETE_TASK = "complete_task"
UPDATE_TASK_STATUS = "update_task_status"
UPDATE_TASK = "update_task"
DELETE_TASK = "delete_task"
QUERY_TASKS = "query_tasks"

ALL_INTENTS = frozenset(
    {CREATE_TASK, COMPLETE_TASK, UPDATE_TASK_STATUS, UPDATE_TASK, DELETE_TASK, QUERY_TASKS}
)


@dataclass(frozen=True, slots=True)
class TextSlot:
    """A free-text slot value."""

    value: str


@dataclass(frozen=True, slots=True)
class StatusSlot:
    """A status slot; ``status`` is ``None`` when the spoken value is unknown."""

    value: str
    status: Status | None


Slot = TextSlot | StatusSlot


@dataclass(frozen=True, slots=True)
class UserRequestSlots:
    """Extracted slots for intents carrying one free-form request."""

    user_request: TextSlot | None = None


@dataclass(frozen=True, slots=True)
class TaskReferenceSlots:
    """Extracted slots for complete_task and delete_task intents."""

    task_name: TextSlot | None = None


@dataclass(frozen=True, slots=True)
class UpdateTaskStatusSlots:
    """Extracted slots for update_task_status intent."""

    task_name: TextSlot | None = None
    status: StatusSlot | None = None


def _get_slot_value(intent_data: dict[str, Any], slot_name: str) -> str | None:
    """Extract a non-empty string slot value from intent data."""
    slots = intent_data.get("slots") or {}
    slot = slots.get(slot_name) or {}
    if not isinstance(slot, dict):
        return None
    value = slot.get("value")
    if not isinstance(value, str) or not value.strip():
        return None
    return value.strip()


def _text_slot(intent_data: dict[str, Any], *slot_names: str) -> TextSlot | None:
    """Return the first filled slot among *slot_names*."""
    for name in slot_names:
        value = _get_slot_value(intent_data, name)
        if value is not None:
            return TextSlot(value)
    return None


def _status_slot(intent_data: dict[str, Any], slot_name: str) -> StatusSlot | None:
    value = _get_slot_value(intent_data, slot_name)
    if value is None:
        return None
    return StatusSlot(value=value, status=parse_status(value))


def extract_user_request_slots(intent_data: dict[str, Any]) -> UserRequestSlots:
    """Extract slots from create_task, update_task and query_tasks intents."""
    return UserRequestSlots(user_request=_text_slot(intent_data, "userRequest"))


def extract_task_reference_slots(intent_data: dict[str, Any]) -> TaskReferenceSlots:
    """Extract slots from complete_task and delete_task intents.

    Phrase intents fill ``taskName``, structured intents ``taskNameValue``.
    """
    return TaskReferenceSlots(task_name=_text_slot(intent_data, "taskName", "taskNameValue"))


def extract_update_task_status_slots(intent_data: dict[str, Any]) -> UpdateTaskStatusSlots:
    """Extract slots from update_task_status intent."""
    return UpdateTaskStatusSlots(
        task_name=_text_slot(intent_data, "taskName", "taskNameValue"),
        status=_status_slot(intent_data, "status"),
    )
