"""Pydantic models for task-store records and the enums they share."""

from __future__ import annotations

import datetime
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field, field_validator


class Status(StrEnum):
    """Task status, cycling TO_DO -> IN_PROCESS -> DONE -> TO_DO."""

    TO_DO = "TO DO"
    IN_PROCESS = "IN_PROCESS"
    DONE = "DONE"

    def next(self) -> Status:
        """Return the status that follows this one in the implicit cycle."""
        return _STATUS_CYCLE[self]


_STATUS_CYCLE: dict[Status, Status] = {
    Status.TO_DO: Status.IN_PROCESS,
    Status.IN_PROCESS: Status.DONE,
    Status.DONE: Status.TO_DO,
}


class Priority(StrEnum):
    """Task priority levels."""

    LOW = "LOW"
    NORMAL = "NORMAL"
    HIGH = "HIGH"


class Category(StrEnum):
    """Task categories."""

    PERSONAL = "PERSONAL"
    WORK = "WORK"


DEFAULT_STATUS = Status.TO_DO
DEFAULT_PRIORITY = Priority.NORMAL
DEFAULT_CATEGORY = Category.PERSONAL

_STATUS_MAP: dict[str, Status] = {
    "to do": Status.TO_DO,
    "to-do": Status.TO_DO,
    "todo": Status.TO_DO,
    "to_do": Status.TO_DO,
    "not started": Status.TO_DO,
    "in progress": Status.IN_PROCESS,
    "in-progress": Status.IN_PROCESS,
    "in_progress": Status.IN_PROCESS,
    "in_process": Status.IN_PROCESS,
    "in process": Status.IN_PROCESS,
    "doing": Status.IN_PROCESS,
    "done": Status.DONE,
    "complete": Status.DONE,
    "completed": Status.DONE,
    "finished": Status.DONE,
}

_PRIORITY_MAP: dict[str, Priority] = {
    # high / urgent
    "high": Priority.HIGH,
    "high priority": Priority.HIGH,
    "urgent": Priority.HIGH,
    "important": Priority.HIGH,
    "critical": Priority.HIGH,
    # normal
    "normal": Priority.NORMAL,
    "normal priority": Priority.NORMAL,
    "medium": Priority.NORMAL,
    "medium priority": Priority.NORMAL,
    # low
    "low": Priority.LOW,
    "low priority": Priority.LOW,
}

_CATEGORY_MAP: dict[str, Category] = {
    "personal": Category.PERSONAL,
    "home": Category.PERSONAL,
    "private": Category.PERSONAL,
    "work": Category.WORK,
    "office": Category.WORK,
    "business": Category.WORK,
}


def _normalize(text: str) -> str:
    return " ".join(text.strip().lower().split())


def parse_status(text: str | None) -> Status | None:
    """Return the ``Status`` named by *text*.

    Accepts enum values ("IN_PROCESS"), store labels ("In Progress") and
    spoken forms ("todo", "complete"). Returns ``None`` if the text is empty
    or not recognized.
    """
    if not text:
        return None
    return _STATUS_MAP.get(_normalize(text))


def parse_priority(text: str | None) -> Priority | None:
    """Return the ``Priority`` for a priority word, or ``None`` if unknown.

    Legacy values ("medium", "urgent", mixed case) map onto the three levels.
    """
    if not text:
        return None
    return _PRIORITY_MAP.get(_normalize(text))


def parse_category(text: str | None) -> Category | None:
    """Return the ``Category`` for a category word, or ``None`` if unknown."""
    if not text:
        return None
    return _CATEGORY_MAP.get(_normalize(text))


class CandidateTask(BaseModel):
    """Read-only view of an existing task supplied by the caller.

    Field aliases follow the property names of the task database, so raw
    store records validate directly. Unrecognized enum values fall back to
    the defaults instead of failing validation.
    """

    id: str
    name: str = Field(alias="Name")
    status: Status = Field(default=DEFAULT_STATUS, alias="Status")
    priority: Priority = Field(default=DEFAULT_PRIORITY, alias="Priority")
    category: Category = Field(default=DEFAULT_CATEGORY, alias="Category")
    due_date: datetime.date | datetime.datetime | None = Field(
        default=None, alias="Due Date Time"
    )

    model_config = {"populate_by_name": True, "frozen": True}

    @field_validator("status", mode="before")
    @classmethod
    def _coerce_status(cls, value: Any) -> Status:
        if isinstance(value, Status):
            return value
        return parse_status(value if isinstance(value, str) else None) or DEFAULT_STATUS

    @field_validator("priority", mode="before")
    @classmethod
    def _coerce_priority(cls, value: Any) -> Priority:
        if isinstance(value, Priority):
            return value
        return parse_priority(value if isinstance(value, str) else None) or DEFAULT_PRIORITY

    @field_validator("category", mode="before")
    @classmethod
    def _coerce_category(cls, value: Any) -> Category:
        if isinstance(value, Category):
            return value
        return parse_category(value if isinstance(value, str) else None) or DEFAULT_CATEGORY


class QueryKind(StrEnum):
    """Which predicate shape a read query produced."""

    TIME = "time"
    STATUS = "status"
    CATEGORY = "category"
    PRIORITY = "priority"
    KEYWORD = "keyword"
    COMBINATION = "combination"


@dataclass(frozen=True, slots=True)
class TimeWindow:
    """Due-date window; a ``None`` bound is open-ended."""

    start: datetime.datetime | None = None
    end: datetime.datetime | None = None


@dataclass(frozen=True, slots=True)
class QueryFilter:
    """Declarative filter built from a read utterance.

    Predicates combine conjunctively. ``excluded_status`` carries the
    "not DONE" condition implied by overdue queries.
    """

    kind: QueryKind = QueryKind.KEYWORD
    time_window: TimeWindow | None = None
    status: Status | None = None
    category: Category | None = None
    priority: Priority | None = None
    keyword: str | None = None
    excluded_status: Status | None = None
