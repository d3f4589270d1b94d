"""Render QueryFilters for the task database and evaluate them in memory."""

from __future__ import annotations

import datetime
from collections.abc import Iterable
from typing import Any

from voice_planner.store.models import CandidateTask, QueryFilter, TimeWindow

# Property names of the task database.
NAME_PROPERTY = "Name"
DUE_PROPERTY = "Due Date Time"
STATUS_PROPERTY = "Status"
CATEGORY_PROPERTY = "Category"
PRIORITY_PROPERTY = "Priority"


def _date_clause(window: TimeWindow) -> dict[str, Any]:
    condition: dict[str, str] = {}
    if window.start is not None:
        condition["on_or_after"] = window.start.isoformat()
    if window.end is not None:
        # Open-ended windows ("overdue", "before 5pm") exclude their bound.
        key = "before" if window.start is None else "on_or_before"
        condition[key] = window.end.isoformat()
    return {"property": DUE_PROPERTY, "date": condition}


def _select_clause(prop: str, op: str, value: str) -> dict[str, Any]:
    return {"property": prop, "select": {op: value}}


def to_store_filter(query: QueryFilter) -> dict[str, Any]:
    """Build the database filter object for *query*.

    One predicate is returned as-is, several are wrapped in ``{"and": [...]}``
    and an empty query yields ``{}``.
    """
    clauses: list[dict[str, Any]] = []

    if query.time_window is not None:
        clauses.append(_date_clause(query.time_window))
    if query.excluded_status is not None:
        clauses.append(
            _select_clause(STATUS_PROPERTY, "does_not_equal", query.excluded_status.value)
        )
    if query.status is not None:
        clauses.append(_select_clause(STATUS_PROPERTY, "equals", query.status.value))
    if query.category is not None:
        clauses.append(_select_clause(CATEGORY_PROPERTY, "equals", query.category.value))
    if query.priority is not None:
        clauses.append(_select_clause(PRIORITY_PROPERTY, "equals", query.priority.value))
    if query.keyword:
        clauses.append({"property": NAME_PROPERTY, "title": {"contains": query.keyword}})

    if not clauses:
        return {}
    if len(clauses) == 1:
        return clauses[0]
    return {"and": clauses}


def _as_datetime(
    value: datetime.date | datetime.datetime, tz: datetime.tzinfo | None
) -> datetime.datetime:
    if isinstance(value, datetime.datetime):
        return value if value.tzinfo is not None else value.replace(tzinfo=tz)
    return datetime.datetime.combine(value, datetime.time.min, tzinfo=tz)


def _in_window(task: CandidateTask, window: TimeWindow) -> bool:
    if task.due_date is None:
        return False
    bound = window.start or window.end
    due = _as_datetime(task.due_date, bound.tzinfo if bound else None)
    if window.start is not None and due < window.start:
        return False
    if window.end is not None:
        if window.start is None:
            return due < window.end
        return due <= window.end
    return True


def matches_query(task: CandidateTask, query: QueryFilter) -> bool:
    """Return ``True`` if *task* satisfies every predicate of *query*."""
    if query.time_window is not None and not _in_window(task, query.time_window):
        return False
    if query.excluded_status is not None and task.status == query.excluded_status:
        return False
    if query.status is not None and task.status != query.status:
        return False
    if query.category is not None and task.category != query.category:
        return False
    if query.priority is not None and task.priority != query.priority:
        return False
    if query.keyword:
        name = task.name.lower()
        return all(word in name for word in query.keyword.split())
    return True


def filter_tasks(tasks: Iterable[CandidateTask], query: QueryFilter) -> list[CandidateTask]:
    """Return the tasks matching *query*, keeping their order."""
    return [task for task in tasks if matches_query(task, query)]
