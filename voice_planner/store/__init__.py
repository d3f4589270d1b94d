"""Task-store records and filters."""

from voice_planner.store.filters import filter_tasks, matches_query, to_store_filter
from voice_planner.store.models import (
    CandidateTask,
    Category,
    Priority,
    QueryFilter,
    QueryKind,
    Status,
    TimeWindow,
    parse_category,
    parse_priority,
    parse_status,
)

__all__ = [
    "CandidateTask",
    "Category",
    "Priority",
    "QueryFilter",
    "QueryKind",
    "Status",
    "TimeWindow",
    "filter_tasks",
    "matches_query",
    "parse_category",
    "parse_priority",
    "parse_status",
    "to_store_filter",
]
