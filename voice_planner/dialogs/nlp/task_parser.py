"""Extract task attributes from a create/update utterance."""

from __future__ import annotations

import datetime
import re
from dataclasses import dataclass

from voice_planner.dialogs.nlp.date_parser import find_date_expression, remove_spans
from voice_planner.dialogs.nlp.keywords import (
    CATEGORY_MARKER_RE,
    CATEGORY_PHRASES,
    PRIORITY_PHRASES,
    TASK_STATUS_PHRASES,
    remove_phrases,
    scan_value,
)
from voice_planner.dialogs.nlp.normalizer import (
    CREATE_PREFIXES,
    clean_task_name,
    strip_command_wrappers,
)
from voice_planner.store.models import (
    DEFAULT_CATEGORY,
    DEFAULT_PRIORITY,
    DEFAULT_STATUS,
    Category,
    Priority,
    Status,
)

_DURATION_RE = re.compile(r"\b(?:for\s+)?\d+\s*(?:minutes?|mins?|hours?|hrs?)\b", re.IGNORECASE)


@dataclass(frozen=True, slots=True)
class TaskAttributes:
    """Structured attributes read from one utterance."""

    task_name: str
    cleaned_name: str
    due: datetime.date | datetime.datetime | None = None
    status: Status = DEFAULT_STATUS
    category: Category = DEFAULT_CATEGORY
    priority: Priority = DEFAULT_PRIORITY


def parse_task(raw: str, *, now: datetime.datetime) -> TaskAttributes:
    """Parse a spoken task description.

    The due date span is cut out first, then priority and category markers,
    then the command wrappers and stop words. ``task_name`` keeps the
    caller's casing with only the date removed; ``cleaned_name`` is the
    normalized residual and is never empty while non-command words exist.
    """
    if not raw or not raw.strip():
        return TaskAttributes(task_name="", cleaned_name="")

    text = " ".join(raw.split())

    date_match = find_date_expression(text, now=now)
    if date_match is not None:
        without_date = remove_spans(text, date_match.spans)
        due = date_match.value
    else:
        without_date = text
        due = None

    status = scan_value(text, TASK_STATUS_PHRASES) or DEFAULT_STATUS
    category = scan_value(text, CATEGORY_PHRASES) or DEFAULT_CATEGORY
    priority = scan_value(text, PRIORITY_PHRASES) or DEFAULT_PRIORITY

    residual = remove_phrases(without_date, PRIORITY_PHRASES)
    residual = CATEGORY_MARKER_RE.sub(" ", residual)
    residual = _DURATION_RE.sub(" ", residual)
    cleaned = clean_task_name(residual, prefixes=CREATE_PREFIXES)

    if not cleaned:
        cleaned = strip_command_wrappers(text, prefixes=CREATE_PREFIXES) or text

    return TaskAttributes(
        task_name=without_date or text,
        cleaned_name=cleaned,
        due=due,
        status=status,
        category=category,
        priority=priority,
    )
