"""Turn a read utterance ("what's due this week?") into a QueryFilter."""

from __future__ import annotations

import datetime
import re

from voice_planner.config import settings
from voice_planner.dialogs.nlp.date_parser import ensure_aware, find_date_expression
from voice_planner.dialogs.nlp.keywords import (
    CATEGORY_PHRASES,
    PRIORITY_PHRASES,
    QUERY_STATUS_PHRASES,
    scan_value,
)
from voice_planner.dialogs.nlp.normalizer import STOP_WORDS
from voice_planner.dialogs.nlp.tokenizer import tokenize
from voice_planner.store.models import QueryFilter, QueryKind, Status, TimeWindow

_QUERY_WORDS = frozenset(
    {
        "what",
        "what's",
        "whats",
        "are",
        "is",
        "there",
        "my",
        "tasks",
        "task",
        "for",
        "show",
        "me",
        "list",
        "tell",
        "check",
        "read",
        "do",
        "i",
        "have",
        "about",
        "any",
        "all",
        "due",
        "find",
        "get",
    }
)

_I = re.IGNORECASE
_TODAY_RE = re.compile(r"\btoday\b", _I)
_TOMORROW_RE = re.compile(r"\btomorrow\b", _I)
_THIS_WEEK_RE = re.compile(r"\bthis\s+week\b", _I)
_NEXT_WEEK_RE = re.compile(r"\bnext\s+week\b", _I)
_OVERDUE_RE = re.compile(r"\b(?:overdue|past\s+due|late)\b", _I)
_BEFORE_AFTER_RE = re.compile(r"\b(before|after)\s+(.+)$", _I)


def _day_window(day: datetime.date, tz: datetime.tzinfo | None) -> TimeWindow:
    return TimeWindow(
        start=datetime.datetime.combine(day, datetime.time.min, tzinfo=tz),
        end=datetime.datetime.combine(day, datetime.time.max, tzinfo=tz),
    )


def _week_window(first_day: datetime.date, tz: datetime.tzinfo | None) -> TimeWindow:
    return TimeWindow(
        start=datetime.datetime.combine(first_day, datetime.time.min, tzinfo=tz),
        end=datetime.datetime.combine(
            first_day + datetime.timedelta(days=6), datetime.time.max, tzinfo=tz
        ),
    )


def _week_start(day: datetime.date) -> datetime.date:
    """Sunday on or before *day*."""
    return day - datetime.timedelta(days=(day.weekday() + 1) % 7)


def _bound(
    value: datetime.date | datetime.datetime, tz: datetime.tzinfo | None
) -> datetime.datetime:
    if isinstance(value, datetime.datetime):
        return value
    return datetime.datetime.combine(value, datetime.time.min, tzinfo=tz)


def _time_predicate(
    text: str, now: datetime.datetime
) -> tuple[TimeWindow, Status | None] | None:
    """Return the due-date window named in *text* and any status it excludes."""
    today = now.date()
    tz = now.tzinfo

    m = _TODAY_RE.search(text)
    if m:
        return _day_window(today, tz), None
    m = _TOMORROW_RE.search(text)
    if m:
        return _day_window(today + datetime.timedelta(days=1), tz), None
    m = _THIS_WEEK_RE.search(text)
    if m:
        return _week_window(_week_start(today), tz), None
    m = _NEXT_WEEK_RE.search(text)
    if m:
        first_day = _week_start(today) + datetime.timedelta(days=7)
        return _week_window(first_day, tz), None
    m = _OVERDUE_RE.search(text)
    if m:
        return TimeWindow(start=None, end=now), Status.DONE

    m = _BEFORE_AFTER_RE.search(text)
    if m:
        anchor = find_date_expression(m.group(2), now=now)
        if anchor is not None:
            bound = _bound(anchor.value, tz)
            window = (
                TimeWindow(start=None, end=bound)
                if m.group(1).lower() == "before"
                else TimeWindow(start=bound, end=None)
            )
            return window, None

    anchor = find_date_expression(text, now=now)
    if anchor is not None:
        value = anchor.value
        day = value.date() if isinstance(value, datetime.datetime) else value
        return _day_window(day, tz), None

    return None


def _keyword(text: str) -> str | None:
    min_length = settings.query_keyword_min_length
    words = [
        token
        for token in tokenize(text)
        if token not in _QUERY_WORDS and token not in STOP_WORDS and len(token) >= min_length
    ]
    return " ".join(words) or None


def parse_query(raw: str, *, now: datetime.datetime) -> QueryFilter:
    """Build a QueryFilter from a read utterance.

    Time, status, category and priority predicates are detected
    independently. One predicate sets ``kind`` to its own type, several
    give ``COMBINATION``. With no predicate the remaining words, minus
    query and stop words, become a free-text ``keyword``.

    All windows are computed against *now*; weeks start on Sunday.
    """
    if not raw or not raw.strip():
        return QueryFilter()

    now = ensure_aware(now)

    time_hit = _time_predicate(raw, now)
    status = scan_value(raw, QUERY_STATUS_PHRASES)
    category = scan_value(raw, CATEGORY_PHRASES)
    priority = scan_value(raw, PRIORITY_PHRASES)

    window: TimeWindow | None = None
    excluded: Status | None = None
    if time_hit is not None:
        window, excluded = time_hit

    kinds = [
        kind
        for kind, present in (
            (QueryKind.TIME, window is not None),
            (QueryKind.STATUS, status is not None),
            (QueryKind.CATEGORY, category is not None),
            (QueryKind.PRIORITY, priority is not None),
        )
        if present
    ]

    if not kinds:
        return QueryFilter(kind=QueryKind.KEYWORD, keyword=_keyword(raw))

    return QueryFilter(
        kind=kinds[0] if len(kinds) == 1 else QueryKind.COMBINATION,
        time_window=window,
        status=status,
        category=category,
        priority=priority,
        excluded_status=excluded,
    )
