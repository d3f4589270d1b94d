"""Find date/time expressions in free text and resolve them against *now*."""

from __future__ import annotations

import calendar
import datetime
import logging
import re
from dataclasses import dataclass
from zoneinfo import ZoneInfo

from dateparser.search import search_dates

from voice_planner.config import settings

logger = logging.getLogger(__name__)

_NUMBER_WORDS: dict[str, int] = {
    "a": 1,
    "an": 1,
    "one": 1,
    "two": 2,
    "three": 3,
    "four": 4,
    "five": 5,
    "six": 6,
    "seven": 7,
    "eight": 8,
    "nine": 9,
    "ten": 10,
    "eleven": 11,
    "twelve": 12,
}

_WEEKDAYS: dict[str, int] = {
    "monday": 0,
    "tuesday": 1,
    "wednesday": 2,
    "thursday": 3,
    "friday": 4,
    "saturday": 5,
    "sunday": 6,
}

_MONTHS: dict[str, int] = {
    "january": 1,
    "jan": 1,
    "february": 2,
    "feb": 2,
    "march": 3,
    "mar": 3,
    "april": 4,
    "apr": 4,
    "may": 5,
    "june": 6,
    "jun": 6,
    "july": 7,
    "jul": 7,
    "august": 8,
    "aug": 8,
    "september": 9,
    "sept": 9,
    "sep": 9,
    "october": 10,
    "oct": 10,
    "november": 11,
    "nov": 11,
    "december": 12,
    "dec": 12,
}

_NUM = rf"(\d+|{'|'.join(_NUMBER_WORDS)})"
_MONTH = rf"({'|'.join(sorted(_MONTHS, key=len, reverse=True))})\.?"
_WEEKDAY = rf"({'|'.join(_WEEKDAYS)})"
_ORD = r"(?:st|nd|rd|th)?"

_I = re.IGNORECASE

_DAY_AFTER_TOMORROW_RE = re.compile(r"\b(?:the\s+)?day\s+after\s+tomorrow\b", _I)
_RELATIVE_DAY_RE = re.compile(r"\b(today|tonight|tomorrow|yesterday)\b", _I)
_WEEKDAY_RE = re.compile(rf"\b(?:(?:next|this|on)\s+)?{_WEEKDAY}\b", _I)
_IN_PERIOD_RE = re.compile(rf"\bin\s+{_NUM}\s+(day|week|month|year)s?\b", _I)
_NEXT_PERIOD_RE = re.compile(r"\bnext\s+(week|month|year)\b", _I)
_ISO_DATE_RE = re.compile(r"\b(\d{4})-(\d{1,2})-(\d{1,2})\b")
_MONTH_DAY_RE = re.compile(rf"\b{_MONTH}\s+(\d{{1,2}}){_ORD}(?:,?\s+(\d{{4}}))?\b", _I)
_DAY_MONTH_RE = re.compile(
    rf"\b(?:the\s+)?(\d{{1,2}}){_ORD}\s+(?:of\s+)?{_MONTH}(?:,?\s+(\d{{4}}))?\b", _I
)
_SLASH_DATE_RE = re.compile(r"\b(\d{1,2})/(\d{1,2})(?:/(\d{2}|\d{4}))?\b")
_DOTTED_DATE_RE = re.compile(r"\b(\d{1,2})\.(\d{1,2})\.(\d{4}|\d{2})\b")

_IN_DURATION_RE = re.compile(rf"\bin\s+{_NUM}\s+(hour|minute|min)s?\b", _I)
_CLOCK_12_RE = re.compile(r"\b(?:at\s+)?(\d{1,2})(?::(\d{2}))?\s*([ap])\.?m\.?(?=\W|$)", _I)
_CLOCK_24_RE = re.compile(r"\b(?:at\s+)?(\d{1,2}):(\d{2})\b", _I)
_NAMED_TIME_RE = re.compile(r"\b(?:at\s+)?(noon|midday|midnight)\b", _I)

_LEADING_PREPOSITION_RE = re.compile(r"(?:\b(?:due|by|on|at|for)\s+){1,2}$", _I)

# Left at the edges of a name once the date span is cut out.
_EDGE_WORDS = frozenset({"on", "at", "by", "due", "for", "in", "the", "to", "until"})

# Single words dateparser reads as dates but that usually are not.
_AMBIGUOUS_WORDS = frozenset({"may", "sat", "sun", "second", "march", "now", "mon", "wed"})
# dateparser hits need a word ("15th", "noon"); bare numbers belong to the name.
_HAS_LETTER_RE = re.compile(r"[^\W\d_]")
_TIME_HINT_RE = re.compile(
    r"\d\s*[ap]\.?m\b|\d:\d{2}|\bnoon\b|\bmidnight\b|\bhours?\b|\bminutes?\b", _I
)

_TONIGHT = datetime.time(20, 0)

Span = tuple[int, int]


@dataclass(frozen=True, slots=True)
class DateMatch:
    """A resolved date expression and the text spans it was read from.

    ``value`` is a ``date`` when no time of day was spoken, an aware
    ``datetime`` otherwise.
    """

    value: datetime.date | datetime.datetime
    spans: tuple[Span, ...]


def ensure_aware(now: datetime.datetime) -> datetime.datetime:
    """Attach the configured default timezone to a naive *now*."""
    if now.tzinfo is None:
        return now.replace(tzinfo=ZoneInfo(settings.default_timezone))
    return now


def _add_months(dt: datetime.date, months: int) -> datetime.date:
    """Add *months* to *dt*, clamping the day to the last valid day."""
    month = dt.month - 1 + months
    year = dt.year + month // 12
    month = month % 12 + 1
    max_day = calendar.monthrange(year, month)[1]
    day = min(dt.day, max_day)
    return dt.replace(year=year, month=month, day=day)


def _number(text: str) -> int:
    lowered = text.lower()
    if lowered in _NUMBER_WORDS:
        return _NUMBER_WORDS[lowered]
    return int(lowered)


def _with_preposition(text: str, start: int, end: int) -> Span:
    """Widen a span leftwards over "due", "by", "on", "at" or "for"."""
    m = _LEADING_PREPOSITION_RE.search(text, 0, start)
    if m and m.end() == start:
        return m.start(), end
    return start, end


def _future_date(today: datetime.date, year: int | None, month: int, day: int) -> datetime.date:
    """Build a date; a year-less date already past this year rolls to next year."""
    if year is not None:
        if year < 100:
            year += 2000
        return datetime.date(year, month, day)
    candidate = datetime.date(today.year, month, day)
    if candidate < today:
        candidate = datetime.date(today.year + 1, month, day)
    return candidate


def _find_day(
    text: str, today: datetime.date
) -> tuple[datetime.date, Span, datetime.time | None] | None:
    """Return the first day expression in *text* with its span.

    The third element is a default time of day implied by the word itself
    ("tonight").
    """
    m = _DAY_AFTER_TOMORROW_RE.search(text)
    if m:
        return today + datetime.timedelta(days=2), m.span(), None

    m = _RELATIVE_DAY_RE.search(text)
    if m:
        word = m.group(1).lower()
        offset = {"today": 0, "tonight": 0, "tomorrow": 1, "yesterday": -1}[word]
        default_time = _TONIGHT if word == "tonight" else None
        return today + datetime.timedelta(days=offset), m.span(), default_time

    m = _IN_PERIOD_RE.search(text)
    if m:
        amount = _number(m.group(1))
        unit = m.group(2).lower()
        if unit == "day":
            day = today + datetime.timedelta(days=amount)
        elif unit == "week":
            day = today + datetime.timedelta(weeks=amount)
        elif unit == "month":
            day = _add_months(today, amount)
        else:
            day = _add_months(today, amount * 12)
        return day, m.span(), None

    m = _NEXT_PERIOD_RE.search(text)
    if m:
        unit = m.group(1).lower()
        if unit == "week":
            day = today + datetime.timedelta(weeks=1)
        elif unit == "month":
            day = _add_months(today, 1)
        else:
            day = _add_months(today, 12)
        return day, m.span(), None

    m = _WEEKDAY_RE.search(text)
    if m:
        target = _WEEKDAYS[m.group(1).lower()]
        # Always strictly after today: "monday" said on a Monday is a week out.
        delta = (target - today.weekday() - 1) % 7 + 1
        return today + datetime.timedelta(days=delta), m.span(), None

    for pattern in (_ISO_DATE_RE, _MONTH_DAY_RE, _DAY_MONTH_RE, _DOTTED_DATE_RE, _SLASH_DATE_RE):
        for m in pattern.finditer(text):
            try:
                day = _date_from_match(pattern, m, today)
            except ValueError:
                continue
            return day, m.span(), None

    return None


def _date_from_match(
    pattern: re.Pattern[str], m: re.Match[str], today: datetime.date
) -> datetime.date:
    if pattern is _ISO_DATE_RE:
        return datetime.date(int(m.group(1)), int(m.group(2)), int(m.group(3)))
    if pattern is _MONTH_DAY_RE:
        year = int(m.group(3)) if m.group(3) else None
        return _future_date(today, year, _MONTHS[m.group(1).lower()], int(m.group(2)))
    if pattern is _DAY_MONTH_RE:
        year = int(m.group(3)) if m.group(3) else None
        return _future_date(today, year, _MONTHS[m.group(2).lower()], int(m.group(1)))
    if pattern is _DOTTED_DATE_RE:
        return _future_date(today, int(m.group(3)), int(m.group(2)), int(m.group(1)))
    year = int(m.group(3)) if m.group(3) else None
    return _future_date(today, year, int(m.group(1)), int(m.group(2)))


def _find_time(text: str) -> tuple[datetime.time, Span] | None:
    """Return the first clock-time expression in *text* with its span."""
    for m in _CLOCK_12_RE.finditer(text):
        hour = int(m.group(1))
        minute = int(m.group(2) or 0)
        if not 1 <= hour <= 12 or minute > 59:
            continue
        hour = hour % 12 + (12 if m.group(3).lower() == "p" else 0)
        return datetime.time(hour, minute), m.span()

    for m in _CLOCK_24_RE.finditer(text):
        hour, minute = int(m.group(1)), int(m.group(2))
        if hour > 23 or minute > 59:
            continue
        return datetime.time(hour, minute), m.span()

    m = _NAMED_TIME_RE.search(text)
    if m:
        word = m.group(1).lower()
        return (datetime.time(0, 0) if word == "midnight" else datetime.time(12, 0)), m.span()

    return None


def _find_duration(text: str, now: datetime.datetime) -> tuple[datetime.datetime, Span] | None:
    m = _IN_DURATION_RE.search(text)
    if not m:
        return None
    amount = _number(m.group(1))
    if m.group(2).lower() == "hour":
        return now + datetime.timedelta(hours=amount), m.span()
    return now + datetime.timedelta(minutes=amount), m.span()


def _search_with_dateparser(text: str, now: datetime.datetime) -> DateMatch | None:
    """Fallback for expressions the built-in grammar does not cover."""
    try:
        results = search_dates(
            text,
            languages=["en"],
            settings={
                "RELATIVE_BASE": now.replace(tzinfo=None),
                "PREFER_DATES_FROM": "future",
                "RETURN_AS_TIMEZONE_AWARE": False,
            },
        )
    except (ValueError, OverflowError):
        logger.debug("dateparser failed on %r", text, exc_info=True)
        return None
    if not results:
        return None

    # Results come in text order; search each one after the previous hit.
    cursor = 0
    for matched_text, value in results:
        start = text.find(matched_text, cursor)
        if start < 0:
            continue
        cursor = start + len(matched_text)
        stripped = matched_text.strip()
        if (
            len(stripped) < 3
            or stripped.lower() in _AMBIGUOUS_WORDS
            or not _HAS_LETTER_RE.search(stripped)
        ):
            continue
        span = _with_preposition(text, start, start + len(matched_text))
        if _TIME_HINT_RE.search(stripped):
            return DateMatch(value=value.replace(tzinfo=now.tzinfo), spans=(span,))
        return DateMatch(value=value.date(), spans=(span,))
    return None


def find_date_expression(text: str, *, now: datetime.datetime) -> DateMatch | None:
    """Find the best date/time anchor in *text*.

    Day expressions ("tomorrow", "next friday", "march 5", "in 3 days") and
    clock times ("at 5pm", "14:30", "noon") are located independently and
    combined into one value. Expressions the grammar does not know are
    handed to ``dateparser``.

    Returns ``None`` when the text contains no date expression.
    """
    if not text:
        return None

    now = ensure_aware(now)

    duration = _find_duration(text, now)
    if duration is not None:
        value, (start, end) = duration
        return DateMatch(value=value, spans=(_with_preposition(text, start, end),))

    day_hit = _find_day(text, now.date())
    time_hit = _find_time(text)

    if day_hit is None and time_hit is None:
        return _search_with_dateparser(text, now)

    spans: list[Span] = []
    day = now.date()
    clock: datetime.time | None = None

    if day_hit is not None:
        day, (start, end), clock = day_hit
        spans.append(_with_preposition(text, start, end))
    if time_hit is not None:
        clock, (start, end) = time_hit
        spans.append(_with_preposition(text, start, end))

    spans.sort()
    if clock is None:
        return DateMatch(value=day, spans=tuple(spans))
    return DateMatch(
        value=datetime.datetime.combine(day, clock, tzinfo=now.tzinfo),
        spans=tuple(spans),
    )


def remove_spans(text: str, spans: tuple[Span, ...]) -> str:
    """Cut *spans* out of *text*, then trim prepositions left at the edges."""
    pieces: list[str] = []
    cursor = 0
    for start, end in sorted(spans):
        if start < cursor:
            start = cursor
        pieces.append(text[cursor:start])
        cursor = max(cursor, end)
    pieces.append(text[cursor:])

    words = " ".join(pieces).split()
    while words and words[-1].lower() in _EDGE_WORDS:
        words.pop()
    while words and words[0].lower() in _EDGE_WORDS:
        words.pop(0)
    return " ".join(words)
