"""Word-boundary keyword scans for status, category and priority phrases."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Generic, TypeVar

from voice_planner.store.models import Category, Priority, Status

E = TypeVar("E")


@dataclass(frozen=True, slots=True)
class KeywordMatch(Generic[E]):
    """A recognized keyword phrase and the value it maps to."""

    value: E
    start: int
    end: int


def _compile(phrases: tuple[str, ...]) -> re.Pattern[str]:
    alternatives = "|".join(
        r"[\s-]+".join(re.escape(word) for word in phrase.split()) for phrase in phrases
    )
    return re.compile(rf"\b(?:{alternatives})\b", re.IGNORECASE)


def _table(entries: list[tuple[E, tuple[str, ...]]]) -> list[tuple[E, re.Pattern[str]]]:
    return [(value, _compile(phrases)) for value, phrases in entries]


# Checked in order; the first class with a hit wins.
TASK_STATUS_PHRASES = _table(
    [
        (Status.DONE, ("done", "complete", "completed", "finished")),
        (Status.IN_PROCESS, ("in progress", "working on", "doing")),
        (Status.TO_DO, ("to do", "todo", "pending")),
    ]
)

# "not done" must be tried before "done".
QUERY_STATUS_PHRASES = [
    (
        Status.TO_DO,
        re.compile(
            r"(?<!have )(?<!need )\bto[\s-]?do\b|\bnot\s+done\b|\bincomplete\b|\bpending\b",
            re.IGNORECASE,
        ),
    ),
    *_table(
        [
            (Status.IN_PROCESS, ("in progress", "working on", "ongoing")),
            (Status.DONE, ("done", "complete", "completed", "finished")),
        ]
    ),
]

CATEGORY_PHRASES = _table(
    [
        (Category.WORK, ("work", "office", "business")),
        (Category.PERSONAL, ("personal", "home", "private")),
    ]
)

PRIORITY_PHRASES = _table(
    [
        (
            Priority.HIGH,
            ("high priority", "priority to high", "priority high", "urgent", "important", "asap"),
        ),
        (Priority.LOW, ("low priority", "priority to low", "priority low")),
        (
            Priority.NORMAL,
            (
                "normal priority",
                "medium priority",
                "priority to normal",
                "priority to medium",
            ),
        ),
    ]
)

# Phrases that tag a new task with a category without being part of its name.
CATEGORY_MARKER_RE = re.compile(
    r"\b(?:(?:for|to|at)\s+(?:work|the\s+office)|work\s+task|personal\s+task"
    r"|(?:for|to)\s+personal|work:|personal:)(?=\s|$)",
    re.IGNORECASE,
)


def scan(
    text: str,
    table: list[tuple[E, re.Pattern[str]]],
) -> KeywordMatch[E] | None:
    """Return the first phrase class from *table* found in *text*."""
    if not text:
        return None
    for value, pattern in table:
        m = pattern.search(text)
        if m:
            return KeywordMatch(value=value, start=m.start(), end=m.end())
    return None


def scan_value(text: str, table: list[tuple[E, re.Pattern[str]]]) -> E | None:
    """Like :func:`scan` but return only the mapped value."""
    match = scan(text, table)
    return match.value if match else None


def remove_phrases(text: str, table: list[tuple[E, re.Pattern[str]]]) -> str:
    """Delete every phrase of *table* from *text* and collapse whitespace."""
    for _value, pattern in table:
        text = pattern.sub(" ", text)
    return " ".join(text.split())
