"""Decide the target status of a status-update utterance."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import IntEnum

from voice_planner.store.models import Status, parse_status

logger = logging.getLogger(__name__)


class StatusEvidence(IntEnum):
    """Where the target status came from, strongest first."""

    SLOT = 1
    TO_PHRASE = 2
    COMMAND_PHRASE = 3
    COMMAND_KEYWORD = 4
    COMPLETION = 5
    CYCLE = 6


@dataclass(frozen=True, slots=True)
class StatusDecision:
    """Target status plus the evidence tier that produced it."""

    status: Status
    evidence: StatusEvidence


_I = re.IGNORECASE

_IN_PROGRESS = r"in[\s-]+progress"
_DONE = r"done|complete|completed|finished"
_TO_DO = r"to[\s-]*do"

# Order matters: "in progress" before "done" before "to do".
_STATUS_WORDS: list[tuple[Status, str]] = [
    (Status.IN_PROCESS, _IN_PROGRESS),
    (Status.DONE, _DONE),
    (Status.TO_DO, _TO_DO),
]

_VERBS = r"set|move|change|switch|put|mark"

_TO_PHRASE_RES = [
    (status, re.compile(rf"\bto\s+(?:{words})\b", _I)) for status, words in _STATUS_WORDS
]
_COMMAND_PHRASE_RES = [
    (status, re.compile(rf"\b(?:{_VERBS})\b.*?\b(?:to|as|into)\s+(?:{words})\b", _I))
    for status, words in _STATUS_WORDS
]
_VERB_RE = re.compile(rf"\b(?:{_VERBS})\b", _I)
_KEYWORD_RES = [
    (status, re.compile(rf"\b(?:{words})\b", _I)) for status, words in _STATUS_WORDS
]
_COMPLETION_RE = re.compile(
    r"\bas\s+(?:done|complete|completed|finished)\b"
    r"|\bmark\b.*\b(?:done|complete|completed|finished)\b",
    _I,
)


def _scan(text: str, patterns: list[tuple[Status, re.Pattern[str]]]) -> Status | None:
    for status, pattern in patterns:
        if pattern.search(text):
            return status
    return None


def decide_status(
    text: str | None,
    status_slot: str | None = None,
    current: Status | str | None = None,
) -> StatusDecision:
    """Pick the target status for an update, stopping at the first evidence found.

    1. A recognized explicit status slot.
    2. "to <status>" anywhere in the utterance.
    3. A command verb followed by "to/as/into <status>".
    4. A command verb and a status keyword anywhere.
    5. Completion phrasing ("as done", "mark ... complete") -> DONE.
    6. Otherwise the next status in the cycle after *current*; an unknown
       current status yields IN_PROCESS.
    """
    slot_status = parse_status(status_slot)
    if slot_status is not None:
        return StatusDecision(slot_status, StatusEvidence.SLOT)

    utterance = text or ""

    status = _scan(utterance, _TO_PHRASE_RES)
    if status is not None:
        return StatusDecision(status, StatusEvidence.TO_PHRASE)

    status = _scan(utterance, _COMMAND_PHRASE_RES)
    if status is not None:
        return StatusDecision(status, StatusEvidence.COMMAND_PHRASE)

    if _VERB_RE.search(utterance):
        status = _scan(utterance, _KEYWORD_RES)
        if status is not None:
            return StatusDecision(status, StatusEvidence.COMMAND_KEYWORD)

    if _COMPLETION_RE.search(utterance):
        return StatusDecision(Status.DONE, StatusEvidence.COMPLETION)

    current_status = current if isinstance(current, Status) else parse_status(current)
    if current_status is None:
        return StatusDecision(Status.IN_PROCESS, StatusEvidence.CYCLE)
    return StatusDecision(current_status.next(), StatusEvidence.CYCLE)


def resolve_target_status(
    text: str | None,
    status_slot: str | None = None,
    current: Status | str | None = None,
) -> Status:
    """Return the status a task should move to."""
    decision = decide_status(text, status_slot, current)
    logger.debug(
        "Status decision: %s via %s (current=%s)",
        decision.status,
        decision.evidence.name,
        current,
    )
    return decision.status
