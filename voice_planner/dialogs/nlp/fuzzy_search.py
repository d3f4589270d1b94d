"""Resolve a spoken task reference against candidate tasks.

Matching runs as a cascade of tiers, strictest first. A tier is only
tried when every earlier tier matched nothing, and inside a tier the
first candidate in caller order wins. Ties are never broken by scoring.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import IntEnum

from rapidfuzz.distance import Levenshtein

from voice_planner.config import settings
from voice_planner.dialogs.nlp.tokenizer import NormalizedPhrase, normalize_phrase
from voice_planner.store.models import CandidateTask


class MatchTier(IntEnum):
    """Matching tiers in precedence order."""

    EXACT = 1
    STEMMED_EXACT = 2
    BAG_OF_WORDS = 3
    PARTIAL = 4
    FUZZY = 5
    SUBSTRING = 6


@dataclass(frozen=True, slots=True)
class TaskMatch:
    """The winning candidate and the tier that selected it."""

    task: CandidateTask
    tier: MatchTier


Predicate = Callable[[NormalizedPhrase, NormalizedPhrase], bool]


def _exact(query: NormalizedPhrase, name: NormalizedPhrase) -> bool:
    return query.text == name.text


def _stemmed_exact(query: NormalizedPhrase, name: NormalizedPhrase) -> bool:
    return bool(query.stems) and query.stems == name.stems


def _bag_of_words(query: NormalizedPhrase, name: NormalizedPhrase) -> bool:
    candidate = set(name.stems)
    return bool(query.stems) and all(s in candidate for s in query.stems)


def _partial(query: NormalizedPhrase, name: NormalizedPhrase) -> bool:
    return bool(query.stems) and all(
        any(s in c or c in s for c in name.stems) for s in query.stems
    )


def _within_distance(max_distance: int) -> Predicate:
    def _fuzzy(query: NormalizedPhrase, name: NormalizedPhrase) -> bool:
        return bool(query.stems) and all(
            any(
                Levenshtein.distance(s, c, score_cutoff=max_distance) <= max_distance
                for c in name.stems
            )
            for s in query.stems
        )

    return _fuzzy


def _substring(query: NormalizedPhrase, name: NormalizedPhrase) -> bool:
    return bool(name.text) and (query.text in name.text or name.text in query.text)


def _tiers(max_distance: int) -> list[tuple[MatchTier, Predicate]]:
    return [
        (MatchTier.EXACT, _exact),
        (MatchTier.STEMMED_EXACT, _stemmed_exact),
        (MatchTier.BAG_OF_WORDS, _bag_of_words),
        (MatchTier.PARTIAL, _partial),
        (MatchTier.FUZZY, _within_distance(max_distance)),
        (MatchTier.SUBSTRING, _substring),
    ]


def _prepare(
    query: str, candidates: Sequence[CandidateTask]
) -> tuple[NormalizedPhrase, list[tuple[CandidateTask, NormalizedPhrase]]] | None:
    if not query or not query.strip() or not candidates:
        return None
    phrase = normalize_phrase(query)
    return phrase, [(task, normalize_phrase(task.name)) for task in candidates]


def match_task(
    query: str,
    candidates: Sequence[CandidateTask],
    *,
    max_distance: int | None = None,
) -> TaskMatch | None:
    """Find the first candidate matched by the strictest possible tier.

    *max_distance* bounds the Levenshtein distance of the fuzzy tier and
    defaults to ``settings.fuzzy_max_distance``.

    Returns ``None`` if the query is empty, the list is empty, or no tier
    matches.
    """
    prepared = _prepare(query, candidates)
    if prepared is None:
        return None
    phrase, names = prepared

    if max_distance is None:
        max_distance = settings.fuzzy_max_distance

    for tier, predicate in _tiers(max_distance):
        for task, name in names:
            if predicate(phrase, name):
                return TaskMatch(task=task, tier=tier)
    return None


def resolve(
    query: str,
    candidates: Sequence[CandidateTask],
    *,
    max_distance: int | None = None,
) -> CandidateTask | None:
    """Return the single best-matching candidate for *query*, or ``None``."""
    match = match_task(query, candidates, max_distance=max_distance)
    return match.task if match else None


def find_matches(
    query: str,
    candidates: Sequence[CandidateTask],
    *,
    max_distance: int | None = None,
) -> tuple[MatchTier, list[CandidateTask]] | None:
    """Return every candidate satisfying the first tier that matches anything.

    :func:`resolve` picks the first element of this list. More than one
    element means the reference was ambiguous at that tier.
    """
    prepared = _prepare(query, candidates)
    if prepared is None:
        return None
    phrase, names = prepared

    if max_distance is None:
        max_distance = settings.fuzzy_max_distance

    for tier, predicate in _tiers(max_distance):
        hits = [task for task, name in names if predicate(phrase, name)]
        if hits:
            return tier, hits
    return None
