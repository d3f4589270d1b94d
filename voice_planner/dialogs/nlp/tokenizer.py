"""Lowercase tokenization and naive suffix stemming."""

from __future__ import annotations

import re
from dataclasses import dataclass

_TOKEN_RE = re.compile(r"[^\W_]+(?:['’-][^\W_]+)*")

# Longest suffix first; only one suffix is ever removed.
_SUFFIXES = ("ing", "ed", "s")
_MIN_STEM_LENGTH = 3


def tokenize(text: str) -> list[str]:
    """Split *text* into lowercase word tokens.

    Inner apostrophes and hyphens stay part of the token ("what's",
    "to-do"); all other punctuation separates tokens.
    """
    if not text:
        return []
    return _TOKEN_RE.findall(text.lower())


def stem(token: str) -> str:
    """Strip one trailing ``ing``/``ed``/``s`` from *token*.

    The suffix is kept when stripping would leave fewer than three
    characters, so short words such as "bus" or "red" survive.
    """
    for suffix in _SUFFIXES:
        if token.endswith(suffix) and len(token) - len(suffix) >= _MIN_STEM_LENGTH:
            return token[: -len(suffix)]
    return token


@dataclass(frozen=True, slots=True)
class NormalizedPhrase:
    """Tokens of a phrase with their stems attached."""

    text: str
    tokens: tuple[str, ...]
    stems: tuple[str, ...]


def normalize_phrase(text: str) -> NormalizedPhrase:
    """Tokenize and stem *text*."""
    tokens = tuple(tokenize(text))
    return NormalizedPhrase(
        text=text.strip().lower(),
        tokens=tokens,
        stems=tuple(stem(t) for t in tokens),
    )
