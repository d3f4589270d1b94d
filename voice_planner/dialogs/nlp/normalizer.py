"""Strip command scaffolding from spoken task references."""

from __future__ import annotations

import re

# Command verbs that wrap a reference to an existing task:
# "mark report as done", "finish the quarterly report".
COMMAND_PREFIXES: tuple[str, ...] = (
    "mark",
    "set",
    "update",
    "change",
    "modify",
    "move",
    "reschedule",
    "complete",
    "finish",
)

# Command verbs that wrap a new task. "finish"/"complete" are not here:
# in "add finish quarterly report" they belong to the task itself.
CREATE_PREFIXES: tuple[str, ...] = (
    "add",
    "create",
    "remind me to",
    "remind me",
    "set",
    "update",
    "change",
    "modify",
)

SUFFIXES: tuple[str, ...] = (
    "to my to-do list",
    "to my to do list",
    "to my todo list",
    "to my tasks",
    "to my task",
    "as done",
    "as complete",
    "as completed",
    "to done",
    "done",
    "complete",
)

STOP_WORDS = frozenset({"the", "my", "a", "an", "some", "to"})


def _phrase_pattern(phrase: str) -> str:
    return r"\s+".join(re.escape(word) for word in phrase.split())


def _prefix_re(prefixes: tuple[str, ...]) -> re.Pattern[str]:
    alternatives = "|".join(_phrase_pattern(p) for p in prefixes)
    return re.compile(rf"^(?:{alternatives})(?:\s+|$)", re.IGNORECASE)


_SUFFIX_RE = re.compile(
    rf"(?:^|\s+)(?:{'|'.join(_phrase_pattern(s) for s in SUFFIXES)})$",
    re.IGNORECASE,
)

_PREFIX_RES: dict[tuple[str, ...], re.Pattern[str]] = {}


def _get_prefix_re(prefixes: tuple[str, ...]) -> re.Pattern[str]:
    pattern = _PREFIX_RES.get(prefixes)
    if pattern is None:
        pattern = _PREFIX_RES[prefixes] = _prefix_re(prefixes)
    return pattern


def strip_command_wrappers(
    raw: str,
    *,
    prefixes: tuple[str, ...] = COMMAND_PREFIXES,
) -> str:
    """Remove one leading command verb and one trailing completion phrase.

    Case and inner words are preserved; nothing else is touched.
    """
    text = " ".join(raw.split())
    text = _get_prefix_re(prefixes).sub("", text, count=1)
    text = _SUFFIX_RE.sub("", text, count=1)
    return text.strip()


def _drop_stop_words(text: str) -> str:
    return " ".join(word for word in text.split() if word not in STOP_WORDS)


def clean_task_name(
    raw: str,
    *,
    prefixes: tuple[str, ...] = COMMAND_PREFIXES,
) -> str:
    """Lowercase *raw* and strip command wrappers and stop words.

    Only anchored wrappers are removed: a command verb in the middle of the
    phrase is part of the task name and stays. The passes repeat until the
    text stops changing, so ``clean_task_name`` is idempotent.

    Returns an empty string when nothing but scaffolding was spoken.
    """
    if not raw:
        return ""

    text = " ".join(raw.lower().split())
    while True:
        cleaned = _drop_stop_words(strip_command_wrappers(text, prefixes=prefixes))
        if cleaned == text:
            return cleaned
        text = cleaned
