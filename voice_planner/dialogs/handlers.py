"""Intent handlers: run one utterance through the interpretation pipeline.

Handlers are pure. Callers fetch candidate tasks from the task store,
pass them in, and persist whatever the returned action describes. A
``None`` result means no task matched and the user should be asked to
say the task name again.
"""

from __future__ import annotations

import datetime
import logging
import re
from collections.abc import Sequence
from dataclasses import dataclass

from voice_planner.dialogs.intents import (
    TaskReferenceSlots,
    UpdateTaskStatusSlots,
    UserRequestSlots,
)
from voice_planner.dialogs.nlp import (
    MatchTier,
    StatusEvidence,
    TaskAttributes,
    clean_task_name,
    decide_status,
    find_date_expression,
    match_task,
    parse_query,
    parse_task,
)
from voice_planner.dialogs.nlp.date_parser import remove_spans
from voice_planner.dialogs.nlp.keywords import (
    PRIORITY_PHRASES,
    TASK_STATUS_PHRASES,
    remove_phrases,
    scan_value,
)
from voice_planner.store.models import (
    CandidateTask,
    Priority,
    QueryFilter,
    Status,
)

logger = logging.getLogger(__name__)

_STATUS_TARGET_RE = re.compile(
    r"\b(?:to|as|into)\s+(?:in[\s-]+progress|done|complete|completed|to[\s-]*do)\b",
    re.IGNORECASE,
)


@dataclass(frozen=True, slots=True)
class TaskAction:
    """A matched task and the status it should move to.

    ``target_status`` is ``None`` for deletions.
    """

    task: CandidateTask
    tier: MatchTier
    target_status: Status | None = None
    evidence: StatusEvidence | None = None


@dataclass(frozen=True, slots=True)
class TaskChanges:
    """A matched task and the attributes an update utterance changes.

    Only fields that differ from the task's current values are set.
    """

    task: CandidateTask
    tier: MatchTier
    status: Status | None = None
    priority: Priority | None = None
    due: datetime.date | datetime.datetime | None = None

    @property
    def has_changes(self) -> bool:
        return self.status is not None or self.priority is not None or self.due is not None


def handle_create_task(
    slots: UserRequestSlots, *, now: datetime.datetime
) -> TaskAttributes | None:
    """Parse a new task from the request; ``None`` when nothing was said."""
    if slots.user_request is None:
        return None

    attributes = parse_task(slots.user_request.value, now=now)
    logger.info(
        "Parsed new task name=%r due=%s priority=%s category=%s",
        attributes.cleaned_name,
        attributes.due,
        attributes.priority,
        attributes.category,
    )
    return attributes


def handle_query_tasks(slots: UserRequestSlots, *, now: datetime.datetime) -> QueryFilter:
    """Build the filter for a read request; an empty request lists everything."""
    if slots.user_request is None:
        return QueryFilter()

    query = parse_query(slots.user_request.value, now=now)
    logger.info("Parsed query kind=%s keyword=%r", query.kind, query.keyword)
    return query


def _find_task(
    reference: str, candidates: Sequence[CandidateTask]
) -> tuple[CandidateTask, MatchTier] | None:
    cleaned = clean_task_name(reference)
    match = match_task(cleaned, candidates)
    if match is None:
        logger.info("No task matched %r among %d candidates", cleaned, len(candidates))
        return None
    logger.info("Matched %r to task %s via %s", cleaned, match.task.id, match.tier.name)
    return match.task, match.tier


def handle_complete_task(
    slots: TaskReferenceSlots,
    candidates: Sequence[CandidateTask],
) -> TaskAction | None:
    """Resolve the task to mark as done."""
    if slots.task_name is None:
        return None
    found = _find_task(slots.task_name.value, candidates)
    if found is None:
        return None
    task, tier = found
    return TaskAction(task=task, tier=tier, target_status=Status.DONE)


def handle_delete_task(
    slots: TaskReferenceSlots,
    candidates: Sequence[CandidateTask],
) -> TaskAction | None:
    """Resolve the task to delete."""
    if slots.task_name is None:
        return None
    found = _find_task(slots.task_name.value, candidates)
    if found is None:
        return None
    task, tier = found
    return TaskAction(task=task, tier=tier)


def handle_update_task_status(
    slots: UpdateTaskStatusSlots,
    candidates: Sequence[CandidateTask],
    *,
    utterance: str | None = None,
) -> TaskAction | None:
    """Resolve the task to update and the status it should move to.

    *utterance* is the full spoken text when the platform provides it;
    otherwise the task name slot is searched for status evidence.
    """
    if slots.task_name is None:
        return None

    reference = _STATUS_TARGET_RE.sub(" ", slots.task_name.value)
    found = _find_task(reference, candidates)
    if found is None:
        return None
    task, tier = found

    decision = decide_status(
        utterance or slots.task_name.value,
        slots.status.value if slots.status else None,
        task.status,
    )
    logger.info(
        "Status update for task %s: %s -> %s (%s)",
        task.id,
        task.status,
        decision.status,
        decision.evidence.name,
    )
    return TaskAction(
        task=task, tier=tier, target_status=decision.status, evidence=decision.evidence
    )


def handle_update_task(
    slots: UserRequestSlots,
    candidates: Sequence[CandidateTask],
    *,
    now: datetime.datetime,
) -> TaskChanges | None:
    """Resolve the task named in a free-form update and what changes.

    Status, priority and due date are only reported when spoken and
    different from the current value. The result may carry no changes,
    which callers surface as "what would you like to update?".
    """
    if slots.user_request is None:
        return None

    text = slots.user_request.value
    date_match = find_date_expression(text, now=now)
    reference = remove_spans(text, date_match.spans) if date_match else text
    reference = remove_phrases(reference, PRIORITY_PHRASES)
    reference = _STATUS_TARGET_RE.sub(" ", reference)

    found = _find_task(reference, candidates)
    if found is None:
        return None
    task, tier = found

    status = scan_value(text, TASK_STATUS_PHRASES)
    priority = scan_value(text, PRIORITY_PHRASES)
    due = date_match.value if date_match else None

    changes = TaskChanges(
        task=task,
        tier=tier,
        status=status if status != task.status else None,
        priority=priority if priority != task.priority else None,
        due=due if due != task.due_date else None,
    )
    if not changes.has_changes:
        logger.info("Update request for task %s carried no changes", task.id)
    return changes
