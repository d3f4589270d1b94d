"""NLP utilities: normalization, attribute and query parsing, task resolution."""

from voice_planner.dialogs.nlp.date_parser import DateMatch, find_date_expression
from voice_planner.dialogs.nlp.fuzzy_search import (
    MatchTier,
    TaskMatch,
    find_matches,
    match_task,
    resolve,
)
from voice_planner.dialogs.nlp.normalizer import clean_task_name, strip_command_wrappers
from voice_planner.dialogs.nlp.query_parser import parse_query
from voice_planner.dialogs.nlp.status_resolver import (
    StatusDecision,
    StatusEvidence,
    decide_status,
    resolve_target_status,
)
from voice_planner.dialogs.nlp.task_parser import TaskAttributes, parse_task
from voice_planner.dialogs.nlp.tokenizer import NormalizedPhrase, normalize_phrase, stem, tokenize

__all__ = [
    "DateMatch",
    "MatchTier",
    "NormalizedPhrase",
    "StatusDecision",
    "StatusEvidence",
    "TaskAttributes",
    "TaskMatch",
    "clean_task_name",
    "decide_status",
    "find_date_expression",
    "find_matches",
    "match_task",
    "normalize_phrase",
    "parse_query",
    "parse_task",
    "resolve",
    "resolve_target_status",
    "stem",
    "strip_command_wrappers",
    "tokenize",
]
