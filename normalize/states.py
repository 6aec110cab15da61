"""
Lifecycle state predicates.

Each view tolerates a different amount of vocabulary drift, so there is one
rule per view rather than a single active flag:

- active_matrix: exact, case-insensitive match
- active_dev: exact match after removing all whitespace
- active_trend: substring match, absorbs "In Development", "In Progress" and split "Re-open"
- resolved: exact, case-insensitive match
"""
import re
from typing import Any, Callable, FrozenSet, List, NamedTuple, Set

ACTIVE_MATRIX = 'active_matrix'
ACTIVE_DEV = 'active_dev'
ACTIVE_TREND = 'active_trend'
RESOLVED = 'resolved'

MATRIX_ACTIVE_STATES: FrozenSet[str] = frozenset({"ASSIGNED", "REOPEN", "RFT"})
DEV_ACTIVE_STATES: FrozenSet[str] = frozenset({"ASSIGNED", "INDEV", "INPROGRESS", "REOPEN"})
TREND_ACTIVE_MARKERS = ("ASSIGNED", "DEV", "REOPEN", "PROGRESS")
RESOLVED_STATES: FrozenSet[str] = frozenset({"FIXED", "RESOLVED", "CLOSED"})

_WHITESPACE = re.compile(r"\s")
# "Re-open", "Re open", "RE_OPEN"; the word boundary keeps "Pre-open" out
_SPLIT_REOPEN = re.compile(r"\bRE[\s_-]+OPEN")


class StateRule(NamedTuple):
    tag: str
    matches: Callable[[str], bool]


def _upper(state: Any) -> str:
    return '' if state is None else str(state).upper()


def is_active_for_matrix(state: Any) -> bool:
    return _upper(state) in MATRIX_ACTIVE_STATES


def is_active_for_dev(state: Any) -> bool:
    return _WHITESPACE.sub('', _upper(state)) in DEV_ACTIVE_STATES


def is_active_for_trend(state: Any) -> bool:
    s = _upper(state)
    return any(marker in s for marker in TREND_ACTIVE_MARKERS) or bool(_SPLIT_REOPEN.search(s))


def is_resolved(state: Any) -> bool:
    return _upper(state) in RESOLVED_STATES


STATE_RULES: List[StateRule] = [
    StateRule(ACTIVE_MATRIX, is_active_for_matrix),
    StateRule(ACTIVE_DEV, is_active_for_dev),
    StateRule(ACTIVE_TREND, is_active_for_trend),
    StateRule(RESOLVED, is_resolved),
]

_RULES_BY_TAG = {rule.tag: rule for rule in STATE_RULES}


def classify_state(state: Any) -> Set[str]:
    """Return the tags of every rule the state satisfies (possibly none)."""
    return {rule.tag for rule in STATE_RULES if rule.matches(state)}


def state_predicate(tag: str) -> Callable[[Any], bool]:
    """Look up the predicate for a tag; raises KeyError for unknown tags."""
    return _RULES_BY_TAG[tag].matches


def filter_by_state(issues, tag: str) -> list:
    """Keep the issues whose state satisfies the rule named by tag, in input order."""
    matches = state_predicate(tag)
    return [i for i in issues if matches(i.state)]
