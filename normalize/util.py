"""
Normalization helpers.
Turn raw tracker rows into normalize.models.NormalizedIssue values.
"""
from typing import Any, Dict, Iterable, List, Mapping, Optional

from normalize.fields import DEFAULT_FIELD_ALIASES, resolve_field
from normalize.models import NormalizedIssue, UNKNOWN
from normalize.severity import classify_severity


def _text(value: Any) -> str:
    """Coerce a resolved scalar to text; 'Unknown' stays as is."""
    return value if isinstance(value, str) else str(value)


def normalize_issue(raw: Mapping[str, Any], aliases: Optional[Dict[str, List[str]]] = None) -> NormalizedIssue:
    """Create a NormalizedIssue from one raw row.

    Never fails: fields without a matching alias become "Unknown" and the
    date columns are carried through unparsed.
    """
    aliases = aliases or DEFAULT_FIELD_ALIASES
    if not isinstance(raw, Mapping):
        raw = {}
    return NormalizedIssue(
        type=_text(resolve_field(raw, aliases['type'])),
        severity=classify_severity(resolve_field(raw, aliases['severity'], default='')),
        state=_text(resolve_field(raw, aliases['state'])),
        assignee=_text(resolve_field(raw, aliases['assignee'])),
        module=_text(resolve_field(raw, aliases['module'])),
        found_date=resolve_field(raw, aliases['found_date']),
        fixed_date=resolve_field(raw, aliases['fixed_date']),
    )


def normalize_issues(records: Iterable[Mapping[str, Any]], aliases: Optional[Dict[str, List[str]]] = None) -> List[NormalizedIssue]:
    """Normalize every row, preserving input order."""
    return [normalize_issue(r, aliases) for r in records]


__all__ = ["normalize_issue", "normalize_issues", "UNKNOWN"]
