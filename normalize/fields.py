"""
Alias-based field lookup for raw tracker rows.

Exports from spreadsheets and trackers name the same column in many ways
("Assigned To", "Developer", "assigned_to", ...). Lookups compare keys
case-insensitively after trimming surrounding whitespace and return the value
of the first alias present in the row.
"""
from typing import Any, Dict, Iterable, List, Mapping, NamedTuple, Optional

from normalize.models import UNKNOWN

# logical field -> aliases, most preferred first
DEFAULT_FIELD_ALIASES: Dict[str, List[str]] = {
    'type': ['Bug Type', 'Type', 'Issue Type', 'bug_type'],
    'severity': ['Severity', 'Priority'],
    'state': ['State', 'Status'],
    'assignee': ['Assigned To', 'Developer', 'Assignee', 'Dev Name', 'assigned_to'],
    'module': ['Module', 'Component', 'Feature', 'Area', 'module_name'],
    'fixed_date': [
        'Bug Fixed Date and Timestamp', 'Bug Fixed Date', 'Fixed Date', 'Resolution Date',
        'Fixed On', 'Closed Date', 'Date Fixed', 'bug_fixed',
    ],
    'found_date': [
        'Bug Found Date', 'Found Date', 'Created Date', 'Date Created', 'Creation Date',
        'Raised Date', 'Detected Date', 'Date', 'Reported Date', 'Issue Date', 'bug_found',
    ],
}

LOGICAL_FIELDS = tuple(DEFAULT_FIELD_ALIASES.keys())


class FieldValue(NamedTuple):
    """A resolved field: the value and the record key it was read from."""
    value: Any
    key: str


def normalize_key(key: Any) -> str:
    return str(key).strip().lower()


def _index_keys(record: Mapping[Any, Any]) -> Dict[str, Any]:
    """Map normalized key -> original key, keeping the first key seen for each form."""
    index: Dict[str, Any] = {}
    for k in record.keys():
        index.setdefault(normalize_key(k), k)
    return index


def lookup_field(record: Mapping[Any, Any], aliases: Iterable[str]) -> Optional[FieldValue]:
    """Return a FieldValue for the first alias present in record, or None when nothing matches.

    Keys holding None are treated as absent so a later alias can still match.
    """
    if not isinstance(record, Mapping):
        return None
    index = _index_keys(record)
    for alias in aliases:
        actual = index.get(normalize_key(alias))
        if actual is None:
            continue
        value = record[actual]
        if value is None:
            continue
        return FieldValue(value, str(actual))
    return None


def resolve_field(record: Mapping[Any, Any], aliases: Iterable[str], default: Any = UNKNOWN) -> Any:
    """Return the value of the first matching alias, or "Unknown"."""
    found = lookup_field(record, aliases)
    return default if found is None else found.value


def merge_aliases(overrides: Optional[Mapping[str, Iterable[str]]]) -> Dict[str, List[str]]:
    """Overlay configured alias lists on the defaults; unknown logical fields are ignored."""
    merged = {k: list(v) for k, v in DEFAULT_FIELD_ALIASES.items()}
    for field, aliases in (overrides or {}).items():
        if field not in merged or not aliases:
            continue
        if isinstance(aliases, str):
            aliases = [aliases]
        merged[field] = [str(a) for a in aliases]
    return merged
