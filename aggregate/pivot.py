"""
Pivot matrix builder and the row-label policies for each dashboard view.
"""
from operator import attrgetter
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Union

from normalize.models import NormalizedIssue, UNKNOWN
from normalize.severity import SEVERITY_ORDER, classify_severity, empty_severity_counts
from .models import PivotMatrix

# conventional lifecycle order for the state matrix
STATE_ORDER = ["Assigned", "In Dev", "RFT", "Fixed", "Reopen"]

Accessor = Union[str, Callable[[NormalizedIssue], Any]]


def _unique_in_order(values: Iterable[Any]) -> List[Any]:
    return list(dict.fromkeys(values))


def _resolve_accessor(accessor: Accessor) -> Callable[[NormalizedIssue], Any]:
    return attrgetter(accessor) if isinstance(accessor, str) else accessor


def _row_lookup(rows: Sequence[str], case_insensitive: bool) -> Callable[[Any], Optional[str]]:
    """Return a function mapping an issue's row value to a declared row label (or None)."""
    if not case_insensitive:
        declared = set(rows)
        return lambda value: value if value in declared else None
    folded: Dict[str, str] = {}
    for r in rows:
        folded.setdefault(str(r).lower(), r)
    return lambda value: folded.get(str(value).lower())


def build_pivot_matrix(
    issues: Iterable[NormalizedIssue],
    rows: Sequence[str],
    accessor: Accessor,
    case_insensitive: bool = False,
    dimension: Optional[str] = None,
) -> PivotMatrix:
    """Count issues per (row, severity) for the declared rows.

    accessor is an attribute name or a callable returning the row value.
    Issues whose row value is not declared are left out of every total and
    tallied in PivotMatrix.excluded.
    """
    rows = _unique_in_order(rows)
    get_row = _resolve_accessor(accessor)
    to_label = _row_lookup(rows, case_insensitive)

    cells = {r: empty_severity_counts() for r in rows}
    row_totals = {r: 0 for r in rows}
    col_totals = empty_severity_counts()
    grand_total = 0
    excluded = 0

    for issue in issues:
        label = to_label(get_row(issue))
        if label is None:
            excluded += 1
            continue
        severity = classify_severity(issue.severity)
        cells[label][severity] += 1
        row_totals[label] += 1
        col_totals[severity] += 1
        grand_total += 1

    if dimension is None:
        dimension = accessor if isinstance(accessor, str) else getattr(accessor, '__name__', 'row')
    return PivotMatrix(
        dimension=dimension,
        rows=rows,
        cells=cells,
        row_totals=row_totals,
        col_totals=col_totals,
        grand_total=grand_total,
        excluded=excluded,
    )


# --- row-label policies ---

def state_rows(issues: Iterable[NormalizedIssue], order: Sequence[str] = STATE_ORDER) -> List[str]:
    """Conventional states present in the data (case-insensitive), then unrecognized states in first-observed order."""
    present = _unique_in_order(str(i.state) for i in issues)
    present_folded = {s.lower() for s in present}
    conventional = {s.lower() for s in order}

    final = [s for s in order if s.lower() in present_folded]
    for s in present:
        if s.lower() not in conventional and s not in final:
            final.append(s)
    return final


def bug_type_rows(issues: Iterable[NormalizedIssue]) -> List[str]:
    return sorted({str(i.type) for i in issues})


def developer_rows(issues: Iterable[NormalizedIssue]) -> List[str]:
    return sorted({str(i.assignee) for i in issues} - {UNKNOWN})


# --- per-view builders ---

def build_state_matrix(issues: Sequence[NormalizedIssue]) -> PivotMatrix:
    return build_pivot_matrix(issues, state_rows(issues), 'state', case_insensitive=True, dimension='state')


def build_bug_type_matrix(issues: Sequence[NormalizedIssue]) -> PivotMatrix:
    return build_pivot_matrix(issues, bug_type_rows(issues), 'type', dimension='type')


def build_developer_matrix(issues: Sequence[NormalizedIssue]) -> PivotMatrix:
    return build_pivot_matrix(issues, developer_rows(issues), 'assignee', dimension='assignee')


__all__ = [
    "STATE_ORDER",
    "SEVERITY_ORDER",
    "build_pivot_matrix",
    "state_rows",
    "bug_type_rows",
    "developer_rows",
    "build_state_matrix",
    "build_bug_type_matrix",
    "build_developer_matrix",
]
