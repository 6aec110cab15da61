"""
Result models produced by the aggregators.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, NamedTuple

from normalize.severity import SEVERITY_ORDER, SeverityLevel


@dataclass(frozen=True)
class PivotMatrix:
    """
    Row category x severity count table.

    cells[row][severity] holds the count; row_totals, col_totals and
    grand_total are derived from the same counted issues, so
    sum(row_totals) == sum(col_totals) == grand_total. excluded counts the
    issues whose row value was not among the declared rows.
    """
    dimension: str
    rows: List[str]
    cells: Dict[str, Dict[SeverityLevel, int]]
    row_totals: Dict[str, int]
    col_totals: Dict[SeverityLevel, int]
    grand_total: int
    excluded: int = 0

    def count(self, row: str, severity: SeverityLevel) -> int:
        return self.cells.get(row, {}).get(severity, 0)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'dimension': self.dimension,
            'columns': [s.value for s in SEVERITY_ORDER],
            'rows': [
                {
                    'label': r,
                    'counts': {s.value: self.cells[r][s] for s in SEVERITY_ORDER},
                    'total': self.row_totals[r],
                }
                for r in self.rows
            ],
            'col_totals': {s.value: self.col_totals[s] for s in SEVERITY_ORDER},
            'grand_total': self.grand_total,
            'excluded': self.excluded,
        }


class TrendPoint(NamedTuple):
    day: str
    count: int


@dataclass(frozen=True)
class ResolutionSummary:
    """Resolved issues counted by severity, with the snapshot size for proportions."""
    fixed_count: int
    by_severity: Dict[SeverityLevel, int]
    total_issues: int = 0
    proportions: Dict[SeverityLevel, float] = field(default_factory=dict)

    @property
    def resolved_ratio(self) -> float:
        return self.fixed_count / self.total_issues if self.total_issues else 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'fixed_count': self.fixed_count,
            'total_issues': self.total_issues,
            'resolved_ratio': self.resolved_ratio,
            'by_severity': {s.value: self.by_severity[s] for s in SEVERITY_ORDER},
            'proportions': {s.value: self.proportions.get(s, 0.0) for s in SEVERITY_ORDER},
        }
