"""
Snapshot assembly: shape check, normalization and every aggregate for one batch of raw rows.
"""
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from aggregate.models import PivotMatrix, ResolutionSummary, TrendPoint
from aggregate.pivot import build_bug_type_matrix, build_developer_matrix, build_state_matrix
from aggregate.resolution import build_resolution_summary, count_by_severity
from aggregate.trend import build_trend_series, found_date_options
from normalize.models import NormalizedIssue
from normalize.severity import SEVERITY_ORDER, SeverityLevel
from normalize.states import ACTIVE_DEV, ACTIVE_MATRIX, filter_by_state
from normalize.util import normalize_issues


class SnapshotShapeError(ValueError):
    """Decoded input is not a list of row mappings."""


@dataclass(frozen=True)
class DashboardSnapshot:
    """Every view derived from one set of raw rows."""
    issues: Tuple[NormalizedIssue, ...]
    tiles: Dict[SeverityLevel, int]
    state_matrix: PivotMatrix
    bug_type_matrix: PivotMatrix
    developer_matrix: PivotMatrix
    trend: List[TrendPoint]
    resolution: ResolutionSummary
    date_options: List[str]

    @property
    def total_issues(self) -> int:
        return len(self.issues)

    @property
    def dev_workload_issues(self) -> List[NormalizedIssue]:
        return filter_by_state(self.issues, ACTIVE_DEV)


def validate_shape(raw: Any) -> List[Mapping[str, Any]]:
    """Return raw as a list of mappings or raise SnapshotShapeError."""
    if not isinstance(raw, list):
        raise SnapshotShapeError(f"Data format error: expected an array of issues, got {type(raw).__name__}")
    for idx, row in enumerate(raw):
        if not isinstance(row, Mapping):
            raise SnapshotShapeError(f"Data format error: item {idx} is {type(row).__name__}, expected an object")
    return raw


def build_snapshot(raw: Any, aliases: Optional[Dict[str, List[str]]] = None) -> DashboardSnapshot:
    """Validate, normalize and aggregate. Only the shape check can raise."""
    records = validate_shape(raw)
    issues = tuple(normalize_issues(records, aliases))
    return snapshot_from_issues(issues)


def snapshot_from_issues(issues: Sequence[NormalizedIssue]) -> DashboardSnapshot:
    issues = tuple(issues)
    matrix_issues = filter_by_state(issues, ACTIVE_MATRIX)
    dev_issues = filter_by_state(issues, ACTIVE_DEV)
    return DashboardSnapshot(
        issues=issues,
        tiles=count_by_severity(issues),
        state_matrix=build_state_matrix(matrix_issues),
        bug_type_matrix=build_bug_type_matrix(matrix_issues),
        developer_matrix=build_developer_matrix(dev_issues),
        trend=build_trend_series(issues),
        resolution=build_resolution_summary(issues),
        date_options=found_date_options(dev_issues),
    )


def snapshot_to_dict(snapshot: DashboardSnapshot) -> Dict[str, Any]:
    """Plain, JSON-serializable view of a snapshot for presentation code."""
    return {
        'total_issues': snapshot.total_issues,
        'tiles': {s.value: snapshot.tiles[s] for s in SEVERITY_ORDER},
        'state_matrix': snapshot.state_matrix.to_dict(),
        'bug_type_matrix': snapshot.bug_type_matrix.to_dict(),
        'developer_matrix': snapshot.developer_matrix.to_dict(),
        'trend': [{'day': p.day, 'count': p.count} for p in snapshot.trend],
        'resolution': snapshot.resolution.to_dict(),
        'date_options': list(snapshot.date_options),
        'issues': [i.to_dict() for i in snapshot.issues],
    }
