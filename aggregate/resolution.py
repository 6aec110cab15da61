"""
Severity tiles and the resolution breakdown.
"""
from typing import Dict, Iterable, Sequence

from normalize.models import NormalizedIssue
from normalize.severity import SEVERITY_ORDER, SeverityLevel, classify_severity, empty_severity_counts
from normalize.states import is_resolved
from .models import ResolutionSummary


def count_by_severity(issues: Iterable[NormalizedIssue]) -> Dict[SeverityLevel, int]:
    """Tile counts: every issue counted once under its severity, all five levels present."""
    counts = empty_severity_counts()
    for issue in issues:
        counts[classify_severity(issue.severity)] += 1
    return counts


def build_resolution_summary(issues: Sequence[NormalizedIssue]) -> ResolutionSummary:
    """Resolved issues by severity, plus each level's share of the resolved total."""
    resolved = [i for i in issues if is_resolved(i.state)]
    by_severity = count_by_severity(resolved)
    fixed_count = len(resolved)
    proportions = {s: (by_severity[s] / fixed_count if fixed_count else 0.0) for s in SEVERITY_ORDER}
    return ResolutionSummary(
        fixed_count=fixed_count,
        by_severity=by_severity,
        total_issues=len(issues),
        proportions=proportions,
    )
