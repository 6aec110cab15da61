"""
Found-date trend aggregation and the date-filter helpers built on day keys.
"""
from collections import Counter
from typing import Iterable, List, Optional

from normalize.dates import raw_day_key
from normalize.models import NormalizedIssue
from normalize.states import is_active_for_trend
from .models import TrendPoint

# filter value meaning "no date filter"
ALL_DATES = 'all'


def build_trend_series(issues: Iterable[NormalizedIssue]) -> List[TrendPoint]:
    """Count active issues per found-date day key, ascending.

    Sparse: days without issues are not filled in. Issues whose found date
    does not normalize are skipped.
    """
    counts = Counter()
    for issue in issues:
        if not is_active_for_trend(issue.state):
            continue
        key = raw_day_key(issue.found_date)
        if key:
            counts[key] += 1
    return [TrendPoint(k, counts[k]) for k in sorted(counts)]


def found_date_options(issues: Iterable[NormalizedIssue]) -> List[str]:
    """Distinct found-date day keys, sorted, for a date filter control."""
    return sorted({k for k in (raw_day_key(i.found_date) for i in issues) if k})


def filter_by_found_day(issues: Iterable[NormalizedIssue], key: Optional[str]) -> List[NormalizedIssue]:
    """Issues found on the given day; None or 'all' returns every issue."""
    if key is None or key == ALL_DATES:
        return list(issues)
    return [i for i in issues if raw_day_key(i.found_date) == key]
