from aggregate.models import TrendPoint
from aggregate.resolution import build_resolution_summary, count_by_severity
from aggregate.trend import build_trend_series, filter_by_found_day, found_date_options
from normalize.severity import SeverityLevel
from normalize.util import normalize_issues


def _issues():
    return normalize_issues([
        {'State': 'In Development', 'Bug Found Date': '05-03-2024', 'Severity': 'P0'},
        {'State': 'Assigned', 'Bug Found Date': 45356, 'Severity': 'Blocker'},
        {'State': 'In Progress', 'Bug Found Date': '2024-03-01', 'Severity': 'P1'},
        {'State': 'Re-open', 'Bug Found Date': 'Unknown', 'Severity': 'P2'},
        {'State': 'Fixed', 'Bug Found Date': '2024-03-02', 'Severity': 'P0'},
        {'State': 'closed', 'Bug Found Date': 'garbage', 'Severity': 'Minor'},
    ])


def test_trend_counts_active_issues_by_day_sorted():
    series = build_trend_series(_issues())
    assert series == [TrendPoint('2024-03-01', 1), TrendPoint('2024-03-05', 2)]


def test_trend_is_sparse():
    days = [p.day for p in build_trend_series(_issues())]
    assert '2024-03-02' not in days  # resolved issue on that day
    assert '2024-03-03' not in days


def test_trend_empty():
    assert build_trend_series([]) == []


def test_found_date_options_skip_unparseable():
    assert found_date_options(_issues()) == ['2024-03-01', '2024-03-02', '2024-03-05']


def test_filter_by_found_day():
    issues = _issues()
    assert len(filter_by_found_day(issues, '2024-03-05')) == 2
    assert filter_by_found_day(issues, '1999-01-01') == []
    assert len(filter_by_found_day(issues, 'all')) == len(issues)
    assert len(filter_by_found_day(issues, None)) == len(issues)


def test_count_by_severity_covers_all_levels():
    counts = count_by_severity(_issues())
    assert list(counts.keys()) == list(SeverityLevel)
    assert counts[SeverityLevel.CRITICAL] == 2
    assert counts[SeverityLevel.BLOCKER] == 1
    assert sum(counts.values()) == 6


def test_resolution_summary():
    summary = build_resolution_summary(_issues())
    assert summary.fixed_count == 2
    assert summary.by_severity[SeverityLevel.CRITICAL] == 1
    assert summary.by_severity[SeverityLevel.MINOR] == 1
    assert summary.by_severity[SeverityLevel.BLOCKER] == 0
    assert summary.total_issues == 6
    assert summary.proportions[SeverityLevel.CRITICAL] == 0.5
    assert abs(summary.resolved_ratio - 2 / 6) < 1e-9


def test_resolution_summary_without_resolved_issues():
    summary = build_resolution_summary([])
    assert summary.fixed_count == 0
    assert summary.resolved_ratio == 0.0
    assert all(v == 0.0 for v in summary.proportions.values())
