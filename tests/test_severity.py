import pytest

from normalize.severity import SEVERITY_ORDER, SeverityLevel, classify_severity


@pytest.mark.parametrize('raw,expected', [
    ('Blocker', SeverityLevel.BLOCKER),
    ('P0', SeverityLevel.CRITICAL),
    ('critical', SeverityLevel.CRITICAL),
    ('P1 - high', SeverityLevel.MAJOR),
    ('Major', SeverityLevel.MAJOR),
    ('p2', SeverityLevel.NORMAL),
    ('Normal', SeverityLevel.NORMAL),
    ('Minor', SeverityLevel.MINOR),
    ('P3', SeverityLevel.MINOR),
    ('', SeverityLevel.MINOR),
    (None, SeverityLevel.MINOR),
    ('P9-unknown', SeverityLevel.MINOR),
])
def test_classify_severity(raw, expected):
    assert classify_severity(raw) == expected


def test_blocker_wins_over_other_markers():
    for raw in ('P0 blocker', 'critical BLOCKER major', 'bLoCkEr/P2'):
        assert classify_severity(raw) == SeverityLevel.BLOCKER


def test_earlier_rules_short_circuit():
    # contains both P1 and P0 markers; the Critical rule is checked first
    assert classify_severity('P1 escalated to P0') == SeverityLevel.CRITICAL


def test_deterministic():
    for raw in ('P0', 'weird', 42, 'Normal'):
        assert classify_severity(raw) is classify_severity(raw)


def test_levels_are_ordered_by_urgency():
    assert [s.value for s in SEVERITY_ORDER] == ['Blocker', 'Critical', 'Major', 'Normal', 'Minor']
    assert SeverityLevel.BLOCKER.rank < SeverityLevel.MINOR.rank


def test_already_classified_value_passes_through():
    assert classify_severity(SeverityLevel.NORMAL) is SeverityLevel.NORMAL
