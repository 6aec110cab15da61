"""
Severity classification.
Maps free-form severity or priority text onto the five canonical levels.
"""

from enum import Enum
from typing import Any, Tuple


class SeverityLevel(str, Enum):
    """Canonical severity levels, declared in decreasing urgency."""
    BLOCKER = "Blocker"
    CRITICAL = "Critical"
    MAJOR = "Major"
    NORMAL = "Normal"
    MINOR = "Minor"

    def __str__(self):
        return self.value

    @property
    def rank(self) -> int:
        """0 for the most urgent level."""
        return SEVERITY_ORDER.index(self)


SEVERITY_ORDER: Tuple[SeverityLevel, ...] = tuple(SeverityLevel)

DEFAULT_SEVERITY = SeverityLevel.MINOR

# first matching rule wins; markers are uppercase substrings
SEVERITY_RULES: Tuple[Tuple[SeverityLevel, Tuple[str, ...]], ...] = (
    (SeverityLevel.BLOCKER, ("BLOCKER",)),
    (SeverityLevel.CRITICAL, ("P0", "CRITICAL")),
    (SeverityLevel.MAJOR, ("P1", "MAJOR")),
    (SeverityLevel.NORMAL, ("P2", "NORMAL")),
)


def classify_severity(value: Any) -> SeverityLevel:
    """Return the SeverityLevel for a raw severity/priority value.

    Total over all inputs: anything without a recognized marker
    (including None, empty strings and "P3") falls back to Minor.
    """
    if isinstance(value, SeverityLevel):
        return value
    text = '' if value is None else str(value).upper()
    for level, markers in SEVERITY_RULES:
        if any(marker in text for marker in markers):
            return level
    return DEFAULT_SEVERITY


def empty_severity_counts() -> dict:
    """Return an ordered {level: 0} mapping covering every level."""
    return {level: 0 for level in SEVERITY_ORDER}
