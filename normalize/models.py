"""
Canonical data models for normalized issue records.
"""

from dataclasses import dataclass
from typing import Any, Dict

from normalize.severity import SeverityLevel

# literal used for any field that no alias resolves
UNKNOWN = "Unknown"


@dataclass(frozen=True)
class NormalizedIssue:
    """
    One issue after field resolution and severity classification.

    found_date and fixed_date keep the raw value (string, number or None);
    parsing is left to the consumers that need a calendar day.
    """
    type: str
    severity: SeverityLevel
    state: str
    assignee: str
    module: str
    found_date: Any = UNKNOWN
    fixed_date: Any = UNKNOWN

    def to_dict(self) -> Dict[str, Any]:
        return {
            'type': self.type,
            'severity': self.severity.value,
            'state': self.state,
            'assignee': self.assignee,
            'module': self.module,
            'found_date': self.found_date,
            'fixed_date': self.fixed_date,
        }
