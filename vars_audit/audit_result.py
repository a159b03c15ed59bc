"""Data model for the verdict of one audit concern."""

from dataclasses import dataclass, field
from typing import Any


@dataclass
class AuditResult:
    """Pass/fail verdict of one concern and the evidence behind it."""

    concern: str  # override/namespace-onewords/.../definitions
    passed: bool
    message: str = ""
    evidence: dict[str, Any] = field(default_factory=dict)
    remarks: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-serializable view of the result."""
        return {
            "concern": self.concern,
            "passed": self.passed,
            "message": self.message,
            "evidence": self.evidence,
            "remarks": self.remarks,
        }
