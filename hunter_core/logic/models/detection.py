"""
Detection domain models.

Contains the data structures for representing risk findings raised by
detectors.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict


class Severity(Enum):
    """Severity levels for findings."""
    INFO = "info"
    LOW = "low"
    SUSPECT = "suspect"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def rank(self) -> int:
        return _SEVERITY_ORDER[self]

    @property
    def tag(self) -> str:
        """Report tag, e.g. ``[HIGH]``."""
        return f"[{self.value.upper()}]"

    def __lt__(self, other):
        """Enable comparison between severity levels."""
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other):
        if not isinstance(other, Severity):
            return NotImplemented
        return self < other or self == other

    def __gt__(self, other):
        if not isinstance(other, Severity):
            return NotImplemented
        return not self <= other

    def __ge__(self, other):
        if not isinstance(other, Severity):
            return NotImplemented
        return not self < other


_SEVERITY_ORDER = {
    Severity.INFO: 0,
    Severity.LOW: 1,
    Severity.SUSPECT: 2,
    Severity.MEDIUM: 3,
    Severity.HIGH: 4,
}


@dataclass(frozen=True)
class Finding:
    """
    A single explanation line produced by a detector.

    ``flagging`` findings set the detector's flag; the others are notes that
    only appear in the report alongside flagging ones.
    """
    detector: str
    severity: Severity
    message: str
    flagging: bool = True
    technical_details: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if not self.message.strip():
            raise ValueError("Finding message cannot be empty")

    def to_report_line(self) -> str:
        return f"{self.severity.tag} {self.message}"
