"""
Analysis result domain models.

Contains the data structures for representing complete analysis results.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from .detection import Finding


class AnalysisTier(Enum):
    """Collection tier a dump came from."""
    PLATFORM = "platform"
    NATIVE = "native"


FAILED_SCORE = -1


@dataclass
class DetectorResult:
    """Result from running a single detector."""
    name: str
    flagged: bool = False
    findings: List[Finding] = field(default_factory=list)
    weight: int = 0
    execution_time: float = 0.0
    error: Optional[str] = None

    @property
    def score(self) -> int:
        """Score contribution of this detector."""
        return self.weight if self.flagged else 0

    def report_lines(self) -> List[str]:
        """Report lines, only emitted when the detector fired."""
        if not self.flagged:
            return []
        return [finding.to_report_line() for finding in self.findings]


@dataclass(frozen=True)
class AnalysisResult:
    """
    Complete result of analysing one dump.

    Created fresh for every call and never mutated afterwards.
    """
    tier: AnalysisTier
    device_id: str
    risk_report: str
    is_emulator: bool = False
    is_rooted: bool = False
    is_debug_mode: bool = False
    has_injection: bool = False
    risk_score: int = 0
    findings: Tuple[Finding, ...] = ()

    def __post_init__(self):
        """Validate analysis result."""
        if self.risk_score != FAILED_SCORE and not 0 <= self.risk_score <= 100:
            raise ValueError(f"Risk score must be between 0 and 100 or -1, got {self.risk_score}")

    @property
    def failed(self) -> bool:
        return self.risk_score == FAILED_SCORE

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert to the tier-specific result shape.

        Returns:
            Platform: deviceId, riskReport, isEmulator, isDebugMode.
            Native: nativeDeviceId, riskReport, isEmulator, isRooted,
            isDebugMode, hasZygiskInjection, riskScore.
        """
        if self.tier == AnalysisTier.PLATFORM:
            return {
                'deviceId': self.device_id,
                'riskReport': self.risk_report,
                'isEmulator': self.is_emulator,
                'isDebugMode': self.is_debug_mode,
            }

        return {
            'nativeDeviceId': self.device_id,
            'riskReport': self.risk_report,
            'isEmulator': self.is_emulator,
            'isRooted': self.is_rooted,
            'isDebugMode': self.is_debug_mode,
            'hasZygiskInjection': self.has_injection,
            'riskScore': self.risk_score,
        }
