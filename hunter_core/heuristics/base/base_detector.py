"""
Base detector interface.

Defines the contract that all risk detectors must implement.
"""

import logging
import time
from abc import ABC, abstractmethod
from typing import Any, Dict, FrozenSet, List, Optional

from hunter_core.infrastructure.shared.error_handling import ErrorHandlingService
from hunter_core.logic.models import (
    DEFAULT_DETECTOR_WEIGHTS, AnalysisTier, DetectorConfig, DetectorResult, Finding, Severity
)

Document = Dict[str, Any]


class BaseDetector(ABC):
    """
    Base class for all detector implementations.

    A detector evaluates one risk category against a canonical document and
    explains itself with findings. The category is flagged when at least one
    flagging finding is raised. ``run()`` wraps ``analyze()`` with timing and
    failure containment: a detector that raises counts as not fired.
    """

    def __init__(self, config: Optional[DetectorConfig] = None):
        """Initialize the detector with configuration."""
        self.config = config or DetectorConfig(name=self.name, weight=DEFAULT_DETECTOR_WEIGHTS[self.name])
        self.logger = logging.getLogger(f"detector.{self.name}")

    @property
    @abstractmethod
    def name(self) -> str:
        """Get the name of this detector."""
        pass

    @property
    @abstractmethod
    def category(self) -> str:
        """Get the risk category of this detector (e.g., 'Emulation')."""
        pass

    @property
    def tiers(self) -> FrozenSet[AnalysisTier]:
        """Tiers whose documents this detector understands."""
        return frozenset({AnalysisTier.PLATFORM, AnalysisTier.NATIVE})

    @abstractmethod
    def analyze(self, document: Document, tier: AnalysisTier) -> List[Finding]:
        """
        Evaluate the document and return findings.

        Args:
            document: Canonical document of the given tier
            tier: Tier the document was built for

        Returns:
            Findings raised by this detector, in rule order
        """
        pass

    def applies_to(self, tier: AnalysisTier) -> bool:
        return self.config.enabled and tier in self.tiers

    def run(self, document: Document, tier: AnalysisTier,
            error_service: Optional[ErrorHandlingService] = None) -> DetectorResult:
        """
        Run the detector with timing and error handling.

        Args:
            document: Canonical document
            tier: Tier the document was built for
            error_service: Per-analysis service that records a failure

        Returns:
            DetectorResult with findings and flag
        """
        start_time = time.time()
        findings: List[Finding] = []
        error = None

        try:
            findings = self.analyze(document, tier)
            self.logger.debug(f"{self.name} raised {len(findings)} findings")
        except Exception as e:
            error = f"Error in detector {self.name}: {e}"
            if error_service is not None:
                error_service.record(e, "analyze", f"detector.{self.name}")
            else:
                self.logger.error(error, exc_info=True)
            findings = []

        return DetectorResult(
            name=self.name,
            flagged=any(finding.flagging for finding in findings),
            findings=findings,
            weight=self.config.weight,
            execution_time=time.time() - start_time,
            error=error
        )

    def parameter(self, key: str, default: Any) -> Any:
        """Configured parameter, or the built-in default."""
        return self.config.get_parameter(key, default)

    def create_finding(
        self,
        message: str,
        severity: Severity = Severity.HIGH,
        flagging: bool = True,
        **technical_details
    ) -> Finding:
        """
        Helper to create a finding attributed to this detector.

        Args:
            message: Explanation shown in the risk report
            severity: Severity tag of the report line
            flagging: Whether the finding sets the detector's flag
            technical_details: Values that triggered the rule

        Returns:
            Created finding
        """
        return Finding(
            detector=self.name,
            severity=severity,
            message=message,
            flagging=flagging,
            technical_details=technical_details
        )
