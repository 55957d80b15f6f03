"""
Scoring service for risk assessment.

Turns detector results into the bounded native risk score and the
human-readable risk report of each tier.
"""

import logging
from typing import Iterable, List

from hunter_core.logic.models import DetectorResult, ScoringConfig


class ScoringService:
    """
    Service responsible for the risk score and the risk report text.

    Each fired detector contributes its configured weight once; the sum is
    clamped to ``[0, max_score]``.
    """

    def __init__(self, config: ScoringConfig):
        """
        Initialize the scoring service.

        Args:
            config: Scoring configuration
        """
        self.config = config
        self.logger = logging.getLogger("scoring.service")

    def calculate_score(self, results: Iterable[DetectorResult]) -> int:
        """
        Sum the weights of fired detectors.

        Args:
            results: Results of every detector that ran

        Returns:
            Score clamped to ``[0, max_score]``
        """
        raw_score = sum(result.score for result in results)
        score = min(self.config.max_score, max(0, raw_score))
        if score != raw_score:
            self.logger.debug(f"Raw score {raw_score} clamped to {score}")
        return score

    @staticmethod
    def report_lines(results: Iterable[DetectorResult]) -> List[str]:
        """Report lines of fired detectors, in detector order."""
        lines: List[str] = []
        for result in results:
            lines.extend(result.report_lines())
        return lines

    def native_report(self, results: List[DetectorResult], score: int) -> str:
        """
        Native risk report.

        Returns:
            ``clean (risk score N/100)`` when nothing fired, otherwise
            ``risks found (risk score N/100):`` followed by one line per finding
        """
        lines = self.report_lines(results)
        if not lines:
            return f"clean (risk score {score}/100)"
        return f"risks found (risk score {score}/100):\n" + "\n".join(lines)

    def platform_report(self, results: List[DetectorResult]) -> str:
        """Platform risk report; the platform tier carries no score."""
        lines = self.report_lines(results)
        if not lines:
            return "device environment clean"
        return "risks found:\n" + "\n".join(lines)

    @staticmethod
    def failure_report(message: str) -> str:
        return f"analysis failed: {message}"
