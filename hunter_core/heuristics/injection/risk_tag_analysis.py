"""
Risk Tag Analysis

Reports every risk tag the injection detector does not already account
for. Any such tag flags the category once, regardless of how many there are.
"""

from typing import Any, Dict, FrozenSet, List

from hunter_core.heuristics.base import BaseDetector
from hunter_core.infrastructure.processors import lookup
from hunter_core.logic.models import AnalysisTier, Finding, Severity
from .injection_detection import INJECTION_TAG_MARKERS, is_injection_tag


class RiskTagDetector(BaseDetector):
    """Surfaces the remaining risk tags as informational lines."""

    @property
    def name(self) -> str:
        return "risk_tags"

    @property
    def category(self) -> str:
        return "Injection"

    @property
    def tiers(self) -> FrozenSet[AnalysisTier]:
        return frozenset({AnalysisTier.NATIVE})

    def analyze(self, document: Dict[str, Any], tier: AnalysisTier) -> List[Finding]:
        excluded = self.parameter('excluded_markers', INJECTION_TAG_MARKERS)
        return [
            self.create_finding(f"risk tag: {tag}", Severity.INFO, tag=tag)
            for tag in lookup(document, 'risk_tags', default=[])
            if not is_injection_tag(tag, excluded)
        ]
