"""
Injection Detection - Code injection framework analysis

Detects Zygisk/Magisk style injection from the derived risk tags and from
root artifacts that the unprivileged collector could read. Native tier only.
"""

from typing import Any, Dict, FrozenSet, List

from hunter_core.heuristics.base import BaseDetector
from hunter_core.infrastructure.processors import lookup
from hunter_core.logic.models import AnalysisTier, Finding, Severity


INJECTION_TAG_MARKERS = ['ZYGISK', 'MAGISK', 'SUSPICIOUS_LIB']
ROOT_ARTIFACT_PATHS = ['/sbin/.magisk', '/system/xbin/su', '/system/bin/su']


def is_injection_tag(tag: str, markers: List[str]) -> bool:
    return any(marker in tag for marker in markers)


class InjectionDetector(BaseDetector):
    """Detects injection frameworks and root artifacts."""

    @property
    def name(self) -> str:
        return "injection"

    @property
    def category(self) -> str:
        return "Injection"

    @property
    def tiers(self) -> FrozenSet[AnalysisTier]:
        return frozenset({AnalysisTier.NATIVE})

    def analyze(self, document: Dict[str, Any], tier: AnalysisTier) -> List[Finding]:
        findings = []

        markers = self.parameter('tag_markers', INJECTION_TAG_MARKERS)
        for tag in lookup(document, 'risk_tags', default=[]):
            if is_injection_tag(tag, markers):
                findings.append(self.create_finding(
                    f"suspicious injection: {tag}",
                    Severity.HIGH,
                    tag=tag
                ))

        access_map = lookup(document, 'native_probes', 'file_access_map', default={})
        for path in self.parameter('artifact_paths', ROOT_ARTIFACT_PATHS):
            if access_map.get(path) == 'OK':
                findings.append(self.create_finding(
                    f"root artifact accessible: {path}",
                    Severity.HIGH,
                    path=path
                ))

        return findings
