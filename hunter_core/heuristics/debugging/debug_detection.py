"""
Debug Detection - Debug instrumentation analysis

Detects devices exposing debug interfaces: ADB enabled, a debuggable build
or a running adbd service. On the platform tier ADB only counts while the
battery reports a USB connection to a computer; otherwise it is a note.
"""

from typing import Any, Dict, List

from hunter_core.heuristics.base import BaseDetector
from hunter_core.infrastructure.processors import lookup
from hunter_core.logic.models import AnalysisTier, Finding, Severity


class DebugDetector(BaseDetector):
    """Detects debug mode and exposed debug services."""

    @property
    def name(self) -> str:
        return "debug"

    @property
    def category(self) -> str:
        return "Debugging"

    def analyze(self, document: Dict[str, Any], tier: AnalysisTier) -> List[Finding]:
        if tier == AnalysisTier.PLATFORM:
            return self._analyze_platform(document)
        return self._analyze_native(document)

    def _analyze_platform(self, document: Dict[str, Any]) -> List[Finding]:
        findings = []

        usb_config = lookup(document, 'system', 'build_properties', 'usb', 'sys.usb.config', default="")
        plugged = lookup(document, 'hardware', 'battery', 'plugged', default="")
        usb_connection = self.parameter('usb_plug_type', 'USB')

        if 'adb' in str(usb_config):
            if str(plugged).lower() == usb_connection.lower():
                findings.append(self.create_finding(
                    "USB debugging enabled while connected to a computer",
                    Severity.HIGH,
                    usb_config=usb_config,
                    plugged=plugged
                ))
            else:
                findings.append(self.create_finding(
                    "USB debugging enabled",
                    Severity.MEDIUM,
                    flagging=False,
                    usb_config=usb_config,
                    plugged=plugged
                ))

        security = lookup(document, 'system', 'build_properties', 'security', default={})
        if security.get('ro.debuggable') == "1":
            findings.append(self.create_finding(
                "debuggable build (ro.debuggable=1)",
                Severity.HIGH,
                debuggable=True
            ))

        adbd_status = security.get('init.svc.adbd')
        if adbd_status and adbd_status.lower() == 'running':
            findings.append(self.create_finding(
                "adbd service running",
                Severity.MEDIUM,
                adbd_service_status=adbd_status
            ))

        return findings

    def _analyze_native(self, document: Dict[str, Any]) -> List[Finding]:
        states = lookup(document, 'security_states', default={})
        findings = []

        if states.get('adb_enabled') is True:
            findings.append(self.create_finding(
                "ADB enabled",
                Severity.HIGH,
                adb_enabled=True
            ))

        if states.get('debuggable') is True:
            findings.append(self.create_finding(
                "debuggable build (ro.debuggable=1)",
                Severity.HIGH,
                debuggable=True
            ))

        adbd_status = states.get('adbd_service_status')
        if adbd_status and adbd_status.lower() == 'running':
            findings.append(self.create_finding(
                "adbd service running",
                Severity.MEDIUM,
                adbd_service_status=adbd_status
            ))

        usb_state = states.get('usb_state')
        if usb_state and 'adb' in usb_state:
            findings.append(self.create_finding(
                f"USB state: {usb_state}",
                Severity.MEDIUM,
                flagging=False,
                usb_state=usb_state
            ))

        return findings
