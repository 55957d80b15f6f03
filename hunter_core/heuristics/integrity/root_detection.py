"""
Root Detection - Boot chain and platform integrity analysis

Flags devices whose boot chain or security policy has been weakened:
unlocked bootloader, non-green verified boot, unlocked vbmeta, insecure
``ro.secure`` and a non-enforcing SELinux policy. An OEM-unlock toggle that
is merely allowed is reported as a note.
"""

from typing import Any, Dict, List

from hunter_core.heuristics.base import BaseDetector
from hunter_core.infrastructure.processors import lookup
from hunter_core.logic.models import AnalysisTier, Finding, Severity


class RootDetector(BaseDetector):
    """Detects rooted or bootloader-unlocked devices."""

    @property
    def name(self) -> str:
        return "root"

    @property
    def category(self) -> str:
        return "Integrity"

    def analyze(self, document: Dict[str, Any], tier: AnalysisTier) -> List[Finding]:
        if tier == AnalysisTier.PLATFORM:
            return self._analyze_platform(document)
        return self._analyze_native(document)

    def _analyze_platform(self, document: Dict[str, Any]) -> List[Finding]:
        locked = lookup(document, 'system', 'build_properties', 'security', 'ro.boot.flash.locked', default="1")
        if str(locked) == "1":
            return []
        return [self.create_finding(
            "bootloader unlocked",
            Severity.MEDIUM,
            flash_locked=locked
        )]

    def _analyze_native(self, document: Dict[str, Any]) -> List[Finding]:
        states = lookup(document, 'security_states', default={})
        findings = []

        # Unreported flags default to the secure value
        if states.get('bootloader_locked', True) is False:
            findings.append(self.create_finding(
                "bootloader unlocked",
                Severity.HIGH,
                bootloader_locked=False
            ))

        vb_state = states.get('vb_state')
        if vb_state and vb_state.lower() != 'green':
            findings.append(self.create_finding(
                f"verified boot state: {vb_state}",
                Severity.HIGH,
                vb_state=vb_state
            ))

        vbmeta_state = states.get('vbmeta_device_state')
        if vbmeta_state and vbmeta_state.lower() == 'unlocked':
            findings.append(self.create_finding(
                "vbmeta device state unlocked",
                Severity.HIGH,
                vbmeta_device_state=vbmeta_state
            ))

        if states.get('ro_secure', True) is False:
            findings.append(self.create_finding(
                "ro.secure disabled",
                Severity.MEDIUM,
                ro_secure=False
            ))

        if states.get('selinux_enforcing', True) is False:
            findings.append(self.create_finding(
                "SELinux not enforcing",
                Severity.MEDIUM,
                selinux_enforcing=False
            ))

        if states.get('oem_unlock_allowed') is True:
            findings.append(self.create_finding(
                "OEM unlock allowed",
                Severity.LOW,
                flagging=False,
                oem_unlock_allowed=True
            ))

        return findings
