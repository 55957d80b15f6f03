"""
Emulator Detection - Virtualized environment analysis

Detects emulators and virtual devices from GPU renderer strings, CPU and
kernel structure, build signing and the reachability of core kernel files.
Every rule is evaluated independently; a missing category only skips the
rules that need it.
"""

from typing import Any, Dict, List

from hunter_core.heuristics.base import BaseDetector
from hunter_core.infrastructure.processors import lookup
from hunter_core.logic.models import AnalysisTier, Finding, Severity


DEFAULT_GPU_MARKERS = ['Goldfish', 'llvmpipe', 'Ranchu']
DEFAULT_HARDWARE_MARKERS = ['goldfish', 'ranchu', 'vbox', 'virtual']
DEFAULT_KERNEL_MARKERS = ['-generic', 'ranchu']
DEFAULT_BUILD_HOST_MARKERS = ['ubuntu', 'localhost', 'android-build']
DEFAULT_CRITICAL_FILES = ['/proc/cpuinfo', '/proc/meminfo', '/sys/devices/system/cpu/possible']


def _contains_any(value: Any, markers: List[str]) -> bool:
    """Case-insensitive substring match against any marker."""
    if not isinstance(value, str):
        return False
    lowered = value.lower()
    return any(marker.lower() in lowered for marker in markers)


class EmulatorDetector(BaseDetector):
    """Detects emulated or virtualized devices."""

    @property
    def name(self) -> str:
        return "emulator"

    @property
    def category(self) -> str:
        return "Emulation"

    def analyze(self, document: Dict[str, Any], tier: AnalysisTier) -> List[Finding]:
        if tier == AnalysisTier.PLATFORM:
            return self._analyze_platform(document)
        return self._analyze_native(document)

    def _analyze_platform(self, document: Dict[str, Any]) -> List[Finding]:
        findings = []

        renderer = lookup(document, 'hardware', 'gpu', 'renderer')
        if _contains_any(renderer, self.parameter('gpu_markers', DEFAULT_GPU_MARKERS)):
            findings.append(self.create_finding(
                f"emulator GPU renderer: {renderer}",
                Severity.HIGH,
                renderer=renderer
            ))

        # Only when sensors were enumerated
        sensor_count = lookup(document, 'sensors', 'sensor_count')
        min_sensors = self.parameter('min_sensor_count', 5)
        if isinstance(sensor_count, int) and sensor_count < min_sensors:
            findings.append(self.create_finding(
                f"abnormally low sensor count: {sensor_count}",
                Severity.SUSPECT,
                sensor_count=sensor_count
            ))

        return findings

    def _analyze_native(self, document: Dict[str, Any]) -> List[Finding]:
        findings = []

        cpu_structure = lookup(document, 'native_probes', 'cpu_structure', default={})
        hardware = cpu_structure.get('hardware')
        if _contains_any(hardware, self.parameter('hardware_markers', DEFAULT_HARDWARE_MARKERS)):
            findings.append(self.create_finding(
                f"emulator hardware: {hardware}",
                Severity.HIGH,
                hardware=hardware
            ))

        cpu_parts = cpu_structure.get('cpu_parts')
        min_parts = self.parameter('min_cpu_parts', 2)
        if isinstance(cpu_parts, list) and len(cpu_parts) < min_parts:
            findings.append(self.create_finding(
                f"abnormal CPU structure: {len(cpu_parts)} distinct CPU parts",
                Severity.SUSPECT,
                cpu_parts=list(cpu_parts)
            ))

        release = lookup(document, 'kernel_props', 'uname_release')
        if _contains_any(release, self.parameter('kernel_markers', DEFAULT_KERNEL_MARKERS)):
            findings.append(self.create_finding(
                f"emulator kernel: {release}",
                Severity.SUSPECT,
                uname_release=release
            ))

        build_tags = lookup(document, 'device_identity', 'build_tags')
        if _contains_any(build_tags, ['test-keys']):
            findings.append(self.create_finding(
                "test-keys build signature",
                Severity.SUSPECT,
                build_tags=build_tags
            ))

        findings.extend(self._check_critical_files(document))

        build_host = lookup(document, 'device_identity', 'build_host')
        if _contains_any(build_host, self.parameter('build_host_markers', DEFAULT_BUILD_HOST_MARKERS)):
            findings.append(self.create_finding(
                f"generic build host: {build_host}",
                Severity.LOW,
                flagging=False,
                build_host=build_host
            ))

        return findings

    def _check_critical_files(self, document: Dict[str, Any]) -> List[Finding]:
        access_map = lookup(document, 'native_probes', 'file_access_map', default={})
        critical_files = self.parameter('critical_files', DEFAULT_CRITICAL_FILES)
        missing = [path for path in critical_files if access_map.get(path) == 'NOT_FOUND']

        if len(missing) <= self.parameter('max_missing_critical_files', 1):
            return []

        return [self.create_finding(
            f"critical kernel files missing: {len(missing)}",
            Severity.SUSPECT,
            missing_files=missing
        )]
