"""
Identity service.

Derives a stable device identifier from the canonical document: a SHA-256
over a fixed, ordered set of factors that survive reboots, app reinstalls
and minor system updates. Volatile values are bucketed before hashing so
small fluctuations do not change the identifier.
"""

import logging
from typing import Any, Dict, List, Optional

from hunter_core.infrastructure.processors import field_normalizers as normalize
from hunter_core.infrastructure.shared.error_handling import ErrorHandlingService


def _number(value: Any) -> float:
    if isinstance(value, bool):
        return 0.0
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def _text(value: Any) -> str:
    return "" if value is None else str(value)


class IdentityService:
    """Derives device identifiers for both collection tiers."""

    def __init__(self, error_service: Optional[ErrorHandlingService] = None):
        self.error_service = error_service or ErrorHandlingService()
        self.logger = logging.getLogger("identity.service")

    def platform_factors(self, document: Dict[str, Any]) -> str:
        """
        Ordered identity factors of a platform document.

        ``drm|gpu|ram_gb|rom_gb|[sensor names]`` with RAM and storage rounded
        half-up to whole GB and sensor names sorted.
        """
        drm_id = _text(normalize.lookup(document, 'identity', 'drm_device_id'))
        gpu = _text(normalize.lookup(document, 'hardware', 'gpu', 'renderer'))
        ram_gb = normalize.round_half_up(_number(normalize.lookup(document, 'hardware', 'memory', 'ram', 'total_gb', default=0)))
        rom_gb = normalize.round_half_up(
            _number(normalize.lookup(document, 'hardware', 'memory', 'internal_storage', 'total_gb', default=0))
        )
        sensors: List[Dict[str, Any]] = normalize.lookup(document, 'sensors', 'sensor_list', default=[])
        names = normalize.sorted_sensor_names([s for s in sensors if isinstance(s, dict)])

        return f"{drm_id}|{gpu}|{ram_gb}|{rom_gb}|{normalize.format_list(names)}"

    def native_factors(self, document: Dict[str, Any]) -> str:
        """
        Ordered identity factors of a native document.

        ``drm|cpu_structure_hash|ram_mb|kernel_release|cpu_abi|fingerprint|vbmeta_digest``
        with RAM rounded half-up to the nearest 100 MB.
        """
        total_ram_mb = _number(normalize.lookup(document, 'native_probes', 'memory_structure', 'total_ram_mb', default=0))
        ram_mb = normalize.round_half_up(total_ram_mb / 100.0) * 100

        factors = [
            _text(normalize.lookup(document, 'device_identity', 'drm_device_id')),
            _text(normalize.lookup(document, 'native_probes', 'cpu_structure', 'cpu_structure_hash')),
            str(ram_mb),
            _text(normalize.lookup(document, 'kernel_props', 'uname_release')),
            _text(normalize.lookup(document, 'device_identity', 'cpu_abi')),
            _text(normalize.lookup(document, 'device_identity', 'fingerprint_string')),
            _text(normalize.lookup(document, 'security_states', 'vbmeta_digest')),
        ]
        return "|".join(factors)

    def derive_platform_id(self, document: Dict[str, Any]) -> str:
        """Device id of a platform document. Never raises."""
        return self._derive(lambda: self.platform_factors(document), "derive_platform_id")

    def derive_native_id(self, document: Dict[str, Any]) -> str:
        """Device id of a native document. Never raises."""
        return self._derive(lambda: self.native_factors(document), "derive_native_id")

    def _derive(self, factors, operation: str) -> str:
        try:
            raw = factors()
        except Exception as e:
            self.error_service.record(e, operation, "identity_service")
            raw = ""
        self.logger.debug(f"{operation}: hashing {len(raw)} bytes of factors")
        return normalize.sha256_hex(raw)
