"""
Field normalizers.

Canonicalize noisy or volatile values into stable forms: memory sizes are
bucketed, GPU strings reduced to a model name, order-sensitive lists
sorted and dynamic identifiers stripped before hashing.
"""

import hashlib
import math
import re
from typing import Any, Dict, Iterable, List, Optional

BYTES_PER_GB = 1024.0 * 1024.0 * 1024.0
BYTES_PER_MB = 1024.0 * 1024.0

# Markers of collector error output in platform fields
ERROR_MARKERS = (
    'securityexception',
    'android 10+ restricted',
    'permission denied',
    'error:',
    'not available',
    'unknown',
)
ERROR_VALUES = {'null', 'none', '-1', 'unavailable'}

MALI_PATTERN = re.compile(r'(Mali-[GT]\d+)')
ADRENO_PATTERN = re.compile(r'Adreno\s*(?:\(TM\))?\s*(\d+)')
POWERVR_PATTERN = re.compile(r'PowerVR\s+(?:\w+\s+)?(\w+\d+)')

MOUNT_ID_PREFIX = re.compile(r'^\d+\s+\d+\s+\d+:\d+\s+')
BOOT_ID_PATTERN = re.compile(r'^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$')


def sha256_hex(text: str) -> str:
    return hashlib.sha256(text.encode('utf-8')).hexdigest()


def structural_hash(text: Optional[str]) -> str:
    """SHA-256 of a structural fingerprint; empty input hashes to ``""``."""
    if not text:
        return ""
    return sha256_hex(text)


def format_list(items: Iterable[Any]) -> str:
    """Render a sequence as ``[a, b, c]`` for hashing."""
    return "[" + ", ".join(str(item) for item in items) + "]"


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def bytes_to_gb(value: Optional[float]) -> Optional[float]:
    """Bytes to GB with two decimals; non-positive sizes are absent."""
    if value is None or value <= 0:
        return None
    return round_half_up(value / BYTES_PER_GB * 100) / 100


def bytes_to_mb(value: Optional[float]) -> Optional[float]:
    """Bytes to MB with two decimals; non-positive sizes are absent."""
    if value is None or value <= 0:
        return None
    return round_half_up(value / BYTES_PER_MB * 100) / 100


def parse_percentage(value: Any) -> Optional[float]:
    """Parse ``"45.67%"`` (or a bare number) into ``45.67``."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)

    text = str(value).replace('%', '').strip()
    if not text:
        return None
    try:
        return float(text)
    except ValueError:
        return None


def is_error_string(value: Optional[str]) -> bool:
    """Check whether a collector value is an error message rather than data."""
    if value is None:
        return True
    lower = value.lower()
    return any(marker in lower for marker in ERROR_MARKERS) or lower in ERROR_VALUES


def clean_string(value: Optional[str]) -> Optional[str]:
    """Trim a value; blank values and error messages become None."""
    if value is None:
        return None
    cleaned = value.strip()
    if not cleaned or is_error_string(cleaned):
        return None
    return cleaned


def extract_gpu_model(renderer: Optional[str]) -> Optional[str]:
    """
    Reduce a GL renderer string to a model name.

    ``"Mali-G78 MP12 r32p1"`` becomes ``"Mali-G78"`` and ``"Adreno (TM) 650"``
    becomes ``"Adreno 650"``. Unknown renderers keep their first two words.
    """
    if not renderer:
        return None

    match = MALI_PATTERN.search(renderer)
    if match:
        return match.group(1)

    match = ADRENO_PATTERN.search(renderer)
    if match:
        return f"Adreno {match.group(1)}"

    match = POWERVR_PATTERN.search(renderer)
    if match:
        return f"PowerVR {match.group(1)}"

    tokens = renderer.split()
    if not tokens:
        return None
    return " ".join(tokens[:2])


def _value_after_colon(line: str) -> str:
    return line[line.find(':') + 1:].strip() if ':' in line else ""


def normalize_cpu_structure(cpuinfo: str) -> Dict[str, Any]:
    """
    Summarize ``/proc/cpuinfo`` into a frequency-independent structure.

    Distinct ``CPU part`` values are sorted; the first ``Features`` line and
    the last ``Hardware`` line are kept.

    Returns:
        cpu_parts, features_hash (when features exist), hardware (when
        present) and cpu_structure_hash
    """
    parts = set()
    features = ""
    hardware = ""

    for line in cpuinfo.split("\n"):
        line = line.strip()
        if not line:
            continue
        if line.startswith("CPU part"):
            part = _value_after_colon(line)
            if part:
                parts.add(part)
        if line.startswith("Features") and not features:
            features = _value_after_colon(line)
        if line.startswith("Hardware"):
            hardware = _value_after_colon(line)

    sorted_parts = sorted(parts)
    structure: Dict[str, Any] = {'cpu_parts': sorted_parts}
    if features:
        structure['features_hash'] = structural_hash(features)
    if hardware:
        structure['hardware'] = hardware
    structure['cpu_structure_hash'] = structural_hash(format_list(sorted_parts) + "|" + features)
    return structure


def normalize_mounts(mountinfo: Optional[str]) -> str:
    """
    Hash a mount table independently of mount IDs and line order.

    Returns:
        SHA-256 hex digest, ``""`` for an empty table
    """
    if not mountinfo or not mountinfo.strip():
        return ""

    cleaned: List[str] = []
    for line in mountinfo.split("\n"):
        line = line.strip()
        if not line:
            continue
        line = MOUNT_ID_PREFIX.sub('', line)
        if line:
            cleaned.append(line)

    return structural_hash("\n".join(sorted(cleaned)))


def _meminfo_total_mb(meminfo: str) -> Optional[int]:
    for line in meminfo.split("\n"):
        if line.startswith("MemTotal:"):
            value = line[len("MemTotal:"):].replace("kB", "").strip()
            try:
                return int(value) // 1024
            except ValueError:
                continue
    return None


def normalize_memory_structure(meminfo: str, sysconf_total_mb: Optional[int] = None) -> Dict[str, Any]:
    """
    Summarize ``/proc/meminfo``.

    Total RAM is floored to 100 MB, preferring the sysconf total over
    ``MemTotal``.

    Args:
        meminfo: Raw meminfo content
        sysconf_total_mb: Total physical memory reported by sysconf

    Returns:
        total_ram_mb (when known), has_swap and field_count
    """
    structure: Dict[str, Any] = {}

    total_mb = sysconf_total_mb if sysconf_total_mb and sysconf_total_mb > 0 else _meminfo_total_mb(meminfo)
    if total_mb is not None:
        structure['total_ram_mb'] = (total_mb // 100) * 100

    structure['has_swap'] = "SwapTotal:" in meminfo and "SwapTotal: 0 kB" not in meminfo
    structure['field_count'] = sum(1 for line in meminfo.split("\n") if ':' in line and line.strip())
    return structure


def entropy_level(value: Optional[str]) -> Optional[str]:
    """Bucket ``entropy_avail`` into LOW / MEDIUM / HIGH."""
    try:
        entropy = int((value or "").strip())
    except ValueError:
        return None
    if entropy < 100:
        return "LOW"
    if entropy < 1000:
        return "MEDIUM"
    return "HIGH"


def boot_id_format(value: Optional[str]) -> Optional[str]:
    """Record only whether the boot id looks like a UUID."""
    boot_id = (value or "").strip()
    if not boot_id:
        return None
    return "UUID" if BOOT_ID_PATTERN.match(boot_id) else "NON_UUID"


def sorted_sensor_names(sensors: List[Dict[str, Any]]) -> List[str]:
    """Sensor names (blank when unnamed) sorted so enumeration order never matters."""
    return sorted(str(sensor.get("name") or "") for sensor in sensors)


def lookup(document: Optional[Dict[str, Any]], *path: str, default: Any = None) -> Any:
    """
    Walk nested mappings, returning ``default`` where a level is missing.

    Args:
        document: Root mapping
        path: Keys to follow

    Returns:
        The value at the path, or default
    """
    current: Any = document
    for key in path:
        if not isinstance(current, dict) or key not in current:
            return default
        current = current[key]
    return default if current is None else current
