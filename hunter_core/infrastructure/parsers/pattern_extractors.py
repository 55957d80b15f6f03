"""
Field-specific pattern extractors for platform dump fields.

Platform collectors emit each field as a loosely formatted string, for
example ``Renderer: Mali-G78 MP12 | Vendor: ARM | Version: OpenGL ES 3.2``.
Each extractor pulls one value out by pattern; no match means the value is
absent, never an error.
"""

import re
from typing import Any, Dict, List, Optional, Pattern

DRM_ID_PATTERN = re.compile(r'MediaDrm Device Unique ID:\s*([a-fA-F0-9]+)')
HEX_PATTERN = re.compile(r'^[a-fA-F0-9]+$')

GPU_RENDERER_PATTERN = re.compile(r'Renderer:\s*([^|]+)')
GPU_VENDOR_PATTERN = re.compile(r'Vendor:\s*([^|]+)')

BATTERY_LEVEL_PATTERN = re.compile(r'Battery Level:\s*([\d.]+)%')
BATTERY_STATUS_PATTERN = re.compile(r'Status:\s*([^\n]+)')
BATTERY_PLUGGED_PATTERN = re.compile(r'Plugged:\s*([^\n]+)')
BATTERY_HEALTH_PATTERN = re.compile(r'Health:\s*([^\n]+)')
BATTERY_VOLTAGE_PATTERN = re.compile(r'Voltage:\s*(\d+)\s*mV')
BATTERY_TEMPERATURE_PATTERN = re.compile(r'Temperature:\s*([\d.]+)°C')

SENSOR_LINE_PREFIX = "Sensor:"
SENSOR_FIELDS = ("name", "vendor", "type", "version", "maxRange", "power")


def extract_value(source: Optional[str], pattern: Pattern) -> Optional[str]:
    """
    Extract the first group of the first match.

    Args:
        source: Text to search
        pattern: Compiled pattern with one group

    Returns:
        Trimmed group text, or None when there is no (non-blank) match
    """
    if not source:
        return None

    match = pattern.search(source)
    if not match:
        return None

    value = match.group(1).strip()
    return value or None


def extract_drm_device_id(drm_info: Optional[str]) -> Optional[str]:
    """Lower-cased hex DRM device id from the DRM info field."""
    value = extract_value(drm_info, DRM_ID_PATTERN)
    if value and HEX_PATTERN.match(value):
        return value.lower()
    return None


def extract_sensor_field(content: str, key: str) -> Optional[str]:
    """Value of ``key="quoted"`` or ``key=bare`` inside a sensor record."""
    pattern = re.compile(r'\b' + re.escape(key) + r'="([^"]+)"|\b' + re.escape(key) + r'=([^,}\s]+)')
    match = pattern.search(content)
    if not match:
        return None
    return match.group(1) if match.group(1) is not None else match.group(2)


def _sensor_content(line: str) -> str:
    """Text inside the ``{Sensor ...}`` wrapper of a sensor line."""
    content = line[len(SENSOR_LINE_PREFIX):].strip()
    start = content.find("{Sensor")
    if start != -1:
        content = content[start + len("{Sensor"):]
    if content.endswith("}"):
        content = content[:-1]
    return content.strip()


def extract_sensor_records(sensor_info: Optional[str]) -> List[Dict[str, str]]:
    """
    Extract raw sensor records from the sensor list field.

    Only lines starting with ``Sensor:`` are considered; a line that yields
    no recognised field is skipped.

    Returns:
        One mapping of field name to raw text per sensor, in input order
    """
    records: List[Dict[str, str]] = []
    if not sensor_info:
        return records

    for line in sensor_info.split("\n"):
        line = line.strip()
        if not line.startswith(SENSOR_LINE_PREFIX):
            continue

        content = _sensor_content(line)
        record: Dict[str, Any] = {}
        for key in SENSOR_FIELDS:
            value = extract_sensor_field(content, key)
            if value is not None:
                record[key] = value

        if record:
            records.append(record)

    return records
