"""
Raw dump domain models.

The platform collector hands over one string per collected field (plus a
JSON blob for memory). The native collector hands over a single text dump,
which is kept as a plain ``str`` and never modelled here.
"""

import json
import re
from dataclasses import dataclass, fields
from typing import Any, Dict, Optional, Union


def _snake_case(name: str) -> str:
    return re.sub(r'(?<!^)(?=[A-Z])', '_', name).lower()


@dataclass(frozen=True)
class PlatformRawDump:
    """Per-field strings captured by the platform-tier collector."""
    android_id: Optional[str] = None
    serial_number: Optional[str] = None
    bluetooth_address: Optional[str] = None
    drm_info: Optional[str] = None
    gl_renderer_info: Optional[str] = None
    memory_info: Optional[str] = None
    battery_info: Optional[str] = None
    build_info: Optional[str] = None
    phone_info: Optional[str] = None
    settings: Optional[str] = None
    volume_info: Optional[str] = None
    sensor_info: Optional[str] = None
    account_info: Optional[str] = None
    native_build_info: Optional[str] = None

    # Alternate field names seen in collector payloads
    ALIASES = {
        "glenderer_info": "gl_renderer_info",
        "gpu_info": "gl_renderer_info",
        "native_info": "native_build_info",
        "native_dump": "native_build_info",
    }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PlatformRawDump':
        """
        Create a raw dump from a collector payload.

        Keys may be camelCase or snake_case; unknown keys are ignored.
        Non-string values (for example an already decoded memory blob) are
        serialised back to JSON text so every field is a string.

        Args:
            data: Collector payload

        Returns:
            PlatformRawDump instance
        """
        known = {f.name for f in fields(cls)}
        values: Dict[str, Optional[str]] = {}

        for key, value in (data or {}).items():
            name = _snake_case(str(key))
            name = cls.ALIASES.get(name, name)
            if name not in known or value is None:
                continue
            if isinstance(value, (dict, list)):
                value = json.dumps(value)
            values[name] = str(value)

        return cls(**values)

    @classmethod
    def from_json(cls, text: str) -> 'PlatformRawDump':
        """Create a raw dump from a JSON object string."""
        data = json.loads(text)
        if not isinstance(data, dict):
            raise ValueError("Platform dump must be a JSON object")
        return cls.from_dict(data)

    @classmethod
    def coerce(cls, dump: Union['PlatformRawDump', Dict[str, Any], str, None]) -> 'PlatformRawDump':
        """Accept a dump instance, a payload dict or a JSON string."""
        if isinstance(dump, cls):
            return dump
        if dump is None:
            return cls()
        if isinstance(dump, str):
            return cls.from_json(dump)
        return cls.from_dict(dump)
