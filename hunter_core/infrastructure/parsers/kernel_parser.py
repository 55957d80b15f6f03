"""
Parsers for the line-prefixed sections of a native dump.

Covers the uname and sysconf sections, the DRM section and the risk tag
list written by the collector's injection scanners.
"""

import re
from typing import Callable, Dict, Optional, Tuple

from hunter_core.logic.models import ProbeValue
from .base_parser import ParsedNativeDump, SectionParser
from .section_splitter import Section


def _prefixed_value(line: str, prefix: str) -> Optional[str]:
    """Value after a prefix, None when empty or ``null``."""
    value = line[len(prefix):].strip()
    if not value or value == "null":
        return None
    return value


class KernelInfoParser(SectionParser):
    """Parser for the ``Kernel Info via uname`` section."""

    TITLE_KEYWORDS = ("Kernel Info", "内核信息")

    # Line prefix -> kernel field. The last four are also exposed as
    # uname.* properties.
    FIELDS: Tuple[Tuple[str, str, Optional[str]], ...] = (
        ("Release:", "release", None),
        ("Machine:", "machine", None),
        ("System Name:", "system_name", "uname.sysname"),
        ("Node Name:", "node_name", "uname.nodename"),
        ("Version:", "version", "uname.version"),
        ("Domain Name:", "domain_name", "uname.domainname"),
    )

    @property
    def parser_name(self) -> str:
        return "kernel_info_parser"

    def parse_section(self, section: Section, dump: ParsedNativeDump) -> None:
        for line in section.lines():
            line = line.strip()
            for prefix, field_name, property_key in self.FIELDS:
                if not line.startswith(prefix):
                    continue
                value = _prefixed_value(line, prefix)
                if value is not None:
                    dump.kernel[field_name] = value
                    if property_key:
                        dump.properties.set(property_key, ProbeValue.resolve(value))
                break


def _parse_count(value: str, unit: str = "") -> Optional[int]:
    if unit and value.endswith(unit):
        value = value[:-len(unit)]
    try:
        return int(value.strip())
    except ValueError:
        return None


class SystemConfigParser(SectionParser):
    """Parser for the ``System Config via sysconf`` section."""

    TITLE_KEYWORDS = ("System Config", "系统配置信息")

    FIELDS: Dict[str, Tuple[str, Callable[[str], Optional[int]]]] = {
        "Page Size:": ("page_size", lambda v: _parse_count(v, "bytes")),
        "Physical Pages:": ("phys_pages", _parse_count),
        "Total Physical Memory:": ("total_memory_mb", lambda v: _parse_count(v, "MB")),
        "CPU Cores (Online):": ("cpu_cores", _parse_count),
    }

    @property
    def parser_name(self) -> str:
        return "system_config_parser"

    def parse_section(self, section: Section, dump: ParsedNativeDump) -> None:
        for line in section.lines():
            line = line.strip()
            for prefix, (field_name, convert) in self.FIELDS.items():
                if line.startswith(prefix):
                    number = convert(line[len(prefix):].strip())
                    if number is None:
                        self.logger.debug(f"Dropping malformed sysconf value: {line}")
                    else:
                        dump.sysconf[field_name] = number
                    break


class DrmInfoParser(SectionParser):
    """Parser for the ``DRM Info`` section."""

    TITLE_KEYWORDS = ("DRM Info",)
    PREFIX = "MediaDrm Device Unique ID (Hex):"

    @property
    def parser_name(self) -> str:
        return "drm_info_parser"

    def parse_section(self, section: Section, dump: ParsedNativeDump) -> None:
        for line in section.lines():
            line = line.strip()
            if line.startswith(self.PREFIX):
                value = _prefixed_value(line, self.PREFIX)
                if value is not None:
                    dump.drm_device_id = value


_TAG_PATTERN = re.compile(r'^[A-Za-z0-9_:./-]+$')


class RiskTagParser(SectionParser):
    """
    Parser for the ``Risk Tags`` section.

    One tag per line, e.g. ``ZYGISK_DETECTED`` or ``SUSPICIOUS_LIB:libriru.so``.
    Tag names are upper-cased; anything after a ``:`` is kept as written.
    """

    TITLE_KEYWORDS = ("Risk Tags",)

    @property
    def parser_name(self) -> str:
        return "risk_tag_parser"

    def parse_section(self, section: Section, dump: ParsedNativeDump) -> None:
        for line in section.lines():
            tag = line.strip().lstrip("-* ").strip()
            if not tag or not _TAG_PATTERN.match(tag):
                continue
            name, sep, detail = tag.partition(":")
            dump.add_risk_tag(name.upper() + sep + detail)
