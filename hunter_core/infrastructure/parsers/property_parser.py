"""
System property parser for ``key = value`` blocks.

Both collector tiers emit Android system properties one per line as
``ro.build.fingerprint = google/raven/...``. This parser extracts them into
a PropertyMap and also knows how to group properties into the categories
used by the platform document.
"""

from typing import Dict, Optional, Tuple

from hunter_core.logic.models import ProbeValue, PropertyMap
from .base_parser import ParsedNativeDump, SectionParser
from .section_splitter import Section

SEPARATOR = " = "


def parse_property_line(line: str) -> Optional[Tuple[str, ProbeValue]]:
    """
    Parse a single property line.

    Args:
        line: Raw line

    Returns:
        (key, value) or None for blank, banner or separator-less lines
    """
    line = line.strip()
    if not line or line.startswith("===") or line.endswith("==="):
        return None

    index = line.find(SEPARATOR)
    if index == -1:
        return None

    key = line[:index].strip()
    if not key:
        return None

    return key, ProbeValue.resolve(line[index + len(SEPARATOR):])


def parse_properties(text: Optional[str]) -> PropertyMap:
    """Parse every property line of a block of text."""
    properties = PropertyMap()
    if not text:
        return properties

    for line in text.split("\n"):
        parsed = parse_property_line(line)
        if parsed:
            properties.set(*parsed)

    return properties


# Keys kept in the "other" build-property group
OTHER_BUILD_KEYS = {
    'ro.build.description',
    'ro.build.display.id',
    'ro.build.host',
    'ro.build.user',
}

SECURITY_KEY_MARKERS = ('secure', 'debuggable', 'adbd', 'unlock', 'flash.locked')


def categorize_property(key: str) -> Optional[str]:
    """
    Assign a build property to its document group.

    The first matching rule wins, so ``sys.usb.config`` is a usb property
    even though it might also look like something else.

    Returns:
        Group name, or None when the key is not kept
    """
    if 'usb' in key:
        return 'usb'
    if any(marker in key for marker in SECURITY_KEY_MARKERS):
        return 'security'
    if 'fingerprint' in key:
        return 'fingerprints'
    if 'build.id' in key and 'display' not in key:
        return 'build_ids'
    if 'date.utc' in key:
        return 'build_dates'
    if 'version' in key:
        return 'version'
    if key in OTHER_BUILD_KEYS or 'baseband' in key or 'security_patch' in key:
        return 'other'
    return None


def group_properties(properties: PropertyMap) -> Dict[str, Dict[str, object]]:
    """
    Group properties by category, keeping only non-empty groups.

    Absent values are dropped. Build dates are kept only when they are
    integral timestamps.
    """
    groups: Dict[str, Dict[str, object]] = {}

    for key, value in properties.items():
        group = categorize_property(key)
        if group is None or value.is_absent:
            continue

        if group == 'build_dates':
            timestamp = value.as_int()
            if timestamp is None:
                continue
            groups.setdefault(group, {})[key] = timestamp
        else:
            groups.setdefault(group, {})[key] = value.as_text()

    return groups


class PropertyParser(SectionParser):
    """Parser for the property-style sections of a native dump."""

    TITLE_KEYWORDS = (
        "System Properties",
        "Native Build Info",
        "USB Config",
        "Security",
        "Build ID",
        "SDK Version",
        "Security Patch",
        "Other System",
        "Display ID",
        "Build Host",
        "Build Version",
        "Build Description",
        "Build Fingerprint",
        "Build Date",
    )

    @property
    def parser_name(self) -> str:
        return "property_parser"

    def parse_section(self, section: Section, dump: ParsedNativeDump) -> None:
        properties = parse_properties(section.body)
        dump.properties.update(properties)
        self.logger.debug(f"Parsed {len(properties)} properties from '{section.title}'")
