"""
Native dump parser.

Splits a native dump into sections and hands each one to the single
section parser responsible for it.
"""

import logging
from typing import List, Optional

from hunter_core.infrastructure.shared.error_handling import ErrorHandlingService, safe_execute
from .base_parser import ParsedNativeDump, SectionParser
from .kernel_parser import DrmInfoParser, KernelInfoParser, RiskTagParser, SystemConfigParser
from .probe_parser import ProbeParser
from .property_parser import PropertyParser
from .section_splitter import Section, split_sections


def default_section_parsers() -> List[SectionParser]:
    """
    Section parsers in routing order.

    Probe sections come first because their titles (``Environment &
    Security``) also contain property keywords.
    """
    return [
        ProbeParser(),
        KernelInfoParser(),
        SystemConfigParser(),
        DrmInfoParser(),
        RiskTagParser(),
        PropertyParser(),
    ]


class NativeDumpParser:
    """Routes the sections of a native dump to their parsers."""

    def __init__(self, parsers: Optional[List[SectionParser]] = None):
        self.parsers = parsers or default_section_parsers()
        self.logger = logging.getLogger("parser.NativeDumpParser")

    def route(self, section: Section) -> Optional[SectionParser]:
        """First parser that accepts the section, or None."""
        for parser in self.parsers:
            if parser.can_parse(section):
                return parser
        return None

    def parse(self, raw: Optional[str], error_service: Optional[ErrorHandlingService] = None) -> ParsedNativeDump:
        """
        Parse a native dump.

        A section that fails to parse is logged and skipped; the remaining
        sections are still parsed.

        Args:
            raw: Native dump text
            error_service: Service recording contained failures

        Returns:
            Extracted values (empty for an empty or unrecognised dump)
        """
        error_service = error_service or ErrorHandlingService()
        dump = ParsedNativeDump()

        for section in split_sections(raw):
            parser = self.route(section)
            if parser is None:
                self.logger.debug(f"No parser for section '{section.title}', skipping")
                continue

            parsed = safe_execute(
                lambda: parser.parse_section(section, dump) or True,
                default_value=False,
                operation="parse_section",
                component=parser.parser_name,
                service=error_service
            )
            if parsed:
                dump.sections_parsed += 1

        self.logger.debug(
            f"Parsed {dump.sections_parsed} sections: {len(dump.properties)} properties, "
            f"{len(dump.probes)} probes"
        )
        return dump
