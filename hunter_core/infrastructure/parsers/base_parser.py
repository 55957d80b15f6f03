"""
Base parser interface for native dump sections.

Defines the contract that all section parsers must implement and the
structure they fill in.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from hunter_core.logic.models import ProbeRecord, PropertyMap
from .section_splitter import Section


@dataclass
class ParsedNativeDump:
    """
    Everything extracted from one native dump.

    Parsers only ever add to this structure. Probe records are keyed by
    path and the last record seen for a path wins.
    """

    properties: PropertyMap = field(default_factory=PropertyMap)
    probes: Dict[str, ProbeRecord] = field(default_factory=dict)

    # uname fields (release, machine, system_name, node_name, version, domain_name)
    kernel: Dict[str, str] = field(default_factory=dict)

    # sysconf fields (page_size, phys_pages, total_memory_mb, cpu_cores)
    sysconf: Dict[str, int] = field(default_factory=dict)

    drm_device_id: Optional[str] = None
    risk_tags: List[str] = field(default_factory=list)
    sections_parsed: int = 0

    def probe(self, path: str) -> Optional[ProbeRecord]:
        return self.probes.get(path)

    def add_risk_tag(self, tag: str) -> None:
        if tag and tag not in self.risk_tags:
            self.risk_tags.append(tag)

    @property
    def is_empty(self) -> bool:
        return (
            not len(self.properties)
            and not self.probes
            and not self.kernel
            and not self.sysconf
            and self.drm_device_id is None
            and not self.risk_tags
        )


class SectionParser(ABC):
    """
    Base interface for section parsers.

    Each section of a dump is handled by exactly one parser, chosen by
    matching keywords against the section title.
    """

    # Title keywords this parser is responsible for
    TITLE_KEYWORDS: tuple = ()

    def __init__(self):
        self.logger = logging.getLogger(f"parser.{self.__class__.__name__}")

    @property
    @abstractmethod
    def parser_name(self) -> str:
        """Get the name of this parser."""
        pass

    def can_parse(self, section: Section) -> bool:
        """Check whether the section title carries one of our keywords."""
        return any(keyword in section.title for keyword in self.TITLE_KEYWORDS)

    @abstractmethod
    def parse_section(self, section: Section, dump: ParsedNativeDump) -> None:
        """
        Parse one section into the dump structure.

        Args:
            section: Section to parse
            dump: Structure to add the extracted values to
        """
        pass


class ParseError(Exception):
    """Exception raised during parsing operations."""

    def __init__(self, message: str, section_title: Optional[str] = None, line_number: Optional[int] = None):
        """
        Initialize parse error.

        Args:
            message: Error message
            section_title: Section being parsed when error occurred
            line_number: Line number within the section
        """
        super().__init__(message)
        self.section_title = section_title
        self.line_number = line_number

        context_parts = []
        if section_title:
            context_parts.append(f"section: {section_title}")
        if line_number:
            context_parts.append(f"line: {line_number}")

        if context_parts:
            self.message = f"{message} ({', '.join(context_parts)})"
        else:
            self.message = message

    def __str__(self) -> str:
        return self.message


class FormatError(ParseError):
    """Exception raised when a payload does not have the expected format."""

    def __init__(self, expected_format: str, detail: str = "", section_title: Optional[str] = None):
        message = f"Format error: expected {expected_format}"
        if detail:
            message += f" ({detail})"
        super().__init__(message, section_title)
