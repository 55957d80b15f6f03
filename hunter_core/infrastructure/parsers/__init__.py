"""
Parsers for native dump sections and platform dump fields.
"""

from .base_parser import FormatError, ParseError, ParsedNativeDump, SectionParser
from .section_splitter import Section, split_sections
from .property_parser import PropertyParser, group_properties, parse_properties
from .probe_parser import ProbeParser, parse_probe_blocks
from .kernel_parser import DrmInfoParser, KernelInfoParser, RiskTagParser, SystemConfigParser
from .native_dump_parser import NativeDumpParser, default_section_parsers

__all__ = [
    'FormatError',
    'ParseError',
    'ParsedNativeDump',
    'SectionParser',
    'Section',
    'split_sections',
    'PropertyParser',
    'group_properties',
    'parse_properties',
    'ProbeParser',
    'parse_probe_blocks',
    'DrmInfoParser',
    'KernelInfoParser',
    'RiskTagParser',
    'SystemConfigParser',
    'NativeDumpParser',
    'default_section_parsers',
]
