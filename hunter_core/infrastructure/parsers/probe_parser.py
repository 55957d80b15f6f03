"""
Probe block parser.

The hardware, environment and mount sections of a native dump all use the
same block grammar, one block per probed file::

    Path: /proc/cpuinfo
    Exit Code: 0
    Accessible: true
    Content: processor : 0
    BogoMIPS : 38.40
    ---

A single parser handles all of them.
"""

from typing import List, Optional

from hunter_core.logic.models import ProbeRecord
from .base_parser import ParsedNativeDump, SectionParser
from .section_splitter import Section

EMPTY_MARKER = "[EMPTY]"
CONTENT_PREFIXES = ("Content:", "Content (truncated):")


class _ProbeBuilder:
    """Accumulates one probe block until the next ``Path:`` or section end."""

    def __init__(self, path: str):
        self.path = path
        self.exit_code = -1
        self.accessible = False
        self.content_lines: List[str] = []

    def build(self) -> ProbeRecord:
        return ProbeRecord(
            path=self.path,
            content="\n".join(self.content_lines).strip(),
            exit_code=self.exit_code,
            accessible=self.accessible,
        )


def parse_exit_code(text: str) -> int:
    try:
        return int(text.strip())
    except ValueError:
        return -1


def parse_probe_blocks(text: str) -> List[ProbeRecord]:
    """
    Parse every probe block of a section body.

    Content continuation lines are kept verbatim (indentation included);
    only the final content is trimmed. Lines before the first ``Path:`` are
    ignored.

    Args:
        text: Section body

    Returns:
        Probe records in dump order
    """
    records: List[ProbeRecord] = []
    current: Optional[_ProbeBuilder] = None
    in_content = False

    for original_line in text.split("\n"):
        original_line = original_line.rstrip("\r")
        line = original_line.strip()

        if line.startswith("Path:"):
            if current is not None:
                records.append(current.build())
            current = _ProbeBuilder(line[len("Path:"):].strip())
            in_content = False

        elif current is None:
            continue

        elif line.startswith("Exit Code:"):
            current.exit_code = parse_exit_code(line[len("Exit Code:"):])
            in_content = False

        elif line.startswith("Accessible:"):
            current.accessible = "true" in line
            in_content = False

        elif line.startswith(CONTENT_PREFIXES):
            in_content = True
            inline = line[line.index(":") + 1:].strip()
            if inline and inline != EMPTY_MARKER:
                current.content_lines.append(inline)

        elif line == "---":
            in_content = False

        elif in_content:
            current.content_lines.append(original_line)

    if current is not None:
        records.append(current.build())

    return records


class ProbeParser(SectionParser):
    """Parser for probe-block sections (hardware, environment, mounts)."""

    TITLE_KEYWORDS = (
        "Hardware & Kernel",
        "核心硬件与内核特征",
        "Environment & Security",
        "环境与安全检测",
        "Mounts & Inputs",
        "挂载点与输入设备",
    )

    @property
    def parser_name(self) -> str:
        return "probe_parser"

    def parse_section(self, section: Section, dump: ParsedNativeDump) -> None:
        records = parse_probe_blocks(section.body)
        for record in records:
            dump.probes[record.path] = record
        self.logger.debug(f"Parsed {len(records)} probes from '{section.title}'")
