"""
Section splitter for native dumps.

A native dump is a sequence of ``=== Title ===`` banners, each followed by
the lines of that section. Titles may repeat and may carry text in more
than one language (e.g. ``=== 内核信息 (Kernel Info via uname) ===``).
"""

import logging
import re
from dataclasses import dataclass
from typing import List, Optional

logger = logging.getLogger("parser.sections")

_LEADING_BANNER = re.compile(r'^=+\s*')
_TRAILING_BANNER = re.compile(r'\s*=+$')


@dataclass(frozen=True)
class Section:
    """A titled block of a native dump."""
    title: str
    body: str

    def lines(self) -> List[str]:
        return self.body.split("\n")


def is_banner(line: str) -> bool:
    stripped = line.strip()
    return stripped.startswith("===") and stripped.endswith("===")


def banner_title(line: str) -> str:
    """Strip the ``=`` runs and surrounding whitespace from a banner line."""
    title = _LEADING_BANNER.sub('', line.strip())
    return _TRAILING_BANNER.sub('', title).strip()


def split_sections(raw: Optional[str]) -> List[Section]:
    """
    Split a native dump into its titled sections.

    Lines before the first banner are discarded. A section is emitted only
    when its title is non-empty and its body has non-whitespace content.

    Args:
        raw: Native dump text

    Returns:
        Sections in dump order; empty for None, empty or banner-less text
    """
    if not raw:
        return []

    sections: List[Section] = []
    title: Optional[str] = None
    body: List[str] = []

    def flush():
        if title and "\n".join(body).strip():
            sections.append(Section(title=title, body="\n".join(body)))

    for line in raw.split("\n"):
        line = line.rstrip("\r")
        if is_banner(line):
            flush()
            title = banner_title(line)
            body = []
        elif title is not None:
            body.append(line)

    flush()

    logger.debug(f"Split dump into {len(sections)} sections")
    return sections
