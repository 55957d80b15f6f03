"""
Probe domain models.

Contains the data structures produced while extracting values from a
native dump: resolved property values, file probe records and their
access status.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterator, Optional


_NUMBER_PATTERN = re.compile(r'^-?\d+(?:\.\d+)?$')


class ValueKind(Enum):
    """Kinds of values a probe can resolve to."""
    ABSENT = "absent"
    TEXT = "text"
    NUMBER = "number"
    BOOL = "bool"


@dataclass(frozen=True)
class ProbeValue:
    """
    A property value resolved once at extraction time.

    The raw text is always kept so comparisons against collector output
    (e.g. ``"1"`` or ``"orange"``) stay exact. Typed accessors return
    ``None`` instead of raising when the value does not fit the type.
    """
    kind: ValueKind
    raw: Optional[str] = None
    number: Optional[float] = None
    flag: Optional[bool] = None

    @classmethod
    def resolve(cls, raw: Optional[str]) -> 'ProbeValue':
        """
        Resolve raw collector text into a typed value.

        Args:
            raw: Value text as emitted by the collector, or None

        Returns:
            ABSENT for missing/null/SecurityException values, otherwise a
            NUMBER, BOOL or TEXT value
        """
        if raw is None:
            return _ABSENT

        text = raw.strip()
        if not text or text == "null" or "SecurityException" in text:
            return _ABSENT

        if _NUMBER_PATTERN.match(text):
            return cls(kind=ValueKind.NUMBER, raw=text, number=float(text))

        if text.lower() in ("true", "false"):
            return cls(kind=ValueKind.BOOL, raw=text, flag=text.lower() == "true")

        return cls(kind=ValueKind.TEXT, raw=text)

    @property
    def is_absent(self) -> bool:
        return self.kind == ValueKind.ABSENT

    def as_text(self) -> Optional[str]:
        """Raw text of any present value."""
        return None if self.is_absent else self.raw

    def as_int(self) -> Optional[int]:
        """Integer value, or None for non-integral or non-numeric values."""
        if self.kind != ValueKind.NUMBER or self.number is None:
            return None
        if not self.number.is_integer():
            return None
        return int(self.number)

    def as_float(self) -> Optional[float]:
        if self.kind != ValueKind.NUMBER:
            return None
        return self.number

    def as_flag(self) -> Optional[bool]:
        """Boolean value of ``true``/``false`` or ``1``/``0`` values."""
        if self.kind == ValueKind.BOOL:
            return self.flag
        if self.kind == ValueKind.NUMBER and self.number in (0.0, 1.0):
            return self.number == 1.0
        return None

    def equals(self, expected: str) -> bool:
        return not self.is_absent and self.raw == expected

    def contains(self, fragment: str) -> bool:
        return not self.is_absent and fragment in self.raw


_ABSENT = ProbeValue(kind=ValueKind.ABSENT)


class PropertyMap:
    """
    Ordered mapping of property keys to resolved values.

    Later assignments of the same key replace earlier ones.
    """

    def __init__(self):
        self._values: Dict[str, ProbeValue] = {}

    def set(self, key: str, value: ProbeValue) -> None:
        self._values[key] = value

    def get(self, key: str) -> ProbeValue:
        return self._values.get(key, _ABSENT)

    def has(self, key: str) -> bool:
        """True when the key holds a present (non-absent) value."""
        return not self.get(key).is_absent

    def text(self, key: str) -> Optional[str]:
        return self.get(key).as_text()

    def first_text(self, *keys: str) -> Optional[str]:
        """Text of the first key holding a present value."""
        for key in keys:
            value = self.text(key)
            if value is not None:
                return value
        return None

    def update(self, other: 'PropertyMap') -> None:
        for key, value in other.items():
            self.set(key, value)

    def items(self) -> Iterator:
        return iter(self._values.items())

    def __contains__(self, key: str) -> bool:
        return self.has(key)

    def __len__(self) -> int:
        return len(self._values)


class ProbeStatus(Enum):
    """Access status of a probed file."""
    OK = "OK"
    PERM_DENIED = "PERM_DENIED"
    NOT_FOUND = "NOT_FOUND"
    ERROR = "ERROR"


@dataclass
class ProbeRecord:
    """Result of a single file access attempt recorded by the collector."""
    path: str
    content: str = ""
    exit_code: int = -1
    accessible: bool = False

    @property
    def status(self) -> ProbeStatus:
        """
        Classify the access attempt.

        Exit code 1 is the collector's permission-denied code and any other
        positive code means the file could not be found.
        """
        if self.accessible and self.exit_code == 0:
            return ProbeStatus.OK
        if self.exit_code == 1:
            return ProbeStatus.PERM_DENIED
        if self.exit_code > 1:
            return ProbeStatus.NOT_FOUND
        return ProbeStatus.ERROR
