"""Log class table.

Maps the operator-facing class names to bit flags.  The spelling of the
names, the compound ``MISC`` class and the ``NONE``/``ALL`` meta-names
are part of the on-disk/operator format and must not change.

Usage::

    from audit_sentinel.classes import LogClass, resolve

    res = resolve("misc")
    assert res.bits == LogClass.MISC | LogClass.MISC_SET
"""

from __future__ import annotations

import string
from dataclasses import dataclass
from enum import Enum, IntFlag
from typing import Dict, List, Tuple


class LogClass(IntFlag):
    """Categories of statements that can be logged independently."""

    DDL = 1 << 0  # CREATE/DROP/ALTER objects
    FUNCTION = 1 << 1  # Functions and DO blocks
    MISC = 1 << 2  # Statements not covered elsewhere
    READ = 1 << 3  # SELECT, COPY TO
    ROLE = 1 << 4  # GRANT/REVOKE, CREATE/ALTER/DROP ROLE
    WRITE = 1 << 5  # INSERT, UPDATE, DELETE, TRUNCATE, COPY FROM
    MISC_SET = 1 << 6  # SET ...


LOG_NONE = 0
LOG_ALL = 0xFFFFFFFF

CLASS_NONE = "NONE"
CLASS_ALL = "ALL"


class ResolutionKind(Enum):
    """What a class token resolved to."""

    BITMASK = "bitmask"
    NONE = "none"
    ALL = "all"
    UNRECOGNIZED = "unrecognized"


@dataclass(frozen=True)
class Resolution:
    """Outcome of looking up one class token."""

    kind: ResolutionKind
    mask: int = 0

    @property
    def recognized(self) -> bool:
        return self.kind is not ResolutionKind.UNRECOGNIZED

    @property
    def bits(self) -> int:
        """Bits this resolution contributes to the additive/subtractive fold.

        ``NONE`` contributes no bits and ``ALL`` contributes every bit, so
        both take part in the fold like any concrete class.
        """
        if self.kind is ResolutionKind.ALL:
            return LOG_ALL
        if self.kind is ResolutionKind.BITMASK:
            return self.mask
        return LOG_NONE


UNRECOGNIZED = Resolution(ResolutionKind.UNRECOGNIZED)
_KNOWN_BITS = int(sum(LogClass))
_ASCII_UPPER = str.maketrans(string.ascii_lowercase, string.ascii_uppercase)

# Upper-cased name → resolution.  Fixed at import time.
_CLASS_TABLE: Dict[str, Resolution] = {
    CLASS_NONE: Resolution(ResolutionKind.NONE),
    CLASS_ALL: Resolution(ResolutionKind.ALL),
    "DDL": Resolution(ResolutionKind.BITMASK, int(LogClass.DDL)),
    "FUNCTION": Resolution(ResolutionKind.BITMASK, int(LogClass.FUNCTION)),
    "MISC": Resolution(ResolutionKind.BITMASK, int(LogClass.MISC | LogClass.MISC_SET)),
    "MISC_SET": Resolution(ResolutionKind.BITMASK, int(LogClass.MISC_SET)),
    "READ": Resolution(ResolutionKind.BITMASK, int(LogClass.READ)),
    "ROLE": Resolution(ResolutionKind.BITMASK, int(LogClass.ROLE)),
    "WRITE": Resolution(ResolutionKind.BITMASK, int(LogClass.WRITE)),
}


def resolve(token: str) -> Resolution:
    """Resolve a class name, ignoring case.

    Unknown names (including ``""``) resolve to :data:`UNRECOGNIZED`.

    Only ASCII letters are case-folded, so non-ASCII look-alikes such
    as ``"mısc"`` stay unrecognized.
    """
    return _CLASS_TABLE.get(token.translate(_ASCII_UPPER), UNRECOGNIZED)


def class_names() -> Tuple[str, ...]:
    """Return every recognized class name, meta-names first."""
    return tuple(_CLASS_TABLE)


def describe(bits: int) -> str:
    """Render a bit-set as a class list selecting the same classes.

    Bits outside :class:`LogClass` (set by ``ALL``) are not shown.
    Mostly-full sets are written as ``all`` minus the missing classes.
    """
    known = bits & _KNOWN_BITS
    if known == LOG_NONE:
        return CLASS_NONE.lower()
    present: List[str] = [flag.name.lower() for flag in LogClass if known & flag]
    missing: List[str] = [flag.name.lower() for flag in LogClass if not known & flag]
    if not missing:
        return CLASS_ALL.lower()
    # "misc" also covers misc_set, so compensate when only one of them is set
    misc_only = known & LogClass.MISC and not known & LogClass.MISC_SET
    set_only = known & LogClass.MISC_SET and not known & LogClass.MISC
    if len(missing) < len(present):
        tokens = [CLASS_ALL.lower()] + [f"-{name}" for name in missing]
        if set_only:
            tokens.append("misc_set")
        return ",".join(tokens)
    if misc_only:
        present.append("-misc_set")
    return ",".join(present)
