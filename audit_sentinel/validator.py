"""Class-list validation.

:func:`validate` is the first half of the two-phase update of
``pgaudit.log``: it parses an operator-supplied value into a
:class:`LogCandidate` without touching live state.  The candidate is
published later by :func:`audit_sentinel.state.commit_log`.

Tokens are folded left to right, so ``"all,-write"`` logs everything but
writes while ``"-write,all"`` logs everything.  ``none`` and ``all``
take part in the same fold as ordinary classes.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional

from audit_sentinel.classes import LOG_NONE, describe, resolve
from audit_sentinel.errors import ListSyntaxError, ResourceExhaustionError, UnknownClassError
from audit_sentinel.listsyntax import split_identifier_list

logger = logging.getLogger(__name__)

NEGATION_MARKER = "-"


@dataclass(frozen=True)
class RawDirective:
    """One parsed token of a class list."""

    token: str
    name: str
    subtract: bool

    @classmethod
    def from_token(cls, token: str) -> "RawDirective":
        if token.startswith(NEGATION_MARKER):
            return cls(token=token, name=token[len(NEGATION_MARKER):], subtract=True)
        return cls(token=token, name=token, subtract=False)


@dataclass(frozen=True)
class LogCandidate:
    """A validated class bit-set waiting to be committed.

    Only :func:`validate` creates candidates; committing one never
    re-validates it.
    """

    bits: int
    source: str

    def __repr__(self) -> str:
        return f"LogCandidate(bits={self.bits:#x}, classes={describe(self.bits)!r})"


def fold_directives(directives: Iterable[RawDirective], *, setting: Optional[str] = None) -> int:
    """Fold directives into a bit-set, failing on the first unknown class."""
    bits = LOG_NONE
    for directive in directives:
        resolution = resolve(directive.name)
        if not resolution.recognized:
            raise UnknownClassError(directive.token, setting=setting)
        if directive.subtract:
            bits &= ~resolution.bits
        else:
            bits |= resolution.bits
    return bits


def parse_log_classes(raw: str, *, setting: Optional[str] = None) -> int:
    """Parse *raw* into a class bit-set.

    Raises:
        ListSyntaxError: *raw* is not a well-formed list.
        UnknownClassError: a token names no known class.
        ResourceExhaustionError: memory ran out while parsing.
    """
    try:
        tokens = split_identifier_list(raw, setting=setting)
        directives: List[RawDirective] = [RawDirective.from_token(t) for t in tokens]
        return fold_directives(directives, setting=setting)
    except MemoryError as exc:
        raise ResourceExhaustionError(setting=setting, orig_exc=exc) from exc


def validate(raw: str, *, setting: Optional[str] = None) -> LogCandidate:
    """Validate a class list and return a candidate for :func:`commit_log`.

    Has no side effects; on failure the caller's live configuration is
    left exactly as it was.
    """
    try:
        bits = parse_log_classes(raw, setting=setting)
    except UnknownClassError as exc:
        logger.debug("Rejected class list %r: unknown class %r", raw, exc.token)
        raise
    except ResourceExhaustionError:
        logger.warning("Ran out of memory validating class list of length %d", len(raw))
        raise
    except ListSyntaxError:
        logger.debug("Rejected class list %r: invalid list syntax", raw)
        raise
    return LogCandidate(bits=bits, source=raw)
