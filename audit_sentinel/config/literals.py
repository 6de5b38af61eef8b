"""Boolean literal recognition for boolean settings.

Accepts the spellings a database server accepts for boolean options:
any unambiguous prefix of ``true``, ``false``, ``yes`` or ``no``, the
words ``on`` and ``off`` (``of`` allowed), and ``1``/``0``.  Matching
ignores case and surrounding whitespace.
"""

from __future__ import annotations

from typing import Optional, Union

from audit_sentinel.errors import InvalidBooleanError

_TRUE_WORDS = ("true", "yes")
_FALSE_WORDS = ("false", "no")


def parse_bool(value: Union[str, bool, int], *, setting: Optional[str] = None) -> bool:
    """Return the boolean denoted by *value*.

    Integers 0 and 1 are accepted.  Raises :class:`InvalidBooleanError`
    for anything else.
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        if value in (0, 1):
            return bool(value)
        raise InvalidBooleanError(str(value), setting=setting)
    if not isinstance(value, str):
        raise InvalidBooleanError(str(value), setting=setting)

    text = value.strip().lower()
    if text:
        if any(word.startswith(text) for word in _TRUE_WORDS):
            return True
        if any(word.startswith(text) for word in _FALSE_WORDS):
            return False
        # "o" alone is ambiguous between on and off
        if len(text) >= 2:
            if "on".startswith(text):
                return True
            if "off".startswith(text):
                return False
        if text == "1":
            return True
        if text == "0":
            return False
    raise InvalidBooleanError(value, setting=setting)


def format_bool(value: bool) -> str:
    return "on" if value else "off"
