"""Identifier-list splitting.

Splits a setting value such as ``ddl, "-write" ,READ`` into its tokens
using the same rules a database server applies to list-valued settings:

* whitespace around tokens is ignored;
* a token may be wrapped in double quotes to embed separators or
  whitespace, and ``""`` inside quotes stands for one literal quote;
* empty tokens, unterminated quotes and text after a token that is not
  followed by the separator are syntax errors.

Unlike the server, unquoted tokens keep their original case so that
diagnostics can quote exactly what the operator typed.
"""

from __future__ import annotations

from typing import List, Optional

from audit_sentinel.errors import ListSyntaxError

_QUOTE = '"'


def split_identifier_list(
    raw: str,
    separator: str = ",",
    *,
    setting: Optional[str] = None,
) -> List[str]:
    """Split *raw* into tokens.

    Raises :class:`ListSyntaxError` for malformed input, including an
    empty or all-whitespace string.
    """
    tokens: List[str] = []
    pos = 0
    end = len(raw)

    while pos < end and raw[pos].isspace():
        pos += 1
    if pos == end:
        raise ListSyntaxError(setting=setting, position=pos)

    while True:
        if raw[pos] == _QUOTE:
            chunks: List[str] = []
            pos += 1
            while True:
                close = raw.find(_QUOTE, pos)
                if close < 0:
                    raise ListSyntaxError(setting=setting, position=end)
                chunks.append(raw[pos:close])
                if raw.startswith(_QUOTE, close + 1):
                    chunks.append(_QUOTE)
                    pos = close + 2
                    continue
                pos = close + 1
                break
            token = "".join(chunks)
        else:
            start = pos
            while pos < end and raw[pos] != separator and not raw[pos].isspace():
                pos += 1
            token = raw[start:pos]

        if not token:
            raise ListSyntaxError(setting=setting, position=pos)
        tokens.append(token)

        while pos < end and raw[pos].isspace():
            pos += 1
        if pos == end:
            return tokens
        if raw[pos] != separator:
            raise ListSyntaxError(setting=setting, position=pos)

        pos += 1
        while pos < end and raw[pos].isspace():
            pos += 1
        if pos == end:
            # trailing separator
            raise ListSyntaxError(setting=setting, position=pos)
