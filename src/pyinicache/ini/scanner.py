# -*- encoding: utf-8 -*-
# @File   : scanner.py
# @Time   : 2026/10/18 14:10:37
# @Author : pyinicache contributors

"""Cursor functions walking a decoded INI buffer.

A cursor is an index into the buffer, and `None` marks the end of input.
Nothing here raises on malformed text: a token that can't be read comes
back as `Token(None, cursor)`, and the cursor is already placed
where the caller should resume.
"""

import logging
from typing import NamedTuple

from .consts import (
    BLANKS,
    COMMENT_MARK,
    LINE_ENDS,
    PAIRING,
    QUOTE_MARK,
    SECTION_BEGIN,
    SECTION_END
)

__all__ = [
    'Token',
    'skip_whitespace', 'skip_to_next_section',
    'read_section_name', 'read_key_name', 'read_key_value'
]

logger = logging.getLogger(__name__)


class Token(NamedTuple):
    text: str | None
    cursor: int | None


def _checked(buf: str, pos: int) -> int | None:
    return None if pos >= len(buf) else pos


def _skip_blanks(buf: str, pos: int) -> int:
    while pos < len(buf) and buf[pos] in BLANKS:
        pos += 1
    return pos


def _line_end(buf: str, pos: int) -> int:
    while pos < len(buf) and buf[pos] not in LINE_ENDS:
        pos += 1
    return pos


def _next_line(buf: str, pos: int) -> int:
    nl = buf.find('\n', pos)
    return len(buf) if nl < 0 else nl + 1


def skip_whitespace(buf: str, pos: int | None) -> int | None:
    """Advance over spaces, tabs and line breaks."""
    if pos is None:
        return None
    while pos < len(buf) and buf[pos].isspace():
        pos += 1
    return _checked(buf, pos)


def skip_to_next_section(buf: str, pos: int | None) -> int | None:
    """Skip whole lines until one starts with `[` (blanks allowed before).

    The line at `pos` is checked as well, from `pos` on.
    """
    while pos is not None and pos < len(buf):
        pos = _skip_blanks(buf, pos)
        if pos < len(buf) and buf[pos] == SECTION_BEGIN:
            return pos
        pos = _next_line(buf, pos)
    return None


def read_section_name(buf: str, pos: int | None) -> Token:
    """Read the name of a header whose `[` was already consumed.

    The name is what lies between `[` (leading blanks dropped) and the
    first `]`; whatever follows `]` on that line is thrown away.
    A header not closed on its own line gives no name.
    """
    if pos is None:
        return Token(None, None)
    pos = start = _skip_blanks(buf, pos)
    while pos < len(buf) and buf[pos] not in SECTION_END + LINE_ENDS:
        pos += 1
    name = None
    if pos < len(buf) and buf[pos] == SECTION_END:
        name = buf[start:pos]
    else:
        logger.debug('Unclosed section header: [%s', buf[start:pos])
    return Token(name, _checked(buf, _next_line(buf, pos)))


def read_key_name(buf: str, pos: int | None) -> Token:
    """Find the next key name, skipping blank lines and `;` comments.

    The name ends at whitespace, `=` or `;`, and may be empty
    (e.g. a line like `=value`).
    Gives no name when input runs out, or when the next line is a section
    header, in which case the cursor is left on its `[`.
    """
    while (pos := skip_whitespace(buf, pos)) is not None:
        if buf[pos] == COMMENT_MARK:
            pos = _checked(buf, _next_line(buf, pos))
            continue
        if buf[pos] == SECTION_BEGIN:
            return Token(None, pos)
        start = pos
        while (
            pos < len(buf)
            and not buf[pos].isspace()
            and buf[pos] not in PAIRING + COMMENT_MARK
        ):
            pos += 1
        return Token(buf[start:pos], _checked(buf, pos))
    return Token(None, None)


def read_key_value(buf: str, pos: int | None, quoted: bool = False) -> Token:
    """Read `= value` right after a key name.

    Without `=` on the same line there is no value, and the cursor moves on
    to the next line so the broken entry gets dropped as a whole.

    Plain values stop at a line break or `;`, keeping any blanks before it.
    With `quoted` enabled, a value opening with `"` runs to the next `"`
    (no escapes), and the rest of that line is discarded.
    """
    if pos is None:
        return Token(None, None)
    pos = _skip_blanks(buf, pos)
    if pos >= len(buf) or buf[pos] != PAIRING:
        return Token(None, _checked(buf, _next_line(buf, pos)))
    pos = _skip_blanks(buf, pos + 1)

    if quoted and pos < len(buf) and buf[pos] == QUOTE_MARK:
        pos = start = pos + 1
        while pos < len(buf) and buf[pos] not in QUOTE_MARK + LINE_ENDS:
            pos += 1
        value = buf[start:pos]
        if pos >= len(buf) or buf[pos] != QUOTE_MARK:
            logger.debug('Unterminated quoted value: "%s', value)
        pos = _line_end(buf, pos)
    else:
        start = pos
        while pos < len(buf) and buf[pos] not in LINE_ENDS + COMMENT_MARK:
            pos += 1
        value = buf[start:pos]

    if pos < len(buf) and buf[pos] == '\r':
        pos += 1
    if pos < len(buf) and buf[pos] == '\n':
        pos += 1
    return Token(value, _checked(buf, pos))
