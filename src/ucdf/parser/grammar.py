"""
UCDF Grammar
=============
Low-level scanner that turns a UCDF string into ``(key, value)`` units.

Grammar::

    document := unit (';' unit)*
    unit     := <empty> | key '=' value
    key      := [^=;]+
    value    := '"' ( [^"\\] | '\\' ["\\nrt] )* '"' | [^;]*

Empty units (leading, trailing or doubled ``;``) produce nothing. A quoted
value may contain ``;``, ``=``, ``,`` and ``:`` freely.
"""

from __future__ import annotations

import logging
from typing import Iterator, NamedTuple

from ..errors import InvalidFormatError

logger = logging.getLogger(__name__)

UNIT_SEPARATOR = ";"
KEY_SEPARATOR = "="
QUOTE = '"'
ESCAPE = "\\"

# Escapes recognized inside quotes, and the character each decodes to.
ESCAPES = {'"': '"', "\\": "\\", "n": "\n", "r": "\r", "t": "\t"}


class Unit(NamedTuple):
    """One ``key=value`` unit; ``position`` is the key's offset in the input."""
    key: str
    value: str
    position: int


def scan_key(text: str, pos: int) -> tuple[str, int]:
    """Longest run of characters that are neither '=' nor ';'."""
    end = pos
    while end < len(text) and text[end] not in (KEY_SEPARATOR, UNIT_SEPARATOR):
        end += 1
    if end == pos:
        raise InvalidFormatError("Empty section key", text[pos:end], pos)
    return text[pos:end], end


def scan_unquoted(text: str, pos: int) -> tuple[str, int]:
    """Value running up to (not including) the next ';'."""
    end = text.find(UNIT_SEPARATOR, pos)
    if end == -1:
        end = len(text)
    return text[pos:end], end


def scan_quoted(text: str, pos: int, decode: bool = True) -> tuple[str, int]:
    """
    Value enclosed in double quotes starting at ``text[pos]``.

    Returns the content between the quotes and the offset just past the
    closing quote. With ``decode`` the escape sequences are replaced by the
    characters they stand for; otherwise they are kept as written.
    """
    start = pos
    pos += 1
    chunks: list[str] = []
    while pos < len(text):
        ch = text[pos]
        if ch == QUOTE:
            return "".join(chunks), pos + 1
        if ch == ESCAPE:
            if pos + 1 >= len(text):
                break
            nxt = text[pos + 1]
            if nxt not in ESCAPES:
                raise InvalidFormatError(
                    f"Unknown escape sequence '\\{nxt}' in quoted value", text[start:], pos
                )
            chunks.append(ESCAPES[nxt] if decode else text[pos:pos + 2])
            pos += 2
            continue
        chunks.append(ch)
        pos += 1
    raise InvalidFormatError("Unterminated quoted value", text[start:], start)


def scan_value(text: str, pos: int, decode: bool = True) -> tuple[str, int]:
    """Quoted form first, unquoted otherwise."""
    if pos < len(text) and text[pos] == QUOTE:
        value, end = scan_quoted(text, pos, decode)
        if end < len(text) and text[end] != UNIT_SEPARATOR:
            raise InvalidFormatError(
                "Unexpected text after closing quote", text[end:], end
            )
        return value, end
    return scan_unquoted(text, pos)


def iter_units(text: str, *, decode_escapes: bool = True) -> Iterator[Unit]:
    """Yield the non-empty units of ``text`` in order of appearance."""
    pos = 0
    while pos < len(text):
        if text[pos] == UNIT_SEPARATOR:
            pos += 1
            continue
        key, pos_after_key = scan_key(text, pos)
        if pos_after_key >= len(text) or text[pos_after_key] != KEY_SEPARATOR:
            raise InvalidFormatError(
                f"Section {key!r} has no '=' separator", key, pos
            )
        value, end = scan_value(text, pos_after_key + 1, decode_escapes)
        logger.debug("unit %r at offset %d", key, pos)
        yield Unit(key, value, pos)
        pos = end + 1


def split_units(text: str, *, decode_escapes: bool = True) -> list[Unit]:
    return list(iter_units(text, decode_escapes=decode_escapes))
