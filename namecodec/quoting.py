"""Quote marker handling"""

import string

from namecodec.rules import (
    ESCAPED_BYTE_BASE,
    ESCAPED_BYTE_FIRST,
    ESCAPED_BYTE_LAST,
    QUOTE_RUNE,
)

HEX_DIGITS = frozenset(string.hexdigits)


def quote(ch: str) -> str:
    """Mark a character so decode copies it through literally"""
    return QUOTE_RUNE + ch


def is_escaped_byte(ch: str) -> bool:
    """Whether ch is a surrogate standing in for an undecodable byte"""
    return ESCAPED_BYTE_FIRST <= ord(ch) <= ESCAPED_BYTE_LAST


def quote_byte(ch: str) -> str:
    """
    Hex-escape a surrogate-escaped byte: '\\udcff' -> '‛FF'.
    """
    return f"{QUOTE_RUNE}{ord(ch) - ESCAPED_BYTE_BASE:02X}"


def unquote_byte(pair: str) -> str | None:
    """
    Reverse quote_byte for the two characters following a quote marker.
    Returns None when they are not two hex digits.
    """
    if len(pair) != 2 or not all(c in HEX_DIGITS for c in pair):
        return None
    value = int(pair, 16)
    if value < 0x80:
        return chr(value)
    return chr(ESCAPED_BYTE_BASE + value)

