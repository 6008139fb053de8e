"""
Translate file names for use on restrictive storage systems.

Restricted characters are mapped to a visually similar unicode character
(mostly the FULLWIDTH variant, or a SYMBOL FOR control picture) so that
names survive storage systems that reject them. Characters which already
look like a substitute are quoted with QUOTE_RUNE, which keeps every
encoding reversible.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Callable

from namecodec.quoting import is_escaped_byte, quote, quote_byte, unquote_byte
from namecodec.rules import (
    QUOTE_RUNE,
    STANDARD_FLAGS,
    SYMBOL_FOR_NULL,
    EncodeFlag,
    RuleTables,
    format_flags,
    tables_for,
)


class Encoder(ABC):
    """Transforms names to and from their encoded form"""

    @abstractmethod
    def encode(self, name: str) -> str:
        """Substitute any reserved characters and patterns in a raw name"""

    @abstractmethod
    def decode(self, name: str) -> str:
        """Undo any substitutions made by encode"""

    def from_standard_path(self, path: str) -> str:
        """Convert a / separated path from Standard encoding to this one"""
        return from_standard_path(self, path)

    def from_standard_name(self, name: str) -> str:
        """Convert a name from Standard encoding to this one"""
        return from_standard_name(self, name)

    def to_standard_path(self, path: str) -> str:
        """Convert a / separated path from this encoding to Standard encoding"""
        return to_standard_path(self, path)

    def to_standard_name(self, name: str) -> str:
        """Convert a name from this encoding to Standard encoding"""
        return to_standard_name(self, name)


class _State(Enum):
    """Decode scanner state"""

    NORMAL = "normal"
    LITERAL = "literal"  # previous rune was an unconsumed quote marker


@dataclass(frozen=True)
class MultiEncoder(Encoder):
    """
    Configurable Encoder. EncodeFlag members can be combined with | to
    enable handling of several character classes.
    """

    mask: EncodeFlag = EncodeFlag.ZERO

    def __post_init__(self) -> None:
        object.__setattr__(self, "mask", EncodeFlag(int(self.mask)))

    def __str__(self) -> str:
        return format_flags(self.mask)

    @property
    def _tables(self) -> RuleTables:
        return tables_for(self.mask)

    def encode(self, name: str) -> str:
        tables = self._tables
        encode_invalid = bool(self.mask & EncodeFlag.INVALID_UTF8)

        prefix = ""
        if name:
            for rule in tables.leading:
                if name[0] == rule.raw:
                    prefix, name = rule.substitute, name[1:]
                    break
                if name[0] == rule.substitute:
                    prefix, name = quote(rule.substitute), name[1:]
                    break

        suffix = ""
        if name:
            for rule in tables.trailing:
                if name[-1] == rule.raw:
                    suffix, name = rule.substitute, name[:-1]
                    break
                if name[-1] == rule.substitute:
                    suffix, name = quote(rule.substitute), name[:-1]
                    break

        index = 0
        if not prefix and not suffix:
            index = _find_first(name, tables.encode_triggers)
            if index == -1:
                return name

        out: list[str] = [prefix, name[:index]]
        for ch in name[index:]:
            if ch == "\x00":
                out.append(SYMBOL_FOR_NULL)
            elif ch in (SYMBOL_FOR_NULL, QUOTE_RUNE):
                out.append(quote(ch))
            elif is_escaped_byte(ch):
                # without INVALID_UTF8 the byte is kept as it is
                out.append(quote_byte(ch) if encode_invalid else ch)
            elif ch in tables.forward:
                out.append(tables.forward[ch])
            elif ch in tables.reverse:
                out.append(quote(ch))
            else:
                out.append(ch)
        out.append(suffix)
        return "".join(out)

    def decode(self, name: str) -> str:
        tables = self._tables
        decode_invalid = bool(self.mask & EncodeFlag.INVALID_UTF8)

        prefix = ""
        if name:
            prefix, name = _decode_leading(tables, name)

        suffix = ""
        if name:
            suffix, name = _decode_trailing(tables, name)

        index = 0
        if not prefix and not suffix:
            index = _find_first(name, tables.decode_triggers)
            if index == -1:
                return name

        out: list[str] = [prefix, name[:index]]
        state = _State.NORMAL
        i = index
        while i < len(name):
            ch = name[i]
            i += 1

            if state is _State.LITERAL:
                state = _State.NORMAL
                if ch == QUOTE_RUNE or ch in tables.reverse:
                    out.append(ch)
                    continue
                if decode_invalid:
                    byte = unquote_byte(name[i - 1 : i + 1])
                    if byte is not None:
                        out.append(byte)
                        i += 1
                        continue
                # not something encode would have quoted, keep the marker
                out.append(QUOTE_RUNE)
                out.append(ch)
                continue

            if ch == QUOTE_RUNE:
                state = _State.LITERAL
            elif ch in tables.reverse:
                out.append(tables.reverse[ch])
            else:
                out.append(ch)

        if state is _State.LITERAL:
            out.append(QUOTE_RUNE)
        out.append(suffix)
        return "".join(out)


def _find_first(name: str, triggers: frozenset[str]) -> int:
    """Index of the first character which (most likely) needs replacing"""
    for i, ch in enumerate(name):
        if ch in triggers:
            return i
    return -1


def _decode_leading(tables: RuleTables, name: str) -> tuple[str, str]:
    """Split off and decode a leading boundary substitution"""
    for rule in tables.leading:
        if name[0] == rule.substitute:
            return rule.raw, name[1:]
    if name[0] == QUOTE_RUNE and len(name) > 1:
        for rule in tables.leading:
            if name[1] == rule.substitute:
                return rule.substitute, name[2:]
    return "", name


def _decode_trailing(tables: RuleTables, name: str) -> tuple[str, str]:
    """
    Split off and decode a trailing boundary substitution.

    Encoded text never ends in an odd run of quote markers, so an odd run
    in front of the final substitute means the last marker quotes it.
    """
    for rule in tables.trailing:
        if name[-1] != rule.substitute:
            continue
        body = name[:-1]
        run = len(body) - len(body.rstrip(QUOTE_RUNE))
        if run % 2:
            return rule.substitute, body[:-1]
        return rule.raw, body
    return "", name


class Identity(Encoder):
    """Encoder which always returns its input"""

    def encode(self, name: str) -> str:
        return name

    def decode(self, name: str) -> str:
        return name

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Identity)

    def __hash__(self) -> int:
        return hash(Identity)

    def __repr__(self) -> str:
        return "Identity()"

    def __str__(self) -> str:
        return "Identity"


# Encoding used for paths passed in and out of namecodec.
#
#     (0x00)  -> '␀' // SYMBOL FOR NULL
#   / (slash) -> '／' // FULLWIDTH SOLIDUS
STANDARD = MultiEncoder(STANDARD_FLAGS)

IDENTITY = Identity()


def _map_path(path: str, convert: Callable[[str], str]) -> str:
    parts = path.split("/")
    converted = [convert(p) for p in parts]
    if converted == parts:
        return path
    return "/".join(converted)


def from_standard_path(encoder: Encoder, path: str) -> str:
    """Convert a / separated path in Standard encoding to the given encoding"""
    if encoder == STANDARD:
        return path
    return _map_path(path, lambda p: from_standard_name(encoder, p))


def from_standard_name(encoder: Encoder, name: str) -> str:
    """Convert a name in Standard encoding to the given encoding"""
    if encoder == STANDARD:
        return name
    return encoder.encode(STANDARD.decode(name))


def to_standard_path(encoder: Encoder, path: str) -> str:
    """Convert a / separated path in the given encoding to Standard encoding"""
    if encoder == STANDARD:
        return path
    return _map_path(path, lambda p: to_standard_name(encoder, p))


def to_standard_name(encoder: Encoder, name: str) -> str:
    """Convert a name in the given encoding to Standard encoding"""
    if encoder == STANDARD:
        return name
    return STANDARD.encode(encoder.decode(name))


def transcode_name(source: Encoder, target: Encoder, name: str) -> str:
    """Convert a name encoded with source into the target encoding"""
    if source == target:
        return name
    return from_standard_name(target, to_standard_name(source, name))


def transcode_path(source: Encoder, target: Encoder, path: str) -> str:
    """Convert a / separated path encoded with source into the target encoding"""
    if source == target:
        return path
    return from_standard_path(target, to_standard_path(source, path))
