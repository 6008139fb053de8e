"""Character classes and their substitutions"""

from enum import IntFlag
from functools import lru_cache
from typing import NamedTuple

# adding this to a printable ASCII character gives its FULLWIDTH variant
FULL_OFFSET = 0xFEE0
# first code point of the SYMBOL FOR block for control characters
SYMBOL_OFFSET = 0x2400

QUOTE_RUNE = "‛"  # SINGLE HIGH-REVERSED-9 QUOTATION MARK
SYMBOL_FOR_NULL = chr(SYMBOL_OFFSET)  # ␀
SYMBOL_FOR_SPACE = "␠"
SYMBOL_FOR_DELETE = "␡"

# os.fsdecode() carries undecodable bytes 0x80-0xFF as these surrogates
ESCAPED_BYTE_BASE = 0xDC00
ESCAPED_BYTE_FIRST = 0xDC80
ESCAPED_BYTE_LAST = 0xDCFF


class EncodeFlag(IntFlag):
    """Character classes a MultiEncoder can be told to handle"""

    ZERO = 0  # NUL(0x00), always handled
    SLASH = 1 << 1  # /
    WIN = 1 << 2  # :?"*<>|
    BACK_SLASH = 1 << 3  # \
    HASH_PERCENT = 1 << 4  # #%
    DEL = 1 << 5  # DEL(0x7F)
    CTL = 1 << 6  # CTRL(0x01-0x1F)
    LEFT_SPACE = 1 << 7  # Leading SPACE
    LEFT_TILDE = 1 << 8  # Leading ~
    RIGHT_SPACE = 1 << 9  # Trailing SPACE
    RIGHT_PERIOD = 1 << 10  # Trailing .
    INVALID_UTF8 = 1 << 11  # Invalid UTF-8 bytes


STANDARD_FLAGS = EncodeFlag.ZERO | EncodeFlag.SLASH | EncodeFlag.CTL | EncodeFlag.DEL
# highest usable mask, INVALID_UTF8 is the top bit
MAX_MASK = int(EncodeFlag.INVALID_UTF8) * 2 - 1


def fullwidth(ch: str) -> str:
    """FULLWIDTH variant of a printable ASCII character"""
    return chr(ord(ch) + FULL_OFFSET)


def control_symbol(ch: str) -> str:
    """SYMBOL FOR variant of a C0 control character"""
    return chr(ord(ch) + SYMBOL_OFFSET)


# Classes handled anywhere in a name: flag -> {raw: substitute}
CLASS_RULES: dict[EncodeFlag, dict[str, str]] = {
    EncodeFlag.WIN: {ch: fullwidth(ch) for ch in ':?"*<>|'},
    EncodeFlag.SLASH: {"/": fullwidth("/")},
    EncodeFlag.BACK_SLASH: {"\\": fullwidth("\\")},
    EncodeFlag.HASH_PERCENT: {ch: fullwidth(ch) for ch in "#%"},
    EncodeFlag.DEL: {"\x7f": SYMBOL_FOR_DELETE},
    EncodeFlag.CTL: {chr(c): control_symbol(chr(c)) for c in range(0x01, 0x20)},
}


class BoundaryRule(NamedTuple):
    """Substitution applied only to the first or last character"""

    flag: EncodeFlag
    raw: str
    substitute: str


LEADING_RULES = (
    BoundaryRule(EncodeFlag.LEFT_SPACE, " ", SYMBOL_FOR_SPACE),
    BoundaryRule(EncodeFlag.LEFT_TILDE, "~", fullwidth("~")),
)

TRAILING_RULES = (
    BoundaryRule(EncodeFlag.RIGHT_SPACE, " ", SYMBOL_FOR_SPACE),
    BoundaryRule(EncodeFlag.RIGHT_PERIOD, ".", fullwidth(".")),
)

ESCAPED_BYTES = frozenset(
    chr(c) for c in range(ESCAPED_BYTE_FIRST, ESCAPED_BYTE_LAST + 1)
)


class RuleTables(NamedTuple):
    """Lookup tables merged from every class enabled in a mask"""

    forward: dict[str, str]
    reverse: dict[str, str]
    encode_triggers: frozenset[str]
    decode_triggers: frozenset[str]
    leading: tuple[BoundaryRule, ...]
    trailing: tuple[BoundaryRule, ...]


@lru_cache(maxsize=None)
def tables_for(mask: int) -> RuleTables:
    """Build (once per mask) the lookup tables used by encode and decode"""
    forward: dict[str, str] = {}
    for flag, rules in CLASS_RULES.items():
        if mask & flag:
            forward.update(rules)
    reverse = {sub: raw for raw, sub in forward.items()}

    # NUL is not behind a flag
    decode_map = dict(reverse)
    decode_map[SYMBOL_FOR_NULL] = "\x00"

    encode_triggers = (
        set(forward)
        | set(reverse)
        | {"\x00", SYMBOL_FOR_NULL, QUOTE_RUNE}
        | ESCAPED_BYTES
    )
    decode_triggers = set(decode_map) | {QUOTE_RUNE}

    return RuleTables(
        forward=forward,
        reverse=decode_map,
        encode_triggers=frozenset(encode_triggers),
        decode_triggers=frozenset(decode_triggers),
        leading=tuple(r for r in LEADING_RULES if mask & r.flag),
        trailing=tuple(r for r in TRAILING_RULES if mask & r.flag),
    )


FLAG_NAMES: dict[str, EncodeFlag] = {
    "Slash": EncodeFlag.SLASH,
    "Win": EncodeFlag.WIN,
    "BackSlash": EncodeFlag.BACK_SLASH,
    "HashPercent": EncodeFlag.HASH_PERCENT,
    "Del": EncodeFlag.DEL,
    "Ctl": EncodeFlag.CTL,
    "LeftSpace": EncodeFlag.LEFT_SPACE,
    "LeftTilde": EncodeFlag.LEFT_TILDE,
    "RightSpace": EncodeFlag.RIGHT_SPACE,
    "RightPeriod": EncodeFlag.RIGHT_PERIOD,
    "InvalidUtf8": EncodeFlag.INVALID_UTF8,
}

FLAG_ALIASES: dict[str, EncodeFlag] = {
    "None": EncodeFlag.ZERO,
    "Zero": EncodeFlag.ZERO,
    "Standard": STANDARD_FLAGS,
}

FLAG_LOOKUP = {name.lower(): flag for name, flag in {**FLAG_NAMES, **FLAG_ALIASES}.items()}


def parse_flags(value: str | list[str]) -> EncodeFlag:
    """
    Parse flag names such as "Slash,Win,Ctl" (or a list of them) into a mask.
    Names are matched case-insensitively.
    """
    names = value.split(",") if isinstance(value, str) else value

    mask = EncodeFlag.ZERO
    for name in names:
        key = str(name).strip().lower()
        if not key:
            continue
        if key not in FLAG_LOOKUP:
            raise ValueError(
                f"Unknown encoding flag '{str(name).strip()}'. "
                f"Valid flags: {', '.join(FLAG_NAMES)}"
            )
        mask |= FLAG_LOOKUP[key]
    return mask


def flags_from_int(value: int) -> EncodeFlag:
    """Check an integer mask is in range and convert it"""
    if not 0 <= value <= MAX_MASK:
        raise ValueError(f"Encoding mask {value} is out of range 0..{MAX_MASK}")
    return EncodeFlag(value)


def format_flags(mask: int) -> str:
    """Render a mask as comma separated flag names"""
    names = [name for name, flag in FLAG_NAMES.items() if mask & flag]
    return ",".join(names) if names else "None"
