"""Tests for conversions through the Standard encoding"""

from namecodec.codec import (
    IDENTITY,
    STANDARD,
    MultiEncoder,
    from_standard_name,
    from_standard_path,
    to_standard_name,
    to_standard_path,
    transcode_name,
    transcode_path,
)
from namecodec.rules import STANDARD_FLAGS, EncodeFlag

WIN = MultiEncoder(EncodeFlag.WIN)
BACKEND = MultiEncoder(
    EncodeFlag.WIN
    | EncodeFlag.BACK_SLASH
    | EncodeFlag.RIGHT_PERIOD
    | EncodeFlag.INVALID_UTF8
)


def test_standard_mask() -> None:
    assert STANDARD.mask == EncodeFlag.SLASH | EncodeFlag.CTL | EncodeFlag.DEL
    assert STANDARD == MultiEncoder(STANDARD_FLAGS)


def test_standard_is_passed_through_untouched() -> None:
    # not valid Standard output, but Standard never inspects it
    value = "a/b\x01‛"
    assert to_standard_name(STANDARD, value) is value
    assert from_standard_name(STANDARD, value) is value
    assert to_standard_path(STANDARD, value) is value
    assert from_standard_path(STANDARD, value) is value


def test_methods_delegate_to_functions() -> None:
    assert WIN.to_standard_name("a：b") == to_standard_name(WIN, "a：b")
    assert WIN.from_standard_path("a:b/c") == from_standard_path(WIN, "a:b/c")


def test_to_standard_name() -> None:
    assert to_standard_name(WIN, "a：b") == "a:b"
    assert to_standard_name(WIN, "a/b") == "a／b"


def test_from_standard_name() -> None:
    assert from_standard_name(WIN, "a:b") == "a：b"
    assert from_standard_name(WIN, "a／b") == "a/b"


def test_paths_are_converted_per_component() -> None:
    assert to_standard_path(WIN, "dir：x/file？") == "dir:x/file?"
    assert from_standard_path(WIN, "dir:x/file?") == "dir：x/file？"


def test_unchanged_path_is_returned_as_is() -> None:
    path = "plain/path/name.txt"
    assert to_standard_path(WIN, path) is path
    assert from_standard_path(WIN, path) is path


def test_empty_components_survive() -> None:
    assert to_standard_path(WIN, "/a：b//c/") == "/a:b//c/"


def test_identity_strips_standard_substitutions() -> None:
    assert from_standard_name(IDENTITY, "a／b") == "a/b"
    assert from_standard_name(IDENTITY, "␁") == "\x01"
    assert to_standard_name(IDENTITY, "\x01") == "␁"
    assert IDENTITY.to_standard_path("x/\x7f") == "x/␡"


def test_round_trip_through_standard() -> None:
    raws = [
        "report.",
        "a:b\\c",
        "slash/inside",
        "ctl\x01",
        "‛quoted",
        "．",
        b"bad\xff".decode("utf-8", "surrogateescape"),
    ]
    for raw in raws:
        name = BACKEND.encode(raw)
        standard = to_standard_name(BACKEND, name)
        assert standard == STANDARD.encode(raw)
        assert from_standard_name(BACKEND, standard) == name


def test_transcode_name() -> None:
    hash_percent = MultiEncoder(EncodeFlag.HASH_PERCENT)
    assert transcode_name(WIN, hash_percent, "a：b#") == "a:b＃"
    assert transcode_name(hash_percent, WIN, "a:b＃") == "a：b#"


def test_transcode_same_encoding_is_identity() -> None:
    value = "a：b"
    assert transcode_name(WIN, MultiEncoder(EncodeFlag.WIN), value) is value
    assert transcode_path(WIN, WIN, value) is value


def test_transcode_path() -> None:
    windows = MultiEncoder(EncodeFlag.WIN | EncodeFlag.RIGHT_PERIOD)
    assert transcode_path(IDENTITY, windows, "dir./a?b") == "dir．/a？b"
    assert transcode_path(windows, IDENTITY, "dir．/a？b") == "dir./a?b"
