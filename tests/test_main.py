"""Tests for the command line interface"""

from pathlib import Path

import pytest
from typer.testing import CliRunner

from namecodec.main import app

runner = CliRunner()


@pytest.fixture(autouse=True)
def in_tmp_path(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run every command away from any namecodec.yaml in the checkout"""
    monkeypatch.chdir(tmp_path)
    return tmp_path


def test_encode() -> None:
    result = runner.invoke(app, ["encode", "-e", "Slash", "a/b", "c／d"])
    assert result.exit_code == 0
    assert result.output == "a／b\nc‛／d\n"


def test_decode() -> None:
    result = runner.invoke(app, ["decode", "--encoding", "Slash", "a／b"])
    assert result.exit_code == 0
    assert result.output == "a/b\n"


def test_encode_reads_stdin() -> None:
    result = runner.invoke(app, ["encode", "-e", "Win"], input="a:b\nc?\n")
    assert result.exit_code == 0
    assert result.output == "a：b\nc？\n"


def test_default_encoding_is_standard() -> None:
    result = runner.invoke(app, ["encode", "a/b:c"])
    assert result.exit_code == 0
    assert result.output == "a／b:c\n"


def test_to_standard() -> None:
    result = runner.invoke(app, ["to-standard", "-e", "Win", "x：y/z"])
    assert result.exit_code == 0
    assert result.output == "x:y/z\n"


def test_from_standard_name() -> None:
    result = runner.invoke(app, ["from-standard", "-e", "Identity", "--name", "a／b"])
    assert result.exit_code == 0
    assert result.output == "a/b\n"


def test_convert() -> None:
    result = runner.invoke(
        app, ["convert", "--from", "Win", "--to", "HashPercent", "a：b#/c"]
    )
    assert result.exit_code == 0
    assert result.output == "a:b＃/c\n"


def test_invalid_encoding() -> None:
    result = runner.invoke(app, ["encode", "-e", "Slash,Bogus", "a"])
    assert result.exit_code == 1
    assert "Unknown encoding flag 'Bogus'" in result.output


def test_encoding_mask_out_of_range() -> None:
    result = runner.invoke(app, ["encode", "-e", "4096", "a"])
    assert result.exit_code == 1
    assert "out of range" in result.output


def test_missing_config() -> None:
    result = runner.invoke(app, ["encode", "--config", "nope.yaml", "a"])
    assert result.exit_code == 1
    assert "Config file not found" in result.output


def test_config_preset(in_tmp_path: Path) -> None:
    (in_tmp_path / "namecodec.yaml").write_text(
        "encoding: mine\npresets:\n  mine: [Win, RightPeriod]\n", encoding="utf8"
    )
    result = runner.invoke(app, ["encode", "a:b."])
    assert result.exit_code == 0
    assert result.output == "a：b．\n"


def test_flags() -> None:
    result = runner.invoke(app, ["flags", "-e", "Slash,LeftTilde"])
    assert result.exit_code == 0
    assert "Encoding: Slash,LeftTilde" in result.output
    assert "* Slash" in result.output
    assert "* LeftTilde" in result.output
    assert "* Win" not in result.output
    assert "'\\x01'..'\\x1f'" in result.output


def make_tree(root: Path) -> None:
    (root / "data").mkdir()
    (root / "data" / "a:b.txt").write_text("a")
    (root / "data" / "plain.txt").write_text("p")


def test_scan_dry_run(in_tmp_path: Path) -> None:
    make_tree(in_tmp_path)
    result = runner.invoke(app, ["scan", "data", "-e", "Win"])
    assert result.exit_code == 0
    assert "Found 1 entries to encode" in result.output
    assert "[DRY RUN]" in result.output
    assert (in_tmp_path / "data" / "a:b.txt").exists()


def test_scan_execute(in_tmp_path: Path) -> None:
    make_tree(in_tmp_path)
    result = runner.invoke(app, ["scan", "data", "-e", "Win", "--execute", "--yes"])
    assert result.exit_code == 0
    assert "Renamed 1 entries" in result.output
    assert (in_tmp_path / "data" / "a：b.txt").exists()

    result = runner.invoke(
        app, ["scan", "data", "-e", "Win", "--decode", "--execute", "-y"]
    )
    assert result.exit_code == 0
    assert (in_tmp_path / "data" / "a:b.txt").exists()


def test_scan_confirmation(in_tmp_path: Path) -> None:
    make_tree(in_tmp_path)
    result = runner.invoke(
        app, ["scan", "data", "-e", "Win", "--execute"], input="no\n"
    )
    assert result.exit_code == 1
    assert "Aborted." in result.output
    assert (in_tmp_path / "data" / "a:b.txt").exists()

    result = runner.invoke(
        app, ["scan", "data", "-e", "Win", "--execute"], input="rename\n"
    )
    assert result.exit_code == 0
    assert (in_tmp_path / "data" / "a：b.txt").exists()


def test_scan_nothing_to_rename(in_tmp_path: Path) -> None:
    (in_tmp_path / "data").mkdir()
    result = runner.invoke(app, ["scan", "data"])
    assert result.exit_code == 0
    assert "Nothing to rename." in result.output


def test_scan_missing_directory() -> None:
    result = runner.invoke(app, ["scan", "missing"])
    assert result.exit_code == 1
    assert "Directory not found" in result.output
