"""reversible file name encoder"""

import sys
from pathlib import Path
from typing import Annotated, Optional

import tqdm
import typer
import yaml
from typer import colors

from namecodec.codec import (
    Encoder,
    MultiEncoder,
    from_standard_name,
    from_standard_path,
    to_standard_name,
    to_standard_path,
    transcode_name,
    transcode_path,
)
from namecodec.config import select_encoder
from namecodec.rules import CLASS_RULES, FLAG_NAMES, LEADING_RULES, TRAILING_RULES
from namecodec.scan import apply_renames, plan_renames, printable

app = typer.Typer(
    name="namecodec",
    help="reversible file name encoder",
    add_completion=True,
    no_args_is_help=True,
)

EncodingOption = Annotated[
    Optional[str],
    typer.Option(
        "--encoding",
        "-e",
        help="Flags (e.g. 'Slash,Win,Ctl'), a preset name, 'Identity' or an integer mask",
    ),
]
ConfigOption = Annotated[
    Optional[Path],
    typer.Option(
        "--config",
        help="Path to a namecodec.yaml config file",
    ),
]
NamesArgument = Annotated[
    Optional[list[str]],
    typer.Argument(help="Values to convert. Read from stdin (one per line) if omitted."),
]


def fail(message: str) -> typer.Exit:
    """Print an error and build the exit to raise"""
    typer.echo(typer.style(message, fg=colors.RED))
    return typer.Exit(1)


def load_encoder(encoding: str | None, config_path: Path | None) -> Encoder:
    """Resolve the encoder from command line options and config"""
    try:
        return select_encoder(encoding, config_path)
    except (ValueError, yaml.YAMLError) as e:
        raise fail(f"Invalid encoding configuration: {e}") from e


def read_values(values: list[str] | None) -> list[str]:
    """Arguments if given, otherwise lines from stdin"""
    if values:
        return values
    return [line.rstrip("\r\n") for line in sys.stdin]


def echo_all(values: list[str]) -> None:
    """Print each value, escaping anything a terminal cannot show"""
    for value in values:
        typer.echo(printable(value))


@app.command()
def encode(
    names: NamesArgument = None,
    encoding: EncodingOption = None,
    config: ConfigOption = None,
) -> None:
    """Encode raw names"""
    encoder = load_encoder(encoding, config)
    echo_all([encoder.encode(n) for n in read_values(names)])


@app.command()
def decode(
    names: NamesArgument = None,
    encoding: EncodingOption = None,
    config: ConfigOption = None,
) -> None:
    """Decode encoded names back to raw names"""
    encoder = load_encoder(encoding, config)
    echo_all([encoder.decode(n) for n in read_values(names)])


@app.command()
def to_standard(
    paths: NamesArgument = None,
    encoding: EncodingOption = None,
    config: ConfigOption = None,
    name: bool = typer.Option(
        False,
        "--name",
        help="Treat each value as a single name instead of a / separated path",
    ),
) -> None:
    """Convert values in the selected encoding to Standard encoding"""
    encoder = load_encoder(encoding, config)
    converter = to_standard_name if name else to_standard_path
    echo_all([converter(encoder, p) for p in read_values(paths)])


@app.command()
def from_standard(
    paths: NamesArgument = None,
    encoding: EncodingOption = None,
    config: ConfigOption = None,
    name: bool = typer.Option(
        False,
        "--name",
        help="Treat each value as a single name instead of a / separated path",
    ),
) -> None:
    """Convert values in Standard encoding to the selected encoding"""
    encoder = load_encoder(encoding, config)
    converter = from_standard_name if name else from_standard_path
    echo_all([converter(encoder, p) for p in read_values(paths)])


@app.command()
def convert(
    paths: NamesArgument = None,
    source: str = typer.Option(..., "--from", help="Encoding the values are in"),
    target: str = typer.Option(..., "--to", help="Encoding to convert to"),
    config: ConfigOption = None,
    name: bool = typer.Option(
        False,
        "--name",
        help="Treat each value as a single name instead of a / separated path",
    ),
) -> None:
    """Convert values between two encodings via Standard encoding"""
    source_encoder = load_encoder(source, config)
    target_encoder = load_encoder(target, config)
    transcode = transcode_name if name else transcode_path
    echo_all(
        [transcode(source_encoder, target_encoder, p) for p in read_values(paths)]
    )


def _describe_chars(chars: list[str]) -> str:
    if len(chars) > 8:
        return f"{chars[0]!r}..{chars[-1]!r}"
    return " ".join(repr(c) for c in chars)


@app.command()
def flags(
    encoding: EncodingOption = None,
    config: ConfigOption = None,
) -> None:
    """List the character classes and mark the ones the encoding handles"""
    encoder = load_encoder(encoding, config)
    mask = encoder.mask if isinstance(encoder, MultiEncoder) else 0

    label = typer.style("Encoding:", fg=colors.CYAN)
    typer.echo(f"{label} {typer.style(str(encoder), bold=True)}")

    boundaries = {r.flag: (r, "leading") for r in LEADING_RULES}
    boundaries.update({r.flag: (r, "trailing") for r in TRAILING_RULES})

    for flag_name, flag in FLAG_NAMES.items():
        active = bool(mask & flag)
        marker = typer.style("*" if active else " ", fg=colors.GREEN, bold=True)
        title = typer.style(f"{flag_name:<12}", fg=colors.MAGENTA if active else None)

        if flag in CLASS_RULES:
            rules = CLASS_RULES[flag]
            detail = (
                f"{_describe_chars(list(rules))} -> "
                f"{_describe_chars(list(rules.values()))}"
            )
        elif flag in boundaries:
            rule, where = boundaries[flag]
            detail = f"{where} {rule.raw!r} -> {rule.substitute!r}"
        else:
            detail = "invalid bytes -> '‛' + two hex digits"

        typer.echo(f" {marker} {title} {detail}")


@app.command()
def scan(
    root: Path = typer.Argument(..., help="Directory to scan"),
    encoding: EncodingOption = None,
    config: ConfigOption = None,
    decode_names: bool = typer.Option(
        False,
        "--decode",
        help="Rename encoded names back to raw names instead",
    ),
    execute: bool = typer.Option(
        False,
        "--execute",
        help="Actually rename entries instead of dry run",
    ),
    yes: bool = typer.Option(
        False,
        "--yes",
        "-y",
        help="Skip confirmation prompt",
    ),
) -> None:
    """Find (and optionally rename) entries whose names the encoding changes"""
    if not root.is_dir():
        raise fail(f"Directory not found: {root}")

    encoder = load_encoder(encoding, config)
    actions = plan_renames(root, encoder, decode=decode_names)

    if not actions:
        typer.echo(typer.style("Nothing to rename.", fg=colors.YELLOW))
        return

    typer.echo(
        f"Found {typer.style(str(len(actions)), fg=colors.CYAN, bold=True)} "
        f"entries to {'decode' if decode_names else 'encode'} "
        f"(encoding: {encoder})"
    )

    if not execute:
        for action in actions:
            typer.echo(f"[DRY RUN] {action.describe()}")
        return

    if not yes:
        typer.echo(
            typer.style(
                f"WARNING: This will rename {len(actions)} entries under {root}",
                fg=colors.RED,
                bold=True,
            )
        )
        confirm = typer.prompt(
            typer.style("Type 'rename' to proceed", fg=colors.YELLOW)
        )
        if confirm.lower() != "rename":
            raise fail("Aborted.")

    with tqdm.tqdm(total=len(actions), unit="entry") as pbar:
        renamed, failed = apply_renames(actions, pbar)

    typer.echo(
        f"\nRenamed {typer.style(str(renamed), fg=colors.GREEN, bold=True)} entries"
        + (f" ({typer.style(str(failed), fg=colors.RED)} failed)" if failed else "")
    )
    if failed:
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
