"""Directory tree renaming"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from tqdm import tqdm

from namecodec.codec import Encoder


def printable(name: str) -> str:
    """Backslash-escape lone surrogates so the name can be written to a terminal"""
    return name.encode("utf-8", "backslashreplace").decode("utf-8")


@dataclass(frozen=True)
class RenameAction:
    """A single entry which changes name under an encoding"""

    directory: Path
    old_name: str
    new_name: str

    @property
    def source(self) -> Path:
        return self.directory / self.old_name

    @property
    def target(self) -> Path:
        return self.directory / self.new_name

    def describe(self) -> str:
        """Human readable 'old -> new' line"""
        return f"{printable(str(self.source))} -> {printable(self.new_name)}"


def plan_renames(
    root: Path, encoder: Encoder, decode: bool = False
) -> list[RenameAction]:
    """
    Walk root bottom-up and collect every entry whose name changes when it is
    encoded (or decoded) with the encoder. Children come before their parent
    directory so the plan can be applied in order.
    """
    convert = encoder.decode if decode else encoder.encode
    actions: list[RenameAction] = []

    for dirpath, dirnames, filenames in os.walk(root, topdown=False):
        directory = Path(dirpath)
        for name in sorted(filenames) + sorted(dirnames):
            new_name = convert(name)
            if new_name != name:
                actions.append(RenameAction(directory, name, new_name))

    return actions


def _rename(action: RenameAction) -> None:
    """Rename one entry, refusing to overwrite an existing one"""
    if (
        "/" in action.new_name
        or "\x00" in action.new_name
        or action.new_name in ("", ".", "..")
    ):
        raise OSError(f"cannot rename to {printable(action.new_name)!r}")
    if os.path.lexists(action.target):
        raise FileExistsError(f"{printable(str(action.target))} already exists")
    os.rename(action.source, action.target)


def apply_renames(
    actions: list[RenameAction], pbar: "tqdm[Any] | None" = None
) -> tuple[int, int]:
    """
    Apply a rename plan. Failures are reported and skipped.
    Returns (renamed_count, failed_count).
    """
    renamed = 0
    failed = 0

    for action in actions:
        try:
            _rename(action)
        except OSError as e:
            message = f"Failed to rename {printable(str(action.source))}: {e}"
            if pbar is not None:
                pbar.write(message)
            else:
                tqdm.write(message)
            failed += 1
        else:
            renamed += 1
        if pbar is not None:
            pbar.update(1)

    return renamed, failed
