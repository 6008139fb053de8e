"""Configuration file utilities"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from namecodec.codec import IDENTITY, Encoder, MultiEncoder
from namecodec.rules import FLAG_LOOKUP, EncodeFlag, flags_from_int, parse_flags

DEFAULT_CONFIG_PATH = Path("namecodec.yaml")

IDENTITY_NAMES = {"identity", "raw"}

EncodingValue = str | int | list[str]


@dataclass(frozen=True)
class CodecConfig:
    """Settings read from a namecodec.yaml file"""

    encoding: EncodingValue = "Standard"
    presets: dict[str, EncodeFlag] = field(default_factory=dict)


def _parse_presets(raw: Any) -> dict[str, EncodeFlag]:
    """Validate the presets mapping of a config file"""
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ValueError("'presets' must be a mapping of name to flags")

    presets: dict[str, EncodeFlag] = {}
    for name, value in raw.items():
        key = str(name).lower()
        if key in FLAG_LOOKUP or key in IDENTITY_NAMES:
            raise ValueError(f"Preset '{name}' shadows a built-in encoding name")
        if isinstance(value, int):
            presets[key] = flags_from_int(value)
        else:
            presets[key] = parse_flags(value)
    return presets


def load_config(path: Path) -> CodecConfig:
    """Load and validate a YAML config file"""
    with open(path, encoding="utf8") as f:
        data = yaml.safe_load(f)

    if data is None:
        return CodecConfig()
    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a mapping")

    unknown = set(data) - {"encoding", "presets"}
    if unknown:
        raise ValueError(f"Unknown config keys: {', '.join(sorted(map(str, unknown)))}")

    encoding = data.get("encoding", "Standard")
    if not isinstance(encoding, (str, int, list)):
        raise ValueError("'encoding' must be a string, a list of flags or an integer")

    return CodecConfig(encoding=encoding, presets=_parse_presets(data.get("presets")))


def resolve_encoder(
    value: EncodingValue, presets: dict[str, EncodeFlag] | None = None
) -> Encoder:
    """
    Turn an encoding description into an Encoder.

    Accepts "Identity"/"Raw", a preset name, comma separated flag names,
    a list of flag names or an integer mask.
    """
    presets = presets or {}

    if isinstance(value, bool):
        raise ValueError("'encoding' must not be a boolean")
    if isinstance(value, int):
        return MultiEncoder(flags_from_int(value))

    if isinstance(value, str):
        key = value.strip().lower()
        if key in IDENTITY_NAMES:
            return IDENTITY
        if key in presets:
            return MultiEncoder(presets[key])
        if key.isdecimal():
            return MultiEncoder(flags_from_int(int(key)))

    return MultiEncoder(parse_flags(value))


def select_encoder(
    encoding: str | None = None, config_path: Path | None = None
) -> Encoder:
    """
    Pick the encoder to use: an explicit encoding wins over the config file,
    which wins over Standard. A missing explicit config file is an error.
    """
    config = CodecConfig()
    if config_path is not None:
        if not config_path.exists():
            raise ValueError(f"Config file not found: {config_path}")
        config = load_config(config_path)
    elif DEFAULT_CONFIG_PATH.exists():
        config = load_config(DEFAULT_CONFIG_PATH)

    value: EncodingValue = encoding if encoding is not None else config.encoding
    return resolve_encoder(value, config.presets)
