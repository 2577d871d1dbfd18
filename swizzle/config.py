"""Load, save and merge swizzle option files (YAML)."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

from swizzle.types import SwizzleConfig, SwizzleConfigError

logger = logging.getLogger(__name__)

# option-file key -> SwizzleConfig field
_FIELDS: dict[str, str] = {
    "addr": "addr_bits",
    "data": "data_bits",
    "word": "bytes_per_word",
    "big": "big_endian",
    "strict": "strict",
    "invert": "invert",
}
_BOOL_KEYS = ("big", "strict", "invert")


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _parse_bits_value(key: str, raw: Any, path: Path) -> str | None:
    if raw is None:
        return None
    if isinstance(raw, str):
        return raw
    if isinstance(raw, int) and not isinstance(raw, bool):
        return str(raw)
    if isinstance(raw, list) and all(isinstance(i, int) and not isinstance(i, bool) for i in raw):
        # lists are written MSB first, same as the string form
        return ",".join(str(i) for i in raw)
    raise SwizzleConfigError(f"{path}: '{key}' must be a bit spec string or a list of ints")


def _parse_options(data: dict, path: Path) -> dict[str, Any]:
    unknown = sorted(set(data) - set(_FIELDS))
    if unknown:
        raise SwizzleConfigError(f"{path}: unknown option(s): {', '.join(unknown)}")

    options: dict[str, Any] = {}
    for key in ("addr", "data"):
        if key in data:
            options[_FIELDS[key]] = _parse_bits_value(key, data[key], path)
    if "word" in data:
        options["bytes_per_word"] = data["word"]
    for key in _BOOL_KEYS:
        if key in data:
            if not isinstance(data[key], bool):
                raise SwizzleConfigError(f"{path}: '{key}' must be true or false")
            options[_FIELDS[key]] = data[key]
    return options


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def load_swizzle_config(path: str | Path) -> dict[str, Any]:
    """Load an option file and return :class:`SwizzleConfig` keyword arguments.

    Example file::

        addr: 0,1,2,3,4,5,6,7,8,9,10,11,12,14,13
        data: [0, 1, 2, 3, 4, 5, 6, 7]
        word: 1
        big: false

    Raises:
        SwizzleConfigError: If the file is missing or malformed.
    """
    p = Path(path)
    if not p.exists():
        raise SwizzleConfigError(f"Configuration file not found: {p}")

    try:
        with open(p, encoding="utf-8") as fh:
            data = yaml.safe_load(fh) or {}
    except yaml.YAMLError as exc:
        raise SwizzleConfigError(f"Failed to parse {p}: {exc}") from exc

    if not isinstance(data, dict):
        raise SwizzleConfigError(f"Expected a YAML mapping in {p}, got {type(data).__name__}")

    options = _parse_options(data, p)
    logger.debug("loaded options from %s: %s", p, options)
    return options


def save_swizzle_config(config: SwizzleConfig, path: str | Path) -> None:
    """Write *config* as an option file readable by :func:`load_swizzle_config`.

    Raises:
        SwizzleConfigError: If the file cannot be written.
    """
    data: dict[str, Any] = {
        **({"addr": config.addr_bits} if config.addr_bits is not None else {}),
        **({"data": config.data_bits} if config.data_bits is not None else {}),
        "word": config.bytes_per_word,
        "big": config.big_endian,
        **({"strict": True} if config.strict else {}),
        **({"invert": True} if config.invert else {}),
    }
    p = Path(path)
    try:
        with open(p, "w", encoding="utf-8") as fh:
            yaml.safe_dump(data, fh, default_flow_style=False, sort_keys=False)
    except OSError as exc:
        raise SwizzleConfigError(f"Failed to write {p}: {exc}") from exc
    logger.debug("saved options to %s", p)


def merge_config(file_options: dict[str, Any] | None = None, **overrides: Any) -> SwizzleConfig:
    """Build a validated :class:`SwizzleConfig`.

    *overrides* whose value is ``None`` leave the file option (or the
    default) untouched.
    """
    options = dict(file_options or {})
    options.update({k: v for k, v in overrides.items() if v is not None})
    unknown = sorted(set(options) - set(_FIELDS.values()))
    if unknown:
        raise SwizzleConfigError(f"unknown option(s): {', '.join(unknown)}")
    config = SwizzleConfig(**options)
    config.validate()
    return config
