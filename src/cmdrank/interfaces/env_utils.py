"""Environment variable overrides for configuration."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from cmdrank.shared.exceptions import ConfigurationError

ENV_PREFIX = "CMDRANK_"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def _parse_int(name: str, raw: str) -> int:
    """Parse an integer env var or raise with a clear message."""
    try:
        return int(raw)
    except ValueError:
        msg = f"Invalid integer for {name}: {raw!r}"
        raise ConfigurationError(msg) from None


def _parse_float(name: str, raw: str) -> float:
    """Parse a float env var or raise with a clear message."""
    try:
        return float(raw)
    except ValueError:
        msg = f"Invalid float for {name}: {raw!r}"
        raise ConfigurationError(msg) from None


def _parse_bool(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    msg = f"Invalid boolean for {name}: {raw!r}"
    raise ConfigurationError(msg)


_ENV_KEYS = (
    "history_length",
    "auto_update",
    "auto_update_interval",
    "save_file",
    "log_level",
)

_PARSERS = {
    "history_length": _parse_int,
    "auto_update": _parse_bool,
    "auto_update_interval": _parse_float,
}


def read_env_overrides(environ: Mapping[str, str]) -> dict[str, Any]:
    """Collect ``CMDRANK_*`` overrides for the known configuration keys.

    ``CMDRANK_HISTORY_LENGTH`` maps to ``history_length`` and so on.
    Empty values are ignored.

    Raises:
        ConfigurationError: If a value does not parse as its key's type.
    """
    overrides: dict[str, Any] = {}
    for key in _ENV_KEYS:
        name = f"{ENV_PREFIX}{key.upper()}"
        raw = environ.get(name, "").strip()
        if not raw:
            continue
        parser = _PARSERS.get(key)
        overrides[key] = parser(name, raw) if parser else raw
    return overrides
