"""TOML-based configuration loader.

Reads the ``[cmdrank]`` table from a TOML file and produces a typed
``CmdRankConfig`` dataclass. Missing file or missing table → all defaults
apply. ``CMDRANK_*`` environment variables override the file.
"""

from __future__ import annotations

import logging
import os
import tomllib

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from cmdrank.interfaces.env_utils import read_env_overrides
from cmdrank.shared.constants import (
    DEFAULT_AUTO_UPDATE,
    DEFAULT_AUTO_UPDATE_INTERVAL_SECONDS,
    DEFAULT_CONFIG_FILE,
    DEFAULT_HISTORY_LENGTH,
    DEFAULT_LOG_LEVEL,
    DEFAULT_SAVE_FILE,
)
from cmdrank.shared.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

# ── defaults ────────────────────────────────────────────────────────────
_DEFAULTS: dict[str, Any] = {
    "history_length": DEFAULT_HISTORY_LENGTH,
    "auto_update": DEFAULT_AUTO_UPDATE,
    "auto_update_interval": DEFAULT_AUTO_UPDATE_INTERVAL_SECONDS,
    "save_file": DEFAULT_SAVE_FILE,
    "log_level": DEFAULT_LOG_LEVEL,
}

_ALL_KNOWN_KEYS = set(_DEFAULTS)

_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


@dataclass(frozen=True)
class CmdRankConfig:
    """Typed configuration produced by the TOML loader."""

    history_length: int = DEFAULT_HISTORY_LENGTH
    auto_update: bool = DEFAULT_AUTO_UPDATE
    auto_update_interval: float = DEFAULT_AUTO_UPDATE_INTERVAL_SECONDS
    save_file: str = DEFAULT_SAVE_FILE
    log_level: str = DEFAULT_LOG_LEVEL

    @property
    def save_path(self) -> Path:
        return Path(self.save_file).expanduser()


def load_cmdrank_config(
    config_path: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> CmdRankConfig:
    """Load cmdrank configuration.

    Merge order (later wins):
        defaults → ``[cmdrank]`` table → ``CMDRANK_*`` environment variables.

    Args:
        config_path: TOML file to read. Defaults to ``cmdrank.toml`` in the
            current directory; a missing file means defaults.
        environ: Environment mapping. Defaults to ``os.environ``.

    Returns:
        A frozen ``CmdRankConfig`` dataclass.

    Raises:
        ConfigurationError: On TOML parse errors or invalid values.
    """
    if config_path is None:
        config_path = Path.cwd() / DEFAULT_CONFIG_FILE
    if environ is None:
        environ = os.environ

    merged: dict[str, Any] = dict(_DEFAULTS)

    section = _read_section(config_path)
    if section is not None:
        _warn_unknown_keys(section)
        for key, value in section.items():
            if key in _ALL_KNOWN_KEYS:
                merged[key] = value

    merged.update(read_env_overrides(environ))

    return CmdRankConfig(
        history_length=_validate_history_length(merged["history_length"]),
        auto_update=_validate_bool("auto_update", merged["auto_update"]),
        auto_update_interval=_validate_interval(merged["auto_update_interval"]),
        save_file=_validate_save_file(merged["save_file"]),
        log_level=_validate_log_level(merged["log_level"]),
    )


# ── internal helpers ────────────────────────────────────────────────────


def _read_section(toml_path: Path) -> dict[str, Any] | None:
    """Read ``[cmdrank]`` from *toml_path*, or ``None`` if absent."""
    if not toml_path.is_file():
        return None
    try:
        with toml_path.open("rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as exc:
        msg = f"Failed to parse {toml_path}: {exc}"
        raise ConfigurationError(msg) from exc
    section: Any = data.get("cmdrank")
    if not isinstance(section, dict):
        return None
    return section


def _warn_unknown_keys(section: dict[str, Any]) -> None:
    """Log a warning for any keys not in the known set."""
    for key in section:
        if key not in _ALL_KNOWN_KEYS:
            logger.warning("Unknown key in [cmdrank]: %r", key)


def _validate_history_length(raw: Any) -> int:
    # bool is an int subclass; reject it explicitly.
    if isinstance(raw, bool) or not isinstance(raw, int):
        msg = f"history_length must be an integer, got {raw!r}"
        raise ConfigurationError(msg)
    if raw < 1:
        msg = f"history_length must be at least 1, got {raw}"
        raise ConfigurationError(msg)
    return raw


def _validate_bool(key: str, raw: Any) -> bool:
    if not isinstance(raw, bool):
        msg = f"{key} must be true or false, got {raw!r}"
        raise ConfigurationError(msg)
    return raw


def _validate_interval(raw: Any) -> float:
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        msg = f"auto_update_interval must be a number, got {raw!r}"
        raise ConfigurationError(msg)
    if raw <= 0:
        msg = f"auto_update_interval must be positive, got {raw}"
        raise ConfigurationError(msg)
    return float(raw)


def _validate_save_file(raw: Any) -> str:
    if not isinstance(raw, str) or not raw.strip():
        msg = f"save_file must be a non-empty path, got {raw!r}"
        raise ConfigurationError(msg)
    return raw


def _validate_log_level(raw: Any) -> str:
    level = str(raw).strip().upper()
    if level not in _LOG_LEVELS:
        valid = ", ".join(sorted(_LOG_LEVELS))
        msg = f"Invalid log_level {raw!r} (valid: {valid})"
        raise ConfigurationError(msg)
    return level
