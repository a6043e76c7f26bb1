"""Shared fixtures for integration tests."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from cmdrank.interfaces.toml_config import CmdRankConfig


@pytest.fixture
def bin_dir(tmp_path: Path) -> Path:
    path = tmp_path / "bin"
    path.mkdir()
    return path


@pytest.fixture
def install(bin_dir: Path) -> Callable[[str], Path]:
    """Drop an executable script called *name* into ``bin_dir``."""

    def _install(name: str) -> Path:
        script = bin_dir / name
        script.write_text("#!/bin/sh\nexit 0\n")
        script.chmod(0o755)
        return script

    return _install


@pytest.fixture
def config(tmp_path: Path) -> CmdRankConfig:
    return CmdRankConfig(
        history_length=2,
        auto_update_interval=30.0,
        save_file=str(tmp_path / "state" / "items.json"),
    )
