"""Fixtures for shared kernel tests."""

from __future__ import annotations

import pytest

from cmdrank.shared.types import CommandId


@pytest.fixture
def command_id() -> CommandId:
    return CommandId("git-status")
