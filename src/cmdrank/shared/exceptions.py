"""Typed exception hierarchy for cmdrank."""

from __future__ import annotations

from pathlib import Path

from cmdrank.shared.types import CommandId

# =============================================================================
# BASE
# =============================================================================


class CmdRankError(Exception):
    """Base exception for all cmdrank errors."""


# =============================================================================
# PERSISTENCE
# =============================================================================


class CorruptStateError(CmdRankError):
    """The save file has content that cannot be decoded."""

    def __init__(self, path: Path | str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Corrupt save file {path}: {reason}")


# =============================================================================
# COMMANDS
# =============================================================================


class UnknownCommandError(CmdRankError):
    """A dispatcher was asked to run a command it does not know."""

    def __init__(self, command_id: CommandId | str) -> None:
        self.command_id = command_id
        super().__init__(f"Unknown command: {command_id}")


class CommandExecutionError(CmdRankError):
    """A command callback raised while executing."""

    def __init__(self, command_id: CommandId | str, reason: str) -> None:
        self.command_id = command_id
        self.reason = reason
        super().__init__(f"Command '{command_id}' failed: {reason}")


# =============================================================================
# CONFIGURATION
# =============================================================================


class ConfigurationError(CmdRankError):
    """Invalid or missing configuration."""
