"""Tests for the in-process CommandRegistry."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from cmdrank.infrastructure.commands.registry import CommandRegistry
from cmdrank.shared.exceptions import CommandExecutionError, UnknownCommandError


@pytest.fixture
def registry() -> CommandRegistry:
    return CommandRegistry()


# =============================================================================
# Registration
# =============================================================================


def test_register_rejects_duplicate_ids(registry: CommandRegistry) -> None:
    assert registry.register("save", MagicMock()) is True
    assert registry.register("save", MagicMock()) is False
    assert len(registry) == 1


def test_unregister(registry: CommandRegistry) -> None:
    registry.register("save", MagicMock())

    assert registry.unregister("save") is True
    assert registry.unregister("save") is False
    assert "save" not in registry


def test_decorator_uses_function_name(registry: CommandRegistry) -> None:
    @registry.command(scopes=["files"])
    def reload_file() -> None:
        """Reload the current file."""

    entry = registry.get("reload_file")

    assert entry is not None
    assert entry.callback is reload_file
    assert entry.description == "Reload the current file."
    assert entry.scopes == frozenset({"files"})


def test_decorator_keeps_first_registration(
    registry: CommandRegistry, caplog: pytest.LogCaptureFixture
) -> None:
    first = MagicMock()
    registry.register("quit", first)

    @registry.command("quit")
    def other_quit() -> None:
        pass

    assert registry.get("quit").callback is first  # type: ignore[union-attr]
    assert "already registered" in caplog.text


# =============================================================================
# Enumeration
# =============================================================================


def test_list_commands_in_registration_order(registry: CommandRegistry) -> None:
    registry.register("zoom", MagicMock())
    registry.register("align", MagicMock(), scopes=["edit"])
    registry.register("indent", MagicMock(), scopes=["edit", "format"])

    assert registry.list_commands() == ["zoom", "align", "indent"]
    assert registry.list_commands("edit") == ["align", "indent"]
    assert registry.list_commands("format") == ["indent"]
    assert registry.list_commands("none") == []


# =============================================================================
# Execution
# =============================================================================


def test_execute_runs_callback(registry: CommandRegistry) -> None:
    callback = MagicMock()
    registry.register("save", callback)

    registry.execute("save")

    callback.assert_called_once_with()


def test_execute_unknown_raises(registry: CommandRegistry) -> None:
    with pytest.raises(UnknownCommandError, match="missing"):
        registry.execute("missing")


def test_execute_wraps_callback_failure(registry: CommandRegistry) -> None:
    registry.register("explode", MagicMock(side_effect=RuntimeError("boom")))

    with pytest.raises(CommandExecutionError, match="boom") as exc_info:
        registry.execute("explode")

    assert exc_info.value.command_id == "explode"
    assert isinstance(exc_info.value.__cause__, RuntimeError)
