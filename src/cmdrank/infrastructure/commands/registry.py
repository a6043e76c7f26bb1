"""In-process command registry.

Registers callables under a command id, optionally tagged with scopes.
Acts as both the command source and the dispatcher for a host that owns
its commands, so a ranked picker can list and run them.
"""

from __future__ import annotations

import logging

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field

from cmdrank.shared.exceptions import CommandExecutionError, UnknownCommandError
from cmdrank.shared.types import CommandId

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RegisteredCommand:
    command_id: CommandId
    callback: Callable[[], object]
    description: str = ""
    scopes: frozenset[str] = field(default_factory=frozenset[str])


class CommandRegistry:
    """Central registry of runnable commands.

    Thread-safety: not thread-safe; use from a single thread.
    """

    def __init__(self) -> None:
        self._commands: dict[CommandId, RegisteredCommand] = {}

    # Registration -------------------------------------------------
    def register(
        self,
        command_id: str,
        callback: Callable[[], object],
        *,
        description: str = "",
        scopes: Iterable[str] = (),
    ) -> bool:
        """Register a command. Returns False if the id is already taken."""
        key = CommandId(command_id)
        if key in self._commands:
            return False
        self._commands[key] = RegisteredCommand(
            command_id=key,
            callback=callback,
            description=description,
            scopes=frozenset(scopes),
        )
        return True

    def command(
        self,
        command_id: str | None = None,
        *,
        description: str = "",
        scopes: Iterable[str] = (),
    ) -> Callable[[Callable[[], object]], Callable[[], object]]:
        """Decorator form of ``register``; the id defaults to the function name."""

        def decorator(func: Callable[[], object]) -> Callable[[], object]:
            name = command_id or func.__name__
            doc = description or (func.__doc__ or "").strip()
            if not self.register(name, func, description=doc, scopes=scopes):
                logger.warning("Command %r already registered, keeping the first", name)
            return func

        return decorator

    def unregister(self, command_id: str) -> bool:
        return self._commands.pop(CommandId(command_id), None) is not None

    def get(self, command_id: str) -> RegisteredCommand | None:
        return self._commands.get(CommandId(command_id))

    # Enumeration --------------------------------------------------
    def list_commands(self, scope: str | None = None) -> list[CommandId]:
        """Registered ids in registration order, optionally only *scope*'s."""
        return [
            c.command_id
            for c in self._commands.values()
            if scope is None or scope in c.scopes
        ]

    # Execution ----------------------------------------------------
    def execute(self, command_id: str) -> None:
        """Run a registered command.

        Raises:
            UnknownCommandError: If nothing is registered under *command_id*.
            CommandExecutionError: If the callback raises.
        """
        entry = self.get(command_id)
        if entry is None:
            raise UnknownCommandError(command_id)
        try:
            entry.callback()
        except Exception as e:
            raise CommandExecutionError(command_id, str(e)) from e

    def __contains__(self, command_id: object) -> bool:
        return command_id in self._commands

    def __len__(self) -> int:
        return len(self._commands)
