"""Application-layer command and result DTOs."""

from __future__ import annotations

from dataclasses import dataclass

from cmdrank.shared.types import CommandId

# =============================================================================
# RUN COMMAND
# =============================================================================


@dataclass(frozen=True)
class RunCommandRequest:
    """Request to pick a command and run it."""

    prompt: str = "> "
    scope: str | None = None


@dataclass(frozen=True)
class RunCommandResult:
    """Outcome of a pick-and-run round."""

    command_id: CommandId | None
    ranked: bool = False

    @property
    def cancelled(self) -> bool:
        return self.command_id is None
