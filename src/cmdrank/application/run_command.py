"""Run Command use case: pick from the ranked list, execute, credit."""

from __future__ import annotations

import logging

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol

from cmdrank.application.dto import RunCommandRequest, RunCommandResult
from cmdrank.domain.ranking.services import RankEngine
from cmdrank.shared.types import CommandId

logger = logging.getLogger(__name__)

# =============================================================================
# PORTS
# =============================================================================


class Picker(Protocol):
    """Port for the interactive selection front-end."""

    def pick(self, candidates: Sequence[str], prompt: str) -> str | None:
        """Return the chosen candidate, or None if the user cancelled."""
        ...


class CommandDispatcher(Protocol):
    """Port for executing a chosen command."""

    def execute(self, command_id: str) -> None:
        """Run the command; raise on failure."""
        ...


# =============================================================================
# USE CASE
# =============================================================================


@dataclass
class RunCommand:
    """Offer ranked candidates, run the pick and promote it on success."""

    engine: RankEngine
    picker: Picker
    dispatcher: CommandDispatcher

    def execute(self, request: RunCommandRequest) -> RunCommandResult:
        """Execute one pick-and-run round.

        The engine is only credited after the dispatcher returns; a
        cancelled pick or a failing command earns no ranking credit.

        Raises:
            Whatever the dispatcher raises, unmodified.
        """
        self.engine.update_if_needed()
        candidates = self._candidates(request.scope)

        selection = self.picker.pick(candidates, request.prompt)
        if selection is None:
            logger.debug("Selection cancelled")
            return RunCommandResult(command_id=None)

        command_id = CommandId(selection)
        self.dispatcher.execute(command_id)
        ranked = self.engine.promote(command_id)
        return RunCommandResult(command_id=command_id, ranked=ranked)

    def _candidates(self, scope: str | None) -> Sequence[str]:
        if scope is None:
            return self.engine.display
        return self.engine.sort_by_rank(self.engine.source.list_commands(scope))
