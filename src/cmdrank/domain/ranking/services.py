"""Domain services for command ranking."""

from __future__ import annotations

import logging

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Protocol

from cmdrank.domain.ranking.entities import (
    DisplayProjection,
    RankedList,
    RankEntry,
    UsageLedger,
)
from cmdrank.domain.ranking.history import extract_history, fold_history
from cmdrank.domain.ranking.value_objects import RankState
from cmdrank.shared.constants import DEFAULT_HISTORY_LENGTH
from cmdrank.shared.types import CommandId

logger = logging.getLogger(__name__)


class CommandSource(Protocol):
    """Port for enumerating the commands a host can currently invoke."""

    def list_commands(self, scope: str | None = None) -> Iterable[str]:
        """Return the invokable command ids, optionally restricted to *scope*."""
        ...


@dataclass
class RankEngine:
    """Owns the ranked list, the usage ledger and the recency history.

    Lifecycle: ``load_initial`` with saved state, ``rebuild`` against the
    live commands, then ``promote`` once per successful invocation. At rest
    the first ``history_length`` entries are in recency order and the rest
    follow the Sorting Rule.

    Not thread-safe. Callers serialize access; the engine only refuses a
    rebuild that is re-entered while one is already running.
    """

    source: CommandSource
    history_length: int = DEFAULT_HISTORY_LENGTH
    scope: str | None = None
    _ranked: RankedList = field(default_factory=RankedList, init=False, repr=False)
    _ledger: UsageLedger = field(default_factory=UsageLedger, init=False, repr=False)
    _history: tuple[CommandId, ...] = field(default=(), init=False, repr=False)
    _last_command_count: int | None = field(default=None, init=False, repr=False)
    _rebuilding: bool = field(default=False, init=False, repr=False)
    _built: bool = field(default=False, init=False, repr=False)

    def __post_init__(self) -> None:
        if self.history_length < 1:
            msg = f"history_length must be at least 1, got {self.history_length}"
            raise ValueError(msg)

    # =========================================================================
    # READ ACCESS
    # =========================================================================

    @property
    def display(self) -> DisplayProjection:
        """Command ids in rank order, for handing to a picker."""
        return self._ranked.display

    @property
    def entries(self) -> tuple[RankEntry, ...]:
        return tuple(self._ranked)

    @property
    def ledger(self) -> UsageLedger:
        return self._ledger

    @property
    def is_built(self) -> bool:
        return self._built

    # =========================================================================
    # PERSISTENCE
    # =========================================================================

    def load_initial(
        self,
        history: Sequence[str],
        data: Iterable[tuple[str, int]],
    ) -> None:
        """Store saved history and usage data for the next ``rebuild``.

        Raises:
            ValueError: If *data* has a count below 1 or a repeated id.
        """
        self._history = tuple(CommandId(c) for c in history[: self.history_length])
        self._ledger = UsageLedger.from_pairs(data)

    def extract_history(self) -> tuple[CommandId, ...]:
        """The most recent commands, most-recent-first.

        Before the first rebuild this is the history passed to
        ``load_initial`` so that saving an unbuilt engine loses nothing.
        """
        if not self._built:
            return self._history
        return extract_history(self._ranked, self.history_length)

    def export_state(self) -> RankState:
        return RankState(
            history=self.extract_history(),
            data=tuple(self._ledger.pairs()),
        )

    # =========================================================================
    # REBUILD
    # =========================================================================

    def rebuild(self) -> None:
        """Merge the live commands with the usage ledger into a new list.

        Known commands keep their ledger entry (and count), new ones start
        unranked. The merged list is sorted once, then the stored history
        is folded back in.
        """
        if self._rebuilding:
            logger.warning("Rebuild already in progress, ignoring nested call")
            return

        self._rebuilding = True
        try:
            live = self._enumerate()
            live_ids = set(live)
            known = [e for e in self._ledger if e.command_id in live_ids]
            new = [
                RankEntry(command_id=command_id)
                for command_id in live
                if command_id not in self._ledger
            ]

            ranked = RankedList(known + new)
            ranked.sort()
            fold_history(ranked, self._history, self.history_length)

            self._ranked = ranked
            self._last_command_count = len(live)
            self._built = True
            logger.info(
                "Rebuilt command ranking: %d live, %d previously used",
                len(live),
                len(known),
            )
        finally:
            self._rebuilding = False

    def update(self) -> None:
        """Snapshot the current history, then rebuild.

        Keeps the recency window of the current list across the rebuild.
        """
        if self._built:
            self._history = self.extract_history()
        self.rebuild()

    def detect_new_commands(self) -> bool:
        """True if the number of live commands changed since the last rebuild.

        Counting is a cheap proxy: a rename that keeps the total unchanged
        goes unnoticed until the next explicit ``update``.
        """
        return len(self._enumerate()) != self._last_command_count

    def update_if_needed(self) -> bool:
        """Run ``update`` if never built or the command set changed.

        Returns:
            True if an update ran.
        """
        if self._rebuilding:
            return False
        if self._built and not self.detect_new_commands():
            return False
        self.update()
        return True

    # =========================================================================
    # PROMOTION
    # =========================================================================

    def promote(self, command_id: str) -> bool:
        """Credit one invocation of *command_id* and move it to the front.

        An id missing from the list triggers one ``update``. If it is still
        missing the call is ignored.

        Returns:
            True if the invocation was credited.
        """
        command_id = CommandId(command_id)
        entry = self._ranked.get(command_id)
        if entry is None:
            self.update()
            entry = self._ranked.get(command_id)
        if entry is None:
            logger.debug("Ignoring invocation of unknown command %r", command_id)
            return False

        if entry.increment():
            self._ledger.append(entry)
        logger.debug("Promoted %r to %d uses", command_id, entry.uses)

        position = self._ranked.position_of(command_id)
        if position is None or position == 0:
            return True

        self._ranked.move_to_front(position)
        # The entry pushed out of the recency window returns to sort order.
        self._ranked.resettle(self.history_length)
        return True

    # =========================================================================
    # SCOPED ORDERING
    # =========================================================================

    def sort_by_rank(self, command_ids: Iterable[str]) -> list[CommandId]:
        """Order *command_ids* by their position in the ranked list.

        Ids the list does not know follow, in the order given.
        """
        wanted = list(dict.fromkeys(CommandId(c) for c in command_ids))
        wanted_set = set(wanted)
        ranked = [c for c in self._ranked.display if c in wanted_set]
        ranked_set = set(ranked)
        return ranked + [c for c in wanted if c not in ranked_set]

    # =========================================================================
    # INTERNAL
    # =========================================================================

    def _enumerate(self) -> list[CommandId]:
        """Live command ids, de-duplicated in enumeration order."""
        commands = self.source.list_commands(self.scope)
        return list(dict.fromkeys(CommandId(c) for c in commands))
