"""Entities for the ranking bounded context."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass
from typing import overload

from cmdrank.domain.ranking.sorting import rank_key, sorts_before
from cmdrank.shared.types import CommandId

# =============================================================================
# ENTRY
# =============================================================================


@dataclass(eq=False)
class RankEntry:
    """A command and how often it has been invoked.

    ``count`` is ``None`` until the first invocation. Entries compare by
    identity: the same object is shared by the ranked list and the usage
    ledger, so an increment is visible in both.
    """

    command_id: CommandId
    count: int | None = None

    @property
    def uses(self) -> int:
        return self.count or 0

    def increment(self) -> bool:
        """Count one invocation. Returns True if it was the first one."""
        first = self.count is None
        self.count = self.uses + 1
        return first


# =============================================================================
# DISPLAY PROJECTION
# =============================================================================


class DisplayProjection(Sequence[CommandId]):
    """Read-only view of the command ids of a ``RankedList``, in rank order."""

    def __init__(self, ids: list[CommandId]) -> None:
        self._ids = ids

    @overload
    def __getitem__(self, index: int) -> CommandId: ...

    @overload
    def __getitem__(self, index: slice) -> list[CommandId]: ...

    def __getitem__(self, index: int | slice) -> CommandId | list[CommandId]:
        return self._ids[index]

    def __len__(self) -> int:
        return len(self._ids)

    def __repr__(self) -> str:
        return f"DisplayProjection({self._ids!r})"


# =============================================================================
# RANKED LIST
# =============================================================================


class RankedList:
    """Ordered working set of ranked commands.

    Keeps a parallel list of bare command ids (the display projection).
    Every positional mutation goes through ``_move`` so both lists always
    hold the same ids in the same order.
    """

    def __init__(self, entries: Iterable[RankEntry] = ()) -> None:
        self._entries: list[RankEntry] = list(entries)
        self._ids: list[CommandId] = [e.command_id for e in self._entries]
        self._by_id: dict[CommandId, RankEntry] = {
            e.command_id: e for e in self._entries
        }
        if len(self._by_id) != len(self._entries):
            msg = "ranked list cannot hold duplicate command ids"
            raise ValueError(msg)

    # -- lookup ---------------------------------------------------------------

    def get(self, command_id: CommandId) -> RankEntry | None:
        return self._by_id.get(command_id)

    def position_of(self, command_id: CommandId) -> int | None:
        """Index of *command_id*, or None if it is not in the list."""
        if command_id not in self._by_id:
            return None
        return self._ids.index(command_id)

    def head(self, n: int) -> list[CommandId]:
        """The first *n* command ids."""
        return self._ids[:n]

    @property
    def display(self) -> DisplayProjection:
        return DisplayProjection(self._ids)

    # -- reordering -----------------------------------------------------------

    def sort(self) -> None:
        """Fully sort by the Sorting Rule."""
        self._entries.sort(key=rank_key)
        self._ids = [e.command_id for e in self._entries]

    def move_to_front(self, position: int) -> None:
        if position != 0:
            self._move(position, 0)

    def resettle(self, position: int) -> None:
        """Move the entry at *position* forward to its sort-correct slot.

        Scans the entries after *position* for the first one the Sorting
        Rule places after it and reinserts the entry just before that one.
        If none qualifies the entry goes to the end.
        """
        if position >= len(self._entries) - 1:
            return
        entry = self._entries[position]
        target = len(self._entries)
        for index in range(position + 1, len(self._entries)):
            if sorts_before(entry, self._entries[index]):
                target = index
                break
        if target == position + 1:
            return
        # Removal shifts everything after *position* one slot left.
        self._move(position, target - 1)

    def _move(self, source: int, destination: int) -> None:
        entry = self._entries.pop(source)
        command_id = self._ids.pop(source)
        self._entries.insert(destination, entry)
        self._ids.insert(destination, command_id)

    # -- container protocol ---------------------------------------------------

    def __getitem__(self, position: int) -> RankEntry:
        return self._entries[position]

    def __iter__(self) -> Iterator[RankEntry]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, command_id: object) -> bool:
        return command_id in self._by_id


# =============================================================================
# USAGE LEDGER
# =============================================================================


class UsageLedger:
    """Durable record of every command ever invoked, in first-use order.

    Entries are never removed, even when their command disappears from the
    host: the count survives until the command comes back.
    """

    def __init__(self) -> None:
        self._entries: list[RankEntry] = []
        self._by_id: dict[CommandId, RankEntry] = {}

    @classmethod
    def from_pairs(cls, pairs: Iterable[tuple[str, int]]) -> UsageLedger:
        """Build a ledger from persisted ``(command_id, count)`` pairs.

        Raises:
            ValueError: On a count below 1 or a repeated command id.
        """
        ledger = cls()
        for raw_id, count in pairs:
            if count < 1:
                msg = f"count for {raw_id!r} must be at least 1, got {count}"
                raise ValueError(msg)
            command_id = CommandId(raw_id)
            if command_id in ledger:
                msg = f"duplicate ledger entry for {raw_id!r}"
                raise ValueError(msg)
            ledger.append(RankEntry(command_id=command_id, count=count))
        return ledger

    def append(self, entry: RankEntry) -> None:
        """Add an entry that has just been invoked for the first time."""
        if entry.count is None:
            msg = f"cannot record never-invoked command {entry.command_id!r}"
            raise ValueError(msg)
        if entry.command_id in self._by_id:
            return
        self._entries.append(entry)
        self._by_id[entry.command_id] = entry

    def get(self, command_id: CommandId) -> RankEntry | None:
        return self._by_id.get(command_id)

    def pairs(self) -> list[tuple[CommandId, int]]:
        return [(e.command_id, e.uses) for e in self._entries]

    def __iter__(self) -> Iterator[RankEntry]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, command_id: object) -> bool:
        return command_id in self._by_id
