"""Value objects for the ranking bounded context."""

from __future__ import annotations

from dataclasses import dataclass

from cmdrank.shared.types import CommandId


@dataclass(frozen=True)
class RankState:
    """Snapshot exchanged with persistence: recency history plus usage data."""

    history: tuple[CommandId, ...] = ()
    data: tuple[tuple[CommandId, int], ...] = ()

    def __post_init__(self) -> None:
        for command_id, count in self.data:
            if count < 1:
                msg = f"count for {command_id!r} must be at least 1, got {count}"
                raise ValueError(msg)

    @property
    def is_empty(self) -> bool:
        return not self.history and not self.data
