"""Repository protocols for ranking state."""

from __future__ import annotations

from typing import Protocol

from cmdrank.domain.ranking.value_objects import RankState


class RankStateRepository(Protocol):
    """Persistence port for history and usage data."""

    def load(self) -> RankState | None:
        """Load saved state, or None if nothing has been saved."""
        ...

    def save(self, state: RankState) -> None:
        """Persist state, replacing whatever was saved before."""
        ...
