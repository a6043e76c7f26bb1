"""Ranking session lifecycle: load, save and idle refresh."""

from __future__ import annotations

import logging
import time

from collections.abc import Callable
from dataclasses import dataclass, field

from cmdrank.domain.ranking.repositories import RankStateRepository
from cmdrank.domain.ranking.services import RankEngine
from cmdrank.shared.constants import DEFAULT_AUTO_UPDATE_INTERVAL_SECONDS

logger = logging.getLogger(__name__)

# =============================================================================
# SESSION
# =============================================================================


@dataclass
class RankSession:
    """Holds the process-wide engine and moves its state to and from storage."""

    engine: RankEngine
    repository: RankStateRepository
    _initialized: bool = field(default=False, init=False)

    @property
    def initialized(self) -> bool:
        return self._initialized

    def initialize(self) -> None:
        """Load saved state and build the ranking. Later calls do nothing.

        Raises:
            CorruptStateError: If the saved state exists but cannot be decoded.
        """
        if self._initialized:
            return

        state = self.repository.load()
        if state is not None:
            self.engine.load_initial(state.history, state.data)
            logger.info(
                "Restored %d history and %d usage entries",
                len(state.history),
                len(state.data),
            )
        self.engine.rebuild()
        self._initialized = True

    def save(self) -> None:
        """Persist the engine's current history and usage data."""
        self.repository.save(self.engine.export_state())


# =============================================================================
# AUTO REFRESH
# =============================================================================


@dataclass
class AutoRefresh:
    """Refreshes the ranking once per idle period.

    The host calls ``touch`` on user activity and ``poll`` from its loop.
    After ``interval`` seconds without activity, ``poll`` runs
    ``update_if_needed`` once; it will not run again until the next
    ``touch`` starts a new idle period.
    """

    engine: RankEngine
    interval: float = DEFAULT_AUTO_UPDATE_INTERVAL_SECONDS
    enabled: bool = True
    clock: Callable[[], float] = time.monotonic
    _idle_since: float | None = field(default=None, init=False)
    _fired: bool = field(default=False, init=False)

    def touch(self) -> None:
        self._idle_since = self.clock()
        self._fired = False

    def poll(self) -> bool:
        """Returns True if this call refreshed the ranking."""
        if not self.enabled or self._fired:
            return False
        now = self.clock()
        if self._idle_since is None:
            self._idle_since = now
            return False
        if now - self._idle_since < self.interval:
            return False
        self._fired = True
        refreshed = self.engine.update_if_needed()
        if refreshed:
            logger.debug("Idle refresh picked up a changed command set")
        return refreshed
