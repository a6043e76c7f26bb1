"""File-based persistence for ranking state."""

from __future__ import annotations

import fcntl
import logging

from dataclasses import dataclass
from pathlib import Path

from cmdrank.domain.ranking.value_objects import RankState
from cmdrank.infrastructure.constants import SAVE_FILE_ENCODING
from cmdrank.infrastructure.storage.serializer import deserialize, serialize
from cmdrank.shared.exceptions import CorruptStateError

logger = logging.getLogger(__name__)


@dataclass
class FileStateStore:
    """Implements RankStateRepository via a JSON file with file locking."""

    path: Path

    def load(self) -> RankState | None:
        """Load saved state, or None if the file is missing or empty.

        Raises:
            CorruptStateError: If the file has content that does not decode.
        """
        if not self.path.exists():
            logger.info("No save file at %s, starting fresh", self.path)
            return None

        with self.path.open("r", encoding=SAVE_FILE_ENCODING) as f:
            fcntl.flock(f, fcntl.LOCK_SH)
            try:
                text = f.read()
            finally:
                fcntl.flock(f, fcntl.LOCK_UN)

        try:
            state = deserialize(text)
        except ValueError as e:
            raise CorruptStateError(self.path, str(e)) from e

        if state is None:
            logger.info("Save file %s is empty, starting fresh", self.path)
        return state

    def save(self, state: RankState) -> None:
        """Persist state, creating parent directories as needed."""
        self.path.parent.mkdir(parents=True, exist_ok=True)

        text = serialize(state)
        with self.path.open("w", encoding=SAVE_FILE_ENCODING) as f:
            fcntl.flock(f, fcntl.LOCK_EX)
            try:
                f.write(text)
                f.write("\n")
            finally:
                fcntl.flock(f, fcntl.LOCK_UN)
        logger.debug(
            "Saved %d history and %d usage entries to %s",
            len(state.history),
            len(state.data),
            self.path,
        )
