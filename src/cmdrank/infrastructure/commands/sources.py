"""Host command enumeration: fixed lists and executables on ``$PATH``."""

from __future__ import annotations

import logging
import os

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path

from cmdrank.infrastructure.constants import COMMENT_PREFIX, PATH_ENV_VAR
from cmdrank.shared.types import CommandId

logger = logging.getLogger(__name__)

# =============================================================================
# STATIC
# =============================================================================


@dataclass
class StaticCommandSource:
    """A fixed set of commands, with optional named subsets per scope.

    An unknown scope enumerates nothing.
    """

    commands: Sequence[str]
    scopes: Mapping[str, Sequence[str]] = field(
        default_factory=dict[str, Sequence[str]],
    )

    @classmethod
    def from_lines(cls, lines: Iterable[str]) -> StaticCommandSource:
        """One command per line; blank lines and ``#`` comments are skipped."""
        commands: list[str] = []
        for line in lines:
            name = line.strip()
            if not name or name.startswith(COMMENT_PREFIX):
                continue
            commands.append(name)
        return cls(commands=commands)

    def list_commands(self, scope: str | None = None) -> list[CommandId]:
        names = self.commands if scope is None else self.scopes.get(scope, ())
        return [CommandId(n) for n in names]


# =============================================================================
# PATH
# =============================================================================


@dataclass
class PathCommandSource:
    """Executables found on a ``PATH``-style search path.

    Earlier directories shadow later ones, as the shell resolves them.
    A scope restricts enumeration to one directory of the search path.
    """

    search_path: str | None = None

    def directories(self) -> list[Path]:
        raw = self.search_path
        if raw is None:
            raw = os.environ.get(PATH_ENV_VAR, "")
        return [Path(p) for p in raw.split(os.pathsep) if p]

    def list_commands(self, scope: str | None = None) -> list[CommandId]:
        directories = self.directories()
        if scope is not None:
            directories = [d for d in directories if str(d) == scope]

        found: dict[CommandId, None] = {}
        for directory in directories:
            for name in _executables_in(directory):
                found.setdefault(CommandId(name), None)
        return list(found)


def _executables_in(directory: Path) -> list[str]:
    """Names of executable files in *directory*, sorted."""
    if not directory.is_dir():
        return []
    try:
        candidates = sorted(directory.iterdir())
    except PermissionError:
        logger.warning("Cannot read %s, skipping", directory)
        return []
    return [
        p.name for p in candidates if p.is_file() and os.access(p, os.X_OK)
    ]
