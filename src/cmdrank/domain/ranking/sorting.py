"""The Sorting Rule shared by full sorts and local re-settling."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from cmdrank.domain.ranking.entities import RankEntry


def sorts_before(entry: RankEntry, other: RankEntry) -> bool:
    """Return True if *entry* ranks ahead of *other*.

    Priority order:
        1. Higher usage count (never-invoked counts as 0).
        2. Shorter command name.
        3. Lexicographically smaller command name.
    """
    if entry.uses != other.uses:
        return entry.uses > other.uses
    if len(entry.command_id) != len(other.command_id):
        return len(entry.command_id) < len(other.command_id)
    return entry.command_id < other.command_id


def rank_key(entry: RankEntry) -> tuple[int, int, str]:
    """Sort key inducing the same total order as ``sorts_before``."""
    return (-entry.uses, len(entry.command_id), str(entry.command_id))
