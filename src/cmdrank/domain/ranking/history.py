"""Recency history: folding it into a ranked list and reading it back."""

from __future__ import annotations

from collections.abc import Sequence

from cmdrank.domain.ranking.entities import RankedList
from cmdrank.shared.types import CommandId


def fold_history(
    ranked: RankedList, history: Sequence[CommandId], limit: int
) -> None:
    """Pull the commands of *history* to the front of *ranked*, in place.

    *history* is most-recent-first and is truncated to *limit* entries.
    It is applied least-recent first, so once done the head of *ranked*
    matches the history order. Commands missing from *ranked* are skipped.
    """
    for command_id in reversed(history[:limit]):
        position = ranked.position_of(command_id)
        if position is None:
            continue
        ranked.move_to_front(position)


def extract_history(ranked: RankedList, limit: int) -> tuple[CommandId, ...]:
    """The first *limit* command ids of *ranked*, most-recent-first."""
    return tuple(ranked.head(limit))
