"""RankState JSON serialization.

The save file is a versioned JSON document::

    {
      "version": 1,
      "history": ["most-recent", "..."],
      "data": [["command", 3], ...]
    }

``history`` is written before ``data``. Validation is done by a pydantic
schema so every malformed document fails with a precise reason.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from cmdrank.domain.ranking.value_objects import RankState
from cmdrank.infrastructure.constants import JSON_INDENT
from cmdrank.shared.constants import STATE_SCHEMA_VERSION
from cmdrank.shared.types import CommandId

# =============================================================================
# SCHEMA
# =============================================================================


class StateDocument(BaseModel):
    """On-disk schema of the save file."""

    model_config = ConfigDict(extra="forbid")

    version: int
    history: list[str] = []
    data: list[tuple[str, int]] = []

    @field_validator("version")
    @classmethod
    def _check_version(cls, value: int) -> int:
        if value != STATE_SCHEMA_VERSION:
            msg = f"unsupported schema version {value}"
            raise ValueError(msg)
        return value

    @field_validator("data")
    @classmethod
    def _check_data(cls, value: list[tuple[str, int]]) -> list[tuple[str, int]]:
        seen: set[str] = set()
        for command_id, count in value:
            if count < 1:
                msg = f"count for {command_id!r} must be at least 1"
                raise ValueError(msg)
            if command_id in seen:
                msg = f"duplicate entry for {command_id!r}"
                raise ValueError(msg)
            seen.add(command_id)
        return value


# =============================================================================
# SERIALIZE
# =============================================================================


def serialize(state: RankState) -> str:
    """Serialize a RankState to a pretty-printed JSON string."""
    document = StateDocument(
        version=STATE_SCHEMA_VERSION,
        history=[str(c) for c in state.history],
        data=[(str(c), count) for c, count in state.data],
    )
    return document.model_dump_json(indent=JSON_INDENT)


# =============================================================================
# DESERIALIZE
# =============================================================================


def deserialize(text: str) -> RankState | None:
    """Deserialize a JSON string into a RankState.

    Returns None for empty or whitespace-only input (nothing saved yet).

    Raises:
        ValueError: If the content is not a valid save document.
    """
    if not text.strip():
        return None

    try:
        document = StateDocument.model_validate_json(text)
    except ValidationError as e:
        msg = _describe(e)
        raise ValueError(msg) from e

    return RankState(
        history=tuple(CommandId(c) for c in document.history),
        data=tuple((CommandId(c), count) for c, count in document.data),
    )


def _describe(error: ValidationError) -> str:
    """Condense a pydantic error into one line."""
    parts: list[str] = []
    for detail in error.errors():
        location = ".".join(str(p) for p in detail["loc"]) or "document"
        parts.append(f"{location}: {detail['msg']}")
    return "; ".join(parts)
