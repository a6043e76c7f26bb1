"""Domain-specific types that prevent primitive obsession."""

from __future__ import annotations

# =============================================================================
# NEWTYPES
# =============================================================================


class CommandId(str):
    """Identifier of an invokable command."""