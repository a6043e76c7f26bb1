"""Centralized defaults for cmdrank. Overridable via configuration."""

from __future__ import annotations

# =============================================================================
# RANKING
# =============================================================================

DEFAULT_HISTORY_LENGTH = 7

# =============================================================================
# AUTO UPDATE
# =============================================================================

DEFAULT_AUTO_UPDATE = True
DEFAULT_AUTO_UPDATE_INTERVAL_SECONDS = 60.0

# =============================================================================
# PERSISTENCE
# =============================================================================

DEFAULT_SAVE_FILE = "~/.cmdrank-items"
STATE_SCHEMA_VERSION = 1

# =============================================================================
# CONFIGURATION
# =============================================================================

DEFAULT_CONFIG_FILE = "cmdrank.toml"
DEFAULT_LOG_LEVEL = "INFO"
