"""Infrastructure-layer constants.

Eliminates magic strings across all infrastructure modules.
"""

from __future__ import annotations

# =============================================================================
# SAVE FILE
# =============================================================================

SAVE_FILE_ENCODING = "utf-8"
JSON_INDENT = 2

# =============================================================================
# COMMAND SOURCES
# =============================================================================

PATH_ENV_VAR = "PATH"
COMMENT_PREFIX = "#"
