"""
BigPdfMerge - Numeric Constants

Simple numeric constants with ZERO internal imports to avoid circular dependencies.
For application-level constants (strings, paths), use config.py.
"""

from typing import Final

# ============================================================================
# Preview Rendering
# ============================================================================

DEFAULT_PREVIEW_WIDTH: Final[int] = 200
MIN_PREVIEW_WIDTH: Final[int] = 32
MAX_PREVIEW_WIDTH: Final[int] = 2000

# ============================================================================
# Subprocess Timeouts (seconds)
# ============================================================================

PDFTOPPM_TIMEOUT_SECONDS: Final[int] = 60
