#!/usr/bin/env python3
"""
BigPdfMerge - Configuration Module

This module contains all configuration constants and paths used by the application.
"""

import datetime
import logging
import os
from typing import Final

from bigpdfmerge.utils.i18n import _

# ============================================================================
# Application Constants
# ============================================================================

APP_NAME: Final[str] = "Big PDF Merge"
APP_ID: Final[str] = "br.com.biglinux.bigpdfmerge"
APP_VERSION: Final[str] = "1.0.0"
APP_DESCRIPTION: Final[str] = _("Combine selected pages from many PDF files into one document")


# ============================================================================
# Configuration Directory
# ============================================================================

CONFIG_DIR: Final[str] = os.path.expanduser("~/.config/bigpdfmerge")
CONFIG_FILE_PATH: Final[str] = os.path.join(CONFIG_DIR, "settings.json")


# ============================================================================
# Logging Configuration
# ============================================================================

LOG_LEVEL: int = logging.INFO
LOG_FORMAT: Final[str] = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOGGER_NAME: Final[str] = "BigPdfMerge"


# ============================================================================
# Export Configuration
# ============================================================================

EXPORT_NAME_PREFIX: Final[str] = "merged_document"
EXPORT_EXTENSION: Final[str] = "pdf"
EXPORT_MEDIA_TYPE: Final[str] = "application/pdf"


def default_export_name(
    today: datetime.date | None = None, prefix: str = EXPORT_NAME_PREFIX
) -> str:
    """Build the default export name for a new session.

    Args:
        today: Date to embed (defaults to the current local date)
        prefix: Name prefix

    Returns:
        Name such as ``merged_document_2024-05-31`` (no extension)
    """
    today = today or datetime.date.today()
    return f"{prefix}_{today.isoformat()}"
