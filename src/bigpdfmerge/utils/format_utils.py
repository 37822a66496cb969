"""
BigPdfMerge - Format Utilities Module

This module provides shared utility functions for formatting values.
"""

from bigpdfmerge.utils.i18n import _


def format_file_size(size_bytes: int) -> str:
    """Format file size in human-readable format.

    Args:
        size_bytes: Size in bytes

    Returns:
        Formatted size string (e.g., "1.5 MB")
    """
    if size_bytes <= 0:
        return "0 B"

    units = ["B", "KB", "MB", "GB", "TB"]

    size = float(size_bytes)
    unit_index = 0

    while size >= 1024 and unit_index < len(units) - 1:
        size /= 1024
        unit_index += 1

    if unit_index == 0 or size >= 100:
        return f"{int(size)} {units[unit_index]}"
    elif size >= 10:
        return f"{size:.1f} {units[unit_index]}"
    else:
        return f"{size:.2f} {units[unit_index]}"


def format_page_count(count: int) -> str:
    """Format a page count for status messages ("1 page", "3 pages")."""
    if count == 1:
        return _("1 page")
    return _("{count} pages").format(count=count)
