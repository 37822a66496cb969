"""
BigPdfMerge - Internationalization Module

Loads the "bigpdfmerge" gettext catalog and exposes ``_``. Messages stay
untranslated when no catalog is installed or the locale cannot be set.
"""

import gettext
import locale
import os
import sys
from collections.abc import Callable

DOMAIN = "bigpdfmerge"

LOCALE_DIRS = (
    "/usr/share/locale",
    os.path.join(sys.prefix, "share", "locale"),
    os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "locale"),
)


def _load_translation() -> gettext.NullTranslations:
    """Return the catalog from the first directory that ships one."""
    try:
        locale.setlocale(locale.LC_ALL, "")
    except locale.Error:
        pass

    for locale_dir in LOCALE_DIRS:
        if gettext.find(DOMAIN, locale_dir):
            return gettext.translation(DOMAIN, localedir=locale_dir)
    return gettext.NullTranslations()


_: Callable[[str], str] = _load_translation().gettext
