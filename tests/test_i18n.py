"""Tests for the gettext setup."""

import gettext

from bigpdfmerge.utils import i18n


class TestI18n:
    def test_untranslated_text_passes_through(self):
        assert i18n._("No pages selected for export") == "No pages selected for export"

    def test_module_exports_only_translation_helpers(self):
        assert not hasattr(i18n, "N_")
        assert not hasattr(i18n, "setup_i18n")

    def test_missing_catalog_falls_back(self, monkeypatch):
        monkeypatch.setattr(i18n, "LOCALE_DIRS", ())
        translation = i18n._load_translation()
        assert isinstance(translation, gettext.NullTranslations)
        assert translation.gettext("abc") == "abc"
