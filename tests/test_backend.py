"""Tests for PdfBackend initialization."""

import pytest

from bigpdfmerge.services import backend as backend_module
from bigpdfmerge.services.backend import PdfBackend
from bigpdfmerge.services.pdf_backend import PikepdfComposer, PikepdfDecoder
from bigpdfmerge.services.thumbnail_renderer import BlankRenderer, PdftoppmRenderer
from bigpdfmerge.utils.exceptions import DependencyError, NotReadyError


class TestPdfBackend:
    def test_not_ready_until_initialized(self, fake_backend):
        backend = fake_backend(ready=False)
        assert backend.ready is False
        with pytest.raises(NotReadyError):
            backend.require_ready()

        assert backend.initialize() is backend
        assert backend.ready is True
        backend.require_ready()

    def test_missing_module(self, fake_backend):
        built = fake_backend(ready=False)
        backend = PdfBackend(
            built.decoder,
            built.renderer,
            built.composer,
            required_modules=("bigpdfmerge_no_such_module",),
        )
        with pytest.raises(DependencyError, match="bigpdfmerge_no_such_module"):
            backend.initialize()
        assert backend.ready is False

    def test_missing_program(self, fake_backend, monkeypatch):
        monkeypatch.setattr(backend_module.shutil, "which", lambda name: None)
        built = fake_backend(ready=False)
        backend = PdfBackend(
            built.decoder, built.renderer, built.composer, required_programs=("pdftoppm",)
        )
        with pytest.raises(DependencyError, match="pdftoppm"):
            backend.initialize()

    def test_close_unsets_ready(self, fake_backend):
        backend = fake_backend()
        backend.close()
        assert backend.ready is False

    def test_default_backend(self):
        backend = PdfBackend.default(preview_width=120)
        assert isinstance(backend.decoder, PikepdfDecoder)
        assert isinstance(backend.composer, PikepdfComposer)
        assert isinstance(backend.renderer, PdftoppmRenderer)
        assert backend.renderer.width == 120
        assert backend.ready is False

    def test_default_backend_without_previews(self):
        backend = PdfBackend.default(previews=False).initialize()
        assert isinstance(backend.renderer, BlankRenderer)
        assert backend.ready is True
