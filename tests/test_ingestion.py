"""Tests for the ingestion pipeline."""

import asyncio

import pytest

from bigpdfmerge.editor.page_model import PageStore, SourceFile
from bigpdfmerge.services.ingestion import ingest_files
from bigpdfmerge.utils.exceptions import NotReadyError
from bigpdfmerge.utils.notifications import NotificationLevel, Notifier


def _ingest(store, backend, files, notifier=None):
    return asyncio.run(ingest_files(store, backend, files, notifier))


class TestIngestFiles:
    def test_pages_from_all_files(self, fake_backend, source):
        store = PageStore(export_name="out")
        result = _ingest(store, fake_backend(), [source("a.pdf", 2), source("b.pdf", 3)])
        assert result.ok
        assert result.pages_added == 5
        assert len(store) == 5
        assert [(p.source_name, p.source_page_index) for p in store.pages] == [
            ("a.pdf", 1),
            ("a.pdf", 2),
            ("b.pdf", 1),
            ("b.pdf", 2),
            ("b.pdf", 3),
        ]
        assert result.page_ids == [p.id for p in store.pages]

    def test_new_pages_are_selected(self, fake_backend, source):
        store = PageStore(export_name="out")
        _ingest(store, fake_backend(), [source("a.pdf", 3)])
        assert all(p.selected for p in store.pages)

    def test_pages_keep_source_and_preview(self, fake_backend, source):
        store = PageStore(export_name="out")
        src = source("a.pdf", 1)
        _ingest(store, fake_backend(), [src])
        page = store.pages[0]
        assert page.source is src
        assert page.preview.width == 10

    def test_appends_after_existing_pages(self, fake_backend, source):
        store = PageStore(export_name="out")
        backend = fake_backend()
        _ingest(store, backend, [source("a.pdf", 1)])
        _ingest(store, backend, [source("a.pdf", 2)])
        assert [p.source_page_index for p in store.pages] == [1, 1, 2]
        assert len({p.id for p in store.pages}) == 3

    def test_failing_file_is_skipped(self, fake_backend, source):
        store = PageStore(export_name="out")
        notifier = Notifier()
        files = [source("a.pdf", 2), SourceFile("broken.pdf", b"BAD"), source("c.pdf", 1)]
        result = _ingest(store, fake_backend(), files, notifier)

        assert result.pages_added == 3
        assert {p.source_name for p in store.pages} == {"a.pdf", "c.pdf"}
        assert result.failed_sources == ["broken.pdf"]
        errors = notifier.messages(NotificationLevel.ERROR)
        assert len(errors) == 1
        assert "broken.pdf" in errors[0]
        assert notifier.messages(NotificationLevel.SUCCESS) == ["3 pages added successfully."]

    def test_failing_page_is_skipped(self, fake_backend, source):
        store = PageStore(export_name="out")
        notifier = Notifier()
        backend = fake_backend(render_fail={("a.pdf", 2)})
        result = _ingest(store, backend, [source("a.pdf", 3)], notifier)

        assert [p.source_page_index for p in store.pages] == [1, 3]
        assert len(result.failures) == 1
        assert result.failures[0].page_number == 2
        assert result.failed_sources == []
        assert notifier.messages(NotificationLevel.ERROR) == ["Failed to process page 2 of a.pdf"]

    def test_pages_rendered_in_order(self, fake_backend, source):
        backend = fake_backend()
        _ingest(PageStore(export_name="out"), backend, [source("a.pdf", 3), source("b.pdf", 1)])
        assert backend.renderer.calls == [("a.pdf", 1), ("a.pdf", 2), ("a.pdf", 3), ("b.pdf", 1)]

    def test_each_page_appended_before_next_render(self, fake_backend, source):
        store = PageStore(export_name="out")
        backend = fake_backend()
        sizes = []
        store.connect(lambda pages: sizes.append((len(pages), len(backend.renderer.calls))))
        _ingest(store, backend, [source("a.pdf", 3)])
        assert sizes == [(1, 1), (2, 2), (3, 3)]

    def test_handles_closed(self, fake_backend, source):
        backend = fake_backend(render_fail={("b.pdf", 1)})
        _ingest(PageStore(export_name="out"), backend, [source("a.pdf", 1), source("b.pdf", 1)])
        assert backend.decoder.closed == ["a.pdf", "b.pdf"]
        assert backend.renderer.released == ["a.pdf", "b.pdf"]

    def test_zero_pages_reports_error(self, fake_backend):
        store = PageStore(export_name="out")
        notifier = Notifier()
        result = _ingest(store, fake_backend(), [SourceFile("x.pdf", b"BAD")], notifier)
        assert result.ok is False
        assert len(store) == 0
        assert notifier.history[-1].message == (
            "No pages could be processed from the selected files."
        )

    def test_empty_batch(self, fake_backend):
        result = _ingest(PageStore(export_name="out"), fake_backend(), [])
        assert result.pages_added == 0
        assert result.failures == []

    def test_busy_flag_cleared(self, fake_backend, source):
        store = PageStore(export_name="out")
        backend = fake_backend()
        seen = []
        store.connect(lambda pages: seen.append(store.busy))
        _ingest(store, backend, [source("a.pdf", 1)])
        assert seen == [True]
        assert store.busy is False

    def test_backend_not_ready(self, fake_backend, source):
        store = PageStore(export_name="out")
        with pytest.raises(NotReadyError):
            _ingest(store, fake_backend(ready=False), [source("a.pdf", 1)])
        assert len(store) == 0
