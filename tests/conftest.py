"""Pytest configuration for bigpdfmerge tests.

Provides real pikepdf-generated PDFs for backend tests and in-memory fake
collaborators for the ingestion and export pipelines, so failures can be
injected per file and per page without touching poppler or pikepdf.
"""

import io

import pikepdf
import pytest

from bigpdfmerge.editor.page_model import PageRecord, PageStore, PreviewBlob, SourceFile
from bigpdfmerge.services.backend import DocumentHandle, PdfBackend
from bigpdfmerge.utils.exceptions import CopyError, DecodeError, RenderError

# ---------------------------------------------------------------------------
# Real PDFs
# ---------------------------------------------------------------------------


def make_pdf_bytes(num_pages: int = 3, base_width: int = 600) -> bytes:
    """Create a PDF whose page N has MediaBox width ``base_width + N``."""
    pdf = pikepdf.Pdf.new()
    for i in range(num_pages):
        page = pikepdf.Page(
            pikepdf.Dictionary(
                Type=pikepdf.Name.Page,
                MediaBox=[0, 0, base_width + i + 1, 792],
                Contents=pdf.make_stream(f"BT /F1 12 Tf 100 700 Td (Page {i + 1}) Tj ET".encode()),
            )
        )
        pdf.pages.append(page)
    buffer = io.BytesIO()
    pdf.save(buffer)
    pdf.close()
    return buffer.getvalue()


def page_widths(data: bytes) -> list[int]:
    """Read back the MediaBox widths of every page of a PDF."""
    with pikepdf.open(io.BytesIO(data)) as pdf:
        return [int(page.mediabox[2]) for page in pdf.pages]


@pytest.fixture
def pdf_factory():
    """Build real PDF bytes: ``pdf_factory(pages, base_width)``."""
    return make_pdf_bytes


@pytest.fixture
def read_widths():
    return page_widths


# ---------------------------------------------------------------------------
# Fake collaborators
# ---------------------------------------------------------------------------


def fake_source(name: str, pages: int, tag: str = "") -> SourceFile:
    """A source understood by FakeDecoder: ``b"<tag or name>:<pages>"``."""
    return SourceFile(name=name, data=f"{tag or name}:{pages}".encode())


class FakeDecoder:
    """Decoder over ``b"tag:count"`` sources; ``b"BAD..."`` fails to open."""

    def __init__(self, fail_copy: set[tuple[str, int]] | None = None) -> None:
        self.fail_copy = fail_copy or set()
        self.opened: list[str] = []
        self.closed: list[str] = []

    def open(self, data: bytes, name: str = "") -> DocumentHandle:
        if data.startswith(b"BAD"):
            raise DecodeError(name, "corrupt")
        tag, count = data.decode().rsplit(":", 1)
        self.opened.append(name)
        return DocumentHandle(name=name, data=data, document=(tag, int(count)))

    def page_count(self, handle: DocumentHandle) -> int:
        return handle.document[1]

    def copy_page(self, handle: DocumentHandle, index: int, accumulator):
        tag, count = handle.document
        if index >= count or (tag, index + 1) in self.fail_copy:
            raise CopyError(handle.name, index + 1, "copy failed")
        return (tag, index + 1)

    def close(self, handle: DocumentHandle) -> None:
        self.closed.append(handle.name)


class FakeRenderer:
    """Renders every page except the ``(name, page)`` pairs in ``fail``."""

    def __init__(self, fail: set[tuple[str, int]] | None = None) -> None:
        self.fail = fail or set()
        self.calls: list[tuple[str, int]] = []
        self.released: list[str] = []

    def render_page(self, handle: DocumentHandle, page_number: int) -> PreviewBlob:
        self.calls.append((handle.name, page_number))
        if (handle.name, page_number) in self.fail:
            raise RenderError(handle.name, page_number, "render failed")
        return PreviewBlob(data=b"png", width=10, height=14)

    def release(self, handle: DocumentHandle) -> None:
        self.released.append(handle.name)


class FakeComposer:
    """Accumulates ``(tag, page)`` tuples; ``serialize`` keeps the final list."""

    def __init__(self) -> None:
        self.output: list[tuple[str, int]] = []
        self.discarded = 0

    def create_accumulator(self) -> list:
        return []

    def append_copied_page(self, accumulator: list, page) -> None:
        accumulator.append(page)

    def serialize(self, accumulator: list) -> bytes:
        self.output = list(accumulator)
        return repr(self.output).encode()

    def discard(self, accumulator: list) -> None:
        self.discarded += 1


@pytest.fixture
def fake_backend():
    """Build an initialized fake backend.

    ``fake_backend(render_fail=..., copy_fail=...)``
    """

    def _build(render_fail=None, copy_fail=None, ready=True) -> PdfBackend:
        backend = PdfBackend(FakeDecoder(copy_fail), FakeRenderer(render_fail), FakeComposer())
        if ready:
            backend.initialize()
        return backend

    return _build


@pytest.fixture
def source():
    return fake_source


# ---------------------------------------------------------------------------
# Stores
# ---------------------------------------------------------------------------


def make_record(
    name: str, page: int, selected: bool = True, source: SourceFile | None = None
) -> PageRecord:
    return PageRecord(
        id=f"{name}#{page}",
        source_name=name,
        source_page_index=page,
        source=source or fake_source(name, page),
        selected=selected,
    )


@pytest.fixture
def record():
    return make_record


@pytest.fixture
def store_factory():
    """``store_factory(n, selected=...)`` builds a store of pages ``doc.pdf#1..n``."""

    def _build(count: int = 5, selected: bool = False) -> PageStore:
        store = PageStore(export_name="test")
        src = fake_source("doc.pdf", count)
        store.append(make_record("doc.pdf", i, selected, src) for i in range(1, count + 1))
        return store

    return _build
