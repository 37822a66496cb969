"""
BigPdfMerge - Ingestion Pipeline

Turns a batch of source files into page records appended to a PageStore.

Files are opened one after another and their pages rendered strictly in
order: page N+1 is not requested before page N has been appended. This
bounds the number of rasterized pages held in memory at any time. A source
that cannot be opened, or a page that cannot be rendered, is reported and
skipped without affecting the rest of the batch.
"""

import asyncio
import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from bigpdfmerge.editor.page_model import PageRecord, PageStore, SourceFile, new_page_id
from bigpdfmerge.services.backend import PdfBackend
from bigpdfmerge.utils.exceptions import DecodeError, RenderError
from bigpdfmerge.utils.i18n import _
from bigpdfmerge.utils.notifications import Notifier

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IngestFailure:
    """A source or page that could not be imported.

    Attributes:
        source_name: Name of the source file
        page_number: Failed page (1-indexed), or None if the whole file failed
        reason: Short description of the cause
    """

    source_name: str
    page_number: int | None
    reason: str


@dataclass
class IngestResult:
    """Outcome of one ingestion batch."""

    pages_added: int = 0
    page_ids: list[str] = field(default_factory=list)
    failures: list[IngestFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        """False when the whole batch produced no page."""
        return self.pages_added > 0

    @property
    def failed_sources(self) -> list[str]:
        return [f.source_name for f in self.failures if f.page_number is None]


async def ingest_files(
    store: PageStore,
    backend: PdfBackend,
    files: Iterable[SourceFile],
    notifier: Notifier | None = None,
) -> IngestResult:
    """Import every page of every file, in file order then page order.

    New records are appended selected. Concurrent calls on the same store
    must be serialized by the caller.

    Args:
        store: Session store receiving the new records
        backend: Initialized PDF backend
        files: Source files in upload order
        notifier: Receives one message per failure and a final summary

    Returns:
        IngestResult with the number of pages added and every failure

    Raises:
        NotReadyError: If the backend was not initialized
    """
    backend.require_ready()
    notifier = notifier if notifier is not None else Notifier()
    result = IngestResult()

    store.busy = True
    try:
        for source in files:
            await _ingest_source(store, backend, source, result, notifier)
    finally:
        store.busy = False

    if result.ok:
        notifier.success(
            _("{count} pages added successfully.").format(count=result.pages_added)
        )
    else:
        notifier.error(_("No pages could be processed from the selected files."))

    logger.info(
        "Ingestion finished: %d page(s) added, %d failure(s)",
        result.pages_added,
        len(result.failures),
    )
    return result


async def _ingest_source(
    store: PageStore,
    backend: PdfBackend,
    source: SourceFile,
    result: IngestResult,
    notifier: Notifier,
) -> None:
    """Open one source and append a record for every page that renders."""
    decoder = backend.decoder
    renderer = backend.renderer

    try:
        handle = await asyncio.to_thread(decoder.open, source.data, source.name)
    except DecodeError as e:
        result.failures.append(IngestFailure(source.name, None, e.reason or e.message))
        notifier.error(
            _(
                "Failed to process {name}. The file might be corrupted or password-protected."
            ).format(name=source.name)
        )
        return

    try:
        page_count = decoder.page_count(handle)
        logger.debug("Ingesting %s (%d pages)", source.name, page_count)

        for page_number in range(1, page_count + 1):
            try:
                preview = await asyncio.to_thread(renderer.render_page, handle, page_number)
            except RenderError as e:
                result.failures.append(
                    IngestFailure(source.name, page_number, e.reason or e.message)
                )
                notifier.error(
                    _("Failed to process page {page} of {name}").format(
                        page=page_number, name=source.name
                    )
                )
                continue

            record = PageRecord(
                id=new_page_id(source.name, page_number),
                source_name=source.name,
                source_page_index=page_number,
                source=source,
                preview=preview,
                selected=True,
            )
            store.append([record])
            result.pages_added += 1
            result.page_ids.append(record.id)
    finally:
        renderer.release(handle)
        decoder.close(handle)
