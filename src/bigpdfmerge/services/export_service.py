"""
BigPdfMerge - Export Service Module

Builds the output document from the selected pages of a PageStore.

Selected pages are grouped by source name. Groups are written in the order
their first page appears on screen; inside a group pages are written in
ascending source page order. Each group's source is opened once. Sources
that share a name form a single group and are all read from the file of
the group's first displayed page.

Export never changes the store. A source that cannot be reopened or a page
that cannot be copied is reported and skipped; the document is still
produced from everything that succeeded.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from bigpdfmerge.config import EXPORT_EXTENSION, EXPORT_MEDIA_TYPE
from bigpdfmerge.editor.page_model import PageRecord, PageStore, SourceFile
from bigpdfmerge.services.backend import DocumentHandle, PdfBackend
from bigpdfmerge.utils.exceptions import (
    CopyError,
    DecodeError,
    EmptySelectionError,
    ValidationError,
)
from bigpdfmerge.utils.format_utils import format_file_size, format_page_count
from bigpdfmerge.utils.i18n import _
from bigpdfmerge.utils.notifications import Notifier

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExportFailure:
    """A group or page left out of the exported document."""

    source_name: str
    page_number: int | None
    reason: str


@dataclass(frozen=True)
class ExportArtifact:
    """The serialized output document.

    Attributes:
        filename: Download name, ``<export name>.pdf``
        data: PDF bytes
        page_count: Number of pages written
        media_type: MIME type of ``data``
    """

    filename: str
    data: bytes = field(repr=False)
    page_count: int = 0
    media_type: str = EXPORT_MEDIA_TYPE

    @property
    def size_bytes(self) -> int:
        return len(self.data)

    def save(self, directory: str | Path) -> Path:
        """Write the artifact into a directory.

        Args:
            directory: Target directory (created if missing)

        Returns:
            Path of the written file
        """
        directory = Path(directory)
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / self.filename
        path.write_bytes(self.data)
        logger.info("Saved %s (%s)", path, format_file_size(self.size_bytes))
        return path


@dataclass
class ExportResult:
    """Outcome of an export run."""

    artifact: ExportArtifact
    failures: list[ExportFailure] = field(default_factory=list)

    @property
    def pages_exported(self) -> int:
        return self.artifact.page_count

    @property
    def ok(self) -> bool:
        return self.pages_exported > 0


@dataclass
class ExportGroup:
    """Selected pages that share one source name.

    Attributes:
        source_name: The shared name
        source: File the whole group is copied from
        pages: Members in ascending source page order
    """

    source_name: str
    source: SourceFile
    pages: list[PageRecord] = field(default_factory=list)


def export_filename(name: str, extension: str = EXPORT_EXTENSION) -> str:
    """Build the artifact file name from an export name.

    Raises:
        ValidationError: If the name is empty
    """
    name = (name or "").strip()
    if not name:
        raise ValidationError("export_name", name, "must not be empty")
    suffix = f".{extension}"
    if name.lower().endswith(suffix):
        return name
    return f"{name}{suffix}"


def group_selected_pages(pages: tuple[PageRecord, ...]) -> list[ExportGroup]:
    """Partition the selected pages of a sequence into export groups.

    Args:
        pages: Full ordered sequence (display order)

    Returns:
        Groups in order of first appearance, members sorted by source page
    """
    positions = {page.id: i for i, page in enumerate(pages)}
    groups: dict[str, ExportGroup] = {}

    for page in pages:
        if not page.selected:
            continue
        group = groups.get(page.source_name)
        if group is None:
            group = groups[page.source_name] = ExportGroup(page.source_name, page.source)
        group.pages.append(page)

    for group in groups.values():
        group.pages.sort(key=lambda p: (p.source_page_index, positions[p.id]))

    return list(groups.values())


def _copy_record(backend: PdfBackend, handle: DocumentHandle, record: PageRecord, acc: Any):
    page = backend.decoder.copy_page(handle, record.source_page_index - 1, acc)
    backend.composer.append_copied_page(acc, page)


async def export_selection(
    store: PageStore,
    backend: PdfBackend,
    name: str | None = None,
    notifier: Notifier | None = None,
) -> ExportResult:
    """Compose the selected pages into one PDF.

    Args:
        store: Session store (read only)
        backend: Initialized PDF backend
        name: Export name; defaults to ``store.export_name``
        notifier: Receives failures and the final summary

    Returns:
        ExportResult with the artifact and every failure

    Raises:
        NotReadyError: If the backend was not initialized
        EmptySelectionError: If no page is selected
    """
    backend.require_ready()
    notifier = notifier if notifier is not None else Notifier()

    groups = group_selected_pages(store.pages)
    if not groups:
        notifier.error(_("No pages selected for export"))
        raise EmptySelectionError()

    filename = export_filename(store.export_name if name is None else name)
    decoder = backend.decoder
    composer = backend.composer
    failures: list[ExportFailure] = []
    handles: list[DocumentHandle] = []
    exported = 0

    store.busy = True
    accumulator = composer.create_accumulator()
    try:
        for group in groups:
            try:
                handle = await asyncio.to_thread(decoder.open, group.source.data, group.source_name)
            except DecodeError as e:
                failures.append(ExportFailure(group.source_name, None, e.reason or e.message))
                notifier.error(
                    _("Failed to process {name} for export.").format(name=group.source_name)
                )
                continue
            handles.append(handle)

            for record in group.pages:
                try:
                    await asyncio.to_thread(_copy_record, backend, handle, record, accumulator)
                except CopyError as e:
                    failures.append(
                        ExportFailure(
                            record.source_name, record.source_page_index, e.reason or e.message
                        )
                    )
                    notifier.warning(
                        _("Failed to copy page {page} of {name}").format(
                            page=record.source_page_index, name=record.source_name
                        )
                    )
                    continue
                exported += 1

        data = await asyncio.to_thread(composer.serialize, accumulator)
    finally:
        # Sources back the output's stream data until it is serialized
        for handle in handles:
            decoder.close(handle)
        composer.discard(accumulator)
        store.busy = False

    artifact = ExportArtifact(filename=filename, data=data, page_count=exported)
    result = ExportResult(artifact=artifact, failures=failures)

    if not result.ok:
        notifier.error(_("Export produced an empty document."))
    elif failures:
        notifier.warning(
            _("PDF exported with {count} problem(s): {pages}").format(
                count=len(failures), pages=format_page_count(exported)
            )
        )
    else:
        notifier.success(
            _("PDF exported successfully! ({pages})").format(pages=format_page_count(exported))
        )

    logger.info(
        "Exported %s: %d page(s) from %d group(s), %d failure(s)",
        filename,
        exported,
        len(groups),
        len(failures),
    )
    return result
