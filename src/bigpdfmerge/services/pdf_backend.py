"""
BigPdfMerge - pikepdf Backend

Decoder and Composer implementations on top of pikepdf. Source pages are
appended to the output with ``Pdf.pages.append``, which copies the page and
its resources; stream data is read from the source when the output is
saved, so sources must stay open until ``serialize`` returns.
"""

import io
import logging

import pikepdf

from bigpdfmerge.services.backend import DocumentHandle
from bigpdfmerge.utils.exceptions import CopyError, DecodeError
from bigpdfmerge.utils.i18n import _

logger = logging.getLogger(__name__)


def _friendly_error(e: Exception) -> str:
    """Map pikepdf exceptions to user-friendly messages."""
    if isinstance(e, pikepdf.PasswordError):
        return _("the file is password-protected")
    if isinstance(e, pikepdf.PdfError):
        return _("the file appears to be damaged or is not a PDF")
    return str(e)


class PikepdfDecoder:
    """Opens PDF bytes and hands out pages for copying."""

    def open(self, data: bytes, name: str = "") -> DocumentHandle:
        """Open a PDF from memory.

        Args:
            data: Raw PDF bytes
            name: Display name used in error messages

        Returns:
            DocumentHandle wrapping a pikepdf.Pdf

        Raises:
            DecodeError: If the bytes are not a readable, unencrypted PDF
        """
        stream = io.BytesIO(data)
        try:
            pdf = pikepdf.open(stream)
        except (pikepdf.PasswordError, pikepdf.PdfError, ValueError, OSError) as e:
            logger.warning("Failed to open %s: %s", name, e)
            raise DecodeError(name, _friendly_error(e)) from e

        logger.debug("Opened %s (%d pages)", name, len(pdf.pages))
        return DocumentHandle(name=name, data=data, document=pdf, stream=stream)

    def page_count(self, handle: DocumentHandle) -> int:
        return len(handle.document.pages)

    def copy_page(
        self, handle: DocumentHandle, index: int, accumulator: pikepdf.Pdf
    ) -> pikepdf.Page:
        """Fetch the page at zero-based ``index`` for appending to ``accumulator``.

        Raises:
            CopyError: If the page does not exist or cannot be read
        """
        pages = handle.document.pages
        if index < 0 or index >= len(pages):
            raise CopyError(
                handle.name,
                index + 1,
                _("the source has only {count} page(s)").format(count=len(pages)),
            )
        try:
            return pages[index]
        except pikepdf.PdfError as e:
            raise CopyError(handle.name, index + 1, _friendly_error(e)) from e

    def close(self, handle: DocumentHandle) -> None:
        if handle.document is not None:
            handle.document.close()
            handle.document = None
        handle.stream = None


class PikepdfComposer:
    """Collects copied pages into a new PDF and serializes it."""

    def create_accumulator(self) -> pikepdf.Pdf:
        return pikepdf.Pdf.new()

    def append_copied_page(self, accumulator: pikepdf.Pdf, page: pikepdf.Page) -> None:
        """Append a page taken from an open source document.

        Raises:
            CopyError: If the page cannot be transplanted
        """
        try:
            accumulator.pages.append(page)
        except (pikepdf.PdfError, TypeError, ValueError) as e:
            raise CopyError("", len(accumulator.pages) + 1, _friendly_error(e)) from e

    def serialize(self, accumulator: pikepdf.Pdf) -> bytes:
        """Write the output document to bytes."""
        buffer = io.BytesIO()
        accumulator.save(buffer)
        logger.info("Serialized output PDF (%d pages)", len(accumulator.pages))
        return buffer.getvalue()

    def discard(self, accumulator: pikepdf.Pdf) -> None:
        accumulator.close()
