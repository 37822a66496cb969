"""
BigPdfMerge - Page Preview Renderer

Renders page previews with pdftoppm (poppler-utils), one page per call,
and validates the result with Pillow. Source bytes are written once per
opened document to a private temporary directory that is removed on
``close()``.
"""

import io
import logging
import shutil
import subprocess
import tempfile
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from bigpdfmerge.constants import (
    DEFAULT_PREVIEW_WIDTH,
    MAX_PREVIEW_WIDTH,
    MIN_PREVIEW_WIDTH,
    PDFTOPPM_TIMEOUT_SECONDS,
)
from bigpdfmerge.editor.page_model import PreviewBlob
from bigpdfmerge.services.backend import DocumentHandle
from bigpdfmerge.utils.exceptions import RenderError

logger = logging.getLogger(__name__)


class PdftoppmRenderer:
    """Renders single pages to PNG previews through pdftoppm."""

    def __init__(
        self,
        width: int = DEFAULT_PREVIEW_WIDTH,
        timeout: int = PDFTOPPM_TIMEOUT_SECONDS,
    ) -> None:
        """Initialize the renderer.

        Args:
            width: Preview width in pixels (height keeps the aspect ratio)
            timeout: Seconds before a pdftoppm call is abandoned
        """
        self._width = max(MIN_PREVIEW_WIDTH, min(MAX_PREVIEW_WIDTH, width))
        self._timeout = timeout
        self._tmpdir: Path | None = None
        # id(handle) -> (handle, path); the handle is kept so the id is not reused
        self._sources: dict[int, tuple[DocumentHandle, Path]] = {}

    @property
    def width(self) -> int:
        return self._width

    def _source_path(self, handle: DocumentHandle) -> Path:
        """Write the handle's bytes to disk once and return the file path."""
        entry = self._sources.get(id(handle))
        if entry is not None and entry[0] is handle:
            return entry[1]

        if self._tmpdir is None:
            self._tmpdir = Path(tempfile.mkdtemp(prefix="bigpdfmerge-"))
        path = self._tmpdir / f"source-{len(self._sources)}-{id(handle)}.pdf"
        path.write_bytes(handle.data)
        self._sources[id(handle)] = (handle, path)
        return path

    def render_page(self, handle: DocumentHandle, page_number: int) -> PreviewBlob:
        """Render one page of an opened document.

        Args:
            handle: Document opened by the decoder
            page_number: Page to render (1-indexed)

        Returns:
            PNG preview

        Raises:
            RenderError: If pdftoppm fails or produces an unreadable image
        """
        try:
            source = self._source_path(handle)
        except OSError as e:
            raise RenderError(handle.name, page_number, str(e)) from e

        prefix = source.with_name(f"{source.stem}-p{page_number}")
        output = prefix.with_suffix(".png")
        cmd = [
            "pdftoppm",
            "-png",
            "-f",
            str(page_number),
            "-l",
            str(page_number),
            "-singlefile",
            "-scale-to-x",
            str(self._width),
            "-scale-to-y",
            "-1",
            str(source),
            str(prefix),
        ]

        try:
            result = subprocess.run(cmd, capture_output=True, timeout=self._timeout)
        except (OSError, subprocess.TimeoutExpired) as e:
            raise RenderError(handle.name, page_number, str(e)) from e

        if result.returncode != 0:
            stderr = result.stderr.decode(errors="replace").strip()
            raise RenderError(
                handle.name, page_number, stderr or f"pdftoppm exited with {result.returncode}"
            )

        try:
            data = output.read_bytes()
            with Image.open(io.BytesIO(data)) as img:
                img.load()
                width, height = img.size
        except (OSError, UnidentifiedImageError) as e:
            raise RenderError(handle.name, page_number, str(e)) from e
        finally:
            output.unlink(missing_ok=True)

        logger.debug("Rendered %s page %d (%dx%d)", handle.name, page_number, width, height)
        return PreviewBlob(data=data, width=width, height=height)

    def release(self, handle: DocumentHandle) -> None:
        """Delete the temporary copy of a document that is no longer rendered."""
        entry = self._sources.pop(id(handle), None)
        if entry is not None:
            entry[1].unlink(missing_ok=True)

    def close(self) -> None:
        """Remove the temporary directory and everything in it."""
        self._sources.clear()
        if self._tmpdir is not None:
            shutil.rmtree(self._tmpdir, ignore_errors=True)
            self._tmpdir = None


class BlankRenderer:
    """Renderer for hosts without pdftoppm: every page gets an empty preview."""

    def render_page(self, handle: DocumentHandle, page_number: int) -> PreviewBlob:
        return PreviewBlob()

    def release(self, handle: DocumentHandle) -> None:
        pass
