"""
BigPdfMerge - PDF Backend

Contracts for the three collaborators the editor core relies on, and the
``PdfBackend`` bundle that groups them behind an explicit initialization
step:

- Decoder: opens source bytes and copies pages out of them
- Renderer: rasterizes one page into a preview image
- Composer: collects copied pages and serializes the output document
"""

import importlib
import shutil
from dataclasses import dataclass, field
from typing import Any, Protocol

from bigpdfmerge.editor.page_model import PreviewBlob
from bigpdfmerge.utils.exceptions import DependencyError, NotReadyError
from bigpdfmerge.utils.logger import logger


@dataclass
class DocumentHandle:
    """An opened source document.

    Attributes:
        name: Display name of the source
        data: The bytes the document was opened from
        document: Backend-specific document object
        stream: Backing stream kept alive while the document is open
    """

    name: str
    data: bytes = field(repr=False)
    document: Any = field(default=None, repr=False)
    stream: Any = field(default=None, repr=False)


class Decoder(Protocol):
    def open(self, data: bytes, name: str = "") -> DocumentHandle:
        """Open source bytes. Raises DecodeError."""
        ...

    def page_count(self, handle: DocumentHandle) -> int: ...

    def copy_page(self, handle: DocumentHandle, index: int, accumulator: Any) -> Any:
        """Copy the page at zero-based ``index`` for ``accumulator``. Raises CopyError."""
        ...

    def close(self, handle: DocumentHandle) -> None: ...


class Renderer(Protocol):
    def render_page(self, handle: DocumentHandle, page_number: int) -> PreviewBlob:
        """Render 1-indexed ``page_number``. Raises RenderError."""
        ...

    def release(self, handle: DocumentHandle) -> None:
        """Drop any per-document state once a document is fully rendered."""
        ...


class Composer(Protocol):
    def create_accumulator(self) -> Any: ...

    def append_copied_page(self, accumulator: Any, page: Any) -> None: ...

    def serialize(self, accumulator: Any) -> bytes: ...

    def discard(self, accumulator: Any) -> None: ...


class PdfBackend:
    """Decoder, Renderer and Composer behind a readiness flag.

    Nothing may use the backend before ``initialize()`` succeeded; callers
    check with ``require_ready()`` which raises NotReadyError.
    """

    def __init__(
        self,
        decoder: Decoder,
        renderer: Renderer,
        composer: Composer,
        required_modules: tuple[str, ...] = (),
        required_programs: tuple[str, ...] = (),
    ) -> None:
        """Initialize the backend bundle.

        Args:
            decoder: Source decoder
            renderer: Preview renderer
            composer: Output composer
            required_modules: Python modules that must be importable
            required_programs: Executables that must be on PATH
        """
        self.decoder = decoder
        self.renderer = renderer
        self.composer = composer
        self._required_modules = required_modules
        self._required_programs = required_programs
        self._ready = False

    @property
    def ready(self) -> bool:
        return self._ready

    def initialize(self) -> "PdfBackend":
        """Check every dependency and mark the backend ready.

        Returns:
            self, for chaining

        Raises:
            DependencyError: If a module or program is missing
        """
        for module in self._required_modules:
            try:
                importlib.import_module(module)
            except ImportError as e:
                raise DependencyError(module, str(e)) from e

        for program in self._required_programs:
            if shutil.which(program) is None:
                raise DependencyError(program, "not found on PATH")

        self._ready = True
        logger.info("PDF backend initialized")
        return self

    def require_ready(self) -> None:
        if not self._ready:
            raise NotReadyError()

    def close(self) -> None:
        """Release renderer resources (temporary files)."""
        close = getattr(self.renderer, "close", None)
        if close is not None:
            close()
        self._ready = False

    @classmethod
    def default(
        cls,
        preview_width: int | None = None,
        preview_timeout: int | None = None,
        previews: bool = True,
    ) -> "PdfBackend":
        """Build the pikepdf + pdftoppm backend.

        Args:
            preview_width: Thumbnail width in pixels
            preview_timeout: Seconds allowed per rendered page
            previews: When False, use a renderer that produces empty previews

        Returns:
            An uninitialized PdfBackend
        """
        from bigpdfmerge.services.pdf_backend import PikepdfComposer, PikepdfDecoder
        from bigpdfmerge.services.thumbnail_renderer import BlankRenderer, PdftoppmRenderer

        if previews:
            options = {"width": preview_width, "timeout": preview_timeout}
            renderer: Renderer = PdftoppmRenderer(
                **{key: value for key, value in options.items() if value}
            )
            programs: tuple[str, ...] = ("pdftoppm",)
        else:
            renderer = BlankRenderer()
            programs = ()

        return cls(
            PikepdfDecoder(),
            renderer,
            PikepdfComposer(),
            required_modules=("pikepdf", "PIL"),
            required_programs=programs,
        )
