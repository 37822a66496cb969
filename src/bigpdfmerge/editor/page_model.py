"""
BigPdfMerge - Page Model

Data models for the editing session: source files, rendered previews,
page records and the ordered page store.
"""

import uuid
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass, field, replace
from pathlib import Path

from bigpdfmerge.config import default_export_name
from bigpdfmerge.utils.exceptions import SessionClosedError, ValidationError


@dataclass(frozen=True)
class SourceFile:
    """Raw bytes of one uploaded document.

    Attributes:
        name: Display name of the file (not unique)
        data: Original file contents, kept for the whole session
    """

    name: str
    data: bytes = field(repr=False)

    @classmethod
    def from_path(cls, path: str | Path) -> "SourceFile":
        """Read a file from disk.

        Args:
            path: Path to the file

        Returns:
            New SourceFile named after the file's basename
        """
        path = Path(path)
        return cls(name=path.name, data=path.read_bytes())

    @property
    def size_bytes(self) -> int:
        return len(self.data)


@dataclass(frozen=True)
class PreviewBlob:
    """Rendered preview image of one page.

    Attributes:
        data: Encoded image bytes (empty when previews are disabled)
        width: Image width in pixels
        height: Image height in pixels
        media_type: MIME type of ``data``
    """

    data: bytes = field(default=b"", repr=False)
    width: int = 0
    height: int = 0
    media_type: str = "image/png"


@dataclass(frozen=True)
class PageRecord:
    """One page of one source, tracked independently of its siblings.

    Records are immutable; a selection change produces a new record with
    the same id so that unaffected records keep their identity.

    Attributes:
        id: Session-unique identifier, stable across reorder and selection
        source_name: Display name of the originating source
        source_page_index: Page number within the source (1-indexed)
        preview: Rendered preview owned by the renderer
        source: Original source bytes, used again at export time
        selected: Whether the page takes part in export and bulk operations
    """

    id: str
    source_name: str
    source_page_index: int
    source: SourceFile = field(repr=False, compare=False)
    preview: PreviewBlob = field(default_factory=PreviewBlob, repr=False, compare=False)
    selected: bool = True

    def with_selected(self, selected: bool) -> "PageRecord":
        """Return a record with the given selection flag (self if unchanged)."""
        if self.selected == selected:
            return self
        return replace(self, selected=selected)

    def to_dict(self) -> dict:
        """Convert to dictionary for display and logging.

        Returns:
            Dictionary with the record's identity, provenance and selection
        """
        return {
            "id": self.id,
            "source_name": self.source_name,
            "source_page_index": self.source_page_index,
            "selected": self.selected,
        }


def new_page_id(source_name: str, page_number: int) -> str:
    """Generate a session-unique page id."""
    return f"{source_name}-{page_number}-{uuid.uuid4().hex[:12]}"


class PageStore:
    """Ordered sequence of page records for one editing session.

    The sequence is held as a tuple and every change swaps in a whole new
    tuple, so observers only ever see complete snapshots. Listeners are
    called with the new snapshot after each change.
    """

    def __init__(self, export_name: str | None = None) -> None:
        """Create an empty session.

        Args:
            export_name: Initial export name (defaults to a dated name)
        """
        self._pages: tuple[PageRecord, ...] = ()
        self._listeners: list[Callable[[tuple[PageRecord, ...]], None]] = []
        self._closed = False
        self._export_name = ""
        self.export_name = export_name if export_name is not None else default_export_name()
        # Informative only: set while an ingestion or export is running
        self.busy = False

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def pages(self) -> tuple[PageRecord, ...]:
        return self._pages

    @property
    def selected_pages(self) -> tuple[PageRecord, ...]:
        return tuple(p for p in self._pages if p.selected)

    @property
    def selected_ids(self) -> list[str]:
        return [p.id for p in self._pages if p.selected]

    @property
    def closed(self) -> bool:
        return self._closed

    def __len__(self) -> int:
        return len(self._pages)

    def __iter__(self) -> Iterator[PageRecord]:
        return iter(self._pages)

    def __contains__(self, page_id: object) -> bool:
        return any(p.id == page_id for p in self._pages)

    def index_of(self, page_id: str) -> int | None:
        """Get the current position of a page.

        Args:
            page_id: Page identifier

        Returns:
            Position (0-based), or None if the id is not in the sequence
        """
        for i, page in enumerate(self._pages):
            if page.id == page_id:
                return i
        return None

    def get(self, page_id: str) -> PageRecord | None:
        index = self.index_of(page_id)
        return None if index is None else self._pages[index]

    # ------------------------------------------------------------------
    # Export name
    # ------------------------------------------------------------------

    @property
    def export_name(self) -> str:
        return self._export_name

    @export_name.setter
    def export_name(self, name: str) -> None:
        name = (name or "").strip()
        if not name:
            raise ValidationError("export_name", name, "must not be empty")
        self._export_name = name

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def append(self, records: Iterable[PageRecord]) -> int:
        """Append records to the end of the sequence.

        Args:
            records: New page records, in display order

        Returns:
            Number of records appended
        """
        new = tuple(records)
        if new:
            self.replace(self._pages + new)
        return len(new)

    def replace(self, pages: Iterable[PageRecord]) -> None:
        """Swap in a new sequence.

        Raises:
            SessionClosedError: If the session was closed
            ValueError: If two records share an id
        """
        if self._closed:
            raise SessionClosedError()
        new_pages = tuple(pages)
        ids = [p.id for p in new_pages]
        if len(set(ids)) != len(ids):
            raise ValueError("Duplicate page id in sequence")
        self._pages = new_pages
        for callback in list(self._listeners):
            callback(new_pages)

    def connect(self, callback: Callable[[tuple[PageRecord, ...]], None]) -> None:
        """Register a listener called with each new snapshot."""
        if callback not in self._listeners:
            self._listeners.append(callback)

    def disconnect(self, callback: Callable[[tuple[PageRecord, ...]], None]) -> None:
        if callback in self._listeners:
            self._listeners.remove(callback)

    def close(self) -> None:
        """End the session and release every record and listener."""
        self._pages = ()
        self._listeners.clear()
        self._closed = True
