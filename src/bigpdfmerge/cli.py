#!/usr/bin/env python3
"""
BigPdfMerge CLI: compose one PDF from pages of many.

Usage:
    python -m bigpdfmerge <command> [options]

Commands:
    info        List every page of the given files, in display order
    compose     Import files, optionally reorder/select pages, export one PDF

Examples:
    # Merge everything, default dated name
    bigpdfmerge-cli compose a.pdf b.pdf -o out/

    # Pick display positions 1-3 and 7, then name the output
    bigpdfmerge-cli compose a.pdf b.pdf -o out/ --pages 1-3,7 --name report

    # Rearrange the display order before exporting
    bigpdfmerge-cli compose a.pdf b.pdf -o out/ --order 4,1,2,3

    # Hosts without poppler-utils
    bigpdfmerge-cli info a.pdf --no-preview
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from bigpdfmerge.config import (
    APP_DESCRIPTION,
    APP_NAME,
    APP_VERSION,
    EXPORT_NAME_PREFIX,
    default_export_name,
)
from bigpdfmerge.editor.page_model import PageStore, SourceFile
from bigpdfmerge.editor.page_operations import (
    AreaSelectMode,
    deselect_all,
    reorder_pages,
    select_by_area,
)
from bigpdfmerge.services.backend import PdfBackend
from bigpdfmerge.services.export_service import export_selection
from bigpdfmerge.services.ingestion import IngestResult, ingest_files
from bigpdfmerge.utils.config_manager import ConfigManager, get_config_manager
from bigpdfmerge.utils.exceptions import BigPdfMergeError
from bigpdfmerge.utils.format_utils import format_file_size, format_page_count
from bigpdfmerge.utils.i18n import _
from bigpdfmerge.utils.logger import logger as app_logger
from bigpdfmerge.utils.notifications import Notifier

# ---------------------------------------------------------------------------
# Page list parsers
# ---------------------------------------------------------------------------


def _parse_page_list(text: str) -> list[int]:
    """Parse a page specification string into a sorted list of page numbers.

    Supports: "3", "1-5", "1,3,7", "1-3,7,10-12"

    Args:
        text: Page specification string.

    Returns:
        Sorted list of 1-indexed page numbers.
    """
    pages: set[int] = set()
    for part in text.split(","):
        part = part.strip()
        if not part:
            continue
        try:
            if "-" in part:
                start_s, end_s = part.split("-", 1)
                s, e = int(start_s.strip()), int(end_s.strip())
                pages.update(range(s, e + 1))
            else:
                pages.add(int(part))
        except ValueError:
            raise ValueError(
                f"Invalid page specification '{part}'. "
                "Use numbers and ranges like '1-5' or '1,3,7'."
            ) from None
    return sorted(p for p in pages if p >= 1)


def _parse_order(text: str, count: int) -> list[int]:
    """Parse a new display order such as "3,1,2".

    Args:
        text: Comma-separated display positions (1-indexed)
        count: Number of pages currently in the session

    Returns:
        The positions in their new order

    Raises:
        ValueError: If the list is not a permutation of 1..count
    """
    try:
        order = [int(part.strip()) for part in text.split(",") if part.strip()]
    except ValueError:
        raise ValueError(f"Invalid order '{text}'. Use positions like '3,1,2'.") from None
    if sorted(order) != list(range(1, count + 1)):
        raise ValueError(
            f"Order must list every position from 1 to {count} exactly once, got '{text}'"
        )
    return order


def _apply_order(store: PageStore, order: list[int]) -> None:
    """Rearrange the store so that display position i holds old position order[i]."""
    wanted = [store.pages[pos - 1].id for pos in order]
    for target, page_id in enumerate(wanted):
        current = store.index_of(page_id)
        if current is not None:
            reorder_pages(store, current, target)


# ---------------------------------------------------------------------------
# Argument parser construction
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with subcommands."""
    p = argparse.ArgumentParser(
        prog="bigpdfmerge-cli",
        description=APP_DESCRIPTION,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    p.add_argument("-v", "--verbose", action="store_true", help=_("Verbose logging (DEBUG)"))
    p.add_argument(
        "--version", action="version", version=f"{APP_NAME} {APP_VERSION}"
    )
    p.add_argument(
        "--config", type=Path, default=None, help=_("Settings file (default: ~/.config)")
    )

    sub = p.add_subparsers(dest="command", help=_("Available commands"))

    # --- info ---
    info_p = sub.add_parser("info", help=_("List the pages of the given files"))
    info_p.add_argument("inputs", nargs="+", type=Path, help=_("Input PDF files (in order)"))
    info_p.add_argument(
        "--no-preview", action="store_true", help=_("Skip preview rendering (no pdftoppm)")
    )

    # --- compose ---
    compose_p = sub.add_parser("compose", help=_("Compose selected pages into one PDF"))
    compose_p.add_argument("inputs", nargs="+", type=Path, help=_("Input PDF files (in order)"))
    compose_p.add_argument(
        "-o", "--output-dir", type=Path, default=Path("."), help=_("Output directory")
    )
    compose_p.add_argument(
        "--name", type=str, default=None, help=_("Export name (default: dated name)")
    )
    compose_p.add_argument(
        "--pages",
        type=str,
        default=None,
        help=_("Display positions to export (e.g. '1-3,7'). Default: all."),
    )
    compose_p.add_argument(
        "--order",
        type=str,
        default=None,
        help=_("New display order applied before selection (e.g. '3,1,2')"),
    )
    compose_p.add_argument(
        "--no-preview", action="store_true", help=_("Skip preview rendering (no pdftoppm)")
    )

    return p


# ---------------------------------------------------------------------------
# Command handlers
# ---------------------------------------------------------------------------


def _load_sources(paths: list[Path]) -> list[SourceFile] | None:
    for path in paths:
        if not path.is_file():
            print(f"Error: {path} not found", file=sys.stderr)
            return None
    return [SourceFile.from_path(path) for path in paths]


def _make_backend(args, config: ConfigManager) -> PdfBackend:
    return PdfBackend.default(
        preview_width=config.get("preview.width"),
        preview_timeout=config.get("preview.timeout_seconds"),
        previews=not args.no_preview,
    ).initialize()


async def _ingest(args, config: ConfigManager, store: PageStore, notifier: Notifier):
    sources = _load_sources(args.inputs)
    if sources is None:
        return None, None
    backend = _make_backend(args, config)
    result: IngestResult = await ingest_files(store, backend, sources, notifier)
    return backend, result


async def _run_info(args, config: ConfigManager, logger: logging.Logger) -> int:
    store = PageStore()
    notifier = Notifier()
    backend, result = await _ingest(args, config, store, notifier)
    if result is None:
        return 1
    logger.debug("Listing %d page(s) from %d file(s)", len(store), len(args.inputs))
    try:
        for position, page in enumerate(store.pages, start=1):
            size = f"{page.preview.width}x{page.preview.height}" if page.preview.data else "-"
            print(f"{position:4d}  {page.source_name}  page {page.source_page_index}  {size}")
        print(f"{format_page_count(len(store))}, {len(result.failures)} failure(s)")
        return 0 if result.ok else 1
    finally:
        backend.close()
        store.close()


async def _run_compose(args, config: ConfigManager, logger: logging.Logger) -> int:
    store = PageStore(
        export_name=args.name
        or default_export_name(prefix=config.get("export.name_prefix", EXPORT_NAME_PREFIX))
    )
    notifier = Notifier()
    backend, result = await _ingest(args, config, store, notifier)
    if result is None:
        return 1

    try:
        if not result.ok:
            return 1

        logger.debug("Session %s holds %d page(s)", store.export_name, len(store))

        if args.order:
            _apply_order(store, _parse_order(args.order, len(store)))
            logger.info("Applied display order %s", args.order)

        if args.pages:
            positions = _parse_page_list(args.pages)
            ids = [store.pages[pos - 1].id for pos in positions if pos <= len(store)]
            deselect_all(store)
            select_by_area(store, ids, AreaSelectMode.ADD)

        export = await export_selection(store, backend, notifier=notifier)
        path = export.artifact.save(args.output_dir)
        logger.info("Wrote %s", path)
        print(
            f"Exported: {format_page_count(export.pages_exported)} "
            f"({format_file_size(export.artifact.size_bytes)}) → {path}"
        )
        for failure in export.failures:
            print(f"Skipped: {failure.source_name} {failure.reason}", file=sys.stderr)
        return 0 if export.ok else 1
    finally:
        backend.close()
        store.close()


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%H:%M:%S",
    )
    app_logger.setLevel(level)
    logger = logging.getLogger("bigpdfmerge.cli")

    config = ConfigManager(str(args.config)) if args.config else get_config_manager()

    handlers = {
        "info": _run_info,
        "compose": _run_compose,
    }

    handler = handlers.get(args.command)
    if handler is None:
        parser.print_help()
        return 1

    try:
        return asyncio.run(handler(args, config, logger))
    except (BigPdfMergeError, ValueError) as e:
        logger.error(str(e))
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
