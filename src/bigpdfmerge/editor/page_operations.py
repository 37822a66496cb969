"""
BigPdfMerge - Page Operations

Functions for selecting, reordering and removing pages of a PageStore.
All operations are synchronous and replace the whole sequence at once.
"""

from collections.abc import Iterable
from enum import Enum

from bigpdfmerge.editor.page_model import PageRecord, PageStore
from bigpdfmerge.utils.format_utils import format_page_count
from bigpdfmerge.utils.i18n import _
from bigpdfmerge.utils.logger import logger
from bigpdfmerge.utils.notifications import Notifier


class AreaSelectMode(Enum):
    """How an area (rubber-band) selection changes the pages it covers.

    Area selection is additive: pages outside the rectangle always keep
    their current state, so ``ADD`` grows the selection and never replaces it.
    """

    ADD = "add"
    REMOVE = "remove"
    TOGGLE = "toggle"


# ---------------------------------------------------------------------------
# Selection
# ---------------------------------------------------------------------------


def toggle_page(store: PageStore, page_id: str) -> bool:
    """Flip the selection flag of one page.

    Args:
        store: The session store
        page_id: Page to toggle

    Returns:
        True if the page exists and was toggled
    """
    index = store.index_of(page_id)
    if index is None:
        return False

    pages = list(store.pages)
    pages[index] = pages[index].with_selected(not pages[index].selected)
    store.replace(pages)
    return True


def _set_all(store: PageStore, selected: bool) -> int:
    pages = [p.with_selected(selected) for p in store.pages]
    if any(new is not old for new, old in zip(pages, store.pages)):
        store.replace(pages)
    return len(store.selected_pages)


def select_all(store: PageStore, notifier: Notifier | None = None) -> int:
    """Select every page.

    Returns:
        Number of selected pages afterwards
    """
    count = _set_all(store, True)
    if notifier:
        notifier.success(
            _("All pages selected ({pages})").format(pages=format_page_count(count))
        )
    logger.info(f"Selected all pages ({count})")
    return count


def deselect_all(store: PageStore, notifier: Notifier | None = None) -> int:
    """Deselect every page.

    Returns:
        Number of selected pages afterwards (always 0)
    """
    cleared = len(store.selected_pages)
    count = _set_all(store, False)
    if notifier:
        notifier.success(
            _("All pages deselected ({pages})").format(pages=format_page_count(cleared))
        )
    logger.info(f"Deselected all pages ({cleared} cleared)")
    return count


def select_by_area(
    store: PageStore,
    page_ids: Iterable[str],
    mode: AreaSelectMode = AreaSelectMode.ADD,
    notifier: Notifier | None = None,
) -> int:
    """Apply an area selection to the pages whose ids were hit.

    Hit-testing happens in the front end; this only receives the ids of
    pages that intersect the drawn rectangle. Pages not listed are left
    untouched.

    Args:
        store: The session store
        page_ids: Ids of the pages inside the rectangle
        mode: ADD, REMOVE or TOGGLE
        notifier: Optional notifier for the user-facing summary

    Returns:
        Number of pages in the store that matched an id
    """
    wanted = set(page_ids)
    matched = 0
    pages: list[PageRecord] = []
    for page in store.pages:
        if page.id in wanted:
            matched += 1
            if mode is AreaSelectMode.ADD:
                page = page.with_selected(True)
            elif mode is AreaSelectMode.REMOVE:
                page = page.with_selected(False)
            else:
                page = page.with_selected(not page.selected)
        pages.append(page)

    if matched:
        store.replace(pages)

    action = {
        AreaSelectMode.ADD: _("selected"),
        AreaSelectMode.REMOVE: _("deselected"),
        AreaSelectMode.TOGGLE: _("toggled"),
    }[mode]
    if notifier:
        notifier.success(_("{count} page(s) {action}").format(count=matched, action=action))
    logger.debug(f"Area selection ({mode.value}) matched {matched} page(s)")
    return matched


# ---------------------------------------------------------------------------
# Ordering
# ---------------------------------------------------------------------------


def _move_pages(store: PageStore, page_ids: Iterable[str], step: int) -> bool:
    """Move each page one step, one adjacent swap at a time.

    Pages are processed nearest-to-the-boundary first and are looked up
    again before every swap, because earlier swaps shift positions.
    """
    pages = list(store.pages)
    positions = {p.id: i for i, p in enumerate(pages)}
    targets = [pid for pid in dict.fromkeys(page_ids) if pid in positions]
    if not targets:
        return False

    targets.sort(key=positions.__getitem__, reverse=step > 0)

    moved = False
    for page_id in targets:
        index = next(i for i, p in enumerate(pages) if p.id == page_id)
        neighbour = index + step
        if 0 <= neighbour < len(pages):
            pages[index], pages[neighbour] = pages[neighbour], pages[index]
            moved = True

    if moved:
        store.replace(pages)
    return moved


def move_pages_up(store: PageStore, page_ids: Iterable[str]) -> bool:
    """Move the given pages one position toward the start.

    A contiguous block shifts by one; scattered pages each move at most one
    position. A page already first stays where it is.

    Returns:
        True if the sequence changed
    """
    moved = _move_pages(store, page_ids, -1)
    if moved:
        logger.info("Moved page(s) up")
    return moved


def move_pages_down(store: PageStore, page_ids: Iterable[str]) -> bool:
    """Move the given pages one position toward the end.

    Returns:
        True if the sequence changed
    """
    moved = _move_pages(store, page_ids, 1)
    if moved:
        logger.info("Moved page(s) down")
    return moved


def reorder_pages(store: PageStore, from_index: int, to_index: int) -> bool:
    """Move one page to a new position (drag and drop).

    The page at ``from_index`` is removed first; ``to_index`` is a position
    in the shortened sequence.

    Args:
        store: The session store
        from_index: Current position of the dragged page
        to_index: Drop position after removal

    Returns:
        True if the sequence changed
    """
    count = len(store)
    if from_index == to_index:
        return False
    if not (0 <= from_index < count and 0 <= to_index < count):
        logger.debug(f"Ignoring reorder {from_index} -> {to_index} (size {count})")
        return False

    pages = list(store.pages)
    page = pages.pop(from_index)
    pages.insert(to_index, page)
    store.replace(pages)
    logger.debug(f"Reordered page {page.id}: {from_index} -> {to_index}")
    return True


# ---------------------------------------------------------------------------
# Removal
# ---------------------------------------------------------------------------


def remove_page(store: PageStore, page_id: str, notifier: Notifier | None = None) -> bool:
    """Remove a single page from the session.

    Returns:
        True if the page existed
    """
    if page_id not in store:
        return False
    store.replace(p for p in store.pages if p.id != page_id)
    if notifier:
        notifier.success(_("1 page(s) removed"))
    logger.info(f"Removed page {page_id}")
    return True


def remove_selected_pages(store: PageStore, notifier: Notifier | None = None) -> int:
    """Remove every selected page, keeping the others in order.

    Returns:
        Number of pages removed
    """
    remaining = [p for p in store.pages if not p.selected]
    removed = len(store) - len(remaining)
    if removed:
        store.replace(remaining)
    if notifier:
        notifier.success(_("{count} page(s) removed").format(count=removed))
    logger.info(f"Removed {removed} selected page(s)")
    return removed
