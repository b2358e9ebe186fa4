# region Docstring
"""
clipkeep.pagination
Fixed-size window of history entries shown to the presentation layer.
Overview:
- PaginationWindow keeps an ordered list of slots (newest first), each bound to a
    non-favorite entry. Scrolling rebinds the existing slots to other entries instead of
    rebuilding the list.
Contents:
- Classes:
    - PaginationWindow:
        bind_new, promote, unbind, step_older, step_newer, reset, resize, visible.
Design notes:
- New entries always land in slot 0 of whatever page is showing, even after the user
    scrolled to an older page. Over time reclaiming trims the window back to the newest
    page. This keeps the work per copy constant and is intended behaviour.
- Bound slots above 2 * page_size are reclaimed down to one page; when the last slot
    is released the window refills from the newest end of the registry.
- Growing page_size refills a window showing the newest page. A window scrolled to an
    older page keeps its slots until the user steps back or the page is reset.
- The window never reorders the registry.
"""
# endregion
# region Imports
import logging
from typing import List, Optional

from clipkeep.models import Entry
from clipkeep.registry import EntryRegistry

# endregion

logger = logging.getLogger("clipkeep").getChild("pagination")


class PaginationWindow:
    """
    Slots bound to the currently visible history entries.

    Attributes:
        page_size (int): Number of slots in one page.
    """

    def __init__(self, registry: EntryRegistry, page_size: int = 50):
        if page_size < 1:
            raise ValueError("page_size must be at least 1")
        self.registry = registry
        self.page_size = page_size
        self._slots: List[Entry] = []

    def __len__(self) -> int:
        return len(self._slots)

    def visible(self) -> List[Entry]:
        """Bound entries, slot 0 first."""
        return list(self._slots)

    def is_bound(self, entry: Entry) -> bool:
        return self._index(entry) is not None

    def _index(self, entry: Entry) -> Optional[int]:
        for i, bound in enumerate(self._slots):
            if bound is entry:
                return i
        return None

    # region Binding
    def bind_new(self, entry: Entry) -> None:
        """Bind a freshly created entry into slot 0."""
        if entry.favorite:
            return
        self._slots.insert(0, entry)
        self._maybe_reclaim()

    def promote(self, entry: Entry) -> None:
        """Move `entry` to slot 0, binding it if it is not visible."""
        if entry.favorite:
            return
        index = self._index(entry)
        if index is not None:
            del self._slots[index]
            self._slots.insert(0, entry)
        else:
            self.bind_new(entry)

    def unbind(self, entry: Entry) -> None:
        index = self._index(entry)
        if index is None:
            return
        del self._slots[index]
        self._maybe_restore()

    def reset(self) -> None:
        """Release every slot and refill from the newest end."""
        self._slots = []
        self._maybe_restore()

    def resize(self, page_size: int) -> None:
        if page_size < 1:
            raise ValueError("page_size must be at least 1")
        self.page_size = page_size
        if len(self._slots) > page_size:
            del self._slots[page_size:]
        elif len(self._slots) < page_size and self._at_newest():
            # Grow the newest page; a scrolled window keeps its short page
            self._slots = []
        self._maybe_restore()

    def _at_newest(self) -> bool:
        if not self._slots:
            return True
        for entry in self.registry.reversed():
            if not entry.favorite:
                return entry is self._slots[0]
        return False

    def _maybe_reclaim(self) -> None:
        if len(self._slots) <= 2 * self.page_size:
            return
        released = len(self._slots) - self.page_size
        del self._slots[self.page_size:]
        logger.debug(f"Reclaimed {released} slots")

    def _maybe_restore(self) -> None:
        if self._slots:
            return
        for entry in self.registry.reversed():
            if len(self._slots) >= self.page_size:
                break
            if not entry.favorite:
                self._slots.append(entry)

    # endregion
    # region Navigation
    def step_older(self) -> bool:
        """
        Rebind every slot to the next older page of history entries.

        Walks the cyclic predecessor chain from the oldest visible entry, skipping
        favorites, and fills the slots from slot 0 down.

        Returns:
            bool: True if any slot was rebound.
        """
        if not self._slots:
            return False
        start = self._slots[-1]
        entry = self.registry.predecessor_cyclic(start)
        i = 0
        while entry is not None and entry is not start and i < len(self._slots):
            if not entry.favorite:
                self._slots[i] = entry
                i += 1
            entry = self.registry.predecessor_cyclic(entry)
        return i > 0

    def step_newer(self) -> bool:
        """
        Rebind every slot to the next newer page of history entries.

        Walks the cyclic successor chain from the newest visible entry, skipping
        favorites, and fills the slots from the last slot up.
        """
        if not self._slots:
            return False
        start = self._slots[0]
        entry = self.registry.successor_cyclic(start)
        i = len(self._slots) - 1
        while entry is not None and entry is not start and i >= 0:
            if not entry.favorite:
                self._slots[i] = entry
                i -= 1
            entry = self.registry.successor_cyclic(entry)
        return i < len(self._slots) - 1

    # endregion


__all__ = ["PaginationWindow"]
