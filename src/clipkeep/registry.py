# region Docstring
"""
clipkeep.registry
The canonical ordered collection of clipboard history entries.
Overview:
- EntryRegistry keeps every loaded entry, favorites and history alike, in one doubly
    linked sequence ordered oldest -> newest, plus an exact-text index for dedup.
Contents:
- Classes:
    - EntryRegistry:
        lookup_by_content, append (insert or move to newest), prepend, remove,
        iteration in both directions, cyclic neighbours, renumbering and the
        favorites()/history() predicate views.
Design notes:
- The links live in an arena keyed by memory id rather than on the entries, so entries
    hold no references to each other. renumber() rebuilds the arena under the new ids.
- Favorites are not stored separately; views and eviction filter with a predicate.
"""
# endregion
# region Imports
from typing import Callable, Dict, Iterator, List, Optional

from clipkeep.models import Entry

# endregion


class _Link:
    __slots__ = ("entry", "prev", "next")

    def __init__(self, entry: Entry):
        self.entry = entry
        self.prev: Optional[int] = None
        self.next: Optional[int] = None


class EntryRegistry:
    """
    Ordered, de-duplicated collection of entries.

    Iteration order is oldest -> newest; first() is the oldest entry and last() the
    most recently used one.
    """

    def __init__(self, entries: Optional[List[Entry]] = None):
        self._links: Dict[int, _Link] = {}
        self._by_text: Dict[str, int] = {}
        self._head: Optional[int] = None
        self._tail: Optional[int] = None
        for entry in entries or []:
            self.append(entry)

    # region Queries
    def __len__(self) -> int:
        return len(self._links)

    def __bool__(self) -> bool:
        return bool(self._links)

    def __contains__(self, entry: object) -> bool:
        if not isinstance(entry, Entry):
            return False
        link = self._links.get(entry.memory_id)
        return link is not None and link.entry is entry

    def __iter__(self) -> Iterator[Entry]:
        return self.ordered()

    def get(self, memory_id: int) -> Optional[Entry]:
        link = self._links.get(memory_id)
        return link.entry if link else None

    def lookup_by_content(self, text: str) -> Optional[Entry]:
        memory_id = self._by_text.get(text)
        if memory_id is None:
            return None
        return self._links[memory_id].entry

    def first(self) -> Optional[Entry]:
        return self._links[self._head].entry if self._head is not None else None

    def last(self) -> Optional[Entry]:
        return self._links[self._tail].entry if self._tail is not None else None

    def ordered(self) -> Iterator[Entry]:
        """Yield entries oldest -> newest."""
        cursor = self._head
        while cursor is not None:
            link = self._links[cursor]
            cursor = link.next
            yield link.entry

    def reversed(self) -> Iterator[Entry]:
        """Yield entries newest -> oldest."""
        cursor = self._tail
        while cursor is not None:
            link = self._links[cursor]
            cursor = link.prev
            yield link.entry

    def successor_cyclic(self, entry: Entry) -> Optional[Entry]:
        """Next newer entry, wrapping from the newest to the oldest."""
        link = self._require(entry)
        target = link.next if link.next is not None else self._head
        return self._links[target].entry if target is not None else None

    def predecessor_cyclic(self, entry: Entry) -> Optional[Entry]:
        """Next older entry, wrapping from the oldest to the newest."""
        link = self._require(entry)
        target = link.prev if link.prev is not None else self._tail
        return self._links[target].entry if target is not None else None

    def favorites(self) -> List[Entry]:
        """Favorite entries, newest first."""
        return self.select(lambda e: e.favorite)

    def history(self) -> List[Entry]:
        """Non-favorite entries, newest first."""
        return self.select(lambda e: not e.favorite)

    def select(self, predicate: Callable[[Entry], bool]) -> List[Entry]:
        return [entry for entry in self.reversed() if predicate(entry)]

    # endregion
    # region Mutation
    def append(self, entry: Entry) -> None:
        """Insert `entry` at the newest end, moving it there if already present."""
        link = self._links.get(entry.memory_id)
        if link is not None:
            if link.entry is not entry:
                raise ValueError(f"memory id {entry.memory_id} is already taken")
            if self._tail == entry.memory_id:
                return
            self._unlink(link)
        else:
            link = self._add(entry)

        link.prev = self._tail
        link.next = None
        if self._tail is not None:
            self._links[self._tail].next = entry.memory_id
        self._tail = entry.memory_id
        if self._head is None:
            self._head = entry.memory_id

    def prepend(self, entry: Entry) -> None:
        """Insert `entry` at the oldest end."""
        link = self._links.get(entry.memory_id)
        if link is not None:
            if link.entry is not entry:
                raise ValueError(f"memory id {entry.memory_id} is already taken")
            if self._head == entry.memory_id:
                return
            self._unlink(link)
        else:
            link = self._add(entry)

        link.next = self._head
        link.prev = None
        if self._head is not None:
            self._links[self._head].prev = entry.memory_id
        self._head = entry.memory_id
        if self._tail is None:
            self._tail = entry.memory_id

    def remove(self, entry: Entry) -> None:
        """Unlink `entry`. Does not touch persistence."""
        link = self._require(entry)
        self._unlink(link)
        del self._links[entry.memory_id]
        if self._by_text.get(entry.text) == entry.memory_id:
            del self._by_text[entry.text]

    def clear(self) -> None:
        self._links.clear()
        self._by_text.clear()
        self._head = self._tail = None

    def renumber(self, start: int = 1) -> int:
        """
        Reassign memory ids densely in order, starting at `start`.

        Returns:
            int: The next free memory id.
        """
        entries = list(self.ordered())
        self.clear()
        next_id = start
        for entry in entries:
            entry.memory_id = next_id
            next_id += 1
            self.append(entry)
        return next_id

    # endregion
    # region Internals
    def _add(self, entry: Entry) -> _Link:
        existing = self._by_text.get(entry.content)
        if existing is not None:
            raise ValueError(
                f"content already held by entry {existing}; reuse it instead"
            )
        link = _Link(entry)
        self._links[entry.memory_id] = link
        self._by_text[entry.content] = entry.memory_id
        return link

    def _require(self, entry: Entry) -> _Link:
        link = self._links.get(entry.memory_id)
        if link is None or link.entry is not entry:
            raise KeyError(f"{entry!r} is not in the registry")
        return link

    def _unlink(self, link: _Link) -> None:
        if link.prev is not None:
            self._links[link.prev].next = link.next
        else:
            self._head = link.next
        if link.next is not None:
            self._links[link.next].prev = link.prev
        else:
            self._tail = link.prev
        link.prev = link.next = None

    # endregion


__all__ = ["EntryRegistry"]
