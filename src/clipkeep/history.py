# region Docstring
"""
clipkeep.history
The clipboard history core: registry, log, pagination and debouncing wired together.
Overview:
- ClipboardHistory reacts to host clipboard notifications and user actions, keeps the
    EntryRegistry, the PersistentLog and the PaginationWindow in step, and tells the
    presentation layer what changed through HistoryListener callbacks.
Contents:
- Classes:
    - ClipboardHistory:
        start, on_clipboard_changed, process_clipboard_content, select, activate,
        previous_entry, next_entry, toggle_favorite, delete_entry, request_clear,
        clear_history, prune, snapshot, search, selection_label, step_older,
        step_newer, apply_settings, check_consistency.
Flow of a copy:
    host notification -> ChangeDebouncer gate -> private mode gate -> read request ->
    callback re-validates -> registry lookup (promote) or insert (persist unless
    favorites-only) -> eviction -> compaction check -> window and listener updates.
Design notes:
- Everything runs on one event thread. A read callback may arrive after other events
    ran, so it checks private mode and the debounce counter again before mutating.
- Only one clipboard read is outstanding at a time; notifications arriving while a
    read is pending queue a single follow-up read.
- The log is written before memory is changed, so a PersistenceError leaves the
    registry as it was.
- snapshot() renumbers memory ids densely; it runs on every reset and compaction.
"""
# endregion
# region Imports
import logging
from collections import Counter
from functools import partial
from typing import List, Optional

from clipkeep.config import ClipboardSettings
from clipkeep.debounce import ChangeDebouncer
from clipkeep.errors import InconsistentIdentityError
from clipkeep.models import Entry
from clipkeep.pagination import PaginationWindow
from clipkeep.ports import (
    ClipboardPort,
    ConfirmPrompt,
    HistoryListener,
    Notifier,
    PasteTrigger,
)
from clipkeep.registry import EntryRegistry
from clipkeep.store import PersistentLog

# endregion

logger = logging.getLogger("clipkeep").getChild("history")

PRIVATE_LABEL = "..."


class ClipboardHistory:
    """
    Clipboard history core.

    Attributes:
        settings (ClipboardSettings): Current configuration.
        log (PersistentLog): Durable store.
        registry (EntryRegistry): Source of truth for entries and their order.
        window (PaginationWindow): Currently visible history page.
        debouncer (ChangeDebouncer): Gate for self-triggered notifications.
        selected (Optional[Entry]): The entry mirrored on the host clipboard.
        next_id (int): Memory id of the next new entry.
    """

    def __init__(
        self,
        settings: ClipboardSettings,
        log: PersistentLog,
        clipboard: ClipboardPort,
        notifier: Optional[Notifier] = None,
        paste: Optional[PasteTrigger] = None,
        confirm: Optional[ConfirmPrompt] = None,
    ):
        self.settings = settings
        self.log = log
        self.clipboard = clipboard
        self.notifier = notifier
        self.paste = paste
        self.confirm = confirm

        self.registry = EntryRegistry()
        self.window = PaginationWindow(self.registry, settings.page_size)
        self.debouncer = ChangeDebouncer()
        self.selected: Optional[Entry] = None
        self.next_id = 1

        self._listeners: List[HistoryListener] = []
        self._read_pending = False
        self._reread = False

    # region Listeners
    def subscribe(self, listener: HistoryListener) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: HistoryListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _emit(self, event: str, *args) -> None:
        for listener in list(self._listeners):
            handler = getattr(listener, event, None)
            if handler is not None:
                handler(*args)

    def _page_changed(self) -> None:
        self._emit("page_changed", self.window.visible())

    # endregion
    # region Views
    @property
    def entries(self) -> List[Entry]:
        """All entries, oldest first."""
        return list(self.registry)

    def favorites(self) -> List[Entry]:
        return self.registry.favorites()

    def history(self) -> List[Entry]:
        return self.registry.history()

    def get(self, memory_id: int) -> Optional[Entry]:
        return self.registry.get(memory_id)

    def search(self, query: str) -> List[Entry]:
        """Entries whose text contains `query`, case-insensitively, newest first."""
        needle = query.lower()
        if not needle:
            return list(self.registry.reversed())
        return self.registry.select(lambda e: needle in e.content.lower())

    def selection_label(self) -> str:
        if self.settings.private_mode:
            return PRIVATE_LABEL
        if self.selected is None:
            return ""
        return self.selected.preview(self.settings.topbar_preview_size)

    def preview(self, entry: Entry) -> str:
        return entry.preview(self.settings.preview_size)

    # endregion
    # region Startup
    def start(self) -> None:
        """Load the log, bind the newest page and select the newest history entry."""
        entries, self.next_id = self.log.load()
        self.registry.clear()
        for entry in entries:
            self.registry.append(entry)

        if self.settings.cache_only_favorites and any(
            e.disk_id is not None and not e.favorite for e in self.registry
        ):
            logger.info("Dropping persisted history for favorites-only mode")
            self._rewrite_log(favorites_only=True)

        self.window.reset()
        newest = next((e for e in self.registry.reversed() if not e.favorite), None)
        if newest is not None:
            self.select(newest, update_clipboard=False)
        self._page_changed()
        logger.info(
            f"History started with {len(self.registry)} entries "
            f"({len(self.favorites())} favorites)"
        )

    # endregion
    # region Clipboard events
    def on_clipboard_changed(self) -> None:
        """Host notification that the clipboard owner changed."""
        if self.debouncer.consume():
            return
        if self.settings.private_mode:
            return
        if self._read_pending:
            self._reread = True
            return
        self._request_read()

    def _request_read(self) -> None:
        self._read_pending = True
        self.clipboard.read_text(self._on_text_read)

    def _on_text_read(self, text: Optional[str]) -> None:
        self._read_pending = False
        try:
            if self.settings.private_mode:
                logger.debug("Discarding clipboard read: private mode")
            elif self.debouncer.pending:
                logger.debug("Discarding clipboard read: superseded by our own write")
            else:
                self.process_clipboard_content(text)
        finally:
            if self._reread:
                self._reread = False
                if not self.settings.private_mode:
                    self._request_read()

    def process_clipboard_content(self, text: Optional[str]) -> Optional[Entry]:
        """
        Ingest clipboard text.

        Existing text is promoted and selected; new text becomes an entry, is persisted
        unless favorites-only caching is on, then eviction runs.

        Returns:
            Optional[Entry]: The entry now holding `text`, or None for empty input.
        """
        if not text:
            return None
        if self.settings.strip_text:
            text = text.strip()
            if not text:
                return None

        entry = self.registry.lookup_by_content(text)
        if entry is not None:
            self._move_entry_first(entry)
            self.select(entry, update_clipboard=False)
        else:
            entry = self._create_entry(text)
            self.prune()

        self._page_changed()
        if self.settings.notify_on_copy and self.notifier is not None:
            self.notifier.notify("Copied to clipboard", undo=partial(self._undo_copy, entry))
        return entry

    def _create_entry(self, text: str) -> Entry:
        disk_id = None
        if not self.settings.cache_only_favorites:
            disk_id = self.log.append(text)

        entry = Entry(memory_id=self.next_id, disk_id=disk_id, text=text)
        self.next_id += 1
        self.registry.append(entry)
        self.window.bind_new(entry)
        logger.debug(f"New entry {entry.memory_id} (disk id {disk_id})")
        self._emit("entry_added", entry)
        self.select(entry, update_clipboard=False)
        return entry

    def _undo_copy(self, entry: Entry) -> None:
        if entry in self.registry:
            self.delete_entry(entry)

    def _move_entry_first(self, entry: Entry) -> None:
        if not self.settings.move_item_first:
            return
        if entry.disk_id is not None:
            self.log.move_to_end(entry.disk_id)
        self.registry.append(entry)
        self.window.promote(entry)

    def _set_clipboard_text(self, text: str) -> None:
        self.debouncer.expect_write()
        try:
            self.clipboard.write_text(text)
        except Exception:
            # No notification will follow a failed write
            self.debouncer.cancel_write()
            raise

    # endregion
    # region Selection
    def select(
        self, entry: Entry, update_clipboard: bool = True, trigger_paste: bool = False
    ) -> None:
        self.selected = entry
        self._emit("selection_changed", entry)
        if not update_clipboard:
            return
        self._set_clipboard_text(entry.content)
        if trigger_paste and self.settings.paste_on_selection and self.paste is not None:
            self.paste.paste()

    def activate(self, entry: Entry) -> None:
        """User picked `entry`: promote it, put it on the clipboard and maybe paste."""
        self._move_entry_first(entry)
        self.select(entry, update_clipboard=True, trigger_paste=True)
        self._page_changed()

    def reset_selection(self) -> None:
        self.selected = None
        self._emit("selection_changed", None)
        self._set_clipboard_text("")

    def previous_entry(self) -> Optional[Entry]:
        """Select the next newer entry, wrapping around."""
        if self.selected is None:
            target = self.registry.first()
        else:
            target = self.registry.successor_cyclic(self.selected)
        if target is not None:
            self.select(target)
        return target

    def next_entry(self) -> Optional[Entry]:
        """Select the next older entry, wrapping around."""
        if self.selected is None:
            target = self.registry.last()
        else:
            target = self.registry.predecessor_cyclic(self.selected)
        if target is not None:
            self.select(target)
        return target

    # endregion
    # region Favorites and removal
    def toggle_favorite(self, entry: Entry) -> None:
        favorite = not entry.favorite

        if self.settings.cache_only_favorites:
            if favorite:
                entry.disk_id = self.log.append(entry.content, favorite=True)
            elif entry.disk_id is not None:
                self.log.delete(entry.disk_id)
                entry.disk_id = None
        elif entry.disk_id is not None:
            self.log.update_favorite(entry.disk_id, favorite, move=True)

        self.registry.append(entry)
        if favorite:
            entry.favorite = True
            self.window.unbind(entry)
        else:
            entry.favorite = False
            self.window.promote(entry)
        self._emit("entry_updated", entry)

        if not favorite:
            self.prune()
        self._page_changed()

    def delete_entry(self, entry: Entry) -> None:
        """Delete `entry`; if it was selected, select the newest remaining entry."""
        was_selected = self._remove_entry(entry)
        if was_selected:
            newest = self.registry.last()
            if newest is not None:
                self.select(newest)
            else:
                self.reset_selection()
        self._page_changed()

    def _remove_entry(self, entry: Entry) -> bool:
        if entry.disk_id is not None:
            self.log.delete(entry.disk_id)
            entry.disk_id = None
        self.registry.remove(entry)
        self.window.unbind(entry)
        self._emit("entry_removed", entry)

        if self.selected is entry:
            self.selected = None
            return True
        return False

    def prune(self) -> int:
        """
        Evict the oldest history entries beyond `history_size`, then let the log
        decide whether to compact.

        Returns:
            int: Number of evicted entries.
        """
        excess = sum(1 for e in self.registry if not e.favorite) - self.settings.history_size
        victims: List[Entry] = []
        if excess > 0:
            for entry in self.registry.ordered():
                if len(victims) >= excess:
                    break
                if not entry.favorite:
                    victims.append(entry)

        for entry in victims:
            if self._remove_entry(entry):
                self.reset_selection()
        if victims:
            logger.debug(f"Evicted {len(victims)} entries")

        self.log.maybe_compact(self.snapshot)
        return len(victims)

    def request_clear(self) -> bool:
        """
        Clear the history, asking for confirmation first when configured.

        Returns:
            bool: True if the history was cleared right away.
        """
        if not self.settings.confirm_on_clear:
            self.clear_history()
            return True
        if self.confirm is None:
            logger.warning("Clear requested but no confirmation prompt is available")
            return False
        self.confirm.confirm(
            "Clear all?",
            "Are you sure you want to delete all clipboard items?\n"
            "This operation cannot be undone.",
            self.clear_history,
        )
        return False

    def clear_history(self) -> None:
        """Remove every non-favorite entry and rewrite the log."""
        favorites = self.registry.favorites()
        self.log.reset_to(reversed(favorites))

        if self.selected is not None and not self.selected.favorite:
            self.reset_selection()
        self.registry.clear()
        for entry in favorites:
            self.registry.prepend(entry)
        self.next_id = self.registry.renumber(1)
        self.window.reset()
        logger.info(f"History cleared, kept {len(favorites)} favorites")
        self._emit("history_cleared")
        self._page_changed()

    # endregion
    # region Persistence
    def snapshot(self, favorites_only: Optional[bool] = None) -> List[Entry]:
        """
        Renumber memory ids densely and return the entries to persist, oldest first.

        In favorites-only mode only favorites are returned. Disk ids are left alone;
        PersistentLog.reset_to assigns them once the rewrite is committed.
        """
        if favorites_only is None:
            favorites_only = self.settings.cache_only_favorites
        self.next_id = self.registry.renumber(1)
        return [e for e in self.registry if e.favorite or not favorites_only]

    def _rewrite_log(self, favorites_only: bool) -> None:
        state = self.snapshot(favorites_only)
        self.log.reset_to(state)
        persisted = {e.memory_id for e in state}
        for entry in self.registry:
            if entry.memory_id not in persisted:
                entry.disk_id = None

    def compact(self) -> None:
        self.log.compact(self.snapshot)

    def check_consistency(self) -> None:
        """Raise InconsistentIdentityError if registry and log identities diverge."""
        disk_ids = [e.disk_id for e in self.registry if e.disk_id is not None]
        duplicated = {d for d, n in Counter(disk_ids).items() if n > 1}
        in_memory = set(disk_ids)
        live = self.log.live_disk_ids()
        missing = in_memory - live
        orphaned = live - in_memory
        if missing or orphaned or duplicated:
            raise InconsistentIdentityError(missing, orphaned, duplicated)

    # endregion
    # region Pagination
    def step_older(self) -> None:
        if self.window.step_older():
            self._page_changed()

    def step_newer(self) -> None:
        if self.window.step_newer():
            self._page_changed()

    # endregion
    # region Settings
    def apply_settings(self, settings: ClipboardSettings) -> None:
        """Adopt new settings and reconcile their side effects."""
        previous = self.settings
        if previous.cache_only_favorites != settings.cache_only_favorites:
            logger.info(f"Favorites-only caching set to {settings.cache_only_favorites}")
            self._rewrite_log(settings.cache_only_favorites)

        self.settings = settings
        self.log.configure(settings)

        if previous.private_mode != settings.private_mode:
            self._update_private_mode()

        if previous.page_size != settings.page_size:
            self.window.resize(settings.page_size)

        self.prune()
        self._emit("labels_changed")
        self._page_changed()

    def _update_private_mode(self) -> None:
        if self.settings.private_mode:
            logger.info("Private mode on")
            self._emit("selection_changed", self.selected)
            return
        logger.info("Private mode off")
        if self.selected is not None:
            self.select(self.selected)
        else:
            self.reset_selection()

    # endregion


__all__ = ["ClipboardHistory", "PRIVATE_LABEL"]
