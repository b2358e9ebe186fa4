"""
clipkeep.ports
Contracts for the collaborators the history core drives but does not implement.

- ClipboardPort: host clipboard access. read_text is a request whose result is
    delivered later through the callback; write_text replaces the clipboard text.
- Notifier: transient "copied" notification with an optional undo action.
- PasteTrigger: synthetic paste into the focused window.
- ConfirmPrompt: confirmation dialog; calls on_confirm only if the user accepts.
- HistoryListener: presentation layer hooks. Every method is optional for
    implementations deriving from HistoryListener.
"""

from typing import Callable, List, Optional, Protocol

from clipkeep.models import Entry

ReadCallback = Callable[[Optional[str]], None]


class ClipboardPort(Protocol):
    def read_text(self, callback: ReadCallback) -> None: ...

    def write_text(self, text: str) -> None: ...


class Notifier(Protocol):
    def notify(self, message: str, undo: Optional[Callable[[], None]] = None) -> None: ...


class PasteTrigger(Protocol):
    def paste(self) -> None: ...


class ConfirmPrompt(Protocol):
    def confirm(
        self, title: str, message: str, on_confirm: Callable[[], None]
    ) -> None: ...


class HistoryListener:
    """No-op base for presentation layers; override what you render."""

    def entry_added(self, entry: Entry) -> None:
        pass

    def entry_removed(self, entry: Entry) -> None:
        pass

    def entry_updated(self, entry: Entry) -> None:
        pass

    def selection_changed(self, entry: Optional[Entry]) -> None:
        pass

    def page_changed(self, visible: List[Entry]) -> None:
        pass

    def history_cleared(self) -> None:
        pass

    def labels_changed(self) -> None:
        pass


__all__ = [
    "ClipboardPort",
    "ConfirmPrompt",
    "HistoryListener",
    "Notifier",
    "PasteTrigger",
    "ReadCallback",
]
