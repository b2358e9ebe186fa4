# region Docstring
"""
clipkeep.clipboard
Host clipboard adapters and the polling watcher.
Overview:
- PyperclipClipboard implements ClipboardPort with pyperclip. Read results are
    delivered through the asyncio loop when one is attached, so the history core sees
    them as asynchronous callbacks.
- ClipboardWatcher polls the host clipboard and turns content changes into
    ClipboardHistory.on_clipboard_changed() notifications.
- MemoryClipboard is an in-process clipboard for commands that must not touch the
    host clipboard.
Design notes:
- pyperclip has no change notification. The watcher compares against the last text it
    saw, and PyperclipClipboard.write_text raises its own notification the way a
    clipboard owner change would, which the ChangeDebouncer then swallows.
"""
# endregion
# region Imports
import asyncio
import logging
from typing import Callable, List, Optional

import pyperclip

from clipkeep.ports import ReadCallback

# endregion

logger = logging.getLogger("clipkeep").getChild("clipboard")


def _paste() -> Optional[str]:
    try:
        return pyperclip.paste()
    except pyperclip.PyperclipException as e:
        logger.warning(f"Could not read the clipboard: {e}")
        return None


class MemoryClipboard:
    """Clipboard kept in memory. Reads are answered immediately."""

    def __init__(self, text: str = ""):
        self.text = text
        self.writes: List[str] = []

    def read_text(self, callback: ReadCallback) -> None:
        callback(self.text)

    def write_text(self, text: str) -> None:
        self.text = text
        self.writes.append(text)


class PyperclipClipboard:
    """
    ClipboardPort backed by pyperclip.

    Attributes:
        loop (Optional[asyncio.AbstractEventLoop]): Loop used to deliver callbacks.
        last_seen (Optional[str]): Last text read from or written to the clipboard.
        on_change (Optional[Callable[[], None]]): Called after each write_text.
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self.loop = loop
        self.last_seen: Optional[str] = None
        self.on_change: Optional[Callable[[], None]] = None

    def _dispatch(self, fn: Callable, *args) -> None:
        if self.loop is not None:
            self.loop.call_soon(fn, *args)
        else:
            fn(*args)

    def read_text(self, callback: ReadCallback) -> None:
        self._dispatch(callback, _paste())

    def write_text(self, text: str) -> None:
        try:
            pyperclip.copy(text)
        except pyperclip.PyperclipException as e:
            logger.error(f"Could not write the clipboard: {e}")
            raise
        self.last_seen = text
        if self.on_change is not None:
            self._dispatch(self.on_change)


class ClipboardWatcher:
    """Poll the host clipboard and notify the history core of changes."""

    def __init__(self, history, clipboard: PyperclipClipboard, interval: float = 0.5):
        self.history = history
        self.clipboard = clipboard
        self.interval = interval
        clipboard.on_change = history.on_clipboard_changed

    def poll_once(self) -> bool:
        text = _paste()
        if text is None or text == self.clipboard.last_seen:
            return False
        self.clipboard.last_seen = text
        self.history.on_clipboard_changed()
        return True

    async def run(self, stop: Optional[asyncio.Event] = None) -> None:
        stop = stop or asyncio.Event()
        self.clipboard.loop = asyncio.get_running_loop()
        # Content present before the watcher started is not a new copy
        self.clipboard.last_seen = _paste()
        logger.info(f"Watching the clipboard every {self.interval}s")
        while not stop.is_set():
            self.poll_once()
            try:
                await asyncio.wait_for(stop.wait(), timeout=self.interval)
            except asyncio.TimeoutError:
                pass
        logger.info("Clipboard watcher stopped")


__all__ = ["ClipboardWatcher", "MemoryClipboard", "PyperclipClipboard"]
