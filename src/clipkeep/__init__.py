"""
clipkeep

Bounded, de-duplicated clipboard history with MRU ordering, favorites and an
append-only SQLite log.

Main pieces:
- EntryRegistry: ordered entries with O(1) lookup by text.
- PersistentLog: append-only log with compaction.
- PaginationWindow: the visible page of history entries.
- ChangeDebouncer: ignores notifications caused by our own clipboard writes.
- ClipboardHistory: the core that wires them together.
"""

from .config import ClipboardSettings, StorageSettings, get_settings
from .debounce import ChangeDebouncer
from .errors import (
    ClipkeepError,
    InconsistentIdentityError,
    PersistenceError,
    UnsupportedContentKindError,
)
from .history import ClipboardHistory
from .models import Entry
from .pagination import PaginationWindow
from .registry import EntryRegistry
from .store import PersistentLog

__version__ = "0.1.0"

__all__ = [
    "ChangeDebouncer",
    "ClipboardHistory",
    "ClipboardSettings",
    "ClipkeepError",
    "Entry",
    "EntryRegistry",
    "InconsistentIdentityError",
    "PaginationWindow",
    "PersistenceError",
    "PersistentLog",
    "StorageSettings",
    "UnsupportedContentKindError",
    "get_settings",
]
