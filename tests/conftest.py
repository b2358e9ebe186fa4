import os
from typing import Callable, List, Optional

import pytest
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from clipkeep.config import ClipboardSettings, StorageSettings, get_settings
from clipkeep.database import Base, DatabaseSessionGenerator
from clipkeep.history import ClipboardHistory
from clipkeep.ports import HistoryListener
from clipkeep.store import PersistentLog


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep the developer's CLIPKEEP_* variables out of the tests."""
    for key in list(os.environ):
        if key.startswith("CLIPKEEP_"):
            monkeypatch.delenv(key, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture(scope="session")
def test_database_url():
    """Provide a test database URL (in-memory SQLite)."""
    return "sqlite:///:memory:"


@pytest.fixture(scope="session")
def engine(test_database_url):
    """Create a test database engine."""
    engine = create_engine(
        test_database_url,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    yield engine
    engine.dispose()


@pytest.fixture(scope="function")
def sessions(engine) -> DatabaseSessionGenerator:
    """Session generator over fresh tables for each test."""
    generator = DatabaseSessionGenerator(engine=engine)
    generator.init_db()
    try:
        yield generator
    finally:
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def make_settings() -> Callable[..., ClipboardSettings]:
    def make(**overrides) -> ClipboardSettings:
        values = {
            "history_size": 50,
            "page_size": 5,
            "confirm_on_clear": False,
            "compaction_min_records": 1000,
        }
        values.update(overrides)
        return ClipboardSettings(**values)

    return make


@pytest.fixture
def settings(make_settings) -> ClipboardSettings:
    return make_settings()


@pytest.fixture
def log(sessions) -> PersistentLog:
    return PersistentLog(sessions, compaction_min_records=1000)


class FakeClipboard:
    """
    ClipboardPort whose reads stay pending until deliver() is called.

    When `history` is set, every write notifies it the way a host clipboard owner
    change would.
    """

    def __init__(self, text: str = ""):
        self.text = text
        self.writes: List[str] = []
        self.pending: List[Callable[[Optional[str]], None]] = []
        self.history: Optional[ClipboardHistory] = None

    def read_text(self, callback) -> None:
        self.pending.append(callback)

    def write_text(self, text: str) -> None:
        self.text = text
        self.writes.append(text)
        if self.history is not None:
            self.history.on_clipboard_changed()

    def deliver(self) -> None:
        callback = self.pending.pop(0)
        callback(self.text)

    def copy(self, history: ClipboardHistory, text: str) -> None:
        """Simulate a user copy: change the text, notify, answer the read."""
        self.text = text
        history.on_clipboard_changed()
        while self.pending:
            self.deliver()


class RecordingNotifier:
    def __init__(self):
        self.messages = []

    def notify(self, message, undo=None):
        self.messages.append((message, undo))


class RecordingPaste:
    def __init__(self):
        self.count = 0

    def paste(self):
        self.count += 1


class RecordingConfirm:
    def __init__(self, accept: bool = True):
        self.accept = accept
        self.prompts = []

    def confirm(self, title, message, on_confirm):
        self.prompts.append(title)
        if self.accept:
            on_confirm()


class RecordingListener(HistoryListener):
    def __init__(self):
        self.events = []

    def entry_added(self, entry):
        self.events.append(("added", entry.text))

    def entry_removed(self, entry):
        self.events.append(("removed", entry.text))

    def selection_changed(self, entry):
        self.events.append(("selected", entry.text if entry else None))

    def history_cleared(self):
        self.events.append(("cleared", None))


@pytest.fixture
def clipboard() -> FakeClipboard:
    return FakeClipboard()


@pytest.fixture
def make_history(log, clipboard):
    def make(settings: ClipboardSettings, **kwargs) -> ClipboardHistory:
        history = ClipboardHistory(settings, log, clipboard, **kwargs)
        clipboard.history = history
        history.start()
        return history

    return make


@pytest.fixture
def history(make_history, settings) -> ClipboardHistory:
    return make_history(settings)


@pytest.fixture
def storage_env(tmp_path, monkeypatch) -> StorageSettings:
    """Point StorageSettings at a temporary data directory."""
    monkeypatch.setenv("CLIPKEEP_DATA_DIR", str(tmp_path))
    monkeypatch.setenv(
        "CLIPKEEP_DATABASE_URL", f"sqlite:///{(tmp_path / 'history.db').as_posix()}"
    )
    get_settings.cache_clear()
    return StorageSettings()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def paste() -> RecordingPaste:
    return RecordingPaste()


@pytest.fixture
def listener() -> RecordingListener:
    return RecordingListener()


@pytest.fixture
def make_confirm() -> Callable[[bool], RecordingConfirm]:
    return RecordingConfirm
