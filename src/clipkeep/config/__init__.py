"""
clipkeep.config
Configuration and settings management for clipkeep.
Overview:
- Provides Pydantic-based settings classes for the clipboard history core and its
    storage/logging environment.
- Each settings class inherits from FactoryBaseSettings and supports environment
    variable overrides via Field aliases.
Contents:
- Settings Classes:
    - ClipboardSettings:
        Behaviour of the history core: size bound, preview lengths, favorites-only
        persistence, MRU promotion, whitespace stripping, private mode, notification,
        confirmation and paste flags, pagination page size, compaction thresholds
        and the watcher poll interval.
    - StorageSettings:
        Location of the history database and log files, log level and log archive
        retention.
- get_settings: Factory function for retrieving cached settings instances (exported).
- config_files: YAML files the settings are read from (exported).
Design Notes:
- All settings classes use Pydantic Field with aliases to support environment variable
    configuration (e.g., CLIPKEEP_HISTORY_SIZE, CLIPKEEP_PRIVATE_MODE).
- Settings are frozen; runtime changes produce a new instance (model_copy) that is
    handed to ClipboardHistory.apply_settings().
"""

from pathlib import Path

from pydantic import Field, field_validator

from clipkeep.config.base import DATA_DIR
from clipkeep.config.factory import FactoryBaseSettings
from clipkeep.config.factory import config_files, get_settings  # noqa: F401  This is used externally


class ClipboardSettings(FactoryBaseSettings):
    """
    Configuration for the clipboard history core.
    """

    history_size: int = Field(
        default=50,
        ge=1,
        alias="CLIPKEEP_HISTORY_SIZE",
        description="Maximum number of non-favorite entries kept in the history.",
    )
    preview_size: int = Field(
        default=30,
        ge=4,
        alias="CLIPKEEP_PREVIEW_SIZE",
        description="Number of characters shown for an entry preview.",
    )
    topbar_preview_size: int = Field(
        default=10,
        ge=4,
        alias="CLIPKEEP_TOPBAR_PREVIEW_SIZE",
        description="Number of characters shown for the selected entry label.",
    )
    cache_only_favorites: bool = Field(
        default=False,
        alias="CLIPKEEP_CACHE_ONLY_FAVORITES",
        description="Persist only favorite entries; history stays in memory.",
    )
    move_item_first: bool = Field(
        default=True,
        alias="CLIPKEEP_MOVE_ITEM_FIRST",
        description="Move an entry to the most recent position when copied again or selected.",
    )
    strip_text: bool = Field(
        default=False,
        alias="CLIPKEEP_STRIP_TEXT",
        description="Strip leading and trailing whitespace from captured text.",
    )
    private_mode: bool = Field(
        default=False,
        alias="CLIPKEEP_PRIVATE_MODE",
        description="Ignore clipboard changes while enabled.",
    )
    notify_on_copy: bool = Field(
        default=False,
        alias="CLIPKEEP_NOTIFY_ON_COPY",
        description="Show a notification when new content is captured.",
    )
    confirm_on_clear: bool = Field(
        default=True,
        alias="CLIPKEEP_CONFIRM_ON_CLEAR",
        description="Ask for confirmation before clearing the history.",
    )
    paste_on_selection: bool = Field(
        default=False,
        alias="CLIPKEEP_PASTE_ON_SELECTION",
        description="Trigger a paste after an entry is activated.",
    )
    page_size: int = Field(
        default=50,
        ge=1,
        alias="CLIPKEEP_PAGE_SIZE",
        description="Number of history entries visible per page.",
    )
    compaction_min_records: int = Field(
        default=500,
        ge=1,
        alias="CLIPKEEP_COMPACTION_MIN_RECORDS",
        description="Dead log records required before compaction is considered.",
    )
    compaction_dead_ratio: float = Field(
        default=1.0,
        gt=0,
        alias="CLIPKEEP_COMPACTION_DEAD_RATIO",
        description="Compact once dead log records exceed live records times this ratio.",
    )
    poll_interval: float = Field(
        default=0.5,
        gt=0,
        alias="CLIPKEEP_POLL_INTERVAL",
        description="Seconds between host clipboard polls in watch mode.",
    )


class StorageSettings(FactoryBaseSettings):
    """
    Storage and logging locations.
    """

    data_dir: Path = Field(
        default=DATA_DIR,
        alias="CLIPKEEP_DATA_DIR",
        description="Directory holding the history database and logs.",
    )
    database_url: str = Field(
        default=None,
        validate_default=True,
        alias="CLIPKEEP_DATABASE_URL",
        description="SQLAlchemy URL of the history log database. Defaults to history.db in the data dir.",
    )
    log_level: str = Field(
        default="info",
        alias="CLIPKEEP_LOG_LEVEL",
        description="Log level for clipkeep loggers.",
    )
    log_archive_days: int = Field(
        default=10,
        ge=1,
        alias="CLIPKEEP_LOG_ARCHIVE_DAYS",
        description="Number of archived log files to keep.",
    )

    @field_validator("database_url", mode="before")
    @classmethod
    def _default_database_url(cls, v, info):
        if v:
            return v
        data_dir = Path(info.data.get("data_dir", DATA_DIR)).expanduser()
        return f"sqlite:///{(data_dir / 'history.db').as_posix()}"

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalize_log_level(cls, v):
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @property
    def log_dir(self) -> Path:
        """Directory for JSON log files."""
        return self.data_dir / "logs"

    @property
    def log_file(self) -> Path:
        return self.log_dir / "clipkeep.jsonl"


__all__ = [
    "ClipboardSettings",
    "StorageSettings",
    "config_files",
    "get_settings",
]
