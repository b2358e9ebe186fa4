"""
clipkeep.logger
Logging setup: JSON-lines file plus console, with daily archiving of the log file.

Modules log through children of the "clipkeep" logger; nothing is configured until
setup_logging() is called by the CLI (or an embedding application).
"""

from datetime import datetime
import logging
from logging import Logger as T_Logger
from logging.config import dictConfig
from pathlib import Path

from pythonjsonlogger.json import JsonFormatter  # type: ignore # noqa F401

from clipkeep.config import StorageSettings

logger: T_Logger = logging.getLogger("clipkeep")
system_logger = logger.getChild("SYSTEM")


def build_config(log_file: Path, log_level: str) -> dict:
    level = log_level.upper()
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "json": {
                "()": "pythonjsonlogger.json.JsonFormatter",
                "fmt": "%(asctime)s %(levelname)s %(name)s %(message)s",
            },
            "standard": {"format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s"},
        },
        "handlers": {
            "file": {
                "class": "logging.FileHandler",
                "filename": str(log_file),
                "formatter": "json",
                "level": level,
                "encoding": "utf-8",
            },
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "standard",
                "level": "WARNING",
            },
        },
        "loggers": {
            "clipkeep": {
                "handlers": ["file", "console"],
                "level": level,
                "propagate": False,
            },
        },
    }


def setup_logging(settings: StorageSettings) -> T_Logger:
    """Archive the previous log file and configure the clipkeep loggers."""
    log_file = settings.log_file
    log_file.parent.mkdir(parents=True, exist_ok=True)
    _archive_daily_log_file(log_file)
    _manage_logfile_archives(log_file, settings.log_archive_days)

    dictConfig(build_config(log_file, settings.log_level))
    system_logger.debug("Logger for clipkeep initialized.")
    return logger


def _archives(log_file: Path) -> list[Path]:
    return sorted(
        log_file.parent.glob(f"{log_file.stem}_*.jsonl"),
        key=lambda f: f.stat().st_mtime,
        reverse=True,
    )


def _archive_daily_log_file(log_file: Path) -> None:
    """Archive the log file daily by renaming it with a timestamp."""
    current_time = datetime.now()
    archive_files = _archives(log_file)
    if archive_files:
        latest_archive = archive_files[0]
        timestamp_str = latest_archive.stem.replace(f"{log_file.stem}_", "")
        try:
            timestamp = datetime.strptime(timestamp_str, "%Y%m%d_%H%M%S")
        except ValueError:
            system_logger.warning(
                f"Could not parse timestamp from archive file {latest_archive}, skipping archiving."
            )
            return
        if (current_time - timestamp).total_seconds() < 24 * 3600:
            return

    if log_file.exists():
        timestamp = current_time.strftime("%Y%m%d_%H%M%S")
        archive_path = log_file.with_name(f"{log_file.stem}_{timestamp}.jsonl")
        log_file.rename(archive_path)


def _manage_logfile_archives(log_file: Path, days_to_keep: int = 10) -> None:
    """Keep only the most recent `days_to_keep` archives."""
    archive_files = _archives(log_file)
    for archive_file in archive_files[days_to_keep:]:
        archive_file.unlink()


__all__ = ["build_config", "logger", "setup_logging"]
