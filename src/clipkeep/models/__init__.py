"""
clipkeep.models
Domain and persistence models.

- Entry: in-memory clipboard history entry (Pydantic).
- LogRecordEntity / LogRecord: one record of the append-only history log
    (SQLAlchemy entity and its Pydantic mirror).
"""

from .entry import TEXT_KIND, Entry, truncated
from .log_record import LogOp, LogRecord, LogRecordEntity

__all__ = [
    "TEXT_KIND",
    "Entry",
    "LogOp",
    "LogRecord",
    "LogRecordEntity",
    "truncated",
]
