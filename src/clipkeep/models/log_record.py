# region Docstring
"""
clipkeep.models.log_record
Persistence and domain models for the append-only clipboard history log.
Overview:
- Provides a SQLAlchemy entity where each row is one record of the history log.
- Provides a Pydantic model mirroring the persisted entity for safe I/O.
Contents:
- Constants:
    - LogOp: Literal of the record operations.
- SQLAlchemy entities:
    - LogRecordEntity:
        One log record. `seq` is the autoincrement replay order, `op` the operation,
        `disk_id` the identity of the entry the record is about, `text` the payload
        (only for "add") and `created_at` the insert time.
- Pydantic models:
    - LogRecord:
        Domain model of one record, convertible to and from the entity through the
        `.entity` / `.model` properties.
Design notes:
- Records are only ever inserted, except by PersistentLog.reset_to which rewrites the
    whole table inside one transaction.
- Replaying "add", "favorite", "unfavorite", "delete" and "move" in seq order yields
    the live entries in MRU order.
"""
# endregion
# region Imports
from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy import Boolean, DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from clipkeep.database import Base

# endregion

LogOp = Literal["add", "favorite", "unfavorite", "delete", "move"]


# region SQLAlchemy Model
class LogRecordEntity(Base):
    """
    Model representing one history log record.

    Attributes:
        seq (int): Primary key, replay order.
        op (str): One of add, favorite, unfavorite, delete, move.
        disk_id (int): Disk identity of the entry the record refers to.
        text (Optional[str]): Entry text, only set on "add".
        favorite (bool): Initial favorite flag of an "add" record.
        created_at (datetime): Insert time.
    """

    __tablename__ = "clipboard_log"

    seq: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    op: Mapped[str] = mapped_column(String(16), nullable=False)
    disk_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    text: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    favorite: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    def __repr__(self) -> str:
        return f"<LogRecord(seq={self.seq}, op='{self.op}', disk_id={self.disk_id})>"

    @property
    def model(self) -> "LogRecord":
        return LogRecord.model_validate(self)


# endregion
# region Pydantic Model
class LogRecord(BaseModel):
    seq: Optional[int] = Field(None, description="Replay order of the record")
    op: LogOp = Field(..., description="Operation recorded")
    disk_id: int = Field(..., description="Disk identity of the entry")
    text: Optional[str] = Field(None, description="Entry text for 'add' records")
    favorite: bool = Field(False, description="Initial favorite flag for 'add' records")
    created_at: Optional[datetime] = Field(
        None, description="Timestamp when the record was written"
    )

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "seq": 1,
                    "op": "add",
                    "disk_id": 1,
                    "text": "Sample clipboard text",
                    "favorite": False,
                    "created_at": "2024-01-01T12:00:00Z",
                }
            ]
        },
        from_attributes=True,
    )

    @property
    def entity(self) -> LogRecordEntity:
        return LogRecordEntity(
            seq=self.seq,
            op=self.op,
            disk_id=self.disk_id,
            text=self.text,
            favorite=self.favorite,
        )


# endregion

__all__ = ["LogOp", "LogRecord", "LogRecordEntity"]
