# region Docstring
"""
clipkeep.store
Append-only persistent log of the clipboard history.
Overview:
- PersistentLog stores every history mutation as one row of the `clipboard_log`
    table and rebuilds the ordered entry list by replaying the rows at startup.
- Dead weight from deletes, moves and favorite flips is removed by compaction, which
    rewrites the table from a snapshot of the live entries.
Contents:
- Functions:
    - replay(records) -> dict[int, tuple[str, bool]]:
        Folds an ordered record sequence into live disk ids -> (text, favorite), in
        MRU order.
- Classes:
    - PersistentLog:
        load, append, update_favorite, delete, move_to_end, reset_to, maybe_compact,
        compact, live_disk_ids and records.
Design notes:
- Every operation runs in its own transaction and is committed before returning, in
    the order issued. A failed transaction is rolled back and re-raised as
    PersistenceError; counters are only advanced after a commit succeeds.
- reset_to is the only operation that deletes rows. It deletes and rewrites inside a
    single transaction, so a failure leaves the previous log untouched.
- Operations naming a disk id that has no live record raise InconsistentIdentityError.
"""
# endregion
# region Imports
import logging
from contextlib import contextmanager
from typing import Callable, Dict, Iterable, Iterator, List, Tuple

from sqlalchemy import delete, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from clipkeep.config import ClipboardSettings, StorageSettings
from clipkeep.database import DatabaseSessionGenerator
from clipkeep.errors import InconsistentIdentityError, PersistenceError
from clipkeep.models import Entry, LogOp, LogRecord, LogRecordEntity

# endregion

logger = logging.getLogger("clipkeep").getChild("store")

SnapshotFn = Callable[[], Iterable[Entry]]


def replay(records: Iterable[LogRecord]) -> Dict[int, Tuple[str, bool]]:
    """
    Fold log records into the live state.

    Args:
        records (Iterable[LogRecord]): Records in seq order.

    Returns:
        Dict[int, Tuple[str, bool]]: disk id -> (text, favorite), oldest -> newest.
    """
    state: Dict[int, Tuple[str, bool]] = {}
    for record in records:
        if record.op == "add":
            state.pop(record.disk_id, None)
            state[record.disk_id] = (record.text or "", record.favorite)
            continue

        current = state.get(record.disk_id)
        if current is None:
            logger.warning(
                f"Skipping '{record.op}' record {record.seq} for unknown disk id {record.disk_id}"
            )
            continue
        if record.op == "delete":
            del state[record.disk_id]
        elif record.op == "move":
            del state[record.disk_id]
            state[record.disk_id] = current
        else:
            state[record.disk_id] = (current[0], record.op == "favorite")
    return state


class PersistentLog:
    """
    Append-only record store with per-record disk identity.

    Attributes:
        next_disk_id (int): Disk id handed out by the next append().
        compaction_min_records (int): Minimum dead records before compaction.
        compaction_dead_ratio (float): Dead records must exceed live records times
            this ratio before compaction.
    """

    def __init__(
        self,
        sessions: DatabaseSessionGenerator,
        compaction_min_records: int = 500,
        compaction_dead_ratio: float = 1.0,
    ):
        self._sessions = sessions
        self.next_disk_id = 1
        self.compaction_min_records = compaction_min_records
        self.compaction_dead_ratio = compaction_dead_ratio
        self._live: set[int] = set()
        self._record_count = 0

    @classmethod
    def from_settings(
        cls, storage: StorageSettings, settings: ClipboardSettings
    ) -> "PersistentLog":
        return cls(
            DatabaseSessionGenerator(storage),
            compaction_min_records=settings.compaction_min_records,
            compaction_dead_ratio=settings.compaction_dead_ratio,
        )

    def configure(self, settings: ClipboardSettings) -> None:
        self.compaction_min_records = settings.compaction_min_records
        self.compaction_dead_ratio = settings.compaction_dead_ratio

    # region Counters
    @property
    def record_count(self) -> int:
        """Rows currently in the log."""
        return self._record_count

    @property
    def live_count(self) -> int:
        return len(self._live)

    @property
    def dead_count(self) -> int:
        return self._record_count - len(self._live)

    def is_live(self, disk_id: int) -> bool:
        return disk_id in self._live

    # endregion
    # region Transactions
    @contextmanager
    def _transaction(self, operation: str) -> Iterator[Session]:
        try:
            with self._sessions.session_factory.begin() as session:
                yield session
        except SQLAlchemyError as e:
            logger.exception(f"Log operation '{operation}' failed and was rolled back")
            raise PersistenceError(operation, e) from e

    def _write(self, operation: str, *records: LogRecordEntity) -> None:
        with self._transaction(operation) as session:
            for record in records:
                session.add(record)
        self._record_count += len(records)

    def _require_live(self, disk_id: int) -> None:
        if disk_id not in self._live:
            raise InconsistentIdentityError({disk_id}, set())

    # endregion
    # region Reading
    def records(self) -> List[LogRecord]:
        """All records in replay order."""
        with self._transaction("read") as session:
            rows = session.scalars(
                select(LogRecordEntity).order_by(LogRecordEntity.seq)
            ).all()
            return [row.model for row in rows]

    def live_disk_ids(self) -> set[int]:
        """Live disk ids according to a fresh replay of the stored records."""
        return set(replay(self.records()))

    def load(self) -> Tuple[List[Entry], int]:
        """
        Replay the log.

        Returns:
            Tuple[List[Entry], int]: Live entries oldest -> newest with memory ids 1..N,
                and the next free memory id. A missing or empty log yields ([], 1).
        """
        self._sessions.init_db()
        records = self.records()
        state = replay(records)

        entries: List[Entry] = []
        seen: Dict[str, Entry] = {}
        shadowed: List[int] = []
        for disk_id, (text, favorite) in state.items():
            older = seen.get(text)
            if older is not None:
                # Same text live twice: the newer record wins
                entries.remove(older)
                shadowed.append(older.disk_id)
            entry = Entry(memory_id=0, disk_id=disk_id, text=text, favorite=favorite)
            seen[text] = entry
            entries.append(entry)
        for memory_id, entry in enumerate(entries, start=1):
            entry.memory_id = memory_id

        with self._transaction("count") as session:
            max_disk_id = session.scalar(select(func.max(LogRecordEntity.disk_id)))
        self.next_disk_id = (max_disk_id or 0) + 1
        self._record_count = len(records)
        self._live = set(state)

        for disk_id in shadowed:
            logger.warning(f"Tombstoning duplicate record for disk id {disk_id}")
            self.delete(disk_id)

        logger.info(
            f"Loaded {len(entries)} entries from {len(records)} log records "
            f"(next disk id {self.next_disk_id})"
        )
        return entries, len(entries) + 1

    # endregion
    # region Writing
    def append(self, text: str, favorite: bool = False) -> int:
        """Write a creation record and return the new entry's disk id."""
        disk_id = self.next_disk_id
        self._write(
            "add", LogRecordEntity(op="add", disk_id=disk_id, text=text, favorite=favorite)
        )
        self.next_disk_id += 1
        self._live.add(disk_id)
        logger.debug(f"Appended disk id {disk_id}")
        return disk_id

    def update_favorite(self, disk_id: int, favorite: bool, move: bool = False) -> None:
        """
        Record a favorite flip. With `move`, the reorder marker is written in the same
        transaction, so either both records are committed or neither is.
        """
        self._require_live(disk_id)
        op: LogOp = "favorite" if favorite else "unfavorite"
        records = [LogRecordEntity(op=op, disk_id=disk_id)]
        if move:
            records.append(LogRecordEntity(op="move", disk_id=disk_id))
        self._write(op, *records)
        logger.debug(f"Disk id {disk_id} favorite={favorite} move={move}")

    def delete(self, disk_id: int) -> None:
        """Tombstone a record. It stays on disk until the next compaction."""
        self._require_live(disk_id)
        self._write("delete", LogRecordEntity(op="delete", disk_id=disk_id))
        self._live.discard(disk_id)
        logger.debug(f"Deleted disk id {disk_id}")

    def move_to_end(self, disk_id: int) -> None:
        self._require_live(disk_id)
        self._write("move", LogRecordEntity(op="move", disk_id=disk_id))

    def reset_to(self, entries: Iterable[Entry]) -> None:
        """
        Discard the log and rewrite it from `entries` (oldest -> newest).

        Disk ids are reassigned densely from 1 and written back onto the entries once
        the rewrite has been committed.
        """
        entries = list(entries)
        with self._transaction("reset") as session:
            session.execute(delete(LogRecordEntity))
            session.add_all(
                [
                    LogRecordEntity(
                        op="add",
                        disk_id=disk_id,
                        text=entry.content,
                        favorite=entry.favorite,
                    )
                    for disk_id, entry in enumerate(entries, start=1)
                ]
            )

        for disk_id, entry in enumerate(entries, start=1):
            entry.disk_id = disk_id
        self.next_disk_id = len(entries) + 1
        self._live = set(range(1, len(entries) + 1))
        self._record_count = len(entries)
        logger.info(f"Log rewritten with {len(entries)} records")

    def should_compact(self) -> bool:
        dead = self.dead_count
        return (
            dead >= self.compaction_min_records
            and dead > self.live_count * self.compaction_dead_ratio
        )

    def maybe_compact(self, snapshot_fn: SnapshotFn) -> bool:
        """Compact when dead records outweigh live ones. Returns True if it did."""
        if not self.should_compact():
            return False
        self.compact(snapshot_fn)
        return True

    def compact(self, snapshot_fn: SnapshotFn) -> None:
        before = self._record_count
        self.reset_to(snapshot_fn())
        logger.info(f"Compacted log from {before} to {self._record_count} records")

    # endregion


__all__ = ["PersistentLog", "SnapshotFn", "replay"]
