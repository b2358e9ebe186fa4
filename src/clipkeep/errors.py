"""
clipkeep.errors
Exception hierarchy for the clipboard history core.

- UnsupportedContentKindError: an entry carries a kind other than text. This is a
    programming defect and is never recovered from inside the core.
- PersistenceError: a log operation could not be committed. The failed transaction
    has been rolled back; previously committed records are intact.
- InconsistentIdentityError: registry disk ids and live log records disagree.
"""


class ClipkeepError(Exception):
    """Base class for clipkeep errors."""


class UnsupportedContentKindError(ClipkeepError, TypeError):
    def __init__(self, kind: object):
        self.kind = kind
        super().__init__(f"Unknown type: {kind!r}")


class PersistenceError(ClipkeepError):
    def __init__(self, operation: str, cause: BaseException | None = None):
        self.operation = operation
        self.cause = cause
        message = f"Log operation '{operation}' failed"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)


class InconsistentIdentityError(ClipkeepError):
    def __init__(
        self,
        missing_on_disk: set[int],
        orphaned_on_disk: set[int],
        duplicated: set[int] | None = None,
    ):
        self.missing_on_disk = missing_on_disk
        self.orphaned_on_disk = orphaned_on_disk
        self.duplicated = duplicated or set()
        super().__init__(
            "Registry and log disagree: "
            f"entries without a live record={sorted(missing_on_disk)}, "
            f"records without an entry={sorted(orphaned_on_disk)}, "
            f"disk ids shared by several entries={sorted(self.duplicated)}"
        )


__all__ = [
    "ClipkeepError",
    "InconsistentIdentityError",
    "PersistenceError",
    "UnsupportedContentKindError",
]
