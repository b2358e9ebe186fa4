"""
clipkeep.debounce
Suppression of clipboard notifications caused by our own writes.

Every programmatic write to the host clipboard makes the host fire a change
notification. Without a gate, that notification would be read back and ingested as a
new copy, which selects it and writes it again.
"""

import logging

logger = logging.getLogger("clipkeep").getChild("debounce")


class ChangeDebouncer:
    """
    Counter of programmatic writes whose notification has not been seen yet.

    Call expect_write() right before writing to the clipboard and consume() for every
    host notification.
    """

    def __init__(self):
        self._count = 0

    @property
    def pending(self) -> int:
        return self._count

    def expect_write(self) -> None:
        self._count += 1

    def consume(self) -> bool:
        """Return True if the notification was caused by our own write."""
        if self._count <= 0:
            self._count = 0
            return False
        self._count -= 1
        logger.debug(f"Suppressed self-triggered change ({self._count} pending)")
        return True

    def cancel_write(self) -> None:
        """Take back an expect_write() whose write never reached the clipboard."""
        self._count = max(0, self._count - 1)

    def reset(self) -> None:
        self._count = 0


__all__ = ["ChangeDebouncer"]
