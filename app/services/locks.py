import logging
import threading
import time
from collections.abc import Iterable, Iterator
from contextlib import contextmanager

from app.core.config import get_settings
from app.core.exceptions import ConcurrencyConflict

logger = logging.getLogger(__name__)


def class_key(class_id: str) -> str:
    return f"class:{class_id}"


def student_key(student_id: str) -> str:
    return f"student:{student_id}"


def product_key(product_id: str) -> str:
    return f"product:{product_id}"


def record_key(record_id: str) -> str:
    return f"record:{record_id}"


class _Entry:
    __slots__ = ("lock", "users")

    def __init__(self) -> None:
        self.lock = threading.Lock()
        self.users = 0


class LockRegistry:
    """Per-entity locks, always taken in sorted key order.

    Two operations that share any keys acquire them in the same order, so
    they can wait on each other but never deadlock. Entries are dropped once
    nobody holds or waits on them.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._entries: dict[str, _Entry] = {}

    def _checkout(self, key: str) -> _Entry:
        with self._guard:
            entry = self._entries.get(key)
            if entry is None:
                entry = self._entries[key] = _Entry()
            entry.users += 1
            return entry

    def _checkin(self, key: str, entry: _Entry) -> None:
        with self._guard:
            entry.users -= 1
            if entry.users == 0:
                self._entries.pop(key, None)

    def held_keys(self) -> int:
        with self._guard:
            return len(self._entries)

    @contextmanager
    def hold(self, keys: Iterable[str], timeout: float | None = None) -> Iterator[None]:
        if timeout is None:
            timeout = get_settings().lock_timeout_seconds
        ordered = sorted(set(keys))
        deadline = time.monotonic() + timeout
        acquired: list[tuple[str, _Entry]] = []
        try:
            for key in ordered:
                entry = self._checkout(key)
                remaining = max(0.0, deadline - time.monotonic())
                if not entry.lock.acquire(timeout=remaining):
                    self._checkin(key, entry)
                    logger.warning("Lock wait on %s exceeded %.2fs.", key, timeout)
                    raise ConcurrencyConflict(f"Timed out waiting for {key}, retry the request")
                acquired.append((key, entry))
            yield
        finally:
            for key, entry in reversed(acquired):
                entry.lock.release()
                self._checkin(key, entry)


ledger_locks = LockRegistry()
