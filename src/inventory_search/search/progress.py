"""Thread-safe progress tracking for full index rebuilds."""

import threading
import time
from collections.abc import Mapping

from inventory_search.search.schemas import ProgressStatus


def _now_ms() -> int:
    return int(time.time() * 1000)


class IndexProgress:
    """Counts documents written during a rebuild, per entity type.

    The rebuild thread calls ``start``, ``inc`` and ``finish``; any other
    thread may call ``status`` at any time and gets a consistent snapshot.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._active = False
        self._totals: dict[str, int] = {}
        self._done: dict[str, int] = {}
        self._started_at_ms = 0

    def start(self, totals: Mapping[str, int]) -> None:
        """Begin a rebuild with the planned document counts.

        Args:
            totals: Documents to index per entity type, in display order.
        """
        with self._lock:
            self._totals = {key: int(value) for key, value in totals.items()}
            self._done = {key: 0 for key in self._totals}
            self._started_at_ms = _now_ms()
            self._active = True

    def inc(self, key: str) -> None:
        """Count one indexed document; ignored when no rebuild is running."""
        with self._lock:
            if not self._active:
                return
            self._done[key] = self._done.get(key, 0) + 1

    def finish(self) -> None:
        """End the rebuild, raising every counter to at least its total."""
        with self._lock:
            for key, total in self._totals.items():
                self._done[key] = max(self._done.get(key, 0), total)
            self._active = False

    @property
    def is_active(self) -> bool:
        with self._lock:
            return self._active

    def status(self) -> ProgressStatus:
        """Take an immutable snapshot of the current progress."""
        with self._lock:
            totals = dict(self._totals)
            done = {key: self._done.get(key, 0) for key in totals}
            for key, value in self._done.items():
                done.setdefault(key, value)
            active = self._active
            started_at_ms = self._started_at_ms

        grand_total = sum(totals.values())
        total_done = sum(done.values())
        if not active:
            percent = 100
        elif grand_total == 0:
            percent = 0
        else:
            percent = min(100, total_done * 100 // grand_total)

        return ProgressStatus(
            active=active,
            totals=totals,
            done=done,
            grand_total=grand_total,
            total_done=total_done,
            percent=percent,
            started_at_ms=started_at_ms,
            now_ms=_now_ms(),
        )
