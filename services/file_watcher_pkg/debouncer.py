"""
Event Debouncer cho File Watcher.

Gom cac file system events lien tiep cua cung mot file thanh mot lan
invalidate. Tranh invalidate nhieu lan khi editor ban nhieu modify events
cho mot lan save.

Leading-edge: event dau tien duoc xu ly ngay, cac event sau trong cua so
debounce bi suppress.
"""

import time
from typing import Callable

from core.logging_config import log_debug
from services.interfaces.file_watcher_service import IEventDebouncer

# Gioi han so keys trong ledger
MAX_LEDGER_ENTRIES = 4096


class PerPathDebouncer(IEventDebouncer):
    """
    Debouncer theo tung logical key.

    Ledger chi duoc truy cap tu watchdog observer thread nen khong can lock.

    Attributes:
        _window: Cua so debounce (giay)
        _clock: Ham tra ve thoi gian monotonic (inject duoc cho tests)
        _ledger: key -> thoi diem event duoc chap nhan gan nhat
        _max_entries: So keys toi da truoc khi prune
    """

    def __init__(
        self,
        window_seconds: float = 0.2,
        clock: Callable[[], float] = time.monotonic,
        max_entries: int = MAX_LEDGER_ENTRIES,
    ):
        """
        Khoi tao debouncer.

        Args:
            window_seconds: Cua so debounce, mac dinh 200ms
            clock: Nguon thoi gian monotonic
            max_entries: Gioi han kich thuoc ledger
        """
        self._window = window_seconds
        self._clock = clock
        self._max_entries = max(1, max_entries)
        self._ledger: dict[str, float] = {}

    def should_process(self, key: str) -> bool:
        """
        Kiem tra event cho key co nam ngoai cua so debounce khong.

        Neu duoc chap nhan, thoi diem hien tai duoc ghi vao ledger.

        Args:
            key: Logical key cua file

        Returns:
            True neu event duoc xu ly
        """
        now = self._clock()
        last = self._ledger.get(key)
        if last is not None and now - last < self._window:
            log_debug(f"[FileWatcher] Debounced event for {key}")
            return False

        if key not in self._ledger and len(self._ledger) >= self._max_entries:
            self._prune(now)

        # Re-insert de giu thu tu theo thoi gian chap nhan
        self._ledger.pop(key, None)
        self._ledger[key] = now
        return True

    def cleanup(self) -> None:
        """Xoa ledger khi shutdown."""
        self._ledger.clear()

    def __len__(self) -> int:
        return len(self._ledger)

    def _prune(self, now: float) -> None:
        """
        Giai phong cho trong ledger.

        Xoa cac key da ra khoi cua so debounce (khong con suppress duoc gi).
        Neu van day, xoa key cu nhat.
        """
        expired = [k for k, t in self._ledger.items() if now - t >= self._window]
        for k in expired:
            del self._ledger[k]

        if len(self._ledger) >= self._max_entries:
            oldest = next(iter(self._ledger))
            del self._ledger[oldest]
