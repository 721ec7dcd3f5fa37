"""
ReadWriteLock - Reader/writer lock cho shared caches.

Nhieu reader co the giu lock cung luc, writer giu lock doc quyen.
Writer duoc uu tien: khi co writer dang cho, reader moi phai doi,
tranh truong hop lookup lien tuc lam invalidation bi starve.

Su dung:
    lock = ReadWriteLock()
    with lock.read_locked():
        value = store.get(key)
    with lock.write_locked():
        store[key] = value
"""

import threading
from contextlib import contextmanager
from typing import Iterator


class ReadWriteLock:
    """
    Reader/writer lock dung threading.Condition.

    Attributes:
        _cond: Condition bao ve toan bo state ben duoi
        _readers: So reader dang giu lock
        _writer_active: True neu co writer dang giu lock
        _writers_waiting: So writer dang cho
    """

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer_active = False
        self._writers_waiting = 0

    def acquire_read(self) -> None:
        """Acquire read-mode. Block khi co writer dang giu hoac dang cho."""
        with self._cond:
            while self._writer_active or self._writers_waiting:
                self._cond.wait()
            self._readers += 1

    def release_read(self) -> None:
        """Release read-mode. Reader cuoi cung danh thuc writer dang cho."""
        with self._cond:
            if self._readers <= 0:
                raise RuntimeError("release_read() called without a read lock")
            self._readers -= 1
            if self._readers == 0:
                self._cond.notify_all()

    def acquire_write(self) -> None:
        """Acquire write-mode. Serialize voi moi reader va writer khac."""
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer_active or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writer_active = True

    def release_write(self) -> None:
        """Release write-mode."""
        with self._cond:
            if not self._writer_active:
                raise RuntimeError("release_write() called without a write lock")
            self._writer_active = False
            self._cond.notify_all()

    @contextmanager
    def read_locked(self) -> Iterator[None]:
        self.acquire_read()
        try:
            yield
        finally:
            self.release_read()

    @contextmanager
    def write_locked(self) -> Iterator[None]:
        self.acquire_write()
        try:
            yield
        finally:
            self.release_write()

    @property
    def reader_count(self) -> int:
        """So reader dang giu lock (dung cho tests va debugging)."""
        with self._cond:
            return self._readers

    @property
    def is_write_locked(self) -> bool:
        with self._cond:
            return self._writer_active
