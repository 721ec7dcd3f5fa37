"""
File Cache Store - Shared in-memory cache cho static server.

Mapping logical path -> CacheEntry(content, content_type), dung chung giua
tat ca connection threads va file watcher.

Locking:
- lookup(): read-mode, nhieu thread doc cung luc
- insert() / invalidate(): write-mode, serialize voi moi thao tac khac
- hits/misses: itertools.count, lookup() khong lay them mutex nao

Khong co single-flight: hai request miss cung luc cho cung mot path deu doc
disk va deu insert, entry cuoi cung thang (last-writer-wins).
"""

import itertools
import threading
from dataclasses import dataclass
from typing import Optional

from core.logging_config import log_debug
from core.utils.rw_lock import ReadWriteLock


class _EventCounter:
    """
    Counter chi tang, increment() khong lay lock.

    next() tren itertools.count la mot thao tac atomic, nen nhieu reader
    thread tang cung luc khong mat count. Doc value cung goi next() nen
    so lan doc duoc tru lai (chi duong doc dung lock).
    """

    def __init__(self) -> None:
        self._counter = itertools.count()
        self._reads = 0
        self._read_lock = threading.Lock()

    def increment(self) -> None:
        next(self._counter)

    @property
    def value(self) -> int:
        with self._read_lock:
            value = next(self._counter) - self._reads
            self._reads += 1
            return value


@dataclass(frozen=True)
class CacheEntry:
    """
    Mot file da duoc cache.

    Immutable: khi file thay doi, entry bi xoa va entry moi duoc tao lai,
    khong bao gio sua mot phan.

    Attributes:
        path: Logical key, bat dau bang '/'
        content: Noi dung file
        content_type: MIME type (vd: 'text/html')
    """

    path: str
    content: bytes
    content_type: str


class FileCacheStore:
    """
    Thread-safe cache store, implement ICacheable.

    Entries la immutable va slot trong dict chi duoc thay trong write lock,
    nen reader khong bao gio thay entry viet do dang.
    """

    def __init__(self) -> None:
        self._entries: dict[str, CacheEntry] = {}
        self._lock = ReadWriteLock()

        # lookup() chi giu read lock, hits/misses dem khong qua mutex chung
        self._hits = _EventCounter()
        self._misses = _EventCounter()
        self._inserts = 0
        self._invalidations = 0

    def lookup(self, path: str) -> Optional[CacheEntry]:
        """
        Lay entry cho path.

        Args:
            path: Logical key (vd: '/index.html')

        Returns:
            CacheEntry neu hit, None neu miss
        """
        with self._lock.read_locked():
            entry = self._entries.get(path)

        if entry is None:
            self._misses.increment()
        else:
            self._hits.increment()
        return entry

    def insert(self, path: str, content: bytes, content_type: str) -> CacheEntry:
        """
        Luu entry cho path, thay the entry cu neu co.

        Args:
            path: Logical key
            content: Noi dung file vua doc tu disk
            content_type: MIME type cua file

        Returns:
            CacheEntry vua duoc luu
        """
        entry = CacheEntry(path=path, content=bytes(content), content_type=content_type)
        with self._lock.write_locked():
            self._entries[path] = entry
            self._inserts += 1
        return entry

    def invalidate(self, path: str) -> bool:
        """
        Xoa entry cho path. No-op neu khong co.

        Args:
            path: Logical key

        Returns:
            True neu co entry bi xoa
        """
        with self._lock.write_locked():
            removed = self._entries.pop(path, None) is not None
            if removed:
                self._invalidations += 1
        if removed:
            log_debug(f"[Cache] Removed entry: {path}")
        return removed

    # --- ICacheable ---

    def invalidate_path(self, path: str) -> None:
        self.invalidate(path)

    def invalidate_all(self) -> None:
        """Xoa toan bo entries."""
        with self._lock.write_locked():
            self._invalidations += len(self._entries)
            self._entries.clear()

    def size(self) -> int:
        with self._lock.read_locked():
            return len(self._entries)

    def __len__(self) -> int:
        return self.size()

    def __contains__(self, path: object) -> bool:
        with self._lock.read_locked():
            return path in self._entries

    def get_stats(self) -> dict[str, int]:
        """
        Thong ke cache cho monitoring.

        Returns:
            Dict gom entries, bytes, hits, misses, inserts, invalidations
        """
        with self._lock.read_locked():
            return {
                "entries": len(self._entries),
                "bytes": sum(len(e.content) for e in self._entries.values()),
                "hits": self._hits.value,
                "misses": self._misses.value,
                "inserts": self._inserts,
                "invalidations": self._invalidations,
            }
