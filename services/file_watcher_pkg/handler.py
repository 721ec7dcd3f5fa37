"""
Cache Invalidation Handler cho File Watcher.

Nhan events tu watchdog, ap dung ignore strategy va debouncer,
roi invalidate cache entry tuong ung.

Flow cho moi event:
1. Chuyen watchdog event thanh FileChangeEvent
2. Voi moi path bi anh huong: bo qua neu extension khong duoc watch
3. Map absolute path -> logical key ('/css/site.css')
4. Hoi debouncer, neu duoc chap nhan thi invalidate cache
"""

import os
from pathlib import Path
from typing import Optional

from watchdog.events import (
    FileSystemEvent,
    FileSystemEventHandler,
)

from core.logging_config import log_error, log_info
from services.cache_protocol import ICacheable
from services.interfaces.file_watcher_service import (
    FileChangeEvent,
    IEventDebouncer,
    IIgnoreStrategy,
)


def to_logical_key(path: str, root: Path) -> str:
    """
    Chuyen absolute path thanh logical cache key.

    Strip watch root va them '/' o dau. Path nam ngoai root giu nguyen
    chuoi goc lam key thay vi raise.

    Args:
        path: Duong dan tuyet doi tu watchdog
        root: Watch root

    Returns:
        Logical key (vd: '/index.html')
    """
    try:
        relative = Path(path).relative_to(root)
    except ValueError:
        return path
    return "/" + relative.as_posix()


def _decode_path(raw: object) -> Optional[str]:
    """Watchdog co the tra ve bytes path, decode theo filesystem encoding."""
    if isinstance(raw, (bytes, str)) and raw:
        return os.fsdecode(raw)
    return None


class CacheInvalidationHandler(FileSystemEventHandler):
    """
    Event handler nhan events tu watchdog va invalidate cache.

    Chay tren observer thread duy nhat cua watchdog, nen debouncer ledger
    khong can dong bo. Moi event duoc boc try/except: mot event loi chi bi
    log va bo qua, observer tiep tuc nhan events.

    Attributes:
        _root: Watch root (immutable)
        _cache: Cache nhan invalidation
        _ignore_strategy: Strategy loc extension
        _debouncer: Debouncer theo logical key
    """

    def __init__(
        self,
        root: Path,
        cache: ICacheable,
        ignore_strategy: IIgnoreStrategy,
        debouncer: IEventDebouncer,
    ):
        super().__init__()
        self._root = root
        self._cache = cache
        self._ignore_strategy = ignore_strategy
        self._debouncer = debouncer

    def to_change_event(
        self, event: FileSystemEvent, event_type: str
    ) -> Optional[FileChangeEvent]:
        """
        Chuyen watchdog event thanh FileChangeEvent.

        Returns:
            None neu event khong co src_path hop le
        """
        src_path = _decode_path(getattr(event, "src_path", None))
        if src_path is None:
            return None
        dest_path = _decode_path(getattr(event, "dest_path", None))
        return FileChangeEvent(
            event_type=event_type,
            path=src_path,
            is_directory=bool(getattr(event, "is_directory", False)),
            dest_path=dest_path,
        )

    def process(self, change: FileChangeEvent) -> list[str]:
        """
        Invalidate cache cho mot FileChangeEvent.

        Args:
            change: Event da chuyen doi

        Returns:
            Danh sach logical keys da bi invalidate
        """
        if change.is_directory:
            return []

        invalidated: list[str] = []
        for path in change.affected_paths():
            if self._ignore_strategy.should_ignore(path):
                continue

            key = to_logical_key(path, self._root)
            if not self._debouncer.should_process(key):
                continue

            log_info(f"[FileWatcher] File change detected: {path}")
            log_info(f"[FileWatcher] Removing cache entry: {key}")
            self._cache.invalidate_path(key)
            invalidated.append(key)
        return invalidated

    def _handle_event(self, event: FileSystemEvent, event_type: str) -> None:
        try:
            change = self.to_change_event(event, event_type)
            if change is None:
                log_error(f"[FileWatcher] Skipping malformed {event_type} event: {event!r}")
                return
            self.process(change)
        except Exception as e:
            log_error(f"[FileWatcher] Error handling {event_type} event", e)

    # Override watchdog event handlers
    def on_created(self, event: FileSystemEvent) -> None:
        self._handle_event(event, "created")

    def on_deleted(self, event: FileSystemEvent) -> None:
        self._handle_event(event, "deleted")

    def on_modified(self, event: FileSystemEvent) -> None:
        self._handle_event(event, "modified")

    def on_moved(self, event: FileSystemEvent) -> None:
        self._handle_event(event, "moved")
