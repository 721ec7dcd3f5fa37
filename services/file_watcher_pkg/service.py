"""
FileWatcher Service - Invalidation engine wiring va lifecycle management.

Class nay chi lam 1 viec: khoi tao cac dependencies
(IgnoreStrategy, PerPathDebouncer, CacheInvalidationHandler)
va quan ly lifecycle cua watchdog Observer.

Khac voi mot watcher "best effort", loi dang ky watch duoc raise len
caller: server khong the dam bao cache freshness neu khong co watcher.
"""

import os
from pathlib import Path
from typing import Any, Optional

from watchdog.observers import Observer

from core.errors import WatchRegistrationError
from core.logging_config import log_error, log_info
from services.cache_protocol import ICacheable
from services.file_watcher_pkg.debouncer import PerPathDebouncer
from services.file_watcher_pkg.handler import CacheInvalidationHandler
from services.file_watcher_pkg.ignore_strategies import WatchedExtensionStrategy
from services.interfaces.file_watcher_service import (
    IFileWatcherService,
    IIgnoreStrategy,
)


class FileWatcher(IFileWatcherService):
    """
    Invalidation engine: theo doi watch root va xoa cache entries bi thay doi.

    Wiring dependencies:
    - IIgnoreStrategy -> WatchedExtensionStrategy (co the thay qua constructor)
    - IEventDebouncer -> PerPathDebouncer (tao moi moi lan start)
    - CacheInvalidationHandler cau noi giua watchdog va cache

    Usage:
        watcher = FileWatcher()
        watcher.start(Path("/srv/site"), cache=store)
        # ... later
        watcher.stop()
    """

    def __init__(
        self,
        ignore_strategy: Optional[IIgnoreStrategy] = None,
    ):
        """
        Khoi tao FileWatcher voi optional custom ignore strategy.

        Args:
            ignore_strategy: Strategy xac dinh path nao can bo qua.
                             Mac dinh chi watch .html, .css, .js.
        """
        # Any de tranh false positive cua type checker voi Observer
        self._observer: Optional[Any] = None
        self._debouncer: Optional[PerPathDebouncer] = None
        self._handler: Optional[CacheInvalidationHandler] = None
        self._current_path: Optional[Path] = None
        self._ignore_strategy: IIgnoreStrategy = (
            ignore_strategy or WatchedExtensionStrategy()
        )

    def start(
        self,
        path: Path,
        cache: ICacheable,
        debounce_seconds: float = 0.2,
    ) -> None:
        """
        Bat dau theo doi mot thu muc (recursive).

        Neu dang theo doi thu muc khac, se tu dong stop truoc.

        Args:
            path: Watch root
            cache: Cache nhan invalidation
            debounce_seconds: Cua so debounce (mac dinh 200ms)

        Raises:
            WatchRegistrationError: Root khong hop le hoac observer
                khong khoi dong duoc (vd: het inotify watches)
        """
        self.stop()

        root = Path(path)
        if not root.is_dir():
            raise WatchRegistrationError(str(root), "not a directory")
        if not os.access(root, os.R_OK | os.X_OK):
            raise WatchRegistrationError(str(root), "directory is not readable")

        self._debouncer = PerPathDebouncer(window_seconds=debounce_seconds)
        self._handler = CacheInvalidationHandler(
            root=root,
            cache=cache,
            ignore_strategy=self._ignore_strategy,
            debouncer=self._debouncer,
        )

        try:
            self._observer = Observer()
            self._observer.schedule(self._handler, str(root), recursive=True)
            self._observer.start()
        except Exception as e:
            log_error(f"[FileWatcher] Failed to start: {e}")
            self.stop()
            raise WatchRegistrationError(str(root), str(e)) from e

        self._current_path = root
        log_info(f"[FileWatcher] Started watching: {root}")

    def stop(self) -> None:
        """Dung theo doi. Goi nhieu lan khong loi."""
        if self._debouncer is not None:
            self._debouncer.cleanup()
            self._debouncer = None

        self._handler = None

        observer = self._observer
        if observer is not None:
            try:
                observer.stop()
                if observer.is_alive():
                    observer.join(timeout=2.0)
                log_info(f"[FileWatcher] Stopped watching: {self._current_path}")
            except Exception as e:
                log_error(f"[FileWatcher] Error stopping: {e}")
            finally:
                self._observer = None

        self._current_path = None

    def is_running(self) -> bool:
        """Kiem tra watcher co dang chay khong."""
        observer = self._observer
        return observer is not None and observer.is_alive()

    @property
    def current_path(self) -> Optional[Path]:
        """Lay duong dan dang duoc theo doi."""
        return self._current_path
