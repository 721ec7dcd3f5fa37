"""
File Watcher Package - Invalidation engine cho static cache.

Export cac symbols chinh:
- FileWatcher (class chinh)
- CacheInvalidationHandler, to_logical_key
- PerPathDebouncer, WatchedExtensionStrategy
- FileChangeEvent (data class)
"""

from services.file_watcher_pkg.debouncer import PerPathDebouncer
from services.file_watcher_pkg.handler import CacheInvalidationHandler, to_logical_key
from services.file_watcher_pkg.ignore_strategies import WatchedExtensionStrategy
from services.file_watcher_pkg.service import FileWatcher
from services.interfaces.file_watcher_service import FileChangeEvent

__all__ = [
    "FileWatcher",
    "CacheInvalidationHandler",
    "to_logical_key",
    "PerPathDebouncer",
    "WatchedExtensionStrategy",
    "FileChangeEvent",
]
