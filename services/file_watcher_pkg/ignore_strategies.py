"""
Ignore Strategies cho File Watcher.

Chua cac implementation cua IIgnoreStrategy:
- WatchedExtensionStrategy: Chi giu lai file web assets (.html, .css, .js)
"""

from pathlib import PurePath
from typing import Iterable, Optional, Set

from services.interfaces.file_watcher_service import IIgnoreStrategy

DEFAULT_WATCHED_EXTENSIONS: Set[str] = {".html", ".css", ".js"}


class WatchedExtensionStrategy(IIgnoreStrategy):
    """
    Bo qua moi file co extension khong nam trong danh sach watched.

    So sanh phan biet hoa thuong: 'INDEX.HTML' khong duoc watch.

    Attributes:
        extensions: Set cac extension (co dau cham) duoc giu lai
    """

    def __init__(self, extensions: Optional[Iterable[str]] = None):
        if extensions is None:
            extensions = DEFAULT_WATCHED_EXTENSIONS
        self.extensions: Set[str] = {
            ext if ext.startswith(".") else f".{ext}" for ext in extensions
        }

    def should_ignore(self, path: str) -> bool:
        """
        Kiem tra path co extension duoc watch khong.

        Args:
            path: Duong dan tuyet doi can kiem tra

        Returns:
            True neu extension khong duoc watch (ke ca file khong co extension)
        """
        return PurePath(path).suffix not in self.extensions
