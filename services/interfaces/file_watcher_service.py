"""
Interfaces cho File Watcher Service.

Dinh nghia contracts cho:
- IFileWatcherService: Start/stop theo doi watch root va invalidate cache
- IIgnoreStrategy: Xac dinh path nao can bo qua
- IEventDebouncer: Quyet dinh event nao duoc xu ly, event nao bi nuot
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from services.cache_protocol import ICacheable


@dataclass
class FileChangeEvent:
    """
    Dai dien cho mot su kien thay doi file.

    Attributes:
        event_type: Loai su kien ('created', 'deleted', 'modified', 'moved')
        path: Duong dan tuyet doi cua file/folder bi thay doi
        is_directory: True neu la thu muc
        dest_path: Duong dan dich, chi co voi 'moved'
    """

    event_type: str
    path: str
    is_directory: bool
    dest_path: Optional[str] = None

    def affected_paths(self) -> list[str]:
        """Tat ca paths bi anh huong (moved co ca nguon va dich)."""
        paths = [self.path]
        if self.dest_path:
            paths.append(self.dest_path)
        return paths


class IIgnoreStrategy(ABC):
    """
    Interface xac dinh logic bo qua path.

    Implementation co the dua tren extension, ten thu muc,
    hoac bat ky logic nao khac.
    """

    @abstractmethod
    def should_ignore(self, path: str) -> bool:
        """
        Kiem tra xem path co nen bi bo qua khong.

        Args:
            path: Duong dan tuyet doi can kiem tra

        Returns:
            True neu path can bi bo qua
        """
        ...


class IEventDebouncer(ABC):
    """
    Interface gom cac event lien tiep cua cung mot key thanh mot.

    Editor thuong ban nhieu modify events cho mot lan save,
    debouncer chi cho event dau tien trong cua so di qua.
    """

    @abstractmethod
    def should_process(self, key: str) -> bool:
        """
        Quyet dinh event cho key co duoc xu ly khong.

        Args:
            key: Logical key cua file (vd: '/index.html')

        Returns:
            True neu event duoc chap nhan, False neu bi suppress
        """
        ...

    @abstractmethod
    def cleanup(self) -> None:
        """Don dep state khi shutdown."""
        ...


class IFileWatcherService(ABC):
    """
    Interface cho dich vu theo doi watch root va invalidate cache.

    Moi implementation phai dam bao:
    - Loi dang ky watch duoc raise (server khong the chay khong co watcher)
    - Mot event loi khong lam dung watcher
    - Background thread cho event listening
    """

    @abstractmethod
    def start(
        self,
        path: Path,
        cache: ICacheable,
        debounce_seconds: float = 0.2,
    ) -> None:
        """
        Bat dau theo doi mot thu muc.

        Args:
            path: Watch root
            cache: Cache nhan invalidation
            debounce_seconds: Cua so debounce (mac dinh 200ms)

        Raises:
            WatchRegistrationError: Khi khong dang ky duoc watch
        """
        ...

    @abstractmethod
    def stop(self) -> None:
        """Dung theo doi."""
        ...

    @abstractmethod
    def is_running(self) -> bool:
        """Kiem tra watcher co dang chay khong."""
        ...

    @property
    @abstractmethod
    def current_path(self) -> Optional[Path]:
        """Lay duong dan dang duoc theo doi."""
        ...
