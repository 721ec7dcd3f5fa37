"""
ICacheable Protocol - Interface cho cache co the bi invalidate tu ben ngoai.

Dinh nghia contract chung de Invalidation Engine khong phu thuoc vao
implementation cu the cua cache store.

Protocol pattern cho phep cac cache implementations khong can ke thua,
chi can implement dung methods.
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class ICacheable(Protocol):
    """
    Protocol cho cac cache nhan invalidation tu file watcher.

    Bat ky class nao implement 3 methods nay deu co the duoc gan vao watcher.
    """

    def invalidate_path(self, path: str) -> None:
        """
        Xoa cache entry cua mot logical path (vd: '/index.html').

        Goi khi FileWatcher phat hien file thay doi hoac bi xoa.

        Args:
            path: Logical key cua file da thay doi
        """
        ...

    def invalidate_all(self) -> None:
        """Xoa toan bo cache."""
        ...

    def size(self) -> int:
        """
        Tra ve so luong entries hien co trong cache.

        Returns:
            So entries trong cache
        """
        ...
