"""
Static File Server - Listener, invalidation engine va thread-per-connection.

Wiring luc khoi dong:
1. Tao FileCacheStore dung chung
2. Bind listener (loopback) - loi bind la fatal
3. Start FileWatcher tren watch root - loi dang ky watch la fatal
4. Accept loop: moi connection mot daemon thread chay RequestCoordinator
"""

import errno
import socket
import threading
from pathlib import Path
from typing import Callable, Optional

from config.server_settings import LOOPBACK_HOST, ServerSettings
from core.errors import ServerBindError
from core.logging_config import log_error, log_info
from core.mime_types import guess_content_type
from services.cache_store import FileCacheStore
from services.file_watcher_pkg.ignore_strategies import WatchedExtensionStrategy
from services.file_watcher_pkg.service import FileWatcher
from services.request_coordinator import RequestCoordinator

LISTEN_BACKLOG = 128
# accept() timeout de accept loop kiem tra shutdown flag dinh ky
ACCEPT_POLL_SECONDS = 0.5


class StaticFileServer:
    """
    Static asset server voi in-memory cache tu invalidate.

    Usage:
        server = StaticFileServer(ServerSettings(port=8000))
        server.start()
        server.serve_forever()

    Attributes:
        settings: ServerSettings da resolve
        root: Watch root (absolute, immutable)
        cache: Cache store dung chung giua connections va watcher
        watcher: Invalidation engine (mot instance moi server)
        coordinator: Request coordinator dung chung cho moi connection
    """

    def __init__(
        self,
        settings: ServerSettings,
        cache: Optional[FileCacheStore] = None,
        classifier: Callable[[str], str] = guess_content_type,
    ):
        self.settings = settings
        self.root: Path = settings.resolve_root()
        self.cache = cache if cache is not None else FileCacheStore()
        self.watcher = FileWatcher(
            ignore_strategy=WatchedExtensionStrategy(settings.watched_extensions)
        )
        self.coordinator = RequestCoordinator(
            root=self.root,
            cache=self.cache,
            classifier=classifier,
            default_document=settings.default_document,
            recv_buffer_size=settings.recv_buffer_size,
        )
        self._listener: Optional[socket.socket] = None
        self._shutdown = threading.Event()

    @property
    def address(self) -> tuple[str, int]:
        """(host, port) thuc te sau khi bind."""
        if self._listener is None:
            return (LOOPBACK_HOST, self.settings.port)
        host, port = self._listener.getsockname()[:2]
        return (host, port)

    @property
    def port(self) -> int:
        return self.address[1]

    def start(self) -> None:
        """
        Bind listener va start invalidation engine.

        Listener luon bind loopback, khong co cau hinh nao doi duoc host.

        Raises:
            ServerBindError: Port dang duoc dung hoac loi bind khac
            WatchRegistrationError: Khong watch duoc root
        """
        address = f"{LOOPBACK_HOST}:{self.settings.port}"
        listener = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        try:
            listener.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            listener.bind((LOOPBACK_HOST, self.settings.port))
            listener.listen(LISTEN_BACKLOG)
            listener.settimeout(ACCEPT_POLL_SECONDS)
        except OSError as e:
            listener.close()
            if e.errno == errno.EADDRINUSE:
                raise ServerBindError(address, "address already in use") from e
            raise ServerBindError(address, str(e)) from e

        self._listener = listener
        self._shutdown.clear()

        try:
            self.watcher.start(
                self.root,
                cache=self.cache,
                debounce_seconds=self.settings.debounce_seconds,
            )
        except Exception:
            self._close_listener()
            raise

        host, port = self.address
        log_info(f"Serving HTTP on {host}:{port} ...")
        log_info(f"Serving directory: {self.root}")

    def serve_forever(self) -> None:
        """Accept loop. Chay den khi shutdown() duoc goi."""
        listener = self._listener
        if listener is None:
            raise RuntimeError("start() must be called before serve_forever()")

        while not self._shutdown.is_set():
            try:
                conn, addr = listener.accept()
            except socket.timeout:
                continue
            except OSError as e:
                if self._shutdown.is_set():
                    break
                log_error("[Server] Accept failed", e)
                continue

            conn.settimeout(None)
            t = threading.Thread(
                target=self.coordinator.handle_connection,
                args=(conn,),
                name=f"conn-{addr[0]}:{addr[1]}",
                daemon=True,
            )
            t.start()

    def serve_in_background(self) -> threading.Thread:
        """Start accept loop tren daemon thread (dung cho tests)."""
        t = threading.Thread(target=self.serve_forever, name="accept-loop", daemon=True)
        t.start()
        return t

    def shutdown(self) -> None:
        """Dung accept loop, dong listener va dung watcher. Idempotent."""
        self._shutdown.set()
        self._close_listener()
        self.watcher.stop()

    def _close_listener(self) -> None:
        listener = self._listener
        self._listener = None
        if listener is None:
            return
        try:
            # Danh thuc accept() dang block
            listener.shutdown(socket.SHUT_RDWR)
        except OSError:
            pass
        listener.close()


def run(settings: ServerSettings) -> None:
    """
    Start server va block cho den Ctrl+C.

    Raises:
        ServerBindError, WatchRegistrationError: Loi fatal luc khoi dong
    """
    server = StaticFileServer(settings)
    server.start()
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        log_info("Shutting down")
    finally:
        server.shutdown()
