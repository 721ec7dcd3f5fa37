"""
Request Coordinator - Xu ly mot connection cua static server.

Moi connection chay tren thread rieng, chi tuong tac voi FileCacheStore
va filesystem, khong bao gio cham vao file watcher.

State machine (tuyen tinh):
    AWAIT_REQUEST_LINE -> RESOLVE_PATH
        -> CACHE_HIT -> RESPOND
        -> CACHE_MISS -> DISK_READ -> CLASSIFY -> POPULATE_CACHE -> RESPOND
        -> ERROR_RESPONSE
    -> CLOSE

Read-through: luon lookup cache truoc khi doc disk, ke ca khi cung mot
path duoc request lai.
"""

import errno
import socket
from pathlib import Path
from typing import Callable, Optional

from core.http_protocol import (
    HttpRequest,
    build_error_response,
    build_file_response,
    parse_request_line,
    read_request_head,
)
from core.logging_config import log_debug, log_error, log_warning
from core.mime_types import guess_content_type
from services.cache_store import FileCacheStore

# Loi I/O xay ra khi client dong socket giua chung - bo qua im lang
_SILENT_ERRNOS = {errno.EPIPE, errno.ECONNRESET, errno.ECONNABORTED}


def _is_client_disconnect(exc: OSError) -> bool:
    if isinstance(exc, (BrokenPipeError, ConnectionResetError, ConnectionAbortedError)):
        return True
    return exc.errno in _SILENT_ERRNOS


class RequestCoordinator:
    """
    Read-through cache protocol cho mot request.

    Instance khong co mutable state rieng nen dung chung duoc giua tat ca
    connection threads. State duy nhat duoc chia se la cache store.

    Attributes:
        root: Watch root (absolute, immutable)
        cache: Cache store dung chung
        classifier: Ham path -> content type
        default_document: File tra ve cho '/'
        recv_buffer_size: Kich thuoc moi lan recv()
    """

    def __init__(
        self,
        root: Path,
        cache: FileCacheStore,
        classifier: Callable[[str], str] = guess_content_type,
        default_document: str = "index.html",
        recv_buffer_size: int = 1024,
    ):
        self.root = root
        self.cache = cache
        self.classifier = classifier
        self.default_document = default_document
        self.recv_buffer_size = recv_buffer_size

    def handle_connection(self, conn: socket.socket) -> None:
        """
        Xu ly tron ven mot connection roi dong socket.

        Client ngat ket noi (broken pipe, reset) bi bo qua im lang,
        loi socket khac duoc log. Khong loi nao lan sang connection khac.

        Args:
            conn: Client socket vua accept
        """
        try:
            with conn:
                raw = read_request_head(conn, self.recv_buffer_size)
                if not raw:
                    return
                response = self.respond(parse_request_line(raw))
                conn.sendall(response)
        except OSError as e:
            if not _is_client_disconnect(e):
                log_error("[Server] Error handling client", e)

    def respond(self, request: HttpRequest) -> bytes:
        """
        Build response cho mot request da parse.

        Args:
            request: Request line

        Returns:
            Response bytes day du
        """
        log_debug(f"[Server] Method: {request.method}, File requested: {request.target}")

        if request.method != "GET":
            return build_error_response(405)

        key = self.resolve_key(request.target)

        entry = self.cache.lookup(key)
        if entry is not None:
            log_debug(f"[Server] Serving from cache: {key}")
            return build_file_response(entry.content, entry.content_type)

        file_path = self.resolve_file(key)
        if file_path is None:
            return build_error_response(404)

        try:
            content = file_path.read_bytes()
        except OSError as e:
            log_warning(f"[Server] Could not read {file_path}: {e}")
            return build_error_response(404)

        content_type = self.classifier(str(file_path))
        self.cache.insert(key, content, content_type)
        log_debug(f"[Server] Cached {key} ({len(content)} bytes, {content_type})")

        # Response dung chinh bytes vua cache, khong doc lai disk
        return build_file_response(content, content_type)

    def resolve_key(self, target: str) -> str:
        """
        Map request target sang logical cache key.

        '/' (hoac target rong) -> '/<default_document>', con lai giu nguyen.
        """
        if not target or target == "/":
            return "/" + self.default_document
        return target

    def resolve_file(self, key: str) -> Optional[Path]:
        """
        Map logical key sang file tren disk.

        Args:
            key: Logical key

        Key phai la dang canonical cua file: watcher chi invalidate key
        canonical, nen alias ('/./index.html', '/css/../index.html',
        symlink) se bi stale mai mai neu duoc cache.

        Returns:
            Path neu la regular file nam trong root va key canonical,
            None neu khong
        """
        relative = key[1:] if key.startswith("/") else key
        candidate = self.root / relative
        try:
            resolved = candidate.resolve()
            canonical = "/" + resolved.relative_to(self.root).as_posix()
        except (OSError, ValueError, RuntimeError):
            # Ngoai root (vd: '/../secret') hoac symlink loop
            return None

        if canonical != key:
            return None

        if candidate.is_file():
            return candidate
        return None
