"""
HTTP Protocol - Minimal HTTP/1.x request parsing va response framing.

Chi ho tro nhung gi static server can:
- Doc request tu socket den khi gap blank line (\\r\\n\\r\\n)
- Parse request line: METHOD SP TARGET SP VERSION
- Build response 200 (co/khong Content-Type) va response loi HTML

Khong ho tro keep-alive, chunked transfer hay request body.
"""

import socket
from dataclasses import dataclass
from typing import Optional

from core.mime_types import is_generic_binary

HEADER_TERMINATOR = b"\r\n\r\n"
HTTP_VERSION = "HTTP/1.1"

STATUS_REASONS = {
    200: "OK",
    404: "Not Found",
    405: "Method Not Allowed",
}


@dataclass(frozen=True)
class HttpRequest:
    """
    Request line da parse.

    Attributes:
        method: HTTP method (vd: 'GET'), rong neu request trong
        target: Request target, mac dinh '/' khi thieu
        version: HTTP version token, co the rong
    """

    method: str
    target: str
    version: str = ""


def read_request_head(conn: socket.socket, chunk_size: int = 1024) -> bytes:
    """
    Doc request tu socket cho den khi gap header terminator hoac EOF.

    Args:
        conn: Client socket
        chunk_size: Kich thuoc moi lan recv()

    Returns:
        Toan bo bytes da doc (co the rong neu client dong ngay)

    Raises:
        OSError: Khi socket loi (reset, timeout...)
    """
    buffer = bytearray()
    while True:
        chunk = conn.recv(chunk_size)
        if not chunk:
            break
        buffer.extend(chunk)
        if HEADER_TERMINATOR in buffer:
            break
    return bytes(buffer)


def parse_request_line(raw: bytes) -> HttpRequest:
    """
    Parse dong dau tien cua request.

    Bytes khong hop le UTF-8 duoc thay the thay vi raise.

    Args:
        raw: Bytes doc tu socket

    Returns:
        HttpRequest; target mac dinh '/' neu thieu
    """
    text = raw.decode("utf-8", errors="replace")
    lines = text.splitlines()
    first_line = lines[0] if lines else ""
    parts = first_line.split()

    method = parts[0] if len(parts) > 0 else ""
    target = parts[1] if len(parts) > 1 else "/"
    version = parts[2] if len(parts) > 2 else ""
    return HttpRequest(method=method, target=target, version=version)


def build_file_response(content: bytes, content_type: str) -> bytes:
    """
    Build response 200 cho noi dung file.

    Header Content-Type bi bo hoan toan khi type la generic binary.

    Args:
        content: Body bytes
        content_type: MIME type cua file

    Returns:
        Response bytes day du (header + body)
    """
    head = f"{HTTP_VERSION} 200 OK\r\nContent-Length: {len(content)}\r\n"
    if not is_generic_binary(content_type):
        head += f"Content-Type: {content_type}\r\n"
    head += "\r\n"
    return head.encode("latin-1") + content


def build_error_response(code: int, reason: Optional[str] = None) -> bytes:
    """
    Build response loi voi body HTML don gian.

    Args:
        code: HTTP status code
        reason: Reason phrase (mac dinh lay tu STATUS_REASONS)

    Returns:
        Response bytes, body dang '<h1>404 Not Found</h1>'
    """
    reason = reason or STATUS_REASONS.get(code, "Error")
    body = f"<h1>{code} {reason}</h1>".encode("utf-8")
    head = (
        f"{HTTP_VERSION} {code} {reason}\r\n"
        f"Content-Length: {len(body)}\r\n"
        "Content-Type: text/html\r\n"
        "\r\n"
    )
    return head.encode("latin-1") + body
