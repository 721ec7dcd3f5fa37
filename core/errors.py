"""
Server Errors - Cac loi fatal khi khoi dong server.

Chi cac loi lam server khong the phuc vu dung moi duoc raise len toi main:
- ServerBindError: Khong bind duoc port (port dang dung, permission...)
- WatchRegistrationError: Khong dang ky duoc file watcher,
  cache khong the dam bao freshness nen phai abort startup

Loi theo tung connection hoac tung file event duoc xu ly tai cho, khong
di qua hierarchy nay.
"""


class StaticServerError(Exception):
    """Base class cho cac loi fatal cua server."""


class ServerBindError(StaticServerError):
    """Khong the bind listener socket."""

    def __init__(self, address: str, reason: str):
        super().__init__(f"Failed to bind to address {address}: {reason}")
        self.address = address
        self.reason = reason


class WatchRegistrationError(StaticServerError):
    """Khong the dang ky recursive watch tren watch root."""

    def __init__(self, root: str, reason: str):
        super().__init__(f"Failed to watch directory {root}: {reason}")
        self.root = root
        self.reason = reason
