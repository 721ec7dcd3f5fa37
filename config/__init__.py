"""
Config Package - Chua cac constants va cau hinh cua server

Bao gom:
- paths: App directories, log dir, debug env var
- server_settings: Typed ServerSettings va loader
"""

from config.server_settings import (
    ServerSettings,
    DEFAULT_PORT,
    LOOPBACK_HOST,
    load_server_settings,
)

__all__ = [
    "ServerSettings",
    "DEFAULT_PORT",
    "LOOPBACK_HOST",
    "load_server_settings",
]
