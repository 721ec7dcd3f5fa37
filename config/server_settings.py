"""
ServerSettings - Typed settings dataclass cho static-cache-server.

Thay the Dict[str, Any] bang dataclass co type hints va default values.
Tat ca settings duoc truy cap qua typed fields thay vi string keys.

Modules:
- ServerSettings: Dataclass chua toan bo server settings
- from_dict(): Tao ServerSettings tu dict (settings.json)
- to_dict(): Chuyen doi ServerSettings thanh dict
- load_server_settings(): Doc settings.json, fallback ve defaults

Su dung:
    settings = load_server_settings()
    settings.port = 9000
    root = settings.resolve_root()
"""

import json
import typing
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Callable, Optional

from config.paths import SETTINGS_FILE


# === Default values cho settings ===
DEFAULT_PORT = 8000
LOOPBACK_HOST = "127.0.0.1"
DEFAULT_DEBOUNCE_MS = 200
DEFAULT_DOCUMENT = "index.html"
DEFAULT_WATCHED_EXTENSIONS = (".html", ".css", ".js")


def _is_extension_list(value: list) -> bool:
    return bool(value) and all(isinstance(ext, str) and ext.strip(".") for ext in value)


# Range checks cho cac field da dung type
_FIELD_VALIDATORS: dict[str, Callable[[Any], bool]] = {
    "port": lambda v: 0 <= v <= 65535,
    "recv_buffer_size": lambda v: v > 0,
    "default_document": lambda v: bool(v.strip("/")),
    "debounce_ms": lambda v: v >= 0,
    "watched_extensions": _is_extension_list,
}


@dataclass
class ServerSettings:
    """
    Typed settings cho static server.

    Moi field tuong ung voi mot key trong settings.json.
    Default values duoc su dung khi settings.json chua co key tuong ung.
    """

    # --- Network ---
    # Port TCP de lang nghe (0 = ephemeral, dung trong tests)
    port: int = DEFAULT_PORT
    # Kich thuoc moi lan recv() khi doc request
    recv_buffer_size: int = 1024

    # --- Serving ---
    # Thu muc duoc serve va watch (rong = current working directory)
    root: str = ""
    # File tra ve cho request "/"
    default_document: str = DEFAULT_DOCUMENT

    # --- Invalidation ---
    # Cua so debounce cho file change events (milliseconds)
    debounce_ms: int = DEFAULT_DEBOUNCE_MS
    # Chi cac extension nay moi invalidate cache
    watched_extensions: list[str] = field(
        default_factory=lambda: list(DEFAULT_WATCHED_EXTENSIONS)
    )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ServerSettings":
        """
        Tao ServerSettings tu dict, chi lay cac keys trung voi field names.

        Value co type khong khop voi field declaration, hoac nam ngoai range
        hop le (xem _FIELD_VALIDATORS), se bi bo qua va dung default thay the.
        Host khong phai setting: server luon bind LOOPBACK_HOST.

        Args:
            data: Dict settings (thuong tu settings.json)

        Returns:
            ServerSettings instance voi values tu dict, fallback ve defaults
        """
        field_types: dict[str, Any] = {f.name: f.type for f in fields(cls)}

        filtered: dict[str, Any] = {}
        for key, value in data.items():
            if key not in field_types:
                continue

            expected_type = field_types[key]

            # Xu ly truong hop type annotation la string (forward ref)
            if isinstance(expected_type, str):
                type_map = {"str": str, "bool": bool, "int": int, "float": float}
                expected_type = type_map.get(expected_type, list)

            # isinstance(True, int) == True, nhung port=True la sai
            if expected_type is int and isinstance(value, bool):
                continue

            origin = typing.get_origin(expected_type)
            check_type = origin if origin is not None else expected_type

            if not isinstance(value, check_type):
                continue

            # Dung type nhung ngoai range (vd: port am) -> dung default
            validator = _FIELD_VALIDATORS.get(key)
            if validator is not None and not validator(value):
                continue

            filtered[key] = value

        return cls(**filtered)

    def to_dict(self) -> dict[str, Any]:
        """
        Chuyen doi ServerSettings thanh dict de luu xuong file.

        Returns:
            Dict voi toan bo settings
        """
        return {
            "port": self.port,
            "recv_buffer_size": self.recv_buffer_size,
            "root": self.root,
            "default_document": self.default_document,
            "debounce_ms": self.debounce_ms,
            "watched_extensions": list(self.watched_extensions),
        }

    @property
    def debounce_seconds(self) -> float:
        """Cua so debounce tinh bang giay."""
        return self.debounce_ms / 1000.0

    def resolve_root(self) -> Path:
        """
        Tra ve watch root dang absolute, da resolve symlinks.

        Returns:
            Path cua thu muc duoc serve
        """
        base = Path(self.root) if self.root else Path.cwd()
        return base.expanduser().resolve()


def load_server_settings(path: Optional[Path] = None) -> ServerSettings:
    """
    Load settings tu JSON file.

    File khong ton tai hoac JSON loi -> tra ve defaults.

    Args:
        path: Duong dan file settings (mac dinh SETTINGS_FILE)

    Returns:
        ServerSettings instance voi values tu file + defaults
    """
    settings_file = path or SETTINGS_FILE
    try:
        if settings_file.exists():
            content = settings_file.read_text(encoding="utf-8")
            saved = json.loads(content)
            if isinstance(saved, dict):
                return ServerSettings.from_dict(saved)
    except (OSError, ValueError):
        # ValueError gom JSONDecodeError va UnicodeDecodeError
        pass
    return ServerSettings()
