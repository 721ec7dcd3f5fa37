"""
MIME Utilities - Nhận diện Content-Type cho static assets

Dựa trên extension của file. Các web asset phổ biến được pin cứng để kết
quả không phụ thuộc vào mimetypes database của từng hệ điều hành, phần
còn lại fallback sang thư viện mimetypes.
"""

import mimetypes
from pathlib import PurePath
from typing import Dict, Union

# Generic binary type - response bỏ header Content-Type khi gặp type này
OCTET_STREAM = "application/octet-stream"

# Web assets - luôn trả về cùng một giá trị trên mọi platform
WEB_ASSET_TYPES: Dict[str, str] = {
    ".html": "text/html",
    ".htm": "text/html",
    ".css": "text/css",
    ".js": "text/javascript",
    ".mjs": "text/javascript",
    ".json": "application/json",
    ".map": "application/json",
    ".svg": "image/svg+xml",
    ".wasm": "application/wasm",
    ".woff": "font/woff",
    ".woff2": "font/woff2",
    ".txt": "text/plain",
}


def guess_content_type(path: Union[str, PurePath]) -> str:
    """
    Lấy content type từ extension của path.

    Args:
        path: Đường dẫn file (absolute hoặc logical key)

    Returns:
        MIME type string, OCTET_STREAM nếu không nhận diện được
    """
    suffix = PurePath(path).suffix.lower()
    if suffix in WEB_ASSET_TYPES:
        return WEB_ASSET_TYPES[suffix]

    guessed, _encoding = mimetypes.guess_type(str(path), strict=False)
    return guessed or OCTET_STREAM


def is_generic_binary(content_type: str) -> bool:
    """Check content type có phải generic binary không."""
    return content_type == OCTET_STREAM
