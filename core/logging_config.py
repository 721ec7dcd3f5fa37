"""
Logging Configuration - Server logger dung chung

Mot logger "static-cache-server" cho accept loop, connection threads va
watcher thread. Console nhan moi record, file log (~/.static-cache-server/
logs/server.log) di qua MemoryHandler de khong ghi disk moi request.

Level mac dinh INFO; --debug hoac STATIC_CACHE_DEBUG=1 bat DEBUG.
"""

import logging
import logging.handlers
import sys
from typing import Optional

from config import paths

LOGGER_NAME = "static-cache-server"

MAX_LOG_SIZE = 2 * 1024 * 1024  # 2MB moi file
MAX_LOG_FILES = 5
BUFFER_CAPACITY = 100  # records truoc khi flush xuong file

_server_logger: Optional[logging.Logger] = None


def _level() -> int:
    return logging.DEBUG if paths.DEBUG_MODE else logging.INFO


def _console_handler() -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
    return handler


def _buffered_file_handler() -> logging.Handler:
    """RotatingFileHandler boc trong MemoryHandler, flush ngay khi co ERROR."""
    paths.LOG_DIR.mkdir(parents=True, exist_ok=True)
    file_handler = logging.handlers.RotatingFileHandler(
        paths.LOG_DIR / "server.log",
        maxBytes=MAX_LOG_SIZE,
        backupCount=MAX_LOG_FILES,
        encoding="utf-8",
    )
    # threadName de phan biet accept-loop / conn-* / watcher
    file_handler.setFormatter(
        logging.Formatter(
            "%(asctime)s [%(levelname)s] %(threadName)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    return logging.handlers.MemoryHandler(
        capacity=BUFFER_CAPACITY,
        flushLevel=logging.ERROR,
        target=file_handler,
    )


def get_server_logger() -> logging.Logger:
    """
    Lay server logger, cau hinh handlers o lan goi dau tien.

    Khong tao duoc thu muc log -> chi log ra console.
    """
    global _server_logger

    if _server_logger is not None:
        return _server_logger

    logger = logging.getLogger(LOGGER_NAME)
    if not logger.handlers:
        logger.addHandler(_console_handler())
        try:
            logger.addHandler(_buffered_file_handler())
        except OSError as e:
            logger.warning(f"Could not create log file: {e}")

    _server_logger = logger
    _apply_level(logger)
    return logger


def _apply_level(logger: logging.Logger) -> None:
    level = _level()
    logger.setLevel(level)
    for handler in logger.handlers:
        handler.setLevel(level)


def flush_logs() -> None:
    """Flush file log buffer, goi truoc khi process thoat."""
    if _server_logger is None:
        return
    for handler in _server_logger.handlers:
        try:
            handler.flush()
        except (OSError, ValueError) as e:
            # ValueError: stream da dong luc interpreter shutdown
            sys.stderr.write(f"Could not flush log handler: {e}\n")


def set_debug_mode(enabled: bool) -> None:
    """Bat/tat DEBUG level luc runtime (--debug)."""
    paths.DEBUG_MODE = enabled
    if _server_logger is not None:
        _apply_level(_server_logger)


def log_error(message: str, exc: Optional[BaseException] = None) -> None:
    """Log error, kem traceback khi dang o debug mode."""
    logger = get_server_logger()
    if exc:
        logger.error(f"{message}: {exc}", exc_info=paths.DEBUG_MODE)
    else:
        logger.error(message)


def log_warning(message: str) -> None:
    get_server_logger().warning(message)


def log_info(message: str) -> None:
    get_server_logger().info(message)


def log_debug(message: str) -> None:
    if paths.DEBUG_MODE:
        get_server_logger().debug(message)
