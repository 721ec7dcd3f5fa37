"""
Tests cho server logger (core/logging_config.py).

Moi test dung LOG_DIR rieng trong tmp_path va reset logger singleton.
"""

import logging

import pytest

from config import paths
from core import logging_config
from core.logging_config import (
    LOGGER_NAME,
    flush_logs,
    get_server_logger,
    log_debug,
    log_error,
    log_info,
    set_debug_mode,
)


def _reset_logger():
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logging_config._server_logger = None


@pytest.fixture
def log_dir(tmp_path, monkeypatch):
    directory = tmp_path / "logs"
    monkeypatch.setattr(paths, "LOG_DIR", directory)
    monkeypatch.setattr(paths, "DEBUG_MODE", False)
    _reset_logger()
    yield directory
    _reset_logger()


class TestServerLogger:
    def test_singleton(self, log_dir):
        logger = get_server_logger()
        assert logger is get_server_logger()
        assert logger.name == LOGGER_NAME
        assert len(logger.handlers) == 2

    def test_info_reaches_log_file_after_flush(self, log_dir):
        log_info("Serving HTTP on 127.0.0.1:8000 ...")
        flush_logs()

        content = (log_dir / "server.log").read_text(encoding="utf-8")
        assert "[INFO] MainThread: Serving HTTP on 127.0.0.1:8000 ..." in content

    def test_error_flushes_immediately(self, log_dir):
        log_error("[Server] Accept failed", OSError("boom"))

        content = (log_dir / "server.log").read_text(encoding="utf-8")
        assert "[Server] Accept failed: boom" in content

    def test_debug_only_in_debug_mode(self, log_dir):
        log_debug("hidden")
        set_debug_mode(True)
        log_debug("shown")
        flush_logs()

        content = (log_dir / "server.log").read_text(encoding="utf-8")
        assert "hidden" not in content
        assert "shown" in content
        assert get_server_logger().level == logging.DEBUG

    def test_set_debug_mode_off_restores_info(self, log_dir):
        set_debug_mode(True)
        get_server_logger()
        set_debug_mode(False)

        logger = get_server_logger()
        assert logger.level == logging.INFO
        assert all(h.level == logging.INFO for h in logger.handlers)

    def test_unwritable_log_dir_falls_back_to_console(self, tmp_path, monkeypatch, log_dir):
        blocker = tmp_path / "not-a-dir"
        blocker.write_text("x")
        monkeypatch.setattr(paths, "LOG_DIR", blocker / "logs")

        logger = get_server_logger()

        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0], logging.StreamHandler)

    def test_flush_without_logger_is_noop(self, log_dir):
        flush_logs()
        assert not log_dir.exists()
