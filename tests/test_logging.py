"""
Tests for logging setup.
"""

import logging

import pytest

from floodwatch.config import settings
from floodwatch.utils.logging_config import CYCLE_LOGGERS, setup_logging


@pytest.fixture
def restore_logging():
    """Put the root and cycle loggers back the way the test found them."""
    names = ("",) + CYCLE_LOGGERS
    saved = {}
    for name in names:
        log = logging.getLogger(name)
        saved[name] = (log.level, list(log.handlers))
    yield
    for name, (level, handlers) in saved.items():
        log = logging.getLogger(name)
        for handler in log.handlers:
            if handler not in handlers:
                handler.close()
        log.setLevel(level)
        log.handlers[:] = handlers


class TestSetupLogging:
    """Handlers, files and per-cycle levels."""

    def test_creates_log_files(self, tmp_path, restore_logging):
        log_dir = tmp_path / "nested" / "logs"
        setup_logging(log_dir)

        assert (log_dir / "floodwatch.log").exists()
        assert (log_dir / "floodwatch_errors.log").exists()
        assert (log_dir / "floodwatch_cycles.log").exists()

    def test_cycle_loggers_use_cycle_level(self, tmp_path, monkeypatch, restore_logging):
        monkeypatch.setattr(settings, "CYCLE_LOG_LEVEL", "debug")
        setup_logging(tmp_path)

        for name in CYCLE_LOGGERS:
            log = logging.getLogger(name)
            assert log.level == logging.DEBUG
            assert len(log.handlers) == 1
        assert logging.getLogger("floodwatch.routers.cron").getEffectiveLevel() == logging.getLevelName(settings.LOG_LEVEL)

    def test_cycle_messages_reach_cycle_log(self, tmp_path, monkeypatch, restore_logging):
        monkeypatch.setattr(settings, "CYCLE_LOG_LEVEL", "DEBUG")
        setup_logging(tmp_path)

        logging.getLogger("floodwatch.services.monitor").debug("fetching rain feed")
        logging.getLogger("floodwatch.routers.history").warning("history queried")
        for handler in logging.getLogger("floodwatch.services.monitor").handlers:
            handler.flush()

        cycle_log = (tmp_path / "floodwatch_cycles.log").read_text(encoding="utf-8")
        assert "fetching rain feed" in cycle_log
        assert "history queried" not in cycle_log

    def test_repeated_setup_does_not_stack_handlers(self, tmp_path, restore_logging):
        setup_logging(tmp_path)
        root_count = len(logging.getLogger().handlers)
        setup_logging(tmp_path)

        assert len(logging.getLogger().handlers) == root_count
        assert len(logging.getLogger(CYCLE_LOGGERS[0]).handlers) == 1

    def test_quietens_http_client(self, tmp_path, restore_logging):
        setup_logging(tmp_path)
        assert logging.getLogger("httpx").level == logging.WARNING
