"""Unit tests for core.logging_setup module."""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import pytest

from core.logging_setup import setup_logging


@pytest.fixture
def restore_root():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for h in root.handlers:
        if h not in handlers:
            h.close()
    root.handlers = handlers
    root.setLevel(level)


class TestSetupLogging:
    def test_console_only(self, restore_root):
        root = setup_logging({"level": "debug"})
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        assert not isinstance(root.handlers[0], RotatingFileHandler)

    def test_rotating_file(self, tmp_path, restore_root):
        log_file = tmp_path / "logs" / "ibc.log"
        root = setup_logging({"file": str(log_file), "rotate": {"max_bytes": 1000, "backup_count": 2}})
        file_handler = root.handlers[0]
        assert isinstance(file_handler, RotatingFileHandler)
        assert file_handler.maxBytes == 1000
        assert file_handler.backupCount == 2
        assert log_file.parent.is_dir()

    def test_quiets_httpx(self, restore_root):
        setup_logging({})
        assert logging.getLogger("httpx").level == logging.WARNING
