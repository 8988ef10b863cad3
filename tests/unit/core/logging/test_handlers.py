"""
Tests for log handlers.

Tests create_console_handler and create_file_handler.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler

from nova_client.core.logging.filters import ExtraFieldsFilter
from nova_client.core.logging.formatters import TextFormatter
from nova_client.core.logging.handlers import create_console_handler, create_file_handler


class TestCreateConsoleHandler:

    def test_stdout_handler(self):
        formatter = TextFormatter()
        handler = create_console_handler(logging.DEBUG, formatter)

        assert isinstance(handler, logging.StreamHandler)
        assert handler.stream is sys.stdout
        assert handler.level == logging.DEBUG
        assert handler.formatter is formatter

    def test_filters_attached(self):
        extra = ExtraFieldsFilter({"region": "RegionOne"})
        handler = create_console_handler(logging.INFO, TextFormatter(), filters=[extra])
        assert extra in handler.filters


class TestCreateFileHandler:

    def test_rotating_handler(self, tmp_path):
        path = tmp_path / "nova.log"
        handler = create_file_handler(str(path), logging.INFO, TextFormatter(), max_bytes=1024, backup_count=2)
        try:
            assert isinstance(handler, RotatingFileHandler)
            assert handler.maxBytes == 1024
            assert handler.backupCount == 2
        finally:
            handler.close()

    def test_creates_parent_directory(self, tmp_path):
        path = tmp_path / "logs" / "nested" / "nova.log"
        handler = create_file_handler(str(path), logging.INFO, TextFormatter())
        try:
            assert path.parent.is_dir()
        finally:
            handler.close()

    def test_writes_records(self, tmp_path):
        path = tmp_path / "nova.log"
        handler = create_file_handler(str(path), logging.INFO, TextFormatter())
        logger = logging.getLogger("nova_client.tests.file_handler")
        logger.propagate = False
        logger.addHandler(handler)
        try:
            logger.warning("Too many requests, retrying in 0ms")
        finally:
            logger.removeHandler(handler)
            handler.close()

        assert "Too many requests, retrying in 0ms" in path.read_text(encoding="utf-8")
