"""Tests for log configuration."""

import json
import logging

import pytest
from rich.logging import RichHandler

from molthumb.config.models import MolThumbConfig
from molthumb.logging_setup import JsonFormatter, configure_logging


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


def test_text_format_uses_rich():
    configure_logging(MolThumbConfig(log_level="debug"))
    root = logging.getLogger()
    assert root.level == logging.DEBUG
    assert any(isinstance(h, RichHandler) for h in root.handlers)


def test_json_format():
    configure_logging(MolThumbConfig(log_format="json", log_level="warn"))
    root = logging.getLogger()
    assert root.level == logging.WARNING
    assert any(isinstance(h.formatter, JsonFormatter) for h in root.handlers)


def test_json_formatter_record():
    record = logging.LogRecord(
        "molthumb.converter.pipeline", logging.WARNING, __file__, 1, "exit %d", (2,), None
    )
    entry = json.loads(JsonFormatter().format(record))
    assert entry["level"] == "warning"
    assert entry["logger"] == "molthumb.converter.pipeline"
    assert entry["message"] == "exit 2"
    assert "ts" in entry
