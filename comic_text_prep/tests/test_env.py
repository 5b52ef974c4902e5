"""Tests for logging setup."""

import logging
from pathlib import Path

import pytest

from ..utils.env import setup_logging


@pytest.fixture
def restore_logging():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    pil_level = logging.getLogger("PIL").level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)
    logging.getLogger("PIL").setLevel(pil_level)


def test_writes_log_file(tmp_path: Path, restore_logging) -> None:
    """Records should reach the log file in the configured format."""
    log_file = tmp_path / "run.log"

    setup_logging(logging.DEBUG, log_file=str(log_file))
    logging.getLogger("comic_text_prep.test").debug("scan finished")
    for handler in logging.getLogger().handlers:
        handler.flush()

    content = log_file.read_text(encoding="utf-8")
    assert "comic_text_prep.test - DEBUG - scan finished" in content


def test_pillow_debug_suppressed(restore_logging) -> None:
    """Verbose runs should not turn on Pillow's chunk-level debug output."""
    setup_logging(logging.DEBUG, log_file=None)
    assert logging.getLogger("PIL").getEffectiveLevel() == logging.INFO


def test_unwritable_log_file(tmp_path: Path, restore_logging, capsys) -> None:
    """An unopenable log file should fall back to console logging."""
    setup_logging(logging.INFO, log_file=str(tmp_path / "missing_dir" / "run.log"))

    assert "Could not open log file" in capsys.readouterr().err
    assert len(logging.getLogger().handlers) == 1
