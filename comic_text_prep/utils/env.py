"""Logging setup for the command line."""

import logging
import sys
from typing import Optional

from ..config import LOG_FORMAT, LOG_DATE_FORMAT

DEFAULT_LOG_FILE = "comic_text_prep.log"

# Third-party loggers that flood DEBUG output while decoding images
_NOISY_LOGGERS = ("PIL",)


def _open_log_file(log_file: str) -> Optional[logging.Handler]:
    try:
        handler = logging.FileHandler(log_file, mode='a', encoding='utf-8')
    except OSError as e:
        print(f"Warning: Could not open log file '{log_file}': {e}", file=sys.stderr)
        return None
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
    return handler


def setup_logging(level: int = logging.INFO, log_file: Optional[str] = DEFAULT_LOG_FILE) -> None:
    """Configure root logging for a CLI run.

    Records go to stderr, so stdout stays free for JSON output, and to
    ``log_file`` when one is given and can be opened.

    Args:
        level: Logging level
        log_file: Path to log file (None to disable file logging)
    """
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        file_handler = _open_log_file(log_file)
        if file_handler is not None:
            handlers.append(file_handler)

    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
        handlers=handlers,
        force=True
    )
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.INFO))
