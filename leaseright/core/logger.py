import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
import sys

from leaseright.core.config import settings

LOG_DIR = Path("logs")
LOG_DIR.mkdir(exist_ok=True)

LOG_FILE = LOG_DIR / "leaseright.log"
LOG_FORMAT = "%(levelname)s | %(asctime)s | %(name)s | %(message)s"


def _console_stream():
    try:
        return open(sys.stdout.fileno(), mode="w", encoding="utf-8", closefd=False)
    except (AttributeError, OSError, ValueError):
        # pytest capture swaps stdout for an object without a usable fd
        return sys.stdout


def get_logger(name: str) -> logging.Logger:
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger

    level = settings.LOG_LEVEL.upper()
    formatter = logging.Formatter(LOG_FORMAT)

    file_handler = RotatingFileHandler(LOG_FILE, maxBytes=2_000_000, backupCount=3, encoding="utf-8")
    console_handler = logging.StreamHandler(_console_stream())
    for handler in (file_handler, console_handler):
        handler.setFormatter(formatter)
        handler.setLevel(level)
        logger.addHandler(handler)

    logger.setLevel(level)
    logger.propagate = False
    return logger
