"""
Logging setup for the symbol predictor.

configure_logging() applies the ``logging`` section of config.yaml; the
per-frame classifier logs through log_timing at DEBUG only.
"""

import os
import logging
import logging.handlers
import time
from functools import wraps

_CONSOLE_FORMAT = "%(asctime)s  %(levelname)-5s  %(name)s: %(message)s"
_FILE_FORMAT = "%(asctime)s [%(levelname)-7s] %(name)-40s | %(message)s"
_DATE_FORMAT = "%H:%M:%S"


def setup_logging(level="INFO", log_file=None, max_size_mb=10, backup_count=3):
    """Install a console handler and, if log_file is set, a rotating file handler."""
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, str(level).upper(), logging.INFO))
    root_logger.handlers.clear()

    console = logging.StreamHandler()
    console.setLevel(logging.INFO)
    console.setFormatter(logging.Formatter(_CONSOLE_FORMAT, datefmt=_DATE_FORMAT))
    root_logger.addHandler(console)

    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        # Per-frame DEBUG records only ever go to the file
        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=max_size_mb * 1024 * 1024,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(_FILE_FORMAT, datefmt=_DATE_FORMAT))
        root_logger.addHandler(file_handler)

    return root_logger


def configure_logging(section: dict):
    """Apply the ``logging`` config section; missing or null keys keep their defaults."""
    section = section or {}
    return setup_logging(
        level=section.get("level") or "INFO",
        log_file=section.get("file"),
        max_size_mb=section.get("max_size_mb") or 10,
        backup_count=section.get("backup_count") or 3,
    )


def log_timing(func):
    """Log a call's duration at DEBUG. The clock is skipped when DEBUG is off."""
    logger = logging.getLogger(func.__module__)

    @wraps(func)
    def wrapper(*args, **kwargs):
        if not logger.isEnabledFor(logging.DEBUG):
            return func(*args, **kwargs)
        start = time.perf_counter()
        result = func(*args, **kwargs)
        logger.debug("%s took %.3fms", func.__qualname__, (time.perf_counter() - start) * 1000)
        return result

    return wrapper
