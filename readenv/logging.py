"""Package logging with bind target propagation."""

import logging
import os
import sys
from contextvars import ContextVar
from logging.handlers import RotatingFileHandler

PACKAGE_LOGGER = "readenv"

# Name of the dataclass currently being bound
bind_target_var: ContextVar[str] = ContextVar("bind_target", default="-")

# Environment configuration
LOG_LEVEL = os.getenv("READENV_LOG_LEVEL", "WARNING").upper()
LOG_FORMAT = os.getenv("READENV_LOG_FORMAT", "text")  # "text" or "json"
LOG_FILE = os.getenv("READENV_LOG_FILE")  # If set, enable file logging
DEFAULT_MAX_BYTES = 1024 * 1024  # 1MB
DEFAULT_BACKUP_COUNT = 3


class BindTargetFormatter(logging.Formatter):
    """Formatter that injects bind_target into all log records."""

    def format(self, record):
        if not hasattr(record, "bind_target"):
            record.bind_target = bind_target_var.get()
        return super().format(record)


JSON_FORMAT = (
    '{"time": "%(asctime)s", "level": "%(levelname)s", '
    '"bind_target": "%(bind_target)s", "logger": "%(name)s", "message": "%(message)s"}'
)
TEXT_FORMAT = "%(asctime)s | %(levelname)-8s | %(bind_target)s | %(name)s | %(message)s"

# Silent unless the application opts in
logging.getLogger(PACKAGE_LOGGER).addHandler(logging.NullHandler())


def setup_logging() -> logging.Logger:
    """Attach console (and optional file) handlers to the package logger.

    Only the ``readenv`` logger is touched; the root logger stays under the
    application's control. Safe to call more than once.
    """
    max_bytes = _env_int("READENV_LOG_MAX_BYTES", DEFAULT_MAX_BYTES)
    backup_count = _env_int("READENV_LOG_BACKUP_COUNT", DEFAULT_BACKUP_COUNT)

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(getattr(logging, LOG_LEVEL, logging.WARNING))

    # Clear existing handlers to avoid duplicates on repeated setup
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    fmt = JSON_FORMAT if LOG_FORMAT == "json" else TEXT_FORMAT
    formatter = BindTargetFormatter(fmt, datefmt="%Y-%m-%d %H:%M:%S")

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(formatter)
    logger.addHandler(console)

    if LOG_FILE:
        file_handler = RotatingFileHandler(
            LOG_FILE,
            maxBytes=max_bytes,
            backupCount=backup_count,
        )
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


def _env_int(name: str, default: int) -> int:
    """Parse an integer setting when logging is set up, not at import."""
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from e


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance with the given name."""
    return logging.getLogger(name)
