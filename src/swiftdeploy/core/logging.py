"""Logging setup for swiftdeploy.

Log records go to stderr so they never mix with command output, and carry
``key=value`` context such as the repository and deployment id.
"""

import logging
import sys
from enum import Enum
from typing import Any

from rich.console import Console
from rich.logging import RichHandler

# Context keys whose values must never reach a log line
REDACTED_KEYS = frozenset({"token", "access_token", "authorization"})


class LogLevel(str, Enum):
    """Log level enumeration."""

    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


def resolve_level(verbose: int, quiet: bool, default: LogLevel) -> LogLevel:
    """Map the -v/-q command line flags onto a log level."""
    if verbose >= 2:
        return LogLevel.DEBUG
    if verbose == 1:
        return LogLevel.INFO
    if quiet:
        return LogLevel.ERROR
    return default


def setup_logging(level: LogLevel = LogLevel.WARNING, color: bool = True) -> logging.Logger:
    """Install a single stderr handler and return the ``swiftdeploy`` logger.

    Args:
        level: The logging level
        color: Use Rich formatting; plain timestamped lines otherwise
    """
    log_level = getattr(logging, level.value.upper())

    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler: logging.Handler
    if color:
        handler = RichHandler(
            console=Console(stderr=True),
            show_time=True,
            show_path=False,
            rich_tracebacks=True,
        )
        handler.setFormatter(logging.Formatter("%(message)s"))
    else:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(
            logging.Formatter(
                "%(asctime)s %(levelname)s %(name)s: %(message)s",
                datefmt="%H:%M:%S",
            )
        )

    root_logger.addHandler(handler)
    root_logger.setLevel(log_level)

    logger = logging.getLogger("swiftdeploy")
    logger.setLevel(log_level)

    # httpx logs every request at INFO, including the full URL
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the ``swiftdeploy`` namespace."""
    if name.startswith("swiftdeploy"):
        return logging.getLogger(name)
    return logging.getLogger(f"swiftdeploy.{name}")


class StructuredLogger:
    """Logger that appends bound and per-call context to each message.

    The message is positional-only, so any keyword (``message`` included)
    is treated as context.
    """

    def __init__(self, name: str):
        self._logger = get_logger(name)
        self._context: dict[str, Any] = {}

    def bind(self, **kwargs: Any) -> "StructuredLogger":
        """Create a new logger with additional context."""
        new_logger = StructuredLogger(self._logger.name)
        new_logger._context = {**self._context, **kwargs}
        return new_logger

    def _format(self, message: str, context: dict[str, Any]) -> str:
        merged = {**self._context, **context}
        if not merged:
            return message
        pairs = " ".join(
            f"{k}={'***' if k.lower() in REDACTED_KEYS else v}" for k, v in merged.items()
        )
        return f"{message} [{pairs}]"

    def debug(self, message: str, /, **kwargs: Any) -> None:
        self._logger.debug(self._format(message, kwargs))

    def info(self, message: str, /, **kwargs: Any) -> None:
        self._logger.info(self._format(message, kwargs))

    def warning(self, message: str, /, **kwargs: Any) -> None:
        self._logger.warning(self._format(message, kwargs))

    def exception(self, message: str, /, **kwargs: Any) -> None:
        """Log at ERROR with the active exception's traceback."""
        self._logger.exception(self._format(message, kwargs))
