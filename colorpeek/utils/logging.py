"""
colorpeek Structured Logging
Centralized logging configuration using loguru. A logger bound to a request
carries its request_id on every record it emits.
"""
import sys
from typing import Dict, Any, Optional

from loguru import logger

from colorpeek.config import config

LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level} | {extra[request_id]} | {message} | {extra}"


def configure_logging(level: Optional[str] = None) -> None:
    """Replace loguru's default handler with the colorpeek stdout sink."""
    logger.remove()
    logger.configure(extra={"request_id": "-"})
    logger.add(
        sys.stdout,
        format=LOG_FORMAT,
        level=level or config.LOG_LEVEL,
        serialize=False  # Set to True for JSON output
    )


class StructuredLogger:
    """Structured logger for colorpeek palette services."""

    def __init__(self, context: Optional[Dict[str, Any]] = None):
        self._context = dict(context or {})

    @property
    def context(self) -> Dict[str, Any]:
        return dict(self._context)

    def bind(self, **context) -> "StructuredLogger":
        """Return a logger that adds `context` to every record."""
        return StructuredLogger({**self._context, **context})

    def _emit(self, level: str, message: str, extra: Optional[Dict[str, Any]]):
        fields = {**self._context, **(extra or {})}
        target = logger.bind(**fields) if fields else logger
        target.opt(depth=2).log(level, message)

    def info(self, message: str, extra: Optional[Dict[str, Any]] = None):
        self._emit("INFO", message, extra)

    def warning(self, message: str, extra: Optional[Dict[str, Any]] = None):
        self._emit("WARNING", message, extra)

    def error(self, message: str, extra: Optional[Dict[str, Any]] = None):
        self._emit("ERROR", message, extra)

    def debug(self, message: str, extra: Optional[Dict[str, Any]] = None):
        self._emit("DEBUG", message, extra)


# Global logger instance
_logger: Optional[StructuredLogger] = None


def get_logger() -> StructuredLogger:
    """Get or create global logger instance."""
    global _logger
    if _logger is None:
        configure_logging()
        _logger = StructuredLogger()
    return _logger
