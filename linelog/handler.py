"""
Bridge from the stdlib ``logging`` module into linelog sinks.
"""

import json
import logging

from linelog import sinks
from linelog.clock import formatted_now
from linelog.sinks import write_line


class JSONFormatter(logging.Formatter):
    """
    Formats log records as linelog lines.

    Output format:
    {"name": "my_app.module", "desc": "User logged in", "timestamp": "2026-02-08T20:30:00Z"}

    Records carrying exception info become error lines:
    {"error": "Test error", "timestamp": "2026-02-08T20:30:00Z"}
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON"""
        if record.exc_info and record.exc_info[1] is not None:
            exc = record.exc_info[1]
            data = {
                'error': str(exc) or type(exc).__name__,
                'timestamp': formatted_now(),
            }
        else:
            data = {
                'name': record.name,
                'desc': record.getMessage(),
                'timestamp': formatted_now(),
            }
        return json.dumps(data, ensure_ascii=False, default=str)


class LineHandler(logging.Handler):
    """Writes records to the active linelog sinks; error lines go to ``err``."""

    def __init__(self, level: int = logging.NOTSET):
        super().__init__(level)
        self.setFormatter(JSONFormatter())

    def emit(self, record: logging.LogRecord) -> None:
        try:
            line = self.format(record)
        except Exception:
            self.handleError(record)
            return
        is_error = bool(record.exc_info and record.exc_info[1] is not None)
        write_line(sinks.get_err() if is_error else sinks.get_out(), line)


def get_logger(name: str, level: int = logging.INFO) -> logging.Logger:
    """
    Get a logger writing through linelog.

    Args:
        name: Logger name (typically __name__)
        level: Logging level (default: INFO), only filters records

    Returns:
        Configured logger instance

    Example:
        logger = get_logger(__name__)
        logger.info("loaded %d rows", 120)
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)

    if not any(isinstance(h, LineHandler) for h in logger.handlers):
        logger.addHandler(LineHandler())

    return logger
