"""
Centralized logging configuration for the Kazi dashboard.

Provides console logging for the Flask app and a client-tagged logger so
messages from different browser sessions can be told apart.
"""

import logging
import sys
from typing import Optional

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class ClientLogger:
    """
    Logger that prefixes every message with the client it belongs to.

    One Flask process serves many browsers; each has its own store and
    controllers, so their log lines carry a short client tag.
    """

    def __init__(self, name: str, client_id: Optional[str] = None):
        """
        Initialize client logger.

        Args:
            name: Logger name (usually __name__)
            client_id: Optional client identifier for correlation
        """
        self.logger = logging.getLogger(name)
        self.client_id = client_id

    def _format_message(self, message: str) -> str:
        """Add contextual prefix to message."""
        if self.client_id:
            return f"[client:{self.client_id[:8]}] {message}"
        return message

    def debug(self, message: str, *args, **kwargs):
        """Log debug message."""
        self.logger.debug(self._format_message(message), *args, **kwargs)

    def info(self, message: str, *args, **kwargs):
        """Log info message."""
        self.logger.info(self._format_message(message), *args, **kwargs)

    def warning(self, message: str, *args, **kwargs):
        """Log warning message."""
        self.logger.warning(self._format_message(message), *args, **kwargs)

    def error(self, message: str, *args, **kwargs):
        """Log error message."""
        self.logger.error(self._format_message(message), *args, **kwargs)

    def exception(self, message: str, *args, **kwargs):
        """Log exception with traceback."""
        self.logger.exception(self._format_message(message), *args, **kwargs)


def setup_logging(level: str = "INFO") -> None:
    """
    Send every log record to stdout in one line per record.

    Replaces existing root handlers, so calling it twice does not
    duplicate output. ``level`` is a name such as DEBUG or INFO.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(log_level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
    root_logger.addHandler(handler)
    root_logger.setLevel(log_level)


def get_logger(name: str, client_id: Optional[str] = None) -> ClientLogger:
    """
    Get a client-tagged logger instance.

    Args:
        name: Logger name (usually __name__)
        client_id: Optional client identifier

    Returns:
        ClientLogger instance
    """
    return ClientLogger(name, client_id)
