"""
Logging for the relay.
Every module logs through one named logger; create_app() applies Settings.LOG_LEVEL to it.
"""
import logging
import sys
from typing import Optional, TextIO

LOGGER_NAME = "ai_relay"


class RelayFormatter(logging.Formatter):
    """Tints warning and error lines; plain text when the stream is not a terminal."""

    LEVEL_STYLES = {
        logging.DEBUG: '\033[2m',
        logging.WARNING: '\033[33m',
        logging.ERROR: '\033[31m',
        logging.CRITICAL: '\033[1;31m',
    }
    RESET = '\033[0m'

    def __init__(self, use_color: bool = False):
        super().__init__('%(asctime)s %(levelname)-8s %(name)s: %(message)s', datefmt='%Y-%m-%d %H:%M:%S')
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        style = self.LEVEL_STYLES.get(record.levelno) if self.use_color else None
        return f"{style}{line}{self.RESET}" if style else line


def configure_logging(level: str = "INFO", stream: Optional[TextIO] = None) -> logging.Logger:
    """
    Apply a level and output stream to the relay logger.

    Calling it again reuses the existing handler, so repeated app creation
    never duplicates log lines.
    """
    stream = stream or sys.stdout
    handler = next((h for h in app_logger.handlers if isinstance(h.formatter, RelayFormatter)), None)
    if handler is None:
        handler = logging.StreamHandler(stream)
        app_logger.addHandler(handler)
    else:
        handler.setStream(stream)

    isatty = getattr(stream, "isatty", None)
    handler.setFormatter(RelayFormatter(use_color=bool(isatty and isatty())))
    app_logger.setLevel(level.upper())
    return app_logger


app_logger = logging.getLogger(LOGGER_NAME)
