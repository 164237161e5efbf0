"""Logging configuration for the desktop widgets."""
import logging
import sys
import os


class ColorFormatter(logging.Formatter):
    """Color-coded formatter for console output."""

    COLORS = {
        'DEBUG': '\033[36m',    # Cyan
        'INFO': '\033[32m',     # Green
        'WARNING': '\033[33m',  # Yellow
        'ERROR': '\033[31m',    # Red
        'CRITICAL': '\033[35m', # Magenta
        'RESET': '\033[0m'
    }

    def format(self, record):
        original_levelname = record.levelname
        if record.levelname in self.COLORS:
            record.levelname = f"{self.COLORS[record.levelname]}{record.levelname}{self.COLORS['RESET']}"
        try:
            return super().format(record)
        finally:
            # Other handlers share the record, keep their output uncolored
            record.levelname = original_levelname


def setup_logging():
    """Setup console logging for the Toga front end.

    Level comes from ``LOG_LEVEL``; colors can be turned off with ``LOG_COLORS=false``.
    """
    log_level_str = os.getenv('LOG_LEVEL', 'INFO').upper()
    log_level = getattr(logging, log_level_str, logging.INFO)

    logger = logging.getLogger()
    logger.setLevel(log_level)

    color_formatter = ColorFormatter(
        '%(asctime)s %(levelname)s %(name)-25s %(message)s'
    )
    plain_formatter = logging.Formatter(
        '%(asctime)s %(levelname)-8s %(name)-25s %(message)s'
    )

    use_colors = os.getenv('LOG_COLORS', 'true').lower() in ('true', '1', 'yes')

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)

    if use_colors and sys.stdout.isatty():
        console_handler.setFormatter(color_formatter)
    else:
        console_handler.setFormatter(plain_formatter)

    logger.handlers.clear()
    logger.addHandler(console_handler)

    # Provider lookups are chatty at DEBUG
    logging.getLogger('PIL').setLevel(logging.WARNING)
    logging.getLogger('urllib3').setLevel(logging.WARNING)

    logger.info(f"Widget logging initialized (level: {log_level_str})")

    return logger
