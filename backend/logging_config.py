"""Logging configuration for backend."""
import logging
import os
import json
from logging.handlers import RotatingFileHandler
from shared.models import now


class StructuredFormatter(logging.Formatter):
    """Structured JSON formatter for batch job log analysis."""

    def format(self, record):
        log_entry = {
            'timestamp': now().isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }

        if record.exc_info:
            log_entry['exception'] = self.formatException(record.exc_info)

        # Jobs attach per-record context (user id, job name) via extra_fields
        if hasattr(record, 'extra_fields'):
            log_entry.update(record.extra_fields)

        return json.dumps(log_entry, default=str)


def setup_logging(log_file_name='backend.log', log_dir=None):
    """Setup logging configuration for the backend.

    Args:
        log_file_name: Name of the rotating JSON log file
        log_dir: Directory for the log file; defaults to ``LOG_DIR`` or ``logs/``
            next to the repository root
    """
    log_level_str = os.getenv('LOG_LEVEL', 'INFO').upper()
    log_level = getattr(logging, log_level_str, logging.INFO)

    if log_dir is None:
        log_dir = os.getenv('LOG_DIR') or os.path.join(os.path.dirname(__file__), '..', 'logs')
    os.makedirs(log_dir, exist_ok=True)

    logger = logging.getLogger()
    logger.setLevel(log_level)

    structured_formatter = StructuredFormatter()
    simple_formatter = logging.Formatter(
        '%(asctime)s %(levelname)-8s %(name)-20s %(message)s'
    )

    log_file = os.path.join(log_dir, log_file_name)
    file_handler = RotatingFileHandler(
        log_file,
        maxBytes=10*1024*1024,  # 10MB
        backupCount=5
    )
    file_handler.setLevel(log_level)
    file_handler.setFormatter(structured_formatter)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level)
    console_handler.setFormatter(simple_formatter)

    # Clear existing handlers to avoid duplicates
    logger.handlers.clear()

    logger.addHandler(file_handler)
    logger.addHandler(console_handler)

    logging.getLogger('werkzeug').setLevel(logging.WARNING)
    logging.getLogger('sqlalchemy.engine').setLevel(logging.WARNING)
    logging.getLogger('pymongo').setLevel(logging.WARNING)
    logging.getLogger('urllib3').setLevel(logging.WARNING)

    logger.info("Logging initialized", extra={
        'extra_fields': {
            'log_level': log_level_str,
            'log_file': log_file,
            'structured_logging': True
        }
    })

    return logger
