"""
Logging - Application logging configuration.

Provides:
- Python logging configuration with console output
- Optional file output (appended, UTF-8)

Wallet modules only create module loggers; handlers are attached here,
once, by the entry point.
"""

from pathlib import Path
from typing import Optional
import logging

LOG_FORMAT = '%(asctime)s [%(levelname)s] %(name)s: %(message)s'
FILE_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'
CONSOLE_DATE_FORMAT = '%H:%M:%S'


def configure_logging(level: int = logging.INFO, log_file: Optional[Path] = None) -> None:
    """
    Configure Python logging for the application.

    Sets up a root logger with console output (stderr, so it never mixes
    with printed keys or addresses) and, if given, a log file.

    Args:
        level: Logging level (default: INFO)
        log_file: Optional path to append log records to
    """
    root_logger = logging.getLogger()

    # Only configure if not already configured
    if root_logger.handlers:
        return

    root_logger.setLevel(level)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=CONSOLE_DATE_FORMAT))
    root_logger.addHandler(console_handler)

    if log_file is not None:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=FILE_DATE_FORMAT))
        root_logger.addHandler(file_handler)
