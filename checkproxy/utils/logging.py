import logging
import os
from logging.handlers import RotatingFileHandler
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = 'checkproxy'
DEFAULT_LOG_RETENTION_SIZE = 5 * 1024 * 1024
DEFAULT_LOG_BACKUP_COUNT = 10


def setup_logging(
    verbose: bool = False,
    log_file: Optional[str] = None,
    retention_size: int = DEFAULT_LOG_RETENTION_SIZE,
) -> logging.Logger:
    """Route checkproxy loggers to stderr, and optionally to a rotating file.

    stdout is left to command output so it stays parseable.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    logger.propagate = False

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console_handler = RichHandler(
        console=Console(stderr=True),
        show_time=verbose,
        show_path=False,
        markup=False,
    )
    console_handler.setLevel(logging.DEBUG if verbose else logging.WARNING)
    logger.addHandler(console_handler)

    if log_file:
        directory = os.path.dirname(os.path.abspath(log_file))
        os.makedirs(directory, exist_ok=True)

        formatter = logging.Formatter(
            '%(asctime)s | %(levelname)s | %(name)s | %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S',
        )
        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=retention_size,
            backupCount=DEFAULT_LOG_BACKUP_COUNT,
        )
        file_handler.setFormatter(formatter)
        file_handler.setLevel(logging.DEBUG)
        logger.addHandler(file_handler)
        # File captures everything even when the console is quiet
        logger.setLevel(logging.DEBUG)

    return logger
