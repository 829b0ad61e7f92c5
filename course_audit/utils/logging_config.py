"""Logging for audit runs: warnings on the terminal, full detail in the log file."""

import logging
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "course_audit"

FILE_FORMAT = "%(asctime)s | %(name)s | %(levelname)-8s | %(message)s"


def setup_logging(
    level: str = "INFO",
    log_file: Optional[Path] = None,
    name: str = LOGGER_NAME,
) -> logging.Logger:
    """
    Configure the audit logger.

    Throttling and probe failures are shown on stderr through rich so they do
    not break the progress bar on stdout. Every record down to DEBUG goes to
    ``log_file`` when one is given.

    Args:
        level: Logger level (DEBUG, INFO, WARNING, ERROR); unknown names mean INFO
        log_file: Optional path of the run log, its directory is created
        name: Logger name

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    logger.handlers.clear()

    console_handler = RichHandler(
        console=Console(stderr=True),
        level=logging.WARNING,
        show_path=False,
        log_time_format="%H:%M:%S",
    )
    logger.addHandler(console_handler)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        logger.addHandler(file_handler)

    return logger


def get_logger(name: str = LOGGER_NAME) -> logging.Logger:
    return logging.getLogger(name)
