"""
Logging Configuration

Console logging goes to stderr so stdout stays free for crawl reports and
JSON output. Long batch runs can additionally log to a file.
"""

import logging
import os
import sys
from typing import Optional

LOG_FORMAT = "%(levelname)-8s %(name)s: %(message)s"
FILE_LOG_FORMAT = "%(asctime)s %(levelname)-8s [%(threadName)s] %(name)s: %(message)s"

# Loggers that receive the same handlers as the package (CLI scripts log as __main__)
LOGGER_NAMES = ("nutricrawl", "__main__")


def setup_logging(verbose: bool = False, quiet: bool = False, log_file: Optional[str] = None) -> None:
    """
    Configure logging for the crawler and its scripts.

    Args:
        verbose: If True, set level to DEBUG (per-reference crawl states)
        quiet: If True, set level to WARNING
        log_file: Optional path; the file always records DEBUG and above
    """
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = logging.INFO

    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(logging.Formatter(LOG_FORMAT))
    console.setLevel(level)
    handlers = [console]

    if log_file:
        directory = os.path.dirname(log_file)
        if directory:
            os.makedirs(directory, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT))
        file_handler.setLevel(logging.DEBUG)
        handlers.append(file_handler)

    for name in LOGGER_NAMES:
        logger = logging.getLogger(name)
        logger.setLevel(logging.DEBUG if log_file else level)
        logger.propagate = False
        # Avoid duplicate handlers if called multiple times
        for old in list(logger.handlers):
            logger.removeHandler(old)
            old.close()
        for handler in handlers:
            logger.addHandler(handler)

    # requests' connection pool logs every request at DEBUG
    logging.getLogger("urllib3").setLevel(logging.WARNING)
