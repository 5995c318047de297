"""Application logging: a daily log file plus terse console output."""

import logging
import sys
from datetime import date
from config import Config

LOGGER_NAME = "purse"

FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
CONSOLE_FORMAT = "%(levelname)s - %(message)s"


def setup_logging(config: Config, console: bool = True) -> logging.Logger:
    """Attach handlers to the ``purse`` logger.

    Records go to ``<log_dir>/purse-<YYYY-MM-DD>.log`` and, unless
    ``console`` is False, to stderr so command output on stdout stays clean.
    Safe to call again; earlier handlers are closed and replaced.

    Args:
        config: Supplies ``log_dir`` and ``log_level``.
        console: Whether to echo records to stderr.
    """
    config.log_dir.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(config.log_level)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    log_file = config.log_dir / f"{LOGGER_NAME}-{date.today().isoformat()}.log"
    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    logger.addHandler(file_handler)

    if console:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
        logger.addHandler(console_handler)

    return logger


def get_logger() -> logging.Logger:
    return logging.getLogger(LOGGER_NAME)
