"""Logging setup with verbosity levels and a per-run log file."""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

# Chatty third-party loggers kept at WARNING unless running at -vvv
NOISY_LOGGERS = ("httpx", "googleapiclient.discovery_cache", "telegram.ext")

CONSOLE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def level_for_verbosity(verbosity: int) -> int:
    """Map -v count to a console log level."""
    if verbosity <= 0:
        return logging.WARNING
    if verbosity == 1:
        return logging.INFO
    return logging.DEBUG


def setup_logging(
    verbosity: int = 0,
    log_file: Optional[str] = None,
    logs_dir: str = "logs",
) -> logging.Logger:
    """
    Configure the root logger.

    Console output follows the verbosity level; the log file always
    receives DEBUG.

    Args:
        verbosity: 0=WARNING, 1=INFO, 2+=DEBUG
        log_file: Log file path. Defaults to logs_dir/hangout_bot_<timestamp>.log
        logs_dir: Directory for the default log file

    Returns:
        Logger for this module
    """
    if log_file is None:
        log_dir = Path(logs_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_path = log_dir / f"hangout_bot_{timestamp}.log"
    else:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level_for_verbosity(verbosity))
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT, datefmt=DATE_FORMAT))
    root_logger.addHandler(console_handler)

    file_handler = logging.FileHandler(log_path, encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=DATE_FORMAT))
    root_logger.addHandler(file_handler)

    noisy_level = logging.DEBUG if verbosity >= 3 else logging.WARNING
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(noisy_level)

    logger = logging.getLogger(__name__)
    logger.info(f"Logging initialized. Verbosity: {verbosity}, Log file: {log_path}")

    return logger


def parse_verbosity(args: list) -> int:
    """
    Read the verbosity flag from command line arguments.

    Accepts -v, -vv and -vvv; the last one wins.
    """
    verbosity = 0
    for arg in args:
        if arg in ("-v", "-vv", "-vvv"):
            verbosity = len(arg) - 1
    return verbosity
