"""
Logging for the lesson scraper.

Progress lines go to stdout from the start of a run. Once the manifest has
been read, add_run_log() also records the run in logs/<course>_<timestamp>.log
so the lessons skipped for one course can be looked up later.
"""
import logging
import os
import sys
from datetime import datetime

from url_utils import sanitize_filename

DEBUG = logging.DEBUG
INFO = logging.INFO
WARNING = logging.WARNING
ERROR = logging.ERROR

LOGGER_NAME = "lesson_scraper"
LOG_DIR = "logs"


def _formatter():
    return logging.Formatter("%(asctime)s - %(levelname)s - %(message)s", datefmt="%Y-%m-%d %H:%M:%S")


def setup_logger(level=logging.INFO, console_level=None):
    """
    Configure the scraper logger with a stdout handler.

    Calling it again replaces every handler, including a run log added earlier,
    so the latest level settings always apply.

    Args:
        level (int): Level of the logger itself
        console_level (int, optional): Level of the console handler, defaults to 'level'

    Returns:
        logging.Logger: The scraper logger
    """
    scraper_log = logging.getLogger(LOGGER_NAME)
    for handler in scraper_log.handlers[:]:
        scraper_log.removeHandler(handler)
        handler.close()

    scraper_log.setLevel(level)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(console_level if console_level is not None else level)
    console_handler.setFormatter(_formatter())
    scraper_log.addHandler(console_handler)

    return scraper_log


def run_log_path(run_name, started=None):
    """Path of the log file for a run, e.g. logs/Ultimate Go_20261019_093000.log."""
    started = started or datetime.now()
    name = sanitize_filename(run_name).strip() or LOGGER_NAME
    return os.path.join(LOG_DIR, f"{name}_{started:%Y%m%d_%H%M%S}.log")


def add_run_log(run_name, level=None):
    """
    Also write the rest of the run to a log file named after the course.

    Args:
        run_name (str): Course name used in the file name
        level (int, optional): Level of the file handler, defaults to the logger's level

    Returns:
        str: Path of the log file
    """
    scraper_log = get_logger()
    path = run_log_path(run_name)
    os.makedirs(LOG_DIR, exist_ok=True)

    file_handler = logging.FileHandler(path, encoding="utf-8")
    file_handler.setLevel(level if level is not None else scraper_log.level)
    file_handler.setFormatter(_formatter())
    scraper_log.addHandler(file_handler)
    return path


def get_logger():
    """Return the scraper logger, giving it a console handler on first use."""
    scraper_log = logging.getLogger(LOGGER_NAME)
    if not scraper_log.handlers:
        setup_logger()
    return scraper_log


def debug(msg, *args, **kwargs):
    get_logger().debug(msg, *args, **kwargs)


def info(msg, *args, **kwargs):
    get_logger().info(msg, *args, **kwargs)


def warning(msg, *args, **kwargs):
    get_logger().warning(msg, *args, **kwargs)


def error(msg, *args, **kwargs):
    get_logger().error(msg, *args, **kwargs)
