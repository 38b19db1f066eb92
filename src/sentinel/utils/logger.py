"""
Logger Module

Central logging setup for Sentinel built on Python's logging package.
Console output defaults to WARNING so that a fail-soft code generation
still leaves a visible diagnostic; file output is opt-in.

Environment:
- SENTINEL_DEBUG: lower the console level to DEBUG
- SENTINEL_LOG: also write a timestamped log file
"""

import os
import logging
import datetime

DEFAULT_LOG_TO_FILE = os.environ.get('SENTINEL_LOG', '').lower() in ('1', 'true', 'yes')
DEFAULT_DEBUG_MODE = os.environ.get('SENTINEL_DEBUG', '').lower() in ('1', 'true', 'yes')

DEFAULT_CONSOLE_LEVEL = logging.DEBUG if DEFAULT_DEBUG_MODE else logging.WARNING
DEFAULT_FILE_LEVEL = logging.DEBUG

CONSOLE_FORMAT = '%(levelname)s [%(name)s:%(lineno)d]: %(message)s'
FILE_FORMAT = '[%(asctime)s] %(levelname)s [%(name)s:%(lineno)d]: %(message)s'

# Application logger, created on first use
logger = None
log_file_path = None


def setup_logger(name='sentinel',
                 console_level=None,
                 file_level=None,
                 log_to_file=DEFAULT_LOG_TO_FILE,
                 log_dir=None):
    """
    Configure the ``sentinel`` logger with a console handler and, optionally,
    a file handler.

    Child loggers (``sentinel.totp.engine`` and friends, obtained with
    ``logging.getLogger(__name__)``) propagate into this logger, so a single
    call configures the whole package.

    Args:
        name (str): Logger name
        console_level (int): Level for console output
        file_level (int): Level for file output
        log_to_file (bool): Whether to add a file handler
        log_dir (str): Directory for log files, defaults to the data directory

    Returns:
        logging.Logger: Configured logger instance
    """
    global logger, log_file_path

    if console_level is None:
        console_level = DEFAULT_CONSOLE_LEVEL
    if file_level is None:
        file_level = DEFAULT_FILE_LEVEL

    logger = logging.getLogger(name)
    logger.setLevel(logging.DEBUG)  # handlers decide what is emitted

    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler()
    console_handler.setLevel(console_level)
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    logger.addHandler(console_handler)

    logger.propagate = False

    log_file_path = None
    if log_to_file:
        try:
            if log_dir is None:
                from ..config import get_log_directory
                log_dir = get_log_directory()
            os.makedirs(log_dir, exist_ok=True)

            timestamp = datetime.datetime.now().strftime("%Y%m%d_%H%M%S")
            log_file_path = os.path.join(log_dir, f"sentinel_{timestamp}.log")

            file_handler = logging.FileHandler(log_file_path, mode='w', encoding='utf-8')
            file_handler.setLevel(file_level)
            file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt='%Y-%m-%d %H:%M:%S'))
            logger.addHandler(file_handler)

            logger.info(f"=== Sentinel log started at {datetime.datetime.now().isoformat()} ===")
        except OSError as e:
            log_file_path = None
            logger.warning(f"File logging disabled, could not open log file: {e}")

    return logger


def get_logger():
    """
    Get the configured logger instance or set up a new one if not configured.

    Returns:
        logging.Logger: Logger instance
    """
    if logger is None:
        return setup_logger()
    return logger


def get_log_file_path():
    """Path of the current log file, or None when file logging is off."""
    return log_file_path


def debug(msg, *args, **kwargs):
    """Log a debug message"""
    get_logger().debug(msg, *args, **kwargs)


def info(msg, *args, **kwargs):
    """Log an info message"""
    get_logger().info(msg, *args, **kwargs)


def error(msg, *args, **kwargs):
    """Log an error message"""
    get_logger().error(msg, *args, **kwargs)
