"""
Logging configuration for rappel.
Sets up console and file handlers with appropriate formatting.
"""

import logging
import logging.handlers
import colorlog
from rappel.config.settings import LOGS_DIR, DEBUG_MODE


def setup_logging(name: str = "rappel", level: int = None) -> logging.Logger:
    """
    Configure and return a logger with console and file handlers.

    Args:
        name: Logger name (typically module name)
        level: Logging level (defaults based on DEBUG_MODE)

    Returns:
        Configured logger instance
    """
    if level is None:
        level = logging.DEBUG if DEBUG_MODE else logging.INFO

    logger = logging.getLogger(name)
    logger.setLevel(level)

    # Prevent duplicate handlers if called multiple times
    if logger.handlers:
        return logger

    # Console handler with colors
    console_handler = colorlog.StreamHandler()
    console_handler.setLevel(level)
    console_formatter = colorlog.ColoredFormatter(
        "%(log_color)s%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        log_colors={
            'DEBUG': 'cyan',
            'INFO': 'green',
            'WARNING': 'yellow',
            'ERROR': 'red',
            'CRITICAL': 'red,bg_white',
        }
    )
    console_handler.setFormatter(console_formatter)
    logger.addHandler(console_handler)

    # File handler with rotation
    log_file = LOGS_DIR / "rappel.log"
    file_handler = logging.handlers.RotatingFileHandler(
        log_file,
        maxBytes=10 * 1024 * 1024,  # 10MB
        backupCount=5
    )
    file_handler.setLevel(logging.DEBUG)  # Always log DEBUG to file
    file_formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )
    file_handler.setFormatter(file_formatter)
    logger.addHandler(file_handler)

    # APScheduler is not under our logger; its records (missed runs,
    # skipped overlapping runs) go to the file, never to the curses screen
    scheduler_logger = logging.getLogger("apscheduler")
    scheduler_logger.setLevel(logging.INFO)
    if not scheduler_logger.handlers:
        scheduler_logger.addHandler(file_handler)
    scheduler_logger.propagate = False

    return logger


def detach_console(name: str = "rappel") -> None:
    """
    Remove console handlers from a configured logger.

    Used before curses takes over the terminal, so log records only go
    to the rotating file.

    Args:
        name: Logger name
    """
    logger = logging.getLogger(name)
    for handler in list(logger.handlers):
        if isinstance(handler, logging.StreamHandler) and not isinstance(
            handler, logging.FileHandler
        ):
            logger.removeHandler(handler)


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance. If root logger not configured, configure it first.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Logger instance
    """
    # Configure root logger if not already done
    if not logging.getLogger("rappel").handlers:
        setup_logging("rappel")

    return logging.getLogger(name)
