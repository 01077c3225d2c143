"""
Logging utility module.

This module provides consistent logging configuration across the application,
including formatters, handlers, and convenience functions for logging.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Create logger
logger = logging.getLogger("casedesk")

def configure_logging(level: str = "INFO", log_dir: Optional[str] = None):
    """
    Configure console logging and, optionally, a daily log file.

    Args:
        level: Name of the root log level (DEBUG, INFO, ...)
        log_dir: Directory to store log files, no file logging when None
    """
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler()]
    )
    if log_dir:
        setup_file_logging(log_dir)

def setup_file_logging(log_dir: str = "logs"):
    """
    Set up file logging in addition to console logging.

    Args:
        log_dir: Directory to store log files
    """
    # Create log directory if it doesn't exist
    log_path = Path(log_dir)
    log_path.mkdir(parents=True, exist_ok=True)

    # Create file handler
    timestamp = datetime.now().strftime("%Y%m%d")
    file_handler = logging.FileHandler(
        log_path / f"casedesk_{timestamp}.log",
        encoding="utf-8"
    )
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT))

    # Add handler to logger
    logger.addHandler(file_handler)
    return file_handler

def log_error(error: Exception, context: Optional[str] = None):
    """
    Log an error with optional context.

    Args:
        error: Exception to log
        context: Optional context about where/why the error occurred
    """
    if context:
        logger.error(f"{context}: {str(error)}")
    else:
        logger.error(str(error))

    # Log full stack trace at debug level
    logger.debug("Stack trace:", exc_info=True)

def log_warning(message: str, context: Optional[str] = None):
    """
    Log a warning with optional context.
    """
    if context:
        logger.warning(f"{context}: {message}")
    else:
        logger.warning(message)

def log_info(message: str, context: Optional[str] = None):
    if context:
        logger.info(f"{context}: {message}")
    else:
        logger.info(message)

def log_debug(message: str, context: Optional[str] = None):
    if context:
        logger.debug(f"{context}: {message}")
    else:
        logger.debug(message)
