"""
Centralized Logging Configuration
Console and rotating file handlers shared by every batchpay module
"""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional


def setup_logging(
    log_dir: Optional[str] = "logs",
    log_file: str = "batchpay.log",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
    max_bytes: int = 10 * 1024 * 1024,  # 10 MB
    backup_count: int = 5,
) -> logging.Logger:
    """
    Configure application-wide logging with console and (optionally) file output.

    Args:
        log_dir: Directory to store log files, or None for console-only logging
        log_file: Name of the log file
        console_level: Logging level for console output (INFO by default)
        file_level: Logging level for file output (DEBUG by default)
        max_bytes: Maximum size of log file before rotation (10 MB default)
        backup_count: Number of backup log files to keep

    Returns:
        Root logger instance
    """
    logger = logging.getLogger()
    logger.setLevel(logging.DEBUG)  # handlers filter

    # Clear any existing handlers to avoid duplicates
    logger.handlers.clear()

    log_format = logging.Formatter(
        fmt="%(asctime)s | %(levelname)-8s | %(name)-32s | %(funcName)-20s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console_handler = logging.StreamHandler()
    console_handler.setLevel(console_level)
    console_handler.setFormatter(log_format)
    logger.addHandler(console_handler)

    if log_dir is not None:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)

        file_handler = RotatingFileHandler(
            log_path / log_file,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(file_level)
        file_handler.setFormatter(log_format)
        logger.addHandler(file_handler)
        logger.debug(f"Log file: {log_path / log_file}")

    logger.debug(
        f"Logging initialized (console={logging.getLevelName(console_level)}, "
        f"file={logging.getLevelName(file_level)})"
    )

    return logger


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for a specific module.

    Args:
        name: Module name (typically __name__)

    Returns:
        Logger instance
    """
    return logging.getLogger(name)
