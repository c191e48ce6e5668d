#!/usr/bin/env python3
"""
trainload Utilities Module
"""
import sys
import logging
from pathlib import Path
from typing import Optional


class LoggingConfig:
    """Centralized logging configuration using standard logging"""

    _initialized = False

    @classmethod
    def setup_logging(cls,
                     log_level: str = "INFO",
                     log_file: Optional[str] = None,
                     log_format: Optional[str] = None,
                     enable_console: bool = True) -> None:
        """
        Setup standard logging configuration

        Args:
            log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            log_file: Path to log file (optional)
            log_format: Custom log format
            enable_console: Enable console logging
        """
        if cls._initialized:
            return

        numeric_level = getattr(logging, log_level.upper(), logging.INFO)

        if log_format is None:
            log_format = '%(asctime)s | %(levelname)-8s | %(name)s | %(message)s'

        # Only the library logger is configured; the root logger belongs to the host application
        library_logger = logging.getLogger("trainload")
        library_logger.setLevel(numeric_level)
        formatter = logging.Formatter(log_format, datefmt='%Y-%m-%d %H:%M:%S')

        if enable_console:
            console_handler = logging.StreamHandler(sys.stdout)
            console_handler.setLevel(numeric_level)
            console_handler.setFormatter(formatter)
            library_logger.addHandler(console_handler)

        if log_file:
            log_path = Path(log_file)
            log_path.parent.mkdir(parents=True, exist_ok=True)

            file_handler = logging.FileHandler(log_file)
            file_handler.setLevel(numeric_level)
            file_handler.setFormatter(formatter)
            library_logger.addHandler(file_handler)

        cls._initialized = True
        library_logger.debug(f"🔧 Logging initialized - Level: {log_level}")

    @classmethod
    def get_logger(cls, name: str = None) -> logging.Logger:
        """Get a logger instance"""
        if not cls._initialized:
            setup_trainload_logging()

        if name:
            return logging.getLogger(name)
        return logging.getLogger("trainload")


def setup_trainload_logging(log_level: Optional[str] = None,
                            log_dir: Optional[str] = None) -> None:
    """Setup logging for the trainload package, defaulting to the configured settings"""
    from ..config import get_settings

    logging_settings = get_settings().logging
    log_level = log_level or logging_settings.log_level
    log_dir = log_dir or logging_settings.log_dir

    log_file = None
    if log_dir:
        log_dir_path = Path(log_dir)
        log_dir_path.mkdir(parents=True, exist_ok=True)
        log_file = str(log_dir_path / "trainload.log")

    LoggingConfig.setup_logging(
        log_level=log_level,
        log_file=log_file,
        log_format='%(asctime)s | %(levelname)-8s | %(name)s | %(message)s'
    )


def get_logger(module_name: str) -> logging.Logger:
    """Get a logger for a specific module"""
    return LoggingConfig.get_logger(module_name)
