"""
Logging configuration for procwatch.

Provides centralized logging setup with clean, concise terminal output.
The default level is read from the PROCWATCH_LOG_LEVEL environment variable.
"""
import logging
import os
import sys
from pathlib import Path
from typing import Optional, Union

LOG_LEVEL_ENV_VAR = "PROCWATCH_LOG_LEVEL"
DEFAULT_LOG_LEVEL = "INFO"


def resolve_level(level: Union[int, str, None]) -> int:
    """
    Turn a level name or number into a logging level.

    Args:
        level: Level as int (logging.INFO), name ("debug") or None for the
               environment default

    Returns:
        Numeric logging level

    Raises:
        ValueError: If the level name is unknown
    """
    if level is None:
        level = os.environ.get(LOG_LEVEL_ENV_VAR, DEFAULT_LOG_LEVEL)
    if isinstance(level, int):
        return level

    numeric = logging.getLevelName(str(level).upper())
    if not isinstance(numeric, int):
        raise ValueError(f"Unknown log level: {level}")
    return numeric


def setup_logger(
    name: str,
    level: Union[int, str, None] = None,
    log_file: Optional[Path] = None
) -> logging.Logger:
    """
    Configure and return a logger with consistent formatting.

    Args:
        name: Logger name (typically __name__)
        level: Logging level (default: PROCWATCH_LOG_LEVEL or INFO)
        log_file: Optional file path for log output

    Returns:
        Configured logger instance
    """
    numeric_level = resolve_level(level)
    logger = logging.getLogger(name)
    logger.setLevel(numeric_level)

    # Remove existing handlers to avoid duplicates
    logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(logging.Formatter(fmt='[%(levelname)s] %(message)s'))
    logger.addHandler(console_handler)

    # File output keeps timestamps and the module name
    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, mode='a', encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(
            fmt='%(asctime)s [%(levelname)s] %(name)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        ))
        logger.addHandler(file_handler)

    logger.propagate = False

    return logger


def apply_level(level: Union[int, str], log_file: Optional[Path] = None) -> None:
    """Re-apply level (and optional log file) to every procwatch logger already created."""
    for name in list(logging.root.manager.loggerDict):
        if name == "procwatch" or name.startswith("procwatch."):
            setup_logger(name, level=level, log_file=log_file)
