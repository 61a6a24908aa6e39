# src/utils.py
import logging
from typing import Optional

from src import config


def configure_logging(log_level: str = config.LOG_LEVEL) -> None:
    """Configure the root logger for command line use"""
    level = getattr(logging, log_level.upper(), logging.INFO)
    logging.basicConfig(level=level, format=config.LOG_FORMAT)
    logging.debug(f"Logging initialized at {logging.getLevelName(level)} level")


def setup_logger(name: str, level: Optional[str] = None) -> logging.Logger:
    """
    Get a named logger, optionally overriding its level.

    Args:
        name(str): logger name, usually the owning class
        level(str): level name such as 'DEBUG'; None keeps the inherited level

    Returns:
        logging.Logger: the configured logger
    """
    logger = logging.getLogger(name)
    if level is not None:
        logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    return logger


def format_hex(data: bytes) -> str:
    """Lowercase hex rendering of a digest, two characters per byte"""
    return ''.join(f"{b:02x}" for b in data)
