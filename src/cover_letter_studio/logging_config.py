"""Logging configuration for the cover letter studio."""

import logging
import os

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance for a specific module.

    Args:
        name: Short module name, e.g. "generator"

    Returns:
        Logger instance
    """
    return logging.getLogger(f"cover_letter_studio.{name}")


def setup_logging(level: str = None) -> None:
    """Configure the root handler for command-line use.

    Args:
        level: Level name such as "DEBUG"; defaults to LOG_LEVEL or WARNING
    """
    level_name = (level or os.getenv("LOG_LEVEL") or "WARNING").upper()
    logging.basicConfig(level=getattr(logging, level_name, logging.WARNING), format=LOG_FORMAT)
