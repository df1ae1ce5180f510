"""
Logging utilities for the Portfolio Recommender API.

SECURITY RULES:
- NEVER log API keys (x-api-key header, Gemini key)
- NEVER log full prompts or full model output
- Log high-level events: request received, attempt numbers, failure kinds,
  issue counts
"""

import logging
from typing import Optional

from portfolio_recommender.config import settings


def get_logger(name: str, level: Optional[int] = None) -> logging.Logger:
    """
    Get a configured logger for the specified module.

    Args:
        name: Module name (typically __name__)
        level: Optional logging level (defaults to LOG_LEVEL setting)

    Returns:
        Configured logger instance

    Usage:
        >>> from portfolio_recommender.utils.logging import get_logger
        >>> logger = get_logger(__name__)
        >>> logger.info("High-level event occurred")
    """
    logger = logging.getLogger(name)

    if level is None:
        level = logging.getLevelName(settings.LOG_LEVEL.upper())
        if not isinstance(level, int):
            level = logging.INFO

    logger.setLevel(level)

    # Add handler if not already configured (avoid duplicate handlers)
    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter(
            fmt='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)
        # Root handler from basicConfig would print the record twice
        logger.propagate = False

    return logger
