"""
Logging configuration
"""

import sys
from typing import Optional

from loguru import logger


def setup_logging(level: Optional[str] = None):
    """Setup logging configuration"""
    from shopfeed.core.config import settings

    # Remove default handler
    logger.remove()

    # Add console handler
    logger.add(
        sys.stderr,
        level=(level or settings.log_level).upper(),
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
        colorize=True,
    )


# Create logger instance
log = logger
