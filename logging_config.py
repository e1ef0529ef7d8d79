"""Logging configuration using Loguru.

Library modules log through ``from loguru import logger``; entry points call
``setup_logging`` once to install sinks.
"""

import sys
from pathlib import Path
from typing import Optional

from loguru import logger


def setup_logging(
    level: str = "INFO",
    log_dir: Optional[str] = None,
    rotation: str = "50 MB",
    retention: str = "14 days",
) -> None:
    """Configure Loguru sinks.

    Args:
        level: Minimum log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_dir: Optional directory for a rotating file sink
        rotation: When to rotate log files
        retention: How long to keep old logs
    """
    logger.remove()

    logger.add(
        sys.stderr,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan> | {extra[request_id]} | <level>{message}</level>",
        level=level,
        colorize=True,
    )

    if log_dir:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_path / "schedule_forge_{time}.log",
            format="{time} | {level} | {name}:{function}:{line} | {extra[request_id]} | {message}",
            level=level,
            rotation=rotation,
            retention=retention,
        )

    # Records logged outside a request still need the field the formats reference
    logger.configure(extra={"request_id": "-"})
    logger.debug(f"Logging initialized at level {level}")


def get_request_logger(request_id: str):
    """Get a logger bound to a single generation request."""
    return logger.bind(request_id=request_id)
