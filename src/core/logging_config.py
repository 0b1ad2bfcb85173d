"""Logging setup for the API process."""

import logging

from config import LOG_LEVEL

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: str = LOG_LEVEL) -> None:
    """Configure the root logger once.

    Args:
        level: Level name such as 'INFO' or 'DEBUG'.
    """
    logging.basicConfig(level=getattr(logging, level, logging.INFO), format=LOG_FORMAT)
    # SQL echo is too chatty for request logs
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
