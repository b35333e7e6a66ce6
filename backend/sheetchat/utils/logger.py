# sheetchat/utils/logger.py

import logging
import os

LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


def setup_logger(level: str | None = None) -> logging.Logger:
    """Configure the root "sheetchat" logger once. Safe to call repeatedly."""
    level = (level or os.getenv("SHEETCHAT_LOG_LEVEL", "INFO")).upper()
    logger = logging.getLogger("sheetchat")
    logger.setLevel(level)

    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)

    return logger
