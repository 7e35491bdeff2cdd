"""
log.py
Logger del backend: un único logger "retail_store" hacia stdout.
"""

import logging
import sys

logger = logging.getLogger("retail_store")


def setup_logging(level: str = "INFO") -> logging.Logger:
    """
    Configura el logger una sola vez (crear varias apps no duplica handlers).
    """
    logger.setLevel(level)
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(
            logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")
        )
        logger.addHandler(handler)
    return logger
