import logging
import sys
from typing import Optional

from .settings import get_settings


def setup_logger(name: str = "catalog_pricing", log_level: Optional[str] = None) -> logging.Logger:
    """
    Sets up the package logger with a console handler.

    Engine modules log through ``logging.getLogger(__name__)`` and propagate here.
    """
    level = log_level or get_settings().log_level
    logger = logging.getLogger(name)
    logger.setLevel(level)

    # Prevent adding handlers multiple times if logger is already set up
    if logger.handlers:
        return logger

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(
        logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    )
    logger.addHandler(console_handler)

    return logger
