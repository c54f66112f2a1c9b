"""
Logging Configuration
"""

import logging

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str = "INFO") -> logging.Logger:
    """
    Configure the image_relay logger hierarchy with a console handler.

    Safe to call more than once; handlers are only added the first time.

    Args:
        level: Log level name

    Returns:
        The package root logger
    """
    logger = logging.getLogger("image_relay")
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    # Avoid adding handlers multiple times if reloaded
    if not logger.handlers:
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(console_handler)
        logger.propagate = False

    return logger
