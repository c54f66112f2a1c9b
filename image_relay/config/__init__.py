"""
Configuration: application settings, Celery and logging.
"""

from .logging_config import configure_logging
from .settings import AppConfig

__all__ = ["AppConfig", "configure_logging"]
