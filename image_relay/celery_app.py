"""
Celery Application Instance

Creates the Celery app instance for use by workers and the beat scheduler.
Uses the app factory so the sweep task resolves the same services the web
process uses.
"""

from .app_factory import create_app
from .config.settings import AppConfig

config = AppConfig()
# Workers sweep on the beat schedule; they need no janitor thread of their own
config.janitor_enabled = False
config.celery_enabled = True

flask_app = create_app(config)

celery_app = flask_app.celery

# Task modules are imported by name when the worker starts, at which point
# `celery_app` is already initialized and available for task decorators.
celery_app.conf.imports = ("image_relay.tasks.sweep_task",)
