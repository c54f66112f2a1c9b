"""
Celery Configuration

Configures Celery with Flask integration, Redis broker and the beat
schedule for the scratch directory sweep.
"""

import os

from celery import Celery
from kombu import Queue


class CeleryConfig:
    """Celery configuration settings."""

    # Broker settings
    broker_url = os.getenv("CELERY_BROKER_URL", "redis://localhost:6379/0")
    result_backend = os.getenv("CELERY_RESULT_BACKEND", "redis://localhost:6379/0")

    # Task settings
    task_serializer = "json"
    accept_content = ["json"]
    result_serializer = "json"
    timezone = "UTC"
    enable_utc = True

    # Worker settings
    worker_prefetch_multiplier = 1
    task_acks_late = True

    # Task routing
    task_routes = {
        "tasks.sweep_scratch_directory": {"queue": "cleanup_queue"},
    }

    task_default_queue = "default"
    task_queues = (
        Queue("default", routing_key="default"),
        Queue("cleanup_queue", routing_key="cleanup"),
    )

    # Beat schedule: age sweep of the scratch directory. It only looks at the
    # filesystem, so it keeps working when the web process has restarted.
    beat_schedule = {
        "sweep-scratch-directory": {
            "task": "tasks.sweep_scratch_directory",
            "schedule": float(os.getenv("SWEEP_INTERVAL_SECONDS", 3600)),
        },
    }

    task_soft_time_limit = 300
    task_time_limit = 600

    result_expires = 3600  # 1 hour


def make_celery(app):
    """
    Create Celery instance with Flask app context.

    Args:
        app: Flask application instance

    Returns:
        Configured Celery instance
    """
    celery = Celery(
        app.import_name,
        backend=CeleryConfig.result_backend,
        broker=CeleryConfig.broker_url,
    )

    celery.config_from_object(CeleryConfig)

    # Ensure tasks run within Flask app context
    class ContextTask(celery.Task):
        """Make celery tasks work with Flask app context."""

        def __call__(self, *args, **kwargs):
            with app.app_context():
                return self.run(*args, **kwargs)

    celery.Task = ContextTask
    return celery
