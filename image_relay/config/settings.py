"""
Application Settings

Environment-driven configuration for the HTTP service, the artifact
lifecycle and the processing pipeline.
"""

import os
import tempfile
from pathlib import Path


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


class AppConfig:
    """Application configuration."""

    def __init__(self):
        self.api_version = os.getenv("API_VERSION", "v1")
        self.host = os.getenv("IMAGE_RELAY_HOST", "0.0.0.0")
        self.port = int(os.getenv("IMAGE_RELAY_PORT", 3001))
        self.debug = _env_bool("FLASK_DEBUG", "false")
        self.public_base_url = os.getenv(
            "IMAGE_RELAY_PUBLIC_BASE_URL", f"http://localhost:{self.port}"
        )

        # Scratch storage for downloads and processed artifacts
        self.scratch_dir = os.getenv(
            "IMAGE_RELAY_SCRATCH_DIR",
            str(Path(tempfile.gettempdir()) / "image-relay"),
        )

        # Artifact lifecycle
        self.artifact_ttl_seconds = float(os.getenv("ARTIFACT_TTL_SECONDS", 3600))
        self.sweep_interval_seconds = float(os.getenv("SWEEP_INTERVAL_SECONDS", 3600))
        # Default leaves a full TTL of headroom after a serve before the sweep
        self.sweep_max_age_seconds = float(
            os.getenv("SWEEP_MAX_AGE_SECONDS", 2 * self.artifact_ttl_seconds)
        )
        self.janitor_enabled = _env_bool("JANITOR_ENABLED", "true")

        # Pipeline
        self.fetch_timeout_seconds = float(os.getenv("FETCH_TIMEOUT_SECONDS", 30))
        self.max_download_bytes = int(os.getenv("MAX_DOWNLOAD_BYTES", 50 * 1024 * 1024))
        self.transform_workers = int(os.getenv("TRANSFORM_WORKERS", 2))

        # Background sweep through Celery beat (optional)
        self.celery_enabled = _env_bool("CELERY_ENABLED", "true")

        self.log_level = os.getenv("LOG_LEVEL", "INFO").upper()
