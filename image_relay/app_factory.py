"""
Application Factory

Creates and configures the Flask application with all dependencies.
Collaborators and the scheduler can be injected so tests run the real
pipeline against fakes and a manual clock.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from typing import Optional

from flask import Flask, jsonify
from flask_cors import CORS

from .application.artifact_service import ArtifactService
from .application.dependency_container import DependencyContainer
from .application.event_publisher import EventPublisher
from .application.processing_service import ImageProcessingService
from .config.celery_config import make_celery
from .config.logging_config import configure_logging
from .config.settings import AppConfig
from .domain.artifacts.registry import ArtifactRegistry
from .domain.artifacts.scheduling import Scheduler
from .domain.processing.collaborators import IImageFetcher, IImageTransformer
from .infrastructure.http_image_fetcher import HttpImageFetcher
from .infrastructure.pillow_transformer import PillowImageTransformer
from .infrastructure.temp_file_janitor import TempFileJanitor
from .infrastructure.threading_scheduler import ThreadingScheduler

logger = logging.getLogger(__name__)


def create_app(
    config: Optional[AppConfig] = None,
    fetcher: Optional[IImageFetcher] = None,
    transformer: Optional[IImageTransformer] = None,
    scheduler: Optional[Scheduler] = None,
) -> Flask:
    """
    Create and configure Flask application.

    Args:
        config: Application configuration, uses default if None
        fetcher: Fetch collaborator override
        transformer: Transform collaborator override
        scheduler: Expiry timer scheduler override

    Returns:
        Configured Flask application
    """
    if config is None:
        config = AppConfig()

    configure_logging(config.log_level)

    app = Flask(__name__)
    app.config["DEBUG"] = config.debug
    app.app_config = config

    # Configure CORS
    CORS(
        app,
        resources={
            r"/*": {
                "origins": "*",
                "methods": ["GET", "POST", "OPTIONS"],
                "allow_headers": ["Content-Type"],
                "expose_headers": ["Content-Type", "Cache-Control"],
                "max_age": 3600,
            }
        },
    )

    _initialize_services(app, config, fetcher, transformer, scheduler)

    _initialize_celery(app, config)

    _register_blueprints(app, config)

    _register_health_endpoint(app)

    return app


def _initialize_services(
    app: Flask,
    config: AppConfig,
    fetcher: Optional[IImageFetcher],
    transformer: Optional[IImageTransformer],
    scheduler: Optional[Scheduler],
) -> None:
    """
    Build the service graph, register it in the DependencyContainer and
    attach the commonly-used services to the app.

    Args:
        app: Flask application
        config: Application configuration
        fetcher: Fetch collaborator override
        transformer: Transform collaborator override
        scheduler: Expiry timer scheduler override
    """
    container = DependencyContainer()

    # Infrastructure
    janitor = TempFileJanitor(
        config.scratch_dir,
        max_age_seconds=config.sweep_max_age_seconds,
        interval_seconds=config.sweep_interval_seconds,
    )
    janitor.ensure_scratch_dir()

    if scheduler is None:
        scheduler = ThreadingScheduler()
    if fetcher is None:
        fetcher = HttpImageFetcher(
            config.scratch_dir,
            timeout_seconds=config.fetch_timeout_seconds,
            max_bytes=config.max_download_bytes,
        )
    if transformer is None:
        transformer = PillowImageTransformer(config.scratch_dir)

    transform_executor = ThreadPoolExecutor(
        max_workers=max(1, config.transform_workers),
        thread_name_prefix="image-transform",
    )

    container.register_singleton(TempFileJanitor, janitor)
    container.register_singleton(Scheduler, scheduler)
    container.register_singleton(IImageFetcher, fetcher)
    container.register_singleton(IImageTransformer, transformer)

    # Domain
    registry = ArtifactRegistry(
        scheduler,
        janitor.delete_one,
        ttl_seconds=config.artifact_ttl_seconds,
    )
    container.register_singleton(ArtifactRegistry, registry)

    # Application
    event_publisher = EventPublisher()
    container.register_singleton(EventPublisher, event_publisher)
    container.setup_event_handlers(event_publisher)

    processing_service = ImageProcessingService(
        fetcher,
        transformer,
        registry,
        janitor.delete_one,
        event_publisher,
        config.public_base_url,
        transform_executor=transform_executor,
    )
    artifact_service = ArtifactService(registry, event_publisher)
    container.register_singleton(ImageProcessingService, processing_service)
    container.register_singleton(ArtifactService, artifact_service)

    # Records whose files the sweep removed are dropped after every sweep
    janitor.add_sweep_listener(registry.purge_missing)

    registry.start()
    if config.janitor_enabled:
        janitor.start()

    app.container = container
    app.registry = registry
    app.janitor = janitor
    app.processing_service = processing_service
    app.artifact_service = artifact_service

    def shutdown_services() -> None:
        """Stop timers, the sweep thread and the transform pool."""
        janitor.stop()
        registry.stop()
        scheduler.shutdown()
        transform_executor.shutdown(wait=False)

    app.shutdown_services = shutdown_services

    logger.info(
        f"Services initialized (scratch_dir={config.scratch_dir}, "
        f"ttl={config.artifact_ttl_seconds}s, janitor={'on' if config.janitor_enabled else 'off'})"
    )


def _initialize_celery(app: Flask, config: AppConfig) -> None:
    """
    Attach a Celery instance for the beat-driven scratch sweep (optional).

    Args:
        app: Flask application
        config: Application configuration
    """
    app.celery = None
    if not config.celery_enabled:
        logger.info("Celery disabled - relying on the in-process janitor")
        return

    try:
        app.celery = make_celery(app)
        logger.info("Celery initialized successfully")
    except Exception as e:
        logger.warning(f"Could not initialize Celery: {e}")


def _register_blueprints(app: Flask, config: AppConfig) -> None:
    """
    Register API blueprints.

    Args:
        app: Flask application
        config: Application configuration
    """
    from .api.v1 import api_v1_bp

    app.register_blueprint(api_v1_bp)

    logger.info(
        f"API {config.api_version} registered at /api/{config.api_version} "
        f"with Swagger UI at /api/{config.api_version}/docs"
    )


def _get_health_status(app: Flask) -> dict:
    """
    Health of the in-process components.

    Args:
        app: Flask application instance

    Returns:
        Health status dictionary
    """
    return {
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "artifacts": len(app.registry),
        "janitor": "running" if app.janitor.is_running else "stopped",
        "celery": "available" if getattr(app, "celery", None) is not None else "unavailable",
    }


def _register_health_endpoint(app: Flask) -> None:
    """
    Register health check endpoint.

    Args:
        app: Flask application
    """

    @app.route("/health", methods=["GET"])
    def health():
        """Liveness plus a summary of registry and janitor state."""
        return jsonify(_get_health_status(app)), 200
