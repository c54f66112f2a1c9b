"""
Shared pytest fixtures and configuration for the image-relay test suite.

This module provides:
- Hypothesis configuration for property-based testing
- Scratch directory, janitor and registry fixtures driven by a manual clock
- A Flask app wired with a local-file fetcher and the real Pillow transformer
"""

import pytest
from hypothesis import HealthCheck, Phase, settings

from image_relay.application.event_publisher import EventPublisher
from image_relay.config.settings import AppConfig
from image_relay.domain.artifacts.registry import ArtifactRegistry
from image_relay.infrastructure.pillow_transformer import PillowImageTransformer
from image_relay.infrastructure.temp_file_janitor import TempFileJanitor
from tests.fixtures import LocalFileFetcher, ManualScheduler, write_image

# Register Hypothesis profiles
settings.register_profile(
    "default",
    max_examples=100,
    deadline=None,
    suppress_health_check=[HealthCheck.too_slow, HealthCheck.function_scoped_fixture],
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.target, Phase.shrink],
)
settings.register_profile(
    "ci",
    max_examples=200,
    deadline=None,
    suppress_health_check=[HealthCheck.too_slow, HealthCheck.function_scoped_fixture],
)
settings.register_profile(
    "dev",
    max_examples=10,
    deadline=None,
    suppress_health_check=[HealthCheck.too_slow, HealthCheck.function_scoped_fixture],
)
settings.load_profile("default")

TEST_TTL_SECONDS = 60
TEST_BASE_URL = "http://relay.test"
SOURCE_URL = "https://images.example.com/source.png"


# =============================================================================
# Domain Fixtures
# =============================================================================

@pytest.fixture
def scratch_dir(tmp_path):
    """Empty scratch directory for one test."""
    path = tmp_path / "scratch"
    path.mkdir()
    return path


@pytest.fixture
def manual_scheduler():
    return ManualScheduler()


@pytest.fixture
def janitor(scratch_dir):
    return TempFileJanitor(scratch_dir, max_age_seconds=3600, interval_seconds=3600)


@pytest.fixture
def registry(manual_scheduler, janitor):
    """Started registry on the manual clock, deleting through the janitor."""
    registry = ArtifactRegistry(
        manual_scheduler,
        janitor.delete_one,
        ttl_seconds=TEST_TTL_SECONDS,
        clock=manual_scheduler.clock,
    )
    registry.start()
    yield registry
    registry.stop()


@pytest.fixture
def event_publisher():
    return EventPublisher()


@pytest.fixture
def artifact_file(scratch_dir):
    """A processed-looking file already in the scratch directory."""
    return write_image(scratch_dir / "processed.png")


@pytest.fixture
def source_image(tmp_path):
    """200x100 PNG outside the scratch directory."""
    return write_image(tmp_path / "sources" / "source.png")


# =============================================================================
# Application Fixtures
# =============================================================================

@pytest.fixture
def app_config(scratch_dir):
    config = AppConfig()
    config.scratch_dir = str(scratch_dir)
    config.public_base_url = TEST_BASE_URL
    config.artifact_ttl_seconds = TEST_TTL_SECONDS
    config.janitor_enabled = False
    config.celery_enabled = False
    config.transform_workers = 1
    config.log_level = "WARNING"
    return config


@pytest.fixture
def local_fetcher(scratch_dir, source_image):
    fetcher = LocalFileFetcher(scratch_dir)
    fetcher.add(SOURCE_URL, source_image)
    return fetcher


@pytest.fixture
def app(app_config, local_fetcher, manual_scheduler, scratch_dir):
    """Flask app running the real pipeline against local files and a manual clock."""
    from image_relay.app_factory import create_app

    app = create_app(
        app_config,
        fetcher=local_fetcher,
        transformer=PillowImageTransformer(scratch_dir),
        scheduler=manual_scheduler,
    )
    app.config["TESTING"] = True
    yield app
    app.shutdown_services()


@pytest.fixture
def client(app):
    return app.test_client()
