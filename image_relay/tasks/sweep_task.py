"""
Sweep Task

Celery beat task that ages out scratch files. It is the out-of-process
backstop for the in-process janitor and for expiry timers lost to a restart.
"""

import logging
from typing import Any, Dict, Optional

from flask import current_app

from ..application.dependency_container import DependencyContainer
from ..celery_app import celery_app
from ..domain.artifacts.registry import ArtifactRegistry
from ..infrastructure.temp_file_janitor import TempFileJanitor

logger = logging.getLogger(__name__)


@celery_app.task(bind=True, name="tasks.sweep_scratch_directory")
def sweep_scratch_directory(self, max_age_seconds: Optional[float] = None):
    """
    Periodic sweep of the scratch directory.

    Returns:
        dict: Sweep statistics with counts and errors
    """
    return run_sweep(current_app.container, max_age_seconds)


def run_sweep(container: DependencyContainer, max_age_seconds: Optional[float] = None) -> Dict[str, Any]:
    """
    Sweep the scratch directory, then drop registry records whose files are gone.

    Args:
        container: Container holding the TempFileJanitor (and, in the web
                   process, the ArtifactRegistry)
        max_age_seconds: Age threshold override

    Returns:
        Sweep statistics with counts and errors
    """
    logger.info("Starting scratch sweep task")

    sweep_stats: Dict[str, Any] = {
        "scratch_entries_removed": 0,
        "stale_records_purged": 0,
        "errors": [],
    }

    try:
        janitor = container.resolve(TempFileJanitor)
        sweep_stats["scratch_entries_removed"] = janitor.sweep(max_age_seconds)
    except Exception as e:
        error_msg = f"Error sweeping scratch directory: {e}"
        sweep_stats["errors"].append(error_msg)
        logger.error(error_msg, exc_info=True)

    if container.is_registered(ArtifactRegistry):
        try:
            registry = container.resolve(ArtifactRegistry)
            sweep_stats["stale_records_purged"] = registry.purge_missing()
        except Exception as e:
            error_msg = f"Error purging stale records: {e}"
            sweep_stats["errors"].append(error_msg)
            logger.error(error_msg, exc_info=True)

    logger.info(
        f"Sweep completed - Entries: {sweep_stats['scratch_entries_removed']}, "
        f"Records: {sweep_stats['stale_records_purged']}, "
        f"Errors: {len(sweep_stats['errors'])}"
    )

    if sweep_stats["errors"]:
        logger.warning(f"Sweep errors: {sweep_stats['errors']}")

    return sweep_stats
