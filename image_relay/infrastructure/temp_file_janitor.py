"""
Temporary File Janitor

Infrastructure component that keeps the scratch directory bounded.
Runs a periodic age-based sweep as a backstop for lost expiry timers
(process restarts) and for stray files of crashed pipeline runs, and
performs best-effort deletion of single files on demand.
"""

import logging
import shutil
import threading
import time
import uuid
from pathlib import Path
from typing import Callable, List, Optional, Union

logger = logging.getLogger(__name__)

DEFAULT_MAX_AGE_SECONDS = 3600
DEFAULT_INTERVAL_SECONDS = 3600


def scratch_file_path(scratch_dir: Union[str, Path], extension: str) -> Path:
    """
    Unique path inside the scratch directory.

    Names come from a fresh random token so concurrent runs never collide.

    Args:
        scratch_dir: Scratch directory
        extension: File extension without the dot

    Returns:
        Path that does not exist yet
    """
    return Path(scratch_dir) / f"{uuid.uuid4().hex}.{extension.lstrip('.')}"


class TempFileJanitor:
    """
    Sweeps a scratch directory on a fixed interval.

    The sweep only looks at file modification times, never at in-memory
    state, so it keeps reclaiming space across restarts.
    """

    def __init__(
        self,
        scratch_dir: Union[str, Path],
        max_age_seconds: float = DEFAULT_MAX_AGE_SECONDS,
        interval_seconds: float = DEFAULT_INTERVAL_SECONDS,
    ):
        """
        Initialize the janitor.

        Args:
            scratch_dir: Directory holding downloads and processed artifacts
            max_age_seconds: Default age threshold for sweeps
            interval_seconds: Delay between periodic sweeps
        """
        self.scratch_dir = Path(scratch_dir)
        self.max_age_seconds = max_age_seconds
        self.interval_seconds = interval_seconds

        self._sweep_listeners: List[Callable[[], object]] = []
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._lock = threading.Lock()

    def ensure_scratch_dir(self) -> None:
        """Create the scratch directory if needed."""
        try:
            self.scratch_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise OSError(f"Failed to create scratch directory: {self.scratch_dir}") from e

    # Single file deletion

    def delete_one(self, path: Union[str, Path]) -> None:
        """
        Best-effort deletion of a single file.

        A missing file is not an error; any other failure is logged and
        discarded.

        Args:
            path: File to delete
        """
        try:
            Path(path).unlink()
            logger.debug(f"Deleted {path}")
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning(f"Could not delete file {path}: {e}")

    # Sweep

    def sweep(self, max_age_seconds: Optional[float] = None) -> int:
        """
        Delete every scratch entry at least max_age_seconds old.

        Directories older than the threshold are removed recursively and
        empty directories are removed regardless of age. A max age of zero
        empties the directory. Failures on single entries are logged and do
        not abort the sweep.

        Args:
            max_age_seconds: Age threshold, defaults to the configured one

        Returns:
            Number of entries removed
        """
        if max_age_seconds is None:
            max_age_seconds = self.max_age_seconds

        if not self.scratch_dir.exists():
            return 0

        try:
            entries = list(self.scratch_dir.iterdir())
        except OSError as e:
            logger.warning(f"Could not list scratch directory {self.scratch_dir}: {e}")
            return 0

        now = time.time()
        count = 0

        for item in entries:
            try:
                age_seconds = now - item.stat().st_mtime

                if age_seconds >= max_age_seconds:
                    if item.is_dir():
                        shutil.rmtree(item)
                    else:
                        item.unlink()
                    count += 1
                    logger.info(f"Removed expired scratch entry: {item.name}")
                elif item.is_dir() and not any(item.iterdir()):
                    item.rmdir()
                    logger.info(f"Removed empty directory: {item.name}")

            except FileNotFoundError:
                # Deleted concurrently by an expiry timer
                continue
            except OSError as e:
                logger.warning(f"Failed to remove scratch entry {item}: {e}")

        return count

    def add_sweep_listener(self, callback: Callable[[], object]) -> None:
        """Register a callback run after every periodic sweep."""
        self._sweep_listeners.append(callback)

    def run_once(self) -> int:
        """
        Sweep once and notify listeners.

        Returns:
            Number of entries removed by the sweep
        """
        logger.info("Starting scratch directory sweep")
        removed = self.sweep()

        for listener in self._sweep_listeners:
            try:
                listener()
            except Exception as e:
                logger.error(f"Sweep listener {listener!r} failed: {e}", exc_info=True)

        logger.info(f"Sweep completed - removed {removed} entr{'y' if removed == 1 else 'ies'}")
        return removed

    # Lifecycle

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """Start the periodic sweep thread. Starting twice is a no-op."""
        with self._lock:
            if self.is_running:
                return

            self.ensure_scratch_dir()
            self._stop_event.clear()
            self._thread = threading.Thread(
                target=self._run, name="temp-file-janitor", daemon=True
            )
            self._thread.start()

        logger.info(
            f"Janitor started for {self.scratch_dir} "
            f"(interval={self.interval_seconds}s, max_age={self.max_age_seconds}s)"
        )

    def stop(self, timeout: float = 5.0) -> None:
        """Stop the periodic sweep thread and wait for it to exit."""
        with self._lock:
            thread = self._thread
            self._thread = None
            self._stop_event.set()

        if thread is not None:
            thread.join(timeout)
            logger.info("Janitor stopped")

    def _run(self) -> None:
        while not self._stop_event.wait(self.interval_seconds):
            try:
                self.run_once()
            except Exception as e:
                logger.error(f"Scratch sweep failed: {e}", exc_info=True)
