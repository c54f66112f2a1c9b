"""
Artifact Registry

In-memory mapping from opaque identifier to artifact location. The registry
owns the lifetime of every artifact it tracks: it mints identifiers, arms the
one-shot expiry timer on first serve, cancels pending timers on any removal
path and deletes backing files.
"""

import logging
import os
import threading
from pathlib import Path
from typing import Callable, Dict, List, Optional

from ..errors import ArtifactNotFoundError, RegistrationFailedError
from .entities import ArtifactRecord
from .scheduling import ScheduledCall, Scheduler, utc_now
from .value_objects import ArtifactId

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 3600


def _short(identifier: str) -> str:
    return identifier[:8]


class ArtifactRegistry:
    """
    Thread-safe registry of ephemeral artifacts.

    A single re-entrant lock guards both the record map and the table of
    pending expiry timers. File deletion always happens outside the lock and
    never raises.
    """

    def __init__(
        self,
        scheduler: Scheduler,
        file_deleter: Callable[[str], None],
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock=utc_now,
    ):
        """
        Initialize the registry.

        Args:
            scheduler: Scheduler used to arm per-artifact expiry timers
            file_deleter: Best-effort deletion of a backing file
            ttl_seconds: Retention window after the first serve
            clock: Callable returning the current UTC datetime
        """
        self._scheduler = scheduler
        self._file_deleter = file_deleter
        self._ttl_seconds = ttl_seconds
        self._clock = clock

        self._records: Dict[str, ArtifactRecord] = {}
        self._timers: Dict[str, ScheduledCall] = {}
        self._lock = threading.RLock()
        self._accepting = False

    @property
    def ttl_seconds(self) -> float:
        return self._ttl_seconds

    @property
    def is_running(self) -> bool:
        return self._accepting

    # Lifecycle

    def start(self) -> None:
        """Start accepting registrations."""
        with self._lock:
            self._accepting = True
        logger.info(f"Artifact registry started (ttl={self._ttl_seconds}s)")

    def stop(self) -> None:
        """
        Stop accepting registrations and cancel every pending expiry timer.

        Records stay resolvable; the janitor's age sweep reclaims their files.
        """
        with self._lock:
            self._accepting = False
            timers = list(self._timers.values())
            self._timers.clear()

        for timer in timers:
            timer.cancel()

        logger.info(f"Artifact registry stopped, cancelled {len(timers)} pending timer(s)")

    # Operations

    def register(self, location: str) -> str:
        """
        Register a processed artifact and mint its identifier.

        Args:
            location: Path to the artifact's backing file

        Returns:
            Fresh unguessable identifier

        Raises:
            RegistrationFailedError: If the file is missing or the registry is stopped
        """
        path = Path(location)
        try:
            filesize = path.stat().st_size
        except OSError as e:
            raise RegistrationFailedError(f"Artifact file not found: {location}", e)

        if not path.is_file():
            raise RegistrationFailedError(f"Artifact location is not a file: {location}")

        with self._lock:
            if not self._accepting:
                raise RegistrationFailedError("Artifact registry is not accepting registrations")

            identifier = str(ArtifactId.generate())
            while identifier in self._records:
                identifier = str(ArtifactId.generate())

            self._records[identifier] = ArtifactRecord(
                identifier=identifier,
                location=str(path),
                registered_at=self._clock(),
                filesize=filesize,
            )

        logger.info(f"Registered artifact {_short(identifier)} at {path.name}")
        return identifier

    def resolve(self, identifier: str) -> ArtifactRecord:
        """
        Look up an artifact, purging it if its backing file has vanished.

        Args:
            identifier: Artifact identifier

        Returns:
            Snapshot of the artifact record

        Raises:
            ArtifactNotFoundError: If the identifier is unknown or its file is gone
        """
        with self._lock:
            record = self._records.get(identifier)
            if record is None:
                logger.debug(f"Resolve miss for unknown artifact {_short(identifier)}")
                raise ArtifactNotFoundError("Artifact not found")

            if record.file_exists():
                return record.snapshot()

            del self._records[identifier]
            timer = self._timers.pop(identifier, None)

        if timer is not None:
            timer.cancel()

        logger.warning(
            f"Purged stale artifact {_short(identifier)}: "
            f"backing file {record.location} disappeared"
        )
        raise ArtifactNotFoundError("Artifact not found")

    def mark_served(self, identifier: str) -> bool:
        """
        Stamp the first successful serve and arm the expiry timer.

        Later calls leave the running countdown untouched. The backing file's
        mtime is refreshed so the age sweep does not cut into the serve window.

        Args:
            identifier: Artifact identifier

        Returns:
            True if this call started the countdown, False if it was already running

        Raises:
            ArtifactNotFoundError: If the identifier is unknown
        """
        with self._lock:
            record = self._records.get(identifier)
            if record is None:
                raise ArtifactNotFoundError("Artifact not found")

            if record.is_served():
                return False

            record.served_at = self._clock()
            if self._accepting:
                self._timers[identifier] = self._scheduler.schedule(
                    self._ttl_seconds, lambda: self._expire(identifier)
                )
            location = record.location

        # Sweep age counts from the first serve, not from registration
        self._touch_file(location)

        logger.info(
            f"Artifact {_short(identifier)} served for the first time, "
            f"expires in {self._ttl_seconds}s"
        )
        return True

    def remove(self, identifier: str) -> None:
        """
        Remove an artifact and delete its backing file.

        Unknown identifiers are a no-op. Deletion failures are logged and
        discarded; the artifact is logically gone either way.

        Args:
            identifier: Artifact identifier
        """
        with self._lock:
            record = self._records.pop(identifier, None)
            timer = self._timers.pop(identifier, None)

        if timer is not None:
            timer.cancel()

        if record is None:
            return

        self._discard_file(record)
        logger.info(f"Removed artifact {_short(identifier)}")

    def purge_missing(self) -> int:
        """
        Drop every record whose backing file no longer exists.

        Runs after each janitor sweep so that artifacts which were never served
        (and therefore never got a timer) do not linger in memory.

        Returns:
            Number of records purged
        """
        with self._lock:
            stale = [i for i, r in self._records.items() if not r.file_exists()]
            timers = [self._timers.pop(i, None) for i in stale]
            for identifier in stale:
                del self._records[identifier]

        for timer in timers:
            if timer is not None:
                timer.cancel()

        if stale:
            logger.info(f"Purged {len(stale)} stale artifact record(s)")
        return len(stale)

    def list_identifiers(self) -> List[str]:
        """Snapshot of all registered identifiers, in no particular order."""
        with self._lock:
            return list(self._records.keys())

    def get_record(self, identifier: str) -> Optional[ArtifactRecord]:
        """Snapshot of a record without checking its file, for diagnostics."""
        with self._lock:
            record = self._records.get(identifier)
            return record.snapshot() if record else None

    def has_pending_timer(self, identifier: str) -> bool:
        with self._lock:
            return identifier in self._timers

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def __contains__(self, identifier: object) -> bool:
        with self._lock:
            return identifier in self._records

    # Internals

    def _expire(self, identifier: str) -> None:
        logger.info(f"Expiry timer fired for artifact {_short(identifier)}")
        self.remove(identifier)

    def _discard_file(self, record: ArtifactRecord) -> None:
        try:
            self._file_deleter(record.location)
        except Exception as e:
            logger.warning(
                f"Failed to delete file for artifact {_short(record.identifier)}: {e}"
            )

    def _touch_file(self, location: str) -> None:
        try:
            os.utime(location)
        except FileNotFoundError:
            # Removed concurrently; nothing left to protect
            pass
        except OSError as e:
            logger.warning(f"Could not refresh mtime of {location}: {e}")
