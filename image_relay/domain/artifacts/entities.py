"""
Artifact Entities

Domain entity for processed artifacts held for temporary retrieval.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta
from pathlib import Path
from typing import Optional

from .value_objects import ArtifactState


@dataclass
class ArtifactRecord:
    """
    Entity representing one processed artifact and its backing file.

    Owned exclusively by the ArtifactRegistry; other components only ever see
    snapshots returned by the registry.
    """

    identifier: str
    location: str
    registered_at: datetime
    served_at: Optional[datetime] = None
    filesize: Optional[int] = field(default=None, compare=False)

    @property
    def state(self) -> ArtifactState:
        if self.served_at is None:
            return ArtifactState.UNSERVED
        return ArtifactState.SERVED

    def is_served(self) -> bool:
        return self.served_at is not None

    def expires_at(self, ttl_seconds: float) -> Optional[datetime]:
        """
        Expiry moment once the artifact has been served.

        Args:
            ttl_seconds: Retention window after the first serve

        Returns:
            Expiry datetime, or None while the countdown has not started
        """
        if self.served_at is None:
            return None
        return self.served_at + timedelta(seconds=ttl_seconds)

    def file_exists(self) -> bool:
        """
        Check if the backing file exists.

        Returns:
            True if file exists, False otherwise
        """
        try:
            return Path(self.location).is_file()
        except OSError:
            return False

    @property
    def extension(self) -> str:
        return Path(self.location).suffix.lower()

    def snapshot(self) -> "ArtifactRecord":
        """Detached copy handed out by the registry."""
        return replace(self)

    def to_dict(self) -> dict:
        """Convert to dictionary for diagnostics."""
        return {
            "identifier": self.identifier,
            "location": self.location,
            "registered_at": self.registered_at.isoformat(),
            "served_at": self.served_at.isoformat() if self.served_at else None,
            "state": self.state.value,
            "filesize": self.filesize,
        }
