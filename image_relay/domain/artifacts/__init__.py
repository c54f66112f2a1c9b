"""
Artifacts Domain

Handles ephemeral artifact records, identifier minting and lifetime tracking.
"""

from .entities import ArtifactRecord
from .registry import ArtifactRegistry
from .scheduling import ScheduledCall, Scheduler, utc_now
from .value_objects import ArtifactId, ArtifactState

__all__ = [
    "ArtifactId",
    "ArtifactRecord",
    "ArtifactRegistry",
    "ArtifactState",
    "ScheduledCall",
    "Scheduler",
    "utc_now",
]
