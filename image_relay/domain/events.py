"""
Domain Events

Immutable records of significant state changes in the domain.
Events decouple side effects (logging, metrics) from core business logic.
"""

from abc import ABC
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class DomainEvent(ABC):
    """
    Base class for all domain events.

    Attributes:
        aggregate_id: ID of the aggregate that generated the event (run id or artifact id)
        occurred_at: Timestamp when the event occurred
    """

    aggregate_id: str
    occurred_at: datetime

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert event to dictionary for serialization.

        Returns:
            Dictionary representation of the event
        """
        return {
            "event_type": self.__class__.__name__,
            "aggregate_id": self.aggregate_id,
            "occurred_at": self.occurred_at.isoformat(),
        }


@dataclass(frozen=True)
class ProcessingStartedEvent(DomainEvent):
    """
    Event emitted when a pipeline run starts.

    Attributes:
        aggregate_id: Run ID
        source_url: URL being fetched
        output_format: Requested output format
    """

    source_url: str
    output_format: str

    def to_dict(self) -> Dict[str, Any]:
        base_dict = super().to_dict()
        base_dict.update({
            "source_url": self.source_url,
            "output_format": self.output_format,
        })
        return base_dict


@dataclass(frozen=True)
class ProcessingCompletedEvent(DomainEvent):
    """
    Event emitted when a pipeline run registered its artifact.

    Attributes:
        aggregate_id: Run ID
        artifact_id: Identifier minted for the artifact
        duration_ms: Wall time of the run
    """

    artifact_id: str
    duration_ms: int

    def to_dict(self) -> Dict[str, Any]:
        base_dict = super().to_dict()
        base_dict.update({
            "artifact_id": self.artifact_id[:8],
            "duration_ms": self.duration_ms,
        })
        return base_dict


@dataclass(frozen=True)
class ProcessingFailedEvent(DomainEvent):
    """
    Event emitted when a pipeline run fails at any step.

    Attributes:
        aggregate_id: Run ID
        error_type: ErrorCategory value
        error_message: Human readable message
    """

    error_type: str
    error_message: str

    def to_dict(self) -> Dict[str, Any]:
        base_dict = super().to_dict()
        base_dict.update({
            "error_type": self.error_type,
            "error_message": self.error_message,
        })
        return base_dict


@dataclass(frozen=True)
class ArtifactServedEvent(DomainEvent):
    """
    Event emitted on the first successful serve of an artifact.

    Attributes:
        aggregate_id: Artifact ID
        expires_at: When the expiry timer fires
    """

    expires_at: Optional[datetime]

    def to_dict(self) -> Dict[str, Any]:
        base_dict = super().to_dict()
        base_dict["aggregate_id"] = self.aggregate_id[:8]
        base_dict["expires_at"] = self.expires_at.isoformat() if self.expires_at else None
        return base_dict
