"""
Application Layer

Orchestrates domain objects and collaborators into use cases: the processing
pipeline, artifact serving, event publishing and dependency wiring.
"""

from .artifact_service import ArtifactService, ServedArtifact, content_type_for
from .dependency_container import DependencyContainer, DependencyNotFoundError
from .event_publisher import EventPublisher
from .processing_result import ProcessingResult
from .processing_service import ImageProcessingService

__all__ = [
    "ArtifactService",
    "DependencyContainer",
    "DependencyNotFoundError",
    "EventPublisher",
    "ImageProcessingService",
    "ProcessingResult",
    "ServedArtifact",
    "content_type_for",
]
