"""
Artifact Service

Application service behind the serving endpoint. Resolves identifiers
through the registry, starts the expiry countdown on first serve and
classifies content types.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict

from ..domain.artifacts.registry import ArtifactRegistry
from ..domain.artifacts.value_objects import ArtifactId
from ..domain.events import ArtifactServedEvent
from .event_publisher import EventPublisher

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "application/octet-stream"

CONTENT_TYPES = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".webp": "image/webp",
    ".avif": "image/avif",
    ".tiff": "image/tiff",
    ".tif": "image/tiff",
}


def content_type_for(extension: str) -> str:
    """Map a lowercase file suffix (".png") to its MIME type, falling back to binary."""
    return CONTENT_TYPES.get(extension, DEFAULT_CONTENT_TYPE)


@dataclass(frozen=True)
class ServedArtifact:
    """What the HTTP layer needs to stream an artifact."""

    identifier: str
    location: str
    content_type: str
    cache_control: str
    first_serve: bool


class ArtifactService:
    """
    Serving logic for processed artifacts.

    State per identifier: Unserved -> Served -> Expired (removed). The first
    successful serve arms the one-shot expiry timer; later serves do not
    re-arm it.
    """

    def __init__(self, registry: ArtifactRegistry, event_publisher: EventPublisher):
        self.registry = registry
        self.event_publisher = event_publisher

    @property
    def cache_control(self) -> str:
        return f"public, max-age={int(self.registry.ttl_seconds)}"

    def open_artifact(self, identifier: str) -> ServedArtifact:
        """
        Resolve an identifier for serving.

        Args:
            identifier: Identifier from the request path

        Returns:
            ServedArtifact describing the file to stream

        Raises:
            ArtifactNotFoundError: For malformed, unknown, expired or vanished identifiers
        """
        artifact_id = ArtifactId(identifier)
        record = self.registry.resolve(artifact_id.value)
        first_serve = self.registry.mark_served(artifact_id.value)

        if first_serve:
            served = self.registry.get_record(artifact_id.value)
            self.event_publisher.publish(ArtifactServedEvent(
                aggregate_id=artifact_id.value,
                occurred_at=datetime.now(timezone.utc),
                expires_at=served.expires_at(self.registry.ttl_seconds) if served else None,
            ))

        return ServedArtifact(
            identifier=artifact_id.value,
            location=record.location,
            content_type=content_type_for(record.extension),
            cache_control=self.cache_control,
            first_serve=first_serve,
        )

    def handle_missing_file(self, identifier: str) -> None:
        """
        Drop a record whose file disappeared between resolve and send.
        """
        logger.warning(f"Artifact {identifier[:8]} vanished while being served")
        self.registry.remove(identifier)

    def list_artifacts(self) -> Dict[str, Any]:
        """
        Diagnostic listing. The identifiers are access tokens; this must only
        be exposed to trusted callers.
        """
        images = self.registry.list_identifiers()
        return {"images": images, "count": len(images)}
