"""
Logging Event Handler

Infrastructure event handler for logging domain events.
Domain layer remains unaware of logging infrastructure.
"""

import logging

from ...domain.events import (
    ArtifactServedEvent,
    DomainEvent,
    ProcessingCompletedEvent,
    ProcessingFailedEvent,
    ProcessingStartedEvent,
)


class LoggingEventHandler:
    """
    Infrastructure event handler for logging domain events.

    Artifact identifiers double as access credentials, so they are only
    ever logged truncated.
    """

    def __init__(self, logger: logging.Logger):
        """
        Initialize with logger instance.

        Args:
            logger: Python logging.Logger instance
        """
        self.logger = logger

    def handle(self, event: DomainEvent) -> None:
        """
        Handle domain event by logging it.

        Args:
            event: Domain event to log
        """
        try:
            if isinstance(event, ProcessingStartedEvent):
                self._handle_processing_started(event)
            elif isinstance(event, ProcessingCompletedEvent):
                self._handle_processing_completed(event)
            elif isinstance(event, ProcessingFailedEvent):
                self._handle_processing_failed(event)
            elif isinstance(event, ArtifactServedEvent):
                self._handle_artifact_served(event)
            else:
                self.logger.debug(
                    f"Unhandled event: {event.__class__.__name__} "
                    f"(aggregate_id={event.aggregate_id})"
                )
        except Exception as e:
            # Log handler errors but don't fail the operation
            self.logger.error(
                f"Error in logging event handler for {event.__class__.__name__}: {e}",
                exc_info=True,
            )

    def _handle_processing_started(self, event: ProcessingStartedEvent) -> None:
        self.logger.info(
            f"Processing started: run_id={event.aggregate_id}, "
            f"url={event.source_url}, format={event.output_format}"
        )

    def _handle_processing_completed(self, event: ProcessingCompletedEvent) -> None:
        self.logger.info(
            f"Processing completed: run_id={event.aggregate_id}, "
            f"artifact={event.artifact_id[:8]}, duration={event.duration_ms}ms"
        )

    def _handle_processing_failed(self, event: ProcessingFailedEvent) -> None:
        self.logger.warning(
            f"Processing failed: run_id={event.aggregate_id}, "
            f"category={event.error_type}, error={event.error_message}"
        )

    def _handle_artifact_served(self, event: ArtifactServedEvent) -> None:
        expires = event.expires_at.isoformat() if event.expires_at else "never"
        self.logger.info(
            f"Artifact first served: artifact={event.aggregate_id[:8]}, expires_at={expires}"
        )
