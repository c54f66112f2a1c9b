"""
Image Processing Service

Application service that orchestrates the fetch -> transform -> register
pipeline and guarantees that no intermediate file outlives a run.
"""

import logging
import time
import uuid
from concurrent.futures import Executor
from datetime import datetime, timezone
from typing import Any, Callable, Optional

from ..domain.artifacts.registry import ArtifactRegistry
from ..domain.errors import (
    DomainError,
    ErrorCategory,
    FetchFailedError,
    RegistrationFailedError,
    TransformFailedError,
)
from ..domain.events import (
    ProcessingCompletedEvent,
    ProcessingFailedEvent,
    ProcessingStartedEvent,
)
from ..domain.processing.collaborators import IImageFetcher, IImageTransformer
from ..domain.processing.value_objects import SourceUrl, TransformSpec
from .event_publisher import EventPublisher
from .processing_result import ProcessingResult

logger = logging.getLogger(__name__)


class ImageProcessingService:
    """
    Application service for the image processing pipeline.

    On return from run() the files created by that run are either all gone
    (failure) or reduced to exactly one file registered in the registry
    (success).
    """

    def __init__(
        self,
        fetcher: IImageFetcher,
        transformer: IImageTransformer,
        registry: ArtifactRegistry,
        file_deleter: Callable[[str], None],
        event_publisher: EventPublisher,
        public_base_url: str,
        transform_executor: Optional[Executor] = None,
    ):
        """
        Initialize the service with its collaborators.

        Args:
            fetcher: Fetch collaborator producing a local file
            transformer: Transform collaborator producing the output file
            registry: Artifact registry receiving the output
            file_deleter: Best-effort deletion used for intermediate files
            event_publisher: Publisher for processing events
            public_base_url: Base URL the artifact endpoint is reachable at
            transform_executor: Optional pool that bounds concurrent transforms
        """
        self.fetcher = fetcher
        self.transformer = transformer
        self.registry = registry
        self.file_deleter = file_deleter
        self.event_publisher = event_publisher
        self.public_base_url = public_base_url.rstrip("/")
        self.transform_executor = transform_executor

    def artifact_url(self, identifier: str) -> str:
        return f"{self.public_base_url}/artifact/{identifier}"

    def run(self, source_url: Any, specs: Any) -> ProcessingResult:
        """
        Execute the complete pipeline.

        Workflow:
        1. Validate the URL and specs (no I/O on failure)
        2. Fetch the source into a temporary file
        3. Transform it into a second temporary file
        4. Delete the download and register the output
        5. Return the identifier and public URL

        Args:
            source_url: URL of the source image
            specs: Wire-format processing specs

        Returns:
            ProcessingResult with either identifier/URL or a typed error
        """
        run_id = uuid.uuid4().hex[:12]
        started = time.monotonic()
        downloaded_path: Optional[str] = None
        processed_path: Optional[str] = None

        try:
            url = SourceUrl(source_url)
            spec = TransformSpec.from_dict(specs)

            self.event_publisher.publish(ProcessingStartedEvent(
                aggregate_id=run_id,
                occurred_at=datetime.now(timezone.utc),
                source_url=str(url),
                output_format=spec.output_format.value,
            ))

            downloaded_path = self._fetch(url)
            processed_path = self._transform(downloaded_path, spec)

            self._discard(downloaded_path)
            downloaded_path = None

            identifier = self._register(processed_path)
            processed_path = None

            self.event_publisher.publish(ProcessingCompletedEvent(
                aggregate_id=run_id,
                occurred_at=datetime.now(timezone.utc),
                artifact_id=identifier,
                duration_ms=int((time.monotonic() - started) * 1000),
            ))
            return ProcessingResult.create_success(identifier, self.artifact_url(identifier))

        except DomainError as e:
            return self._handle_error(run_id, e.category, str(e), downloaded_path, processed_path)
        except Exception as e:
            logger.exception(f"Unexpected error in processing run {run_id}")
            return self._handle_error(
                run_id,
                ErrorCategory.INTERNAL_ERROR,
                f"Unexpected error: {e}",
                downloaded_path,
                processed_path,
            )

    def _fetch(self, url: SourceUrl) -> str:
        logger.info(f"Fetching image from URL: {url}")
        try:
            path = self.fetcher.fetch(url)
        except FetchFailedError:
            raise
        except Exception as e:
            raise FetchFailedError(f"Error downloading image: {e}", e)

        if not path:
            raise FetchFailedError("Error downloading image: no file was produced")
        return path

    def _transform(self, source_path: str, spec: TransformSpec) -> str:
        try:
            if self.transform_executor is not None:
                future = self.transform_executor.submit(
                    self.transformer.transform, source_path, spec
                )
                path = future.result()
            else:
                path = self.transformer.transform(source_path, spec)
        except TransformFailedError:
            raise
        except Exception as e:
            raise TransformFailedError(f"Error processing image: {e}", e)

        if not path:
            raise TransformFailedError("Error processing image: no output was produced")
        return path

    def _register(self, processed_path: str) -> str:
        try:
            return self.registry.register(processed_path)
        except RegistrationFailedError:
            raise
        except Exception as e:
            raise RegistrationFailedError(f"Error registering processed image: {e}", e)

    def _handle_error(
        self,
        run_id: str,
        category: ErrorCategory,
        message: str,
        downloaded_path: Optional[str],
        processed_path: Optional[str],
    ) -> ProcessingResult:
        for path in (downloaded_path, processed_path):
            if path:
                self._discard(path)

        self.event_publisher.publish(ProcessingFailedEvent(
            aggregate_id=run_id,
            occurred_at=datetime.now(timezone.utc),
            error_type=category.value,
            error_message=message,
        ))
        return ProcessingResult.create_failure(category, message)

    def _discard(self, path: str) -> None:
        try:
            self.file_deleter(path)
        except Exception as e:
            logger.warning(f"Cleanup of {path} failed: {e}")
