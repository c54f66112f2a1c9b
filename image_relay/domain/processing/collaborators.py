"""
Processing Collaborators

Abstract interfaces for the fetch and transform steps of the pipeline.
Domain layer defines the contract, infrastructure provides implementation.
"""

from abc import ABC, abstractmethod

from .value_objects import SourceUrl, TransformSpec


class IImageFetcher(ABC):
    """Materializes a remote image as a local temporary file."""

    @abstractmethod
    def fetch(self, url: SourceUrl) -> str:
        """
        Download the resource at url into the scratch directory.

        Implementations must not leave a partial file behind on failure.

        Args:
            url: Validated source URL

        Returns:
            Path of the downloaded file

        Raises:
            FetchFailedError: On network errors, non-success status, timeout
                or oversized responses
        """
        pass  # pragma: no cover


class IImageTransformer(ABC):
    """Produces a new image file from a local source and a TransformSpec."""

    @abstractmethod
    def transform(self, source_path: str, spec: TransformSpec) -> str:
        """
        Resize, compress and convert source_path.

        Implementations must not leave a partial output file behind on failure.

        Args:
            source_path: Path of the downloaded image
            spec: Validated transformation spec

        Returns:
            Path of the new file in the requested format

        Raises:
            TransformFailedError: If decoding or encoding fails
        """
        pass  # pragma: no cover
