"""
Processing Result Value Object

Outcome of a pipeline run: either an identifier and URL, or a typed error.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from ..domain.errors import ErrorCategory


@dataclass(frozen=True)
class ProcessingResult:
    """
    Result of ImageProcessingService.run.

    Attributes:
        success: Whether an artifact was registered
        identifier: Artifact identifier (if successful)
        url: Public URL of the artifact (if successful)
        error_message: Human-readable error message (if failed)
        error_type: ErrorCategory of the failure (if failed)
    """

    success: bool
    identifier: Optional[str] = None
    url: Optional[str] = None
    error_message: Optional[str] = None
    error_type: Optional[ErrorCategory] = None

    @classmethod
    def create_success(cls, identifier: str, url: str) -> "ProcessingResult":
        return cls(success=True, identifier=identifier, url=url)

    @classmethod
    def create_failure(cls, category: ErrorCategory, message: str) -> "ProcessingResult":
        return cls(success=False, error_message=message or category.value, error_type=category)

    def to_response(self) -> Dict[str, Any]:
        """
        Tool response shape: {success, processedImageUrl?, error?}.
        """
        if self.success:
            return {"success": True, "processedImageUrl": self.url}
        return {"success": False, "error": self.error_message}
