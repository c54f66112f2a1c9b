"""
Error Handling Module

Defines domain exceptions and error categories for the application.
Domain exceptions are pure and have no external dependencies.
Application exceptions carry the user-facing messaging used by the HTTP layer.
"""

from enum import Enum
from typing import Any, Dict, Optional


class ErrorCategory(Enum):
    """Error category enumeration for structured error handling."""

    INVALID_REQUEST = "invalid_request"
    FETCH_FAILED = "fetch_failed"
    TRANSFORM_FAILED = "transform_failed"
    REGISTRATION_FAILED = "registration_failed"
    ARTIFACT_NOT_FOUND = "artifact_not_found"
    INTERNAL_ERROR = "internal_error"


# User-friendly error messages with actionable guidance
ERROR_MESSAGES: Dict[ErrorCategory, Dict[str, str]] = {
    ErrorCategory.INVALID_REQUEST: {
        "title": "Invalid Request",
        "message": "The request is missing required information or contains invalid data.",
        "action": "Check the image URL and the processing specs, then try again.",
    },
    ErrorCategory.FETCH_FAILED: {
        "title": "Image Download Failed",
        "message": "The source image could not be downloaded.",
        "action": "Make sure the URL is publicly reachable and points to an image.",
    },
    ErrorCategory.TRANSFORM_FAILED: {
        "title": "Image Processing Failed",
        "message": "The image could not be resized, compressed or converted.",
        "action": "Try a different output format or check that the source is a valid image.",
    },
    ErrorCategory.REGISTRATION_FAILED: {
        "title": "Storage Error",
        "message": "The processed image could not be made available for download.",
        "action": "Please try again in a moment.",
    },
    ErrorCategory.ARTIFACT_NOT_FOUND: {
        "title": "Image Not Found",
        "message": "The requested image does not exist or has expired.",
        "action": "Process the image again to get a new link.",
    },
    ErrorCategory.INTERNAL_ERROR: {
        "title": "Internal Error",
        "message": "An unexpected error occurred while processing your request.",
        "action": "Please try again later. If the problem persists, contact support.",
    },
}


# ============================================================================
# Domain Exceptions (Pure - No External Dependencies)
# ============================================================================

class DomainError(Exception):
    """
    Base exception for all domain errors.

    Each subclass is bound to an ErrorCategory so the application layer can
    translate it into a structured failure without inspecting messages.
    """

    category: ErrorCategory = ErrorCategory.INTERNAL_ERROR

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        """
        Initialize domain error.

        Args:
            message: Error message
            original_error: Optional original exception that caused this error
        """
        super().__init__(message)
        self.original_error = original_error


class InvalidRequestError(DomainError):
    """Raised when a processing request is malformed. No I/O has happened yet."""

    category = ErrorCategory.INVALID_REQUEST


class FetchFailedError(DomainError):
    """Raised when the source image cannot be fetched (network, status, timeout, size)."""

    category = ErrorCategory.FETCH_FAILED


class TransformFailedError(DomainError):
    """Raised when the image codec cannot produce the requested output."""

    category = ErrorCategory.TRANSFORM_FAILED


class RegistrationFailedError(DomainError):
    """Raised when the registry refuses a processed artifact."""

    category = ErrorCategory.REGISTRATION_FAILED


class ArtifactNotFoundError(DomainError):
    """
    Raised when an identifier does not resolve to a servable artifact.

    Unknown, expired and vanished identifiers all raise this same error;
    callers must not be able to tell them apart.
    """

    category = ErrorCategory.ARTIFACT_NOT_FOUND


# ============================================================================
# Application Layer Exceptions
# ============================================================================

class ApplicationError(Exception):
    """
    Base application error with category and user-friendly messaging.

    Bridges domain errors with user-facing error messages and HTTP responses.
    """

    def __init__(
        self,
        category: ErrorCategory,
        technical_message: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        """
        Initialize application error.

        Args:
            category: Error category
            technical_message: Technical error details for logging
            context: Additional context information
        """
        self.category = category
        self.technical_message = technical_message or ""
        self.context = context or {}

        error_info = ERROR_MESSAGES.get(
            category, ERROR_MESSAGES[ErrorCategory.INTERNAL_ERROR]
        )
        self.title = error_info["title"]
        self.message = error_info["message"]
        self.action = error_info["action"]

        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert error to dictionary for API response.

        Returns:
            Dictionary with error information
        """
        return {
            "error": self.category.value,
            "title": self.title,
            "message": self.message,
            "action": self.action,
        }


def create_error_response(
    category: ErrorCategory,
    technical_message: Optional[str] = None,
    context: Optional[Dict[str, Any]] = None,
    status_code: int = 400,
) -> tuple[Dict[str, Any], int]:
    """
    Create a structured error response for API endpoints.

    The technical message is never part of the body; it is meant for logs.

    Args:
        category: Error category
        technical_message: Technical error details for logging
        context: Additional context information
        status_code: HTTP status code

    Returns:
        Tuple of (error_dict, status_code)
    """
    error = ApplicationError(category, technical_message, context)
    return error.to_dict(), status_code
