"""Custom exceptions for the celebrity indexing service."""
from typing import Optional


class CelebIndexError(Exception):
    """Base exception for celebrity indexing operations."""

    def __init__(self, message: str, details: Optional[dict] = None):
        """
        Initialize celebrity indexing error.

        Args:
            message: Error description
            details: Additional error context
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(CelebIndexError):
    """Raised when required configuration is missing or invalid."""
    pass


class ServiceNotInitializedError(CelebIndexError):
    """Raised when a service is requested before the container is initialized."""
    pass


class InvalidUploadRequestError(CelebIndexError):
    """Raised when an upload request body is malformed or fails validation."""
    pass


class ImageDecodeError(CelebIndexError):
    """Raised when the uploaded image is not valid base64."""
    pass


class StorageError(CelebIndexError):
    """Raised when an object store operation fails."""
    pass


class MetadataStoreError(CelebIndexError):
    """Raised when an upload record cannot be persisted."""
    pass


class RecognitionError(CelebIndexError):
    """Raised when the celebrity recognition service call fails."""
    pass


class IdentityIndexError(CelebIndexError):
    """Raised when a merge update on the identity index fails."""
    pass


class MalformedNotificationError(CelebIndexError):
    """Raised when a queue message does not hold a valid object-created event."""
    pass


class AnalysisBatchError(CelebIndexError):
    """Raised when any object in an analysis batch fails.

    The whole batch is reported as failed so the queue redelivers it.
    """

    def __init__(self, message: str, cause: Exception, details: Optional[dict] = None):
        super().__init__(message, details)
        self.cause = cause
