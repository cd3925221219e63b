"""Custom exception classes for LabTrack."""

from fastapi import status


class LabTrackError(Exception):
    """Base exception for LabTrack."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str = "An error occurred"):
        self.message = message
        super().__init__(self.message)


class AuthenticationError(LabTrackError):
    """Raised when authentication fails."""
    status_code = status.HTTP_401_UNAUTHORIZED


class AuthorizationError(LabTrackError):
    """Raised when user lacks permission."""
    status_code = status.HTTP_403_FORBIDDEN


class ResourceNotFoundError(LabTrackError):
    """Raised when a requested resource is not found."""
    status_code = status.HTTP_404_NOT_FOUND


class ResourceConflictError(LabTrackError):
    """Raised when a resource already exists."""
    status_code = status.HTTP_409_CONFLICT


class ValidationError(LabTrackError):
    """Raised when input validation fails."""
    status_code = status.HTTP_400_BAD_REQUEST


class StorageError(LabTrackError):
    """Raised when a database operation fails."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
