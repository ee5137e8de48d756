"""Exception hierarchy shared by the stores, the workflows and the routes."""

from typing import Any, Dict, Optional


ERROR_CODE_VALIDATION_FAILED = "VALIDATION_FAILED"
ERROR_CODE_CONFLICT = "FILE_EXISTS"
ERROR_CODE_NOT_FOUND = "FILE_NOT_FOUND"
ERROR_CODE_STORAGE = "STORAGE_ERROR"
ERROR_CODE_PERSISTENCE = "PERSISTENCE_ERROR"


class FileServiceError(Exception):
    """Base class for every error raised by the service.

    `message` is safe to hand back to clients; `details` carries context
    for logs only.
    """

    def __init__(self, *, message: str, error_code: str, details: Optional[Dict[str, Any]] = None) -> None:
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(FileServiceError):
    """Bad MIME type, unusable file name or an empty upload."""

    def __init__(self, *, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message=message, error_code=ERROR_CODE_VALIDATION_FAILED, details=details)


class ConflictError(FileServiceError):
    """A record with the same file name already exists."""

    def __init__(self, *, message: str = "File already exists.", details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message=message, error_code=ERROR_CODE_CONFLICT, details=details)


class NotFoundError(FileServiceError):
    def __init__(self, *, message: str = "File not found", details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message=message, error_code=ERROR_CODE_NOT_FOUND, details=details)


class StorageError(FileServiceError):
    """A blob could not be written, read or removed."""

    def __init__(self, *, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message=message, error_code=ERROR_CODE_STORAGE, details=details)


class PersistenceError(FileServiceError):
    """The metadata store failed to read, write or delete a record."""

    def __init__(self, *, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message=message, error_code=ERROR_CODE_PERSISTENCE, details=details)
