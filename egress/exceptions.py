"""Custom exception hierarchy for the egress uploader."""

from __future__ import annotations


class EgressError(Exception):
    """Base exception for all egress-specific errors."""

    def __init__(self, message: str, details: dict[str, str] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(EgressError):
    """Raised when storage configuration is invalid or missing."""
    pass


class StorageError(EgressError):
    """Raised when a storage backend fails to store a file."""
    pass


class S3Error(StorageError):
    """Raised when S3 operations fail."""
    pass


class CloudStorageError(StorageError):
    """Raised when a libcloud-backed provider (GCS, Azure, OSS) fails."""
    pass


class UploadError(EgressError):
    """Base class for orchestrator-level upload errors."""

    code = "internal"
    retryable = True


class UploadFailedError(UploadError):
    """Raised when both the primary and the backup destination rejected a file.

    Neither configured destination is usable, so callers should treat this as an
    operator problem rather than retry blindly.
    """

    code = "invalid_argument"
    retryable = False

    def __init__(self, primary_error: BaseException, backup_error: BaseException) -> None:
        super().__init__(
            f"primary: {primary_error}\nbackup: {backup_error}",
            {"primary": str(primary_error), "backup": str(backup_error)},
        )
        self.primary_error = primary_error
        self.backup_error = backup_error
