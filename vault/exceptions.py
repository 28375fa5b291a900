"""Custom exception classes for the MediaVault server."""


class VaultException(Exception):
    """
    Base exception class for all MediaVault errors.
    """
    pass


class InvalidNamespaceError(VaultException):
    """
    Raised when the user namespace is missing or cannot be used as a directory name.
    """
    pass


class EmptyBatchError(VaultException):
    """
    Raised when an upload request carries no file parts.
    """
    pass


class FileTooLargeError(VaultException):
    """
    Raised when a single uploaded file exceeds the configured byte ceiling.
    """
    pass


class NamespaceNotFoundError(VaultException):
    """
    Raised when a namespace has no storage directory yet.
    """
    pass


class IngestionError(VaultException):
    """
    Base class for per-file failures inside the ingestion pipeline.
    """
    pass


class InvalidPathError(IngestionError):
    """
    Raised when a declared filename is absolute or escapes the namespace root.
    """
    pass


class DuplicateFileError(IngestionError):
    """
    Raised when (user, relative_path) is already taken.
    """
    pass


class StorageError(IngestionError):
    """
    Raised when writing bytes or catalog rows fails.
    """
    pass


class TypeMismatchError(IngestionError):
    """
    Raised when sniffed content disagrees with the declared media type.
    """

    def __init__(self, message: str, detected_mime_type: str, declared_mime_type: str):
        super().__init__(message)
        self.detected_mime_type = detected_mime_type
        self.declared_mime_type = declared_mime_type


class ThreatDetectedError(IngestionError):
    """
    Raised when the scanner reports anything other than a clean verdict.
    """
    pass


class PreviewError(IngestionError):
    """
    Raised when an image codec or frame extractor cannot produce a preview.
    """
    pass
