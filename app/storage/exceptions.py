class StorageError(Exception):
    """Base exception for object storage failures."""


class StorageObjectNotFoundError(StorageError):
    """Raised when a requested object key does not exist."""


class StorageConfigurationError(StorageError):
    """Raised when the object store endpoint or credentials are missing."""
