class ProcessorError(Exception):
    """Base exception for all processor-related errors."""


class DocumentNotFoundError(ProcessorError):
    """Raised when a document cannot be found in the database."""


class UnsupportedMimeTypeError(ProcessorError):
    """Raised when a document's MIME type is neither PDF nor a supported image."""
