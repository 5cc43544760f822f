class PdfError(Exception):
    """Base exception for PDF handling errors."""


class PdfExtractionError(PdfError):
    """Raised when flat text cannot be extracted from a PDF."""


class MalformedDocumentError(PdfError):
    """Raised when a buffer cannot be parsed as a PDF or supported image."""


class PayloadTooLargeError(PdfError):
    """Raised when a single page payload exceeds the configured byte ceiling."""

    def __init__(self, page_index: int, size_bytes: int, max_bytes: int) -> None:
        super().__init__(
            f"Page {page_index} payload is {size_bytes} bytes (max {max_bytes})"
        )
        self.page_index = page_index
        self.size_bytes = size_bytes
        self.max_bytes = max_bytes
