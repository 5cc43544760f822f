from abc import ABC, abstractmethod


class BasePdfExtractor(ABC):
    """Contract for flat-text PDF extraction adapters."""

    @abstractmethod
    def extract(self, pdf_bytes: bytes) -> str:
        """Extract plain text from PDF bytes.

        The result feeds template field rules, so layout is not preserved;
        pages are joined with newlines.

        Raises:
            PdfExtractionError: if extraction fails for any reason.
        """
