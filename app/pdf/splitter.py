import pymupdf

from app.logging.logger import Log
from app.pdf.exceptions import MalformedDocumentError
from app.pdf.models import SplitResult


class PageSplitter:
    """Decomposes a PDF into standalone single-page PDFs."""

    DEFAULT_MAX_PAGES = 10

    def __init__(self, max_pages: int = DEFAULT_MAX_PAGES) -> None:
        if max_pages < 1:
            raise ValueError("max_pages must be at least 1")
        self._max_pages = max_pages

    def split(self, pdf_bytes: bytes) -> SplitResult:
        """Split a PDF buffer into at most ``max_pages`` one-page buffers.

        Raises:
            MalformedDocumentError: if the buffer is not a readable PDF.
        """
        source = self._open(pdf_bytes)
        with source:
            total_pages = source.page_count
            if total_pages == 0:
                raise MalformedDocumentError("PDF has no pages")

            to_process = min(total_pages, self._max_pages)
            if total_pages > self._max_pages:
                Log.warning(
                    f"PDF has {total_pages} pages, processing only first {to_process}"
                )

            pages: list[bytes] = []
            for index in range(to_process):
                with pymupdf.open() as single:  # type: ignore[no-untyped-call]
                    single.insert_pdf(source, from_page=index, to_page=index)
                    pages.append(single.tobytes())

        Log.info(f"Split PDF into {len(pages)} of {total_pages} page(s)")
        return SplitResult(pages=pages, total_pages=total_pages)

    @staticmethod
    def _open(pdf_bytes: bytes) -> pymupdf.Document:
        if not pdf_bytes:
            raise MalformedDocumentError("Empty PDF buffer")
        try:
            doc = pymupdf.open(stream=pdf_bytes, filetype="pdf")  # type: ignore[no-untyped-call]
        except Exception as exc:
            raise MalformedDocumentError(f"Cannot parse PDF: {exc}") from exc
        # Encrypted files with an empty user password still open for reading.
        if doc.needs_pass and not doc.authenticate(""):
            doc.close()
            raise MalformedDocumentError("PDF is password protected")
        return doc
