import pymupdf

from app.pdf.exceptions import MalformedDocumentError, PayloadTooLargeError
from app.pdf.models import PageImage

PDF_MIME_TYPE = "application/pdf"
IMAGE_MIME_TYPES = frozenset({"image/png", "image/jpeg", "image/webp", "image/gif"})


class PageRasterizer:
    """Turns a single-page PDF or an image into a size-bounded PageImage.

    PDF pages are rendered to PNG; images pass through byte for byte. No
    resizing is done here, so callers that need smaller payloads must shrink
    them first.
    """

    DEFAULT_MAX_BYTES = 15 * 1024 * 1024

    def __init__(self, max_bytes: int = DEFAULT_MAX_BYTES, dpi: int = 150) -> None:
        self._max_bytes = max_bytes
        self._dpi = dpi

    @property
    def max_bytes(self) -> int:
        return self._max_bytes

    def rasterize(self, buffer: bytes, mime_type: str, page_index: int = 0) -> PageImage:
        """Build the PageImage for one page.

        Raises:
            MalformedDocumentError: unsupported MIME type or unreadable PDF.
            PayloadTooLargeError: payload larger than ``max_bytes``.
        """
        mime_type = mime_type.lower()
        if mime_type == PDF_MIME_TYPE:
            payload = self._render_pdf_page(buffer)
            mime_type = "image/png"
        elif mime_type in IMAGE_MIME_TYPES:
            payload = buffer
        else:
            raise MalformedDocumentError(f"Unsupported MIME type '{mime_type}'")

        size_bytes = len(payload)
        if size_bytes > self._max_bytes:
            raise PayloadTooLargeError(page_index, size_bytes, self._max_bytes)
        return PageImage(
            page_index=page_index,
            payload=payload,
            mime_type=mime_type,
            size_bytes=size_bytes,
        )

    def _render_pdf_page(self, buffer: bytes) -> bytes:
        try:
            with pymupdf.open(stream=buffer, filetype="pdf") as doc:  # type: ignore[no-untyped-call]
                if doc.page_count == 0:
                    raise MalformedDocumentError("PDF page buffer has no pages")
                pixmap = doc[0].get_pixmap(dpi=self._dpi)
                return pixmap.tobytes("png")
        except MalformedDocumentError:
            raise
        except Exception as exc:
            raise MalformedDocumentError(f"Cannot render PDF page: {exc}") from exc
