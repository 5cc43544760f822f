from datetime import datetime

import pymupdf

from app.pdf.exceptions import MalformedDocumentError

MAX_CONTACT_LENGTH = 30


def build_footer_line(
    timestamp: datetime,
    user_identifier: str | None,
    contact_info: str = "",
) -> str:
    """Compose the processing footer; contact info is cut to 30 characters."""
    processed_at = timestamp.isoformat(timespec="seconds")
    line = f"Documento procesado el {processed_at} por {user_identifier or 'unknown'}"
    if contact_info:
        line += f" {contact_info[:MAX_CONTACT_LENGTH]}"
    return line


class FooterStamper:
    """Draws one right-aligned line of small grey text near the bottom of every page."""

    FONT_NAME = "helv"
    COLOR = (0.5, 0.5, 0.5)

    def __init__(
        self,
        font_size: float = 8,
        margin: float = 50,
        baseline: float = 30,
    ) -> None:
        self._font_size = font_size
        self._margin = margin
        self._baseline = baseline

    def stamp(self, pdf_bytes: bytes, line: str) -> bytes:
        """Return a copy of the PDF with ``line`` on each page. Page count is unchanged.

        Raises:
            MalformedDocumentError: if the buffer is not a readable PDF.
        """
        try:
            doc = pymupdf.open(stream=pdf_bytes, filetype="pdf")  # type: ignore[no-untyped-call]
        except Exception as exc:
            raise MalformedDocumentError(f"Cannot parse PDF for footer: {exc}") from exc

        text_width = pymupdf.get_text_length(
            line, fontname=self.FONT_NAME, fontsize=self._font_size
        )
        with doc:
            for page in doc:
                rect = page.rect
                # PyMuPDF measures y from the top edge.
                point = pymupdf.Point(
                    rect.width - text_width - self._margin,
                    rect.height - self._baseline,
                )
                page.insert_text(
                    point,
                    line,
                    fontname=self.FONT_NAME,
                    fontsize=self._font_size,
                    color=self.COLOR,
                )
            return doc.tobytes()
