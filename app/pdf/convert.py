import pymupdf

from app.pdf.exceptions import MalformedDocumentError


def image_to_pdf(image_bytes: bytes, mime_type: str) -> bytes:
    """Wrap an image upload in a one-page PDF so it can be stamped and stored."""
    filetype = mime_type.rsplit("/", 1)[-1]
    try:
        with pymupdf.open(stream=image_bytes, filetype=filetype) as image_doc:  # type: ignore[no-untyped-call]
            return image_doc.convert_to_pdf()
    except Exception as exc:
        raise MalformedDocumentError(f"Cannot convert {mime_type} upload to PDF: {exc}") from exc
