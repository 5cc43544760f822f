import io
from collections.abc import Callable
from typing import Any

import pytest
from botocore.exceptions import ClientError
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas


def _build_pdf(page_texts: list[str]) -> bytes:
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    for text in page_texts:
        if text:
            c.drawString(72, 720, text)
        c.showPage()
    c.save()
    return buf.getvalue()


@pytest.fixture()
def sample_pdf_bytes() -> bytes:
    """A single-page PDF with known text content."""
    return _build_pdf(["Invoice No: INV-2041 Total: 1500.00"])


@pytest.fixture()
def multi_page_pdf_bytes() -> bytes:
    """A two-page PDF with known text on each page."""
    return _build_pdf(["Page one content", "Page two content"])


@pytest.fixture()
def empty_pdf_bytes() -> bytes:
    """A valid PDF with one blank page."""
    return _build_pdf([""])


@pytest.fixture()
def make_pdf() -> Callable[[int], bytes]:
    """Factory for PDFs with ``n`` pages labelled 'Page 1'..'Page n'."""

    def factory(page_count: int) -> bytes:
        return _build_pdf([f"Page {i + 1}" for i in range(page_count)])

    return factory


class FakeS3:
    """In-memory stand-in for the boto3 S3 client calls StorageRouter makes."""

    def __init__(self) -> None:
        self.objects: dict[tuple[str, str], bytes] = {}
        self.content_types: dict[str, str] = {}

    def put_object(self, *, Bucket: str, Key: str, Body: bytes, ContentType: str) -> None:
        self.objects[(Bucket, Key)] = Body
        self.content_types[Key] = ContentType

    def get_object(self, *, Bucket: str, Key: str) -> dict[str, Any]:
        if (Bucket, Key) not in self.objects:
            raise ClientError(
                {"Error": {"Code": "NoSuchKey", "Message": "Not found"}}, "GetObject"
            )
        return {"Body": io.BytesIO(self.objects[(Bucket, Key)])}

    def delete_object(self, *, Bucket: str, Key: str) -> None:
        self.objects.pop((Bucket, Key), None)


@pytest.fixture()
def fake_s3() -> FakeS3:
    return FakeS3()
