import pymupdf
import pytest

from app.pdf.base import BasePdfExtractor
from app.pdf.convert import image_to_pdf
from app.pdf.exceptions import MalformedDocumentError, PdfExtractionError
from app.pdf.pdfplumber_adapter import PdfPlumberAdapter
from app.pdf.pymupdf_adapter import PyMuPdfAdapter

ADAPTERS = [PdfPlumberAdapter, PyMuPdfAdapter]


@pytest.mark.parametrize("adapter_cls", ADAPTERS)
class TestFlatTextAdapters:
    def test_extract_returns_text(
        self, adapter_cls: type[BasePdfExtractor], sample_pdf_bytes: bytes
    ) -> None:
        result = adapter_cls().extract(sample_pdf_bytes)
        assert "INV-2041" in result

    def test_extract_multi_page(
        self, adapter_cls: type[BasePdfExtractor], multi_page_pdf_bytes: bytes
    ) -> None:
        result = adapter_cls().extract(multi_page_pdf_bytes)
        assert "Page one content" in result
        assert "Page two content" in result

    def test_blank_pdf_returns_empty_string(
        self, adapter_cls: type[BasePdfExtractor], empty_pdf_bytes: bytes
    ) -> None:
        assert adapter_cls().extract(empty_pdf_bytes) == ""

    def test_raises_on_invalid_bytes(self, adapter_cls: type[BasePdfExtractor]) -> None:
        with pytest.raises(PdfExtractionError):
            adapter_cls().extract(b"not a pdf")

    def test_result_is_stripped(
        self, adapter_cls: type[BasePdfExtractor], sample_pdf_bytes: bytes
    ) -> None:
        result = adapter_cls().extract(sample_pdf_bytes)
        assert result == result.strip()


class TestImageToPdf:
    def test_wraps_png_in_one_page_pdf(self) -> None:
        pix = pymupdf.Pixmap(pymupdf.csRGB, pymupdf.IRect(0, 0, 20, 10), False)
        pix.clear_with(255)

        pdf_bytes = image_to_pdf(pix.tobytes("png"), "image/png")

        with pymupdf.open(stream=pdf_bytes, filetype="pdf") as doc:
            assert doc.page_count == 1

    def test_rejects_unreadable_image(self) -> None:
        with pytest.raises(MalformedDocumentError):
            image_to_pdf(b"not an image", "image/png")
