from typing import ClassVar

from app.config.settings import Settings
from app.pdf.base import BasePdfExtractor
from app.pdf.pdfplumber_adapter import PdfPlumberAdapter
from app.pdf.pymupdf_adapter import PyMuPdfAdapter
from app.pdf.rasterizer import PageRasterizer
from app.pdf.splitter import PageSplitter


class PdfExtractorFactory:
    """Creates the flat-text extractor used by template field rules."""

    ADAPTERS: ClassVar[dict[str, type[BasePdfExtractor]]] = {
        "pdfplumber": PdfPlumberAdapter,
        "pymupdf": PyMuPdfAdapter,
    }

    @classmethod
    def create(cls, settings: Settings) -> BasePdfExtractor:
        engine = settings.pdf_engine.lower()
        adapter_cls = cls.ADAPTERS.get(engine)
        if adapter_cls is None:
            raise ValueError(
                f"Unknown PDF engine '{engine}'. Choose from: {list(cls.ADAPTERS)}"
            )
        return adapter_cls()


def build_splitter(settings: Settings) -> PageSplitter:
    return PageSplitter(max_pages=settings.max_split_pages)


def build_rasterizer(settings: Settings) -> PageRasterizer:
    return PageRasterizer(max_bytes=settings.max_page_bytes, dpi=settings.rasterize_dpi)
