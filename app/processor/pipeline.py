from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from app.extraction.models import AggregatedDocument
from app.pdf.models import PageImage
from app.processor.models import Document
from app.templates.models import TemplateResult, TemplateRule


@dataclass(slots=True)
class PipelineContext:
    document_id: int
    job_id: int
    document: Document | None = None
    original_bytes: bytes = b""
    pdf_bytes: bytes = b""
    total_pages: int = 0
    page_images: list[PageImage] = field(default_factory=list)
    oversized_pages: list[int] = field(default_factory=list)
    aggregated: AggregatedDocument | None = None
    template_rule: TemplateRule | None = None
    template_result: TemplateResult | None = None
    processed_key: str = ""
    mirror_keys: list[str] = field(default_factory=list)
    error_message: str = ""


class PipelineStep(ABC):
    @abstractmethod
    def run(self, context: PipelineContext) -> PipelineContext:
        raise NotImplementedError
