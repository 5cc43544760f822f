from collections.abc import Callable

from app.database.repositories.documents_repository import DocumentsRepository
from app.database.repositories.job_repository import JobRepository
from app.database.repositories.template_rule_repository import TemplateRuleRepository
from app.extraction.aggregator import ResultAggregator
from app.extraction.exceptions import ConfigurationError
from app.extraction.models import ErrorCause
from app.logging.logger import Log
from app.pdf.base import BasePdfExtractor
from app.pdf.convert import image_to_pdf
from app.pdf.exceptions import PayloadTooLargeError, PdfExtractionError
from app.pdf.models import PageImage
from app.pdf.rasterizer import IMAGE_MIME_TYPES, PDF_MIME_TYPE, PageRasterizer
from app.pdf.splitter import PageSplitter
from app.processor.exceptions import UnsupportedMimeTypeError
from app.processor.models import Document
from app.processor.pipeline import PipelineContext, PipelineStep
from app.storage import keys
from app.storage.exceptions import StorageError
from app.storage.router import StorageRouter
from app.templates.engine import TemplateEngine
from app.templates.models import TemplateResult


def _require_document(context: PipelineContext) -> Document:
    if context.document is None:
        raise ValueError("PipelineContext.document must be set by LoadDocumentStep")
    return context.document


class MarkProcessingStep(PipelineStep):
    def __init__(self, job_repo: JobRepository) -> None:
        self._job_repo = job_repo

    def run(self, context: PipelineContext) -> PipelineContext:
        self._job_repo.mark_processing(context.job_id)
        Log.info(f"Job {context.job_id} marked as processing")
        return context


class MarkFailedStep(PipelineStep):
    def __init__(self, job_repo: JobRepository) -> None:
        self._job_repo = job_repo

    def run(self, context: PipelineContext) -> PipelineContext:
        self._job_repo.mark_failed(context.job_id, context.error_message)
        Log.error(f"Job {context.job_id} marked as failed: {context.error_message}")
        return context


class LoadDocumentStep(PipelineStep):
    def __init__(self, doc_repo: DocumentsRepository, storage: StorageRouter) -> None:
        self._doc_repo = doc_repo
        self._storage = storage

    def run(self, context: PipelineContext) -> PipelineContext:
        document = self._doc_repo.find_by_id(context.document_id)
        mime_type = document.mime_type.lower()
        if mime_type != PDF_MIME_TYPE and mime_type not in IMAGE_MIME_TYPES:
            raise UnsupportedMimeTypeError(f"MIME type '{document.mime_type}' is not supported")

        context.document = document
        context.original_bytes = self._storage.read_original(document.original_key)
        context.pdf_bytes = (
            context.original_bytes
            if document.is_pdf
            else image_to_pdf(context.original_bytes, mime_type)
        )
        Log.info(
            f"Loaded {len(context.original_bytes)} bytes ({mime_type}) "
            f"for document {context.document_id}"
        )
        return context


class ExtractPagesStep(PipelineStep):
    """Split, rasterize and run every page through the aggregator."""

    def __init__(
        self,
        splitter: PageSplitter,
        rasterizer: PageRasterizer,
        aggregator: ResultAggregator,
    ) -> None:
        self._splitter = splitter
        self._rasterizer = rasterizer
        self._aggregator = aggregator

    def run(self, context: PipelineContext) -> PipelineContext:
        document = _require_document(context)
        if document.is_pdf:
            split = self._splitter.split(context.original_bytes)
            context.total_pages = split.total_pages
            buffers = [(index, page, PDF_MIME_TYPE) for index, page in enumerate(split.pages)]
        else:
            context.total_pages = 1
            buffers = [(0, context.original_bytes, document.mime_type)]

        context.page_images = self._rasterize_all(context, buffers)
        aggregated = self._aggregator.aggregate(context.page_images)
        context.aggregated = aggregated
        # Page payloads are only needed for the recognition calls.
        context.page_images = []

        if aggregated.halt_cause is ErrorCause.CONFIGURATION:
            raise ConfigurationError(
                "Recognition service rejected the configured credentials"
            )
        return context

    def _rasterize_all(
        self,
        context: PipelineContext,
        buffers: list[tuple[int, bytes, str]],
    ) -> list[PageImage]:
        images: list[PageImage] = []
        for index, buffer, mime_type in buffers:
            try:
                images.append(self._rasterizer.rasterize(buffer, mime_type, page_index=index))
            except PayloadTooLargeError as exc:
                context.oversized_pages.append(index)
                Log.warning(f"Document {context.document_id}: skipping page: {exc}")
        return images


class PersistExtractionStep(PipelineStep):
    def __init__(self, doc_repo: DocumentsRepository) -> None:
        self._doc_repo = doc_repo

    def run(self, context: PipelineContext) -> PipelineContext:
        if context.aggregated is None:
            raise ValueError("PipelineContext.aggregated must be set before persist")
        self._doc_repo.update_extraction_result(context.document_id, context.aggregated)
        return context


class ApplyTemplateStep(PipelineStep):
    """Run the document's template rule set, if it names one."""

    def __init__(
        self,
        template_repo: TemplateRuleRepository,
        pdf_extractor: BasePdfExtractor,
        engine: TemplateEngine,
    ) -> None:
        self._template_repo = template_repo
        self._pdf_extractor = pdf_extractor
        self._engine = engine

    def run(self, context: PipelineContext) -> PipelineContext:
        document = _require_document(context)
        if document.template_id is None:
            context.template_result = TemplateResult(pdf_bytes=context.pdf_bytes)
            return context

        rule = self._template_repo.get(document.template_id)
        context.template_rule = rule
        context.template_result = self._engine.process(
            context.pdf_bytes,
            self._flat_text(context),
            rule,
            context.aggregated,
            document.user_email,
        )
        return context

    def _flat_text(self, context: PipelineContext) -> str:
        text = ""
        if _require_document(context).is_pdf:
            try:
                text = self._pdf_extractor.extract(context.pdf_bytes)
            except PdfExtractionError as exc:
                Log.warning(f"Document {context.document_id}: flat text unavailable: {exc}")
        if not text and context.aggregated is not None:
            # Scanned documents have no text layer; use the recognized text instead.
            text = context.aggregated.flat_text()
        return text


class StoreProcessedStep(PipelineStep):
    def __init__(self, storage: StorageRouter) -> None:
        self._storage = storage

    def run(self, context: PipelineContext) -> PipelineContext:
        document = _require_document(context)
        if context.template_result is None:
            raise ValueError("PipelineContext.template_result must be set before storing")

        context.processed_key = self._storage.write_processed(
            context.template_result.pdf_bytes,
            keys.user_scope(document.user_email),
        )
        if document.send_copy:
            self._mirror(context, lambda: self._storage.copy_to_sent(context.processed_key))
        if document.company_name:
            company = document.company_name
            self._mirror(
                context,
                lambda: self._storage.copy_to_company(context.processed_key, company),
            )
        return context

    @staticmethod
    def _mirror(context: PipelineContext, copy: Callable[[], str]) -> None:
        try:
            context.mirror_keys.append(copy())
        except StorageError as exc:
            Log.warning(f"Document {context.document_id}: mirror copy failed: {exc}")


class PersistProcessedStep(PipelineStep):
    def __init__(self, doc_repo: DocumentsRepository) -> None:
        self._doc_repo = doc_repo

    def run(self, context: PipelineContext) -> PipelineContext:
        if context.template_result is None or not context.processed_key:
            raise ValueError("Processed artifact must be stored before persist")
        self._doc_repo.update_processed_result(
            context.document_id,
            processed_key=context.processed_key,
            extracted_fields=context.template_result.extracted_fields,
        )
        return context
