from app.config.settings import Settings
from app.database.repositories.documents_repository import DocumentsRepository
from app.database.repositories.job_repository import JobRepository
from app.database.repositories.template_rule_repository import TemplateRuleRepository
from app.extraction.factory import ExtractionClientFactory, build_aggregator
from app.logging.logger import Log
from app.pdf.factory import PdfExtractorFactory, build_rasterizer, build_splitter
from app.processor.pipeline import PipelineContext, PipelineStep
from app.processor.steps import (
    ApplyTemplateStep,
    ExtractPagesStep,
    LoadDocumentStep,
    MarkFailedStep,
    MarkProcessingStep,
    PersistExtractionStep,
    PersistProcessedStep,
    StoreProcessedStep,
)
from app.storage.router import StorageRouter, build_s3_client
from app.templates.engine import TemplateEngine
from app.templates.footer import FooterStamper


class Processor:
    """Runs the document pipeline step by step.

    Pipeline: mark processing -> load -> extract pages -> persist extraction
    -> apply template -> store processed -> persist processed.
    """

    def __init__(self, steps: list[PipelineStep], failed_step: PipelineStep) -> None:
        self._steps = steps
        self._failed_step = failed_step

    def process(self, document_id: int, job_id: int) -> PipelineContext:
        Log.info(f"Processing document {document_id} for job {job_id}")
        context = PipelineContext(document_id=document_id, job_id=job_id)
        try:
            for step in self._steps:
                context = step.run(context)
        except Exception as exc:
            context.error_message = str(exc)
            self._failed_step.run(context)
            raise
        return context


def build_processor(settings: Settings, job_repo: JobRepository) -> Processor:
    """Build a Processor with all adapters. Fails fast on missing configuration."""
    vision_client = ExtractionClientFactory.create(settings)
    storage = StorageRouter(build_s3_client(settings), settings.r2_bucket)
    doc_repo = DocumentsRepository()
    engine = TemplateEngine(
        FooterStamper(font_size=settings.footer_font_size, margin=settings.footer_margin)
    )
    steps: list[PipelineStep] = [
        MarkProcessingStep(job_repo),
        LoadDocumentStep(doc_repo=doc_repo, storage=storage),
        ExtractPagesStep(
            splitter=build_splitter(settings),
            rasterizer=build_rasterizer(settings),
            aggregator=build_aggregator(settings, vision_client),
        ),
        PersistExtractionStep(doc_repo=doc_repo),
        ApplyTemplateStep(
            template_repo=TemplateRuleRepository(),
            pdf_extractor=PdfExtractorFactory.create(settings),
            engine=engine,
        ),
        StoreProcessedStep(storage=storage),
        PersistProcessedStep(doc_repo=doc_repo),
    ]
    return Processor(steps=steps, failed_step=MarkFailedStep(job_repo))
