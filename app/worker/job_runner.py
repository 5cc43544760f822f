from app.config.settings import Settings
from app.database.models import JobRecord
from app.database.repositories.job_repository import JobRepository
from app.extraction.exceptions import ConfigurationError
from app.logging.logger import Log
from app.pdf.exceptions import MalformedDocumentError
from app.processor.exceptions import DocumentNotFoundError, UnsupportedMimeTypeError
from app.processor.processor import Processor
from app.templates.exceptions import TemplateError

# Retrying cannot fix these: the input or configuration has to change first.
PERMANENT_ERRORS: tuple[type[Exception], ...] = (
    ConfigurationError,
    DocumentNotFoundError,
    MalformedDocumentError,
    TemplateError,
    UnsupportedMimeTypeError,
)


class JobRunner:
    """Run one job, catch exceptions, and apply retry logic."""

    def __init__(
        self,
        processor: Processor,
        job_repo: JobRepository,
        settings: Settings,
    ) -> None:
        self._processor = processor
        self._job_repo = job_repo
        self._settings = settings

    def run(self, job: JobRecord) -> None:
        Log.info(f"Running job {job.id} (attempt {job.attempts + 1})")
        try:
            context = self._processor.process(job.document_id, job.id)
        except Exception as exc:
            self._handle_failure(job, exc)
            return

        self._job_repo.mark_done(job.id)
        aggregated = context.aggregated
        if aggregated is not None and aggregated.pages_succeeded == 0:
            Log.warning(f"Job {job.id} completed but extraction yielded nothing")
        Log.info(f"Job {job.id} completed, stored {context.processed_key}")

    def _handle_failure(self, job: JobRecord, exc: Exception) -> None:
        """Fail permanently on non-retryable errors or at max attempts, else requeue."""
        Log.error(f"Job {job.id} failed: {exc}")
        if isinstance(exc, PERMANENT_ERRORS):
            self._job_repo.mark_failed(job.id, str(exc))
            Log.error(f"Job {job.id} permanently failed: {type(exc).__name__}")
        elif job.attempts + 1 >= self._settings.max_job_attempts:
            self._job_repo.mark_failed(job.id, str(exc))
            Log.error(f"Job {job.id} permanently failed after {job.attempts + 1} attempts")
        else:
            self._job_repo.schedule_retry(job.id, str(exc))
            Log.warning(f"Job {job.id} will be retried (attempt {job.attempts + 2})")
