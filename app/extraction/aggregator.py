from collections.abc import Sequence

from app.extraction.extractor import PageExtractor
from app.extraction.models import (
    AggregatedDocument,
    ErrorCause,
    PageError,
    PageExtraction,
    RunState,
)
from app.logging.logger import Log
from app.pdf.models import PageImage


class ExtractionRun:
    """Per-run state machine: RUNNING -> TRIPPED | COMPLETED.

    While no page has succeeded, the breaker trips on the first configuration
    failure or after ``failure_threshold`` consecutive failures. Once a page
    succeeds the breaker can no longer trip; later failures are only counted.
    """

    def __init__(self, failure_threshold: int) -> None:
        self.failure_threshold = failure_threshold
        self.state = RunState.RUNNING
        self.attempted = 0
        self.consecutive_failures = 0
        self.halt_cause: ErrorCause | None = None
        self.succeeded_pages: list[PageExtraction] = []
        self.errors: list[PageError] = []

    @property
    def succeeded(self) -> int:
        return len(self.succeeded_pages)

    def record(self, extraction: PageExtraction) -> None:
        if self.state is not RunState.RUNNING:
            raise RuntimeError(f"Cannot record a page on a {self.state.value} run")
        self.attempted += 1

        if extraction.succeeded:
            self.succeeded_pages.append(extraction)
            self.consecutive_failures = 0
            return

        cause = extraction.error or ErrorCause.UPSTREAM
        self.errors.append(PageError(page_index=extraction.page_index, cause=cause))
        self.consecutive_failures += 1

        if self.succeeded:
            return
        if cause is ErrorCause.CONFIGURATION or (
            self.consecutive_failures >= self.failure_threshold
        ):
            self._trip(cause)

    def finish(self) -> None:
        if self.state is RunState.RUNNING:
            self.state = RunState.COMPLETED

    def _trip(self, cause: ErrorCause) -> None:
        self.state = RunState.TRIPPED
        self.halt_cause = cause


class ResultAggregator:
    """Drives the sequential per-page loop and folds results into one document."""

    def __init__(
        self,
        extractor: PageExtractor,
        max_pages: int = 20,
        failure_threshold: int = 3,
    ) -> None:
        self._extractor = extractor
        self._max_pages = max_pages
        self._failure_threshold = failure_threshold

    def aggregate(self, pages: Sequence[PageImage]) -> AggregatedDocument:
        """Extract every page in order and fold the results. Never raises."""
        ordered = sorted(pages, key=lambda page: page.page_index)
        to_process = ordered[: self._max_pages]
        skipped = len(ordered) - len(to_process)
        if skipped:
            Log.warning(
                f"Too many pages ({len(ordered)}), processing only first {self._max_pages}"
            )

        run = ExtractionRun(self._failure_threshold)
        for page in to_process:
            run.record(self._extract(page))
            if run.state is RunState.TRIPPED:
                Log.error(
                    f"Stopping after page {page.page_index}: "
                    f"{run.consecutive_failures} consecutive failure(s), "
                    f"last cause {run.halt_cause.value if run.halt_cause else 'unknown'}, "
                    f"{run.attempted}/{len(to_process)} attempted"
                )
                break
        run.finish()

        document = self._fold(run, skipped)
        Log.info(
            f"Extraction {run.state.value}: {document.pages_succeeded} succeeded, "
            f"{document.pages_failed} failed, {document.pages_skipped} skipped"
        )
        if document.pages_succeeded == 0 and document.pages_attempted:
            Log.warning(
                "No pages were extracted; check credentials, quota and connectivity"
            )
        return document

    def _extract(self, page: PageImage) -> PageExtraction:
        try:
            return self._extractor.extract(page)
        except Exception as exc:
            Log.exception(f"Page {page.page_index}: extractor raised: {exc}")
            return PageExtraction.failure(page.page_index, ErrorCause.UPSTREAM)

    @staticmethod
    def _fold(run: ExtractionRun, skipped: int) -> AggregatedDocument:
        succeeded = run.succeeded_pages
        title = succeeded[0].title if succeeded else ""
        main_data = "\n\n".join(page.main_data for page in succeeded if page.main_data)
        contact_info = " | ".join(page.contact_info for page in succeeded if page.contact_info)
        return AggregatedDocument(
            title=title,
            main_data=main_data,
            contact_info=contact_info,
            pages_attempted=run.attempted,
            pages_succeeded=run.succeeded,
            pages_skipped=skipped,
            state=run.state,
            halt_cause=run.halt_cause,
            errors=list(run.errors),
        )
