import time

from app.extraction.client_base import BaseVisionClient
from app.extraction.exceptions import (
    ConfigurationError,
    EmptyResponseError,
    ExtractionError,
    ExtractionTimeoutError,
    RateLimitError,
    SizeLimitError,
    UpstreamError,
)
from app.extraction.models import ErrorCause, PageExtraction
from app.extraction.parser import parse_structured_response
from app.extraction.prompt_loader import load_extraction_prompt
from app.logging.logger import Log
from app.pdf.models import PageImage

_CAUSES: dict[type[ExtractionError], ErrorCause] = {
    ConfigurationError: ErrorCause.CONFIGURATION,
    SizeLimitError: ErrorCause.SIZE_LIMIT,
    RateLimitError: ErrorCause.RATE_LIMIT,
    ExtractionTimeoutError: ErrorCause.TIMEOUT,
    UpstreamError: ErrorCause.UPSTREAM,
    EmptyResponseError: ErrorCause.EMPTY_RESPONSE,
}


def classify(exc: Exception) -> ErrorCause:
    """Map an exception raised during a page call to its error cause."""
    for exc_type, cause in _CAUSES.items():
        if isinstance(exc, exc_type):
            return cause
    return ErrorCause.UPSTREAM


class PageExtractor:
    """Runs one page through the recognition service and the response parser.

    ``extract`` never raises: every failure comes back as a PageExtraction
    with ``succeeded=False`` and an error cause.
    """

    def __init__(
        self,
        *,
        client: BaseVisionClient,
        model: str,
        max_tokens: int = 4096,
        image_detail: str = "high",
        max_payload_bytes: int = 15 * 1024 * 1024,
        prompt: str | None = None,
    ) -> None:
        self._client = client
        self._model = model
        self._max_tokens = max_tokens
        self._image_detail = image_detail
        self._max_payload_bytes = max_payload_bytes
        self._prompt = prompt if prompt is not None else load_extraction_prompt()

    def extract(self, page: PageImage) -> PageExtraction:
        if page.size_bytes > self._max_payload_bytes:
            Log.warning(
                f"Page {page.page_index}: payload {page.size_bytes} bytes exceeds "
                f"{self._max_payload_bytes}, not sent"
            )
            return PageExtraction.failure(page.page_index, ErrorCause.SIZE_LIMIT)

        Log.info(
            f"Page {page.page_index}: sending {page.size_bytes} bytes ({page.mime_type}) "
            f"to {self._model}"
        )
        started = time.monotonic()
        try:
            raw = self._client.create_vision_completion(
                model=self._model,
                prompt=self._prompt,
                image_data_url=page.data_url(),
                image_detail=self._image_detail,
                max_tokens=self._max_tokens,
            )
        except ExtractionError as exc:
            cause = classify(exc)
            Log.error(f"Page {page.page_index}: extraction failed ({cause.value}): {exc}")
            return PageExtraction.failure(page.page_index, cause)
        except Exception as exc:
            Log.exception(f"Page {page.page_index}: unexpected extraction error: {exc}")
            return PageExtraction.failure(page.page_index, ErrorCause.UPSTREAM)

        elapsed = time.monotonic() - started
        structured = parse_structured_response(raw)
        if structured.is_empty():
            Log.warning(
                f"Page {page.page_index}: response had no text in any section "
                f"({elapsed:.2f}s)"
            )
            return PageExtraction.failure(page.page_index, ErrorCause.EMPTY_SECTIONS)

        Log.info(
            f"Page {page.page_index}: extracted title={len(structured.title)} "
            f"main={len(structured.main_data)} contact={len(structured.contact_info)} "
            f"chars in {elapsed:.2f}s"
        )
        return PageExtraction.success(page.page_index, structured)
