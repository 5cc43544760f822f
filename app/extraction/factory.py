from typing import ClassVar

from app.config.settings import Settings
from app.extraction.aggregator import ResultAggregator
from app.extraction.client_base import BaseVisionClient
from app.extraction.example_client_adapter import ExampleClientAdapter
from app.extraction.exceptions import ConfigurationError
from app.extraction.extractor import PageExtractor
from app.extraction.openai_client_adapter import OpenAIClientAdapter


class ExtractionClientFactory:
    """Creates the configured vision client once, at process start."""

    PROVIDERS: ClassVar[tuple[str, ...]] = ("openai", "openai_compatible", "example")

    @classmethod
    def create(cls, settings: Settings) -> BaseVisionClient:
        """Build the vision client, validating configuration eagerly.

        Raises:
            ConfigurationError: unknown provider, missing API key, or a
                compatible provider without a base URL.
        """
        provider = settings.extraction_provider.lower()
        if provider == "example":
            return ExampleClientAdapter()
        if provider not in cls.PROVIDERS:
            raise ConfigurationError(
                f"Unknown extraction provider '{provider}'. Choose from: {list(cls.PROVIDERS)}"
            )
        if not settings.extraction_openai_api_key.strip():
            raise ConfigurationError(
                "extraction_openai_api_key is required for "
                f"extraction_provider={provider}"
            )
        base_url = (settings.extraction_openai_base_url or "").strip() or None
        if provider == "openai_compatible" and base_url is None:
            raise ConfigurationError(
                "extraction_openai_base_url is required for "
                "extraction_provider=openai_compatible"
            )
        return OpenAIClientAdapter(
            api_key=settings.extraction_openai_api_key,
            timeout_seconds=settings.extraction_timeout_seconds,
            base_url=base_url,
            max_retries=settings.extraction_max_retries,
        )


def build_aggregator(settings: Settings, client: BaseVisionClient) -> ResultAggregator:
    """Wire a ResultAggregator around an already-validated client."""
    extractor = PageExtractor(
        client=client,
        model=settings.extraction_openai_model_name,
        max_tokens=settings.extraction_max_tokens,
        image_detail=settings.extraction_image_detail,
        max_payload_bytes=settings.max_page_bytes,
    )
    return ResultAggregator(
        extractor,
        max_pages=settings.max_extraction_pages,
        failure_threshold=settings.circuit_breaker_threshold,
    )
