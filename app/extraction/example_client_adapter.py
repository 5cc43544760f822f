"""Offline vision client adapter.

Implements BaseVisionClient without network access, for local development
and as a template for new provider adapters registered in
ExtractionClientFactory.
"""

from app.extraction.client_base import BaseVisionClient


class ExampleClientAdapter(BaseVisionClient):
    """Returns a fixed, protocol-conforming response for every page."""

    DEFAULT_RESPONSE = (
        "===TITLE===\n"
        "Example Document\n"
        "===MAIN_DATA===\n"
        "Example body text.\n"
        "===CONTACT_INFO===\n"
        "example@example.com"
    )

    def __init__(self, response: str = DEFAULT_RESPONSE) -> None:
        self._response = response

    def create_vision_completion(
        self,
        *,
        model: str,
        prompt: str,
        image_data_url: str,
        image_detail: str,
        max_tokens: int,
    ) -> str:
        _ = model, prompt, image_data_url, image_detail, max_tokens
        return self._response
