import httpx
import openai

from app.extraction.client_base import BaseVisionClient
from app.extraction.exceptions import (
    ConfigurationError,
    EmptyResponseError,
    ExtractionTimeoutError,
    RateLimitError,
    SizeLimitError,
    UpstreamError,
)


class OpenAIClientAdapter(BaseVisionClient):
    """Vision client built on the OpenAI-compatible chat completions API."""

    def __init__(
        self,
        *,
        api_key: str,
        timeout_seconds: int,
        base_url: str | None = None,
        max_retries: int = 0,
    ) -> None:
        if not api_key.strip():
            raise ConfigurationError("Recognition service API key is not set")
        self._client = openai.OpenAI(
            api_key=api_key,
            timeout=timeout_seconds,
            base_url=base_url,
            max_retries=max_retries,
        )

    def create_vision_completion(
        self,
        *,
        model: str,
        prompt: str,
        image_data_url: str,
        image_detail: str,
        max_tokens: int,
    ) -> str:
        try:
            response = self._client.chat.completions.create(
                model=model,
                max_tokens=max_tokens,
                messages=[
                    {
                        "role": "user",
                        "content": [
                            {"type": "text", "text": prompt},
                            {
                                "type": "image_url",
                                "image_url": {"url": image_data_url, "detail": image_detail},
                            },
                        ],
                    }
                ],
            )
        except (openai.APITimeoutError, httpx.TimeoutException) as exc:
            raise ExtractionTimeoutError(f"Recognition service timeout: {exc}") from exc
        except (openai.APIConnectionError, httpx.ConnectError) as exc:
            raise UpstreamError(f"Recognition service network error: {exc}") from exc
        except (openai.AuthenticationError, openai.PermissionDeniedError) as exc:
            raise ConfigurationError(
                f"Recognition service rejected credentials: {exc}"
            ) from exc
        except openai.RateLimitError as exc:
            raise RateLimitError(f"Recognition service rate limit exceeded: {exc}") from exc
        except openai.APIStatusError as exc:
            if exc.status_code == 413 or (
                exc.status_code == 400 and "too large" in str(exc).lower()
            ):
                raise SizeLimitError(f"Recognition service refused payload: {exc}") from exc
            raise UpstreamError(
                f"Recognition service API error ({exc.status_code}): {exc}"
            ) from exc
        except openai.APIError as exc:
            raise UpstreamError(f"Recognition service API error: {exc}") from exc

        if not response.choices:
            raise UpstreamError("Recognition service returned no choices")
        content = response.choices[0].message.content
        if content is None or not content.strip():
            raise EmptyResponseError("Recognition service returned empty response")
        return content
