from abc import ABC, abstractmethod


class BaseVisionClient(ABC):
    """Contract for provider-specific vision recognition clients."""

    @abstractmethod
    def create_vision_completion(
        self,
        *,
        model: str,
        prompt: str,
        image_data_url: str,
        image_detail: str,
        max_tokens: int,
    ) -> str:
        """Send one instruction plus one inlined image and return the reply text.

        Raises:
            ExtractionError: a classified subclass on any failure.
        """
