"""Text-generation collaborator: prompt in, text out."""

from abc import ABC, abstractmethod
from typing import Optional

import httpx

from ..exceptions import TextGenerationError
from ..utils.logger import get_app_logger


class TextGenerator(ABC):
    """Text-generation interface consumed by the classifier and response generator."""

    @abstractmethod
    async def complete(self, prompt: str) -> str:
        """
        Generate text for a prompt.

        Args:
            prompt: Full prompt text

        Returns:
            Generated text (may be empty)

        Raises:
            TextGenerationError: If the call fails or times out
        """
        pass

    async def close(self) -> None:
        """Release client resources."""
        return None


class OpenAICompatibleGenerator(TextGenerator):
    """Chat-completions client for any OpenAI-compatible endpoint."""

    def __init__(
        self,
        api_base: str,
        api_key: str,
        model: str = "gpt-4",
        max_tokens: int = 2000,
        temperature: float = 0.7,
        timeout: float = 30.0,
        client: Optional[httpx.AsyncClient] = None
    ):
        """
        Initialize the generator.

        Args:
            api_base: Base URL, e.g. https://api.openai.com/v1
            api_key: Bearer token
            model: Model name
            max_tokens: Maximum tokens per completion
            temperature: Sampling temperature
            timeout: Request timeout in seconds; a timeout counts as a failure
            client: Optional preconfigured httpx client (tests)
        """
        self.api_base = api_base.rstrip("/")
        self.model = model
        self.max_tokens = max_tokens
        self.temperature = temperature
        self.logger = get_app_logger()
        self._client = client or httpx.AsyncClient(
            timeout=timeout,
            headers={"Authorization": f"Bearer {api_key}"}
        )

    async def complete(self, prompt: str) -> str:
        payload = {
            "model": self.model,
            "messages": [{"role": "user", "content": prompt}],
            "max_tokens": self.max_tokens,
            "temperature": self.temperature,
        }

        try:
            response = await self._client.post(f"{self.api_base}/chat/completions", json=payload)
            response.raise_for_status()
            data = response.json()
        except httpx.TimeoutException as e:
            raise TextGenerationError(f"Text generation timed out: {e}", model=self.model, is_timeout=True) from e
        except httpx.HTTPStatusError as e:
            raise TextGenerationError(
                f"Text generation returned HTTP {e.response.status_code}", model=self.model
            ) from e
        except (httpx.HTTPError, ValueError) as e:
            raise TextGenerationError(f"Text generation request failed: {e}", model=self.model) from e

        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise TextGenerationError("Malformed text generation response", model=self.model) from e

        self.logger.debug(f"Text generation completed with model {self.model}")
        return content or ""

    async def close(self) -> None:
        await self._client.aclose()


def create_text_generator(settings) -> Optional[TextGenerator]:
    """
    Build the text-generation client from settings.

    Returns:
        A TextGenerator, or None when generation is disabled or no API key is set
    """
    if not settings.generation_configured():
        return None

    return OpenAICompatibleGenerator(
        api_base=settings.generation_api_base,
        api_key=settings.generation_api_key,
        model=settings.generation_model,
        max_tokens=settings.generation_max_tokens,
        temperature=settings.generation_temperature,
        timeout=settings.generation_timeout
    )
