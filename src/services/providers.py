"""Generation providers backed by the Hugging Face inference API."""

import base64
import logging
from typing import Protocol

import httpx

from src.config import Settings, get_settings
from src.services.exceptions import ProviderError

logger = logging.getLogger(__name__)


class GenerationProvider(Protocol):
    """Anything that turns a prompt into a generated payload."""

    async def generate(self, prompt: str) -> str: ...


class _HuggingFaceProvider:
    """Shared HTTP plumbing for Hugging Face inference calls."""

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()
        self.base_url = self.settings.hf_inference_url.rstrip("/")
        self.timeout = self.settings.provider_timeout_seconds

    @property
    def headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.settings.hf_api_key:
            headers["Authorization"] = f"Bearer {self.settings.hf_api_key}"
        return headers

    async def _post(self, url: str, payload: dict) -> httpx.Response:
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(url, json=payload, headers=self.headers)
        except httpx.HTTPError as e:
            logger.error(f"HTTP error calling Hugging Face: {e}")
            raise ProviderError("Error contacting generation provider", str(e)) from e

        if not response.is_success:
            logger.error(f"Hugging Face responded with {response.status_code}: {response.text}")
            raise ProviderError(
                "Generation provider request failed",
                f"Hugging Face API responded with {response.status_code}: {response.text}",
            )
        return response


class TextProvider(_HuggingFaceProvider):
    """Chat-completion text generation."""

    def __init__(self, settings: Settings | None = None) -> None:
        super().__init__(settings)
        self.model = self.settings.text_model
        self.max_tokens = self.settings.text_max_tokens

    async def generate(self, prompt: str) -> str:
        """Generate a text completion for a single user message."""
        response = await self._post(
            f"{self.base_url}/{self.model}/v1/chat/completions",
            {
                "model": self.model,
                "messages": [{"role": "user", "content": prompt}],
                "max_tokens": self.max_tokens,
            },
        )
        try:
            content = response.json()["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise ProviderError("Failed to generate text", "Malformed provider response") from e
        if not isinstance(content, str):
            raise ProviderError("Failed to generate text", "Malformed provider response")
        return content


class ImageProvider(_HuggingFaceProvider):
    """Text-to-image generation returning a base64 data URI."""

    def __init__(self, settings: Settings | None = None) -> None:
        super().__init__(settings)
        self.model = self.settings.image_model

    async def generate(self, prompt: str) -> str:
        """Generate an image and encode it as ``data:<mime>;base64,...``."""
        response = await self._post(f"{self.base_url}/{self.model}", {"inputs": prompt})

        content_type = response.headers.get("content-type", "").split(";")[0].strip()
        if content_type and not content_type.startswith("image/"):
            raise ProviderError(
                "Failed to generate image", f"Unexpected content type: {content_type}"
            )
        if not response.content:
            raise ProviderError("Failed to generate image", "Empty provider response")

        encoded = base64.b64encode(response.content).decode("ascii")
        return f"data:{content_type or 'image/png'};base64,{encoded}"
