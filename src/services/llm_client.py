"""LLM client wrapper for Anthropic text and structured outputs."""

import asyncio
from typing import TypeVar

from anthropic import Anthropic, APIError
from pydantic import BaseModel

from src.config import settings

T = TypeVar("T", bound=BaseModel)


class LLMClientError(Exception):
    """Raised when an LLM call fails."""

    pass


class LLMNotConfiguredError(LLMClientError):
    """Raised when the LLM is called without an API key configured."""

    pass


class LLMClient:
    """Anthropic client wrapper.

    Free-text generation goes through client.messages.create with an
    optional system instruction. Structured generation uses
    client.beta.messages.parse with Pydantic models. The SDK client is
    synchronous, so both calls run in a worker thread.
    """

    def __init__(self, client: Anthropic | None = None, model: str | None = None):
        """Initialize LLM client.

        Args:
            client: Optional Anthropic client for dependency injection.
                   If not provided, creates one from settings.
            model: Model name override (defaults to settings.anthropic_model)
        """
        self._model = model or settings.anthropic_model
        if client is not None:
            self._client = client
        elif settings.anthropic_api_key:
            self._client = Anthropic(api_key=settings.anthropic_api_key)
        else:
            # Missing key only fails at the first call
            self._client = None

    @property
    def is_configured(self) -> bool:
        """Whether an Anthropic client is available."""
        return self._client is not None

    def _require_client(self) -> Anthropic:
        if self._client is None:
            raise LLMNotConfiguredError(
                "Anthropic client not initialized. "
                "Set ANTHROPIC_API_KEY environment variable."
            )
        return self._client

    async def generate(
        self,
        prompt: str,
        system: str | None = None,
        temperature: float = 0.7,
        max_tokens: int = 1024,
    ) -> str:
        """Generate free text for a prompt.

        Args:
            prompt: The user prompt
            system: Optional system instruction
            temperature: Sampling temperature
            max_tokens: Maximum tokens in the reply

        Returns:
            Concatenated text blocks of the response (may be empty)

        Raises:
            LLMNotConfiguredError: If no API key is configured
            LLMClientError: If the call fails
        """
        client = self._require_client()

        kwargs = {
            "model": self._model,
            "max_tokens": max_tokens,
            "temperature": temperature,
            "messages": [{"role": "user", "content": prompt}],
        }
        if system:
            kwargs["system"] = system

        try:
            # Use asyncio.to_thread for non-blocking I/O
            response = await asyncio.to_thread(client.messages.create, **kwargs)
        except APIError as e:
            raise LLMClientError(f"Anthropic API error: {e}") from e
        except Exception as e:
            raise LLMClientError(f"Generation failed: {e}") from e

        return "".join(
            block.text
            for block in response.content
            if getattr(block, "type", None) == "text"
        )

    async def extract(
        self,
        prompt: str,
        response_model: type[T],
        max_tokens: int = 4096,
    ) -> T:
        """Extract structured data from text using LLM.

        Args:
            prompt: The user prompt containing text to extract from
            response_model: Pydantic model defining the output schema
            max_tokens: Maximum tokens in the reply

        Returns:
            Parsed response matching the response_model type

        Raises:
            LLMNotConfiguredError: If no API key is configured
            LLMClientError: If extraction fails
        """
        client = self._require_client()

        try:
            response = await asyncio.to_thread(
                client.beta.messages.parse,
                model=self._model,
                max_tokens=max_tokens,
                betas=["structured-outputs-2025-11-13"],
                messages=[{"role": "user", "content": prompt}],
                output_format=response_model,
            )
            return response.parsed_output
        except APIError as e:
            raise LLMClientError(f"Anthropic API error: {e}") from e
        except Exception as e:
            raise LLMClientError(f"Extraction failed: {e}") from e
