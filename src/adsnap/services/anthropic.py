"""Anthropic Claude API client wrapper."""

import logging
from typing import Optional

from anthropic import Anthropic, APIError, APIConnectionError, APITimeoutError

from ..config import config
from ..errors import UpstreamError, UpstreamTimeout

logger = logging.getLogger(__name__)


class AnthropicClient:
    """Client wrapper for Anthropic Claude API.

    Requests are never retried: the SDK's own retry loop is disabled and a
    failed call surfaces as an UpstreamError.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> None:
        """Initialize the Anthropic client.

        Args:
            api_key: Anthropic API key. Defaults to ANTHROPIC_API_KEY env var.
            model: Model to use. Defaults to config.default_model.
            timeout: Transport timeout in seconds. Defaults to
                config.storyboard_timeout.
        """
        self._api_key = api_key or config.anthropic_api_key
        if not self._api_key:
            raise ValueError(
                "Anthropic API key not provided. Set ANTHROPIC_API_KEY env var."
            )

        self._timeout = timeout or config.storyboard_timeout
        self._client = Anthropic(
            api_key=self._api_key,
            timeout=self._timeout,
            max_retries=0,
        )
        self._model = model or config.default_model

    @property
    def model(self) -> str:
        """Return the model being used."""
        return self._model

    def create_message(
        self,
        prompt: str,
        max_tokens: int = 4096,
        system: Optional[str] = None,
        temperature: float = 0.7,
    ) -> str:
        """Create a message using Claude.

        Args:
            prompt: The user prompt to send.
            max_tokens: Maximum tokens in the response.
            system: Optional system prompt.
            temperature: Sampling temperature (0.0-1.0).

        Returns:
            The text content of Claude's response.

        Raises:
            UpstreamTimeout: If the request timed out.
            UpstreamError: If the API request failed.
        """
        messages = [{"role": "user", "content": prompt}]
        kwargs = {
            "model": self._model,
            "max_tokens": max_tokens,
            "messages": messages,
            "temperature": temperature,
        }
        if system:
            kwargs["system"] = system

        try:
            logger.debug(f"Sending request to Claude ({self._model})")
            response = self._client.messages.create(**kwargs)

        except APITimeoutError as e:
            logger.error(f"Claude request timed out: {e}")
            raise UpstreamTimeout(
                f"Storyboard generation timed out after {self._timeout:g} seconds."
            ) from e

        except APIConnectionError as e:
            logger.error(f"Connection error: {e}")
            raise UpstreamError(f"Could not reach the text generation service: {e}") from e

        except APIError as e:
            logger.error(f"API error: {e}")
            raise UpstreamError(f"Text generation failed: {e}") from e

        # Extract text content from response
        text_parts = [block.text for block in response.content if hasattr(block, "text")]
        if not text_parts:
            raise UpstreamError("Text generation returned no text content")
        return "".join(text_parts)
