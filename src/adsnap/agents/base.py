"""Base agent abstraction."""

import logging
from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FutureTimeout
from typing import Generic, TypeVar, Optional

from ..config import config
from ..errors import UpstreamTimeout
from ..services.anthropic import AnthropicClient

logger = logging.getLogger(__name__)

InputT = TypeVar("InputT")
OutputT = TypeVar("OutputT")


class BaseAgent(ABC, Generic[InputT, OutputT]):
    """Abstract base class for text generation agents.

    Every generation call runs under a single deadline. A call that misses
    it is abandoned on its worker thread and surfaces as UpstreamTimeout;
    it is never retried.
    """

    def __init__(
        self,
        client: Optional[AnthropicClient] = None,
        timeout: Optional[float] = None,
    ) -> None:
        """Initialize the agent.

        Args:
            client: AnthropicClient instance. Created from config if not provided.
            timeout: Deadline for one generation call in seconds. Defaults
                to config.storyboard_timeout.
        """
        self._client = client or AnthropicClient()
        self._timeout = timeout or config.storyboard_timeout
        self._logger = logging.getLogger(f"{__name__}.{self.name}")

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the agent's name."""
        ...

    @property
    @abstractmethod
    def system_prompt(self) -> str:
        """Return the system prompt for this agent."""
        ...

    @property
    def model(self) -> str:
        return self._client.model

    @property
    def timeout(self) -> float:
        return self._timeout

    @abstractmethod
    def run(self, input_data: InputT) -> OutputT:
        """Execute the agent's main task."""
        ...

    def _create_message(self, prompt: str, max_tokens: int = 4096) -> str:
        """Send a prompt with the agent's system prompt, within the deadline.

        Args:
            prompt: The user prompt to send.
            max_tokens: Maximum tokens in the response.

        Returns:
            The text of the response.

        Raises:
            UpstreamTimeout: If the call does not finish in time.
            UpstreamError: If the text generation service fails.
        """
        self._logger.debug(f"Creating message with prompt length: {len(prompt)}")

        executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix=self.name)
        try:
            future = executor.submit(
                self._client.create_message,
                prompt=prompt,
                max_tokens=max_tokens,
                system=self.system_prompt,
            )
            response = future.result(timeout=self._timeout)
        except FutureTimeout:
            self._logger.error(f"No response within {self._timeout:g}s")
            raise UpstreamTimeout(
                f"Storyboard generation timed out after {self._timeout:g} seconds."
            )
        except Exception as e:
            self._logger.error(f"Error creating message: {e}")
            raise
        finally:
            executor.shutdown(wait=False)

        self._logger.debug(f"Received response of length: {len(response)}")
        return response
