"""Base agent class with common functionality.

All agents inherit from BaseAgent which provides:
- Anthropic client management (injected or built from settings)
- Retry with exponential backoff on rate limits and server errors
- Token tracking and cost estimation
- Structured logging
- Reply text extraction
"""

import asyncio
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Optional

import anthropic
import structlog

from ..config import MODEL_PRICING, AgentConfig, ModelName, Settings, get_settings
from ..core.response import extract_text
from ..errors import APIError, ConfigurationError


@dataclass
class UsageStats:
    """Cumulative usage statistics for an agent."""

    total_input_tokens: int = 0
    total_output_tokens: int = 0
    total_cost: float = 0.0
    total_calls: int = 0
    total_retries: int = 0


class BaseAgent(ABC):
    """Abstract base class for the AI helper agents.

    Subclasses must implement:
    - _get_system_prompt(): Agent-specific system prompt
    """

    def __init__(
        self,
        client: Optional[anthropic.AsyncAnthropic] = None,
        settings: Optional[Settings] = None,
        config: Optional[AgentConfig] = None,
        model: Optional[ModelName] = None,
    ):
        """Initialize agent with configuration.

        Args:
            client: Shared Anthropic client; built from settings when omitted
            settings: Application settings
            config: Optional agent configuration
            model: Override the default model

        Raises:
            ConfigurationError: If no client is given and no API key is configured
        """
        self.settings = settings or get_settings()
        self.config = config or AgentConfig()
        self.model = model or self.settings.default_model

        api_key = self.settings.anthropic_api_key
        if client is None and not (api_key and api_key.get_secret_value()):
            raise ConfigurationError("ANTHROPIC_API_KEY environment variable is required")

        self._client = client
        self._usage = UsageStats()
        self.log = structlog.get_logger().bind(
            agent=self.__class__.__name__,
            model=self.model.value,
        )

    @property
    def client(self) -> anthropic.AsyncAnthropic:
        """Lazy-initialize Anthropic client."""
        if self._client is None:
            self._client = anthropic.AsyncAnthropic(
                api_key=self.settings.anthropic_api_key.get_secret_value(),
                timeout=self.settings.request_timeout,
            )
        return self._client

    @property
    def usage(self) -> UsageStats:
        return self._usage

    @abstractmethod
    def _get_system_prompt(self) -> str:
        """Get the system prompt for this agent."""

    async def _call_claude(
        self,
        messages: list[dict],
        max_tokens: Optional[int] = None,
        system: Optional[str] = None,
    ) -> Any:
        """Make a Claude API call with retry logic.

        Only rate limits and 5xx responses are retried; other SDK errors are
        raised as APIError.

        Raises:
            APIError: On a non-retryable error or after all retries are exhausted
        """
        system_prompt = system or self._get_system_prompt()
        retries = 0

        while True:
            try:
                start_time = time.time()

                kwargs = {
                    "model": self.model.value,
                    "max_tokens": max_tokens or self.config.max_tokens,
                    "messages": messages,
                    "temperature": self.config.temperature,
                }
                if system_prompt:
                    kwargs["system"] = system_prompt

                response = await self.client.messages.create(**kwargs)

                self._track_usage(response)
                self.log.debug(
                    "Claude API call succeeded",
                    duration_ms=int((time.time() - start_time) * 1000),
                    retries=retries,
                )
                return response

            except anthropic.RateLimitError as e:
                if retries >= self.config.max_retries:
                    raise APIError(f"Rate limit exceeded: {e}", details={"retries": retries}) from e
                retries += 1
                self._usage.total_retries += 1
                wait_time = self.config.retry_delay * (2 ** (retries - 1))
                self.log.warning("Rate limited, retrying", retry=retries, wait_seconds=wait_time)
                await asyncio.sleep(wait_time)

            except anthropic.APIStatusError as e:
                if e.status_code < 500 or retries >= self.config.max_retries:
                    raise APIError(str(e), details={"status_code": e.status_code}) from e
                retries += 1
                self._usage.total_retries += 1
                wait_time = self.config.retry_delay * (2 ** (retries - 1))
                self.log.warning(
                    "Server error, retrying",
                    status_code=e.status_code,
                    retry=retries,
                )
                await asyncio.sleep(wait_time)

            except anthropic.APIError as e:
                raise APIError(str(e)) from e

    async def _complete(self, prompt: str, max_tokens: Optional[int] = None) -> str:
        """Send a single user prompt and return the reply text."""
        response = await self._call_claude(
            messages=[{"role": "user", "content": prompt}],
            max_tokens=max_tokens,
        )
        return extract_text(response)

    def _track_usage(self, response: Any) -> None:
        """Track token usage and costs when the response reports them."""
        usage = getattr(response, "usage", None)
        input_tokens = getattr(usage, "input_tokens", 0)
        output_tokens = getattr(usage, "output_tokens", 0)
        if not isinstance(input_tokens, int) or not isinstance(output_tokens, int):
            input_tokens = output_tokens = 0

        pricing = MODEL_PRICING[self.model]
        cost = (
            input_tokens * pricing["input"] / 1_000_000
            + output_tokens * pricing["output"] / 1_000_000
        )

        self._usage.total_input_tokens += input_tokens
        self._usage.total_output_tokens += output_tokens
        self._usage.total_cost += cost
        self._usage.total_calls += 1

    def reset_usage(self) -> None:
        self._usage = UsageStats()
