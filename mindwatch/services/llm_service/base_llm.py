"""Base LLM interface and the OpenAI-compatible implementation.

The wellness features talk to a hosted chat-completions endpoint (Groq
by default, through its OpenAI-compatible API). Everything the model
returns is treated as untrusted free text by the callers.
"""

import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional

import openai

logger = logging.getLogger(__name__)


class LLMUnavailableError(RuntimeError):
    """Raised when the provider cannot produce a response."""


class LLMProvider(Enum):
    """Supported LLM providers."""
    GROQ = "groq"
    OPENAI = "openai"


DEFAULT_BASE_URLS = {
    LLMProvider.GROQ: "https://api.groq.com/openai/v1",
    LLMProvider.OPENAI: None,
}


@dataclass
class LLMConfig:
    """Configuration for LLM inference."""
    provider: LLMProvider
    model_name: str
    fallback_model_name: Optional[str] = None
    api_key: Optional[str] = None
    base_url: Optional[str] = None
    max_tokens: int = 600
    temperature: float = 0.7
    top_p: float = 0.9
    timeout_seconds: int = 30


@dataclass
class LLMResponse:
    """Response from LLM inference."""
    text: str
    model: str
    provider: str
    tokens_used: Optional[int] = None
    latency_ms: Optional[float] = None


class BaseLLM(ABC):
    """Abstract base class for LLM implementations."""

    def __init__(self, config: LLMConfig):
        self.config = config
        logger.info(
            "LLM_INITIALIZED",
            extra={
                "provider": config.provider.value,
                "model": config.model_name,
            }
        )

    @abstractmethod
    async def generate(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        history: Optional[List[Dict[str, str]]] = None,
        **kwargs
    ) -> LLMResponse:
        """Generate a response.

        Args:
            prompt: Latest user prompt
            system_prompt: Optional system prompt
            history: Prior turns as {"role", "content"} dicts
            **kwargs: temperature / max_tokens / top_p overrides

        Raises:
            ValueError: If prompt is invalid
            LLMUnavailableError: If the provider call fails
        """

    def validate_prompt(self, prompt: str) -> bool:
        """Reject empty or oversized prompts before they are sent."""
        if not prompt or not prompt.strip():
            logger.warning("LLM_PROMPT_EMPTY")
            return False

        if len(prompt) > 10000:
            logger.warning("LLM_PROMPT_TOO_LONG", extra={"length": len(prompt)})
            return False

        return True


class OpenAICompatibleLLM(BaseLLM):
    """Chat-completions client for OpenAI and OpenAI-compatible providers.

    On a rate-limit response the request is retried once on the
    configured fallback model.

    Without an injected client each call opens and closes its own
    AsyncOpenAI client, since callers may run every request in a fresh
    event loop.
    """

    def __init__(self, config: LLMConfig, client: Optional[openai.AsyncOpenAI] = None):
        super().__init__(config)

        if client is None and not config.api_key:
            raise ValueError(f"{config.provider.value} API key required")
        self.client = client

    def _new_client(self) -> openai.AsyncOpenAI:
        return openai.AsyncOpenAI(
            api_key=self.config.api_key,
            base_url=self.config.base_url or DEFAULT_BASE_URLS.get(self.config.provider),
            timeout=self.config.timeout_seconds,
        )

    async def generate(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        history: Optional[List[Dict[str, str]]] = None,
        **kwargs
    ) -> LLMResponse:
        if not self.validate_prompt(prompt):
            raise ValueError("Invalid prompt")

        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        for turn in history or []:
            messages.append({"role": turn["role"], "content": turn["content"]})
        messages.append({"role": "user", "content": prompt})

        options = {
            "model": self.config.model_name,
            "messages": messages,
            "max_tokens": kwargs.get("max_tokens", self.config.max_tokens),
            "temperature": kwargs.get("temperature", self.config.temperature),
            "top_p": kwargs.get("top_p", self.config.top_p),
        }

        start_time = time.time()
        try:
            if self.client is not None:
                response = await self._create(self.client, options)
            else:
                async with self._new_client() as client:
                    response = await self._create(client, options)
        except openai.OpenAIError as e:
            logger.error(
                "LLM_GENERATION_FAILED",
                extra={
                    "model": options["model"],
                    "error": str(e),
                    "error_type": type(e).__name__,
                }
            )
            raise LLMUnavailableError(str(e)) from e

        latency_ms = (time.time() - start_time) * 1000
        text = response.choices[0].message.content or ""
        tokens_used = response.usage.total_tokens if response.usage else None

        logger.info(
            "LLM_GENERATION_SUCCEEDED",
            extra={
                "model": response.model,
                "latency_ms": latency_ms,
                "tokens_used": tokens_used,
            }
        )

        return LLMResponse(
            text=text,
            model=response.model,
            provider=self.config.provider.value,
            tokens_used=tokens_used,
            latency_ms=latency_ms,
        )

    async def _create(self, client: openai.AsyncOpenAI, options: Dict):
        try:
            return await client.chat.completions.create(**options)
        except openai.RateLimitError:
            fallback = self.config.fallback_model_name
            if not fallback or fallback == options["model"]:
                raise
            logger.warning(
                "LLM_RATE_LIMITED",
                extra={"model": options["model"], "fallback_model": fallback}
            )
            return await client.chat.completions.create(**{**options, "model": fallback})


def create_llm(config: LLMConfig) -> BaseLLM:
    """Factory function to create an LLM instance.

    Raises:
        ValueError: If provider not supported
    """
    if config.provider in (LLMProvider.GROQ, LLMProvider.OPENAI):
        return OpenAICompatibleLLM(config)
    raise ValueError(f"Unsupported provider: {config.provider}")
