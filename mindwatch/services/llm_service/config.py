"""LLM provider configuration from the environment."""
import logging
import os
from typing import Optional

from .base_llm import LLMConfig, LLMProvider, create_llm
from .wellness_assistant import WellnessAssistant

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "llama-3.3-70b-versatile"
DEFAULT_FALLBACK_MODEL = "llama-3.1-8b-instant"


def load_llm_config() -> Optional[LLMConfig]:
    """Build the provider config, or None when no API key is set."""
    provider = LLMProvider(os.getenv("LLM_PROVIDER", LLMProvider.GROQ.value))
    key_var = "GROQ_API_KEY" if provider == LLMProvider.GROQ else "OPENAI_API_KEY"
    api_key = os.getenv(key_var)
    if not api_key:
        logger.warning("LLM_NOT_CONFIGURED", extra={"missing": key_var})
        return None

    return LLMConfig(
        provider=provider,
        model_name=os.getenv("LLM_MODEL", DEFAULT_MODEL),
        fallback_model_name=os.getenv("LLM_FALLBACK_MODEL", DEFAULT_FALLBACK_MODEL),
        api_key=api_key,
        base_url=os.getenv("LLM_BASE_URL"),
        timeout_seconds=int(os.getenv("LLM_TIMEOUT_SECONDS", "30")),
    )


def create_assistant() -> Optional[WellnessAssistant]:
    """WellnessAssistant for the configured provider, or None if unconfigured."""
    config = load_llm_config()
    if config is None:
        return None
    return WellnessAssistant(create_llm(config))
