"""LLM Service: provider client and LLM-backed wellness features.

The provider is an external collaborator. Every structured feature has
a fixed fallback so the rest of the application keeps working when the
provider is down or unconfigured.
"""

from .base_llm import (
    BaseLLM,
    LLMConfig,
    LLMProvider,
    LLMResponse,
    LLMUnavailableError,
    OpenAICompatibleLLM,
    create_llm,
)
from .wellness_assistant import WellnessAssistant, extract_json
from .config import create_assistant, load_llm_config

__all__ = [
    "BaseLLM",
    "LLMConfig",
    "LLMProvider",
    "LLMResponse",
    "LLMUnavailableError",
    "OpenAICompatibleLLM",
    "create_llm",
    "WellnessAssistant",
    "extract_json",
    "create_assistant",
    "load_llm_config",
]
