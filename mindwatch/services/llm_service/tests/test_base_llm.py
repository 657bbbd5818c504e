"""Tests for the OpenAI-compatible client with a mocked SDK client."""
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import openai
import pytest

from mindwatch.services.llm_service.base_llm import (
    LLMConfig,
    LLMProvider,
    LLMUnavailableError,
    OpenAICompatibleLLM,
    create_llm,
)
from mindwatch.services.llm_service.config import create_assistant, load_llm_config


def completion(text, model="llama-3.3-70b-versatile"):
    return SimpleNamespace(
        choices=[SimpleNamespace(message=SimpleNamespace(content=text))],
        usage=SimpleNamespace(total_tokens=42),
        model=model,
    )


def rate_limit_error():
    request = httpx.Request("POST", "https://api.groq.com/openai/v1/chat/completions")
    response = httpx.Response(429, request=request)
    return openai.RateLimitError("rate_limit_exceeded", response=response, body=None)


@pytest.fixture
def config():
    return LLMConfig(
        provider=LLMProvider.GROQ,
        model_name="llama-3.3-70b-versatile",
        fallback_model_name="llama-3.1-8b-instant",
        api_key="test-key",
    )


@pytest.fixture
def client():
    mock = MagicMock()
    mock.chat.completions.create = AsyncMock()
    return mock


class TestConstruction:
    def test_api_key_required(self):
        with pytest.raises(ValueError):
            OpenAICompatibleLLM(LLMConfig(provider=LLMProvider.GROQ, model_name="m"))

    def test_factory_builds_client(self, config):
        llm = create_llm(config)
        assert isinstance(llm, OpenAICompatibleLLM)

    def test_validate_prompt(self, config, client):
        llm = OpenAICompatibleLLM(config, client=client)
        assert llm.validate_prompt("hello") is True
        assert llm.validate_prompt("   ") is False
        assert llm.validate_prompt("x" * 10001) is False


@pytest.mark.asyncio
class TestGenerate:
    async def test_messages_are_assembled(self, config, client):
        client.chat.completions.create.return_value = completion("hi there")
        llm = OpenAICompatibleLLM(config, client=client)

        response = await llm.generate(
            "How are you?",
            system_prompt="Be kind.",
            history=[{"role": "user", "content": "earlier"}],
            temperature=0.2,
        )

        assert response.text == "hi there"
        assert response.tokens_used == 42
        kwargs = client.chat.completions.create.call_args.kwargs
        assert kwargs["messages"] == [
            {"role": "system", "content": "Be kind."},
            {"role": "user", "content": "earlier"},
            {"role": "user", "content": "How are you?"},
        ]
        assert kwargs["temperature"] == 0.2
        assert kwargs["max_tokens"] == config.max_tokens

    async def test_rate_limit_retries_on_fallback_model(self, config, client):
        client.chat.completions.create.side_effect = [
            rate_limit_error(),
            completion("from fallback", model="llama-3.1-8b-instant"),
        ]
        llm = OpenAICompatibleLLM(config, client=client)

        response = await llm.generate("hello")

        assert response.text == "from fallback"
        assert response.model == "llama-3.1-8b-instant"
        second_call = client.chat.completions.create.call_args_list[1].kwargs
        assert second_call["model"] == "llama-3.1-8b-instant"

    async def test_rate_limit_without_fallback_raises(self, config, client):
        config.fallback_model_name = None
        client.chat.completions.create.side_effect = rate_limit_error()
        llm = OpenAICompatibleLLM(config, client=client)

        with pytest.raises(LLMUnavailableError):
            await llm.generate("hello")

    async def test_invalid_prompt_rejected(self, config, client):
        llm = OpenAICompatibleLLM(config, client=client)
        with pytest.raises(ValueError):
            await llm.generate("")
        client.chat.completions.create.assert_not_called()


class TestEnvironmentConfig:
    def test_missing_key_returns_none(self, monkeypatch):
        monkeypatch.delenv("GROQ_API_KEY", raising=False)
        monkeypatch.delenv("LLM_PROVIDER", raising=False)
        assert load_llm_config() is None
        assert create_assistant() is None

    def test_env_values_used(self, monkeypatch):
        monkeypatch.setenv("GROQ_API_KEY", "gsk_test")
        monkeypatch.setenv("LLM_MODEL", "custom-model")
        monkeypatch.delenv("LLM_FALLBACK_MODEL", raising=False)
        monkeypatch.delenv("LLM_PROVIDER", raising=False)

        config = load_llm_config()

        assert config.provider == LLMProvider.GROQ
        assert config.model_name == "custom-model"
        assert config.fallback_model_name == "llama-3.1-8b-instant"

    def test_create_assistant_with_key(self, monkeypatch):
        monkeypatch.setenv("GROQ_API_KEY", "gsk_test")
        monkeypatch.delenv("LLM_BASE_URL", raising=False)
        monkeypatch.delenv("LLM_PROVIDER", raising=False)
        assistant = create_assistant()
        assert assistant is not None

        with patch("mindwatch.services.llm_service.base_llm.openai.AsyncOpenAI") as mock_cls:
            assistant.llm._new_client()

        assert mock_cls.call_args.kwargs["base_url"] == "https://api.groq.com/openai/v1"
