from __future__ import annotations

import asyncio
from types import SimpleNamespace

import pytest

from skillforge.ai.llm_providers import (
    GeminiProvider,
    LLMError,
    LLMProvider,
    OpenAIProvider,
)
from skillforge.ai.llm_service import DEFAULT_MAX_TOKENS, LLMService


class MockProvider(LLMProvider):
    """Mock provider for testing LLMService."""

    def __init__(self) -> None:
        self.last_prompt: str | None = None
        self.last_config: dict | None = None
        self.response = "Mock LLM response"

    async def send_prompt(self, prompt: str, config: dict) -> str:
        self.last_prompt = prompt
        self.last_config = config
        return self.response


def _fake_genai_client(monkeypatch: pytest.MonkeyPatch, models: object | None = None) -> None:
    class _FakeClient:
        def __init__(self, api_key: str) -> None:
            self.aio = SimpleNamespace(models=models)

    import google.genai as _genai

    monkeypatch.setattr(_genai, "Client", _FakeClient, raising=True)


def test_llm_service_initialization_with_custom_provider() -> None:
    mock_provider = MockProvider()
    service = LLMService(provider=mock_provider)

    assert service.provider is mock_provider


def test_llm_service_defaults_to_gemini(monkeypatch: pytest.MonkeyPatch) -> None:
    """Gemini is used when LLM_PROVIDER is not set."""
    monkeypatch.setenv("GEMINI_API_KEY", "test-key")
    _fake_genai_client(monkeypatch)

    assert isinstance(LLMService().provider, GeminiProvider)


def test_llm_service_selects_openai(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LLM_PROVIDER", "OpenAI")
    monkeypatch.setenv("OPENAI_API_KEY", "test-key")

    class _FakeClient:
        def __init__(self, api_key: str) -> None:
            pass

    import openai

    monkeypatch.setattr(openai, "AsyncOpenAI", _FakeClient, raising=True)

    assert isinstance(LLMService().provider, OpenAIProvider)


def test_llm_service_initialization_with_unknown_provider(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setenv("LLM_PROVIDER", "unknown_provider")

    with pytest.raises(LLMError, match="Unknown LLM provider: unknown_provider") as info:
        LLMService()
    assert info.value.kind == "unavailable"


def test_llm_service_without_credentials_raises(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LLM_PROVIDER", "gemini")

    with pytest.raises(LLMError, match="Missing GEMINI_API_KEY"):
        LLMService()


def test_llm_service_build_prompt() -> None:
    service = LLMService(provider=MockProvider())

    prompt = service.build_prompt("You are a helpful assistant.", "What is Python?")

    expected = "System instruction:\nYou are a helpful assistant.\n\nUser content:\nWhat is Python?"
    assert prompt == expected


def test_complete_sends_prompt_with_default_config() -> None:
    mock_provider = MockProvider()
    service = LLMService(provider=mock_provider)

    response = asyncio.run(service.complete("Plan my week"))

    assert response == "Mock LLM response"
    assert mock_provider.last_prompt == "Plan my week"
    assert mock_provider.last_config == {"temperature": 0.7, "max_tokens": DEFAULT_MAX_TOKENS}


def test_generate_llm_response_with_custom_parameters() -> None:
    mock_provider = MockProvider()
    mock_provider.response = "Detailed explanation"
    service = LLMService(provider=mock_provider)

    response = asyncio.run(
        service.generate_llm_response(
            system_instructions="Explain in detail.",
            user_content="How does Python work?",
            temperature=0.3,
            max_tokens=500,
            seed=42,
        )
    )

    assert response == "Detailed explanation"
    assert mock_provider.last_prompt is not None
    assert "System instruction:\nExplain in detail." in mock_provider.last_prompt
    assert "User content:\nHow does Python work?" in mock_provider.last_prompt
    assert mock_provider.last_config == {"temperature": 0.3, "max_tokens": 500, "seed": 42}


def test_generate_llm_response_with_temperature_zero() -> None:
    mock_provider = MockProvider()
    service = LLMService(provider=mock_provider)

    asyncio.run(service.generate_llm_response("Test", "Test", temperature=0.0))

    assert mock_provider.last_config is not None
    assert mock_provider.last_config["temperature"] == 0.0


def test_generate_llm_response_integration_with_gemini(monkeypatch: pytest.MonkeyPatch) -> None:
    """End-to-end through a mocked Gemini client."""
    monkeypatch.setenv("GEMINI_API_KEY", "test-key")
    monkeypatch.setenv("LLM_MODEL", "gemini-test")

    class _FakeModels:
        async def generate_content(self, *, model: str, contents: str, config: dict):
            assert "System instruction:" in contents
            assert "User content:" in contents
            assert config["max_output_tokens"] == 100
            return SimpleNamespace(text="Integration test response", prompt_feedback=None)

    _fake_genai_client(monkeypatch, _FakeModels())

    response = asyncio.run(
        LLMService().generate_llm_response(
            system_instructions="You are a test assistant.",
            user_content="Generate a test response.",
            temperature=0.5,
            max_tokens=100,
        )
    )

    assert response == "Integration test response"
