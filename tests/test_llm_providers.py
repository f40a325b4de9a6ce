from __future__ import annotations

import asyncio
from types import SimpleNamespace

import pytest

from skillforge.ai.llm_providers import (
    DEFAULT_GEMINI_MODEL,
    GeminiProvider,
    LLMError,
    LLMProvider,
    OpenAIProvider,
    classify_provider_error,
)


class MockLLMProvider(LLMProvider):
    """Mock provider for testing abstract base class."""

    async def send_prompt(self, prompt: str, config: dict) -> str:
        return f"Mock response to: {prompt}"


def _install_gemini(monkeypatch: pytest.MonkeyPatch, generate_content) -> list[dict]:
    """Replace ``genai.Client`` with a fake whose async models call ``generate_content``."""
    calls: list[dict] = []

    class _FakeModels:
        async def generate_content(self, *, model: str, contents: str, config: dict):
            calls.append({"model": model, "contents": contents, "config": config})
            return generate_content()

    class _FakeClient:
        def __init__(self, api_key: str) -> None:
            self.api_key = api_key
            self.aio = SimpleNamespace(models=_FakeModels())

    import google.genai as _genai

    monkeypatch.setattr(_genai, "Client", _FakeClient, raising=True)
    monkeypatch.setenv("GEMINI_API_KEY", "test-key")
    return calls


def _install_openai(monkeypatch: pytest.MonkeyPatch, create) -> list[dict]:
    """Replace ``openai.AsyncOpenAI`` with a fake whose completions call ``create``."""
    calls: list[dict] = []

    class _FakeCompletions:
        async def create(self, *, model: str, messages: list[dict], **kwargs):
            calls.append({"model": model, "messages": messages, **kwargs})
            return create()

    class _FakeClient:
        def __init__(self, api_key: str) -> None:
            self.api_key = api_key
            self.chat = SimpleNamespace(completions=_FakeCompletions())

    import openai

    monkeypatch.setattr(openai, "AsyncOpenAI", _FakeClient, raising=True)
    monkeypatch.setenv("OPENAI_API_KEY", "test-key")
    return calls


def _openai_response(content: str | None, finish_reason: str = "stop") -> SimpleNamespace:
    choice = SimpleNamespace(message=SimpleNamespace(content=content), finish_reason=finish_reason)
    return SimpleNamespace(choices=[choice])


def _raise(exc: Exception):
    def _inner():
        raise exc

    return _inner


@pytest.mark.parametrize(
    ("temperature", "max_tokens", "seed", "expected"),
    [
        (0.5, 100, 42, {"temperature": 0.5, "max_tokens": 100, "seed": 42}),
        (0.7, None, None, {"temperature": 0.7}),
        (None, 500, None, {"max_tokens": 500}),
        (None, None, 42, {"seed": 42}),
        (None, None, None, {}),
    ],
)
def test_generate_llm_config(
    temperature: float | None, max_tokens: int | None, seed: int | None, expected: dict
) -> None:
    config = MockLLMProvider().generate_llm_config(temperature, max_tokens, seed)
    assert config == expected


@pytest.mark.parametrize(
    ("message", "kind"),
    [
        ("400 API_KEY_INVALID", "invalid_credentials"),
        ("429 RESOURCE_EXHAUSTED", "quota_exceeded"),
        ("Response blocked for SAFETY", "safety_block"),
        ("503 UNAVAILABLE", "unavailable"),
        ("connection reset", "provider_error"),
    ],
)
def test_classify_provider_error(message: str, kind: str) -> None:
    assert classify_provider_error(RuntimeError(message)) == kind


# Gemini Provider Tests


def test_gemini_initialization_success(monkeypatch: pytest.MonkeyPatch) -> None:
    _install_gemini(monkeypatch, lambda: None)
    monkeypatch.setenv("LLM_MODEL", "gemini-2.0-flash-exp")

    provider = GeminiProvider()
    assert provider.api_key == "test-key"
    assert provider.model == "gemini-2.0-flash-exp"


def test_gemini_initialization_missing_api_key(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)

    with pytest.raises(LLMError, match="Missing GEMINI_API_KEY environment variable") as info:
        GeminiProvider()
    assert info.value.kind == "unavailable"


def test_gemini_initialization_default_model(monkeypatch: pytest.MonkeyPatch) -> None:
    _install_gemini(monkeypatch, lambda: None)
    monkeypatch.delenv("LLM_MODEL", raising=False)

    assert GeminiProvider().model == DEFAULT_GEMINI_MODEL


def test_gemini_generate_llm_config_maps_max_tokens(monkeypatch: pytest.MonkeyPatch) -> None:
    _install_gemini(monkeypatch, lambda: None)

    config = GeminiProvider().generate_llm_config(temperature=0.8, max_tokens=200, seed=123)

    assert config == {"temperature": 0.8, "max_output_tokens": 200, "seed": 123}


def test_gemini_send_prompt_success(monkeypatch: pytest.MonkeyPatch) -> None:
    calls = _install_gemini(
        monkeypatch, lambda: SimpleNamespace(text="  Test response from Gemini  ", prompt_feedback=None)
    )
    monkeypatch.setenv("LLM_MODEL", "gemini-test-model")

    provider = GeminiProvider()
    response = asyncio.run(provider.send_prompt("Test prompt", {"max_output_tokens": 100}))

    assert response == "Test response from Gemini"
    assert calls == [
        {"model": "gemini-test-model", "contents": "Test prompt", "config": {"max_output_tokens": 100}}
    ]


def test_gemini_send_prompt_api_failure(monkeypatch: pytest.MonkeyPatch) -> None:
    _install_gemini(monkeypatch, _raise(RuntimeError("429 quota exceeded")))

    provider = GeminiProvider()
    with pytest.raises(LLMError, match="Gemini API call failed.*quota") as info:
        asyncio.run(provider.send_prompt("Test prompt", {}))
    assert info.value.kind == "quota_exceeded"


def test_gemini_send_prompt_empty_response(monkeypatch: pytest.MonkeyPatch) -> None:
    _install_gemini(monkeypatch, lambda: SimpleNamespace(text=None, prompt_feedback=None))

    provider = GeminiProvider()
    with pytest.raises(LLMError, match="Gemini returned an empty response") as info:
        asyncio.run(provider.send_prompt("Test prompt", {}))
    assert info.value.kind == "empty_response"


def test_gemini_send_prompt_blocked(monkeypatch: pytest.MonkeyPatch) -> None:
    _install_gemini(
        monkeypatch,
        lambda: SimpleNamespace(text=None, prompt_feedback=SimpleNamespace(block_reason="SAFETY")),
    )

    provider = GeminiProvider()
    with pytest.raises(LLMError) as info:
        asyncio.run(provider.send_prompt("Test prompt", {}))
    assert info.value.kind == "safety_block"


# OpenAI Provider Tests


def test_openai_initialization_success(monkeypatch: pytest.MonkeyPatch) -> None:
    _install_openai(monkeypatch, lambda: None)
    monkeypatch.setenv("LLM_MODEL", "gpt-4o")

    provider = OpenAIProvider()
    assert provider.api_key == "test-key"
    assert provider.model == "gpt-4o"


def test_openai_initialization_missing_api_key(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)

    with pytest.raises(LLMError, match="Missing OPENAI_API_KEY environment variable"):
        OpenAIProvider()


def test_openai_initialization_default_model(monkeypatch: pytest.MonkeyPatch) -> None:
    _install_openai(monkeypatch, lambda: None)
    monkeypatch.delenv("LLM_MODEL", raising=False)

    assert OpenAIProvider().model == "gpt-4o-mini"


def test_openai_send_prompt_success(monkeypatch: pytest.MonkeyPatch) -> None:
    calls = _install_openai(monkeypatch, lambda: _openai_response("  Test response from OpenAI  "))

    provider = OpenAIProvider()
    response = asyncio.run(provider.send_prompt("Test prompt", {"temperature": 0.7, "max_tokens": 100}))

    assert response == "Test response from OpenAI"
    assert calls[0]["messages"] == [{"role": "user", "content": "Test prompt"}]
    assert calls[0]["temperature"] == 0.7
    assert calls[0]["max_tokens"] == 100


def test_openai_send_prompt_api_failure(monkeypatch: pytest.MonkeyPatch) -> None:
    _install_openai(monkeypatch, _raise(RuntimeError("API rate limit exceeded")))

    provider = OpenAIProvider()
    with pytest.raises(LLMError, match="OpenAI API call failed.*rate limit"):
        asyncio.run(provider.send_prompt("Test prompt", {}))


def test_openai_send_prompt_empty_choices(monkeypatch: pytest.MonkeyPatch) -> None:
    _install_openai(monkeypatch, lambda: SimpleNamespace(choices=[]))

    provider = OpenAIProvider()
    with pytest.raises(LLMError, match="OpenAI returned no choices") as info:
        asyncio.run(provider.send_prompt("Test prompt", {}))
    assert info.value.kind == "empty_response"


def test_openai_send_prompt_none_content(monkeypatch: pytest.MonkeyPatch) -> None:
    _install_openai(monkeypatch, lambda: _openai_response(None, finish_reason="length"))

    provider = OpenAIProvider()
    with pytest.raises(LLMError, match="OpenAI returned an empty response"):
        asyncio.run(provider.send_prompt("Test prompt", {}))


def test_openai_send_prompt_content_filter(monkeypatch: pytest.MonkeyPatch) -> None:
    _install_openai(monkeypatch, lambda: _openai_response(None, finish_reason="content_filter"))

    provider = OpenAIProvider()
    with pytest.raises(LLMError) as info:
        asyncio.run(provider.send_prompt("Test prompt", {}))
    assert info.value.kind == "safety_block"
