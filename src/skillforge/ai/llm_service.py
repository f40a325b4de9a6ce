from __future__ import annotations

import os

from skillforge.ai.llm_providers import (
    GeminiProvider,
    LLMError,
    LLMProvider,
    OpenAIProvider,
)

"""LLM service with multi-provider support (Gemini, OpenAI)."""

# Sampling settings used for every generation request.
DEFAULT_TEMPERATURE = 0.7
DEFAULT_MAX_TOKENS = 8192


class LLMService:
    def __init__(self, provider: LLMProvider | None = None) -> None:
        """Initialize LLM service with a specific provider.

        Args:
            provider: LLM provider instance. Defaults to the one named by
                ``LLM_PROVIDER``.

        Raises:
            LLMError: If the configured provider cannot be constructed.
        """
        self.provider = provider or LLMService._get_default_llm_provider_from_env()

    @staticmethod
    def _get_default_llm_provider_from_env() -> LLMProvider:
        provider_name = os.environ.get("LLM_PROVIDER", "gemini").lower()

        if provider_name == "gemini":
            return GeminiProvider()
        if provider_name == "openai":
            return OpenAIProvider()
        raise LLMError(f"Unknown LLM provider: {provider_name}.", kind="unavailable")

    def build_prompt(self, system_instructions: str, user_content: str) -> str:
        """Construct a full prompt with system and user parts."""
        return f"System instruction:\n{system_instructions}\n\nUser content:\n{user_content}"

    async def complete(
        self,
        prompt: str,
        temperature: float | None = DEFAULT_TEMPERATURE,
        max_tokens: int | None = DEFAULT_MAX_TOKENS,
        seed: int | None = None,
    ) -> str:
        """Send a finished prompt and return the raw completion text."""
        config = self.provider.generate_llm_config(temperature, max_tokens, seed)
        return await self.provider.send_prompt(prompt, config)

    async def generate_llm_response(
        self,
        system_instructions: str,
        user_content: str,
        temperature: float | None = DEFAULT_TEMPERATURE,
        max_tokens: int | None = DEFAULT_MAX_TOKENS,
        seed: int | None = None,
    ) -> str:
        """Build a prompt and send it to the provider in one step."""
        prompt = self.build_prompt(system_instructions, user_content)
        return await self.complete(prompt, temperature, max_tokens, seed)
