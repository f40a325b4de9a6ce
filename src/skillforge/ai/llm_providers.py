from __future__ import annotations

import os
from abc import ABC, abstractmethod

from dotenv import load_dotenv

"""Completion provider implementations."""

# Load environment variables for LLM API keys (GEMINI_API_KEY, LLM_MODEL, etc.)
load_dotenv()

DEFAULT_GEMINI_MODEL = "gemini-1.5-flash"
DEFAULT_OPENAI_MODEL = "gpt-4o-mini"


class LLMError(RuntimeError):
    """Raised when a completion provider cannot be used or fails.

    ``kind`` names the failure category (``unavailable``,
    ``invalid_credentials``, ``quota_exceeded``, ``safety_block``,
    ``empty_response`` or ``provider_error``).
    """

    def __init__(self, message: str, kind: str = "provider_error") -> None:
        super().__init__(message)
        self.kind = kind


def classify_provider_error(exc: Exception) -> str:
    """Map an SDK exception to a failure category from its message."""
    message = str(exc).upper()
    if "API_KEY_INVALID" in message or "401" in message or "API KEY" in message:
        return "invalid_credentials"
    if "QUOTA" in message or "RESOURCE_EXHAUSTED" in message or "429" in message:
        return "quota_exceeded"
    if "SAFETY" in message or "BLOCKED" in message:
        return "safety_block"
    if "503" in message or "UNAVAILABLE" in message:
        return "unavailable"
    return "provider_error"


class LLMProvider(ABC):
    """Abstract base class for completion providers."""

    def generate_llm_config(
        self,
        temperature: float | None,
        max_tokens: int | None,
        seed: int | None,
    ) -> dict:
        """Generate llm configs

        Args:
            temperature: Controls randomness
            max_tokens: Maximum response length
            seed: Random seed for reproducibility

        Returns:
            Configuration dictionary with common parameters
        """
        config = {}

        if temperature is not None:
            config["temperature"] = temperature
        if max_tokens is not None:
            config["max_tokens"] = max_tokens
        if seed is not None:
            config["seed"] = seed

        return config

    @abstractmethod
    async def send_prompt(self, prompt: str, config: dict) -> str:
        """Send a prompt to the provider and return the text response.

        Args:
            prompt: The full prompt string.
            config: Configuration dictionary for the request.

        Returns:
            The text response.

        Raises:
            LLMError: If the call fails or returns nothing usable.
        """


class GeminiProvider(LLMProvider):
    """Gemini implementation."""

    def __init__(self) -> None:
        """Initialize Gemini provider with API key from environment."""
        from google import genai

        self.api_key = os.environ.get("GEMINI_API_KEY")
        if not self.api_key:
            raise LLMError("Missing GEMINI_API_KEY environment variable", kind="unavailable")

        self.model = os.environ.get("LLM_MODEL", DEFAULT_GEMINI_MODEL)
        self.client = genai.Client(api_key=self.api_key)

    def generate_llm_config(
        self,
        temperature: float | None,
        max_tokens: int | None,
        seed: int | None,
    ) -> dict:
        """Generate Gemini-specific configuration dictionary."""
        config = super().generate_llm_config(temperature, max_tokens, seed)

        # Map common 'max_tokens' to Gemini's 'max_output_tokens'
        if "max_tokens" in config:
            config["max_output_tokens"] = config.pop("max_tokens")

        return config

    async def send_prompt(self, prompt: str, config: dict) -> str:
        try:
            response = await self.client.aio.models.generate_content(
                model=self.model, contents=prompt, config=config
            )
        except Exception as e:
            raise LLMError(f"Gemini API call failed: {e}", kind=classify_provider_error(e)) from e

        feedback = getattr(response, "prompt_feedback", None)
        block_reason = getattr(feedback, "block_reason", None)
        if block_reason:
            raise LLMError(f"Gemini blocked the prompt: {block_reason}", kind="safety_block")

        text = (response.text or "").strip()
        if not text:
            raise LLMError("Gemini returned an empty response", kind="empty_response")
        return text


class OpenAIProvider(LLMProvider):
    """OpenAI chat-completions implementation."""

    def __init__(self) -> None:
        import openai

        self.api_key = os.environ.get("OPENAI_API_KEY")
        if not self.api_key:
            raise LLMError("Missing OPENAI_API_KEY environment variable", kind="unavailable")

        self.model = os.environ.get("LLM_MODEL", DEFAULT_OPENAI_MODEL)
        self.client = openai.AsyncOpenAI(api_key=self.api_key)

    async def send_prompt(self, prompt: str, config: dict) -> str:
        import openai

        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                **config,
            )
        except openai.AuthenticationError as e:
            raise LLMError(f"OpenAI API call failed: {e}", kind="invalid_credentials") from e
        except openai.RateLimitError as e:
            raise LLMError(f"OpenAI API call failed: {e}", kind="quota_exceeded") from e
        except Exception as e:
            raise LLMError(f"OpenAI API call failed: {e}", kind=classify_provider_error(e)) from e

        if not response.choices:
            raise LLMError("OpenAI returned no choices", kind="empty_response")
        choice = response.choices[0]
        if choice.finish_reason == "content_filter":
            raise LLMError("OpenAI response was blocked by the content filter", kind="safety_block")

        text = (choice.message.content or "").strip()
        if not text:
            raise LLMError("OpenAI returned an empty response", kind="empty_response")
        return text
