"""AI content generation: completion providers, the gateway and its local templates."""

from skillforge.ai.gateway import ContentGateway, GenerationError, GenerationResult
from skillforge.ai.llm_providers import GeminiProvider, LLMError, LLMProvider, OpenAIProvider
from skillforge.ai.llm_service import LLMService

__all__ = [
    "ContentGateway",
    "GenerationError",
    "GenerationResult",
    "GeminiProvider",
    "LLMError",
    "LLMProvider",
    "OpenAIProvider",
    "LLMService",
]
