"""Provider implementations."""

from app.ai.providers.base import AIModel, ModelResponse, Provider
from app.ai.providers.gemini import GeminiModel, GeminiProvider
from app.ai.providers.openai_chat import OpenAIChatModel, OpenAIProvider

__all__ = ["AIModel", "ModelResponse", "Provider", "GeminiModel", "GeminiProvider", "OpenAIChatModel", "OpenAIProvider"]
