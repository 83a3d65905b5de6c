"""Routing utilities for provider/model selection."""

from __future__ import annotations

from enum import Enum

from app.ai.providers.base import AIModel, Provider
from app.ai.providers.gemini import GeminiProvider
from app.ai.providers.openai_chat import OpenAIProvider
from app.config import Settings


class ProviderMode(str, Enum):
  """Supported provider modes."""

  OPENAI = "openai"
  GEMINI = "gemini"


def get_provider_for_mode(mode: str | ProviderMode, settings: Settings) -> Provider:
  """Return a provider instance for the given mode."""
  key = mode.value if isinstance(mode, ProviderMode) else mode
  if key == ProviderMode.OPENAI.value:
    return OpenAIProvider(api_key=settings.openai_api_key, temperature=settings.llm_temperature)
  if key == ProviderMode.GEMINI.value:
    return GeminiProvider(api_key=settings.gemini_api_key, temperature=settings.llm_temperature)
  raise ValueError(f"Unsupported provider mode '{mode}'.")


def get_itinerary_model(settings: Settings) -> AIModel:
  """Return the model client configured for itinerary generation."""
  provider = get_provider_for_mode(settings.llm_provider, settings)
  return provider.get_model(settings.llm_model)
