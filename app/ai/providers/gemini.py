"""Gemini provider implementation using the google-genai SDK."""

from __future__ import annotations

import logging
import os
from typing import Any, Final

from google import genai
from google.genai import errors as genai_errors

from app.ai.providers.base import AIModel, ModelResponse, Provider
from app.core.errors import GenerationError

logger = logging.getLogger(__name__)


class GeminiModel(AIModel):
  """Gemini model client using JSON mode with a response schema."""

  def __init__(self, name: str, api_key: str | None = None, *, temperature: float = 0.6, client: genai.Client | None = None) -> None:
    self.name: str = name
    self._temperature = temperature

    if client is None:
      api_key = api_key or os.getenv("GEMINI_API_KEY")
      if not api_key:
        raise ValueError("GEMINI_API_KEY environment variable is required")
      client = genai.Client(api_key=api_key)

    self._client = client

  async def generate_structured(self, prompt: str, schema: dict[str, Any], *, schema_name: str, system: str | None = None) -> ModelResponse:
    config: dict[str, Any] = {"response_mime_type": "application/json", "response_json_schema": schema, "temperature": self._temperature}
    if system:
      config["system_instruction"] = system

    try:
      # Use the async client to avoid blocking the asyncio event loop.
      response = await self._client.aio.models.generate_content(model=self.name, contents=prompt, config=config)
    except genai_errors.APIError as exc:
      raise GenerationError(f"Gemini API error: {exc.code} {exc.message}", stage="provider") from exc

    logger.debug("Gemini structured response for %s (raw):\n%s", schema_name, response.text)

    usage = None
    if response.usage_metadata:
      usage = {"prompt_tokens": response.usage_metadata.prompt_token_count, "completion_tokens": response.usage_metadata.candidates_token_count, "total_tokens": response.usage_metadata.total_token_count}

    return ModelResponse(content=response.text, usage=usage)


class GeminiProvider(Provider):
  """Gemini provider."""

  _DEFAULT_MODEL: Final[str] = "gemini-2.5-flash"
  _AVAILABLE_MODELS: Final[set[str]] = {"gemini-2.5-pro", "gemini-2.5-flash", "gemini-2.0-flash", "gemini-2.0-flash-lite"}

  def __init__(self, api_key: str | None = None, *, temperature: float = 0.6) -> None:
    self.name: str = "gemini"
    self._api_key = api_key
    self._temperature = temperature

  def get_model(self, model: str | None = None) -> AIModel:
    """Return a Gemini model client."""
    model_name = model or self._DEFAULT_MODEL
    if model_name not in self._AVAILABLE_MODELS:
      raise ValueError(f"Unsupported Gemini model '{model_name}'.")
    return GeminiModel(model_name, api_key=self._api_key, temperature=self._temperature)
