"""OpenAI provider implementation using the Chat Completions API."""

from __future__ import annotations

import logging
import os
from typing import Any, Final

import openai
from openai import AsyncOpenAI

from app.ai.providers.base import AIModel, ModelResponse, Provider
from app.core.errors import GenerationError

logger = logging.getLogger(__name__)


class OpenAIChatModel(AIModel):
  """Chat Completions client using strict `json_schema` response formatting."""

  def __init__(self, name: str, api_key: str | None = None, *, temperature: float = 0.6, client: AsyncOpenAI | None = None) -> None:
    self.name: str = name
    self._temperature = temperature

    if client is None:
      api_key = api_key or os.getenv("OPENAI_API_KEY")
      if not api_key:
        raise ValueError("OPENAI_API_KEY environment variable is required")
      client = AsyncOpenAI(api_key=api_key)

    self._client = client

  async def generate_structured(self, prompt: str, schema: dict[str, Any], *, schema_name: str, system: str | None = None) -> ModelResponse:
    messages: list[dict[str, str]] = []
    if system:
      messages.append({"role": "system", "content": system})
    messages.append({"role": "user", "content": prompt})

    try:
      response = await self._client.chat.completions.create(
        model=self.name,
        messages=messages,
        temperature=self._temperature,
        response_format={"type": "json_schema", "json_schema": {"name": schema_name, "schema": schema, "strict": True}},
      )
    except openai.APIStatusError as exc:
      raise GenerationError(f"OpenAI API error: {exc.status_code} {exc.message}", stage="provider") from exc
    except openai.APIError as exc:
      raise GenerationError(f"OpenAI API error: {exc}", stage="provider") from exc

    if not response.choices:
      raise GenerationError("OpenAI API error: response contained no choices", stage="provider")

    content = response.choices[0].message.content
    logger.debug("OpenAI structured response (raw):\n%s", content)

    usage = None
    if response.usage:
      usage = {"prompt_tokens": response.usage.prompt_tokens, "completion_tokens": response.usage.completion_tokens, "total_tokens": response.usage.total_tokens}

    return ModelResponse(content=content, usage=usage)


class OpenAIProvider(Provider):
  """OpenAI provider."""

  _DEFAULT_MODEL: Final[str] = "gpt-4o-mini"
  _AVAILABLE_MODELS: Final[set[str]] = {"gpt-4o-mini", "gpt-4o", "gpt-4.1-mini", "gpt-4.1"}

  def __init__(self, api_key: str | None = None, *, temperature: float = 0.6) -> None:
    self.name: str = "openai"
    self._api_key = api_key
    self._temperature = temperature

  def get_model(self, model: str | None = None) -> AIModel:
    """Return an OpenAI model client."""
    model_name = model or self._DEFAULT_MODEL
    if model_name not in self._AVAILABLE_MODELS:
      raise ValueError(f"Unsupported OpenAI model '{model_name}'.")
    return OpenAIChatModel(model_name, api_key=self._api_key, temperature=self._temperature)
