"""Provider adapters translate SDK responses and errors without touching the network."""

from __future__ import annotations

import dataclasses
from types import SimpleNamespace
from unittest.mock import AsyncMock

import httpx
import openai
import pytest
from google.genai import errors as genai_errors

from app.ai.providers.gemini import GeminiModel, GeminiProvider
from app.ai.providers.openai_chat import OpenAIChatModel, OpenAIProvider
from app.ai.router import ProviderMode, get_itinerary_model, get_provider_for_mode
from app.config import get_settings
from app.core.errors import GenerationError

SCHEMA = {"type": "object", "properties": {}, "required": [], "additionalProperties": False}


def _openai_client(create: AsyncMock) -> SimpleNamespace:
  return SimpleNamespace(chat=SimpleNamespace(completions=SimpleNamespace(create=create)))


@pytest.mark.anyio
async def test_openai_requests_strict_json_schema() -> None:
  usage = SimpleNamespace(prompt_tokens=10, completion_tokens=5, total_tokens=15)
  create = AsyncMock(return_value=SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content="{}"))], usage=usage))
  model = OpenAIChatModel("gpt-4o-mini", temperature=0.6, client=_openai_client(create))

  response = await model.generate_structured("plan", SCHEMA, schema_name="ItineraryDoc", system="be strict")

  assert response.content == "{}"
  assert response.usage == {"prompt_tokens": 10, "completion_tokens": 5, "total_tokens": 15}
  kwargs = create.await_args.kwargs
  assert kwargs["model"] == "gpt-4o-mini"
  assert kwargs["temperature"] == 0.6
  assert kwargs["messages"] == [{"role": "system", "content": "be strict"}, {"role": "user", "content": "plan"}]
  assert kwargs["response_format"] == {"type": "json_schema", "json_schema": {"name": "ItineraryDoc", "schema": SCHEMA, "strict": True}}


@pytest.mark.anyio
async def test_openai_errors_become_provider_failures() -> None:
  request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
  create = AsyncMock(side_effect=openai.APIConnectionError(request=request))
  model = OpenAIChatModel("gpt-4o-mini", client=_openai_client(create))

  with pytest.raises(GenerationError) as exc_info:
    await model.generate_structured("plan", SCHEMA, schema_name="ItineraryDoc")

  assert exc_info.value.stage == "provider"
  assert str(exc_info.value).startswith("OpenAI API error:")


@pytest.mark.anyio
async def test_openai_empty_choices_is_a_provider_failure() -> None:
  create = AsyncMock(return_value=SimpleNamespace(choices=[], usage=None))
  model = OpenAIChatModel("gpt-4o-mini", client=_openai_client(create))

  with pytest.raises(GenerationError) as exc_info:
    await model.generate_structured("plan", SCHEMA, schema_name="ItineraryDoc")
  assert exc_info.value.stage == "provider"


def _gemini_client(generate: AsyncMock) -> SimpleNamespace:
  return SimpleNamespace(aio=SimpleNamespace(models=SimpleNamespace(generate_content=generate)))


@pytest.mark.anyio
async def test_gemini_requests_json_with_response_schema() -> None:
  generate = AsyncMock(return_value=SimpleNamespace(text='{"ok": true}', usage_metadata=None))
  model = GeminiModel("gemini-2.5-flash", temperature=0.2, client=_gemini_client(generate))

  response = await model.generate_structured("plan", SCHEMA, schema_name="ItineraryDoc", system="be strict")

  assert response.content == '{"ok": true}'
  assert response.usage is None
  kwargs = generate.await_args.kwargs
  assert kwargs["model"] == "gemini-2.5-flash"
  assert kwargs["contents"] == "plan"
  assert kwargs["config"] == {"response_mime_type": "application/json", "response_json_schema": SCHEMA, "temperature": 0.2, "system_instruction": "be strict"}


@pytest.mark.anyio
async def test_gemini_errors_become_provider_failures() -> None:
  error = genai_errors.ClientError(429, {"error": {"code": 429, "message": "quota exhausted", "status": "RESOURCE_EXHAUSTED"}})
  model = GeminiModel("gemini-2.5-flash", client=_gemini_client(AsyncMock(side_effect=error)))

  with pytest.raises(GenerationError) as exc_info:
    await model.generate_structured("plan", SCHEMA, schema_name="ItineraryDoc")

  assert exc_info.value.stage == "provider"
  assert "429" in str(exc_info.value)


def test_router_builds_configured_provider_model() -> None:
  settings = dataclasses.replace(get_settings(), llm_provider="openai", llm_model=None, openai_api_key="sk-test")
  model = get_itinerary_model(settings)
  assert isinstance(model, OpenAIChatModel)
  assert model.name == "gpt-4o-mini"

  gemini_settings = dataclasses.replace(settings, llm_provider="gemini", llm_model="gemini-2.5-pro", gemini_api_key="g-test")
  gemini_model = get_itinerary_model(gemini_settings)
  assert isinstance(gemini_model, GeminiModel)
  assert gemini_model.name == "gemini-2.5-pro"


def test_router_rejects_unknown_provider_and_model() -> None:
  settings = get_settings()
  assert isinstance(get_provider_for_mode(ProviderMode.GEMINI, settings), GeminiProvider)
  with pytest.raises(ValueError):
    get_provider_for_mode("anthropic", settings)
  with pytest.raises(ValueError):
    OpenAIProvider(api_key="sk-test").get_model("not-a-model")


def test_missing_api_key_is_a_configuration_error(monkeypatch) -> None:
  monkeypatch.delenv("GEMINI_API_KEY", raising=False)
  with pytest.raises(ValueError):
    GeminiModel("gemini-2.5-flash")
