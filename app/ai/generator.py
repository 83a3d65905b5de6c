"""Itinerary document generator backed by a structured-output model."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from app.ai.json_parser import parse_json_document
from app.ai.prompts import SYSTEM_PROMPT, render_itinerary_prompt
from app.ai.providers.base import AIModel
from app.core.errors import GenerationError
from app.schema.itinerary import ITINERARY_JSON_SCHEMA, ITINERARY_SCHEMA_NAME

logger = logging.getLogger(__name__)


class ItineraryGenerator:
  """Ask the model for an itinerary and return its output as parsed JSON values."""

  def __init__(self, model: AIModel, *, timeout_seconds: float | None = None) -> None:
    self._model = model
    self._timeout_seconds = timeout_seconds

  async def generate(self, *, destination: str, duration_days: int) -> Any:
    """Return the parsed, not yet validated, generator document.

    Raises GenerationError for provider failures, timeouts and malformed JSON.
    """
    prompt = render_itinerary_prompt(destination=destination, duration_days=duration_days)
    call = self._model.generate_structured(prompt, ITINERARY_JSON_SCHEMA, schema_name=ITINERARY_SCHEMA_NAME, system=SYSTEM_PROMPT)

    try:
      if self._timeout_seconds is None:
        response = await call
      else:
        response = await asyncio.wait_for(call, timeout=self._timeout_seconds)
    except TimeoutError as exc:
      raise GenerationError(f"Generation timed out after {self._timeout_seconds:g}s", stage="timeout") from exc

    if response.usage:
      logger.info("Itinerary generation usage model=%s usage=%s", self._model.name, response.usage)

    return parse_json_document(response.content)
