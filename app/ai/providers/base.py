"""Base interfaces for AI providers and models."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any


@dataclass
class ModelResponse:
  """Raw model output. `content` is whatever text the provider returned, possibly None."""

  content: str | None
  usage: dict[str, int] | None = None


class AIModel(ABC):
  """Abstract base class for AI models."""

  name: str

  @abstractmethod
  async def generate_structured(self, prompt: str, schema: dict[str, Any], *, schema_name: str, system: str | None = None) -> ModelResponse:
    """Request output conforming to `schema` and return it unparsed.

    Raises GenerationError when the provider call fails or returns a non-success status.
    """


class Provider(ABC):
  """Abstract base class for AI providers."""

  name: str

  @abstractmethod
  def get_model(self, model: str | None = None) -> AIModel:
    """Return the model client for the provider."""
