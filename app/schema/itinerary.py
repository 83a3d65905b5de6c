"""Itinerary document contract shared by the generator prompt and output validation."""

from __future__ import annotations

from typing import Any, Final, Literal

import msgspec

ITINERARY_SCHEMA_NAME: Final[str] = "ItineraryDoc"

_ACTIVITY_SCHEMA: Final[dict[str, Any]] = {
  "type": "object",
  "additionalProperties": False,
  "properties": {"time": {"type": "string"}, "description": {"type": "string"}, "location": {"type": "string"}},
  "required": ["time", "description", "location"],
}

_DAY_PLAN_SCHEMA: Final[dict[str, Any]] = {
  "type": "object",
  "additionalProperties": False,
  "properties": {"day": {"type": "integer"}, "theme": {"type": "string"}, "activities": {"type": "array", "items": _ACTIVITY_SCHEMA}},
  "required": ["day", "theme", "activities"],
}

# Strict JSON schema handed to the model; every object level forbids extra keys.
ITINERARY_JSON_SCHEMA: Final[dict[str, Any]] = {
  "type": "object",
  "additionalProperties": False,
  "properties": {
    "status": {"type": "string", "enum": ["completed", "processing", "failed"]},
    "destination": {"type": "string"},
    "durationDays": {"type": "integer"},
    "createdAt": {"type": "string"},
    "completedAt": {"type": ["string", "null"]},
    "itinerary": {"type": "array", "items": _DAY_PLAN_SCHEMA},
    "error": {"type": ["string", "null"]},
  },
  "required": ["status", "destination", "durationDays", "createdAt", "completedAt", "itinerary", "error"],
}


class Activity(msgspec.Struct, forbid_unknown_fields=True):
  time: str
  description: str
  location: str


class DayPlan(msgspec.Struct, forbid_unknown_fields=True):
  day: int
  theme: str
  activities: list[Activity]


class ItineraryDocument(msgspec.Struct, forbid_unknown_fields=True, rename="camel"):
  """Generator output as described by `ITINERARY_JSON_SCHEMA`.

  Only `itinerary` is trusted; the remaining fields are echoed by the model
  and replaced with server-known values before anything is persisted.
  """

  status: Literal["completed", "processing", "failed"]
  destination: str
  duration_days: int
  created_at: str
  completed_at: str | None
  itinerary: list[DayPlan]
  error: str | None


def validate_itinerary_document(payload: Any, *, duration_days: int) -> tuple[bool, list[str], ItineraryDocument | None]:
  """
  Validate a parsed generator payload against the itinerary contract.

  Returns:
      Tuple where:
      - ok: bool indicating whether validation succeeded.
      - errors: list of human-readable validation errors.
      - model: parsed ItineraryDocument when validation passes, otherwise None.
  """

  errors: list[str] = []

  if not isinstance(payload, dict):
    return False, [f"$: expected a JSON object, got {type(payload).__name__}"], None

  try:
    document = msgspec.convert(payload, type=ItineraryDocument, strict=True)
  except msgspec.ValidationError as exc:
    return False, [str(exc)], None

  # The plan must cover the requested trip length, one entry per day.
  if len(document.itinerary) != duration_days:
    errors.append(f"$.itinerary: expected {duration_days} day plans, got {len(document.itinerary)}")

  if errors:
    return False, errors, None

  return True, errors, document


def itinerary_to_builtins(document: ItineraryDocument) -> list[dict[str, Any]]:
  """Return the trusted itinerary as plain JSON values for persistence."""
  return msgspec.to_builtins(document.itinerary)
