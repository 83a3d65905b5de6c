"""Strict JSON parsing for model output."""

from __future__ import annotations

import re
from typing import Any

import msgspec

from app.core.errors import GenerationError

INVALID_JSON_MESSAGE = "Model did not return valid JSON content"

_FENCE_RE = re.compile(r"^```(?:json)?\s*\n(?P<body>.*)\n```$", re.DOTALL)


def strip_json_fences(raw: str) -> str:
  """Remove a single markdown code fence wrapping the whole payload."""
  text = raw.strip()
  match = _FENCE_RE.match(text)
  if match is None:
    return text
  return match.group("body").strip()


def looks_like_json(text: str) -> bool:
  return (text.startswith("{") and text.endswith("}")) or (text.startswith("[") and text.endswith("]"))


def parse_json_document(raw: Any) -> Any:
  """Parse model output into plain JSON values.

  Output that is not a well-formed JSON document is rejected as a whole; no
  attempt is made to salvage fields from a broken payload.
  """
  if not isinstance(raw, str):
    raise GenerationError(INVALID_JSON_MESSAGE, stage="parse")

  text = strip_json_fences(raw)
  if not looks_like_json(text):
    raise GenerationError(INVALID_JSON_MESSAGE, stage="parse")

  try:
    return msgspec.json.decode(text)
  except msgspec.DecodeError as exc:
    raise GenerationError(f"{INVALID_JSON_MESSAGE}: {exc}", stage="parse") from exc
