"""Utility helpers for msgspec request decoding."""

from __future__ import annotations

import json
from typing import Any

import msgspec
from fastapi import Request


async def read_json_object(request: Request) -> dict[str, Any]:
  """Decode the request body as a JSON object.

  Bodies that are empty, malformed, or not an object decode to `{}` so field
  validation reports the missing field instead of a parse error.
  """
  payload_bytes = await request.body()
  if not payload_bytes.strip():
    return {}

  try:
    payload = msgspec.json.decode(payload_bytes)
  except msgspec.DecodeError:
    # msgspec refuses numbers beyond float range; the stdlib parser reads them as inf.
    try:
      payload = json.loads(payload_bytes)
    except ValueError:
      return {}

  if not isinstance(payload, dict):
    return {}
  return payload
