"""Minimal .env support so local runs pick up provider keys and DSNs."""

from __future__ import annotations

import os
from pathlib import Path


def default_env_path() -> Path:
  """Return the .env path at the project root."""

  return Path(__file__).resolve().parents[2] / ".env"


def _parse_line(raw_line: str) -> tuple[str, str] | None:
  """Split one `KEY=value` line, ignoring blanks, comments and `export` prefixes."""
  line = raw_line.strip()
  if not line or line.startswith("#"):
    return None

  line = line.removeprefix("export ").lstrip()
  key, sep, value = line.partition("=")
  key = key.strip()
  if not sep or not key:
    return None

  value = value.strip()
  # Quoted values keep inner whitespace and `#` characters verbatim.
  if len(value) >= 2 and value[0] == value[-1] and value[0] in {'"', "'"}:
    return key, value[1:-1]

  # Unquoted values may carry a trailing comment.
  comment_at = value.find(" #")
  if comment_at != -1:
    value = value[:comment_at].rstrip()

  return key, value


def load_env_file(path: Path, *, override: bool = False) -> dict[str, str]:
  """Load key=value pairs from a .env file into the process environment and return what was applied."""

  if not path.is_file():
    return {}

  applied: dict[str, str] = {}
  for raw_line in path.read_text(encoding="utf-8").splitlines():
    parsed = _parse_line(raw_line)
    if parsed is None:
      continue
    key, value = parsed
    if not override and key in os.environ:
      continue
    os.environ[key] = value
    applied[key] = value

  return applied
