import math
import re
from typing import Any, Final

from app.api.models import CreateItineraryRequest
from app.core.errors import ValidationError

MIN_DURATION_DAYS: Final[int] = 1
MAX_DURATION_DAYS: Final[int] = 30

DESTINATION_REQUIRED_MSG: Final[str] = "destination is required (string)"
DURATION_INVALID_MSG: Final[str] = f"durationDays must be an integer between {MIN_DURATION_DAYS} and {MAX_DURATION_DAYS}"
JOB_ID_REQUIRED_MSG: Final[str] = "jobId required"

# ASCII decimal literals only; no digit separators or non-ASCII digits.
_NUMERIC_STRING_RE: Final[re.Pattern[str]] = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


def _coerce_duration_days(raw: Any) -> int | None:
  """Coerce numeric input to an int, or None when it is not an integral number."""
  # bool is an int subclass but never a valid day count.
  if raw is None or isinstance(raw, bool):
    return None
  if isinstance(raw, int):
    return raw
  if isinstance(raw, float):
    return int(raw) if math.isfinite(raw) and raw.is_integer() else None
  if isinstance(raw, str):
    text = raw.strip()
    if not _NUMERIC_STRING_RE.fullmatch(text):
      return None
    try:
      return int(text)
    except ValueError:
      pass
    try:
      value = float(text)
    except ValueError:
      return None
    return int(value) if math.isfinite(value) and value.is_integer() else None
  return None


def _validate_destination(raw: Any) -> str:
  if not isinstance(raw, str) or not raw.strip():
    raise ValidationError("destination", DESTINATION_REQUIRED_MSG)
  return raw.strip()


def _validate_duration_days(raw: Any) -> int:
  days = _coerce_duration_days(raw)
  if days is None or not MIN_DURATION_DAYS <= days <= MAX_DURATION_DAYS:
    raise ValidationError("durationDays", DURATION_INVALID_MSG)
  return days


def _validate_create_request(request: CreateItineraryRequest) -> tuple[str, int]:
  """Return the trimmed destination and integer duration, or raise ValidationError."""
  destination = _validate_destination(request.destination)
  duration_days = _validate_duration_days(request.duration_days)
  return destination, duration_days


def _validate_job_id(job_id: str | None) -> str:
  if job_id is None or not job_id.strip():
    raise ValidationError("jobId", JOB_ID_REQUIRED_MSG)
  return job_id
