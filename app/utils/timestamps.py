"""UTC timestamp helpers shared by the request and background paths."""

from __future__ import annotations

from datetime import UTC, datetime

_ISO_FORMAT = "%Y-%m-%dT%H:%M:%S"


def format_iso(moment: datetime) -> str:
  """Render an aware datetime as an ISO-8601 UTC string with millisecond precision."""
  moment = moment.astimezone(UTC)
  return f"{moment.strftime(_ISO_FORMAT)}.{moment.microsecond // 1000:03d}Z"


def utc_now_iso() -> str:
  return format_iso(datetime.now(UTC))
