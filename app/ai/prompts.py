"""Prompt text for itinerary generation."""

from __future__ import annotations

from typing import Final

SYSTEM_PROMPT: Final[str] = """You are a travel planner. Produce a JSON object that STRICTLY conforms to the provided JSON schema.
No explanations. No markdown. No extra keys. Fill all required fields.
Use concise, realistic activities with local tips."""

_USER_TEMPLATE: Final[str] = """Destination: {{DESTINATION}}
Duration (days): {{DURATION_DAYS}}

Requirements:
- Return exactly {{DURATION_DAYS}} day plans, numbered from 1.
- Tailor daily themes to avoid repetition.
- Balance mornings/afternoons/evenings.
- Include short practical tips (tickets, reservations, transit hints).
- Respect the JSON schema exactly."""


def _replace_placeholders(template: str, values: dict[str, str]) -> str:
  """Substitute {{PLACEHOLDER}} markers with request values."""
  rendered = template
  for key, value in values.items():
    rendered = rendered.replace(f"{{{{{key}}}}}", value)

  return rendered


def render_itinerary_prompt(*, destination: str, duration_days: int) -> str:
  """Build the user prompt for one itinerary request."""
  return _replace_placeholders(_USER_TEMPLATE, {"DESTINATION": destination, "DURATION_DAYS": str(duration_days)})
