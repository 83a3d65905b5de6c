"""Error taxonomy for the itinerary job lifecycle."""

from __future__ import annotations

from typing import Literal

GenerationStage = Literal["provider", "parse", "validation", "timeout"]


class ItineraryError(Exception):
  """Base class for errors raised by the itinerary service."""


class ValidationError(ItineraryError):
  """Client input is malformed or out of range; no job is created."""

  def __init__(self, field: str, message: str) -> None:
    super().__init__(message)
    self.field = field
    self.message = message


class NotFoundError(ItineraryError):
  """No job record exists for the requested id."""

  def __init__(self, job_id: str) -> None:
    super().__init__("Not found")
    self.job_id = job_id


class GenerationError(ItineraryError):
  """The generator failed, returned unparseable output, or output failed validation.

  Only ever recorded in the job's `error` column; never returned to a caller.
  """

  def __init__(self, message: str, *, stage: GenerationStage) -> None:
    super().__init__(message)
    self.stage = stage
