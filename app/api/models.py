from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from app.jobs.models import JobStatus


class CreateItineraryRequest(BaseModel):
  """Raw create-job payload; field checks happen in the service so errors stay field-specific."""

  destination: Any = Field(default=None, description="Trip destination.", examples=["Kyoto"])
  duration_days: Any = Field(default=None, alias="durationDays", description="Trip length in days (1-30).", examples=[3])
  model_config = ConfigDict(extra="ignore", populate_by_name=True)


class JobCreateResponse(BaseModel):
  """Response returned when a generation job is accepted."""

  job_id: str = Field(alias="jobId")
  model_config = ConfigDict(populate_by_name=True)


class JobStatusResponse(BaseModel):
  """Snapshot of a stored itinerary job."""

  status: JobStatus
  destination: str
  duration_days: int = Field(alias="durationDays")
  created_at: str = Field(alias="createdAt")
  completed_at: str | None = Field(default=None, alias="completedAt")
  itinerary: list[dict[str, Any]] | None = None
  error: str | None = None
  model_config = ConfigDict(populate_by_name=True)


class ErrorResponse(BaseModel):
  """Error envelope returned for client and server errors."""

  error: Any
  request_id: str | None = Field(default=None, alias="requestId")
  model_config = ConfigDict(populate_by_name=True)
