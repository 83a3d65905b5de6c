"""Storage interface for itinerary jobs."""

from __future__ import annotations

from typing import Protocol

from app.jobs.models import JobRecord, TerminalUpdate


class JobsRepository(Protocol):
  """Repository contract for job persistence.

  Operations are id-scoped: insert once, read many, finalize once.
  """

  async def create_job(self, record: JobRecord) -> None:
    """Persist an initial processing job record."""

  async def get_job(self, job_id: str) -> JobRecord | None:
    """Fetch a job by identifier."""

  async def finalize_job(self, job_id: str, terminal: TerminalUpdate) -> bool:
    """Apply the terminal update only while the job is still processing.

    Returns True when this call performed the transition and False when the
    job is unknown or already terminal, leaving the stored row untouched.
    """
