"""Repository factories resolved from settings."""

from __future__ import annotations

from app.config import Settings
from app.storage.jobs_repo import JobsRepository

_JOBS_REPO: JobsRepository | None = None


def _get_jobs_repo(settings: Settings) -> JobsRepository:
  """Return the process-wide jobs repository for the configured database."""
  global _JOBS_REPO
  if _JOBS_REPO is None:
    from app.storage.postgres_jobs_repo import PostgresJobsRepository

    if not settings.pg_dsn:
      raise RuntimeError("Database connection is not configured (ITINERARY_PG_DSN is missing).")
    _JOBS_REPO = PostgresJobsRepository()
  return _JOBS_REPO
