"""SQL-backed repository for itinerary jobs using SQLAlchemy."""

from __future__ import annotations

import json
import logging
from typing import Any

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.core.database import get_session_factory
from app.jobs.models import PROCESSING, JobRecord, TerminalUpdate, is_terminal
from app.schema.jobs import ItineraryJob
from app.storage.jobs_repo import JobsRepository

logger = logging.getLogger(__name__)


class PostgresJobsRepository(JobsRepository):
  """Persist itinerary jobs to Postgres (or any SQLAlchemy async database)."""

  def __init__(self, session_factory: async_sessionmaker[AsyncSession] | None = None) -> None:
    self._session_factory = session_factory or get_session_factory()
    if self._session_factory is None:
      raise RuntimeError("Database not initialized")

  async def create_job(self, record: JobRecord) -> None:
    record.check_consistency()
    async with self._session_factory() as session:
      row = ItineraryJob(
        id=record.job_id,
        status=record.status,
        destination=record.destination,
        duration_days=record.duration_days,
        created_at=record.created_at,
        completed_at=record.completed_at,
        itinerary_json=_dump_itinerary(record.itinerary),
        error=record.error,
      )
      session.add(row)
      await session.commit()

  async def get_job(self, job_id: str) -> JobRecord | None:
    async with self._session_factory() as session:
      row = await session.get(ItineraryJob, job_id)
      if row is None:
        return None
      return self._model_to_record(row)

  async def finalize_job(self, job_id: str, terminal: TerminalUpdate) -> bool:
    async with self._session_factory() as session:
      row = await session.get(ItineraryJob, job_id)
      if row is None:
        logger.warning("Terminal update for unknown job %s ignored", job_id)
        return False
      if is_terminal(row.status):
        logger.warning("Job %s already %s; ignoring repeated %s update", job_id, row.status, terminal.status)
        return False

      # Validate the resulting record before touching the row.
      terminal.apply_to(self._model_to_record(row))

      values: dict[str, Any] = {"status": terminal.status, "completed_at": terminal.completed_at, "error": terminal.error}
      if terminal.itinerary is not None:
        values["itinerary_json"] = _dump_itinerary(terminal.itinerary)

      # Guard on status so a concurrent or repeated writer cannot overwrite a terminal row.
      stmt = update(ItineraryJob).where(ItineraryJob.id == job_id, ItineraryJob.status == PROCESSING).values(**values).execution_options(synchronize_session=False)
      result = await session.execute(stmt)
      await session.commit()
      applied = result.rowcount == 1
      if not applied:
        logger.warning("Job %s left processing before its %s update landed", job_id, terminal.status)
      return applied

  @staticmethod
  def _model_to_record(row: ItineraryJob) -> JobRecord:
    return JobRecord(
      job_id=row.id,
      status=row.status,  # type: ignore[arg-type]
      destination=row.destination,
      duration_days=int(row.duration_days),
      created_at=row.created_at,
      completed_at=row.completed_at,
      itinerary=json.loads(row.itinerary_json) if row.itinerary_json else None,
      error=row.error,
    )


def _dump_itinerary(itinerary: list[dict[str, Any]] | None) -> str | None:
  if itinerary is None:
    return None
  return json.dumps(itinerary, ensure_ascii=False, separators=(",", ":"))
