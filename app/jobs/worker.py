"""Background completion of itinerary generation jobs."""

from __future__ import annotations

import logging
from collections.abc import Callable

import msgspec

from app.ai.generator import ItineraryGenerator
from app.core.errors import GenerationError
from app.jobs.models import COMPLETED, FAILED, PROCESSING, JobRecord, TerminalUpdate
from app.schema.itinerary import ItineraryDocument, itinerary_to_builtins, validate_itinerary_document
from app.storage.jobs_repo import JobsRepository
from app.utils.timestamps import utc_now_iso


def describe_failure(exc: BaseException) -> str:
  """Return the message recorded in a failed job's `error` column."""
  message = str(exc).strip()
  if isinstance(exc, GenerationError) and message:
    return message
  if message:
    return f"{type(exc).__name__}: {message}"
  return type(exc).__name__


class ItineraryJobProcessor:
  """Drives one processing job to exactly one terminal state."""

  def __init__(self, *, jobs_repo: JobsRepository, generator: ItineraryGenerator, now: Callable[[], str] = utc_now_iso) -> None:
    self._jobs_repo = jobs_repo
    self._generator = generator
    self._now = now
    self._logger = logging.getLogger(__name__)

  async def process_job(self, job: JobRecord) -> JobRecord | None:
    """Generate the itinerary for `job` and persist the terminal outcome.

    Never raises: every failure, including unexpected ones, is recorded as a
    `failed` write. Returns the terminal record when this call wrote it, the
    job unchanged when it was not processing, and None when nothing was written.
    """
    if job.status != PROCESSING:
      self._logger.info("Skipping job %s in status %s", job.job_id, job.status)
      return job

    try:
      terminal = await self._generate_terminal_update(job)
    except GenerationError as exc:
      self._logger.warning("Generation failed for job %s stage=%s: %s", job.job_id, exc.stage, exc)
      terminal = TerminalUpdate.failed(error=describe_failure(exc), completed_at=self._completed_at(job))
    except Exception as exc:  # noqa: BLE001
      self._logger.error("Unexpected error while generating job %s", job.job_id, exc_info=True)
      terminal = TerminalUpdate.failed(error=describe_failure(exc), completed_at=self._completed_at(job))

    return await self._write_terminal(job, terminal)

  async def _generate_terminal_update(self, job: JobRecord) -> TerminalUpdate:
    raw = await self._generator.generate(destination=job.destination, duration_days=job.duration_days)

    ok, errors, document = validate_itinerary_document(raw, duration_days=job.duration_days)
    if not ok or document is None:
      raise GenerationError(f"Model output failed validation: {'; '.join(errors)}", stage="validation")

    document = self._apply_server_fields(document, job, completed_at=self._completed_at(job))
    return self._terminal_from_document(document)

  @staticmethod
  def _apply_server_fields(document: ItineraryDocument, job: JobRecord, *, completed_at: str) -> ItineraryDocument:
    """Replace every field the model echoed back with the value the server already knows."""
    return msgspec.structs.replace(document, status=COMPLETED, destination=job.destination, duration_days=job.duration_days, created_at=job.created_at, completed_at=completed_at, error=None)

  @staticmethod
  def _terminal_from_document(document: ItineraryDocument) -> TerminalUpdate:
    """Build the completed write from a merged document; its `itinerary` is the only model-supplied part."""
    if document.status != COMPLETED or document.completed_at is None or document.error is not None:
      raise GenerationError("Merged itinerary document is not a completed result", stage="validation")
    return TerminalUpdate.completed(itinerary=itinerary_to_builtins(document), completed_at=document.completed_at)

  def _completed_at(self, job: JobRecord) -> str:
    # Both timestamps share one fixed-width UTC format, so string order is time order.
    now = self._now()
    return now if now >= job.created_at else job.created_at

  async def _write_terminal(self, job: JobRecord, terminal: TerminalUpdate) -> JobRecord | None:
    try:
      applied = await self._jobs_repo.finalize_job(job.job_id, terminal)
    except Exception as exc:  # noqa: BLE001
      if terminal.status == FAILED:
        self._logger.error("Could not record failure for job %s", job.job_id, exc_info=True)
        return None
      self._logger.error("Could not persist itinerary for job %s; recording failure instead", job.job_id, exc_info=True)
      terminal = TerminalUpdate.failed(error=f"Failed to persist itinerary: {describe_failure(exc)}", completed_at=self._completed_at(job))
      try:
        applied = await self._jobs_repo.finalize_job(job.job_id, terminal)
      except Exception:  # noqa: BLE001
        self._logger.error("Could not record failure for job %s", job.job_id, exc_info=True)
        return None

    if not applied:
      self._logger.warning("Terminal update for job %s was not applied", job.job_id)
      return None

    self._logger.info("Job %s finished with status=%s", job.job_id, terminal.status)
    return terminal.apply_to(job)
