import logging

from app.ai.generator import ItineraryGenerator
from app.ai.router import get_itinerary_model
from app.api.models import CreateItineraryRequest, JobCreateResponse, JobStatusResponse
from app.config import Settings
from app.core.errors import NotFoundError
from app.jobs.models import PROCESSING, JobRecord, TerminalUpdate
from app.jobs.runner import get_job_runner
from app.jobs.worker import ItineraryJobProcessor, describe_failure
from app.services.request_validation import _validate_create_request, _validate_job_id
from app.storage.factory import _get_jobs_repo
from app.storage.jobs_repo import JobsRepository
from app.utils.ids import generate_job_id
from app.utils.timestamps import utc_now_iso

logger = logging.getLogger(__name__)


def _job_status_from_record(record: JobRecord) -> JobStatusResponse:
  """Convert a persisted job record into an API response payload."""
  return JobStatusResponse(
    status=record.status,
    destination=record.destination,
    duration_days=record.duration_days,
    created_at=record.created_at,
    completed_at=record.completed_at,
    itinerary=record.itinerary,
    error=record.error,
  )


def _build_generator(settings: Settings) -> ItineraryGenerator:
  """Build the generator for the configured provider and model."""
  return ItineraryGenerator(get_itinerary_model(settings), timeout_seconds=settings.generation_timeout_seconds)


async def create_job(request: CreateItineraryRequest, settings: Settings) -> JobCreateResponse:
  """Create a processing job and start generating its itinerary in the background."""
  destination, duration_days = _validate_create_request(request)

  repo = _get_jobs_repo(settings)
  # The id exists before any generation work starts.
  job_id = generate_job_id()
  record = JobRecord(job_id=job_id, status=PROCESSING, destination=destination, duration_days=duration_days, created_at=utc_now_iso())
  await repo.create_job(record)
  logger.info("Created itinerary job %s destination=%r duration_days=%s", job_id, destination, duration_days)

  _kickoff_job_processing(job_id, settings)
  return JobCreateResponse(job_id=job_id)


async def get_job_status(job_id: str | None, settings: Settings) -> JobStatusResponse:
  """Return the stored state of a job without waiting for it to finish."""
  job_id = _validate_job_id(job_id)
  repo = _get_jobs_repo(settings)
  record = await repo.get_job(job_id)
  if record is None:
    raise NotFoundError(job_id)
  return _job_status_from_record(record)


def _kickoff_job_processing(job_id: str, settings: Settings) -> None:
  """Schedule exactly one background completion task for a freshly inserted job."""
  get_job_runner().submit(job_id, _process_job_async(job_id, settings))


async def _process_job_async(job_id: str, settings: Settings) -> None:
  """Run a processing job in-process until it reaches a terminal state."""
  repo = _get_jobs_repo(settings)
  try:
    record = await repo.get_job(job_id)
    if record is None:
      logger.error("Job %s vanished before background processing started", job_id)
      return
    processor = ItineraryJobProcessor(jobs_repo=repo, generator=_build_generator(settings))
  except Exception as exc:  # noqa: BLE001
    logger.error("Background setup failed for job %s", job_id, exc_info=True)
    await _record_setup_failure(repo, job_id, exc)
    return

  await processor.process_job(record)


async def _record_setup_failure(repo: JobsRepository, job_id: str, exc: Exception) -> None:
  """Mark a job failed when its processor could not even be built."""
  try:
    await repo.finalize_job(job_id, TerminalUpdate.failed(error=describe_failure(exc), completed_at=utc_now_iso()))
  except Exception:  # noqa: BLE001
    logger.error("Could not record setup failure for job %s", job_id, exc_info=True)
