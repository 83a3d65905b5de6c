from fastapi import APIRouter, Depends, Request, status

from app.api.models import CreateItineraryRequest, JobCreateResponse, JobStatusResponse
from app.api.msgspec_utils import read_json_object
from app.config import Settings, get_settings
from app.services import jobs as job_service

router = APIRouter()


@router.post("", response_model=JobCreateResponse, status_code=status.HTTP_202_ACCEPTED)
async def create_itinerary(  # noqa: B008
  request: Request,
  settings: Settings = Depends(get_settings),  # noqa: B008
) -> JobCreateResponse:
  """Accept an itinerary request and return the job id to poll."""
  payload = await read_json_object(request)
  return await job_service.create_job(CreateItineraryRequest.model_validate(payload), settings)


@router.get("/", response_model=JobStatusResponse, include_in_schema=False)
async def get_itinerary_without_id(  # noqa: B008
  settings: Settings = Depends(get_settings),  # noqa: B008
) -> JobStatusResponse:
  """Reject status lookups that omit the job id."""
  return await job_service.get_job_status(None, settings)


@router.get("/{job_id}", response_model=JobStatusResponse)
async def get_itinerary_status(  # noqa: B008
  job_id: str,
  settings: Settings = Depends(get_settings),  # noqa: B008
) -> JobStatusResponse:
  """Fetch the current status and, once finished, the itinerary or error of a job."""
  return await job_service.get_job_status(job_id, settings)
