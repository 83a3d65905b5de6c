"""Shared fixtures: an in-memory job store, a scripted model and an HTTP client for the app."""

from __future__ import annotations

import asyncio
import os
from typing import Any

# Settings are cached on first import, so the test environment is fixed before the app loads.
for _name in ("ITINERARY_PG_DSN", "DATABASE_URL", "ITINERARY_ALLOWED_ORIGINS", "ITINERARY_GENERATION_TIMEOUT_SECONDS", "ITINERARY_LLM_MODEL"):
  os.environ.pop(_name, None)
os.environ["ITINERARY_ENV"] = "test"
os.environ["ITINERARY_LLM_PROVIDER"] = "openai"
os.environ["OPENAI_API_KEY"] = "sk-test"

import msgspec  # noqa: E402
import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from app.ai.generator import ItineraryGenerator  # noqa: E402
from app.ai.providers.base import AIModel, ModelResponse  # noqa: E402
from app.jobs.models import JobRecord, TerminalUpdate, is_terminal  # noqa: E402
from app.jobs.runner import get_job_runner  # noqa: E402
from app.main import app  # noqa: E402


def make_document(destination: str = "Kyoto", duration_days: int = 3, **overrides: Any) -> dict[str, Any]:
  """Build a generator document that satisfies the itinerary contract."""
  document: dict[str, Any] = {
    "status": "completed",
    "destination": destination,
    "durationDays": duration_days,
    "createdAt": "2020-01-01T00:00:00.000Z",
    "completedAt": "2020-01-01T00:00:01.000Z",
    "itinerary": [
      {
        "day": day,
        "theme": f"Day {day} highlights",
        "activities": [
          {"time": "09:00", "description": "Temple walk before the crowds", "location": "Higashiyama"},
          {"time": "19:00", "description": "Dinner at a neighborhood izakaya", "location": "Pontocho"},
        ],
      }
      for day in range(1, duration_days + 1)
    ],
    "error": None,
  }
  document.update(overrides)
  return document


class InMemoryJobsRepo:
  """Dict-backed jobs repository with the same terminal-write guarantees as the SQL one."""

  def __init__(self) -> None:
    self.jobs: dict[str, JobRecord] = {}
    self.finalize_calls: list[tuple[str, TerminalUpdate]] = []
    self.get_calls = 0

  async def create_job(self, record: JobRecord) -> None:
    record.check_consistency()
    self.jobs[record.job_id] = record

  async def get_job(self, job_id: str) -> JobRecord | None:
    self.get_calls += 1
    return self.jobs.get(job_id)

  async def finalize_job(self, job_id: str, terminal: TerminalUpdate) -> bool:
    self.finalize_calls.append((job_id, terminal))
    record = self.jobs.get(job_id)
    if record is None or is_terminal(record.status):
      return False
    self.jobs[job_id] = terminal.apply_to(record)
    return True


class ScriptedModel(AIModel):
  """Model double that returns canned content, raises, or waits on a gate."""

  def __init__(self, content: Any = None, *, error: BaseException | None = None, delay: float = 0.0) -> None:
    self.name = "scripted-model"
    self.content = content
    self.error = error
    self.delay = delay
    self.gate: asyncio.Event | None = None
    self.calls: list[dict[str, Any]] = []

  async def generate_structured(self, prompt: str, schema: dict[str, Any], *, schema_name: str, system: str | None = None) -> ModelResponse:
    self.calls.append({"prompt": prompt, "schema": schema, "schema_name": schema_name, "system": system})
    if self.gate is not None:
      await self.gate.wait()
    if self.delay:
      await asyncio.sleep(self.delay)
    if self.error is not None:
      raise self.error
    content = self.content
    if isinstance(content, dict | list):
      content = msgspec.json.encode(content).decode()
    return ModelResponse(content=content, usage={"total_tokens": 42})


@pytest.fixture
def anyio_backend():
  return "asyncio"


@pytest.fixture
def jobs_repo(monkeypatch) -> InMemoryJobsRepo:
  repo = InMemoryJobsRepo()
  monkeypatch.setattr("app.services.jobs._get_jobs_repo", lambda settings: repo)
  return repo


@pytest.fixture
def scripted_model(monkeypatch) -> ScriptedModel:
  model = ScriptedModel(make_document())
  monkeypatch.setattr("app.services.jobs._build_generator", lambda settings: ItineraryGenerator(model))
  return model


@pytest.fixture
async def drain_jobs():
  """Wait for background jobs started by a test."""

  async def _drain() -> None:
    assert await get_job_runner().drain(timeout=5) == 0

  yield _drain
  await get_job_runner().drain(timeout=5)


@pytest.fixture
async def async_client(jobs_repo, scripted_model, drain_jobs):
  async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
    yield client
