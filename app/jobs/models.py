"""Domain models for asynchronous itinerary generation jobs."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Final, Literal

JobStatus = Literal["processing", "completed", "failed"]

PROCESSING: Final[JobStatus] = "processing"
COMPLETED: Final[JobStatus] = "completed"
FAILED: Final[JobStatus] = "failed"
TERMINAL_STATUSES: Final[frozenset[str]] = frozenset({COMPLETED, FAILED})

# The only transitions a job can make; terminal states have no outgoing edges.
_ALLOWED_TRANSITIONS: Final[dict[str, frozenset[str]]] = {PROCESSING: frozenset({COMPLETED, FAILED}), COMPLETED: frozenset(), FAILED: frozenset()}


class InvalidTransitionError(RuntimeError):
  """Raised when a status change would leave the job state machine."""


def is_terminal(status: str) -> bool:
  return status in TERMINAL_STATUSES


def ensure_transition(current: str, target: str) -> None:
  """Raise unless `current -> target` is an edge of the job state machine."""
  allowed = _ALLOWED_TRANSITIONS.get(current)
  if allowed is None:
    raise InvalidTransitionError(f"Unknown job status '{current}'.")
  if target not in allowed:
    raise InvalidTransitionError(f"Job cannot move from '{current}' to '{target}'.")


@dataclass(frozen=True)
class JobRecord:
  """Represents one itinerary generation job and its lifecycle state."""

  job_id: str
  status: JobStatus
  destination: str
  duration_days: int
  created_at: str
  completed_at: str | None = None
  itinerary: list[dict[str, Any]] | None = None
  error: str | None = None

  def consistency_problems(self) -> list[str]:
    """Return every way the status/result fields disagree with each other."""
    problems: list[str] = []
    if self.status == PROCESSING:
      if self.completed_at is not None:
        problems.append("processing job has completed_at set")
      if self.itinerary is not None:
        problems.append("processing job has an itinerary")
      if self.error is not None:
        problems.append("processing job has an error")
    elif self.status == COMPLETED:
      if self.completed_at is None:
        problems.append("completed job is missing completed_at")
      if not isinstance(self.itinerary, list):
        problems.append("completed job is missing its itinerary")
      if self.error is not None:
        problems.append("completed job has an error")
    elif self.status == FAILED:
      if self.completed_at is None:
        problems.append("failed job is missing completed_at")
      if self.itinerary is not None:
        problems.append("failed job has an itinerary")
      if not self.error:
        problems.append("failed job is missing its error message")
    else:
      problems.append(f"unknown status '{self.status}'")
    return problems

  def check_consistency(self) -> None:
    problems = self.consistency_problems()
    if problems:
      raise InvalidTransitionError(f"Job {self.job_id} is inconsistent: {'; '.join(problems)}.")


@dataclass(frozen=True)
class TerminalUpdate:
  """The single write that moves a processing job into a terminal state."""

  status: JobStatus
  completed_at: str
  itinerary: list[dict[str, Any]] | None = None
  error: str | None = None

  @classmethod
  def completed(cls, *, itinerary: list[dict[str, Any]], completed_at: str) -> TerminalUpdate:
    return cls(status=COMPLETED, completed_at=completed_at, itinerary=itinerary, error=None)

  @classmethod
  def failed(cls, *, error: str, completed_at: str) -> TerminalUpdate:
    # A failed record must always carry a non-empty message.
    return cls(status=FAILED, completed_at=completed_at, itinerary=None, error=error.strip() or "Generation failed")

  def apply_to(self, record: JobRecord) -> JobRecord:
    """Return `record` after this update, enforcing the state machine and record invariants."""
    ensure_transition(record.status, self.status)
    updated = JobRecord(
      job_id=record.job_id,
      status=self.status,
      destination=record.destination,
      duration_days=record.duration_days,
      created_at=record.created_at,
      completed_at=self.completed_at,
      itinerary=self.itinerary,
      error=self.error,
    )
    updated.check_consistency()
    return updated
