"""Keeps detached job tasks alive until they finish."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Coroutine
from typing import Any

logger = logging.getLogger(__name__)


class JobRunner:
  """Run one background task per job independently of the request that created it.

  The runner holds a strong reference to every task until it completes so the
  event loop cannot garbage-collect in-flight work, and `drain` lets the
  application lifespan wait for outstanding jobs before shutting down.
  """

  def __init__(self) -> None:
    self._active_tasks: dict[str, asyncio.Task[None]] = {}

  @property
  def pending_count(self) -> int:
    """Number of jobs still running."""
    return len(self._active_tasks)

  def is_active(self, job_id: str) -> bool:
    return job_id in self._active_tasks

  def submit(self, job_id: str, work: Coroutine[Any, Any, None]) -> asyncio.Task[None]:
    """Schedule `work` for `job_id` on the running loop and return its task."""
    if job_id in self._active_tasks:
      work.close()
      raise RuntimeError(f"Job {job_id} already has a background task.")

    task = asyncio.get_running_loop().create_task(work, name=f"itinerary-job:{job_id}")
    self._active_tasks[job_id] = task
    task.add_done_callback(lambda finished: self._on_task_done(job_id, finished))
    return task

  def _on_task_done(self, job_id: str, task: asyncio.Task[None]) -> None:
    """Forget a finished task and log failures that escaped it."""
    if self._active_tasks.get(job_id) is task:
      del self._active_tasks[job_id]

    if task.cancelled():
      logger.warning("Background task for job %s was cancelled", job_id)
      return

    exc = task.exception()
    if exc is not None:
      logger.error("Background task for job %s failed", job_id, exc_info=exc)

  async def drain(self, timeout: float | None = None) -> int:
    """Wait for running tasks to finish. Returns how many were still running at the deadline."""
    tasks = list(self._active_tasks.values())
    if not tasks:
      return 0

    logger.info("Waiting for %d background job(s) to finish", len(tasks))
    _done, pending = await asyncio.wait(tasks, timeout=timeout)
    if pending:
      logger.warning("%d background job(s) still running after %.1fs drain", len(pending), timeout or 0.0)
    return len(pending)


_RUNNER = JobRunner()


def get_job_runner() -> JobRunner:
  """Return the process-wide job runner."""
  return _RUNNER
