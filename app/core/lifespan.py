import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from urllib.parse import urlparse

from fastapi import FastAPI

from app.core.database import create_tables, dispose_engine
from app.core.logging import _initialize_logging
from app.jobs.runner import get_job_runner


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
  """Set up logging and storage on startup; let background jobs finish on shutdown."""
  from app.config import get_settings

  settings = get_settings()
  logger = logging.getLogger("app.core.lifespan")

  try:
    _initialize_logging(settings)
    logger.info("Startup complete - logging verified.")
  except Exception:  # noqa: BLE001
    logger.warning("Initial logging setup failed; continuing with default handlers.", exc_info=True)

  logger.info("Environment=%s provider=%s database=%s", settings.environment, settings.llm_provider, _redact_dsn(settings.pg_dsn))
  if settings.auto_create_tables:
    created = await create_tables()
    logger.info("Auto-create tables %s", "applied" if created else "skipped (no database configured)")

  try:
    yield
  finally:
    # Jobs are detached from requests, so give in-flight ones a chance to write their terminal state.
    still_running = await get_job_runner().drain(timeout=settings.shutdown_drain_seconds)
    if still_running:
      logger.error("Shutting down with %d job(s) still processing", still_running)
    await dispose_engine()


def _redact_dsn(raw: str | None) -> str:
  """Redact credentials from a DSN while keeping host/db visible."""
  if not raw:
    return "<unset>"

  parsed = urlparse(raw)
  if not parsed.scheme:
    return "<invalid>"

  user = parsed.username or ""
  host = parsed.hostname or ""
  port = f":{parsed.port}" if parsed.port else ""
  netloc = f"{user}@{host}{port}" if user else f"{host}{port}"
  database = parsed.path.lstrip("/")
  path = f"/{database}" if database else ""
  return f"{parsed.scheme}://{netloc}{path}"
