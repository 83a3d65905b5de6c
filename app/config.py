"""Application configuration loaded from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from app.utils.env import default_env_path, load_env_file

load_env_file(default_env_path(), override=False)

_SUPPORTED_LLM_PROVIDERS = {"openai", "gemini"}


@dataclass(frozen=True)
class Settings:
  """Typed settings for the itinerary service."""

  environment: str
  debug: bool
  allowed_origins: tuple[str, ...]
  log_max_bytes: int
  log_backup_count: int
  log_http_4xx: bool
  pg_dsn: str | None
  auto_create_tables: bool
  llm_provider: str
  llm_model: str | None
  llm_temperature: float
  openai_api_key: str | None
  gemini_api_key: str | None
  generation_timeout_seconds: float | None
  shutdown_drain_seconds: float


@dataclass(frozen=True)
class DatabaseSettings:
  """Typed settings for database connectivity."""

  debug: bool
  pg_dsn: str | None


def _parse_origins(raw: str | None) -> tuple[str, ...]:
  # Any origin is permitted unless an explicit allow-list is configured.
  if not raw:
    return ("*",)

  origins = [origin.strip() for origin in raw.split(",") if origin.strip()]

  if not origins:
    raise ValueError("ITINERARY_ALLOWED_ORIGINS must include at least one origin.")

  if "*" in origins:
    return ("*",)

  return tuple(origins)


def _parse_bool(raw: str | None) -> bool:
  """Parse a boolean-ish string from environment variables."""

  if raw is None:
    return False

  normalized = raw.strip().lower()
  return normalized in {"1", "true", "yes", "on"}


def _optional_str(raw: str | None) -> str | None:
  if raw is None:
    return None
  value = raw.strip()
  if value == "":
    return None
  return value


def _parse_optional_seconds(raw: str | None, *, name: str) -> float | None:
  if raw is None or raw.strip() == "":
    return None

  value = float(raw)

  if value <= 0:
    raise ValueError(f"{name} must be positive when provided.")

  return value


def _database_dsn() -> str | None:
  # Support fallback to DATABASE_URL for hosted environments.
  return _optional_str(os.getenv("ITINERARY_PG_DSN")) or _optional_str(os.getenv("DATABASE_URL"))


@lru_cache(maxsize=1)
def get_settings() -> Settings:
  """Load settings once per process."""

  environment = os.getenv("ITINERARY_ENV", "development").strip().lower()

  # Toggle SQL echo and verbose diagnostics in non-production environments.
  debug = _parse_bool(os.getenv("ITINERARY_DEBUG"))

  log_max_bytes = int(os.getenv("ITINERARY_LOG_MAX_BYTES", "5242880"))  # 5MB default
  if log_max_bytes <= 0:
    raise ValueError("ITINERARY_LOG_MAX_BYTES must be a positive integer.")

  log_backup_count = int(os.getenv("ITINERARY_LOG_BACKUP_COUNT", "10"))
  if log_backup_count < 0:
    raise ValueError("ITINERARY_LOG_BACKUP_COUNT must be zero or a positive integer.")

  llm_provider = (os.getenv("ITINERARY_LLM_PROVIDER") or "openai").strip().lower()
  if llm_provider not in _SUPPORTED_LLM_PROVIDERS:
    raise ValueError(f"ITINERARY_LLM_PROVIDER must be one of {sorted(_SUPPORTED_LLM_PROVIDERS)}.")

  llm_temperature = float(os.getenv("ITINERARY_LLM_TEMPERATURE", "0.6"))
  if not 0.0 <= llm_temperature <= 2.0:
    raise ValueError("ITINERARY_LLM_TEMPERATURE must be between 0 and 2.")

  shutdown_drain_seconds = float(os.getenv("ITINERARY_SHUTDOWN_DRAIN_SECONDS", "30"))
  if shutdown_drain_seconds < 0:
    raise ValueError("ITINERARY_SHUTDOWN_DRAIN_SECONDS must be zero or positive.")

  return Settings(
    environment=environment,
    debug=debug,
    allowed_origins=_parse_origins(os.getenv("ITINERARY_ALLOWED_ORIGINS")),
    log_max_bytes=log_max_bytes,
    log_backup_count=log_backup_count,
    log_http_4xx=_parse_bool(os.getenv("ITINERARY_LOG_HTTP_4XX")),
    pg_dsn=_database_dsn(),
    auto_create_tables=_parse_bool(os.getenv("ITINERARY_AUTO_CREATE_TABLES")),
    llm_provider=llm_provider,
    llm_model=_optional_str(os.getenv("ITINERARY_LLM_MODEL")),
    llm_temperature=llm_temperature,
    openai_api_key=_optional_str(os.getenv("OPENAI_API_KEY")),
    gemini_api_key=_optional_str(os.getenv("GEMINI_API_KEY")),
    generation_timeout_seconds=_parse_optional_seconds(os.getenv("ITINERARY_GENERATION_TIMEOUT_SECONDS"), name="ITINERARY_GENERATION_TIMEOUT_SECONDS"),
    shutdown_drain_seconds=shutdown_drain_seconds,
  )


@lru_cache(maxsize=1)
def get_database_settings() -> DatabaseSettings:
  """Load database settings without requiring web-runtime configuration."""
  # Keep database configuration isolated so migrations don't require provider credentials.
  return DatabaseSettings(debug=_parse_bool(os.getenv("ITINERARY_DEBUG")), pg_dsn=_database_dsn())
