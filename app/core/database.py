from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from app.config import get_database_settings


class Base(DeclarativeBase):
  pass


engine: AsyncEngine | None = None
SessionLocal: async_sessionmaker[AsyncSession] | None = None


def normalize_database_url(raw: str | None) -> str | None:
  """Map plain postgres DSNs onto the asyncpg driver; leave explicit drivers untouched."""
  if not raw:
    return None
  if raw.startswith("postgres://"):
    return raw.replace("postgres://", "postgresql+asyncpg://", 1)
  if raw.startswith("postgresql://"):
    return raw.replace("postgresql://", "postgresql+asyncpg://", 1)
  return raw


def _database_url() -> str | None:
  return normalize_database_url(get_database_settings().pg_dsn)


DATABASE_URL = _database_url()


def get_db_engine() -> AsyncEngine | None:
  global engine
  settings = get_database_settings()
  database_url = _database_url()
  if engine is None and database_url:
    engine = create_async_engine(database_url, echo=settings.debug, future=True)
  return engine


def get_session_factory() -> async_sessionmaker[AsyncSession] | None:
  global SessionLocal
  if SessionLocal is None:
    db_engine = get_db_engine()
    if db_engine:
      SessionLocal = async_sessionmaker(bind=db_engine, expire_on_commit=False, class_=AsyncSession)
  return SessionLocal


async def create_tables() -> bool:
  """Create all mapped tables on the configured engine. Returns False when no database is configured."""
  # Import the table module so its metadata is registered on Base.
  import app.schema.jobs  # noqa: F401

  db_engine = get_db_engine()
  if db_engine is None:
    return False
  async with db_engine.begin() as connection:
    await connection.run_sync(Base.metadata.create_all)
  return True


async def dispose_engine() -> None:
  """Close pooled connections and forget the cached engine."""
  global engine, SessionLocal
  if engine is not None:
    await engine.dispose()
  engine = None
  SessionLocal = None

