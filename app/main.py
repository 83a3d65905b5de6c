from __future__ import annotations

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.api.routes import itineraries
from app.config import get_settings
from app.core.errors import NotFoundError, ValidationError
from app.core.exceptions import global_exception_handler, http_exception_handler, not_found_error_handler, request_validation_exception_handler, validation_error_handler
from app.core.lifespan import lifespan
from app.core.middleware import CorsMiddleware, RequestLoggingMiddleware

settings = get_settings()

app = FastAPI(title="Itinerary Engine", lifespan=lifespan, docs_url=None, redoc_url=None, openapi_url=None)

# Add exception handlers
app.add_exception_handler(Exception, global_exception_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
app.add_exception_handler(ValidationError, validation_error_handler)
app.add_exception_handler(NotFoundError, not_found_error_handler)

# Add middleware; the last one added wraps the others.
app.add_middleware(CorsMiddleware, allowed_origins=settings.allowed_origins)
app.add_middleware(RequestLoggingMiddleware)


@app.get("/health", include_in_schema=False)
async def health_check() -> dict[str, str]:
  """Return a simple health status."""
  return {"status": "ok", "version": "0.1.0"}


app.include_router(itineraries.router, prefix="/api/itineraries", tags=["itineraries"])
