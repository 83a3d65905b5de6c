import logging
from typing import Any

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.api.models import ErrorResponse
from app.core.errors import NotFoundError, ValidationError
from app.core.middleware import build_cors_headers

logger = logging.getLogger("uvicorn.error")


def _coerce_json_safe(value: Any) -> Any:
  """Convert unsupported values into JSON-safe primitives for error responses."""
  if value is None or isinstance(value, bool | int | float | str):
    return value
  if isinstance(value, dict):
    return {str(key): _coerce_json_safe(item) for key, item in value.items()}
  if isinstance(value, list | tuple | set):
    return [_coerce_json_safe(item) for item in value]
  # Serialize exception instances explicitly to avoid leaking non-serializable objects.
  if isinstance(value, BaseException):
    error_message = str(value)
    if error_message:
      return f"{type(value).__name__}: {error_message}"
    return type(value).__name__
  return str(value)


def _error_payload(error: Any, *, request_id: str | None = None) -> dict[str, Any]:
  """Build the error envelope, attaching the request id so reports can be matched to logs."""
  return ErrorResponse(error=_coerce_json_safe(error), request_id=request_id).model_dump(by_alias=True, exclude_none=True)


def _request_id(request: Request) -> str | None:
  return getattr(request.state, "request_id", None)


def _sanitize_validation_errors(errors: list[dict[str, Any]] | tuple[dict[str, Any], ...]) -> list[dict[str, Any]]:
  """Return validation errors without raw input payloads."""
  sanitized: list[dict[str, Any]] = []
  for error in errors:
    scrubbed = {key: value for key, value in error.items() if key != "input"}
    if "ctx" in scrubbed and isinstance(scrubbed["ctx"], dict):
      scrubbed_ctx = dict(scrubbed["ctx"])
      scrubbed_ctx.pop("input", None)
      scrubbed["ctx"] = scrubbed_ctx

    sanitized.append(_coerce_json_safe(scrubbed))

  return sanitized


async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
  """Report invalid client input as a 400 with the field-specific message."""
  from app.config import get_settings

  if get_settings().log_http_4xx:
    logger.warning("Invalid request request_id=%s path=%s field=%s", _request_id(request), request.url.path, exc.field)
  return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=_error_payload(exc.message, request_id=_request_id(request)))


async def not_found_error_handler(request: Request, exc: NotFoundError) -> JSONResponse:
  """Report an unknown job id as a 404."""
  from app.config import get_settings

  if get_settings().log_http_4xx:
    logger.warning("Unknown job request_id=%s job_id=%s", _request_id(request), exc.job_id)
  return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content=_error_payload(str(exc), request_id=_request_id(request)))


async def request_validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
  """Log request validation errors for debugging without leaking payloads."""
  request_id = _request_id(request)
  sanitized_errors = _sanitize_validation_errors(exc.errors())
  logger.warning("Request validation failed request_id=%s path=%s method=%s errors=%s", request_id, request.url.path, request.method, sanitized_errors)
  return JSONResponse(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, content=_error_payload(sanitized_errors, request_id=request_id))


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
  """Handle routing and HTTP errors while avoiding leaking internal diagnostics."""
  from app.config import get_settings

  request_id = _request_id(request)
  # Log 5xx HTTPExceptions with a traceback for diagnostics; do not expose `exc.detail` to callers.
  if exc.status_code >= 500:
    logger.error("HTTPException request_id=%s path=%s status_code=%s detail=%s", request_id, request.url.path, exc.status_code, exc.detail, exc_info=True)
    return JSONResponse(status_code=exc.status_code, content=_error_payload("Internal Server Error", request_id=request_id))

  if get_settings().log_http_4xx:
    logger.warning("HTTPException request_id=%s path=%s status_code=%s detail=%s", request_id, request.url.path, exc.status_code, exc.detail)

  return JSONResponse(status_code=exc.status_code, content=_error_payload(exc.detail, request_id=request_id), headers=exc.headers)


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
  """Global exception handler to catch unhandled errors."""
  from app.config import get_settings

  request_id = _request_id(request)
  logger.error("Global exception request_id=%s path=%s error_type=%s", request_id, request.url.path, type(exc).__name__, exc_info=exc)
  # This handler runs outside the middleware stack, so CORS and request-id headers are attached here.
  headers = build_cors_headers(get_settings().allowed_origins, request.headers.get("origin"))
  if request_id:
    headers["x-request-id"] = request_id
  return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=_error_payload("Internal Server Error", request_id=request_id), headers=headers)
