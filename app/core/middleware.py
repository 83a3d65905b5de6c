import logging
import time
import uuid
from collections.abc import Iterable
from typing import Any

from starlette.datastructures import Headers, MutableHeaders
from starlette.types import ASGIApp, Receive, Scope, Send

logger = logging.getLogger("app.core.middleware")

CORS_ALLOW_METHODS = "GET,POST,OPTIONS"
CORS_ALLOW_HEADERS = "Content-Type, Authorization"


def build_cors_headers(allowed_origins: Iterable[str], origin: str | None) -> dict[str, str]:
  """Return the CORS headers for a response to a request from `origin`."""
  headers = {"Access-Control-Allow-Methods": CORS_ALLOW_METHODS, "Access-Control-Allow-Headers": CORS_ALLOW_HEADERS}
  allowed = tuple(allowed_origins)
  if "*" in allowed:
    headers["Access-Control-Allow-Origin"] = "*"
  elif origin and origin in allowed:
    # Echo explicit origins and mark the response as varying by origin for caches.
    headers["Access-Control-Allow-Origin"] = origin
    headers["Vary"] = "Origin"
  return headers


def _build_request_url(scope: Scope) -> str:
  """Return the request path plus query string, as logged."""
  path = scope.get("path", "")
  query_string = scope.get("query_string", b"")
  if query_string:
    return f"{path}?{query_string.decode('latin-1')}"

  return path


class CorsMiddleware:
  """Attach CORS headers to every response and answer OPTIONS requests with an empty 204."""

  def __init__(self, app: ASGIApp, allowed_origins: Iterable[str] = ("*",)) -> None:
    self.app = app
    self.allowed_origins = tuple(allowed_origins)

  async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
    if scope["type"] != "http":
      await self.app(scope, receive, send)
      return

    cors_headers = build_cors_headers(self.allowed_origins, Headers(scope=scope).get("origin"))

    # Pre-flight requests never reach the routers.
    if scope.get("method") == "OPTIONS":
      raw_headers = [(key.lower().encode("latin-1"), value.encode("latin-1")) for key, value in cors_headers.items()]
      await send({"type": "http.response.start", "status": 204, "headers": raw_headers})
      await send({"type": "http.response.body", "body": b"", "more_body": False})
      return

    async def send_wrapper(message: dict[str, Any]) -> None:
      if message["type"] == "http.response.start":
        headers = MutableHeaders(scope=message)
        for key, value in cors_headers.items():
          headers[key] = value

      await send(message)

    await self.app(scope, receive, send_wrapper)


class RequestLoggingMiddleware:
  """Tag each request with an id, echo it in `x-request-id` and log one line per response."""

  def __init__(self, app: ASGIApp) -> None:
    self.app = app

  async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
    if scope["type"] != "http":
      await self.app(scope, receive, send)
      return

    # Callers may supply their own id; otherwise one is minted here.
    request_id = Headers(scope=scope).get("x-request-id") or uuid.uuid4().hex
    scope.setdefault("state", {})["request_id"] = request_id

    method = scope.get("method", "UNKNOWN")
    target = _build_request_url(scope)
    started = time.perf_counter()
    response_status = 0

    async def tag_response(message: dict[str, Any]) -> None:
      nonlocal response_status
      if message["type"] == "http.response.start":
        response_status = message["status"]
        MutableHeaders(scope=message).setdefault("x-request-id", request_id)
      await send(message)

    try:
      await self.app(scope, receive, tag_response)
    finally:
      elapsed_ms = (time.perf_counter() - started) * 1000
      logger.info("%s %s -> %s request_id=%s (%.1fms)", method, target, response_status, request_id, elapsed_ms)
