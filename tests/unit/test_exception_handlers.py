"""Unit tests for API error envelopes and sanitization behavior."""

from __future__ import annotations

from app.core.exceptions import _error_payload, _sanitize_validation_errors


def test_sanitize_validation_errors_removes_input_and_serializes_exception_ctx() -> None:
  """Ensure validation errors stay JSON-serializable and redact raw request payloads."""
  errors = [{"type": "value_error", "loc": ("body", "durationDays"), "msg": "Value error, not a number.", "input": {"durationDays": "x"}, "ctx": {"error": ValueError("not a number"), "input": {"durationDays": "x"}}}]
  sanitized = _sanitize_validation_errors(errors)
  assert "input" not in sanitized[0]
  assert sanitized[0]["loc"] == ["body", "durationDays"]
  assert sanitized[0]["ctx"]["error"] == "ValueError: not a number"
  assert "input" not in sanitized[0]["ctx"]


def test_error_payload_uses_camel_case_request_id() -> None:
  assert _error_payload("Not found", request_id="req-1") == {"error": "Not found", "requestId": "req-1"}
  assert _error_payload("Not found") == {"error": "Not found"}
