from app.core.middleware import _build_request_url, build_cors_headers


def test_wildcard_origin_allows_everyone() -> None:
  headers = build_cors_headers(("*",), None)
  assert headers == {"Access-Control-Allow-Methods": "GET,POST,OPTIONS", "Access-Control-Allow-Headers": "Content-Type, Authorization", "Access-Control-Allow-Origin": "*"}


def test_listed_origin_is_echoed() -> None:
  headers = build_cors_headers(("https://app.example",), "https://app.example")
  assert headers["Access-Control-Allow-Origin"] == "https://app.example"
  assert headers["Vary"] == "Origin"


def test_unlisted_origin_gets_no_allow_origin() -> None:
  headers = build_cors_headers(("https://app.example",), "https://evil.example")
  assert "Access-Control-Allow-Origin" not in headers
  assert headers["Access-Control-Allow-Methods"] == "GET,POST,OPTIONS"


def test_request_url_includes_query_string() -> None:
  assert _build_request_url({"path": "/api/itineraries/abc", "query_string": b"x=1"}) == "/api/itineraries/abc?x=1"
  assert _build_request_url({"path": "/health"}) == "/health"
