from app.schema.itinerary import ITINERARY_JSON_SCHEMA, itinerary_to_builtins, validate_itinerary_document
from tests.conftest import make_document


def test_valid_document_passes() -> None:
  ok, errors, document = validate_itinerary_document(make_document("Kyoto", 3), duration_days=3)

  assert ok
  assert errors == []
  assert document is not None
  assert document.duration_days == 3
  assert [day.day for day in document.itinerary] == [1, 2, 3]


def test_day_count_must_match_requested_duration() -> None:
  ok, errors, document = validate_itinerary_document(make_document("Kyoto", 2), duration_days=3)

  assert not ok
  assert document is None
  assert errors == ["$.itinerary: expected 3 day plans, got 2"]


def test_non_object_payload_is_rejected() -> None:
  ok, errors, _ = validate_itinerary_document([1, 2, 3], duration_days=3)
  assert not ok
  assert "expected a JSON object" in errors[0]


def test_unknown_keys_are_rejected() -> None:
  ok, errors, _ = validate_itinerary_document(make_document(budget="cheap"), duration_days=3)
  assert not ok
  assert errors


def test_nested_unknown_keys_are_rejected() -> None:
  document = make_document("Kyoto", 1)
  document["itinerary"][0]["activities"][0]["price"] = 12
  ok, _, _ = validate_itinerary_document(document, duration_days=1)
  assert not ok


def test_missing_required_field_is_rejected() -> None:
  document = make_document()
  del document["error"]
  ok, errors, _ = validate_itinerary_document(document, duration_days=3)
  assert not ok
  assert "error" in errors[0]


def test_wrong_types_are_not_coerced() -> None:
  document = make_document("Kyoto", 1)
  document["itinerary"][0]["day"] = "1"
  ok, _, _ = validate_itinerary_document(document, duration_days=1)
  assert not ok


def test_status_outside_enum_is_rejected() -> None:
  ok, _, _ = validate_itinerary_document(make_document(status="done"), duration_days=3)
  assert not ok


def test_itinerary_to_builtins_returns_plain_day_plans() -> None:
  _, _, document = validate_itinerary_document(make_document("Kyoto", 1), duration_days=1)
  assert document is not None
  assert itinerary_to_builtins(document) == make_document("Kyoto", 1)["itinerary"]


def test_json_schema_forbids_extra_keys_at_every_level() -> None:
  day_schema = ITINERARY_JSON_SCHEMA["properties"]["itinerary"]["items"]
  activity_schema = day_schema["properties"]["activities"]["items"]
  for schema in (ITINERARY_JSON_SCHEMA, day_schema, activity_schema):
    assert schema["additionalProperties"] is False
    assert set(schema["required"]) == set(schema["properties"])
