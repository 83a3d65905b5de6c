import pytest

from app.ai.generator import ItineraryGenerator
from app.ai.prompts import SYSTEM_PROMPT, render_itinerary_prompt
from app.core.errors import GenerationError
from app.schema.itinerary import ITINERARY_JSON_SCHEMA, ITINERARY_SCHEMA_NAME
from tests.conftest import ScriptedModel, make_document


def test_prompt_carries_destination_and_duration() -> None:
  prompt = render_itinerary_prompt(destination="Kyoto", duration_days=3)
  assert "Destination: Kyoto" in prompt
  assert "Duration (days): 3" in prompt
  assert "exactly 3 day plans" in prompt
  assert "{{" not in prompt


@pytest.mark.anyio
async def test_generate_sends_schema_and_returns_parsed_document() -> None:
  model = ScriptedModel(make_document("Kyoto", 3))

  result = await ItineraryGenerator(model).generate(destination="Kyoto", duration_days=3)

  assert result == make_document("Kyoto", 3)
  call = model.calls[0]
  assert call["schema"] is ITINERARY_JSON_SCHEMA
  assert call["schema_name"] == ITINERARY_SCHEMA_NAME
  assert call["system"] == SYSTEM_PROMPT
  assert "Kyoto" in call["prompt"]


@pytest.mark.anyio
async def test_generate_times_out() -> None:
  model = ScriptedModel(make_document(), delay=1.0)

  with pytest.raises(GenerationError) as exc_info:
    await ItineraryGenerator(model, timeout_seconds=0.01).generate(destination="Kyoto", duration_days=3)

  assert exc_info.value.stage == "timeout"


@pytest.mark.anyio
async def test_generate_rejects_non_json_output() -> None:
  with pytest.raises(GenerationError) as exc_info:
    await ItineraryGenerator(ScriptedModel("not json")).generate(destination="Kyoto", duration_days=3)
  assert exc_info.value.stage == "parse"
