import pytest

from happy_hour.agents.happy_hour.schema import Citation, Filters
from happy_hour.agents.intents.happy_hour_search.extractor import VENUE_LIST_SCHEMA
from happy_hour.agents.intents.happy_hour_search.workflow import StreamBuffer, run_happy_hour_workflow
from happy_hour.config import Settings
from happy_hour.errors import EmptyResponse, ExtractionError, TransportError

from fakes import SCENARIO_TEXT, FakeCapability, payload_text, record


def test_stream_buffer_accumulates_and_clears():
    seen = []
    buffer = StreamBuffer(listener=seen.append)
    buffer.append("[")
    buffer.append("")
    buffer.append("]")
    assert buffer.text == "[]"
    assert len(buffer) == 2
    assert seen == ["[", "]"]
    buffer.clear()
    assert buffer.text == ""


@pytest.mark.asyncio
async def test_non_streaming_cycle(settings):
    capability = FakeCapability(text=SCENARIO_TEXT, citations=[Citation(uri="u", title="t")] * 2)
    result = await run_happy_hour_workflow("Hoboken", Filters(), capability, settings)

    assert [v.name for v in result.venues] == ["A"]
    assert result.citations == [Citation(uri="u", title="t")]
    assert result.raw_text == SCENARIO_TEXT
    assert capability.calls[0]["mode"] == "generate"
    assert "Hoboken" in capability.calls[0]["prompt"]


@pytest.mark.asyncio
async def test_streaming_cycle_parses_only_complete_text(streaming_settings):
    text = payload_text(record("Streamed"))
    chunks = [text[:7], text[7:20], text[20:]]
    capability = FakeCapability(chunks=chunks, citations=[Citation(uri="u", title="t")])
    buffer = StreamBuffer()

    result = await run_happy_hour_workflow("Hoboken", Filters(), capability, streaming_settings, buffer)

    assert [v.name for v in result.venues] == ["Streamed"]
    assert buffer.text == text
    assert len(buffer) == 3
    assert capability.calls[0]["mode"] == "stream"
    assert capability.calls[0]["grounded"] is True
    assert result.citations == [Citation(uri="u", title="t")]


@pytest.mark.asyncio
async def test_reused_buffer_is_cleared_first(settings):
    buffer = StreamBuffer()
    buffer.append("stale text")
    await run_happy_hour_workflow("X", Filters(), FakeCapability(text="[]"), settings, buffer)
    assert buffer.text == "[]"


@pytest.mark.asyncio
async def test_schema_sent_only_when_structured_without_grounding():
    capability = FakeCapability(text="[]")
    structured = Settings(api_key="k", grounded_search=False, streaming=False, structured_output=True)
    await run_happy_hour_workflow("X", Filters(), capability, structured)
    assert capability.calls[-1]["schema"] is VENUE_LIST_SCHEMA
    assert "response schema" in capability.calls[-1]["prompt"]

    grounded = Settings(api_key="k", grounded_search=True, streaming=False, structured_output=True)
    await run_happy_hour_workflow("X", Filters(), capability, grounded)
    assert capability.calls[-1]["schema"] is None
    assert '"latitude" (number)' in capability.calls[-1]["prompt"]


@pytest.mark.asyncio
async def test_empty_text_raises_empty_response(settings):
    with pytest.raises(EmptyResponse):
        await run_happy_hour_workflow("X", Filters(), FakeCapability(text=""), settings)


@pytest.mark.asyncio
async def test_prose_only_raises_extraction_error(settings):
    with pytest.raises(ExtractionError):
        await run_happy_hour_workflow("X", Filters(), FakeCapability(text="Sorry, I can't help."), settings)


@pytest.mark.asyncio
async def test_transport_error_propagates(settings):
    with pytest.raises(TransportError):
        await run_happy_hour_workflow("X", Filters(), FakeCapability(error=TransportError("down")), settings)


@pytest.mark.asyncio
async def test_wrong_shape_is_no_results(settings):
    result = await run_happy_hour_workflow("X", Filters(), FakeCapability(text='```json\n{"name": "A"}\n```'), settings)
    assert result.venues == []
