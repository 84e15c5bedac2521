import json

import pytest

from happy_hour.agents.happy_hour.schema import Citation
from happy_hour.agents.intents.happy_hour_search import intent
from happy_hour.agents.intents.happy_hour_search.orchestrator import QueryOrchestrator

from fakes import SCENARIO_TEXT, FakeCapability


@pytest.fixture
def capability(monkeypatch, settings):
    fake = FakeCapability(text=SCENARIO_TEXT, citations=[Citation(uri="https://eater.com/x", title="Eater")])
    monkeypatch.setattr(intent, "build_orchestrator", lambda: QueryOrchestrator(fake, settings))
    return fake


@pytest.mark.asyncio
async def test_tool_returns_serializable_result(capability):
    result = await intent.find_happy_hour_specials("Hoboken")

    assert result["intent"] == "happy_hour_search"
    assert result["query"] == "Hoboken"
    assert result["status"] == "success"
    assert result["message"] is None
    assert result["specials"][0]["name"] == "A"
    assert result["specials"][0]["position"] == {"lat": 40.0, "lng": -74.0}
    assert result["sources"] == [{"uri": "https://eater.com/x", "title": "Eater"}]
    json.dumps(result)


@pytest.mark.asyncio
async def test_tool_passes_filters_into_prompt(capability):
    await intent.find_happy_hour_specials(
        "Hoboken", day="Friday", cuisines=["Thai"], price_ranges=["$"], special_types=["food"]
    )
    prompt = capability.calls[0]["prompt"]
    assert "Friday" in prompt
    assert "Thai" in prompt
    assert "price ranges: $" in prompt
    assert "types of specials: food" in prompt


@pytest.mark.asyncio
async def test_tool_reports_failures_as_message(capability):
    capability.text = "nothing useful"
    result = await intent.find_happy_hour_specials("Hoboken")
    assert result["status"] == "failed"
    assert result["specials"] == []
    assert result["message"]


@pytest.mark.asyncio
async def test_tool_without_api_key_reports_configuration_error():
    result = await intent.find_happy_hour_specials("Hoboken")
    assert result["status"] == "failed"
    assert "GEMINI_API_KEY" in result["message"]


def test_agents_are_wired():
    from happy_hour.agent import root_agent
    from happy_hour.agents.happy_hour.agent import happy_hour_agent

    assert root_agent.name == "intent_router"
    assert happy_hour_agent in root_agent.sub_agents
    assert intent.find_happy_hour_specials in happy_hour_agent.tools
