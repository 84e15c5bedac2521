# Coordinator: routes happy hour requests to the search agent
from google.adk.agents import LlmAgent

from happy_hour.agents.happy_hour.agent import happy_hour_agent
from happy_hour.config import DEFAULT_MODEL


root_agent = LlmAgent(
    name="intent_router",
    model=DEFAULT_MODEL,
    instruction="""You are a router agent that directs user queries to the appropriate sub-agent based on intent.
    - If the user asks about happy hours, drink or food specials, or deals at bars and restaurants, transfer to the happy_hour_agent. See examples below:
        - "Any happy hours in Williamsburg tonight?"
        - "Cheap Mexican food specials near Union Square on Friday"
        - "Late night drink deals close to 40.73, -73.99"
    - For anything else, say politely that you can only help with happy hour specials.
    """,
    description="intent_router",
    sub_agents=[happy_hour_agent],
)
