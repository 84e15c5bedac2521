from google.adk.agents import LlmAgent

from happy_hour.agents.intents.happy_hour_search.intent import find_happy_hour_specials
from happy_hour.config import DEFAULT_MODEL
from happy_hour.constants import CUISINE_OPTIONS, DAY_OPTIONS, PRICE_OPTIONS, SPECIAL_TYPE_OPTIONS

happy_hour_agent = LlmAgent(
    name="happy_hour_agent",
    model=DEFAULT_MODEL,
    description="Finds happy hour specials at bars and restaurants near a location.",
    instruction=f"""You help people find happy hour specials near a place.
    Call `find_happy_hour_specials` with the location the user mentions.
    Pass filters only when the user asks for them:
    - day: one of {", ".join(DAY_OPTIONS)}
    - cuisines: any of {", ".join(CUISINE_OPTIONS)}
    - price_ranges: any of {", ".join(PRICE_OPTIONS)}
    - special_types: any of {", ".join(SPECIAL_TYPE_OPTIONS)}
    If the tool returns a `message`, relay it to the user as is.
    Otherwise summarise each special with its name, address, deals and website,
    then list the sources.
    """,
    tools=[find_happy_hour_specials],
)
