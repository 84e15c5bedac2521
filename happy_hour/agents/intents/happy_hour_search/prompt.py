"""
Prompt construction for the `happy_hour_search` intent.

`build_prompt` is a pure function of (query, filters, structured): the same
inputs always produce the same instruction text.
"""

from happy_hour.agents.happy_hour.schema import Filters

# Wire shape described in prose when no response schema is sent
RECORD_SHAPE_INSTRUCTION = (
    "The entire response MUST be a single, valid JSON array of objects. "
    "Do not include any text, explanation, or markdown formatting before or after the JSON array. "
    'Each object in the array must have the following keys: "name" (string), "address" (string), '
    '"details" (array of strings, one line per deal), "website" (string), "cuisine" (string), '
    '"price_range" (string), "latitude" (number), and "longitude" (number).'
)

SCHEMA_INSTRUCTION = "Return ONLY JSON per the provided response schema."


def _day_instruction(day: str) -> str:
    if day.strip().lower() == "today":
        return f"The selected day is {day}. Focus on specials available today. "
    return f"The selected day is {day}. Focus on specials available on {day}. "


def build_prompt(query: str, filters: Filters, *, structured: bool = False) -> str:
    """
    Build the instruction text sent to Gemini.

    Parameters
    ----------
    query : str
        Free-text location or venue, e.g. "Williamsburg, Brooklyn".
    filters : Filters
        Active filter selection.
    structured : bool
        True when a response schema accompanies the request; the output
        shape is then left to the schema instead of being spelled out.
    """
    prompt = f"Find up-to-date happy hour specials for bars and restaurants in {query}. "
    prompt += _day_instruction(filters.day)

    if filters.cuisine:
        prompt += f"Only include places serving any of the following cuisines: {', '.join(filters.cuisine)}. "
    if filters.price:
        prompt += f"Only include places in any of the following price ranges: {', '.join(filters.price)}. "
    if filters.special_types:
        prompt += f"Only include the following types of specials: {', '.join(filters.special_types)}. "

    prompt += (
        "Check bar and restaurant websites, menus, and gastronomy sites like Eater.com "
        "to find the most current information. "
    )
    prompt += "Return a list of the top 5-10 places. "
    prompt += SCHEMA_INSTRUCTION if structured else RECORD_SHAPE_INSTRUCTION
    return prompt


__all__ = ["build_prompt"]
