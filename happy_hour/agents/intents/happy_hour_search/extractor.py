"""
Extractor for the `happy_hour_search` intent.

Responsibilities
---------------
- Define the structured output schema for venue lists.
- Locate and parse the JSON array inside raw model text.

Gemini does not always honour "JSON only": with search grounding it tends to
wrap the array in a ```json fence, surround it with prose, or both. The
extractor tries, in order:

1. the interior of a fenced block tagged ``json``
2. the whole trimmed text, when it already starts with ``[``
3. the span from the first ``[`` to the last ``]``

Empty text raises `EmptyResponse`; anything else that yields no parseable
candidate raises `ExtractionError`.
"""

import json
import re
from typing import Any, Dict

from happy_hour.errors import EmptyResponse, ExtractionError
from happy_hour.logger import LOGGER


# ----------------------------
# Structured Output Schema
# ----------------------------
# Constrains Gemini to return ONLY the expected JSON shape.
VENUE_LIST_SCHEMA: Dict[str, Any] = {
    "type": "ARRAY",
    "items": {
        "type": "OBJECT",
        "properties": {
            "name": {"type": "STRING"},
            "address": {"type": "STRING"},
            "details": {"type": "ARRAY", "items": {"type": "STRING"}},
            "website": {"type": "STRING"},
            "cuisine": {"type": "STRING"},
            "price_range": {"type": "STRING"},
            "latitude": {"type": "NUMBER"},
            "longitude": {"type": "NUMBER"},
        },
        "required": ["name", "address", "details", "latitude", "longitude"],
    },
}

_JSON_FENCE = re.compile(r"```json\s*(.*?)```", re.DOTALL | re.IGNORECASE)

# Keep logged excerpts bounded
_EXCERPT_CHARS = 500


def locate_json_payload(raw: str) -> str:
    """Return the candidate JSON substring of `raw` without parsing it."""
    text = (raw or "").strip()
    if not text:
        raise EmptyResponse("Gemini returned an empty text response.")

    fence_match = _JSON_FENCE.search(text)
    if fence_match:
        return fence_match.group(1).strip()

    if text.startswith("["):
        return text

    start = text.find("[")
    end = text.rfind("]")
    if start == -1 or end == -1 or end < start:
        LOGGER.error("No JSON array found in Gemini response: %r", text[:_EXCERPT_CHARS])
        raise ExtractionError("Response did not contain a JSON array.")
    return text[start : end + 1]


def extract_json_payload(raw: str) -> Any:
    """
    Locate and parse the JSON payload in raw model output.

    Returns
    -------
    Any
        The parsed JSON value (normally a list of records). Shape checks are
        left to the normalizer.
    """
    candidate = locate_json_payload(raw)
    try:
        return json.loads(candidate)
    except ValueError as exc:
        # JSONDecodeError, or an integer literal past the interpreter digit limit
        LOGGER.error("Gemini JSON payload did not parse: %s; excerpt=%r", exc, candidate[:_EXCERPT_CHARS])
        raise ExtractionError(f"Response JSON did not parse: {exc}") from exc


__all__ = ["VENUE_LIST_SCHEMA", "extract_json_payload", "locate_json_payload"]
