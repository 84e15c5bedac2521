"""
Public entrypoint for the `happy_hour_search` intent.

What this file exports
----------------------
- `find_happy_hour_specials(location, day, cuisines, price_ranges, special_types) -> dict`

Behavior
--------
- Runs one search through a fresh `QueryOrchestrator`.
- Returns a JSON-serializable dict; the agent relays it verbatim.
- This function is what the happy hour agent registers as its tool.
"""

from typing import Any, Dict, List, Optional

from happy_hour.agents.happy_hour.schema import Filters
from happy_hour.constants import DEFAULT_DAY

from .orchestrator import QueryOrchestrator, SearchSnapshot

__all__ = ["build_orchestrator", "find_happy_hour_specials", "snapshot_to_dict"]


def build_orchestrator() -> QueryOrchestrator:
    return QueryOrchestrator()


def snapshot_to_dict(snapshot: SearchSnapshot) -> Dict[str, Any]:
    return {
        "intent": "happy_hour_search",
        "query": snapshot.active_search,
        "status": snapshot.status.value,
        "message": snapshot.error,
        "specials": [venue.model_dump(mode="json") for venue in snapshot.venues],
        "sources": [citation.model_dump(mode="json") for citation in snapshot.citations],
    }


async def find_happy_hour_specials(
    location: str,
    day: str = DEFAULT_DAY,
    cuisines: Optional[List[str]] = None,
    price_ranges: Optional[List[str]] = None,
    special_types: Optional[List[str]] = None,
) -> Dict[str, Any]:
    """
    Find happy hour specials at bars and restaurants near a location.

    Args:
        location: Neighborhood, city, address or venue to search around.
        day: Day of the week to search for, or "Today".
        cuisines: Cuisines to include, e.g. ["Mexican", "Thai"].
        price_ranges: Price tiers to include, e.g. ["$", "$$"].
        special_types: Kinds of specials, any of "drinks", "food", "late night".

    Returns:
        dict with `status` (success, empty or failed), `message` (user-facing
        text when there are no results or the search failed), `specials` and
        `sources`.
    """
    filters = Filters(
        cuisine=tuple(cuisines or ()),
        price=tuple(price_ranges or ()),
        day=day or DEFAULT_DAY,
        special_types=tuple(special_types or ()),
    )
    orchestrator = build_orchestrator()
    snapshot = await orchestrator.submit(location, filters)
    return snapshot_to_dict(snapshot)
