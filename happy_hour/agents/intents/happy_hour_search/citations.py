"""
Grounding citations for the `happy_hour_search` intent.

- `citations_from_response`: read `{uri, title}` pairs out of a Gemini
  response (or stream chunk) that used the Google Search tool.
- `dedupe_citations`: drop entries without a uri or title, then keep only the
  first entry per uri, in first-seen order.
"""

from typing import Any, Iterable, List, Optional, Set

from happy_hour.agents.happy_hour.schema import Citation


def _field(item: Any, name: str) -> Optional[str]:
    value = item.get(name) if isinstance(item, dict) else getattr(item, name, None)
    if not isinstance(value, str):
        return None
    value = value.strip()
    return value or None


def dedupe_citations(citations: Iterable[Any]) -> List[Citation]:
    """Accepts `Citation` objects, dicts, or any object with `uri`/`title` attributes."""
    seen: Set[str] = set()
    unique: List[Citation] = []
    for item in citations:
        if item is None:
            continue
        uri = _field(item, "uri")
        title = _field(item, "title")
        if not uri or not title or uri in seen:
            continue
        seen.add(uri)
        unique.append(Citation(uri=uri, title=title))
    return unique


def citations_from_response(response: Any) -> List[Citation]:
    """Collect raw web citations from `candidates[0].grounding_metadata.grounding_chunks`."""
    candidates = getattr(response, "candidates", None) or []
    if not candidates:
        return []
    metadata = getattr(candidates[0], "grounding_metadata", None)
    chunks = getattr(metadata, "grounding_chunks", None) or []

    found: List[Citation] = []
    for chunk in chunks:
        web = getattr(chunk, "web", None)
        uri = _field(web, "uri") if web is not None else None
        title = _field(web, "title") if web is not None else None
        if uri and title:
            found.append(Citation(uri=uri, title=title))
    return found


__all__ = ["citations_from_response", "dedupe_citations"]
