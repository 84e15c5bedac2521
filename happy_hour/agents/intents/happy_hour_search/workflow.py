"""
Workflow orchestration for the `happy_hour_search` intent.

Responsibilities
---------------
- Build the prompt from the query and filters.
- Call the generation capability, streamed or in one piece.
- Accumulate the text, then extract, normalize and dedupe citations.

Streaming and non-streaming share one path: a non-streamed response is a
single append to the buffer. Nothing is parsed until the text is complete.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional

from happy_hour.agents.happy_hour.schema import Citation, Filters, Venue
from happy_hour.config import Settings
from happy_hour.logger import LOGGER

from .citations import dedupe_citations
from .extractor import VENUE_LIST_SCHEMA, extract_json_payload
from .normalizer import normalize_records
from .prompt import build_prompt


class StreamBuffer:
    """Append-only text fragments for one in-flight query."""

    def __init__(self, listener: Optional[Callable[[str], None]] = None) -> None:
        self._fragments: List[str] = []
        self._listener = listener

    def append(self, fragment: str) -> None:
        if not fragment:
            return
        self._fragments.append(fragment)
        if self._listener is not None:
            self._listener(fragment)

    def clear(self) -> None:
        self._fragments.clear()

    @property
    def text(self) -> str:
        return "".join(self._fragments)

    def __len__(self) -> int:
        return len(self._fragments)


@dataclass
class WorkflowResult:
    query: str
    prompt: str
    raw_text: str
    venues: List[Venue] = field(default_factory=list)
    citations: List[Citation] = field(default_factory=list)


async def run_happy_hour_workflow(
    query: str,
    filters: Filters,
    capability: Any,
    settings: Settings,
    buffer: Optional[StreamBuffer] = None,
) -> WorkflowResult:
    """
    Execute one search cycle.

    Raises
    ------
    EmptyResponse, ExtractionError, TransportError
        Propagated to the caller; per-record problems never are.
    """
    structured = settings.sends_schema
    if settings.structured_output and not structured:
        LOGGER.info("Response schema not sent: it cannot be combined with grounded search")
    schema = VENUE_LIST_SCHEMA if structured else None
    prompt = build_prompt(query, filters, structured=structured)

    if buffer is None:
        buffer = StreamBuffer()
    buffer.clear()
    raw_citations: List[Any] = []

    if settings.streaming:
        async for chunk in capability.stream(prompt, schema=schema, grounded=settings.grounded_search):
            buffer.append(chunk.text)
            raw_citations.extend(chunk.citations)
        LOGGER.debug("Stream finished after %d fragments", len(buffer))
    else:
        result = await capability.generate(prompt, schema=schema, grounded=settings.grounded_search)
        buffer.append(result.text)
        raw_citations.extend(result.citations)

    raw_text = buffer.text
    payload = extract_json_payload(raw_text)
    venues = normalize_records(payload)
    citations = dedupe_citations(raw_citations)

    return WorkflowResult(
        query=query,
        prompt=prompt,
        raw_text=raw_text,
        venues=venues,
        citations=citations,
    )


__all__ = ["StreamBuffer", "WorkflowResult", "run_happy_hour_workflow"]
