"""
Gemini access for the `happy_hour_search` intent.

This is the only module that talks to the network. It exposes two
coroutines with the same options:

- `generate(prompt, schema=..., grounded=...)` -> one `GenerationResult`
- `stream(prompt, schema=..., grounded=...)`   -> async iterator of `GenerationChunk`

Any object with these two methods can be handed to the workflow in place of
`GeminiCapability` (the tests do exactly that).

Every failure raised by the client is re-raised as `TransportError`.
"""

from dataclasses import dataclass, field
from typing import Any, AsyncIterator, Dict, List, Optional

from google import genai
from google.genai import types

from happy_hour.agents.happy_hour.schema import Citation
from happy_hour.config import Settings, create_client
from happy_hour.errors import ConfigurationError, TransportError
from happy_hour.logger import LOGGER

from .citations import citations_from_response


@dataclass
class GenerationResult:
    text: str
    citations: List[Citation] = field(default_factory=list)


@dataclass
class GenerationChunk:
    text: str
    citations: List[Citation] = field(default_factory=list)


def build_generate_config(
    settings: Settings,
    *,
    schema: Optional[Dict[str, Any]] = None,
    grounded: bool = False,
) -> types.GenerateContentConfig:
    kwargs: Dict[str, Any] = {}
    if grounded:
        kwargs["tools"] = [types.Tool(google_search=types.GoogleSearch())]
    if schema is not None:
        kwargs["response_mime_type"] = "application/json"
        kwargs["response_schema"] = schema
    if settings.temperature is not None:
        kwargs["temperature"] = settings.temperature
    return types.GenerateContentConfig(**kwargs)


class GeminiCapability:
    """Thin async wrapper around `genai.Client` for venue searches."""

    def __init__(self, settings: Settings, client: Optional[genai.Client] = None) -> None:
        self.settings = settings
        self._client = client

    @property
    def client(self) -> genai.Client:
        if self._client is None:
            self._client = create_client(self.settings)
        return self._client

    async def generate(
        self,
        prompt: str,
        *,
        schema: Optional[Dict[str, Any]] = None,
        grounded: bool = False,
    ) -> GenerationResult:
        config = build_generate_config(self.settings, schema=schema, grounded=grounded)
        try:
            response = await self.client.aio.models.generate_content(
                model=self.settings.model,
                contents=prompt,
                config=config,
            )
        except ConfigurationError:
            raise
        except Exception as exc:
            LOGGER.error("Gemini request failed: %s", exc)
            raise TransportError(str(exc)) from exc

        return GenerationResult(text=response.text or "", citations=citations_from_response(response))

    async def stream(
        self,
        prompt: str,
        *,
        schema: Optional[Dict[str, Any]] = None,
        grounded: bool = False,
    ) -> AsyncIterator[GenerationChunk]:
        config = build_generate_config(self.settings, schema=schema, grounded=grounded)
        try:
            response_stream = await self.client.aio.models.generate_content_stream(
                model=self.settings.model,
                contents=prompt,
                config=config,
            )
            async for chunk in response_stream:
                yield GenerationChunk(text=chunk.text or "", citations=citations_from_response(chunk))
        except ConfigurationError:
            raise
        except Exception as exc:
            LOGGER.error("Gemini streaming request failed: %s", exc)
            raise TransportError(str(exc)) from exc


__all__ = ["GeminiCapability", "GenerationChunk", "GenerationResult", "build_generate_config"]
