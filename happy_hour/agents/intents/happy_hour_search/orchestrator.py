"""
Search state machine for the `happy_hour_search` intent.

    idle -> searching -> success | empty | failed -> (next submit) searching

The orchestrator owns the published result set and the streaming buffer and
is driven from a single event loop. Each submit takes a new sequence number;
a cycle that resolves after a newer submit is discarded, so the latest
search always wins regardless of which response arrives first.

Rendering code subscribes with `subscribe(listener)` and receives an
immutable `SearchSnapshot` after every change.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Iterable, List, Optional, Tuple

from happy_hour.agents.happy_hour.schema import Citation, Filters, GeoLocation, SortMode, Venue
from happy_hour.config import Settings, get_settings
from happy_hour.constants import (
    DEFAULT_QUERY,
    INITIAL_SEARCH_LABEL,
    LOCATION_ERROR_TEMPLATE,
    NO_RESULTS_MESSAGE,
)
from happy_hour.errors import ConfigurationError, EmptyResponse, HappyHourError, user_message_for
from happy_hour.logger import LOGGER
from happy_hour.utils.geo import haversine_miles

from .generation import GeminiCapability
from .workflow import StreamBuffer, run_happy_hour_workflow


class SearchStatus(str, Enum):
    idle = "idle"
    searching = "searching"
    success = "success"
    empty = "empty"
    failed = "failed"


@dataclass(frozen=True)
class SearchSnapshot:
    status: SearchStatus
    active_search: str
    venues: Tuple[Venue, ...]
    citations: Tuple[Citation, ...]
    error: Optional[str]
    notice: Optional[str]
    streaming_text: str
    selected_venue_id: Optional[str]
    sort_mode: SortMode
    distance_sort_enabled: bool
    filters: Filters
    fatal: bool


Listener = Callable[[SearchSnapshot], None]


def attach_distances(venues: Iterable[Venue], location: GeoLocation) -> List[Venue]:
    """Copies of `venues` with `distance` (miles) from `location`."""
    return [
        venue.model_copy(
            update={
                "distance": haversine_miles(
                    location.latitude, location.longitude, venue.position.lat, venue.position.lng
                )
            }
        )
        for venue in venues
    ]


def sort_venues(venues: Iterable[Venue], mode: SortMode) -> List[Venue]:
    """Presentation order. Relevance keeps the model's order; distance is ascending, unknown last."""
    items = list(venues)
    if SortMode(mode) is SortMode.distance:
        items.sort(key=lambda v: (v.distance is None, v.distance if v.distance is not None else 0.0))
    return items


class QueryOrchestrator:
    def __init__(
        self,
        capability: Any = None,
        settings: Optional[Settings] = None,
        filters: Optional[Filters] = None,
    ) -> None:
        self._capability = capability
        self._settings = settings
        self._listeners: List[Listener] = []

        self._status = SearchStatus.idle
        self._active_search = ""
        self._last_query: Optional[str] = None
        self._filters = filters or Filters()
        self._venues: List[Venue] = []
        self._citations: List[Citation] = []
        self._error: Optional[str] = None
        self._notice: Optional[str] = None
        self._selected_id: Optional[str] = None
        self._sort_mode = SortMode.relevance
        self._location: Optional[GeoLocation] = None
        self._buffer = StreamBuffer()
        self._sequence = 0
        self._fatal = False

    # ---- read side ------------------------------------------------------

    @property
    def status(self) -> SearchStatus:
        return self._status

    @property
    def venues(self) -> List[Venue]:
        """The result set in the order the model returned it."""
        return list(self._venues)

    @property
    def citations(self) -> List[Citation]:
        return list(self._citations)

    @property
    def error(self) -> Optional[str]:
        return self._error

    @property
    def filters(self) -> Filters:
        return self._filters

    @property
    def location(self) -> Optional[GeoLocation]:
        return self._location

    @property
    def streaming_text(self) -> str:
        return self._buffer.text

    @property
    def sequence(self) -> int:
        return self._sequence

    def visible_venues(self) -> List[Venue]:
        return sort_venues(self._venues, self._sort_mode)

    def snapshot(self) -> SearchSnapshot:
        return SearchSnapshot(
            status=self._status,
            active_search=self._active_search,
            venues=tuple(self.visible_venues()),
            citations=tuple(self._citations),
            error=self._error,
            notice=self._notice,
            streaming_text=self._buffer.text,
            selected_venue_id=self._selected_id,
            sort_mode=self._sort_mode,
            distance_sort_enabled=self._location is not None,
            filters=self._filters,
            fatal=self._fatal,
        )

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener; returns a callable that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        if not self._listeners:
            return
        snap = self.snapshot()
        for listener in list(self._listeners):
            listener(snap)

    # ---- search cycle ---------------------------------------------------

    def _resolve(self) -> Tuple[Settings, Any]:
        if self._settings is None:
            self._settings = get_settings()
        if self._capability is None:
            self._capability = GeminiCapability(self._settings)
        return self._settings, self._capability

    def _on_fragment(self, seq: int) -> None:
        # Fragments of a superseded search are never shown
        if seq == self._sequence:
            self._notify()

    def _is_stale(self, seq: int) -> bool:
        if seq != self._sequence:
            LOGGER.info("Discarding result of search #%d; search #%d is newer", seq, self._sequence)
            return True
        return False

    def _fail(self, exc: BaseException) -> None:
        self._status = SearchStatus.failed
        self._venues = []
        self._citations = []
        self._error = user_message_for(exc)

    async def submit(self, query: str, filters: Optional[Filters] = None) -> SearchSnapshot:
        """Start a new search; any earlier result set is discarded."""
        if filters is not None:
            self._filters = filters
        self._sequence += 1
        seq = self._sequence

        self._status = SearchStatus.searching
        self._active_search = query
        self._last_query = query
        self._venues = []
        self._citations = []
        self._error = None
        self._selected_id = None
        self._buffer = StreamBuffer(listener=lambda _fragment: self._on_fragment(seq))
        self._notify()

        if self._fatal:
            self._fail(ConfigurationError("search refused: configuration missing"))
            self._notify()
            return self.snapshot()

        LOGGER.info("Search #%d started for %r", seq, query)
        try:
            settings, capability = self._resolve()
            result = await run_happy_hour_workflow(query, self._filters, capability, settings, self._buffer)
        except EmptyResponse as exc:
            if self._is_stale(seq):
                return self.snapshot()
            LOGGER.warning("Search #%d: %s", seq, exc)
            self._status = SearchStatus.empty
            self._error = NO_RESULTS_MESSAGE
        except ConfigurationError as exc:
            LOGGER.error("Search #%d: configuration error: %s", seq, exc)
            self._fatal = True
            if self._is_stale(seq):
                return self.snapshot()
            self._fail(exc)
        except HappyHourError as exc:
            if self._is_stale(seq):
                return self.snapshot()
            LOGGER.error("Search #%d failed: %s", seq, exc)
            self._fail(exc)
        except Exception as exc:
            if self._is_stale(seq):
                return self.snapshot()
            LOGGER.exception("Search #%d failed unexpectedly", seq)
            self._fail(exc)
        else:
            if self._is_stale(seq):
                return self.snapshot()
            venues = result.venues
            if self._location is not None:
                venues = attach_distances(venues, self._location)
            self._venues = venues
            self._citations = result.citations
            if venues:
                self._status = SearchStatus.success
            else:
                self._status = SearchStatus.empty
                self._error = NO_RESULTS_MESSAGE
            LOGGER.info(
                "Search #%d finished: %d venues, %d sources", seq, len(venues), len(result.citations)
            )

        self._notify()
        return self.snapshot()

    async def change_filters(self, filters: Filters) -> SearchSnapshot:
        """Replace the filter selection and re-run the active search."""
        return await self.submit(self._last_query or DEFAULT_QUERY, filters)

    # ---- geolocation ----------------------------------------------------

    def begin_locating(self) -> None:
        """Label the pending search while the device location is being resolved."""
        self._active_search = INITIAL_SEARCH_LABEL
        self._notify()

    def set_reference_location(self, location: Optional[GeoLocation]) -> None:
        self._location = location
        if location is None:
            self._venues = [venue.model_copy(update={"distance": None}) for venue in self._venues]
        else:
            self._venues = attach_distances(self._venues, location)
        self._notify()

    async def on_location_resolved(self, location: GeoLocation) -> SearchSnapshot:
        self._notice = None
        self.set_reference_location(location)
        query = f"my current location ({location.latitude:.2f}, {location.longitude:.2f})"
        return await self.submit(query)

    async def on_location_failed(self, message: str) -> SearchSnapshot:
        LOGGER.warning("Geolocation unavailable: %s", message)
        self._notice = LOCATION_ERROR_TEMPLATE.format(message=message)
        return await self.submit(DEFAULT_QUERY)

    # ---- presentation ---------------------------------------------------

    def select_venue(self, venue_id: Optional[str]) -> None:
        """Toggle the selected venue; unknown ids are ignored."""
        if venue_id is None or venue_id == self._selected_id:
            self._selected_id = None
        elif any(venue.id == venue_id for venue in self._venues):
            self._selected_id = venue_id
        else:
            LOGGER.debug("Ignoring selection of unknown venue %r", venue_id)
            return
        self._notify()

    def set_sort_mode(self, mode: SortMode) -> None:
        self._sort_mode = SortMode(mode)
        self._notify()


__all__ = [
    "QueryOrchestrator",
    "SearchSnapshot",
    "SearchStatus",
    "attach_distances",
    "sort_venues",
]
