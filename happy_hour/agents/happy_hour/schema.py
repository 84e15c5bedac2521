from enum import Enum
from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator

from happy_hour.constants import DEFAULT_DAY


class SortMode(str, Enum):
    relevance = "relevance"
    distance = "distance"


class Position(BaseModel):
    lat: float = Field(allow_inf_nan=False)
    lng: float = Field(allow_inf_nan=False)
    model_config = ConfigDict(extra='forbid', frozen=True)

    @model_validator(mode="after")
    def _reject_unset_sentinel(self) -> "Position":
        # (0, 0) is what the model emits when it has no coordinates
        if self.lat == 0 and self.lng == 0:
            raise ValueError("position (0, 0) is an unset sentinel")
        return self


class GeoLocation(BaseModel):
    latitude: float = Field(allow_inf_nan=False)
    longitude: float = Field(allow_inf_nan=False)
    model_config = ConfigDict(extra='forbid', frozen=True)


class Venue(BaseModel):
    id: str
    name: str
    address: str
    details: List[str]
    website: Optional[str] = None
    cuisine: str
    price_range: str
    position: Position
    distance: Optional[float] = None  # miles, only when a reference location is known
    model_config = ConfigDict(extra='forbid', frozen=True)


class Citation(BaseModel):
    uri: str
    title: str
    model_config = ConfigDict(extra='forbid', frozen=True)


class Filters(BaseModel):
    cuisine: Tuple[str, ...] = ()
    price: Tuple[str, ...] = ()
    day: str = DEFAULT_DAY
    special_types: Tuple[str, ...] = ()
    model_config = ConfigDict(extra='forbid', frozen=True)

    def toggled(self, field: str, value: str) -> "Filters":
        """Return a new selection with `value` added to or removed from a multi-select field."""
        if field not in ("cuisine", "price", "special_types"):
            raise ValueError(f"{field!r} is not a multi-select filter")
        current: Tuple[str, ...] = getattr(self, field)
        if value in current:
            updated = tuple(v for v in current if v != value)
        else:
            updated = current + (value,)
        return self.model_copy(update={field: updated})

    def with_day(self, day: str) -> "Filters":
        return self.model_copy(update={"day": day})
