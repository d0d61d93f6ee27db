from pydantic import BaseModel, ConfigDict, Field, StringConstraints
from pydantic.alias_generators import to_camel
from typing import Annotated, List

from trip_concierge.models.place_models import Poi
from trip_concierge.models.request_models import TripRequest

TipText = Annotated[str, StringConstraints(min_length=1, max_length=120)]
AlternativeText = Annotated[str, StringConstraints(min_length=1, max_length=240)]

class WireModel(BaseModel):
    """camelCase on the wire, snake_case in Python"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

class ItineraryItem(WireModel):
    time: str = Field(..., pattern=r"^[0-9]{2}:[0-9]{2}$", description="HH:MM, 24-hour")
    poi_id: str = Field(..., min_length=1)  # catalog membership is enforced after validation
    duration_min: int = Field(..., ge=15, le=240, strict=True)
    why: str = Field(..., min_length=1, max_length=320)
    move: str = Field(..., min_length=1, max_length=320)
    tips: List[TipText] = Field(default_factory=list, max_length=4)

class ItineraryDay(WireModel):
    day_number: int = Field(..., ge=1, le=3, strict=True)
    label: str = Field(..., min_length=1, max_length=140)
    items: List[ItineraryItem]

class Itinerary(WireModel):
    title: str = Field(..., min_length=1, max_length=120)
    summary: str = Field(..., min_length=1, max_length=1000)
    days: List[ItineraryDay] = Field(..., min_length=1, max_length=3)
    # short alternatives the UI shows as chips
    alternatives: List[AlternativeText] = Field(default_factory=list, max_length=8)

class ItineraryResponse(WireModel):
    request: TripRequest
    itinerary: Itinerary
    pois: List[Poi]
