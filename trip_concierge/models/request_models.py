from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from typing import Any, List
from enum import Enum

class BaseRegion(str, Enum):
    SPB = "spb"
    LENOBL = "lenobl"
    BOTH = "both"

class Pace(str, Enum):
    RELAXED = "relaxed"
    NORMAL = "normal"
    ACTIVE = "active"

class Transport(str, Enum):
    WALK = "walk"
    PUBLIC = "public"
    CAR = "car"

class Weather(str, Enum):
    ANY = "any"
    SUN = "sun"
    RAIN = "rain"
    COLD = "cold"

class TripRequest(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "examples": [
                {
                    "days": 2,
                    "baseRegion": "spb",
                    "pace": "normal",
                    "transport": "public",
                    "weather": "any",
                    "interests": ["classic", "walk", "coffee"],
                    "notes": "",
                }
            ]
        },
    )

    days: int = Field(2, ge=1, le=3, strict=True)
    base_region: BaseRegion = BaseRegion.SPB
    pace: Pace = Pace.NORMAL
    transport: Transport = Transport.PUBLIC
    weather: Weather = Weather.ANY
    interests: List[str] = Field(default_factory=list)
    notes: str = Field("", max_length=500)

    @field_validator("days", mode="before")
    @classmethod
    def integral_float_days(cls, v: Any) -> Any:
        # JSON 2.0 is the integer 2; strings, bools and 2.5 still fail the strict check
        if isinstance(v, float) and v.is_integer():
            return int(v)
        return v
