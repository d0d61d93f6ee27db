from pydantic import BaseModel, ConfigDict
from typing import List
from enum import Enum

class Region(str, Enum):
    SPB = "spb"
    LENOBL = "lenobl"

class PoiTag(str, Enum):
    CLASSIC = "classic"
    HISTORY = "history"
    ART = "art"
    ARCHITECTURE = "architecture"
    WALK = "walk"
    VIEWS = "views"
    FOOD = "food"
    COFFEE = "coffee"
    NIGHT = "night"
    NATURE = "nature"
    KIDS = "kids"
    DAYTRIP = "daytrip"
    BUDGET = "budget"
    RAIN_OK = "rain_ok"

class Poi(BaseModel):
    """Curated point of interest; `id` is the identity the model must reference"""
    model_config = ConfigDict(frozen=True, use_enum_values=True)

    id: str
    name: str
    region: Region
    lat: float
    lon: float
    tags: List[PoiTag]
    short: str

class TagOption(BaseModel):
    tag: PoiTag
    label: str
