"""
Prompt for the itinerary model.

The prompt is a pure function of the request and the candidate POIs: the same
inputs always produce byte-identical text.
"""
import json
from typing import Any, Dict, List, Sequence

from trip_concierge.models.place_models import Poi
from trip_concierge.models.request_models import TripRequest

# Only these POI fields are shown to the model
PROMPT_POI_FIELDS = ("id", "name", "region", "tags", "lat", "lon", "short")

RESPONSE_SHAPE_EXAMPLE: Dict[str, Any] = {
    "title": "string",
    "summary": "string",
    "days": [
        {
            "dayNumber": 1,
            "label": "string",
            "items": [
                {
                    "time": "10:30",
                    "poiId": "hermitage",
                    "durationMin": 90,
                    "why": "string",
                    "move": "string",
                    "tips": ["string"],
                }
            ],
        }
    ],
    "alternatives": ["string"],
}


def _compact_json(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"))


def compact_pois(candidates: Sequence[Poi]) -> List[Dict[str, Any]]:
    out = []
    for poi in candidates:
        data = poi.model_dump(mode="json")
        out.append({key: data[key] for key in PROMPT_POI_FIELDS})
    return out


def get_system_framing() -> str:
    return "\n".join([
        "You are an AI concierge for St. Petersburg and Leningrad Oblast.",
        "Build a compact itinerary by day and time for the user's request.",
    ])


def get_hard_rules() -> str:
    return "\n".join([
        "HARD RULES:",
        "- Use ONLY poiId values from the POI list below (never invent new places).",
        "- Return ONLY valid JSON (no markdown, no explanations).",
        "- 4-6 items per day. Time format HH:MM (for example, 10:30).",
        "- Respect the pace, transport and weather fields.",
        "- Do not put distant points back to back without a good reason; describe the transition in the move field.",
    ])


def build_itinerary_prompt(request: TripRequest, candidates: Sequence[Poi]) -> str:
    """Render the full instruction + data contract for one request"""
    return "\n".join([
        get_system_framing(),
        "",
        get_hard_rules(),
        "",
        "INPUT (TripRequest):",
        _compact_json(request.model_dump(mode="json", by_alias=True)),
        "",
        "POI (allowed places):",
        _compact_json(compact_pois(candidates)),
        "",
        "RESPONSE SCHEMA (strict):",
        _compact_json(RESPONSE_SHAPE_EXAMPLE),
    ])
