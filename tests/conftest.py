import json
from types import SimpleNamespace

import httpx
import pytest

from trip_concierge.services.gemini_service import GeminiService
from trip_concierge.services.itinerary_generator import ItineraryGeneratorService
from trip_concierge.services.model_resolver import ModelIdCache, ModelResolver
from trip_concierge.services.poi_catalog import get_catalog
from trip_concierge.utils.config import Settings

API_KEY = "test-secret-key"

LISTED_MODELS = {
    "models": [
        {"name": "models/gemini-2.0-flash-lite", "supportedGenerationMethods": ["generateContent"]},
        {"name": "models/gemini-2.5-flash", "supportedGenerationMethods": ["generateContent", "countTokens"]},
        {"name": "models/embedding-001", "supportedGenerationMethods": ["embedContent"]},
    ]
}


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


class FakeModels:
    """Stands in for client.aio.models; outcomes map model id -> text or exception"""

    def __init__(self, outcomes=None, default=None):
        self.outcomes = outcomes or {}
        self.default = default
        self.calls = []

    async def generate_content(self, *, model, contents, config=None):
        self.calls.append(model)
        outcome = self.outcomes.get(model, self.default)
        if isinstance(outcome, Exception):
            raise outcome
        if outcome is None:
            raise RuntimeError(f"404 NOT_FOUND. models/{model} is not found for API version v1")
        return SimpleNamespace(text=outcome, candidates=[])


class FakeGenaiClient:
    def __init__(self, models: FakeModels):
        self.aio = SimpleNamespace(models=models)


def listing_transport(payload=None, status_code=200, calls=None):
    def handler(request: httpx.Request) -> httpx.Response:
        if calls is not None:
            calls.append(request)
        return httpx.Response(status_code, json=payload if payload is not None else LISTED_MODELS)
    return httpx.MockTransport(handler)


def make_item(poi_id, time="10:00", **overrides):
    item = {
        "time": time,
        "poiId": poi_id,
        "durationMin": 60,
        "why": "Worth seeing.",
        "move": "Walk 10 minutes.",
        "tips": ["Arrive early"],
    }
    item.update(overrides)
    return item


def make_itinerary(days_poi_ids, **overrides):
    data = {
        "title": "Classic Petersburg",
        "summary": "Two days in the centre.",
        "days": [
            {
                "dayNumber": n,
                "label": f"Day {n}",
                "items": [make_item(p, time=f"{10 + i:02d}:00") for i, p in enumerate(poi_ids)],
            }
            for n, poi_ids in enumerate(days_poi_ids, start=1)
        ],
        "alternatives": ["Swap the museum for a boat tour"],
    }
    data.update(overrides)
    return data


@pytest.fixture
def settings():
    return Settings(GEMINI_API_KEY=API_KEY, GEMINI_MODEL=None, GEMINI_API_VERSION="v1")


@pytest.fixture
def catalog():
    return get_catalog()


@pytest.fixture
def list_calls():
    return []


@pytest.fixture
def resolver(list_calls):
    return ModelResolver(
        cache=ModelIdCache(clock=FakeClock()),
        transport=listing_transport(calls=list_calls),
    )


@pytest.fixture
def fake_models():
    return FakeModels()


@pytest.fixture
def service(settings, catalog, resolver, fake_models):
    def factory(api_key):
        return GeminiService(api_key=api_key, client=FakeGenaiClient(fake_models))
    return ItineraryGeneratorService(
        settings=settings,
        catalog=catalog,
        resolver=resolver,
        gemini_factory=factory,
    )


@pytest.fixture
def sample_trip_request():
    return {
        "days": 2,
        "baseRegion": "spb",
        "pace": "normal",
        "transport": "public",
        "weather": "any",
        "interests": ["classic"],
        "notes": "",
    }


def as_text(data) -> str:
    return json.dumps(data, ensure_ascii=False)
