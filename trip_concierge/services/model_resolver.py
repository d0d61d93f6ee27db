"""
Resolve which Gemini model id to call, with a short-lived cache so the
ListModels endpoint is not hit on every request.
"""
import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, List, Optional

import httpx

from trip_concierge.utils.formatters import redact

DEFAULT_MODEL_ID = "gemini-2.5-flash"
MODEL_CACHE_TTL_SECONDS = 10 * 60
GENERATE_METHOD = "generateContent"
TARGET_VERSION_MARKER = "2.5"
MODEL_FAMILY = "gemini"


def normalize_model_id(model: Optional[str]) -> str:
    """The SDK wants "gemini-..." without the "models/" prefix"""
    trimmed = (model or "").strip()
    return trimmed[len("models/"):] if trimmed.startswith("models/") else trimmed


def pick_model_id(candidates: List[str]) -> Optional[str]:
    """Prefer 2.5 Flash, then any non-lite Flash, then any Gemini, then the first listed"""
    for predicate in (
        lambda m: TARGET_VERSION_MARKER in m and "flash" in m,
        lambda m: "flash" in m and "lite" not in m,
        lambda m: MODEL_FAMILY in m,
    ):
        for model_id in candidates:
            if predicate(model_id):
                return model_id
    return candidates[0] if candidates else None


@dataclass(frozen=True)
class CachedModelId:
    value: str
    cached_at: float


class ModelIdCache:
    """Single cached model id with a TTL.

    The entry is replaced as a whole, so concurrent requests can at worst
    re-resolve redundantly or read a just-superseded id.
    """

    def __init__(self, ttl_seconds: float = MODEL_CACHE_TTL_SECONDS, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entry: Optional[CachedModelId] = None

    def get(self) -> Optional[str]:
        entry = self._entry
        if entry is None:
            return None
        if self._clock() - entry.cached_at < self.ttl_seconds:
            return entry.value
        return None

    def set(self, value: str) -> None:
        self._entry = CachedModelId(value=value, cached_at=self._clock())

    def invalidate(self) -> None:
        self._entry = None


class ModelResolver:
    def __init__(
        self,
        base_url: str = "https://generativelanguage.googleapis.com",
        api_version: str = "v1",
        timeout_seconds: float = 10.0,
        cache: Optional[ModelIdCache] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.api_version = api_version
        self.timeout_seconds = timeout_seconds
        self.cache = cache or ModelIdCache()
        self._transport = transport
        self.logger = logging.getLogger(__name__)

    async def resolve(self, api_key: str, preferred: Optional[str] = None) -> str:
        if preferred:
            return normalize_model_id(preferred)

        cached = self.cache.get()
        if cached:
            self.logger.debug("[resolver] cache hit", extra={"model_id": cached})
            return cached

        models = await self._list_models(api_key)
        if models is None:
            return DEFAULT_MODEL_ID

        candidates = [
            model_id
            for model_id in (normalize_model_id(m.get("name")) for m in models if self._supports_generation(m))
            if model_id
        ]
        model_id = pick_model_id(candidates) or DEFAULT_MODEL_ID
        self.cache.set(model_id)
        self.logger.info(
            "[resolver] model resolved",
            extra={"model_id": model_id, "candidate_count": len(candidates)}
        )
        return model_id

    def invalidate(self) -> None:
        """Forget the cached id so the next request re-resolves"""
        self.cache.invalidate()
        self.logger.info("[resolver] cached model id invalidated")

    @staticmethod
    def _supports_generation(model: Any) -> bool:
        if not isinstance(model, dict) or not isinstance(model.get("name"), str):
            return False
        return GENERATE_METHOD in (model.get("supportedGenerationMethods") or [])

    async def _list_models(self, api_key: str) -> Optional[List[Any]]:
        """GET /{version}/models; None on any transport or HTTP failure"""
        url = f"{self.base_url}/{self.api_version}/models"
        try:
            # key goes in a header so it never shows up in URLs or transport logs
            async with httpx.AsyncClient(timeout=self.timeout_seconds, transport=self._transport) as client:
                response = await client.get(url, headers={"x-goog-api-key": api_key}, params={"pageSize": 1000})
        except httpx.HTTPError as e:
            self.logger.error(
                "[resolver] ListModels request failed; using default model",
                extra={"error": redact(str(e), [api_key]), "default_model": DEFAULT_MODEL_ID}
            )
            return None

        if not response.is_success:
            self.logger.error(
                "[resolver] ListModels failed; using default model",
                extra={"status": response.status_code, "default_model": DEFAULT_MODEL_ID}
            )
            return None

        try:
            data = response.json()
        except ValueError:
            self.logger.error(
                "[resolver] ListModels returned non-JSON; using default model",
                extra={"status": response.status_code, "default_model": DEFAULT_MODEL_ID}
            )
            return None
        models = data.get("models") if isinstance(data, dict) else None
        return models if isinstance(models, list) else []
