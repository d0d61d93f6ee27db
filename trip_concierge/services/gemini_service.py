from google import genai
from google.genai import types
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Callable, Iterable, List, Optional

from trip_concierge.services.model_resolver import normalize_model_id
from trip_concierge.utils.errors import (
    GenerationFailedError,
    GeoBlockedError,
    QuotaExceededError,
    RequestAbortedError,
)
from trip_concierge.utils.formatters import redact

# Tried in order after the preferred and resolved ids; covers common naming
# for Gemini 3 Flash and 2.5 Flash.
FALLBACK_MODEL_IDS = [
    "gemini-2.5-flash",
    "gemini-3-flash-preview",
    "gemini-3.0-flash",
    "gemini-2.0-flash",
    "gemini-2.0-flash-lite",
]

_QUOTA_MARKERS = ("quota", "resource_exhausted", "[429")
_GEO_MARKERS = ("user location is not supported",)
_NOT_FOUND_MARKERS = ("not found", "not_found", "not supported for generatecontent")


class FailureKind(str, Enum):
    QUOTA = "quota"
    GEO_BLOCKED = "geo_blocked"
    MODEL_NOT_FOUND = "model_not_found"
    OTHER = "other"


def classify_failure(message: str) -> FailureKind:
    m = (message or "").lower()
    if any(marker in m for marker in _QUOTA_MARKERS) or m.startswith("429 "):
        return FailureKind.QUOTA
    if any(marker in m for marker in _GEO_MARKERS):
        return FailureKind.GEO_BLOCKED
    if any(marker in m for marker in _NOT_FOUND_MARKERS):
        return FailureKind.MODEL_NOT_FOUND
    return FailureKind.OTHER


def build_model_candidates(preferred: Optional[str], resolved: Optional[str], fallbacks: Iterable[str] = FALLBACK_MODEL_IDS) -> List[str]:
    """Preferred id first, then the resolver's pick, then static fallbacks; de-duplicated"""
    out: List[str] = []
    for model_id in [preferred, resolved, *fallbacks]:
        normalized = normalize_model_id(model_id)
        if normalized and normalized not in out:
            out.append(normalized)
    return out


@dataclass
class GenerationResult:
    text: str
    model_id: str
    attempted: List[str] = field(default_factory=list)


class GeminiService:
    def __init__(
        self,
        api_key: str,
        api_version: str = "v1",
        timeout_seconds: float = 60.0,
        temperature: Optional[float] = 0.7,
        client: Any = None,
    ):
        self.api_key = api_key
        self.api_version = api_version
        self.temperature = temperature
        self.logger = logging.getLogger(__name__)
        self.client = client or genai.Client(
            api_key=api_key,
            http_options=types.HttpOptions(api_version=api_version, timeout=int(timeout_seconds * 1000)),
        )

    async def generate_with_fallback(
        self,
        prompt: str,
        model_ids: List[str],
        *,
        is_cancelled: Optional[Callable[[], Awaitable[bool]]] = None,
        on_model_not_found: Optional[Callable[[str], None]] = None,
    ) -> GenerationResult:
        """Try each candidate model in order until one answers.

        Quota and geo-block failures abort immediately; "model not found"
        moves on to the next candidate; any other failure stops the loop.
        """
        attempted: List[str] = []
        last_error = ""

        for model_id in model_ids:
            if is_cancelled is not None and await is_cancelled():
                self.logger.info("[gemini] request cancelled; not trying further models", extra={"models_tried": attempted})
                raise RequestAbortedError()

            attempted.append(model_id)
            try:
                response = await self.client.aio.models.generate_content(
                    model=model_id,
                    contents=prompt,
                    config=self._generation_config(),
                )
            except Exception as e:
                last_error = redact(str(e), [self.api_key])
                kind = classify_failure(last_error)
                log_extra = {
                    "api_version": self.api_version,
                    "model_tried": model_id,
                    "models_tried": list(attempted),
                    "error": last_error,
                }

                if kind is FailureKind.QUOTA:
                    self.logger.error("[gemini] quota exceeded", extra=log_extra)
                    raise QuotaExceededError(details=last_error) from e
                if kind is FailureKind.GEO_BLOCKED:
                    self.logger.error("[gemini] geo blocked", extra=log_extra)
                    raise GeoBlockedError(details=last_error) from e
                if kind is FailureKind.MODEL_NOT_FOUND:
                    self.logger.warning("[gemini] model unavailable; trying next candidate", extra=log_extra)
                    if on_model_not_found is not None:
                        on_model_not_found(model_id)
                    continue

                self.logger.error("[gemini] generation failed", extra=log_extra)
                break

            text = self._extract_response_text(response) or ""
            self.logger.info(
                "[gemini] model response received",
                extra={"model_id": model_id, "models_tried": list(attempted), "length": len(text)}
            )
            return GenerationResult(text=text, model_id=model_id, attempted=attempted)

        raise GenerationFailedError(last_error or "Unknown error", attempted)

    def _generation_config(self) -> Optional[types.GenerateContentConfig]:
        if self.temperature is None:
            return None
        return types.GenerateContentConfig(temperature=self.temperature)

    def _extract_response_text(self, response: Any) -> Optional[str]:
        """Extract text from a Gemini response, handling multi-part candidates."""
        # Simple path
        text_attr = getattr(response, "text", None)
        if isinstance(text_attr, str) and text_attr.strip():
            return text_attr

        parts_text: List[str] = []
        for cand in getattr(response, "candidates", None) or []:
            content = getattr(cand, "content", None)
            for part in getattr(content, "parts", None) or []:
                t = getattr(part, "text", None)
                if t:
                    parts_text.append(t)

        combined = "\n".join(parts_text).strip()
        if not combined:
            self.logger.warning("[gemini] Empty response from model")
            return None
        self.logger.debug("[gemini] combined parts length", extra={"len": len(combined)})
        return combined
