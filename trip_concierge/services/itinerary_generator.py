import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional, Tuple

from trip_concierge.models.itinerary_models import Itinerary, ItineraryResponse
from trip_concierge.models.place_models import Poi
from trip_concierge.prompts.system_prompts import build_itinerary_prompt
from trip_concierge.services.gemini_service import GeminiService, build_model_candidates
from trip_concierge.services.itinerary_repair import repair_itinerary_shape
from trip_concierge.services.model_resolver import ModelIdCache, ModelResolver
from trip_concierge.services.poi_catalog import PoiCatalog, get_catalog
from trip_concierge.utils.config import Settings, get_settings
from trip_concierge.utils.errors import (
    ExtractionFailedError,
    InvalidRequestError,
    MissingCredentialError,
    ParseFailedError,
    RequestAbortedError,
    SchemaMismatchError,
)
from trip_concierge.utils.formatters import ValueFormatter, log_event, safe_request_for_log
from trip_concierge.utils.json_extraction import extract_first_json, safe_json_parse
from trip_concierge.utils.validators import validate_itinerary, validate_trip_request

GeminiFactory = Callable[[str], GeminiService]


def filter_known_pois(itinerary: Itinerary, catalog: PoiCatalog) -> Tuple[Itinerary, List[Poi]]:
    """Drop items whose poiId is not in the catalog and collect the referenced POIs.

    Returns a new itinerary; `pois` keeps first-reference order without duplicates.
    """
    used_ids: Dict[str, None] = {}
    days = []
    for day in itinerary.days:
        kept = [item for item in day.items if item.poi_id in catalog]
        for item in kept:
            used_ids.setdefault(item.poi_id, None)
        days.append(day.model_copy(update={"items": kept}))
    pois = [catalog.get(poi_id) for poi_id in used_ids]
    return itinerary.model_copy(update={"days": days}), pois


def unknown_poi_ids(itinerary: Itinerary, catalog: PoiCatalog) -> List[str]:
    return [item.poi_id for day in itinerary.days for item in day.items if item.poi_id not in catalog]


class ItineraryGeneratorService:
    """Request → prompt → model → validated, POI-consistent itinerary"""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        catalog: Optional[PoiCatalog] = None,
        resolver: Optional[ModelResolver] = None,
        gemini_factory: Optional[GeminiFactory] = None,
    ):
        self.settings = settings or get_settings()
        self.catalog = catalog or get_catalog()
        self.resolver = resolver or ModelResolver(
            base_url=self.settings.GEMINI_BASE_URL,
            api_version=self.settings.GEMINI_API_VERSION,
            timeout_seconds=self.settings.LIST_MODELS_TIMEOUT_SECONDS,
            cache=ModelIdCache(ttl_seconds=self.settings.MODEL_CACHE_TTL_SECONDS),
        )
        self.gemini_factory = gemini_factory or self._default_gemini
        # one client per API key; each genai.Client owns its own connection pools
        self._gemini_services: Dict[str, GeminiService] = {}
        self.logger = logging.getLogger(__name__)

    def _default_gemini(self, api_key: str) -> GeminiService:
        return GeminiService(
            api_key=api_key,
            api_version=self.settings.GEMINI_API_VERSION,
            timeout_seconds=self.settings.REQUEST_TIMEOUT_SECONDS,
            temperature=self.settings.GEMINI_TEMPERATURE,
        )

    def _gemini_for(self, api_key: str) -> GeminiService:
        gemini = self._gemini_services.get(api_key)
        if gemini is None:
            gemini = self.gemini_factory(api_key)
            self._gemini_services[api_key] = gemini
        return gemini

    async def generate(
        self,
        payload: Any,
        *,
        is_cancelled: Optional[Callable[[], Awaitable[bool]]] = None,
    ) -> ItineraryResponse:
        api_key = self.settings.GEMINI_API_KEY
        if not api_key:
            self.logger.error("[itinerary] Missing GEMINI_API_KEY")
            raise MissingCredentialError()

        try:
            request = validate_trip_request(payload)
        except InvalidRequestError as e:
            log_event(self.logger, logging.WARNING, "[itinerary] Invalid request", {
                "request": self._request_for_log(payload),
                "details": e.details,
            })
            raise

        if is_cancelled is not None and await is_cancelled():
            self.logger.info("[itinerary] request cancelled before model resolution")
            raise RequestAbortedError()

        candidates = self.catalog.for_region(request.base_region)
        preferred = self.settings.GEMINI_MODEL
        resolved = await self.resolver.resolve(api_key, preferred)
        prompt = build_itinerary_prompt(request, candidates)
        model_ids = build_model_candidates(preferred, resolved)

        self.logger.info(
            "[itinerary] Start generation",
            extra={
                "days": request.days,
                "region": request.base_region.value,
                "candidate_pois": len(candidates),
                "models": model_ids,
                "prompt_len": len(prompt),
            }
        )
        self.logger.debug("[itinerary] prompt\n%s", prompt)

        def forget_resolved(model_id: str) -> None:
            if not preferred and model_id == resolved:
                self.resolver.invalidate()

        gemini = self._gemini_for(api_key)
        result = await gemini.generate_with_fallback(
            prompt,
            model_ids,
            is_cancelled=is_cancelled,
            on_model_not_found=forget_resolved,
        )
        diagnostics = {
            "apiVersion": self.settings.GEMINI_API_VERSION,
            "modelsTried": result.attempted,
            "request": self._request_for_log(request.model_dump(mode="json", by_alias=True)),
        }

        itinerary = self._parse_itinerary(result.text, diagnostics)
        itinerary, pois = self._filter_pois(itinerary)
        return ItineraryResponse(request=request, itinerary=itinerary, pois=pois)

    def _parse_itinerary(self, text: str, diagnostics: Dict[str, Any]) -> Itinerary:
        limit = self.settings.LOG_TEXT_LIMIT

        json_text = extract_first_json(text)
        if not json_text:
            log_event(self.logger, logging.ERROR, "[itinerary] Model did not return JSON", {
                **diagnostics,
                "rawText": ValueFormatter.truncate(text, limit),
            })
            raise ExtractionFailedError(raw=text)

        parsed = safe_json_parse(json_text)
        if not parsed.ok:
            log_event(self.logger, logging.ERROR, "[itinerary] Failed to parse JSON", {
                **diagnostics,
                "parseError": parsed.error,
                "jsonText": ValueFormatter.truncate(json_text, limit),
                "rawText": ValueFormatter.truncate(text, limit),
            })
            raise ParseFailedError(details=parsed.error, raw=text)

        outcome = validate_itinerary(parsed.data)
        if outcome.ok:
            return outcome.itinerary

        first_report = outcome.report
        repair = repair_itinerary_shape(parsed.data)
        if repair.changed:
            log_event(self.logger, logging.WARNING, "[repair] itinerary reshaped after validation failure", {
                "validation": first_report.messages,
                "repairs": [a.as_dict() for a in repair.actions],
            })

        outcome = validate_itinerary(repair.value)
        if not outcome.ok:
            details = outcome.report.to_payload()
            log_event(self.logger, logging.ERROR, "[itinerary] JSON does not match schema", {
                **diagnostics,
                "details": details,
                "raw": parsed.data,
            })
            raise SchemaMismatchError(details=details, raw=parsed.data)
        return outcome.itinerary

    def _filter_pois(self, itinerary: Itinerary) -> Tuple[Itinerary, List[Poi]]:
        dropped = unknown_poi_ids(itinerary, self.catalog)
        if dropped:
            self.logger.warning("[itinerary] dropped items with unknown POIs", extra={"poi_ids": dropped})
        return filter_known_pois(itinerary, self.catalog)

    def _request_for_log(self, payload: Any) -> Any:
        return safe_request_for_log(payload, self.settings.LOG_NOTES_LIMIT)
