from fastapi import FastAPI, HTTPException, Depends, Request, Query
from fastapi.middleware.cors import CORSMiddleware
import json
import logging
from datetime import datetime, timezone
from functools import lru_cache
from typing import Any, Dict, Optional

from trip_concierge.models.place_models import Region
from trip_concierge.services.itinerary_generator import ItineraryGeneratorService
from trip_concierge.services.poi_catalog import get_catalog
from trip_concierge.utils.config import get_settings
from trip_concierge.utils.errors import ItineraryServiceError, UnexpectedError
from trip_concierge.utils.formatters import redact
from trip_concierge.utils.validators import TripRequestValidator

# Configure logging
logging.basicConfig(
    level=get_settings().LOG_LEVEL,
    format=get_settings().LOG_FORMAT
)
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="Trip Concierge API",
    description="Day-by-day St. Petersburg itineraries generated by Gemini over a curated POI catalog",
    version=get_settings().API_VERSION,
    docs_url="/docs",
    redoc_url="/redoc"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Dependency to get services; one generator per process so the model cache is shared
@lru_cache(maxsize=1)
def get_itinerary_service() -> ItineraryGeneratorService:
    return ItineraryGeneratorService(settings=get_settings(), catalog=get_catalog())


async def _read_json_body(request: Request) -> Any:
    """Request body as JSON; an empty or malformed body counts as {} so defaults apply"""
    try:
        return await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        logger.info("[api] request body is not JSON; using defaults")
        return {}


@app.post("/api/itinerary")
async def generate_itinerary(
    request: Request,
    service: ItineraryGeneratorService = Depends(get_itinerary_service)
):
    """
    Generate a day-by-day itinerary for the submitted trip preferences.

    Returns {request, itinerary, pois}; every itinerary item references a POI
    from the catalog.
    """
    payload = await _read_json_body(request)
    try:
        result = await service.generate(payload, is_cancelled=request.is_disconnected)
        return result.model_dump(mode="json", by_alias=True)
    except ItineraryServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_payload())
    except Exception as e:
        message = redact(str(e), [service.settings.GEMINI_API_KEY])
        logger.exception("[api] Unexpected error", extra={"error": message})
        raise HTTPException(status_code=500, detail=UnexpectedError(details=message).to_payload())


@app.post("/api/v1/validate-request")
async def validate_trip_request(request: Request):
    """Validate trip preferences without generating an itinerary"""
    payload = await _read_json_body(request)
    result = TripRequestValidator.check(payload)
    return {
        "valid": result['valid'],
        "errors": result['errors'],
        "details": result['report'].to_payload() if result['report'] else None,
        "request": result['request'].model_dump(mode="json", by_alias=True) if result['request'] else None
    }


@app.get("/api/v1/pois")
async def list_pois(region: Optional[str] = Query(None, description="spb, lenobl or both")):
    """Catalog entries (optionally filtered by region) plus tag labels for the UI"""
    catalog = get_catalog()
    allowed = {r.value for r in Region} | {"both"}
    if region is not None and region not in allowed:
        raise HTTPException(status_code=400, detail={
            "error": "Invalid region",
            "code": "invalid_input",
            "details": f"region must be one of {sorted(allowed)}"
        })
    pois = catalog.for_region(region) if region else catalog.pois
    return {
        "pois": [p.model_dump(mode="json") for p in pois],
        "tags": [t.model_dump(mode="json") for t in catalog.tag_options()],
        "total": len(pois)
    }


@app.get("/health")
async def health_check() -> Dict[str, Any]:
    """Health check endpoint"""
    settings = get_settings()
    return {
        "status": "healthy" if settings.GEMINI_API_KEY else "degraded",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "services": {
            "gemini_credentials": bool(settings.GEMINI_API_KEY),
            "poi_catalog": len(get_catalog()) > 0
        },
        "version": settings.API_VERSION
    }


@app.get("/")
async def root():
    """Root endpoint with API information"""
    return {
        "message": "Trip Concierge API",
        "version": get_settings().API_VERSION,
        "description": "Generate St. Petersburg itineraries using AI",
        "docs": "/docs",
        "health": "/health"
    }
