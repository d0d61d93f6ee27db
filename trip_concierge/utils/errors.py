"""
Error taxonomy for the itinerary pipeline.

Every failure the pipeline can surface is an ItineraryServiceError subclass
carrying a stable `code` tag and the HTTP status the API layer answers with.
"""
from typing import Any, Dict, List, Optional


class ItineraryServiceError(Exception):
    """Base class for all pipeline errors surfaced to the request handler"""

    code: str = "unexpected"
    status_code: int = 500
    default_message: str = "Unexpected error"

    def __init__(self, message: Optional[str] = None, *, details: Any = None, raw: Any = None):
        self.message = message or self.default_message
        self.details = details
        self.raw = raw
        super().__init__(self.message)

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"error": self.message, "code": self.code}
        if self.details is not None:
            payload["details"] = self.details
        if self.raw is not None:
            payload["raw"] = self.raw
        return payload


class InvalidRequestError(ItineraryServiceError):
    code = "invalid_input"
    status_code = 400
    default_message = "Invalid request"


class MissingCredentialError(ItineraryServiceError):
    code = "missing_credential"
    status_code = 500
    default_message = "Missing GEMINI_API_KEY environment variable."


class QuotaExceededError(ItineraryServiceError):
    code = "quota_exceeded"
    status_code = 429
    default_message = "Gemini quota exceeded"


class GeoBlockedError(ItineraryServiceError):
    code = "geo_blocked"
    status_code = 503
    default_message = "Gemini API is not available from current location/network"


class GenerationFailedError(ItineraryServiceError):
    code = "generation_failed"
    status_code = 502
    default_message = "Gemini request failed"

    def __init__(self, last_error: str, attempted: List[str]):
        self.last_error = last_error
        self.attempted = list(attempted)
        super().__init__(details={"lastError": last_error, "modelsTried": self.attempted})


class ExtractionFailedError(ItineraryServiceError):
    code = "extraction_failed"
    status_code = 502
    default_message = "Model did not return JSON"


class ParseFailedError(ItineraryServiceError):
    code = "parse_failed"
    status_code = 502
    default_message = "Failed to parse JSON"


class SchemaMismatchError(ItineraryServiceError):
    code = "schema_mismatch"
    status_code = 502
    default_message = "JSON does not match schema"


class UnexpectedError(ItineraryServiceError):
    pass


class RequestAbortedError(ItineraryServiceError):
    code = "aborted"
    status_code = 499
    default_message = "Request aborted by client"
