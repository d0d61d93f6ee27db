from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field, ValidationError

from trip_concierge.models.itinerary_models import Itinerary
from trip_concierge.models.request_models import TripRequest
from trip_concierge.utils.errors import InvalidRequestError


class ValidationIssue(BaseModel):
    path: str  # dotted path, e.g. "days.0.items.2.time"; empty for form-level issues
    message: str
    type: str


class ValidationReport(BaseModel):
    """Field-level validation report"""
    issues: List[ValidationIssue] = Field(default_factory=list)

    @classmethod
    def from_error(cls, error: ValidationError) -> "ValidationReport":
        issues = [
            ValidationIssue(
                path=".".join(str(part) for part in err.get("loc", ())),
                message=err.get("msg", ""),
                type=err.get("type", ""),
            )
            for err in error.errors()
        ]
        return cls(issues=issues)

    @property
    def messages(self) -> List[str]:
        return [f"{i.path}: {i.message}" if i.path else i.message for i in self.issues]

    def flatten(self) -> Dict[str, Any]:
        """formErrors / fieldErrors view keyed by top-level field"""
        form_errors: List[str] = []
        field_errors: Dict[str, List[str]] = {}
        for issue in self.issues:
            if not issue.path:
                form_errors.append(issue.message)
                continue
            top = issue.path.split(".", 1)[0]
            field_errors.setdefault(top, []).append(issue.message)
        return {"formErrors": form_errors, "fieldErrors": field_errors}

    def to_payload(self) -> Dict[str, Any]:
        payload = self.flatten()
        payload["issues"] = [i.model_dump() for i in self.issues]
        return payload


class ValidationOutcome(BaseModel):
    ok: bool
    itinerary: Optional[Itinerary] = None
    report: Optional[ValidationReport] = None


class TripRequestValidator:
    """Validator for trip planning requests"""

    @staticmethod
    def check(payload: Any) -> Dict[str, Any]:
        """Validate without raising; returns {'valid', 'errors', 'request', 'report'}"""
        try:
            request = TripRequest.model_validate(payload)
        except ValidationError as e:
            report = ValidationReport.from_error(e)
            return {'valid': False, 'errors': report.messages, 'request': None, 'report': report}
        return {'valid': True, 'errors': [], 'request': request, 'report': None}

    @staticmethod
    def validate(payload: Any) -> TripRequest:
        """Validate an untyped payload into a TripRequest, applying defaults.

        Raises InvalidRequestError with a field-level report on failure.
        """
        result = TripRequestValidator.check(payload)
        if not result['valid']:
            raise InvalidRequestError(details=result['report'].to_payload())
        return result['request']


class ItineraryValidator:
    """Validator for model-produced itineraries"""

    @staticmethod
    def validate(data: Any) -> ValidationOutcome:
        try:
            itinerary = Itinerary.model_validate(data)
        except ValidationError as e:
            return ValidationOutcome(ok=False, report=ValidationReport.from_error(e))
        return ValidationOutcome(ok=True, itinerary=itinerary)


def validate_trip_request(payload: Any) -> TripRequest:
    return TripRequestValidator.validate(payload)


def validate_itinerary(data: Any) -> ValidationOutcome:
    return ItineraryValidator.validate(data)
