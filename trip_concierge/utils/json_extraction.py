"""
Locate and parse the JSON value embedded in free-form model text.

Extraction is a best-effort heuristic; well-formedness is only checked by
safe_json_parse.
"""
import json
import re
from typing import Any, NamedTuple, Optional

_FENCE_PATTERN = re.compile(r"```(?:json)?\s*([\s\S]*?)\s*```", re.IGNORECASE)
_JSON_STARTS = ("{", "[")


class JsonParseResult(NamedTuple):
    ok: bool
    data: Any = None
    error: Optional[str] = None


def _first_index(text: str, *chars: str) -> int:
    positions = [i for i in (text.find(c) for c in chars) if i != -1]
    return min(positions) if positions else -1


def extract_first_json(text: Optional[str]) -> Optional[str]:
    """Return the substring of `text` most likely to be a single JSON value, or None"""
    trimmed = (text or "").strip()
    if not trimmed:
        return None

    if trimmed.startswith(_JSON_STARTS):
        return trimmed

    fence = _FENCE_PATTERN.search(trimmed)
    if fence and fence.group(1):
        inner = fence.group(1).strip()
        if inner.startswith(_JSON_STARTS):
            return inner

    start = _first_index(trimmed, "{", "[")
    if start == -1:
        return None
    candidate = trimmed[start:]
    end = max(candidate.rfind("}"), candidate.rfind("]"))
    if end == -1:
        return None
    return candidate[:end + 1].strip()


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Invalid JSON constant: {name}")


def safe_json_parse(text: str) -> JsonParseResult:
    """Strict JSON parse; NaN and Infinity are rejected"""
    try:
        return JsonParseResult(ok=True, data=json.loads(text, parse_constant=_reject_constant))
    except ValueError as e:
        return JsonParseResult(ok=False, error=str(e))
