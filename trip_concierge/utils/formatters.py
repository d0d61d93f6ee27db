from typing import Any, Dict, Iterable, Optional
import json
import logging
import math
import re

ELLIPSIS = "…"
DEFAULT_TIME = "10:00"
REDACTED = "***"

_TIME_PATTERN = re.compile(r"^([0-9]{1,2})\s*[:.\- ]\s*([0-9]{1,2})$")


class ValueFormatter:
    """Lenient coercion of untrusted model output into bounded values"""

    @staticmethod
    def to_text(value: Any, fallback: str = "") -> str:
        """Coerce any JSON value to a string; None becomes the fallback"""
        if value is None:
            return fallback
        if isinstance(value, str):
            return value
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, float) and math.isfinite(value) and value.is_integer():
            return str(int(value))
        if isinstance(value, (dict, list)):
            return json.dumps(value, ensure_ascii=False, separators=(",", ":"))
        return str(value)

    @staticmethod
    def truncate(value: Any, max_len: int, fallback: str = "") -> str:
        """Trim and cap a string at max_len characters, marking cuts with an ellipsis.

        Empty results fall back to `fallback` (returned as-is, not truncated).
        """
        text = ValueFormatter.to_text(value, fallback).strip()
        if not text:
            return fallback
        if len(text) <= max_len:
            return text
        return text[:max_len - 1].rstrip() + ELLIPSIS

    @staticmethod
    def to_number(value: Any) -> Optional[float]:
        """Return a finite float for numbers and numeric strings, else None"""
        if isinstance(value, bool):
            return None
        if isinstance(value, (int, float)):
            num = float(value)
        elif isinstance(value, str):
            # float() accepts digit groups like "1_000"; treat them as non-numeric
            if "_" in value:
                return None
            try:
                num = float(value.strip())
            except ValueError:
                return None
        else:
            return None
        return num if math.isfinite(num) else None

    @staticmethod
    def clamp_int(value: Any, min_value: int, max_value: int, fallback: int) -> int:
        num = ValueFormatter.to_number(value)
        if num is None:
            return fallback
        # round half up
        return max(min_value, min(max_value, math.floor(num + 0.5)))

    @staticmethod
    def normalize_time(value: Any) -> str:
        """Normalize loose clock strings ("9:5", "09.05", "9 - 05") to HH:MM.

        Hour and minute are clamped independently. Strings that do not look like
        a time at all are returned unchanged so validation can reject them.
        """
        text = ValueFormatter.to_text(value).strip()
        if not text:
            return DEFAULT_TIME
        match = _TIME_PATTERN.match(text)
        if not match:
            return text
        hours = ValueFormatter.clamp_int(match.group(1), 0, 23, 10)
        minutes = ValueFormatter.clamp_int(match.group(2), 0, 59, 0)
        return f"{hours:02d}:{minutes:02d}"


def redact(text: Any, secrets: Iterable[Optional[str]]) -> str:
    """Replace every occurrence of the given secrets in text"""
    out = "" if text is None else str(text)
    for secret in secrets:
        if secret:
            out = out.replace(secret, REDACTED)
    return out


def safe_request_for_log(payload: Any, notes_limit: int = 200) -> Any:
    """Copy of a request payload with free-text notes capped for logging"""
    if not isinstance(payload, dict):
        return payload
    out = dict(payload)
    if "notes" in out:
        out["notes"] = ValueFormatter.truncate(out.get("notes"), notes_limit)
    return out


def log_event(logger: logging.Logger, level: int, event: str, payload: Dict[str, Any]) -> None:
    """Log an event line followed by its pretty-printed JSON payload"""
    try:
        logger.log(level, "%s\n%s", event, json.dumps(payload, ensure_ascii=False, indent=2, default=str))
    except (TypeError, ValueError):
        logger.log(level, "%s (failed to serialize payload)", event)
