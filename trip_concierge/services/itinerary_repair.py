"""
Best-effort reshaping of a parsed-but-invalid itinerary.

The repairer only runs after strict validation rejected a parsed JSON value.
It rebuilds every field with bounded, defaulted values and records each change
as a RepairAction so the trace can be logged instead of silently discarded.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List

from trip_concierge.utils.formatters import ValueFormatter, DEFAULT_TIME

logger = logging.getLogger(__name__)

MAX_DAYS = 3
MAX_ITEMS_PER_DAY = 6
MAX_TIPS = 4
MAX_ALTERNATIVES = 8

DEFAULT_TITLE = "Itinerary"
DEFAULT_SUMMARY = "A personal route built around your interests."
DEFAULT_POI_ID = "palace-square"
DEFAULT_WHY = "A good stop on the route."
DEFAULT_MOVE = "Getting around the city."
DEFAULT_DURATION_MIN = 90


@dataclass
class RepairAction:
    path: str
    action: str  # defaulted | truncated | coerced | clamped | normalized | dropped | capped
    detail: str = ""

    def as_dict(self) -> Dict[str, str]:
        return {"path": self.path, "action": self.action, "detail": self.detail}


@dataclass
class RepairResult:
    value: Any
    actions: List[RepairAction] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.actions)


class ItineraryShapeRepairer:
    def __init__(self):
        self.actions: List[RepairAction] = []

    def repair(self, raw: Any) -> RepairResult:
        self.actions = []
        if not isinstance(raw, dict):
            return RepairResult(value=raw)

        days_raw = self._list(raw, "days", "days")
        days = [
            self._repair_day(day, idx)
            for idx, day in enumerate(self._objects(days_raw, "days", MAX_DAYS))
        ]

        repaired = {
            "title": self._text("title", raw.get("title"), 120, DEFAULT_TITLE),
            "summary": self._text("summary", raw.get("summary"), 1000, DEFAULT_SUMMARY),
            "days": days,
            "alternatives": self._strings("alternatives", raw.get("alternatives"), 240, MAX_ALTERNATIVES),
        }
        return RepairResult(value=repaired, actions=list(self.actions))

    def _repair_day(self, day: Dict[str, Any], idx: int) -> Dict[str, Any]:
        path = f"days.{idx}"
        items_raw = self._list(day, "items", f"{path}.items")
        items = [
            self._repair_item(item, f"{path}.items.{i}")
            for i, item in enumerate(self._objects(items_raw, f"{path}.items", MAX_ITEMS_PER_DAY))
        ]
        return {
            "dayNumber": self._int(f"{path}.dayNumber", day.get("dayNumber"), 1, MAX_DAYS, idx + 1),
            "label": self._text(f"{path}.label", day.get("label"), 140, f"Day {idx + 1}"),
            "items": items,
        }

    def _repair_item(self, item: Dict[str, Any], path: str) -> Dict[str, Any]:
        return {
            "time": self._time(f"{path}.time", item.get("time")),
            "poiId": self._text(f"{path}.poiId", item.get("poiId"), 80, DEFAULT_POI_ID),
            "durationMin": self._int(f"{path}.durationMin", item.get("durationMin"), 15, 240, DEFAULT_DURATION_MIN),
            "why": self._text(f"{path}.why", item.get("why"), 320, DEFAULT_WHY),
            "move": self._text(f"{path}.move", item.get("move"), 320, DEFAULT_MOVE),
            "tips": self._strings(f"{path}.tips", item.get("tips"), 120, MAX_TIPS),
        }

    # --- field helpers (each records what it changed) ---

    def _note(self, path: str, action: str, detail: str = "") -> None:
        self.actions.append(RepairAction(path=path, action=action, detail=detail))

    def _list(self, obj: Dict[str, Any], key: str, path: str) -> List[Any]:
        value = obj.get(key)
        if isinstance(value, list):
            return value
        if value is not None:
            self._note(path, "dropped", f"expected a list, got {type(value).__name__}")
        return []

    def _objects(self, values: List[Any], path: str, cap: int) -> List[Dict[str, Any]]:
        objects = [v for v in values if isinstance(v, dict)]
        if len(objects) != len(values):
            self._note(path, "dropped", f"{len(values) - len(objects)} non-object entries")
        if len(objects) > cap:
            self._note(path, "capped", f"{len(objects)} -> {cap}")
        return objects[:cap]

    def _text(self, path: str, value: Any, cap: int, fallback: str) -> str:
        result = ValueFormatter.truncate(value, cap, fallback)
        text = ValueFormatter.to_text(value).strip()
        if not text:
            self._note(path, "defaulted", repr(fallback))
        elif len(text) > cap:
            self._note(path, "truncated", f"{len(text)} -> {cap} chars")
        elif not isinstance(value, str):
            self._note(path, "coerced", f"{type(value).__name__} -> str")
        return result

    def _int(self, path: str, value: Any, lo: int, hi: int, fallback: int) -> int:
        result = ValueFormatter.clamp_int(value, lo, hi, fallback)
        num = ValueFormatter.to_number(value)
        if num is None:
            self._note(path, "defaulted", str(fallback))
        elif num != result or not isinstance(value, int) or isinstance(value, bool):
            self._note(path, "clamped", f"{value!r} -> {result}")
        return result

    def _time(self, path: str, value: Any) -> str:
        result = ValueFormatter.normalize_time(value)
        if result != value:
            action = "defaulted" if result == DEFAULT_TIME and not ValueFormatter.to_text(value).strip() else "normalized"
            self._note(path, action, f"{value!r} -> {result!r}")
        return result

    def _strings(self, path: str, values: Any, cap: int, max_count: int) -> List[str]:
        if not isinstance(values, list):
            if values is not None:
                self._note(path, "dropped", f"expected a list, got {type(values).__name__}")
            return []
        out = [ValueFormatter.truncate(v, cap) for v in values]
        if any(len(ValueFormatter.to_text(v).strip()) > cap for v in values):
            self._note(path, "truncated", f"entries over {cap} chars")
        kept = [s for s in out if s]
        if len(kept) != len(out):
            self._note(path, "dropped", f"{len(out) - len(kept)} empty entries")
        if len(kept) > max_count:
            self._note(path, "capped", f"{len(kept)} -> {max_count}")
        return kept[:max_count]


def repair_itinerary_shape(raw: Any) -> RepairResult:
    return ItineraryShapeRepairer().repair(raw)
