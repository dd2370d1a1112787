"""Progress events reported while documents are extracted."""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable, Dict, Literal, Optional

Phase = Literal["loading", "pages"]

DOCUMENT_KEYS = ("latest", "outdated")


@dataclass(frozen=True)
class ProgressEvent:
    """Progress of one document: bytes while loading, pages afterwards."""

    phase: Phase
    loaded: int
    total: int

    @property
    def percent(self) -> int:
        if not self.total:
            return 0
        return min(100, round(self.loaded / self.total * 100))

    def to_dict(self) -> Dict[str, object]:
        return {"phase": self.phase, "loaded": self.loaded, "total": self.total}


ProgressCallback = Callable[[ProgressEvent], None]


def format_duration(seconds: Optional[float]) -> str:
    """Render ``seconds`` as ``"42s"`` or ``"3m 5s"``."""
    if not seconds or math.isnan(seconds):
        return "0s"
    whole = int(seconds)
    minutes, remaining = divmod(whole, 60)
    if minutes == 0:
        return f"{remaining}s"
    return f"{minutes}m {remaining}s"


class ProgressTracker:
    """Keeps the most recent event for each of the two compared documents."""

    def __init__(self) -> None:
        self._events: Dict[str, ProgressEvent] = {}

    def update(self, key: str, event: ProgressEvent) -> None:
        if key not in DOCUMENT_KEYS:
            raise KeyError(f"Unknown document key '{key}'")
        self._events[key] = event

    def callback_for(self, key: str) -> ProgressCallback:
        def _callback(event: ProgressEvent) -> None:
            self.update(key, event)

        return _callback

    def get(self, key: str) -> Optional[ProgressEvent]:
        return self._events.get(key)

    def reset(self) -> None:
        self._events.clear()

    def describe(self, key: str) -> str:
        event = self._events.get(key)
        if event is None:
            return "Not started"
        if event.phase == "pages":
            return f"{event.loaded} of {event.total} pages processed"
        return f"{round(event.loaded / 1024)} KB of {round(event.total / 1024)} KB loaded"

    def eta(self, elapsed: float) -> str:
        """Estimate the remaining time from the combined loaded fraction."""
        loaded = sum(event.loaded for event in self._events.values())
        total = sum(event.total for event in self._events.values())
        if not loaded or not total:
            return "estimating"
        fraction = loaded / total
        remaining = elapsed * (1 / fraction - 1)
        return format_duration(max(remaining, 1.0))
