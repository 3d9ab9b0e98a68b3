# Defines the standardized, internal data structures for the application.

from dataclasses import dataclass, field
from typing import Any

MIN_SUGGESTIONS = 1
MAX_SUGGESTIONS = 6


def _clamp(value: float, low: float, high: float) -> float:
    return min(high, max(low, value))


@dataclass(frozen=True)
class Coordinates:
    """A standardized representation of geographic coordinates."""
    lat: float
    lon: float


@dataclass(frozen=True)
class Preferences:
    """The weighted preference profile sent along with every request."""
    fitness_level: float = 0.5
    scenic_preference: float = 0.7
    avoid_main_roads: float = 0.7
    time_priority: float = 0.4

    def clamped(self) -> "Preferences":
        """Returns a copy with every weight forced into [0, 1]."""
        return Preferences(
            fitness_level=_clamp(self.fitness_level, 0.0, 1.0),
            scenic_preference=_clamp(self.scenic_preference, 0.0, 1.0),
            avoid_main_roads=_clamp(self.avoid_main_roads, 0.0, 1.0),
            time_priority=_clamp(self.time_priority, 0.0, 1.0),
        )

    def to_dict(self) -> dict:
        return {
            'fitness_level': self.fitness_level,
            'scenic_preference': self.scenic_preference,
            'avoid_main_roads': self.avoid_main_roads,
            'time_priority': self.time_priority,
        }


@dataclass(frozen=True)
class SuggestionRequest:
    """Body of a POST /suggestions call."""
    start: str
    end: str
    max_suggestions: int = 3
    preferences: Preferences = field(default_factory=Preferences)

    def to_dict(self) -> dict:
        return {
            'start': self.start,
            'end': self.end,
            'max_suggestions': int(_clamp(self.max_suggestions, MIN_SUGGESTIONS, MAX_SUGGESTIONS)),
            'preferences': self.preferences.clamped().to_dict(),
        }


@dataclass(frozen=True)
class SuggestionMetrics:
    """Scalar metrics the backend computed for one route."""
    distance_m: float = 0.0
    duration_s: float = 0.0
    ascend_m: float = 0.0
    scenic_ratio: float = 0.0
    major_road_ratio: float = 0.0

    @classmethod
    def from_dict(cls, data: Any) -> "SuggestionMetrics":
        if not isinstance(data, dict):
            return cls()
        return cls(
            distance_m=max(0.0, float(data.get('distance_m') or 0.0)),
            duration_s=max(0.0, float(data.get('duration_s') or 0.0)),
            ascend_m=max(0.0, float(data.get('ascend_m') or 0.0)),
            scenic_ratio=_clamp(float(data.get('scenic_ratio') or 0.0), 0.0, 1.0),
            major_road_ratio=_clamp(float(data.get('major_road_ratio') or 0.0), 0.0, 1.0),
        )


@dataclass(frozen=True)
class Suggestion:
    """One ranked candidate route. The route payload is kept opaque."""
    id: str
    score: float
    explanation: str
    metrics: SuggestionMetrics
    route: Any = None

    @classmethod
    def from_dict(cls, data: dict) -> "Suggestion":
        # KeyError/TypeError/ValueError here mean the response itself is malformed.
        return cls(
            id=str(data['id']),
            score=float(data.get('score') or 0.0),
            explanation=str(data.get('explanation') or ''),
            metrics=SuggestionMetrics.from_dict(data.get('metrics')),
            route=data.get('route'),
        )


@dataclass(frozen=True)
class ResponseMeta:
    """Optional bookkeeping the backend returns next to the suggestions."""
    source_paths: int
    returned_suggestions: int


@dataclass(frozen=True)
class SuggestionResponse:
    """A complete ranking response. Replaces any previous response as a whole."""
    suggestions: tuple[Suggestion, ...]
    meta: ResponseMeta | None = None

    @classmethod
    def from_dict(cls, data: Any) -> "SuggestionResponse":
        if not isinstance(data, dict) or not isinstance(data.get('suggestions'), list):
            raise ValueError("response has no 'suggestions' list")
        suggestions = tuple(Suggestion.from_dict(item) for item in data['suggestions'])
        meta = None
        raw_meta = data.get('meta')
        if isinstance(raw_meta, dict):
            meta = ResponseMeta(
                source_paths=int(raw_meta.get('source_paths') or 0),
                returned_suggestions=int(raw_meta.get('returned_suggestions') or 0),
            )
        return cls(suggestions=suggestions, meta=meta)
