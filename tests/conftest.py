"""Shared test fixtures: small suggestion sets with realistic route payloads."""

import pytest

from api_adapters import RankingApiAdapter
from api_structures import Suggestion, SuggestionMetrics, SuggestionResponse
from map_surface import FoliumMapSurface
from route_layer import RouteLayer
from selection import SelectionCoordinator


def make_route(*lonlats) -> dict:
    """Route payload shaped like the backend's: points.coordinates as [lon, lat]."""
    return {"distance": 1000.0, "points": {"type": "LineString", "coordinates": [list(p) for p in lonlats]}}


def make_suggestion(suggestion_id: str, route=None, score: float = 0.5) -> Suggestion:
    return Suggestion(
        id=suggestion_id,
        score=score,
        explanation=f"{suggestion_id} explanation",
        metrics=SuggestionMetrics(
            distance_m=12_345.0,
            duration_s=2_520.0,
            ascend_m=87.0,
            scenic_ratio=0.345,
            major_road_ratio=0.1,
        ),
        route=route,
    )


# Three non-overlapping routes around Munich / Augsburg.
ROUTE_A = make_route((11.50, 48.10), (11.55, 48.15), (11.60, 48.20))
ROUTE_B = make_route((10.80, 48.30), (10.90, 48.40))
ROUTE_C = make_route((11.00, 47.90), (11.10, 47.95), (11.20, 48.00))


@pytest.fixture()
def three_suggestions() -> tuple:
    return (
        make_suggestion("A", ROUTE_A, 0.91),
        make_suggestion("B", ROUTE_B, 0.84),
        make_suggestion("C", ROUTE_C, 0.70),
    )


@pytest.fixture()
def coordinator() -> SelectionCoordinator:
    return SelectionCoordinator()


@pytest.fixture()
def surface() -> FoliumMapSurface:
    return FoliumMapSurface()


@pytest.fixture()
def layer(surface: FoliumMapSurface, coordinator: SelectionCoordinator):
    """A route layer following the coordinator, detached after the test."""
    with RouteLayer(surface).attach(coordinator) as attached:
        yield attached


class FakeAdapter(RankingApiAdapter):
    """Returns queued responses (or raises queued errors) in order."""

    def __init__(self, *outcomes):
        self.outcomes = list(outcomes)
        self.requests = []

    def get_suggestions(self, request):
        self.requests.append(request)
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    def check_health(self):
        return {"healthy": True, "detail": "ok"}


@pytest.fixture()
def fake_adapter_factory():
    return FakeAdapter


@pytest.fixture()
def response_of():
    def build(*suggestions, meta=None) -> SuggestionResponse:
        return SuggestionResponse(suggestions=tuple(suggestions), meta=meta)
    return build


