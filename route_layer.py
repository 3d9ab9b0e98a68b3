# Draws the current suggestion set on a map surface, styled by which one is active.

import logging
from typing import Callable, Sequence

from api_structures import Coordinates, Suggestion
from map_surface import LineStyle, MapSurface
from route_geometry import extract_route_points
from selection import SelectionCoordinator
from viewport import fit_viewport

logger = logging.getLogger(__name__)

ROUTE_COLORS = ('#13a574', '#1697a6', '#3273dc', '#ec7a08', '#c66d3d', '#8844b0')
START_MARKER_COLOR = '#0f766e'
END_MARKER_COLOR = '#ec7a08'

ACTIVE_WEIGHT, ACTIVE_OPACITY = 7, 0.95
INACTIVE_WEIGHT, INACTIVE_OPACITY = 4, 0.45


def route_color(index: int) -> str:
    """Colour for the suggestion at this position in the response."""
    return ROUTE_COLORS[index % len(ROUTE_COLORS)]


def line_style(index: int, active: bool) -> LineStyle:
    if active:
        return LineStyle(color=route_color(index), weight=ACTIVE_WEIGHT, opacity=ACTIVE_OPACITY)
    return LineStyle(color=route_color(index), weight=INACTIVE_WEIGHT, opacity=INACTIVE_OPACITY)


class RouteLayer:
    """
    Sole owner of the map surface. Every render clears the surface and
    redraws all renderable routes from scratch, then re-fits the camera.
    """

    def __init__(self, surface: MapSurface, on_select: Callable[[str], object] | None = None):
        self.surface = surface
        self._on_select = on_select
        self._unsubscribe: Callable[[], None] | None = None

    # --- Lifecycle ---

    def attach(self, coordinator: SelectionCoordinator) -> "RouteLayer":
        """Follows coordinator: line clicks select, every change re-renders."""
        self.detach()
        self._on_select = coordinator.select
        self._unsubscribe = coordinator.subscribe(self.render)
        self.render(coordinator.suggestions, coordinator.active_id)
        return self

    def detach(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
            self.surface.clear()

    def __enter__(self) -> "RouteLayer":
        return self

    def __exit__(self, *exc: object) -> None:
        self.detach()

    # --- Rendering ---

    def render(self, suggestions: Sequence[Suggestion], active_id: str | None) -> int:
        """Redraws everything. Returns how many routes were drawn."""
        self.surface.clear()

        drawn: list[tuple[int, Suggestion, list[Coordinates]]] = []
        for index, suggestion in enumerate(suggestions):
            points = extract_route_points(suggestion.route)
            if len(points) < 2:
                logger.debug("Suggestion %s has %d usable point(s); not drawn",
                             suggestion.id, len(points))
                continue
            drawn.append((index, suggestion, points))

        if not drawn:
            logger.debug("Nothing renderable; keeping the current viewport")
            return 0

        active = None
        for index, suggestion, points in drawn:
            if active is None and active_id is not None and suggestion.id == active_id:
                active = (index, suggestion, points)
                continue
            self.surface.add_line(suggestion.id, points, line_style(index, False),
                                  on_click=self._click_handler(suggestion.id))

        # Drawn last so nothing covers it.
        if active is not None:
            index, suggestion, points = active
            self.surface.add_line(suggestion.id, points, line_style(index, True),
                                  on_click=self._click_handler(suggestion.id))
            self.surface.add_marker(points[0], START_MARKER_COLOR, "Start")
            self.surface.add_marker(points[-1], END_MARKER_COLOR, "End")
            fit = fit_viewport([points], map_size=self.surface.map_size)
        else:
            fit = fit_viewport([points for _, _, points in drawn],
                               map_size=self.surface.map_size)

        self.surface.fit_bounds(fit)
        return len(drawn)

    def _click_handler(self, suggestion_id: str) -> Callable[[], None]:
        def on_click() -> None:
            if self._on_select is not None:
                self._on_select(suggestion_id)
        return on_click
