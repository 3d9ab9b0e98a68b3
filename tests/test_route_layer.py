"""Tests for route_layer module."""

import pytest

from conftest import make_route, make_suggestion
from map_surface import FoliumMapSurface
from route_geometry import extract_route_points
from route_layer import (
    END_MARKER_COLOR,
    ROUTE_COLORS,
    START_MARKER_COLOR,
    RouteLayer,
    route_color,
)
from selection import SelectionCoordinator
from viewport import fit_viewport


def _styles(surface: FoliumMapSurface) -> dict:
    return {line.key: line.style for line in surface.lines}


class TestScenarios:
    def test_a_three_routes_first_active_viewport_on_first(self, layer, coordinator, surface,
                                                           three_suggestions):
        coordinator.set_suggestions(three_suggestions)
        assert {line.key for line in surface.lines} == {"A", "B", "C"}
        assert surface.lines[-1].key == "A"

        expected = fit_viewport([extract_route_points(three_suggestions[0].route)])
        assert surface.viewport == expected
        # Route A spans 48.10..48.20 / 11.50..11.60; padded by 12% each side.
        assert surface.viewport.bounds.south == pytest.approx(48.088)
        assert surface.viewport.bounds.north == pytest.approx(48.212)
        assert surface.viewport.bounds.west == pytest.approx(11.488)
        assert surface.viewport.bounds.east == pytest.approx(11.612)

    def test_b_single_point_route_renders_nothing_viewport_unchanged(self, layer, coordinator,
                                                                     surface, three_suggestions):
        coordinator.set_suggestions(three_suggestions)
        before = surface.viewport
        coordinator.set_suggestions([make_suggestion("lonely", make_route((11.0, 48.0)))])
        assert surface.lines == ()
        assert surface.markers == ()
        assert surface.viewport == before

    def test_b_on_fresh_surface_keeps_default_camera(self, layer, coordinator, surface):
        center, zoom = surface.center, surface.zoom
        coordinator.set_suggestions([make_suggestion("lonely", make_route((11.0, 48.0)))])
        assert surface.viewport is None
        assert (surface.center, surface.zoom) == (center, zoom)

    def test_c_selecting_b_restyles_and_refits(self, layer, coordinator, surface,
                                               three_suggestions):
        coordinator.set_suggestions(three_suggestions)
        coordinator.select("B")
        styles = _styles(surface)
        assert surface.lines[-1].key == "B"
        assert styles["B"].weight > styles["A"].weight
        assert styles["B"].opacity > styles["A"].opacity
        assert surface.viewport == fit_viewport([extract_route_points(three_suggestions[1].route)])

    def test_d_new_response_resets_active(self, layer, coordinator, surface, three_suggestions):
        coordinator.set_suggestions(three_suggestions)
        coordinator.select("C")
        coordinator.set_suggestions([
            make_suggestion("X", make_route((9.0, 47.0), (9.1, 47.1))),
            make_suggestion("Y", make_route((9.2, 47.2), (9.3, 47.3))),
        ])
        assert coordinator.active_id == "X"
        assert {line.key for line in surface.lines} == {"X", "Y"}
        assert surface.lines[-1].key == "X"

    def test_e_unknown_selection_leaves_map_alone(self, layer, coordinator, surface,
                                                  three_suggestions):
        coordinator.set_suggestions(three_suggestions)
        lines, markers, viewport = surface.lines, surface.markers, surface.viewport
        coordinator.select("unknown-id")
        assert (surface.lines, surface.markers, surface.viewport) == (lines, markers, viewport)


class TestStyling:
    def test_active_precedence(self, layer, coordinator, surface, three_suggestions):
        coordinator.set_suggestions(three_suggestions)
        active = surface.lines[-1]
        for line in surface.lines[:-1]:
            assert active.style.weight > line.style.weight
            assert active.style.opacity > line.style.opacity

    def test_colors_follow_response_position(self, layer, coordinator, surface, three_suggestions):
        coordinator.set_suggestions(three_suggestions)
        before = {key: style.color for key, style in _styles(surface).items()}
        coordinator.select("C")
        after = {key: style.color for key, style in _styles(surface).items()}
        assert before == after == {"A": ROUTE_COLORS[0], "B": ROUTE_COLORS[1], "C": ROUTE_COLORS[2]}

    def test_color_index_counts_skipped_suggestions(self, layer, coordinator, surface):
        coordinator.set_suggestions([
            make_suggestion("broken", None),
            make_suggestion("ok", make_route((11.0, 48.0), (11.1, 48.1))),
        ])
        assert _styles(surface)["ok"].color == ROUTE_COLORS[1]

    def test_palette_wraps(self):
        assert route_color(len(ROUTE_COLORS)) == ROUTE_COLORS[0]
        assert route_color(len(ROUTE_COLORS) + 2) == ROUTE_COLORS[2]

    def test_start_and_end_markers_on_active(self, layer, coordinator, surface, three_suggestions):
        coordinator.set_suggestions(three_suggestions)
        coordinator.select("C")
        points = extract_route_points(three_suggestions[2].route)
        start, end = surface.markers
        assert (start.point, start.color) == (points[0], START_MARKER_COLOR)
        assert (end.point, end.color) == (points[-1], END_MARKER_COLOR)


class TestRenderPass:
    def test_idempotent(self, surface, three_suggestions):
        layer = RouteLayer(surface)
        layer.render(three_suggestions, "B")
        first = (surface.lines, surface.markers, surface.viewport)
        layer.render(three_suggestions, "B")
        assert (surface.lines, surface.markers, surface.viewport) == first

    def test_malformed_routes_omitted(self, surface, three_suggestions):
        broken = make_suggestion("broken", {"points": {"coordinates": "nope"}})
        drawn = RouteLayer(surface).render((broken,) + three_suggestions, "A")
        assert drawn == 3
        assert "broken" not in {line.key for line in surface.lines}

    def test_active_without_geometry_falls_back_to_union(self, surface, three_suggestions):
        broken = make_suggestion("broken", None)
        suggestions = (broken,) + three_suggestions
        RouteLayer(surface).render(suggestions, "broken")
        expected = fit_viewport([extract_route_points(s.route) for s in three_suggestions])
        assert surface.viewport == expected
        assert surface.markers == ()
        assert all(line.style.weight == 4 for line in surface.lines)

    def test_zero_renderable_returns_zero(self, surface):
        assert RouteLayer(surface).render([make_suggestion("x", None)], "x") == 0
        assert surface.viewport is None

    def test_duplicate_active_id_draws_every_line(self, surface):
        first = make_suggestion("dup", make_route((11.0, 48.0), (11.1, 48.1)))
        second = make_suggestion("dup", make_route((10.0, 47.0), (10.1, 47.1)))
        assert RouteLayer(surface).render([first, second], "dup") == 2
        assert len(surface.lines) == 2
        # The first match is the active one and sits on top.
        assert surface.lines[-1].points == tuple(extract_route_points(first.route))
        assert surface.lines[-1].style.weight > surface.lines[0].style.weight

    def test_zoom_follows_surface_size(self):
        route = make_suggestion("R", make_route((10.0, 47.0), (12.0, 49.0)))
        small = FoliumMapSurface(map_size=(120, 120))
        big = FoliumMapSurface(map_size=(4000, 4000))
        RouteLayer(small).render([route], "R")
        RouteLayer(big).render([route], "R")
        assert small.viewport.bounds == big.viewport.bounds
        assert small.viewport.zoom < big.viewport.zoom


class TestMapSelection:
    def test_clicking_inactive_line_selects_it(self, layer, coordinator, surface,
                                               three_suggestions):
        coordinator.set_suggestions(three_suggestions)
        assert surface.handle_click("C") is True
        assert coordinator.active_id == "C"
        assert surface.lines[-1].key == "C"

    def test_clicking_unknown_key(self, layer, coordinator, surface, three_suggestions):
        coordinator.set_suggestions(three_suggestions)
        assert surface.handle_click("Start") is False
        assert surface.handle_click(None) is False
        assert coordinator.active_id == "A"


class TestLifecycle:
    def test_detach_clears_and_stops_following(self, three_suggestions):
        coordinator = SelectionCoordinator()
        surface = FoliumMapSurface()
        with RouteLayer(surface).attach(coordinator):
            coordinator.set_suggestions(three_suggestions)
            assert surface.lines
        assert surface.lines == ()
        coordinator.select("B")
        assert surface.lines == ()

    def test_attach_renders_current_state(self, three_suggestions):
        coordinator = SelectionCoordinator()
        coordinator.set_suggestions(three_suggestions)
        surface = FoliumMapSurface()
        RouteLayer(surface).attach(coordinator)
        assert len(surface.lines) == 3
