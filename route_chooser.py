# Command-line tool to request ranked bike routes, compare them and export a map.

import argparse
import sys

import logging_config
from api_adapters import HttpRankingAdapter, RankingApiAdapter
from api_structures import Preferences, Suggestion
from formatting import ascent, km, mins, percent
from map_surface import FoliumMapSurface
from request_panel import DEFAULT_END, DEFAULT_START, RequestPanel, parse_latlon
from route_layer import RouteLayer, route_color
from selection import SelectionCoordinator


def display_results(suggestions: tuple[Suggestion, ...], active_id: str | None) -> None:
    """Formats and prints the comparison table, marking the active suggestion."""
    if not suggestions:
        print("\nThe ranking service returned no suggestions.")
        return

    print("\nHere are the ranked route suggestions.\n")
    header = "|   | Route        | Score | Distance | ETA    | Ascent | Scenic | Main roads | Colour  |"
    divider = "-" * len(header)
    print(header)
    print(divider)

    for index, s in enumerate(suggestions):
        marker = "*" if s.id == active_id else " "
        m = s.metrics
        print(f"| {marker} | {s.id:<12} | {s.score:.3f} | "
              f"{km(m.distance_m):>8} | {mins(m.duration_s):>6} | "
              f"{ascent(m.ascend_m):>6} | {percent(m.scenic_ratio):>6} | "
              f"{percent(m.major_road_ratio):>10} | {route_color(index)} |")

    print(divider)


def display_active(suggestion: Suggestion | None) -> None:
    if suggestion is None:
        return
    print(f"\nActive: {suggestion.id} ({km(suggestion.metrics.distance_m)}, "
          f"{mins(suggestion.metrics.duration_s)})")
    if suggestion.explanation:
        print(f"   {suggestion.explanation}")


def run(args: argparse.Namespace, adapter: RankingApiAdapter) -> int:
    """Runs one request/compare/export cycle. Returns the process exit code."""
    for label, value in (("start", args.start), ("end", args.end)):
        if parse_latlon(value) is None:
            print(f"Error: {label} must be 'lat,lon', got '{value}'.", file=sys.stderr)
            return 2

    coordinator = SelectionCoordinator()
    panel = RequestPanel(adapter, coordinator)
    surface = FoliumMapSurface()

    with RouteLayer(surface).attach(coordinator):
        preferences = Preferences(
            fitness_level=args.fitness,
            scenic_preference=args.scenic,
            avoid_main_roads=args.avoid_main_roads,
            time_priority=args.time_priority,
        )
        print("Ranking routes...")
        if not panel.submit(args.start, args.end, args.alternatives, preferences):
            print(f"Error: {panel.error}", file=sys.stderr)
            return 1

        if panel.meta is not None:
            print(f"Received {panel.meta.source_paths} candidate path(s), "
                  f"returning {panel.meta.returned_suggestions}.")

        if args.select and not coordinator.select(args.select):
            if not coordinator.is_active(args.select):
                print(f"   ! '{args.select}' is not one of the returned suggestions; keeping "
                      f"{coordinator.active_id}.")

        display_results(coordinator.suggestions, coordinator.active_id)
        display_active(coordinator.active_suggestion)

        if args.output:
            if not surface.lines:
                print("\nNone of the suggestions carried drawable geometry; no map written.")
            else:
                path = surface.save(args.output)
                print(f"\nMap written to {path}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Bike Route Chooser: compare ranked route alternatives.")
    parser.add_argument('--start', default=DEFAULT_START, help="Start position as 'lat,lon'.")
    parser.add_argument('--end', default=DEFAULT_END, help="End position as 'lat,lon'.")
    parser.add_argument('-n', '--alternatives', type=int, default=3,
                        help="Number of suggestions to request (1-6).")
    defaults = Preferences()
    parser.add_argument('--fitness', type=float, default=defaults.fitness_level)
    parser.add_argument('--scenic', type=float, default=defaults.scenic_preference)
    parser.add_argument('--avoid-main-roads', type=float, default=defaults.avoid_main_roads)
    parser.add_argument('--time-priority', type=float, default=defaults.time_priority)
    parser.add_argument('--select', help="Suggestion id to make active.")
    parser.add_argument('-o', '--output', default="routes.html",
                        help="Where to write the HTML map (empty to skip).")
    parser.add_argument('--api-base', help="Ranking service base URL.")
    parser.add_argument('-v', '--verbose', action='store_true',
                        help="Enable verbose mode to see the exact API calls being made.")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging_config.configure("DEBUG" if args.verbose else None)

    try:
        adapter = HttpRankingAdapter(base_url=args.api_base)
    except ValueError as e:
        print(e, file=sys.stderr)
        return 2
    return run(args, adapter)


if __name__ == '__main__':
    sys.exit(main())
