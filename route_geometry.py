# Turns opaque route payloads into ordered lists of map coordinates.

import logging
import math
from dataclasses import dataclass, field
from typing import Any

from api_structures import Coordinates

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GeometryResult:
    """
    Tagged extraction result.
    ok is False when the payload carries no coordinate list at all.
    """
    ok: bool
    points: tuple[Coordinates, ...] = field(default_factory=tuple)


def _as_float(value: Any) -> float | None:
    # bool is an int subclass, but True/False are never coordinates.
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


def _to_coordinates(element: Any) -> Coordinates | None:
    """Converts one [lon, lat, ...] element, or returns None if it is unusable."""
    if not isinstance(element, (list, tuple)) or len(element) < 2:
        return None
    lon = _as_float(element[0])
    lat = _as_float(element[1])
    if lon is None or lat is None:
        return None
    if not (math.isfinite(lat) and math.isfinite(lon)):
        return None
    if not (-90.0 <= lat <= 90.0 and -180.0 <= lon <= 180.0):
        return None
    # The payload stores longitude first; Coordinates is latitude first.
    return Coordinates(lat=lat, lon=lon)


def extract_geometry(route: Any) -> GeometryResult:
    """
    Reads route["points"]["coordinates"] in traversal order.
    Never raises: bad elements are skipped one by one.
    """
    if not isinstance(route, dict):
        return GeometryResult(ok=False)
    points = route.get("points")
    if not isinstance(points, dict):
        return GeometryResult(ok=False)
    coordinates = points.get("coordinates")
    if not isinstance(coordinates, (list, tuple)):
        return GeometryResult(ok=False)

    extracted = []
    skipped = 0
    for element in coordinates:
        coords = _to_coordinates(element)
        if coords is None:
            skipped += 1
            continue
        extracted.append(coords)

    if skipped:
        logger.debug("Skipped %d malformed coordinate(s) out of %d", skipped, len(coordinates))
    return GeometryResult(ok=True, points=tuple(extracted))


def extract_route_points(route: Any) -> list[Coordinates]:
    """Returns the usable points of a route payload, or an empty list."""
    return list(extract_geometry(route).points)
