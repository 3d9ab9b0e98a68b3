# Bounding box and camera math for framing routes on the map.

import math
from dataclasses import dataclass
from typing import Iterable, Sequence

from api_structures import Coordinates

PAD_RATIO = 0.12
PIXEL_PADDING = (24, 24)
MAX_ZOOM = 14
TILE_SIZE = 256

# Pixel size of the map widget; used to turn bounds into a zoom level.
DEFAULT_MAP_SIZE = (800, 520)


@dataclass(frozen=True)
class Bounds:
    """An axis-aligned rectangle in geographic coordinates."""
    south: float
    west: float
    north: float
    east: float

    @classmethod
    def of(cls, points: Iterable[Coordinates]) -> "Bounds":
        points = list(points)
        if not points:
            raise ValueError("cannot compute bounds of an empty point list")
        lats = [p.lat for p in points]
        lons = [p.lon for p in points]
        return cls(south=min(lats), west=min(lons), north=max(lats), east=max(lons))

    def union(self, other: "Bounds") -> "Bounds":
        return Bounds(
            south=min(self.south, other.south),
            west=min(self.west, other.west),
            north=max(self.north, other.north),
            east=max(self.east, other.east),
        )

    def pad(self, ratio: float) -> "Bounds":
        """Grows every side by ratio times the span along that axis."""
        lat_buffer = (self.north - self.south) * ratio
        lon_buffer = (self.east - self.west) * ratio
        return Bounds(
            south=self.south - lat_buffer,
            west=self.west - lon_buffer,
            north=self.north + lat_buffer,
            east=self.east + lon_buffer,
        )

    @property
    def center(self) -> Coordinates:
        return Coordinates(lat=(self.south + self.north) / 2, lon=(self.west + self.east) / 2)

    def corners(self) -> list[list[float]]:
        """[[south, west], [north, east]], the shape folium's fit_bounds expects."""
        return [[self.south, self.west], [self.north, self.east]]


@dataclass(frozen=True)
class ViewportFit:
    """Camera transform derived from a bounding rectangle."""
    bounds: Bounds
    center: Coordinates
    zoom: int
    padding: tuple[int, int] = PIXEL_PADDING
    max_zoom: int = MAX_ZOOM


def _mercator_y(lat: float) -> float:
    # Clamp to the Web Mercator limit so the poles stay finite.
    lat = max(-85.05112878, min(85.05112878, lat))
    sin = math.sin(math.radians(lat))
    return math.log((1 + sin) / (1 - sin)) / 2


def zoom_for_bounds(bounds: Bounds, map_size: tuple[int, int] = DEFAULT_MAP_SIZE,
                    padding: tuple[int, int] = PIXEL_PADDING, max_zoom: int = MAX_ZOOM) -> int:
    """Largest whole zoom level at which bounds fit the map, never above max_zoom."""
    width = max(1, map_size[0] - 2 * padding[0])
    height = max(1, map_size[1] - 2 * padding[1])

    lon_fraction = (bounds.east - bounds.west) / 360.0
    lat_fraction = (_mercator_y(bounds.north) - _mercator_y(bounds.south)) / (2 * math.pi)

    candidates = [float(max_zoom)]
    if lon_fraction > 0:
        candidates.append(math.log2(width / TILE_SIZE / lon_fraction))
    if lat_fraction > 0:
        candidates.append(math.log2(height / TILE_SIZE / lat_fraction))
    return max(0, min(max_zoom, math.floor(min(candidates))))


def fit_viewport(lines: Sequence[Sequence[Coordinates]], pad_ratio: float = PAD_RATIO,
                 map_size: tuple[int, int] = DEFAULT_MAP_SIZE, max_zoom: int = MAX_ZOOM) -> ViewportFit:
    """
    Frames the union of each line's bounds, padded by pad_ratio per side.
    Raises ValueError when there is nothing to frame.
    """
    bounds = None
    for line in lines:
        if not line:
            continue
        line_bounds = Bounds.of(line)
        bounds = line_bounds if bounds is None else bounds.union(line_bounds)
    if bounds is None:
        raise ValueError("fit_viewport needs at least one non-empty line")

    padded = bounds.pad(pad_ratio)
    return ViewportFit(
        bounds=padded,
        center=padded.center,
        zoom=zoom_for_bounds(padded, map_size=map_size, max_zoom=max_zoom),
        max_zoom=max_zoom,
    )
