# Drawable map surface: the capability the route layer draws on, plus its folium implementation.

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Sequence

import folium

from api_structures import Coordinates
from viewport import DEFAULT_MAP_SIZE, ViewportFit

logger = logging.getLogger(__name__)

DEFAULT_CENTER = Coordinates(lat=48.137154, lon=11.576124)
DEFAULT_ZOOM = 10
TILE_MAX_ZOOM = 19


@dataclass(frozen=True)
class LineStyle:
    color: str
    weight: int
    opacity: float


@dataclass(frozen=True)
class DrawnLine:
    key: str
    points: tuple[Coordinates, ...]
    style: LineStyle


@dataclass(frozen=True)
class DrawnMarker:
    point: Coordinates
    color: str
    label: str


class MapSurface(ABC):
    """
    Blueprint for anything the route layer can draw on.
    Lines and markers are kept in draw order; later items are on top.
    """
    # Pixel size of the drawable area; the camera zoom is fitted to it.
    map_size: tuple[int, int] = DEFAULT_MAP_SIZE

    @abstractmethod
    def clear(self) -> None:
        """Removes every line and marker. The camera is left alone."""
        pass

    @abstractmethod
    def add_line(self, key: str, points: Sequence[Coordinates], style: LineStyle,
                 on_click: Callable[[], None] | None = None) -> None:
        pass

    @abstractmethod
    def add_marker(self, point: Coordinates, color: str, label: str) -> None:
        pass

    @abstractmethod
    def fit_bounds(self, fit: ViewportFit) -> None:
        pass


class FoliumMapSurface(MapSurface):
    """
    Keeps the drawn state in memory and turns it into a folium.Map on demand.
    Line clicks come back from the browser as the line's tooltip (its key).
    """

    def __init__(self, center: Coordinates = DEFAULT_CENTER, zoom: int = DEFAULT_ZOOM,
                 map_size: tuple[int, int] = DEFAULT_MAP_SIZE):
        self.map_size = map_size
        self.center = center
        self.zoom = zoom
        self.viewport: ViewportFit | None = None
        self._lines: list[DrawnLine] = []
        self._markers: list[DrawnMarker] = []
        self._click_handlers: dict[str, Callable[[], None]] = {}

    @property
    def lines(self) -> tuple[DrawnLine, ...]:
        return tuple(self._lines)

    @property
    def markers(self) -> tuple[DrawnMarker, ...]:
        return tuple(self._markers)

    def clear(self) -> None:
        self._lines.clear()
        self._markers.clear()
        self._click_handlers.clear()

    def add_line(self, key: str, points: Sequence[Coordinates], style: LineStyle,
                 on_click: Callable[[], None] | None = None) -> None:
        self._lines.append(DrawnLine(key=key, points=tuple(points), style=style))
        if on_click is not None:
            self._click_handlers[key] = on_click

    def add_marker(self, point: Coordinates, color: str, label: str) -> None:
        self._markers.append(DrawnMarker(point=point, color=color, label=label))

    def fit_bounds(self, fit: ViewportFit) -> None:
        self.viewport = fit
        self.center = fit.center
        self.zoom = fit.zoom

    def handle_click(self, key: str | None) -> bool:
        """Runs the click handler registered for the line with this key."""
        handler = self._click_handlers.get(key) if key is not None else None
        if handler is None:
            logger.debug("No clickable line for %r", key)
            return False
        handler()
        return True

    # --- folium output ---

    def to_folium(self) -> folium.Map:
        m = folium.Map(
            location=[self.center.lat, self.center.lon],
            zoom_start=self.zoom,
            tiles="OpenStreetMap",
            max_zoom=TILE_MAX_ZOOM,
            prefer_canvas=True,
        )
        for line in self._lines:
            folium.PolyLine(
                locations=[[p.lat, p.lon] for p in line.points],
                color=line.style.color,
                weight=line.style.weight,
                opacity=line.style.opacity,
                line_cap="round",
                line_join="round",
                tooltip=line.key,
            ).add_to(m)
        for marker in self._markers:
            folium.CircleMarker(
                location=[marker.point.lat, marker.point.lon],
                radius=6,
                color=marker.color,
                weight=2,
                fill=True,
                fill_color="#ffffff",
                fill_opacity=1,
                tooltip=marker.label,
            ).add_to(m)
        if self.viewport is not None:
            m.fit_bounds(
                self.viewport.bounds.corners(),
                padding=self.viewport.padding,
                max_zoom=self.viewport.max_zoom,
            )
        return m

    def save(self, path: str | Path) -> Path:
        """Writes the map as a standalone HTML page."""
        path = Path(path)
        self.to_folium().save(str(path))
        logger.info("Map written to %s", path)
        return path
