"""Longitude/latitude to map-surface projection.

The map is a fixed 700x1150 drawing surface covering roughly 3°W–28°E and
38.7°N–64.7°N. The transform is affine and carries no state::

    x = 23 * lon + 61
    y = (63.8 - lat) * 44.3 + 40
"""

from __future__ import annotations

from typing import Iterable, Sequence

from .geometry import Path, Point

SURFACE_WIDTH = 700
SURFACE_HEIGHT = 1150

LON_SCALE = 23.0
LON_OFFSET = 61.0
LAT_ORIGIN = 63.8
LAT_SCALE = 44.3
LAT_OFFSET = 40.0

Coord = Sequence[float]


def project(lon: float, lat: float) -> Point:
    """Map ``(lon, lat)`` onto the surface. Points outside the box are not clamped."""
    return Point(LON_SCALE * lon + LON_OFFSET, (LAT_ORIGIN - lat) * LAT_SCALE + LAT_OFFSET)


def unproject(x: float, y: float) -> tuple[float, float]:
    return (x - LON_OFFSET) / LON_SCALE, LAT_ORIGIN - (y - LAT_OFFSET) / LAT_SCALE


def _bounds() -> tuple[float, float, float, float]:
    west, north = unproject(0, 0)
    east, south = unproject(SURFACE_WIDTH, SURFACE_HEIGHT)
    return west, east, south, north


NOMINAL_BOUNDS = _bounds()
"""``(west, east, south, north)`` in degrees; exactly the visible surface."""


def _polyline(coords: Iterable[Coord]) -> Path:
    path = Path()
    for i, (lon, lat) in enumerate(coords):
        point = project(lon, lat)
        if i == 0:
            path.move_to(point)
        else:
            path.line_to(point)
    return path


def build_closed_path(coords: Iterable[Coord]) -> Path:
    """Closed outline for a land mass."""
    path = _polyline(coords)
    if not path.is_empty:
        path.close()
    return path


def build_open_path(coords: Iterable[Coord]) -> Path:
    """Open line for a border or a route."""
    return _polyline(coords)
