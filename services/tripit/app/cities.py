"""Placement of milestone and start cities on the map."""

from __future__ import annotations

import math
from typing import Mapping, Sequence

from .geodata import load_geography
from .geometry import Point


def fallback_position(index: int, total: int) -> Point:
    """Synthetic placement for a name that is not in the city table."""

    t = index / (total - 1) if total > 1 else 0.5
    return Point(300 + math.sin(t * 3) * 80, 80 + t * 950)


def resolve_position(
    name: str,
    index: int,
    total: int,
    known: Mapping[str, Point] | None = None,
) -> Point:
    """Return the surface position for ``name``.

    Known names always map to their table position, whatever ``index`` and
    ``total`` are; other names fall back to :func:`fallback_position`.
    """

    if known is None:
        known = load_geography().known_positions()
    position = known.get(name.strip())
    if position is not None:
        return position
    return fallback_position(index, total)


class CityResolver:
    def __init__(self, known: Mapping[str, Point]) -> None:
        self._known = dict(known)

    def __contains__(self, name: str) -> bool:
        return name.strip() in self._known

    def resolve(self, name: str, index: int = 0, total: int = 1) -> Point:
        return resolve_position(name, index, total, self._known)

    def place_all(self, names: Sequence[str]) -> list[Point]:
        total = len(names)
        return [self.resolve(name, i, total) for i, name in enumerate(names)]
