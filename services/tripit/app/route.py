"""Winding road through the milestones."""

from __future__ import annotations

import random
from typing import Sequence

from .geometry import Path, Point

ROUTE_JITTER = 4.0
# Horizontal pull of the control points away from the segment ends.
CONTROL_OFFSET = 20.0
LEAD_IN_BEND = 30.0


def _jitter_source(seed: int | None, index: int) -> random.Random | None:
    if seed is None:
        return None
    return random.Random(f"{seed}:{index}")


def build_route(
    points: Sequence[Point],
    jitter: float = ROUTE_JITTER,
    seed: int | None = None,
) -> Path:
    """Smooth cubic curve through ``points`` in order.

    Each control point gets a horizontal offset in ``[-jitter, jitter]``.
    Without a ``seed`` the offsets come from the process RNG, so only the
    end points are stable between calls; with a seed the offsets depend on
    ``(seed, segment index)`` and the curve is reproducible.
    """

    path = Path()
    if not points:
        return path
    path.move_to(points[0])
    for i in range(1, len(points)):
        prev, curr = points[i - 1], points[i]
        rng = _jitter_source(seed, i)
        uniform = rng.uniform if rng is not None else random.uniform
        j1 = uniform(-jitter, jitter) if jitter else 0.0
        j2 = uniform(-jitter, jitter) if jitter else 0.0
        dy = curr.y - prev.y
        path.curve_to(
            Point(prev.x + j1 + CONTROL_OFFSET, prev.y + dy * 0.4),
            Point(curr.x - j2 - CONTROL_OFFSET, prev.y + dy * 0.6),
            curr,
        )
    return path


def build_lead_in(start: Point, first: Point) -> Path:
    """Single curve from the trip's start city to the first milestone."""

    return (
        Path()
        .move_to(start)
        .curve_to(
            Point(start.x, start.y + LEAD_IN_BEND),
            Point(first.x + CONTROL_OFFSET, first.y - LEAD_IN_BEND),
            first,
        )
    )
