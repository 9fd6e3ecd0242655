"""Points and drawable paths on the map surface."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import NamedTuple

from shapely.geometry import LineString

# Straight pieces used to approximate one cubic segment when measuring length.
CUBIC_STEPS = 48


class Point(NamedTuple):
    x: float
    y: float


def distance(a: Point, b: Point) -> float:
    return math.hypot(b.x - a.x, b.y - a.y)


def _cubic(p0: Point, c1: Point, c2: Point, p1: Point, t: float) -> Point:
    u = 1 - t
    a, b, c, d = u * u * u, 3 * u * u * t, 3 * u * t * t, t * t * t
    return Point(
        a * p0.x + b * c1.x + c * c2.x + d * p1.x,
        a * p0.y + b * c1.y + c * c2.y + d * p1.y,
    )


def _fmt(value: float) -> str:
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return "0" if text == "-0" else text


@dataclass(frozen=True)
class Segment:
    """One drawing command: ``M``, ``L``, ``C`` or ``Z``."""

    command: str
    points: tuple[Point, ...] = ()

    def svg(self) -> str:
        if self.command == "Z":
            return "Z"
        coords = " ".join(f"{_fmt(p.x)},{_fmt(p.y)}" for p in self.points)
        return f"{self.command}{coords}"


@dataclass
class Path:
    """An SVG-compatible path that can also be measured and sampled."""

    segments: list[Segment] = field(default_factory=list)

    def move_to(self, p: Point) -> "Path":
        self.segments.append(Segment("M", (p,)))
        return self

    def line_to(self, p: Point) -> "Path":
        self.segments.append(Segment("L", (p,)))
        return self

    def curve_to(self, c1: Point, c2: Point, end: Point) -> "Path":
        self.segments.append(Segment("C", (c1, c2, end)))
        return self

    def close(self) -> "Path":
        self.segments.append(Segment("Z"))
        return self

    @property
    def d(self) -> str:
        return " ".join(s.svg() for s in self.segments)

    @property
    def is_empty(self) -> bool:
        return not self.segments

    @property
    def closed(self) -> bool:
        return bool(self.segments) and self.segments[-1].command == "Z"

    def vertices(self) -> list[Point]:
        """End points of every command, in drawing order."""
        return [s.points[-1] for s in self.segments if s.points]

    def _runs(self) -> list[list[Point]]:
        # One flattened polyline per subpath; cubics become CUBIC_STEPS pieces.
        runs: list[list[Point]] = []
        start: Point | None = None
        for seg in self.segments:
            if seg.command == "M":
                start = seg.points[0]
                runs.append([start])
            elif not runs:
                continue
            elif seg.command == "L":
                runs[-1].append(seg.points[0])
            elif seg.command == "C":
                p0 = runs[-1][-1]
                c1, c2, end = seg.points
                runs[-1].extend(
                    _cubic(p0, c1, c2, end, i / CUBIC_STEPS)
                    for i in range(1, CUBIC_STEPS + 1)
                )
            elif seg.command == "Z" and start is not None:
                runs[-1].append(start)
        return runs

    def lines(self) -> list[LineString]:
        """Flattened subpaths as shapely lines (subpaths with one point are skipped)."""
        return [LineString(run) for run in self._runs() if len(run) > 1]

    def length(self) -> float:
        return sum(line.length for line in self.lines())

    def point_at_length(self, target: float) -> Point | None:
        """Point at arc length ``target`` from the start, clamped to the path.

        Returns ``None`` for an empty path.
        """
        vertices = self.vertices()
        if not vertices:
            return None
        if target <= 0:
            return vertices[0]
        walked = 0.0
        last = vertices[0]
        for line in self.lines():
            if line.length > 0 and walked + line.length >= target:
                p = line.interpolate(target - walked)
                return Point(p.x, p.y)
            walked += line.length
            x, y = line.coords[-1]
            last = Point(x, y)
        return last
