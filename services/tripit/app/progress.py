"""Where the bus sits on the road for a given amount raised."""

from __future__ import annotations

from dataclasses import dataclass
from typing import NamedTuple, Sequence

from .geometry import Path, Point, distance
from .route import build_route


class PlacedMilestone(NamedTuple):
    cost: float
    position: Point


@dataclass(frozen=True)
class ProgressResult:
    fraction: float
    """Share of the road covered, measured along its length, in ``[0, 1]``."""
    marker: Point
    segment_index: int = 0
    segment_fraction: float = 0.0


def _ceilings(costs: Sequence[float]) -> list[float]:
    # A cost below an earlier one acts as equal to it.
    out: list[float] = []
    for cost in costs:
        out.append(max(cost, out[-1]) if out else cost)
    return out


def locate_segment(current_amount: float, costs: Sequence[float]) -> tuple[int, float]:
    """Return ``(segment index, fraction funded within it)``.

    A segment index equal to ``len(costs) - 1`` means the last milestone has
    been reached.
    """

    thresholds = _ceilings(costs)
    reached, seg_frac = 0, 0.0
    for i in range(len(thresholds) - 1):
        curr, nxt = thresholds[i], thresholds[i + 1]
        if current_amount >= nxt:
            reached = i + 1
        elif current_amount >= curr:
            reached = i
            seg_frac = (current_amount - curr) / (nxt - curr)
            break
    return reached, seg_frac


def compute_progress(
    current_amount: float,
    milestones: Sequence[PlacedMilestone],
    route: Path | None = None,
) -> ProgressResult:
    """Project ``current_amount`` onto the road through ``milestones``.

    The covered share is computed from straight-line segment lengths, then
    applied to the arc length of ``route`` (the drawn curve) to place the
    marker. When ``route`` is omitted a curve without jitter is used.
    """

    if not milestones:
        return ProgressResult(fraction=0.0, marker=Point(0.0, 0.0))
    first = milestones[0].position
    if len(milestones) < 2:
        return ProgressResult(fraction=0.0, marker=first)

    positions = [m.position for m in milestones]
    segment, seg_frac = locate_segment(current_amount, [m.cost for m in milestones])

    lengths = [distance(a, b) for a, b in zip(positions, positions[1:])]
    total = sum(lengths)
    covered = sum(lengths[:segment])
    if segment < len(lengths):
        covered += lengths[segment] * seg_frac
    fraction = min(max(covered / total, 0.0), 1.0) if total > 0 else 0.0

    if fraction <= 0:
        return ProgressResult(0.0, first, segment, seg_frac)
    if route is None:
        route = build_route(positions, jitter=0)
    marker = route.point_at_length(fraction * route.length()) or first
    return ProgressResult(fraction, marker, segment, seg_frac)


def percentage(current_amount: float, total_cost: float) -> int:
    """Funding progress as a whole percentage, capped at 100."""

    if total_cost <= 0:
        return 0
    return int(min(current_amount / total_cost, 1.0) * 100 + 0.5)


def reached(current_amount: float, cost: float) -> bool:
    return current_amount >= cost
