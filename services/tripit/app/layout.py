"""Places a configured trip on the map: cities, road and bus position."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

from . import schemas
from .cities import CityResolver
from .geometry import Path, Point
from .progress import PlacedMilestone, ProgressResult, compute_progress, reached
from .route import ROUTE_JITTER, build_lead_in, build_route


@dataclass
class PlacedStop:
    name: str
    cost: float
    description: str
    position: Point
    reached: bool


@dataclass
class TripLayout:
    stops: list[PlacedStop]
    starts: list[tuple[str, Point]]
    road: Path
    lead_in: Path | None
    progress: ProgressResult
    road_length: float = field(default=0.0)
    goal_city: str = ""
    total_cost: float = 0.0

    @property
    def goal_stops(self) -> list[PlacedStop]:
        """Stops drawn as flags, i.e. every milestone that is not a start city."""
        start_names = {name for name, _ in self.starts}
        return [s for s in self.stops if s.name not in start_names]


def plan_trip(
    config: schemas.TripConfigOut,
    milestones: Sequence[schemas.MilestoneOut],
    resolver: CityResolver,
    jitter: float = ROUTE_JITTER,
    seed: int | None = None,
) -> TripLayout:
    amount = config.current_amount
    positions = resolver.place_all([m.name for m in milestones])
    stops = [
        PlacedStop(
            name=m.name,
            cost=m.cost,
            description=m.description,
            position=pos,
            reached=reached(amount, m.cost),
        )
        for m, pos in zip(milestones, positions)
    ]
    starts = [(city, resolver.resolve(city, 0, 1)) for city in config.start_cities]

    road = build_route(positions, jitter=jitter, seed=seed)
    lead_in = build_lead_in(starts[0][1], positions[0]) if starts and positions else None
    progress = compute_progress(
        amount,
        [PlacedMilestone(m.cost, pos) for m, pos in zip(milestones, positions)],
        route=road,
    )
    return TripLayout(
        stops=stops,
        starts=starts,
        road=road,
        lead_in=lead_in,
        progress=progress,
        road_length=road.length(),
        goal_city=config.goal_city,
        total_cost=config.total_cost,
    )
