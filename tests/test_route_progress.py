import math

import pytest

from services.tripit.app.cities import CityResolver, fallback_position, resolve_position
from services.tripit.app.geodata import load_geography
from services.tripit.app.geometry import Path, Point
from services.tripit.app.progress import (
    PlacedMilestone,
    compute_progress,
    locate_segment,
    percentage,
)
from services.tripit.app.projection import project
from services.tripit.app.route import build_lead_in, build_route


# Cities


def test_known_city_ignores_index_and_total() -> None:
    expected = project(18.07, 59.33)
    assert resolve_position("Stockholm", 0, 1) == expected
    assert resolve_position("  Stockholm ", 3, 7) == expected


def test_unknown_city_uses_fallback_formula() -> None:
    point = resolve_position("Atlantis", 2, 5)
    assert point.x == pytest.approx(300 + math.sin(1.5) * 80)
    assert point.y == pytest.approx(555)
    assert resolve_position("Atlantis", 2, 5) == point


def test_fallback_for_single_or_empty_total_is_centred() -> None:
    assert fallback_position(0, 1) == fallback_position(0, 0)
    assert fallback_position(0, 1).y == pytest.approx(80 + 0.5 * 950)


def test_resolver_uses_injected_table() -> None:
    resolver = CityResolver({"Home": Point(1, 2)})
    assert "Home" in resolver
    assert "Stockholm" not in resolver
    placed = resolver.place_all(["Home", "Nowhere", "Else"])
    assert placed[0] == Point(1, 2)
    assert placed[1] == fallback_position(1, 3)
    assert placed[2].y == pytest.approx(80 + 950)


def test_default_geography_table() -> None:
    geography = load_geography()
    known = geography.known_positions()
    assert known["Roma"] == known["Rom"] == known["Rome"]
    assert len(geography.land) == 10
    assert all(shape.path.closed for shape in geography.land)


# Route


def test_route_with_no_points_is_empty() -> None:
    assert build_route([]).is_empty
    assert build_route([]).d == ""


def test_route_with_one_point_is_degenerate() -> None:
    route = build_route([Point(10, 20)])
    assert route.d == "M10,20"
    assert route.vertices() == [Point(10, 20)]


def test_route_without_jitter_has_fixed_controls() -> None:
    route = build_route([Point(0, 0), Point(100, 200)], jitter=0)
    curve = route.segments[1]
    assert curve.command == "C"
    assert curve.points == (Point(20, 80), Point(80, 120), Point(100, 200))


def test_route_jitter_is_bounded_and_endpoints_stable() -> None:
    points = [Point(100, 50), Point(300, 400), Point(250, 900)]
    for _ in range(20):
        route = build_route(points)
        assert route.vertices() == points
        for prev, seg in zip(points, route.segments[1:]):
            c1, c2, end = seg.points
            assert -4 <= c1.x - prev.x - 20 <= 4
            assert -4 <= end.x - c2.x - 20 <= 4


def test_seeded_route_is_reproducible() -> None:
    points = [Point(100, 50), Point(300, 400), Point(250, 900)]
    assert build_route(points, seed=7).d == build_route(points, seed=7).d
    assert build_route(points, seed=7).d != build_route(points, seed=8).d


def test_lead_in_curve() -> None:
    lead = build_lead_in(Point(10, 10), Point(100, 200))
    assert lead.d == "M10,10 C10,40 120,170 100,200"


# Progress

STRAIGHT = [
    PlacedMilestone(0, Point(0, 0)),
    PlacedMilestone(1000, Point(0, 100)),
    PlacedMilestone(3000, Point(0, 400)),
]
STRAIGHT_ROAD = Path().move_to(Point(0, 0)).line_to(Point(0, 100)).line_to(Point(0, 400))


def test_scenario_first_segment_reached() -> None:
    result = compute_progress(1000, STRAIGHT, STRAIGHT_ROAD)
    assert result.fraction == pytest.approx(0.25)
    assert result.marker == pytest.approx(Point(0, 100))


def test_scenario_half_way_through_second_segment() -> None:
    result = compute_progress(2000, STRAIGHT, STRAIGHT_ROAD)
    assert result.segment_index == 1
    assert result.segment_fraction == pytest.approx(0.5)
    assert result.fraction == pytest.approx(0.625)
    assert result.marker == pytest.approx(Point(0, 250))


def test_nothing_raised_stays_at_start() -> None:
    result = compute_progress(0, STRAIGHT)
    assert result.fraction == 0
    assert result.marker == Point(0, 0)


def test_full_amount_reaches_the_end() -> None:
    result = compute_progress(3000, STRAIGHT)
    assert result.fraction == pytest.approx(1.0)
    assert result.marker == pytest.approx(Point(0, 400))
    assert compute_progress(10_000, STRAIGHT).fraction == pytest.approx(1.0)


def test_below_first_cost_and_short_lists() -> None:
    costly = [PlacedMilestone(500, Point(5, 5)), PlacedMilestone(1000, Point(5, 50))]
    assert compute_progress(100, costly).fraction == 0
    assert compute_progress(100, costly).marker == Point(5, 5)

    single = compute_progress(999, [PlacedMilestone(0, Point(7, 8))])
    assert single.fraction == 0
    assert single.marker == Point(7, 8)

    empty = compute_progress(999, [])
    assert empty.fraction == 0
    assert empty.marker == Point(0, 0)


def test_zero_length_route() -> None:
    same = [PlacedMilestone(0, Point(3, 3)), PlacedMilestone(100, Point(3, 3))]
    result = compute_progress(50, same)
    assert result.fraction == 0
    assert result.marker == Point(3, 3)


def test_fraction_is_monotonic_in_amount() -> None:
    milestones = [
        PlacedMilestone(0, Point(100, 50)),
        PlacedMilestone(800, Point(400, 300)),
        PlacedMilestone(1500, Point(200, 700)),
        PlacedMilestone(4000, Point(350, 1100)),
    ]
    road = build_route([m.position for m in milestones], seed=3)
    fractions = [compute_progress(amount, milestones, road).fraction for amount in range(0, 4500, 50)]
    assert fractions == sorted(fractions)
    assert all(0 <= f <= 1 for f in fractions)


def test_marker_follows_curved_road() -> None:
    milestones = [PlacedMilestone(0, Point(0, 0)), PlacedMilestone(100, Point(0, 400))]
    road = build_route([m.position for m in milestones], jitter=0)
    result = compute_progress(25, milestones, road)
    assert result.fraction == pytest.approx(0.25)
    # The curve bows to the side, so the marker is off the straight line.
    assert result.marker.x > 1
    assert result.marker == pytest.approx(road.point_at_length(road.length() / 4))


def test_decreasing_costs_act_as_ceiling() -> None:
    assert locate_segment(2500, [0, 2000, 1000, 3000]) == (2, pytest.approx(0.5))
    assert locate_segment(1000, [0, 1000, 1000, 2000]) == (2, 0.0)
    milestones = [
        PlacedMilestone(0, Point(0, 0)),
        PlacedMilestone(2000, Point(0, 100)),
        PlacedMilestone(1000, Point(0, 200)),
    ]
    result = compute_progress(1500, milestones)
    assert 0 <= result.fraction <= 1


def test_percentage() -> None:
    assert percentage(1500, 3000) == 50
    assert percentage(5000, 3000) == 100
    assert percentage(10, 0) == 0
