import json
from pathlib import Path
from typing import Iterator

import pytest
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from services.tripit.app import deps, schemas, store
from services.tripit.app.cities import CityResolver
from services.tripit.app.geodata import load_geography
from services.tripit.app.layout import plan_trip
from services.tripit.app.render import render_map
from services.tripit.app.snapshot import SnapshotError, read_snapshot, write_snapshot


@pytest.fixture()
def db(monkeypatch: pytest.MonkeyPatch) -> Iterator[Session]:
    class TestSettings(deps.Settings):
        database_url = "sqlite:///:memory:"

    monkeypatch.setattr(deps, "get_settings", lambda: TestSettings())
    deps.reset_db()
    deps.init_db()
    session = deps.get_sessionmaker()()
    try:
        yield session
    finally:
        session.close()


def test_set_milestones_replaces_everything(db: Session) -> None:
    store.set_milestones(db, [schemas.MilestoneIn(name=n, cost=c) for n, c in [("A", 0), ("B", 5)]])
    store.set_milestones(
        db,
        [
            schemas.MilestoneIn(name="X", cost=0, order_index=9),
            schemas.MilestoneIn(name="Y", cost=1, order_index=3),
            schemas.MilestoneIn(name="Z", cost=2, order_index=1),
        ],
    )
    rows = store.get_milestones(db)
    assert [(m.name, m.order_index) for m in rows] == [("X", 0), ("Y", 1), ("Z", 2)]


def test_config_is_a_singleton(db: Session) -> None:
    store.upsert_trip_config(db, schemas.TripConfigIn(goal_city="Rom", total_cost=100))
    store.upsert_trip_config(
        db, schemas.TripConfigIn(goal_city="Wien", total_cost=200, current_amount=20)
    )
    row = store.get_trip_config(db)
    assert row is not None
    assert (row.goal_city, row.total_cost, row.current_amount) == ("Wien", 200, 20)
    assert row.start_cities == ["Umeå", "Sundsvall"]
    assert store.update_progress(db, 50).current_amount == 50  # type: ignore[union-attr]


def test_update_progress_without_config(db: Session) -> None:
    assert store.update_progress(db, 10) is None
    assert store.export_snapshot(db) is None


def test_snapshot_round_trip(db: Session, tmp_path: Path) -> None:
    path = tmp_path / "nested" / "trip-config.json"
    assert read_snapshot(path) is None

    snapshot = schemas.TripSnapshot(
        goal_city="Rom",
        total_cost=3000,
        current_amount=100,
        start_cities=["Umeå"],
        milestones=[
            schemas.SnapshotMilestone(name="Rom", cost=3000, order_index=1),
            schemas.SnapshotMilestone(name="Umeå", cost=0, order_index=0),
        ],
    )
    write_snapshot(path, snapshot)
    raw = json.loads(path.read_text(encoding="utf-8"))
    assert raw["start_cities"] == ["Umeå"]

    store.seed_from_snapshot(db, read_snapshot(path))  # type: ignore[arg-type]
    exported = store.export_snapshot(db)
    assert exported is not None
    assert [m.name for m in exported.milestones] == ["Umeå", "Rom"]
    assert exported.current_amount == 100


def test_bad_snapshot(tmp_path: Path) -> None:
    path = tmp_path / "trip-config.json"
    path.write_text(json.dumps({"goal_city": "Rom"}), encoding="utf-8")
    with pytest.raises(SnapshotError):
        read_snapshot(path)


def _layout(amount: float, seed: int | None = 5):
    config = schemas.TripConfigOut(
        goal_city="Rom", total_cost=3000, current_amount=amount, start_cities=["Umeå", "Sundsvall"]
    )
    milestones = [
        schemas.MilestoneOut(id=1, name="Sundsvall", cost=0, order_index=0),
        schemas.MilestoneOut(id=2, name="Stockholm", cost=500, order_index=1),
        schemas.MilestoneOut(id=3, name="Okänd by", cost=1500, order_index=2, description="?"),
        schemas.MilestoneOut(id=4, name="Rom", cost=3000, order_index=3),
    ]
    geography = load_geography()
    resolver = CityResolver(geography.known_positions())
    return plan_trip(config, milestones, resolver, seed=seed), geography


def test_plan_trip_places_everything() -> None:
    layout, geography = _layout(1000)
    known = geography.known_positions()
    assert layout.stops[0].position == known["Sundsvall"]
    assert layout.starts[0] == ("Umeå", known["Umeå"])
    assert layout.lead_in is not None
    assert layout.lead_in.vertices()[0] == known["Umeå"]
    assert [s.reached for s in layout.stops] == [True, True, False, False]
    assert [s.name for s in layout.goal_stops] == ["Stockholm", "Okänd by", "Rom"]
    assert 0 < layout.progress.fraction < 1


def test_render_map_draws_bus_only_with_progress() -> None:
    layout, geography = _layout(1000)
    svg = render_map(layout, geography, 1000)
    assert svg.startswith("<svg")
    assert 'id="bus"' in svg
    assert 'id="roadReachedPath"' in svg
    assert svg.count('class="goal"') == 1
    assert svg.count('class="start"') == 2
    assert "Okänd by" in svg

    idle, _ = _layout(0)
    idle_svg = render_map(idle, geography, 0)
    assert 'id="bus"' not in idle_svg
    assert 'id="roadReachedPath"' not in idle_svg


def test_custom_geography_file(tmp_path: Path) -> None:
    path = tmp_path / "geo.json"
    path.write_text(json.dumps({"cities": {"Home": [0, 63.8]}}), encoding="utf-8")
    geography = load_geography(path)
    assert geography.known_positions() == {"Home": (61, 40)}
    assert geography.land == []


def test_save_trip_is_all_or_nothing(db: Session) -> None:
    store.save_trip(
        db,
        config=schemas.TripConfigIn(goal_city="Rom", total_cost=100),
        milestones=[schemas.MilestoneIn(name="Rom", cost=100)],
    )
    broken = schemas.MilestoneIn.model_construct(name=None, cost=1.0, order_index=0, description="")
    with pytest.raises(IntegrityError):
        store.save_trip(
            db,
            config=schemas.TripConfigIn(goal_city="Wien", total_cost=900),
            milestones=[broken],
        )
    row = store.get_trip_config(db)
    assert row is not None
    assert (row.goal_city, row.total_cost) == ("Rom", 100)
    assert [m.name for m in store.get_milestones(db)] == ["Rom"]


def test_snapshot_rejects_unreadable_files(tmp_path: Path) -> None:
    with pytest.raises(SnapshotError):
        read_snapshot(tmp_path)
    path = tmp_path / "trip-config.json"
    path.write_bytes(b"\xff\xfe\x00{")
    with pytest.raises(SnapshotError):
        read_snapshot(path)


def test_render_map_header_shows_route_and_funding() -> None:
    layout, geography = _layout(1000)
    svg = render_map(layout, geography, 1000)
    assert 'id="header"' in svg
    assert "From Umeå &amp; Sundsvall to Rom" in svg
    assert "1,000 / 3,000 kr (33%)" in svg
