"""Persistence for the trip configuration and its milestones."""

from __future__ import annotations

from typing import Sequence

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from src.common.logging import get_logger

from . import models, schemas

logger = get_logger(__name__)

CONFIG_ID = 1


def get_trip_config(db: Session) -> models.TripConfig | None:
    return db.get(models.TripConfig, CONFIG_ID)


def _write_config(db: Session, config: schemas.TripConfigIn) -> models.TripConfig:
    row = get_trip_config(db)
    if row is None:
        row = models.TripConfig(id=CONFIG_ID, current_amount=0.0)
        db.add(row)
    row.goal_city = config.goal_city
    row.total_cost = config.total_cost
    row.start_cities = list(config.start_cities)
    if config.current_amount is not None:
        row.current_amount = config.current_amount
    return row


def _write_milestones(
    db: Session, items: Sequence[schemas.MilestoneIn | schemas.SnapshotMilestone]
) -> None:
    db.execute(delete(models.Milestone))
    db.add_all(
        models.Milestone(
            name=item.name,
            cost=item.cost,
            order_index=i,
            description=item.description or "",
        )
        for i, item in enumerate(items)
    )


def save_trip(
    db: Session,
    config: schemas.TripConfigIn | None = None,
    milestones: Sequence[schemas.MilestoneIn | schemas.SnapshotMilestone] | None = None,
) -> models.TripConfig | None:
    """Write the configuration and/or the milestone list in one transaction.

    ``current_amount`` keeps its stored value when ``config`` leaves it out.
    Milestones keep the order they are given in; ``order_index`` is rewritten
    to the list position. Nothing is saved if any part fails.
    """

    try:
        row = _write_config(db, config) if config is not None else None
        if milestones is not None:
            _write_milestones(db, milestones)
        db.commit()
    except Exception:
        db.rollback()
        raise
    if row is not None:
        logger.info("trip_config.saved", goal_city=row.goal_city, total_cost=row.total_cost)
    if milestones is not None:
        logger.info("milestones.replaced", count=len(milestones))
    return row if row is not None else get_trip_config(db)


def upsert_trip_config(db: Session, config: schemas.TripConfigIn) -> models.TripConfig:
    """Create or overwrite the single trip configuration."""

    row = save_trip(db, config=config)
    assert row is not None
    return row


def update_progress(db: Session, amount: float) -> models.TripConfig | None:
    row = get_trip_config(db)
    if row is None:
        return None
    row.current_amount = amount
    db.commit()
    logger.info("trip_config.progress", current_amount=amount)
    return row


def get_milestones(db: Session) -> list[models.Milestone]:
    stmt = select(models.Milestone).order_by(
        models.Milestone.order_index.asc(), models.Milestone.id.asc()
    )
    return list(db.scalars(stmt))


def set_milestones(
    db: Session, items: Sequence[schemas.MilestoneIn | schemas.SnapshotMilestone]
) -> list[models.Milestone]:
    """Replace every milestone in one transaction."""

    save_trip(db, milestones=items)
    return get_milestones(db)


def seed_from_snapshot(db: Session, snapshot: schemas.TripSnapshot) -> None:
    save_trip(
        db,
        config=schemas.TripConfigIn(
            goal_city=snapshot.goal_city,
            total_cost=snapshot.total_cost,
            current_amount=snapshot.current_amount,
            start_cities=snapshot.start_cities,
        ),
        milestones=sorted(snapshot.milestones, key=lambda m: m.order_index),
    )


def export_snapshot(db: Session) -> schemas.TripSnapshot | None:
    config = get_trip_config(db)
    if config is None:
        return None
    return schemas.TripSnapshot(
        goal_city=config.goal_city,
        total_cost=config.total_cost,
        current_amount=config.current_amount,
        start_cities=list(config.start_cities),
        milestones=[
            schemas.SnapshotMilestone(
                name=m.name,
                cost=m.cost,
                order_index=m.order_index,
                description=m.description,
            )
            for m in get_milestones(db)
        ],
    )


def get_trip_data(db: Session) -> schemas.TripData:
    config = get_trip_config(db)
    return schemas.TripData(
        config=schemas.TripConfigOut.model_validate(config) if config else None,
        milestones=[schemas.MilestoneOut.model_validate(m) for m in get_milestones(db)],
    )
