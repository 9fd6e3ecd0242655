import math
import time

from fastapi import APIRouter, Depends, HTTPException, Response, status
from opentelemetry import trace
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from src.common.logging import get_logger
from src.common.metrics import ADMIN_LOGINS, RENDER_DURATION, TRIP_AMOUNT, TRIP_PROGRESS

from . import deps, schemas, store
from .cities import CityResolver
from .geodata import load_geography
from .layout import TripLayout, plan_trip
from .progress import percentage
from .render import render_map
from .snapshot import SnapshotError, read_snapshot, write_snapshot

SERVICE = "tripit"

router = APIRouter()
logger = get_logger(__name__)
tracer = trace.get_tracer(__name__)


def _seed_from_file(db: Session) -> bool:
    settings = deps.get_settings()
    try:
        snapshot = read_snapshot(settings.snapshot_path)
    except SnapshotError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)
        ) from exc
    if snapshot is None:
        return False
    with tracer.start_as_current_span("trip.seed"):
        try:
            store.seed_from_snapshot(db, snapshot)
        except IntegrityError:
            # Another request seeded the empty database first.
            logger.info("trip.seed_skipped", path=settings.snapshot_path)
            return True
    logger.info("trip.seeded", path=settings.snapshot_path)
    return True


def _load_trip(db: Session) -> schemas.TripData:
    data = store.get_trip_data(db)
    if data.config is None and _seed_from_file(db):
        data = store.get_trip_data(db)
    if data.config is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="No trip configured"
        )
    return data


def _layout(data: schemas.TripData) -> TripLayout:
    settings = deps.get_settings()
    geography = load_geography(settings.geography_path)
    assert data.config is not None
    layout = plan_trip(
        data.config,
        data.milestones,
        CityResolver(geography.known_positions()),
        seed=settings.route_jitter_seed,
    )
    TRIP_PROGRESS.labels(SERVICE).set(layout.progress.fraction)
    TRIP_AMOUNT.labels(SERVICE).set(data.config.current_amount)
    return layout


@router.get("/api/trip", response_model=schemas.TripData)
def get_trip(db: Session = Depends(deps.get_db)) -> schemas.TripData:
    return _load_trip(db)


@router.get("/api/trip/progress", response_model=schemas.ProgressResponse)
def get_progress(db: Session = Depends(deps.get_db)) -> schemas.ProgressResponse:
    data = _load_trip(db)
    config = data.config
    assert config is not None
    layout = _layout(data)
    marker = layout.progress.marker
    return schemas.ProgressResponse(
        fraction=layout.progress.fraction,
        percentage=percentage(config.current_amount, config.total_cost),
        current_amount=config.current_amount,
        total_cost=config.total_cost,
        marker=schemas.MapPoint(x=marker.x, y=marker.y),
        segment_index=layout.progress.segment_index,
        segment_fraction=layout.progress.segment_fraction,
        milestones=[
            schemas.MilestoneProgress(
                name=stop.name,
                cost=stop.cost,
                reached=stop.reached,
                position=schemas.MapPoint(x=stop.position.x, y=stop.position.y),
            )
            for stop in layout.stops
        ],
    )


@router.get("/map.svg")
def get_map(db: Session = Depends(deps.get_db)) -> Response:
    data = _load_trip(db)
    assert data.config is not None
    settings = deps.get_settings()
    start = time.perf_counter()
    with tracer.start_as_current_span("trip.render_map"):
        layout = _layout(data)
        svg = render_map(
            layout, load_geography(settings.geography_path), data.config.current_amount
        )
    RENDER_DURATION.labels(SERVICE).observe(time.perf_counter() - start)
    return Response(
        content=svg,
        media_type="image/svg+xml",
        headers={"Cache-Control": "no-store"},
    )


@router.post("/api/admin/login", response_model=schemas.SuccessResponse)
def login(data: schemas.LoginRequest, response: Response) -> schemas.SuccessResponse:
    if not deps.validate_password(data.password):
        ADMIN_LOGINS.labels(SERVICE, "rejected").inc()
        logger.warning("admin.login_rejected")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid password"
        )
    token = deps.create_session(data.password)
    response.set_cookie(value=token, **deps.cookie_params())
    ADMIN_LOGINS.labels(SERVICE, "accepted").inc()
    logger.info("admin.login")
    return schemas.SuccessResponse()


@router.post("/api/admin/logout", response_model=schemas.SuccessResponse)
def logout(response: Response) -> schemas.SuccessResponse:
    response.delete_cookie(deps.TOKEN_COOKIE, path="/")
    return schemas.SuccessResponse()


@router.get(
    "/api/admin/config",
    response_model=schemas.TripData,
    dependencies=[Depends(deps.require_admin)],
)
def get_admin_config(db: Session = Depends(deps.get_db)) -> schemas.TripData:
    return store.get_trip_data(db)


@router.put(
    "/api/admin/config",
    response_model=schemas.SuccessResponse,
    dependencies=[Depends(deps.require_admin)],
)
def put_admin_config(
    data: schemas.ConfigUpdate, db: Session = Depends(deps.get_db)
) -> schemas.SuccessResponse:
    if data.config is not None or data.milestones is not None:
        store.save_trip(db, config=data.config, milestones=data.milestones)
    message = None
    if data.export_to_file:
        snapshot = store.export_snapshot(db)
        if snapshot is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail="No trip configured"
            )
        path = write_snapshot(deps.get_settings().snapshot_path, snapshot)
        logger.info("trip.exported", path=str(path))
        message = f"Exported to {path.name}"
    return schemas.SuccessResponse(message=message)


@router.put(
    "/api/admin/progress",
    response_model=schemas.ProgressUpdateResponse,
    dependencies=[Depends(deps.require_admin)],
)
def put_progress(
    data: schemas.ProgressUpdate, db: Session = Depends(deps.get_db)
) -> schemas.ProgressUpdateResponse:
    if not math.isfinite(data.current_amount) or data.current_amount < 0:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid amount"
        )
    config = store.update_progress(db, data.current_amount)
    if config is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="No trip configured"
        )
    return schemas.ProgressUpdateResponse(
        config=schemas.TripConfigOut.model_validate(config)
    )


@router.post(
    "/api/seed",
    response_model=schemas.SuccessResponse,
    dependencies=[Depends(deps.require_admin)],
)
def seed(db: Session = Depends(deps.get_db)) -> schemas.SuccessResponse:
    name = deps.get_settings().snapshot_path
    if not _seed_from_file(db):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail=f"{name} not found"
        )
    return schemas.SuccessResponse(message=f"Database seeded from {name}")
