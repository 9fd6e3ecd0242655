from fastapi import FastAPI

from src.common.logging import get_logger, setup_logging
from src.common.metrics import TRIP_PROGRESS, setup_metrics
from src.common.telemetry import setup_otel

from . import deps
from .api import SERVICE, router

logger = get_logger(__name__)

app = FastAPI(title="tripit")
setup_metrics(app, SERVICE)
setup_otel(app, SERVICE, deps.get_settings().otel_exporter_otlp_endpoint)


@app.on_event("startup")
async def on_startup() -> None:
    settings = deps.get_settings()
    setup_logging(settings.log_level, service=SERVICE)
    deps.init_db()
    TRIP_PROGRESS.labels(SERVICE).set(0)
    if not settings.admin_password:
        logger.warning("admin.password_unset")
    logger.info("startup", database_url=settings.database_url)


@app.get("/healthz")
async def healthz() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/readyz")
async def readyz() -> dict[str, str]:
    return {"status": "ready"}


app.include_router(router)
