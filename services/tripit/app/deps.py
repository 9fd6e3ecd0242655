import hashlib
import hmac
from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import Generator, Optional

import jwt
from fastapi import Cookie, HTTPException, status
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from src.common.settings import Settings as CommonSettings

TOKEN_COOKIE = "admin_token"
PASSWORD_SALT = "_trip_admin_salt"


class Settings(CommonSettings):
    database_url: str = "sqlite:///./trip.db"
    admin_password: str | None = None
    jwt_secret: str = "change-me"
    jwt_algorithm: str = "HS256"
    session_max_age_seconds: int = 60 * 60 * 24
    snapshot_path: str = "trip-config.json"
    geography_path: str | None = None
    route_jitter_seed: int | None = None


@lru_cache
def get_settings() -> Settings:
    return Settings()


_engine = None
_SessionLocal: sessionmaker | None = None


def get_sessionmaker() -> sessionmaker:
    global _engine, _SessionLocal
    if _SessionLocal is None:
        settings = get_settings()
        connect_args: dict[str, object] = {}
        kwargs: dict[str, object] = {"future": True}
        if settings.database_url.startswith("sqlite"):
            connect_args["check_same_thread"] = False
        if settings.database_url.endswith(":memory:"):
            kwargs["poolclass"] = StaticPool
        _engine = create_engine(
            settings.database_url, connect_args=connect_args, **kwargs
        )
        _SessionLocal = sessionmaker(
            bind=_engine, autoflush=False, autocommit=False, expire_on_commit=False
        )
    return _SessionLocal


def get_db() -> Generator[Session, None, None]:
    session_local = get_sessionmaker()
    db = session_local()
    try:
        yield db
    finally:
        db.close()


def init_db() -> None:
    from . import models

    _ = get_sessionmaker()
    assert _engine is not None
    models.Base.metadata.create_all(bind=_engine)


def reset_db() -> None:
    """Forget the current engine so the next session uses fresh settings."""

    global _engine, _SessionLocal
    if _engine is not None:
        _engine.dispose()
    _engine = None
    _SessionLocal = None


def _fingerprint(password: str) -> str:
    return hashlib.sha256((password + PASSWORD_SALT).encode()).hexdigest()[:16]


def validate_password(password: str) -> bool:
    expected = get_settings().admin_password
    if not expected or not password:
        return False
    return hmac.compare_digest(password.encode(), expected.encode())


def create_session(password: str) -> str:
    settings = get_settings()
    payload = {
        "sub": "admin",
        "type": "session",
        "fp": _fingerprint(password),
        "exp": datetime.now(timezone.utc)
        + timedelta(seconds=settings.session_max_age_seconds),
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def is_authenticated(token: Optional[str]) -> bool:
    if not token:
        return False
    settings = get_settings()
    if not settings.admin_password:
        return False
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
        )
    except jwt.PyJWTError:
        return False
    if payload.get("type") != "session":
        return False
    # Sessions die when the admin password changes.
    return payload.get("fp") == _fingerprint(settings.admin_password)


def cookie_params() -> dict[str, object]:
    settings = get_settings()
    return {
        "key": TOKEN_COOKIE,
        "httponly": True,
        "secure": settings.is_production,
        "samesite": "lax",
        "max_age": settings.session_max_age_seconds,
        "path": "/",
    }


def require_admin(admin_token: Optional[str] = Cookie(default=None)) -> None:
    if not is_authenticated(admin_token):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
        )
