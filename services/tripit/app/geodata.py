"""Static geography asset: city table, outlines, borders and decorations."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path as FilePath
from typing import Optional

from pydantic import BaseModel, ConfigDict

from .geometry import Path, Point
from .projection import build_closed_path, build_open_path, project

DEFAULT_GEOGRAPHY_PATH = FilePath(__file__).parent / "data" / "geography.json"

LonLat = tuple[float, float]


class Surface(BaseModel):
    width: int = 700
    height: int = 1150


class LandShape(BaseModel):
    name: str
    coast: bool = True
    points: list[LonLat]

    @property
    def path(self) -> Path:
        return build_closed_path(self.points)


class Label(BaseModel):
    at: LonLat
    text: str
    font_size: int
    rotate: float = 0

    @property
    def position(self) -> Point:
        return project(*self.at)


class Decoration(BaseModel):
    at: LonLat
    scale: float = 1.0
    label: Optional[str] = None

    @property
    def position(self) -> Point:
        return project(*self.at)


class Cloud(BaseModel):
    x: float
    y: float
    scale: float = 1.0


class Geography(BaseModel):
    model_config = ConfigDict(frozen=True)

    surface: Surface = Surface()
    cities: dict[str, LonLat] = {}
    land: list[LandShape] = []
    borders: list[list[LonLat]] = []
    sea_labels: list[Label] = []
    country_labels: list[Label] = []
    mountains: list[Decoration] = []
    trees: list[Decoration] = []
    clouds: list[Cloud] = []
    waves: list[str] = []

    def known_positions(self) -> dict[str, Point]:
        """City name to surface position."""
        return {name: project(lon, lat) for name, (lon, lat) in self.cities.items()}

    def border_paths(self) -> list[Path]:
        return [build_open_path(line) for line in self.borders]


def _read(path: FilePath) -> Geography:
    return Geography.model_validate_json(path.read_text(encoding="utf-8"))


@lru_cache
def _default_geography() -> Geography:
    return _read(DEFAULT_GEOGRAPHY_PATH)


def load_geography(path: str | FilePath | None = None) -> Geography:
    """Load the geography asset, caching the bundled default."""

    if path is None or FilePath(path) == DEFAULT_GEOGRAPHY_PATH:
        return _default_geography()
    return _read(FilePath(path))
