from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field

from .models import DEFAULT_START_CITIES


class TripConfigIn(BaseModel):
    goal_city: str = Field(min_length=1)
    total_cost: float = Field(gt=0, allow_inf_nan=False)
    current_amount: Optional[float] = Field(default=None, ge=0, allow_inf_nan=False)
    start_cities: List[str] = Field(default_factory=lambda: list(DEFAULT_START_CITIES))


class TripConfigOut(BaseModel):
    goal_city: str
    total_cost: float
    current_amount: float
    start_cities: List[str]

    class Config:
        from_attributes = True


class MilestoneIn(BaseModel):
    name: str = Field(min_length=1)
    cost: float = Field(ge=0, allow_inf_nan=False)
    order_index: int = 0
    description: str = ""


class MilestoneOut(MilestoneIn):
    id: int

    class Config:
        from_attributes = True


class TripData(BaseModel):
    config: Optional[TripConfigOut]
    milestones: List[MilestoneOut]


class ConfigUpdate(BaseModel):
    config: Optional[TripConfigIn] = None
    milestones: Optional[List[MilestoneIn]] = None
    export_to_file: bool = Field(default=False, alias="exportToFile")

    model_config = {"populate_by_name": True}


class LoginRequest(BaseModel):
    password: str = ""


class ProgressUpdate(BaseModel):
    current_amount: float


class SuccessResponse(BaseModel):
    success: bool = True
    message: Optional[str] = None


class ProgressUpdateResponse(SuccessResponse):
    config: TripConfigOut


class SnapshotMilestone(BaseModel):
    name: str
    cost: float = Field(ge=0, allow_inf_nan=False)
    order_index: int = 0
    description: str = ""


class TripSnapshot(BaseModel):
    goal_city: str
    total_cost: float = Field(gt=0, allow_inf_nan=False)
    current_amount: float = Field(default=0.0, ge=0, allow_inf_nan=False)
    start_cities: List[str] = Field(default_factory=lambda: list(DEFAULT_START_CITIES))
    milestones: List[SnapshotMilestone] = Field(default_factory=list)


class MapPoint(BaseModel):
    x: float
    y: float


class MilestoneProgress(BaseModel):
    name: str
    cost: float
    reached: bool
    position: MapPoint


class ProgressResponse(BaseModel):
    fraction: float
    percentage: int
    current_amount: float
    total_cost: float
    marker: MapPoint
    segment_index: int
    segment_fraction: float
    milestones: List[MilestoneProgress]
