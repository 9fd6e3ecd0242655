from sqlalchemy import JSON, CheckConstraint, Column, Float, Integer, String, Text
from sqlalchemy.orm import declarative_base

Base = declarative_base()

DEFAULT_START_CITIES = ["Umeå", "Sundsvall"]


class TripConfig(Base):
    __tablename__ = "trip_config"
    __table_args__ = (CheckConstraint("id = 1", name="trip_config_singleton"),)

    id = Column(Integer, primary_key=True, default=1)
    goal_city = Column(String(255), nullable=False)
    total_cost = Column(Float, nullable=False)
    current_amount = Column(Float, nullable=False, default=0.0)
    start_cities = Column(JSON, nullable=False, default=lambda: list(DEFAULT_START_CITIES))


class Milestone(Base):
    __tablename__ = "milestones"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    cost = Column(Float, nullable=False)
    order_index = Column(Integer, nullable=False, index=True)
    description = Column(Text, nullable=False, default="")
