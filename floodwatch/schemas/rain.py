"""
Pydantic schemas for rain summary responses.
"""

from typing import List, Literal, Optional
from pydantic import BaseModel, Field

TrendState = Literal["analyzing", "dry", "intensifying", "decreasing", "stable", "heavy"]
StationTrendState = Literal["rising_fast", "rising", "easing", "stable"]


class CityTrend(BaseModel):
    """City-wide rain trend over the most recent snapshots."""

    state: TrendState
    title: str
    detail: str
    trend_mm: Optional[float] = Field(None, description="Change in average 1h rain across the window")
    active_stations: int = 0
    heavy_stations: int = 0


class RainBucket(BaseModel):
    label: str
    count: int


class StationRain(BaseModel):
    name: str
    h01: float
    m15: float
    m05: float
    trend: StationTrendState


class RainSummary(BaseModel):
    """Rain overview for the current station readings."""

    station_count: int
    active_stations: int
    avg_rain: float = Field(..., description="Mean 1h rain (mm, 1 dp)")
    max_rain: float
    trend: CityTrend
    distribution: List[RainBucket]
    top_stations: List[StationRain]
