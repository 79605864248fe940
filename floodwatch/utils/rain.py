"""
Rain summaries derived from station readings and the history window.

These feed the dashboard panels: the city trend headline, the intensity
distribution, the wettest stations and each station's short-term trend.
"""

from typing import List, Sequence

from floodwatch.schemas.feeds import Station
from floodwatch.schemas.rain import CityTrend, RainBucket, RainSummary, StationRain
from floodwatch.schemas.snapshot import HistoryEntry
from floodwatch.utils.metrics import active_station_count, average_rain, max_rain

TREND_WINDOW = 5
TREND_DEADBAND_MM = 0.5
HEAVY_RAIN_MM = 10.0
HEAVY_STATION_LIMIT = 5
FAST_RISE_5MIN_MM = 0.5

# (label, lower bound exclusive, upper bound inclusive); None bucket is exactly 0
RAIN_BUCKETS = [
    ("None (0)", None, 0.0),
    ("Light (0-2)", 0.0, 2.0),
    ("Moderate (2-5)", 2.0, 5.0),
    ("Heavy (5-10)", 5.0, 10.0),
    ("Very heavy (10-20)", 10.0, 20.0),
    ("Extreme (>20)", 20.0, float("inf")),
]


def city_trend(history: Sequence[HistoryEntry], stations: Sequence[Station]) -> CityTrend:
    """
    Summarise where rain is heading across the city.

    Compares average rain between the first and last of the most recent
    snapshots. A widespread heavy-rain reading overrides the trend.
    """
    active = active_station_count(stations)
    heavy = sum(1 for s in stations if s.h01 > HEAVY_RAIN_MM)

    if len(history) < 2:
        return CityTrend(
            state="analyzing", title="Analyzing...", detail="Need more data points",
            active_stations=active, heavy_stations=heavy,
        )

    recent = list(history)[-TREND_WINDOW:]
    trend = round(recent[-1].avg_rain - recent[0].avg_rain, 2)

    if heavy > HEAVY_STATION_LIMIT:
        state, title = "heavy", "Heavy Rain Event"
        detail = f"{heavy} stations with >{HEAVY_RAIN_MM:g}mm/h"
    elif active == 0:
        state, title, detail = "dry", "No Active Rain", "City is dry"
    elif trend > TREND_DEADBAND_MM:
        state, title = "intensifying", "Rain Intensifying"
        detail = f"+{trend:.1f}mm trend | {active} stations active"
    elif trend < -TREND_DEADBAND_MM:
        state, title = "decreasing", "Rain Decreasing"
        detail = f"{trend:.1f}mm trend | {active} stations active"
    else:
        state, title = "stable", "Rain Stable"
        detail = f"{active} stations with rain"

    return CityTrend(
        state=state, title=title, detail=detail, trend_mm=trend,
        active_stations=active, heavy_stations=heavy,
    )


def rain_distribution(stations: Sequence[Station]) -> List[RainBucket]:
    """Count stations per 1-hour intensity bucket."""
    buckets = []
    for label, low, high in RAIN_BUCKETS:
        if low is None:
            count = sum(1 for s in stations if s.h01 == 0)
        else:
            count = sum(1 for s in stations if low < s.h01 <= high)
        buckets.append(RainBucket(label=label, count=count))
    return buckets


def station_trend(station: Station) -> str:
    """Classify a station's short-term trend from its 5 and 15 minute readings."""
    m05 = station.accumulation("m05")
    m15 = station.accumulation("m15")
    if m05 > FAST_RISE_5MIN_MM:
        return "rising_fast"
    if m15 > m05 and m15 > 0:
        return "easing"
    if m15 > 0 or m05 > 0:
        return "rising"
    return "stable"


def top_stations(stations: Sequence[Station], n: int = 10) -> List[StationRain]:
    """Wettest stations by 1-hour accumulation."""
    ranked = sorted(stations, key=lambda s: s.h01, reverse=True)[:n]
    return [
        StationRain(
            name=s.name,
            h01=s.h01,
            m15=s.accumulation("m15"),
            m05=s.accumulation("m05"),
            trend=station_trend(s),
        )
        for s in ranked
    ]


def summarize(history: Sequence[HistoryEntry], stations: Sequence[Station]) -> RainSummary:
    return RainSummary(
        station_count=len(stations),
        active_stations=active_station_count(stations),
        avg_rain=average_rain(stations, places=1),
        max_rain=max_rain(stations),
        trend=city_trend(history, stations),
        distribution=rain_distribution(stations),
        top_stations=top_stations(stations),
    )
