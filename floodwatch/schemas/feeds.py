"""
Upstream feed schemas.

This module contains Pydantic schemas for the three feeds the service fuses:
rain-gauge stations, flood-risk polygons and crowd-sourced hazard alerts.

Side fields are parsed leniently: a null or garbled value becomes None so the
record itself still counts. Only the fields the fusion engine depends on
(station name, zone status, alert subtype) can reject a record.
"""

import math
from typing import Any, List, Optional, Tuple

from pydantic import Field, field_validator

from floodwatch.schemas.base import FeedSchema

FLOOD_SUBTYPE = "HAZARD_WEATHER_FLOOD"

# (longitude, latitude)
Vertex = Tuple[float, float]
Ring = List[Vertex]


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def lenient_float(value: Any) -> Optional[float]:
    """Coerce to float, None when the value is not numeric."""
    if _is_number(value):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


def lenient_int(value: Any) -> Optional[int]:
    number = lenient_float(value)
    return int(number) if number is not None and math.isfinite(number) else None


def normalize_ring(ring: Any) -> Ring:
    """
    Keep well-formed vertices of a ring.

    Extra coordinates (altitude, measure) are dropped; vertices that are not
    a pair of numbers are skipped.
    """
    if not isinstance(ring, (list, tuple)):
        return []
    return [
        (float(vertex[0]), float(vertex[1]))
        for vertex in ring
        if isinstance(vertex, (list, tuple))
        and len(vertex) >= 2
        and _is_number(vertex[0])
        and _is_number(vertex[1])
    ]


class StationData(FeedSchema):
    """
    Rainfall accumulations for a station, in mm.

    Any interval may be missing from the upstream payload.
    """
    m05: Optional[float] = Field(None, description="Last 5 minutes")
    m15: Optional[float] = Field(None, description="Last 15 minutes")
    h01: Optional[float] = Field(None, description="Last hour")
    h02: Optional[float] = Field(None, description="Last 2 hours")
    h03: Optional[float] = Field(None, description="Last 3 hours")
    h04: Optional[float] = Field(None, description="Last 4 hours")
    h24: Optional[float] = Field(None, description="Last 24 hours")
    h96: Optional[float] = Field(None, description="Last 96 hours")
    mes: Optional[float] = Field(None, description="Month to date")

    @field_validator("*", mode="before")
    @classmethod
    def lenient_reading(cls, v):
        return lenient_float(v)


class Station(FeedSchema):
    """Rain gauge reading."""
    name: str
    kind: Optional[str] = None
    read_at: Optional[str] = None
    is_new: Optional[bool] = None
    location: Optional[Tuple[float, float]] = Field(None, description="(latitude, longitude)")
    data: Optional[StationData] = None

    @field_validator("location", mode="before")
    @classmethod
    def lenient_location(cls, v):
        point = normalize_ring([v])
        return point[0] if point else None

    @field_validator("data", mode="before")
    @classmethod
    def lenient_data(cls, v):
        return v if isinstance(v, dict) else None

    def accumulation(self, interval: str) -> float:
        """Return the accumulation for an interval, treating a missing value as 0."""
        if self.data is None:
            return 0.0
        return getattr(self.data, interval, None) or 0.0

    @property
    def h01(self) -> float:
        return self.accumulation("h01")


class Polygon(FeedSchema):
    """
    Administrative flood-risk zone.

    `status_code` is ordinal: 0 normal, 1 attention, 2 alert, 3 critical.
    Only the first geometry ring (the outer boundary) is used for membership.
    A zone without geometry still counts towards affected areas and severity.
    """
    id: str = Field("", alias="_id")
    title: Optional[str] = None
    main_neighborhood: Optional[str] = None
    status_code: int = Field(0, ge=0, le=3)
    status_name: Optional[str] = None
    geometry: List[Ring] = Field(default_factory=list)
    lat_centroid: Optional[float] = None
    lng_centroid: Optional[float] = None
    area_km2: Optional[float] = None
    waze_flood_count: Optional[int] = None
    acumulado_chuva_15_min_1: Optional[float] = None

    @field_validator("id", mode="before")
    @classmethod
    def stringify_id(cls, v):
        return "" if v is None else str(v)

    @field_validator("title", "main_neighborhood", "status_name", mode="before")
    @classmethod
    def lenient_text(cls, v):
        return None if v is None else str(v)

    @field_validator("status_code", mode="before")
    @classmethod
    def default_status(cls, v):
        """Zones published without a status are treated as normal."""
        return 0 if v is None else v

    @field_validator("geometry", mode="before")
    @classmethod
    def normalize_geometry(cls, v):
        if not isinstance(v, (list, tuple)):
            return []
        # Ring positions are kept so a garbled outer ring never promotes an inner one
        return [normalize_ring(ring) for ring in v]

    @field_validator("lat_centroid", "lng_centroid", "area_km2", "acumulado_chuva_15_min_1", mode="before")
    @classmethod
    def lenient_measure(cls, v):
        return lenient_float(v)

    @field_validator("waze_flood_count", mode="before")
    @classmethod
    def lenient_count(cls, v):
        return lenient_int(v)

    @property
    def is_affected(self) -> bool:
        return self.status_code > 0

    @property
    def outer_ring(self) -> Ring:
        return self.geometry[0] if self.geometry else []


class AlertLocation(FeedSchema):
    x: float = Field(..., description="Longitude")
    y: float = Field(..., description="Latitude")


class Alert(FeedSchema):
    """
    Crowd-sourced hazard report.

    Alerts without a location or publication time still count as reports;
    they just cannot fall inside a zone or pass the recency window.
    """
    uuid: Optional[str] = None
    type: Optional[str] = None
    subtype: Optional[str] = None
    street: Optional[str] = None
    city: Optional[str] = None
    country: Optional[str] = None
    location: Optional[AlertLocation] = None
    pubMillis: int = Field(0, description="Publication time, epoch milliseconds")
    reliability: Optional[int] = None
    confidence: Optional[int] = None

    @field_validator("uuid", "type", "street", "city", "country", mode="before")
    @classmethod
    def lenient_text(cls, v):
        return None if v is None else str(v)

    @field_validator("location", mode="before")
    @classmethod
    def lenient_location(cls, v):
        if not isinstance(v, dict):
            return None
        x, y = lenient_float(v.get("x")), lenient_float(v.get("y"))
        if x is None or y is None:
            return None
        return {"x": x, "y": y}

    @field_validator("pubMillis", mode="before")
    @classmethod
    def default_pub_millis(cls, v):
        """A missing publication time reads as the epoch, older than any window."""
        millis = lenient_int(v)
        return 0 if millis is None else millis

    @field_validator("reliability", "confidence", mode="before")
    @classmethod
    def lenient_score(cls, v):
        return lenient_int(v)

    @property
    def is_flood(self) -> bool:
        return self.subtype == FLOOD_SUBTYPE
