"""
Shared test fixtures.

Environment overrides are applied before the application is imported so the
settings object picks them up.
"""

import os

os.environ["SQLALCHEMY_DATABASE_URI"] = "sqlite+aiosqlite:///:memory:"
os.environ["SCHEDULER_ENABLED"] = "false"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["CRON_SECRET"] = "test-cron-secret"
os.environ["DEBUG"] = "false"

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker

import floodwatch.models  # noqa: F401
from floodwatch.database import Base
from floodwatch.schemas.feeds import Alert, Polygon, Station
from floodwatch.services.feeds import UpstreamFetchError

NOW = datetime(2026, 3, 15, 18, 0, tzinfo=timezone.utc)
NOW_MS = int(NOW.timestamp() * 1000)

# Square zone around (lat -22.90, lng -43.20)
SQUARE_RING = [(-43.25, -22.95), (-43.15, -22.95), (-43.15, -22.85), (-43.25, -22.85)]
INSIDE = {"x": -43.20, "y": -22.90}
OUTSIDE = {"x": -43.50, "y": -23.20}


def make_station(name: str = "Tijuca", h01: Optional[float] = 0.0, **data) -> Station:
    data.setdefault("h01", h01)
    return Station.model_validate({
        "name": name,
        "kind": "rain",
        "location": [-22.93, -43.22],
        "data": data,
    })


def make_polygon(
    status_code: int = 0,
    ring: Optional[List] = None,
    id: str = "zone",
) -> Polygon:
    return Polygon.model_validate({
        "_id": id,
        "title": f"Zone {id}",
        "status_code": status_code,
        "status_name": ["Normal", "Attention", "Alert", "Critical"][status_code],
        "geometry": [ring] if ring is not None else [SQUARE_RING],
    })


def make_alert(
    uuid: str = "a1",
    location: Optional[Dict[str, float]] = None,
    pub_millis: int = NOW_MS,
    subtype: str = "HAZARD_WEATHER_FLOOD",
) -> Alert:
    return Alert.model_validate({
        "uuid": uuid,
        "type": "WEATHERHAZARD",
        "subtype": subtype,
        "location": location if location is not None else INSIDE,
        "pubMillis": pub_millis,
        "reliability": 7,
        "confidence": 2,
    })


def make_alerts(count: int, location: Optional[Dict[str, float]] = None, pub_millis: int = NOW_MS) -> List[Alert]:
    return [make_alert(f"a{i}", location=location, pub_millis=pub_millis) for i in range(count)]


class StubFeedClient:
    """Feed client returning canned readings, or raising per feed."""

    def __init__(
        self,
        stations: Any = None,
        polygons: Any = None,
        alerts: Any = None,
    ):
        self.stations = stations if stations is not None else []
        self.polygons = polygons if polygons is not None else []
        self.alerts = alerts if alerts is not None else []
        self.calls = 0

    @staticmethod
    def _resolve(value):
        if isinstance(value, Exception):
            raise value
        return list(value)

    async def fetch_stations(self):
        self.calls += 1
        return self._resolve(self.stations)

    async def fetch_polygons(self):
        return self._resolve(self.polygons)

    async def fetch_flood_alerts(self):
        return self._resolve(self.alerts)

    async def fetch_raw(self, feed: str):
        if feed == "rain":
            return {"objects": [s.model_dump(mode="json") for s in self._resolve(self.stations)]}
        if feed == "polygons":
            return [p.model_dump(mode="json", by_alias=True) for p in self._resolve(self.polygons)]
        return {"alerts": [a.model_dump(mode="json") for a in self._resolve(self.alerts)]}


def upstream_error(feed: str) -> UpstreamFetchError:
    return UpstreamFetchError(feed, "connection refused")


@pytest.fixture
def now():
    return NOW


@pytest.fixture
async def engine(tmp_path):
    """File-backed SQLite engine, fresh per test."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", echo=False)
    yield engine
    await engine.dispose()


@pytest.fixture
async def session_factory(engine):
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session
