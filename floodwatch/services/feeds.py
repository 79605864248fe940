"""
Upstream feed client.

Fetches the rain-gauge, risk-zone and hazard-alert feeds over HTTP. Every
request is bounded by a total timeout and is never retried; callers decide
how a failure affects the refresh cycle.
"""

import asyncio
from typing import Any, Dict, List, Optional, Type, TypeVar

import httpx
from pydantic import ValidationError

from floodwatch.config import settings
from floodwatch.schemas.base import FeedSchema
from floodwatch.schemas.feeds import Alert, Polygon, Station
from floodwatch.utils.logging_config import get_logger

logger = get_logger(__name__)

FEEDS = ("rain", "polygons", "waze")

SchemaType = TypeVar("SchemaType", bound=FeedSchema)


class UpstreamFetchError(Exception):
    """Network error, timeout, bad status or non-JSON body from an upstream feed."""

    def __init__(self, feed: str, message: str):
        self.feed = feed
        self.message = message
        super().__init__(f"{feed} feed failed: {message}")


def parse_items(items: Any, schema: Type[SchemaType], feed: str) -> List[SchemaType]:
    """
    Validate a list of raw feed items, skipping the ones that don't fit.

    A payload that is not a list parses as empty.
    """
    if not isinstance(items, list):
        logger.warning(f"{feed} feed returned {type(items).__name__}, expected a list")
        return []

    parsed = []
    skipped = 0
    for item in items:
        try:
            parsed.append(schema.model_validate(item))
        except ValidationError:
            skipped += 1
    if skipped:
        logger.warning(f"{feed} feed: skipped {skipped} malformed item(s)")
    return parsed


def stations_from_payload(payload: Any) -> List[Station]:
    objects = payload.get("objects") if isinstance(payload, dict) else None
    return parse_items(objects or [], Station, "rain")


def polygons_from_payload(payload: Any) -> List[Polygon]:
    return parse_items(payload if isinstance(payload, list) else [], Polygon, "polygons")


def flood_alerts_from_payload(payload: Any) -> List[Alert]:
    """Parse the hazard feed, keeping only flood reports."""
    alerts = payload.get("alerts") if isinstance(payload, dict) else None
    return [a for a in parse_items(alerts or [], Alert, "waze") if a.is_flood]


class FeedClient:
    """
    HTTP client for the three upstream feeds.

    A fresh httpx client is opened per request so no connection state
    outlives a refresh cycle.
    """

    def __init__(
        self,
        urls: Optional[Dict[str, str]] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.urls = urls or {
            "rain": settings.RAIN_FEED_URL,
            "polygons": settings.POLYGONS_FEED_URL,
            "waze": settings.WAZE_FEED_URL,
        }
        self.timeout = timeout or settings.UPSTREAM_TIMEOUT_SECONDS
        self.transport = transport
        self.headers = {
            "User-Agent": settings.UPSTREAM_USER_AGENT,
            "Accept": "application/json",
        }

    async def _get_json(self, url: str) -> Any:
        async with httpx.AsyncClient(
            timeout=self.timeout, headers=self.headers, transport=self.transport
        ) as client:
            response = await client.get(url)
            response.raise_for_status()
            return response.json()

    async def fetch_raw(self, feed: str) -> Any:
        """
        Fetch a feed's JSON payload as-is.

        Raises:
            KeyError: If the feed name is unknown
            UpstreamFetchError: On any network, status, timeout or decode failure
        """
        url = self.urls[feed]
        try:
            return await asyncio.wait_for(self._get_json(url), timeout=self.timeout)
        except asyncio.TimeoutError:
            raise UpstreamFetchError(feed, f"timed out after {self.timeout:g}s")
        except httpx.HTTPStatusError as e:
            raise UpstreamFetchError(feed, f"HTTP {e.response.status_code}")
        except httpx.HTTPError as e:
            raise UpstreamFetchError(feed, str(e) or e.__class__.__name__)
        except ValueError as e:
            raise UpstreamFetchError(feed, f"invalid JSON: {e}")

    async def fetch_stations(self) -> List[Station]:
        return stations_from_payload(await self.fetch_raw("rain"))

    async def fetch_polygons(self) -> List[Polygon]:
        return polygons_from_payload(await self.fetch_raw("polygons"))

    async def fetch_flood_alerts(self) -> List[Alert]:
        return flood_alerts_from_payload(await self.fetch_raw("waze"))
