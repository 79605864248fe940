"""
Feed proxy router.

Pass-through access to the upstream feeds, so browser clients can read them
without cross-origin restrictions. Responses are not cached or retried;
upstream failures surface as 502.
"""

from typing import Literal
from fastapi import APIRouter, Depends, Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from floodwatch.config import settings
from floodwatch.dependencies.monitor import get_feed_client
from floodwatch.services.feeds import FeedClient

router = APIRouter(
    prefix="/feeds",
    tags=["Upstream Feeds"],
    responses={
        502: {"description": "Upstream feed unavailable"},
    },
)

limiter = Limiter(key_func=get_remote_address, enabled=settings.RATE_LIMIT_ENABLED)


@router.get("/{feed}")
@limiter.limit("60/minute")
async def proxy_feed(
    request: Request,
    feed: Literal["rain", "polygons", "waze"],
    client: FeedClient = Depends(get_feed_client),
):
    """
    Return an upstream feed's JSON unchanged.

    - `rain`: rain gauge stations
    - `polygons`: flood-risk zones
    - `waze`: hazard alerts (all subtypes)

    Rate limit: 60 requests per minute
    """
    return await client.fetch_raw(feed)
