"""
Dependencies exposing the application's monitor, scheduler and feed client.
"""

from fastapi import Request

from floodwatch.services.feeds import FeedClient
from floodwatch.services.monitor import FloodMonitor
from floodwatch.services.scheduler import RefreshScheduler


def get_monitor(request: Request) -> FloodMonitor:
    return request.app.state.monitor


def get_scheduler(request: Request) -> RefreshScheduler:
    return request.app.state.scheduler


def get_feed_client(request: Request) -> FeedClient:
    return request.app.state.monitor.feeds
