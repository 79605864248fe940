# API routers package

from floodwatch.routers.cron import router as cron_router
from floodwatch.routers.feeds import router as feeds_router
from floodwatch.routers.history import router as history_router
from floodwatch.routers.monitor import router as monitor_router

# Re-export for easy importing
cron = cron_router
feeds = feeds_router
history = history_router
monitor = monitor_router
