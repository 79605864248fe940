# Database models package

from floodwatch.models.base import BaseModel
from floodwatch.models.snapshot import FloodSnapshot

__all__ = [
    "BaseModel",
    "FloodSnapshot",
]
