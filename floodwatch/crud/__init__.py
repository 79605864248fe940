# CRUD operations package

from floodwatch.crud.base import CRUDBase
from floodwatch.crud.snapshot import CRUDSnapshot, snapshot

__all__ = [
    "CRUDBase",
    "CRUDSnapshot", "snapshot",
]
