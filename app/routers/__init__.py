"""
Routers Package
"""

from app.routers.devices import router as devices_router
from app.routers.media import router as media_router
from app.routers.panels import router as panels_router

__all__ = [
    "devices_router",
    "media_router",
    "panels_router",
]
