"""
Device Preview Service

Upload an image or video and see it rendered at once inside scaled
mockups of several fixed-size Echo Show displays.
"""

import asyncio
import logging
import os
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.responses import RedirectResponse

# Load environment variables
load_dotenv()

from app.config import LOG_LEVEL, PANEL_SWEEP_SECONDS
from app.routers import devices_router, media_router, panels_router
from app.routers.panels import create_panel, evict_idle_panels
from app.store import panel_store

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


async def sweep_idle_panels() -> None:
    """Periodically tear down panels whose tab has gone away."""
    while True:
        await asyncio.sleep(PANEL_SWEEP_SECONDS)
        evict_idle_panels()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    logger.info("Starting Device Preview Service")
    sweeper = asyncio.create_task(sweep_idle_panels())
    yield
    sweeper.cancel()
    # Shutdown: release every locator still held by a panel
    for panel in list(panel_store.values()):
        panel.teardown()
    panel_store.clear()
    logger.info("Device Preview Service stopped")


app = FastAPI(
    title="Device Preview Service",
    version="0.1.0",
    description="""
Preview an image or video on several Echo Show screens at once.
Each preview panel keeps its own device selection, scale, view mode,
media and playback state in memory for the lifetime of the process.
    """,
    lifespan=lifespan,
)

# Include routers
app.include_router(devices_router)
app.include_router(media_router)
app.include_router(panels_router)


@app.get("/", include_in_schema=False)
async def index() -> RedirectResponse:
    """Start a fresh panel and open its page."""
    panel = create_panel()
    return RedirectResponse(url=f"/panels/{panel.panel_id}/view", status_code=303)


@app.get("/health", tags=["Health"])
async def health_check() -> dict:
    """Health check endpoint."""
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn

    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", "8000"))
    debug = os.getenv("DEBUG", "true").lower() == "true"

    uvicorn.run("app.main:app", host=host, port=port, reload=debug)
