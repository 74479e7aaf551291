"""
Request dependencies
"""

from fastapi import HTTPException, status

from app.panel import PreviewPanel
from app.store import panel_store


async def get_panel(panel_id: str) -> PreviewPanel:
    """Look up a live panel by id."""
    panel = panel_store.get(panel_id)

    if panel is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Panel '{panel_id}' not found",
        )

    panel.touch()
    return panel


async def get_video_panel(panel_id: str) -> PreviewPanel:
    """Like get_panel, but playback needs a video to act on."""
    panel = await get_panel(panel_id)

    if not panel.is_video:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="No video loaded",
        )

    return panel
