"""
Panel routes - one preview session per panel
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, HTTPException, Request, UploadFile
from fastapi.responses import HTMLResponse

from app.config import MAX_UPLOAD_BYTES, PANEL_IDLE_SECONDS
from app.dependencies import get_panel, get_video_panel
from app.models import (
    DevicePreview,
    MediaErrorReport,
    MediaIntakeResponse,
    MediaSource,
    PanelState,
    PlaybackRejection,
    PlaybackState,
    PointerDown,
    ScaleUpdate,
    ViewModeUpdate,
)
from app.panel import PreviewPanel
from app.renderer import render_page
from app.store import panel_store

router = APIRouter(prefix="/panels", tags=["Panels"])
logger = logging.getLogger(__name__)


def evict_idle_panels(
    max_idle: float = PANEL_IDLE_SECONDS, now: Optional[float] = None
) -> List[str]:
    """
    Tear down panels nobody has touched for ``max_idle`` seconds.

    A closed browser tab never says goodbye, so this is what releases the
    media its panel was holding.
    """
    evicted = [
        panel_id
        for panel_id, panel in list(panel_store.items())
        if panel.is_idle(max_idle, now)
    ]
    for panel_id in evicted:
        panel_store.pop(panel_id).teardown()
    if evicted:
        logger.info(f"Evicted {len(evicted)} idle panel(s)")
    return evicted


def create_panel() -> PreviewPanel:
    evict_idle_panels()
    panel = PreviewPanel()
    panel_store[panel.panel_id] = panel
    logger.info(f"Created panel {panel.panel_id}")
    return panel


@router.post("", response_model=PanelState, status_code=201)
async def create_panel_route() -> PanelState:
    """
    Create a new preview panel.

    Starts with the default device selection, 30% scale, grid view and
    no media.
    """
    return create_panel().to_state()


@router.get("/{panel_id}", response_model=PanelState)
async def get_panel_state(panel: PreviewPanel = Depends(get_panel)) -> PanelState:
    return panel.to_state()


@router.delete("/{panel_id}", status_code=204)
async def delete_panel(panel: PreviewPanel = Depends(get_panel)) -> None:
    """
    Tear down a panel.

    Releases the panel's media locator, if it still holds one.
    """
    panel.teardown()
    panel_store.pop(panel.panel_id, None)


@router.get("/{panel_id}/view", response_class=HTMLResponse)
async def view_panel(
    request: Request, panel: PreviewPanel = Depends(get_panel)
) -> HTMLResponse:
    """Serve the interactive preview page."""
    base_url = str(request.base_url).rstrip("/")
    return HTMLResponse(content=render_page(panel, base_url))


@router.get("/{panel_id}/previews", response_model=List[DevicePreview])
async def get_previews(panel: PreviewPanel = Depends(get_panel)) -> List[DevicePreview]:
    """Selected devices in catalog order, sized at the current scale."""
    return panel.previews()


# ============================================================
# Media
# ============================================================


def _reject_oversized() -> None:
    raise HTTPException(
        status_code=413,
        detail=f"File exceeds the {MAX_UPLOAD_BYTES} byte upload limit",
    )


async def _intake(
    panel: PreviewPanel, file: Optional[UploadFile], source: MediaSource
) -> MediaIntakeResponse:
    if file is None:
        return MediaIntakeResponse(accepted=False, media=panel.media)

    # Reject on the declared size before pulling the body into memory
    if file.size is not None and file.size > MAX_UPLOAD_BYTES:
        _reject_oversized()

    content = await file.read()
    if len(content) > MAX_UPLOAD_BYTES:
        _reject_oversized()

    accepted = panel.load_media(
        filename=file.filename or "upload",
        content_type=file.content_type or "application/octet-stream",
        payload=content,
        source=source,
    )
    return MediaIntakeResponse(accepted=accepted, media=panel.media)


@router.post("/{panel_id}/media", response_model=MediaIntakeResponse)
async def upload_media(
    file: Optional[UploadFile] = File(None),
    panel: PreviewPanel = Depends(get_panel),
) -> MediaIntakeResponse:
    """
    Load media chosen with the file picker.

    The picker only offers images and videos, so the file is taken as is.
    """
    return await _intake(panel, file, MediaSource.BROWSE)


@router.post("/{panel_id}/media/drop", response_model=MediaIntakeResponse)
async def drop_media(
    file: Optional[UploadFile] = File(None),
    panel: PreviewPanel = Depends(get_panel),
) -> MediaIntakeResponse:
    """
    Load media dropped onto the upload zone.

    Files that are neither image/* nor video/* are ignored and the current
    media is left in place.
    """
    return await _intake(panel, file, MediaSource.DROP)


@router.delete("/{panel_id}/media", response_model=PanelState)
async def clear_media(panel: PreviewPanel = Depends(get_panel)) -> PanelState:
    panel.clear_media()
    return panel.to_state()


@router.post("/{panel_id}/media/errors", status_code=202)
async def report_media_error(
    report: MediaErrorReport,
    panel: PreviewPanel = Depends(get_panel),
) -> dict:
    """
    Record that the browser failed to decode or display the media.

    The broken media stays on screen; this only feeds the logs.
    """
    logger.error(
        f"Panel {panel.panel_id}: media failed to load on "
        f"{report.device_id or 'unknown device'} "
        f"({report.locator or 'no locator'}): {report.message}"
    )
    return {"message": "Error recorded"}


# ============================================================
# Device selection
# ============================================================


@router.post("/{panel_id}/devices/select-all", response_model=PanelState)
async def select_all_devices(panel: PreviewPanel = Depends(get_panel)) -> PanelState:
    panel.select_all()
    return panel.to_state()


@router.post("/{panel_id}/devices/clear-all", response_model=PanelState)
async def clear_all_devices(panel: PreviewPanel = Depends(get_panel)) -> PanelState:
    panel.clear_all()
    return panel.to_state()


@router.post("/{panel_id}/devices/{device_id}/toggle", response_model=PanelState)
async def toggle_device(
    device_id: str, panel: PreviewPanel = Depends(get_panel)
) -> PanelState:
    """Flip a device in or out of the selection. Unknown ids are ignored."""
    panel.toggle_device(device_id)
    return panel.to_state()


@router.post("/{panel_id}/dropdown/toggle", response_model=PanelState)
async def toggle_dropdown(panel: PreviewPanel = Depends(get_panel)) -> PanelState:
    panel.toggle_dropdown()
    return panel.to_state()


@router.post("/{panel_id}/dropdown/pointer-down", response_model=PanelState)
async def dropdown_pointer_down(
    event: PointerDown, panel: PreviewPanel = Depends(get_panel)
) -> PanelState:
    """Pointer interaction; closes an open dropdown when it lands outside."""
    panel.pointer_down(event.inside)
    return panel.to_state()


# ============================================================
# Scale and view
# ============================================================


@router.put("/{panel_id}/scale", response_model=PanelState)
async def set_scale(
    update: ScaleUpdate, panel: PreviewPanel = Depends(get_panel)
) -> PanelState:
    panel.set_scale(update.scale)
    return panel.to_state()


@router.put("/{panel_id}/view-mode", response_model=PanelState)
async def set_view_mode(
    update: ViewModeUpdate, panel: PreviewPanel = Depends(get_panel)
) -> PanelState:
    panel.set_view_mode(update.view_mode)
    return panel.to_state()


# ============================================================
# Playback
# ============================================================


@router.get("/{panel_id}/playback", response_model=PlaybackState)
async def get_playback(panel: PreviewPanel = Depends(get_video_panel)) -> PlaybackState:
    return panel.playback.to_state()


@router.post("/{panel_id}/playback/toggle", response_model=PlaybackState)
async def toggle_playback(
    panel: PreviewPanel = Depends(get_video_panel),
) -> PlaybackState:
    """Pause every video if playing, otherwise play them all."""
    panel.toggle_play_pause()
    return panel.playback.to_state()


@router.post("/{panel_id}/playback/restart", response_model=PlaybackState)
async def restart_playback(
    panel: PreviewPanel = Depends(get_video_panel),
) -> PlaybackState:
    """Seek every video to the start and play."""
    panel.restart_videos()
    return panel.playback.to_state()


@router.post("/{panel_id}/playback/rejections", status_code=202)
async def report_playback_rejection(
    rejection: PlaybackRejection,
    panel: PreviewPanel = Depends(get_video_panel),
) -> dict:
    """
    Record that the browser refused to play one video.

    The shared playing flag keeps the user's intent; only the instance's
    own state changes.
    """
    known = panel.playback.report_rejection(rejection.device_id, rejection.message)
    if not known:
        return {"message": "No such video instance"}
    return {"message": "Rejection recorded"}
