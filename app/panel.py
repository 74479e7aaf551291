"""
Preview Panel - owns all state of one device preview session.

The panel holds the selected devices, the scale and view controls, the
dropdown visibility, the current media (through its locator lease) and the
playback controller. Every operation is synchronous and runs to completion.
"""

import logging
import time
import uuid
from typing import Callable, List, Optional, Set

from app import catalog
from app.config import DEFAULT_DEVICES, DEFAULT_SCALE, MAX_SCALE, MIN_SCALE
from app.locators import LocatorAllocator, MediaLease
from app.locators import allocator as default_allocator
from app.models import (
    DevicePreview,
    MediaKind,
    MediaReference,
    MediaSource,
    PanelState,
    ViewMode,
)
from app.playback import PlaybackController

logger = logging.getLogger(__name__)

PointerListener = Callable[[bool], None]


def media_kind_for(content_type: str) -> MediaKind:
    """Coarse media kind from a declared content type."""
    if (content_type or "").startswith("video/"):
        return MediaKind.VIDEO
    return MediaKind.IMAGE


def is_supported_content_type(content_type: Optional[str]) -> bool:
    content_type = content_type or ""
    return content_type.startswith("image/") or content_type.startswith("video/")


def clamp_scale(value: float) -> float:
    return min(MAX_SCALE, max(MIN_SCALE, float(value)))


def round_half_up(value: float) -> int:
    return int(value + 0.5) if value >= 0 else -int(-value + 0.5)


class PreviewPanel:
    """State container for one preview session."""

    def __init__(
        self,
        panel_id: Optional[str] = None,
        allocator: Optional[LocatorAllocator] = None,
        playback: Optional[PlaybackController] = None,
        selected: Optional[List[str]] = None,
        scale: float = DEFAULT_SCALE,
    ):
        self.panel_id = panel_id or uuid.uuid4().hex[:12]
        self._allocator = allocator or default_allocator
        self.playback = playback or PlaybackController()

        initial = DEFAULT_DEVICES if selected is None else selected
        self.selected: Set[str] = {d for d in initial if catalog.is_known_device(d)}
        self.scale = clamp_scale(scale)
        self.view_mode = ViewMode.GRID
        self.dropdown_open = False

        self.media: Optional[MediaReference] = None
        self._lease: Optional[MediaLease] = None

        # Pointer-down subscribers, only populated while the dropdown is open
        self._pointer_listeners: List[PointerListener] = []

        self.last_seen = time.monotonic()

    # ------------------------------------------------------------
    # Media intake
    # ------------------------------------------------------------

    def load_media(
        self,
        filename: str,
        content_type: str,
        payload: bytes,
        source: MediaSource = MediaSource.BROWSE,
    ) -> bool:
        """
        Make a file the current media.

        Drops are validated by content type; the file picker already filters
        to images and videos. Returns False when the file was ignored.
        """
        if source == MediaSource.DROP and not is_supported_content_type(
            content_type
        ):
            logger.debug(
                f"Ignoring dropped file {filename!r} with type {content_type!r}"
            )
            return False

        self._release_media()

        lease = self._allocator.create(payload, content_type)
        self._lease = lease
        self.media = MediaReference(
            filename=filename,
            content_type=content_type,
            size=len(payload),
            kind=media_kind_for(content_type),
            locator=lease.locator,
        )
        self.playback.reset()
        self._sync_video_instances()

        logger.info(
            f"Panel {self.panel_id}: loaded {self.media.kind.value} "
            f"{filename!r} ({len(payload)} bytes)"
        )
        return True

    def clear_media(self) -> None:
        self._release_media()
        self._sync_video_instances()

    def _release_media(self) -> None:
        if self._lease is not None:
            self._lease.release()
        self._lease = None
        self.media = None
        self.playback.unmount_all()

    @property
    def is_video(self) -> bool:
        return self.media is not None and self.media.kind == MediaKind.VIDEO

    # ------------------------------------------------------------
    # Device selection
    # ------------------------------------------------------------

    def toggle_device(self, device_id: str) -> None:
        if device_id in self.selected:
            self.selected.discard(device_id)
        elif catalog.is_known_device(device_id):
            self.selected.add(device_id)
        self._sync_video_instances()

    def select_all(self) -> None:
        self.selected = set(catalog.all_device_ids())
        self._sync_video_instances()

    def clear_all(self) -> None:
        self.selected = set()
        self._sync_video_instances()

    def selected_devices(self):
        return catalog.in_catalog_order(self.selected)

    @property
    def selection_label(self) -> str:
        count = len(self.selected)
        if count == 0:
            return "Select devices..."
        return f"{count} device{'s' if count > 1 else ''} selected"

    # ------------------------------------------------------------
    # Dropdown
    # ------------------------------------------------------------

    def open_dropdown(self) -> None:
        if self.dropdown_open:
            return
        self.dropdown_open = True
        self._pointer_listeners.append(self._close_on_outside_pointer)

    def close_dropdown(self) -> None:
        self.dropdown_open = False
        if self._close_on_outside_pointer in self._pointer_listeners:
            self._pointer_listeners.remove(self._close_on_outside_pointer)

    def toggle_dropdown(self) -> None:
        if self.dropdown_open:
            self.close_dropdown()
        else:
            self.open_dropdown()

    def pointer_down(self, inside: bool) -> None:
        """Dispatch a pointer-down interaction to the current subscribers."""
        for listener in list(self._pointer_listeners):
            listener(inside)

    def _close_on_outside_pointer(self, inside: bool) -> None:
        if not inside:
            self.close_dropdown()

    @property
    def pointer_listener_count(self) -> int:
        return len(self._pointer_listeners)

    # ------------------------------------------------------------
    # Scale and view
    # ------------------------------------------------------------

    def set_scale(self, value: float) -> None:
        self.scale = clamp_scale(value)

    def set_view_mode(self, mode: ViewMode) -> None:
        self.view_mode = ViewMode(mode)

    @property
    def scale_percent(self) -> int:
        return round_half_up(self.scale * 100)

    # ------------------------------------------------------------
    # Playback
    # ------------------------------------------------------------

    def toggle_play_pause(self) -> bool:
        return self.playback.toggle_play_pause()

    def restart_videos(self) -> None:
        self.playback.restart()

    @property
    def is_playing(self) -> bool:
        return self.playback.is_playing

    def _sync_video_instances(self) -> None:
        if self.is_video:
            self.playback.sync(device.id for device in self.selected_devices())
        else:
            self.playback.unmount_all()

    # ------------------------------------------------------------
    # Rendering inputs
    # ------------------------------------------------------------

    def previews(self) -> List[DevicePreview]:
        """Selected devices, in catalog order, sized at the current scale."""
        return [
            DevicePreview(
                device=device,
                width=round_half_up(device.width * self.scale),
                height=round_half_up(device.height * self.scale),
            )
            for device in self.selected_devices()
        ]

    def to_state(self) -> PanelState:
        return PanelState(
            panel_id=self.panel_id,
            selected_devices=[device.id for device in self.selected_devices()],
            selection_label=self.selection_label,
            scale=self.scale,
            view_mode=self.view_mode,
            is_playing=self.is_playing,
            dropdown_open=self.dropdown_open,
            media=self.media,
        )

    # ------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------

    def touch(self, now: Optional[float] = None) -> None:
        """Mark the panel as in use."""
        self.last_seen = time.monotonic() if now is None else now

    def is_idle(self, max_idle: float, now: Optional[float] = None) -> bool:
        now = time.monotonic() if now is None else now
        return now - self.last_seen > max_idle

    def teardown(self) -> None:
        """Release everything the panel still holds."""
        self._release_media()
        self.close_dropdown()
        logger.info(f"Panel {self.panel_id} torn down")
