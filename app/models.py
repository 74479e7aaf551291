"""
Device Preview Service
Pydantic models for the catalog, panel state and API payloads
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field

from app.config import MAX_SCALE, MIN_SCALE


# Enums
class MediaKind(str, Enum):
    IMAGE = "image"
    VIDEO = "video"


class ViewMode(str, Enum):
    GRID = "grid"
    STACK = "stack"


class MediaSource(str, Enum):
    """How a file reached the panel."""

    BROWSE = "browse"  # File picker, already filtered to image/* and video/*
    DROP = "drop"  # Drag and drop, validated by content type


# Catalog
class DeviceDescriptor(BaseModel):
    """A fixed-size display device from the catalog."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    screen_size: str = Field(description='Diagonal size label, e.g. 8.7"')
    width: int
    height: int
    year: str

    @computed_field  # type: ignore[prop-decorator]
    @property
    def aspect_ratio(self) -> str:
        return f"{self.width / self.height:.2f}:1"


# Media
class MediaReference(BaseModel):
    """The one media file currently shown on every selected device."""

    filename: str
    content_type: str
    size: int
    kind: MediaKind
    locator: str = Field(description="URL path the media is served from")


class MediaIntakeResponse(BaseModel):
    accepted: bool
    media: Optional[MediaReference] = None


class MediaErrorReport(BaseModel):
    """Client-side report that the media failed to decode or display."""

    device_id: Optional[str] = None
    locator: Optional[str] = None
    message: str = ""


# Controls
class ScaleUpdate(BaseModel):
    scale: float = Field(ge=MIN_SCALE, le=MAX_SCALE)


class ViewModeUpdate(BaseModel):
    view_mode: ViewMode


class PointerDown(BaseModel):
    inside: bool = Field(description="Whether the pointer hit the dropdown control")


# Playback
class VideoInstanceState(BaseModel):
    device_id: str
    playing: bool
    position: float
    rejected: bool = False


class PlaybackState(BaseModel):
    is_playing: bool
    instances: List[VideoInstanceState] = Field(default_factory=list)


class PlaybackRejection(BaseModel):
    device_id: str
    message: str = ""


# Rendering
class DevicePreview(BaseModel):
    """A device sized for preview at the current scale."""

    device: DeviceDescriptor
    width: int
    height: int

    @computed_field  # type: ignore[prop-decorator]
    @property
    def caption(self) -> str:
        device = self.device
        return (
            f"{device.name} ({device.year}) · {device.screen_size} · "
            f"{device.width}×{device.height} · "
            f"Preview: {self.width}×{self.height}px"
        )


# Panel
class PanelState(BaseModel):
    panel_id: str
    selected_devices: List[str] = Field(
        default_factory=list, description="Selected device ids in catalog order"
    )
    selection_label: str
    scale: float
    view_mode: ViewMode
    is_playing: bool
    dropdown_open: bool
    media: Optional[MediaReference] = None
