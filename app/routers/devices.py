"""
Device routes - the static Echo Show catalog
"""

from typing import List

from fastapi import APIRouter, HTTPException, status

from app.catalog import ECHO_SHOW_DEVICES, get_device
from app.models import DeviceDescriptor

router = APIRouter(prefix="/devices", tags=["Devices"])


@router.get("", response_model=List[DeviceDescriptor])
async def list_devices() -> List[DeviceDescriptor]:
    """List every catalog device in display order."""
    return list(ECHO_SHOW_DEVICES)


@router.get("/reference")
async def device_reference() -> list:
    """
    Reference table rows.

    One row per catalog device with its resolution and aspect ratio.
    """
    return [
        {
            "device": device.name,
            "screen": device.screen_size,
            "resolution": f"{device.width}×{device.height}",
            "aspect_ratio": device.aspect_ratio,
            "year": device.year,
        }
        for device in ECHO_SHOW_DEVICES
    ]


@router.get("/{device_id}", response_model=DeviceDescriptor)
async def get_device_route(device_id: str) -> DeviceDescriptor:
    device = get_device(device_id)

    if device is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Device '{device_id}' not found",
        )

    return device
