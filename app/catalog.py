"""
Static catalog of Echo Show devices with their native resolutions.
"""

from typing import Dict, List, Optional, Tuple

from app.models import DeviceDescriptor

ECHO_SHOW_DEVICES: Tuple[DeviceDescriptor, ...] = (
    DeviceDescriptor(
        id="echo-show-5",
        name="Echo Show 5",
        screen_size='5.5"',
        width=960,
        height=480,
        year="2023",
    ),
    DeviceDescriptor(
        id="echo-show-8-2023",
        name="Echo Show 8",
        screen_size='8"',
        width=1280,
        height=800,
        year="2023",
    ),
    DeviceDescriptor(
        id="echo-show-8-2025",
        name="Echo Show 8",
        screen_size='8.7"',
        width=1280,
        height=800,
        year="2025",
    ),
    DeviceDescriptor(
        id="echo-show-10",
        name="Echo Show 10",
        screen_size='10.1"',
        width=1280,
        height=800,
        year="2023",
    ),
    DeviceDescriptor(
        id="echo-show-15",
        name="Echo Show 15",
        screen_size='15.6"',
        width=1920,
        height=1080,
        year="2024",
    ),
    DeviceDescriptor(
        id="echo-show-21",
        name="Echo Show 21",
        screen_size='21"',
        width=1920,
        height=1080,
        year="2024",
    ),
)

_BY_ID: Dict[str, DeviceDescriptor] = {device.id: device for device in ECHO_SHOW_DEVICES}


def all_device_ids() -> List[str]:
    return [device.id for device in ECHO_SHOW_DEVICES]


def get_device(device_id: str) -> Optional[DeviceDescriptor]:
    return _BY_ID.get(device_id)


def is_known_device(device_id: str) -> bool:
    return device_id in _BY_ID


def in_catalog_order(device_ids) -> List[DeviceDescriptor]:
    """Return the descriptors for the given ids, ordered as in the catalog."""
    wanted = set(device_ids)
    return [device for device in ECHO_SHOW_DEVICES if device.id in wanted]
