"""
Displayable locators for uploaded media.

A locator is a process-local URL path (``/media/<token>``) that serves an
uploaded payload. Locators are scarce: each one is handed out wrapped in a
MediaLease, and the lease is the only way to give it back. A lease
releases at most once, so a creation is always paired with exactly one
release.
"""

import logging
import secrets
from typing import Dict, Optional, Tuple

from app import store

logger = logging.getLogger(__name__)

MEDIA_PATH_PREFIX = "/media/"


class LocatorAllocator:
    """Creates and releases media locators backed by an in-memory store."""

    def __init__(self, storage: Optional[Dict[str, Tuple[bytes, str]]] = None):
        self._storage = store.media_store if storage is None else storage
        self.created = 0
        self.released = 0

    def create(self, payload: bytes, content_type: str) -> "MediaLease":
        token = secrets.token_urlsafe(16)
        self._storage[token] = (payload, content_type)
        self.created += 1
        logger.debug(f"Created locator {token} ({len(payload)} bytes)")
        return MediaLease(self, token)

    def _release(self, token: str) -> None:
        if self._storage.pop(token, None) is None:
            logger.warning(f"Locator {token} was already gone from the store")
        self.released += 1
        logger.debug(f"Released locator {token}")

    def resolve(self, token: str) -> Optional[Tuple[bytes, str]]:
        """Return (payload, content_type) for a live locator, else None."""
        return self._storage.get(token)

    @property
    def outstanding(self) -> int:
        return self.created - self.released


class MediaLease:
    """Ownership of one locator. Release it exactly once."""

    def __init__(self, allocator: LocatorAllocator, token: str):
        self._allocator = allocator
        self.token = token
        self._released = False

    @property
    def locator(self) -> str:
        return f"{MEDIA_PATH_PREFIX}{self.token}"

    @property
    def released(self) -> bool:
        return self._released

    def release(self) -> None:
        if self._released:
            return
        self._released = True
        self._allocator._release(self.token)

    def __enter__(self) -> "MediaLease":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()


# Shared allocator used by the HTTP layer
allocator = LocatorAllocator()
