"""
Playback Controller - keeps every rendered video instance in lockstep.

There is one shared video (the panel's media) rendered once per selected
device. Each rendering is a video instance registered under its device id.
The controller issues play/pause/seek to all of them and keeps a single
optimistic flag describing what the user asked for.
"""

import logging
from collections import deque
from typing import Callable, Deque, Dict, Iterable

from app.models import PlaybackState, VideoInstanceState

logger = logging.getLogger(__name__)

# Recent commands kept per instance
COMMAND_HISTORY = 32


class PlaybackRejected(Exception):
    """A play request was refused, e.g. by a browser autoplay policy."""


class VideoInstance:
    """
    Server-side handle for one rendered <video> element.

    Records the commands it has been sent and what the element is known to
    be doing. The browser applies the commands and reports play rejections
    back through ``mark_rejected``.
    """

    def __init__(self, device_id: str):
        self.device_id = device_id
        self.playing = True
        self.position = 0.0
        self.rejected = False
        self.commands: Deque[str] = deque(maxlen=COMMAND_HISTORY)

    def play(self) -> None:
        self.commands.append("play")
        self.playing = True
        self.rejected = False

    def pause(self) -> None:
        self.commands.append("pause")
        self.playing = False

    def seek(self, position: float) -> None:
        self.commands.append(f"seek:{position:g}")
        self.position = position

    def mark_rejected(self) -> None:
        self.playing = False
        self.rejected = True

    def to_state(self) -> VideoInstanceState:
        return VideoInstanceState(
            device_id=self.device_id,
            playing=self.playing,
            position=self.position,
            rejected=self.rejected,
        )


class PlaybackController:
    """Registry of live video instances plus the shared playback flag."""

    def __init__(
        self,
        instance_factory: Callable[[str], VideoInstance] = VideoInstance,
    ):
        self._instance_factory = instance_factory
        self._instances: Dict[str, VideoInstance] = {}
        self.is_playing = True

    @property
    def instances(self) -> Dict[str, VideoInstance]:
        return dict(self._instances)

    def mount(self, device_id: str) -> VideoInstance:
        """Register the video instance rendered for a device."""
        instance = self._instances.get(device_id)
        if instance is None:
            instance = self._instance_factory(device_id)
            # Rendered with autoplay only while the shared flag says playing
            instance.playing = self.is_playing
            self._instances[device_id] = instance
        return instance

    def unmount(self, device_id: str) -> None:
        self._instances.pop(device_id, None)

    def unmount_all(self) -> None:
        self._instances.clear()

    def sync(self, device_ids: Iterable[str]) -> None:
        """Mount instances for ``device_ids`` and drop every other one."""
        wanted = list(device_ids)
        for device_id in list(self._instances):
            if device_id not in wanted:
                self.unmount(device_id)
        for device_id in wanted:
            self.mount(device_id)

    def reset(self) -> None:
        """New media: forget old instances and assume autoplay."""
        self.unmount_all()
        self.is_playing = True

    def _play(self, instance: VideoInstance) -> None:
        try:
            instance.play()
        except PlaybackRejected as e:
            # Best effort: the flag keeps the user's intent
            logger.debug(f"Play rejected for {instance.device_id}: {e}")

    def toggle_play_pause(self) -> bool:
        if self.is_playing:
            for instance in self._instances.values():
                instance.pause()
        else:
            for instance in self._instances.values():
                self._play(instance)
        self.is_playing = not self.is_playing
        return self.is_playing

    def restart(self) -> None:
        for instance in self._instances.values():
            instance.seek(0)
            self._play(instance)
        self.is_playing = True

    def report_rejection(self, device_id: str, message: str = "") -> bool:
        """Record that the browser refused to play one instance."""
        instance = self._instances.get(device_id)
        if instance is None:
            return False
        instance.mark_rejected()
        logger.debug(f"Browser rejected playback on {device_id}: {message}")
        return True

    def to_state(self) -> PlaybackState:
        return PlaybackState(
            is_playing=self.is_playing,
            instances=[instance.to_state() for instance in self._instances.values()],
        )
