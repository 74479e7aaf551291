"""
Tests for the playback controller
"""

from app.playback import (
    COMMAND_HISTORY,
    PlaybackController,
    PlaybackRejected,
    VideoInstance,
)


class BlockedVideo(VideoInstance):
    """A video whose play requests are always refused."""

    def play(self) -> None:
        self.commands.append("play")
        raise PlaybackRejected("autoplay blocked")


def test_toggle_twice_pauses_then_plays():
    controller = PlaybackController()
    controller.sync(["echo-show-8-2023", "echo-show-15"])

    assert controller.toggle_play_pause() is False
    assert controller.toggle_play_pause() is True

    for instance in controller.instances.values():
        assert list(instance.commands) == ["pause", "play"]
        assert instance.playing


def test_restart_seeks_and_plays():
    controller = PlaybackController()
    controller.sync(["echo-show-5"])
    controller.toggle_play_pause()

    controller.restart()

    instance = controller.instances["echo-show-5"]
    assert list(instance.commands) == ["pause", "seek:0", "play"]
    assert instance.position == 0
    assert controller.is_playing


def test_rejected_play_is_swallowed():
    controller = PlaybackController(instance_factory=BlockedVideo)
    controller.sync(["echo-show-10"])
    controller.toggle_play_pause()

    assert controller.toggle_play_pause() is True
    controller.restart()

    assert controller.is_playing
    assert list(controller.instances["echo-show-10"].commands) == [
        "pause",
        "play",
        "seek:0",
        "play",
    ]


def test_sync_drops_stale_instances():
    controller = PlaybackController()
    controller.sync(["echo-show-5", "echo-show-15"])
    kept = controller.instances["echo-show-5"]

    controller.sync(["echo-show-5"])

    assert list(controller.instances) == ["echo-show-5"]
    assert controller.instances["echo-show-5"] is kept


def test_report_rejection_keeps_flag():
    controller = PlaybackController()
    controller.sync(["echo-show-21"])

    assert controller.report_rejection("echo-show-21", "NotAllowedError")
    assert not controller.report_rejection("echo-show-5")

    state = controller.to_state()
    assert state.is_playing
    assert state.instances[0].playing is False
    assert state.instances[0].rejected is True


def test_instance_mounted_while_paused_is_paused():
    controller = PlaybackController()
    controller.sync(["echo-show-5"])
    controller.toggle_play_pause()

    controller.sync(["echo-show-5", "echo-show-21"])

    state = controller.to_state()
    assert state.is_playing is False
    assert all(not instance.playing for instance in state.instances)


def test_command_history_is_bounded():
    controller = PlaybackController()
    controller.sync(["echo-show-15"])

    for _ in range(COMMAND_HISTORY * 3):
        controller.toggle_play_pause()

    commands = controller.instances["echo-show-15"].commands
    assert len(commands) == COMMAND_HISTORY
    assert commands[-1] == "play"
