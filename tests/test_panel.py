"""
Tests for the preview panel state container
"""

import pytest

from app.catalog import ECHO_SHOW_DEVICES, all_device_ids
from app.locators import LocatorAllocator
from app.models import MediaKind, MediaSource, ViewMode
from app.panel import PreviewPanel, media_kind_for, round_half_up


@pytest.fixture
def allocator():
    return LocatorAllocator({})


@pytest.fixture
def panel(allocator):
    return PreviewPanel(allocator=allocator)


def test_defaults(panel):
    assert panel.selected == {"echo-show-8-2023", "echo-show-15"}
    assert panel.scale == pytest.approx(0.3)
    assert panel.view_mode == ViewMode.GRID
    assert panel.is_playing
    assert not panel.dropdown_open
    assert panel.media is None


@pytest.mark.parametrize("device", ECHO_SHOW_DEVICES, ids=lambda d: d.id)
@pytest.mark.parametrize(
    "initial",
    [[], ["echo-show-8-2023", "echo-show-15"], all_device_ids()],
    ids=["empty", "default", "all"],
)
def test_toggle_twice_restores_selection(allocator, device, initial):
    panel = PreviewPanel(allocator=allocator, selected=initial)
    before = set(panel.selected)

    panel.toggle_device(device.id)
    panel.toggle_device(device.id)

    assert panel.selected == before


def test_toggle_unknown_device_is_noop(panel):
    panel.toggle_device("echo-dot")
    assert panel.selected == {"echo-show-8-2023", "echo-show-15"}


def test_select_all_then_clear_all(panel):
    panel.select_all()
    assert panel.selected == set(all_device_ids())
    panel.clear_all()
    assert panel.selected == set()
    assert panel.selection_label == "Select devices..."


def test_selection_label(allocator):
    panel = PreviewPanel(allocator=allocator, selected=["echo-show-5"])
    assert panel.selection_label == "1 device selected"
    panel.toggle_device("echo-show-21")
    assert panel.selection_label == "2 devices selected"


def test_unknown_default_devices_are_dropped(allocator):
    panel = PreviewPanel(allocator=allocator, selected=["echo-show-5", "kindle"])
    assert panel.selected == {"echo-show-5"}


@pytest.mark.parametrize("scale", [0.15, 0.2, 0.3, 0.45, 0.5, 0.75, 1.0])
def test_preview_dimensions_follow_scale(allocator, scale):
    panel = PreviewPanel(allocator=allocator, selected=all_device_ids())
    panel.set_scale(scale)

    for preview in panel.previews():
        assert preview.width == round_half_up(preview.device.width * scale)
        assert preview.height == round_half_up(preview.device.height * scale)


def test_echo_show_8_preview_caption(allocator):
    panel = PreviewPanel(allocator=allocator, selected=["echo-show-8-2023"])
    panel.set_scale(0.3)

    [preview] = panel.previews()

    assert (preview.width, preview.height) == (384, 240)
    assert preview.caption == 'Echo Show 8 (2023) · 8" · 1280×800 · Preview: 384×240px'


def test_previews_follow_catalog_order(allocator):
    panel = PreviewPanel(allocator=allocator, selected=[])
    panel.toggle_device("echo-show-21")
    panel.toggle_device("echo-show-5")
    assert [p.device.id for p in panel.previews()] == ["echo-show-5", "echo-show-21"]


def test_scale_is_clamped(panel):
    panel.set_scale(5)
    assert panel.scale == 1.0
    panel.set_scale(0.01)
    assert panel.scale == 0.15


def test_scale_percent(panel):
    assert panel.scale_percent == 30
    panel.set_scale(0.15)
    assert panel.scale_percent == 15


def test_set_view_mode(panel):
    panel.set_view_mode(ViewMode.STACK)
    assert panel.view_mode == ViewMode.STACK
    panel.set_view_mode("grid")
    assert panel.view_mode == ViewMode.GRID


def test_media_kind_from_content_type():
    assert media_kind_for("video/mp4") == MediaKind.VIDEO
    assert media_kind_for("image/png") == MediaKind.IMAGE
    assert media_kind_for("application/octet-stream") == MediaKind.IMAGE


def test_replacing_media_releases_previous_locator_once(panel, allocator):
    panel.load_media("a.png", "image/png", b"a")
    first = panel.media.locator
    panel.load_media("b.mp4", "video/mp4", b"b")

    assert allocator.created == 2
    assert allocator.released == 1
    assert allocator.outstanding == 1
    assert panel.media.filename == "b.mp4"
    assert panel.media.kind == MediaKind.VIDEO
    assert panel.media.locator != first


def test_dropped_text_file_is_ignored(panel, allocator):
    panel.load_media("a.png", "image/png", b"a")
    before = panel.media

    accepted = panel.load_media("notes.txt", "text/plain", b"hi", MediaSource.DROP)

    assert accepted is False
    assert panel.media == before
    assert allocator.created == 1
    assert allocator.released == 0


def test_browsed_file_is_not_validated(panel):
    assert panel.load_media("clip", "application/octet-stream", b"x")
    assert panel.media.kind == MediaKind.IMAGE


def test_load_media_sets_playing(panel):
    panel.load_media("a.mp4", "video/mp4", b"a")
    panel.toggle_play_pause()
    assert not panel.is_playing

    panel.load_media("b.mp4", "video/mp4", b"b")

    assert panel.is_playing


def test_clear_media_releases_locator(panel, allocator):
    panel.load_media("a.png", "image/png", b"a")
    panel.clear_media()

    assert panel.media is None
    assert allocator.outstanding == 0

    panel.clear_media()
    assert allocator.released == 1


def test_teardown_releases_outstanding_locator(panel, allocator):
    panel.load_media("a.mp4", "video/mp4", b"a")
    panel.open_dropdown()

    panel.teardown()

    assert allocator.outstanding == 0
    assert panel.playback.instances == {}
    assert not panel.dropdown_open
    assert panel.pointer_listener_count == 0


def test_video_instances_follow_selection(panel):
    panel.load_media("a.mp4", "video/mp4", b"a")
    assert set(panel.playback.instances) == {"echo-show-8-2023", "echo-show-15"}

    panel.toggle_device("echo-show-15")
    assert set(panel.playback.instances) == {"echo-show-8-2023"}

    panel.select_all()
    assert set(panel.playback.instances) == set(all_device_ids())

    panel.clear_all()
    assert panel.playback.instances == {}


def test_image_has_no_video_instances(panel):
    panel.load_media("a.png", "image/png", b"a")
    assert panel.playback.instances == {}


def test_new_media_replaces_video_instances(panel):
    panel.load_media("a.mp4", "video/mp4", b"a")
    old = panel.playback.instances["echo-show-15"]

    panel.load_media("b.mp4", "video/mp4", b"b")

    assert panel.playback.instances["echo-show-15"] is not old


def test_toggle_play_pause_twice(panel):
    panel.load_media("a.mp4", "video/mp4", b"a")
    original = panel.is_playing

    panel.toggle_play_pause()
    panel.toggle_play_pause()

    assert panel.is_playing == original
    for instance in panel.playback.instances.values():
        assert list(instance.commands) == ["pause", "play"]


def test_restart_videos(panel):
    panel.load_media("a.mp4", "video/mp4", b"a")
    panel.toggle_play_pause()

    panel.restart_videos()

    assert panel.is_playing
    for instance in panel.playback.instances.values():
        assert instance.position == 0
        assert list(instance.commands)[-2:] == ["seek:0", "play"]


def test_dropdown_closes_on_outside_pointer(panel):
    panel.toggle_dropdown()
    assert panel.dropdown_open
    assert panel.pointer_listener_count == 1

    panel.pointer_down(inside=True)
    assert panel.dropdown_open

    panel.pointer_down(inside=False)
    assert not panel.dropdown_open
    assert panel.pointer_listener_count == 0


def test_pointer_down_while_closed_does_nothing(panel):
    panel.pointer_down(inside=False)
    assert not panel.dropdown_open
    panel.toggle_dropdown()
    panel.toggle_dropdown()
    assert panel.pointer_listener_count == 0


def test_device_added_while_paused_starts_paused(allocator):
    panel = PreviewPanel(allocator=allocator, selected=["echo-show-5"])
    panel.load_media("a.mp4", "video/mp4", b"a")
    panel.toggle_play_pause()

    panel.toggle_device("echo-show-21")

    assert not panel.is_playing
    assert all(not i.playing for i in panel.playback.instances.values())


def test_idle_panel(panel):
    panel.touch(now=100.0)
    assert not panel.is_idle(60, now=150.0)
    assert panel.is_idle(60, now=161.0)
