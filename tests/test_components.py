from dataclasses import replace

import pytest

pytest.importorskip("tkinter")

from PIL import Image

from components import export_png, load_avatar, render_snapshot_image
from layout import compute_layout
from rings import build_ring_connections
from snapshot import build_snapshot, FrameSnapshot


@pytest.fixture
def frame(sample_hierarchy, rng):
    layout = compute_layout(sample_hierarchy, 640, 480, rng=rng)
    connections = build_ring_connections(sample_hierarchy.projects, sample_hierarchy.members)
    return build_snapshot(layout, connections, layout.member_poses)


@pytest.fixture
def avatar_file(tmp_path):
    path = tmp_path / "face.png"
    Image.new("RGB", (80, 60), (200, 30, 30)).save(path)
    return path


def test_load_avatar_is_circular(avatar_file):
    avatar = load_avatar(avatar_file, 40)

    assert avatar.size == (40, 40)
    assert avatar.mode == "RGBA"
    assert avatar.getpixel((0, 0))[3] == 0
    assert avatar.getpixel((20, 20))[3] == 255


def test_load_avatar_relative_to_root(avatar_file):
    assert load_avatar("face.png", 24, root=avatar_file.parent) is not None


def test_missing_or_broken_avatar_is_none(tmp_path):
    broken = tmp_path / "broken.png"
    broken.write_bytes(b"not an image")

    assert load_avatar(tmp_path / "missing.png", 40) is None
    assert load_avatar(broken, 40) is None
    assert load_avatar("", 40) is None


def test_render_frame_headless(frame):
    image = render_snapshot_image(frame)

    assert image.size == (640, 480)
    # Something other than the background got drawn
    assert len(image.getcolors(maxcolors=1 << 20)) > 1


def test_render_scales_to_requested_size(frame):
    assert render_snapshot_image(frame, size=(320, 240)).size == (320, 240)


def test_render_uses_avatars(frame, avatar_file):
    plain = render_snapshot_image(frame, avatar_root=avatar_file.parent)
    member = frame.members[0]
    with_avatar = FrameSnapshot(frame.width, frame.height, members=(
        replace(member, avatar="face.png"),
    ))
    image = render_snapshot_image(with_avatar, avatar_root=avatar_file.parent)

    r, g, b, _ = image.getpixel((int(member.x), int(member.y)))
    assert (r, g, b) == (200, 30, 30)
    assert plain.getpixel((int(member.x), int(member.y)))[:3] != (200, 30, 30)


def test_empty_frame_renders_background():
    image = render_snapshot_image(FrameSnapshot(10, 10))
    assert image.getcolors() == [(100, (248, 250, 252, 255))]


def test_export_png(frame, tmp_path):
    path = export_png(frame, (frame.width, frame.height), tmp_path / "map.png")

    with Image.open(path) as img:
        assert img.format == "PNG"
        assert img.size == (640, 480)
