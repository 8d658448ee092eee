import math
import random

import pytest

import config
from hierarchy import Area, Hierarchy, Member, Project
from layout import area_ellipse, compute_layout, project_radius, size_factor, Viewport


def test_size_factor_grows_with_members_and_stays_positive():
    factors = [size_factor(n) for n in range(0, 12)]
    assert factors == sorted(factors)
    assert all(f > 0 for f in factors)
    assert size_factor(2) == pytest.approx(0.7)
    assert size_factor(5) == pytest.approx(1.0)
    assert size_factor(-50) == pytest.approx(config.SIZE_FACTOR_FLOOR)


def test_project_radius_scales_with_width():
    assert project_radius(3, 1000) == pytest.approx(48.0)
    assert project_radius(3, 2000) == pytest.approx(96.0)


def test_area_ellipse_is_shifted_left_of_center():
    cx, cy, rx, ry = area_ellipse(Viewport(1000, 800))
    assert (cx, cy, rx, ry) == (400, 400, 250, 200)


def test_areas_sit_at_evenly_spaced_angles(sample_hierarchy, rng):
    layout = compute_layout(sample_hierarchy, 1000, 800, rng=rng)
    cx, cy, rx, ry = area_ellipse(layout.viewport)

    angles = []
    for area in sample_hierarchy.areas:
        a = layout.area_anchors[area.id]
        angles.append(math.atan2((a.y - cy) / ry, (a.x - cx) / rx) % (2 * math.pi))

    expected = [2 * math.pi * i / 3 for i in range(3)]
    assert angles == pytest.approx(expected)


def test_single_project_of_three_members(abc_hierarchy, rng):
    layout = compute_layout(abc_hierarchy, 1000, 800, rng=rng)

    assert layout.area_anchors[1].x == pytest.approx(650)
    assert layout.area_anchors[1].y == pytest.approx(400)
    # Project sits half an area radius away, at angle 0
    assert layout.project_anchors[1].x == pytest.approx(775)
    assert layout.project_anchors[1].y == pytest.approx(400)
    assert layout.project_extents[1] == pytest.approx(0.048 * 1000)
    assert len(layout.member_poses) == 3


def test_member_jitter_is_bounded(sample_hierarchy, rng):
    layout = compute_layout(sample_hierarchy, 1200, 900, rng=rng)
    counts = sample_hierarchy.member_counts()

    for pid in layout.project_anchors:
        center = layout.project_anchors[pid]
        radius = layout.project_extents[pid]
        members = sample_hierarchy.members_of(pid)
        for i, m in enumerate(members):
            pose = layout.member_poses[m.key]
            dist = math.hypot(pose.x - center.x, pose.y - center.y)
            assert radius - 1e-9 <= dist < radius * (1 + config.MEMBER_RADIAL_JITTER)

            base_angle = 2 * math.pi * i / counts[pid]
            angle = math.atan2(pose.y - center.y, pose.x - center.x)
            delta = (angle - base_angle) % (2 * math.pi)
            assert delta < config.MEMBER_ANGLE_JITTER + 1e-9

            # Initial pose doubles as the base pose
            assert (pose.x, pose.y) == (pose.base_x, pose.base_y)


def test_skeleton_is_deterministic_but_jitter_is_not(sample_hierarchy):
    a = compute_layout(sample_hierarchy, 1000, 800, rng=random.Random(1))
    b = compute_layout(sample_hierarchy, 1000, 800, rng=random.Random(2))

    assert a.area_anchors == b.area_anchors
    assert a.project_anchors == b.project_anchors
    assert a.project_extents == b.project_extents
    assert a.member_poses != b.member_poses


def test_same_seed_gives_same_arrangement(sample_hierarchy):
    a = compute_layout(sample_hierarchy, 1000, 800, rng=random.Random(7))
    b = compute_layout(sample_hierarchy, 1000, 800, rng=random.Random(7))
    assert a.member_poses == b.member_poses


def test_dangling_area_drops_project_and_members():
    h = Hierarchy(
        [Area(1, "Only", "#ff6b6b")],
        [Project(1, "Kept", "#ff6b6b", 1), Project(2, "Orphan", "#4ecdc4", 99)],
        [Member(1, "A", 1), Member(2, "B", 2), Member(3, "C", 2), Member(4, "Ghost", 42)],
    )
    layout = compute_layout(h, 800, 600, rng=random.Random(5))

    assert set(layout.project_anchors) == {1}
    assert set(layout.member_poses) == {(1, 1)}
    assert h.dangling()[0] == [h.projects[1]]

    # The kept project lays out exactly as if the orphan never existed
    clean = Hierarchy(h.areas, h.projects[:1], h.members[:1])
    expected = compute_layout(clean, 800, 600, rng=random.Random(5))
    assert layout.area_anchors == expected.area_anchors
    assert layout.project_anchors[1] == expected.project_anchors[1]
    assert layout.project_extents[1] == expected.project_extents[1]
    assert layout.member_poses[(1, 1)] == expected.member_poses[(1, 1)]


def test_member_count_drives_radius(sample_hierarchy, rng):
    layout = compute_layout(sample_hierarchy, 1000, 800, rng=rng)
    # Project 1 has 3 members, project 2 has 2
    assert layout.project_extents[1] > layout.project_extents[2]
    assert layout.member_counts == {1: 3, 2: 2, 3: 3, 4: 1}


def test_degenerate_viewport_is_clamped(abc_hierarchy, rng):
    layout = compute_layout(abc_hierarchy, 0, -5, rng=rng)
    assert layout.viewport == Viewport(config.MIN_VIEWPORT_SIZE, config.MIN_VIEWPORT_SIZE)
    assert all(r >= 0 for r in layout.project_extents.values())


def test_empty_hierarchy_lays_out_nothing(rng):
    layout = compute_layout(Hierarchy(), 1000, 800, rng=rng)
    assert layout.area_anchors == {}
    assert layout.member_poses == {}


def test_max_wander_is_a_share_of_the_project_radius(abc_hierarchy, rng):
    layout = compute_layout(abc_hierarchy, 1000, 800, rng=rng)
    assert layout.max_wander(1) == pytest.approx(48.0 * config.MAX_WANDER_RATIO)
    assert layout.max_wander(404) == 0.0
