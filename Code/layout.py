# layout.py
# The radial placement algorithm. Turns a hierarchy plus a viewport size into
# anchors for every area and project, a radius per project and an initial
# pose for every member. Stateless: every call recomputes everything.

import logging
import math
import random
from dataclasses import dataclass, field

import config
from utils import polar

logger = logging.getLogger("radialmap.layout")


@dataclass(frozen=True)
class Viewport:
    width: float
    height: float

    @classmethod
    def clamped(cls, width, height):
        return cls(max(config.MIN_VIEWPORT_SIZE, float(width)),
                   max(config.MIN_VIEWPORT_SIZE, float(height)))


@dataclass(frozen=True)
class Anchor:
    x: float
    y: float


@dataclass
class MemberPose:
    """Live (x, y) plus the base point recorded at layout time."""
    x: float
    y: float
    base_x: float
    base_y: float

    def offset(self):
        return math.hypot(self.x - self.base_x, self.y - self.base_y)


@dataclass
class Layout:
    viewport: Viewport
    area_rx: float
    area_ry: float
    area_anchors: dict = field(default_factory=dict)      # area id -> Anchor
    project_anchors: dict = field(default_factory=dict)   # project id -> Anchor
    project_extents: dict = field(default_factory=dict)   # project id -> radius
    member_counts: dict = field(default_factory=dict)     # project id -> count
    member_poses: dict = field(default_factory=dict)      # (project id, member id) -> MemberPose
    hierarchy: object = None

    def max_wander(self, project_id, ratio=config.MAX_WANDER_RATIO):
        return self.project_extents.get(project_id, 0.0) * ratio


# --- Sizing ---

def size_factor(member_count):
    """
    0.7 for two members, +0.1 per extra member. Degenerate counts (0 or 1)
    are floored so the project never gets a negative or zero radius.
    """
    factor = config.SIZE_FACTOR_BASE + (member_count - config.SIZE_FACTOR_REFERENCE_COUNT) * config.SIZE_FACTOR_STEP
    return max(config.SIZE_FACTOR_FLOOR, factor)


def project_radius(member_count, width):
    return config.PROJECT_BASE_RADIUS_RATIO * width * size_factor(member_count)


# --- Placement steps ---

def area_ellipse(viewport):
    """Center and radii of the ellipse the areas are placed on."""
    cx = viewport.width / 2 + config.AREA_CENTER_OFFSET_X
    cy = viewport.height / 2
    rx = viewport.width * config.AREA_RADIUS_RATIO_X
    ry = viewport.height * config.AREA_RADIUS_RATIO_Y
    return cx, cy, rx, ry


def area_anchors(areas, viewport):
    cx, cy, rx, ry = area_ellipse(viewport)
    anchors = {}
    n = len(areas)
    for i, area in enumerate(areas):
        theta = 2 * math.pi * i / n
        anchors[area.id] = Anchor(cx + math.cos(theta) * rx, cy + math.sin(theta) * ry)
    return anchors


def project_anchors(projects, anchors_by_area, distance):
    """
    Projects of one area are spread evenly around the area anchor, in input
    order. Projects whose area has no anchor are skipped.
    """
    by_area = {}
    for p in projects:
        if p.area_id not in anchors_by_area:
            logger.debug("Dropping project %s: unknown area %s", p.id, p.area_id)
            continue
        by_area.setdefault(p.area_id, []).append(p)

    anchors = {}
    for area_id, group in by_area.items():
        center = anchors_by_area[area_id]
        k = len(group)
        for j, p in enumerate(group):
            phi = 2 * math.pi * j / k
            x, y = polar(center.x, center.y, phi, distance)
            anchors[p.id] = Anchor(x, y)
    return anchors


def member_poses(members, anchors_by_project, extents, rng):
    """Initial member poses: evenly spaced around the project plus bounded jitter."""
    by_project = {}
    for m in members:
        if m.project_id not in anchors_by_project:
            logger.debug("Dropping member %s: unknown project %s", m.id, m.project_id)
            continue
        by_project.setdefault(m.project_id, []).append(m)

    poses = {}
    for project_id, group in by_project.items():
        center = anchors_by_project[project_id]
        radius = extents[project_id]
        n = len(group)
        for i, m in enumerate(group):
            psi = 2 * math.pi * i / n + rng.random() * config.MEMBER_ANGLE_JITTER
            dist = radius * (1.0 + rng.random() * config.MEMBER_RADIAL_JITTER)
            x, y = polar(center.x, center.y, psi, dist)
            poses[m.key] = MemberPose(x, y, x, y)
    return poses


def compute_layout(hierarchy, width, height, rng=None):
    """
    Full layout pass.

    Area/project anchors and extents depend only on the hierarchy and the
    viewport; member jitter draws from `rng` (a fresh `random.Random` when
    omitted), so two passes give the same skeleton but a new arrangement.
    """
    rng = rng or random.Random()
    viewport = Viewport.clamped(width, height)
    _, _, rx, ry = area_ellipse(viewport)

    areas = area_anchors(hierarchy.areas, viewport)
    projects = project_anchors(hierarchy.projects, areas, rx * config.PROJECT_DISTANCE_RATIO)

    counts = hierarchy.member_counts()
    extents = {pid: project_radius(counts.get(pid, 0), viewport.width) for pid in projects}
    poses = member_poses(hierarchy.members, projects, extents, rng)

    logger.debug(
        "Layout %dx%d: %d areas, %d projects, %d members",
        viewport.width, viewport.height, len(areas), len(projects), len(poses),
    )
    return Layout(
        viewport=viewport,
        area_rx=rx,
        area_ry=ry,
        area_anchors=areas,
        project_anchors=projects,
        project_extents=extents,
        member_counts={pid: counts.get(pid, 0) for pid in projects},
        member_poses=poses,
        hierarchy=hierarchy,
    )
