# snapshot.py
# Plain position/size/style records handed to renderers once per frame.
# Nothing here draws; the canvas and the PNG exporter both consume these.

from dataclasses import dataclass, field

import config


@dataclass(frozen=True)
class AreaRecord:
    id: int
    label: str
    x: float
    y: float
    rx: float
    ry: float
    fill: str
    stroke: str
    underline: str


@dataclass(frozen=True)
class ProjectRecord:
    id: int
    label: str
    x: float
    y: float
    radius: float
    color: str
    count_label: str


@dataclass(frozen=True)
class MemberRecord:
    key: tuple
    label: str
    x: float
    y: float
    radius: float
    avatar: str
    avatar_size: int
    stroke: str
    lead: bool


@dataclass(frozen=True)
class ConnectionRecord:
    project_id: int
    x1: float
    y1: float
    x2: float
    y2: float
    stroke: str


@dataclass(frozen=True)
class FrameSnapshot:
    width: float
    height: float
    areas: tuple = field(default_factory=tuple)
    projects: tuple = field(default_factory=tuple)
    members: tuple = field(default_factory=tuple)
    connections: tuple = field(default_factory=tuple)


def _area_records(layout):
    hierarchy = layout.hierarchy
    records = []
    for area in hierarchy.areas:
        anchor = layout.area_anchors.get(area.id)
        if anchor is None:
            continue
        # Areas take the color of their first project
        first = next((p for p in hierarchy.projects if p.area_id == area.id), None)
        records.append(AreaRecord(
            id=area.id,
            label=area.name,
            x=anchor.x,
            y=anchor.y,
            rx=layout.area_rx,
            ry=layout.area_ry,
            fill=config.AREA_FILL,
            stroke=first.color if first else config.AREA_FALLBACK_STROKE,
            underline=first.color if first else config.AREA_LABEL_COLOR,
        ))
    return records


def _project_records(layout):
    records = []
    for project in layout.hierarchy.projects:
        anchor = layout.project_anchors.get(project.id)
        if anchor is None:
            continue
        records.append(ProjectRecord(
            id=project.id,
            label=project.name,
            x=anchor.x,
            y=anchor.y,
            radius=layout.project_extents[project.id],
            color=project.color,
            count_label=config.COUNT_LABEL_FORMAT.format(count=layout.member_counts.get(project.id, 0)),
        ))
    return records


def _member_records(layout, poses):
    projects = layout.hierarchy.project_by_id()
    leads = set()
    records = []
    for member in layout.hierarchy.members:
        pose = poses.get(member.key)
        if pose is None:
            continue
        # The first member of each project is drawn larger
        lead = member.project_id not in leads
        leads.add(member.project_id)
        project = projects.get(member.project_id)
        records.append(MemberRecord(
            key=member.key,
            label=member.name,
            x=pose.x,
            y=pose.y,
            radius=config.LEAD_MEMBER_RADIUS if lead else config.MEMBER_RADIUS,
            avatar=member.avatar,
            avatar_size=config.LEAD_AVATAR_SIZE if lead else config.AVATAR_SIZE,
            stroke=project.color if project else config.LINK_FALLBACK_COLOR,
            lead=lead,
        ))
    return records


def _connection_records(layout, connections, poses):
    projects = layout.hierarchy.project_by_id()
    records = []
    for c in connections:
        # Endpoints are read from the live poses every frame, never cached
        source = poses.get(c.source_key)
        target = poses.get(c.target_key)
        if source is None or target is None:
            continue
        project = projects.get(c.project_id)
        records.append(ConnectionRecord(
            project_id=c.project_id,
            x1=source.x,
            y1=source.y,
            x2=target.x,
            y2=target.y,
            stroke=project.color if project else config.LINK_FALLBACK_COLOR,
        ))
    return records


def build_snapshot(layout, connections, poses):
    """One consistent frame: every record is read from the same pose table."""
    return FrameSnapshot(
        width=layout.viewport.width,
        height=layout.viewport.height,
        areas=tuple(_area_records(layout)),
        projects=tuple(_project_records(layout)),
        members=tuple(_member_records(layout, poses)),
        connections=tuple(_connection_records(layout, connections, poses)),
    )
