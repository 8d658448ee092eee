# hierarchy_io.py
# Builds a Hierarchy from files: the JSON document the app saves and opens,
# or the three CSV tables (areas, projects, members) the data is kept in.

import csv
import json
import logging
from pathlib import Path

import config
from hierarchy import Area, Hierarchy, Member, Project

logger = logging.getLogger("radialmap.hierarchy_io")


class HierarchyError(ValueError):
    """The file could not be turned into a hierarchy."""


def adjust_color(color, factor):
    """Shifts every RGB channel of '#rrggbb' by `factor`, clamped to 0..255."""
    try:
        r, g, b = (int(color[i:i + 2], 16) for i in (1, 3, 5))
    except ValueError:
        raise HierarchyError(f"Invalid color: {color!r}")

    def shift(c):
        return min(255, max(0, round(c + factor)))

    return f"#{shift(r):02x}{shift(g):02x}{shift(b):02x}"


def strip_note(name):
    """'Flyer PJ (Wada)' -> 'Flyer PJ'"""
    return name.split("(")[0].strip()


def _unique_members(members):
    """
    Keeps the first Member per (project id, member id) key. A person listed
    twice in one project would otherwise join its ring twice.
    """
    seen = set()
    unique = []
    for m in members:
        if m.key in seen:
            logger.warning("Skipping duplicate member %r in project %s", m.name, m.project_id)
            continue
        seen.add(m.key)
        unique.append(m)
    return unique


# --- JSON ---

def hierarchy_from_dict(data):
    try:
        areas = [Area(int(a["id"]), str(a["name"]), str(a.get("color", config.AREA_COLORS[0])))
                 for a in data.get("areas", [])]
        projects = [Project(int(p["id"]), str(p["name"]), str(p["color"]), int(p["area_id"]))
                    for p in data.get("projects", [])]
        members = [Member(int(m["id"]), str(m["name"]), int(m["project_id"]),
                          str(m.get("avatar", config.DEFAULT_AVATAR)))
                   for m in data.get("members", [])]
    except (KeyError, TypeError, ValueError) as e:
        raise HierarchyError(f"Invalid hierarchy document: {e}") from e
    return Hierarchy(areas, projects, _unique_members(members))


def hierarchy_to_dict(hierarchy):
    return {
        "areas": [{"id": a.id, "name": a.name, "color": a.color} for a in hierarchy.areas],
        "projects": [{"id": p.id, "name": p.name, "color": p.color, "area_id": p.area_id}
                     for p in hierarchy.projects],
        "members": [{"id": m.id, "name": m.name, "project_id": m.project_id, "avatar": m.avatar}
                    for m in hierarchy.members],
    }


def load_hierarchy_json(path):
    try:
        # 'utf-8-sig' handles files saved with a BOM
        with open(path, "r", encoding="utf-8-sig") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise HierarchyError(f"Could not read {path}: {e}") from e
    if not isinstance(data, dict):
        raise HierarchyError(f"Invalid file format in {path}: expected an object")
    return hierarchy_from_dict(data)


def dump_hierarchy_json(hierarchy, path):
    with open(path, "w", encoding="utf-8") as f:
        json.dump(hierarchy_to_dict(hierarchy), f, indent=4, ensure_ascii=False)


# --- CSV ---

def _read_rows(path, required):
    try:
        with open(path, "r", encoding="utf-8-sig", newline="") as f:
            reader = csv.DictReader(f)
            rows = list(reader)
            columns = reader.fieldnames or []
    except OSError as e:
        raise HierarchyError(f"Could not read {path}: {e}") from e

    missing = [c for c in required if c not in columns]
    if missing:
        raise HierarchyError(f"{Path(path).name} is missing column(s): {', '.join(missing)}")
    logger.info("Read %d rows from %s", len(rows), Path(path).name)
    return rows


def load_hierarchy_csv(areas_csv, projects_csv, members_csv,
                       area_name="name", project_name="name", project_area="area",
                       member_name="name", member_projects="projects", member_avatar="avatar"):
    """
    Reads the three tables. Column names can be overridden for sheets
    exported with other headers.

    Ids are 1-based row numbers. The first project of an area takes the area
    color, later ones a progressively lighter shade. A member listed in
    several projects becomes one Member per project, all sharing its row id.
    """
    # Areas
    areas = []
    for row in _read_rows(areas_csv, [area_name]):
        name = (row.get(area_name) or "").strip()
        if not name:
            continue
        color = config.AREA_COLORS[len(areas) % len(config.AREA_COLORS)]
        areas.append(Area(len(areas) + 1, name, color))
    area_by_name = {a.name: a for a in areas}

    # Projects
    projects = []
    per_area = {}
    index = 0
    for row in _read_rows(projects_csv, [project_name, project_area]):
        name = strip_note(row.get(project_name) or "")
        if not name:
            continue
        index += 1
        area = area_by_name.get(strip_note(row.get(project_area) or ""))
        if area is None:
            logger.warning("Skipping project %r: area %r not found", name, row.get(project_area))
            continue
        k = per_area.get(area.id, 0)
        color = area.color if k == 0 else adjust_color(area.color, config.PROJECT_COLOR_STEP * k)
        per_area[area.id] = k + 1
        projects.append(Project(index, name, color, area.id))
    project_by_name = {p.name: p for p in projects}

    # Members
    members = []
    index = 0
    for row in _read_rows(members_csv, [member_name, member_projects]):
        listed = (row.get(member_projects) or "").strip()
        if not listed:
            continue
        index += 1
        name = (row.get(member_name) or "").strip()
        avatar = (row.get(member_avatar) or "").strip() or config.DEFAULT_AVATAR
        for raw in listed.split(","):
            project = project_by_name.get(strip_note(raw))
            if project is None:
                logger.warning("Project not found: %r", raw.strip())
                continue
            members.append(Member(index, name, project.id, avatar))

    return Hierarchy(areas, projects, _unique_members(members))


def load_hierarchy(path):
    """Opens a JSON hierarchy, or a directory holding areas.csv, projects.csv and members.csv."""
    path = Path(path)
    if path.is_dir():
        return load_hierarchy_csv(path / "areas.csv", path / "projects.csv", path / "members.csv")
    return load_hierarchy_json(path)
