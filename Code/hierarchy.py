# hierarchy.py
# The validated in-memory relations: areas, projects and the members that
# orbit them. No behavior beyond lookups; everything here is immutable.

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Area:
    id: int
    name: str
    color: str


@dataclass(frozen=True)
class Project:
    id: int
    name: str
    color: str
    area_id: int


@dataclass(frozen=True)
class Member:
    id: int
    name: str
    project_id: int
    avatar: str = ""

    @property
    def key(self):
        """A member id is only unique inside its project."""
        return (self.project_id, self.id)


@dataclass(frozen=True)
class Connection:
    project_id: int
    source: int
    target: int

    @property
    def source_key(self):
        return (self.project_id, self.source)

    @property
    def target_key(self):
        return (self.project_id, self.target)


@dataclass(frozen=True)
class Hierarchy:
    areas: tuple = field(default_factory=tuple)
    projects: tuple = field(default_factory=tuple)
    members: tuple = field(default_factory=tuple)

    def __post_init__(self):
        # Store tuples whatever iterable was passed in
        object.__setattr__(self, "areas", tuple(self.areas))
        object.__setattr__(self, "projects", tuple(self.projects))
        object.__setattr__(self, "members", tuple(self.members))

    # --- Lookups ---

    def area_by_id(self):
        return {a.id: a for a in self.areas}

    def project_by_id(self):
        return {p.id: p for p in self.projects}

    def projects_in_area(self, area_id):
        return [p for p in self.projects if p.area_id == area_id]

    def members_of(self, project_id):
        return [m for m in self.members if m.project_id == project_id]

    def member_counts(self):
        """Number of members per project id (projects without members are absent)."""
        counts = {}
        for m in self.members:
            counts[m.project_id] = counts.get(m.project_id, 0) + 1
        return counts

    # --- Referential integrity ---

    def resolved_projects(self):
        """Projects whose area exists, in input order."""
        areas = self.area_by_id()
        return [p for p in self.projects if p.area_id in areas]

    def resolved_members(self):
        """Members whose project exists and is itself resolved, in input order."""
        projects = {p.id for p in self.resolved_projects()}
        return [m for m in self.members if m.project_id in projects]

    def dangling(self):
        """Returns (projects, members) that would be dropped from the layout."""
        kept_projects = set(p.id for p in self.resolved_projects())
        bad_projects = [p for p in self.projects if p.id not in kept_projects]
        bad_members = [m for m in self.members if m.project_id not in kept_projects]
        return bad_projects, bad_members
