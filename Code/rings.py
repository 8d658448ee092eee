# rings.py
# Joins the members of each project into a single ring:
# member i -> member (i + 1) mod n, in input order.

import logging

import networkx as nx

import config
from hierarchy import Connection

logger = logging.getLogger("radialmap.rings")


def build_ring_connections(projects, members, allow_self_loop=config.RING_SELF_LOOPS):
    """
    Returns the ring connections of every project.

    A project with no members has no ring. A project with one member has no
    ring either, unless allow_self_loop is set, in which case it gets the
    degenerate A -> A connection.
    """
    connections = []
    for project in projects:
        ring = [m for m in members if m.project_id == project.id]
        n = len(ring)
        if n == 0:
            continue
        if n == 1:
            if allow_self_loop:
                connections.append(Connection(project.id, ring[0].id, ring[0].id))
            continue
        for i in range(n):
            connections.append(Connection(project.id, ring[i].id, ring[(i + 1) % n].id))

    logger.debug("Built %d ring connections for %d projects", len(connections), len(projects))
    return connections


def ring_graph(connections, members=()):
    """
    Directed graph of the rings. Nodes are (project id, member id) keys; every
    member passed in is added even if it has no connection.
    """
    G = nx.DiGraph()
    for m in members:
        G.add_node(m.key, label=m.name, project=m.project_id)
    for c in connections:
        G.add_edge(c.source_key, c.target_key, project=c.project_id)
    return G


def rings_by_project(connections):
    """Groups connections per project id, preserving order."""
    grouped = {}
    for c in connections:
        grouped.setdefault(c.project_id, []).append(c)
    return grouped
