# metric_visualizations.py
# Highlight overlays for the canvas. Each highlight is a dict with the
# member keys, the ring edges and a glow color, drawn behind the rings.

import logging

import networkx as nx

logger = logging.getLogger("radialmap.metric_visualizations")

# High-contrast "neon" palette for the glow effect
NEON_COLORS = [
    "#FF1493",  # DeepPink
    "#00C000",  # Darker Lime (readable on white)
    "#00BFFF",  # DeepSkyBlue
    "#FFD700",  # Gold
    "#FF4500",  # OrangeRed
    "#9400D3",  # DarkViolet
    "#32CD32",  # LimeGreen
    "#1E90FF",  # DodgerBlue
]


def _ring_cycles(G):
    """Simple cycles of the ring graph, largest ring first."""
    cycles = [c for c in nx.simple_cycles(G) if len(c) > 1]
    cycles.sort(key=lambda c: (-len(c), c[0]))
    return cycles


def get_ring_highlights(G):
    """
    Identifies every project ring and assigns a distinct neon color to each.
    Returns a list of dictionaries containing node/edge sets and colors.
    """
    highlights = []
    for i, path in enumerate(_ring_cycles(G)):
        edges = [(path[j], path[(j + 1) % len(path)]) for j in range(len(path))]
        highlights.append({
            "nodes": path,
            "edges": edges,
            "color": NEON_COLORS[i % len(NEON_COLORS)],
            "width": 8,
        })
    logger.debug("Highlighting %d rings", len(highlights))
    return highlights


def get_single_ring_highlight(G, project_id):
    """Highlights ONLY the ring of the given project (nodes are (project id, member id) keys)."""
    cycles = _ring_cycles(G)
    for i, path in enumerate(cycles):
        if path[0][0] != project_id:
            continue
        edges = [(path[j], path[(j + 1) % len(path)]) for j in range(len(path))]
        return [{
            "nodes": path,
            "edges": edges,
            "color": NEON_COLORS[i % len(NEON_COLORS)],
            "width": 10,
        }]
    return []
