# utils.py
# Handles the "Heavy Lifting" math shared by the layout and the animation:
# polar offsets, distances, easing. The network metrics shown in the status
# bar live here too. If you want to add a new metric, you add it here.

import logging
import math

import networkx as nx

logger = logging.getLogger("radialmap.utils")


def polar(cx, cy, angle, distance):
    """Point at `distance` from (cx, cy) along `angle` (radians)."""
    return cx + math.cos(angle) * distance, cy + math.sin(angle) * distance


def distance(x1, y1, x2, y2):
    return math.hypot(x2 - x1, y2 - y1)


def ease_quad_in_out(t):
    """Quadratic ease-in/out on [0, 1]; values outside are clamped."""
    t = min(1.0, max(0.0, t))
    if t < 0.5:
        return 2 * t * t
    return 1 - ((-2 * t + 2) ** 2) / 2


def lerp(a, b, t):
    return a + (b - a) * t


def calculate_metric(G, metric_name):
    """
    Calculates a specific network metric for the ring graph G.
    Returns a string representation of the result or 'Err'.
    """
    try:
        n = G.number_of_nodes()

        if metric_name == "Members":
            return n

        if metric_name == "Connections":
            return G.number_of_edges()

        if n == 0:
            return "0"

        if metric_name == "Rings":
            # A self-loop is not a ring
            return sum(1 for c in nx.simple_cycles(G) if len(c) > 1)

        if metric_name == "Density":
            return f"{nx.density(G):.3f}"

        if metric_name == "Avg Degree":
            avg_deg = sum([d for _, d in G.degree()]) / n
            return f"{avg_deg:.2f}"

    except nx.NetworkXException as e:
        logger.warning("Error calculating %s: %s", metric_name, e)
        return "Err"

    return ""
