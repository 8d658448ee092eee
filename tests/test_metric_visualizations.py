import networkx as nx

import metric_visualizations
from rings import build_ring_connections, ring_graph


def _graph(hierarchy, **kwargs):
    connections = build_ring_connections(hierarchy.projects, hierarchy.members, **kwargs)
    return ring_graph(connections, hierarchy.members)


def test_one_highlight_per_ring_largest_first(sample_hierarchy):
    highlights = metric_visualizations.get_ring_highlights(_graph(sample_hierarchy))

    assert [len(h["nodes"]) for h in highlights] == [3, 3, 2]
    colors = [h["color"] for h in highlights]
    assert len(set(colors)) == 3
    for h in highlights:
        assert len(h["edges"]) == len(h["nodes"])
        assert h["width"] == 8


def test_self_loops_are_not_highlighted(sample_hierarchy):
    highlights = metric_visualizations.get_ring_highlights(_graph(sample_hierarchy, allow_self_loop=True))
    assert all(len(h["nodes"]) > 1 for h in highlights)


def test_single_ring_highlight(sample_hierarchy):
    G = _graph(sample_hierarchy)
    (h,) = metric_visualizations.get_single_ring_highlight(G, 2)

    assert sorted(h["nodes"]) == [(2, 4), (2, 5)]
    assert h["width"] == 10
    for u, v in h["edges"]:
        assert G.has_edge(u, v)


def test_single_ring_highlight_for_project_without_ring(sample_hierarchy):
    assert metric_visualizations.get_single_ring_highlight(_graph(sample_hierarchy), 4) == []


def test_empty_graph_has_no_highlights():
    assert metric_visualizations.get_ring_highlights(nx.DiGraph()) == []
