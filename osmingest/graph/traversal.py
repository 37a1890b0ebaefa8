from __future__ import annotations

from logging import getLogger
from typing import Any

import networkx as nx

from osmingest.graph.graph import Graph

logger = getLogger("osmingest.graph")


def to_networkx(graph: Graph[Any, Any]) -> nx.DiGraph:
    """Copy a graph into a `nx.DiGraph`.

    Declared entries carry their value in the `value` node attribute. Dangling
    neighbor keys become bare nodes.
    """
    G: nx.DiGraph = nx.DiGraph()
    for key, value in graph.items():
        G.add_node(key, value=value)
    for key in graph:
        for neighbor in graph.neighbors(key):
            G.add_edge(key, neighbor)

    logger.debug("Built DiGraph with %d nodes and %d edges", G.number_of_nodes(), G.number_of_edges())
    return G


def dangling(graph: Graph[Any, Any]) -> set[Any]:
    return {neighbor for key in graph for neighbor in graph.neighbors(key) if neighbor not in graph}


def reachable(graph: Graph[Any, Any], start: Any) -> set[Any]:
    """Keys reachable from `start` along outgoing edges, dangling keys included.

    `start` itself is part of the result only when it lies on a cycle.
    """
    if start not in graph:
        return set()

    G = to_networkx(graph)
    found = nx.descendants(G, start)
    if any(G.has_edge(node, start) for node in found | {start}):
        found.add(start)
    return found


def connected_components(graph: Graph[Any, Any]) -> list[set[Any]]:
    """Weakly connected components over the declared entries.

    Dangling keys do not join components. Components are ordered by the first
    declared key they contain.
    """
    order = {key: index for index, key in enumerate(graph)}
    G = to_networkx(graph).subgraph(order)
    components = list(nx.weakly_connected_components(G))
    components.sort(key=lambda component: min(order[key] for key in component))
    return components


def find_cycle(graph: Graph[Any, Any], start: Any = None) -> list[tuple[Any, Any]] | None:
    """Return the edges of a directed cycle, or None when there is none.

    With `start`, only the part of the graph reachable from it is searched.
    """
    if start is not None and start not in graph:
        return None

    G = to_networkx(graph)
    try:
        return [(u, v) for u, v in nx.find_cycle(G, source=start)]
    except nx.NetworkXNoCycle:
        return None


def has_cycle(graph: Graph[Any, Any]) -> bool:
    return not nx.is_directed_acyclic_graph(to_networkx(graph))
