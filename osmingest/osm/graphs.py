from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable

import networkx as nx

from osmingest.graph.graph import Graph
from osmingest.graph.traversal import to_networkx
from osmingest.osm.types import OsmRelation
from osmingest.osm.types import OsmWay


def relation_graph(relations: Iterable[OsmRelation]) -> Graph[int, OsmRelation]:
    """Relations keyed by id, pointing to their sub-relations."""
    return Graph.from_edges((relation.id, relation, relation.subrelations) for relation in relations)


def way_graph(ways: Iterable[OsmWay]) -> Graph[int, OsmWay]:
    """Ways keyed by id, pointing to the ids of the points they reference."""
    return Graph.from_edges((way.id, way, way.nodes) for way in ways)


def shared_nodes(ways: Iterable[OsmWay]) -> dict[int, list[int]]:
    """Map point ids referenced by more than one way to those ways' ids."""
    graph = way_graph(ways)
    users: dict[int, list[int]] = defaultdict(list)
    for way_id in graph:
        for node_id in graph.neighbors(way_id):
            users[node_id].append(way_id)
    return {node_id: way_ids for node_id, way_ids in users.items() if len(way_ids) > 1}


def self_referencing(relations: Iterable[OsmRelation]) -> list[int]:
    """Ids of relations that reach themselves through their sub-relations."""
    graph = relation_graph(relations)
    G = to_networkx(graph)
    cyclic: set[int] = set()
    for component in nx.strongly_connected_components(G):
        if len(component) > 1 or any(G.has_edge(node, node) for node in component):
            cyclic.update(component)
    return [relation_id for relation_id in graph if relation_id in cyclic]
