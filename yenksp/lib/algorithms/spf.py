from heapq import heappop, heappush
from math import isinf
from typing import Dict, List, Optional, Tuple

from yenksp.lib.graph import EdgeID, NodeID, StrictMultiDiGraph
from yenksp.lib.algorithms.base import Cost, EdgeFunc, InputError, WeightFunc
from yenksp.lib.algorithms.edge_select import attr_weight_fabric, edge_select_fabric
from yenksp.lib.path import Edge, Path

#: For each reached node except the source: (predecessor node, edge key used).
PredMap = Dict[NodeID, Tuple[NodeID, EdgeID]]


def spf(
    graph: StrictMultiDiGraph,
    src_node: NodeID,
    weight_func: Optional[WeightFunc] = None,
    edge_func: Optional[EdgeFunc] = None,
) -> Tuple[Dict[NodeID, Cost], PredMap]:
    """
    Compute shortest paths (cost-based) from a source node using Dijkstra.

    One edge is chosen per adjacent node pair by `edge_func`, so each node
    keeps a single predecessor. The cost of that hop is `weight_func` applied
    to the chosen edge; any cost `edge_func` reports is not used. Heap entries carry a push counter: nodes at
    equal cost are settled in the order they were first reached, and an
    equal-cost alternative never replaces an existing predecessor. The result
    is therefore fully determined by the graph's insertion order.

    Args:
        graph: The directed graph (StrictMultiDiGraph).
        src_node: The source node from which to compute shortest paths.
        weight_func: Edge weight override. Defaults to the stored cost attribute.
        edge_func: Parallel-edge resolver. Defaults to EdgeSelect.SINGLE_MIN_COST.

    Returns:
        A tuple of (costs, pred):
          - costs: Maps each reachable node to its minimal cost from src_node.
          - pred: Maps each reachable node other than src_node to
            (predecessor, edge_key).

    Raises:
        InputError: If src_node is not in the graph, or a selected edge has
            a negative weight.
    """
    if weight_func is None:
        weight_func = attr_weight_fabric()
    if edge_func is None:
        edge_func = edge_select_fabric()

    outgoing_adjacencies = graph._adj
    if src_node not in outgoing_adjacencies:
        raise InputError(f"Source node '{src_node}' is not in the graph.")

    costs: Dict[NodeID, Cost] = {src_node: 0.0}
    pred: PredMap = {}
    min_pq: List[Tuple[Cost, int, NodeID]] = [(0.0, 0, src_node)]
    push_count = 1

    while min_pq:
        current_cost, _, node_id = heappop(min_pq)
        if current_cost > costs[node_id]:
            continue

        for neighbor_id, edges_map in outgoing_adjacencies[node_id].items():
            if not edges_map:
                continue

            # edge_func only chooses the key; the hop cost always comes from
            # weight_func so it matches the weights shortest_path reconstructs.
            _, edge_id = edge_func(graph, node_id, neighbor_id, edges_map, weight_func)
            if edge_id is None:
                continue
            edge_cost = weight_func(node_id, neighbor_id, edge_id, edges_map[edge_id])
            if isinf(edge_cost):
                continue
            if edge_cost < 0:
                raise InputError(
                    f"Negative weight {edge_cost} on edge {node_id!r}->{neighbor_id!r}."
                )

            new_cost = current_cost + edge_cost
            if (neighbor_id not in costs) or (new_cost < costs[neighbor_id]):
                costs[neighbor_id] = new_cost
                pred[neighbor_id] = (node_id, edge_id)
                heappush(min_pq, (new_cost, push_count, neighbor_id))
                push_count += 1

    return costs, pred


def shortest_path(
    graph: StrictMultiDiGraph,
    src_node: NodeID,
    dst_node: NodeID,
    weight_func: Optional[WeightFunc] = None,
    edge_func: Optional[EdgeFunc] = None,
) -> Optional[Path]:
    """
    Return the shortest path from src_node to dst_node, or None if unreachable.

    Runs `spf` from src_node, then walks predecessor links back from dst_node.
    Each hop's weight is re-derived with the same `weight_func` used by the
    search, so the path cost matches the distance Dijkstra reported.

    Raises:
        InputError: If src_node or dst_node is not in the graph.
    """
    if dst_node not in graph:
        raise InputError(f"Target node '{dst_node}' is not in the graph.")
    if weight_func is None:
        weight_func = attr_weight_fabric()

    costs, pred = spf(graph, src_node, weight_func, edge_func)
    if dst_node not in costs:
        return None

    edges: List[Edge] = []
    current = dst_node
    while current != src_node:
        assert current in pred, f"Broken predecessor chain at {current!r}"
        prev, edge_id = pred[current]
        attr = graph._adj[prev][current][edge_id]
        weight = weight_func(prev, current, edge_id, attr)
        edges.append(Edge(prev, current, weight, edge_id))
        current = prev
    edges.reverse()

    return Path(tuple(edges), origin=src_node)
