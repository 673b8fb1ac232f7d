from typing import Dict, Optional, Tuple

from yenksp.config import KSP_CONFIG
from yenksp.lib.graph import AttrDict, EdgeID, NodeID, StrictMultiDiGraph
from yenksp.lib.algorithms.base import Cost, EdgeFunc, EdgeSelect, WeightFunc


def attr_weight_fabric(cost_attr: Optional[str] = None) -> WeightFunc:
    """
    Creates a weight function reading the edge attribute `cost_attr`.

    This is the default weight lookup for every search: the weight stored in
    the graph. `cost_attr` falls back to `KSP_CONFIG.cost_attr`.
    """
    attr_name = cost_attr or KSP_CONFIG.cost_attr

    def get_attr_weight(
        src_node: NodeID, dst_node: NodeID, edge_id: EdgeID, attr: AttrDict
    ) -> Cost:
        return attr[attr_name]

    return get_attr_weight


def edge_select_fabric(
    edge_select: EdgeSelect = EdgeSelect.SINGLE_MIN_COST,
    edge_select_func: Optional[EdgeFunc] = None,
) -> EdgeFunc:
    """
    Creates a function that picks one edge among the parallel edges between
    two nodes according to a given EdgeSelect strategy (or a user-defined function).

    Args:
        edge_select: An EdgeSelect enum specifying the selection strategy.
        edge_select_func: A user-supplied function if edge_select=USER_DEFINED.

    Returns:
        A function with signature:
            (graph, src_node, dst_node, edges_map, weight_func) ->
            (selected_cost, edge_id or None)
        where `edge_id` is the chosen edge (None if no edge is usable).
        Searches charge `weight_func` of the chosen edge for the hop;
        `selected_cost` is what the strategy compared on and is not used
        as the hop cost.

    Raises:
        ValueError: On USER_DEFINED without a function, or an unknown strategy.
    """

    def get_single_min_cost_edge(
        graph: StrictMultiDiGraph,
        src_node: NodeID,
        dst_node: NodeID,
        edges_map: Dict[EdgeID, AttrDict],
        weight_func: WeightFunc,
    ) -> Tuple[Cost, Optional[EdgeID]]:
        """Return the lowest-cost edge; the first one seen wins a tie."""
        chosen_edge: Optional[EdgeID] = None
        min_cost = float("inf")

        for edge_id, attr in edges_map.items():
            cost_val = weight_func(src_node, dst_node, edge_id, attr)
            if cost_val < min_cost:
                min_cost = cost_val
                chosen_edge = edge_id

        return min_cost, chosen_edge

    def get_single_min_cost_edge_last(
        graph: StrictMultiDiGraph,
        src_node: NodeID,
        dst_node: NodeID,
        edges_map: Dict[EdgeID, AttrDict],
        weight_func: WeightFunc,
    ) -> Tuple[Cost, Optional[EdgeID]]:
        """Return the lowest-cost edge; the last one seen wins a tie."""
        chosen_edge: Optional[EdgeID] = None
        min_cost = float("inf")

        for edge_id, attr in edges_map.items():
            cost_val = weight_func(src_node, dst_node, edge_id, attr)
            if cost_val <= min_cost:
                min_cost = cost_val
                chosen_edge = edge_id

        return min_cost, chosen_edge

    if edge_select == EdgeSelect.SINGLE_MIN_COST:
        return get_single_min_cost_edge
    elif edge_select == EdgeSelect.SINGLE_MIN_COST_LAST:
        return get_single_min_cost_edge_last
    elif edge_select == EdgeSelect.USER_DEFINED:
        if edge_select_func is None:
            raise ValueError(
                "edge_select=USER_DEFINED requires 'edge_select_func' to be provided."
            )
        return edge_select_func
    else:
        raise ValueError(f"Unknown edge_select value {edge_select}")
