from __future__ import annotations

from enum import IntEnum
from typing import Callable, Dict, Optional, Tuple, Union

from yenksp.lib.graph import AttrDict, EdgeID, NodeID, StrictMultiDiGraph

#: Represents numeric cost in the graph (e.g. distance, latency, etc.).
Cost = Union[int, float]

#: Weight of a single edge: (src_node, dst_node, edge_key, edge_attr) -> cost.
WeightFunc = Callable[[NodeID, NodeID, EdgeID, AttrDict], Cost]

#: Parallel-edge resolver:
#:   (graph, src_node, dst_node, {edge_key: edge_attr}, weight_func)
#:     -> (cost, chosen_edge_key or None)
#: Returning None as the key means no usable edge between the two nodes.
#: Only the key is authoritative: searches price the chosen edge with
#: weight_func, so the returned cost is informational.
EdgeFunc = Callable[
    [StrictMultiDiGraph, NodeID, NodeID, Dict[EdgeID, AttrDict], WeightFunc],
    Tuple[Cost, Optional[EdgeID]],
]


class InputError(ValueError):
    """Invalid arguments to a path search (unknown nodes, bad k, negative weights)."""


class EdgeSelect(IntEnum):
    """
    Edge selection criteria determining which of several parallel edges
    between a node and its neighbor a search traverses.
    """

    #: Exactly one edge, the lowest cost; ties go to the edge inserted first.
    SINGLE_MIN_COST = 1
    #: Exactly one edge, the lowest cost; ties go to the edge inserted last.
    SINGLE_MIN_COST_LAST = 2
    #: Use a user-defined function for edge selection logic.
    USER_DEFINED = 99
