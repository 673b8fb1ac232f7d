"""yenksp: ranked loopless shortest paths for weighted directed graphs.

yenksp finds the K cheapest loopless paths between two nodes with Yen's
algorithm, using Dijkstra for every sub-search.

Primary API:
    k_shortest_paths() - Up to K paths as a list, cheapest first
    ksp() - The same search as a lazy generator
    shortest_path() - A single Dijkstra shortest path
    StrictMultiDiGraph - The weighted directed graph searched over
    Path, Edge - Search results

Example:
    from yenksp import StrictMultiDiGraph, k_shortest_paths

    g = StrictMultiDiGraph()
    g.set_edge("A", "B", 1)
    g.set_edge("B", "D", 1)
    g.set_edge("A", "C", 2)
    g.set_edge("C", "D", 1)

    for path in k_shortest_paths(g, "A", "D", k=2):
        print(path.nodes_seq, path.cost)
"""

from __future__ import annotations

from yenksp import logging
from yenksp.config import KSP_CONFIG, KspConfig
from yenksp.lib.algorithms.base import EdgeSelect, InputError
from yenksp.lib.algorithms.candidates import CandidatePool
from yenksp.lib.algorithms.edge_select import attr_weight_fabric, edge_select_fabric
from yenksp.lib.algorithms.ksp import k_shortest_paths, ksp
from yenksp.lib.algorithms.spf import shortest_path, spf
from yenksp.lib.graph import EdgeRecord, GraphChangeset, StrictMultiDiGraph
from yenksp.lib.path import Edge, Path

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Graph
    "StrictMultiDiGraph",
    "GraphChangeset",
    "EdgeRecord",
    # Paths
    "Path",
    "Edge",
    # Search
    "k_shortest_paths",
    "ksp",
    "shortest_path",
    "spf",
    "CandidatePool",
    # Strategies
    "EdgeSelect",
    "attr_weight_fabric",
    "edge_select_fabric",
    # Errors and configuration
    "InputError",
    "KspConfig",
    "KSP_CONFIG",
    "logging",
]
