from numbers import Integral
from typing import Iterator, List, Optional, Set

from yenksp.config import KSP_CONFIG
from yenksp.lib.graph import NodeID, StrictMultiDiGraph
from yenksp.lib.algorithms.base import Cost, EdgeFunc, InputError, WeightFunc
from yenksp.lib.algorithms.candidates import CandidatePool
from yenksp.lib.algorithms.spf import shortest_path
from yenksp.lib.path import Path, Route
from yenksp.logging import get_logger

logger = get_logger(__name__)


def _check_k(name: str, value: object) -> None:
    if isinstance(value, bool) or not isinstance(value, Integral) or value <= 0:
        raise InputError(f"{name} must be a positive integer, got {value!r}.")


def ksp(
    graph: StrictMultiDiGraph,
    src_node: NodeID,
    dst_node: NodeID,
    max_k: Optional[int] = None,
    weight_func: Optional[WeightFunc] = None,
    edge_func: Optional[EdgeFunc] = None,
    max_path_cost: Cost = float("inf"),
    max_path_cost_factor: Optional[float] = None,
) -> Iterator[Path]:
    """
    Generator of up to max_k loopless shortest paths from src_node to dst_node (Yen).

    The first path is the plain shortest path. Each later path is found by
    deviating from the most recently accepted one: for every spur index i, the
    first i edges form the root path, and a shortest path is searched from the
    spur node to dst_node on a reduced graph where
      - the next edge of every accepted path sharing that root is removed, and
      - every root node except the spur node is removed.
    Root + spur paths become candidates; the cheapest candidate not already
    accepted is yielded next.

    The input graph is cloned once and never modified. Reductions of the clone
    are undone after each spur search.

    Args:
        graph: The directed graph (StrictMultiDiGraph).
        src_node: The source node.
        dst_node: The destination node.
        max_k: If set, yields at most max_k paths. Defaults to
            KSP_CONFIG.max_k_default (unbounded).
        weight_func: Edge weight override. Defaults to the stored cost attribute.
        edge_func: Parallel-edge resolver. Defaults to EdgeSelect.SINGLE_MIN_COST.
        max_path_cost: Paths costing more than this are never yielded.
        max_path_cost_factor: If set, updates max_path_cost to:
            min(max_path_cost, best_path_cost * max_path_cost_factor).

    Yields:
        Path objects in non-decreasing order of cost.

    Raises:
        InputError: If src_node or dst_node is not in the graph, max_k is not a
            positive integer, or max_path_cost_factor is negative.
    """
    if src_node not in graph:
        raise InputError(f"Source node '{src_node}' is not in the graph.")
    if dst_node not in graph:
        raise InputError(f"Target node '{dst_node}' is not in the graph.")
    if max_k is None:
        max_k = KSP_CONFIG.max_k_default
    if max_k is not None:
        _check_k("max_k", max_k)
    if max_path_cost_factor is not None and max_path_cost_factor < 0:
        raise InputError(
            f"max_path_cost_factor must be non-negative, got {max_path_cost_factor}."
        )

    work_graph = graph.clone()

    # 1) Compute the initial shortest path
    best_path = shortest_path(work_graph, src_node, dst_node, weight_func, edge_func)
    if best_path is None:
        logger.debug("No path from %r to %r", src_node, dst_node)
        return

    if max_path_cost_factor is not None:
        max_path_cost = min(max_path_cost, best_path.cost * max_path_cost_factor)
    if not KSP_CONFIG.within_bound(best_path.cost, max_path_cost):
        return

    accepted: List[Path] = [best_path]
    accepted_routes: Set[Route] = {best_path.route}
    candidates = CandidatePool()
    yield best_path

    while max_k is None or len(accepted) < max_k:
        last_path = accepted[-1]
        logger.debug(
            "Deviating from path #%d %r (%d spur nodes)",
            len(accepted),
            last_path,
            len(last_path),
        )

        # Spur node iteration
        for idx, spur_edge in enumerate(last_path.edges):
            spur_node = spur_edge.src
            root_path = last_path.prefix(idx)

            with work_graph.changeset() as changes:
                # Forbid continuations already taken from this same root
                for path in accepted:
                    if len(path) > idx and path.prefix(idx).same_route(root_path):
                        next_edge = path.edges[idx]
                        changes.remove_edges_between(next_edge.src, next_edge.dst)

                # Keep the spur search away from nodes already on the root
                for root_node in root_path.nodes_seq[:-1]:
                    changes.remove_node(root_node)

                spur_path = shortest_path(
                    work_graph, spur_node, dst_node, weight_func, edge_func
                )

            if spur_path is None:
                continue

            candidate = root_path.concat(spur_path)
            if candidate.route in accepted_routes:
                continue
            if not KSP_CONFIG.within_bound(candidate.cost, max_path_cost):
                continue
            if candidates.insert(candidate):
                logger.debug("New candidate %r", candidate)

        next_path = candidates.pop_best_unseen(accepted)
        if next_path is None:
            logger.debug(
                "Candidates exhausted after %d paths from %r to %r",
                len(accepted),
                src_node,
                dst_node,
            )
            break

        accepted.append(next_path)
        accepted_routes.add(next_path.route)
        yield next_path


def k_shortest_paths(
    graph: StrictMultiDiGraph,
    src_node: NodeID,
    dst_node: NodeID,
    k: int,
    weight_func: Optional[WeightFunc] = None,
    edge_func: Optional[EdgeFunc] = None,
    max_path_cost: Cost = float("inf"),
    max_path_cost_factor: Optional[float] = None,
) -> List[Path]:
    """
    Return up to k loopless shortest paths from src_node to dst_node.

    The list is ordered by non-decreasing cost. It is shorter than k when
    fewer distinct paths exist, and empty when dst_node is unreachable.
    src_node == dst_node yields a single zero-edge path of cost 0.

    See `ksp` for the algorithm and the meaning of the optional arguments.

    Raises:
        InputError: If src_node or dst_node is not in the graph, or k is not a
            positive integer.
    """
    _check_k("k", k)
    return list(
        ksp(
            graph,
            src_node,
            dst_node,
            max_k=k,
            weight_func=weight_func,
            edge_func=edge_func,
            max_path_cost=max_path_cost,
            max_path_cost_factor=max_path_cost_factor,
        )
    )
