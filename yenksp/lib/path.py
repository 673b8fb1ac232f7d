from __future__ import annotations

from dataclasses import dataclass, field
from functools import cached_property
from typing import Any, Iterator, NamedTuple, Optional, Tuple

from yenksp.lib.algorithms.base import Cost
from yenksp.lib.graph import EdgeID, NodeID

#: Structural identity of a path: the ordered (src, dst) pairs of its edges.
Route = Tuple[Tuple[NodeID, NodeID], ...]


class Edge(NamedTuple):
    """One traversed hop: endpoints, the weight paid, and the concrete edge key."""

    src: NodeID
    dst: NodeID
    weight: Cost
    key: Optional[EdgeID] = None


@dataclass(eq=False)
class Path:
    """
    Represents a single walk through the graph as an ordered sequence of edges.

    Attributes:
        edges (Tuple[Edge, ...]):
            The hops from source to destination. Consecutive edges must share
            an endpoint (edges[i].dst == edges[i + 1].src).
        origin (Optional[NodeID]):
            The source node. Derived from the first edge when omitted; required
            to describe a zero-edge path.
        cost (Cost):
            The sum of edge weights, always recomputed from `edges`.
    """

    edges: Tuple[Edge, ...] = ()
    origin: Optional[NodeID] = None
    cost: Cost = field(init=False)

    def __post_init__(self) -> None:
        """
        Normalize `edges`, derive `origin` and `cost`, and check contiguity.

        Raises:
            ValueError: If edges do not chain, or `origin` disagrees with the
                first edge.
        """
        self.edges = tuple(Edge(*e) for e in self.edges)
        if self.edges:
            if self.origin is None:
                self.origin = self.edges[0].src
            elif self.origin != self.edges[0].src:
                raise ValueError(
                    f"Path origin {self.origin!r} does not match first edge "
                    f"source {self.edges[0].src!r}."
                )
        for prev, nxt in zip(self.edges, self.edges[1:]):
            if prev.dst != nxt.src:
                raise ValueError(
                    f"Edges {prev.src!r}->{prev.dst!r} and {nxt.src!r}->{nxt.dst!r} "
                    f"are not contiguous."
                )

        total = 0.0
        for edge in self.edges:
            total += edge.weight
        self.cost = total

    def __getitem__(self, idx: int) -> Edge:
        return self.edges[idx]

    def __iter__(self) -> Iterator[Edge]:
        return iter(self.edges)

    def __len__(self) -> int:
        """Return the number of edges (hops) in the path."""
        return len(self.edges)

    @property
    def src_node(self) -> Optional[NodeID]:
        return self.origin

    @property
    def dst_node(self) -> Optional[NodeID]:
        """Return the last node in the path (the origin for a zero-edge path)."""
        return self.edges[-1].dst if self.edges else self.origin

    def __lt__(self, other: Any) -> bool:
        """Order paths by cost."""
        if not isinstance(other, Path):
            return NotImplemented
        return self.cost < other.cost

    def __eq__(self, other: Any) -> bool:
        """
        Check equality by comparing edges (including weights and keys), origin
        and cost. Use `same_route` for structural comparison.
        """
        if not isinstance(other, Path):
            return NotImplemented
        return (
            self.edges == other.edges
            and self.origin == other.origin
            and self.cost == other.cost
        )

    def __hash__(self) -> int:
        return hash((self.edges, self.origin, self.cost))

    def __repr__(self) -> str:
        hops = " -> ".join(repr(n) for n in self.nodes_seq)
        return f"Path({hops}, cost={self.cost})"

    @cached_property
    def route(self) -> Route:
        """
        Return the (src, dst) pair of each edge in order.

        Two paths with the same route are the same candidate regardless of
        weights or of which parallel edge was taken.
        """
        return tuple((e.src, e.dst) for e in self.edges)

    @cached_property
    def nodes_seq(self) -> Tuple[NodeID, ...]:
        """Return node IDs in order from source to destination."""
        if self.origin is None:
            return ()
        return (self.origin,) + tuple(e.dst for e in self.edges)

    def same_route(self, other: Optional[Path]) -> bool:
        """
        Structural equality: same number of edges and the same (src, dst)
        at every position. Weights and edge keys are ignored.
        """
        if other is None:
            return False
        return self.route == other.route

    def prefix(self, i: int) -> Path:
        """
        Return a new path made of the first `i` edges.

        The cost covers only the included edges. An `i` beyond the number of
        edges is clamped to the full length.

        Raises:
            ValueError: If `i` is negative.
        """
        if i < 0:
            raise ValueError(f"Prefix length must be non-negative, got {i}.")
        return Path(self.edges[:i], origin=self.origin)

    def concat(self, other: Path) -> Path:
        """
        Append `other` to this path and recompute the cost.

        Raises:
            ValueError: If `other` does not start where this path ends.
        """
        if other.src_node != self.dst_node:
            raise ValueError(
                f"Cannot join a path ending at {self.dst_node!r} with one "
                f"starting at {other.src_node!r}."
            )
        return Path(self.edges + other.edges, origin=self.origin)
