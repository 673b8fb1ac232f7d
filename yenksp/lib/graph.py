from __future__ import annotations

from pickle import dumps, loads
from typing import Any, Dict, Hashable, Iterable, List, NamedTuple, Optional, Tuple

import networkx as nx

from yenksp.config import KSP_CONFIG

NodeID = Hashable
EdgeID = Hashable
AttrDict = Dict[str, Any]


class EdgeRecord(NamedTuple):
    """A removed (or stored) edge: enough to put it back exactly."""

    src: NodeID
    dst: NodeID
    key: EdgeID
    attr: AttrDict


class StrictMultiDiGraph(nx.MultiDiGraph):
    """
    A multi-directed weighted graph with strict rules and unique edge keys.

    This class enforces:
      - No automatic creation of missing nodes in `add_edge`.
      - No duplicate nodes or duplicate edge keys (ValueError).
      - Removing non-existent nodes or edges raises ValueError.
      - Removals report every edge they delete as `EdgeRecord`s, so callers
        can restore the graph with `restore_edges()` or a `GraphChangeset`.

    Edge weights live in the attribute named by `KSP_CONFIG.cost_attr`
    ("cost" by default).
    """

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._edges: Dict[EdgeID, EdgeRecord] = {}
        self._next_key: int = 0

    def new_edge_key(self, src_node: NodeID, dst_node: NodeID) -> EdgeID:
        """
        Generate a unique edge key.

        Keys are consecutive integers, skipping any already taken by an
        explicitly keyed edge. Subclasses may override this.
        """
        while self._next_key in self._edges:
            self._next_key += 1
        key = self._next_key
        self._next_key += 1
        return key

    def clone(self) -> StrictMultiDiGraph:
        """
        Return an independent deep copy of this graph.

        Uses a pickle round-trip, which keeps edge keys, attribute dicts and
        the key index consistent with each other.
        """
        return loads(dumps(self))

    def changeset(self) -> GraphChangeset:
        """Start a new reversible set of removals on this graph."""
        return GraphChangeset(self)

    #
    # Node management
    #
    def add_node(self, n: NodeID, **attr: Any) -> None:
        """
        Add a single node, disallowing duplicates.

        Raises:
            ValueError: If the node already exists in the graph.
        """
        if n in self:
            raise ValueError(f"Node '{n}' already exists in this graph.")
        super().add_node(n, **attr)

    def remove_node(self, n: NodeID) -> List[EdgeRecord]:
        """
        Remove a single node and all incident edges.

        Args:
            n: The node to remove.

        Returns:
            The removed incident edges, outgoing and incoming, each reported once.

        Raises:
            ValueError: If the node does not exist in the graph.
        """
        if n not in self:
            raise ValueError(f"Node '{n}' does not exist.")
        removed = [rec for rec in self._edges.values() if rec.src == n or rec.dst == n]
        for rec in removed:
            del self._edges[rec.key]

        super().remove_node(n)
        return removed

    #
    # Edge management
    #
    def add_edge(
        self,
        u_for_edge: NodeID,
        v_for_edge: NodeID,
        key: Optional[EdgeID] = None,
        **attr: Any,
    ) -> EdgeID:
        """
        Add a directed edge from u_for_edge to v_for_edge.

        Both nodes must already exist. If no key is provided a new one is
        generated with `new_edge_key`.

        Returns:
            The key of the new edge.

        Raises:
            ValueError: If either node does not exist, or if the key is in use.
        """
        if u_for_edge not in self:
            raise ValueError(f"Source node '{u_for_edge}' does not exist.")
        if v_for_edge not in self:
            raise ValueError(f"Target node '{v_for_edge}' does not exist.")

        if key is None:
            key = self.new_edge_key(u_for_edge, v_for_edge)
        elif key in self._edges:
            raise ValueError(f"Edge with id '{key}' already exists.")

        super().add_edge(u_for_edge, v_for_edge, key=key, **attr)
        self._edges[key] = EdgeRecord(
            u_for_edge, v_for_edge, key, self._adj[u_for_edge][v_for_edge][key]
        )
        return key

    def set_edge(
        self,
        u: NodeID,
        v: NodeID,
        weight: float,
        key: Optional[EdgeID] = None,
        cost_attr: Optional[str] = None,
    ) -> EdgeID:
        """
        Insert an edge or overwrite its weight.

        Missing endpoints are created. With an explicit `key`, that edge is
        updated if it exists (it must connect u to v) or created otherwise.
        Without a key, the first existing u->v edge is updated; if there is
        none, a new edge is added.

        Returns:
            The key of the inserted or updated edge.
        """
        cost_attr = cost_attr or KSP_CONFIG.cost_attr
        for node in (u, v):
            if node not in self:
                self.add_node(node)

        if key is None:
            existing = self.edges_between(u, v)
            if not existing:
                return self.add_edge(u, v, **{cost_attr: weight})
            key = existing[0]
        elif key not in self._edges:
            return self.add_edge(u, v, key=key, **{cost_attr: weight})

        rec = self._edges[key]
        if rec.src != u or rec.dst != v:
            raise ValueError(
                f"Edge with id='{key}' is from {rec.src} to {rec.dst}, not from {u} to {v}."
            )
        rec.attr[cost_attr] = weight
        return key

    def remove_edge(
        self,
        u: NodeID,
        v: NodeID,
        key: Optional[EdgeID] = None,
    ) -> List[EdgeRecord]:
        """
        Remove the edge `key` from u to v, or every u->v edge if no key is given.

        Returns:
            The removed edges.

        Raises:
            ValueError: If a node is missing, the key does not exist or does not
                connect u to v, or there are no u->v edges.
        """
        if u not in self:
            raise ValueError(f"Source node '{u}' does not exist.")
        if v not in self:
            raise ValueError(f"Target node '{v}' does not exist.")

        if key is not None:
            if key not in self._edges:
                raise ValueError(f"No edge with id='{key}' found from {u} to {v}.")
            rec = self._edges[key]
            if rec.src != u or rec.dst != v:
                raise ValueError(
                    f"Edge with id='{key}' is actually from {rec.src} to {rec.dst}, "
                    f"not from {u} to {v}."
                )
            return [self.remove_edge_by_id(key)]

        edge_ids = self.edges_between(u, v)
        if not edge_ids:
            raise ValueError(f"No edges from '{u}' to '{v}' to remove.")
        return [self.remove_edge_by_id(e_id) for e_id in edge_ids]

    def remove_edge_by_id(self, key: EdgeID) -> EdgeRecord:
        """
        Remove a directed edge by its unique key.

        Raises:
            ValueError: If no edge with this key exists in the graph.
        """
        if key not in self._edges:
            raise ValueError(f"Edge with id='{key}' not found.")
        rec = self._edges.pop(key)
        super().remove_edge(rec.src, rec.dst, key=key)
        return rec

    def restore_edges(self, records: Iterable[EdgeRecord]) -> None:
        """Re-insert previously removed edges with their original keys and attributes."""
        for rec in records:
            self.add_edge(rec.src, rec.dst, key=rec.key, **rec.attr)

    #
    # Convenience methods
    #
    def edge_pairs(self) -> List[Tuple[NodeID, NodeID]]:
        """
        Enumerate all edges as (source, target) pairs.

        Parallel edges appear once each, in insertion order.
        """
        return [(rec.src, rec.dst) for rec in self._edges.values()]

    def edge_weight(
        self, u: NodeID, v: NodeID, cost_attr: Optional[str] = None
    ) -> float:
        """
        Return the weight of the cheapest u->v edge.

        Raises:
            ValueError: If there is no edge from u to v.
        """
        cost_attr = cost_attr or KSP_CONFIG.cost_attr
        edge_ids = self.edges_between(u, v)
        if not edge_ids:
            raise ValueError(f"No edges from '{u}' to '{v}'.")
        return min(self._edges[e_id].attr[cost_attr] for e_id in edge_ids)

    def get_nodes(self) -> Dict[NodeID, AttrDict]:
        """Retrieve all nodes and their attributes as a dictionary."""
        return dict(self.nodes(data=True))

    def get_edges(self) -> Dict[EdgeID, EdgeRecord]:
        """Retrieve all edges by key."""
        return self._edges

    def get_edge_attr(self, key: EdgeID) -> AttrDict:
        """
        Retrieve the attribute dictionary of a specific edge.

        Raises:
            ValueError: If no edge with this key is found.
        """
        if key not in self._edges:
            raise ValueError(f"Edge with id='{key}' not found.")
        return self._edges[key].attr

    def edges_between(self, u: NodeID, v: NodeID) -> List[EdgeID]:
        """List all edge keys from u to v (empty if none or if a node is missing)."""
        if u not in self._succ or v not in self._succ[u]:
            return []
        return list(self._succ[u][v].keys())


class GraphChangeset:
    """
    A reversible batch of removals applied to a StrictMultiDiGraph.

    Every node and edge removed through the changeset is recorded;
    `restore()` puts them back with the same keys and attributes. Used as a
    context manager, restoration happens on exit, including on error:

        with graph.changeset() as changes:
            changes.remove_node("B")
            ...  # search the reduced graph
        # graph is back to its previous state here
    """

    def __init__(self, graph: StrictMultiDiGraph) -> None:
        self.graph = graph
        self.removed_nodes: List[Tuple[NodeID, AttrDict]] = []
        self.removed_edges: List[EdgeRecord] = []

    def __enter__(self) -> GraphChangeset:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.restore()

    def remove_edges_between(self, u: NodeID, v: NodeID) -> int:
        """
        Remove every u->v edge still present.

        Returns:
            Number of edges removed (0 if none were left).
        """
        if not self.graph.edges_between(u, v):
            return 0
        removed = self.graph.remove_edge(u, v)
        self.removed_edges.extend(removed)
        return len(removed)

    def remove_node(self, n: NodeID) -> int:
        """
        Remove a node with its incident edges, if still present.

        Returns:
            Number of incident edges removed with it.
        """
        if n not in self.graph:
            return 0
        attr = dict(self.graph.nodes[n])
        removed = self.graph.remove_node(n)
        self.removed_nodes.append((n, attr))
        self.removed_edges.extend(removed)
        return len(removed)

    def restore(self) -> None:
        """Undo all recorded removals. Nodes go back first, then edges."""
        for node, attr in self.removed_nodes:
            self.graph.add_node(node, **attr)
        self.graph.restore_edges(self.removed_edges)
        self.removed_nodes.clear()
        self.removed_edges.clear()
