import logging
from itertools import islice
from math import isclose

import networkx as nx
import pytest

from yenksp.lib.algorithms.base import EdgeSelect, InputError
from yenksp.lib.algorithms.edge_select import edge_select_fabric
from yenksp.lib.algorithms.ksp import k_shortest_paths, ksp
from yenksp.lib.algorithms.spf import shortest_path
from yenksp.lib.graph import StrictMultiDiGraph


def _to_digraph(g: StrictMultiDiGraph) -> nx.DiGraph:
    """Plain DiGraph with the cheapest parallel edge, for cross-checking."""
    dg = nx.DiGraph()
    dg.add_nodes_from(g.nodes)
    for src, dst in g.edge_pairs():
        dg.add_edge(src, dst, cost=g.edge_weight(src, dst))
    return dg


def _graph_state(g: StrictMultiDiGraph):
    return (
        list(g.nodes),
        {key: (rec.src, rec.dst, dict(rec.attr)) for key, rec in g.get_edges().items()},
    )


class TestKSP:
    def test_ksp_diamond(self, diamond):
        """Two routes A->D: the cheaper first."""
        paths = k_shortest_paths(diamond, "A", "D", 2)
        assert [(p.cost, p.route) for p in paths] == [
            (2, (("A", "B"), ("B", "D"))),
            (3, (("A", "C"), ("C", "D"))),
        ]

    def test_ksp_single_edge(self, single_edge):
        """Asking for more paths than exist returns what there is."""
        paths = k_shortest_paths(single_edge, "A", "B", 3)
        assert len(paths) == 1
        assert paths[0].cost == 5
        assert paths[0].route == (("A", "B"),)

    def test_ksp_source_equals_target(self, diamond):
        paths = k_shortest_paths(diamond, "A", "A", 3)
        assert len(paths) == 1
        assert paths[0].edges == ()
        assert paths[0].cost == 0
        assert paths[0].nodes_seq == ("A",)

    def test_ksp_unreachable(self, disconnected):
        assert k_shortest_paths(disconnected, "A", "D", 3) == []

    def test_ksp_reverse_direction_unreachable(self, diamond):
        assert k_shortest_paths(diamond, "D", "A", 2) == []

    def test_ksp_k1_matches_shortest_path(self, yen_graph):
        paths = k_shortest_paths(yen_graph, "C", "H", 1)
        assert paths == [shortest_path(yen_graph, "C", "H")]

    def test_ksp_yen_graph(self, yen_graph):
        """The textbook example: first three paths and their costs."""
        paths = k_shortest_paths(yen_graph, "C", "H", 3)
        assert [p.nodes_seq for p in paths] == [
            ("C", "E", "F", "H"),
            ("C", "E", "G", "H"),
            ("C", "D", "F", "H"),
        ]
        assert [p.cost for p in paths] == [5, 7, 8]

    def test_ksp_yen_graph_ties_in_discovery_order(self, yen_graph):
        """Equal-cost candidates come out in the order they were found."""
        paths = k_shortest_paths(yen_graph, "C", "H", 5)
        assert [p.nodes_seq for p in paths[3:]] == [
            ("C", "E", "F", "G", "H"),
            ("C", "E", "D", "F", "H"),
        ]

    def test_ksp_all_paths(self, yen_graph):
        """Unbounded generator enumerates every simple path, cheapest first."""
        paths = list(ksp(yen_graph, "C", "H"))
        assert [p.cost for p in paths] == [5, 7, 8, 8, 8, 11, 11]

    def test_ksp_square3(self, square3):
        paths = k_shortest_paths(square3, "A", "C", 5)
        assert [p.nodes_seq for p in paths] == [
            ("A", "B", "C"),
            ("A", "D", "C"),
            ("A", "B", "D", "C"),
            ("A", "D", "B", "C"),
        ]
        assert [p.cost for p in paths] == [2, 2, 3, 3]

    def test_ksp_parallel_edges_are_one_route(self, line1):
        """Parallel edges never produce structurally duplicate paths."""
        paths = k_shortest_paths(line1, "A", "C", 5)
        assert len(paths) == 1
        assert paths[0].edges[-1].key == 2

    def test_ksp_edge_func(self, line1):
        paths = k_shortest_paths(
            line1,
            "A",
            "C",
            2,
            edge_func=edge_select_fabric(EdgeSelect.SINGLE_MIN_COST_LAST),
        )
        assert [e.key for e in paths[0].edges] == [0, 4]

    def test_ksp_edge_func_cost_ignored(self):
        """A cost reported by edge_func never reorders the results."""
        g = StrictMultiDiGraph()
        g.set_edge("A", "B", 1)
        g.set_edge("B", "D", 1)
        g.set_edge("A", "D", 3)

        def per_hop_penalty(graph, src, dst, edges_map, weight_func):
            key = next(iter(edges_map))
            return weight_func(src, dst, key, edges_map[key]) + 10, key

        paths = k_shortest_paths(g, "A", "D", 2, edge_func=per_hop_penalty)
        costs = [p.cost for p in paths]
        assert costs == [2, 3]
        assert costs == sorted(costs)
        assert [p.nodes_seq for p in paths] == [("A", "B", "D"), ("A", "D")]

    def test_ksp_weight_func(self, diamond):
        """Hop-count weights make both routes cost 2; order stays deterministic."""
        paths = k_shortest_paths(
            diamond, "A", "D", 2, weight_func=lambda src, dst, key, attr: 1
        )
        assert [p.cost for p in paths] == [2, 2]
        assert [p.nodes_seq for p in paths] == [("A", "B", "D"), ("A", "C", "D")]
        assert all(e.weight == 1 for p in paths for e in p.edges)

    def test_ksp_max_path_cost(self, yen_graph):
        paths = k_shortest_paths(yen_graph, "C", "H", 10, max_path_cost=7)
        assert [p.cost for p in paths] == [5, 7]

    def test_ksp_max_path_cost_below_best(self, yen_graph):
        assert k_shortest_paths(yen_graph, "C", "H", 10, max_path_cost=4) == []

    def test_ksp_max_path_cost_factor(self, yen_graph):
        paths = k_shortest_paths(yen_graph, "C", "H", 10, max_path_cost_factor=1.6)
        assert [p.cost for p in paths] == [5, 7, 8, 8, 8]

    def test_ksp_generator_is_lazy(self, graph5):
        first_two = list(islice(ksp(graph5, "A", "B"), 2))
        assert [p.cost for p in first_two] == [1, 2]
        assert first_two[0].nodes_seq == ("A", "B")


class TestKSPProperties:
    @pytest.mark.parametrize(
        "fixture_name,src,dst",
        [
            ("yen_graph", "C", "H"),
            ("square3", "A", "C"),
            ("graph5", "A", "B"),
            ("graph5", "C", "E"),
        ],
    )
    def test_matches_networkx_simple_paths(self, request, fixture_name, src, dst):
        g = request.getfixturevalue(fixture_name)
        dg = _to_digraph(g)
        expected = list(nx.shortest_simple_paths(dg, src, dst, weight="cost"))
        expected_costs = [nx.path_weight(dg, p, weight="cost") for p in expected]

        paths = list(ksp(g, src, dst))
        assert [p.cost for p in paths] == expected_costs
        assert {p.nodes_seq for p in paths} == {tuple(p) for p in expected}

    def test_invariants(self, graph5):
        paths = k_shortest_paths(graph5, "A", "B", 20)
        assert len(paths) == 16

        for p in paths:
            assert isclose(p.cost, sum(e.weight for e in p.edges))
            # loopless
            assert len(set(p.nodes_seq)) == len(p.nodes_seq)
            assert p.src_node == "A" and p.dst_node == "B"

        routes = [p.route for p in paths]
        assert len(set(routes)) == len(routes)

        costs = [p.cost for p in paths]
        assert costs == sorted(costs)

    def test_deterministic(self, graph5):
        first = k_shortest_paths(graph5, "A", "B", 10)
        for _ in range(3):
            assert k_shortest_paths(graph5, "A", "B", 10) == first

    def test_input_graph_untouched(self, yen_graph):
        before = _graph_state(yen_graph)
        k_shortest_paths(yen_graph, "C", "H", 7)
        assert _graph_state(yen_graph) == before

    def test_float_weights(self):
        g = StrictMultiDiGraph()
        g.set_edge("S", "A", 0.1)
        g.set_edge("A", "T", 0.2)
        g.set_edge("S", "B", 0.25)
        g.set_edge("B", "T", 0.25)
        g.set_edge("S", "T", 0.45)
        paths = k_shortest_paths(g, "S", "T", 3)
        assert [p.nodes_seq for p in paths] == [
            ("S", "A", "T"),
            ("S", "T"),
            ("S", "B", "T"),
        ]
        for p in paths:
            assert isclose(p.cost, sum(e.weight for e in p.edges))


class TestKSPInput:
    def test_missing_source(self, diamond):
        with pytest.raises(InputError, match="Source node 'Z'"):
            k_shortest_paths(diamond, "Z", "D", 2)

    def test_missing_target(self, diamond):
        with pytest.raises(InputError, match="Target node 'Z'"):
            k_shortest_paths(diamond, "A", "Z", 2)

    @pytest.mark.parametrize("k", [0, -1, 1.5, True, "2", None])
    def test_bad_k(self, diamond, k):
        with pytest.raises(InputError, match="k must be a positive integer"):
            k_shortest_paths(diamond, "A", "D", k)

    def test_bad_max_k_in_generator(self, diamond):
        with pytest.raises(InputError, match="max_k must be a positive integer"):
            next(ksp(diamond, "A", "D", max_k=0))

    def test_negative_cost_factor(self, diamond):
        with pytest.raises(InputError, match="max_path_cost_factor"):
            k_shortest_paths(diamond, "A", "D", 2, max_path_cost_factor=-1)

    def test_input_error_is_value_error(self, diamond):
        with pytest.raises(ValueError):
            k_shortest_paths(diamond, "A", "D", 0)

    def test_negative_weight(self):
        g = StrictMultiDiGraph()
        g.set_edge("A", "B", -2)
        with pytest.raises(InputError, match="Negative weight"):
            k_shortest_paths(g, "A", "B", 2)


def test_debug_logging(caplog, diamond):
    caplog.set_level(logging.DEBUG, logger="yenksp")
    k_shortest_paths(diamond, "A", "D", 3)
    assert "Deviating from path #1" in caplog.text
    assert "Candidates exhausted after 2 paths" in caplog.text
