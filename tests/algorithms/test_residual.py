from mcflow.algorithms.residual import (
    augment_arc,
    build_residual_network,
    iter_residual_arcs,
)
from mcflow.graph.network import FlowNetwork, ResidualNetwork


def _residual_edges(residual):
    return sorted(
        (u, v, attr["weight"], attr["capacity"], attr["reverse"])
        for u, v, _, attr in residual.get_edges().values()
    )


class TestBuildResidualNetwork:
    def test_zero_flow_has_only_forward_edges(self, line3):
        residual = build_residual_network(line3)
        assert isinstance(residual, ResidualNetwork)
        assert _residual_edges(residual) == [
            (0, 1, 1, 10, False),
            (1, 2, 1, 5, False),
        ]

    def test_partial_flow_splits_into_forward_and_reverse(self, line3):
        key = line3.find_edge(0, 1)
        line3.set_edge_flow(key, 4)
        residual = build_residual_network(line3)
        assert _residual_edges(residual) == [
            (0, 1, 1, 6, False),
            (1, 0, -1, 4, True),
            (1, 2, 1, 5, False),
        ]
        reverse_key = residual.find_edge(1, 0)
        assert residual.edge_attr(reverse_key)["origin"] == key

    def test_saturated_edge_drops_forward_edge(self, line3):
        key = line3.find_edge(1, 2)
        line3.set_edge_flow(key, 5)
        residual = build_residual_network(line3)
        assert residual.find_edge(1, 2) is None
        assert residual.edge_attr(residual.find_edge(2, 1))["capacity"] == 5

    def test_antiparallel_edges_stay_separate(self):
        net = FlowNetwork(2)
        fwd = net.add_edge(0, 1, weight=2, capacity=3, flow=1)
        back = net.add_edge(1, 0, weight=7, capacity=4)
        residual = build_residual_network(net)
        rows = {
            (attr["origin"], attr["reverse"]): (u, v, attr["weight"], attr["capacity"])
            for u, v, _, attr in residual.get_edges().values()
        }
        assert rows == {
            (fwd, False): (0, 1, 2, 2),
            (fwd, True): (1, 0, -2, 1),
            (back, False): (1, 0, 7, 4),
        }

    def test_input_network_is_not_modified(self, line3):
        key = line3.find_edge(0, 1)
        line3.set_edge_flow(key, 3)
        before = {k: dict(attr) for k, (_, _, _, attr) in line3.get_edges().items()}
        build_residual_network(line3)
        after = {k: dict(attr) for k, (_, _, _, attr) in line3.get_edges().items()}
        assert before == after

    def test_residual_of_residual_keeps_capacities(self, transport):
        for key, (_, _, _, attr) in transport.get_edges().items():
            transport.set_edge_flow(key, attr["capacity"] // 2)
        once = build_residual_network(transport)
        twice = build_residual_network(once)
        assert [row[:4] for row in _residual_edges(once)] == [
            row[:4] for row in _residual_edges(twice)
        ]


class TestResidualArcs:
    def test_arcs_cover_forward_and_reverse(self, line3):
        key = line3.find_edge(0, 1)
        line3.set_edge_flow(key, 4)
        arcs = list(iter_residual_arcs(line3, 1))
        assert {(a.head, a.reverse, a.capacity, a.weight) for a in arcs} == {
            (2, False, 5, 1),
            (0, True, 4, -1),
        }

    def test_augment_reverse_arc_cancels_flow(self, line3):
        key = line3.find_edge(0, 1)
        line3.set_edge_flow(key, 4)
        reverse = next(a for a in iter_residual_arcs(line3, 1) if a.reverse)
        augment_arc(line3, reverse, 3)
        assert line3.edge_flow(key) == 1
