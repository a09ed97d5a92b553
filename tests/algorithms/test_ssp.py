import networkx as nx
import pytest

from mcflow.algorithms.bellman_ford import bellman_ford
from mcflow.algorithms.residual import build_residual_network
from mcflow.algorithms.ssp import _dijkstra_reduced, min_cost_flow_ssp
from mcflow.exceptions import ConvergenceError, InfeasibleFlowError
from mcflow.graph.network import FlowNetwork
from mcflow.types.base import MIN_FLOW
from mcflow.types.dto import MinCostFlowResult


class TestSuccessiveShortestPathCosts:
    def test_two_paths(self, two_paths):
        result = min_cost_flow_ssp(two_paths)
        assert isinstance(result, MinCostFlowResult)
        assert result.cost == 8
        # One path per unit: the cheap path saturates first.
        assert result.iterations == 2

    def test_diamond_with_demand(self, diamond_demand4):
        result = min_cost_flow_ssp(diamond_demand4)
        assert result.cost == 24
        assert result.flow_network.unbalanced_nodes() == []

    def test_transport_matches_networkx(self, transport, nx_cost_graph):
        result = min_cost_flow_ssp(transport)
        assert result.cost == nx.min_cost_flow_cost(nx_cost_graph(transport))
        assert result.flow_network.unbalanced_nodes() == []

    def test_flow_keeps_balances(self, transport):
        result = min_cost_flow_ssp(transport)
        assert [result.flow_network.balance(n) for n in range(6)] == [6, 4, 0, 0, -5, -5]

    def test_existing_flow_is_discarded(self, two_paths):
        two_paths.set_edge_flow(two_paths.find_edge(0, 2), 2)
        assert min_cost_flow_ssp(two_paths).cost == 8
        assert two_paths.edge_flow(two_paths.find_edge(0, 2)) == 2


class TestNegativeEdges:
    def test_negative_cycle_without_balances_is_saturated(self, negative_cycle_net):
        # A zero-balance network still has negative cost available: the cycle
        # 0->1->2->0 is saturated once (cost 2 + 3 - 6 = -1).
        result = min_cost_flow_ssp(negative_cycle_net)
        assert result.cost == -1
        assert result.flow_network.unbalanced_nodes() == []

    def test_negative_edge_off_the_demand_path(self):
        # 1->2 is profitable to use even though no balance needs it; the unit
        # it pushes must come back through 2->1.
        net = FlowNetwork.from_edges(3, [(1, 2, -5, 1), (2, 1, 2, 1), (0, 2, 1, 1)])
        result = min_cost_flow_ssp(net)
        assert result.cost == -3
        assert result.flow_network.unbalanced_nodes() == []

    def test_stranded_negative_edge_is_pushed_back(self):
        # Saturating 0->1 strands a unit at node 1; the only way back is the
        # reverse residual arc, which undoes the saturation.
        net = FlowNetwork.from_edges(2, [(0, 1, -1, 1)])
        result = min_cost_flow_ssp(net)
        assert result.cost == 0
        assert result.flow_network.edge_flow(net.find_edge(0, 1)) == 0
        assert result.iterations == 1

    def test_residual_has_no_negative_cycle(self, transport):
        result = min_cost_flow_ssp(transport)
        residual = build_residual_network(result.flow_network)
        assert not bellman_ford(residual).negative


class TestSuccessiveShortestPathFailures:
    def test_infeasible(self, infeasible):
        with pytest.raises(InfeasibleFlowError, match="cannot be routed"):
            min_cost_flow_ssp(infeasible)

    def test_supply_without_demand(self):
        net = FlowNetwork.from_edges(2, [(0, 1, 1, 5)], balances=[2, 0])
        with pytest.raises(InfeasibleFlowError):
            min_cost_flow_ssp(net)

    def test_iteration_cap(self, two_paths):
        with pytest.raises(ConvergenceError):
            min_cost_flow_ssp(two_paths, max_iterations=1)


class TestRealValuedNetworks:
    def test_dijkstra_ignores_rounding_below_zero(self):
        # 0.3 - 0.1 - 0.2 is -2.8e-17 in floating point: a cycle that is
        # negative only through rounding must not reopen the source.
        net = FlowNetwork.from_edges(3, [(0, 1, 0.3, 1), (1, 2, -0.1, 1), (2, 0, -0.2, 1)])
        dist, parents = _dijkstra_reduced(net, 0, [0, 0, 0], MIN_FLOW)
        assert dist == {0: 0, 1: 0.3, 2: 0.3}
        assert 0 not in parents

    @pytest.mark.parametrize("seed", range(30))
    def test_float_networks_terminate_balanced(
        self, seed, make_float_network, with_deadline
    ):
        net = make_float_network(seed)
        result = with_deadline(lambda: min_cost_flow_ssp(net), 10)
        assert result.flow_network.unbalanced_nodes() == []
        residual = build_residual_network(result.flow_network)
        assert not bellman_ford(residual).negative
