"""Shared fixtures and helpers for the flow algorithm tests.

Fixtures are small hand-checked networks; `random_network` builds seeded
random b-flow instances that the tests compare against networkx.
"""

from __future__ import annotations

import random
import threading
from typing import Any, Callable, Dict, List, Optional

import networkx as nx
import pytest

from mcflow.graph.network import FlowNetwork


@pytest.fixture
def two_paths():
    # Balances: [2, 0, 0, -2]
    #
    #        w=1,c=1      w=1,c=1
    #   ┌─────────►1──────────┐
    #   │                     ▼
    #   0                     3
    #   │                     ▲
    #   └─────────►2──────────┘
    #        w=3,c=2      w=3,c=2
    #
    # Cheap path carries 1 unit (cost 2), expensive path 1 unit (cost 6).
    return FlowNetwork.from_edges(
        4,
        [(0, 1, 1, 1), (1, 3, 1, 1), (0, 2, 3, 2), (2, 3, 3, 2)],
        balances=[2, 0, 0, -2],
    )


@pytest.fixture
def diamond():
    # No balances; weights [1, 1] on the upper path and [5, 5] on the lower.
    #
    #        w=1,c=2      w=1,c=2
    #   ┌─────────►1──────────┐
    #   │                     ▼
    #   0                     3
    #   │                     ▲
    #   └─────────►2──────────┘
    #        w=5,c=2      w=5,c=2
    return FlowNetwork.from_edges(
        4, [(0, 1, 1, 2), (1, 3, 1, 2), (0, 2, 5, 2), (2, 3, 5, 2)]
    )


@pytest.fixture
def diamond_demand4(diamond):
    # The diamond with a demand of 4 from node 0 to node 3.
    net = diamond.copy()
    net.set_balance(0, 4)
    net.set_balance(3, -4)
    return net


@pytest.fixture
def line3():
    # 0 ──(c=10)──► 1 ──(c=5)──► 2
    return FlowNetwork.from_edges(3, [(0, 1, 1, 10), (1, 2, 1, 5)])


@pytest.fixture
def bottleneck_cross():
    # Classic Edmonds-Karp example with a cross edge 1->2.
    #
    #      c=10        c=10
    #   0 ─────► 1 ─────► 3
    #   │        │ c=1    ▲
    #   │        ▼        │
    #   └──────► 2 ───────┘
    #      c=10        c=10
    return FlowNetwork.from_edges(
        4, [(0, 1, 0, 10), (0, 2, 0, 10), (1, 2, 0, 1), (1, 3, 0, 10), (2, 3, 0, 10)]
    )


@pytest.fixture
def transport():
    # Two suppliers (0, 1), two transshipment nodes (2, 3), two consumers (4, 5).
    # Edge 2->3 has negative weight; parallel edges 0->2 differ in cost.
    edges = [
        (0, 2, 4, 5),
        (0, 2, 2, 3),
        (0, 3, 6, 6),
        (1, 2, 3, 4),
        (1, 3, 1, 2),
        (2, 3, -2, 3),
        (2, 4, 5, 6),
        (3, 4, 2, 3),
        (3, 5, 3, 5),
        (2, 5, 7, 4),
        (4, 5, 1, 2),
    ]
    return FlowNetwork.from_edges(6, edges, balances=[6, 4, 0, 0, -5, -5])


@pytest.fixture
def negative_cycle_net():
    # 0 -> 1 -> 2 -> 0 sums to -1; node 3 hangs off node 2.
    return FlowNetwork.from_edges(
        4, [(0, 1, 2, 1), (1, 2, 3, 1), (2, 0, -6, 1), (2, 3, 1, 1)]
    )


@pytest.fixture
def infeasible():
    # Supply 5 at node 0, but only 3 units of capacity reach node 2.
    return FlowNetwork.from_edges(
        3, [(0, 1, 1, 3), (1, 2, 1, 10)], balances=[5, 0, -5]
    )


def random_network(
    seed: int,
    num_nodes: Optional[int] = None,
    edge_prob: float = 0.4,
    with_balances: bool = True,
) -> FlowNetwork:
    """Seeded random network with integer weights (some negative) and capacities."""
    rng = random.Random(seed)
    n = num_nodes if num_nodes is not None else rng.randint(4, 8)
    balances: Optional[List[int]] = None
    if with_balances:
        balances = [rng.randint(-4, 4) for _ in range(n - 1)]
        balances.append(-sum(balances))
    net = FlowNetwork(n, balances)
    for u in range(n):
        for v in range(n):
            if u != v and rng.random() < edge_prob:
                net.add_edge(u, v, weight=rng.randint(-3, 9), capacity=rng.randint(0, 6))
    return net


def random_float_network(
    seed: int, num_nodes: int = 6, edge_prob: float = 0.5
) -> FlowNetwork:
    """Seeded random network with real-valued weights, capacities and balances.

    Weights and capacities have two decimals. Balances are the net outflow of a
    random flow that fits the capacities, so every instance is feasible.
    """
    rng = random.Random(seed)
    edges = []
    outflow = [0.0] * num_nodes
    for u in range(num_nodes):
        for v in range(num_nodes):
            if u != v and rng.random() < edge_prob:
                weight = round(rng.uniform(-1.5, 6.0), 2)
                capacity = round(rng.uniform(0.1, 3.0), 2)
                used = round(rng.uniform(0, capacity), 2)
                edges.append((u, v, weight, capacity))
                outflow[u] += used
                outflow[v] -= used
    net = FlowNetwork(num_nodes, outflow)
    for u, v, weight, capacity in edges:
        net.add_edge(u, v, weight=weight, capacity=capacity)
    return net


def to_nx_multidigraph(network: FlowNetwork) -> nx.MultiDiGraph:
    """Convert to the networkx min-cost-flow convention (demand = -balance)."""
    g = nx.MultiDiGraph()
    for node in range(network.number_of_nodes()):
        g.add_node(node, demand=-network.balance(node))
    for u, v, _key, attr in network.get_edges().values():
        g.add_edge(u, v, weight=attr["weight"], capacity=attr["capacity"])
    return g


def to_nx_capacity_digraph(network: FlowNetwork) -> nx.DiGraph:
    """Collapse parallel edges into one DiGraph edge with summed capacity."""
    g = nx.DiGraph()
    g.add_nodes_from(range(network.number_of_nodes()))
    for u, v, _key, attr in network.get_edges().values():
        if u == v:
            continue
        if g.has_edge(u, v):
            g[u][v]["capacity"] += attr["capacity"]
        else:
            g.add_edge(u, v, capacity=attr["capacity"])
    return g


@pytest.fixture
def make_random_network():
    return random_network


@pytest.fixture
def make_float_network():
    return random_float_network


def call_with_deadline(func: Callable[[], Any], seconds: float) -> Any:
    """Run ``func`` in a daemon thread and fail the test if it outlives ``seconds``."""
    outcome: Dict[str, Any] = {}

    def target() -> None:
        try:
            outcome["value"] = func()
        except BaseException as e:  # re-raised in the test thread
            outcome["error"] = e

    worker = threading.Thread(target=target, daemon=True)
    worker.start()
    worker.join(seconds)
    if worker.is_alive():
        pytest.fail(f"Call did not finish within {seconds} seconds")
    if "error" in outcome:
        raise outcome["error"]
    return outcome["value"]


@pytest.fixture
def with_deadline():
    return call_with_deadline


@pytest.fixture
def nx_cost_graph():
    return to_nx_multidigraph


@pytest.fixture
def nx_capacity_graph():
    return to_nx_capacity_digraph
