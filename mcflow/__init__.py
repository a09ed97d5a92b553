"""mcflow: maximum-flow and minimum-cost flow on capacitated networks.

mcflow computes flows on networks whose nodes carry a supply/demand balance
and whose edges carry a weight (cost per unit of flow) and a capacity.

Primary API:
    FlowNetwork - capacitated network built on networkx
    calc_max_flow() - Edmonds-Karp maximum flow between two nodes
    calc_min_cost_flow() - minimum-cost b-flow (cycle canceling or SSP)
    build_residual_network() - residual view of a flow
    bellman_ford() - shortest distances or a negative cycle

Example:
    from mcflow import FlowNetwork, calc_min_cost_flow

    net = FlowNetwork(3, balances=[4, 0, -4])
    net.add_edge(0, 1, weight=1, capacity=4)
    net.add_edge(1, 2, weight=1, capacity=4)
    net.add_edge(0, 2, weight=5, capacity=4)

    result = calc_min_cost_flow(net)
    print(result.cost)  # 8
"""

from __future__ import annotations

from mcflow import cli, logging
from mcflow._version import __version__
from mcflow.algorithms.b_flow import find_feasible_b_flow
from mcflow.algorithms.bellman_ford import BellmanFordResult, bellman_ford
from mcflow.algorithms.cycle_canceling import min_cost_flow_cycle_canceling
from mcflow.algorithms.max_flow import calc_max_flow, min_cut
from mcflow.algorithms.min_cost_flow import calc_min_cost_flow
from mcflow.algorithms.residual import build_residual_network
from mcflow.algorithms.ssp import min_cost_flow_ssp
from mcflow.config import SOLVER_CONFIG, SolverConfig
from mcflow.exceptions import (
    ConvergenceError,
    FlowError,
    FlowInvariantError,
    InfeasibleFlowError,
)
from mcflow.graph.network import FlowNetwork, ResidualNetwork
from mcflow.io import load_network, read_network
from mcflow.types.base import MinCostMethod
from mcflow.types.dto import MaxFlowResult, MinCostFlowResult

__all__ = [
    # Version
    "__version__",
    # Model
    "FlowNetwork",
    "ResidualNetwork",
    # Algorithms
    "build_residual_network",
    "calc_max_flow",
    "min_cut",
    "find_feasible_b_flow",
    "bellman_ford",
    "min_cost_flow_cycle_canceling",
    "min_cost_flow_ssp",
    "calc_min_cost_flow",
    # Types
    "MinCostMethod",
    "MaxFlowResult",
    "MinCostFlowResult",
    "BellmanFordResult",
    # Errors
    "FlowError",
    "InfeasibleFlowError",
    "FlowInvariantError",
    "ConvergenceError",
    # Configuration
    "SolverConfig",
    "SOLVER_CONFIG",
    # I/O
    "read_network",
    "load_network",
    # Utilities
    "cli",
    "logging",
]
