"""Feasible b-flow via super-source/super-sink reduction.

A balance-bearing network becomes a single-source, single-sink max-flow
problem: a super-source feeds every supply node through an edge whose
capacity is that node's supply, and every demand node drains into a
super-sink the same way. The flow is only feasible if the max flow saturates
all of those edges.
"""

from __future__ import annotations

from typing import Optional, Tuple

from mcflow.algorithms.max_flow import calc_max_flow
from mcflow.config import SOLVER_CONFIG
from mcflow.exceptions import InfeasibleFlowError
from mcflow.graph.network import FlowNetwork, NodeID
from mcflow.logging import get_logger

logger = get_logger(__name__)


def add_super_terminals(network: FlowNetwork) -> Tuple[FlowNetwork, NodeID, NodeID]:
    """Return a copy of ``network`` with balances moved onto super terminals.

    The copy gains two nodes: the super-source (index ``n``) and the super-sink
    (index ``n + 1``). Each supply node ``b > 0`` gets an edge from the
    super-source with capacity ``b`` and weight 0; each demand node ``-d < 0``
    gets an edge to the super-sink with capacity ``d`` and weight 0. Those
    nodes' balances become zero, the super-source's balance is the total supply
    and the super-sink's is minus the total demand.

    Args:
        network: Balance-bearing network; left unmodified.

    Returns:
        Tuple of (augmented copy, super-source index, super-sink index).
    """
    super_network = network.copy()
    size = network.number_of_nodes()
    supersource, supersink = size, size + 1
    super_network.add_node(supersource)
    super_network.add_node(supersink)

    supply = 0
    demand = 0
    for node in range(size):
        balance = super_network.balance(node)
        if balance > 0:
            super_network.add_edge(supersource, node, weight=0, capacity=balance)
            supply += balance
        elif balance < 0:
            super_network.add_edge(node, supersink, weight=0, capacity=-balance)
            demand -= balance
        else:
            continue
        super_network.set_balance(node, 0)

    super_network.set_balance(supersource, supply)
    super_network.set_balance(supersink, -demand)
    return super_network, supersource, supersink


def strip_super_terminals(
    super_flow_network: FlowNetwork, network: FlowNetwork
) -> FlowNetwork:
    """Copy the flow of ``network``'s edges out of a super-terminal network.

    Args:
        super_flow_network: Result of a max-flow run on ``add_super_terminals(network)``.
        network: The original network; left unmodified.

    Returns:
        FlowNetwork: Copy of ``network`` with the flows from ``super_flow_network``.
    """
    flow_network = network.copy()
    for key in flow_network.get_edges():
        flow_network.set_edge_flow(key, super_flow_network.edge_flow(key))
    return flow_network


def find_feasible_b_flow(
    network: FlowNetwork, tolerance: Optional[float] = None
) -> FlowNetwork:
    """Find any flow satisfying every node balance.

    Existing flow on the network is discarded first.

    Args:
        network: Balance-bearing network; left unmodified.
        tolerance: Numeric threshold; defaults to the global config.

    Returns:
        FlowNetwork: Copy of ``network`` carrying a feasible b-flow.

    Raises:
        InfeasibleFlowError: If supplies and demands differ in total or cannot
            be routed under the edge capacities.
    """
    tol = SOLVER_CONFIG.tolerance if tolerance is None else tolerance
    zero_flow = network.copy()
    zero_flow.reset_flow()

    super_network, supersource, supersink = add_super_terminals(zero_flow)
    supply = super_network.balance(supersource)
    demand = -super_network.balance(supersink)
    if abs(supply - demand) > tol:
        raise InfeasibleFlowError(
            f"Total supply {supply} does not match total demand {demand}."
        )

    result = calc_max_flow(super_network, supersource, supersink, tolerance=tol)
    if abs(result.max_flow - supply) > tol:
        raise InfeasibleFlowError(
            f"Max flow {result.max_flow} cannot cover total supply {supply}."
        )
    logger.debug(f"Feasible b-flow routes {supply} units of supply")
    return strip_super_terminals(result.flow_network, zero_flow)
