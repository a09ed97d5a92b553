"""Minimum-cost b-flow by successive shortest paths with node potentials.

Negative-weight edges are saturated up front, so with all potentials at zero
every residual arc has a non-negative reduced cost
``weight + potential[u] - potential[v]``. Dijkstra over reduced costs then
finds a cheapest path from a node with excess to a node with deficit, the
potentials absorb the distances (keeping reduced costs non-negative), and
flow is pushed along the path. Repeating until no excess remains yields a
minimum-cost b-flow.
"""

from __future__ import annotations

from heapq import heappop, heappush
from time import perf_counter
from typing import Dict, List, Optional, Set, Tuple

from mcflow.algorithms.residual import ResidualArc, augment_arc, iter_residual_arcs
from mcflow.config import SOLVER_CONFIG
from mcflow.exceptions import ConvergenceError, InfeasibleFlowError
from mcflow.graph.network import FlowNetwork, NodeID
from mcflow.logging import get_logger
from mcflow.types.base import Cost
from mcflow.types.dto import MinCostFlowResult
from mcflow.utils.timing import format_duration

logger = get_logger(__name__)


def min_cost_flow_ssp(
    network: FlowNetwork,
    *,
    tolerance: Optional[float] = None,
    max_iterations: Optional[int] = None,
) -> MinCostFlowResult:
    """Compute a minimum-cost b-flow by successive shortest augmenting paths.

    Existing flow is discarded. Node excess starts at each node's balance and
    is adjusted by saturating every negative-weight edge. Sources are nodes
    with positive excess, sinks nodes with negative excess. For each source in
    turn, Dijkstra over reduced costs looks for the nearest sink; flow
    ``min(excess[source], -excess[sink], bottleneck)`` is pushed along the
    path and settled sources and sinks are dropped. The loop ends when no
    source reaches a sink.

    Potentials are updated with ``potential[v] += min(dist[v], dist[sink])``
    for every node, unreached nodes counting as ``dist[sink]``. This keeps the
    reduced cost of every residual arc non-negative and makes the arcs of the
    augmenting path (and their reverses) exactly zero.

    Args:
        network: Balance-bearing network; left unmodified.
        tolerance: Numeric threshold; defaults to the global config.
        max_iterations: Cap on augmenting paths; defaults to
            ``SOLVER_CONFIG.iteration_limit`` for the network size.

    Returns:
        MinCostFlowResult: Minimum cost, the flow-bearing copy (with the
        original balances), and the number of augmenting paths.

    Raises:
        InfeasibleFlowError: If some supply or demand cannot be routed.
        ConvergenceError: If the iteration cap is exceeded.
    """
    tol = SOLVER_CONFIG.tolerance if tolerance is None else tolerance
    size = network.number_of_nodes()
    limit = (
        max_iterations
        if max_iterations is not None
        else SOLVER_CONFIG.iteration_limit(size, network.number_of_edges())
    )

    start = perf_counter()
    flow_network = network.copy()
    flow_network.reset_flow()

    excess: List[Cost] = [flow_network.balance(node) for node in range(size)]
    for u, v, key, attr in flow_network.get_edges().values():
        if attr["weight"] < 0 and attr["capacity"] > 0:
            capacity = attr["capacity"]
            flow_network.set_edge_flow(key, capacity, tol)
            excess[u] -= capacity
            excess[v] += capacity

    potential: List[Cost] = [0] * size
    sources: Set[NodeID] = {node for node in range(size) if excess[node] > tol}
    sinks: Set[NodeID] = {node for node in range(size) if excess[node] < -tol}
    iterations = 0

    while sources and sinks:
        augmented = False
        for source in sorted(sources):
            dist, parents = _dijkstra_reduced(flow_network, source, potential, tol)
            reachable_sinks = [node for node in sinks if node in dist]
            if not reachable_sinks:
                continue
            if iterations >= limit:
                raise ConvergenceError(
                    f"Successive shortest paths did not converge within {limit} iterations."
                )

            sink = min(reachable_sinks, key=lambda node: (dist[node], node))
            sink_dist = dist[sink]
            for node in range(size):
                potential[node] += min(dist.get(node, sink_dist), sink_dist)

            path = _path_arcs(parents, source, sink)
            amount = min(
                excess[source], -excess[sink], min(arc.capacity for arc in path)
            )
            for arc in path:
                augment_arc(flow_network, arc, amount, tol)
            excess[source] -= amount
            excess[sink] += amount
            if excess[source] <= tol:
                sources.discard(source)
            if excess[sink] >= -tol:
                sinks.discard(sink)

            iterations += 1
            augmented = True
            logger.debug(
                f"Augmenting path #{iterations} {source} -> {sink}: "
                f"{len(path)} arcs, {amount} units"
            )
            break
        if not augmented:
            break

    if sources or sinks:
        remaining_supply = sum(excess[node] for node in sources)
        remaining_demand = -sum(excess[node] for node in sinks)
        raise InfeasibleFlowError(
            f"No feasible b-flow: {remaining_supply} units of supply and "
            f"{remaining_demand} units of demand cannot be routed."
        )

    cost = flow_network.total_cost()
    logger.debug(
        f"Successive shortest paths finished in {format_duration(perf_counter() - start)}: "
        f"cost {cost} after {iterations} augmentations"
    )
    return MinCostFlowResult(cost=cost, flow_network=flow_network, iterations=iterations)


def _dijkstra_reduced(
    network: FlowNetwork,
    src_node: NodeID,
    potential: List[Cost],
    tolerance: float,
) -> Tuple[Dict[NodeID, Cost], Dict[NodeID, ResidualArc]]:
    """Dijkstra over residual arcs weighted by reduced cost.

    Each node is expanded once. A distance only improves by more than
    ``tolerance``, so rounding noise in the potentials cannot re-queue nodes.

    Returns:
        A tuple of (dist, parents): reduced distance of every reachable node and
        the arc through which each node other than ``src_node`` was reached.
    """
    dist: Dict[NodeID, Cost] = {src_node: 0}
    parents: Dict[NodeID, ResidualArc] = {}
    settled: Set[NodeID] = set()
    min_pq: List[Tuple[Cost, NodeID]] = [(0, src_node)]

    while min_pq:
        current, node = heappop(min_pq)
        if node in settled:
            continue
        settled.add(node)
        for arc in iter_residual_arcs(network, node, tolerance):
            if arc.head in settled:
                continue
            # Reduced costs are non-negative; clamp float drift below zero.
            reduced = max(arc.weight + potential[node] - potential[arc.head], 0)
            candidate = current + reduced
            if arc.head not in dist or candidate < dist[arc.head] - tolerance:
                dist[arc.head] = candidate
                parents[arc.head] = arc
                heappush(min_pq, (candidate, arc.head))

    return dist, parents


def _path_arcs(
    parents: Dict[NodeID, ResidualArc], src_node: NodeID, dst_node: NodeID
) -> List[ResidualArc]:
    """Walk parent arcs back from ``dst_node`` and return them in travel order."""
    path: List[ResidualArc] = []
    node = dst_node
    while node != src_node:
        arc = parents[node]
        path.append(arc)
        node = arc.tail
    path.reverse()
    return path
