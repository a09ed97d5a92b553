"""Maximum-flow computation via shortest augmenting paths (Edmonds-Karp).

Each iteration runs a breadth-first search over the residual arcs of the
working network, so every augmenting path has the fewest possible hops and
the number of augmentations is polynomial in the network size.
"""

from __future__ import annotations

from collections import deque
from time import perf_counter
from typing import Dict, List, Optional, Set, Tuple

from mcflow.algorithms.residual import ResidualArc, augment_arc, iter_residual_arcs
from mcflow.config import SOLVER_CONFIG
from mcflow.exceptions import FlowInvariantError, InfeasibleFlowError
from mcflow.graph.network import EdgeID, FlowNetwork, NodeID
from mcflow.logging import get_logger
from mcflow.types.base import Cost
from mcflow.types.dto import MaxFlowResult
from mcflow.utils.timing import format_duration

logger = get_logger(__name__)


def calc_max_flow(
    network: FlowNetwork,
    src_node: NodeID,
    dst_node: NodeID,
    *,
    tolerance: Optional[float] = None,
) -> MaxFlowResult:
    """Compute a maximum flow from ``src_node`` to ``dst_node``.

    The input network is copied; flow already present on the copy is kept and
    extended. Augmentation adds flow on forward arcs and cancels flow on
    reverse arcs, so every edge stays within ``[0, capacity]``.

    When the network carries balances (a b-flow problem reduced to a single
    source and sink), augmentation stops once the source's supply is sent,
    and the result is checked for feasibility: the source and sink balances
    must cancel and every node must satisfy
    ``balance - outgoing flow + incoming flow == 0``.

    Args:
        network: Network with ``weight``/``capacity``/``flow`` on every edge.
        src_node: Source node index.
        dst_node: Sink node index.
        tolerance: Residual capacity threshold; defaults to the global config.

    Returns:
        MaxFlowResult: Flow value added and the flow-bearing network copy.

    Raises:
        ValueError: If either node index is out of range.
        InfeasibleFlowError: If balances exist and the flow does not satisfy them.

    Examples:
        >>> net = FlowNetwork(3)
        >>> net.add_edge(0, 1, weight=1, capacity=10)
        0
        >>> net.add_edge(1, 2, weight=1, capacity=5)
        1
        >>> calc_max_flow(net, 0, 2).max_flow
        5
    """
    network.check_node(src_node)
    network.check_node(dst_node)
    tol = SOLVER_CONFIG.tolerance if tolerance is None else tolerance

    start = perf_counter()
    flow_network = network.copy()
    max_flow: Cost = 0
    augmentations = 0

    # A balanced source only has its remaining supply to send.
    balanced = flow_network.has_balances(tol)
    supply_left = flow_network.imbalance(src_node) if balanced else None

    # Degenerate case: flow from a node to itself is always zero.
    if src_node != dst_node:
        while supply_left is None or supply_left - max_flow > tol:
            parents = _bfs_parents(flow_network, src_node, dst_node, tol)
            if dst_node not in parents:
                break
            path = _path_arcs(parents, src_node, dst_node)
            path_flow = min(arc.capacity for arc in path)
            if supply_left is not None:
                path_flow = min(path_flow, supply_left - max_flow)
            for arc in path:
                augment_arc(flow_network, arc, path_flow, tol)
            max_flow += path_flow
            augmentations += 1
            logger.debug(
                f"Augmenting path #{augmentations}: {len(path)} arcs, {path_flow} units"
            )

    if balanced:
        _check_b_flow(flow_network, src_node, dst_node, max_flow, tol)

    logger.debug(
        f"Edmonds-Karp finished in {format_duration(perf_counter() - start)}: "
        f"flow {max_flow} after {augmentations} augmentations"
    )
    return MaxFlowResult(max_flow=max_flow, flow_network=flow_network)


def _bfs_parents(
    network: FlowNetwork, src_node: NodeID, dst_node: NodeID, tolerance: float
) -> Dict[NodeID, Optional[ResidualArc]]:
    """Breadth-first search over residual arcs, stopping once the sink is reached."""
    parents: Dict[NodeID, Optional[ResidualArc]] = {src_node: None}
    queue = deque([src_node])
    while queue:
        node = queue.popleft()
        for arc in iter_residual_arcs(network, node, tolerance):
            if arc.head in parents:
                continue
            parents[arc.head] = arc
            if arc.head == dst_node:
                return parents
            queue.append(arc.head)
    return parents


def _path_arcs(
    parents: Dict[NodeID, Optional[ResidualArc]], src_node: NodeID, dst_node: NodeID
) -> List[ResidualArc]:
    """Walk parent arcs back from the sink and return the path in travel order."""
    path: List[ResidualArc] = []
    node = dst_node
    while node != src_node:
        arc = parents[node]
        if arc is None:
            raise FlowInvariantError(
                f"Parent chain from node {dst_node} ends at node {node} before the source."
            )
        path.append(arc)
        node = arc.tail
    path.reverse()
    return path


def _check_b_flow(
    network: FlowNetwork,
    src_node: NodeID,
    dst_node: NodeID,
    max_flow: Cost,
    tolerance: float,
) -> None:
    """Raise if the computed flow does not exhaust every supply and demand."""
    src_balance = network.balance(src_node)
    dst_balance = network.balance(dst_node)
    if abs(src_balance + dst_balance) > tolerance:
        raise InfeasibleFlowError(
            f"Source balance {src_balance} and sink balance {dst_balance} do not cancel."
        )
    unbalanced = network.unbalanced_nodes(tolerance)
    if unbalanced:
        raise InfeasibleFlowError(
            f"No feasible b-flow: max flow {max_flow} leaves {len(unbalanced)} "
            f"node(s) unbalanced, e.g. node {unbalanced[0]} with imbalance "
            f"{network.imbalance(unbalanced[0])}."
        )


def residual_reachable(
    network: FlowNetwork, src_node: NodeID, tolerance: Optional[float] = None
) -> Set[NodeID]:
    """Nodes reachable from ``src_node`` through residual arcs."""
    network.check_node(src_node)
    tol = SOLVER_CONFIG.tolerance if tolerance is None else tolerance
    return set(_bfs_parents(network, src_node, -1, tol))


def min_cut(
    flow_network: FlowNetwork, src_node: NodeID, tolerance: Optional[float] = None
) -> List[Tuple[NodeID, NodeID, EdgeID]]:
    """Return the saturated edges crossing the source side of a minimum cut.

    After a maximum flow, the nodes reachable from the source in the residual
    network form the source side; every edge leaving that set is saturated and
    their capacities sum to the flow value.

    Args:
        flow_network: Network carrying a maximum flow (e.g., from ``calc_max_flow``).
        src_node: The source node of that flow.
        tolerance: Residual capacity threshold; defaults to the global config.

    Returns:
        List of ``(u, v, key)`` edges from the source side to the sink side.
    """
    reachable = residual_reachable(flow_network, src_node, tolerance)
    return [
        (u, v, key)
        for u, v, key, _ in flow_network.get_edges().values()
        if u in reachable and v not in reachable
    ]
