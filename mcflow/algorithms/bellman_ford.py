"""Bellman-Ford shortest paths with negative-cycle extraction.

Run on residual networks, the extracted cycle is exactly what cycle canceling
needs: a closed walk of residual edges whose weights sum below zero.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import List, Optional

from mcflow.config import SOLVER_CONFIG
from mcflow.exceptions import FlowInvariantError
from mcflow.graph.network import EdgeID, EdgeTuple, FlowNetwork, NodeID
from mcflow.types.base import Cost


@dataclass(frozen=True)
class BellmanFordResult:
    """Outcome of a Bellman-Ford run.

    Attributes:
        negative: True if a negative cycle was found.
        distances: Distance per node index (``math.inf`` if unreachable);
            empty when ``negative`` is True.
        cycle: Cycle nodes in travel order, first node repeated at the end;
            empty when ``negative`` is False.
        cycle_edges: Keys of the cycle's edges in travel order.
    """

    negative: bool
    distances: List[Cost] = field(default_factory=list)
    cycle: List[NodeID] = field(default_factory=list)
    cycle_edges: List[EdgeID] = field(default_factory=list)


def bellman_ford(
    network: FlowNetwork,
    src_node: Optional[NodeID] = None,
    *,
    tolerance: Optional[float] = None,
) -> BellmanFordResult:
    """Compute shortest distances or extract a negative cycle.

    Only edges with remaining capacity (``capacity - flow > tolerance``) take
    part, so on a residual network every usable residual edge is relaxed.
    Edges are relaxed ``|V| - 1`` times (stopping early once a pass changes
    nothing). If one more full pass still improves a distance, the predecessor
    chain of the last improved node is walked ``|V|`` steps back, which lands
    on a cycle, and the cycle is collected from there.

    Args:
        network: Network to search, typically a residual network.
        src_node: Start node. If None, every node starts at distance 0, which
            detects a negative cycle anywhere in the network.
        tolerance: An edge relaxes only if it improves a distance by more than
            this; defaults to the global config.

    Returns:
        BellmanFordResult: Distances, or the negative cycle.

    Raises:
        ValueError: If ``src_node`` is out of range.
        FlowInvariantError: If the predecessor chain does not close into a cycle.
    """
    tol = SOLVER_CONFIG.tolerance if tolerance is None else tolerance
    size = network.number_of_nodes()
    if src_node is None:
        distances: List[Cost] = [0] * size
    else:
        network.check_node(src_node)
        distances = [math.inf] * size
        distances[src_node] = 0

    edges = [
        edge
        for edge in network.get_edges().values()
        if edge[3]["capacity"] - edge[3]["flow"] > tol
    ]
    predecessors: List[Optional[EdgeTuple]] = [None] * size

    changed = True
    for _ in range(size - 1):
        changed = _relax_all(edges, distances, predecessors, tol) is not None
        if not changed:
            break

    if not changed:
        return BellmanFordResult(negative=False, distances=distances)

    last_relaxed = _relax_all(edges, distances, predecessors, tol)
    if last_relaxed is None:
        return BellmanFordResult(negative=False, distances=distances)

    cycle_edges = _extract_cycle(last_relaxed, predecessors, size)
    cycle = [cycle_edges[0][0]] + [v for _, v, _, _ in cycle_edges]
    return BellmanFordResult(
        negative=True,
        cycle=cycle,
        cycle_edges=[key for _, _, key, _ in cycle_edges],
    )


def _relax_all(
    edges: List[EdgeTuple],
    distances: List[Cost],
    predecessors: List[Optional[EdgeTuple]],
    tolerance: float,
) -> Optional[NodeID]:
    """Relax every edge once; return the last node whose distance improved."""
    last_relaxed: Optional[NodeID] = None
    for edge in edges:
        u, v, _, attr = edge
        if distances[u] == math.inf:
            continue
        candidate = distances[u] + attr["weight"]
        if candidate < distances[v] - tolerance:
            distances[v] = candidate
            predecessors[v] = edge
            last_relaxed = v
    return last_relaxed


def _extract_cycle(
    start: NodeID, predecessors: List[Optional[EdgeTuple]], size: int
) -> List[EdgeTuple]:
    """Return the predecessor cycle reached from ``start`` in travel order."""
    node = start
    for _ in range(size):
        edge = predecessors[node]
        if edge is None:
            raise FlowInvariantError(
                f"Predecessor chain from node {start} ends at node {node}."
            )
        node = edge[0]

    cycle_start = node
    cycle_edges: List[EdgeTuple] = []
    for _ in range(size):
        edge = predecessors[node]
        if edge is None:
            raise FlowInvariantError(
                f"Predecessor chain from node {cycle_start} ends at node {node}."
            )
        cycle_edges.append(edge)
        node = edge[0]
        if node == cycle_start:
            cycle_edges.reverse()
            return cycle_edges

    raise FlowInvariantError(
        f"Predecessor chain from node {cycle_start} does not close within {size} steps."
    )
