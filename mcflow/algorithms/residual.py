"""Residual network construction and residual-arc traversal.

`build_residual_network` materializes a disposable `ResidualNetwork` from a
flow-bearing network. `iter_residual_arcs` walks the same residual structure
lazily on the flow network itself, which is what the augmenting-path solvers
use between flow updates.
"""

from __future__ import annotations

from typing import Iterator, NamedTuple, Optional

from mcflow.config import SOLVER_CONFIG
from mcflow.graph.network import EdgeID, FlowNetwork, NodeID, ResidualNetwork
from mcflow.types.base import Cost


class ResidualArc(NamedTuple):
    """A residual arc over an edge of a flow network.

    Attributes:
        tail: Node the arc leaves.
        head: Node the arc enters.
        key: Key of the underlying network edge.
        reverse: True if the arc runs against the edge (cancels its flow).
        capacity: Residual capacity of the arc.
        weight: Edge weight, negated for reverse arcs.
    """

    tail: NodeID
    head: NodeID
    key: EdgeID
    reverse: bool
    capacity: Cost
    weight: Cost


def iter_residual_arcs(
    network: FlowNetwork, node: NodeID, tolerance: Optional[float] = None
) -> Iterator[ResidualArc]:
    """Yield the residual arcs leaving ``node``.

    Forward arcs come from outgoing edges with ``capacity - flow > tolerance``;
    reverse arcs come from incoming edges with ``flow > tolerance``.
    """
    tol = SOLVER_CONFIG.tolerance if tolerance is None else tolerance
    for _, v, key, attr in network.out_edges_of(node):
        remaining = attr["capacity"] - attr["flow"]
        if remaining > tol:
            yield ResidualArc(node, v, key, False, remaining, attr["weight"])
    for u, _, key, attr in network.in_edges_of(node):
        if attr["flow"] > tol:
            yield ResidualArc(node, u, key, True, attr["flow"], -attr["weight"])


def augment_arc(
    network: FlowNetwork,
    arc: ResidualArc,
    amount: Cost,
    tolerance: Optional[float] = None,
) -> None:
    """Push ``amount`` along ``arc``: add flow forward, cancel flow in reverse."""
    tol = SOLVER_CONFIG.tolerance if tolerance is None else tolerance
    network.push_flow(arc.key, -amount if arc.reverse else amount, tol)


def build_residual_network(
    network: FlowNetwork, tolerance: Optional[float] = None
) -> ResidualNetwork:
    """Build the residual network of a flow-bearing network.

    For every edge ``(u, v)`` with weight ``w``:
      - ``capacity - flow > tolerance`` yields a forward residual edge
        ``(u, v)`` with that capacity and weight ``w``;
      - ``flow > tolerance`` yields a reverse residual edge ``(v, u)`` with
        capacity ``flow`` and weight ``-w``.

    Residual edges with no capacity are omitted. Each residual edge records the
    key of the edge it was derived from (``origin``), so parallel and
    antiparallel edges never merge. The input network is not modified.

    Args:
        network: Network carrying a flow assignment.
        tolerance: Capacity threshold; defaults to ``SOLVER_CONFIG.tolerance``.

    Returns:
        ResidualNetwork: A new network over the same node indices.
    """
    tol = SOLVER_CONFIG.tolerance if tolerance is None else tolerance
    residual = ResidualNetwork(network.number_of_nodes())
    for u, v, key, attr in network.get_edges().values():
        remaining = attr["capacity"] - attr["flow"]
        if remaining > tol:
            residual.add_residual_edge(
                u, v, weight=attr["weight"], capacity=remaining, origin=key, reverse=False
            )
        if attr["flow"] > tol:
            residual.add_residual_edge(
                v, u, weight=-attr["weight"], capacity=attr["flow"], origin=key, reverse=True
            )
    return residual
