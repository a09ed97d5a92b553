"""Result containers returned by the flow solvers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from mcflow.types.base import Cost

if TYPE_CHECKING:
    from mcflow.graph.network import FlowNetwork


@dataclass(frozen=True)
class MaxFlowResult:
    """Result of a source/sink max-flow computation.

    Attributes:
        max_flow: Total flow value pushed from source to sink.
        flow_network: Copy of the input network carrying the computed flow.
    """

    max_flow: Cost
    flow_network: "FlowNetwork"


@dataclass(frozen=True)
class MinCostFlowResult:
    """Result of a minimum-cost b-flow computation.

    Attributes:
        cost: Total cost, ``sum(flow * weight)`` over edges with positive flow.
        flow_network: Copy of the input network carrying the optimal flow. Node
            balances are the original ones, so ``imbalance()`` is zero everywhere.
        iterations: Number of cancelled cycles or augmenting paths.
    """

    cost: Cost
    flow_network: "FlowNetwork"
    iterations: int = 0
