"""Minimum-cost b-flow entry point dispatching to a solver strategy."""

from __future__ import annotations

from typing import Any, Union

from mcflow.algorithms.cycle_canceling import min_cost_flow_cycle_canceling
from mcflow.algorithms.ssp import min_cost_flow_ssp
from mcflow.graph.network import FlowNetwork
from mcflow.types.base import MinCostMethod
from mcflow.types.dto import MinCostFlowResult


def calc_min_cost_flow(
    network: FlowNetwork,
    method: Union[MinCostMethod, str] = MinCostMethod.SUCCESSIVE_SHORTEST_PATH,
    **kwargs: Any,
) -> MinCostFlowResult:
    """Compute a minimum-cost b-flow with the selected strategy.

    Args:
        network: Balance-bearing network; left unmodified.
        method: A ``MinCostMethod`` or its name (see ``MinCostMethod.from_string``).
        **kwargs: ``tolerance`` and ``max_iterations``, passed to the solver.

    Returns:
        MinCostFlowResult: Result of the selected solver.
    """
    if isinstance(method, str):
        method = MinCostMethod.from_string(method)
    if method == MinCostMethod.CYCLE_CANCELING:
        return min_cost_flow_cycle_canceling(network, **kwargs)
    return min_cost_flow_ssp(network, **kwargs)
