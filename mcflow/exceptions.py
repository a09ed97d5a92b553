"""Exceptions raised by the flow solvers."""


class FlowError(Exception):
    """Base class for flow computation failures."""


class InfeasibleFlowError(FlowError, ValueError):
    """The stated supplies and demands cannot be met under the capacities."""


class FlowInvariantError(FlowError, RuntimeError):
    """An internal invariant was violated (e.g., an unclosed predecessor cycle)."""


class ConvergenceError(FlowError, RuntimeError):
    """An iterative solver exceeded its iteration limit."""
