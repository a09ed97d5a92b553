"""Configuration classes for mcflow solvers."""

from dataclasses import dataclass
from typing import Optional

from mcflow.types.base import MIN_FLOW


@dataclass
class SolverConfig:
    """Numeric tolerance and termination bounds for the flow solvers."""

    # Residual capacities, flows and excesses at or below this are zero
    tolerance: float = MIN_FLOW

    # Explicit cap on cancelled cycles / augmenting paths; None derives one
    max_iterations: Optional[int] = None

    # Derived cap: iteration_factor * (nodes + edges + 1), at least min_iterations
    iteration_factor: int = 1000
    min_iterations: int = 10_000

    def iteration_limit(self, num_nodes: int, num_edges: int) -> int:
        """Return the iteration cap for a network of the given size."""
        if self.max_iterations is not None:
            return self.max_iterations
        derived = self.iteration_factor * (num_nodes + num_edges + 1)
        return max(self.min_iterations, derived)


# Global configuration instance
SOLVER_CONFIG = SolverConfig()
