"""Base aliases, thresholds and enums shared by the flow algorithms."""

from __future__ import annotations

from enum import IntEnum
from typing import Union

#: Numeric cost, capacity or flow amount (integer inputs stay exact).
Cost = Union[int, float]

#: Capacity threshold below which residual capacity is treated as exhausted.
MIN_CAP = 2**-12

#: Flow threshold below which flow and excess values are treated as zero.
MIN_FLOW = 2**-12


class MinCostMethod(IntEnum):
    """Strategies for computing a minimum-cost b-flow."""

    #: Feasible flow via super terminals, then cancel negative residual cycles.
    CYCLE_CANCELING = 1
    #: Augment along reduced-cost shortest paths from excess to deficit nodes.
    SUCCESSIVE_SHORTEST_PATH = 2

    @classmethod
    def from_string(cls, value: str) -> "MinCostMethod":
        """Parse a string into a MinCostMethod enum value.

        Args:
            value: Case-insensitive name; dashes are accepted in place of
                underscores (e.g., "cycle-canceling", "SUCCESSIVE_SHORTEST_PATH").
                The short alias "ssp" is accepted as well.

        Returns:
            The corresponding MinCostMethod member.

        Raises:
            ValueError: If the string doesn't match any member.
        """
        normalized = value.strip().upper().replace("-", "_")
        if normalized == "SSP":
            return cls.SUCCESSIVE_SHORTEST_PATH
        try:
            return cls[normalized]
        except KeyError:
            valid = ", ".join(e.name.lower() for e in cls)
            raise ValueError(
                f"Invalid min-cost method '{value}'. Valid values are: {valid}"
            ) from None
