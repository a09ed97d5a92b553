"""Flow algorithms: residual networks, max flow and minimum-cost b-flow."""
