"""Small helpers shared by solvers and the CLI."""
