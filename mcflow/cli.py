"""Command-line interface for mcflow."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from time import perf_counter
from typing import List, Optional

from mcflow.algorithms.max_flow import calc_max_flow, min_cut
from mcflow.algorithms.min_cost_flow import calc_min_cost_flow
from mcflow.exceptions import FlowError
from mcflow.io import load_network
from mcflow.logging import get_logger, level_for_flags, set_global_log_level
from mcflow.types.base import Cost, MinCostMethod
from mcflow.utils.timing import format_duration

logger = get_logger(__name__)


def _format_cost(value: Cost) -> str:
    """Return a number with thousands separators and up to three decimals.

    Examples:
        0.1 -> "0.1"; 10.0 -> "10"; 1234.567 -> "1,234.567".
    """
    s = f"{float(value):,.3f}"
    if "." in s:
        s = s.rstrip("0").rstrip(".")
    return s


def _run_max_flow(
    path: Path, source: int, sink: int, balanced: bool, directed: bool, show_cut: bool
) -> None:
    """Load a network, compute a max flow and print it."""
    logger.info(f"Loading network from: {path}")
    start = perf_counter()
    try:
        network = load_network(path, balanced=balanced, directed=directed)
        result = calc_max_flow(network, source, sink)
    except FileNotFoundError:
        print(f"ERROR: Graph file not found: {path}")
        sys.exit(1)
    except (FlowError, ValueError) as e:
        logger.error(f"Max flow failed: {e}")
        print("ERROR: Max flow failed")
        print(f"  {type(e).__name__}: {e}")
        sys.exit(1)

    elapsed = perf_counter() - start
    print(f"Max flow {source} -> {sink}: {_format_cost(result.max_flow)}")
    if show_cut:
        cut = min_cut(result.flow_network, source)
        print(f"Min cut ({len(cut)} edges):")
        for u, v, _key in cut:
            print(f"   {u} -> {v}")
    logger.info(f"Max flow computed in {format_duration(elapsed)}")


def _run_min_cost(path: Path, method: MinCostMethod, directed: bool) -> None:
    """Load a balanced network, compute a minimum-cost b-flow and print its cost."""
    logger.info(f"Loading network from: {path}")
    start = perf_counter()
    try:
        network = load_network(path, balanced=True, directed=directed)
        result = calc_min_cost_flow(network, method)
    except FileNotFoundError:
        print(f"ERROR: Graph file not found: {path}")
        sys.exit(1)
    except (FlowError, ValueError) as e:
        logger.error(f"Minimum-cost flow failed: {e}")
        print("ERROR: Minimum-cost flow failed")
        print(f"  {type(e).__name__}: {e}")
        sys.exit(1)

    elapsed = perf_counter() - start
    print(f"Minimum cost ({method.name.lower()}): {_format_cost(result.cost)}")
    logger.info(
        f"Minimum-cost flow computed in {format_duration(elapsed)} "
        f"({result.iterations} iterations)"
    )


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the ``mcflow`` command.

    Args:
        argv: Optional list of command-line arguments. If ``None``, ``sys.argv``
            is used.
    """
    parser = argparse.ArgumentParser(
        prog="mcflow",
        description="Compute maximum flows and minimum-cost flows on graph files.",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable debug logging"
    )
    parser.add_argument(
        "--quiet", action="store_true", help="Only log warnings and errors"
    )

    subparsers = parser.add_subparsers(
        dest="command",
        required=True,
        title="Available commands",
        metavar="{maxflow,mincost}",
        help="Available commands",
    )

    maxflow_parser = subparsers.add_parser(
        "maxflow", help="Maximum flow between two nodes (Edmonds-Karp)"
    )
    maxflow_parser.add_argument("graph", type=Path, help="Path to graph text file")
    maxflow_parser.add_argument(
        "--source", "-s", type=int, required=True, help="Source node index"
    )
    maxflow_parser.add_argument(
        "--sink", "-t", type=int, required=True, help="Sink node index"
    )
    maxflow_parser.add_argument(
        "--balanced",
        action="store_true",
        help="Graph file lists one balance per node after the node count",
    )
    maxflow_parser.add_argument(
        "--min-cut", action="store_true", help="Also print the minimum cut edges"
    )

    mincost_parser = subparsers.add_parser(
        "mincost", help="Minimum-cost b-flow on a balanced graph file"
    )
    mincost_parser.add_argument("graph", type=Path, help="Path to graph text file")
    mincost_parser.add_argument(
        "--method",
        "-m",
        default="successive_shortest_path",
        help="cycle_canceling or successive_shortest_path (default)",
    )

    for p in (maxflow_parser, mincost_parser):
        p.add_argument(
            "--undirected",
            action="store_true",
            help="Add every edge in both directions",
        )

    effective_args = sys.argv[1:] if argv is None else argv
    if not effective_args:
        parser.print_help()
        raise SystemExit(0)

    args = parser.parse_args(effective_args)

    set_global_log_level(level_for_flags(args.verbose, args.quiet))
    logger.debug("Debug logging enabled")

    if args.command == "maxflow":
        _run_max_flow(
            path=args.graph,
            source=args.source,
            sink=args.sink,
            balanced=args.balanced,
            directed=not args.undirected,
            show_cut=args.min_cut,
        )
    elif args.command == "mincost":
        try:
            method = MinCostMethod.from_string(args.method)
        except ValueError as e:
            parser.error(str(e))
        _run_min_cost(args.graph, method, directed=not args.undirected)


if __name__ == "__main__":
    main()
