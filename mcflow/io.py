"""Reading networks from the line-oriented graph text format.

Format::

    <node count>
    <balance of node 0>        # only for balanced (b-flow) files,
    ...                        # one line per node
    <from> <to> <weight> [<capacity>]
    ...

Columns are separated by tabs (any whitespace is accepted). When the capacity
column is absent, the third column serves as both weight and capacity, which
is how plain max-flow files store edge capacities.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Iterator, List, Tuple, Union

from mcflow.graph.network import FlowNetwork
from mcflow.logging import get_logger
from mcflow.types.base import Cost

logger = get_logger(__name__)


def _parse_number(token: str) -> Cost:
    """Parse an integer when possible, otherwise a float."""
    try:
        return int(token)
    except ValueError:
        return float(token)


def _numbered_lines(lines: Iterable[str]) -> Iterator[Tuple[int, str]]:
    for lineno, line in enumerate(lines, start=1):
        stripped = line.strip()
        if stripped:
            yield lineno, stripped


def read_network(
    lines: Iterable[str],
    *,
    balanced: bool = False,
    directed: bool = True,
) -> FlowNetwork:
    """Build a `FlowNetwork` from lines of the graph text format.

    Args:
        lines: Text lines; blank lines are skipped.
        balanced: If True, the node count is followed by one balance per node.
        directed: If False, each edge is added in both directions with equal
            weight and capacity.

    Returns:
        FlowNetwork: The parsed network.

    Raises:
        ValueError: On a missing header, missing balances, or a malformed edge
            line (the message names the line number).
    """
    rows = _numbered_lines(lines)
    try:
        lineno, header = next(rows)
    except StopIteration:
        raise ValueError("Graph description is empty.") from None
    try:
        size = int(header)
    except ValueError:
        raise ValueError(f"Line {lineno}: expected node count, got '{header}'.") from None

    balances: List[Cost] = []
    if balanced:
        for _ in range(size):
            try:
                lineno, text = next(rows)
            except StopIteration:
                raise ValueError(
                    f"Expected {size} balances, found {len(balances)}."
                ) from None
            try:
                balances.append(_parse_number(text))
            except ValueError:
                raise ValueError(f"Line {lineno}: invalid balance '{text}'.") from None

    network = FlowNetwork(size, balances if balanced else None)
    for lineno, text in rows:
        tokens = text.split()
        if len(tokens) not in (3, 4):
            raise ValueError(
                f"Line {lineno}: expected 'from to weight [capacity]', got '{text}'."
            )
        try:
            u, v = int(tokens[0]), int(tokens[1])
            weight = _parse_number(tokens[2])
            capacity = _parse_number(tokens[3]) if len(tokens) == 4 else weight
            network.add_edge(u, v, weight=weight, capacity=capacity)
            if not directed:
                network.add_edge(v, u, weight=weight, capacity=capacity)
        except ValueError as e:
            raise ValueError(f"Line {lineno}: {e}") from e

    logger.debug(
        f"Read network with {network.number_of_nodes()} nodes and "
        f"{network.number_of_edges()} edges"
    )
    return network


def load_network(
    path: Union[str, Path],
    *,
    balanced: bool = False,
    directed: bool = True,
) -> FlowNetwork:
    """Read a `FlowNetwork` from a graph text file (see `read_network`)."""
    text = Path(path).read_text(encoding="utf-8")
    return read_network(text.splitlines(), balanced=balanced, directed=directed)
