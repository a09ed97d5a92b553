"""Capacitated flow network with per-node balances.

`FlowNetwork` extends `networkx.MultiDiGraph` with a dense node index space
(``0..n-1``), a ``balance`` attribute on every node and edges that always carry
``weight``, ``capacity`` and ``flow``. Edge keys are unique monotonically
increasing integers, so an edge can be addressed by key alone.

`ResidualNetwork` is the edge variant produced by the residual view builder:
every residual edge additionally records the key of the edge it was derived
from (``origin``) and whether it cancels that edge's flow (``reverse``).
"""

from __future__ import annotations

from pickle import dumps, loads
from typing import Any, Dict, Hashable, Iterable, List, Optional, Sequence, Tuple

import networkx as nx

from mcflow.types.base import MIN_FLOW, Cost

NodeID = int
EdgeID = Hashable
AttrDict = Dict[str, Any]
EdgeTuple = Tuple[NodeID, NodeID, EdgeID, AttrDict]


class FlowNetwork(nx.MultiDiGraph):
    """A directed multigraph of capacitated, weighted edges with node balances.

    Rules enforced on top of ``networkx.MultiDiGraph``:
      - Nodes are the dense integers ``0..n-1`` and are added in order.
      - Adding an edge never creates nodes; both endpoints must exist.
      - Edges carry ``weight``, ``capacity >= 0`` and ``0 <= flow <= capacity``.
      - Each edge key is unique across the network.
      - ``copy()`` is a pickle-based deep copy; solvers mutate such copies only.
    """

    def __init__(
        self,
        size: int = 0,
        balances: Optional[Sequence[Cost]] = None,
        **attr: Any,
    ) -> None:
        """Create a network with ``size`` nodes.

        Args:
            size: Number of nodes; nodes are ``0..size-1``.
            balances: Optional per-node balances (supply > 0, demand < 0).
            **attr: Graph attributes forwarded to networkx.

        Raises:
            ValueError: If ``balances`` does not have exactly ``size`` entries.
        """
        super().__init__(**attr)
        self._edges: Dict[EdgeID, EdgeTuple] = {}
        self._next_edge_id: int = 0
        if balances is not None and len(balances) != size:
            raise ValueError(f"Expected {size} balances, got {len(balances)}.")
        for node in range(size):
            balance = balances[node] if balances is not None else 0
            self.add_node(node, balance=balance)

    @classmethod
    def from_edges(
        cls,
        size: int,
        edges: Iterable[Tuple[NodeID, NodeID, Cost, Cost]],
        balances: Optional[Sequence[Cost]] = None,
    ) -> FlowNetwork:
        """Build a network from ``(u, v, weight, capacity)`` tuples."""
        network = cls(size, balances)
        for u, v, weight, capacity in edges:
            network.add_edge(u, v, weight=weight, capacity=capacity)
        return network

    def new_edge_key(self, u: NodeID, v: NodeID, key: Optional[int] = None) -> int:  # type: ignore[override]
        """Return a new unique integer edge key."""
        next_edge_id = self._next_edge_id
        self._next_edge_id += 1
        return next_edge_id

    def copy(self, as_view: bool = False) -> FlowNetwork:  # type: ignore[override]
        """Return a deep copy of the network (a networkx view if ``as_view``)."""
        if as_view:
            return super().copy(as_view=True)  # type: ignore[return-value]
        return loads(dumps(self))

    #
    # Nodes
    #
    def add_node(self, node_for_adding: NodeID, balance: Cost = 0, **attr: Any) -> None:  # type: ignore[override]
        """Append the next node index with its balance.

        Raises:
            ValueError: If the node is not the next free index.
        """
        expected = self.number_of_nodes()
        if node_for_adding != expected or isinstance(node_for_adding, bool):
            raise ValueError(
                f"Nodes must be added in order; expected {expected}, got {node_for_adding!r}."
            )
        super().add_node(node_for_adding, balance=balance, **attr)

    def check_node(self, node: Any) -> NodeID:
        """Validate a node index and return it.

        Raises:
            ValueError: If ``node`` is not an index ``< number_of_nodes()``.
        """
        if isinstance(node, bool) or node not in self._node:
            raise ValueError(
                f"Node {node!r} is not in the network "
                f"(valid indices are 0..{self.number_of_nodes() - 1})."
            )
        return node

    def balance(self, node: NodeID) -> Cost:
        return self._node[self.check_node(node)]["balance"]

    def set_balance(self, node: NodeID, value: Cost) -> None:
        self._node[self.check_node(node)]["balance"] = value

    def has_balances(self, tolerance: float = MIN_FLOW) -> bool:
        """Return True if any node has a nonzero balance (a b-flow problem)."""
        return any(abs(data["balance"]) > tolerance for data in self._node.values())

    def total_supply(self) -> Cost:
        """Sum of positive balances."""
        return sum(d["balance"] for d in self._node.values() if d["balance"] > 0)

    def total_demand(self) -> Cost:
        """Sum of absolute negative balances."""
        return -sum(d["balance"] for d in self._node.values() if d["balance"] < 0)

    #
    # Edges
    #
    def add_edge(  # type: ignore[override]
        self,
        u_for_edge: NodeID,
        v_for_edge: NodeID,
        key: Optional[EdgeID] = None,
        *,
        weight: Cost,
        capacity: Cost,
        flow: Cost = 0,
        **attr: Any,
    ) -> EdgeID:
        """Add a directed edge and return its key.

        Args:
            u_for_edge: Tail node. Must exist.
            v_for_edge: Head node. Must exist.
            key: Optional unique key; generated when omitted.
            weight: Cost per unit of flow (may be negative).
            capacity: Upper bound on flow (non-negative).
            flow: Initial flow, within ``[0, capacity]``.
            **attr: Additional edge attributes.

        Returns:
            EdgeID: The key of the new edge.

        Raises:
            ValueError: If a node is missing, the key is taken, or the
                capacity/flow values are out of range.
        """
        self.check_node(u_for_edge)
        self.check_node(v_for_edge)
        if capacity < 0:
            raise ValueError(
                f"Edge {u_for_edge}->{v_for_edge} has negative capacity {capacity}."
            )
        if flow < 0 or flow > capacity:
            raise ValueError(
                f"Edge {u_for_edge}->{v_for_edge} flow {flow} is outside [0, {capacity}]."
            )

        if key is None:
            key = self.new_edge_key(u_for_edge, v_for_edge)
        else:
            if key in self._edges:
                raise ValueError(f"Edge with id '{key}' already exists.")
            if isinstance(key, int) and key >= self._next_edge_id:
                self._next_edge_id = key + 1

        super().add_edge(
            u_for_edge,
            v_for_edge,
            key=key,
            weight=weight,
            capacity=capacity,
            flow=flow,
            **attr,
        )
        self._edges[key] = (
            u_for_edge,
            v_for_edge,
            key,
            self._adj[u_for_edge][v_for_edge][key],
        )
        return key

    def remove_edge(self, u: NodeID, v: NodeID, key: Optional[EdgeID] = None) -> None:  # type: ignore[override]
        """Remove the edge ``key`` from u to v, or every u->v edge if no key is given.

        Raises:
            ValueError: If no matching edge exists.
        """
        keys = [key] if key is not None else self.edges_between(u, v)
        if not keys:
            raise ValueError(f"No edges from '{u}' to '{v}' to remove.")
        for k in keys:
            if k not in self._edges or self._edges[k][:2] != (u, v):
                raise ValueError(f"No edge with id='{k}' found from {u} to {v}.")
            del self._edges[k]
            super().remove_edge(u, v, key=k)

    def get_edges(self) -> Dict[EdgeID, EdgeTuple]:
        """Return all edges keyed by edge key as ``(u, v, key, attr)`` tuples."""
        return self._edges

    def edge_attr(self, key: EdgeID) -> AttrDict:
        """Return the attribute dictionary of edge ``key``.

        Raises:
            ValueError: If no edge with this key exists.
        """
        if key not in self._edges:
            raise ValueError(f"Edge with id='{key}' not found.")
        return self._edges[key][3]

    def out_edges_of(self, node: NodeID) -> List[EdgeTuple]:
        """Outgoing edges of ``node`` as ``(node, v, key, attr)`` tuples."""
        self.check_node(node)
        return [
            (node, v, key, attr)
            for v, keydict in self._adj[node].items()
            for key, attr in keydict.items()
        ]

    def in_edges_of(self, node: NodeID) -> List[EdgeTuple]:
        """Incoming edges of ``node`` as ``(u, node, key, attr)`` tuples."""
        self.check_node(node)
        return [
            (u, node, key, attr)
            for u, keydict in self._pred[node].items()
            for key, attr in keydict.items()
        ]

    def edges_between(self, u: NodeID, v: NodeID) -> List[EdgeID]:
        """List all edge keys from u to v (empty if none)."""
        if u not in self._adj or v not in self._adj[u]:
            return []
        return list(self._adj[u][v].keys())

    def find_edge(self, u: NodeID, v: NodeID) -> Optional[EdgeID]:
        """Return the key of the first u->v edge, or None."""
        keys = self.edges_between(u, v)
        return keys[0] if keys else None

    #
    # Flow bookkeeping
    #
    def edge_flow(self, key: EdgeID) -> Cost:
        return self.edge_attr(key)["flow"]

    def residual_capacity(self, key: EdgeID) -> Cost:
        """Remaining forward capacity ``capacity - flow`` of edge ``key``."""
        attr = self.edge_attr(key)
        return attr["capacity"] - attr["flow"]

    def set_edge_flow(self, key: EdgeID, value: Cost, tolerance: float = MIN_FLOW) -> None:
        """Set the flow on edge ``key``.

        Values within ``tolerance`` outside ``[0, capacity]`` are clamped to the
        bound, absorbing floating-point drift from repeated augmentation.

        Raises:
            ValueError: If the value lies further outside the bounds.
        """
        attr = self.edge_attr(key)
        capacity = attr["capacity"]
        if value < -tolerance or value > capacity + tolerance:
            u, v, _, _ = self._edges[key]
            raise ValueError(
                f"Flow {value} on edge {u}->{v} (key {key}) is outside [0, {capacity}]."
            )
        attr["flow"] = min(max(value, 0), capacity)

    def push_flow(self, key: EdgeID, amount: Cost, tolerance: float = MIN_FLOW) -> None:
        """Add ``amount`` (negative to cancel) to the flow on edge ``key``."""
        self.set_edge_flow(key, self.edge_flow(key) + amount, tolerance)

    def reset_flow(self) -> None:
        """Set the flow on every edge to zero."""
        for _, _, _, attr in self._edges.values():
            attr["flow"] = 0

    def imbalance(self, node: NodeID) -> Cost:
        """Return ``balance - outgoing flow + incoming flow`` for ``node``."""
        outgoing = sum(attr["flow"] for _, _, _, attr in self.out_edges_of(node))
        incoming = sum(attr["flow"] for _, _, _, attr in self.in_edges_of(node))
        return self.balance(node) - outgoing + incoming

    def unbalanced_nodes(self, tolerance: float = MIN_FLOW) -> List[NodeID]:
        """Nodes whose flow does not net out against their balance."""
        return [
            node for node in self._node if abs(self.imbalance(node)) > tolerance
        ]

    def total_cost(self) -> Cost:
        """Sum of ``flow * weight`` over edges carrying positive flow."""
        return sum(
            attr["flow"] * attr["weight"]
            for _, _, _, attr in self._edges.values()
            if attr["flow"] > 0
        )


class ResidualNetwork(FlowNetwork):
    """Network of residual edges derived from a `FlowNetwork`.

    Residual edges start with zero flow; their ``capacity`` is the residual
    amount. Each edge records ``origin`` (key of the source edge) and
    ``reverse`` (True when traversing it cancels flow on ``origin``).
    """

    def add_residual_edge(
        self,
        u: NodeID,
        v: NodeID,
        *,
        weight: Cost,
        capacity: Cost,
        origin: EdgeID,
        reverse: bool,
    ) -> EdgeID:
        return self.add_edge(
            u, v, weight=weight, capacity=capacity, origin=origin, reverse=reverse
        )
