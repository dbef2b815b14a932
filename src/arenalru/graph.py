"""Directed, weighted graph over an arena-indexed node table.

Node ids are arena handles; node 0 is created with the graph and is the
default root for traversals.
"""

from __future__ import annotations

import heapq
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from arenalru.arena import Arena
from arenalru.errors import GraphError, InvariantError

T = TypeVar("T")

Visitor = Callable[[int, Any], object]


@dataclass(slots=True)
class _Node(Generic[T]):
    data: T
    # (cost, to_id) in insertion order.
    edges: list[tuple[int, int]] = field(default_factory=list)


class Graph(Generic[T]):
    def __init__(self, root_data: T) -> None:
        self._arena = Arena()
        self.root = self._arena.create(None, _Node(root_data))

    def __len__(self) -> int:
        return len(self._arena)

    def __contains__(self, node_id: object) -> bool:
        return isinstance(node_id, int) and self._node(node_id) is not None

    def _node(self, node_id: int) -> _Node[T] | None:
        try:
            return self._arena.get_value(node_id)
        except InvariantError:
            return None

    def add_node(self, data: T) -> int:
        return self._arena.create(None, _Node(data))

    def add_edge(self, from_id: int, to_id: int, cost: int = 0) -> None:
        """Add a directed edge. Unknown endpoints are ignored; a negative cost raises GraphError."""

        if cost < 0:
            raise GraphError(f"negative edge cost {cost} from {from_id} to {to_id}")
        src = self._node(from_id)
        if src is None or self._node(to_id) is None:
            return
        src.edges.append((cost, to_id))

    def set_root(self, node_id: int) -> None:
        if self._node(node_id) is None:
            raise GraphError(f"unknown node id: {node_id}")
        self.root = node_id

    def data(self, node_id: int) -> T:
        node = self._node(node_id)
        if node is None:
            raise GraphError(f"unknown node id: {node_id}")
        return node.data

    def neighbors(self, node_id: int) -> list[int]:
        node = self._node(node_id)
        if node is None:
            raise GraphError(f"unknown node id: {node_id}")
        return [to_id for _, to_id in node.edges]

    def bfs_visit(self, callback: Visitor) -> None:
        """Call ``callback(node_id, data)`` for each node reachable from the root, breadth first."""

        pending: deque[int] = deque([self.root])
        explored: set[int] = set()
        while pending:
            node_id = pending.popleft()
            if node_id in explored:
                continue
            explored.add(node_id)
            node = self._arena.get_value(node_id)
            callback(node_id, node.data)
            for _, to_id in node.edges:
                if to_id not in explored:
                    pending.append(to_id)

    def dfs_visit(self, callback: Visitor) -> None:
        """Depth-first counterpart of :meth:`bfs_visit`; the last edge added is explored first."""

        pending = [self.root]
        explored: set[int] = set()
        while pending:
            node_id = pending.pop()
            if node_id in explored:
                continue
            explored.add(node_id)
            node = self._arena.get_value(node_id)
            callback(node_id, node.data)
            for _, to_id in node.edges:
                if to_id not in explored:
                    pending.append(to_id)

    def shortest_path(self, start: int, end: int) -> list[int]:
        """Dijkstra. Returns node ids from ``start`` to ``end``, or [] if unreachable."""

        if self._node(start) is None or self._node(end) is None:
            return []

        dist: dict[int, int] = {start: 0}
        prev: dict[int, int] = {}
        done: set[int] = set()
        heap: list[tuple[int, int]] = [(0, start)]

        while heap:
            cost, node_id = heapq.heappop(heap)
            if node_id in done:
                continue
            done.add(node_id)
            if node_id == end:
                break
            for edge_cost, to_id in self._arena.get_value(node_id).edges:
                if to_id in done:
                    continue
                alt = cost + edge_cost
                if alt < dist.get(to_id, alt + 1):
                    dist[to_id] = alt
                    prev[to_id] = node_id
                    heapq.heappush(heap, (alt, to_id))

        if end not in done:
            return []

        path = [end]
        while path[-1] != start:
            path.append(prev[path[-1]])
        path.reverse()
        return path
