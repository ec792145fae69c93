"""Dependency graph for service ordering.

This module provides the DependencyGraph class that records which services
depend on which, detects cycles and computes a deterministic topological
order.
"""

from __future__ import annotations

import heapq
from collections.abc import Iterable
from enum import Enum, auto
from graphlib import CycleError, TopologicalSorter

from pidea_core.errors import CyclicGraphError
from pidea_core.services.lifecycle import ServiceDefinition


class _VisitState(Enum):
    UNVISITED = auto()
    IN_PROGRESS = auto()
    DONE = auto()


class DependencyGraph:
    """Directed graph over service names.

    Edges point from a dependent service to the service it depends on. The
    graph may hold a cycle; ``detect_cycles()`` and ``topological_order()``
    are the explicit validation steps.
    """

    def __init__(self) -> None:
        """Initialise an empty graph."""
        self._graph: dict[str, set[str]] = {}
        self._reverse_graph: dict[str, set[str]] = {}

    @classmethod
    def from_definitions(
        cls, definitions: Iterable[ServiceDefinition]
    ) -> DependencyGraph:
        """Build a graph with one node per definition and one edge per dependency.

        Args:
            definitions: Service definitions to read names and dependencies from.

        Returns:
            The populated graph.

        """
        graph = cls()
        for definition in definitions:
            graph.add_node(definition.name)
            for dependency in definition.dependencies:
                graph.add_edge(definition.name, dependency)
        return graph

    def add_node(self, name: str) -> None:
        """Add a node with no edges. Adding an existing node is a no-op."""
        self._graph.setdefault(name, set())
        self._reverse_graph.setdefault(name, set())

    def add_edge(self, from_node: str, to_node: str) -> None:
        """Record that ``from_node`` depends on ``to_node``.

        Missing nodes are added implicitly; duplicate edges are ignored.
        """
        self.add_node(from_node)
        self.add_node(to_node)
        self._graph[from_node].add(to_node)
        self._reverse_graph[to_node].add(from_node)

    @property
    def nodes(self) -> tuple[str, ...]:
        """All node names, sorted."""
        return tuple(sorted(self._graph))

    def __contains__(self, name: object) -> bool:
        return name in self._graph

    def __len__(self) -> int:
        return len(self._graph)

    def get_dependencies(self, name: str) -> set[str]:
        """Get the nodes that ``name`` depends on."""
        return set(self._graph.get(name, set()))

    def get_dependents(self, name: str) -> set[str]:
        """Get the nodes that depend on ``name``."""
        return set(self._reverse_graph.get(name, set()))

    def detect_cycles(self) -> list[str] | None:
        """Find a cycle using depth-first search with three-state marking.

        Nodes and their dependencies are visited in lexicographic order, so
        the same graph always reports the same cycle.

        Returns:
            The cycle path with its first node repeated at the end
            (e.g. ``["X", "Y", "X"]``), or None if the graph is acyclic.

        """
        state = dict.fromkeys(self._graph, _VisitState.UNVISITED)

        for root in sorted(self._graph):
            if state[root] is not _VisitState.UNVISITED:
                continue

            path = [root]
            state[root] = _VisitState.IN_PROGRESS
            stack = [iter(sorted(self._graph[root]))]

            while stack:
                for neighbour in stack[-1]:
                    if state[neighbour] is _VisitState.IN_PROGRESS:
                        # Back-edge: the cycle is the path suffix starting at neighbour
                        start = path.index(neighbour)
                        return [*path[start:], neighbour]
                    if state[neighbour] is _VisitState.UNVISITED:
                        state[neighbour] = _VisitState.IN_PROGRESS
                        path.append(neighbour)
                        stack.append(iter(sorted(self._graph[neighbour])))
                        break
                else:
                    state[path.pop()] = _VisitState.DONE
                    stack.pop()

        return None

    def topological_order(self) -> list[str]:
        """Order nodes so that every node follows all of its dependencies.

        When several nodes are ready at once, the lexicographically smallest
        is placed first.

        Returns:
            Node names in dependency order.

        Raises:
            CyclicGraphError: If the graph contains a cycle.

        """
        sorter: TopologicalSorter[str] = TopologicalSorter(self._graph)
        try:
            sorter.prepare()
        except CycleError as e:
            cycle = self.detect_cycles() or list(e.args[1])
            raise CyclicGraphError(cycle) from e

        ready = list(sorter.get_ready())
        heapq.heapify(ready)
        order: list[str] = []

        while ready:
            node = heapq.heappop(ready)
            order.append(node)
            sorter.done(node)
            for released in sorter.get_ready():
                heapq.heappush(ready, released)

        return order

    def max_depth(self) -> int:
        """Get the length, in edges, of the longest dependency chain.

        Raises:
            CyclicGraphError: If the graph contains a cycle.

        """
        depths: dict[str, int] = {}
        for node in self.topological_order():
            depths[node] = max(
                (depths[dep] + 1 for dep in self._graph[node]), default=0
            )
        return max(depths.values(), default=0)
