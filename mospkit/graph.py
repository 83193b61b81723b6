"""Directed weighted graphs, shortest-path trees and edge-list file parsing."""

from __future__ import annotations

import math
import random
import re
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from pathlib import Path

UNREACHABLE = math.inf
"""Distance held by a vertex that the source cannot reach."""

_HEADER_RE = re.compile(r"#\s*Nodes:\s*([+-]?\d+)(?:\s*Edges:\s*([+-]?\d+))?")
_EDGE_RE = re.compile(r"\s*([+-]?\d+)(?!\d)\s*([+-]?\d+)")


@dataclass(frozen=True)
class Edge:
    """A directed edge from ``u`` to ``v`` carrying ``weight``."""

    u: int
    v: int
    weight: int


class Graph:
    """A directed graph over vertices ``0 .. num_vertices - 1``.

    Each vertex keeps its outgoing edges; the most recently added edge
    is visited first.
    """

    def __init__(self, num_vertices: int) -> None:
        if num_vertices < 0:
            raise ValueError(f"number of vertices must not be negative: {num_vertices}")
        self.num_vertices = num_vertices
        self.num_edges = 0
        self._adjacency: list[list[tuple[int, int]]] = [[] for _ in range(num_vertices)]

    def _check_vertex(self, vertex: int) -> None:
        if not 0 <= vertex < self.num_vertices:
            raise IndexError(f"vertex {vertex} out of range (0-{self.num_vertices - 1})")

    def add_edge(self, src: int, dest: int, weight: int) -> None:
        """Add the edge ``src -> dest`` with the given weight."""
        self._check_vertex(src)
        self._check_vertex(dest)
        self._adjacency[src].append((dest, weight))
        self.num_edges += 1

    def neighbors(self, u: int) -> Iterator[tuple[int, int]]:
        """Yield ``(dest, weight)`` for each edge leaving ``u``, newest first."""
        self._check_vertex(u)
        return reversed(self._adjacency[u])

    def reversed(self) -> Graph:
        """Return a new graph with every edge turned around."""
        result = Graph(self.num_vertices)
        for u in range(self.num_vertices):
            for dest, weight in self.neighbors(u):
                result.add_edge(dest, u, weight)
        return result

    def __repr__(self) -> str:
        return f"Graph(num_vertices={self.num_vertices}, num_edges={self.num_edges})"


@dataclass
class SOSPTree:
    """A single-objective shortest-path tree.

    ``parent[v]`` is ``None`` where ``v`` has no parent, and ``distance[v]``
    is ``UNREACHABLE`` where the source does not reach ``v``.
    """

    parent: list[int | None] = field(default_factory=list)
    distance: list[float] = field(default_factory=list)
    marked: list[bool] = field(default_factory=list)


def init_sosp_tree(n: int, source: int) -> SOSPTree:
    """Return a tree over ``n`` vertices where only ``source`` is reached."""
    if n < 0:
        raise ValueError(f"number of vertices must not be negative: {n}")
    if not 0 <= source < n:
        raise IndexError(f"source {source} out of range (0-{n - 1})")
    distance: list[float] = [UNREACHABLE] * n
    distance[source] = 0
    return SOSPTree(parent=[None] * n, distance=distance, marked=[False] * n)


def _parse_pair(line: str) -> tuple[int, int] | None:
    match = _EDGE_RE.match(line)
    if match is None:
        return None
    return int(match.group(1)), int(match.group(2))


def parse_graph(lines: Iterable[str], rng: random.Random | None = None) -> Graph:
    """Build a graph from edge-list lines, giving each edge a weight in 1..10.

    Leading lines starting with ``#`` are comments; one of the form
    ``# Nodes: N Edges: M`` fixes the vertex count. Without it, the count is
    one more than the largest vertex id in the data. Every line holding two
    integers draws a weight, and edges whose ends fall outside the graph are
    dropped.
    """
    rng = rng if rng is not None else random.Random()
    all_lines = list(lines)

    num_nodes = 0
    data_start = len(all_lines)
    for index, line in enumerate(all_lines):
        if not line.startswith("#"):
            data_start = index
            break
        if "Nodes:" in line and "Edges:" in line:
            header = _HEADER_RE.match(line)
            if header is not None:
                num_nodes = int(header.group(1))

    data = all_lines[data_start:]
    pairs = [pair for pair in map(_parse_pair, data) if pair is not None]

    if num_nodes == 0:
        max_node = max((max(u, v) for u, v in pairs), default=-1)
        num_nodes = max(max_node, -1) + 1

    graph = Graph(num_nodes)
    for u, v in pairs:
        weight = rng.randint(1, 10)
        if 0 <= u < num_nodes and 0 <= v < num_nodes:
            graph.add_edge(u, v, weight)
    return graph


def read_graph(path: str | Path, rng: random.Random | None = None) -> Graph:
    """Read an edge-list file into a graph; see :func:`parse_graph`."""
    with open(path, encoding="utf-8", errors="replace") as handle:
        return parse_graph(handle, rng)