"""Single-objective shortest paths: initial computation and incremental update."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from .graph import UNREACHABLE, Edge, Graph, SOSPTree, init_sosp_tree

logger = logging.getLogger(__name__)

_PROGRESS_EVERY = 100


def _check_source(graph: Graph, source: int) -> None:
    if not 0 <= source < graph.num_vertices:
        raise IndexError(
            f"source {source} out of range (0-{graph.num_vertices - 1})"
        )


def _check_tree(graph: Graph, tree: SOSPTree) -> None:
    n = graph.num_vertices
    sizes = (len(tree.parent), len(tree.distance), len(tree.marked))
    if any(size != n for size in sizes):
        raise ValueError(
            f"tree covers {sizes} vertices but the graph has {n}"
        )


def compute_initial_sosp(graph: Graph, tree: SOSPTree, source: int) -> SOSPTree:
    """Fill ``tree`` with shortest paths from ``source`` (Bellman-Ford).

    Distances and parents are reset first; relaxation runs at most
    ``num_vertices - 1`` rounds and stops early once a round changes nothing.
    The tree is updated in place and returned.
    """
    _check_source(graph, source)
    _check_tree(graph, tree)
    n = graph.num_vertices
    distance = tree.distance
    parent = tree.parent

    distance[:] = [UNREACHABLE] * n
    distance[source] = 0
    parent[:] = [None] * n

    for iteration in range(1, n):
        any_update = False
        for u in range(n):
            if distance[u] == UNREACHABLE:
                continue
            for v, weight in graph.neighbors(u):
                candidate = distance[u] + weight
                if candidate < distance[v]:
                    distance[v] = candidate
                    parent[v] = u
                    any_update = True
        if not any_update:
            logger.info("Bellman-Ford converged after %d iterations", iteration)
            break
        if iteration % _PROGRESS_EVERY == 0:
            logger.info("Completed %d Bellman-Ford iterations", iteration)
    return tree


def _improves(tree: SOSPTree, u: int, v: int, weight: int) -> bool:
    du = tree.distance[u]
    if du == UNREACHABLE:
        return False
    dv = tree.distance[v]
    return dv == UNREACHABLE or dv > du + weight


def _relax(tree: SOSPTree, u: int, v: int, weight: int) -> None:
    tree.distance[v] = tree.distance[u] + weight
    tree.parent[v] = u
    tree.marked[v] = True


def sosp_update(graph: Graph, tree: SOSPTree, inserted_edges: Iterable[Edge]) -> list[int]:
    """Insert edges into ``graph`` and repair ``tree`` to match.

    Edges with an end outside the graph are skipped. Improved vertices are
    marked and their changes spread outward frontier by frontier; a vertex
    joins a frontier at most once. Returns the frontier sizes: the initially
    affected count, then the size of each following frontier, ending with 0.
    """
    _check_tree(graph, tree)
    n = graph.num_vertices
    edges = [e for e in inserted_edges if 0 <= e.u < n and 0 <= e.v < n]

    tree.marked[:] = [False] * n

    for edge in edges:
        graph.add_edge(edge.u, edge.v, edge.weight)

    affected: list[int] = []
    in_affected: set[int] = set()
    for edge in edges:
        if _improves(tree, edge.u, edge.v, edge.weight):
            _relax(tree, edge.u, edge.v, edge.weight)
            if edge.v not in in_affected:
                in_affected.add(edge.v)
                affected.append(edge.v)

    logger.info("Initial affected vertices: %d", len(affected))
    sizes = [len(affected)]

    visited = set(affected)
    while affected:
        next_frontier: list[int] = []
        for u in affected:
            if not tree.marked[u]:
                continue
            for v, weight in graph.neighbors(u):
                if _improves(tree, u, v, weight):
                    _relax(tree, u, v, weight)
                    if v not in visited:
                        visited.add(v)
                        next_frontier.append(v)
        affected = next_frontier
        sizes.append(len(affected))
        logger.info("Next iteration affected vertices: %d", len(affected))
    return sizes


def reachable_vertices(graph: Graph, source: int) -> list[int]:
    """Return, in ascending order, the vertices reachable from ``source``."""
    _check_source(graph, source)
    tree = init_sosp_tree(graph.num_vertices, source)
    compute_initial_sosp(graph, tree, source)
    return [v for v, d in enumerate(tree.distance) if d != UNREACHABLE]