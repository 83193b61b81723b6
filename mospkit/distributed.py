"""Partitioned shortest-path computation with simulated cooperating processes.

Each process owns a share of the vertices and keeps its own copy of the
shortest-path arrays. After every round the copies are merged the way a
collective reduction would merge them: distances by minimum, parents by
maximum and marks by logical or.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from itertools import chain

from .graph import UNREACHABLE, Edge, Graph, SOSPTree, init_sosp_tree
from .mosp import MospResult, build_combined_graph, trace_path
from .sosp import compute_initial_sosp

logger = logging.getLogger(__name__)

_PROGRESS_EVERY = 100
_SAMPLE_START = 100


@dataclass
class Partition:
    """The vertices owned by one process.

    ``local_to_global`` lists the owned vertices in ascending order;
    ``global_to_local`` maps each of them back to its local index.
    ``boundary_vertices`` holds the local indices of owned vertices with an
    edge leading to a vertex owned by another process.
    """

    rank: int
    local_to_global: list[int] = field(default_factory=list)
    global_to_local: dict[int, int] = field(default_factory=dict)
    boundary_vertices: list[int] = field(default_factory=list)

    @property
    def num_boundary(self) -> int:
        """Number of boundary vertices."""
        return len(self.boundary_vertices)

    @property
    def start_vertex(self) -> int:
        """First local index."""
        return 0

    @property
    def end_vertex(self) -> int:
        """Last local index; -1 when the partition is empty."""
        return len(self.local_to_global) - 1

    def __len__(self) -> int:
        return len(self.local_to_global)


def _check_source(graph: Graph, source: int) -> None:
    if not 0 <= source < graph.num_vertices:
        raise IndexError(f"source {source} out of range (0-{graph.num_vertices - 1})")


def _check_tree(graph: Graph, tree: SOSPTree) -> None:
    n = graph.num_vertices
    sizes = (len(tree.parent), len(tree.distance), len(tree.marked))
    if any(size != n for size in sizes):
        raise ValueError(f"tree covers {sizes} vertices but the graph has {n}")


def _max_parent(parents: Iterable[int | None]) -> int | None:
    best = max(-1 if p is None else p for p in parents)
    return None if best == -1 else best


def assign_vertices(graph: Graph, parts: int) -> list[int]:
    """Assign every vertex to one of ``parts`` processes.

    Vertices are split into contiguous, balanced blocks in id order; part
    sizes differ by at most one. Returns the owning part of each vertex.
    """
    if parts < 1:
        raise ValueError(f"number of parts must be positive: {parts}")
    n = graph.num_vertices
    assignment = [v * parts // n for v in range(n)]
    edge_cut = sum(
        1
        for u in range(n)
        for v, _ in graph.neighbors(u)
        if assignment[u] != assignment[v]
    )
    logger.info("Graph partitioned with edge-cut: %d", edge_cut)
    return assignment


def partition_from_assignment(
    graph: Graph, assignment: Sequence[int], rank: int
) -> Partition:
    """Build the partition of process ``rank`` from a vertex assignment."""
    n = graph.num_vertices
    if len(assignment) != n:
        raise ValueError(
            f"assignment covers {len(assignment)} vertices but the graph has {n}"
        )
    owned = [v for v in range(n) if assignment[v] == rank]
    global_to_local = {v: index for index, v in enumerate(owned)}
    boundary = [
        index
        for index, v in enumerate(owned)
        if any(assignment[dest] != rank for dest, _ in graph.neighbors(v))
    ]
    partition = Partition(
        rank=rank,
        local_to_global=owned,
        global_to_local=global_to_local,
        boundary_vertices=boundary,
    )
    logger.info(
        "Process %d has %d vertices, %d boundary vertices",
        rank,
        len(partition),
        partition.num_boundary,
    )
    return partition


def compute_initial_sosp_distributed(
    graph: Graph, tree: SOSPTree, source: int, partitions: Sequence[Partition]
) -> SOSPTree:
    """Fill ``tree`` with shortest paths from ``source`` across partitions.

    In each round every process relaxes the edges leaving the vertices it
    owns, working on its own copy of the arrays; the copies are then merged
    (distance by minimum, parent by maximum). At most ``num_vertices - 1``
    rounds run, stopping once no process changed anything. The tree is
    updated in place and returned.
    """
    if not partitions:
        raise ValueError("at least one partition is required")
    _check_source(graph, source)
    _check_tree(graph, tree)
    n = graph.num_vertices

    tree.distance[:] = [UNREACHABLE] * n
    tree.distance[source] = 0
    tree.parent[:] = [None] * n

    any_update = True
    iteration = 0
    while iteration < n - 1 and any_update:
        iteration += 1
        any_update = False
        local_distances: list[list[float]] = []
        local_parents: list[list[int | None]] = []
        for partition in partitions:
            distance = list(tree.distance)
            parent = list(tree.parent)
            for u in partition.local_to_global:
                if distance[u] == UNREACHABLE:
                    continue
                for v, weight in graph.neighbors(u):
                    candidate = distance[u] + weight
                    if candidate < distance[v]:
                        distance[v] = candidate
                        parent[v] = u
                        any_update = True
            local_distances.append(distance)
            local_parents.append(parent)

        tree.distance[:] = [min(column) for column in zip(*local_distances)]
        tree.parent[:] = [_max_parent(column) for column in zip(*local_parents)]

        if iteration % _PROGRESS_EVERY == 0:
            logger.info("Completed %d Bellman-Ford iterations", iteration)
    return tree


def sosp_update_distributed(
    graph: Graph, tree: SOSPTree, inserted_edges: Iterable[Edge], size: int
) -> list[int]:
    """Insert edges and repair ``tree`` with ``size`` cooperating processes.

    Every process walks the whole frontier on its own copy of the arrays;
    the copies are merged after each round and the processes' next frontiers
    are joined without duplicates. Only the new frontier counts as visited
    in the following round. Edges with an end outside the graph are skipped.
    Returns the frontier sizes: the initially affected count, then the size
    of each following frontier, ending with 0.
    """
    if size < 1:
        raise ValueError(f"number of processes must be positive: {size}")
    _check_tree(graph, tree)
    n = graph.num_vertices
    logger.info("SOSP_Update: parallel implementation with %d processes", size)

    edges = [e for e in inserted_edges if 0 <= e.u < n and 0 <= e.v < n]
    tree.marked[:] = [False] * n
    for edge in edges:
        graph.add_edge(edge.u, edge.v, edge.weight)

    affected: list[int] = []
    for edge in edges:
        du = tree.distance[edge.u]
        if du == UNREACHABLE or tree.distance[edge.v] <= du + edge.weight:
            continue
        tree.distance[edge.v] = du + edge.weight
        tree.parent[edge.v] = edge.u
        tree.marked[edge.v] = True
        if edge.v not in affected:
            affected.append(edge.v)

    logger.info("Initial affected vertices: %d", len(affected))
    sizes = [len(affected)]
    visited = set(affected)

    keep_going = True
    while keep_going:
        states = []
        for _ in range(size):
            distance = list(tree.distance)
            parent = list(tree.parent)
            marked = list(tree.marked)
            seen = set(visited)
            next_frontier: list[int] = []
            for u in affected:
                if not marked[u]:
                    continue
                for v, weight in graph.neighbors(u):
                    du = distance[u]
                    if du == UNREACHABLE or distance[v] <= du + weight:
                        continue
                    distance[v] = du + weight
                    parent[v] = u
                    marked[v] = True
                    if v not in seen:
                        seen.add(v)
                        next_frontier.append(v)
            states.append((distance, parent, marked, next_frontier))

        tree.distance[:] = [min(column) for column in zip(*(s[0] for s in states))]
        tree.parent[:] = [_max_parent(column) for column in zip(*(s[1] for s in states))]
        tree.marked[:] = [any(column) for column in zip(*(s[2] for s in states))]

        keep_going = any(s[3] for s in states)
        affected = list(dict.fromkeys(chain.from_iterable(s[3] for s in states)))
        visited = set(affected)
        sizes.append(len(affected))
        if affected:
            logger.info("Next iteration affected vertices: %d", len(affected))
    return sizes


def _first_sample(tree: SOSPTree) -> int | None:
    return next(
        (
            v
            for v in range(_SAMPLE_START, len(tree.distance))
            if tree.distance[v] != UNREACHABLE
        ),
        None,
    )


def mosp_update_2obj_distributed(
    graph1: Graph,
    graph2: Graph,
    tree1: SOSPTree,
    tree2: SOSPTree,
    inserted_edges1: Iterable[Edge],
    inserted_edges2: Iterable[Edge],
    source: int,
    partitions: Sequence[Partition],
) -> MospResult:
    """Two-objective update spread over one process per partition.

    Both trees are repaired with :func:`sosp_update_distributed`; each
    process contributes the parent edges of its own vertices to the combined
    graph, whose shortest-path tree from ``source`` gives the result.
    """
    if not partitions:
        raise ValueError("at least one partition is required")
    size = len(partitions)
    n = graph1.num_vertices
    timings: dict[str, float] = {}

    logger.info("Step 1: Updating SOSP trees in parallel...")
    start = time.perf_counter()
    frontiers1 = sosp_update_distributed(graph1, tree1, inserted_edges1, size)
    timings["sosp1"] = time.perf_counter() - start

    start = time.perf_counter()
    frontiers2 = sosp_update_distributed(graph2, tree2, inserted_edges2, size)
    timings["sosp2"] = time.perf_counter() - start
    logger.info("SOSP1 update time: %.6f seconds", timings["sosp1"])
    logger.info("SOSP2 update time: %.6f seconds", timings["sosp2"])

    logger.info("Step 2: Creating combined graph...")
    start = time.perf_counter()
    owned = chain.from_iterable(p.local_to_global for p in partitions)
    combined = build_combined_graph(tree1, tree2, owned)
    timings["combined"] = time.perf_counter() - start
    logger.info("Combined graph creation time: %.6f seconds", timings["combined"])

    logger.info("Step 3: Finding SOSP in combined graph...")
    start = time.perf_counter()
    combined_tree = init_sosp_tree(n, source)
    compute_initial_sosp_distributed(combined, combined_tree, source, partitions)
    timings["final"] = time.perf_counter() - start
    logger.info("Final SOSP computation time: %.6f seconds", timings["final"])

    reachable_count = sum(1 for d in combined_tree.distance if d != UNREACHABLE)
    logger.info("Vertices reachable from source in MOSP: %d", reachable_count)

    result = MospResult(
        combined_graph=combined,
        combined_tree=combined_tree,
        reachable_count=reachable_count,
        sosp1_frontiers=frontiers1,
        sosp2_frontiers=frontiers2,
        timings=timings,
    )

    sample = _first_sample(combined_tree)
    if sample is None:
        logger.info("No vertices are reachable from source vertex %d!", source)
        return result

    result.sample_vertex = sample
    try:
        result.path = trace_path(combined_tree, source, sample)
    except ValueError as error:
        logger.error("Error: %s", error)
        return result

    result.objective1_distance = tree1.distance[sample]
    result.objective2_distance = tree2.distance[sample]
    logger.info(
        "MOSP result (path from source %d to vertex %d): %s",
        source,
        sample,
        " -> ".join(map(str, result.path)),
    )
    return result


__all__ = [
    "Partition",
    "assign_vertices",
    "partition_from_assignment",
    "compute_initial_sosp_distributed",
    "sosp_update_distributed",
    "mosp_update_2obj_distributed",
    "compute_initial_sosp",
]