"""Two-objective shortest paths built by combining single-objective trees."""

from __future__ import annotations

import logging
import time
from collections.abc import Iterable
from dataclasses import dataclass, field

from .graph import UNREACHABLE, Edge, Graph, SOSPTree, init_sosp_tree
from .sosp import compute_initial_sosp, sosp_update

logger = logging.getLogger(__name__)

SHARED_EDGE_WEIGHT = 1
"""Weight of a combined-graph edge that both trees use."""

SINGLE_EDGE_WEIGHT = 2
"""Weight of a combined-graph edge that only one tree uses."""

MAX_PATH_LENGTH = 1000
"""Number of steps after which path tracing gives up."""

_SAMPLE_START = 100


@dataclass
class MospResult:
    """Outcome of a two-objective update.

    ``sample_vertex`` is the first reachable vertex numbered 100 or more, or
    ``None``. ``path`` runs from the source to it, or is ``None`` when there is
    no sample or its path could not be traced. The objective distances are
    those of the sample in the two single-objective trees.
    """

    combined_graph: Graph
    combined_tree: SOSPTree
    reachable_count: int
    sample_vertex: int | None = None
    path: list[int] | None = None
    objective1_distance: float | None = None
    objective2_distance: float | None = None
    sosp1_frontiers: list[int] = field(default_factory=list)
    sosp2_frontiers: list[int] = field(default_factory=list)
    timings: dict[str, float] = field(default_factory=dict)


def build_combined_graph(
    tree1: SOSPTree, tree2: SOSPTree, vertices: Iterable[int] | None = None
) -> Graph:
    """Join the parent edges of two trees into one graph.

    An edge used by both trees weighs ``SHARED_EDGE_WEIGHT``; an edge used by
    only one weighs ``SINGLE_EDGE_WEIGHT``. Only the incoming edges of
    ``vertices`` are added; by default those of every vertex.
    """
    n = len(tree1.parent)
    if len(tree2.parent) != n:
        raise ValueError(
            f"trees differ in size: {n} and {len(tree2.parent)} vertices"
        )
    combined = Graph(n)
    for v in range(n) if vertices is None else vertices:
        parent1 = tree1.parent[v]
        parent2 = tree2.parent[v]
        if parent1 is not None:
            weight = SHARED_EDGE_WEIGHT if parent1 == parent2 else SINGLE_EDGE_WEIGHT
            combined.add_edge(parent1, v, weight)
        if parent2 is not None and parent2 != parent1:
            combined.add_edge(parent2, v, SINGLE_EDGE_WEIGHT)
    return combined


def trace_path(tree: SOSPTree, source: int, vertex: int) -> list[int]:
    """Return the tree path from ``source`` to ``vertex``, both included.

    Raises ``ValueError`` when the parent chain ends before reaching the
    source or runs longer than ``MAX_PATH_LENGTH`` steps.
    """
    if not 0 <= vertex < len(tree.parent):
        raise IndexError(f"vertex {vertex} out of range (0-{len(tree.parent) - 1})")
    reversed_path: list[int] = []
    current: int | None = vertex
    while current is not None and current != source:
        reversed_path.append(current)
        current = tree.parent[current]
        if len(reversed_path) >= MAX_PATH_LENGTH:
            logger.warning("Path too long or cycle detected!")
            break
    if current != source:
        raise ValueError(
            f"failed to construct path from {source} to {vertex} - cycle detected"
        )
    reversed_path.append(source)
    reversed_path.reverse()
    return reversed_path


def _first_sample(tree: SOSPTree) -> int | None:
    return next(
        (
            v
            for v in range(_SAMPLE_START, len(tree.distance))
            if tree.distance[v] != UNREACHABLE
        ),
        None,
    )


def mosp_update_2obj(
    graph1: Graph,
    graph2: Graph,
    tree1: SOSPTree,
    tree2: SOSPTree,
    inserted_edges1: Iterable[Edge],
    inserted_edges2: Iterable[Edge],
    source: int,
) -> MospResult:
    """Update both trees with their inserted edges and combine them.

    Each graph and tree is updated in place. The shortest-path tree of the
    combined graph from ``source`` gives the two-objective result.
    """
    n = graph1.num_vertices
    timings: dict[str, float] = {}

    logger.info("Step 1: Updating SOSP trees sequentially...")
    start = time.perf_counter()
    frontiers1 = sosp_update(graph1, tree1, inserted_edges1)
    timings["sosp1"] = time.perf_counter() - start

    start = time.perf_counter()
    frontiers2 = sosp_update(graph2, tree2, inserted_edges2)
    timings["sosp2"] = time.perf_counter() - start
    logger.info("SOSP1 update time: %.6f seconds", timings["sosp1"])
    logger.info("SOSP2 update time: %.6f seconds", timings["sosp2"])

    logger.info("Step 2: Creating combined graph...")
    start = time.perf_counter()
    combined = build_combined_graph(tree1, tree2)
    timings["combined"] = time.perf_counter() - start
    logger.info("Combined graph creation time: %.6f seconds", timings["combined"])

    logger.info("Step 3: Finding SOSP in combined graph...")
    start = time.perf_counter()
    combined_tree = init_sosp_tree(n, source)
    compute_initial_sosp(combined, combined_tree, source)
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