"""Generation of random edge insertions that favour source-to-target connectivity."""

from __future__ import annotations

import logging
import random

from .graph import Edge, Graph
from .sosp import reachable_vertices

logger = logging.getLogger(__name__)

_MIN_WEIGHT = 1
_MAX_WEIGHT = 10


def _random_weight(rng: random.Random) -> int:
    return rng.randint(_MIN_WEIGHT, _MAX_WEIGHT)


def create_smart_random_edges(
    graph: Graph,
    source: int,
    target: int,
    num_edges: int,
    rng: random.Random | None = None,
    connect_when_reachable: bool = False,
) -> list[Edge]:
    """Return random edges to insert, biased towards linking ``source`` to ``target``.

    A quarter of the requested edges (``num_edges // 4``) are reserved as
    connecting edges. If ``target`` cannot be reached from ``source``, each of
    them runs from a vertex reachable from ``source`` to a vertex that can reach
    ``target``, at most one per reachable vertex. If ``target`` is already
    reachable, the reserved edges are only produced when
    ``connect_when_reachable`` is set, each leaving a reachable vertex for any
    vertex. Reserved slots that are not produced are left out of the result.

    The remaining edges are random: half of them (on average) start at a
    reachable vertex, the rest anywhere. Every weight lies in 1..10.
    """
    if num_edges < 0:
        raise ValueError(f"number of edges must not be negative: {num_edges}")
    n = graph.num_vertices
    if not 0 <= target < n:
        raise IndexError(f"target {target} out of range (0-{n - 1})")
    rng = rng if rng is not None else random.Random()

    connected_edges = num_edges // 4
    reachable = reachable_vertices(graph, source)
    target_reachable = target in set(reachable)

    logger.info(
        "Initial analysis: %d vertices reachable from source. Target %s reachable.",
        len(reachable),
        "is" if target_reachable else "is NOT",
    )

    edges: list[Edge] = []
    if not target_reachable and reachable:
        can_reach_target = reachable_vertices(graph.reversed(), target)
        logger.info("Found %d vertices that can reach target.", len(can_reach_target))
        if can_reach_target:
            for _ in range(min(connected_edges, len(reachable))):
                u = reachable[rng.randrange(len(reachable))]
                v = can_reach_target[rng.randrange(len(can_reach_target))]
                edges.append(Edge(u, v, _random_weight(rng)))
                logger.info("Creating connecting edge: %d -> %d", u, v)
    elif connect_when_reachable and reachable:
        for _ in range(connected_edges):
            u = reachable[rng.randrange(len(reachable))]
            v = rng.randrange(n)
            edges.append(Edge(u, v, _random_weight(rng)))

    for _ in range(num_edges - connected_edges):
        if reachable and rng.randrange(2) == 0:
            u = reachable[rng.randrange(len(reachable))]
        else:
            u = rng.randrange(n)
        v = rng.randrange(n)
        edges.append(Edge(u, v, _random_weight(rng)))

    return edges