"""Command line entry point: read a graph, insert random edges, run the two-objective update."""

from __future__ import annotations

import argparse
import logging
import math
import random
import re
import sys
import time
from collections.abc import Sequence

from .distributed import (
    assign_vertices,
    compute_initial_sosp_distributed,
    mosp_update_2obj_distributed,
    partition_from_assignment,
)
from .edges import create_smart_random_edges
from .graph import init_sosp_tree, read_graph
from .mosp import MospResult, mosp_update_2obj
from .sosp import compute_initial_sosp

DEFAULT_SOURCE = 0
DEFAULT_TARGET = 100
DEFAULT_NUM_INSERTED = 5000

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def _vertex_arg(text: str) -> int:
    """Read a leading integer the way ``atoi`` does; anything else counts as 0."""
    match = _LEADING_INT.match(text)
    return int(match.group(1)) if match else 0


def _positive_int(text: str) -> int:
    value = int(text)
    if value < 1:
        raise argparse.ArgumentTypeError(f"must be positive: {value}")
    return value


def _non_negative_int(text: str) -> int:
    value = int(text)
    if value < 0:
        raise argparse.ArgumentTypeError(f"must not be negative: {value}")
    return value


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mospkit",
        description="Update two shortest-path trees after edge insertions and combine them.",
    )
    parser.add_argument("graph_file", help="edge-list file, one 'u v' pair per line")
    parser.add_argument(
        "source_vertex", nargs="?", type=_vertex_arg, default=DEFAULT_SOURCE
    )
    parser.add_argument(
        "target_vertex", nargs="?", type=_vertex_arg, default=DEFAULT_TARGET
    )
    parser.add_argument(
        "--processes",
        type=_positive_int,
        default=None,
        help="run the partitioned update with this many simulated processes",
    )
    parser.add_argument(
        "--num-inserted",
        type=_non_negative_int,
        default=DEFAULT_NUM_INSERTED,
        help="number of random edges to insert into each graph",
    )
    parser.add_argument("--seed", type=int, default=None, help="random seed")
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="log progress to standard error"
    )
    return parser


def _format_distance(value: float | None) -> str:
    if value is None or value == math.inf:
        return "unreachable"
    return str(int(value))


def _report(result: MospResult, source: int) -> None:
    print(f"Vertices reachable from source in MOSP: {result.reachable_count}")
    if result.sample_vertex is None:
        print(f"\nNo vertices are reachable from source vertex {source}!")
        return
    print(
        f"\nMOSP result (path from source {source} to vertex {result.sample_vertex}):"
    )
    if result.path is None:
        print("Error: Failed to construct path - cycle detected")
        return
    print("Path: " + " -> ".join(map(str, result.path)))
    print(f"Objective 1 distance: {_format_distance(result.objective1_distance)}")
    print(f"Objective 2 distance: {_format_distance(result.objective2_distance)}")


def main(argv: Sequence[str] | None = None) -> int:
    """Run the program; returns the process exit status."""
    args = _build_parser().parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.INFO, stream=sys.stderr)

    total_start = time.perf_counter()
    rng = random.Random(args.seed)
    distributed = args.processes is not None
    source = args.source_vertex
    target = args.target_vertex

    if distributed:
        print(
            f"Parallel MOSP Update Implementation with MPI ({args.processes} processes)"
        )
    else:
        print("Sequential MOSP Update Implementation")

    print(f"Reading graph from file {args.graph_file}...")
    start = time.perf_counter()
    try:
        graph1 = read_graph(args.graph_file, rng)
        graph2 = read_graph(args.graph_file, rng)
    except OSError as error:
        print(f"Error opening file: {args.graph_file} ({error})", file=sys.stderr)
        print("Failed to read graph from file")
        return 1
    print(f"Graph reading time: {time.perf_counter() - start:.6f} seconds")

    n = graph1.num_vertices
    if n == 0:
        print("Graph has no vertices")
        return 1

    if not 0 <= source < n:
        print(
            f"Source vertex {source} is out of range (0-{n - 1}). Using default source 0."
        )
        source = 0
    if not 0 <= target < n:
        print(
            f"Target vertex {target} is out of range (0-{n - 1}). "
            f"Using vertex {n // 2} instead."
        )
        target = n // 2

    partitions = []
    if distributed:
        print(f"Partitioning graph for {args.processes} processes...")
        start = time.perf_counter()
        assignment = assign_vertices(graph1, args.processes)
        partitions = [
            partition_from_assignment(graph1, assignment, rank)
            for rank in range(args.processes)
        ]
        print(f"Graph partitioning time: {time.perf_counter() - start:.6f} seconds")

    print(f"Initializing SOSP trees for source vertex {source}...")
    tree1 = init_sosp_tree(n, source)
    tree2 = init_sosp_tree(n, source)

    print("Computing initial SOSP trees...")
    start = time.perf_counter()
    if distributed:
        compute_initial_sosp_distributed(graph1, tree1, source, partitions)
        compute_initial_sosp_distributed(graph2, tree2, source, partitions)
    else:
        compute_initial_sosp(graph1, tree1, source)
        compute_initial_sosp(graph2, tree2, source)
    print(f"Initial SOSP computation time: {time.perf_counter() - start:.6f} seconds")

    print(f"Generating {args.num_inserted} 'smart' random edges to insert...")
    start = time.perf_counter()
    inserted1 = create_smart_random_edges(
        graph1, source, target, args.num_inserted, rng, connect_when_reachable=distributed
    )
    inserted2 = create_smart_random_edges(
        graph2, source, target, args.num_inserted, rng, connect_when_reachable=distributed
    )
    print(f"Edge generation time: {time.perf_counter() - start:.6f} seconds")

    print("Running MOSP_Update...")
    start = time.perf_counter()
    if distributed:
        result = mosp_update_2obj_distributed(
            graph1, graph2, tree1, tree2, inserted1, inserted2, source, partitions
        )
    else:
        result = mosp_update_2obj(
            graph1, graph2, tree1, tree2, inserted1, inserted2, source
        )
    elapsed = time.perf_counter() - start
    _report(result, source)

    print(f"\nMOSP_Update completed in {elapsed:.6f} seconds")
    print(
        f"\nTotal program execution time: {time.perf_counter() - total_start:.6f} seconds"
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())