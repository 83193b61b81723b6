import random

import pytest

from mospkit.distributed import (
    Partition,
    assign_vertices,
    compute_initial_sosp_distributed,
    mosp_update_2obj_distributed,
    partition_from_assignment,
    sosp_update_distributed,
)
from mospkit.graph import UNREACHABLE, Edge, Graph, init_sosp_tree
from mospkit.mosp import build_combined_graph
from mospkit.sosp import compute_initial_sosp, sosp_update


def _random_graph(seed, n=30, m=90):
    rng = random.Random(seed)
    graph = Graph(n)
    for _ in range(m):
        graph.add_edge(rng.randrange(n), rng.randrange(n), rng.randint(1, 10))
    return graph


def _random_edges(seed, n, count):
    rng = random.Random(seed)
    return [Edge(rng.randrange(n), rng.randrange(n), rng.randint(1, 10)) for _ in range(count)]


def _partitions(graph, parts):
    assignment = assign_vertices(graph, parts)
    return [partition_from_assignment(graph, assignment, r) for r in range(parts)]


def _chain_graph(n, weight=1):
    graph = Graph(n)
    for v in range(n - 1):
        graph.add_edge(v, v + 1, weight)
    return graph


def test_assign_vertices_balanced_and_in_range():
    graph = _random_graph(1, n=31)
    assignment = assign_vertices(graph, 4)
    assert len(assignment) == 31
    assert set(assignment) <= {0, 1, 2, 3}
    counts = [assignment.count(p) for p in range(4)]
    assert max(counts) - min(counts) <= 1
    assert sum(counts) == 31


def test_assign_vertices_single_part():
    graph = _random_graph(2, n=10)
    assert assign_vertices(graph, 1) == [0] * 10


def test_assign_vertices_rejects_non_positive_parts():
    with pytest.raises(ValueError):
        assign_vertices(_random_graph(3), 0)


def test_partition_from_assignment_maps_and_boundary():
    graph = _chain_graph(4)
    assignment = [0, 0, 1, 1]
    first = partition_from_assignment(graph, assignment, 0)
    second = partition_from_assignment(graph, assignment, 1)
    assert first.local_to_global == [0, 1]
    assert first.global_to_local == {0: 0, 1: 1}
    assert first.boundary_vertices == [1]
    assert first.num_boundary == 1
    assert (first.start_vertex, first.end_vertex) == (0, 1)
    assert second.local_to_global == [2, 3]
    assert second.boundary_vertices == []
    assert len(second) == 2


def test_partitions_cover_every_vertex_once():
    graph = _random_graph(4, n=25)
    owned = [v for p in _partitions(graph, 3) for v in p.local_to_global]
    assert sorted(owned) == list(range(25))


def test_empty_partition_end_vertex():
    graph = _chain_graph(3)
    partition = partition_from_assignment(graph, [0, 0, 0], 5)
    assert partition.end_vertex == -1
    assert len(partition) == 0


def test_partition_from_assignment_rejects_wrong_length():
    with pytest.raises(ValueError):
        partition_from_assignment(_chain_graph(4), [0, 0], 0)


def test_single_partition_matches_sequential():
    graph = _random_graph(5)
    n = graph.num_vertices
    expected = compute_initial_sosp(graph, init_sosp_tree(n, 0), 0)
    tree = init_sosp_tree(n, 0)
    parts = [partition_from_assignment(graph, [0] * n, 0)]
    compute_initial_sosp_distributed(graph, tree, 0, parts)
    assert tree.distance == expected.distance
    assert tree.parent == expected.parent


@pytest.mark.parametrize("parts", [2, 3, 5])
def test_many_partitions_give_sequential_distances(parts):
    graph = _random_graph(6 + parts)
    n = graph.num_vertices
    expected = compute_initial_sosp(graph, init_sosp_tree(n, 0), 0)
    tree = init_sosp_tree(n, 0)
    compute_initial_sosp_distributed(graph, tree, 0, _partitions(graph, parts))
    assert tree.distance == expected.distance
    assert tree.parent[0] is None
    assert all(
        tree.parent[v] is not None
        for v in range(1, n)
        if tree.distance[v] != UNREACHABLE
    )


def test_compute_distributed_rejects_bad_source_and_no_partitions():
    graph = _chain_graph(5)
    tree = init_sosp_tree(5, 0)
    with pytest.raises(IndexError):
        compute_initial_sosp_distributed(graph, tree, 9, _partitions(graph, 1))
    with pytest.raises(ValueError):
        compute_initial_sosp_distributed(graph, tree, 0, [])


def _weighted_chain():
    graph = Graph(4)
    graph.add_edge(0, 1, 10)
    graph.add_edge(1, 2, 1)
    graph.add_edge(2, 3, 1)
    return graph


def test_sosp_update_distributed_repairs_chain():
    graph = _weighted_chain()
    tree = compute_initial_sosp(graph, init_sosp_tree(4, 0), 0)
    sizes = sosp_update_distributed(graph, tree, [Edge(0, 1, 1)], 2)

    reference_graph = _weighted_chain()
    reference_graph.add_edge(0, 1, 1)
    reference = compute_initial_sosp(reference_graph, init_sosp_tree(4, 0), 0)
    assert tree.distance == reference.distance
    assert tree.parent == reference.parent

    seq_graph = _weighted_chain()
    seq_tree = compute_initial_sosp(seq_graph, init_sosp_tree(4, 0), 0)
    assert sizes == sosp_update(seq_graph, seq_tree, [Edge(0, 1, 1)])
    assert tree.marked[1] and tree.marked[3]
    assert not tree.marked[0]


def test_sosp_update_distributed_independent_of_size():
    edges = _random_edges(11, 30, 20)
    results = []
    for size in (1, 3):
        graph = _random_graph(10)
        tree = compute_initial_sosp(graph, init_sosp_tree(30, 0), 0)
        sizes = sosp_update_distributed(graph, tree, edges, size)
        results.append((sizes, tree.distance, tree.parent, tree.marked))
    assert results[0] == results[1]
    assert results[0][0][-1] == 0


def test_sosp_update_distributed_never_increases_distances():
    graph = _random_graph(12)
    tree = compute_initial_sosp(graph, init_sosp_tree(30, 0), 0)
    before = list(tree.distance)
    sosp_update_distributed(graph, tree, _random_edges(13, 30, 25), 2)
    assert all(after <= old for after, old in zip(tree.distance, before))


def test_sosp_update_distributed_skips_invalid_edges():
    graph = _chain_graph(4)
    tree = compute_initial_sosp(graph, init_sosp_tree(4, 0), 0)
    before = list(tree.distance)
    sizes = sosp_update_distributed(graph, tree, [Edge(-1, 2, 1), Edge(0, 99, 1)], 2)
    assert graph.num_edges == 3
    assert tree.distance == before
    assert sizes == [0, 0]


def test_sosp_update_distributed_rejects_zero_processes():
    graph = _chain_graph(3)
    tree = init_sosp_tree(3, 0)
    with pytest.raises(ValueError):
        sosp_update_distributed(graph, tree, [], 0)


def test_mosp_distributed_combined_tree_matches_sequential_on_union():
    graph1 = _random_graph(20)
    graph2 = _random_graph(21)
    tree1 = compute_initial_sosp(graph1, init_sosp_tree(30, 0), 0)
    tree2 = compute_initial_sosp(graph2, init_sosp_tree(30, 0), 0)
    result = mosp_update_2obj_distributed(
        graph1,
        graph2,
        tree1,
        tree2,
        _random_edges(22, 30, 15),
        _random_edges(23, 30, 15),
        0,
        _partitions(graph1, 3),
    )
    union = build_combined_graph(tree1, tree2)
    reference = compute_initial_sosp(union, init_sosp_tree(30, 0), 0)
    assert result.combined_tree.distance == reference.distance
    assert result.combined_graph.num_edges == union.num_edges
    assert result.reachable_count == sum(
        1 for d in reference.distance if d != UNREACHABLE
    )
    assert result.sosp1_frontiers[-1] == 0
    assert result.sample_vertex is None


def test_mosp_distributed_traces_sample_path():
    n = 105
    graph1 = _chain_graph(n, weight=2)
    graph2 = _chain_graph(n, weight=3)
    tree1 = compute_initial_sosp(graph1, init_sosp_tree(n, 0), 0)
    tree2 = compute_initial_sosp(graph2, init_sosp_tree(n, 0), 0)
    parts = [partition_from_assignment(graph1, [0] * n, 0)]
    result = mosp_update_2obj_distributed(graph1, graph2, tree1, tree2, [], [], 0, parts)
    assert result.sample_vertex == 100
    assert result.path == list(range(101))
    assert result.objective1_distance == tree1.distance[100]
    assert result.objective2_distance == tree2.distance[100]
    assert result.reachable_count == n


def test_mosp_distributed_requires_partitions():
    graph = _chain_graph(3)
    tree = init_sosp_tree(3, 0)
    with pytest.raises(ValueError):
        mosp_update_2obj_distributed(graph, graph, tree, tree, [], [], 0, [])


def test_partition_defaults():
    partition = Partition(rank=2)
    assert partition.num_boundary == 0
    assert partition.end_vertex == -1
    assert partition.rank == 2