# mospkit

Single-objective shortest path (SOSP) trees that are repaired incrementally
when edges are inserted, and a two-objective (MOSP) result built by combining
two such trees.

## Modules

- `mospkit.graph`: `Edge`, `Graph` (`add_edge`, `neighbors`, `reversed`),
  `SOSPTree`, `init_sosp_tree`, and the edge-list readers `parse_graph` and
  `read_graph`.
- `mospkit.sosp`: `compute_initial_sosp` (Bellman-Ford, stopping early once a
  round changes nothing), `sosp_update` (inserts edges and spreads improved
  distances frontier by frontier; returns the frontier sizes) and
  `reachable_vertices`.
- `mospkit.edges`: `create_smart_random_edges`, which produces random edges to
  insert, reserving a quarter of them to link vertices reachable from a source
  to vertices that can reach a target.
- `mospkit.mosp`: `build_combined_graph`, `trace_path`, `mosp_update_2obj` and
  the `MospResult` dataclass.
- `mospkit.distributed`: `Partition`, `assign_vertices`,
  `partition_from_assignment`, `compute_initial_sosp_distributed`,
  `sosp_update_distributed` and `mosp_update_2obj_distributed`.
- `mospkit.cli`: the `mospkit` command.

## Graph files

An edge-list file holds one `u v` pair per line. Leading lines starting with
`#` are comments; a `# Nodes: N Edges: M` comment sets the vertex count,
otherwise it is one more than the largest vertex id found. Edges with an end
outside the graph are dropped. Weights are not read from the file: every edge
is given a random weight from 1 to 10, drawn from the `random.Random` passed in
(or a fresh one).

## Shortest path trees

An `SOSPTree` holds three lists indexed by vertex: `distance` (`math.inf`,
exported as `mospkit.graph.UNREACHABLE`, for vertices the source cannot
reach), `parent` (`None` where a vertex has no parent) and `marked` (set by
`sosp_update` on vertices whose distance improved).

`build_combined_graph` joins the parent edges of two trees: an edge used by
both weighs 1, an edge used by only one weighs 2. `mosp_update_2obj` updates
both graphs and trees in place, builds the combined graph and computes its
shortest path tree. The returned `MospResult` holds the combined graph and
tree, the number of reachable vertices, the frontier sizes of both updates,
timings, and a sample: the first reachable vertex numbered 100 or more, its
path from the source and its distance in each of the two trees.

`trace_path` raises `ValueError` when the parent chain does not lead back to
the source within 1000 steps.

## Partitioned computation

`mospkit.distributed` runs the same steps with the vertices split among
several simulated processes, all in the current Python process. Each process
works on its own copy of the arrays; after every round the copies are merged,
distances by minimum, parents by maximum and marks by logical or.
`assign_vertices` splits vertices into balanced contiguous blocks in id order
and logs the resulting edge cut; it does not try to minimise that cut.

## Command line

```
mospkit GRAPH_FILE [SOURCE_VERTEX] [TARGET_VERTEX] [options]
```

`SOURCE_VERTEX` defaults to 0 and `TARGET_VERTEX` to 100. A source outside the
graph falls back to 0; a target outside the graph falls back to the middle
vertex. The command reads the graph twice, once per objective, builds both
initial trees, generates edges for each graph, runs the two-objective update
and prints timings, the number of vertices reachable in the combined tree, and
a sample path with both objective distances.

Options:

- `--processes N`: use the partitioned computation with `N` simulated
  processes.
- `--num-inserted N`: number of edges generated per graph (default 5000).
- `--seed S`: seed for the random weights and edges.
- `-v`, `--verbose`: log progress to standard error.

The command exits with status 1 when the file cannot be opened or the graph
has no vertices.

## Library use

```python
import random

from mospkit.graph import Edge, parse_graph, init_sosp_tree
from mospkit.sosp import compute_initial_sosp, sosp_update
from mospkit.mosp import mosp_update_2obj

rng = random.Random(1)
lines = ["# Nodes: 4 Edges: 3", "0 1", "1 2", "2 3"]
g1 = parse_graph(lines, rng)
g2 = parse_graph(lines, rng)

t1 = init_sosp_tree(g1.num_vertices, 0)
t2 = init_sosp_tree(g2.num_vertices, 0)
compute_initial_sosp(g1, t1, 0)
compute_initial_sosp(g2, t2, 0)

print(sosp_update(g1, t1, [Edge(0, 3, 1)]))

result = mosp_update_2obj(g1, g2, t1, t2, [Edge(0, 2, 1)], [Edge(0, 3, 2)], 0)
print(result.reachable_count, result.combined_tree.distance)
```

## What it does not do

- Edge weights in graph files are ignored; weights are always random.
- Only edge insertions are handled; there is no support for deleting edges.
- The partitioned computation does not spread work over several machines or
  operating-system processes; it simulates them one after another.

## Running the tests

```
pip install .[test]
pytest
```