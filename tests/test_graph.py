import threading

import numpy as np
import pytest

from simgraph import WeightedGraph


def test_new_graph_has_vertices_and_no_edges():
    g = WeightedGraph(4)
    assert g.number_of_vertices == 4
    assert len(g) == 4
    assert g.number_of_edges == 0
    assert g.weight_type == np.float64


def test_connect_is_batched_and_ordered():
    g = WeightedGraph(4)
    g.connect(0, [1, 2, 3], [0.5, 0.25, 1.0])
    assert g.out_edges(0) == [(1, 0.5), (2, 0.25), (3, 1.0)]
    assert g.out_degree(0) == 3
    assert g.out_degree(1) == 0


def test_connect_single_edge_scalars():
    g = WeightedGraph(2)
    g.connect(1, 0, 0.75)
    assert g.edges() == [(1, 0, 0.75)]


def test_parallel_edges_and_self_loops_are_kept():
    g = WeightedGraph(2)
    g.connect(0, [1, 1, 0], [0.1, 0.2, 1.0])
    assert g.number_of_edges == 3
    A = g.adjacency_matrix().toarray()
    assert A[0, 1] == pytest.approx(0.3)
    assert A[0, 0] == pytest.approx(1.0)


def test_weight_type_is_applied():
    g = WeightedGraph(2, weight_type=np.float32)
    g.connect(0, [1], [1.0 / 3.0])
    assert g.adjacency_matrix().dtype == np.float32
    assert g.edges()[0][2] == pytest.approx(np.float32(1.0 / 3.0))


def test_connect_rejects_length_mismatch():
    g = WeightedGraph(3)
    with pytest.raises(ValueError):
        g.connect(0, [1, 2], [1.0])


def test_connect_rejects_out_of_range():
    g = WeightedGraph(3)
    with pytest.raises(ValueError):
        g.connect(0, [3], [1.0])
    with pytest.raises(ValueError):
        g.connect(-1, [0], [1.0])


def test_concurrent_connect_disjoint_sources():
    n = 64
    g = WeightedGraph(n)

    def _row(j):
        g.connect(j, [(j + 1) % n, (j + 2) % n], [1.0, 2.0])

    threads = [threading.Thread(target=_row, args=(j,)) for j in range(n)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert g.number_of_edges == 2 * n
    assert all(g.out_degree(j) == 2 for j in range(n))
