import numpy as np
import pytest

from simgraph import (
    CliqueNeighborhood,
    FeatureMatrix,
    InsufficientDataError,
    KNNNeighborhood,
    PixelNeighborhood,
    RandomKGraph,
    RandomNeighborhood,
    WeightedGraph,
    constant,
    create,
    ones,
)


def test_knn_graph_end_to_end(line_points, oracle_inverse_distance):
    knn = KNNNeighborhood.from_data(line_points, 2)
    g = create(knn, oracle_inverse_distance, line_points)
    assert isinstance(g, WeightedGraph)
    assert g.number_of_vertices == 5
    assert all(g.out_degree(j) == 2 for j in range(5))
    out = dict(g.out_edges(4))
    assert set(out) == {3, 2}
    assert out[3] == pytest.approx(1.0 / 7.0)
    assert out[2] == pytest.approx(1.0 / 8.0)


def test_oracle_receives_vertex_neighbours_and_features(line_points):
    seen = {}

    def oracle(j, neigh, x_j, x_neigh):
        seen[j] = (list(neigh), x_j.copy(), x_neigh.copy())
        return np.arange(len(neigh), dtype=float)

    create(CliqueNeighborhood(), oracle, line_points, max_workers=1)
    neigh, x_j, x_neigh = seen[4]
    assert neigh == [0, 1, 2, 3]
    np.testing.assert_array_equal(x_j, [10.0])
    np.testing.assert_array_equal(x_neigh, [[0.0], [1.0], [2.0], [3.0]])


def test_parallel_and_sequential_graphs_match(blobs, oracle_inverse_distance):
    knn = KNNNeighborhood.from_data(blobs, 6)
    seq = create(knn, oracle_inverse_distance, blobs, max_workers=1)
    par = create(knn, oracle_inverse_distance, blobs, max_workers=8)
    assert seq.edges() == par.edges()


def test_clique_graph_with_constant_oracle(line_points):
    g = create(CliqueNeighborhood(), constant(2.5), line_points)
    assert g.number_of_edges == 5 * 4
    assert {w for _, _, w in g.edges()} == {2.5}


def test_pixel_graph_keeps_self_loops(grid3):
    g = create(PixelNeighborhood(1), ones, grid3)
    assert g.out_degree(4) == 9
    assert (4, 1.0) in g.out_edges(4)
    assert g.number_of_edges == 4 * 4 + 4 * 6 + 9


def test_weight_type(line_points):
    g = create(CliqueNeighborhood(), ones, line_points, weight_type=np.float32)
    assert g.weight_type == np.float32


def test_wrong_weight_count_aborts(line_points):
    def bad(j, neigh, x_j, x_neigh):
        return np.ones(len(neigh) + 1)

    with pytest.raises(ValueError):
        create(CliqueNeighborhood(), bad, line_points)


def test_oracle_failure_propagates(blobs):
    class Boom(RuntimeError):
        pass

    def oracle(j, neigh, x_j, x_neigh):
        if j == 17:
            raise Boom("vertex 17")
        return np.ones(len(neigh))

    with pytest.raises(Boom):
        create(CliqueNeighborhood(), oracle, blobs, max_workers=4)


def test_neighbourhood_failure_propagates(line_points):
    with pytest.raises(InsufficientDataError):
        create(RandomNeighborhood(9), ones, line_points)


def test_raw_array_dataset():
    X = np.array([[0.0, 0.0], [0.0, 1.0], [3.0, 3.0]])
    g = create(CliqueNeighborhood(), ones, X)
    assert g.number_of_edges == 6


def test_create_rejects_unknown():
    with pytest.raises(TypeError):
        create("knn", ones, np.zeros((2, 1)))


# ---------------------------------------------------------------------------
# Random k-graph

def test_random_k_graph_end_to_end():
    g = create(RandomKGraph(4, 3))
    assert g.number_of_vertices == 4
    for i in range(4):
        out = g.out_edges(i)
        assert len(out) >= 3
        for target, w in out:
            assert target != i
            assert 0.0 <= w < 1.0


def test_random_k_graph_exactly_k_attempts_per_vertex():
    g = create(RandomKGraph(10, 4, seed=3))
    assert g.number_of_edges == 40
    assert all(g.out_degree(i) == 4 for i in range(10))


def test_random_k_graph_seed_reproducible():
    a = create(RandomKGraph(8, 2, seed=11)).edges()
    b = create(RandomKGraph(8, 2, seed=11)).edges()
    assert a == b


def test_random_k_graph_can_repeat_partners():
    # two vertices: every attempt must hit the only other vertex
    g = create(RandomKGraph(2, 3, seed=0))
    assert [t for t, _ in g.out_edges(0)] == [1, 1, 1]


def test_random_k_graph_validation():
    with pytest.raises(ValueError):
        RandomKGraph(1, 1)
    with pytest.raises(ValueError):
        RandomKGraph(-1, 0)
    assert create(RandomKGraph(1, 0)).number_of_edges == 0


def test_seeded_random_neighbourhood_is_schedule_independent():
    X = FeatureMatrix(np.random.default_rng(5).normal(size=(400, 2)))
    seq = create(RandomNeighborhood(5, rng=42), ones, X, max_workers=1).edges()
    for _ in range(4):
        assert create(RandomNeighborhood(5, rng=42), ones, X, max_workers=8).edges() == seq
    other = create(RandomNeighborhood(5, rng=43), ones, X, max_workers=8).edges()
    assert other != seq
