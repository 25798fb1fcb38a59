import sys
from pathlib import Path

import networkx as nx
import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(PROJECT_ROOT))

from netmap.errors import AttributeNotFound, InvalidInputType  # noqa: E402
from netmap.normalize import as_network, subset_vertices, vertex_weights  # noqa: E402
from netmap.options import UNSET  # noqa: E402


@pytest.fixture
def star():
    g = nx.star_graph(4)                       # hub 0 with degree 4
    for n in g.nodes:
        g.nodes[n]["pop"] = 10 * n
    return g


def test_as_network_returns_private_copy(star):
    net = as_network(star)
    net.remove_node(0)
    assert 0 in star
    assert star.number_of_nodes() == 5


def test_as_network_keeps_direction():
    net = as_network(nx.DiGraph([(1, 2)]))
    assert net.is_directed()


@pytest.mark.parametrize("bad", [None, {"a": ["b"]}, [(1, 2)], "graph"])
def test_as_network_rejects_other_types(bad):
    with pytest.raises(InvalidInputType):
        as_network(bad)


def test_as_network_converts_igraph():
    ig = pytest.importorskip("igraph")
    g = ig.Graph([(0, 1), (1, 2)])
    g.vs["name"] = ["a", "b", "c"]
    g.vs["lon"] = [1.0, 2.0, 3.0]
    net = as_network(g)
    assert isinstance(net, nx.Graph)
    assert set(net.nodes) == {"a", "b", "c"}
    assert net.number_of_edges() == 2
    assert net.nodes["b"]["lon"] == 2.0


def test_vertex_weights_default_to_degree(star):
    w = vertex_weights(star)
    assert w[0] == 4
    assert (w.drop(0) == 1).all()


def test_vertex_weights_total_degree_when_directed():
    w = vertex_weights(nx.DiGraph([(1, 2), (3, 2), (2, 4)]))
    assert w[2] == 3


def test_vertex_weights_from_attribute(star):
    assert vertex_weights(star, "pop").tolist() == [0, 10, 20, 30, 40]
    assert vertex_weights(star, UNSET)[0] == 4


def test_subset_zero_is_noop(star):
    assert subset_vertices(star, 0) == []
    assert star.number_of_nodes() == 5


def test_subset_by_degree(star):
    removed = subset_vertices(star, 2)
    assert sorted(removed) == [1, 2, 3, 4]
    assert list(star.nodes) == [0]
    assert star.number_of_edges() == 0


def test_subset_by_attribute(star):
    subset_vertices(star, 20, "pop")
    assert sorted(star.nodes) == [2, 3, 4]


def test_subset_above_max_removes_everything(star):
    subset_vertices(star, 1000, "pop")
    assert star.number_of_nodes() == 0


def test_subset_unknown_attribute_propagates(star):
    with pytest.raises(AttributeNotFound):
        subset_vertices(star, 1, "nope")
