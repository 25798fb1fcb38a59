"""
normalize.py – accept the caller's graph and prune it before layout

Public symbols
--------------
as_network(graph)                          – networkx copy of the input
vertex_weights(net, weight_method)         – attribute value or total degree
subset_vertices(net, threshold, method)    – drop vertices below threshold
"""
from __future__ import annotations

import logging
from typing import Any, Hashable, List

import networkx as nx
import pandas as pd

from .attributes import AttributeStore, node_index
from .errors import InvalidInputType
from .options import is_given

log = logging.getLogger("netmap.normalize")


def _is_igraph(obj: Any) -> bool:
    try:
        import igraph
    except ImportError:
        return False
    return isinstance(obj, igraph.Graph)


def _from_igraph(g) -> nx.Graph:
    net = g.to_networkx()
    names = [d.get("name") for _, d in net.nodes(data=True)]
    if names and all(n is not None for n in names) and len(set(names)) == len(names):
        net = nx.relabel_nodes(net, {n: d["name"] for n, d in net.nodes(data=True)})
    log.debug("Converted igraph graph (%d vertices)", net.number_of_nodes())
    return net


def as_network(graph: Any) -> nx.Graph:
    """
    Return a private networkx copy of `graph`.

    igraph graphs are converted; vertices are keyed by their ``name``
    attribute when every vertex has a distinct one.
    """
    if isinstance(graph, nx.Graph):
        return graph.copy()
    if _is_igraph(graph):
        return _from_igraph(graph)
    raise InvalidInputType(
        f"graph must be a networkx or igraph graph, got {type(graph).__name__}"
    )


def vertex_weights(net: nx.Graph, weight_method: Any = None) -> pd.Series:
    """Per-vertex weighting: the named attribute, else total degree."""
    if is_given(weight_method):
        return AttributeStore(net).numeric(weight_method)
    return pd.Series([d for _, d in net.degree()], index=node_index(net), dtype=float)


def subset_vertices(net: nx.Graph, threshold: float, weight_method: Any = None) -> List[Hashable]:
    """
    Remove, in place, every vertex whose weighting value is below `threshold`.

    A threshold of 0 leaves the graph untouched.  Returns the removed keys.
    """
    if threshold <= 0:
        return []
    weights = vertex_weights(net, weight_method)
    doomed = list(weights.index[weights < threshold])
    net.remove_nodes_from(doomed)
    log.debug("Subset < %s removed %d of %d vertices",
              threshold, len(doomed), len(weights))
    return doomed
