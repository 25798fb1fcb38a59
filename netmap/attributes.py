"""
attributes.py – typed vertex-attribute access and node aesthetics

Public symbols
--------------
AttributeStore            – typed getters over networkx node data
resolve_labels(...)       – blank the labels that should not be drawn
quantize_weights(values)  – quartile buckets 1..4 + their legend labels
map_attributes(...)       – fill / ring / size columns for the node layer
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

import networkx as nx
import numpy as np
import pandas as pd

from .errors import AttributeNotFound, NonUniqueQuantization
from .options import UNSET, PlotOptions, is_given
from .scales import SizeAreaScale

log = logging.getLogger("netmap.attributes")

# ─────────────────────────────────────────────────────────────────────────────
# PUBLIC PARAMETERS
# ─────────────────────────────────────────────────────────────────────────────
DEFAULT_NODE_COLOUR = "black"
QUARTILES = (0.0, 0.25, 0.5, 0.75, 1.0)
SHAPE_SOLID = 19          # ggplot2 shape codes
SHAPE_FILLED_RING = 21


def node_index(net: nx.Graph) -> pd.Index:
    """Index of vertex keys in graph order (tuple keys stay scalar)."""
    return pd.Index(list(net.nodes), tupleize_cols=False)


# ─────────────────────────────────────────────────────────────────────────────
# Attribute store
# ─────────────────────────────────────────────────────────────────────────────
class AttributeStore:
    """
    Read vertex attributes by name.

    A vertex that lacks an attribute yields a missing value; an attribute
    that no vertex carries raises `AttributeNotFound`.  A graph with no
    vertices yields empty columns for any name.
    """

    def __init__(self, net: nx.Graph):
        self._net = net
        self._index = node_index(net)

    def names(self) -> List[str]:
        keys = set()
        for _, data in self._net.nodes(data=True):
            keys.update(data)
        return sorted(keys, key=str)

    def __contains__(self, name: str) -> bool:
        return any(name in d for _, d in self._net.nodes(data=True))

    def raw(self, name: str) -> pd.Series:
        if self._net.number_of_nodes() and name not in self:
            raise AttributeNotFound(name)
        values = [d.get(name) for _, d in self._net.nodes(data=True)]
        return pd.Series(values, index=self._index, dtype=object, name=name)

    def numeric(self, name: str) -> pd.Series:
        raw = self.raw(name)
        out = pd.to_numeric(raw, errors="coerce").astype(float)
        coerced = int((out.isna() & raw.notna()).sum())
        if coerced:
            log.warning("%d non-numeric values of %r treated as missing", coerced, name)
        return out

    def categorical(self, name: str) -> pd.Series:
        raw = self.raw(name)
        levels = sorted({v for v in raw.dropna()}, key=str)
        return pd.Series(pd.Categorical(raw, categories=levels), index=self._index, name=name)

    def strings(self, name: str) -> pd.Series:
        raw = self.raw(name)
        return raw.map(lambda v: "" if v is None else str(v)).astype(str)


# ─────────────────────────────────────────────────────────────────────────────
# Labels
# ─────────────────────────────────────────────────────────────────────────────
def resolve_labels(labels: pd.Series, label_nodes: Union[bool, Sequence[str]]) -> pd.Series:
    """`False` blanks every label, `True` keeps all, a list keeps only its members."""
    labels = labels.astype(str)
    if isinstance(label_nodes, bool):
        return labels if label_nodes else labels.map(lambda _: "")
    keep = {str(x) for x in label_nodes}
    return labels.where(labels.isin(keep), "")


def vertex_labels(net: nx.Graph, label_attr: Optional[str] = None) -> pd.Series:
    """Display label per vertex: the key itself, or the named attribute."""
    if label_attr is None:
        return pd.Series([str(n) for n in net.nodes], index=node_index(net), name="id")
    return AttributeStore(net).strings(label_attr).rename("id")


# ─────────────────────────────────────────────────────────────────────────────
# Weights
# ─────────────────────────────────────────────────────────────────────────────
def _fmt(x: float) -> str:
    return f"{x:.6g}"


def quantize_weights(values: pd.Series) -> Tuple[pd.Series, List[str]]:
    """
    Cut `values` at their own quartiles (lowest bin closed on the left).

    Returns the bucket number (1..4, NaN where the value is missing) and
    the ordered bucket labels.  Raises `NonUniqueQuantization` when the
    quartile breaks collapse.
    """
    values = pd.Series(values, dtype=float)
    if values.notna().sum() == 0:
        raise NonUniqueQuantization("cannot quantize weights: every value is missing")
    breaks = np.nanquantile(values.to_numpy(), QUARTILES)
    if len(np.unique(breaks)) != len(breaks):
        raise NonUniqueQuantization(
            "quartiles do not uniquely partition the weights: breaks "
            + ", ".join(_fmt(b) for b in breaks)
        )
    labels = [
        ("[" if i == 0 else "(") + f"{_fmt(lo)},{_fmt(hi)}]"
        for i, (lo, hi) in enumerate(zip(breaks[:-1], breaks[1:]))
    ]
    try:
        buckets = pd.cut(values, bins=breaks, labels=labels,
                         include_lowest=True, ordered=True)
    except ValueError as exc:
        raise NonUniqueQuantization(str(exc)) from exc
    codes = pd.Series(buckets.cat.codes, index=values.index).astype(float) + 1
    codes[codes == 0] = np.nan
    log.debug("Quantized %d weights into %s", values.notna().sum(), labels)
    return codes, labels


# ─────────────────────────────────────────────────────────────────────────────
# Node aesthetics
# ─────────────────────────────────────────────────────────────────────────────
@dataclass
class NodeAesthetics:
    """What the node layer maps, what it sets, and the scales it brings."""

    mapping: Dict[str, str] = field(default_factory=dict)
    params: Dict[str, Any] = field(default_factory=dict)
    size_scale: Optional[SizeAreaScale] = None


def map_attributes(net: nx.Graph, coords: pd.DataFrame, opts: PlotOptions
                   ) -> Tuple[pd.DataFrame, NodeAesthetics]:
    """Add ``id``, ``ngroup``, ``rgroup``, ``weight`` columns as requested."""
    store = AttributeStore(net)
    coords = coords.copy()
    aes = NodeAesthetics(
        mapping={"x": "lon", "y": "lat"},
        params={"alpha": opts.node_alpha_value, "shape": SHAPE_SOLID},
    )

    # fill groups ------------------------------------------------------------
    if is_given(opts.node_group):
        coords["ngroup"] = store.categorical(opts.node_group)
        aes.mapping["fill"] = "ngroup"
    elif isinstance(opts.node_color, str):
        aes.params["fill"] = opts.node_color
    elif opts.node_color is UNSET:
        aes.params["fill"] = DEFAULT_NODE_COLOUR

    # rings ------------------------------------------------------------------
    if is_given(opts.ring_group):
        coords["rgroup"] = store.categorical(opts.ring_group)
        aes.mapping["colour"] = "rgroup"
        aes.params["shape"] = SHAPE_FILLED_RING
    elif isinstance(opts.ring_color, str):
        aes.params["colour"] = opts.ring_color
        aes.params["shape"] = SHAPE_FILLED_RING

    # labels -----------------------------------------------------------------
    coords["id"] = resolve_labels(vertex_labels(net, opts.label_attr), opts.label_nodes)

    # weights ----------------------------------------------------------------
    if not opts.weighted:
        aes.params["size"] = opts.size
        return coords, aes

    coords["weight"] = store.numeric(opts.weight_method)
    aes.mapping["size"] = "weight"
    if opts.quantize_weights and len(coords):
        codes, labels = quantize_weights(coords["weight"])
        coords["weight_label"] = pd.Categorical.from_codes(
            codes.fillna(0).astype(int) - 1, categories=labels, ordered=True
        )
        coords["weight"] = codes
        aes.size_scale = SizeAreaScale(opts.weight_method, max_size=opts.size, labels=labels)
    else:
        aes.size_scale = SizeAreaScale(opts.weight_method, max_size=opts.size)
    return coords, aes
