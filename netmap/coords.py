"""
coords.py – one x/y pair per vertex, from the map or from a layout

Geographic mode reads `lon` / `lat` vertex attributes and suppresses
outliers so one miscoded vertex cannot blow up the visible extent.
Layout mode runs networkx's Fruchterman-Reingold (`spring_layout`) on the
unweighted adjacency; its coordinates fill the same `lon` / `lat` columns.

Missing coordinates are NaN and stay in the frame.
"""
from __future__ import annotations

import logging
from typing import Optional, Tuple

import networkx as nx
import numpy as np
import pandas as pd

from .attributes import AttributeStore, node_index

log = logging.getLogger("netmap.coords")

OUTLIER_QUANTILE = 0.9


def _abs_quantile(values: np.ndarray, q: float) -> float:
    finite = np.abs(values[~np.isnan(values)])
    if finite.size == 0:
        return np.nan
    return float(np.quantile(finite, q))


def suppress_outliers(lon, lat, q: float = OUTLIER_QUANTILE) -> Tuple[np.ndarray, np.ndarray]:
    """
    Blank coordinates beyond the `q` quantile of their absolute values.

    Three passes, in this order, each reading the NaNs the previous one
    wrote:

    1. longitudes above the |lon| cutoff
    2. latitudes whose longitude is now missing, or above the |lat| cutoff
    3. longitudes whose latitude is now missing
    """
    lon = np.array(lon, dtype=float)
    lat = np.array(lat, dtype=float)
    before = int(np.isnan(lon).sum())

    lon_cut = _abs_quantile(lon, q)
    if not np.isnan(lon_cut):
        lon[np.abs(lon) > lon_cut] = np.nan

    lat_cut = _abs_quantile(lat, q)
    too_far = np.abs(lat) > lat_cut if not np.isnan(lat_cut) else np.zeros(lat.shape, bool)
    lat[np.isnan(lon) | too_far] = np.nan

    lon[np.isnan(lat)] = np.nan

    log.debug("Outlier suppression blanked %d of %d vertices",
              int(np.isnan(lon).sum()) - before, lon.size)
    return lon, lat


def geographic_coordinates(net: nx.Graph, lon_attr: str = "lon", lat_attr: str = "lat"
                           ) -> pd.DataFrame:
    """Read `lon_attr` / `lat_attr` per vertex and suppress outliers."""
    store = AttributeStore(net)
    lon, lat = suppress_outliers(store.numeric(lon_attr), store.numeric(lat_attr))
    return pd.DataFrame({"lon": lon, "lat": lat}, index=node_index(net))


def layout_coordinates(net: nx.Graph, seed: Optional[int] = None) -> pd.DataFrame:
    """Fruchterman-Reingold positions on the unweighted adjacency."""
    pos = nx.spring_layout(net, weight=None, seed=seed)
    index = node_index(net)
    xy = np.array([pos[n] for n in net.nodes], dtype=float).reshape(-1, 2)
    log.debug("Force-directed layout placed %d vertices", len(index))
    return pd.DataFrame({"lon": xy[:, 0], "lat": xy[:, 1]}, index=index)
