"""
edges.py – edge list → drawable segments or great-circle paths
────────────────────────────────────────────────────────────────────
Each edge is looked up in the vertex coordinate frame.  Edges with a
missing endpoint coordinate are dropped, and so are edges whose two
endpoints share a latitude.

Great circles are interpolated with pyproj on a sphere: one path per
distinct edge geometry, start → intermediate point(s) → end.

Public symbols
--------------
edge_frame(coords, net)          – lat1 / lon1 / lat2 / lon2 per edge
great_circle_paths(edges, n=1)   – lon / lat / group rows per unique edge
"""
from __future__ import annotations

import logging

import networkx as nx
import pandas as pd
from pyproj import Geod

log = logging.getLogger("netmap.edges")
_GEOD = Geod(ellps="sphere")                   # spherical earth, like geosphere

GREAT_CIRCLE_POINTS = 1                        # intermediate points per arc
EDGE_COLUMNS = ["lat1", "lon1", "lat2", "lon2"]


# ────────────────────────────────────────────────────────────────────────────
# public API
# ────────────────────────────────────────────────────────────────────────────
def edge_frame(coords: pd.DataFrame, net: nx.Graph) -> pd.DataFrame:
    """
    Endpoint coordinates for every drawable edge of `net`.

    NOTE: the degeneracy test only compares latitudes.  Two endpoints on
    the same parallel are dropped even when their longitudes differ, and
    longitude is never compared at all.
    """
    pairs = list(net.edges())
    if not pairs:
        return pd.DataFrame(columns=EDGE_COLUMNS, dtype=float)

    row = {key: i for i, key in enumerate(coords.index)}
    latlon = coords[["lat", "lon"]].to_numpy(dtype=float)
    src = latlon[[row[u] for u, _ in pairs]]
    dst = latlon[[row[v] for _, v in pairs]]
    edges = pd.DataFrame({
        "lat1": src[:, 0],
        "lon1": src[:, 1],
        "lat2": dst[:, 0],
        "lon2": dst[:, 1],
    })

    keep = edges[EDGE_COLUMNS].notna().all(axis=1) & ~(edges["lat1"] == edges["lat2"])
    dropped = int((~keep).sum())
    if dropped:
        log.debug("Dropped %d of %d edges (missing or same-latitude endpoints)",
                  dropped, len(edges))
    return edges[keep].reset_index(drop=True)


def great_circle_paths(edges: pd.DataFrame, n: int = GREAT_CIRCLE_POINTS) -> pd.DataFrame:
    """
    Bend every distinct edge geometry into a great-circle polyline.

    Edges are grouped by (lat1, lat2, lon1, lon2) in sorted order; group
    ``k`` (1-based) yields ``n + 2`` rows: the start, `n` points from
    `Geod.npts`, and the end.
    """
    if edges.empty:
        return pd.DataFrame({"lon": pd.Series(dtype=float),
                             "lat": pd.Series(dtype=float),
                             "group": pd.Series(dtype=int)})

    unique = (edges[["lat1", "lat2", "lon1", "lon2"]]
              .drop_duplicates()
              .sort_values(["lat1", "lat2", "lon1", "lon2"])
              .reset_index(drop=True))

    rows = []
    for k, e in enumerate(unique.itertuples(index=False), start=1):
        inner = _GEOD.npts(e.lon1, e.lat1, e.lon2, e.lat2, n)
        points = [(e.lon1, e.lat1), *inner, (e.lon2, e.lat2)]
        rows.extend((lon, lat, k) for lon, lat in points)

    paths = pd.DataFrame(rows, columns=["lon", "lat", "group"])
    log.debug("Interpolated %d great-circle arcs from %d edges",
              len(unique), len(edges))
    return paths


def arrow_tails(paths: pd.DataFrame) -> pd.DataFrame:
    """Last two points of every path group: where an arrowhead sits."""
    tail = paths.groupby("group", sort=True).tail(2)
    first = tail.groupby("group").nth(0).reset_index(drop=True)
    last = tail.groupby("group").nth(1).reset_index(drop=True)
    return pd.DataFrame({
        "lon1": first["lon"].to_numpy(),
        "lat1": first["lat"].to_numpy(),
        "lon2": last["lon"].to_numpy(),
        "lat2": last["lat"].to_numpy(),
    })
