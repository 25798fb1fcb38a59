import sys
from pathlib import Path

import networkx as nx
import numpy as np
import pandas as pd
import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(PROJECT_ROOT))

from netmap.edges import arrow_tails, edge_frame, great_circle_paths  # noqa: E402


def _coords(rows):
    return pd.DataFrame(rows, columns=["key", "lon", "lat"]).set_index("key")


def test_edge_frame_looks_up_both_endpoints():
    g = nx.Graph([("a", "b")])
    out = edge_frame(_coords([("a", 0.0, 0.0), ("b", 0.0, 10.0)]), g)
    assert out.to_dict("records") == [{"lat1": 0.0, "lon1": 0.0, "lat2": 10.0, "lon2": 0.0}]


def test_edge_frame_drops_missing_endpoints():
    g = nx.Graph([("a", "b"), ("b", "c")])
    coords = _coords([("a", 1.0, 1.0), ("b", 2.0, 2.0), ("c", np.nan, np.nan)])
    out = edge_frame(coords, g)
    assert len(out) == 1
    assert out.loc[0, "lat2"] == 2.0


def test_edge_frame_drops_same_latitude_even_if_longitudes_differ():
    g = nx.Graph([("a", "b"), ("a", "c")])
    coords = _coords([("a", 0.0, 5.0), ("b", 40.0, 5.0), ("c", 0.0, 6.0)])
    out = edge_frame(coords, g)
    assert len(out) == 1
    assert out.loc[0, "lat2"] == 6.0


def test_edge_frame_keeps_same_longitude():
    g = nx.Graph([("a", "b")])
    out = edge_frame(_coords([("a", 3.0, 1.0), ("b", 3.0, 2.0)]), g)
    assert len(out) == 1


def test_edge_frame_respects_direction():
    g = nx.DiGraph([("b", "a")])
    out = edge_frame(_coords([("a", 0.0, 0.0), ("b", 1.0, 1.0)]), g)
    assert (out.loc[0, "lon1"], out.loc[0, "lon2"]) == (1.0, 0.0)


def test_edge_frame_without_edges():
    g = nx.Graph()
    g.add_node("a")
    out = edge_frame(_coords([("a", 0.0, 0.0)]), g)
    assert out.empty
    assert list(out.columns) == ["lat1", "lon1", "lat2", "lon2"]


def test_great_circle_has_start_midpoint_end():
    edges = pd.DataFrame([{"lat1": 0.0, "lon1": 0.0, "lat2": 10.0, "lon2": 0.0}])
    paths = great_circle_paths(edges)
    assert len(paths) == 3
    assert paths["group"].tolist() == [1, 1, 1]
    assert paths[["lon", "lat"]].iloc[0].tolist() == [0.0, 0.0]
    assert paths["lon"].iloc[1] == pytest.approx(0.0, abs=1e-6)
    assert paths["lat"].iloc[1] == pytest.approx(5.0, abs=1e-6)
    assert paths[["lon", "lat"]].iloc[2].tolist() == [0.0, 10.0]


def test_great_circle_bows_toward_pole():
    edges = pd.DataFrame([{"lat1": 45.0, "lon1": -60.0, "lat2": 45.0, "lon2": 60.0}])
    mid = great_circle_paths(edges).iloc[1]
    assert mid["lat"] > 45.0
    assert mid["lon"] == pytest.approx(0.0, abs=1e-6)


def test_great_circle_one_path_per_distinct_geometry():
    edges = pd.DataFrame([
        {"lat1": 5.0, "lon1": 0.0, "lat2": 6.0, "lon2": 1.0},
        {"lat1": 1.0, "lon1": 0.0, "lat2": 2.0, "lon2": 1.0},
        {"lat1": 5.0, "lon1": 0.0, "lat2": 6.0, "lon2": 1.0},
    ])
    paths = great_circle_paths(edges)
    assert len(paths) == 6
    assert sorted(paths["group"].unique()) == [1, 2]
    # groups follow the sorted edge geometry
    assert paths.loc[paths["group"] == 1, "lat"].iloc[0] == 1.0


def test_great_circle_more_points():
    edges = pd.DataFrame([{"lat1": 0.0, "lon1": 0.0, "lat2": 10.0, "lon2": 0.0}])
    assert len(great_circle_paths(edges, n=4)) == 6


def test_great_circle_empty():
    paths = great_circle_paths(pd.DataFrame(columns=["lat1", "lon1", "lat2", "lon2"]))
    assert paths.empty
    assert list(paths.columns) == ["lon", "lat", "group"]


def test_arrow_tails_are_last_two_points():
    paths = pd.DataFrame({
        "lon": [0.0, 0.0, 0.0, 5.0, 6.0, 7.0],
        "lat": [0.0, 5.0, 10.0, 1.0, 2.0, 3.0],
        "group": [1, 1, 1, 2, 2, 2],
    })
    tails = arrow_tails(paths)
    assert tails.to_dict("records") == [
        {"lon1": 0.0, "lat1": 5.0, "lon2": 0.0, "lat2": 10.0},
        {"lon1": 6.0, "lat1": 2.0, "lon2": 7.0, "lat2": 3.0},
    ]
