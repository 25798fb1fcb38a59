"""
plot.py – `plot_network`: graph in, chart layers out

Stages, strictly in this order
------------------------------
① normalise the input graph to a private networkx copy
② drop vertices below `subset_threshold` (before any layout)
③ coordinates: `lon` / `lat` attributes when a chart is supplied,
   a force-directed layout otherwise
④ node aesthetics: labels, fill groups, rings, weights
⑤ edges: straight segments or great-circle paths
⑥ layers: edges, then nodes (+ scales), then labels

Nothing is shown or saved here; the extended chart is returned so the
caller can keep composing it.
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Sequence, Union

import plotly.graph_objects as go

from .attributes import map_attributes
from .chart import Chart, PlotlyChart
from .coords import geographic_coordinates, layout_coordinates
from .edges import edge_frame, great_circle_paths
from .normalize import as_network, subset_vertices
from .options import UNSET, PlotOptions, is_given
from .scales import ColorScale

logger = logging.getLogger("netmap.plot")


def _as_chart(chart: Any) -> Chart:
    if isinstance(chart, go.Figure):
        return PlotlyChart(chart)
    if isinstance(chart, Chart):
        return chart
    raise TypeError(f"chart must implement Chart or be a plotly Figure, got {type(chart).__name__}")


def _title(attribute: Any) -> Optional[str]:
    return attribute if is_given(attribute) else None


def _edge_params(opts: PlotOptions) -> dict:
    params = dict(size=opts.segment_size, alpha=opts.segment_alpha_value,
                  colour=opts.segment_color)
    if opts.arrow_size > 0:
        params["arrow"] = dict(type="closed", length=opts.arrow_size)
    return params


def plot_network(
    graph: Any,
    chart: Optional[Union[Chart, go.Figure]] = None,
    *,
    size: float = 3,
    alpha: float = 0.75,
    weight_method: Any = UNSET,
    node_group: Any = UNSET,
    node_color: Any = UNSET,
    node_alpha: Optional[float] = None,
    ring_group: Any = UNSET,
    ring_color: Any = None,
    segment_alpha: Optional[float] = None,
    segment_color: str = "grey",
    segment_size: float = 0.25,
    great_circles: bool = False,
    arrow_size: float = 0,
    label_nodes: Union[bool, Sequence[str]] = False,
    label_size: Optional[float] = None,
    quantize_weights: bool = False,
    subset_threshold: float = 0,
    label_attr: Optional[str] = None,
    lon_attr: str = "lon",
    lat_attr: str = "lat",
    layout_seed: Optional[int] = None,
    **label_kwargs: Any,
) -> Chart:
    """
    Draw `graph` as points and lines on `chart`, or on a fresh chart.

    With a `chart` the vertices are placed by their `lon` / `lat`
    attributes (outliers beyond the 90th percentile of absolute values are
    blanked); without one, by a Fruchterman-Reingold layout.

    Parameters
    ----------
    graph            : networkx graph, or igraph graph (converted)
    chart            : `Chart` or plotly `Figure` to draw on
    size             : node size in mm; maximum size when weighted
    alpha            : transparency inherited by nodes and edges
    weight_method    : vertex attribute driving node size
    node_group       : vertex attribute driving node fill colour
    node_color       : static fill colour, or a `ColorScale` for `node_group`
    ring_group       : vertex attribute driving node outline colour
    ring_color       : `ColorScale` for `ring_group`, or a static outline colour
    great_circles    : bend edges along great circles
    arrow_size       : arrowhead length in cm, 0 for none
    label_nodes      : False, True, or the vertex labels to show
    quantize_weights : size nodes by weight quartile
    subset_threshold : drop vertices whose weight (or degree) is below this
    **label_kwargs   : forwarded verbatim to the label layer

    Returns the chart.  Raises `InvalidInputType`, `NonUniqueQuantization`,
    `AttributeNotFound`, or `pydantic.ValidationError` for bad options.
    """
    opts = PlotOptions(
        size=size, alpha=alpha, weight_method=weight_method,
        node_group=node_group, node_color=node_color, node_alpha=node_alpha,
        ring_group=ring_group, ring_color=ring_color,
        segment_alpha=segment_alpha, segment_color=segment_color,
        segment_size=segment_size, great_circles=great_circles,
        arrow_size=arrow_size, label_nodes=label_nodes, label_size=label_size,
        label_attr=label_attr, label_kwargs=label_kwargs,
        quantize_weights=quantize_weights, subset_threshold=subset_threshold,
        lon_attr=lon_attr, lat_attr=lat_attr, layout_seed=layout_seed,
    )
    for name in opts.explicitly_disabled():
        logger.debug("%s explicitly disabled", name)

    # 1 ▸ input ------------------------------------------------------------
    net = as_network(graph)

    # 2 ▸ subset -----------------------------------------------------------
    subset_vertices(net, opts.subset_threshold, opts.weight_method)
    if net.number_of_nodes() == 0:
        logger.warning("No vertices left to plot")

    # 3 ▸ coordinates ------------------------------------------------------
    if chart is None:
        chart = PlotlyChart()
        coords = layout_coordinates(net, seed=opts.layout_seed)
    else:
        chart = _as_chart(chart)
        coords = geographic_coordinates(net, opts.lon_attr, opts.lat_attr)

    # 4 ▸ node aesthetics --------------------------------------------------
    coords, node_aes = map_attributes(net, coords, opts)

    # 5 ▸ edges ------------------------------------------------------------
    edges = edge_frame(coords, net)
    if net.number_of_edges() and edges.empty:
        logger.warning("None of the %d edges has drawable endpoints", net.number_of_edges())

    if opts.great_circles:
        paths = great_circle_paths(edges)
        chart.add_line_layer(paths, {"x": "lon", "y": "lat", "group": "group"},
                             _edge_params(opts), geom="path")
    else:
        chart.add_line_layer(edges, {"x": "lon1", "y": "lat1", "xend": "lon2", "yend": "lat2"},
                             _edge_params(opts), geom="segment")

    # 6 ▸ nodes + scales ---------------------------------------------------
    chart.add_point_layer(coords, node_aes.mapping, node_aes.params)
    if node_aes.size_scale is not None:
        chart.add_scale(node_aes.size_scale)
    if isinstance(opts.node_color, ColorScale):
        chart.add_scale(opts.node_color.with_defaults("fill", _title(opts.node_group)))
    if isinstance(opts.ring_color, ColorScale):
        chart.add_scale(opts.ring_color.with_defaults("colour", _title(opts.ring_group)))

    # 7 ▸ labels -----------------------------------------------------------
    labelled = coords[coords["id"] != ""]
    if not labelled.empty:
        chart.add_text_layer(
            labelled,
            {"x": "lon", "y": "lat", "label": "id"},
            {"size": opts.label_size_value, "extra": dict(opts.label_kwargs)},
        )

    logger.debug("Plotted %d vertices, %d edges, %d labels",
                 len(coords), len(edges), len(labelled))
    return chart
