"""
chart.py – layer-accumulating chart interface and its plotly backend

The pipeline only ever *appends* to a chart: line, point and text layers
plus scales, in the order ggplot2 would receive them.  `PlotlyChart`
records every call as a `Layer` and turns the lot into a
`plotly.graph_objects.Figure` when `.figure` is read, drawn on top of
whatever figure it was created with.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol, Union, runtime_checkable

import numpy as np
import pandas as pd
import plotly.graph_objects as go

from .edges import arrow_tails
from .scales import ColorScale, SizeAreaScale

log = logging.getLogger("netmap.chart")

Scale = Union[SizeAreaScale, ColorScale]

# ─────────────────────────────────────────────────────────────────────────────
# PUBLIC PARAMETERS
# ─────────────────────────────────────────────────────────────────────────────
MM_TO_PX = 96 / 25.4              # ggplot sizes are millimetres
CM_TO_PX = 96 / 2.54
RING_WIDTH_MM = 0.5
DEFAULT_MAX_SIZE_MM = 6           # size scale used when none was added
MIN_ARROWSIZE = 0.3               # plotly rejects smaller values


@dataclass
class Layer:
    """One drawing instruction: geometry kind, its rows, mapped columns, set values."""

    kind: str                          # "segment" | "path" | "point" | "text"
    data: pd.DataFrame
    mapping: Dict[str, str] = field(default_factory=dict)
    params: Dict[str, Any] = field(default_factory=dict)


@runtime_checkable
class Chart(Protocol):
    """What the plotting pipeline needs from a charting backend."""

    def add_line_layer(self, data: pd.DataFrame, mapping: Dict[str, str],
                       params: Dict[str, Any], geom: str = "segment") -> "Chart":
        ...

    def add_point_layer(self, data: pd.DataFrame, mapping: Dict[str, str],
                        params: Dict[str, Any]) -> "Chart":
        ...

    def add_text_layer(self, data: pd.DataFrame, mapping: Dict[str, str],
                       params: Dict[str, Any]) -> "Chart":
        ...

    def add_scale(self, scale: Scale) -> "Chart":
        ...


# ─────────────────────────────────────────────────────────────────────────────
# plotly backend
# ─────────────────────────────────────────────────────────────────────────────
def _px(mm: float) -> float:
    return float(mm) * MM_TO_PX


def _join(groups: List[pd.DataFrame], x: str, y: str):
    """Concatenate polylines with ``None`` breaks so one trace draws them all."""
    xs: List[Optional[float]] = []
    ys: List[Optional[float]] = []
    for g in groups:
        xs.extend(g[x].tolist() + [None])
        ys.extend(g[y].tolist() + [None])
    return xs, ys


class PlotlyChart:
    """Chart backed by a plotly figure; `figure` is rebuilt from the layers on access."""

    def __init__(self, figure: Optional[go.Figure] = None):
        self.base = go.Figure(figure) if figure is not None else go.Figure()
        self.layers: List[Layer] = []
        self.scales: List[Scale] = []

    def __repr__(self) -> str:
        kinds = ", ".join(layer.kind for layer in self.layers) or "empty"
        return f"<PlotlyChart layers=[{kinds}] scales={len(self.scales)}>"

    # ── Chart interface ─────────────────────────────────────────────────
    def add_line_layer(self, data, mapping, params, geom="segment"):
        if geom not in ("segment", "path"):
            raise ValueError(f"unknown line geometry {geom!r}")
        self.layers.append(Layer(geom, data, dict(mapping), dict(params)))
        return self

    def add_point_layer(self, data, mapping, params):
        self.layers.append(Layer("point", data, dict(mapping), dict(params)))
        return self

    def add_text_layer(self, data, mapping, params):
        self.layers.append(Layer("text", data, dict(mapping), dict(params)))
        return self

    def add_scale(self, scale):
        self.scales.append(scale)
        return self

    # ── inspection ──────────────────────────────────────────────────────
    def layers_of(self, kind: str) -> List[Layer]:
        return [layer for layer in self.layers if layer.kind == kind]

    def scale_for(self, aesthetic: str) -> Optional[Scale]:
        """Last scale added for `aesthetic` ("size", "fill" or "colour")."""
        for scale in reversed(self.scales):
            if aesthetic == "size" and isinstance(scale, SizeAreaScale):
                return scale
            if isinstance(scale, ColorScale) and scale.aesthetic == aesthetic:
                return scale
        return None

    # ── rendering ───────────────────────────────────────────────────────
    @property
    def figure(self) -> go.Figure:
        fig = go.Figure(self.base)
        log.debug("Rendering %d layers, %d scales", len(self.layers), len(self.scales))
        for layer in self.layers:
            render = getattr(self, f"_render_{layer.kind}")
            render(fig, layer)
        self._render_scales(fig)
        return fig

    def _line_style(self, params: Dict[str, Any]) -> Dict[str, Any]:
        return dict(color=params.get("colour", "grey"), width=max(_px(params.get("size", 0.25)), 0.5))

    def _render_arrows(self, fig: go.Figure, tails: pd.DataFrame, params: Dict[str, Any]):
        arrow = params.get("arrow")
        if not arrow or tails.empty:
            return
        width = self._line_style(params)["width"]
        arrowsize = max(arrow["length"] * CM_TO_PX / (3 * width), MIN_ARROWSIZE)
        for t in tails.itertuples(index=False):
            fig.add_annotation(
                x=t.lon2, y=t.lat2, ax=t.lon1, ay=t.lat1,
                xref="x", yref="y", axref="x", ayref="y",
                text="", showarrow=True,
                arrowhead=2 if arrow.get("type") == "closed" else 1,
                arrowsize=arrowsize, arrowwidth=width,
                arrowcolor=params.get("colour", "grey"),
                opacity=params.get("alpha", 1.0),
            )

    def _render_segment(self, fig: go.Figure, layer: Layer):
        m, d = layer.mapping, layer.data
        groups = [
            pd.DataFrame({"x": [r[m["x"]], r[m["xend"]]], "y": [r[m["y"]], r[m["yend"]]]})
            for _, r in d.iterrows()
        ]
        xs, ys = _join(groups, "x", "y")
        fig.add_trace(go.Scatter(
            x=xs, y=ys, mode="lines", line=self._line_style(layer.params),
            opacity=layer.params.get("alpha", 1.0), hoverinfo="skip", showlegend=False,
        ))
        tails = pd.DataFrame({
            "lon1": d[m["x"]], "lat1": d[m["y"]], "lon2": d[m["xend"]], "lat2": d[m["yend"]],
        })
        self._render_arrows(fig, tails, layer.params)

    def _render_path(self, fig: go.Figure, layer: Layer):
        m, d = layer.mapping, layer.data
        groups = [g for _, g in d.groupby(m["group"], sort=True)]
        xs, ys = _join(groups, m["x"], m["y"])
        fig.add_trace(go.Scatter(
            x=xs, y=ys, mode="lines", line=self._line_style(layer.params),
            opacity=layer.params.get("alpha", 1.0), hoverinfo="skip", showlegend=False,
        ))
        if not d.empty:
            path = d.rename(columns={m["x"]: "lon", m["y"]: "lat", m["group"]: "group"})
            self._render_arrows(fig, arrow_tails(path), layer.params)

    def _point_sizes(self, layer: Layer) -> List[float]:
        col = layer.mapping.get("size")
        if col is None:
            return [_px(layer.params.get("size", 3))] * len(layer.data)
        scale = self.scale_for("size") or SizeAreaScale(col, max_size=DEFAULT_MAX_SIZE_MM)
        diam = scale.map(layer.data[col])
        return [0.0 if math.isnan(v) else _px(v) for v in diam]

    def _render_point(self, fig: go.Figure, layer: Layer):
        m, d, p = layer.mapping, layer.data, layer.params
        sizes = np.array(self._point_sizes(layer))

        if "fill" in m:
            fill_scale = self.scale_for("fill") or ColorScale("fill", name=m["fill"])
            fills = fill_scale.map(d[m["fill"]])
        else:
            fills = [p.get("fill")] * len(d)

        outlined = "colour" in m or "colour" in p
        if "colour" in m:
            ring_scale = self.scale_for("colour") or ColorScale("colour", name=m["colour"])
            rings: List[Optional[str]] = ring_scale.map(d[m["colour"]])
        else:
            rings = [p.get("colour")] * len(d)

        keys = d[m["fill"]].astype(object).where(d[m["fill"]].notna(), "NA") if "fill" in m else None
        buckets = [(None, np.ones(len(d), bool))] if keys is None else \
            [(str(k), (keys == k).to_numpy()) for k in pd.unique(keys)]

        labels = [str(i) for i in d.index]
        for name, sel in buckets:
            idx = np.flatnonzero(sel)
            marker = dict(
                size=sizes[idx].tolist(),
                symbol="circle",
                opacity=p.get("alpha", 1.0),
                line=dict(
                    color=[rings[i] for i in idx] if outlined else None,
                    width=_px(RING_WIDTH_MM) if outlined else 0,
                ),
            )
            colours = [fills[i] for i in idx]
            if any(c is not None for c in colours):
                marker["color"] = colours
            fig.add_trace(go.Scatter(
                x=d[m["x"]].iloc[idx].tolist(),
                y=d[m["y"]].iloc[idx].tolist(),
                mode="markers",
                marker=marker,
                text=[labels[i] for i in idx],
                hoverinfo="text",
                name=name,
                showlegend=name is not None,
            ))

    def _render_text(self, fig: go.Figure, layer: Layer):
        m, d, p = layer.mapping, layer.data, layer.params
        kwargs: Dict[str, Any] = dict(
            x=d[m["x"]].tolist(),
            y=d[m["y"]].tolist(),
            text=d[m["label"]].tolist(),
            mode="text",
            textfont=dict(size=_px(p.get("size", 1.5))),
            hoverinfo="skip",
            showlegend=False,
        )
        kwargs.update(p.get("extra", {}))
        fig.add_trace(go.Scatter(**kwargs))

    def _render_scales(self, fig: go.Figure):
        size = self.scale_for("size")
        if size is not None:
            for label, diam in size.legend().items():
                fig.add_trace(go.Scatter(
                    x=[None], y=[None], mode="markers",
                    marker=dict(size=_px(diam), color="grey", symbol="circle"),
                    name=label, legendgroup="size",
                    legendgrouptitle_text=size.name, showlegend=True,
                ))
        titles = [s.name for s in self.scales if isinstance(s, ColorScale) and s.name]
        if titles:
            fig.update_layout(legend_title_text=" / ".join(titles))
