"""
scales.py – map data values to visual values (marker size, colours)

Two scale kinds cover everything the node layer needs:

* `SizeAreaScale` – marker *area* proportional to the value, 0 → 0
* `ColorScale`    – discrete palette for fill or outline groups

Callers may build their own `ColorScale` and pass it as `node_color` /
`ring_color`; the pipeline then uses it instead of the default palette.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Union

import numpy as np
import pandas as pd
import plotly.express as px

DEFAULT_PALETTE: List[str] = list(px.colors.qualitative.Plotly)
NA_COLOUR = "lightgrey"


@dataclass(frozen=True)
class SizeAreaScale:
    name: str
    max_size: float
    labels: Optional[List[str]] = None

    def map(self, values: Sequence[float]) -> np.ndarray:
        """Diameters (same unit as `max_size`) whose areas scale linearly with `values`."""
        v = np.asarray(values, dtype=float)
        finite = v[np.isfinite(v)]
        vmax = finite.max() if finite.size else np.nan
        if not np.isfinite(vmax) or vmax <= 0:
            return np.where(np.isfinite(v), 0.0, np.nan)
        v = np.where(v < 0, np.nan, v)
        return self.max_size * np.sqrt(v / vmax)

    def legend(self) -> Dict[str, float]:
        """Bucket label → diameter, for quantized weights only."""
        if not self.labels:
            return {}
        sizes = self.map(np.arange(1, len(self.labels) + 1))
        return dict(zip(self.labels, sizes))


@dataclass(frozen=True)
class ColorScale:
    """Discrete colour mapping for the ``fill`` or ``colour`` aesthetic."""

    aesthetic: str = "fill"
    palette: Union[Sequence[str], Dict[str, str]] = field(default_factory=lambda: DEFAULT_PALETTE)
    name: Optional[str] = None
    na_value: str = NA_COLOUR

    def __post_init__(self):
        if self.aesthetic not in ("fill", "colour"):
            raise ValueError("aesthetic must be 'fill' or 'colour'")
        if not self.palette:
            raise ValueError("palette must not be empty")

    def levels(self, values: Sequence) -> List[str]:
        s = pd.Series(values)
        if isinstance(s.dtype, pd.CategoricalDtype):
            return [str(c) for c in s.cat.categories]
        return sorted({str(x) for x in s.dropna()})

    def lookup(self, values: Sequence) -> Dict[str, str]:
        levels = self.levels(values)
        if isinstance(self.palette, dict):
            return {lv: self.palette.get(lv, self.na_value) for lv in levels}
        pal = list(self.palette)
        return {lv: pal[i % len(pal)] for i, lv in enumerate(levels)}

    def map(self, values: Sequence) -> List[str]:
        table = self.lookup(values)
        return [self.na_value if pd.isna(x) else table[str(x)] for x in values]

    def with_defaults(self, aesthetic: str, name: str) -> "ColorScale":
        """Copy bound to `aesthetic`, titled `name` unless already titled."""
        return ColorScale(
            aesthetic=aesthetic,
            palette=self.palette,
            name=self.name or name,
            na_value=self.na_value,
        )
