"""
options.py – validated call options for `plot_network`

Every keyword of the public entry point lands in one `PlotOptions`
record before any graph work starts, so a bad value fails fast with a
`pydantic.ValidationError`.

Tri-state parameters
--------------------
`weight_method`, `node_group`, `ring_group` and `node_color` distinguish
three cases:

* ``UNSET``   – argument omitted, the default behaviour applies
* ``None``    – explicitly disabled by the caller
* a value     – an attribute name (or colour / scale for `node_color`)
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .scales import ColorScale


class _Unset:
    """Marker for an omitted keyword argument."""

    _instance: Optional["_Unset"] = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Any = _Unset()


def is_given(value: Any) -> bool:
    """True when a tri-state option carries an actual value."""
    return value is not UNSET and value is not None


# ────────────────────────────────────────────────────────────────────────────
class PlotOptions(BaseModel):
    """
    Options of one `plot_network` call after validation.

    Sizes follow ggplot2 units: node / label sizes in millimetres, arrow
    length in centimetres.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    size: float = Field(3, gt=0)
    alpha: float = Field(0.75, ge=0, le=1)

    weight_method: Any = UNSET
    node_group: Any = UNSET
    node_color: Any = UNSET
    node_alpha: Optional[float] = Field(None, ge=0, le=1)
    ring_group: Any = UNSET
    ring_color: Any = None

    segment_alpha: Optional[float] = Field(None, ge=0, le=1)
    segment_color: str = "grey"
    segment_size: float = Field(0.25, ge=0)
    great_circles: bool = False
    arrow_size: float = Field(0, ge=0)

    label_nodes: Union[bool, List[str]] = False
    label_size: Optional[float] = Field(None, gt=0)
    label_attr: Optional[str] = None
    label_kwargs: Dict[str, Any] = Field(default_factory=dict)

    quantize_weights: bool = False
    subset_threshold: float = Field(0, ge=0)

    lon_attr: str = "lon"
    lat_attr: str = "lat"
    layout_seed: Optional[int] = None

    # ── validators ──────────────────────────────────────────────────────
    @field_validator("weight_method", "node_group", "ring_group")
    @classmethod
    def _attribute_name(cls, v):
        if v is UNSET or v is None or isinstance(v, str):
            return v
        raise ValueError(f"expected a vertex attribute name, got {type(v).__name__}")

    @field_validator("node_color")
    @classmethod
    def _colour_or_scale(cls, v):
        if v is UNSET or v is None or isinstance(v, (str, ColorScale)):
            return v
        raise ValueError(f"expected a colour string or ColorScale, got {type(v).__name__}")

    @field_validator("ring_color")
    @classmethod
    def _ring_scale(cls, v):
        if v is None or isinstance(v, (str, ColorScale)):
            return v
        raise ValueError(f"expected a colour string or ColorScale, got {type(v).__name__}")

    @field_validator("label_nodes", mode="before")
    @classmethod
    def _label_ids_as_str(cls, v):
        if isinstance(v, (list, tuple, set, frozenset)):
            return [str(x) for x in v]
        return v

    # ── derived values ──────────────────────────────────────────────────
    @property
    def node_alpha_value(self) -> float:
        return self.alpha if self.node_alpha is None else self.node_alpha

    @property
    def segment_alpha_value(self) -> float:
        return self.alpha if self.segment_alpha is None else self.segment_alpha

    @property
    def label_size_value(self) -> float:
        return self.size / 2 if self.label_size is None else self.label_size

    @property
    def weighted(self) -> bool:
        return is_given(self.weight_method)

    def explicitly_disabled(self) -> List[str]:
        """Names of tri-state options the caller set to ``None``."""
        names = ("weight_method", "node_group", "ring_group", "node_color")
        return [n for n in names if getattr(self, n) is None]
