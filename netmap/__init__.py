"""
netmap – plot a network on a map, or on its own force-directed layout.
Top-level package.  Exposes the public plotting API and sets the
package log level early so every sub-module inherits it.
"""

from __future__ import annotations

import logging
import os

__all__ = [
    "logger",
    "plot_network",
    "Chart",
    "PlotlyChart",
    "Layer",
    "ColorScale",
    "SizeAreaScale",
    "PlotOptions",
    "UNSET",
    "NetmapError",
    "InvalidInputType",
    "NonUniqueQuantization",
    "AttributeNotFound",
]

# ---------- logging ----------
LOG_LEVEL = os.getenv("NETMAP_LOG_LEVEL", "WARNING").upper()
if not isinstance(logging.getLevelName(LOG_LEVEL), int):
    LOG_LEVEL = "WARNING"

logger = logging.getLogger("netmap")
logger.setLevel(LOG_LEVEL)
logger.addHandler(logging.NullHandler())
logger.debug("Logging initialised (level=%s)", LOG_LEVEL)

# ---------- public API ----------
from .errors import (  # noqa: E402
    AttributeNotFound,
    InvalidInputType,
    NetmapError,
    NonUniqueQuantization,
)
from .options import UNSET, PlotOptions  # noqa: E402
from .scales import ColorScale, SizeAreaScale  # noqa: E402
from .chart import Chart, Layer, PlotlyChart  # noqa: E402
from .plot import plot_network  # noqa: E402
