"""Exceptions raised by the plotting pipeline."""
from __future__ import annotations


class NetmapError(Exception):
    """Base class for every netmap failure."""


class InvalidInputType(NetmapError, TypeError):
    """Raised when the graph is neither a networkx nor an igraph graph."""


class NonUniqueQuantization(NetmapError, ValueError):
    """Raised when quartile breaks of the node weights are not unique."""


class AttributeNotFound(NetmapError, KeyError):
    """Raised when no vertex carries the requested attribute."""

    def __init__(self, name: str):
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return f"vertex attribute {self.name!r} not found"
