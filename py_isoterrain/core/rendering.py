"""
Interface to the rendering collaborator.

Drawing primitives live outside this package. The engine only tells a
renderer which cell to redraw, at what height, how far to shift it
vertically and where it sits in the isometric draw order.
"""

from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@dataclass(frozen=True)
class TileUpdate:
    """Redraw request for one grid cell, read at drain time."""

    x: int
    y: int
    height: int
    elevation_offset: float
    depth_key: int


@runtime_checkable
class TileRenderer(Protocol):
    """Anything that can redraw a single terrain tile."""

    def redraw_cell(self, update: TileUpdate) -> None:
        ...
