"""
Brush-based terrain editing.

This module implements:
- Brush size normalization and the asymmetric footprint split for even sizes
- Footprint computation shared by edits and hover previews
- The BrushEditor that raises or lowers working heights under a footprint
"""

import math
from typing import List, Optional, Tuple

import structlog

from ..config.terrain_settings import DEFAULT_TERRAIN_SETTINGS, TerrainSettings, TerrainTool
from .grid import GridCell, as_grid_index
from .height_field import HeightField

logger = structlog.get_logger()


def normalize_brush_size(value, settings: TerrainSettings = DEFAULT_TERRAIN_SETTINGS) -> int:
    """
    Clamp a requested brush size into the configured range.

    Non-integer sizes round to nearest (halves round up); non-numeric or
    non-finite values give the minimum size.
    """
    low = max(1, settings.min_brush_size)
    high = max(low, settings.max_brush_size)
    try:
        if isinstance(value, bool) or not math.isfinite(value):
            return low
    except TypeError:
        return low
    rounded = math.floor(value + 0.5)
    return max(low, min(high, rounded))


def compute_brush_radii(size: int) -> Tuple[int, int]:
    """
    Split a brush size into (negative_radius, positive_radius).

    Even sizes are lopsided toward the positive axis: size 4 reaches one
    cell back and two cells forward.
    """
    clamped = max(1, math.floor(size + 0.5))
    negative_radius = (clamped - 1) // 2
    positive_radius = clamped - 1 - negative_radius
    return negative_radius, positive_radius


def compute_brush_footprint(
    cx: int, cy: int, size: int, cols: Optional[int] = None, rows: Optional[int] = None
) -> List[GridCell]:
    """
    List the cells touched by a brush centered on (cx, cy).

    Args:
        cx: Center column
        cy: Center row
        size: Brush size (already normalized)
        cols: Grid width, or None for no upper x bound
        rows: Grid height, or None for no upper y bound

    Returns:
        In-bounds cells in row-major order
    """
    gx = as_grid_index(cx)
    gy = as_grid_index(cy)
    if gx is None or gy is None:
        return []

    negative_radius, positive_radius = compute_brush_radii(size)
    cells = []
    for dy in range(-negative_radius, positive_radius + 1):
        y = gy + dy
        if y < 0 or (rows is not None and y >= rows):
            continue
        for dx in range(-negative_radius, positive_radius + 1):
            x = gx + dx
            if x < 0 or (cols is not None and x >= cols):
                continue
            cells.append(GridCell(x, y))
    return cells


class BrushEditor:
    """Holds tool and brush size state and applies strokes to a height field."""

    def __init__(
        self,
        field: HeightField,
        settings: TerrainSettings = DEFAULT_TERRAIN_SETTINGS,
        height_step: Optional[int] = None,
    ):
        """
        Initialize the brush editor.

        Args:
            field: Height field whose working grid is edited
            settings: Terrain settings for brush and height limits
            height_step: Levels per application, defaults to settings.height_step
        """
        self.field = field
        self.settings = settings
        self.tool = TerrainTool.RAISE
        self.brush_size = normalize_brush_size(settings.default_brush_size, settings)
        self.height_step = height_step if height_step is not None else settings.height_step

    def set_tool(self, tool) -> TerrainTool:
        """Select a tool; anything other than "lower" selects raise."""
        self.tool = TerrainTool.LOWER if tool in (TerrainTool.LOWER, "lower") else TerrainTool.RAISE
        return self.tool

    def set_brush_size(self, size) -> int:
        self.brush_size = normalize_brush_size(size, self.settings)
        return self.brush_size

    def increase_brush(self) -> int:
        return self.set_brush_size(self.brush_size + 1)

    def decrease_brush(self) -> int:
        return self.set_brush_size(self.brush_size - 1)

    def get_footprint_cells(self, cx, cy) -> List[GridCell]:
        """
        Cells the current brush would affect at (cx, cy).

        Non-mutating; used for hover previews and by apply_at, so the
        preview always matches the edited region.
        """
        return compute_brush_footprint(
            cx, cy, self.brush_size, cols=self.field.cols, rows=self.field.rows
        )

    def apply_at(self, cx, cy) -> bool:
        """
        Raise or lower every footprint cell by height_step.

        Only the working grid is touched; cells already at the limit in the
        tool's direction are left alone.

        Returns:
            True if any cell changed
        """
        delta = self.height_step if self.tool == TerrainTool.RAISE else -self.height_step
        low, high = self.settings.min_height, self.settings.max_height

        modified = 0
        for x, y in self.get_footprint_cells(cx, cy):
            current = self.field.get(x, y)
            target = max(low, min(high, current + delta))
            if target != current:
                self.field.set(x, y, target)
                modified += 1

        # One aggregate event per stroke, never per cell
        if modified:
            logger.debug(
                "Terrain brush stroke",
                tool=self.tool.value,
                brush_size=self.brush_size,
                height_step=self.height_step,
                modified_cells=modified,
                center={"x": cx, "y": cy},
            )
        return modified > 0
