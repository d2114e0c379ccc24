"""
Height field storage for terrain editing.

A HeightField owns two integer grids of identical shape:
- base: the committed heights shown outside an edit session
- working: the live edit buffer mutated by brushes

Grids are NumPy arrays indexed [row, col], i.e. [y, x].
"""

import math
from typing import List, Literal, Optional, Sequence

import numpy as np
import structlog

from ..config.terrain_settings import DEFAULT_TERRAIN_SETTINGS, TerrainSettings
from ..exceptions import ConfigurationError
from .grid import as_grid_index, is_positive_int

logger = structlog.get_logger()

HEIGHT_DTYPE = np.int16


class HeightField:
    """Elevation grid with synchronized base and working snapshots."""

    def __init__(
        self,
        rows: int,
        cols: int,
        default_height: Optional[float] = None,
        settings: TerrainSettings = DEFAULT_TERRAIN_SETTINGS,
    ):
        """
        Initialize the height field.

        Args:
            rows: Number of grid rows (positive integer)
            cols: Number of grid columns (positive integer)
            default_height: Fill height for both grids, clamped into range.
                Defaults to settings.default_height.
            settings: Terrain settings providing the height range

        Raises:
            ConfigurationError: If rows/cols are not positive integers or
                default_height is not finite
        """
        if not is_positive_int(rows) or not is_positive_int(cols):
            raise ConfigurationError(
                f"Invalid grid dimensions rows={rows!r}, cols={cols!r}. Must be positive integers."
            )
        if default_height is None:
            default_height = settings.default_height
        if not _is_finite_number(default_height):
            raise ConfigurationError(
                f"Invalid default height {default_height!r}. Must be a finite number."
            )

        self.settings = settings
        self.rows = int(rows)
        self.cols = int(cols)

        clamped = settings.clamp_height(default_height)
        if clamped != default_height:
            logger.warning(
                "Default height outside valid range, clamping",
                requested_height=default_height,
                clamped_height=clamped,
            )
        fill = int(round(clamped))
        self._default_height = fill
        self.base = self._allocate(self.rows, self.cols, fill)
        self.working = self._allocate(self.rows, self.cols, fill)

    @classmethod
    def create(
        cls,
        rows: int,
        cols: int,
        default_height: Optional[float] = None,
        settings: TerrainSettings = DEFAULT_TERRAIN_SETTINGS,
    ) -> "HeightField":
        """Create a validated height field (see __init__)."""
        return cls(rows, cols, default_height, settings)

    @classmethod
    def from_lists(
        cls, heights: Sequence[Sequence[int]], settings: TerrainSettings = DEFAULT_TERRAIN_SETTINGS
    ) -> "HeightField":
        """
        Build a field from row-major lists; both grids receive the values.

        Raises:
            ConfigurationError: If the rows are empty or ragged
        """
        try:
            grid = np.asarray(heights, dtype=np.float64)
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Heights are not a rectangular numeric grid: {e}") from e
        if grid.ndim != 2 or grid.size == 0:
            raise ConfigurationError("Heights must be a non-empty 2D grid")
        if not np.all(np.isfinite(grid)):
            raise ConfigurationError("Heights must be finite")

        field = cls(grid.shape[0], grid.shape[1], settings=settings)
        clipped = np.clip(np.rint(grid), settings.min_height, settings.max_height)
        field.base = clipped.astype(HEIGHT_DTYPE)
        field.working = field.base.copy()
        return field

    @staticmethod
    def _allocate(rows: int, cols: int, height: int) -> np.ndarray:
        return np.full((rows, cols), height, dtype=HEIGHT_DTYPE)

    @property
    def default_height(self) -> int:
        """Height of untouched cells, also returned for out-of-bounds reads."""
        return self._default_height

    @property
    def shape(self):
        return (self.rows, self.cols)

    def in_bounds(self, x, y) -> bool:
        gx = as_grid_index(x)
        gy = as_grid_index(y)
        if gx is None or gy is None:
            return False
        return 0 <= gx < self.working.shape[1] and 0 <= gy < self.working.shape[0]

    def get(self, x, y) -> int:
        """
        Read the working height at (x, y).

        Never raises: non-integral or out-of-range coordinates return the
        default height, since pointer coordinates can transiently leave the
        grid during fast input.
        """
        if not self.in_bounds(x, y):
            return self.default_height
        return int(self.working[int(y), int(x)])

    def get_base(self, x, y) -> int:
        """Read the committed height at (x, y) with the same safety as get()."""
        gx = as_grid_index(x)
        gy = as_grid_index(y)
        if gx is None or gy is None:
            return self.default_height
        if not (0 <= gx < self.base.shape[1] and 0 <= gy < self.base.shape[0]):
            return self.default_height
        return int(self.base[gy, gx])

    def set(self, x, y, height: float) -> bool:
        """
        Write a height into the working grid.

        Out-of-range coordinates and non-finite heights are silently
        dropped. The value is rounded to a whole level and clamped into
        the configured range before it is stored.

        Returns:
            True if the write landed in the grid
        """
        if not self.in_bounds(x, y) or not _is_finite_number(height):
            return False
        self.working[int(y), int(x)] = int(round(self.settings.clamp_height(height)))
        return True

    def resize(self, new_cols: int, new_rows: int) -> None:
        """
        Resize both grids in place.

        The overlapping rectangle of the old base grid is copied into both
        new grids, so committed edits survive into the fresh working copy.
        Newly added cells take the default height.

        Raises:
            ConfigurationError: If the new dimensions are not positive integers
        """
        if not is_positive_int(new_cols) or not is_positive_int(new_rows):
            raise ConfigurationError(
                f"Invalid resize dimensions cols={new_cols!r}, rows={new_rows!r}"
            )
        new_cols, new_rows = int(new_cols), int(new_rows)
        old_base = self.base
        old_rows, old_cols = old_base.shape

        new_base = self._allocate(new_rows, new_cols, self.default_height)
        copy_rows = min(new_rows, old_rows)
        copy_cols = min(new_cols, old_cols)
        new_base[:copy_rows, :copy_cols] = old_base[:copy_rows, :copy_cols]

        self.rows = new_rows
        self.cols = new_cols
        self.base = new_base
        self.working = new_base.copy()

        logger.info(
            "Terrain data resized",
            old_dimensions={"cols": old_cols, "rows": old_rows},
            new_dimensions={"cols": new_cols, "rows": new_rows},
            preserved_cells=copy_rows * copy_cols,
        )

    def commit_working_to_base(self) -> None:
        """Snapshot the working grid into base."""
        self.base = self.working.copy()

    def load_base_into_working(self) -> None:
        """Discard working edits by reloading the committed base grid."""
        self.working = self.base.copy()

    def adopt(self, heights: np.ndarray) -> None:
        """
        Replace both grids with a generated field in one step.

        Raises:
            ConfigurationError: If the array shape differs from the field
        """
        heights = np.asarray(heights)
        if heights.shape != (self.rows, self.cols):
            raise ConfigurationError(
                f"Cannot adopt heights of shape {heights.shape}, field is {(self.rows, self.cols)}"
            )
        clipped = np.clip(heights, self.settings.min_height, self.settings.max_height)
        self.working = clipped.astype(HEIGHT_DTYPE)
        self.base = self.working.copy()

    def reset_all(self, height: Optional[float] = None) -> None:
        """
        Reallocate both grids filled with height.

        If the stored dimensions are invalid, the shape of the existing base
        grid is used instead; if that is unusable too, the field collapses
        to the configured fallback shape (1x1 by default).
        """
        value = height if _is_finite_number(height) else self.default_height
        value = int(round(self.settings.clamp_height(value)))

        rows, cols = self.rows, self.cols
        if not is_positive_int(rows) or not is_positive_int(cols):
            base_shape = getattr(self.base, "shape", ())
            if len(base_shape) == 2 and base_shape[0] > 0 and base_shape[1] > 0:
                rows, cols = base_shape
                source = "base_grid"
            else:
                rows, cols = self.settings.fallback_rows, self.settings.fallback_cols
                source = "fallback"
            logger.warning(
                "Terrain reset with invalid dimensions; using derived shape",
                provided={"rows": self.rows, "cols": self.cols},
                derived={"rows": rows, "cols": cols},
                source=source,
            )

        self.rows = int(rows)
        self.cols = int(cols)
        self.base = self._allocate(self.rows, self.cols, value)
        self.working = self._allocate(self.rows, self.cols, value)

    def is_consistent(self) -> bool:
        """True iff both grids exist and share the declared rows x cols shape."""
        expected = (self.rows, self.cols)
        return (
            isinstance(self.base, np.ndarray)
            and isinstance(self.working, np.ndarray)
            and self.base.ndim == 2
            and self.working.ndim == 2
            and self.base.shape == expected
            and self.working.shape == expected
        )

    def is_all_default(self) -> bool:
        """True when no working cell differs from the default height."""
        return bool(np.all(self.working == self.default_height))

    def to_lists(self, which: Literal["working", "base"] = "working") -> List[List[int]]:
        """
        Row-major integer lists of the working or base grid.

        Raises:
            ConfigurationError: If which names neither grid
        """
        if which not in ("working", "base"):
            raise ConfigurationError(f"Unknown grid {which!r}, expected 'working' or 'base'")
        grid = self.base if which == "base" else self.working
        return grid.astype(int).tolist()


def _is_finite_number(value) -> bool:
    if isinstance(value, bool):
        return False
    try:
        return math.isfinite(value)
    except TypeError:
        return False
