"""
Terrain edit-session orchestration.

The coordinator wires the height field, brush, redraw scheduler, depth
keys and biome generator into the session flow a UI drives:

- entering terrain mode loads the committed grid into the working buffer
- brush strokes edit the working buffer and queue redraws
- leaving terrain mode flushes redraws and commits the working buffer
- selecting a biome on a pristine field adopts a generated field

Interactive entry points never raise; failures are logged and reported
as a False result.
"""

from typing import List, Optional, Tuple

import structlog

from ..config.config import Settings, get_settings
from ..config.terrain_settings import DEFAULT_TERRAIN_SETTINGS, TerrainSettings, TerrainTool
from ..exceptions import ConcurrentGenerationRejected, ConfigurationError, GenerationFailure
from .biome_elevation import BiomeElevationGenerator, is_all_default_height
from .brush import BrushEditor
from .depth_ordering import compute_depth_key
from .elevation_scale import ElevationScale
from .grid import GridCell
from .height_field import HeightField
from .rendering import TileRenderer, TileUpdate
from .update_scheduler import FrameScheduler, UpdateScheduler

logger = structlog.get_logger()


class TerrainCoordinator:
    """Coordinates terrain editing, redraws and biome generation for one grid."""

    def __init__(
        self,
        renderer: TileRenderer,
        frame_scheduler: FrameScheduler,
        rows: int,
        cols: int,
        settings: TerrainSettings = DEFAULT_TERRAIN_SETTINGS,
        biome_seed: Optional[int] = None,
    ):
        """
        Initialize the coordinator.

        Args:
            renderer: Rendering collaborator receiving TileUpdate redraws
            frame_scheduler: Timers and next-frame callbacks for redraw batching
            rows: Grid rows
            cols: Grid columns
            settings: Terrain settings shared by every component
            biome_seed: Seed used for generation when a call does not pass one

        Raises:
            ConfigurationError: If the grid dimensions are invalid
        """
        self.settings = settings
        self.renderer = renderer
        self.field = HeightField.create(rows, cols, settings=settings)
        self.brush = BrushEditor(self.field, settings)
        self.elevation_scale = ElevationScale(settings=settings)
        self.generator = BiomeElevationGenerator(settings, self.elevation_scale)
        self.scheduler = UpdateScheduler(self._redraw_cell, frame_scheduler, settings=settings)

        self.biome_seed = biome_seed
        self.is_terrain_mode_active = False
        self.is_dragging = False
        self._last_painted_cell: Optional[GridCell] = None

    @classmethod
    def from_settings(
        cls,
        renderer: TileRenderer,
        frame_scheduler: FrameScheduler,
        rows: int,
        cols: int,
        settings: Optional[Settings] = None,
    ) -> "TerrainCoordinator":
        """Build a coordinator from application settings (environment by default)."""
        settings = settings or get_settings()
        return cls(
            renderer,
            frame_scheduler,
            rows,
            cols,
            settings=settings.terrain,
            biome_seed=settings.biome_seed,
        )

    # Redraw plumbing

    def _redraw_cell(self, x: int, y: int) -> None:
        height = self.field.get(x, y)
        self.renderer.redraw_cell(
            TileUpdate(
                x=x,
                y=y,
                height=height,
                elevation_offset=self.elevation_scale.offset_for(height),
                depth_key=compute_depth_key(x, y),
            )
        )

    def _all_cells(self) -> List[Tuple[int, int]]:
        return [(x, y) for y in range(self.field.rows) for x in range(self.field.cols)]

    def refresh_all(self) -> None:
        """Queue a redraw of every cell."""
        self.scheduler.enqueue(self._all_cells())

    # Terrain mode

    def enable_terrain_mode(self) -> None:
        """Start an edit session on the committed heights."""
        self.field.load_base_into_working()
        self.is_terrain_mode_active = True
        self.refresh_all()
        logger.info(
            "Terrain mode enabled",
            rows=self.field.rows,
            cols=self.field.cols,
            tool=self.brush.tool.value,
            brush_size=self.brush.brush_size,
        )

    def disable_terrain_mode(self) -> None:
        """End the edit session, committing working heights to base."""
        self.is_terrain_mode_active = False
        self.is_dragging = False
        self._last_painted_cell = None
        self.scheduler.flush_now()
        self.field.commit_working_to_base()
        logger.info("Terrain mode disabled with permanent grid integration")

    # Brush input

    def paint_at(self, x, y) -> bool:
        """
        Apply the brush at a cell as part of the current stroke.

        Ignored outside terrain mode. Repeated events on the cell that was
        just painted in the same stroke are skipped.

        Returns:
            True if any height changed
        """
        if not self.is_terrain_mode_active or not self.field.in_bounds(x, y):
            return False
        cell = GridCell(int(x), int(y))
        if self.is_dragging and cell == self._last_painted_cell:
            return False
        self.is_dragging = True
        self._last_painted_cell = cell

        if not self.brush.apply_at(cell.x, cell.y):
            return False
        self.scheduler.enqueue(self.brush.get_footprint_cells(cell.x, cell.y))
        return True

    def end_stroke(self) -> None:
        if self.is_dragging:
            logger.debug(
                "Terrain painting session completed",
                tool=self.brush.tool.value,
                brush_size=self.brush.brush_size,
            )
        self.is_dragging = False
        self._last_painted_cell = None
        self.scheduler.flush_now()

    def on_pointer_leave(self) -> None:
        self.end_stroke()

    def on_focus_lost(self) -> None:
        self.end_stroke()

    # Brush controls

    def set_tool(self, tool) -> TerrainTool:
        selected = self.brush.set_tool(tool)
        logger.debug("Terrain tool changed", requested=str(tool), tool=selected.value)
        return selected

    @property
    def brush_size(self) -> int:
        return self.brush.brush_size

    def set_brush_size(self, size) -> int:
        return self.brush.set_brush_size(size)

    def increase_brush_size(self) -> int:
        before = self.brush.brush_size
        if self.brush.increase_brush() != before:
            logger.debug("Brush size increased", brush_size=self.brush.brush_size)
        return self.brush.brush_size

    def decrease_brush_size(self) -> int:
        before = self.brush.brush_size
        if self.brush.decrease_brush() != before:
            logger.debug("Brush size decreased", brush_size=self.brush.brush_size)
        return self.brush.brush_size

    def get_footprint_cells(self, x, y) -> List[GridCell]:
        """Hover preview; identical to the cells a stroke at (x, y) would edit."""
        return self.brush.get_footprint_cells(x, y)

    def get_height_at(self, x, y) -> int:
        return self.field.get(x, y)

    # Biome generation

    def set_biome_seed(self, seed: Optional[int]) -> None:
        """Lock generation to a seed, or None to derive one per call."""
        self.biome_seed = seed

    def generate_biome_elevation(self, biome_key: str, **options) -> bool:
        """
        Replace a pristine field with a generated biome elevation.

        Fields with any manual edit are left alone. The generated field is
        adopted into working and base at once, so observers never see a
        partially written field.

        Returns:
            True if a new field was adopted
        """
        if not is_all_default_height(self.field.working, self.field.default_height):
            logger.info("Biome elevation skipped, terrain already edited", biome=biome_key)
            return False

        if "seed" not in options and self.biome_seed is not None:
            options["seed"] = self.biome_seed

        try:
            heights = self.generator.generate(biome_key, self.field.rows, self.field.cols, **options)
        except ConcurrentGenerationRejected as e:
            logger.warning("Biome elevation request rejected", biome=biome_key, reason=str(e))
            return False
        except (ConfigurationError, GenerationFailure) as e:
            logger.error(
                "Biome elevation generation failed",
                biome=biome_key,
                error_type=type(e).__name__,
                error=str(e),
            )
            return False

        self.field.adopt(heights)
        self.refresh_all()
        return True

    # Elevation scale

    def set_elevation_scale(self, unit: float) -> bool:
        """
        Change pixels per level and refresh visuals.

        Negative or non-finite units are ignored.

        Returns:
            True if the scale changed
        """
        if not self.elevation_scale.set_unit(unit):
            return False
        self.refresh_all()
        logger.info("Elevation perception scale updated", unit=self.elevation_scale.unit)
        return True

    def apply_biome_scale_hint(self, biome_key: str) -> float:
        """Adopt the recommended elevation scale for a biome."""
        hint = self.generator.get_elevation_scale_hint(biome_key)
        self.set_elevation_scale(hint)
        return hint

    # Grid changes

    def reset_terrain(self) -> None:
        """Reset both grids to the default height."""
        self.field.reset_all()
        self.refresh_all()
        logger.info(
            "Terrain reset to default",
            rows=self.field.rows,
            cols=self.field.cols,
            default_height=self.field.default_height,
        )

    def handle_grid_resize(self, cols: int, rows: int) -> bool:
        """
        Follow a grid resize, preserving overlapping committed heights.

        Returns:
            False if the new dimensions were rejected
        """
        try:
            self.field.resize(cols, rows)
        except ConfigurationError as e:
            logger.error("Terrain resize rejected", cols=cols, rows=rows, error=str(e))
            return False

        self.scheduler.discard(lambda x, y: not self.field.in_bounds(x, y))
        self.refresh_all()
        return True
