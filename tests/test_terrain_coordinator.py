"""
End-to-end tests for the terrain edit session.
"""

import numpy as np
import pytest

from py_isoterrain.config.config import Settings
from py_isoterrain.config.terrain_settings import TerrainSettings, TerrainTool
from py_isoterrain.core.depth_ordering import compute_depth_key
from py_isoterrain.core.terrain_coordinator import TerrainCoordinator
from py_isoterrain.exceptions import ConfigurationError


class TestTerrainCoordinator:
    """Test the session flow across all components."""

    @pytest.fixture
    def coordinator(self, renderer, frame_scheduler):
        return TerrainCoordinator(renderer, frame_scheduler, rows=6, cols=6)

    @pytest.fixture
    def editing(self, coordinator, renderer, frame_scheduler):
        """Coordinator in terrain mode with the initial refresh drained."""
        coordinator.enable_terrain_mode()
        frame_scheduler.run_all()
        renderer.clear()
        return coordinator

    def test_invalid_grid_rejected(self, renderer, frame_scheduler):
        with pytest.raises(ConfigurationError):
            TerrainCoordinator(renderer, frame_scheduler, rows=0, cols=4)

    def test_enable_refreshes_every_cell(self, coordinator, renderer, frame_scheduler):
        coordinator.enable_terrain_mode()
        frame_scheduler.run_all()

        assert coordinator.is_terrain_mode_active
        assert sorted(renderer.cells) == sorted((x, y) for x in range(6) for y in range(6))

    def test_paint_ignored_outside_terrain_mode(self, coordinator):
        assert coordinator.paint_at(2, 2) is False
        assert coordinator.get_height_at(2, 2) == 0

    def test_paint_and_flush_redraws_footprint(self, editing, renderer, frame_scheduler):
        editing.set_brush_size(2)
        assert editing.paint_at(2, 2) is True
        editing.end_stroke()

        assert sorted(renderer.cells) == [(2, 2), (2, 3), (3, 2), (3, 3)]
        update = next(u for u in renderer.updates if (u.x, u.y) == (3, 3))
        assert update.height == 1
        assert update.elevation_offset == -8.0
        assert update.depth_key == compute_depth_key(3, 3)

    def test_redraw_reads_height_at_drain_time(self, editing, renderer, frame_scheduler):
        """Several edits to a cell before a drain collapse into one up-to-date redraw."""
        # Alternating cells inside one throttle window
        for x, y in [(1, 1), (3, 3), (1, 1), (3, 3), (1, 1)]:
            editing.paint_at(x, y)
        frame_scheduler.run_all()

        assert sorted(renderer.cells) == [(1, 1), (3, 3)]
        heights = {(u.x, u.y): u.height for u in renderer.updates}
        assert heights == {(1, 1): 3, (3, 3): 2}

    def test_same_cell_skipped_within_a_stroke(self, editing):
        editing.paint_at(1, 1)
        editing.paint_at(1, 1)
        assert editing.get_height_at(1, 1) == 1

        editing.paint_at(2, 1)
        editing.paint_at(1, 1)
        assert editing.get_height_at(1, 1) == 2

    def test_pointer_leave_and_focus_loss_flush(self, editing, renderer, frame_scheduler):
        editing.paint_at(0, 0)
        editing.paint_at(4, 4)
        editing.on_pointer_leave()
        assert (4, 4) in renderer.cells

        editing.paint_at(5, 5)
        editing.on_focus_lost()
        assert (5, 5) in renderer.cells
        assert not editing.is_dragging

    def test_disable_commits_working_to_base(self, editing):
        editing.paint_at(3, 3)
        assert editing.field.get_base(3, 3) == 0

        editing.disable_terrain_mode()
        assert editing.field.get_base(3, 3) == 1
        assert not editing.is_terrain_mode_active

    def test_enable_discards_uncommitted_edits(self, editing):
        editing.paint_at(3, 3)
        editing.is_terrain_mode_active = False
        editing.enable_terrain_mode()
        assert editing.get_height_at(3, 3) == 0

    def test_tool_and_brush_controls(self, coordinator):
        assert coordinator.set_tool("lower") == TerrainTool.LOWER
        assert coordinator.set_tool("sculpt") == TerrainTool.RAISE
        assert coordinator.increase_brush_size() == 2
        assert coordinator.brush_size == 2
        assert coordinator.decrease_brush_size() == 1
        assert coordinator.decrease_brush_size() == 1
        assert coordinator.set_brush_size(4) == 4

    def test_hover_preview_matches_edit(self, editing):
        editing.set_brush_size(3)
        preview = set(editing.get_footprint_cells(0, 5))
        editing.paint_at(0, 5)

        edited = {(x, y) for y, x in zip(*np.nonzero(editing.field.working))}
        assert preview == edited

    def test_generate_on_pristine_field(self, coordinator, renderer, frame_scheduler):
        assert coordinator.generate_biome_elevation("mountain", seed=42) is True
        frame_scheduler.run_all()

        assert not coordinator.field.is_all_default()
        assert np.array_equal(coordinator.field.base, coordinator.field.working)
        assert len(renderer.updates) == 36

    def test_generate_matches_generator(self, coordinator):
        coordinator.generate_biome_elevation("hills", seed=9)
        expected = coordinator.generator.generate("hills", 6, 6, seed=9)
        assert np.array_equal(coordinator.field.working, expected)

    def test_generate_skipped_on_edited_field(self, editing):
        editing.paint_at(2, 2)
        before = editing.field.working.copy()

        assert editing.generate_biome_elevation("mountain", seed=42) is False
        assert np.array_equal(editing.field.working, before)

    def test_generate_uses_locked_seed(self, coordinator):
        coordinator.set_biome_seed(77)
        coordinator.generate_biome_elevation("volcanic")
        assert np.array_equal(
            coordinator.field.working, coordinator.generator.generate("volcanic", 6, 6, seed=77)
        )

    def test_generate_failure_reported_as_false(self, coordinator):
        assert coordinator.generate_biome_elevation("hills", seed=-5) is False
        assert coordinator.field.is_all_default()

    def test_reentrant_generation_reported_as_false(self, coordinator, monkeypatch):
        results = []
        real_generate = coordinator.generator._generate

        def nested(*args, **kwargs):
            results.append(coordinator.generate_biome_elevation("hills", seed=1))
            return real_generate(*args, **kwargs)

        monkeypatch.setattr(coordinator.generator, "_generate", nested)
        assert coordinator.generate_biome_elevation("hills", seed=2) is True
        assert results == [False]

    def test_set_elevation_scale(self, editing, renderer, frame_scheduler):
        editing.paint_at(1, 1)
        editing.end_stroke()
        renderer.clear()

        assert editing.set_elevation_scale(12) is True
        frame_scheduler.run_all()
        update = next(u for u in renderer.updates if (u.x, u.y) == (1, 1))
        assert update.elevation_offset == -12.0

        assert editing.set_elevation_scale(12) is False
        assert editing.set_elevation_scale(-1) is False
        assert editing.set_elevation_scale(float("nan")) is False

    def test_apply_biome_scale_hint(self, coordinator):
        assert coordinator.apply_biome_scale_hint("saltFlats") == 5
        assert coordinator.elevation_scale.unit == 5

    def test_reset_terrain(self, editing, frame_scheduler):
        editing.paint_at(1, 1)
        editing.disable_terrain_mode()
        editing.reset_terrain()

        assert editing.field.is_all_default()
        assert editing.field.get_base(1, 1) == 0

    def test_handle_grid_resize(self, editing, renderer, frame_scheduler):
        editing.paint_at(4, 4)
        editing.disable_terrain_mode()
        editing.scheduler.enqueue([(5, 5)])
        renderer.clear()

        assert editing.handle_grid_resize(8, 3) is True
        frame_scheduler.run_all()

        assert editing.field.shape == (3, 8)
        assert all(editing.field.in_bounds(x, y) for x, y in renderer.cells)
        assert editing.handle_grid_resize(0, 3) is False
        assert editing.field.shape == (3, 8)

    def test_unkeyable_column_does_not_stall_redraws(self, coordinator, renderer, frame_scheduler):
        """Columns past the depth-key limit fail alone; every other cell still redraws."""
        assert coordinator.handle_grid_resize(1001, 1) is True
        frame_scheduler.run_all()

        assert len(renderer.updates) == 1000
        assert (1000, 0) not in renderer.cells
        assert len(coordinator.scheduler) == 0

    def test_resize_keeps_committed_heights(self, editing):
        editing.paint_at(1, 1)
        editing.disable_terrain_mode()
        editing.handle_grid_resize(4, 4)
        assert editing.get_height_at(1, 1) == 1

    def test_from_settings(self, renderer, frame_scheduler):
        settings = Settings(biome_seed=5, terrain=TerrainSettings(max_brush_size=3))
        coordinator = TerrainCoordinator.from_settings(renderer, frame_scheduler, 4, 4, settings)

        assert coordinator.biome_seed == 5
        assert coordinator.set_brush_size(5) == 3
