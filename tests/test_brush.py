"""
Tests for brush footprints and the brush editor.
"""

import math

import numpy as np
import pytest

from py_isoterrain.config.terrain_settings import TerrainSettings, TerrainTool
from py_isoterrain.core.brush import (
    BrushEditor,
    compute_brush_footprint,
    compute_brush_radii,
    normalize_brush_size,
)
from py_isoterrain.core.grid import GridCell
from py_isoterrain.core.height_field import HeightField


class TestBrushHelpers:
    """Test size normalization and footprint geometry."""

    @pytest.mark.parametrize("value,expected", [
        (1, 1), (3, 3), (5, 5), (0, 1), (-4, 1), (9, 5),
        (2.4, 2), (2.5, 3), (4.6, 5), (math.nan, 1), (math.inf, 1), (None, 1), ("big", 1),
    ])
    def test_normalize_brush_size(self, value, expected):
        assert normalize_brush_size(value) == expected

    @pytest.mark.parametrize("size,expected", [(1, (0, 0)), (2, (0, 1)), (3, (1, 1)), (4, (1, 2)), (5, (2, 2))])
    def test_radii_bias_even_sizes_positive(self, size, expected):
        assert compute_brush_radii(size) == expected

    def test_size_one_is_center_only(self):
        assert compute_brush_footprint(3, 3, 1, cols=10, rows=10) == [GridCell(3, 3)]

    def test_size_two_is_four_cells_toward_positive_axis(self):
        cells = compute_brush_footprint(3, 3, 2, cols=10, rows=10)
        assert sorted(cells) == [GridCell(3, 3), GridCell(3, 4), GridCell(4, 3), GridCell(4, 4)]

    def test_size_three_is_centered_square(self):
        cells = compute_brush_footprint(5, 5, 3, cols=10, rows=10)
        assert len(cells) == 9
        assert min(cells) == GridCell(4, 4)
        assert max(cells) == GridCell(6, 6)

    def test_footprint_clipped_to_grid(self):
        """Only in-bounds cells are returned near the edges."""
        cells = compute_brush_footprint(0, 0, 3, cols=4, rows=4)
        assert sorted(cells) == [GridCell(0, 0), GridCell(0, 1), GridCell(1, 0), GridCell(1, 1)]

        cells = compute_brush_footprint(3, 3, 4, cols=4, rows=4)
        assert sorted(cells) == [GridCell(2, 2), GridCell(2, 3), GridCell(3, 2), GridCell(3, 3)]

    def test_footprint_outside_grid_is_empty(self):
        assert compute_brush_footprint(10, 10, 1, cols=4, rows=4) == []

    def test_fractional_center_gives_no_cells(self):
        assert compute_brush_footprint(1.5, 1, 3, cols=4, rows=4) == []


class TestBrushEditor:
    """Test tool state and brush application."""

    @pytest.fixture
    def field(self):
        return HeightField.create(6, 6)

    @pytest.fixture
    def editor(self, field):
        return BrushEditor(field)

    def test_initial_state(self, editor):
        assert editor.tool == TerrainTool.RAISE
        assert editor.brush_size == 1
        assert editor.height_step == 1

    @pytest.mark.parametrize("tool,expected", [
        ("lower", TerrainTool.LOWER),
        (TerrainTool.LOWER, TerrainTool.LOWER),
        ("raise", TerrainTool.RAISE),
        ("LOWER", TerrainTool.RAISE),
        ("dig", TerrainTool.RAISE),
        (None, TerrainTool.RAISE),
    ])
    def test_set_tool_fails_closed_to_raise(self, editor, tool, expected):
        editor.set_tool("lower")
        assert editor.set_tool(tool) == expected

    def test_brush_size_steps_are_clamped(self, editor):
        assert editor.decrease_brush() == 1
        for _ in range(10):
            editor.increase_brush()
        assert editor.brush_size == 5
        assert editor.decrease_brush() == 4
        assert editor.set_brush_size(2.7) == 3

    def test_apply_raise(self, editor, field):
        assert editor.apply_at(2, 2) is True
        assert field.get(2, 2) == 1
        assert field.get(2, 3) == 0

    def test_apply_lower_with_larger_brush(self, editor, field):
        editor.set_tool("lower")
        editor.set_brush_size(3)
        assert editor.apply_at(2, 2)

        expected = np.zeros((6, 6))
        expected[1:4, 1:4] = -1
        assert np.array_equal(field.working, expected)

    def test_apply_only_mutates_working(self, editor, field):
        editor.apply_at(1, 1)
        assert field.get_base(1, 1) == 0

    def test_raise_at_max_reports_no_change(self, editor, field):
        """Raising a cell already at MAX_HEIGHT changes nothing."""
        field.set(3, 3, 10)
        assert editor.apply_at(3, 3) is False
        assert field.get(3, 3) == 10

    def test_lower_at_min_reports_no_change(self, editor, field):
        field.set(3, 3, -10)
        editor.set_tool("lower")
        assert editor.apply_at(3, 3) is False
        assert field.get(3, 3) == -10

    def test_partial_change_at_limit(self, editor, field):
        """Cells at the limit are skipped while the rest of the footprint changes."""
        field.set(2, 2, 10)
        editor.set_brush_size(2)
        assert editor.apply_at(2, 2) is True
        assert field.get(2, 2) == 10
        assert field.get(3, 3) == 1

    def test_step_overshoot_is_clamped(self, field):
        editor = BrushEditor(field, height_step=3)
        field.set(0, 0, 9)
        editor.apply_at(0, 0)
        assert field.get(0, 0) == 10

    def test_apply_out_of_bounds(self, editor, field):
        assert editor.apply_at(-5, -5) is False
        assert field.is_all_default()

    def test_footprint_matches_edited_cells(self, editor, field):
        """The hover preview and the edit touch exactly the same cells."""
        editor.set_brush_size(4)
        preview = set(editor.get_footprint_cells(4, 1))
        editor.apply_at(4, 1)

        ys, xs = np.nonzero(field.working)
        assert preview == {GridCell(int(x), int(y)) for x, y in zip(xs, ys)}

    def test_footprint_is_pure(self, editor, field):
        editor.set_brush_size(3)
        editor.get_footprint_cells(2, 2)
        assert field.is_all_default()

    def test_custom_brush_limits(self):
        settings = TerrainSettings(min_brush_size=2, default_brush_size=2, max_brush_size=3)
        editor = BrushEditor(HeightField.create(4, 4, settings=settings), settings)

        assert editor.brush_size == 2
        assert editor.set_brush_size(1) == 2
        assert editor.set_brush_size(7) == 3
