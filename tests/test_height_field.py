"""
Tests for the height field grids.
"""

import math

import numpy as np
import pytest

from py_isoterrain.config.terrain_settings import TerrainSettings
from py_isoterrain.core.height_field import HeightField
from py_isoterrain.exceptions import ConfigurationError


class TestHeightFieldCreation:
    """Test construction and validation."""

    def test_create_fills_both_grids(self):
        """Both grids start at the default height with the requested shape."""
        field = HeightField.create(3, 4)

        assert field.shape == (3, 4)
        assert field.base.shape == (3, 4)
        assert field.working.shape == (3, 4)
        assert np.all(field.base == 0)
        assert np.all(field.working == 0)
        assert field.is_consistent()

    def test_grids_are_independent(self):
        """Base and working never share memory."""
        field = HeightField.create(2, 2)
        field.set(0, 0, 5)

        assert field.base[0, 0] == 0

    @pytest.mark.parametrize("rows,cols", [(0, 3), (3, 0), (-1, 2), (2.5, 2), ("3", 3), (True, 2), (None, 2)])
    def test_invalid_dimensions_rejected(self, rows, cols):
        """Non-positive or non-integer dimensions are a configuration error."""
        with pytest.raises(ConfigurationError):
            HeightField.create(rows, cols)

    @pytest.mark.parametrize("height", [math.nan, math.inf, -math.inf])
    def test_non_finite_default_rejected(self, height):
        with pytest.raises(ConfigurationError):
            HeightField.create(2, 2, height)

    def test_default_height_is_clamped(self):
        """An out-of-range default is clamped into the height range."""
        field = HeightField.create(2, 2, 25)

        assert np.all(field.working == 10)
        assert field.default_height == 10

    def test_configuration_error_is_value_error(self):
        with pytest.raises(ValueError):
            HeightField.create(0, 0)


class TestHeightFieldAccess:
    """Test bounds-checked reads and writes."""

    @pytest.fixture
    def field(self):
        return HeightField.create(4, 5)

    def test_set_then_get(self, field):
        assert field.set(2, 3, 4)
        assert field.get(2, 3) == 4
        # Indexing is [row, col]
        assert field.working[3, 2] == 4

    @pytest.mark.parametrize("height,expected", [(3, 3), (10, 10), (11, 10), (99, 10), (-10, -10), (-42, -10), (2.6, 3)])
    def test_set_clamps_into_range(self, field, height, expected):
        """get after set equals clamp(h, MIN, MAX)."""
        field.set(1, 1, height)
        assert field.get(1, 1) == expected

    def test_set_only_touches_working(self, field):
        field.set(0, 0, 7)
        assert field.get_base(0, 0) == 0

    @pytest.mark.parametrize("x,y", [(-1, 0), (0, -1), (5, 0), (0, 4), (100, 100), (1.5, 1), (None, 1), ("1", 1), (math.nan, 0)])
    def test_out_of_bounds_read_returns_default(self, field, x, y):
        """Reads never raise and return the default height."""
        assert field.get(x, y) == field.default_height

    def test_out_of_bounds_read_uses_field_default(self):
        field = HeightField.create(2, 2, -3)
        assert field.get(10, 10) == -3

    @pytest.mark.parametrize("x,y", [(-1, 0), (5, 0), (0, 4), (1.5, 1)])
    def test_out_of_bounds_write_is_dropped(self, field, x, y):
        before = field.working.copy()
        assert field.set(x, y, 5) is False
        assert np.array_equal(field.working, before)

    def test_non_finite_write_is_dropped(self, field):
        assert field.set(1, 1, math.nan) is False
        assert field.get(1, 1) == 0

    def test_integral_float_coordinates_accepted(self, field):
        field.set(2.0, 1.0, 6)
        assert field.get(2, 1) == 6


class TestHeightFieldSnapshots:
    """Test commit/load between base and working."""

    def test_commit_working_to_base(self):
        field = HeightField.create(2, 2)
        field.set(1, 0, 3)
        field.commit_working_to_base()

        assert field.get_base(1, 0) == 3
        # Deep copy: later edits do not leak into base
        field.set(1, 0, 8)
        assert field.get_base(1, 0) == 3

    def test_load_base_into_working_discards_edits(self):
        field = HeightField.create(2, 2)
        field.set(0, 0, 5)
        field.load_base_into_working()

        assert field.get(0, 0) == 0

    def test_adopt_sets_both_grids(self):
        field = HeightField.create(2, 3)
        heights = np.array([[1, 2, 3], [-1, -2, 20]])
        field.adopt(heights)

        assert field.to_lists() == [[1, 2, 3], [-1, -2, 10]]
        assert field.to_lists("base") == [[1, 2, 3], [-1, -2, 10]]

    def test_adopt_rejects_wrong_shape(self):
        field = HeightField.create(2, 3)
        with pytest.raises(ConfigurationError):
            field.adopt(np.zeros((3, 2)))
        assert field.is_consistent()


class TestHeightFieldResize:
    """Test in-place resizing."""

    def test_resize_preserves_overlap_from_base(self):
        """Overlapping committed cells are copied into both new grids."""
        field = HeightField.create(3, 3)
        field.set(0, 0, 4)
        field.set(2, 2, 6)
        field.commit_working_to_base()
        # Uncommitted edit: not part of base, so not preserved
        field.set(1, 1, 9)

        field.resize(5, 2)

        assert field.shape == (2, 5)
        assert field.is_consistent()
        assert field.get(0, 0) == 4
        assert field.get_base(0, 0) == 4
        assert field.get(1, 1) == 0
        # New cells take the default height
        assert field.get(4, 1) == 0
        assert field.get(2, 2) == field.default_height

    def test_resize_grow(self):
        field = HeightField.create(1, 1)
        field.set(0, 0, 2)
        field.commit_working_to_base()
        field.resize(3, 3)

        assert field.to_lists() == [[2, 0, 0], [0, 0, 0], [0, 0, 0]]

    def test_resize_rejects_invalid_dimensions(self):
        field = HeightField.create(2, 2)
        with pytest.raises(ConfigurationError):
            field.resize(0, 3)
        assert field.shape == (2, 2)


class TestHeightFieldReset:
    """Test reset and its fallback chain."""

    def test_reset_all(self):
        field = HeightField.create(2, 2)
        field.set(0, 0, 5)
        field.commit_working_to_base()
        field.reset_all()

        assert field.is_all_default()
        assert field.get_base(0, 0) == 0

    def test_reset_all_to_height(self):
        field = HeightField.create(2, 2)
        field.reset_all(3)
        assert np.all(field.working == 3)
        assert np.all(field.base == 3)

    def test_reset_derives_shape_from_base(self):
        """Invalid stored dimensions fall back to the base grid shape."""
        field = HeightField.create(3, 4)
        field.rows = 0
        field.reset_all()

        assert field.shape == (3, 4)
        assert field.is_consistent()

    def test_reset_falls_back_to_minimal_grid(self):
        field = HeightField.create(3, 4)
        field.rows = None
        field.base = None
        field.reset_all()

        assert field.shape == (1, 1)
        assert field.is_consistent()

    def test_reset_fallback_shape_is_configurable(self):
        settings = TerrainSettings(fallback_rows=2, fallback_cols=3)
        field = HeightField.create(3, 4, settings=settings)
        field.cols = -1
        field.base = None
        field.reset_all()

        assert field.shape == (2, 3)


class TestHeightFieldConsistency:
    """Test consistency checks and serialization."""

    def test_shape_mismatch_detected(self):
        field = HeightField.create(2, 2)
        field.working = np.zeros((2, 3), dtype=field.working.dtype)
        assert not field.is_consistent()

    def test_missing_grid_detected(self):
        field = HeightField.create(2, 2)
        field.base = None
        assert not field.is_consistent()

    def test_from_lists_round_trip(self):
        rows = [[0, 1, -1], [10, -10, 3]]
        field = HeightField.from_lists(rows)

        assert field.shape == (2, 3)
        assert field.to_lists() == rows
        assert field.to_lists("base") == rows

    @pytest.mark.parametrize("which", ["committed", "Base", ""])
    def test_to_lists_rejects_unknown_grid(self, which):
        field = HeightField.create(2, 2)
        with pytest.raises(ConfigurationError):
            field.to_lists(which)

    def test_from_lists_rejects_ragged_rows(self):
        with pytest.raises(ConfigurationError):
            HeightField.from_lists([[0, 1], [2]])

    def test_from_lists_rejects_empty(self):
        with pytest.raises(ConfigurationError):
            HeightField.from_lists([])
