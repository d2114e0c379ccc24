"""Elevation unit (pixels per height level) used to place tiles vertically."""

import math
from typing import Optional

from ..config.terrain_settings import DEFAULT_TERRAIN_SETTINGS, TerrainSettings


class ElevationScale:
    """Runtime-adjustable pixels-per-level conversion."""

    def __init__(self, unit: Optional[float] = None, settings: TerrainSettings = DEFAULT_TERRAIN_SETTINGS):
        self.settings = settings
        self._unit = settings.elevation_unit
        if unit is not None:
            self.set_unit(unit)

    @property
    def unit(self) -> float:
        return self._unit

    def set_unit(self, unit: float) -> bool:
        """
        Apply a new unit.

        Negative or non-finite values are ignored.

        Returns:
            True if the effective unit changed
        """
        try:
            valid = math.isfinite(unit) and unit >= 0
        except TypeError:
            valid = False
        if not valid or unit == self._unit:
            return False
        self._unit = float(unit)
        return True

    def effective_unit(self) -> float:
        """The unit to use for quantization: a zero unit falls back to the configured one."""
        return self._unit if self._unit > 0 else self.settings.elevation_unit

    def offset_for(self, height: float) -> float:
        """
        Vertical pixel offset for a tile at height.

        Positive heights move up (negative y), negative heights move down.
        """
        try:
            if not math.isfinite(height):
                return 0.0
        except TypeError:
            return 0.0
        return -height * self._unit
