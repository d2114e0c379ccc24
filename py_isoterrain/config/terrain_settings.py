"""
Configuration settings for the terrain height-field engine.

This module defines the height model, brush limits and redraw scheduling
constants used by every terrain component, together with the tool and
shortcut names exposed to the UI layer.
"""

from enum import Enum
from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from ..exceptions import ConfigurationError


class TerrainTool(str, Enum):
    """Brush tools available for terrain modification."""

    RAISE = "raise"
    LOWER = "lower"


# Key bindings consumed by the UI layer
TERRAIN_SHORTCUTS: Dict[str, str] = {
    "raise_tool": "KeyR",
    "lower_tool": "KeyL",
    "increase_brush": "BracketRight",
    "decrease_brush": "BracketLeft",
    "reset_terrain": "KeyT",
    "toggle_terrain_mode": "KeyG",
}


class TerrainSettings(BaseModel):
    """Settings for terrain height editing and visual synchronization."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    # Height system
    default_height: int = Field(default=0, description="Height of untouched cells")
    min_height: int = Field(default=-10, description="Minimum allowed height level")
    max_height: int = Field(default=10, description="Maximum allowed height level")
    height_step: int = Field(default=1, description="Levels added or removed per brush application")

    # Brush system
    default_brush_size: int = Field(default=1, description="Brush size on startup")
    min_brush_size: int = Field(default=1, description="Smallest brush size")
    max_brush_size: int = Field(default=5, description="Largest brush size")

    # Visual representation
    elevation_unit: float = Field(
        default=8.0, ge=0, description="Pixels of vertical offset per height level"
    )

    # Performance settings
    batch_update_size: int = Field(default=10, ge=1, description="Maximum cells redrawn per frame")
    update_throttle_ms: float = Field(default=16.0, ge=0, description="Minimum time between drains")
    frame_interval_ms: float = Field(default=16.0, ge=0, description="Delay of a next-frame callback")

    # Degraded reset fallback
    fallback_rows: int = Field(default=1, ge=1, description="Rows used when no valid shape is known")
    fallback_cols: int = Field(default=1, ge=1, description="Columns used when no valid shape is known")

    @model_validator(mode="after")
    def _check_ranges(self) -> "TerrainSettings":
        if self.min_height > self.max_height:
            raise ValueError("min_height must not exceed max_height")
        if not self.min_height <= self.default_height <= self.max_height:
            raise ValueError("default_height must lie within [min_height, max_height]")
        if self.height_step < 1:
            raise ValueError("height_step must be at least 1")
        if self.min_brush_size < 1:
            raise ValueError("min_brush_size must be at least 1")
        if not self.min_brush_size <= self.default_brush_size <= self.max_brush_size:
            raise ValueError("default_brush_size must lie within the brush size range")
        return self

    @classmethod
    def build(cls, **values: Any) -> "TerrainSettings":
        """Create settings, reporting invalid values as a ConfigurationError."""
        try:
            return cls(**values)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid terrain settings: {e}") from e

    @property
    def max_abs_level(self) -> int:
        """Largest absolute height representable in either direction."""
        return max(abs(self.min_height), abs(self.max_height))

    def clamp_height(self, height: float) -> float:
        """Clamp a height into [min_height, max_height]."""
        return max(self.min_height, min(self.max_height, height))


# Default settings instance
DEFAULT_TERRAIN_SETTINGS = TerrainSettings()
