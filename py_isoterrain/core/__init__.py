"""
Core terrain height-field functionality.
"""

from .height_field import HeightField
from .brush import BrushEditor, compute_brush_footprint, normalize_brush_size
from .update_scheduler import AsyncioFrameScheduler, FrameScheduler, SchedulerState, UpdateScheduler
from .depth_ordering import (
    DepthOrderedLayer,
    LayerItem,
    LayerKind,
    TYPE_BIAS,
    compute_depth_key,
    sort_by_depth,
)
from .elevation_scale import ElevationScale
from .biome_elevation import BiomeElevationGenerator, GenerationOptions, is_all_default_height
from .rendering import TileRenderer, TileUpdate
from .terrain_coordinator import TerrainCoordinator

__all__ = ['HeightField', 'BrushEditor', 'compute_brush_footprint', 'normalize_brush_size',
           'AsyncioFrameScheduler', 'FrameScheduler', 'SchedulerState', 'UpdateScheduler',
           'DepthOrderedLayer', 'LayerItem', 'LayerKind', 'TYPE_BIAS', 'compute_depth_key',
           'sort_by_depth', 'ElevationScale', 'BiomeElevationGenerator', 'GenerationOptions',
           'is_all_default_height', 'TileRenderer', 'TileUpdate', 'TerrainCoordinator']
