"""
Configuration modules for terrain editing and biome generation.
"""

from .config import Settings, get_settings
from .terrain_settings import (
    DEFAULT_TERRAIN_SETTINGS,
    TERRAIN_SHORTCUTS,
    TerrainSettings,
    TerrainTool,
)
from .biome_catalog import ALL_BIOMES, BIOME_GROUPS, BiomeDefinition, find_biome, list_biome_keys

__all__ = ['Settings', 'get_settings', 'DEFAULT_TERRAIN_SETTINGS', 'TERRAIN_SHORTCUTS',
           'TerrainSettings', 'TerrainTool', 'ALL_BIOMES', 'BIOME_GROUPS', 'BiomeDefinition',
           'find_biome', 'list_biome_keys']
