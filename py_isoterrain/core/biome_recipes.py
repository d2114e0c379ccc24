"""
Biome shaping recipes.

Each recipe is a pure function

    recipe(x, y, nx, ny, seed, opts) -> raw heights

evaluated over whole coordinate arrays at once: x/y are integer cell
indices, nx/ny the same cells normalized to [0, 1]. Raw heights are
unitless; the generator rescales them to levels afterwards.

Variant biomes reuse a base recipe with a shifted seed and their own
relief/roughness defaults instead of duplicating logic. Options passed by
the caller always override a recipe's own defaults.
"""

import math
from dataclasses import dataclass, replace
from typing import Callable, Dict, Optional

import numpy as np

from ..utils.random import rand_from_seed
from .noise import cliff_band, dune_wave, fbm, meander_channel, mix, radial, ridge


@dataclass(frozen=True)
class RecipeOptions:
    """Caller overrides handed to a recipe; None means "use the recipe default"."""

    relief: Optional[float] = None
    roughness: Optional[float] = None
    water_bias: Optional[float] = None
    orientation: Optional[float] = None


Recipe = Callable[[np.ndarray, np.ndarray, np.ndarray, np.ndarray, int, RecipeOptions], np.ndarray]


def _or(value: Optional[float], default: float) -> float:
    return default if value is None else value


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


# Base recipes

def shape_grassland(x, y, nx, ny, seed, opts):
    r = _or(opts.relief, 2.5)
    rough = min(3.0, max(0.25, _or(opts.roughness, 1.0)))
    n = fbm(nx * 2.2, ny * 2.2, seed, 4 + _round_half_up(rough), 1.9, 0.55)
    return (n - 0.5) * r


def shape_hills(x, y, nx, ny, seed, opts):
    r = _or(opts.relief, 4.0)
    rough = min(3.0, max(0.25, _or(opts.roughness, 1.1)))
    base = fbm(nx * 2.8, ny * 2.8, seed, 5 + _round_half_up(rough), 2.05, 0.5)
    bumps = fbm(nx * 9.0, ny * 9.0, seed + 999, 3, 2.2, 0.5) * 0.3
    return (base - 0.5 + bumps) * r


def shape_mountain(x, y, nx, ny, seed, opts):
    r = _or(opts.relief, 8.0)
    ridged = ridge(nx * 2.2, ny * 2.2, seed, 6)
    valley = fbm(nx * 0.7, ny * 0.7, seed + 123, 3, 2.0, 0.6)
    h = (ridged * 1.1 - 0.55) * r
    # Carve valleys
    return h - (valley - 0.5) * (r * 0.4)


def shape_desert_hot(x, y, nx, ny, seed, opts):
    r = _or(opts.relief, 1.5)
    n = fbm(nx * 3.5, ny * 3.5, seed, 4, 2.2, 0.55)
    return (n - 0.5) * r * 1.2 + _or(opts.water_bias, 0.0)


def shape_sand_dunes(x, y, nx, ny, seed, opts):
    r = _or(opts.relief, 3.0)
    angle = opts.orientation
    if angle is None:
        angle = math.floor(rand_from_seed(seed, 13) * 360)
    wave = dune_wave(nx, ny, seed, angle)
    detail = fbm(nx * 6.0, ny * 6.0, seed + 77, 4, 2.0, 0.5)
    return (wave * 0.6 + (detail - 0.5) * 0.7) * r


def shape_wetlands(x, y, nx, ny, seed, opts):
    r = _or(opts.relief, 2.0)
    depress = fbm(nx * 2.0, ny * 2.0, seed, 4, 2.0, 0.55)
    # Negative bias: soggy flats and pools
    return (depress - 0.65) * r - abs(_or(opts.water_bias, 1.0))


def shape_tundra(x, y, nx, ny, seed, opts):
    r = _or(opts.relief, 1.5)
    low = fbm(nx * 1.7, ny * 1.7, seed, 3, 2.0, 0.6)
    return (low - 0.5) * r


def shape_coast(x, y, nx, ny, seed, opts):
    r = _or(opts.relief, 3.5)
    if opts.orientation is not None:
        theta = math.radians(opts.orientation)
    else:
        theta = rand_from_seed(seed, 71) * math.pi * 2
    t = nx * math.cos(theta) + ny * math.sin(theta)
    gradient = mix(-1.0, 1.0, t + 0.25)
    n = fbm(nx * 3.0, ny * 3.0, seed, 4, 2.0, 0.55) - 0.5
    return (gradient * 0.9 + n * 0.7) * r


def shape_river_lake(x, y, nx, ny, seed, opts):
    r = _or(opts.relief, 2.5)
    band = meander_channel(nx, ny, seed, rand_from_seed(seed, 29) * math.pi * 2)
    base = (fbm(nx * 2.2, ny * 2.2, seed, 4, 2.0, 0.55) - 0.5) * (r * 0.6)
    return base - band * (r * 1.2) - abs(_or(opts.water_bias, 0.8))


# Plains and forest variants

def shape_forest_temperate(x, y, nx, ny, seed, opts):
    o = replace(opts, relief=_or(opts.relief, 3.0), roughness=_or(opts.roughness, 1.1))
    return shape_hills(x, y, nx, ny, seed, o)


def shape_forest_conifer(x, y, nx, ny, seed, opts):
    # Craggier than temperate
    o = replace(opts, relief=_or(opts.relief, 3.8), roughness=_or(opts.roughness, 1.2) + 0.2)
    return shape_hills(x, y, nx, ny, seed + 31, o)


def shape_savanna(x, y, nx, ny, seed, opts):
    o = replace(opts, relief=_or(opts.relief, 2.2), roughness=_or(opts.roughness, 0.9))
    return shape_grassland(x, y, nx, ny, seed + 7, o)


def shape_steppe(x, y, nx, ny, seed, opts):
    o = replace(opts, relief=_or(opts.relief, 1.8), roughness=_or(opts.roughness, 0.7))
    return shape_grassland(x, y, nx, ny, seed + 13, o)


# Desert variants

def shape_desert_cold(x, y, nx, ny, seed, opts):
    r = _or(opts.relief, 1.2)
    n = fbm(nx * 2.5, ny * 2.5, seed, 3, 2.0, 0.55) - 0.5
    return n * r + _or(opts.water_bias, -0.2)


def shape_oasis(x, y, nx, ny, seed, opts):
    base = shape_desert_hot(x, y, nx, ny, seed, replace(opts, relief=_or(opts.relief, 1.5)))
    # Negative in the center: the water hole
    bowl = -radial(nx, ny, seed + 5, False, 1.0, 0.0)
    return base + bowl * 1.2


def shape_salt_flats(x, y, nx, ny, seed, opts):
    r = _or(opts.relief, 0.8)
    n = fbm(nx * 6.0, ny * 6.0, seed + 91, 2, 2.0, 0.5) - 0.5
    return n * r + _or(opts.water_bias, -0.3)


def shape_thornscrub(x, y, nx, ny, seed, opts):
    o = replace(opts, relief=_or(opts.relief, 2.0), roughness=_or(opts.roughness, 1.0) + 0.2)
    return shape_grassland(x, y, nx, ny, seed + 23, o)


# Arctic

def shape_glacier(x, y, nx, ny, seed, opts):
    r = _or(opts.relief, 2.8)
    slope = cliff_band(nx, ny, seed, rand_from_seed(seed, 2) * 180, 0.12)
    smooth = fbm(nx * 1.2, ny * 1.2, seed + 212, 3, 1.8, 0.6) - 0.5
    return (slope * 0.7 + smooth * 0.3) * r


def shape_frozen_lake(x, y, nx, ny, seed, opts):
    base = -np.abs(radial(nx, ny, seed + 9, False, 1.1, 0.0))
    return base * _or(opts.relief, 2.0) - abs(_or(opts.water_bias, 0.6))


def shape_pack_ice(x, y, nx, ny, seed, opts):
    r = _or(opts.relief, 1.6)
    cells = (np.sin(nx * 22 + seed) + np.sin(ny * 21 + seed * 0.7)) * 0.25
    noise = fbm(nx * 4.0, ny * 4.0, seed + 44, 3, 2.0, 0.55) - 0.5
    return (cells + noise * 0.5) * r


# Mountain variants

def shape_scree_slope(x, y, nx, ny, seed, opts):
    r = _or(opts.relief, 4.5)
    ridgey = ridge(nx * 2.5, ny * 2.5, seed + 55, 5) - 0.5
    band = cliff_band(nx, ny, seed + 3, rand_from_seed(seed, 17) * 180, 0.08)
    return (ridgey * 0.8 + band * 0.6) * r


def shape_cedar_highlands(x, y, nx, ny, seed, opts):
    return shape_hills(x, y, nx, ny, seed + 66, replace(opts, relief=_or(opts.relief, 3.5)))


def shape_geyser_basin(x, y, nx, ny, seed, opts):
    base = shape_wetlands(x, y, nx, ny, seed, replace(opts, relief=_or(opts.relief, 2.0)))
    # Vents
    pits = fbm(nx * 10.0, ny * 10.0, seed + 77, 2, 2.0, 0.5) - 0.4
    return base - pits * 1.2


# Wetland variants

def shape_floodplain(x, y, nx, ny, seed, opts):
    base = shape_river_lake(x, y, nx, ny, seed, replace(opts, relief=_or(opts.relief, 2.0)))
    return base * 0.8


def shape_blood_marsh(x, y, nx, ny, seed, opts):
    base = shape_wetlands(x, y, nx, ny, seed + 88, replace(opts, relief=_or(opts.relief, 2.2)))
    return base - 0.5


def shape_mangrove(x, y, nx, ny, seed, opts):
    coast = shape_coast(x, y, nx, ny, seed, replace(opts, relief=_or(opts.relief, 2.5)))
    wet = shape_wetlands(x, y, nx, ny, seed + 99, replace(opts, relief=_or(opts.relief, 2.0)))
    return coast * 0.6 + wet * 0.7


# Aquatic

def shape_ocean(x, y, nx, ny, seed, opts):
    bowl = -radial(nx, ny, seed + 111, False, 1.2, 0.0)
    swell = fbm(nx * 1.1, ny * 1.1, seed + 112, 2, 2.0, 0.6) - 0.5
    return (bowl * 1.2 + swell * 0.3) * _or(opts.relief, 3.0) - abs(_or(opts.water_bias, 0.5))


def shape_coral_reef(x, y, nx, ny, seed, opts):
    # High around the edges, shallow shelves with ridges
    ring = radial(nx, ny, seed + 121, True, 1.0, 0.0)
    ridges = ridge(nx * 3.5, ny * 3.5, seed + 122, 4) - 0.5
    return (ring * 0.8 + ridges * 0.6) * _or(opts.relief, 2.5)


# Forest oddities

def shape_dead_forest(x, y, nx, ny, seed, opts):
    base = shape_steppe(x, y, nx, ny, seed + 131, replace(opts, relief=_or(opts.relief, 1.7)))
    return base - 0.3


def shape_petrified_forest(x, y, nx, ny, seed, opts):
    h = shape_hills(x, y, nx, ny, seed + 141, replace(opts, relief=_or(opts.relief, 3.2)))
    cracks = cliff_band(nx, ny, seed + 142, 90, 0.06) + cliff_band(nx, ny, seed + 143, 0, 0.06)
    return h + cracks * 0.6


def shape_bamboo_thicket(x, y, nx, ny, seed, opts):
    # Gentle longitudinal ridges
    direction = rand_from_seed(seed, 7) * 360
    o = replace(opts, relief=_or(opts.relief, 2.2), orientation=direction)
    return shape_sand_dunes(x, y, nx, ny, seed + 151, o) * 0.7


def shape_orchard(x, y, nx, ny, seed, opts):
    r = _or(opts.relief, 1.8)
    rows_pattern = np.sin(nx * 18 + seed * 0.01) * np.sin(ny * 18 + seed * 0.013)
    base = fbm(nx * 2.0, ny * 2.0, seed + 161, 3, 2.0, 0.55) - 0.5
    return (rows_pattern * 0.6 + base * 0.4) * r


def shape_mystic_grove(x, y, nx, ny, seed, opts):
    humps = radial(nx, ny, seed + 171, True, 1.0, 0.0) + (
        fbm(nx * 5.0, ny * 5.0, seed + 172, 3, 2.0, 0.5) - 0.5
    )
    return humps * _or(opts.relief, 2.4)


def shape_feywild_bloom(x, y, nx, ny, seed, opts):
    petals = np.sin((nx - 0.5) * 16 + seed) * np.cos((ny - 0.5) * 16 + seed * 0.5)
    base = radial(nx, ny, seed + 181, True, 1.0, 0.0)
    return (base * 0.7 + petals * 0.3) * _or(opts.relief, 2.6)


def shape_shadowfell_forest(x, y, nx, ny, seed, opts):
    bowl = -radial(nx, ny, seed + 191, False, 0.8, 0.0)
    rough = fbm(nx * 3.0, ny * 3.0, seed + 192, 3, 2.0, 0.6) - 0.5
    return (bowl + rough * 0.5) * _or(opts.relief, 2.0)


# Underground

def shape_cavern(x, y, nx, ny, seed, opts):
    r = _or(opts.relief, 3.0)
    ceiling = -radial(nx, ny, seed + 201, False, 1.0, 0.0)
    tunnels = np.sin(nx * 10 + seed) * np.cos(ny * 10 + seed * 0.7) * 0.3
    return (ceiling + tunnels) * r - 0.4


def shape_fungal_grove(x, y, nx, ny, seed, opts):
    bumps = fbm(nx * 6.0, ny * 6.0, seed + 211, 4, 2.0, 0.5) - 0.4
    return bumps * _or(opts.relief, 2.2)


def shape_crystal_fields(x, y, nx, ny, seed, opts):
    spikes = ridge(nx * 4.0, ny * 4.0, seed + 221, 4) - 0.5
    return spikes * _or(opts.relief, 3.0)


def shape_crystal_spires(x, y, nx, ny, seed, opts):
    spires = ridge(nx * 6.0, ny * 6.0, seed + 231, 5) - 0.5
    center = radial(nx, ny, seed + 232, True, 0.8, 0.0)
    return (spires * 0.9 + center * 0.4) * _or(opts.relief, 4.0)


def shape_eldritch_rift(x, y, nx, ny, seed, opts):
    band1 = cliff_band(nx, ny, seed + 241, rand_from_seed(seed, 242) * 180, 0.05)
    band2 = cliff_band(nx, ny, seed + 243, rand_from_seed(seed, 244) * 180 + 90, 0.05)
    base = fbm(nx * 2.0, ny * 2.0, seed + 245, 3, 2.0, 0.6) - 0.5
    return (band1 + band2 + base * 0.4) * _or(opts.relief, 3.5)


# Volcanic

def shape_volcanic(x, y, nx, ny, seed, opts):
    cone = radial(nx, ny, seed + 251, False, 1.2, 0.0)
    # Caldera dip at the summit
    caldera = -np.exp(-((nx - 0.5) ** 2 + (ny - 0.5) ** 2) * 40)
    lava = ridge(nx * 3.0, ny * 3.0, seed + 252, 4) - 0.5
    return (cone + caldera * 1.5 + lava * 0.4) * _or(opts.relief, 5.0)


def shape_obsidian_plain(x, y, nx, ny, seed, opts):
    flat = fbm(nx * 2.0, ny * 2.0, seed + 261, 2, 2.0, 0.55) - 0.5
    shards = ridge(nx * 6.0, ny * 6.0, seed + 262, 3) - 0.5
    return (flat * 0.4 + shards * 0.3) * _or(opts.relief, 1.6)


def shape_ash_wastes(x, y, nx, ny, seed, opts):
    dunes = shape_sand_dunes(x, y, nx, ny, seed + 271, replace(opts, relief=_or(opts.relief, 2.0)))
    return dunes * 0.7 - 0.4


def shape_lava_fields(x, y, nx, ny, seed, opts):
    r = _or(opts.relief, 2.8)
    flows = np.sin(nx * 14 + seed) * 0.5 + (fbm(nx * 3.5, ny * 3.5, seed + 281, 3, 2.0, 0.55) - 0.5)
    return flows * r + 0.3


# Wasteland

def shape_wasteland(x, y, nx, ny, seed, opts):
    rough = fbm(nx * 3.0, ny * 3.0, seed + 291, 5, 2.1, 0.5) - 0.5
    return rough * _or(opts.relief, 3.0) - 0.2


def shape_ruined_urban(x, y, nx, ny, seed, opts):
    r = _or(opts.relief, 2.0)
    blocks = (np.sign(np.sin(nx * 20)) + np.sign(np.cos(ny * 20))) * 0.2
    rubble = fbm(nx * 5.0, ny * 5.0, seed + 301, 3, 2.0, 0.55) - 0.5
    return (blocks + rubble) * r


def shape_graveyard(x, y, nx, ny, seed, opts):
    hummocks = fbm(nx * 6.0, ny * 6.0, seed + 311, 3, 2.0, 0.55) - 0.5
    return hummocks * _or(opts.relief, 1.8) - 0.1


# Exotic

def shape_astral_plateau(x, y, nx, ny, seed, opts):
    plateau = radial(nx, ny, seed + 321, False, 1.0, 0.0)
    return plateau * _or(opts.relief, 3.0) + 0.5


def shape_arcane_ley_nexus(x, y, nx, ny, seed, opts):
    band_a = cliff_band(nx, ny, seed + 331, 0, 0.04)
    band_b = cliff_band(nx, ny, seed + 332, 90, 0.04)
    base = fbm(nx * 2.0, ny * 2.0, seed + 333, 2, 2.0, 0.6) - 0.5
    return (band_a + band_b + base * 0.4) * _or(opts.relief, 3.2)


RECIPE_INDEX: Dict[str, Recipe] = {
    "grassland": shape_grassland,
    "hills": shape_hills,
    "mountain": shape_mountain,
    "alpine": shape_mountain,
    "desertHot": shape_desert_hot,
    "sandDunes": shape_sand_dunes,
    "wetlands": shape_wetlands,
    "swamp": shape_wetlands,
    "tundra": shape_tundra,
    "coast": shape_coast,
    "riverLake": shape_river_lake,
    # Forest & plains variants
    "forestTemperate": shape_forest_temperate,
    "forestConifer": shape_forest_conifer,
    "savanna": shape_savanna,
    "steppe": shape_steppe,
    # Desert variants
    "desertCold": shape_desert_cold,
    "oasis": shape_oasis,
    "saltFlats": shape_salt_flats,
    "thornscrub": shape_thornscrub,
    # Arctic
    "glacier": shape_glacier,
    "frozenLake": shape_frozen_lake,
    "packIce": shape_pack_ice,
    # Mountain
    "screeSlope": shape_scree_slope,
    "cedarHighlands": shape_cedar_highlands,
    "geyserBasin": shape_geyser_basin,
    # Wetlands
    "floodplain": shape_floodplain,
    "bloodMarsh": shape_blood_marsh,
    "mangrove": shape_mangrove,
    # Aquatic
    "ocean": shape_ocean,
    "coralReef": shape_coral_reef,
    # Forest variants
    "deadForest": shape_dead_forest,
    "petrifiedForest": shape_petrified_forest,
    "bambooThicket": shape_bamboo_thicket,
    "orchard": shape_orchard,
    "mysticGrove": shape_mystic_grove,
    "feywildBloom": shape_feywild_bloom,
    "shadowfellForest": shape_shadowfell_forest,
    # Underground
    "cavern": shape_cavern,
    "fungalGrove": shape_fungal_grove,
    "crystalFields": shape_crystal_fields,
    "crystalSpires": shape_crystal_spires,
    "eldritchRift": shape_eldritch_rift,
    # Volcanic
    "volcanic": shape_volcanic,
    "obsidianPlain": shape_obsidian_plain,
    "ashWastes": shape_ash_wastes,
    "lavaFields": shape_lava_fields,
    # Wasteland
    "wasteland": shape_wasteland,
    "ruinedUrban": shape_ruined_urban,
    "graveyard": shape_graveyard,
    # Exotic
    "astralPlateau": shape_astral_plateau,
    "arcaneLeyNexus": shape_arcane_ley_nexus,
}


def pick_recipe(biome_key: str) -> Recipe:
    """Recipe for a biome; unknown keys get the grassland recipe."""
    return RECIPE_INDEX.get(biome_key, shape_grassland)
