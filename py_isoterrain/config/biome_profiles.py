"""
Per-biome elevation tuning tables.

Three tables drive biome elevation generation:
- BIOME_AMPLITUDE_BY_KEY: desired maximum absolute elevation (levels)
- BIOME_ELEVATION_PROFILES: post-process refinements beyond amplitude
- BIOME_UNIT_BY_KEY: recommended pixels-per-level for each biome
"""

from dataclasses import dataclass, replace
from typing import Dict, Iterable, Optional


# Target |height| amplitude in levels, before relief scaling and profile clamps
BIOME_AMPLITUDE_BY_KEY: Dict[str, int] = {
    # Plains/grass
    "grassland": 5,
    "hills": 7,
    "mountain": 10,
    "alpine": 10,
    # Deserts
    "desertHot": 3,
    "sandDunes": 8,
    "desertCold": 2,
    "oasis": 3,
    "saltFlats": 1,
    "thornscrub": 3,
    # Wet/flat
    "wetlands": 3,
    "swamp": 3,
    "floodplain": 3,
    "bloodMarsh": 3,
    "mangrove": 3,
    "riverLake": 4,
    # Cold
    "tundra": 2,
    "glacier": 6,
    "frozenLake": 3,
    "packIce": 3,
    # Coasts/oceanic
    "coast": 5,
    "ocean": 5,
    "coralReef": 6,
    # Forests & variants
    "forestTemperate": 5,
    "forestConifer": 6,
    "savanna": 4,
    "steppe": 3,
    "deadForest": 3,
    "petrifiedForest": 6,
    "bambooThicket": 4,
    "orchard": 3,
    "mysticGrove": 4,
    "feywildBloom": 5,
    "shadowfellForest": 4,
    # Underground/oddities
    "cavern": 5,
    "fungalGrove": 4,
    "crystalFields": 7,
    "crystalSpires": 9,
    "eldritchRift": 8,
    # Volcanic/wastes
    "volcanic": 9,
    "obsidianPlain": 3,
    "ashWastes": 4,
    "lavaFields": 6,
    "wasteland": 5,
    "ruinedUrban": 4,
    "graveyard": 2,
    # Exotic
    "astralPlateau": 7,
    "arcaneLeyNexus": 8,
}


@dataclass(frozen=True)
class ElevationProfile:
    """
    Post-process refinements applied after amplitude scaling.

    Attributes:
        min_amp, max_amp: clamp window for the target amplitude (levels)
        smooth_radius, smooth_iterations: box blur before quantization
        ridge_power: >1 sharpens relief, <1 softens it, 1 leaves it unchanged
        water_shift: constant level shift (negative for wetter biomes)
        jump_px: desired visual jump between neighboring cells, in pixels
        quant_step: fixed level step used when jump_px is not set
    """

    min_amp: Optional[float] = None
    max_amp: Optional[float] = None
    smooth_radius: int = 0
    smooth_iterations: int = 0
    ridge_power: float = 1.0
    water_shift: float = 0.0
    jump_px: Optional[float] = None
    quant_step: Optional[int] = None


def _build_profiles() -> Dict[str, ElevationProfile]:
    profiles: Dict[str, ElevationProfile] = {}

    def assign(keys: Iterable[str], **fields) -> None:
        for key in keys:
            profiles[key] = replace(profiles.get(key, ElevationProfile()), **fields)

    # Very flat
    assign(["frozenLake", "obsidianPlain", "ashWastes"],
           min_amp=1, max_amp=3, smooth_radius=2, smooth_iterations=2, ridge_power=0.95, jump_px=1.5)
    assign(["saltFlats"],
           min_amp=1, max_amp=1, smooth_radius=2, smooth_iterations=2, ridge_power=0.95, jump_px=1.5)

    # Rolling
    assign(["grassland", "savanna", "steppe", "orchard", "tundra"],
           min_amp=3, max_amp=6, smooth_radius=1, smooth_iterations=1, ridge_power=1.0, jump_px=2.5)

    # Dunes: extra smooth
    assign(["sandDunes"],
           min_amp=4, max_amp=7, smooth_radius=2, smooth_iterations=2, ridge_power=0.95, jump_px=2.0)

    # Undulating/rugged forests
    assign(["forestTemperate", "forestConifer", "wasteland", "deadForest", "bambooThicket"],
           min_amp=4, max_amp=7, smooth_radius=1, smooth_iterations=1, ridge_power=1.05, jump_px=3.5)

    # Hilly
    assign(["hills", "cedarHighlands", "petrifiedForest"],
           min_amp=6, max_amp=9, ridge_power=1.12, jump_px=5.0)

    # Mountainous
    assign(["mountain", "alpine", "screeSlope", "crystalSpires", "volcanic"],
           min_amp=8, max_amp=10, ridge_power=1.25, jump_px=10.0)

    # Wet/lowland
    assign(["wetlands", "swamp", "floodplain", "mangrove", "riverLake", "geyserBasin", "bloodMarsh"],
           min_amp=3, max_amp=6, smooth_radius=1, smooth_iterations=2, ridge_power=0.98,
           water_shift=-1, jump_px=2.5)

    # Aquatic
    assign(["ocean"],
           min_amp=4, max_amp=6, smooth_radius=1, smooth_iterations=2, ridge_power=1.0,
           water_shift=-2, jump_px=3.5)
    assign(["coralReef"],
           min_amp=5, max_amp=7, smooth_radius=1, smooth_iterations=1, ridge_power=1.12,
           water_shift=-1, jump_px=4.5)

    # Cold
    assign(["glacier"], min_amp=5, max_amp=7, ridge_power=1.12, jump_px=6.0)
    assign(["packIce"], min_amp=4, max_amp=6, smooth_radius=1, smooth_iterations=1, jump_px=3.5)

    # Underground/exotic
    assign(["cavern"],
           min_amp=4, max_amp=6, smooth_radius=1, smooth_iterations=1, water_shift=-1, jump_px=3.0)
    assign(["fungalGrove"], min_amp=3, max_amp=5, smooth_radius=1, smooth_iterations=1, jump_px=2.5)
    assign(["crystalFields"], min_amp=6, max_amp=8, ridge_power=1.18, jump_px=6.0)
    assign(["eldritchRift"], min_amp=7, max_amp=9, ridge_power=1.2, jump_px=7.0)
    assign(["astralPlateau"], min_amp=6, max_amp=8, ridge_power=1.05, water_shift=1, jump_px=4.0)
    assign(["arcaneLeyNexus"], min_amp=7, max_amp=9, ridge_power=1.15, jump_px=6.5)

    # Coasts
    assign(["coast"],
           min_amp=4, max_amp=6, smooth_radius=2, smooth_iterations=1, ridge_power=1.0,
           water_shift=-1, jump_px=3.0)

    return profiles


BIOME_ELEVATION_PROFILES: Dict[str, ElevationProfile] = _build_profiles()

# Missing keys fall back to a permissive empty profile
DEFAULT_PROFILE = ElevationProfile()


def get_profile_for_biome(biome_key: str) -> ElevationProfile:
    """Get the post-process profile for a biome."""
    return BIOME_ELEVATION_PROFILES.get(biome_key, DEFAULT_PROFILE)


# Recommended pixels per level so visuals match each biome's character
BIOME_UNIT_BY_KEY: Dict[str, float] = {
    # Mountainous
    "mountain": 12,
    "alpine": 12,
    "screeSlope": 12,
    "crystalSpires": 12,
    "volcanic": 12,
    # Hilly
    "hills": 10,
    "cedarHighlands": 10,
    "petrifiedForest": 10,
    # Forest/rugged
    "forestTemperate": 8,
    "forestConifer": 8,
    "wasteland": 8,
    "deadForest": 8,
    "bambooThicket": 8,
    # Rolling plains
    "grassland": 6,
    "savanna": 6,
    "steppe": 6,
    "orchard": 6,
    "tundra": 6,
    # Dunes
    "sandDunes": 6,
    # Very flat
    "saltFlats": 5,
    "frozenLake": 5,
    "ashWastes": 5,
    "obsidianPlain": 5,
    # Wet/coastal/riverine
    "wetlands": 6,
    "swamp": 6,
    "floodplain": 6,
    "mangrove": 6,
    "riverLake": 6,
    "geyserBasin": 6,
    "bloodMarsh": 6,
    "coast": 7,
    # Aquatic
    "ocean": 7,
    "coralReef": 8,
    # Arctic
    "glacier": 9,
    "packIce": 7,
    # Underground/exotic
    "cavern": 7,
    "fungalGrove": 6,
    "crystalFields": 9,
    "eldritchRift": 10,
    "astralPlateau": 8,
    "arcaneLeyNexus": 9,
}
