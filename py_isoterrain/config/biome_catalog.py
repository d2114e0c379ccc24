"""
Biome taxonomy for the terrain system.

Grouping hierarchy: group name -> list of biome definitions. Each biome has
a stable key (used by the elevation recipes and profiles), a UI label and a
rarity tag.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional


@dataclass(frozen=True)
class BiomeDefinition:
    """A selectable biome."""

    key: str
    label: str
    rarity: str
    group: str


def _group(name: str, *entries) -> List[BiomeDefinition]:
    return [BiomeDefinition(key, label, rarity, name) for key, label, rarity in entries]


BIOME_GROUPS: Dict[str, List[BiomeDefinition]] = {
    "Common": _group(
        "Common",
        ("grassland", "Grassland", "common"),
        ("hills", "Hills", "common"),
        ("forestTemperate", "Temperate Forest", "common"),
        ("forestConifer", "Conifer Forest", "common"),
        ("savanna", "Savanna", "common"),
        ("steppe", "Steppe / Prairie", "common"),
    ),
    "Desert": _group(
        "Desert",
        ("desertHot", "Hot Desert", "uncommon"),
        ("desertCold", "Cold Desert", "uncommon"),
        ("sandDunes", "Sand Dunes", "uncommon"),
        ("oasis", "Oasis", "uncommon"),
        ("saltFlats", "Salt Flats", "rare"),
        ("thornscrub", "Thornscrub / Chaparral", "uncommon"),
    ),
    "Arctic": _group(
        "Arctic",
        ("tundra", "Tundra", "uncommon"),
        ("glacier", "Glacier / Ice Sheet", "rare"),
        ("frozenLake", "Frozen Lake", "rare"),
        ("packIce", "Pack Ice", "rare"),
    ),
    "Mountain": _group(
        "Mountain",
        ("mountain", "Mountain", "common"),
        ("alpine", "Alpine", "uncommon"),
        ("screeSlope", "Scree Slope", "uncommon"),
        ("cedarHighlands", "Cedar Highlands", "uncommon"),
        ("geyserBasin", "Geyser Basin", "rare"),
    ),
    "Wetlands": _group(
        "Wetlands",
        ("swamp", "Swamp / Marsh", "uncommon"),
        ("wetlands", "Wetlands (Bog/Fen)", "uncommon"),
        ("floodplain", "Floodplain", "common"),
        ("bloodMarsh", "Blood Marsh", "exotic"),
        ("mangrove", "Mangrove", "rare"),
    ),
    "Aquatic": _group(
        "Aquatic",
        ("coast", "Coast / Beach", "common"),
        ("riverLake", "River / Lake", "common"),
        ("ocean", "Ocean (Deep)", "uncommon"),
        ("coralReef", "Coral Reef", "rare"),
    ),
    "ForestVariants": _group(
        "ForestVariants",
        ("deadForest", "Dead / Burnt Forest", "uncommon"),
        ("petrifiedForest", "Petrified Forest", "rare"),
        ("bambooThicket", "Bamboo Thicket", "uncommon"),
        ("orchard", "Orchard", "common"),
        ("mysticGrove", "Mystic Grove", "exotic"),
        ("feywildBloom", "Feywild Bloom", "exotic"),
        ("shadowfellForest", "Shadowfell Forest", "exotic"),
    ),
    "Underground": _group(
        "Underground",
        ("cavern", "Cavern", "uncommon"),
        ("fungalGrove", "Fungal Grove", "rare"),
        ("crystalFields", "Crystal Fields", "rare"),
        ("crystalSpires", "Crystal Spires", "exotic"),
        ("eldritchRift", "Eldritch Rift", "exotic"),
    ),
    "Volcanic": _group(
        "Volcanic",
        ("volcanic", "Volcanic", "rare"),
        ("obsidianPlain", "Obsidian Plain", "rare"),
        ("ashWastes", "Ash Wastes", "rare"),
        ("lavaFields", "Lava Fields", "exotic"),
    ),
    "Wasteland": _group(
        "Wasteland",
        ("wasteland", "Blighted Wasteland", "rare"),
        ("ruinedUrban", "Ruined Urban", "rare"),
        ("graveyard", "Graveyard / Necropolis", "uncommon"),
    ),
    "Exotic": _group(
        "Exotic",
        ("astralPlateau", "Astral Plateau", "exotic"),
        ("arcaneLeyNexus", "Arcane Ley Nexus", "exotic"),
    ),
}

# Flatten for quick lookups
ALL_BIOMES: List[BiomeDefinition] = [b for group in BIOME_GROUPS.values() for b in group]

_BY_KEY: Dict[str, BiomeDefinition] = {b.key: b for b in ALL_BIOMES}


def find_biome(key: str) -> Optional[BiomeDefinition]:
    """Look up a biome by key, or None when the key is unknown."""
    return _BY_KEY.get(key)


def list_biome_keys() -> List[str]:
    """All biome keys in catalog order."""
    return [b.key for b in ALL_BIOMES]
