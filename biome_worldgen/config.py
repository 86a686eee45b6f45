# biome_worldgen/config.py

"""
================================================================================
INTERNAL DEFAULT CONFIGURATION
================================================================================
This module contains the default, fallback internal constants for the biome
world generator. These values are used if they are not explicitly provided by
the user's configuration.

DO NOT MODIFY THIS FILE FOR A SPECIFIC WORLD.
Instead, pass a configuration dictionary to WorldConfig.from_dict() or to the
BiomeSystem constructor.
================================================================================
"""

# --- World Dimensions ---
DEFAULT_SEED = 12345
DEFAULT_WORLD_WIDTH_TILES = 64
DEFAULT_WORLD_HEIGHT_TILES = 64
DEFAULT_TILE_SIZE_PX = 32

# --- Noise Generation ---
# Each environmental field is sampled from the same permutation table, so the
# fields are decorrelated by shifting their sample coordinates. Large primes keep
# the offsets unique but deterministic from the master seed.
TEMPERATURE_SEED_OFFSET = 12347
MOISTURE_SEED_OFFSET = 98761
ELEVATION_SEED_OFFSET = 54321

# Independent random streams derived from the master seed.
FORCED_SPAWN_SEED_OFFSET = 25391
ASSET_SEED_OFFSET = 70001
LAYER_JITTER_SEED_OFFSET = 31337

# Scale is a frequency multiplier applied to tile coordinates.
TEMPERATURE_NOISE = {
    "scale": 0.02,
    "octaves": 4,
    "persistence": 0.5,
    "lacunarity": 2.0,
}
MOISTURE_NOISE = {
    "scale": 0.025,
    "octaves": 3,
    "persistence": 0.6,
    "lacunarity": 2.0,
}
ELEVATION_NOISE = {
    "scale": 0.015,
    "octaves": 5,
    "persistence": 0.4,
    "lacunarity": 2.0,
}

# --- Biomes ---
DEFAULT_ENABLED_BIOMES = [
    "grassland",
    "forest",
    "mystical",
    "wetland",
    "mountainous",
    "village",
]

# Catch-all biome for cells no enabled biome accepts.
DEFAULT_FALLBACK_BIOME = "grassland"

# Optional guaranteed-biome overrides. None by default; a starting village looks
# like {"biome": "village", "position": {"x": 32, "y": 32}, "radius": 8}.
DEFAULT_FORCED_SPAWNS = []

# --- Water (consumed by external water-shaping logic) ---
DEFAULT_WATER_LEVEL = 0.2
DEFAULT_RIVERS = True
DEFAULT_LAKES = True

# --- Biome Boundary Smoothing ---
# A cell adopts the plurality biome of its 3x3 neighbourhood only when that
# biome holds at least this many of the 9 samples.
SMOOTHING_CONSENSUS_THRESHOLD = 5

# Exponent applied to the linear forced-spawn fade (1 - distance / radius).
# 1.0 is a linear fade; larger values shrink the guaranteed core.
FORCED_SPAWN_FALLOFF = 1.0

# --- Asset Synthesis ---
# Trees sample a secondary noise field at this frequency to find clusters.
CLUSTER_NOISE_FREQUENCY = 0.1
CLUSTER_THRESHOLD_BASE = 0.5
CLUSTER_THRESHOLD_CLUSTERING_FACTOR = 0.3

# Chance that a tree outside a cluster may draw from the rare pool.
RARE_TREE_CHANCE = 0.05
# Chance that a prop draw includes the rare props.
RARE_PROP_CHANCE = 0.1

# --- Layer Composition ---
# Fixed, ordered output layers as (name, z_index).
LAYER_ORDER = [
    ("terrain", 0),
    ("decals", 1),
    ("vegetation", 2),
    ("props", 3),
    ("structures", 4),
]

# Maximum jitter as a fraction of tile size, per layer.
LAYER_JITTER_FRACTION = {
    "terrain": 0.0,
    "decals": 0.5,
    "vegetation": 0.7,
    "props": 0.8,
    "structures": 0.0,
}

LAYER_ASSET_PREFIX = {
    "terrain": "assets/terrain/base/",
    "decals": "assets/decals/",
    "vegetation": "assets/foliage/trees/",
    "props": "assets/animated_entities/",
    "structures": "assets/structures/estructuras_completas/",
}

DECAL_ALPHA = 0.7

WORLD_FORMAT_VERSION = "1.0.0"

# --- Validation Limits ---
WORLD_LIMITS = {
    "min_world_size": 1,
    "max_world_width": 1000,
    "max_world_height": 1000,
    "max_total_tiles": 500000,
    "large_world_warning_tiles": 100000,
    "min_tile_size": 8,
    "max_tile_size": 128,
    "max_biomes": 10,
    "max_noise_octaves": 8,
    "many_octaves_warning": 6,
    "min_forced_spawn_radius": 1,
    "max_forced_spawn_radius": 50,
    "min_lacunarity": 1.0,
    "max_lacunarity": 4.0,
}

# --- Zone Adaptation ---
# Share of the zone's own colour kept when tinting it toward its biome.
ZONE_COLOR_KEEP_RATIO = 0.7

# Environmental modifiers each biome applies to zones placed on it.
ENVIRONMENTAL_EFFECTS = {
    "grassland": {},
    "forest": {"tranquility": 15.0, "humidity": 10.0},
    "mystical": {"energy": 20.0, "mystery": 25.0},
    "wetland": {"humidity": 25.0, "cool": 10.0},
    "mountainous": {"energy": 15.0, "inspiration": 20.0},
    "village": {"safety": 20.0, "comfort": 15.0},
}

ZONE_TYPE_MULTIPLIERS = {
    "food": 1.2,
    "rest": 1.5,
    "play": 1.1,
    "social": 1.3,
    "work": 0.8,
    "comfort": 1.4,
}

# Placed props and structures whose asset path contains one of these become
# interactive map elements.
INTERACTIVE_ASSET_PATTERNS = [
    "flowers_white.png",
    "flowers_red.png",
    "Well_Hay_1.png",
    "House.png",
    "tree_idol_",
]

# Element type by asset name fragment, checked in order. No match is "decoration".
INTERACTIVE_ELEMENT_TYPES = [
    ("flower", "food_zone"),
    ("Well", "social_zone"),
    ("House", "social_zone"),
    ("tree_idol", "comfort_zone"),
]
DEFAULT_ELEMENT_TYPE = "decoration"
