# biome_worldgen/__init__.py

# This file makes the 'biome_worldgen' directory a Python package.
# It also defines the public API of the package.

from .biomes import BiomeCatalog, BiomeDefinition, default_catalog
from .errors import ConfigurationError, LookupMiss, ShapeMismatch, WorldGenError
from .models import GeneratedWorld, PlacedAsset, TerrainTile, TileAssets, WorldLayer, WorldMetadata
from .noise import NoiseGenerator, SeededRandom
from .processing import blend, normalize, smooth
from .settings import ForcedSpawn, NoiseSettings, WaterSettings, WorldConfig
from .system import BiomeSystem, MapElement, Zone, ZoneBounds
from .terrain import TerrainGenerator, select_asset

__all__ = [
    "BiomeCatalog", "BiomeDefinition", "default_catalog",
    "ConfigurationError", "LookupMiss", "ShapeMismatch", "WorldGenError",
    "GeneratedWorld", "PlacedAsset", "TerrainTile", "TileAssets", "WorldLayer", "WorldMetadata",
    "NoiseGenerator", "SeededRandom",
    "blend", "normalize", "smooth",
    "ForcedSpawn", "NoiseSettings", "WaterSettings", "WorldConfig",
    "BiomeSystem", "MapElement", "Zone", "ZoneBounds",
    "TerrainGenerator", "select_asset",
]
