"""Shared fixtures for the biome_worldgen test suite."""

import logging

import pytest

from biome_worldgen.biomes import BiomeCatalog, default_catalog
from biome_worldgen.settings import WorldConfig


def biome_entry(biome_id, temperature=(0.0, 1.0), moisture=(0.0, 1.0), elevation=(0.0, 1.0),
                color="#7CB342", **assets):
    """A minimal catalog entry in the same layout as the built-in data."""
    entry = {
        "id": biome_id,
        "name": biome_id.title(),
        "color": color,
        "conditions": {
            "temperature_range": list(temperature),
            "moisture_range": list(moisture),
            "elevation_range": list(elevation),
        },
        "assets": {
            "terrain": {"primary": [f"{biome_id}_turf.png"], "weights": [1.0]},
            "trees": {"primary": [f"{biome_id}_tree.png"], "rare": [], "density": 0.3, "clustering": 0.5},
            "shrubs": {"assets": [], "density": 0.0},
            "props": {"common": ["flowers_white.png"], "rare": ["flowers_red.png"], "density": 0.3},
            "decals": {"assets": ["grass_patch_01.png"], "density": 0.2},
        },
    }
    entry["assets"].update(assets)
    return entry


@pytest.fixture
def null_logger():
    logger = logging.getLogger("biome_worldgen.tests")
    logger.addHandler(logging.NullHandler())
    return logger


@pytest.fixture
def catalog():
    return default_catalog()


@pytest.fixture
def grassland_only_catalog():
    """One biome accepting the whole environmental cube."""
    return BiomeCatalog.from_dict([biome_entry("grassland")])


@pytest.fixture
def split_catalog():
    """Two biomes that split the cube on temperature and together cover all of it."""
    return BiomeCatalog.from_dict([
        biome_entry("tundra", temperature=(0.0, 0.5), color="#DDEEFF"),
        biome_entry("desert", temperature=(0.5, 1.0), color="#E0C080"),
    ])


@pytest.fixture
def small_config():
    """A 24x24 world over the default catalog with a forced village in the middle."""
    return WorldConfig.from_dict({
        "width": 24,
        "height": 24,
        "seed": 12345,
        "forced_spawns": [{"biome": "village", "position": {"x": 12, "y": 12}, "radius": 8}],
    })


@pytest.fixture
def make_biome():
    return biome_entry
