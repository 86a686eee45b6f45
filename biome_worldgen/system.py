# biome_worldgen/system.py

"""
================================================================================
BIOME SYSTEM FACADE
================================================================================
The entry point for gameplay code. Holds at most one generated world at a time
and answers point and area biome queries against it.

Data Contract:
---------------
- Inputs (on initialization):
    - config: A WorldConfig or a (partial) configuration dictionary.
    - catalog (BiomeCatalog, optional): Defaults to the built-in catalog.
    - logger (optional): Defaults to this module's logger.
- Outputs:
    - GeneratedWorld snapshots, biome ids for point queries, adapted Zone
      records, interactive MapElement records.
- Side Effects: Replaces the current world reference on generate() and
  regenerate(). A world obtained earlier is never modified.
- Invariants: Out-of-grid queries return None or the fallback biome; they
  never raise.
================================================================================
"""

import logging
import math
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Mapping, Optional

from . import color_maps
from . import config as DEFAULTS
from .biomes import BiomeCatalog, default_catalog
from .errors import LookupMiss
from .models import GeneratedWorld
from .settings import WorldConfig
from .terrain import TerrainGenerator


@dataclass(frozen=True)
class ZoneBounds:
    """Pixel-space rectangle."""
    x: float
    y: float
    width: float
    height: float


@dataclass(frozen=True)
class Zone:
    """An externally defined gameplay area (food, rest, social...)."""
    id: str
    type: str
    bounds: ZoneBounds
    # 'rgb(...)', 'rgba(...)' or '#rrggbb'
    color: str
    metadata: Mapping = field(default_factory=dict)


@dataclass(frozen=True)
class MapElement:
    id: str
    type: str
    x: float
    y: float
    width: int
    height: int
    color: str = '#ffffff'
    metadata: Mapping = field(default_factory=dict)


class BiomeSystem:
    """Owns the current world and exposes biome queries over it."""

    def __init__(self, config=None, catalog: Optional[BiomeCatalog] = None,
                 logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)
        self.catalog = catalog if catalog is not None else default_catalog()
        self.config = config if isinstance(config, WorldConfig) else WorldConfig.from_dict(config)

        # Validates the configuration; an invalid one never gets this far.
        self.generator = TerrainGenerator(self.config, self.catalog, self.logger)
        self._current_world = None

        self.logger.info(
            f"BiomeSystem initialized: {self.config.width}x{self.config.height}, "
            f"{len(self.config.enabled_biomes)} enabled biomes, seed {self.config.seed}"
        )

    # --- World Lifecycle ---
    def generate(self) -> GeneratedWorld:
        """Always builds a fresh world and makes it current."""
        world = self.generator.generate_world()
        self._current_world = world
        self.logger.info(
            f"World ready: {world.metadata.total_assets} assets, "
            f"{len(world.metadata.biome_distribution)} biomes, "
            f"{world.metadata.generation_time_ms:.2f} ms"
        )
        return world

    @property
    def current_world(self) -> GeneratedWorld:
        """The current world, generated on first access."""
        if self._current_world is None:
            return self.generate()
        return self._current_world

    def regenerate(self, partial_config: Optional[dict] = None) -> GeneratedWorld:
        """
        Merges `partial_config` into the current configuration and generates
        a new world from scratch. If the merged configuration is invalid a
        ConfigurationError is raised and the current world is kept.
        """
        new_config = self.config.merged(partial_config)
        generator = TerrainGenerator(new_config, self.catalog, self.logger)

        self.config = new_config
        self.generator = generator
        self.logger.info(f"Regenerating world with overrides: {partial_config or {}}")
        return self.generate()

    def export_world(self) -> Optional[GeneratedWorld]:
        """The current world, or None. Never triggers generation."""
        return self._current_world

    def render_layers(self):
        return self.current_world.layers

    def world_stats(self) -> dict:
        world = self.current_world
        return {
            'biome_distribution': dict(world.metadata.biome_distribution),
            'total_assets': world.metadata.total_assets,
            'generation_time_ms': world.metadata.generation_time_ms,
            'world_size': f"{world.width}x{world.height}",
        }

    # --- Point Queries ---
    def biome_at(self, x: float, y: float) -> Optional[str]:
        """Biome id at a pixel position, or None outside the world."""
        world = self.current_world
        tile_size = world.config.tile_size
        tile_x = math.floor(x / tile_size)
        tile_y = math.floor(y / tile_size)
        if not world.in_bounds(tile_x, tile_y):
            return None
        return world.biome_map[tile_y][tile_x]

    # --- Zone Adaptation ---
    def adapt_zone(self, zone: Zone) -> Zone:
        """
        Tags a zone with the plurality biome under its bounding box, that
        biome's environmental effects, and a colour tinted toward the biome.
        """
        world = self.current_world
        try:
            biome_id = self._dominant_biome(world, zone.bounds)
        except LookupMiss:
            biome_id = world.config.fallback_biome
            self.logger.debug(f"Zone '{zone.id}' lies outside the world; using '{biome_id}'")

        definition = self.catalog.require(biome_id)
        metadata = dict(zone.metadata)
        metadata.update({
            'biome': biome_id,
            'biome_color': definition.color,
            'biome_name': definition.name,
            'environmental_effects': self.environmental_effects(zone.type, biome_id),
        })
        return replace(
            zone,
            color=color_maps.blend_zone_color(zone.color, definition.color),
            metadata=MappingProxyType(metadata),
        )

    def integrate_zones(self, zones) -> list:
        adapted = [self.adapt_zone(zone) for zone in zones]
        self.logger.info(f"Integrated {len(adapted)} gameplay zones with biomes")
        return adapted

    @staticmethod
    def environmental_effects(zone_type: str, biome_id: str) -> dict:
        """Per-biome modifiers scaled by the zone type's multiplier (1.0 if unlisted)."""
        multiplier = DEFAULTS.ZONE_TYPE_MULTIPLIERS.get(zone_type, 1.0)
        base = DEFAULTS.ENVIRONMENTAL_EFFECTS.get(biome_id, {})
        return {effect: value * multiplier for effect, value in base.items()}

    def _dominant_biome(self, world: GeneratedWorld, bounds: ZoneBounds) -> str:
        """
        Most frequent biome among the cells the rectangle overlaps; ties go to
        the biome seen first in row-major order.

        Raises:
            LookupMiss: if the rectangle overlaps no cell.
        """
        tile_size = world.config.tile_size
        x_start = math.floor(bounds.x / tile_size)
        y_start = math.floor(bounds.y / tile_size)
        # A zero-sized zone still covers the cell it sits in.
        x_end = max(x_start, math.ceil((bounds.x + bounds.width) / tile_size) - 1)
        y_end = max(y_start, math.ceil((bounds.y + bounds.height) / tile_size) - 1)

        x_start, x_end = max(0, x_start), min(world.width - 1, x_end)
        y_start, y_end = max(0, y_start), min(world.height - 1, y_end)
        if x_start > x_end or y_start > y_end:
            raise LookupMiss(f"Zone bounds {bounds} do not overlap the world")

        counts = {}
        for row in world.biome_map[y_start:y_end + 1]:
            for biome_id in row[x_start:x_end + 1]:
                counts[biome_id] = counts.get(biome_id, 0) + 1

        dominant, best = None, 0
        for biome_id, count in counts.items():
            if count > best:
                dominant, best = biome_id, count
        return dominant

    # --- Interactive Elements ---
    def interactive_elements(self) -> list:
        """
        Turns placed props and structures that match an interactive asset
        pattern into MapElements.
        """
        world = self.current_world
        tile_size = world.config.tile_size
        elements = []

        for layer in world.layers:
            if layer.name not in ('props', 'structures'):
                continue
            for placed in layer.tiles:
                if not any(pattern in placed.asset for pattern in DEFAULTS.INTERACTIVE_ASSET_PATTERNS):
                    continue
                elements.append(MapElement(
                    id=f"biome_{layer.name}_{placed.instance_id}",
                    type=_element_type(placed.asset),
                    x=placed.x,
                    y=placed.y,
                    width=tile_size,
                    height=tile_size,
                    metadata=MappingProxyType({
                        'asset_id': placed.asset,
                        'interactive': True,
                        'biome_generated': True,
                    }),
                ))

        self.logger.info(f"Generated {len(elements)} interactive elements from biome assets")
        return elements


def _element_type(asset: str) -> str:
    for fragment, element_type in DEFAULTS.INTERACTIVE_ELEMENT_TYPES:
        if fragment in asset:
            return element_type
    return DEFAULTS.DEFAULT_ELEMENT_TYPE
