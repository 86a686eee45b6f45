# biome_worldgen/models.py

"""
================================================================================
GENERATED WORLD RECORDS
================================================================================
Read-only records produced by one generation pass. A GeneratedWorld is a
frozen snapshot: regenerating replaces it wholesale and never edits it, so a
reference obtained earlier stays valid.
================================================================================
"""

from dataclasses import dataclass
from typing import Mapping, Optional, Tuple

from .settings import WorldConfig


@dataclass(frozen=True)
class TileAssets:
    """Asset names chosen for a single cell, before layer path prefixes."""
    terrain: str
    vegetation: Tuple[str, ...] = ()
    props: Tuple[str, ...] = ()
    structures: Tuple[str, ...] = ()
    decals: Tuple[str, ...] = ()

    @property
    def count(self) -> int:
        return 1 + len(self.vegetation) + len(self.props) + len(self.structures) + len(self.decals)


@dataclass(frozen=True)
class TerrainTile:
    x: int
    y: int
    biome: str
    # Fraction of the 3x3 neighbourhood sharing this tile's biome.
    biome_strength: float
    temperature: float
    moisture: float
    elevation: float
    assets: TileAssets


@dataclass(frozen=True)
class PlacedAsset:
    """One renderable instance in a layer. Position is in pixels."""
    instance_id: str
    x: float
    y: float
    asset: str
    rotation: Optional[float] = None
    scale: Optional[float] = None
    alpha: Optional[float] = None

    def to_dict(self) -> dict:
        data = {'id': self.instance_id, 'x': self.x, 'y': self.y, 'asset': self.asset}
        for key in ('rotation', 'scale', 'alpha'):
            value = getattr(self, key)
            if value is not None:
                data[key] = value
        return data


@dataclass(frozen=True)
class WorldLayer:
    name: str
    z_index: int
    tiles: Tuple[PlacedAsset, ...]

    def __len__(self) -> int:
        return len(self.tiles)


@dataclass(frozen=True)
class WorldMetadata:
    generation_time_ms: float
    # Percentage of the grid covered by each biome.
    biome_distribution: Mapping[str, float]
    total_assets: int
    version: str


@dataclass(frozen=True)
class GeneratedWorld:
    config: WorldConfig
    terrain: Tuple[Tuple[TerrainTile, ...], ...]
    biome_map: Tuple[Tuple[str, ...], ...]
    layers: Tuple[WorldLayer, ...]
    metadata: WorldMetadata

    @property
    def width(self) -> int:
        return self.config.width

    @property
    def height(self) -> int:
        return self.config.height

    def in_bounds(self, tile_x: int, tile_y: int) -> bool:
        return 0 <= tile_x < self.config.width and 0 <= tile_y < self.config.height

    def tile(self, tile_x: int, tile_y: int) -> Optional[TerrainTile]:
        """Terrain tile at grid indices, or None outside the grid."""
        if not self.in_bounds(tile_x, tile_y):
            return None
        return self.terrain[tile_y][tile_x]

    def layer(self, name: str) -> Optional[WorldLayer]:
        for layer in self.layers:
            if layer.name == name:
                return layer
        return None
