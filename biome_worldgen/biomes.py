# biome_worldgen/biomes.py

"""
================================================================================
BIOME CATALOG
================================================================================
Declarative biome rule tables: environmental acceptance ranges, weighted asset
pools and generation tuning for every biome, plus the lookup/query helpers the
terrain generator needs (spawn eligibility and fitness).

Data Contract:
---------------
- Inputs: Biome definitions as dictionaries (built-in data or a JSON file).
- Outputs:
    - BiomeDefinition: frozen record, validated on construction.
    - BiomeCatalog: immutable id -> BiomeDefinition mapping.
- Side Effects: None.
- Invariants:
    - Every range bound lies in [0, 1] and satisfies min <= max.
    - Every density, clustering coefficient and weight lies in [0, 1].
    - A catalog is never mutated after construction.
================================================================================
"""

import json
import math
import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional, Tuple

from .biome_data import DEFAULT_BIOMES
from .errors import ConfigurationError, LookupMiss

_HEX_COLOR = re.compile(r"^#[0-9a-fA-F]{6}$")

Range = Tuple[float, float]


def _check_unit(errors: list, label: str, value: float):
    if not 0.0 <= value <= 1.0:
        errors.append(f"{label} must be within [0, 1], got {value}")


def _check_range(errors: list, label: str, bounds: Range):
    lo, hi = bounds
    _check_unit(errors, f"{label} min", lo)
    _check_unit(errors, f"{label} max", hi)
    if lo > hi:
        errors.append(f"{label} min ({lo}) exceeds max ({hi})")


@dataclass(frozen=True)
class EnvironmentalConditions:
    temperature_range: Range
    moisture_range: Range
    elevation_range: Range
    distance_from_water: Optional[int] = None

    @property
    def center(self) -> Tuple[float, float, float]:
        """Ideal (temperature, moisture, elevation) for the biome."""
        return (
            (self.temperature_range[0] + self.temperature_range[1]) / 2,
            (self.moisture_range[0] + self.moisture_range[1]) / 2,
            (self.elevation_range[0] + self.elevation_range[1]) / 2,
        )


@dataclass(frozen=True)
class TerrainAssets:
    primary: Tuple[str, ...]
    secondary: Tuple[str, ...] = ()
    weights: Tuple[float, ...] = ()


@dataclass(frozen=True)
class TreeAssets:
    primary: Tuple[str, ...]
    rare: Tuple[str, ...] = ()
    density: float = 0.0
    clustering: float = 0.0


@dataclass(frozen=True)
class ShrubAssets:
    assets: Tuple[str, ...] = ()
    density: float = 0.0


@dataclass(frozen=True)
class PropAssets:
    common: Tuple[str, ...] = ()
    rare: Tuple[str, ...] = ()
    density: float = 0.0


@dataclass(frozen=True)
class StructureAssets:
    assets: Tuple[str, ...] = ()
    density: float = 0.0
    # Minimum spacing in tiles. Used as a density divisor, not enforced per cell.
    spacing: int = 1


@dataclass(frozen=True)
class DecalAssets:
    assets: Tuple[str, ...] = ()
    density: float = 0.0


@dataclass(frozen=True)
class GenerationTuning:
    transition_width: int = 3
    min_cluster_size: int = 4
    spawn_probabilities: Mapping[str, float] = field(default_factory=dict)


@dataclass(frozen=True)
class BiomeDefinition:
    id: str
    name: str
    description: str
    color: str
    conditions: EnvironmentalConditions
    terrain: TerrainAssets
    trees: TreeAssets
    shrubs: ShrubAssets
    props: PropAssets
    decals: DecalAssets
    generation: GenerationTuning = field(default_factory=GenerationTuning)
    structures: Optional[StructureAssets] = None

    def __post_init__(self):
        errors = []
        label = f"biome '{self.id}'"

        if not _HEX_COLOR.match(self.color):
            errors.append(f"{label} color must be '#rrggbb', got {self.color!r}")

        _check_range(errors, f"{label} temperature_range", self.conditions.temperature_range)
        _check_range(errors, f"{label} moisture_range", self.conditions.moisture_range)
        _check_range(errors, f"{label} elevation_range", self.conditions.elevation_range)

        if not self.terrain.primary:
            errors.append(f"{label} needs at least one primary terrain asset")
        for weight in self.terrain.weights:
            _check_unit(errors, f"{label} terrain weight", weight)

        _check_unit(errors, f"{label} tree density", self.trees.density)
        _check_unit(errors, f"{label} tree clustering", self.trees.clustering)
        _check_unit(errors, f"{label} shrub density", self.shrubs.density)
        _check_unit(errors, f"{label} prop density", self.props.density)
        _check_unit(errors, f"{label} decal density", self.decals.density)
        if self.structures is not None:
            _check_unit(errors, f"{label} structure density", self.structures.density)
            if self.structures.spacing < 0:
                errors.append(f"{label} structure spacing must be non-negative")
        for name, probability in self.generation.spawn_probabilities.items():
            _check_unit(errors, f"{label} spawn probability '{name}'", probability)

        if errors:
            raise ConfigurationError(errors)

    @classmethod
    def from_dict(cls, data: dict) -> "BiomeDefinition":
        """Builds a definition from the nested dictionary layout used by the catalog data."""
        conditions = data["conditions"]
        assets = data["assets"]
        terrain = assets["terrain"]
        trees = assets.get("trees", {})
        shrubs = assets.get("shrubs", {})
        props = assets.get("props", {})
        decals = assets.get("decals", {})
        structures = assets.get("structures")
        generation = data.get("generation", {})

        return cls(
            id=data["id"],
            name=data.get("name", data["id"]),
            description=data.get("description", ""),
            color=data.get("color", "#808080"),
            conditions=EnvironmentalConditions(
                temperature_range=tuple(conditions["temperature_range"]),
                moisture_range=tuple(conditions["moisture_range"]),
                elevation_range=tuple(conditions["elevation_range"]),
                distance_from_water=conditions.get("distance_from_water"),
            ),
            terrain=TerrainAssets(
                primary=tuple(terrain.get("primary", ())),
                secondary=tuple(terrain.get("secondary", ())),
                weights=tuple(terrain.get("weights", ())),
            ),
            trees=TreeAssets(
                primary=tuple(trees.get("primary", ())),
                rare=tuple(trees.get("rare", ())),
                density=trees.get("density", 0.0),
                clustering=trees.get("clustering", 0.0),
            ),
            shrubs=ShrubAssets(
                assets=tuple(shrubs.get("assets", ())),
                density=shrubs.get("density", 0.0),
            ),
            props=PropAssets(
                common=tuple(props.get("common", ())),
                rare=tuple(props.get("rare", ())),
                density=props.get("density", 0.0),
            ),
            decals=DecalAssets(
                assets=tuple(decals.get("assets", ())),
                density=decals.get("density", 0.0),
            ),
            generation=GenerationTuning(
                transition_width=generation.get("transition_width", 3),
                min_cluster_size=generation.get("min_cluster_size", 4),
                spawn_probabilities=MappingProxyType(dict(generation.get("spawn_probabilities", {}))),
            ),
            structures=None if structures is None else StructureAssets(
                assets=tuple(structures.get("assets", ())),
                density=structures.get("density", 0.0),
                spacing=structures.get("spacing", 1),
            ),
        )

    def can_spawn(self, temperature: float, moisture: float, elevation: float) -> bool:
        """True when the sample lies inside all three closed acceptance intervals."""
        c = self.conditions
        return (
            c.temperature_range[0] <= temperature <= c.temperature_range[1]
            and c.moisture_range[0] <= moisture <= c.moisture_range[1]
            and c.elevation_range[0] <= elevation <= c.elevation_range[1]
        )

    def fitness(self, temperature: float, moisture: float, elevation: float) -> float:
        """
        1 at the centre of the biome's ranges, falling linearly with Euclidean
        distance to 0 at the farthest corner of the unit cube.
        """
        ct, cm, ce = self.conditions.center
        distance = math.sqrt(
            (temperature - ct) ** 2 + (moisture - cm) ** 2 + (elevation - ce) ** 2
        )
        return max(0.0, 1.0 - distance / math.sqrt(3))


class BiomeCatalog:
    """
    Immutable lookup table of biome definitions keyed by id.
    Construct one explicitly and hand it to the generator.
    """

    def __init__(self, definitions):
        table = {}
        for definition in definitions:
            if definition.id in table:
                raise ConfigurationError(f"Duplicate biome id '{definition.id}' in catalog")
            table[definition.id] = definition
        self._definitions = MappingProxyType(table)

    @classmethod
    def from_dict(cls, data) -> "BiomeCatalog":
        """Accepts either a list of biome dicts or a mapping of id -> biome dict."""
        if isinstance(data, Mapping):
            entries = [dict(entry, id=entry.get("id", key)) for key, entry in data.items()]
        else:
            entries = list(data)
        return cls(BiomeDefinition.from_dict(entry) for entry in entries)

    @classmethod
    def from_json(cls, path: str) -> "BiomeCatalog":
        with open(path, 'r') as f:
            return cls.from_dict(json.load(f))

    @property
    def definitions(self) -> Mapping[str, BiomeDefinition]:
        return self._definitions

    def __contains__(self, biome_id) -> bool:
        return biome_id in self._definitions

    def __len__(self) -> int:
        return len(self._definitions)

    def __iter__(self):
        return iter(self._definitions.values())

    def __getitem__(self, biome_id: str) -> BiomeDefinition:
        try:
            return self._definitions[biome_id]
        except KeyError:
            raise LookupMiss(f"Unknown biome '{biome_id}'") from None

    def ids(self) -> Tuple[str, ...]:
        return tuple(self._definitions)

    def get(self, biome_id: str) -> Optional[BiomeDefinition]:
        """Returns None for an unknown id."""
        return self._definitions.get(biome_id)

    def require(self, biome_id: str) -> BiomeDefinition:
        """Like get(), but an unknown id is a configuration error."""
        definition = self._definitions.get(biome_id)
        if definition is None:
            raise ConfigurationError(f"Biome '{biome_id}' is not defined in the catalog")
        return definition

    def can_spawn(self, biome_id: str, temperature: float, moisture: float, elevation: float) -> bool:
        definition = self.get(biome_id)
        return definition is not None and definition.can_spawn(temperature, moisture, elevation)

    def fitness(self, biome_id: str, temperature: float, moisture: float, elevation: float) -> float:
        """Fitness in [0, 1]; 0 for unknown biomes."""
        definition = self.get(biome_id)
        if definition is None:
            return 0.0
        return definition.fitness(temperature, moisture, elevation)


def default_catalog() -> BiomeCatalog:
    """The built-in six-biome catalog."""
    return BiomeCatalog.from_dict(DEFAULT_BIOMES)
