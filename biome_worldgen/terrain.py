# biome_worldgen/terrain.py

"""
================================================================================
TERRAIN GENERATOR
================================================================================
This module contains the TerrainGenerator class, which turns a validated world
configuration and a biome catalog into a GeneratedWorld. The pipeline runs as
strictly ordered stages, each consuming only the previous stage's output:

    1. Noise sampling      temperature / moisture / elevation, normalized
    2. Biome assignment    best-fitness eligible biome per cell
    3. Forced spawns       probabilistic overrides fading with distance
    4. Boundary smoothing  one 3x3 plurality pass with a consensus threshold
    5. Asset synthesis     weighted, density-gated picks per cell
    6. Layer composition   five fixed z-ordered layers with pixel jitter

Data Contract:
---------------
- Inputs (on initialization):
    - config (WorldConfig): The world configuration. Validated here.
    - catalog (BiomeCatalog): Rule tables for every biome the config names.
    - logger: A configured Python logging object for runtime messages.
- Outputs (from methods):
    - NumPy grids of shape (height, width) for the intermediate stages.
    - A frozen GeneratedWorld from generate_world().
- Side Effects: Logs messages using the provided logger.
- Invariants: Given the same seed, configuration and catalog, the output is
  deterministic, down to asset picks and jitter offsets.
================================================================================
"""

import hashlib
import logging
import math
import time
from types import MappingProxyType

import numpy as np

from . import config as DEFAULTS
from .biomes import BiomeCatalog, BiomeDefinition
from .errors import ShapeMismatch
from .models import GeneratedWorld, PlacedAsset, TerrainTile, TileAssets, WorldLayer, WorldMetadata
from .noise import NoiseGenerator
from .processing import normalize
from .settings import WorldConfig

_FIELD_OFFSETS = {
    'temperature': DEFAULTS.TEMPERATURE_SEED_OFFSET,
    'moisture': DEFAULTS.MOISTURE_SEED_OFFSET,
    'elevation': DEFAULTS.ELEVATION_SEED_OFFSET,
}


def select_asset(candidates, rng: np.random.Generator, weights=None, strict: bool = False):
    """
    Picks one candidate, weighted when `weights` lines up with `candidates`.

    A uniform value in [0, sum(weights)) is drawn and the weights subtracted in
    order; the first candidate that takes the remainder to zero or below wins.
    Missing, length-mismatched or all-zero weights fall back to a uniform pick
    (unless `strict`, where a length mismatch raises ShapeMismatch).

    Returns None for an empty candidate list.
    """
    if not candidates:
        return None

    if weights is None or len(weights) != len(candidates):
        if strict and weights is not None:
            raise ShapeMismatch(
                f"{len(candidates)} candidates but {len(weights)} weights"
            )
        return candidates[int(rng.integers(len(candidates)))]

    total_weight = float(sum(weights))
    if total_weight <= 0:
        return candidates[int(rng.integers(len(candidates)))]

    remainder = rng.random() * total_weight
    for candidate, weight in zip(candidates, weights):
        remainder -= weight
        if remainder <= 0:
            return candidate

    # Only reachable through floating point round-off.
    return candidates[-1]


def _frozen(array: np.ndarray) -> np.ndarray:
    array.flags.writeable = False
    return array


class TerrainGenerator:
    """
    Generates a complete biome-driven world from a seed.
    This class is backend-only and does not handle any rendering.
    """

    def __init__(self, config: WorldConfig, catalog: BiomeCatalog, logger: logging.Logger):
        """
        Initializes the terrain generator.

        Args:
            config (WorldConfig): The world configuration.
            catalog (BiomeCatalog): Biome rule tables.
            logger (logging.Logger): The logger instance for all output.

        Raises:
            ConfigurationError: if the configuration is invalid or references
                biomes missing from the catalog. Nothing is generated.
        """
        self.logger = logger
        self.logger.info("TerrainGenerator initializing...")

        self.config = config.validate(catalog, logger)
        self.catalog = catalog
        self.seed = config.seed

        # --- Biome Palette ---
        # Biome grids store indices into this tuple. Enabled biomes keep their
        # configured order, which is also the tie-break order; the fallback is
        # appended when it is not itself enabled.
        palette = list(config.enabled_biomes)
        if config.fallback_biome not in palette:
            palette.append(config.fallback_biome)
        self.biome_palette = tuple(palette)
        self._definitions = tuple(catalog.require(biome_id) for biome_id in self.biome_palette)
        self._fallback_index = self.biome_palette.index(config.fallback_biome)

        # --- Initialize Noise ---
        self.noise = NoiseGenerator(self.seed)

        self.logger.info(f"TerrainGenerator initialized with seed: {self.seed}")
        self.logger.info(
            f"World dimensions: {config.width}x{config.height} tiles "
            f"({config.width * config.tile_size}x{config.height * config.tile_size} px), "
            f"{len(config.enabled_biomes)} enabled biomes"
        )

    # ------------------------------------------------------------------
    # Stage 1: Noise sampling
    # ------------------------------------------------------------------
    def generate_noise_maps(self) -> dict:
        """Returns normalized temperature, moisture and elevation grids in [0, 1]."""
        maps = {}
        for name, settings in self.config.noise_settings():
            raw = self.noise.fractal_grid(
                self.config.width, self.config.height, settings, offset=_FIELD_OFFSETS[name]
            )
            if raw.max() == raw.min():
                # A uniform field (e.g. a 1x1 world) has no range to rescale;
                # map the raw [-1, 1] sample into [0, 1] instead.
                field = np.clip(raw * 0.5 + 0.5, 0.0, 1.0)
            else:
                field = normalize(raw)
            maps[name] = _frozen(field)
            self.logger.debug(
                f"Sampled {name} noise (scale={settings.scale}, octaves={settings.octaves})"
            )
        return maps

    # ------------------------------------------------------------------
    # Stage 2: Biome assignment
    # ------------------------------------------------------------------
    def assign_biomes(self, temperature: np.ndarray, moisture: np.ndarray, elevation: np.ndarray):
        """
        Classifies every cell into the eligible biome whose range centre is
        closest to the cell's sample. Ties go to the earliest enabled biome;
        cells no biome accepts get the fallback biome.

        Returns:
            (biome_indices, fitness): an int grid of palette indices and the
            winning fitness per cell (0 where the fallback was used).
        """
        shape = temperature.shape
        biome_indices = np.full(shape, self._fallback_index, dtype=np.int16)
        best_fitness = np.full(shape, -np.inf)

        for index in range(len(self.config.enabled_biomes)):
            conditions = self._definitions[index].conditions
            eligible = (
                (temperature >= conditions.temperature_range[0]) & (temperature <= conditions.temperature_range[1])
                & (moisture >= conditions.moisture_range[0]) & (moisture <= conditions.moisture_range[1])
                & (elevation >= conditions.elevation_range[0]) & (elevation <= conditions.elevation_range[1])
            )

            ct, cm, ce = conditions.center
            distance = np.sqrt((temperature - ct) ** 2 + (moisture - cm) ** 2 + (elevation - ce) ** 2)
            fitness = np.maximum(0.0, 1.0 - distance / math.sqrt(3))

            # Strict comparison keeps the earlier biome on ties.
            better = eligible & (fitness > best_fitness)
            biome_indices[better] = index
            best_fitness[better] = fitness[better]

        fitness = np.where(np.isfinite(best_fitness), best_fitness, 0.0)
        fallback_cells = int(np.count_nonzero(~np.isfinite(best_fitness)))
        self.logger.debug(f"Assigned biomes; {fallback_cells} cells fell back to '{self.config.fallback_biome}'")
        return _frozen(biome_indices), _frozen(fitness)

    # ------------------------------------------------------------------
    # Stage 3: Forced spawns
    # ------------------------------------------------------------------
    def apply_forced_spawns(self, biome_indices: np.ndarray) -> np.ndarray:
        """
        Overwrites cells within each forced spawn's radius with probability
        (1 - distance / radius) ** falloff. The centre cell always flips.
        """
        result = biome_indices.copy()
        if not self.config.forced_spawns:
            return _frozen(result)

        rng = np.random.default_rng(self.seed + DEFAULTS.FORCED_SPAWN_SEED_OFFSET)
        height, width = result.shape
        falloff = self.config.forced_spawn_falloff

        for spawn in self.config.forced_spawns:
            index = self.biome_palette.index(spawn.biome)
            reach = int(math.floor(spawn.radius))

            x0, x1 = max(0, spawn.x - reach), min(width - 1, spawn.x + reach)
            y0, y1 = max(0, spawn.y - reach), min(height - 1, spawn.y + reach)
            ys, xs = np.mgrid[y0:y1 + 1, x0:x1 + 1]

            distance = np.hypot(xs - spawn.x, ys - spawn.y)
            strength = np.clip(1.0 - distance / spawn.radius, 0.0, 1.0) ** falloff
            draws = rng.random(distance.shape)
            overwrite = (distance <= spawn.radius) & (draws < strength)

            window = result[y0:y1 + 1, x0:x1 + 1]
            window[overwrite] = index
            self.logger.debug(
                f"Forced spawn '{spawn.biome}' at ({spawn.x}, {spawn.y}) r={spawn.radius}: "
                f"{int(np.count_nonzero(overwrite))} cells overwritten"
            )

        return _frozen(result)

    # ------------------------------------------------------------------
    # Stage 4: Boundary smoothing
    # ------------------------------------------------------------------
    def smooth_biome_transitions(self, biome_indices: np.ndarray) -> np.ndarray:
        """
        One pass of a 3x3 plurality filter. An interior cell takes the most
        frequent biome of its 9-cell neighbourhood only if that biome reaches
        the consensus threshold; otherwise it keeps its biome. Border cells are
        never changed.
        """
        result = biome_indices.copy()
        height, width = result.shape
        if height < 3 or width < 3:
            return _frozen(result)

        windows = np.stack([
            biome_indices[dy:height - 2 + dy, dx:width - 2 + dx]
            for dy in range(3) for dx in range(3)
        ])
        counts = np.stack([
            np.count_nonzero(windows == index, axis=0)
            for index in range(len(self.biome_palette))
        ])
        # argmax picks the lowest palette index among equal counts.
        dominant = counts.argmax(axis=0)
        dominant_count = counts.max(axis=0)

        interior = biome_indices[1:-1, 1:-1]
        smoothed = np.where(dominant_count >= self.config.smoothing_threshold, dominant, interior)
        result[1:-1, 1:-1] = smoothed

        changed = int(np.count_nonzero(smoothed != interior))
        self.logger.debug(f"Smoothed biome boundaries: {changed} cells changed")
        return _frozen(result)

    # ------------------------------------------------------------------
    # Stage 5: Per-cell asset synthesis
    # ------------------------------------------------------------------
    def calculate_biome_strength(self, biome_indices: np.ndarray) -> np.ndarray:
        """
        Fraction of each cell's in-grid 3x3 neighbourhood (itself included)
        that shares its biome. Always within (0, 1].
        """
        height, width = biome_indices.shape
        padded = np.pad(biome_indices.astype(np.int32), 1, mode='constant', constant_values=-1)

        same = np.zeros((height, width))
        total = np.zeros((height, width))
        for dy in range(3):
            for dx in range(3):
                window = padded[dy:dy + height, dx:dx + width]
                total += window >= 0
                same += window == biome_indices

        return _frozen(same / total)

    def generate_detailed_terrain(self, biome_indices: np.ndarray, biome_strength: np.ndarray,
                                  noise_maps: dict):
        """Builds the TerrainTile grid, drawing every cell's assets from a seeded stream."""
        rng = np.random.default_rng(self.seed + DEFAULTS.ASSET_SEED_OFFSET)

        indices = biome_indices.tolist()
        strengths = biome_strength.tolist()
        temperature = noise_maps['temperature'].tolist()
        moisture = noise_maps['moisture'].tolist()
        elevation = noise_maps['elevation'].tolist()

        rows = []
        for y in range(self.config.height):
            row = []
            for x in range(self.config.width):
                index = indices[y][x]
                definition = self._definitions[index]
                strength = strengths[y][x]
                row.append(TerrainTile(
                    x=x,
                    y=y,
                    biome=self.biome_palette[index],
                    biome_strength=strength,
                    temperature=temperature[y][x],
                    moisture=moisture[y][x],
                    elevation=elevation[y][x],
                    assets=self.generate_tile_assets(definition, strength, x, y, rng),
                ))
            rows.append(tuple(row))
        return tuple(rows)

    def generate_tile_assets(self, definition: BiomeDefinition, strength: float,
                             x: int, y: int, rng: np.random.Generator) -> TileAssets:
        """
        Draws the assets for one cell. Trees, shrubs, props and structures are
        gated by density * strength; decals by density alone so they still
        show up along biome boundaries.
        """
        terrain = self._select_terrain_asset(definition, rng)
        vegetation = []
        props = []
        structures = []
        decals = []

        if rng.random() < definition.trees.density * strength:
            tree = self.select_tree_asset(definition, x, y, rng)
            if tree:
                vegetation.append(tree)

        if rng.random() < definition.shrubs.density * strength:
            shrub = select_asset(definition.shrubs.assets, rng)
            if shrub:
                vegetation.append(shrub)

        if rng.random() < definition.props.density * strength:
            pool = definition.props.common
            if rng.random() < DEFAULTS.RARE_PROP_CHANCE:
                pool = pool + definition.props.rare
            prop = select_asset(pool, rng)
            if prop:
                props.append(prop)

        if definition.structures is not None:
            spacing_factor = 1.0 / max(1, definition.structures.spacing)
            if rng.random() < definition.structures.density * strength * spacing_factor:
                structure = select_asset(definition.structures.assets, rng)
                if structure:
                    structures.append(structure)

        if rng.random() < definition.decals.density:
            decal = select_asset(definition.decals.assets, rng)
            if decal:
                decals.append(decal)

        return TileAssets(
            terrain=terrain,
            vegetation=tuple(vegetation),
            props=tuple(props),
            structures=tuple(structures),
            decals=tuple(decals),
        )

    def _select_terrain_asset(self, definition: BiomeDefinition, rng: np.random.Generator) -> str:
        """Weighted base texture; the first primary asset when the weights don't line up."""
        terrain = definition.terrain
        if terrain.weights and len(terrain.weights) == len(terrain.primary):
            return select_asset(terrain.primary, rng, terrain.weights)
        return terrain.primary[0]

    def select_tree_asset(self, definition: BiomeDefinition, x: int, y: int,
                          rng: np.random.Generator):
        """
        Picks a tree. A low-frequency noise sample decides whether the cell is
        inside a tree cluster; outside clusters the rare pool occasionally joins
        the draw.
        """
        trees = definition.trees
        cluster_noise = self.noise.sample(
            x * DEFAULTS.CLUSTER_NOISE_FREQUENCY, y * DEFAULTS.CLUSTER_NOISE_FREQUENCY
        )
        cluster_threshold = (
            DEFAULTS.CLUSTER_THRESHOLD_BASE
            - trees.clustering * DEFAULTS.CLUSTER_THRESHOLD_CLUSTERING_FACTOR
        )
        in_cluster = cluster_noise > cluster_threshold

        pool = trees.primary
        if not in_cluster and rng.random() < DEFAULTS.RARE_TREE_CHANCE:
            pool = pool + trees.rare
        return select_asset(pool, rng)

    # ------------------------------------------------------------------
    # Stage 6: Layer composition
    # ------------------------------------------------------------------
    def generate_asset_layers(self, terrain) -> tuple:
        """Fans per-cell picks out into the fixed, z-ordered render layers."""
        rng = np.random.default_rng(self.seed + DEFAULTS.LAYER_JITTER_SEED_OFFSET)
        tile_size = self.config.tile_size
        buckets = {name: [] for name, _ in DEFAULTS.LAYER_ORDER}

        for row in terrain:
            for tile in row:
                pixel_x = tile.x * tile_size
                pixel_y = tile.y * tile_size
                per_layer = (
                    ('terrain', (tile.assets.terrain,)),
                    ('decals', tile.assets.decals),
                    ('vegetation', tile.assets.vegetation),
                    ('props', tile.assets.props),
                    ('structures', tile.assets.structures),
                )
                for layer_name, names in per_layer:
                    jitter = DEFAULTS.LAYER_JITTER_FRACTION[layer_name] * tile_size
                    prefix = DEFAULTS.LAYER_ASSET_PREFIX[layer_name]
                    for draw_index, name in enumerate(names):
                        offset_x = rng.random() * jitter if jitter > 0 else 0.0
                        offset_y = rng.random() * jitter if jitter > 0 else 0.0
                        buckets[layer_name].append(PlacedAsset(
                            instance_id=self._instance_id(layer_name, tile.biome, tile.x, tile.y, draw_index),
                            x=pixel_x + offset_x,
                            y=pixel_y + offset_y,
                            asset=f"{prefix}{name}",
                            alpha=DEFAULTS.DECAL_ALPHA if layer_name == 'decals' else None,
                        ))

        layers = tuple(
            WorldLayer(name=name, z_index=z_index, tiles=tuple(buckets[name]))
            for name, z_index in DEFAULTS.LAYER_ORDER
        )
        for layer in layers:
            self.logger.debug(f"Layer '{layer.name}' (z={layer.z_index}): {len(layer)} assets")
        return layers

    @staticmethod
    def _instance_id(kind: str, biome: str, x: int, y: int, draw_index: int) -> str:
        """Content hash of what was placed where; stable for a given seed."""
        key = f"{kind}:{biome}:{x}:{y}:{draw_index}"
        return hashlib.md5(key.encode('utf-8')).hexdigest()[:16]

    # ------------------------------------------------------------------
    # Full pipeline
    # ------------------------------------------------------------------
    def calculate_biome_distribution(self, biome_indices: np.ndarray) -> dict:
        """Percentage of the grid covered by each biome. Enabled biomes always appear."""
        counts = np.bincount(biome_indices.ravel(), minlength=len(self.biome_palette))
        total = biome_indices.size
        distribution = {}
        for index, biome_id in enumerate(self.biome_palette):
            if biome_id in self.config.enabled_biomes or counts[index] > 0:
                distribution[biome_id] = float(counts[index]) / total * 100.0
        return distribution

    def generate_world(self) -> GeneratedWorld:
        """Runs every stage in order and returns a frozen GeneratedWorld."""
        start_time = time.perf_counter()
        self.logger.info(
            f"Starting world generation: {self.config.width}x{self.config.height}, "
            f"seed {self.seed}, {len(self.config.enabled_biomes)} biomes"
        )

        # --- 1. Base noise maps ---
        noise_maps = self.generate_noise_maps()

        # --- 2. Biome assignment ---
        assigned, _ = self.assign_biomes(
            noise_maps['temperature'], noise_maps['moisture'], noise_maps['elevation']
        )

        # --- 3. Forced spawns ---
        forced = self.apply_forced_spawns(assigned)

        # --- 4. Smooth biome boundaries ---
        smoothed = self.smooth_biome_transitions(forced)

        # --- 5. Detailed terrain tiles ---
        strength = self.calculate_biome_strength(smoothed)
        terrain = self.generate_detailed_terrain(smoothed, strength, noise_maps)

        # --- 6. Asset layers ---
        layers = self.generate_asset_layers(terrain)

        # --- 7. Metadata ---
        distribution = self.calculate_biome_distribution(smoothed)
        total_assets = sum(len(layer) for layer in layers)
        biome_map = tuple(
            tuple(self.biome_palette[index] for index in row) for row in smoothed.tolist()
        )
        generation_time_ms = (time.perf_counter() - start_time) * 1000.0

        missing = [biome_id for biome_id in self.config.enabled_biomes if distribution.get(biome_id, 0.0) == 0.0]
        if missing:
            self.logger.warning(f"Enabled biomes absent from the generated world: {missing}")

        world = GeneratedWorld(
            config=self.config,
            terrain=terrain,
            biome_map=biome_map,
            layers=layers,
            metadata=WorldMetadata(
                generation_time_ms=generation_time_ms,
                biome_distribution=MappingProxyType(distribution),
                total_assets=total_assets,
                version=DEFAULTS.WORLD_FORMAT_VERSION,
            ),
        )

        self.logger.info(
            f"World generated in {generation_time_ms:.2f} ms: {total_assets} assets, "
            f"distribution { {k: round(v, 1) for k, v in distribution.items()} }"
        )
        return world
