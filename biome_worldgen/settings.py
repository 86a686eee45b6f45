# biome_worldgen/settings.py

"""
================================================================================
WORLD CONFIGURATION
================================================================================
The immutable configuration object handed to the terrain generator. It is
consolidated from a user dictionary layered over the internal defaults in
config.py, and validated against a biome catalog before any generation starts.

Data Contract:
---------------
- Inputs: A (possibly partial) configuration dictionary.
- Outputs: A frozen WorldConfig. to_dict() produces the JSON-serialisable form.
- Side Effects: validate() logs warnings and errors.
- Invariants: A WorldConfig that passed validate() can be generated without
  any runtime lookup failure.
================================================================================
"""

import logging
from dataclasses import dataclass, field
from typing import Optional, Tuple

from . import config as DEFAULTS
from .errors import ConfigurationError

_NOISE_FIELDS = ("temperature", "moisture", "elevation")


@dataclass(frozen=True)
class NoiseSettings:
    scale: float
    octaves: int
    persistence: float
    lacunarity: float

    @classmethod
    def from_dict(cls, data: dict, defaults: dict) -> "NoiseSettings":
        return cls(
            scale=data.get('scale', defaults['scale']),
            octaves=data.get('octaves', defaults['octaves']),
            persistence=data.get('persistence', defaults['persistence']),
            lacunarity=data.get('lacunarity', defaults['lacunarity']),
        )

    def to_dict(self) -> dict:
        return {
            'scale': self.scale,
            'octaves': self.octaves,
            'persistence': self.persistence,
            'lacunarity': self.lacunarity,
        }


@dataclass(frozen=True)
class ForcedSpawn:
    """Guarantees `biome` around cell (x, y), fading out toward `radius`."""
    biome: str
    x: int
    y: int
    radius: float

    @classmethod
    def from_dict(cls, data: dict) -> "ForcedSpawn":
        position = data.get('position', data)
        return cls(
            biome=data['biome'],
            x=position['x'],
            y=position['y'],
            radius=data['radius'],
        )

    def to_dict(self) -> dict:
        return {'biome': self.biome, 'position': {'x': self.x, 'y': self.y}, 'radius': self.radius}


@dataclass(frozen=True)
class WaterSettings:
    """Passed through untouched for external water-shaping logic."""
    level: float = DEFAULTS.DEFAULT_WATER_LEVEL
    rivers: bool = DEFAULTS.DEFAULT_RIVERS
    lakes: bool = DEFAULTS.DEFAULT_LAKES


@dataclass(frozen=True)
class WorldConfig:
    width: int = DEFAULTS.DEFAULT_WORLD_WIDTH_TILES
    height: int = DEFAULTS.DEFAULT_WORLD_HEIGHT_TILES
    tile_size: int = DEFAULTS.DEFAULT_TILE_SIZE_PX
    seed: int = DEFAULTS.DEFAULT_SEED
    temperature: NoiseSettings = NoiseSettings(**DEFAULTS.TEMPERATURE_NOISE)
    moisture: NoiseSettings = NoiseSettings(**DEFAULTS.MOISTURE_NOISE)
    elevation: NoiseSettings = NoiseSettings(**DEFAULTS.ELEVATION_NOISE)
    enabled_biomes: Tuple[str, ...] = tuple(DEFAULTS.DEFAULT_ENABLED_BIOMES)
    forced_spawns: Tuple[ForcedSpawn, ...] = tuple(
        ForcedSpawn.from_dict(spawn) for spawn in DEFAULTS.DEFAULT_FORCED_SPAWNS
    )
    fallback_biome: str = DEFAULTS.DEFAULT_FALLBACK_BIOME
    water: WaterSettings = field(default_factory=WaterSettings)
    smoothing_threshold: int = DEFAULTS.SMOOTHING_CONSENSUS_THRESHOLD
    forced_spawn_falloff: float = DEFAULTS.FORCED_SPAWN_FALLOFF

    @classmethod
    def from_dict(cls, user_config: Optional[dict] = None) -> "WorldConfig":
        """
        Consolidates a user dictionary over the internal defaults.

        Recognised keys: width, height, tile_size, seed, noise
        ({temperature|moisture|elevation: {scale, octaves, persistence,
        lacunarity}}), enabled_biomes, forced_spawns, fallback_biome, water
        ({level, rivers, lakes}), smoothing_threshold, forced_spawn_falloff.
        """
        user_config = user_config or {}
        noise = user_config.get('noise', {})
        water = user_config.get('water', {})
        spawns = user_config.get('forced_spawns', DEFAULTS.DEFAULT_FORCED_SPAWNS)

        return cls(
            width=user_config.get('width', DEFAULTS.DEFAULT_WORLD_WIDTH_TILES),
            height=user_config.get('height', DEFAULTS.DEFAULT_WORLD_HEIGHT_TILES),
            tile_size=user_config.get('tile_size', DEFAULTS.DEFAULT_TILE_SIZE_PX),
            seed=user_config.get('seed', DEFAULTS.DEFAULT_SEED),
            temperature=NoiseSettings.from_dict(noise.get('temperature', {}), DEFAULTS.TEMPERATURE_NOISE),
            moisture=NoiseSettings.from_dict(noise.get('moisture', {}), DEFAULTS.MOISTURE_NOISE),
            elevation=NoiseSettings.from_dict(noise.get('elevation', {}), DEFAULTS.ELEVATION_NOISE),
            enabled_biomes=tuple(user_config.get('enabled_biomes', DEFAULTS.DEFAULT_ENABLED_BIOMES)),
            forced_spawns=tuple(
                spawn if isinstance(spawn, ForcedSpawn) else ForcedSpawn.from_dict(spawn)
                for spawn in spawns
            ),
            fallback_biome=user_config.get('fallback_biome', DEFAULTS.DEFAULT_FALLBACK_BIOME),
            water=WaterSettings(
                level=water.get('level', DEFAULTS.DEFAULT_WATER_LEVEL),
                rivers=water.get('rivers', DEFAULTS.DEFAULT_RIVERS),
                lakes=water.get('lakes', DEFAULTS.DEFAULT_LAKES),
            ),
            smoothing_threshold=user_config.get('smoothing_threshold', DEFAULTS.SMOOTHING_CONSENSUS_THRESHOLD),
            forced_spawn_falloff=user_config.get('forced_spawn_falloff', DEFAULTS.FORCED_SPAWN_FALLOFF),
        )

    def to_dict(self) -> dict:
        return {
            'width': self.width,
            'height': self.height,
            'tile_size': self.tile_size,
            'seed': self.seed,
            'noise': {name: getattr(self, name).to_dict() for name in _NOISE_FIELDS},
            'enabled_biomes': list(self.enabled_biomes),
            'forced_spawns': [spawn.to_dict() for spawn in self.forced_spawns],
            'fallback_biome': self.fallback_biome,
            'water': {'level': self.water.level, 'rivers': self.water.rivers, 'lakes': self.water.lakes},
            'smoothing_threshold': self.smoothing_threshold,
            'forced_spawn_falloff': self.forced_spawn_falloff,
        }

    def merged(self, partial: Optional[dict] = None) -> "WorldConfig":
        """
        Returns a new config with the keys of `partial` replaced. Noise and
        water sections are merged field by field; everything else is replaced
        wholesale.
        """
        if not partial:
            return self

        current = self.to_dict()
        for key, value in partial.items():
            if key == 'noise':
                for name, overrides in value.items():
                    current['noise'][name] = {**current['noise'].get(name, {}), **overrides}
            elif key == 'water':
                current['water'] = {**current['water'], **value}
            else:
                current[key] = value
        return WorldConfig.from_dict(current)

    @property
    def total_tiles(self) -> int:
        return self.width * self.height

    def noise_settings(self):
        """(name, NoiseSettings) pairs for the three environmental fields."""
        return [(name, getattr(self, name)) for name in _NOISE_FIELDS]

    def validate(self, catalog, logger: Optional[logging.Logger] = None) -> "WorldConfig":
        """
        Checks the configuration against the world limits and the catalog.
        Returns self when valid; otherwise raises a single ConfigurationError
        that lists every problem found.
        """
        logger = logger or logging.getLogger(__name__)
        limits = DEFAULTS.WORLD_LIMITS
        errors = []
        warnings = []

        # --- 1. Dimensions ---
        for label, value, maximum in (
            ('width', self.width, limits['max_world_width']),
            ('height', self.height, limits['max_world_height']),
        ):
            if not _is_int(value) or value < limits['min_world_size']:
                errors.append(f"{label} must be an integer >= {limits['min_world_size']}, got {value!r}")
            elif value > maximum:
                errors.append(f"{label} exceeds the maximum of {maximum}")

        if _is_int(self.width) and _is_int(self.height):
            if self.total_tiles > limits['max_total_tiles']:
                errors.append(
                    f"Total tiles ({self.total_tiles}) exceeds the maximum of {limits['max_total_tiles']}"
                )
            elif self.total_tiles > limits['large_world_warning_tiles']:
                warnings.append(f"Large world ({self.total_tiles} tiles) may generate slowly")

        if not _is_int(self.tile_size) or not limits['min_tile_size'] <= self.tile_size <= limits['max_tile_size']:
            errors.append(
                f"tile_size must be an integer between {limits['min_tile_size']} and {limits['max_tile_size']}"
            )

        # --- 2. Seed ---
        if not _is_int(self.seed) or self.seed < 0:
            errors.append(f"seed must be a non-negative integer, got {self.seed!r}")

        # --- 3. Noise Parameters ---
        for name, settings in self.noise_settings():
            if not _is_number(settings.scale) or not 0 < settings.scale <= 1:
                errors.append(f"{name}.scale must be a number in (0, 1]")
            if not _is_int(settings.octaves) or not 1 <= settings.octaves <= limits['max_noise_octaves']:
                errors.append(f"{name}.octaves must be an integer between 1 and {limits['max_noise_octaves']}")
            elif settings.octaves > limits['many_octaves_warning']:
                warnings.append(f"{name} uses many octaves ({settings.octaves}); generation may be slow")
            if not _is_number(settings.persistence) or not 0 < settings.persistence <= 1:
                errors.append(f"{name}.persistence must be a number in (0, 1]")
            if (not _is_number(settings.lacunarity)
                    or not limits['min_lacunarity'] <= settings.lacunarity <= limits['max_lacunarity']):
                errors.append(
                    f"{name}.lacunarity must be a number between {limits['min_lacunarity']} and {limits['max_lacunarity']}"
                )

        # --- 4. Biomes ---
        if not self.enabled_biomes:
            errors.append("At least one biome must be enabled")
        elif len(self.enabled_biomes) > limits['max_biomes']:
            errors.append(f"Too many biomes ({len(self.enabled_biomes)}), maximum is {limits['max_biomes']}")
        if len(set(self.enabled_biomes)) != len(self.enabled_biomes):
            errors.append("enabled_biomes contains duplicates")
        for biome_id in self.enabled_biomes:
            if biome_id not in catalog:
                errors.append(f"Enabled biome '{biome_id}' is not defined in the catalog")
        if self.fallback_biome not in catalog:
            errors.append(f"Fallback biome '{self.fallback_biome}' is not defined in the catalog")

        # --- 5. Forced Spawns ---
        for index, spawn in enumerate(self.forced_spawns):
            label = f"forced_spawns[{index}]"
            if spawn.biome not in catalog:
                errors.append(f"{label} references unknown biome '{spawn.biome}'")
            elif spawn.biome not in self.enabled_biomes:
                errors.append(f"{label} references disabled biome '{spawn.biome}'")
            if (not _is_number(spawn.radius)
                    or not limits['min_forced_spawn_radius'] <= spawn.radius <= limits['max_forced_spawn_radius']):
                errors.append(
                    f"{label}.radius must be between {limits['min_forced_spawn_radius']} "
                    f"and {limits['max_forced_spawn_radius']}"
                )
            if (not _is_int(spawn.x) or not _is_int(spawn.y)
                    or not (0 <= spawn.x < self.width and 0 <= spawn.y < self.height)):
                errors.append(f"{label}.position ({spawn.x}, {spawn.y}) is outside the world")

        # --- 6. Tuning ---
        if not _is_int(self.smoothing_threshold) or not 1 <= self.smoothing_threshold <= 9:
            errors.append("smoothing_threshold must be an integer between 1 and 9")
        if not _is_number(self.forced_spawn_falloff) or self.forced_spawn_falloff <= 0:
            errors.append("forced_spawn_falloff must be a positive number")
        if not _is_number(self.water.level) or not 0 <= self.water.level <= 1:
            errors.append("water.level must be within [0, 1]")

        for warning in warnings:
            logger.warning(f"World configuration: {warning}")
        if errors:
            logger.error(f"Invalid world configuration ({len(errors)} problem(s)): {errors}")
            raise ConfigurationError(errors)
        return self


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)
