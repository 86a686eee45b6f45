# biome_worldgen/errors.py

"""
================================================================================
ERROR TAXONOMY
================================================================================
Exceptions raised by the biome world generator.

- ConfigurationError: the world configuration or biome catalog is invalid.
  Raised before generation starts; nothing is generated.
- ShapeMismatch: grid/weight arrays passed to a utility do not line up.
- LookupMiss: a strict lookup for an unknown biome or an out-of-grid cell.
  Public query methods absorb it and return None or the fallback biome.
================================================================================
"""


class WorldGenError(Exception):
    """Base class for every error raised by this package."""


class ConfigurationError(WorldGenError, ValueError):
    """Invalid world configuration. Carries every problem found, not just the first."""

    def __init__(self, errors):
        if isinstance(errors, str):
            errors = [errors]
        self.errors = list(errors)
        super().__init__("; ".join(self.errors))


class ShapeMismatch(WorldGenError, ValueError):
    """Grids and weights passed together have incompatible lengths or shapes."""


class LookupMiss(WorldGenError, LookupError):
    """A biome id or grid coordinate that does not exist."""
