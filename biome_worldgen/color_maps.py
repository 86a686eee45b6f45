# biome_worldgen/color_maps.py

"""
================================================================================
SHARED COLOR MAPPING UTILITIES
================================================================================
Colour parsing and blending for zone adaptation, and the lookup tables that
turn a biome index grid into an RGB preview array.

It is designed to be a pure, stateless utility with no rendering dependencies,
so it can be used by both the BiomeSystem facade and the offline bake script.
================================================================================
"""
import math
import re

import numpy as np

from . import config as DEFAULTS

_HEX_PATTERN = re.compile(r"^#([0-9a-fA-F]{2})([0-9a-fA-F]{2})([0-9a-fA-F]{2})$")
_RGBA_PATTERN = re.compile(r"rgba?\((\d+),\s*(\d+),\s*(\d+)(?:,\s*([\d.]+))?\)")

# Used for palette entries missing from the catalog.
COLOR_UNKNOWN_BIOME = (128, 128, 128)


# --- Colour Strings ---
def hex_to_rgb(color: str):
    """'#rrggbb' -> (r, g, b), or None if the string is not a hex colour."""
    match = _HEX_PATTERN.match(color.strip()) if isinstance(color, str) else None
    if not match:
        return None
    return tuple(int(component, 16) for component in match.groups())


def parse_rgba(color: str):
    """
    Parses 'rgb(r, g, b)', 'rgba(r, g, b, a)' or '#rrggbb' into (r, g, b, a).
    Alpha defaults to 1. Returns None for anything else.
    """
    if not isinstance(color, str):
        return None
    match = _RGBA_PATTERN.search(color)
    if match:
        r, g, b, a = match.groups()
        return int(r), int(g), int(b), float(a) if a else 1.0
    rgb = hex_to_rgb(color)
    if rgb is None:
        return None
    return rgb + (1.0,)


def _round_half_up(value: float) -> int:
    # Rounding to 9 places first drops float noise such as 6.500000000000001.
    return math.floor(round(value, 9) + 0.5)


def format_rgba(r: int, g: int, b: int, a: float) -> str:
    return f"rgba({r}, {g}, {b}, {a:g})"


def blend_zone_color(zone_color: str, biome_color: str,
                     keep_ratio: float = DEFAULTS.ZONE_COLOR_KEEP_RATIO) -> str:
    """
    Linear RGB mix keeping `keep_ratio` of the zone colour, with the zone's
    alpha preserved. If either colour cannot be parsed the zone colour is
    returned unchanged.
    """
    zone = parse_rgba(zone_color)
    biome = hex_to_rgb(biome_color)
    if zone is None or biome is None:
        return zone_color

    mixed = [
        _round_half_up(zone_channel * keep_ratio + biome_channel * (1.0 - keep_ratio))
        for zone_channel, biome_channel in zip(zone[:3], biome)
    ]
    return format_rgba(*mixed, zone[3])


# --- Color Lookup Table (LUT) Generation ---
def create_biome_color_lut(palette, catalog) -> np.ndarray:
    """Creates a LUT where the index is the palette index and the value is the biome's RGB color."""
    colors = []
    for biome_id in palette:
        definition = catalog.get(biome_id)
        rgb = hex_to_rgb(definition.color) if definition is not None else None
        colors.append(rgb or COLOR_UNKNOWN_BIOME)
    return np.array(colors, dtype=np.uint8).reshape(-1, 3)


def get_biome_color_array(biome_indices: np.ndarray, biome_lut: np.ndarray) -> np.ndarray:
    """
    Converts a (height, width) biome index grid into a (height, width, 3)
    uint8 array ready for Pillow.
    """
    return biome_lut[np.asarray(biome_indices, dtype=np.intp)]


def biome_map_to_indices(biome_map, palette) -> np.ndarray:
    """Rebuilds the integer index grid from a GeneratedWorld's string biome map."""
    lookup = {biome_id: index for index, biome_id in enumerate(palette)}
    return np.array([[lookup[biome_id] for biome_id in row] for row in biome_map], dtype=np.int16)
