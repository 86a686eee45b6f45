# biome_worldgen/noise.py

"""
================================================================================
NOISE GENERATION UTILITIES
================================================================================
This module provides a seeded 2D gradient noise primitive and its fractal,
ridge and cellular variants. The heavy lifting is done by Numba-compiled
kernels that operate on a pre-shuffled permutation table; NoiseGenerator is a
thin, stateful wrapper that owns the table.

Data Contract:
---------------
- Inputs:
    - seed: An integer used to shuffle the permutation table.
    - x, y: Scalar coordinates, or a grid size for the *_grid helpers.
    - scale, octaves, persistence, lacunarity: Standard noise parameters.
- Outputs:
    - sample/fractal/ridge: floats in [-1, 1] (ridge in [0, 1]).
    - cellular: a distance in [0, 1].
    - *_grid: NumPy arrays of shape (height, width).
- Side Effects: None.
- Invariants: Identical seeds give bit-for-bit identical tables and samples.
================================================================================
"""

import math

import numpy as np
from numba import njit

# Minimal-standard LCG (Park-Miller) constants.
_LCG_MODULUS = 2147483647
_LCG_MULTIPLIER = 16807


class SeededRandom:
    """Park-Miller linear congruential generator producing floats in [0, 1)."""

    def __init__(self, seed: int):
        self.state = int(seed) % _LCG_MODULUS
        if self.state <= 0:
            self.state += _LCG_MODULUS - 1

    def next(self) -> float:
        self.state = (self.state * _LCG_MULTIPLIER) % _LCG_MODULUS
        return (self.state - 1) / (_LCG_MODULUS - 1)


def build_permutation_table(seed: int) -> np.ndarray:
    """
    Shuffles 0..255 with a seeded Fisher-Yates pass and duplicates the result
    to 512 entries so corner lookups never need to wrap.
    """
    rng = SeededRandom(seed)
    p = list(range(256))
    for i in range(255, 0, -1):
        j = int(math.floor(rng.next() * (i + 1)))
        p[i], p[j] = p[j], p[i]
    return np.array(p + p, dtype=np.int64)


@njit
def _lerp(a, b, t):
    "Linear interpolation."
    return a + t * (b - a)


@njit
def _fade(t):
    "6t^5 - 15t^4 + 10t^3"
    return t * t * t * (t * (t * 6 - 15) + 10)


@njit
def _gradient(h, x, y):
    """Dot product of one of the 16 improved-noise gradients with (x, y)."""
    h = h & 15
    u = x if h < 8 else y
    if h < 4:
        v = y
    elif h == 12 or h == 14:
        v = x
    else:
        v = 0.0
    a = u if (h & 1) == 0 else -u
    b = v if (h & 2) == 0 else -v
    return a + b


@njit
def _sample(p, x, y):
    """Single-octave gradient noise at (x, y), clamped to [-1, 1]."""
    fx = np.floor(x)
    fy = np.floor(y)
    xi = int(fx) & 255
    yi = int(fy) & 255
    xf = x - fx
    yf = y - fy

    u = _fade(xf)
    v = _fade(yf)

    a = p[xi] + yi
    aa = p[a]
    ab = p[a + 1]
    b = p[xi + 1] + yi
    ba = p[b]
    bb = p[b + 1]

    x1 = _lerp(_gradient(p[aa], xf, yf), _gradient(p[ba], xf - 1, yf), u)
    x2 = _lerp(_gradient(p[ab], xf, yf - 1), _gradient(p[bb], xf - 1, yf - 1), u)
    value = _lerp(x1, x2, v)

    if value > 1.0:
        return 1.0
    if value < -1.0:
        return -1.0
    return value


@njit
def _fractal(p, x, y, scale, octaves, persistence, lacunarity):
    value = 0.0
    amplitude = 1.0
    frequency = scale
    max_value = 0.0

    for _ in range(octaves):
        value += _sample(p, x * frequency, y * frequency) * amplitude
        max_value += amplitude
        amplitude *= persistence
        frequency *= lacunarity

    # octaves == 0 accumulates no amplitude.
    if max_value == 0.0:
        return 0.0
    return value / max_value


@njit
def _ridge(p, x, y, scale, octaves, persistence, lacunarity):
    value = 0.0
    amplitude = 1.0
    frequency = scale
    max_value = 0.0

    for _ in range(octaves):
        layer = abs(_sample(p, x * frequency, y * frequency))
        value += (1.0 - layer) * amplitude
        max_value += amplitude
        amplitude *= persistence
        frequency *= lacunarity

    if max_value == 0.0:
        return 0.0
    return value / max_value


@njit
def _hash2d(p, x, y):
    return p[(p[x & 255] + y) & 255]


@njit
def _cellular(p, x, y, scale):
    sx = x * scale
    sy = y * scale
    ix = int(np.floor(sx))
    iy = int(np.floor(sy))

    min_dist = np.inf
    for dy in range(-1, 2):
        for dx in range(-1, 2):
            cell_x = ix + dx
            cell_y = iy + dy
            point_x = cell_x + _hash2d(p, cell_x, cell_y) / 256.0
            point_y = cell_y + _hash2d(p, cell_x + 1, cell_y) / 256.0
            dist = np.sqrt((sx - point_x) ** 2 + (sy - point_y) ** 2)
            if dist < min_dist:
                min_dist = dist

    return min(min_dist, 1.0)


@njit
def fractal_noise_2d(p, width, height, offset, scale, octaves, persistence, lacunarity, ridged):
    """
    Evaluates fractal (or ridge) noise for every integer cell of a
    (height, width) grid. This function is JIT-compiled with Numba and uses
    explicit loops, which Numba compiles to efficient machine code.
    """
    total_noise = np.zeros((height, width))

    for j in range(height):
        for i in range(width):
            x = i + offset
            y = j + offset
            if ridged:
                total_noise[j, i] = _ridge(p, x, y, scale, octaves, persistence, lacunarity)
            else:
                total_noise[j, i] = _fractal(p, x, y, scale, octaves, persistence, lacunarity)

    return total_noise


class NoiseGenerator:
    """
    Deterministic gradient noise source seeded by an integer.
    Two generators built from the same seed produce identical output.
    """

    def __init__(self, seed: int = 12345):
        self.seed = seed
        self.permutation_table = build_permutation_table(seed)

    def sample(self, x: float, y: float) -> float:
        """Single-octave noise in [-1, 1]."""
        return float(_sample(self.permutation_table, float(x), float(y)))

    def fractal(self, x: float, y: float, scale: float = 1.0, octaves: int = 1,
                persistence: float = 0.5, lacunarity: float = 2.0) -> float:
        """Sum of `octaves` layers, normalized by total amplitude."""
        return float(_fractal(
            self.permutation_table, float(x), float(y),
            float(scale), int(octaves), float(persistence), float(lacunarity)
        ))

    def ridge(self, x: float, y: float, scale: float = 1.0, octaves: int = 1,
              persistence: float = 0.5, lacunarity: float = 2.0) -> float:
        """Ridged multi-octave noise; sharp crests where the base noise crosses zero."""
        return float(_ridge(
            self.permutation_table, float(x), float(y),
            float(scale), int(octaves), float(persistence), float(lacunarity)
        ))

    def cellular(self, x: float, y: float, scale: float = 1.0) -> float:
        """Distance to the nearest pseudo-random feature point, saturated at 1."""
        return float(_cellular(self.permutation_table, float(x), float(y), float(scale)))

    def fractal_grid(self, width: int, height: int, settings, offset: float = 0.0) -> np.ndarray:
        """
        Fractal noise for a whole grid. `settings` is any object exposing
        scale, octaves, persistence and lacunarity attributes.
        """
        return fractal_noise_2d(
            self.permutation_table, int(width), int(height), float(offset),
            float(settings.scale), int(settings.octaves),
            float(settings.persistence), float(settings.lacunarity), False
        )

    def ridge_grid(self, width: int, height: int, settings, offset: float = 0.0) -> np.ndarray:
        """Ridge noise for a whole grid."""
        return fractal_noise_2d(
            self.permutation_table, int(width), int(height), float(offset),
            float(settings.scale), int(settings.octaves),
            float(settings.persistence), float(settings.lacunarity), True
        )
