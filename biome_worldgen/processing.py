# biome_worldgen/processing.py

"""
================================================================================
NOISE GRID PROCESSING
================================================================================
Pure, stateless transforms over 2D noise grids: normalization, Gaussian
smoothing and weighted blending.

Data Contract:
---------------
- Inputs: 2D array-likes of real values (rows of columns).
- Outputs: New float64 NumPy arrays of the same shape. Inputs are never mutated.
- Side Effects: None.
- Invariants: normalize() maps a non-uniform grid onto exactly [0, 1].
================================================================================
"""

import numpy as np
from scipy.ndimage import convolve

from .errors import ShapeMismatch


def normalize(grid) -> np.ndarray:
    """
    Rescales a grid so its minimum maps to 0 and its maximum to 1.
    A uniform grid has no range to rescale and is returned with its values unchanged.
    """
    values = np.asarray(grid, dtype=float)
    lo = values.min()
    hi = values.max()
    value_range = hi - lo
    if value_range == 0:
        return values.copy()
    # Clip guards against rounding nudging a value a hair outside [0, 1].
    return np.clip((values - lo) / value_range, 0.0, 1.0)


def create_gaussian_kernel(radius: int) -> np.ndarray:
    """Normalized (2r+1)x(2r+1) Gaussian kernel with sigma = radius / 3."""
    size = radius * 2 + 1
    sigma = radius / 3.0
    two_sigma_squared = 2.0 * sigma * sigma

    offsets = np.arange(size) - radius
    dx, dy = np.meshgrid(offsets, offsets)
    kernel = np.exp(-(dx * dx + dy * dy) / two_sigma_squared)
    return kernel / kernel.sum()


def smooth(grid, radius: int = 1) -> np.ndarray:
    """
    Applies Gaussian smoothing. Kernel weights that fall outside the grid are
    dropped and the remaining weights renormalized per cell, so edges are
    neither wrapped nor pulled toward zero.
    """
    values = np.asarray(grid, dtype=float)
    if radius <= 0:
        return values.copy()

    kernel = create_gaussian_kernel(int(radius))

    # Convolving a ones-mask with the same kernel gives the in-grid weight sum
    # for every cell.
    weighted_sum = convolve(values, kernel, mode='constant', cval=0.0)
    weight_total = convolve(np.ones_like(values), kernel, mode='constant', cval=0.0)

    return np.divide(
        weighted_sum,
        weight_total,
        out=values.copy(),
        where=weight_total > 0
    )


def blend(grids, weights) -> np.ndarray:
    """
    Per-cell weighted average of several grids.

    Raises:
        ShapeMismatch: if no grids are given, the number of grids and weights
            differ, or the grids do not share a shape.
        ValueError: if the weights sum to zero.
    """
    grids = list(grids)
    weights = list(weights)

    if not grids or len(grids) != len(weights):
        raise ShapeMismatch(
            f"blend() needs one weight per grid; got {len(grids)} grids and {len(weights)} weights"
        )

    arrays = [np.asarray(g, dtype=float) for g in grids]
    shape = arrays[0].shape
    for index, array in enumerate(arrays[1:], start=1):
        if array.shape != shape:
            raise ShapeMismatch(f"Grid {index} has shape {array.shape}, expected {shape}")

    total_weight = float(sum(weights))
    if total_weight == 0:
        raise ValueError("blend() weights must not sum to zero")

    result = np.zeros(shape, dtype=float)
    for array, weight in zip(arrays, weights):
        result += array * weight
    return result / total_weight
