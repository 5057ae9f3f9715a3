"""Coherent noise source for terrain and cave generation.

Wraps OpenSimplex 2D noise sampled along the y=0 line, so every stream is a
smooth 1D function of x selected by an integer seed.
"""

from functools import lru_cache

import numpy as np
from numpy.typing import NDArray
from opensimplex import OpenSimplex


@lru_cache(maxsize=256)
def _generator(seed: int) -> OpenSimplex:
    """Build (and cache) the OpenSimplex generator for a seed."""
    return OpenSimplex(seed=seed)


def noise(seed: int, x: float, roughness: float) -> float:
    """Sample a deterministic noise stream.

    Args:
        seed: Stream selector. Adjacent seeds give uncorrelated streams.
        x: Position along the stream.
        roughness: Frequency scale applied to x.

    Returns:
        Noise value in [-1, 1]. Continuous in x.
    """
    value = _generator(int(seed)).noise2(x * roughness, 0.0)
    return min(1.0, max(-1.0, value))


def noise_row(
    seed: int,
    xs: NDArray[np.float64],
    roughness: float,
) -> NDArray[np.float64]:
    """Vectorized version of noise() over an array of positions.

    Args:
        seed: Stream selector.
        xs: 1D array of positions.
        roughness: Frequency scale applied to xs.

    Returns:
        1D array of noise values in [-1, 1], same length as xs.
    """
    coords = np.asarray(xs, dtype=np.float64) * roughness
    values = _generator(int(seed)).noise2array(coords, np.zeros(1))[0]
    return np.clip(values, -1.0, 1.0)
