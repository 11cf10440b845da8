from dataclasses import dataclass

import numpy as np


@dataclass(slots=True, frozen=True)
class Frustum:
    """Asymmetric viewing volume, edges measured on the near plane."""
    left: float
    right: float
    top: float
    bottom: float
    near: float
    far: float


@dataclass(slots=True, frozen=True)
class Projection:
    """
    Everything the rasterizer needs for one frame.

    Matrices are 4x4 row-major float64 arrays. `inverse` is always derived
    from `matrix` in the same call that built it.
    """
    frustum: Frustum
    eye: tuple[float, float, float]
    matrix: np.ndarray
    inverse: np.ndarray
    view: np.ndarray
