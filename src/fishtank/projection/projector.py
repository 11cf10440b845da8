import logging

import numpy as np

from ..errors import ConfigurationError
from ..models import Frustum, HeadState, Projection, VirtualScreen

logger = logging.getLogger(__name__)


def compute_frustum(head: HeadState, screen: VirtualScreen, near: float, far: float) -> Frustum:
    """
    Frustum of an eye at `head` looking through the fixed `screen` rectangle.

    The screen sits on the Z=0 plane, centered at the origin. Its edges are
    projected onto the near plane by similar triangles, so moving the eye
    skews the frustum instead of rotating the camera.
    """
    if near <= 0 or far <= near:
        raise ConfigurationError(f"Invalid clip planes near={near}, far={far}.")

    dist = abs(head.z)
    if dist <= 0:
        raise ConfigurationError("Eye lies on the screen plane; the frustum is undefined.")

    scale = near / dist
    half_w = screen.half_width
    half_h = screen.half_height

    frustum = Frustum(
        left=(-half_w - head.x) * scale,
        right=(half_w - head.x) * scale,
        top=(half_h - head.y) * scale,
        bottom=(-half_h - head.y) * scale,
        near=near,
        far=far,
    )

    if not (frustum.left < frustum.right and frustum.bottom < frustum.top):
        raise ConfigurationError(f"Degenerate frustum for head at ({head.x}, {head.y}): {frustum}")

    return frustum


def perspective_matrix(frustum: Frustum) -> np.ndarray:
    """Off-axis perspective matrix, same layout as glFrustum."""
    l, r = frustum.left, frustum.right
    t, b = frustum.top, frustum.bottom
    n, f = frustum.near, frustum.far

    return np.array([
        [2 * n / (r - l), 0.0, (r + l) / (r - l), 0.0],
        [0.0, 2 * n / (t - b), (t + b) / (t - b), 0.0],
        [0.0, 0.0, -(f + n) / (f - n), -2 * f * n / (f - n)],
        [0.0, 0.0, -1.0, 0.0],
    ], dtype=np.float64)


def view_matrix(head: HeadState) -> np.ndarray:
    """World-to-eye transform. The eye never rotates, so this is a pure translation."""
    view = np.eye(4, dtype=np.float64)
    view[:3, 3] = (-head.x, -head.y, -head.z)
    return view


class OffAxisProjector:
    """
    Builds the per-frame projection for a head-tracked window.

    Stateless apart from the clip planes; every call recomputes the frustum,
    the matrix and its inverse from scratch.
    """

    def __init__(self, near: float = 0.1, far: float = 1000.0):
        if near <= 0 or far <= near:
            raise ConfigurationError(f"Invalid clip planes near={near}, far={far}.")
        self.near = near
        self.far = far

    def project(self, head: HeadState, screen: VirtualScreen) -> Projection:
        frustum = compute_frustum(head, screen, self.near, self.far)
        matrix = perspective_matrix(frustum)

        return Projection(
            frustum=frustum,
            eye=(head.x, head.y, head.z),
            matrix=matrix,
            # Anything that unprojects (picking) reads this, never a cached copy.
            inverse=np.linalg.inv(matrix),
            view=view_matrix(head),
        )
