import math

import numpy as np


class RoomScene:
    """
    An open box behind the screen with a spinning cube inside.

    The box front is the screen plane (Z=0) and it extends `depth` units
    into the display, so the walls make the parallax easy to see. Geometry is
    plain vertex data; drawing is left to the renderer.
    """

    def __init__(
        self,
        width: float = 80.0,
        height: float = 60.0,
        depth: float = 120.0,
        grid_divisions: int = 16,
        cube_size: float = 12.0,
        rotation_speed: float = 0.5,
    ):
        if grid_divisions <= 0:
            raise ValueError("grid_divisions must be positive.")

        self.width = width
        self.height = height
        self.depth = depth
        self.cube_size = cube_size
        self.rotation_speed = rotation_speed

        # Resting on the floor, a little behind the screen
        self.cube_center = (0.0, -height / 2 + cube_size / 2, -5.0 - cube_size / 2)
        self.cube_rotation_y = 0.0

        self.wall_lines = self._build_wall_grid(grid_divisions)

    def update(self, elapsed_s: float) -> None:
        self.cube_rotation_y = math.fmod(elapsed_s * self.rotation_speed, 2 * math.pi)

    def _build_wall_grid(self, n: int) -> np.ndarray:
        """Line segments covering the back wall, floor, ceiling and side walls. Shape (k, 2, 3)."""
        hw, hh = self.width / 2, self.height / 2
        z0, z1 = 0.0, -self.depth
        xs = np.linspace(-hw, hw, n + 1)
        ys = np.linspace(-hh, hh, n + 1)
        zs = np.linspace(z0, z1, n + 1)

        lines = []
        for x in xs:
            lines.append(((x, -hh, z1), (x, hh, z1)))   # back wall, vertical
            lines.append(((x, -hh, z0), (x, -hh, z1)))  # floor, running into the screen
            lines.append(((x, hh, z0), (x, hh, z1)))    # ceiling
        for y in ys:
            lines.append(((-hw, y, z1), (hw, y, z1)))   # back wall, horizontal
            lines.append(((-hw, y, z0), (-hw, y, z1)))  # left wall
            lines.append(((hw, y, z0), (hw, y, z1)))    # right wall
        for z in zs:
            lines.append(((-hw, -hh, z), (hw, -hh, z)))  # floor, across
            lines.append(((-hw, hh, z), (hw, hh, z)))    # ceiling
            lines.append(((-hw, -hh, z), (-hw, hh, z)))  # left wall
            lines.append(((hw, -hh, z), (hw, hh, z)))    # right wall

        return np.array(lines, dtype=np.float32)

    def cube_faces(self) -> list[tuple[np.ndarray, float]]:
        """Cube faces in world space as (4x3 corners, shade) pairs."""
        s = self.cube_size / 2
        c, si = math.cos(self.cube_rotation_y), math.sin(self.cube_rotation_y)
        rotation = np.array([[c, 0, si], [0, 1, 0], [-si, 0, c]], dtype=np.float32)
        center = np.array(self.cube_center, dtype=np.float32)

        corners = np.array([
            [-s, -s, -s], [s, -s, -s], [s, s, -s], [-s, s, -s],
            [-s, -s, s], [s, -s, s], [s, s, s], [-s, s, s],
        ], dtype=np.float32) @ rotation.T + center

        faces = [
            ((4, 5, 6, 7), 1.0),  # front
            ((1, 0, 3, 2), 0.5),  # back
            ((0, 4, 7, 3), 0.7),  # left
            ((5, 1, 2, 6), 0.8),  # right
            ((7, 6, 2, 3), 0.9),  # top
            ((0, 1, 5, 4), 0.4),  # bottom
        ]
        return [(corners[list(idx)], shade) for idx, shade in faces]
