import logging

import numpy as np
import pygame
from pygame.locals import DOUBLEBUF, FULLSCREEN, OPENGL, RESIZABLE
from OpenGL.GL import *

from ..models import Projection, WindowEvents
from .scene import RoomScene

logger = logging.getLogger(__name__)


def _column_major(matrix: np.ndarray) -> np.ndarray:
    # OpenGL reads matrices column by column
    return np.ascontiguousarray(matrix.T, dtype=np.float64).ravel()


class PygameGLRenderer:
    """
    SceneRenderer drawing into a pygame OpenGL window.

    The projection and view matrices are loaded as given; this class never
    derives its own camera from the scene.
    """

    def __init__(self, width_px: int, height_px: int, title: str, fullscreen: bool = False):
        pygame.init()

        flags = DOUBLEBUF | OPENGL
        if fullscreen:
            flags |= FULLSCREEN
        else:
            flags |= RESIZABLE

        surface = pygame.display.set_mode((width_px, height_px), flags)
        pygame.display.set_caption(title)
        self._size: tuple[int, int] = surface.get_size()

        glEnable(GL_DEPTH_TEST)
        glEnable(GL_BLEND)
        glBlendFunc(GL_SRC_ALPHA, GL_ONE_MINUS_SRC_ALPHA)
        glClearColor(0.0, 0.0, 0.0, 1.0)
        glLineWidth(1.5)

        logger.info(f"OpenGL window {self._size[0]}x{self._size[1]} ({glGetString(GL_RENDERER).decode(errors='ignore')})")

    @property
    def viewport_size(self) -> tuple[int, int]:
        return self._size

    def poll_events(self) -> WindowEvents:
        quit_requested = False
        resized_to = None

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                quit_requested = True
            elif event.type == pygame.KEYDOWN and event.key in (pygame.K_ESCAPE, pygame.K_q):
                quit_requested = True
            elif event.type == pygame.VIDEORESIZE and event.w > 0 and event.h > 0:
                self._size = (event.w, event.h)
                resized_to = self._size

        return WindowEvents(quit_requested=quit_requested, resized_to=resized_to)

    def render(self, scene: RoomScene, projection: Projection) -> None:
        glViewport(0, 0, *self._size)
        glClear(GL_COLOR_BUFFER_BIT | GL_DEPTH_BUFFER_BIT)

        glMatrixMode(GL_PROJECTION)
        glLoadMatrixd(_column_major(projection.matrix))
        glMatrixMode(GL_MODELVIEW)
        glLoadMatrixd(_column_major(projection.view))

        self._draw_cube(scene)
        self._draw_room(scene)

        pygame.display.flip()

    def _draw_room(self, scene: RoomScene) -> None:
        glColor4f(0.0, 1.0, 0.0, 0.35)
        glBegin(GL_LINES)
        for start, end in scene.wall_lines:
            glVertex3f(*start)
            glVertex3f(*end)
        glEnd()

    def _draw_cube(self, scene: RoomScene) -> None:
        glBegin(GL_QUADS)
        for corners, shade in scene.cube_faces():
            glColor4f(0.1 * shade, 0.9 * shade, 0.9 * shade, 1.0)
            for vertex in corners:
                glVertex3f(*vertex)
        glEnd()

    def close(self) -> None:
        pygame.quit()
        logger.info("Window closed.")
