"""Pytest configuration for voxsprite tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session.
"""

import numpy as np
import pytest
import taichi as ti


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Re-initializing Taichi mid-session invalidates compiled kernels, so the
    CLI tests patch out the CLI's own backend setup.
    """
    ti.init(arch=ti.cpu, random_seed=42)
    yield


@pytest.fixture
def square_sprite():
    """Factory for raw 3x3 focus sprites centered on the middle pixel.

    The returned sprite maps camera-space points with x, y in [-1, 1] onto
    its nine pixels. ``holes`` lists (x, y) camera-space pixels to leave
    transparent.
    """

    def _make(color, holes=()):
        # center (2, 2): camera (x, y) reads raw pixel (x + 3, y + 3)
        raw = np.zeros((5, 5, 4), dtype=np.uint8)
        raw[2:, 2:] = color
        raw[0, 2] = (255, 0, 255, 255)
        raw[2, 0] = (255, 0, 255, 255)
        for x, y in holes:
            raw[y + 3, x + 3] = 0
        return raw

    return _make


@pytest.fixture
def axis_cameras():
    """Orthographic cameras looking down each axis.

    Keys name the world direction the camera sits in: top (+z), front (+y),
    side (+x) and bottom (-z).
    """
    top = np.identity(4)
    front = np.array(
        [[1, 0, 0, 0], [0, 0, 1, 0], [0, 1, 0, 0], [0, 0, 0, 1]], dtype=np.float64
    )
    side = np.array(
        [[0, 1, 0, 0], [0, 0, 1, 0], [1, 0, 0, 0], [0, 0, 0, 1]], dtype=np.float64
    )
    bottom = np.array(
        [[0, 1, 0, 0], [1, 0, 0, 0], [0, 0, -1, 0], [0, 0, 0, 1]], dtype=np.float64
    )
    return {"top": top, "front": front, "side": side, "bottom": bottom}
