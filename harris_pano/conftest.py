import numpy as np
import pytest

# (x0, y0, x1, y1, value) in scene coordinates, all inside the overlap
# of both crops and at least 10 pixels away from their borders
RECTANGLES = [
    (22, 17, 34, 29, 1.0),
    (45, 17, 56, 31, 0.8),
    (66, 17, 86, 27, 0.9),
    (22, 42, 31, 60, 0.85),
    (42, 40, 58, 53, 0.95),
    (70, 38, 86, 58, 0.75),
    (24, 70, 40, 86, 0.88),
    (52, 66, 62, 86, 0.98),
    (72, 70, 86, 84, 0.78),
]


def make_scene():
    scene = np.zeros((120, 120, 1), dtype=np.float32)
    for x0, y0, x1, y1, value in RECTANGLES:
        scene[y0:y1, x0:x1] = value
    return scene


@pytest.fixture
def scene_pair():
    """
    Two 100x100 crops of one scene.

    Pixel (x, y) of a shows the same scene point as pixel (x + 10, y + 5)
    of b, so the homography from a to b is a translation by (10, 5).
    """
    scene = make_scene()
    a = scene[5:105, 10:110].copy()
    b = scene[0:100, 0:100].copy()
    return a, b
