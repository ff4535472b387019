"""
Debug visualizations: corner marks and match lines.

Apart from mark_spot, every function returns a new 3-channel image and
leaves its inputs untouched.
"""

import numpy as np

from .filters import set_pixel
from .harris import harris_corner_detector
from .homography import model_inliers
from .image_io import to_float_image
from .matcher import match_descriptors

CORNER_COLOR = (1.0, 0.0, 1.0)
INLIER_COLOR = (0.0, 1.0, 0.0)
OUTLIER_COLOR = (1.0, 0.0, 0.0)


def _to_rgb(image):
    """Copy of an image with exactly 3 channels."""
    image = to_float_image(image)
    if image.shape[2] == 1:
        return np.repeat(image, 3, axis=2)
    return image[:, :, :3].copy()


def mark_spot(image, point, color=CORNER_COLOR, size=9):
    """Draw a cross centered on point, in place."""
    x = int(point.x)
    y = int(point.y)

    for i in range(-size, size + 1):
        for c, value in enumerate(color):
            set_pixel(image, x + i, y, c, value)
            set_pixel(image, x, y + i, c, value)


def mark_corners(image, descriptors):
    """Return a copy of image with every descriptor location marked."""
    marked = _to_rgb(image)
    for d in descriptors:
        mark_spot(marked, d.point)
    return marked


def detect_and_draw_corners(image, sigma, thresh, nms):
    """Find Harris corners and return the image with them marked."""
    descriptors = harris_corner_detector(image, sigma, thresh, nms)
    return mark_corners(image, descriptors)


def both_images(a, b):
    """Place two images side by side on one canvas."""
    a = _to_rgb(a)
    b = _to_rgb(b)
    h1, w1 = a.shape[:2]
    h2, w2 = b.shape[:2]

    both = np.zeros((max(h1, h2), w1 + w2, 3), dtype=np.float32)
    both[:h1, :w1] = a
    both[:h2, w1:w1 + w2] = b
    return both


def _draw_line(image, pt1, pt2, color):
    """Draw line on image using Bresenham's algorithm."""
    x1, y1 = pt1
    x2, y2 = pt2

    dx = abs(x2 - x1)
    dy = abs(y2 - y1)

    steep = dy > dx

    if steep:
        x1, y1 = y1, x1
        x2, y2 = y2, x2

    if x1 > x2:
        x1, x2 = x2, x1
        y1, y2 = y2, y1

    dx = x2 - x1
    dy = abs(y2 - y1)

    error = dx / 2
    ystep = 1 if y1 < y2 else -1
    y = y1

    for x in range(x1, x2 + 1):
        if steep:
            if 0 <= y < image.shape[1] and 0 <= x < image.shape[0]:
                image[x, y] = color
        else:
            if 0 <= x < image.shape[1] and 0 <= y < image.shape[0]:
                image[y, x] = color

        error -= dy
        if error < 0:
            y += ystep
            error += dx


def draw_matches(a, b, matches, inliers=0):
    """
    Draw lines between matching pixels of two images.

    Args:
        a, b: Images that have matches
        matches: List of Match
        inliers: Number of leading matches to draw as inliers (green),
            the rest are drawn red

    Returns:
        Image with a and b side by side and the match lines
    """
    both = both_images(a, b)
    offset = a.shape[1]

    for i, m in enumerate(matches):
        color = INLIER_COLOR if i < inliers else OUTLIER_COLOR
        pt1 = (int(m.p.x), int(m.p.y))
        pt2 = (int(m.q.x) + offset, int(m.q.y))
        _draw_line(both, pt1, pt2, color)

    return both


def draw_inliers(a, b, H, matches, thresh):
    """Draw matches with the inliers of H in green."""
    count, ordered = model_inliers(H, matches, thresh)
    return draw_matches(a, b, ordered, count)


def find_and_draw_matches(a, b, sigma, thresh, nms):
    """Find corners in both images, match them and draw the matches."""
    da = harris_corner_detector(a, sigma, thresh, nms)
    db = harris_corner_detector(b, sigma, thresh, nms)
    matches = match_descriptors(da, db)

    return draw_matches(mark_corners(a, da), mark_corners(b, db), matches, 0)
