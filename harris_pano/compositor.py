"""
Warp one image into the frame of another and paste both on one canvas
using only NumPy.
"""

import logging
import math

import numpy as np

from .config import MAX_CANVAS_SIZE
from .filters import bilinear_interpolate
from .homography import project_points
from .image_io import to_float_image

logger = logging.getLogger(__name__)


def combine_images(a, b, H, max_size=MAX_CANVAS_SIZE):
    """
    Stitch two images together using a projective transformation.

    Args:
        a: First image (H x W x C), pasted unwarped
        b: Second image (H x W x C)
        H: Homography from image a coordinates to image b coordinates
        max_size: Largest canvas width or height to allocate

    Returns:
        Combined image. When the canvas would exceed max_size, or H
        cannot be inverted, a copy of a is returned instead, unchanged
        in dtype and shape.
    """
    original = np.asarray(a)
    a = to_float_image(a)
    b = to_float_image(b)
    h_a, w_a, channels = a.shape
    h_b, w_b = b.shape[:2]

    try:
        H_inv = np.linalg.inv(H)
    except np.linalg.LinAlgError:
        logger.warning("Homography is singular, returning first image unchanged")
        return original.copy()

    # Project the corners of image b into image a coordinates
    corners = project_points(H_inv, [
        [0, 0],
        [w_b - 1, 0],
        [0, h_b - 1],
        [w_b - 1, h_b - 1],
    ])
    if np.any(np.isnan(corners)):
        logger.warning("Corners of second image project to infinity, returning first image unchanged")
        return original.copy()

    left, top = corners.min(axis=0)
    right, bottom = corners.max(axis=0)

    # Offsets of image a inside the canvas
    dx = min(0, math.floor(left))
    dy = min(0, math.floor(top))
    w = max(w_a, math.ceil(right)) - dx
    h = max(h_a, math.ceil(bottom)) - dy

    if w > max_size or h > max_size:
        logger.warning(f"Output too big ({w} x {h}), returning first image unchanged")
        return original.copy()

    canvas = np.zeros((h, w, channels), dtype=np.float32)
    canvas[-dy:h_a - dy, -dx:w_a - dx] = a

    # Only the bounding box of warped b can receive b pixels
    x_coords = np.arange(math.floor(left), math.ceil(right))
    y_coords = np.arange(math.floor(top), math.ceil(bottom))
    if len(x_coords) == 0 or len(y_coords) == 0:
        return canvas

    grid_x, grid_y = np.meshgrid(x_coords, y_coords)
    projected = project_points(H, np.column_stack([grid_x.ravel(), grid_y.ravel()]))
    px = projected[:, 0]
    py = projected[:, 1]

    # NaN compares False and drops out here
    inside = (px >= 0) & (px < w_b) & (py >= 0) & (py < h_b)
    if not np.any(inside):
        return canvas

    samples = bilinear_interpolate(b, px[inside], py[inside])

    # b may have fewer channels than a; repeat its last channel
    channel_idx = np.minimum(np.arange(channels), b.shape[2] - 1)
    canvas[grid_y.ravel()[inside] - dy, grid_x.ravel()[inside] - dx] = samples[:, channel_idx]

    return canvas
