"""
Harris corner detection and patch descriptors using NumPy and SciPy.
"""

import logging

import numpy as np

from .config import DEFAULT_NMS, DEFAULT_SIGMA, DEFAULT_THRESH, DEFAULT_WINDOW, HARRIS_ALPHA
from .features import Descriptor, Point
from .filters import convolve_image, get_pixel, make_gx_filter, make_gy_filter, smooth_image
from .image_io import to_float_image

logger = logging.getLogger(__name__)


class HarrisCornerDetector:
    """
    Harris corner detector.

    The pipeline is:
    1. Structure matrix from smoothed gradient products
    2. Cornerness response det(S) - alpha * trace(S)^2
    3. Non-max suppression
    4. Thresholding and descriptor extraction
    """

    def __init__(self, sigma=DEFAULT_SIGMA, thresh=DEFAULT_THRESH,
                 nms=DEFAULT_NMS, window=DEFAULT_WINDOW):
        """
        Initialize Harris detector.

        Args:
            sigma: Standard deviation of the Gaussian weighting window
            thresh: Minimum cornerness (exclusive) for a corner
            nms: Half-width of the non-max suppression window
            window: Size of the descriptor patch (odd)
        """
        if window <= 0 or window % 2 == 0:
            raise ValueError(f"Descriptor window must be a positive odd number, got {window}")
        if nms < 0:
            raise ValueError(f"nms must be non-negative, got {nms}")

        self.sigma = sigma
        self.thresh = thresh
        self.nms = nms
        self.window = window

    def detect(self, image):
        """
        Detect corners and describe them.

        Args:
            image: Image (H x W x C) or (H x W)

        Returns:
            List of Descriptor objects
        """
        return harris_corner_detector(image, self.sigma, self.thresh,
                                      self.nms, window=self.window)


def structure_matrix(image, sigma):
    """
    Calculate the structure matrix of an image.

    Returns:
        (H x W x 3) float32 image; channel 0 is Ix^2, channel 1 is Iy^2
        and channel 2 is IxIy, each smoothed with a Gaussian of sigma.
    """
    Ix = convolve_image(image, make_gx_filter(), preserve=False)[:, :, 0]
    Iy = convolve_image(image, make_gy_filter(), preserve=False)[:, :, 0]

    S = np.stack([Ix * Ix, Iy * Iy, Ix * Iy], axis=2)
    return smooth_image(S, sigma)


def cornerness_response(S, alpha=HARRIS_ALPHA):
    """Estimate the cornerness of each pixel given a structure matrix S."""
    a11 = S[:, :, 0]
    a22 = S[:, :, 1]
    a12 = S[:, :, 2]

    det = a11 * a22 - a12 * a12
    trace = a11 + a22
    return det - alpha * trace * trace


def nms_image(response, w):
    """
    Non-max suppression on a response map.

    A pixel is set to -inf when any pixel at offset (dx, dy) with
    dx, dy in [-w, w) has a strictly larger response. Reads past the
    border use the nearest edge value. Equal responses do not suppress.

    Args:
        response: 2D response map (H x W)
        w: Half-width of the window

    Returns:
        New response map with only local maxima kept
    """
    if w < 0:
        raise ValueError(f"nms window must be non-negative, got {w}")

    response = np.asarray(response, dtype=np.float32)
    h, width = response.shape

    if w == 0:
        return response.copy()

    padded = np.pad(response, w, mode='edge')
    suppressed = np.zeros(response.shape, dtype=bool)

    for dy in range(-w, w):
        for dx in range(-w, w):
            neighbor = padded[w + dy:w + dy + h, w + dx:w + dx + width]
            suppressed |= neighbor > response

    result = response.copy()
    result[suppressed] = -np.inf
    return result


def describe_point(image, x, y, w=DEFAULT_WINDOW):
    """
    Create a feature descriptor for a pixel.

    For every channel the center value minus each neighbor in a
    (w x w) window is recorded, in (channel, dx, dy) order. Subtracting
    the center makes the descriptor insensitive to uniform brightness
    offsets.

    Args:
        image: Source image (H x W x C)
        x, y: Integer pixel coordinates inside the image
        w: Odd window size

    Returns:
        Descriptor for that pixel
    """
    if w <= 0 or w % 2 == 0:
        raise ValueError(f"Descriptor window must be a positive odd number, got {w}")

    h, width = image.shape[:2]
    offsets = np.arange(-(w // 2), (w + 1) // 2)
    xs = np.clip(x + offsets, 0, width - 1)
    ys = np.clip(y + offsets, 0, h - 1)

    # (dy, dx, c) -> (c, dx, dy)
    patch = image[ys][:, xs].transpose(2, 1, 0)
    center = np.array([get_pixel(image, x, y, c) for c in range(image.shape[2])],
                      dtype=np.float32)[:, np.newaxis, np.newaxis]

    data = (center - patch).astype(np.float32).ravel()
    return Descriptor(point=Point(float(x), float(y)), data=data)


def describe_index(image, i, w=DEFAULT_WINDOW):
    """Create a descriptor for the pixel at flat index i (i = x + y * width)."""
    width = image.shape[1]
    return describe_point(image, i % width, i // width, w)


def harris_corner_detector(image, sigma, thresh, nms, window=DEFAULT_WINDOW):
    """
    Perform Harris corner detection and extract features from the corners.

    Args:
        image: Input image
        sigma: Standard deviation for the structure matrix
        thresh: Cornerness threshold, corners need a response > thresh
        nms: Half-width for non-max suppression

    Returns:
        List of descriptors, ordered by x then y
    """
    image = to_float_image(image)

    S = structure_matrix(image, sigma)
    R = cornerness_response(S)
    Rnms = nms_image(R, nms)

    # Transpose so the scan runs x-major like the response loops
    corners = np.argwhere(Rnms.T > thresh)

    descriptors = [describe_point(image, int(x), int(y), window) for x, y in corners]
    logger.info(f"Found {len(descriptors)} corners")

    return descriptors
