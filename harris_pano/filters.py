"""
Pixel access, convolution and interpolation primitives.

All reads outside the image clamp to the nearest edge pixel, which is
what mode='nearest' means for scipy.ndimage.
"""

import math

import numpy as np
from scipy.ndimage import correlate, correlate1d


def get_pixel(image, x, y, c=0):
    """
    Read one pixel, clamping x, y and c to the image bounds.

    Scalar form of the mode='nearest' border the array code uses.
    """
    h, w, channels = image.shape
    x = min(max(int(x), 0), w - 1)
    y = min(max(int(y), 0), h - 1)
    c = min(max(int(c), 0), channels - 1)
    return image[y, x, c]


def set_pixel(image, x, y, c, value):
    """Write one pixel in place. Writes outside the image are ignored."""
    h, w, channels = image.shape
    if 0 <= x < w and 0 <= y < h and 0 <= c < channels:
        image[int(y), int(x), int(c)] = value


def make_gx_filter():
    """Sobel filter for the horizontal derivative."""
    return np.array([[-1, 0, 1],
                     [-2, 0, 2],
                     [-1, 0, 1]], dtype=np.float32)


def make_gy_filter():
    """Sobel filter for the vertical derivative."""
    return np.array([[-1, -2, -1],
                     [0, 0, 0],
                     [1, 2, 1]], dtype=np.float32)


def convolve_image(image, kernel, preserve=True):
    """
    Correlate every channel of an image with a 2D kernel.

    Args:
        image: Input image (H x W x C)
        kernel: 2D filter (kh x kw)
        preserve: Keep one output channel per input channel. When False
            the channel responses are summed into a single channel.

    Returns:
        Filtered image, (H x W x C) or (H x W x 1)
    """
    kernel = np.asarray(kernel, dtype=np.float32)
    output = np.empty(image.shape, dtype=np.float32)

    for c in range(image.shape[2]):
        output[:, :, c] = correlate(image[:, :, c], kernel, mode='nearest')

    if not preserve:
        output = output.sum(axis=2, keepdims=True)

    return output


def make_1d_gaussian(sigma):
    """
    Create a 1D Gaussian kernel.

    The kernel has an odd number of taps, ceil(6 * sigma) rounded up
    to the next odd number.
    """
    if sigma <= 0:
        raise ValueError(f"sigma must be positive, got {sigma}")

    size = int(math.ceil(6 * sigma))
    if size % 2 == 0:
        size += 1

    x = np.arange(size, dtype=np.float32) - (size - 1) / 2.0
    k = 1.0 / (math.sqrt(2 * math.pi) * sigma)
    return (k * np.exp(-(x * x) / (2 * sigma * sigma))).astype(np.float32)


def smooth_image(image, sigma):
    """
    Smooth an image with a separable Gaussian.

    Runs the 1D kernel along rows and then along columns, which gives
    the same result as the full 2D Gaussian with fewer multiplications.
    """
    g = make_1d_gaussian(sigma)
    output = np.empty(image.shape, dtype=np.float32)

    for c in range(image.shape[2]):
        rows = correlate1d(image[:, :, c], g, axis=1, mode='nearest')
        output[:, :, c] = correlate1d(rows, g, axis=0, mode='nearest')

    return output


def bilinear_interpolate(image, x, y):
    """
    Bilinear interpolation at fractional coordinates.

    Args:
        image: Input image (H x W x C)
        x: X coordinates (any shape)
        y: Y coordinates (same shape as x)

    Returns:
        Interpolated values with shape x.shape + (C,)
    """
    h, w = image.shape[:2]
    x = np.asarray(x, dtype=np.float64)
    y = np.asarray(y, dtype=np.float64)

    x0 = np.floor(x).astype(int)
    y0 = np.floor(y).astype(int)

    # Fractional parts, taken before clipping
    fx = (x - x0)[..., np.newaxis]
    fy = (y - y0)[..., np.newaxis]

    x1 = np.clip(x0 + 1, 0, w - 1)
    y1 = np.clip(y0 + 1, 0, h - 1)
    x0 = np.clip(x0, 0, w - 1)
    y0 = np.clip(y0, 0, h - 1)

    I00 = image[y0, x0]
    I01 = image[y1, x0]
    I10 = image[y0, x1]
    I11 = image[y1, x1]

    w00 = (1 - fx) * (1 - fy)
    w01 = (1 - fx) * fy
    w10 = fx * (1 - fy)
    w11 = fx * fy

    return (w00 * I00 + w01 * I01 + w10 * I10 + w11 * I11).astype(np.float32)
