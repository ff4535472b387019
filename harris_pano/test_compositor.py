"""
Tests for warping and compositing two images.
"""

import logging

import numpy as np

from harris_pano.compositor import combine_images
from harris_pano.homography import make_translation_homography


def test_identity_homography_keeps_image():
    rng = np.random.default_rng(0)
    a = rng.random((15, 20, 3)).astype(np.float32)

    result = combine_images(a, a, np.eye(3))

    assert result.shape == a.shape
    assert np.allclose(result, a)


def test_translation_grows_canvas_and_offsets_images():
    a = np.zeros((20, 30, 1), dtype=np.float32)
    b = np.ones((20, 30, 1), dtype=np.float32)

    result = combine_images(a, b, make_translation_homography(10, 5))

    # b's corners land at x in [-10, 19] and y in [-5, 14] of a's frame
    assert result.shape == (25, 40, 1)
    assert np.all(result[0:19, 0:29] == 1.0)
    assert np.all(result[19:, 29:] == 0.0)
    assert result[24, 39, 0] == 0.0


def test_first_image_pasted_at_offset():
    a = np.full((10, 10, 1), 0.5, dtype=np.float32)
    b = np.zeros((10, 10, 1), dtype=np.float32)

    result = combine_images(a, b, make_translation_homography(30, 0))

    # b sits entirely left of a; a starts at column 30
    assert result.shape == (10, 40, 1)
    assert np.all(result[:, 30:] == 0.5)
    assert np.all(result[:, :30] == 0.0)


def test_oversized_canvas_returns_copy_of_first_image():
    rng = np.random.default_rng(1)
    a = rng.random((20, 30, 1)).astype(np.float32)
    b = rng.random((20, 30, 1)).astype(np.float32)
    H = np.diag([1e-3, 1e-3, 1.0])

    result = combine_images(a, b, H)

    assert result is not a
    assert np.array_equal(result, a)


def test_singular_homography_returns_copy_of_first_image():
    a = np.full((5, 5, 1), 0.2, dtype=np.float32)
    H = np.zeros((3, 3))
    H[2, 2] = 1.0

    result = combine_images(a, a, H)

    assert np.array_equal(result, a)


def test_grayscale_second_image_fills_all_channels():
    a = np.zeros((10, 10, 3), dtype=np.float32)
    b = np.full((10, 10, 1), 0.7, dtype=np.float32)

    result = combine_images(a, b, make_translation_homography(5, 0))

    assert result.shape == (10, 15, 3)
    assert np.allclose(result[2, 2], 0.7)


def test_corner_at_infinity_returns_copy_of_first_image(caplog):
    a = np.full((6, 6, 1), 0.3, dtype=np.float32)
    b = np.zeros((5, 9, 1), dtype=np.float32)
    # The inverse has bottom row (-0.125, 0, 1), so b's corner x = 8 has weight 0
    H = np.array([
        [1.0, 0.0, 0.0],
        [0.0, 1.0, 0.0],
        [0.125, 0.0, 1.0],
    ])

    with caplog.at_level(logging.WARNING):
        result = combine_images(a, b, H)

    assert result is not a
    assert np.array_equal(result, a)
    assert 'infinity' in caplog.text


def test_fallback_keeps_input_dtype():
    a = np.full((20, 30, 3), 200, dtype=np.uint8)
    H = np.diag([1e-3, 1e-3, 1.0])

    result = combine_images(a, a, H)

    assert result.dtype == np.uint8
    assert np.array_equal(result, a)
