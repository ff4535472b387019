"""
Tests for pixel access, convolution and interpolation.
"""

import numpy as np
import pytest
from scipy.ndimage import correlate

from harris_pano.filters import (bilinear_interpolate, convolve_image, get_pixel,
                                 make_1d_gaussian, make_gx_filter, make_gy_filter,
                                 set_pixel, smooth_image)


def test_get_pixel_clamps_to_edges():
    im = np.arange(12, dtype=np.float32).reshape(3, 4, 1)

    assert get_pixel(im, -1, -1) == im[0, 0, 0]
    assert get_pixel(im, 10, 1) == im[1, 3, 0]
    assert get_pixel(im, 2, 99) == im[2, 2, 0]
    assert get_pixel(im, 1, 1, c=5) == im[1, 1, 0]


def test_set_pixel_ignores_out_of_bounds():
    im = np.zeros((2, 2, 1), dtype=np.float32)

    set_pixel(im, 1, 0, 0, 0.5)
    set_pixel(im, 5, 0, 0, 1.0)
    set_pixel(im, -1, 0, 0, 1.0)

    assert im[0, 1, 0] == 0.5
    assert im.sum() == pytest.approx(0.5)


def test_1d_gaussian_has_odd_size_and_peak_in_center():
    g = make_1d_gaussian(2.0)

    assert len(g) == 13
    assert np.argmax(g) == 6
    assert np.allclose(g, g[::-1])
    assert g.sum() == pytest.approx(1.0, abs=0.01)


def test_1d_gaussian_rejects_non_positive_sigma():
    with pytest.raises(ValueError):
        make_1d_gaussian(0)


def test_smooth_image_matches_full_2d_gaussian():
    rng = np.random.default_rng(3)
    im = rng.random((20, 25, 2)).astype(np.float32)
    g = make_1d_gaussian(1.5)

    smoothed = smooth_image(im, 1.5)

    for c in range(2):
        full = correlate(im[:, :, c], np.outer(g, g), mode='nearest')
        assert np.allclose(smoothed[:, :, c], full, atol=1e-5)


def test_smooth_constant_image_scales_by_kernel_mass():
    im = np.full((10, 10, 1), 0.5, dtype=np.float32)
    g = make_1d_gaussian(2.0)

    smoothed = smooth_image(im, 2.0)

    assert np.allclose(smoothed, 0.5 * g.sum() ** 2, rtol=1e-5)


def test_sobel_on_horizontal_ramp():
    im = np.tile(np.arange(8, dtype=np.float32), (6, 1))[:, :, np.newaxis]

    gx = convolve_image(im, make_gx_filter())
    gy = convolve_image(im, make_gy_filter())

    assert np.allclose(gx[1:-1, 1:-1], 8.0)
    # Clamped border: only one side of the step differs
    assert np.allclose(gx[1:-1, 0], 4.0)
    assert np.allclose(gy, 0.0)


def test_convolve_without_preserve_sums_channels():
    ramp = np.tile(np.arange(8, dtype=np.float32), (6, 1))
    im = np.stack([ramp, ramp], axis=2)

    gx = convolve_image(im, make_gx_filter(), preserve=False)

    assert gx.shape == (6, 8, 1)
    assert np.allclose(gx[1:-1, 1:-1, 0], 16.0)


def test_bilinear_interpolate():
    im = np.array([[0.0, 1.0],
                   [2.0, 3.0]], dtype=np.float32)[:, :, np.newaxis]

    values = bilinear_interpolate(im, np.array([0.5, 1.0, 0.0]), np.array([0.5, 0.0, 1.0]))

    assert values.shape == (3, 1)
    assert np.allclose(values[:, 0], [1.5, 1.0, 2.0])
