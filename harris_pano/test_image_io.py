"""
Tests for Pillow based image reading and writing.
"""

import numpy as np
import pytest

from harris_pano.image_io import read_image, read_images, to_float_image, write_image


def test_to_float_image_promotes_grayscale_and_scales_uint8():
    im = to_float_image(np.array([[0, 255]], dtype=np.uint8))

    assert im.shape == (1, 2, 1)
    assert im.dtype == np.float32
    assert np.allclose(im[0, :, 0], [0.0, 1.0])


def test_grayscale_png_round_trip(tmp_path):
    im = (np.arange(48, dtype=np.float32).reshape(6, 8, 1) * 5) / 255.0
    path = tmp_path / 'gray.png'

    write_image(str(path), im)
    loaded = read_image(str(path))

    assert loaded.shape == (6, 8, 1)
    assert np.allclose(loaded, im, atol=1e-6)


def test_rgb_png_round_trip_clips_values(tmp_path):
    im = np.zeros((4, 5, 3), dtype=np.float32)
    im[:, :, 0] = 1.5
    im[:, :, 2] = -0.2
    path = tmp_path / 'rgb.png'

    write_image(str(path), im)
    loaded, = read_images([str(path)])

    assert loaded.shape == (4, 5, 3)
    assert np.allclose(loaded[:, :, 0], 1.0)
    assert np.allclose(loaded[:, :, 1:], 0.0)


def test_read_missing_file_raises_ioerror(tmp_path):
    with pytest.raises(IOError):
        read_image(str(tmp_path / 'missing.png'))
