"""
Image I/O utilities using PIL (Pillow).

Images are handled as float32 arrays of shape (H x W x C) with
values in [0, 1].
"""

import numpy as np
from PIL import Image


def to_float_image(image):
    """
    Convert an array to the (H x W x C) float32 [0, 1] image layout.

    uint8 input is scaled by 1/255, float input is kept as is.
    """
    image = np.asarray(image)
    if image.ndim == 2:
        image = image[:, :, np.newaxis]
    if image.ndim != 3:
        raise ValueError(f"Expected a 2D or 3D image array, got shape {image.shape}")

    if image.dtype == np.uint8:
        return image.astype(np.float32) / 255.0
    return image.astype(np.float32)


def read_image(filepath):
    """
    Read image from file.

    Args:
        filepath: Path to image file

    Returns:
        Image as float32 array (H x W x C), 1 channel for grayscale
        files and 3 channels otherwise
    """
    try:
        img = Image.open(filepath)

        # Convert to RGB if needed
        if img.mode != 'RGB' and img.mode != 'L':
            img = img.convert('RGB')

        img_array = np.array(img)

    except Exception as e:
        raise IOError(f"Failed to read image from {filepath}: {str(e)}")

    return to_float_image(img_array)


def write_image(filepath, image):
    """
    Write image to file.

    Args:
        filepath: Path to save image
        image: Image as float array in [0, 1] (H x W x C) or (H x W)
    """
    image = np.asarray(image)
    if image.dtype != np.uint8:
        image = (np.clip(image, 0.0, 1.0) * 255.0 + 0.5).astype(np.uint8)

    if image.ndim == 3 and image.shape[2] == 1:
        image = image[:, :, 0]

    try:
        # Pillow infers 'L' for 2D and 'RGB' for (H x W x 3) uint8 arrays
        if image.ndim == 2:
            img = Image.fromarray(image)
        else:
            img = Image.fromarray(np.ascontiguousarray(image[:, :, :3]))

        img.save(filepath)

    except Exception as e:
        raise IOError(f"Failed to write image to {filepath}: {str(e)}")


def read_images(filepaths):
    """
    Read multiple images.

    Args:
        filepaths: List of image file paths

    Returns:
        List of images as float32 arrays
    """
    images = []

    for filepath in filepaths:
        img = read_image(filepath)
        images.append(img)

    return images
