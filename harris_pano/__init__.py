"""
Two-image panorama stitching with Harris corners and RANSAC.

This package uses only NumPy, SciPy, and Pillow (no OpenCV).

Main components:
- Harris: structure-matrix corner detection with patch descriptors
- Matching: one-to-one L1 nearest-neighbor matching
- Homography: least-squares DLT and RANSAC
- Compositor: projective warping onto a shared canvas

Example usage:
    from harris_pano.image_io import read_images, write_image
    from harris_pano.panorama import panorama_image

    a, b = read_images(['img1.jpg', 'img2.jpg'])
    panorama = panorama_image(a, b, sigma=2, thresh=2, nms=3)
    write_image('output.png', panorama)
"""

__version__ = '1.0.0'

from .harris import HarrisCornerDetector, harris_corner_detector
from .matcher import DescriptorMatcher, match_descriptors
from .homography import HomographyEstimator, compute_homography, ransac
from .compositor import combine_images
from .panorama import PanoramaStitcher, panorama_image
from .image_io import read_image, write_image, read_images

__all__ = [
    'HarrisCornerDetector',
    'harris_corner_detector',
    'DescriptorMatcher',
    'match_descriptors',
    'HomographyEstimator',
    'compute_homography',
    'ransac',
    'combine_images',
    'PanoramaStitcher',
    'panorama_image',
    'read_image',
    'write_image',
    'read_images',
]
