"""
Two-image panorama pipeline: Harris corners, L1 matching, RANSAC
homography and compositing.
"""

import logging

import numpy as np

from .compositor import combine_images
from .config import (DEFAULT_CUTOFF, DEFAULT_INLIER_THRESH, DEFAULT_ITERS, DEFAULT_NMS,
                     DEFAULT_SEED, DEFAULT_SIGMA, DEFAULT_THRESH)
from .drawing import draw_inliers
from .harris import HarrisCornerDetector
from .homography import HomographyEstimator
from .image_io import to_float_image, write_image
from .matcher import DescriptorMatcher

logger = logging.getLogger(__name__)


class PanoramaStitcher:
    """
    Complete panorama stitching pipeline.

    This class coordinates all components:
    1. Harris corner detection and patch descriptors
    2. Descriptor matching
    3. Homography estimation with RANSAC
    4. Image warping and compositing
    """

    def __init__(self,
                 harris_params=None,
                 ransac_params=None,
                 seed=DEFAULT_SEED):
        """
        Initialize Panorama Stitcher.

        Args:
            harris_params: Parameters for HarrisCornerDetector
            ransac_params: Parameters for HomographyEstimator
            seed: Seed of the random generator created for each stitch
        """
        harris_params = harris_params or {}
        self.detector = HarrisCornerDetector(**harris_params)

        self.matcher = DescriptorMatcher()

        ransac_params = ransac_params or {}
        self.homography_estimator = HomographyEstimator(**ransac_params)

        self.seed = seed

    def stitch_pair(self, img1, img2, return_debug_info=False):
        """
        Stitch two images together.

        Args:
            img1: First image, stays unwarped on the canvas
            img2: Second image, warped into the frame of img1
            return_debug_info: If True, return additional debug information

        Returns:
            result: Stitched panorama image
            debug_info: (Optional) Dictionary with debug information
        """
        img1 = to_float_image(img1)
        img2 = to_float_image(img2)

        # One random stream per stitch keeps runs reproducible
        rng = np.random.default_rng(self.seed)

        desc1 = self.detector.detect(img1)
        desc2 = self.detector.detect(img2)

        matches = self.matcher.match(desc1, desc2)

        if len(matches) < 4:
            raise ValueError(
                f"Not enough matches found between images ({len(matches)}, need 4)"
            )

        H, inliers = self.homography_estimator.find_homography(
            matches, rng, fallback_dx=img1.shape[1]
        )
        num_inliers = int(np.sum(inliers))
        logger.info(f"Homography has {num_inliers} inliers out of {len(matches)} matches")

        result = combine_images(img1, img2, H)

        if return_debug_info:
            debug_info = {
                'descriptors1': desc1,
                'descriptors2': desc2,
                'matches': matches,
                'homography': H,
                'inliers': inliers,
                'num_inliers': num_inliers,
                'canvas_size': result.shape[:2]
            }
            return result, debug_info

        return result

    def visualize_inliers(self, img1, img2, debug_info):
        """Draw the matches of a stitch with its inliers highlighted."""
        return draw_inliers(img1, img2, debug_info['homography'], debug_info['matches'],
                            self.homography_estimator.inlier_thresh)


def panorama_image(a, b, sigma=DEFAULT_SIGMA, thresh=DEFAULT_THRESH, nms=DEFAULT_NMS,
                   inlier_thresh=DEFAULT_INLIER_THRESH, iters=DEFAULT_ITERS,
                   cutoff=DEFAULT_CUTOFF, seed=DEFAULT_SEED, draw_inliers_path=None):
    """
    Create a panorama between two images.

    Args:
        a, b: Images to stitch together
        sigma: Gaussian for Harris corner detector. Typical: 2
        thresh: Threshold for corner/no corner. Typical: 1-5
        nms: Window to perform nms on. Typical: 3
        inlier_thresh: Threshold for RANSAC inliers. Typical: 2-5
        iters: Number of RANSAC iterations. Typical: 1,000-50,000
        cutoff: RANSAC inlier cutoff. Typical: 10-100
        seed: Seed for the RANSAC random generator
        draw_inliers_path: If given, save the inlier visualization there

    Returns:
        Stitched image
    """
    stitcher = PanoramaStitcher(
        harris_params={'sigma': sigma, 'thresh': thresh, 'nms': nms},
        ransac_params={'inlier_thresh': inlier_thresh, 'iters': iters, 'cutoff': cutoff},
        seed=seed,
    )

    result, debug_info = stitcher.stitch_pair(a, b, return_debug_info=True)

    if draw_inliers_path is not None:
        write_image(draw_inliers_path, stitcher.visualize_inliers(a, b, debug_info))

    return result
