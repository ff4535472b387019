"""
Homography estimation with the Direct Linear Transform and RANSAC
using only NumPy.

A homography is a (3 x 3) float64 array with H[2, 2] == 1. Functions
that can fail to estimate one return None instead.
"""

import logging

import numpy as np

from .config import DEFAULT_CUTOFF, DEFAULT_FALLBACK_DX, DEFAULT_INLIER_THRESH, DEFAULT_ITERS
from .features import Point

logger = logging.getLogger(__name__)

# Homogeneous weights smaller than this are treated as points at infinity
EPS_W = 1e-12


class HomographyEstimator:
    """
    Homography matrix estimation using RANSAC.

    A homography is a 3x3 matrix that describes the projective transformation
    between two planes (images).
    """

    def __init__(self, inlier_thresh=DEFAULT_INLIER_THRESH, iters=DEFAULT_ITERS,
                 cutoff=DEFAULT_CUTOFF):
        """
        Initialize Homography Estimator.

        Args:
            inlier_thresh: Maximum reprojection error (exclusive) of an inlier
            iters: Maximum number of RANSAC iterations
            cutoff: Stop as soon as a model has more inliers than this
        """
        self.inlier_thresh = inlier_thresh
        self.iters = iters
        self.cutoff = cutoff

    def find_homography(self, matches, rng, fallback_dx=DEFAULT_FALLBACK_DX):
        """
        Find the homography mapping image a points onto image b points.

        Args:
            matches: List of Match (at least 4)
            rng: numpy.random.Generator driving the sampling
            fallback_dx: x translation of the starting model

        Returns:
            H: Homography matrix (3 x 3)
            mask: Inlier mask aligned with matches
        """
        H = ransac(matches, self.inlier_thresh, self.iters, self.cutoff, rng,
                   fallback_dx=fallback_dx)
        p, q = _match_points(matches)
        return H, _inlier_mask(H, p, q, self.inlier_thresh)


def make_translation_homography(dx, dy):
    """Homography that shifts points by (dx, dy)."""
    return np.array([
        [1, 0, dx],
        [0, 1, dy],
        [0, 0, 1]
    ], dtype=np.float64)


def _match_points(matches):
    """Split matches into (N x 2) arrays of a-points and b-points."""
    p = np.array([[m.p.x, m.p.y] for m in matches], dtype=np.float64).reshape(-1, 2)
    q = np.array([[m.q.x, m.q.y] for m in matches], dtype=np.float64).reshape(-1, 2)
    return p, q


def project_points(H, points):
    """
    Apply homography transformation to points.

    Args:
        H: Homography matrix (3 x 3)
        points: Points to transform (N x 2)

    Returns:
        Transformed points (N x 2). Rows whose homogeneous weight is
        zero, or whose result is not finite, are NaN.
    """
    points = np.asarray(points, dtype=np.float64).reshape(-1, 2)

    points_homogeneous = np.hstack([points, np.ones((len(points), 1))])
    transformed = (H @ points_homogeneous.T).T

    w = transformed[:, 2:3]
    valid = np.abs(w) > EPS_W
    safe_w = np.where(valid, w, 1.0)

    result = transformed[:, :2] / safe_w
    result[~valid[:, 0]] = np.nan
    result[~np.all(np.isfinite(result), axis=1)] = np.nan
    return result


def project_point(H, p):
    """
    Apply a projective transformation to a point.

    Returns:
        Projected Point, or None when H is None or the point maps to
        infinity.
    """
    if H is None:
        return None

    x, y = project_points(H, [[p.x, p.y]])[0]
    if np.isnan(x) or np.isnan(y):
        return None
    return Point(float(x), float(y))


def point_distance(p, q):
    """L2 distance between two points."""
    return float(np.hypot(p.x - q.x, p.y - q.y))


def _inlier_mask(H, p, q, thresh):
    """Boolean mask of correspondences with reprojection error < thresh."""
    if H is None:
        return np.zeros(len(p), dtype=bool)

    projected = project_points(H, p)
    errors = np.sqrt(np.sum((projected - q) ** 2, axis=1))

    # NaN compares False, so failed projections are outliers
    return errors < thresh


def model_inliers(H, matches, thresh):
    """
    Count the matches consistent with a homography.

    Args:
        H: Homography from image a to image b, or None
        matches: List of Match
        thresh: Reprojection distance below which a match is an inlier

    Returns:
        count: Number of inliers
        reordered: New list with the inliers first, each group in
            input order. The input list is left unchanged.
    """
    p, q = _match_points(matches)
    mask = _inlier_mask(H, p, q, thresh)

    inliers = [m for m, keep in zip(matches, mask) if keep]
    outliers = [m for m, keep in zip(matches, mask) if not keep]
    return len(inliers), inliers + outliers


def randomize_matches(matches, rng):
    """Return a shuffled copy of matches."""
    order = rng.permutation(len(matches))
    return [matches[i] for i in order]


def _fit_homography(p, q):
    """
    Compute homography using the Direct Linear Transform.

    For each point correspondence (x, y) -> (x', y') with h33 fixed to 1:
    x' = h11*x + h12*y + h13 - h31*x*x' - h32*y*x'
    y' = h21*x + h22*y + h23 - h31*x*y' - h32*y*y'

    This gives 2 equations per correspondence, solved for the 8
    unknowns in the least squares sense.
    """
    n = len(p)
    if n < 4:
        return None

    x, y = p[:, 0], p[:, 1]
    xp, yp = q[:, 0], q[:, 1]
    zeros = np.zeros(n)
    ones = np.ones(n)

    M = np.empty((2 * n, 8), dtype=np.float64)
    M[0::2] = np.column_stack([x, y, ones, zeros, zeros, zeros, -x * xp, -y * xp])
    M[1::2] = np.column_stack([zeros, zeros, zeros, x, y, ones, -x * yp, -y * yp])

    b = np.empty(2 * n, dtype=np.float64)
    b[0::2] = xp
    b[1::2] = yp

    try:
        a, _, rank, _ = np.linalg.lstsq(M, b, rcond=None)
    except np.linalg.LinAlgError:
        return None

    if rank < 8 or not np.all(np.isfinite(a)):
        return None

    return np.append(a, 1.0).reshape(3, 3)


def compute_homography(matches):
    """
    Computes homography between two images given matching pixels.

    Args:
        matches: Matches between the images, at least 4

    Returns:
        (3 x 3) homography mapping image a to image b, or None when the
        system has no unique solution
    """
    p, q = _match_points(matches)
    return _fit_homography(p, q)


def ransac(matches, thresh, k, cutoff, rng, fallback_dx=DEFAULT_FALLBACK_DX):
    """
    Perform RANdom SAmple Consensus to calculate homography for noisy matches.

    Args:
        matches: List of Match, at least 4. Not modified.
        thresh: Inlier/outlier distance threshold
        k: Number of iterations to run
        cutoff: Inlier count above which to stop early
        rng: numpy.random.Generator used for sampling
        fallback_dx: Starting model is a translation by (fallback_dx, 0)

    Returns:
        Best homography found. Never None.
    """
    n = len(matches)
    if n < 4:
        raise ValueError("Need at least 4 point correspondences")

    p, q = _match_points(matches)

    best_H = make_translation_homography(fallback_dx, 0)
    best_inliers = int(np.sum(_inlier_mask(best_H, p, q, thresh)))

    for iteration in range(k):
        # Minimal sample from a fresh permutation
        sample = rng.permutation(n)[:4]

        H = _fit_homography(p[sample], q[sample])
        if H is None:
            continue

        mask = _inlier_mask(H, p, q, thresh)
        num_inliers = int(np.sum(mask))

        if num_inliers > best_inliers and num_inliers >= 4:
            # Refine homography using all inliers
            refined = _fit_homography(p[mask], q[mask])
            if refined is not None:
                H = refined
                num_inliers = int(np.sum(_inlier_mask(H, p, q, thresh)))

            best_H = H
            best_inliers = num_inliers
            logger.debug(f"RANSAC iteration {iteration}: {best_inliers} inliers")

            if best_inliers > cutoff:
                break

    logger.info(f"RANSAC kept {best_inliers} inliers out of {n} matches")
    return best_H
