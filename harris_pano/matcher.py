"""
Descriptor matching using L1 distance (sum of absolute differences).
"""

import logging

import numpy as np

from .features import Match

logger = logging.getLogger(__name__)


class DescriptorMatcher:
    """
    Brute-force L1 matcher producing one-to-one matches.

    Every descriptor in a is paired with its nearest descriptor in b.
    The pairs are then sorted by distance and each descriptor in b
    keeps only its closest pair. This is greedy, not an optimal
    assignment.
    """

    def match(self, descriptors_a, descriptors_b):
        """
        Match features between two sets of descriptors.

        Args:
            descriptors_a: Descriptors from first image
            descriptors_b: Descriptors from second image

        Returns:
            matches: List of Match objects sorted by ascending distance
        """
        return match_descriptors(descriptors_a, descriptors_b)


def l1_distance(a, b):
    """L1 distance between two vectors of equal length."""
    a = np.asarray(a, dtype=np.float32)
    b = np.asarray(b, dtype=np.float32)
    if a.shape != b.shape:
        raise ValueError(f"Descriptor lengths differ: {a.shape[0]} vs {b.shape[0]}")
    return float(np.sum(np.abs(a - b)))


def _best_matches(descriptors_a, descriptors_b):
    """Nearest b index for every a descriptor, ties going to the lowest index."""
    desc_b = np.stack([d.data for d in descriptors_b]).astype(np.float32)

    matches = []
    for i, d in enumerate(descriptors_a):
        if d.data.shape[0] != desc_b.shape[1]:
            raise ValueError(
                f"Descriptor lengths differ: {d.data.shape[0]} vs {desc_b.shape[1]}"
            )

        dists = np.sum(np.abs(desc_b - d.data), axis=1)

        # argmin returns the first minimum
        j = int(np.argmin(dists))
        matches.append(Match(
            ai=i,
            bi=j,
            p=d.point,
            q=descriptors_b[j].point,
            distance=float(dists[j]),
        ))

    return matches


def match_descriptors(descriptors_a, descriptors_b):
    """
    Find best matches between descriptors of two images.

    Each descriptor in b appears in at most one match.

    Args:
        descriptors_a: List of Descriptor for image a
        descriptors_b: List of Descriptor for image b

    Returns:
        List of Match, sorted by ascending distance
    """
    if len(descriptors_a) == 0 or len(descriptors_b) == 0:
        return []

    matches = _best_matches(descriptors_a, descriptors_b)

    # Stable sort keeps a-order among equal distances
    matches.sort(key=lambda m: m.distance)

    seen = set()
    injective = []
    for m in matches:
        if m.bi in seen:
            continue
        seen.add(m.bi)
        injective.append(m)

    logger.info(f"Found {len(injective)} matches from {len(descriptors_a)} x {len(descriptors_b)} descriptors")
    return injective
