"""
Data classes shared by the detector, matcher and homography code.
"""

from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True)
class Point:
    x: float
    y: float


@dataclass
class Descriptor:
    point: Point
    data: np.ndarray  # (w * w * C,) center-minus-neighbor values

    def __len__(self):
        return len(self.data)

    def __eq__(self, other):
        if not isinstance(other, Descriptor):
            return NotImplemented
        return self.point == other.point and np.array_equal(self.data, other.data)


@dataclass
class Match:
    ai: int  # index in the descriptors of image a
    bi: int  # index in the descriptors of image b
    p: Point  # location in image a
    q: Point  # location in image b
    distance: float  # L1 distance between the two descriptors
