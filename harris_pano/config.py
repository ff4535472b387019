"""
Default parameters for the Harris panorama pipeline.

Typical ranges:
    sigma          ~2      Gaussian for the Harris structure matrix
    thresh         1 - 5   cornerness threshold
    nms            ~3      non-max suppression half-width
    inlier_thresh  2 - 5   RANSAC reprojection threshold in pixels
    iters          1,000 - 50,000 RANSAC iterations
    cutoff         10 - 100 RANSAC early-exit inlier count
"""

DEFAULT_SIGMA = 2.0
DEFAULT_THRESH = 5.0
DEFAULT_NMS = 3
DEFAULT_WINDOW = 5

HARRIS_ALPHA = 0.06

DEFAULT_INLIER_THRESH = 2.0
DEFAULT_ITERS = 10000
DEFAULT_CUTOFF = 30
DEFAULT_SEED = 10

# Translation used as the RANSAC starting model when the caller
# does not know the width of the first image.
DEFAULT_FALLBACK_DX = 256

# Canvases larger than this usually mean a broken homography
MAX_CANVAS_SIZE = 7000
