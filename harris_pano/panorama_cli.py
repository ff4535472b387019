#!/usr/bin/env python3
"""
Harris Panorama CLI
Command-line interface for stitching two images.

Usage:
    python -m harris_pano.panorama_cli left.jpg right.jpg [options]
"""

import argparse
import logging
import os
import sys
import time

from .config import (DEFAULT_CUTOFF, DEFAULT_INLIER_THRESH, DEFAULT_ITERS, DEFAULT_NMS,
                     DEFAULT_SEED, DEFAULT_SIGMA, DEFAULT_THRESH)
from .drawing import detect_and_draw_corners, find_and_draw_matches
from .image_io import read_images, write_image
from .panorama import panorama_image


def print_banner():
    """Print banner."""
    print("Harris Panorama - corners, RANSAC, homography")


def build_parser():
    parser = argparse.ArgumentParser(
        description='Stitch two images into a panorama with Harris corners and RANSAC'
    )

    parser.add_argument(
        'images',
        nargs=2,
        help='Input images; the first one stays unwarped'
    )

    parser.add_argument(
        '-o', '--output',
        default='outputs/panorama.png',
        help='Output panorama image path (default: outputs/panorama.png)'
    )

    parser.add_argument('--sigma', type=float, default=DEFAULT_SIGMA,
                        help=f'Gaussian for Harris structure matrix (default: {DEFAULT_SIGMA})')
    parser.add_argument('--thresh', type=float, default=DEFAULT_THRESH,
                        help=f'Cornerness threshold (default: {DEFAULT_THRESH})')
    parser.add_argument('--nms', type=int, default=DEFAULT_NMS,
                        help=f'Non-max suppression half-width (default: {DEFAULT_NMS})')
    parser.add_argument('--inlier-thresh', type=float, default=DEFAULT_INLIER_THRESH,
                        help=f'RANSAC inlier distance in pixels (default: {DEFAULT_INLIER_THRESH})')
    parser.add_argument('--iters', type=int, default=DEFAULT_ITERS,
                        help=f'RANSAC iterations (default: {DEFAULT_ITERS})')
    parser.add_argument('--cutoff', type=int, default=DEFAULT_CUTOFF,
                        help=f'RANSAC early-exit inlier count (default: {DEFAULT_CUTOFF})')
    parser.add_argument('--seed', type=int, default=DEFAULT_SEED,
                        help=f'Random seed (default: {DEFAULT_SEED})')

    parser.add_argument('--corners-output', default=None,
                        help='Save the first image with its corners marked')
    parser.add_argument('--matches-output', default=None,
                        help='Save all matches drawn between the two images')
    parser.add_argument('--inliers-output', default=None,
                        help='Save the RANSAC inliers drawn between the two images')

    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Log debug messages')

    return parser


def _ensure_parent_dir(path):
    output_dir = os.path.dirname(path)
    if output_dir and not os.path.exists(output_dir):
        os.makedirs(output_dir)


def main(argv=None):
    """Main function for CLI."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s %(name)s %(levelname)s: %(message)s'
    )

    print_banner()

    for img_path in args.images:
        if not os.path.exists(img_path):
            print(f"Error: Image not found: {img_path}")
            return 1

    print("\nReading images...")
    try:
        a, b = read_images(args.images)
        for i, img in enumerate((a, b)):
            print(f"  Image {i+1}: {img.shape}")
    except IOError as e:
        print(f"Error reading images: {str(e)}")
        return 1

    start_time = time.time()

    try:
        if args.corners_output:
            _ensure_parent_dir(args.corners_output)
            write_image(args.corners_output,
                        detect_and_draw_corners(a, args.sigma, args.thresh, args.nms))
            print(f"  Corners saved to: {args.corners_output}")

        if args.matches_output:
            _ensure_parent_dir(args.matches_output)
            write_image(args.matches_output,
                        find_and_draw_matches(a, b, args.sigma, args.thresh, args.nms))
            print(f"  Matches saved to: {args.matches_output}")

        if args.inliers_output:
            _ensure_parent_dir(args.inliers_output)

        print("\nStitching...")
        result = panorama_image(
            a, b,
            sigma=args.sigma,
            thresh=args.thresh,
            nms=args.nms,
            inlier_thresh=args.inlier_thresh,
            iters=args.iters,
            cutoff=args.cutoff,
            seed=args.seed,
            draw_inliers_path=args.inliers_output,
        )

        elapsed_time = time.time() - start_time

        _ensure_parent_dir(args.output)
        write_image(args.output, result)

        print(f"\nSuccess!")
        print(f"  Panorama saved to: {args.output}")
        print(f"  Final size: {result.shape}")
        print(f"  Processing time: {elapsed_time:.2f} seconds")

        return 0

    except (ValueError, IOError) as e:
        print(f"\nError during stitching: {str(e)}")
        return 1


if __name__ == '__main__':
    sys.exit(main())
