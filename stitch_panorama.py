#!/usr/bin/env python3
"""
Wrapper script for Harris panorama stitching.
Makes it easier to run without the -m flag.

Usage:
    python stitch_panorama.py left.jpg right.jpg -o panorama.png
"""

import sys
from harris_pano.panorama_cli import main

if __name__ == '__main__':
    sys.exit(main())
