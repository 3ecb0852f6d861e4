# -*- coding: utf-8 -*-
"""
grainseg - Spatial filtering and grain segmentation.

A library of per-pixel and windowed image transforms culminating in
automatic foreground/background separation and connected-component
extraction, used to isolate and count discrete objects (e.g. grains) in
grayscale photographs.

Dependencies
------------
numpy

License
-------
MIT License
Copyright (c) 2024 geoint.org
See LICENSE file for full text.

Created
-------
2026-10-18

Modified
--------
2026-10-18
"""

__version__ = "0.1.0"

from grainseg.exceptions import (
    GrainsegError,
    ValidationError,
    ShapeMismatchError,
    WindowSizeError,
    RangeError,
    ProcessorError,
)
from grainseg.vocabulary import ProcessorCategory, SegmentationType
from grainseg.image import (
    Coordinate,
    PixelBuffer,
    Rectangle,
    build_histogram,
    quantize,
)

__all__ = [
    'GrainsegError',
    'ValidationError',
    'ShapeMismatchError',
    'WindowSizeError',
    'RangeError',
    'ProcessorError',
    'ProcessorCategory',
    'SegmentationType',
    'Coordinate',
    'PixelBuffer',
    'Rectangle',
    'build_histogram',
    'quantize',
]
