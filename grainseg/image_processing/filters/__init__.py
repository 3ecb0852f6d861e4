# -*- coding: utf-8 -*-
"""
Spatial Filters - Windowed, rank, and separable linear image filters.

Provides spatial image filters operating on ``PixelBuffer`` objects. All
filters inherit from ``BandwiseTransformMixin`` and ``ImageTransform`` and
process each channel independently. Windows are clipped to the image
unless stated otherwise.

Integral-Image Filters
    ``BoxBlur`` -- mean over a clipped window, O(1) per pixel
    ``BinaryMedianFilter`` -- majority vote for binary images

Rank Filters
    ``MaxFilter`` -- local maximum (separable sliding window)
    ``MinFilter`` -- local minimum (separable sliding window)
    ``MedianFilter`` -- sliding 256-bin histogram median

Linear Filters
    ``Filter1D`` -- arbitrary odd-length 1D correlation, mirror borders
    ``GaussianFilter`` -- separable Gaussian smoothing
    ``UnsharpMask`` -- Gaussian-residual edge enhancement

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

from grainseg.image_processing.filters.integral import (
    BinaryMedianFilter,
    BoxBlur,
    integral_image,
    window_sums,
)
from grainseg.image_processing.filters.rank import MaxFilter, MedianFilter, MinFilter
from grainseg.image_processing.filters.linear import (
    Filter1D,
    GaussianFilter,
    UnsharpMask,
    convolve_1d,
    gaussian_kernel,
    mirror_indices,
)

__all__ = [
    'BoxBlur',
    'BinaryMedianFilter',
    'MaxFilter',
    'MinFilter',
    'MedianFilter',
    'Filter1D',
    'GaussianFilter',
    'UnsharpMask',
    'integral_image',
    'window_sums',
    'convolve_1d',
    'gaussian_kernel',
    'mirror_indices',
]
