# -*- coding: utf-8 -*-
"""
Integral-Image Filters - Box statistics from summed-area tables.

Provides the summed-area table (integral image) primitive and the two
window filters built on it. Window sums cost four lookups per pixel
regardless of window size. Windows are clipped to the image; no padding
is applied.

- ``integral_image``: row-then-column cumulative sums
- ``window_sums``: clipped window sums and areas via inclusion-exclusion
- ``BoxBlur``: mean over the clipped window
- ``BinaryMedianFilter``: majority vote over a binary window

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

# Standard library
from typing import Any, Optional, Tuple

# Third-party
import numpy as np

# grainseg internal
from grainseg.image_processing.versioning import processor_tags, processor_version
from grainseg.image_processing.filters._window import WindowFilter
from grainseg.vocabulary import ProcessorCategory


def integral_image(
    plane: np.ndarray,
    out: Optional[np.ndarray] = None,
) -> np.ndarray:
    """Compute the summed-area table of a 2D plane.

    ``out[r, c]`` is the sum of ``plane[0:r+1, 0:c+1]``.

    Parameters
    ----------
    plane : np.ndarray
        2D array, shape ``(rows, cols)``.
    out : np.ndarray, optional
        Destination array of the same shape. Allocated when omitted.

    Returns
    -------
    np.ndarray
        The integral image (``out`` when given).
    """
    if out is None:
        out = np.empty(plane.shape, dtype=np.float64)
    np.cumsum(plane, axis=1, out=out)
    np.cumsum(out, axis=0, out=out)
    return out


def window_sums(
    integral: np.ndarray,
    height: int,
    width: int,
) -> Tuple[np.ndarray, np.ndarray]:
    """Sum every clipped ``height`` x ``width`` window of an integral image.

    The window centred on ``(r, c)`` spans rows ``r - height // 2`` to
    ``r + height // 2`` and likewise for columns, clipped to the image.

    Parameters
    ----------
    integral : np.ndarray
        Output of ``integral_image``.
    height : int
        Odd window height.
    width : int
        Odd window width.

    Returns
    -------
    Tuple[np.ndarray, np.ndarray]
        ``(sums, areas)``, both shaped like ``integral``. ``areas`` holds
        the number of pixels actually inside each clipped window.
    """
    rows, cols = integral.shape
    half_h = height // 2
    half_w = width // 2

    # Leading zero row/column so that index 0 means "before the image".
    padded = np.zeros((rows + 1, cols + 1), dtype=np.float64)
    padded[1:, 1:] = integral

    r = np.arange(rows)
    c = np.arange(cols)
    top = np.maximum(r - half_h - 1, -1) + 1
    bottom = np.minimum(r + half_h, rows - 1) + 1
    left = np.maximum(c - half_w - 1, -1) + 1
    right = np.minimum(c + half_w, cols - 1) + 1

    sums = (
        padded[np.ix_(bottom, right)]
        - padded[np.ix_(top, right)]
        - padded[np.ix_(bottom, left)]
        + padded[np.ix_(top, left)]
    )
    areas = np.outer(bottom - top, right - left).astype(np.float64)
    return sums, areas


@processor_version('1.0.0')
@processor_tags(category=ProcessorCategory.FILTERS)
class BoxBlur(WindowFilter):
    """Mean filter over a clipped rectangular window.

    Each output sample is the mean of the input samples inside the
    ``height`` x ``width`` window centred on it. Near the border the
    window is clipped and the mean is taken over the pixels that remain.
    A 1x1 window copies the input.

    The scratch buffer, when given, receives the integral image.

    Parameters
    ----------
    width : int
        Window width in pixels. Must be odd and >= 1. Default is 3.
    height : int
        Window height in pixels. Must be odd and >= 1. Default is 3.

    Examples
    --------
    >>> from grainseg.image_processing.filters import BoxBlur
    >>> blurred = BoxBlur(width=5, height=5).apply(image)
    """

    def _apply_2d(
        self,
        plane: np.ndarray,
        out: np.ndarray,
        scratch: Optional[np.ndarray],
        **params: Any,
    ) -> None:
        width = params['width']
        height = params['height']
        if width == 1 and height == 1:
            out[...] = plane
            return
        integral = integral_image(plane, scratch)
        sums, areas = window_sums(integral, height, width)
        np.divide(sums, areas, out=out)


@processor_version('1.0.0')
@processor_tags(category=ProcessorCategory.BINARY)
class BinaryMedianFilter(WindowFilter):
    """Majority filter for binary images.

    Outputs 1 where the window sum exceeds half of the nominal window
    area ``width * height``, else 0. Clipped windows near the border are
    still compared against the nominal area, so the border leans towards
    background. A 1x1 window copies the input.

    Parameters
    ----------
    width : int
        Window width in pixels. Must be odd and >= 1. Default is 3.
    height : int
        Window height in pixels. Must be odd and >= 1. Default is 3.
    """

    def _apply_2d(
        self,
        plane: np.ndarray,
        out: np.ndarray,
        scratch: Optional[np.ndarray],
        **params: Any,
    ) -> None:
        width = params['width']
        height = params['height']
        if width == 1 and height == 1:
            out[...] = plane
            return
        integral = integral_image(plane, scratch)
        sums, _ = window_sums(integral, height, width)
        out[...] = sums > (width * height) / 2.0
