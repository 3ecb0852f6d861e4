# -*- coding: utf-8 -*-
"""
Rank Filters - Sliding-window maximum, minimum, and median filters.

Provides non-linear rank filters over rectangular windows clipped to the
image (no padding):

- ``MaxFilter``: local maximum, separable (horizontal then vertical pass)
- ``MinFilter``: local minimum, separable
- ``MedianFilter``: median of the 8-bit quantized window via a sliding
  256-bin histogram

The max/min passes remember which index holds the current extremum and
only rescan the window when that index slides out. Inputs that keep
evicting the holder (strictly monotone runs) degrade to O(window) per
step.

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
import operator
from typing import Any, Callable, List, Optional

# Third-party
import numpy as np

# grainseg internal
from grainseg.image import HISTOGRAM_BINS, quantize
from grainseg.image_processing.versioning import processor_tags, processor_version
from grainseg.image_processing.filters._window import WindowFilter
from grainseg.vocabulary import ProcessorCategory

def _scan(
    line: List[float],
    lo: int,
    hi: int,
    keep: Callable[[float, float], bool],
) -> int:
    """Index of the extremum in ``line[lo:hi + 1]``; ties go to the newest."""
    best = lo
    for j in range(lo + 1, hi + 1):
        if keep(line[j], line[best]):
            best = j
    return best


def _sliding_extremum(
    line: List[float],
    radius: int,
    keep: Callable[[float, float], bool],
) -> List[float]:
    """Extremum of every clipped window of half-width ``radius``.

    Parameters
    ----------
    line : List[float]
        One image row or column.
    radius : int
        Window half-width.
    keep : Callable
        ``operator.ge`` for maximum, ``operator.le`` for minimum.

    Returns
    -------
    List[float]
        Extremum for each position of ``line``.
    """
    n = len(line)
    result = [0.0] * n
    holder = -1
    for i in range(n):
        lo = max(0, i - radius)
        hi = min(n - 1, i + radius)
        if holder < lo:
            holder = _scan(line, lo, hi, keep)
        elif keep(line[hi], line[holder]):
            holder = hi
        result[i] = line[holder]
    return result


class _LocalExtremumFilter(WindowFilter):
    """Separable sliding max/min; subclasses pick the comparison."""

    _keep: Callable[[float, float], bool] = operator.ge

    def _apply_2d(
        self,
        plane: np.ndarray,
        out: np.ndarray,
        scratch: Optional[np.ndarray],
        **params: Any,
    ) -> None:
        keep = type(self)._keep
        tmp = scratch if scratch is not None else np.empty_like(plane)
        radius_x = params['width'] // 2
        radius_y = params['height'] // 2

        tmp[...] = [_sliding_extremum(row, radius_x, keep)
                    for row in plane.tolist()]
        columns = [_sliding_extremum(col, radius_y, keep)
                   for col in tmp.T.tolist()]
        out[...] = np.asarray(columns, dtype=np.float64).T


@processor_version('1.0.0')
@processor_tags(category=ProcessorCategory.FILTERS)
class MaxFilter(_LocalExtremumFilter):
    """Local maximum filter (grayscale dilation with a rectangle).

    Replaces each pixel with the maximum over the clipped ``height`` x
    ``width`` window. Runs a horizontal pass into the scratch buffer,
    then a vertical pass into the output.

    Parameters
    ----------
    width : int
        Window width in pixels. Must be odd and >= 1. Default is 3.
    height : int
        Window height in pixels. Must be odd and >= 1. Default is 3.

    Examples
    --------
    >>> from grainseg.image_processing.filters import MaxFilter
    >>> dilated = MaxFilter(width=5, height=3).apply(image)
    """

    _keep = operator.ge


@processor_version('1.0.0')
@processor_tags(category=ProcessorCategory.FILTERS)
class MinFilter(_LocalExtremumFilter):
    """Local minimum filter (grayscale erosion with a rectangle).

    Replaces each pixel with the minimum over the clipped ``height`` x
    ``width`` window.

    Parameters
    ----------
    width : int
        Window width in pixels. Must be odd and >= 1. Default is 3.
    height : int
        Window height in pixels. Must be odd and >= 1. Default is 3.
    """

    _keep = operator.le


def _histogram_median(histogram: List[int], count: int) -> int:
    """Smallest bin whose cumulative count reaches ``(count + 1) // 2``."""
    rank = (count + 1) // 2
    cumulative = 0
    for level, n in enumerate(histogram):
        cumulative += n
        if cumulative >= rank:
            return level
    return HISTOGRAM_BINS - 1


def _median_levels(levels: np.ndarray, height: int, width: int) -> np.ndarray:
    """Windowed median of an 8-bit level image.

    One histogram per output row covers the clipped rows of the window
    and slides across the columns.
    """
    rows, cols = levels.shape
    radius_y = height // 2
    radius_x = width // 2
    grid = levels.tolist()
    result = np.empty((rows, cols), dtype=np.float64)

    for r in range(rows):
        band = grid[max(0, r - radius_y):min(rows - 1, r + radius_y) + 1]
        columns = [[row[c] for row in band] for c in range(cols)]

        histogram = [0] * HISTOGRAM_BINS
        count = 0
        for c in range(min(cols - 1, radius_x) + 1):
            for v in columns[c]:
                histogram[v] += 1
            count += len(band)
        median = _histogram_median(histogram, count)
        result[r, 0] = median

        for c in range(1, cols):
            leaving = c - radius_x - 1
            entering = c + radius_x
            departing = columns[leaving] if leaving >= 0 else None
            incoming = columns[entering] if entering < cols else None
            # Same multiset in and out: histogram is unchanged.
            if departing != incoming:
                if departing is not None:
                    for v in departing:
                        histogram[v] -= 1
                    count -= len(band)
                if incoming is not None:
                    for v in incoming:
                        histogram[v] += 1
                    count += len(band)
                median = _histogram_median(histogram, count)
            result[r, c] = median

    return result


@processor_version('1.0.0')
@processor_tags(category=ProcessorCategory.FILTERS)
class MedianFilter(WindowFilter):
    """Sliding-histogram median filter.

    Samples are quantized to 8 bits, the median level of each clipped
    ``height`` x ``width`` window is found from a running 256-bin
    histogram, and the output is ``level / 255``. For a window of ``n``
    samples the median is the ``(n + 1) // 2``-th smallest, i.e. the
    lower median when ``n`` is even. A 1x1 window copies the input
    without quantizing.

    Parameters
    ----------
    width : int
        Window width in pixels. Must be odd and >= 1. Default is 3.
    height : int
        Window height in pixels. Must be odd and >= 1. Default is 3.

    Examples
    --------
    >>> from grainseg.image_processing.filters import MedianFilter
    >>> denoised = MedianFilter(width=5, height=5).apply(noisy)
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
        levels = quantize(plane).astype(np.int64)
        out[...] = _median_levels(levels, height, width) / 255.0
