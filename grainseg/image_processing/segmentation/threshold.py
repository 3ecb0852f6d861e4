# -*- coding: utf-8 -*-
"""
Threshold Segmentation - Otsu's method, fixed and adaptive binarization.

Provides global threshold selection over 256-bin histograms and the
transforms that turn a grayscale buffer into a binary foreground mask:

- ``otsu_threshold``: maximize between-class variance over a histogram
- ``threshold_otsu``: histogram one channel of a buffer, then Otsu
- ``Binarize``: ``1`` where a sample exceeds a fixed threshold
- ``OtsuThreshold``: per-channel Otsu threshold, then binarize
- ``AdaptiveThreshold``: compare each sample with its local box mean

A threshold ``t / 255`` places levels ``0..t`` in the lower (background)
class, matching ``Binarize``'s strict ``>`` comparison.

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
import logging
from typing import Annotated, Any, Dict, Optional

# Third-party
import numpy as np

# grainseg internal
from grainseg.exceptions import ValidationError
from grainseg.image import HISTOGRAM_BINS, PixelBuffer, build_histogram
from grainseg.image_processing.base import BandwiseTransformMixin, ImageTransform
from grainseg.image_processing.filters.integral import integral_image, window_sums
from grainseg.image_processing.params import Desc, Range
from grainseg.image_processing.versioning import processor_tags, processor_version
from grainseg.image_processing._validation import validate_window
from grainseg.vocabulary import ProcessorCategory, SegmentationType

logger = logging.getLogger(__name__)

def otsu_threshold(histogram: np.ndarray) -> float:
    """Select a global threshold with Otsu's method.

    For every candidate level ``t`` in ``1..255`` the lower class holds
    bins ``0..t`` and the upper class the rest. The score is
    ``w_lo * w_hi * (mu_lo - mu_hi) ** 2``; candidates with an empty
    class are skipped, and the first strictly greatest score wins.

    Parameters
    ----------
    histogram : np.ndarray
        256 non-negative bin counts or probabilities. Counts are
        normalized internally.

    Returns
    -------
    float
        ``t / 255`` for the winning level, or ``0.0`` when the histogram
        is empty or no candidate scores above zero.

    Raises
    ------
    ValidationError
        If ``histogram`` is not a length-256 vector of finite,
        non-negative values.

    Examples
    --------
    >>> hist = np.zeros(256)
    >>> hist[40] = hist[210] = 1.0
    >>> otsu_threshold(hist)
    0.1568627450980392
    """
    hist = np.asarray(histogram, dtype=np.float64)
    if hist.shape != (HISTOGRAM_BINS,):
        raise ValidationError(
            f"histogram must have shape ({HISTOGRAM_BINS},), got {hist.shape}"
        )
    if not np.all(np.isfinite(hist)) or np.any(hist < 0):
        raise ValidationError("histogram values must be finite and >= 0")

    total = hist.sum()
    if total <= 0:
        return 0.0
    p = hist / total
    levels = np.arange(HISTOGRAM_BINS, dtype=np.float64)

    # Index t: lower class is bins 0..t, upper class bins t+1..255.
    w_lo = np.cumsum(p)
    s_lo = np.cumsum(p * levels)
    w_hi = np.append(np.cumsum(p[::-1])[::-1][1:], 0.0)
    s_hi = np.append(np.cumsum((p * levels)[::-1])[::-1][1:], 0.0)

    valid = (w_lo > 0) & (w_hi > 0)
    valid[0] = False
    score = np.zeros(HISTOGRAM_BINS, dtype=np.float64)
    with np.errstate(divide='ignore', invalid='ignore'):
        mu_lo = s_lo / w_lo
        mu_hi = s_hi / w_hi
        score[valid] = (w_lo * w_hi * (mu_lo - mu_hi) ** 2)[valid]

    best = int(np.argmax(score))
    if score[best] <= 0:
        logger.debug("Otsu: no separating level, returning 0")
        return 0.0
    logger.debug("Otsu: level %d selected (score %.6g)", best, score[best])
    return best / 255.0


def threshold_otsu(buffer: PixelBuffer, channel: int = 0) -> float:
    """Otsu threshold of one channel of ``buffer``.

    Parameters
    ----------
    buffer : PixelBuffer
        Source buffer; samples are quantized to 8 bits for the histogram.
    channel : int
        Channel index. Default 0.

    Returns
    -------
    float
        Threshold in [0, 1].
    """
    return otsu_threshold(build_histogram(buffer, channel))


@processor_version('1.0.0')
@processor_tags(category=ProcessorCategory.THRESHOLD,
                segmentation_types=[SegmentationType.BINARY])
class Binarize(BandwiseTransformMixin, ImageTransform):
    """Fixed-threshold binarization.

    Outputs 1 where ``sample > threshold`` and 0 elsewhere. May be
    applied in place.

    Parameters
    ----------
    threshold : float
        Comparison level. Default 0.5.
    """

    __elementwise__ = True

    threshold: Annotated[float, Desc('Foreground if sample exceeds this')] = 0.5

    def _apply_2d(
        self,
        plane: np.ndarray,
        out: np.ndarray,
        scratch: Optional[np.ndarray],
        **params: Any,
    ) -> None:
        out[...] = plane > params['threshold']


@processor_version('1.0.0')
@processor_tags(category=ProcessorCategory.THRESHOLD,
                segmentation_types=[SegmentationType.BINARY])
class OtsuThreshold(BandwiseTransformMixin, ImageTransform):
    """Binarize each channel at its own Otsu threshold.

    Each channel is histogrammed over 256 quantized levels, Otsu's
    threshold is selected, and samples above it become 1. May be applied
    in place.

    Examples
    --------
    >>> from grainseg.image_processing.segmentation import OtsuThreshold
    >>> mask = OtsuThreshold().apply(photo)
    """

    __elementwise__ = True

    def _apply_2d(
        self,
        plane: np.ndarray,
        out: np.ndarray,
        scratch: Optional[np.ndarray],
        **params: Any,
    ) -> None:
        level = threshold_otsu(PixelBuffer(plane))
        out[...] = plane > level


@processor_version('1.0.0')
@processor_tags(category=ProcessorCategory.THRESHOLD,
                segmentation_types=[SegmentationType.BINARY])
class AdaptiveThreshold(BandwiseTransformMixin, ImageTransform):
    """Binarize against the local mean.

    Outputs 1 where ``sample - mean > threshold``, with ``mean`` the box
    blur of the clipped ``window`` x ``window`` neighbourhood. Copes with
    uneven illumination where a single global level fails.

    Parameters
    ----------
    window : int
        Odd side of the square averaging window. Default 15.
    threshold : float
        Margin above the local mean. Default 0.0.
    """

    window: Annotated[int, Range(min=1, max=1001),
                      Desc('Averaging window side (odd)')] = 15
    threshold: Annotated[float, Desc('Margin above the local mean')] = 0.0

    def __init__(self, window: int = 15, threshold: float = 0.0) -> None:
        validate_window(window, 'window')
        self.window = window
        self.threshold = threshold

    def _check_params(self, params: Dict[str, Any]) -> None:
        validate_window(params['window'], 'window')

    def _apply_2d(
        self,
        plane: np.ndarray,
        out: np.ndarray,
        scratch: Optional[np.ndarray],
        **params: Any,
    ) -> None:
        window = params['window']
        sums, areas = window_sums(integral_image(plane, scratch), window, window)
        out[...] = (plane - sums / areas) > params['threshold']
