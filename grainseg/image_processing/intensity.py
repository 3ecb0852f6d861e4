# -*- coding: utf-8 -*-
"""
Intensity Transforms - Global per-channel range normalization.

Provides ``Normalize``, which remaps each channel of a buffer linearly so
that its observed minimum and maximum land on a target range. Typically
used to stretch a photograph to [0, 1] before thresholding.

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
from typing import Annotated, Any, Dict, Optional

# Third-party
import numpy as np

# grainseg internal
from grainseg.image_processing.base import BandwiseTransformMixin, ImageTransform
from grainseg.image_processing.params import Desc
from grainseg.image_processing.versioning import processor_version, processor_tags
from grainseg.image_processing._validation import validate_range
from grainseg.vocabulary import ProcessorCategory

#: Channels whose value range is narrower than this are left unchanged.
FLAT_RANGE = 1e-4


@processor_version('1.0.0')
@processor_tags(category=ProcessorCategory.ENHANCE)
class Normalize(BandwiseTransformMixin, ImageTransform):
    """Linear min/max stretch of each channel onto ``[min_value, max_value]``.

    A channel whose input range is below ``1e-4`` (homogeneous) or
    already equals ``max_value - min_value`` is copied unchanged. May be
    applied in place (``out`` is ``source``).

    Parameters
    ----------
    min_value : float
        Lower end of the target range. Default ``0.0``.
    max_value : float
        Upper end of the target range. Default ``1.0``.

    Raises
    ------
    RangeError
        If ``max_value <= min_value``.

    Examples
    --------
    >>> from grainseg.image_processing.intensity import Normalize
    >>> stretched = Normalize().apply(photo)
    """

    __elementwise__ = True

    min_value: Annotated[float, Desc('Lower end of the target range')] = 0.0
    max_value: Annotated[float, Desc('Upper end of the target range')] = 1.0

    def __init__(self, min_value: float = 0.0, max_value: float = 1.0) -> None:
        validate_range(min_value, max_value)
        self.min_value = min_value
        self.max_value = max_value

    def _check_params(self, params: Dict[str, Any]) -> None:
        validate_range(params['min_value'], params['max_value'])

    def _apply_2d(
        self,
        plane: np.ndarray,
        out: np.ndarray,
        scratch: Optional[np.ndarray],
        **params: Any,
    ) -> None:
        low = params['min_value']
        span_out = params['max_value'] - low
        min_in = float(plane.min())
        span_in = float(plane.max()) - min_in

        if span_in < FLAT_RANGE or span_in == span_out:
            out[...] = plane
            return
        out[...] = (plane - min_in) / span_in * span_out + low
