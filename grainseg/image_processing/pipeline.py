# -*- coding: utf-8 -*-
"""
Pipeline - Composable sequence of image transforms.

Chains multiple ``ImageTransform`` instances into a single transform.
The output of each step feeds into the next. Supports progress
reporting across the full chain.

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
from typing import Any, List, Optional, Sequence

# grainseg internal
from grainseg.exceptions import ProcessorError
from grainseg.image import PixelBuffer, as_buffer
from grainseg.image_processing.base import ImageTransform
from grainseg.image_processing._validation import (
    validate_no_alias,
    validate_same_shape,
)

logger = logging.getLogger(__name__)


class Pipeline(ImageTransform):
    """Sequential chain of image transforms.

    Applies a sequence of ``ImageTransform`` instances in order, passing
    the output of each as the input to the next. The pipeline itself is
    an ``ImageTransform``, so it can be nested inside other pipelines.
    Intermediate results are freshly allocated; only the last step
    writes into ``out``.

    Parameters
    ----------
    steps : Sequence[ImageTransform]
        Ordered list of transforms to apply. Must contain at least one
        transform.

    Examples
    --------
    >>> from grainseg.image_processing import Pipeline
    >>> from grainseg.image_processing.filters import GaussianFilter
    >>> from grainseg.image_processing.intensity import Normalize
    >>> from grainseg.image_processing.segmentation import OtsuThreshold
    >>>
    >>> pipe = Pipeline([
    ...     GaussianFilter(sigma_x=1.5),
    ...     Normalize(),
    ...     OtsuThreshold(),
    ... ])
    >>> mask = pipe.apply(photo)

    With progress reporting:

    >>> mask = pipe.apply(photo, progress_callback=lambda f: print(f"{f:.0%}"))
    """

    __processor_version__ = '1.0.0'

    def __init__(self, steps: Sequence[ImageTransform]) -> None:
        if not steps:
            raise ValueError("Pipeline requires at least one transform")
        for i, step in enumerate(steps):
            if not isinstance(step, ImageTransform):
                raise TypeError(
                    f"Step {i} is not an ImageTransform: {type(step).__name__}"
                )
        self._steps: List[ImageTransform] = list(steps)

    @property
    def steps(self) -> List[ImageTransform]:
        """Shallow copy of the ordered step list."""
        return list(self._steps)

    def __len__(self) -> int:
        return len(self._steps)

    def __repr__(self) -> str:
        step_names = [type(s).__name__ for s in self._steps]
        return f"Pipeline({step_names})"

    def apply(
        self,
        source: PixelBuffer,
        out: Optional[PixelBuffer] = None,
        buffer: Optional[PixelBuffer] = None,
        **kwargs: Any,
    ) -> PixelBuffer:
        """Apply all transforms in sequence.

        Parameters
        ----------
        source : PixelBuffer or np.ndarray
            Input image.
        out : PixelBuffer, optional
            Destination for the final step.
        buffer : PixelBuffer, optional
            Scratch buffer lent to every step.
        **kwargs
            Keyword arguments forwarded to each step's ``apply()``.
            ``progress_callback`` is intercepted and rescaled so each
            step reports its proportional share of overall progress.

        Returns
        -------
        PixelBuffer
            Output after all transforms have been applied.

        Raises
        ------
        ProcessorError
            If a step returns something other than a ``PixelBuffer``.
        """
        src = as_buffer(source, 'source')
        if out is not None:
            out = as_buffer(out, 'out')
            validate_same_shape(src, out, 'out')
            validate_no_alias(src, out, 'out')

        n = len(self._steps)
        outer_cb = kwargs.pop('progress_callback', None)

        result = src
        for i, step in enumerate(self._steps):
            logger.debug("Pipeline step %d/%d: %s", i + 1, n,
                         type(step).__qualname__)

            step_kwargs = dict(kwargs)
            if outer_cb is not None:
                base = i / n
                scale = 1.0 / n
                step_kwargs['progress_callback'] = (
                    lambda f, _b=base, _s=scale: outer_cb(_b + f * _s)
                )

            step_out = out if i == n - 1 else None
            result = step.apply(result, out=step_out, buffer=buffer,
                                **step_kwargs)
            if not isinstance(result, PixelBuffer):
                raise ProcessorError(
                    f"Step {i} ({type(step).__name__}) returned "
                    f"{type(result).__name__}, expected PixelBuffer"
                )

            if outer_cb is not None:
                outer_cb((i + 1) / n)

        return result
