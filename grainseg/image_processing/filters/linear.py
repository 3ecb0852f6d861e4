# -*- coding: utf-8 -*-
"""
Linear Filters - Separable 1D convolution, Gaussian smoothing, unsharp mask.

Provides linear spatial filters built on a single 1D correlation primitive
with mirror boundaries. Out-of-range index ``p`` on an axis of length
``L`` reads ``-p`` below zero and ``2L - p - 2`` past the end, so the edge
sample itself is not repeated.

- ``convolve_1d``: odd-length coefficient vector along rows or columns
- ``Filter1D``: processor wrapper around ``convolve_1d``
- ``gaussian_kernel``: sampled or binomial Gaussian coefficients
- ``GaussianFilter``: separable Gaussian (horizontal, then vertical)
- ``UnsharpMask``: edge enhancement by amplified Gaussian residual

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
from typing import Annotated, Any, Dict, Optional, Sequence

# Third-party
import numpy as np

# grainseg internal
from grainseg.exceptions import ValidationError, WindowSizeError
from grainseg.image_processing.base import BandwiseTransformMixin, ImageTransform
from grainseg.image_processing.params import Desc
from grainseg.image_processing.versioning import processor_tags, processor_version
from grainseg.vocabulary import ProcessorCategory

#: Binomial approximations selected by the sentinel sigmas -3, -5 and -7.
BINOMIAL_KERNELS = {
    -3: (0.25, 0.5, 0.25),
    -5: (0.0625, 0.25, 0.375, 0.25, 0.0625),
    -7: (0.03125, 0.109375, 0.21875, 0.28125,
         0.21875, 0.109375, 0.03125),
}


def mirror_indices(length: int, radius: int) -> np.ndarray:
    """Tap indices for every position of an axis under mirror boundaries.

    Parameters
    ----------
    length : int
        Axis length ``L``.
    radius : int
        Kernel half-width. Must be < ``length``.

    Returns
    -------
    np.ndarray
        int array of shape ``(length, 2 * radius + 1)``; row ``i`` holds
        the source index read by each tap centred on ``i``.
    """
    idx = np.arange(length)[:, np.newaxis] + np.arange(-radius, radius + 1)
    idx = np.where(idx < 0, -idx, idx)
    idx = np.where(idx >= length, 2 * length - idx - 2, idx)
    return idx


def convolve_1d(
    plane: np.ndarray,
    coefficients: Sequence[float],
    vertical: bool = False,
    out: Optional[np.ndarray] = None,
) -> np.ndarray:
    """Apply an odd-length coefficient vector along one axis.

    ``out[i] = sum_k coefficients[k] * plane[i + k - n // 2]`` along rows
    (or columns when ``vertical``), with mirror boundaries.

    Parameters
    ----------
    plane : np.ndarray
        2D array, shape ``(rows, cols)``.
    coefficients : Sequence[float]
        Odd number ``n`` of coefficients.
    vertical : bool
        Filter along columns instead of rows. Default False.
    out : np.ndarray, optional
        Destination array; must not overlap ``plane``.

    Returns
    -------
    np.ndarray
        Filtered plane (``out`` when given).

    Raises
    ------
    WindowSizeError
        If ``n`` is even, or ``n >= 2 * L`` for the filtered axis length
        ``L``.
    """
    coef = np.asarray(coefficients, dtype=np.float64).ravel()
    n = coef.size
    if n % 2 == 0:
        raise WindowSizeError(
            f"coefficient vector length must be odd, got {n}"
        )
    length = plane.shape[0] if vertical else plane.shape[1]
    if n >= 2 * length:
        raise WindowSizeError(
            f"coefficient vector of length {n} is too long for an axis "
            f"of length {length}"
        )
    if out is None:
        out = np.empty(plane.shape, dtype=np.float64)

    idx = mirror_indices(length, n // 2)
    if vertical:
        out[...] = (plane.T[:, idx] * coef).sum(axis=-1).T
    else:
        out[...] = (plane[:, idx] * coef).sum(axis=-1)
    return out


def gaussian_tap_count(sigma: float) -> int:
    """Number of Gaussian taps for ``sigma``: ``int(4 * sigma + 0.5) | 1``."""
    if sigma in BINOMIAL_KERNELS:
        return len(BINOMIAL_KERNELS[sigma])
    return int(sigma * 4.0 + 0.5) | 1


def gaussian_kernel(sigma: float) -> np.ndarray:
    """Build a normalized 1D Gaussian kernel.

    Parameters
    ----------
    sigma : float
        Positive standard deviation, or one of the sentinels ``-3``,
        ``-5``, ``-7`` selecting the 3, 5 or 7 tap binomial kernels.

    Returns
    -------
    np.ndarray
        Symmetric float64 kernel summing to 1.

    Raises
    ------
    ValidationError
        If ``sigma`` is neither positive nor a supported sentinel.

    Examples
    --------
    >>> gaussian_kernel(-3)
    array([0.25, 0.5 , 0.25])
    """
    if sigma in BINOMIAL_KERNELS:
        return np.array(BINOMIAL_KERNELS[sigma], dtype=np.float64)
    if not sigma > 0:
        raise ValidationError(
            f"sigma must be positive or one of "
            f"{sorted(BINOMIAL_KERNELS)}, got {sigma!r}"
        )
    half = gaussian_tap_count(sigma) // 2
    x = np.arange(-half, half + 1, dtype=np.float64)
    kernel = np.exp(-(x * x) / (2.0 * sigma * sigma))
    return kernel / kernel.sum()


def _validate_sigma(sigma: float, name: str = 'sigma') -> None:
    if sigma in BINOMIAL_KERNELS:
        return
    if not sigma > 0:
        raise ValidationError(
            f"{name} must be positive or one of "
            f"{sorted(BINOMIAL_KERNELS)}, got {sigma!r}"
        )


def gaussian_blur(
    plane: np.ndarray,
    sigma_x: float,
    sigma_y: float,
    out: np.ndarray,
    scratch: Optional[np.ndarray] = None,
) -> np.ndarray:
    """Separable Gaussian: rows into ``scratch``, then columns into ``out``."""
    tmp = scratch if scratch is not None else np.empty_like(plane)
    convolve_1d(plane, gaussian_kernel(sigma_x), vertical=False, out=tmp)
    convolve_1d(tmp, gaussian_kernel(sigma_y), vertical=True, out=out)
    return out


@processor_version('1.0.0')
@processor_tags(category=ProcessorCategory.FILTERS)
class Filter1D(BandwiseTransformMixin, ImageTransform):
    """Arbitrary 1D linear filter along rows or columns.

    Parameters
    ----------
    coefficients : Sequence[float]
        Odd-length coefficient vector.
    vertical : bool
        Filter along columns instead of rows. Default False.

    Examples
    --------
    >>> from grainseg.image_processing.filters import Filter1D
    >>> derivative = Filter1D([-0.5, 0.0, 0.5]).apply(image)
    """

    vertical: Annotated[bool, Desc('Filter along columns instead of rows')] = False

    def __init__(
        self,
        coefficients: Sequence[float],
        vertical: bool = False,
    ) -> None:
        coef = np.asarray(coefficients, dtype=np.float64).ravel()
        if coef.size % 2 == 0:
            raise WindowSizeError(
                f"coefficient vector length must be odd, got {coef.size}"
            )
        self.coefficients = coef
        self.vertical = vertical

    def _apply_2d(
        self,
        plane: np.ndarray,
        out: np.ndarray,
        scratch: Optional[np.ndarray],
        **params: Any,
    ) -> None:
        convolve_1d(plane, self.coefficients, params['vertical'], out=out)


@processor_version('1.0.0')
@processor_tags(category=ProcessorCategory.FILTERS)
class GaussianFilter(BandwiseTransformMixin, ImageTransform):
    """Separable Gaussian smoothing with mirror boundaries.

    Runs the horizontal kernel into the scratch buffer, then the vertical
    kernel into the output. Kernels have ``int(4 * sigma + 0.5) | 1``
    taps; the sentinel sigmas -3, -5 and -7 select binomial kernels.

    Parameters
    ----------
    sigma_x : float
        Horizontal standard deviation in pixels. Default 1.0.
    sigma_y : float, optional
        Vertical standard deviation. Defaults to ``sigma_x``.

    Examples
    --------
    >>> from grainseg.image_processing.filters import GaussianFilter
    >>> smooth = GaussianFilter(sigma_x=2.0).apply(image)
    """

    sigma_x: Annotated[float, Desc('Horizontal standard deviation')] = 1.0
    sigma_y: Annotated[float, Desc('Vertical standard deviation')] = 1.0

    def __init__(
        self,
        sigma_x: float = 1.0,
        sigma_y: Optional[float] = None,
    ) -> None:
        if sigma_y is None:
            sigma_y = sigma_x
        _validate_sigma(sigma_x, 'sigma_x')
        _validate_sigma(sigma_y, 'sigma_y')
        self.sigma_x = sigma_x
        self.sigma_y = sigma_y

    def _check_params(self, params: Dict[str, Any]) -> None:
        _validate_sigma(params['sigma_x'], 'sigma_x')
        _validate_sigma(params['sigma_y'], 'sigma_y')

    def _apply_2d(
        self,
        plane: np.ndarray,
        out: np.ndarray,
        scratch: Optional[np.ndarray],
        **params: Any,
    ) -> None:
        gaussian_blur(plane, params['sigma_x'], params['sigma_y'],
                      out, scratch)


@processor_version('1.0.0')
@processor_tags(category=ProcessorCategory.ENHANCE)
class UnsharpMask(BandwiseTransformMixin, ImageTransform):
    """Unsharp masking: amplify the difference from a Gaussian blur.

    With ``diff = source - blur``, outputs ``source + amount * diff``
    where ``diff > threshold`` (``|diff| > threshold`` when ``absolute``)
    and ``source`` elsewhere. The one-sided default only brightens the
    light side of edges; ``absolute`` sharpens both sides.

    Parameters
    ----------
    sigma : float
        Gaussian standard deviation for the blur. Default 1.0.
    threshold : float
        Minimum difference to enhance. Default 0.0.
    amount : float
        Multiplier applied to the difference. Default 1.0.
    absolute : bool
        Compare ``|diff|`` instead of ``diff``. Default False.
    """

    sigma: Annotated[float, Desc('Gaussian standard deviation')] = 1.0
    threshold: Annotated[float, Desc('Minimum difference to enhance')] = 0.0
    amount: Annotated[float, Desc('Difference multiplier')] = 1.0
    absolute: Annotated[bool, Desc('Threshold |diff| instead of diff')] = False

    def __init__(
        self,
        sigma: float = 1.0,
        threshold: float = 0.0,
        amount: float = 1.0,
        absolute: bool = False,
    ) -> None:
        _validate_sigma(sigma)
        self.sigma = sigma
        self.threshold = threshold
        self.amount = amount
        self.absolute = absolute

    def _check_params(self, params: Dict[str, Any]) -> None:
        _validate_sigma(params['sigma'])

    def _apply_2d(
        self,
        plane: np.ndarray,
        out: np.ndarray,
        scratch: Optional[np.ndarray],
        **params: Any,
    ) -> None:
        blurred = gaussian_blur(plane, params['sigma'], params['sigma'],
                                np.empty_like(plane), scratch)
        diff = plane - blurred
        measure = np.abs(diff) if params['absolute'] else diff
        out[...] = np.where(measure > params['threshold'],
                            plane + params['amount'] * diff, plane)
