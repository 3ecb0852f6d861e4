# -*- coding: utf-8 -*-
"""
Pixel Buffers - Shared multi-channel sample grid and 8-bit helpers.

Provides ``PixelBuffer``, the ``(channels, rows, cols)`` float64 grid that
every filter, morphological operator, and labeler in grainseg reads and
writes, together with the small value types used to address it
(``Coordinate``, ``Rectangle``) and the 8-bit quantization and 256-bin
histogram helpers consumed by the median filter and Otsu's method.

Samples are conventionally in [0, 1]. Quantization maps a sample ``v`` to
``floor(clip(255 * v + 0.5, 0, 255))``.

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
from typing import NamedTuple, Optional, Tuple

# Third-party
import numpy as np

# grainseg internal
from grainseg.exceptions import ShapeMismatchError, ValidationError


class Coordinate(NamedTuple):
    """Zero-based pixel coordinate, ``x`` = column and ``y`` = row."""

    x: int
    y: int


class Rectangle(NamedTuple):
    """Inclusive pixel bounding box."""

    top: int
    bottom: int
    left: int
    right: int

    @property
    def width(self) -> int:
        return self.right - self.left + 1

    @property
    def height(self) -> int:
        return self.bottom - self.top + 1


class PixelBuffer:
    """Multi-channel 2D grid of real-valued samples.

    Owns a contiguous float64 array of shape ``(channels, rows, cols)``.
    Two-dimensional input arrays are treated as a single channel.

    Parameters
    ----------
    data : np.ndarray
        2D ``(rows, cols)`` or 3D ``(channels, rows, cols)`` array. It is
        converted to float64; an array that already is float64 and
        C-contiguous is used without copying.

    Raises
    ------
    ValidationError
        If ``data`` is not 2D or 3D, or any dimension is zero.

    Examples
    --------
    >>> from grainseg.image import PixelBuffer
    >>> buf = PixelBuffer.create(width=64, height=48, channels=1)
    >>> buf.shape
    (1, 48, 64)
    """

    def __init__(self, data: np.ndarray) -> None:
        data = np.ascontiguousarray(data, dtype=np.float64)
        if data.ndim == 2:
            data = data[np.newaxis]
        if data.ndim != 3:
            raise ValidationError(
                f"PixelBuffer requires a 2D or 3D array, got shape {data.shape}"
            )
        if min(data.shape) < 1:
            raise ValidationError(
                f"PixelBuffer dimensions must be >= 1, got shape {data.shape}"
            )
        self._data = data

    @classmethod
    def create(
        cls,
        width: int,
        height: int,
        channels: int = 1,
        fill: float = 0.0,
    ) -> 'PixelBuffer':
        """Allocate a buffer filled with a constant value."""
        if width < 1 or height < 1 or channels < 1:
            raise ValidationError(
                f"Buffer dimensions must be >= 1, got width={width}, "
                f"height={height}, channels={channels}"
            )
        return cls(np.full((channels, height, width), fill, dtype=np.float64))

    @property
    def data(self) -> np.ndarray:
        """The underlying ``(channels, rows, cols)`` array."""
        return self._data

    @property
    def width(self) -> int:
        return self._data.shape[2]

    @property
    def height(self) -> int:
        return self._data.shape[1]

    @property
    def channels(self) -> int:
        return self._data.shape[0]

    @property
    def shape(self) -> Tuple[int, int, int]:
        return self._data.shape

    def channel(self, index: int) -> np.ndarray:
        """Return a writable 2D view of one channel."""
        return self._data[index]

    def same_shape(self, other: 'PixelBuffer') -> bool:
        """Whether *other* has the same width, height, and channel count."""
        return self.shape == other.shape

    def shares_memory(self, other: 'PixelBuffer') -> bool:
        """Whether the two buffers overlap in memory."""
        return np.shares_memory(self._data, other._data)

    def copy(self) -> 'PixelBuffer':
        return PixelBuffer(self._data.copy())

    def empty_like(self) -> 'PixelBuffer':
        """Allocate a zero-filled buffer with the same shape."""
        return PixelBuffer(np.zeros_like(self._data))

    def __repr__(self) -> str:
        return (
            f"PixelBuffer(width={self.width}, height={self.height}, "
            f"channels={self.channels})"
        )


#: Number of 8-bit levels; length of every histogram.
HISTOGRAM_BINS = 256


def quantize(values: np.ndarray) -> np.ndarray:
    """Map [0, 1] samples to 8-bit integers.

    Parameters
    ----------
    values : np.ndarray
        Real-valued samples of any shape.

    Returns
    -------
    np.ndarray
        uint8 array, same shape, ``floor(clip(255 * v + 0.5, 0, 255))``.
    """
    scaled = np.clip(255.0 * np.asarray(values, dtype=np.float64) + 0.5,
                     0.0, 255.0)
    return np.floor(scaled).astype(np.uint8)


def build_histogram(
    buffer: PixelBuffer,
    channel: int = 0,
    normalized: bool = False,
) -> np.ndarray:
    """Build a 256-bin histogram of one quantized channel.

    Parameters
    ----------
    buffer : PixelBuffer
        Source buffer.
    channel : int
        Channel index. Default 0.
    normalized : bool
        If True, return probabilities summing to 1 instead of counts.

    Returns
    -------
    np.ndarray
        Shape ``(256,)``; int64 counts, or float64 probabilities when
        ``normalized`` is set.

    Raises
    ------
    ShapeMismatchError
        If ``channel`` is not a valid channel index.
    """
    if not 0 <= channel < buffer.channels:
        raise ShapeMismatchError(
            f"channel {channel} out of range for buffer with "
            f"{buffer.channels} channel(s)"
        )
    counts = np.bincount(quantize(buffer.channel(channel)).ravel(),
                         minlength=HISTOGRAM_BINS).astype(np.int64)
    if normalized:
        return counts / float(counts.sum())
    return counts


def as_buffer(source, name: str = 'source') -> PixelBuffer:
    """Wrap a NumPy array in a ``PixelBuffer``; pass buffers through."""
    if isinstance(source, PixelBuffer):
        return source
    if isinstance(source, np.ndarray):
        return PixelBuffer(source)
    raise TypeError(
        f"{name} must be a PixelBuffer or np.ndarray, "
        f"got {type(source).__name__}"
    )


def optional_buffer(source, name: str) -> Optional[PixelBuffer]:
    """Like ``as_buffer`` but lets ``None`` through."""
    if source is None:
        return None
    return as_buffer(source, name)
