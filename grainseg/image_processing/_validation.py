# -*- coding: utf-8 -*-
"""
Validation Helpers - Shared window, shape, and range precondition checks.

Provides reusable validation functions for grainseg processors. Filters,
morphology, thresholding, and labelers call these helpers so every
precondition failure raises the same exception type with a consistent
message, before any computation starts.

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

# grainseg internal
from grainseg.exceptions import (
    RangeError,
    ShapeMismatchError,
    ValidationError,
    WindowSizeError,
)


def validate_window(size: int, name: str = 'window') -> None:
    """Validate that a window dimension is an odd integer >= 1.

    Parameters
    ----------
    size : int
        The window dimension to validate.
    name : str
        Parameter name for error messages. Default ``'window'``.

    Raises
    ------
    WindowSizeError
        If ``size`` is not an integer, is less than 1, or is even.
    """
    if isinstance(size, bool) or not isinstance(size, int):
        raise WindowSizeError(
            f"{name} must be an integer, got {type(size).__name__}"
        )
    if size < 1:
        raise WindowSizeError(f"{name} must be >= 1, got {size}")
    if size % 2 == 0:
        raise WindowSizeError(f"{name} must be odd, got {size}")


def validate_same_shape(reference, other, name: str) -> None:
    """Validate that two buffers agree in width, height, and channels.

    Raises
    ------
    ShapeMismatchError
        If the shapes differ.
    """
    if not reference.same_shape(other):
        raise ShapeMismatchError(
            f"{name} shape {other.shape} does not match source shape "
            f"{reference.shape}"
        )


def validate_no_alias(source, other, name: str) -> None:
    """Validate that ``other`` does not overlap ``source`` in memory.

    Raises
    ------
    ValidationError
        If the two buffers share memory.
    """
    if source.shares_memory(other):
        raise ValidationError(
            f"{name} must not share memory with the buffer it is paired "
            f"with"
        )


def validate_single_channel(buffer, name: str = 'source') -> None:
    """Validate that a buffer has exactly one channel.

    Raises
    ------
    ShapeMismatchError
        If the buffer has more than one channel.
    """
    if buffer.channels != 1:
        raise ShapeMismatchError(
            f"{name} must have a single channel, got {buffer.channels}"
        )


def validate_range(min_value: float, max_value: float) -> None:
    """Validate an ordered ``[min_value, max_value]`` range.

    Raises
    ------
    RangeError
        If ``max_value <= min_value``.
    """
    if max_value <= min_value:
        raise RangeError(
            f"max_value ({max_value}) must be greater than "
            f"min_value ({min_value})"
        )
