# -*- coding: utf-8 -*-
"""
Grainseg Exception Hierarchy - Domain-specific exceptions for grainseg operations.

Provides a small exception hierarchy that lets callers catch grainseg
errors distinctly from Python built-in exceptions. All grainseg
exceptions subclass both ``GrainsegError`` and the appropriate built-in
exception, so existing ``except ValueError`` handlers keep working.

Precondition failures (mismatched buffer shapes, even window sizes,
inverted ranges) are all ``ValidationError`` subclasses and are raised
before any computation starts.

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


class GrainsegError(Exception):
    """Base exception for all grainseg errors."""


class ValidationError(GrainsegError, ValueError):
    """Invalid input data, parameters, or configuration.

    Raised for aliasing of input and output buffers, malformed
    histograms, unsupported method names, and other input validation
    failures.
    """


class ShapeMismatchError(ValidationError):
    """Buffers disagree in width, height, or channel count.

    Also raised when an operation that requires a single-channel buffer
    receives a multi-channel one.
    """


class WindowSizeError(ValidationError):
    """Invalid window or kernel dimension.

    Raised for even (or non-positive) window sizes where an odd size is
    required, and for coefficient vectors too long for the image axis.
    """


class RangeError(ValidationError):
    """Ordered range parameter with ``max <= min``."""


class ProcessorError(GrainsegError, RuntimeError):
    """Algorithm or processing failure during apply()/label().

    Raised when a processor encounters a non-recoverable error
    during execution (not an input validation issue).
    """
