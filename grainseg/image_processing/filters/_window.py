# -*- coding: utf-8 -*-
"""
Window Filter Base - Odd rectangular window shared by blur, rank and median filters.

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
from typing import Annotated, Any, Dict

# grainseg internal
from grainseg.image_processing.base import BandwiseTransformMixin, ImageTransform
from grainseg.image_processing.params import Desc, Range
from grainseg.image_processing._validation import validate_window


class WindowFilter(BandwiseTransformMixin, ImageTransform):
    """Per-channel transform over a ``height`` x ``width`` centred window.

    Both sides must be odd; the check runs at construction and again on
    every per-call override.
    """

    width: Annotated[int, Range(min=1, max=1001),
                     Desc('Window width in pixels (odd)')] = 3
    height: Annotated[int, Range(min=1, max=1001),
                      Desc('Window height in pixels (odd)')] = 3

    def __init__(self, width: int = 3, height: int = 3) -> None:
        validate_window(width, 'width')
        validate_window(height, 'height')
        self.width = width
        self.height = height

    def _check_params(self, params: Dict[str, Any]) -> None:
        validate_window(params['width'], 'width')
        validate_window(params['height'], 'height')
